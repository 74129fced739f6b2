"""Chart payloads for the benchmark dashboard.

This module runs the full chart pipeline for a suite: split its runs
into traces, group the traces into charts, normalize units per chart,
and produce payloads the plotting library can draw directly.

Example:
    >>> view = render_suite(document, "ML-KEM")
    >>> [chart.title for chart in view.charts]
    ['Results for run with the os linux', 'Results for run with the os macos']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from benchboard.charts.filters import FilterState
from benchboard.charts.groups import build_title, group_traces, unique_values
from benchboard.charts.traces import decorate, separate_traces
from benchboard.charts.units import adjust_traces
from benchboard.core.config import DEFAULT_GROUP_BY, DEFAULT_SCHEMA
from benchboard.core.exceptions import UnitError

if TYPE_CHECKING:
    from benchboard.core.types import HistoryDocument

logger = logging.getLogger(__name__)

CHART_HEIGHT = 600
CHART_WIDTH = 1200


@dataclass
class ChartPayload:
    """Everything needed to draw one chart.

    Attributes:
        title: Chart title.
        key: GroupBy key of the chart, used by the filters.
        traces: Plotting-library series.
        layout: Plotting-library layout.
        unit: Display unit of the y axis.
    """

    title: str
    key: dict[str, str]
    traces: list[dict[str, Any]]
    layout: dict[str, Any]
    unit: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "title": self.title,
            "key": self.key,
            "traces": self.traces,
            "layout": self.layout,
            "unit": self.unit,
        }


@dataclass
class SuiteView:
    """Rendered charts and filters of one suite.

    Attributes:
        name: Suite name.
        schema: Schema used to identify benchmarks.
        group_by: Fields the charts are split by.
        filters: Distinct values of every GroupBy field over the charts.
        charts: One payload per group.
        errors: Charts that could not be rendered, with the reason.
    """

    name: str
    schema: list[str]
    group_by: list[str]
    filters: dict[str, list[str]] = field(default_factory=dict)
    charts: list[ChartPayload] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def title(self) -> str:
        """Heading of the suite section."""
        return f"{self.name} by {','.join(self.group_by)}"

    def filter_state(self) -> FilterState:
        """Fresh filter state over this suite's charts, all visible."""
        return FilterState([chart.key for chart in self.charts])

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "title": self.title,
            "schema": self.schema,
            "groupBy": self.group_by,
            "filters": self.filters,
            "charts": [chart.to_dict() for chart in self.charts],
            "errors": self.errors,
        }


def retrieve_schema(document: HistoryDocument, suite: str, default: list[str] | None = None) -> list[str]:
    """Return the schema of a suite, or the default if it has none."""
    fallback = list(default or DEFAULT_SCHEMA)
    schema = document.schemas.get(suite)
    if not schema:
        logger.warning(f"No or invalid schema provided for '{suite}': defaulting to {fallback}")
        return fallback
    return schema


def retrieve_group_by(document: HistoryDocument, suite: str, default: list[str] | None = None) -> list[str]:
    """Return the GroupBy fields of a suite, or the default if it has none."""
    fallback = list(default if default is not None else DEFAULT_GROUP_BY)
    group_by = document.group_by.get(suite)
    if group_by is None:
        logger.warning(f"No or invalid groupBy provided for '{suite}': defaulting to {fallback}")
        return fallback
    return group_by


def build_layout(title: str, unit: str) -> dict[str, Any]:
    """Build the plotting-library layout of a chart.

    The dashboard script appends the viewer's time zone to the x axis title.
    """
    return {
        "height": CHART_HEIGHT,
        "width": CHART_WIDTH,
        "title": {"text": title},
        "xaxis": {"title": {"text": "Time of benchmark run"}, "type": "date"},
        "yaxis": {"title": {"text": f"Value ({unit})"}},
    }


def render_suite(
    document: HistoryDocument,
    suite: str,
    default_schema: list[str] | None = None,
    default_group_by: list[str] | None = None,
) -> SuiteView:
    """Build the charts of one suite.

    A chart whose values carry an unknown unit is skipped and reported
    in ``errors``; the other charts of the suite are still rendered and
    the filters only offer values of rendered charts.

    Args:
        document: The benchmark history.
        suite: Name of the suite to render.
        default_schema: Schema used when the suite declares none.
        default_group_by: GroupBy used when the suite declares none.

    Returns:
        The rendered suite.

    Raises:
        ValueError: If the suite is not in the history.
    """
    entries = document.entries.get(suite)
    if entries is None:
        raise ValueError(f"Suite not found: {suite}")

    schema = retrieve_schema(document, suite, default_schema)
    group_by = retrieve_group_by(document, suite, default_group_by)
    uncovered = [f for f in group_by if f not in schema]
    if uncovered:
        logger.warning(f"groupBy fields {uncovered} of '{suite}' are not in its schema {schema}")

    traces = separate_traces(entries, schema)
    groups = group_traces(traces, group_by)
    view = SuiteView(name=suite, schema=schema, group_by=group_by)

    for group in groups:
        title = build_title(group.key, group_by)
        for trace in group.traces:
            decorate(trace, group_by, schema)

        try:
            unit = adjust_traces(group.traces)
        except UnitError as e:
            logger.error(f"Cannot render '{title}' of '{suite}': {e}")
            view.errors.append(f"{title}: {e}")
            continue

        view.charts.append(
            ChartPayload(
                title=title,
                key=group.key,
                traces=[trace.to_plotly() for trace in group.traces],
                layout=build_layout(title, unit.label),
                unit=unit.label,
            )
        )

    view.filters = unique_values([chart.key for chart in view.charts], group_by)
    logger.debug(f"Rendered {len(view.charts)} charts for '{suite}' from {len(traces)} traces")
    return view


def render_all(
    document: HistoryDocument,
    default_schema: list[str] | None = None,
    default_group_by: list[str] | None = None,
) -> list[SuiteView]:
    """Build the charts of every suite, in document order."""
    return [render_suite(document, suite, default_schema, default_group_by) for suite in document.suites]
