"""Trace building for benchmark charts.

A trace is one plotted series: every observation of one logical
benchmark across the runs of a suite. Observations are grouped by the
composite key of their schema fields, so a benchmark identified by
``name``, ``os`` and ``keySize`` becomes one line per distinct
combination of those values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from html import escape
from typing import TYPE_CHECKING, Any

from benchboard.charts.units import NANOSECONDS, to_nanoseconds
from benchboard.core.keys import build_key, parse_key
from benchboard.core.types import MISSING

if TYPE_CHECKING:
    from benchboard.core.types import BenchResult, Commit, HistoryEntry


@dataclass(frozen=True)
class Observation:
    """A single benchmark result together with the run it came from.

    Attributes:
        commit: Commit of the run.
        date: Run time in epoch milliseconds.
        bench: The measured result.
    """

    commit: Commit
    date: int
    bench: BenchResult

    @property
    def timestamp(self) -> datetime:
        """Run time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.date / 1000, tz=timezone.utc)


@dataclass
class Trace:
    """One series of observations sharing a composite key.

    Attributes:
        key: Schema field to value, MISSING for absent fields.
        observations: Observations in history order.
        name: Legend name, set by :func:`decorate`.
        text: Tooltip text per observation, set by :func:`decorate`.
        y: Values in the chart's display unit, set by ``adjust_traces``.
        unit: Display unit label of ``y``.
    """

    key: dict[str, str]
    observations: list[Observation] = field(default_factory=list)
    name: str = ""
    text: list[str] = field(default_factory=list)
    y: list[float] = field(default_factory=list)
    unit: str = NANOSECONDS.label

    @property
    def x(self) -> list[datetime]:
        """Observation times."""
        return [o.timestamp for o in self.observations]

    @property
    def data_ns(self) -> list[float]:
        """Observation values converted to nanoseconds.

        Raises:
            UnitError: If an observation has an unknown unit.
        """
        return [to_nanoseconds(o.bench.value, o.bench.unit) for o in self.observations]

    def to_plotly(self) -> dict[str, Any]:
        """Return the trace as a plotting-library series.

        ``x`` holds epoch milliseconds; the dashboard converts them to
        local dates in the browser.
        """
        return {
            "x": [o.date for o in self.observations],
            "y": self.y,
            "name": self.name,
            "text": self.text,
            "showlegend": True,
            "hoverinfo": "text",
        }


def _format_value(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


def separate_traces(entries: list[HistoryEntry], schema: list[str]) -> list[Trace]:
    """Split the runs of a suite into one trace per schema key.

    Traces appear in order of first appearance of their key, and each
    trace keeps its observations in history order. History is assumed
    chronological; nothing is sorted.

    Args:
        entries: Runs of one suite.
        schema: Fields identifying a benchmark.

    Returns:
        List of undecorated traces.
    """
    grouped: dict[str, list[Observation]] = {}
    for entry in entries:
        for bench in entry.benches:
            observation = Observation(commit=entry.commit, date=entry.date, bench=bench)
            grouped.setdefault(build_key(bench, schema), []).append(observation)

    return [Trace(key=parse_key(key, schema), observations=observations) for key, observations in grouped.items()]


def legend_name(trace: Trace, group_by: list[str], schema: list[str]) -> str:
    """Build the legend name of a trace.

    Uses the schema fields that are neither grouped on nor ``unit``,
    in schema order, and leaves out fields the benchmark lacks.
    """
    values = [
        trace.key.get(field, MISSING)
        for field in schema
        if field not in group_by and field != "unit"
    ]
    return " ".join(value for value in values if value != MISSING)


def tooltip_text(name: str, observation: Observation) -> str:
    """Build the hover text of one observation.

    Shows the benchmark name, value, unit, range, and the commit id,
    message and url of the run.
    """
    bench = observation.bench
    commit = observation.commit
    range_text = "" if bench.range == MISSING else bench.range
    return (
        f"<b>{escape(name)}</b>"
        f"<br>value: {_format_value(bench.value)} {escape(bench.unit)} {escape(range_text)}"
        f"<br>commit id: {escape(commit.id)}"
        f"<br>commit name: {escape(commit.message)}"
        f"<br>commit url: {escape(commit.url)}"
    )


def decorate(trace: Trace, group_by: list[str], schema: list[str]) -> None:
    """Set the legend name and the per-point tooltips of a trace."""
    trace.name = legend_name(trace, group_by, schema)
    trace.text = [tooltip_text(trace.name, o) for o in trace.observations]
