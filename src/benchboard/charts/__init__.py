"""Chart building for the benchmark dashboard.

This module turns a benchmark history into chart-ready payloads:
- Traces: one series per benchmark (schema key)
- Groups: one chart per GroupBy key
- Units: one readable duration unit per chart
- Filters: counter-based show/hide state of charts

Example:
    >>> from benchboard.charts import render_suite
    >>> view = render_suite(document, "ML-KEM")
    >>> state = view.filter_state()
    >>> state.toggle("os", "linux", checked=False)
"""

from __future__ import annotations

from benchboard.charts.filters import FilterState
from benchboard.charts.groups import Group, build_title, group_traces, unique_values
from benchboard.charts.render import (
    ChartPayload,
    SuiteView,
    build_layout,
    render_all,
    render_suite,
    retrieve_group_by,
    retrieve_schema,
)
from benchboard.charts.traces import Observation, Trace, decorate, legend_name, separate_traces, tooltip_text
from benchboard.charts.units import DisplayUnit, adjust_traces, choose_display_unit, normalize, to_nanoseconds

__all__ = [
    "ChartPayload",
    "DisplayUnit",
    "FilterState",
    "Group",
    "Observation",
    "SuiteView",
    "Trace",
    "adjust_traces",
    "build_layout",
    "build_title",
    "choose_display_unit",
    "decorate",
    "group_traces",
    "legend_name",
    "normalize",
    "render_all",
    "render_suite",
    "retrieve_group_by",
    "retrieve_schema",
    "separate_traces",
    "to_nanoseconds",
    "tooltip_text",
    "unique_values",
]
