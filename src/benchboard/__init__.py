"""benchboard: Benchmark history tracking with dashboards and CI reports."""

from __future__ import annotations

from benchboard.charts import FilterState, SuiteView, render_all, render_suite
from benchboard.core.exceptions import BenchboardError, HistoryLoadError, UnitError
from benchboard.core.keys import build_key, parse_key
from benchboard.core.types import (
    MISSING,
    BenchResult,
    Commit,
    HistoryDocument,
    HistoryEntry,
)
from benchboard.history import HistoryStore
from benchboard.reporters import DashboardReporter, SummaryReport, comparison_markdown

__version__ = "0.4.0"
__all__ = [
    # Charts
    "FilterState",
    "SuiteView",
    "render_all",
    "render_suite",
    # Exceptions
    "BenchboardError",
    "HistoryLoadError",
    "UnitError",
    # Keys
    "build_key",
    "parse_key",
    # Types
    "MISSING",
    "BenchResult",
    "Commit",
    "HistoryDocument",
    "HistoryEntry",
    # History
    "HistoryStore",
    # Reporters
    "DashboardReporter",
    "SummaryReport",
    "comparison_markdown",
    # Version
    "__version__",
]
