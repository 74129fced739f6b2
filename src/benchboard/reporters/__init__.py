"""Reporters module for benchboard.

This module provides output formats for benchmark history:
- HTML: Interactive dashboard with charts and filters
- Markdown: Comparison and summary tables for pull requests
"""

from __future__ import annotations

from benchboard.reporters.html import DashboardReporter
from benchboard.reporters.markdown import (
    BenchComparison,
    ComparisonReport,
    SummaryReport,
    build_comparison,
    calculate_improvement,
    comparison_markdown,
    format_improvement,
)

__all__ = [
    "BenchComparison",
    "ComparisonReport",
    "DashboardReporter",
    "SummaryReport",
    "build_comparison",
    "calculate_improvement",
    "comparison_markdown",
    "format_improvement",
]
