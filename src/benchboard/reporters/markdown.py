"""Markdown reports for CI.

This module renders benchmark results as Markdown tables suitable for
pull-request comments:
- Comparison: the two most recent commits of a suite side by side
- Summary: the results of a single run, grouped into tables
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from benchboard.core.keys import build_key, key_fields
from benchboard.core.types import MISSING

if TYPE_CHECKING:
    from benchboard.core.types import BenchResult, HistoryDocument, HistoryEntry

logger = logging.getLogger(__name__)

# Result fields that are measurements rather than identity
MEASUREMENT_FIELDS = ("value", "range", "unit")

ComparisonStatus = Literal["changed", "new", "removed"]


def _cell(value: Any) -> str:
    """Format a table cell, showing N/A for absent values."""
    if value is None or value == MISSING:
        return "N/A"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_number(value: float) -> str:
    """Format a number with thousands separators and up to 3 decimals."""
    text = f"{value:,.3f}"
    return text.rstrip("0").rstrip(".")


def _name_first(columns: list[str]) -> list[str]:
    return ["name", *[c for c in columns if c != "name"]] if "name" in columns else list(columns)


def _group_header(bench: BenchResult, group_by: list[str]) -> str:
    values = key_fields(bench, group_by)
    return "### " + ", ".join(f"**{k}**: `{_cell(values[k])}`" for k in group_by)


def calculate_improvement(old_value: float, new_value: float, bigger_is_better: bool) -> float:
    """Percentage change from ``old_value`` to ``new_value``.

    A positive result always indicates an improvement.

    Example:
        >>> calculate_improvement(100.0, 90.0, bigger_is_better=False)
        10.0
    """
    if old_value == 0:
        return math.inf if new_value > 0 else 0.0
    change = ((new_value - old_value) / old_value) * 100
    # "or" folds -0.0 into 0.0
    return (change if bigger_is_better else -change) or 0.0


def format_improvement(improvement: float, threshold: float = 2.0) -> str:
    """Format an improvement with sign, two decimals and a status emoji.

    Changes within ``threshold`` percent are marked neutral.
    """
    if not math.isfinite(improvement):
        return "N/A"
    sign = "+" if improvement > 0 else ""
    if improvement > threshold:
        emoji = "✅"
    elif improvement < -threshold:
        emoji = "❌"
    else:
        emoji = "➖"
    return f"**{sign}{improvement:.2f}%** {emoji}"


@dataclass
class BenchComparison:
    """A benchmark compared between baseline and current run.

    Attributes:
        bench: Current result, or the baseline result if removed.
        baseline_value: Value in the baseline run, if present.
        current_value: Value in the current run, if present.
        status: Whether the benchmark changed, is new or was removed.
    """

    bench: BenchResult
    baseline_value: float | None
    current_value: float | None
    status: ComparisonStatus


@dataclass
class ComparisonReport:
    """Comparison of the two most recent commits of a suite.

    Attributes:
        suite: Suite name.
        baseline: All results of the baseline commit.
        current: All results of the current commit.
        results: Per-benchmark comparisons.
        schema: Schema of the suite.
        group_by: Fields the tables are split by.
        change_threshold: Percent change treated as noise.
    """

    suite: str
    baseline: HistoryEntry
    current: HistoryEntry
    results: list[BenchComparison]
    schema: list[str]
    group_by: list[str]
    change_threshold: float = 2.0

    @property
    def columns(self) -> list[str]:
        """Identity columns, ``name`` first."""
        return _name_first(self.schema)

    def grouped(self) -> dict[str, list[BenchComparison]]:
        """Results by GroupBy key, in order of first appearance."""
        groups: dict[str, list[BenchComparison]] = {}
        for result in self.results:
            key = build_key(result.bench, self.group_by) if self.group_by else "all"
            groups.setdefault(key, []).append(result)
        return groups

    def change_text(self, result: BenchComparison) -> str:
        """Text of the Change column for one benchmark."""
        if result.status == "new":
            return "**New** ✨"
        if result.status == "removed":
            return "**Removed** 🗑️"
        if result.baseline_value and result.current_value:
            improvement = calculate_improvement(
                result.baseline_value,
                result.current_value,
                self.current.bigger_is_better,
            )
            return format_improvement(improvement, self.change_threshold)
        return "N/A"

    def _row(self, result: BenchComparison) -> str:
        unit = result.bench.unit.split("/")[0] if result.bench.unit else ""
        cells = [f"`{_cell(result.bench.get(column))}`" for column in self.columns]
        for value in (result.baseline_value, result.current_value):
            cells.append(f"{_format_number(value)} {unit}".rstrip() if value else "N/A")
        cells.append(self.change_text(result))
        return f"| {' | '.join(cells)} |"

    def to_markdown(self) -> str:
        """Generate the Markdown report.

        Returns:
            One table per group, preceded by a header naming the commits.
        """
        header = [*self.columns, "Baseline", "Current", "Change"]
        lines = [
            f"## Benchmark comparison for {self.suite}",
            "",
            f"**Baseline:** {_commit_link(self.baseline)}",
            f"**Current:** {_commit_link(self.current)}",
            "",
        ]

        for results in self.grouped().values():
            if self.group_by:
                lines.extend([_group_header(results[0].bench, self.group_by), ""])
            lines.append(f"| {' | '.join(header)} |")
            lines.append(f"|{'|'.join('---' for _ in header)}|")
            lines.extend(self._row(result) for result in results)
            lines.append("")

        return "\n".join(lines)


def _commit_link(entry: HistoryEntry) -> str:
    short = entry.commit.id[:7]
    return f"[`{short}`]({entry.commit.url})" if entry.commit.url else f"`{short}`"


def no_comparison_notice(suite: str, reason: str) -> str:
    """Markdown notice for a suite that cannot be compared."""
    return f"## ⚠️ No Comparison Available for {suite}\n\nNot enough data to compare. {reason}"


def find_comparison_commits(history: list[HistoryEntry]) -> tuple[str | None, str | None]:
    """Find the two most recent distinct commit ids.

    Returns:
        Tuple of (current_commit_id, baseline_commit_id); either is
        None if the history does not contain it.
    """
    current_id: str | None = None
    for entry in reversed(history):
        if current_id is None:
            current_id = entry.commit.id
        elif entry.commit.id != current_id:
            return current_id, entry.commit.id
    return current_id, None


def aggregate_commit(history: list[HistoryEntry], commit_id: str) -> HistoryEntry:
    """Merge every run of a commit into one entry.

    The first run of the commit provides commit data, date and
    direction; benches of all its runs are concatenated in order.
    """
    runs = [entry for entry in history if entry.commit.id == commit_id]
    benches = [bench for run in runs for bench in run.benches]
    return runs[0].model_copy(update={"benches": benches})


def compare_benches(
    baseline: HistoryEntry,
    current: HistoryEntry,
    schema: list[str],
) -> list[BenchComparison]:
    """Match benchmarks of two runs by their identity fields.

    Args:
        baseline: Aggregated baseline run.
        current: Aggregated current run.
        schema: Schema of the suite; measurement fields are ignored.

    Returns:
        Comparisons with baseline benchmarks first, then new ones.
    """
    key_columns = [f for f in schema if f not in MEASUREMENT_FIELDS]
    baseline_map = {build_key(b, key_columns): b for b in baseline.benches}
    current_map = {build_key(b, key_columns): b for b in current.benches}

    results = []
    for key in dict.fromkeys([*baseline_map, *current_map]):
        baseline_bench = baseline_map.get(key)
        current_bench = current_map.get(key)
        if current_bench is not None:
            status: ComparisonStatus = "changed" if baseline_bench is not None else "new"
            bench = current_bench
        else:
            status = "removed"
            bench = baseline_bench  # type: ignore[assignment]
        results.append(
            BenchComparison(
                bench=bench,
                baseline_value=baseline_bench.value if baseline_bench is not None else None,
                current_value=current_bench.value if current_bench is not None else None,
                status=status,
            )
        )
    return results


def build_comparison(
    document: HistoryDocument,
    suite: str,
    schema: list[str],
    group_by: list[str],
    change_threshold: float = 2.0,
) -> ComparisonReport | str:
    """Compare the two most recent commits of a suite.

    Args:
        document: The benchmark history.
        suite: Suite to compare.
        schema: Schema of the suite.
        group_by: Fields to split tables by.
        change_threshold: Percent change treated as noise.

    Returns:
        The comparison report, or a Markdown notice explaining why no
        comparison is possible.
    """
    history = document.entries.get(suite) or []
    if len(history) < 2:
        logger.info(f"Suite '{suite}' has {len(history)} runs, nothing to compare")
        return no_comparison_notice(suite, "At least two benchmark runs are required.")

    current_id, baseline_id = find_comparison_commits(history)
    if current_id is None or baseline_id is None:
        logger.info(f"Suite '{suite}' has runs of a single commit only")
        return no_comparison_notice(suite, "At least two different commits with benchmark data are required.")

    baseline = aggregate_commit(history, baseline_id)
    current = aggregate_commit(history, current_id)
    return ComparisonReport(
        suite=suite,
        baseline=baseline,
        current=current,
        results=compare_benches(baseline, current, schema),
        schema=schema,
        group_by=group_by,
        change_threshold=change_threshold,
    )


def comparison_markdown(
    document: HistoryDocument,
    suite: str,
    schema: list[str],
    group_by: list[str],
    change_threshold: float = 2.0,
) -> str:
    """Render the comparison of a suite, or the notice if there is none."""
    report = build_comparison(document, suite, schema, group_by, change_threshold)
    return report if isinstance(report, str) else report.to_markdown()


@dataclass
class SummaryReport:
    """Grouped tables of the results of a single run.

    Attributes:
        results: Results of the run.
        schema: Identity fields; value, range and unit are appended.
        group_by: Fields the tables are split by.
    """

    results: list[BenchResult]
    schema: list[str]
    group_by: list[str] = field(default_factory=list)

    @property
    def columns(self) -> list[str]:
        """Table columns: ``name``, the schema, then the measurement."""
        columns = [*self.schema, *[f for f in MEASUREMENT_FIELDS if f not in self.schema]]
        return ["name", *[c for c in columns if c != "name"]]

    def grouped(self) -> dict[str, list[BenchResult]]:
        """Results by GroupBy key, in order of first appearance."""
        groups: dict[str, list[BenchResult]] = {}
        for result in self.results:
            groups.setdefault(build_key(result, self.group_by), []).append(result)
        return groups

    def to_markdown(self) -> str:
        """Generate the Markdown report, one table per group."""
        columns = self.columns
        parts: list[str] = []
        for rows in self.grouped().values():
            if self.group_by:
                parts.append(_group_header(rows[0], self.group_by))
            parts.append(f"| {' | '.join(columns)} |")
            parts.append(f"| {' | '.join('---' for _ in columns)} |")
            for row in rows:
                parts.append(f"| {' | '.join(_cell(row.get(c)) for c in columns)} |")
            parts.append("\n---")
        return "\n".join(parts)
