"""Grouping of traces into charts.

Traces are partitioned by the values of the suite's GroupBy fields;
each partition becomes one chart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from benchboard.core.keys import build_key, parse_key
from benchboard.core.types import MISSING

if TYPE_CHECKING:
    from benchboard.charts.traces import Trace


@dataclass
class Group:
    """Traces sharing identical GroupBy values, rendered as one chart.

    Attributes:
        key: GroupBy field to value.
        traces: Member traces in order of first appearance.
    """

    key: dict[str, str]
    traces: list[Trace] = field(default_factory=list)

    def matches(self, field_name: str, value: str) -> bool:
        """Whether this group's ``field_name`` equals ``value``."""
        return self.key.get(field_name) == value


def group_traces(traces: list[Trace], group_by: list[str]) -> list[Group]:
    """Partition traces by their GroupBy sub-key.

    Args:
        traces: Traces of one suite.
        group_by: Fields splitting the suite into charts.

    Returns:
        Groups in order of first appearance. Every trace belongs to
        exactly one group.
    """
    grouped: dict[str, list[Trace]] = {}
    for trace in traces:
        grouped.setdefault(build_key(trace.key, group_by), []).append(trace)

    return [Group(key=parse_key(key, group_by), traces=members) for key, members in grouped.items()]


def unique_values(group_keys: list[dict[str, str]], group_by: list[str]) -> dict[str, list[str]]:
    """Distinct values of every GroupBy field, in order of first appearance."""
    values: dict[str, list[str]] = {}
    for field_name in group_by:
        seen = dict.fromkeys(key.get(field_name, MISSING) for key in group_keys)
        values[field_name] = list(seen)
    return values


def build_title(group_key: dict[str, str], group_by: list[str]) -> str:
    """Describe a group for its chart title.

    Example:
        >>> build_title({"os": "linux", "keySize": "512"}, ["os", "keySize"])
        'Results for run with the os linux and the keySize 512'
    """
    parts = []
    for field_name in group_by:
        value = group_key.get(field_name, MISSING)
        parts.append(f"undefined {field_name}" if value == MISSING else f"the {field_name} {value}")

    if not parts:
        return "Results"
    if len(parts) == 1:
        return f"Results for run with {parts[0]}"
    return f"Results for run with {', '.join(parts[:-1])} and {parts[-1]}"
