"""Duration unit normalization.

Benchmark results report durations in whatever unit the harness chose.
Before plotting, every value of a chart is converted to nanoseconds and
then scaled by a single display unit picked from the largest value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from benchboard.core.exceptions import UnitError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from benchboard.charts.traces import Trace

# Factor to nanoseconds, keyed by the first character of the unit symbol.
_NANOSECONDS_PER_UNIT: dict[str, float] = {
    "n": 1.0,
    "u": 1e3,
    "µ": 1e3,  # micro sign
    "μ": 1e3,  # greek mu
    "m": 1e6,
    "s": 1e9,
}


@dataclass(frozen=True)
class DisplayUnit:
    """Unit a whole chart is displayed in.

    Attributes:
        label: Axis label, e.g. ``ms/iter``.
        divisor: Nanoseconds per display unit.
    """

    label: str
    divisor: float


SECONDS = DisplayUnit("s/iter", 1e9)
MILLISECONDS = DisplayUnit("ms/iter", 1e6)
MICROSECONDS = DisplayUnit("μs/iter", 1e3)
NANOSECONDS = DisplayUnit("ns/iter", 1.0)


def to_nanoseconds(value: float, unit: str) -> float:
    """Convert a duration to nanoseconds.

    Args:
        value: The measured value.
        unit: Unit symbol; only its first character is significant.

    Returns:
        The value in nanoseconds.

    Raises:
        UnitError: If the unit prefix is not a known duration unit.
    """
    if not unit:
        raise UnitError("undefined unit: empty unit symbol")
    factor = _NANOSECONDS_PER_UNIT.get(unit[0])
    if factor is None:
        raise UnitError(f"undefined unit: {unit[0]!r} in {unit!r}")
    return value * factor


def choose_display_unit(max_ns: float) -> DisplayUnit:
    """Pick the display unit that keeps the largest value readable."""
    if max_ns > 1e9:
        return SECONDS
    if max_ns > 1e6:
        return MILLISECONDS
    if max_ns > 1e3:
        return MICROSECONDS
    return NANOSECONDS


def normalize(values_ns: Iterable[float]) -> tuple[DisplayUnit, list[float]]:
    """Scale nanosecond values by one shared display unit.

    Example:
        >>> unit, scaled = normalize([1.2e9, 500])
        >>> unit.label, scaled
        ('s/iter', [1.2, 5e-07])
    """
    values = list(values_ns)
    unit = choose_display_unit(max(values, default=0.0))
    return unit, [v / unit.divisor for v in values]


def adjust_traces(traces: list[Trace]) -> DisplayUnit:
    """Set ``y`` of every trace of one chart in a shared display unit.

    Args:
        traces: Traces plotted together; their ``data_ns`` is read.

    Returns:
        The display unit chosen for the chart.
    """
    max_ns = max((max(t.data_ns) for t in traces if t.data_ns), default=0.0)
    unit = choose_display_unit(max_ns)
    for trace in traces:
        trace.y = [v / unit.divisor for v in trace.data_ns]
        trace.unit = unit.label
    return unit
