"""Show/hide state of charts under checkbox filters.

Every (field, value) pair of a suite's GroupBy fields gets a checkbox.
Unchecking one hides every chart whose group key has that value.
Charts keep a count of the filters currently hiding them instead of a
flag, because one chart can match filters on several fields at once:
re-checking ``os: linux`` must not reveal a chart that ``keySize: 512``
still hides.

Example:
    >>> state = FilterState([{"os": "linux", "keySize": "512"}])
    >>> state.toggle("os", "linux", checked=False)
    [0]
    >>> state.toggle("keySize", "512", checked=False)
    []
    >>> state.toggle("os", "linux", checked=True)
    []
    >>> state.is_hidden(0)
    True
    >>> state.toggle("keySize", "512", checked=True)
    [0]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class FilterState:
    """Multiplicity-counted visibility of the charts of one suite.

    Attributes:
        group_keys: GroupBy key of each chart, by chart index.
        hidden_by: Number of unchecked filters matching each chart.
        unchecked: Filters currently unchecked.
    """

    group_keys: list[dict[str, str]]
    hidden_by: list[int] = field(init=False)
    unchecked: set[tuple[str, str]] = field(init=False, default_factory=set)

    def __post_init__(self) -> None:
        self.hidden_by = [0] * len(self.group_keys)

    def matching(self, field_name: str, value: str) -> list[int]:
        """Indices of the charts whose ``field_name`` equals ``value``."""
        return [i for i, key in enumerate(self.group_keys) if key.get(field_name) == value]

    def is_hidden(self, index: int) -> bool:
        """Whether chart ``index`` is hidden by at least one filter."""
        return self.hidden_by[index] > 0

    def visible(self) -> list[int]:
        """Indices of the charts currently shown."""
        return [i for i in range(len(self.group_keys)) if not self.is_hidden(i)]

    def toggle(self, field_name: str, value: str, checked: bool) -> list[int]:
        """Apply a checkbox change.

        Unchecking increments the counter of every matching chart,
        checking decrements it. Repeating the current state of a
        checkbox is ignored so counters cannot drift.

        Args:
            field_name: GroupBy field of the checkbox.
            value: Value of the checkbox.
            checked: New checkbox state.

        Returns:
            Indices of the charts whose visibility changed.
        """
        pair = (field_name, value)
        if checked == (pair not in self.unchecked):
            logger.debug(f"Filter {field_name}={value} already {'checked' if checked else 'unchecked'}")
            return []

        if checked:
            self.unchecked.discard(pair)
        else:
            self.unchecked.add(pair)

        changed = []
        for index in self.matching(field_name, value):
            was_hidden = self.is_hidden(index)
            if checked:
                self.hidden_by[index] = max(0, self.hidden_by[index] - 1)
            else:
                self.hidden_by[index] += 1
            if self.is_hidden(index) != was_hidden:
                changed.append(index)
        return changed
