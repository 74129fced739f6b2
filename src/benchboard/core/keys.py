"""Composite keys for benchmark results.

A composite key identifies a benchmark (or a chart) by the values of an
ordered list of fields. Keys are JSON-encoded objects so that distinct
value combinations never collide and a key can be parsed back into its
field values.

Example:
    >>> key = build_key({"name": "keygen", "os": "linux"}, ["name", "os", "keySize"])
    >>> key
    '{"name": "keygen", "os": "linux", "keySize": "-"}'
    >>> parse_key(key, ["name", "os", "keySize"])
    {'name': 'keygen', 'os': 'linux', 'keySize': '-'}
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from benchboard.core.types import MISSING, BenchResult


def _field_value(record: BenchResult | Mapping[str, Any], field: str) -> str:
    if isinstance(record, BenchResult):
        value = record.get(field)
    else:
        value = record.get(field, MISSING)
    if value is None:
        return MISSING
    if isinstance(value, str):
        return value
    # 512 and 512.0 name the same benchmark
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value, sort_keys=True)


def key_fields(record: BenchResult | Mapping[str, Any], fields: list[str]) -> dict[str, str]:
    """Return the stringified values of ``fields``, MISSING-filled, in field order."""
    return {field: _field_value(record, field) for field in fields}


def build_key(record: BenchResult | Mapping[str, Any], fields: list[str]) -> str:
    """Build the canonical key of a record for the given fields.

    Two records yield the same key iff they agree on every field,
    where absent fields compare equal to MISSING.

    Args:
        record: A benchmark result or any mapping of field values.
        fields: Ordered field names; the key follows this order.

    Returns:
        JSON-encoded object of field to stringified value.
    """
    return json.dumps(key_fields(record, fields), ensure_ascii=False)


def parse_key(key: str, fields: list[str]) -> dict[str, str]:
    """Parse a key built by :func:`build_key`.

    Fields listed in ``fields`` but absent from the key are filled
    with MISSING.

    Args:
        key: The key string.
        fields: Ordered field names.

    Returns:
        Mapping of field to value, in field order, followed by any
        additional fields the key carried.

    Raises:
        ValueError: If the key is not a JSON object.
    """
    decoded = json.loads(key)
    if not isinstance(decoded, dict):
        raise ValueError(f"Not a composite key: {key!r}")
    parsed = {field: decoded.get(field, MISSING) for field in fields}
    for field, value in decoded.items():
        parsed.setdefault(field, value)
    return parsed
