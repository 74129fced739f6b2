"""Benchmark history for benchboard.

This module reads benchmark run inputs and maintains the persisted
history document they are appended to.

Example:
    >>> from benchboard.history import HistoryStore, load_metadata, load_results, new_entry
    >>> store = HistoryStore("data.json")
    >>> benches = load_results("results.json", schema)
    >>> entry = new_entry(load_metadata("metadata.json"), benches, bigger_is_better=False)
    >>> store.append("ML-KEM", entry, schema, group_by)
"""

from __future__ import annotations

from benchboard.history.ingest import (
    load_metadata,
    load_results,
    new_entry,
    parse_bool,
    parse_field_list,
    parse_group_by,
    parse_results,
    parse_schema,
    read_json,
)
from benchboard.history.store import (
    HistoryStore,
    append_entry,
    load_history_url,
    parse_history,
    parse_history_text,
)

__all__ = [
    "HistoryStore",
    "append_entry",
    "load_history_url",
    "load_metadata",
    "load_results",
    "new_entry",
    "parse_bool",
    "parse_field_list",
    "parse_group_by",
    "parse_history",
    "parse_history_text",
    "parse_results",
    "parse_schema",
    "read_json",
]
