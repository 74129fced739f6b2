"""Reading benchmark run inputs.

This module parses the files a CI job hands to benchboard: the list of
benchmark results of one run and the run's commit metadata.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from benchboard.core.config import DEFAULT_GROUP_BY, DEFAULT_SCHEMA
from benchboard.core.exceptions import ConfigurationError, HistoryLoadError
from benchboard.core.types import BenchResult, HistoryEntry, RunMetadata


def parse_field_list(raw: str | None, default: list[str]) -> list[str]:
    """Parse a comma-separated field list.

    Args:
        raw: Comma-separated field names, e.g. ``"name,os,keySize"``.
        default: Fields returned when ``raw`` is missing or empty.

    Returns:
        Field names in the given order.

    Example:
        >>> parse_field_list("os, keySize", ["os"])
        ['os', 'keySize']
        >>> parse_field_list("", ["os"])
        ['os']
    """
    if raw is None:
        return list(default)
    fields = [f.strip() for f in raw.split(",") if f.strip()]
    return fields or list(default)


def parse_schema(raw: str | None) -> list[str]:
    """Parse a schema, falling back to the default schema."""
    return parse_field_list(raw, DEFAULT_SCHEMA)


def parse_group_by(raw: str | None) -> list[str]:
    """Parse GroupBy fields, falling back to grouping by ``os``."""
    return parse_field_list(raw, DEFAULT_GROUP_BY)


def parse_bool(raw: str) -> bool:
    """Parse a ``"true"``/``"false"`` flag.

    Raises:
        ConfigurationError: For any other value.
    """
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ConfigurationError(f'bigger-is-better must be "true" or "false", got {raw!r}')


def read_json(path: str | Path) -> Any:
    """Read and decode a JSON file.

    Raises:
        HistoryLoadError: If the file is missing or not valid JSON.
    """
    path = Path(path)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise HistoryLoadError(f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise HistoryLoadError(f"Invalid JSON in {path}: {e}") from e


def parse_results(data: Any, schema: list[str]) -> list[BenchResult]:
    """Validate raw benchmark results and fill absent schema fields.

    Args:
        data: Decoded JSON list of result objects.
        schema: Fields every result must carry (MISSING-filled).

    Raises:
        HistoryLoadError: If the data is not a list of valid results.
    """
    if not isinstance(data, list):
        raise HistoryLoadError(f"Benchmark results must be a JSON list, got {type(data).__name__}")
    try:
        return [BenchResult.model_validate(item).with_schema(schema) for item in data]
    except ValidationError as e:
        raise HistoryLoadError(f"Invalid benchmark result: {e}") from e


def load_results(path: str | Path, schema: list[str]) -> list[BenchResult]:
    """Load the benchmark results of one run from a JSON file."""
    return parse_results(read_json(path), schema)


def load_metadata(path: str | Path) -> RunMetadata:
    """Load CI run metadata from a JSON file.

    Raises:
        HistoryLoadError: If the file is unreadable or malformed.
    """
    try:
        return RunMetadata.model_validate(read_json(path))
    except ValidationError as e:
        raise HistoryLoadError(f"Invalid run metadata in {path}: {e}") from e


def new_entry(
    metadata: RunMetadata,
    benches: list[BenchResult],
    bigger_is_better: bool,
    date: int | None = None,
) -> HistoryEntry:
    """Build the history entry of a run.

    Args:
        metadata: CI metadata of the run.
        benches: Results of the run.
        bigger_is_better: Whether larger values are better.
        date: Run time in epoch milliseconds (default: now).
    """
    return HistoryEntry(
        commit=metadata.to_commit(),
        date=date if date is not None else int(time.time() * 1000),
        bigger_is_better=bigger_is_better,
        benches=benches,
    )
