"""Core module for benchboard.

This module contains the data model, composite keys, configuration
and exceptions shared by every other module.
"""

from __future__ import annotations

from benchboard.core.config import DEFAULT_GROUP_BY, DEFAULT_SCHEMA, Settings, get_settings
from benchboard.core.exceptions import (
    BenchboardError,
    ConfigurationError,
    HistoryLoadError,
    UnitError,
)
from benchboard.core.keys import build_key, key_fields, parse_key
from benchboard.core.types import (
    MISSING,
    BenchResult,
    Commit,
    GitHubUser,
    HistoryDocument,
    HistoryEntry,
    RunMetadata,
)

__all__ = [
    # Configuration
    "DEFAULT_GROUP_BY",
    "DEFAULT_SCHEMA",
    "Settings",
    "get_settings",
    # Exceptions
    "BenchboardError",
    "ConfigurationError",
    "HistoryLoadError",
    "UnitError",
    # Keys
    "build_key",
    "key_fields",
    "parse_key",
    # Types
    "MISSING",
    "BenchResult",
    "Commit",
    "GitHubUser",
    "HistoryDocument",
    "HistoryEntry",
    "RunMetadata",
]
