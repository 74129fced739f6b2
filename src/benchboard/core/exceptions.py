"""Custom exceptions for benchboard.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from BenchboardError for easy catching.
"""

from __future__ import annotations


class BenchboardError(Exception):
    """Base exception for all benchboard errors.

    All custom exceptions in benchboard inherit from this class,
    making it easy to catch all library-specific errors.

    Example:
        >>> try:
        ...     # benchboard operations
        ...     pass
        ... except BenchboardError as e:
        ...     print(f"benchboard error: {e}")
    """


class UnitError(BenchboardError):
    """Raised when a benchmark value carries an unknown unit.

    Only duration units are understood (ns, us/µs/μs, ms, s). Any other
    prefix is reported instead of guessing a scale factor.

    Example:
        >>> raise UnitError("undefined unit: 'x' in 'xb/iter'")
    """


class HistoryLoadError(BenchboardError):
    """Raised when a history document cannot be loaded.

    This covers unreadable files, invalid JSON, documents without
    an ``entries`` table and failed network fetches.

    Example:
        >>> raise HistoryLoadError("History document has no 'entries' field")
    """


class ConfigurationError(BenchboardError):
    """Raised when configuration is invalid or missing.

    Example:
        >>> raise ConfigurationError("bigger-is-better must be 'true' or 'false'")
    """
