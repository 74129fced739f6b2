"""Persisted benchmark history.

This module loads and saves the history document, either from a local
JSON file or from a URL, and appends new runs to a suite.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from benchboard.core.exceptions import HistoryLoadError
from benchboard.core.types import HistoryDocument

if TYPE_CHECKING:
    from benchboard.core.types import HistoryEntry

logger = logging.getLogger(__name__)


def parse_history(data: Any) -> HistoryDocument:
    """Validate a decoded history document.

    Args:
        data: Decoded JSON object.

    Returns:
        The history document.

    Raises:
        HistoryLoadError: If the document is not an object, has no
            ``entries`` or holds malformed runs.
    """
    if not isinstance(data, dict):
        raise HistoryLoadError(f"History document must be a JSON object, got {type(data).__name__}")
    if "entries" not in data:
        raise HistoryLoadError("History document has no 'entries' field")
    try:
        return HistoryDocument.model_validate(data)
    except ValidationError as e:
        raise HistoryLoadError(f"Invalid history document: {e}") from e


def parse_history_text(text: str) -> HistoryDocument:
    """Parse a history document from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise HistoryLoadError(f"History document is not valid JSON: {e}") from e
    return parse_history(data)


def load_history_url(
    url: str,
    timeout: float = 30.0,
    client: httpx.Client | None = None,
) -> HistoryDocument:
    """Fetch a history document over HTTP.

    Args:
        url: Location of the JSON document.
        timeout: Request timeout in seconds.
        client: Optional client to reuse (a new one is created otherwise).

    Raises:
        HistoryLoadError: If the request fails or the document is invalid.
    """
    try:
        if client is None:
            with httpx.Client(timeout=timeout) as owned:
                response = owned.get(url)
        else:
            response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise HistoryLoadError(f"Error retrieving data from {url}: {e}") from e

    logger.debug(f"Fetched {len(response.content)} bytes of history from {url}")
    return parse_history_text(response.text)


def append_entry(
    document: HistoryDocument,
    suite: str,
    entry: HistoryEntry,
    schema: list[str],
    group_by: list[str],
    max_items: int | None = None,
) -> HistoryEntry | None:
    """Append a run to a suite of the history.

    Records the suite's schema and GroupBy, updates ``last_update`` and
    drops the oldest runs beyond ``max_items``.

    Args:
        document: History to modify in place.
        suite: Suite name; created if absent.
        entry: The new run.
        schema: Schema of the suite.
        group_by: GroupBy fields of the suite.
        max_items: Maximum runs kept for the suite (None = unlimited).

    Returns:
        The most recent earlier run measured on a different commit,
        or None if there is none.
    """
    document.last_update = int(time.time() * 1000)
    document.group_by[suite] = list(group_by)
    document.schemas[suite] = list(schema)

    runs = document.entries.get(suite)
    if runs is None:
        document.entries[suite] = [entry]
        logger.debug(f"No suite was found for benchmark '{suite}' in existing data. Created")
        return None

    previous = next((run for run in reversed(runs) if run.commit.id != entry.commit.id), None)
    runs.append(entry)

    if max_items is not None and len(runs) > max_items:
        del runs[: len(runs) - max_items]
        logger.debug(f"Number of data items for '{suite}' was truncated to {max_items}")

    return previous


class HistoryStore:
    """JSON file storage for the benchmark history.

    Uses atomic writes (temp file + rename) for safety.

    Example:
        >>> store = HistoryStore("gh-pages/data.json", max_items=200)
        >>> document = store.load()
        >>> store.append("ML-KEM", entry, schema, group_by)
    """

    def __init__(
        self,
        path: str | Path,
        max_items: int | None = None,
    ) -> None:
        """Initialize the history store.

        Args:
            path: Path to the JSON file.
            max_items: Maximum runs kept per suite (None = unlimited).
        """
        self._path = Path(path)
        self._max_items = max_items

    @property
    def path(self) -> Path:
        """Location of the history file."""
        return self._path

    def load(self, missing_ok: bool = True) -> HistoryDocument:
        """Load the history.

        Args:
            missing_ok: Return an empty history if the file does not exist.

        Raises:
            HistoryLoadError: If the file is malformed, or missing while
                ``missing_ok`` is False.
        """
        if not self._path.exists():
            if not missing_ok:
                raise HistoryLoadError(f"History file not found: {self._path}")
            logger.info(f"No history at {self._path}, starting empty")
            return HistoryDocument(entries={})

        content = self._path.read_text(encoding="utf-8")
        if not content.strip():
            return HistoryDocument(entries={})
        return parse_history_text(content)

    def save(self, document: HistoryDocument) -> None:
        """Save the history with an atomic write.

        Args:
            document: History to write.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = document.to_json()

        temp_fd, temp_path = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=".history_",
            suffix=".tmp",
        )
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(temp_path).replace(self._path)
        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise

    def append(
        self,
        suite: str,
        entry: HistoryEntry,
        schema: list[str],
        group_by: list[str],
    ) -> HistoryDocument:
        """Load the history, append a run and save it.

        Returns:
            The updated history.
        """
        document = self.load()
        append_entry(document, suite, entry, schema, group_by, self._max_items)
        self.save(document)
        return document
