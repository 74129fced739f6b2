"""Core type definitions for benchboard.

This module defines the data structures stored in a benchmark history
document: commits, benchmark runs and the individual results of a run.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# Reserved marker for a field a benchmark result does not carry.
MISSING = "-"


class GitHubUser(BaseModel):
    """Author or committer of a commit."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str | None = None
    username: str | None = None
    email: str | None = None


class Commit(BaseModel):
    """The commit a benchmark run was measured on.

    Attributes:
        id: Commit hash.
        message: Commit message.
        url: Link to the commit.
        timestamp: Commit timestamp as reported by CI.
        author: Commit author.
        committer: Commit committer.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(..., description="Commit hash")
    message: str = Field(default="", description="Commit message")
    url: str = Field(default="", description="Link to the commit")
    timestamp: str | None = Field(default=None, description="Commit timestamp")
    author: GitHubUser | None = None
    committer: GitHubUser | None = None


class BenchResult(BaseModel):
    """A single measured benchmark within a run.

    Besides the fixed attributes, a result carries any number of
    caller-defined classification fields (``os``, ``keySize``, ...).
    Which of them identify a benchmark is declared by the suite schema.

    Attributes:
        name: Benchmark name.
        value: Measured value.
        unit: Unit label, e.g. ``ns/iter``.
        range: Textual spread of the measurement, or MISSING.
        extra: Free-form extra information, or MISSING.

    Example:
        >>> result = BenchResult(name="keygen", value=1520.0, unit="ns/iter", os="linux")
        >>> result.get("os")
        'linux'
        >>> result.get("platform")
        '-'
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(..., description="Benchmark name")
    value: float = Field(..., description="Measured value")
    unit: str = Field(..., description="Unit label")
    range: str = Field(default=MISSING, description="Spread of the measurement")
    extra: str = Field(default=MISSING, description="Extra information")

    @field_validator("range", "extra", mode="before")
    @classmethod
    def _empty_to_missing(cls, value: Any) -> Any:
        if value is None or value == "":
            return MISSING
        return value

    def get(self, field: str) -> Any:
        """Return the value of a field, or MISSING if the result lacks it."""
        if field in type(self).model_fields:
            value = getattr(self, field)
        else:
            value = (self.model_extra or {}).get(field)
        return MISSING if value is None else value

    def fields(self) -> dict[str, Any]:
        """Return all fields, fixed and caller-defined, as a plain dict."""
        return self.model_dump()

    def with_schema(self, schema: list[str]) -> BenchResult:
        """Return a copy that carries every schema field, MISSING-filled."""
        data = self.fields()
        for field in schema:
            if data.get(field) is None:
                data[field] = MISSING
        return BenchResult.model_validate(data)


class HistoryEntry(BaseModel):
    """One benchmark run, immutable once recorded.

    Attributes:
        commit: Commit the run was measured on.
        date: Time of the run in epoch milliseconds.
        bigger_is_better: Whether larger values are better.
        benches: Results of the run, in reported order.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    commit: Commit
    date: int = Field(..., description="Run time in epoch milliseconds")
    bigger_is_better: bool = Field(default=False, description="Whether larger values are better")
    benches: list[BenchResult] = Field(default_factory=list)


class HistoryDocument(BaseModel):
    """The persisted benchmark history.

    Serialized with the camelCase keys ``lastUpdate``, ``repoUrl``,
    ``entries``, ``groupBy`` and ``schema``.

    Attributes:
        last_update: Time of the last append in epoch milliseconds.
        repo_url: Repository the history belongs to.
        entries: Suite name to ordered list of runs.
        group_by: Suite name to GroupBy field list.
        schemas: Suite name to Schema field list.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    last_update: int = Field(default=0, alias="lastUpdate")
    repo_url: str = Field(default="", alias="repoUrl")
    entries: dict[str, list[HistoryEntry]] = Field(...)
    group_by: dict[str, list[str]] = Field(default_factory=dict, alias="groupBy")
    schemas: dict[str, list[str]] = Field(default_factory=dict, alias="schema")

    @field_validator("group_by", "schemas", mode="before")
    @classmethod
    def _drop_invalid_declarations(cls, value: Any, info: ValidationInfo) -> dict[str, list[str]]:
        # Malformed declarations fall back to the defaults at render time.
        key = "groupBy" if info.field_name == "group_by" else "schema"
        if value is None:
            return {}
        if not isinstance(value, dict):
            logger.warning(f"Ignoring invalid '{key}' of type {type(value).__name__}")
            return {}

        declarations: dict[str, list[str]] = {}
        for suite, fields in value.items():
            if isinstance(fields, list) and all(isinstance(f, str) for f in fields):
                declarations[suite] = fields
            else:
                logger.warning(f"Ignoring invalid '{key}' of '{suite}': {fields!r}")
        return declarations

    @property
    def suites(self) -> list[str]:
        """Suite names in document order."""
        return list(self.entries)

    def to_json(self, indent: int | None = None) -> str:
        """Serialize using the persisted key names."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


class RunMetadata(BaseModel):
    """CI metadata describing the run being recorded or displayed.

    Read from the camelCase JSON written by the CI workflow
    (``commitHash``, ``commitMessage``, ``prUrl``, ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    committer: str = ""
    timestamp: str | None = None
    repo: str | None = None
    repo_owner: str | None = None
    pr_number: int | None = None
    pr_title: str | None = None
    pr_url: str | None = None
    pr_label: str | None = None
    commit_hash: str = ""
    commit_hash_short: str | None = None
    commit_message: str = ""
    commit_url: str = ""
    commit_timestamp: str | None = None
    commit_label: str | None = None

    def to_commit(self) -> Commit:
        """Build the Commit recorded with a run."""
        user = GitHubUser(name=self.committer, username=self.committer)
        return Commit(
            id=self.commit_hash,
            message=self.commit_message,
            url=self.commit_url,
            timestamp=self.commit_timestamp,
            author=user,
            committer=user,
        )
