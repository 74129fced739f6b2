"""Tests for settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from benchboard.core.config import DEFAULT_GROUP_BY, DEFAULT_PLOTLY_URL, DEFAULT_SCHEMA, Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings have sensible defaults."""
        monkeypatch.delenv("BENCHBOARD_MAX_ITEMS", raising=False)
        settings = Settings(_env_file=None)

        assert settings.default_schema == DEFAULT_SCHEMA
        assert settings.default_group_by == DEFAULT_GROUP_BY
        assert settings.log_level == "WARNING"
        assert settings.max_items is None
        assert settings.change_threshold == 2.0
        assert settings.plotly_cdn_url == DEFAULT_PLOTLY_URL

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings are read from BENCHBOARD_ variables."""
        monkeypatch.setenv("BENCHBOARD_MAX_ITEMS", "200")
        monkeypatch.setenv("BENCHBOARD_DEFAULT_GROUP_BY", '["os", "keySize"]')
        monkeypatch.setenv("BENCHBOARD_CHANGE_THRESHOLD", "5")

        settings = get_settings()

        assert settings.max_items == 200
        assert settings.default_group_by == ["os", "keySize"]
        assert settings.change_threshold == 5.0

    def test_invalid_max_items(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """At least one run must be kept."""
        monkeypatch.setenv("BENCHBOARD_MAX_ITEMS", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_log_level_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Lowercase level names are accepted."""
        monkeypatch.setenv("BENCHBOARD_LOG_LEVEL", "debug")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unknown level names are rejected."""
        monkeypatch.setenv("BENCHBOARD_LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_defaults_are_copies(self) -> None:
        """Mutating one instance never leaks into the module defaults."""
        settings = Settings(_env_file=None)
        settings.default_schema.append("extra")

        assert "extra" not in DEFAULT_SCHEMA
