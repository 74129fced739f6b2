"""CLI module for benchboard.

This module provides the command-line interface using Typer.
"""

from __future__ import annotations

from benchboard.cli.main import app

__all__ = ["app"]
