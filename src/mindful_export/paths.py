"""Helpers for locating default input and output files."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs

from .config import DEFAULT_OUTPUT_NAME


APP_NAME = "MindfulExport"
APP_AUTHOR = "MindfulExport"


def _dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR)


def get_documents_dir() -> Path:
    """Return the user's documents folder, where exports land by default."""
    return Path(_dirs().user_documents_path)


def get_default_output_path(name: str = DEFAULT_OUTPUT_NAME) -> Path:
    return get_documents_dir() / name
