"""Configuration settings."""

import logging
import os
from pathlib import Path

DEFAULT_STORAGE_KEY = "notecase:notes_v4"
DEFAULT_LOG_LEVEL = "WARNING"


def get_root_path() -> str:
    """Get the storage root (local path or fsspec URL) for the note blob."""
    return os.environ.get("NOTECASE_ROOT", str(Path.cwd()))


def get_storage_key() -> str:
    """Get the key under which the note collection is persisted.

    Falls back to ``DEFAULT_STORAGE_KEY`` when unset.
    """
    return os.environ.get("NOTECASE_STORAGE_KEY", DEFAULT_STORAGE_KEY)


def get_log_level() -> str:
    """Get the log level used by the CLI.

    Unknown level names fall back to ``WARNING``.
    """
    level = os.environ.get("NOTECASE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if level not in logging.getLevelNamesMapping():
        return DEFAULT_LOG_LEVEL
    return level


def get_log_format() -> str:
    """Get the CLI log format, ``json`` or ``text``."""
    return os.environ.get("NOTECASE_LOG_FORMAT", "json").lower()
