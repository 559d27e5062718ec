"""Tests for helpers, configuration and logging."""

import json
import logging
from pathlib import Path

import pytest

from notecase.config import (
    DEFAULT_STORAGE_KEY,
    get_log_level,
    get_root_path,
    get_storage_key,
)
from notecase.logging_utils import JSONFormatter
from notecase.utils import fs_join, is_blank, validate_key


def test_validate_key_sanitizes() -> None:
    assert validate_key("notecase:notes_v4") == "notecase_notes_v4"
    assert validate_key("@AminaAura:notes_v4") == "_AminaAura_notes_v4"


def test_fs_join() -> None:
    assert fs_join("/root/", "a", "/b/") == "/root/a/b"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, True), ("", True), (" \n", True), ("x", False)],
)
def test_is_blank(value: str | None, expected: bool) -> None:  # noqa: FBT001
    assert is_blank(value) is expected


def test_config_from_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("NOTECASE_STORAGE_KEY", raising=False)
    assert get_storage_key() == DEFAULT_STORAGE_KEY

    monkeypatch.setenv("NOTECASE_ROOT", str(tmp_path))
    monkeypatch.setenv("NOTECASE_STORAGE_KEY", "notecase:notes_v5")
    assert get_root_path() == str(tmp_path)
    assert get_storage_key() == "notecase:notes_v5"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "WARNING"),
        ("debug", "DEBUG"),
        ("Error", "ERROR"),
        ("verbose", "WARNING"),
    ],
)
def test_log_level_from_environment(
    monkeypatch: pytest.MonkeyPatch,
    value: str | None,
    expected: str,
) -> None:
    if value is None:
        monkeypatch.delenv("NOTECASE_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("NOTECASE_LOG_LEVEL", value)
    assert get_log_level() == expected


def test_json_formatter() -> None:
    record = logging.LogRecord(
        name="notecase.store",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg="Failed to save %d notes",
        args=(3,),
        exc_info=None,
    )
    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "notecase.store"
    assert payload["message"] == "Failed to save 3 notes"
    assert "exception" not in payload
