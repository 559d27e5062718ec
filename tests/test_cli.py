"""Tests for the notecase CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from notecase.cli import app

runner = CliRunner()


def _invoke(root: Path, *args: str, **kwargs: object):  # noqa: ANN202
    return runner.invoke(app, ["--root", str(root), *args], **kwargs)


def _created_id(output: str) -> str:
    line = next(line for line in output.splitlines() if line.startswith("Created"))
    return line.rsplit(" ", 1)[-1]


def test_cli_add_and_list(tmp_path: Path) -> None:
    """Creating notes writes the blob and lists them newest first."""
    res = _invoke(tmp_path, "add", "Trip", "--text", "Pack bags")
    assert res.exit_code == 0, res.output
    _invoke(tmp_path, "add", "Groceries", "--item", "Milk", "--item", " ")

    result = _invoke(tmp_path, "list")

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0].endswith(": Groceries")
    assert "    [ ] Milk" in lines
    assert any(line.endswith(": Trip") for line in lines)
    assert "    Pack bags" in lines

    blob = json.loads((tmp_path / "notecase_notes_v4.json").read_text())
    assert [record["title"] for record in blob] == ["Groceries", "Trip"]
    assert [item["text"] for item in blob[0]["content"]] == ["Milk"]


def test_cli_rejects_empty_note(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "add", "", "--item", "  ")

    assert result.exit_code == 1
    assert "Nothing to save" in result.output
    assert not (tmp_path / "notecase_notes_v4.json").exists()


def test_cli_list_empty_states(tmp_path: Path) -> None:
    assert "Create your first note!" in _invoke(tmp_path, "list").stdout
    assert "no favorite notes" in _invoke(tmp_path, "list", "--favorites").stdout
    assert "No notes match" in _invoke(tmp_path, "list", "--search", "x").stdout


def test_cli_favorite_private_and_filters(tmp_path: Path) -> None:
    trip_id = _created_id(_invoke(tmp_path, "add", "Trip", "--text", "Rome").stdout)
    _invoke(tmp_path, "add", "Work", "--text", "Ship it")

    fav = _invoke(tmp_path, "favorite", trip_id)
    assert fav.exit_code == 0
    assert "added to favorites" in fav.stdout

    priv = _invoke(tmp_path, "private", trip_id)
    assert "now private" in priv.stdout

    favorites = _invoke(tmp_path, "list", "--favorites").stdout
    assert f"- {trip_id}: Trip [*, private]" in favorites
    assert "Work" not in favorites
    # Private notes show no body in listings
    assert "Rome" not in favorites

    search = _invoke(tmp_path, "list", "--search", "SHIP").stdout
    assert "Work" in search
    assert "Trip" not in search


def test_cli_edit_and_show(tmp_path: Path) -> None:
    note_id = _created_id(_invoke(tmp_path, "add", "Trip", "--text", "Rome").stdout)

    res = _invoke(
        tmp_path,
        "edit",
        note_id,
        "--title",
        "Packing",
        "--item",
        "Passport",
        "--private",
    )
    assert res.exit_code == 0, res.output

    shown = _invoke(tmp_path, "show", note_id)
    assert shown.exit_code == 0
    assert "Packing [private]" in shown.stdout
    assert "[ ] Passport" in shown.stdout
    assert "Last updated:" in shown.stdout


def test_cli_check_item(tmp_path: Path) -> None:
    note_id = _created_id(
        _invoke(tmp_path, "add", "Groceries", "--item", "Milk").stdout,
    )
    blob = json.loads((tmp_path / "notecase_notes_v4.json").read_text())
    item_id = blob[0]["content"][0]["id"]

    checked = _invoke(tmp_path, "check", note_id, item_id)
    assert checked.exit_code == 0
    assert "[x] Milk" in checked.stdout

    missing = _invoke(tmp_path, "check", note_id, "nope")
    assert missing.exit_code == 1
    assert "no checklist line" in missing.output


def test_cli_delete(tmp_path: Path) -> None:
    note_id = _created_id(_invoke(tmp_path, "add", "Trip").stdout)

    aborted = _invoke(tmp_path, "delete", note_id, input="n\n")
    assert aborted.exit_code == 1
    assert "Trip" in _invoke(tmp_path, "list").stdout

    deleted = _invoke(tmp_path, "delete", note_id, "--yes")
    assert deleted.exit_code == 0
    assert "Create your first note!" in _invoke(tmp_path, "list").stdout

    again = _invoke(tmp_path, "delete", note_id, "--yes")
    assert again.exit_code == 1
    assert "not found" in again.output


def test_cli_unknown_note(tmp_path: Path) -> None:
    for command in ("show", "favorite", "private"):
        result = _invoke(tmp_path, command, "missing")
        assert result.exit_code == 1
        assert "Note missing not found" in result.output


def test_cli_corrupt_storage_lists_nothing(tmp_path: Path) -> None:
    (tmp_path / "notecase_notes_v4.json").write_text("{broken")

    result = _invoke(tmp_path, "list")

    assert result.exit_code == 0
    assert "Create your first note!" in result.stdout


def test_cli_unknown_log_level_falls_back(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("NOTECASE_LOG_LEVEL", "verbose")

    result = _invoke(tmp_path, "list")

    assert result.exit_code == 0
    assert "Create your first note!" in result.stdout
