"""CLI entry point using Typer."""

from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Annotated, Any, TypeVar

import typer

from notecase.config import (
    get_log_format,
    get_log_level,
    get_root_path,
    get_storage_key,
)
from notecase.editor import NoteDraft
from notecase.logging_utils import setup_logging
from notecase.models import ChecklistContent, Note, NoteType
from notecase.query import display_title, empty_state_message, preview
from notecase.storage import FsspecBlobStore, StorageError
from notecase.store import MutationResult, MutationStatus, NoteStore
from notecase.utils import run_async

app = typer.Typer(help="notecase - personal text and checklist notes")

R = TypeVar("R")

DELETE_PROMPT = "Are you sure you want to permanently delete this note?"


class CommandFailedError(Exception):
    """Raised when a command could not apply its change."""


def handle_cli_errors(func: Callable[..., R]) -> Callable[..., R]:
    """Handle common CLI errors."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> R:  # noqa: ANN401
        try:
            return func(*args, **kwargs)
        except (CommandFailedError, StorageError, ValueError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from e

    return wrapper


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Annotated[
        str | None,
        typer.Option(help="Storage root (path or fsspec URL). Env: NOTECASE_ROOT"),
    ] = None,
) -> None:
    """Configure logging and the storage root for all commands."""
    setup_logging(get_log_level(), get_log_format())
    ctx.obj = root or get_root_path()


def _run(
    ctx: typer.Context,
    action: Callable[[NoteStore], Coroutine[Any, Any, R]],
) -> R:
    async def runner() -> R:
        blob_store = FsspecBlobStore(ctx.obj)
        async with NoteStore(blob_store, get_storage_key()) as store:
            return await action(store)

    return run_async(runner())


def _check(result: MutationResult, note_id: str | None = None) -> Note:
    if result.status is MutationStatus.FAILED:
        msg = "Failed to save notes"
        raise CommandFailedError(msg)
    if result.status is MutationStatus.REJECTED:
        msg = "Nothing to save: give the note a title or some content"
        raise CommandFailedError(msg)
    if result.note is None:
        msg = f"Note {note_id} not found"
        raise CommandFailedError(msg)
    return result.note


def _flags(note: Note) -> str:
    marks = []
    if note.is_favorite:
        marks.append("*")
    if note.is_private:
        marks.append("private")
    return f" [{', '.join(marks)}]" if marks else ""


def _echo_note(note: Note) -> None:
    typer.echo(f"{display_title(note)}{_flags(note)}")
    typer.echo(f"id: {note.id}")
    typer.echo(f"Last updated: {note.date.isoformat(timespec='minutes')}")
    typer.echo("")
    if isinstance(note.content, ChecklistContent):
        for item in note.content.items:
            box = "[x]" if item.is_checked else "[ ]"
            typer.echo(f"{box} {item.text}  ({item.id})")
    else:
        typer.echo(note.content.text)


@app.command("list")
@handle_cli_errors
def cmd_list(
    ctx: typer.Context,
    favorites: Annotated[
        bool,
        typer.Option("--favorites", help="Show favorite notes only"),
    ] = False,
    search: Annotated[str, typer.Option(help="Filter by title or text")] = "",
) -> None:
    """List notes, newest first."""

    async def action(store: NoteStore) -> list[Note]:
        return store.get_visible_notes(favorites, search)

    notes = _run(ctx, action)
    if not notes:
        typer.echo(empty_state_message(search_text=search, favorites_only=favorites))
        return
    for note in notes:
        typer.echo(f"- {note.id}: {display_title(note)}{_flags(note)}")
        body = preview(note)
        if isinstance(body, list):
            for item in body:
                typer.echo(f"    {'[x]' if item.is_checked else '[ ]'} {item.text}")
        elif body:
            typer.echo(f"    {body.splitlines()[0]}")


@app.command("show")
@handle_cli_errors
def cmd_show(
    ctx: typer.Context,
    note_id: Annotated[str, typer.Argument(help="ID of the note")],
) -> None:
    """Show one note in full."""

    async def action(store: NoteStore) -> Note | None:
        return store.get_note(note_id)

    note = _run(ctx, action)
    if note is None:
        msg = f"Note {note_id} not found"
        raise CommandFailedError(msg)
    _echo_note(note)


@app.command("add")
@handle_cli_errors
def cmd_add(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Title of the note")] = "",
    text: Annotated[str, typer.Option(help="Body of a text note")] = "",
    item: Annotated[
        list[str] | None,
        typer.Option("--item", help="Checklist line; repeat to build a checklist"),
    ] = None,
    private: Annotated[
        bool,
        typer.Option("--private", help="Mark the note private"),
    ] = False,
) -> None:
    """Create a text note, or a checklist when --item is given."""
    draft = NoteDraft.new(NoteType.CHECKLIST if item else NoteType.TEXT)
    draft.title = title
    draft.text = text
    draft.is_private = private
    if item:
        draft.items = []
        for line in item:
            draft.add_item(line)

    note = _check(_run(ctx, draft.commit))
    typer.echo(f"Created note {note.id}")


@app.command("edit")
@handle_cli_errors
def cmd_edit(
    ctx: typer.Context,
    note_id: Annotated[str, typer.Argument(help="ID of the note")],
    title: Annotated[str | None, typer.Option(help="New title")] = None,
    text: Annotated[
        str | None,
        typer.Option(help="New body; turns the note into a text note"),
    ] = None,
    item: Annotated[
        list[str] | None,
        typer.Option("--item", help="Replace the checklist lines"),
    ] = None,
    private: Annotated[
        bool | None,
        typer.Option("--private/--public", help="Set the private flag"),
    ] = None,
) -> None:
    """Edit a note's title, body or private flag."""

    async def action(store: NoteStore) -> MutationResult:
        note = store.get_note(note_id)
        if note is None:
            return MutationResult(MutationStatus.UNCHANGED)
        draft = NoteDraft.from_note(note)
        if title is not None:
            draft.title = title
        if text is not None:
            draft.note_type = NoteType.TEXT
            draft.text = text
        if item:
            draft.note_type = NoteType.CHECKLIST
            draft.items = []
            for line in item:
                draft.add_item(line)
        if private is not None:
            draft.is_private = private
        return await draft.commit(store)

    _check(_run(ctx, action), note_id)
    typer.echo(f"Updated note {note_id}")


@app.command("delete")
@handle_cli_errors
def cmd_delete(
    ctx: typer.Context,
    note_id: Annotated[str, typer.Argument(help="ID of the note")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask")] = False,
) -> None:
    """Permanently delete a note."""
    if not yes:
        typer.confirm(DELETE_PROMPT, abort=True)

    async def action(store: NoteStore) -> MutationResult:
        return await store.delete_note(note_id)

    _check(_run(ctx, action), note_id)
    typer.echo(f"Deleted note {note_id}")


@app.command("favorite")
@handle_cli_errors
def cmd_favorite(
    ctx: typer.Context,
    note_id: Annotated[str, typer.Argument(help="ID of the note")],
) -> None:
    """Toggle the favorite flag."""

    async def action(store: NoteStore) -> MutationResult:
        return await store.toggle_favorite(note_id)

    note = _check(_run(ctx, action), note_id)
    state = "added to" if note.is_favorite else "removed from"
    typer.echo(f"Note {note_id} {state} favorites")


@app.command("private")
@handle_cli_errors
def cmd_private(
    ctx: typer.Context,
    note_id: Annotated[str, typer.Argument(help="ID of the note")],
) -> None:
    """Toggle the private flag."""

    async def action(store: NoteStore) -> MutationResult:
        return await store.toggle_private(note_id)

    note = _check(_run(ctx, action), note_id)
    state = "private" if note.is_private else "public"
    typer.echo(f"Note {note_id} is now {state}")


@app.command("check")
@handle_cli_errors
def cmd_check(
    ctx: typer.Context,
    note_id: Annotated[str, typer.Argument(help="ID of the checklist note")],
    item_id: Annotated[str, typer.Argument(help="ID of the checklist line")],
) -> None:
    """Toggle one checklist line."""

    async def action(store: NoteStore) -> MutationResult:
        return await store.toggle_checklist_item(note_id, item_id)

    result = _run(ctx, action)
    if result.status is MutationStatus.UNCHANGED and result.note is not None:
        msg = f"Note {note_id} has no checklist line {item_id}"
        raise CommandFailedError(msg)
    note = _check(result, note_id)
    if isinstance(note.content, ChecklistContent):
        for line in note.content.items:
            if line.id == item_id:
                box = "[x]" if line.is_checked else "[ ]"
                typer.echo(f"{box} {line.text}")


def main() -> None:
    """Entry point for the notecase CLI."""
    app()


if __name__ == "__main__":
    main()
