"""Screen-level notepad state.

:class:`NotepadSession` gathers everything a notes screen keeps between user
events: the owned :class:`~notecase.store.NoteStore`, the view parameters,
the note being viewed, the open editor draft and a pending delete
confirmation. Presentation code reads from it and calls its methods instead
of keeping its own mutable state.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Self

from .editor import NoteDraft
from .models import Note, NoteType
from .query import empty_state_message
from .store import MutationResult, MutationStatus, NoteStore

logger = logging.getLogger(__name__)


class NotepadSession:
    """State of one notes screen from mount to unmount."""

    def __init__(self, store: NoteStore) -> None:
        self.store = store
        self.favorites_only = False
        self.search_text = ""
        self.viewing_id: str | None = None
        self.pending_delete_id: str | None = None
        self.draft: NoteDraft | None = None

    async def __aenter__(self) -> Self:
        await self.store.load()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.draft is not None:
            logger.info("Discarding unsaved draft on close")
        self.store.close()

    @property
    def visible_notes(self) -> list[Note]:
        return self.store.get_visible_notes(self.favorites_only, self.search_text)

    @property
    def empty_message(self) -> str:
        return empty_state_message(
            search_text=self.search_text,
            favorites_only=self.favorites_only,
        )

    # Viewer

    @property
    def viewing(self) -> Note | None:
        """The note open in the viewer, read fresh from the store."""
        if self.viewing_id is None:
            return None
        return self.store.get_note(self.viewing_id)

    def view(self, note_id: str) -> Note | None:
        self.viewing_id = note_id
        return self.viewing

    def close_viewer(self) -> None:
        self.viewing_id = None

    # Editor

    def start_new(self, note_type: NoteType = NoteType.TEXT) -> NoteDraft:
        self.draft = NoteDraft.new(note_type)
        return self.draft

    def start_edit(self, note_id: str) -> NoteDraft | None:
        """Open the editor on an existing note, closing the viewer."""
        note = self.store.get_note(note_id)
        if note is None:
            return None
        self.close_viewer()
        self.draft = NoteDraft.from_note(note)
        return self.draft

    def cancel_edit(self) -> None:
        self.draft = None

    async def save_draft(self) -> MutationResult:
        """Commit the open draft; it is kept unless the save succeeded."""
        if self.draft is None:
            return MutationResult(MutationStatus.UNCHANGED)
        result = await self.draft.commit(self.store)
        if result.status is MutationStatus.SAVED:
            self.draft = None
        return result

    # Delete confirmation

    def request_delete(self, note_id: str) -> None:
        """Ask for confirmation before deleting; closes the viewer."""
        self.close_viewer()
        self.pending_delete_id = note_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> MutationResult:
        if self.pending_delete_id is None:
            return MutationResult(MutationStatus.UNCHANGED)
        result = await self.store.delete_note(self.pending_delete_id)
        self.pending_delete_id = None
        return result
