"""Note store: the single owner and writer of the note collection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from types import TracebackType
from typing import Self

from .config import DEFAULT_STORAGE_KEY
from .models import ChecklistContent, Note, TextContent, is_saveable
from .query import filter_notes
from .storage import (
    BlobStore,
    StorageReadError,
    StorageWriteError,
    decode_notes,
    encode_notes,
)
from .utils import new_id, utc_now

logger = logging.getLogger(__name__)


class StoreClosedError(Exception):
    """Raised when a closed store is asked to load or mutate."""


class MutationStatus(StrEnum):
    """Outcome of a store mutation."""

    SAVED = "saved"
    UNCHANGED = "unchanged"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class MutationResult:
    """Completion signal returned by every mutator.

    ``note`` is the affected note snapshot after the change (or the removed
    note for deletions). It is None when no note was involved.
    """

    status: MutationStatus
    note: Note | None = None

    @property
    def ok(self) -> bool:
        return self.status in {MutationStatus.SAVED, MutationStatus.UNCHANGED}


class NoteStore:
    """Owns the note collection and mediates all reads and writes to storage.

    The collection is ordered newest-created first and exposed only as tuples
    of immutable notes. Mutations are serialized: each one computes the new
    collection, persists it, and only then replaces the in-memory copy. A
    failed write therefore leaves the in-memory collection untouched.

    Use as an async context manager to load on entry and close on exit::

        async with NoteStore(FsspecBlobStore(root)) as store:
            await store.create_note("Trip", TextContent(text="Pack"))
    """

    def __init__(
        self,
        blob_store: BlobStore,
        key: str = DEFAULT_STORAGE_KEY,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize an empty, open store.

        Args:
            blob_store: Persistence collaborator holding the serialized notes.
            key: Key of the blob holding the collection.
            clock: Source of modification timestamps.

        """
        self._blob_store = blob_store
        self._key = key
        self._clock = clock
        self._notes: tuple[Note, ...] = ()
        self._lock = asyncio.Lock()
        self._closed = False

    async def __aenter__(self) -> Self:
        await self.load()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Mark the store closed. The last snapshot stays readable."""
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            msg = "Note store is closed"
            raise StoreClosedError(msg)

    # Reads

    def get_notes(self) -> tuple[Note, ...]:
        """Return the current collection, newest first."""
        return self._notes

    def get_note(self, note_id: str) -> Note | None:
        index = self._index_of(note_id)
        return None if index is None else self._notes[index]

    def get_visible_notes(
        self,
        favorites_only: bool = False,  # noqa: FBT001, FBT002
        search_text: str = "",
    ) -> list[Note]:
        """Return the notes to display for the given view parameters."""
        return filter_notes(
            self._notes,
            favorites_only=favorites_only,
            search_text=search_text,
        )

    def _index_of(self, note_id: str) -> int | None:
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                return index
        return None

    # Persistence

    async def load(self) -> tuple[Note, ...]:
        """Replace the in-memory collection with the stored one.

        A missing blob yields an empty collection. An unreadable or corrupt
        blob is logged and also yields an empty collection.

        Raises:
            StoreClosedError: If the store has been closed.

        """
        async with self._lock:
            self._ensure_open()
            try:
                data = await self._blob_store.read(self._key)
                notes = [] if data is None else decode_notes(data)
            except StorageReadError:
                logger.exception("Failed to load notes from %s", self._key)
                notes = []
            self._notes = tuple(notes)
            logger.info("Loaded %d notes from %s", len(self._notes), self._key)
            return self._notes

    async def save(self, notes: Iterable[Note]) -> tuple[Note, ...]:
        """Persist ``notes`` as the full collection, then adopt it in memory.

        Raises:
            StorageWriteError: If the write fails. The in-memory collection is
                left as it was.
            StoreClosedError: If the store has been closed.

        """
        async with self._lock:
            return await self._persist(tuple(notes))

    async def _persist(self, notes: tuple[Note, ...]) -> tuple[Note, ...]:
        self._ensure_open()
        payload = encode_notes(notes)
        try:
            await self._blob_store.write(self._key, payload)
        except StorageWriteError:
            logger.exception("Failed to save %d notes to %s", len(notes), self._key)
            raise
        self._notes = notes
        return notes

    async def _commit(self, notes: tuple[Note, ...], note: Note) -> MutationResult:
        try:
            await self._persist(notes)
        except StorageWriteError:
            return MutationResult(MutationStatus.FAILED, note)
        return MutationResult(MutationStatus.SAVED, note)

    # Mutators

    async def create_note(
        self,
        title: str,
        content: TextContent | ChecklistContent,
        *,
        is_private: bool = False,
    ) -> MutationResult:
        """Create a note and prepend it to the collection.

        Blank checklist items are dropped first. A note with a blank title and
        no non-blank content is rejected without touching storage.
        """
        content = content.without_blank_items()
        async with self._lock:
            self._ensure_open()
            if not is_saveable(title, content):
                logger.debug("Rejected empty note")
                return MutationResult(MutationStatus.REJECTED)
            note = Note(
                id=self._fresh_id(),
                title=title,
                content=content,
                is_private=is_private,
                is_favorite=False,
                date=self._clock(),
            )
            return await self._commit((note, *self._notes), note)

    def _fresh_id(self) -> str:
        taken = {note.id for note in self._notes}
        note_id = new_id()
        while note_id in taken:
            note_id = new_id()
        return note_id

    async def update_note(
        self,
        note_id: str,
        title: str,
        content: TextContent | ChecklistContent,
        *,
        is_private: bool | None = None,
    ) -> MutationResult:
        """Replace the title, content and private flag of a note in place.

        The note keeps its position and favorite flag; its date is refreshed.
        ``is_private=None`` keeps the current flag. Absent ids are a no-op.
        """
        content = content.without_blank_items()
        async with self._lock:
            self._ensure_open()
            index = self._index_of(note_id)
            if index is None:
                return MutationResult(MutationStatus.UNCHANGED)
            current = self._notes[index]
            if not is_saveable(title, content):
                logger.debug("Rejected emptying note %s", note_id)
                return MutationResult(MutationStatus.REJECTED, current)
            updated = current.model_copy(
                update={
                    "title": title,
                    "content": content,
                    "is_private": (
                        current.is_private if is_private is None else is_private
                    ),
                    "date": self._clock(),
                },
            )
            return await self._commit(self._replaced(index, updated), updated)

    async def delete_note(self, note_id: str) -> MutationResult:
        """Remove a note. Absent ids are a no-op."""
        async with self._lock:
            self._ensure_open()
            index = self._index_of(note_id)
            if index is None:
                return MutationResult(MutationStatus.UNCHANGED)
            removed = self._notes[index]
            notes = (*self._notes[:index], *self._notes[index + 1 :])
            return await self._commit(notes, removed)

    async def toggle_favorite(self, note_id: str) -> MutationResult:
        return await self._apply(
            note_id,
            lambda note: note.model_copy(update={"is_favorite": not note.is_favorite}),
        )

    async def toggle_private(self, note_id: str) -> MutationResult:
        return await self._apply(
            note_id,
            lambda note: note.model_copy(update={"is_private": not note.is_private}),
        )

    async def toggle_checklist_item(self, note_id: str, item_id: str) -> MutationResult:
        """Flip one checklist item. No-op for text notes or unknown ids."""

        def change(note: Note) -> Note | None:
            if not isinstance(note.content, ChecklistContent):
                return None
            content = note.content.toggle_item(item_id)
            if content is None:
                return None
            return note.model_copy(update={"content": content})

        return await self._apply(note_id, change)

    async def _apply(
        self,
        note_id: str,
        change: Callable[[Note], Note | None],
    ) -> MutationResult:
        async with self._lock:
            self._ensure_open()
            index = self._index_of(note_id)
            if index is None:
                return MutationResult(MutationStatus.UNCHANGED)
            updated = change(self._notes[index])
            if updated is None:
                return MutationResult(MutationStatus.UNCHANGED, self._notes[index])
            return await self._commit(self._replaced(index, updated), updated)

    def _replaced(self, index: int, note: Note) -> tuple[Note, ...]:
        return (*self._notes[:index], note, *self._notes[index + 1 :])
