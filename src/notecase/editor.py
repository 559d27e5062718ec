"""Editable drafts of notes.

A draft is the staged copy of a note while it is being created or edited.
Nothing reaches the store until :meth:`NoteDraft.commit` is called, and a
draft stays usable after a failed commit so the edit is not lost.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .models import (
    ChecklistContent,
    ChecklistItem,
    Note,
    NoteType,
    TextContent,
    is_saveable,
)
from .store import MutationResult, MutationStatus
from .utils import is_blank, new_id

if TYPE_CHECKING:
    from .store import NoteStore


@dataclass
class DraftItem:
    """Mutable checklist line inside a draft."""

    id: str = field(default_factory=new_id)
    text: str = ""
    is_checked: bool = False


@dataclass
class NoteDraft:
    """Staged title, body and flags of a note under edit.

    Text and checklist bodies are kept side by side so switching the note
    type back and forth while editing does not discard either one; only the
    body matching ``note_type`` is committed.
    """

    note_id: str | None = None
    title: str = ""
    text: str = ""
    items: list[DraftItem] = field(default_factory=list)
    note_type: NoteType = NoteType.TEXT
    is_private: bool = False

    @classmethod
    def new(cls, note_type: NoteType = NoteType.TEXT) -> NoteDraft:
        """Start a draft for a new note. Checklists start with one empty line."""
        items = [DraftItem()] if note_type is NoteType.CHECKLIST else []
        return cls(items=items, note_type=note_type)

    @classmethod
    def from_note(cls, note: Note) -> NoteDraft:
        """Start a draft that edits ``note``."""
        draft = cls(
            note_id=note.id,
            title=note.title,
            note_type=note.type,
            is_private=note.is_private,
        )
        if isinstance(note.content, ChecklistContent):
            draft.items = [
                DraftItem(id=item.id, text=item.text, is_checked=item.is_checked)
                for item in note.content.items
            ]
        else:
            draft.text = note.content.text
        return draft

    @property
    def is_new(self) -> bool:
        return self.note_id is None

    def toggle_type(self) -> NoteType:
        """Switch between text and checklist bodies."""
        self.note_type = (
            NoteType.TEXT if self.note_type is NoteType.CHECKLIST else NoteType.CHECKLIST
        )
        return self.note_type

    def toggle_private(self) -> bool:
        self.is_private = not self.is_private
        return self.is_private

    def add_item(self, text: str = "") -> DraftItem:
        item = DraftItem(text=text)
        self.items.append(item)
        return item

    def set_item_text(self, item_id: str, text: str) -> None:
        for item in self.items:
            if item.id == item_id:
                item.text = text
                return

    def remove_item(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.id != item_id]

    def to_content(self) -> TextContent | ChecklistContent:
        """Return the body to commit, without blank checklist lines."""
        if self.note_type is NoteType.CHECKLIST:
            return ChecklistContent(
                items=tuple(
                    ChecklistItem(id=item.id, text=item.text, is_checked=item.is_checked)
                    for item in self.items
                    if not is_blank(item.text)
                ),
            )
        return TextContent(text=self.text)

    def can_save(self) -> bool:
        return is_saveable(self.title, self.to_content())

    async def commit(self, store: NoteStore) -> MutationResult:
        """Create or update the note in ``store``.

        After a successful first commit the draft points at the created note,
        so committing again updates it instead of creating a duplicate.
        """
        if not self.can_save():
            return MutationResult(MutationStatus.REJECTED)
        content = self.to_content()
        if self.note_id is None:
            result = await store.create_note(
                self.title,
                content,
                is_private=self.is_private,
            )
            if result.status is MutationStatus.SAVED and result.note is not None:
                self.note_id = result.note.id
            return result
        return await store.update_note(
            self.note_id,
            self.title,
            content,
            is_private=self.is_private,
        )
