"""Note data model.

A note carries either a text body or an ordered checklist. The two shapes are
modelled as an explicit sum type (:class:`TextContent` | :class:`ChecklistContent`)
so callers never have to inspect ``content`` at runtime to learn what it is.

Persisted records keep the flat camelCase shape used by earlier app versions
(``type`` + ``content``, ``isPrivate``, ``isFavorite``); :class:`NoteRecord`
translates between the two.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import is_blank, new_id


class NoteType(StrEnum):
    """Kinds of notes."""

    TEXT = "text"
    CHECKLIST = "checklist"


class ChecklistItem(BaseModel):
    """One line of a checklist note."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=new_id)
    text: str = ""
    is_checked: bool = Field(default=False, alias="isChecked")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:  # noqa: ANN401
        # Older records used millisecond timestamps as item ids.
        return str(value)


class TextContent(BaseModel):
    """Free-text note body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str = ""

    def is_blank(self) -> bool:
        """Return True if the body holds nothing but whitespace."""
        return is_blank(self.text)

    def without_blank_items(self) -> TextContent:
        """Return the content unchanged; text bodies have no items."""
        return self


class ChecklistContent(BaseModel):
    """Ordered checklist body. Insertion order is display order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["checklist"] = "checklist"
    items: tuple[ChecklistItem, ...] = ()

    @classmethod
    def from_texts(cls, texts: Iterable[str]) -> ChecklistContent:
        """Build an unchecked checklist with one fresh item per text."""
        return cls(items=tuple(ChecklistItem(text=text) for text in texts))

    def is_blank(self) -> bool:
        """Return True if no item has non-blank text."""
        return all(is_blank(item.text) for item in self.items)

    def without_blank_items(self) -> ChecklistContent:
        """Drop items whose text is empty or whitespace-only."""
        kept = tuple(item for item in self.items if not is_blank(item.text))
        if len(kept) == len(self.items):
            return self
        return self.model_copy(update={"items": kept})

    def toggle_item(self, item_id: str) -> ChecklistContent | None:
        """Flip ``is_checked`` on ``item_id``; None if the item is absent."""
        for index, item in enumerate(self.items):
            if item.id == item_id:
                flipped = item.model_copy(update={"is_checked": not item.is_checked})
                items = (*self.items[:index], flipped, *self.items[index + 1 :])
                return self.model_copy(update={"items": items})
        return None


Content = Annotated[TextContent | ChecklistContent, Field(discriminator="kind")]


def is_saveable(title: str, content: TextContent | ChecklistContent) -> bool:
    """Return True if a note with ``title`` and ``content`` may be saved.

    A note needs a non-blank title, a non-blank text body, or at least one
    checklist item with non-blank text.
    """
    return not is_blank(title) or not content.is_blank()


class Note(BaseModel):
    """A persisted text or checklist note. Instances are immutable snapshots."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    content: Content
    is_private: bool = False
    is_favorite: bool = False
    date: datetime

    @property
    def type(self) -> NoteType:
        """The note kind, derived from its content."""
        return NoteType(self.content.kind)

    @property
    def is_checklist(self) -> bool:
        return isinstance(self.content, ChecklistContent)


class NoteRecord(BaseModel):
    """Flat JSON shape of a note inside the persisted blob."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    type: NoteType = NoteType.TEXT
    content: str | list[ChecklistItem] | None = None
    is_private: bool = Field(default=False, alias="isPrivate")
    is_favorite: bool = Field(default=False, alias="isFavorite")
    date: datetime

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:  # noqa: ANN401
        return str(value)

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, value: Any) -> str:  # noqa: ANN401
        return "" if value is None else value

    @classmethod
    def from_note(cls, note: Note) -> NoteRecord:
        """Flatten ``note`` into its stored shape."""
        content: str | list[ChecklistItem]
        if isinstance(note.content, ChecklistContent):
            content = list(note.content.items)
        else:
            content = note.content.text
        return cls(
            id=note.id,
            title=note.title,
            type=note.type,
            content=content,
            is_private=note.is_private,
            is_favorite=note.is_favorite,
            date=note.date,
        )

    def to_note(self) -> Note:
        """Rebuild a :class:`Note` from this record.

        Raises:
            ValueError: If ``content`` does not match the declared ``type``.

        """
        body: TextContent | ChecklistContent
        if self.type is NoteType.CHECKLIST:
            if isinstance(self.content, str):
                msg = f"Checklist note {self.id} has text content"
                raise ValueError(msg)
            body = ChecklistContent(items=tuple(self.content or ()))
        else:
            if isinstance(self.content, list):
                msg = f"Text note {self.id} has checklist content"
                raise ValueError(msg)
            body = TextContent(text=self.content or "")
        return Note(
            id=self.id,
            title=self.title,
            content=body,
            is_private=self.is_private,
            is_favorite=self.is_favorite,
            date=self.date,
        )
