"""Derive what to display from the note collection.

Everything here is pure: no I/O and no hidden state. Every call rescans the
whole collection, which is fine for a personal notebook.
"""

from collections.abc import Iterable

from .models import ChecklistContent, ChecklistItem, Note, TextContent

UNTITLED = "Untitled Note"
PREVIEW_ITEMS = 4

NO_SEARCH_MATCHES = "No notes match your search."
NO_FAVORITES = "You have no favorite notes."
NO_NOTES = "Create your first note!"


def _matches(note: Note, needle: str, *, include_checklist_items: bool) -> bool:
    if needle in note.title.lower():
        return True
    if isinstance(note.content, TextContent):
        return needle in note.content.text.lower()
    if include_checklist_items:
        return any(needle in item.text.lower() for item in note.content.items)
    return False


def filter_notes(
    notes: Iterable[Note],
    *,
    favorites_only: bool = False,
    search_text: str = "",
    include_checklist_items: bool = False,
) -> list[Note]:
    """Return the notes to display, in their original order.

    Args:
        notes: The full collection, newest first.
        favorites_only: Keep only notes flagged as favorite.
        search_text: Case-insensitive substring matched against titles and
            text bodies. Ignored when blank.
        include_checklist_items: Also match checklist item text. Off by
            default; checklist items are not searched otherwise.

    Returns:
        The matching notes in input order.

    """
    result = list(notes)
    if favorites_only:
        result = [note for note in result if note.is_favorite]
    if search_text.strip():
        needle = search_text.lower()
        result = [
            note
            for note in result
            if _matches(note, needle, include_checklist_items=include_checklist_items)
        ]
    return result


def empty_state_message(*, search_text: str = "", favorites_only: bool = False) -> str:
    """Return the hint shown when the filtered list is empty."""
    if search_text:
        return NO_SEARCH_MATCHES
    if favorites_only:
        return NO_FAVORITES
    return NO_NOTES


def display_title(note: Note) -> str:
    return note.title or UNTITLED


def checklist_preview(note: Note, limit: int = PREVIEW_ITEMS) -> list[ChecklistItem]:
    """Return the first ``limit`` checklist items; empty for text notes."""
    if isinstance(note.content, ChecklistContent):
        return list(note.content.items[:limit])
    return []


def preview(note: Note) -> str | list[ChecklistItem] | None:
    """Return the card body for ``note``.

    Private notes show no body at all (None). Checklists show their first
    items, text notes their text.
    """
    if note.is_private:
        return None
    if isinstance(note.content, ChecklistContent):
        return checklist_preview(note)
    return note.content.text
