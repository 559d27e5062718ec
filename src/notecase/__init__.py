"""notecase package."""

from .editor import DraftItem, NoteDraft
from .models import (
    ChecklistContent,
    ChecklistItem,
    Note,
    NoteType,
    TextContent,
    is_saveable,
)
from .query import filter_notes
from .session import NotepadSession
from .storage import (
    BlobStore,
    FsspecBlobStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from .store import MutationResult, MutationStatus, NoteStore, StoreClosedError

__all__ = [
    "BlobStore",
    "ChecklistContent",
    "ChecklistItem",
    "DraftItem",
    "FsspecBlobStore",
    "MutationResult",
    "MutationStatus",
    "Note",
    "NoteDraft",
    "NoteStore",
    "NoteType",
    "NotepadSession",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "StoreClosedError",
    "TextContent",
    "filter_notes",
    "is_saveable",
]
