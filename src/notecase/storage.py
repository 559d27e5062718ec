"""Blob storage for the note collection.

The note store persists its whole collection as one JSON blob under a fixed,
namespaced key. :class:`BlobStore` is the async key-value contract the store
depends on; :class:`FsspecBlobStore` implements it on top of any fsspec
filesystem (local disk for real use, ``memory://`` for tests).
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

from pydantic import TypeAdapter, ValidationError

from .models import Note, NoteRecord
from .utils import fs_join, get_fs_and_path, new_id, validate_key

if TYPE_CHECKING:
    import fsspec

logger = logging.getLogger(__name__)

BLOB_SUFFIX = ".json"

_RECORDS = TypeAdapter(list[NoteRecord])


class StorageError(Exception):
    """Base class for blob storage failures."""


class StorageReadError(StorageError):
    """Raised when the stored blob cannot be read or parsed."""


class StorageWriteError(StorageError):
    """Raised when the blob cannot be written."""


class BlobStore(Protocol):
    """Async key-value store holding string blobs."""

    async def read(self, key: str) -> str | None:
        """Return the blob stored under ``key`` or None if there is none."""
        ...

    async def write(self, key: str, data: str) -> None:
        """Durably store ``data`` under ``key``, replacing any prior blob."""
        ...


class FsspecBlobStore:
    """:class:`BlobStore` backed by an fsspec filesystem.

    Each key maps to ``<root>/<sanitized key>.json``. Writes go to a
    temporary sibling first and are moved over the target afterwards, so a
    failed write leaves the previous blob in place.
    """

    def __init__(
        self,
        root: str,
        fs: fsspec.AbstractFileSystem | None = None,
    ) -> None:
        """Initialize the blob store.

        Args:
            root: Directory (local path or fsspec URL) that holds the blobs.
            fs: Optional filesystem implementation. Defaults to the one
                implied by ``root``.

        """
        self.fs, self.root = get_fs_and_path(root, fs)

    def path_for(self, key: str) -> str:
        """Return the file path used for ``key``."""
        return fs_join(self.root, validate_key(key) + BLOB_SUFFIX)

    async def read(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read_sync, key)

    async def write(self, key: str, data: str) -> None:
        await asyncio.to_thread(self._write_sync, key, data)

    def _read_sync(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            if not self.fs.exists(path):
                return None
            with self.fs.open(path, "r", encoding="utf-8") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read blob {key!r} from {path}"
            raise StorageReadError(msg) from exc

    def _write_sync(self, key: str, data: str) -> None:
        path = self.path_for(key)
        tmp_path = f"{path}.{new_id()}.tmp"
        try:
            self.fs.makedirs(self.root, exist_ok=True)
            with self.fs.open(tmp_path, "w", encoding="utf-8") as handle:
                handle.write(data)
            self.fs.mv(tmp_path, path)
        except OSError as exc:
            self._discard(tmp_path)
            msg = f"Failed to write blob {key!r} to {path}"
            raise StorageWriteError(msg) from exc
        logger.debug("Wrote %d bytes to %s", len(data), path)

    def _discard(self, tmp_path: str) -> None:
        try:
            if self.fs.exists(tmp_path):
                self.fs.rm(tmp_path)
        except OSError:
            logger.warning("Could not remove temporary blob %s", tmp_path)


def encode_notes(notes: Iterable[Note]) -> str:
    """Serialize ``notes`` to the persisted JSON array, preserving order."""
    records = [NoteRecord.from_note(note) for note in notes]
    payload = _RECORDS.dump_python(records, mode="json", by_alias=True)
    return json.dumps(payload, ensure_ascii=False, indent=2)


def decode_notes(data: str) -> list[Note]:
    """Parse a persisted JSON array back into notes.

    Raises:
        StorageReadError: If ``data`` is not a valid note array.

    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as exc:
        msg = "Stored notes are not valid JSON"
        raise StorageReadError(msg) from exc
    if not isinstance(raw, list):
        msg = f"Stored notes must be a JSON array, got {type(raw).__name__}"
        raise StorageReadError(msg)
    try:
        return [record.to_note() for record in _RECORDS.validate_python(raw)]
    except (ValidationError, ValueError) as exc:
        msg = f"Stored notes are malformed: {exc}"
        raise StorageReadError(msg) from exc
