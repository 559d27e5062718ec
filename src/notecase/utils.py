"""Utility functions for notecase."""

import asyncio
import re
import uuid
from collections.abc import Coroutine
from datetime import UTC, datetime
from typing import Any, TypeVar

import fsspec

T = TypeVar("T")


def new_id() -> str:
    """Return a fresh opaque identifier for notes and checklist items."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def is_blank(value: str | None) -> bool:
    """Return True when ``value`` is empty or whitespace-only."""
    return not value or not value.strip()


def validate_key(key: str) -> str:
    """Validate a storage key and return a filename-safe copy.

    Keys are namespaced strings such as ``notecase:notes_v4``. Characters
    outside ``[A-Za-z0-9._-]`` are replaced with ``_`` so the key can be
    used as a file name on every fsspec backend.

    Args:
        key: The storage key to validate.

    Returns:
        The sanitized file stem for ``key``.

    Raises:
        ValueError: If the key is empty or sanitizes to nothing usable.

    """
    if not key or not key.strip():
        msg = "Storage key must not be empty"
        raise ValueError(msg)
    stem = re.sub(r"[^A-Za-z0-9._-]", "_", key.strip())
    if stem.strip("._") == "":
        msg = f"Invalid storage key: {key}"
        raise ValueError(msg)
    return stem


def get_fs_and_path(
    root: str,
    fs: fsspec.AbstractFileSystem | None = None,
) -> tuple[fsspec.AbstractFileSystem, str]:
    """Resolve ``root`` to a filesystem and a protocol-less path.

    Args:
        root: Local path or fsspec URL (``file://``, ``memory://``...).
        fs: Optional filesystem override. When given, ``root`` is used as-is
            after stripping any protocol prefix.

    Returns:
        Tuple of filesystem and path on that filesystem.

    """
    if fs is not None:
        return fs, fs._strip_protocol(root)  # noqa: SLF001
    fs_obj, path = fsspec.core.url_to_fs(root)
    return fs_obj, path


def fs_join(base: str, *parts: str) -> str:
    """Join path components with ``/`` regardless of platform."""
    joined = base.rstrip("/")
    for part in parts:
        joined = f"{joined}/{part.strip('/')}"
    return joined


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run ``coro`` to completion from synchronous code."""
    return asyncio.run(coro)
