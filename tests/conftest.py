"""Test configuration and fixtures."""

from collections.abc import Generator

import fsspec
import pytest

from notecase.storage import FsspecBlobStore
from notecase.store import NoteStore
from notecase.utils import new_id
from tests.fakes import FlakyBlobStore, StepClock


@pytest.fixture
def memory_fs() -> Generator[tuple[fsspec.AbstractFileSystem, str]]:
    """Provide the fsspec memory filesystem and a private root on it."""
    fs = fsspec.filesystem("memory")
    root = f"/notecase-{new_id()}"
    yield fs, root
    if fs.exists(root):
        fs.rm(root, recursive=True)


@pytest.fixture
def blob_store(memory_fs: tuple[fsspec.AbstractFileSystem, str]) -> FsspecBlobStore:
    fs, root = memory_fs
    return FsspecBlobStore(root, fs=fs)


@pytest.fixture
def flaky_blob_store() -> FlakyBlobStore:
    return FlakyBlobStore()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def store(flaky_blob_store: FlakyBlobStore, clock: StepClock) -> NoteStore:
    return NoteStore(flaky_blob_store, clock=clock)
