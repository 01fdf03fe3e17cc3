"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest

from chaycards.adapters.in_memory_flashcard_repository import InMemoryFlashcardRepository
from chaycards.adapters.in_memory_folder_store import InMemoryFolderStore
from chaycards.domain.entities.folder import Folder
from chaycards.domain.services.folder_state_manager import FolderStateManager
from chaycards.domain.services.operation_queue import OperationQueue

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def make_folder(folder_id: str, name: str, parent_id: str | None = None) -> Folder:
    """Folder with a fixed id so trees can be written out by hand."""
    return Folder(
        id=folder_id,
        name=name,
        parent_id=parent_id,
        created_at=NOW,
        modified_at=NOW,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def tree():
    """A -> B -> C, A -> D, plus unrelated root E."""
    return [
        make_folder("A", "A"),
        make_folder("B", "B", "A"),
        make_folder("C", "C", "B"),
        make_folder("D", "D", "A"),
        make_folder("E", "E"),
    ]


@pytest.fixture
def store():
    return InMemoryFolderStore()


@pytest.fixture
def queue():
    return OperationQueue(operation_timeout=2.0)


@pytest.fixture
async def manager(store, queue):
    """Loaded state manager over an empty in-memory store."""
    m = await FolderStateManager.open(store, queue)
    yield m
    m.close()


@pytest.fixture
def card_repository():
    return InMemoryFlashcardRepository()
