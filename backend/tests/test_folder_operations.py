"""Tests for validated folder mutations."""

import pytest

from chaycards.adapters.in_memory_folder_store import InMemoryFolderStore
from chaycards.domain.services.folder_operations import FolderOperations
from chaycards.domain.value_objects.folder_requests import (
    CreateFolderRequest,
    MoveFolderRequest,
    RenameAndMoveFolderRequest,
    RenameFolderRequest,
    ReplaceFolderRequest,
)
from chaycards.domain.value_objects.operation_result import ErrorKind, Failure, Success
from chaycards.ports.folder_store import StorageError
from conftest import make_folder


@pytest.fixture
def ops(store):
    return FolderOperations(store)


async def test_create_persists_full_collection(ops, store, tree):
    result = await ops.create_folder(CreateFolderRequest("New", "A"), tree)

    assert isinstance(result, Success)
    assert result.data.parent_id == "A"
    assert result.data.name == "New"
    assert len(store.folders) == len(tree) + 1


async def test_create_trims_and_rejects_blank(ops, store):
    result = await ops.create_folder(CreateFolderRequest("   "), [])

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.NAME_CONFLICT
    assert store.save_count == 0


async def test_create_duplicate_suggests_name(ops, store):
    folders = [make_folder("N", "Notes")]

    result = await ops.create_folder(CreateFolderRequest("notes"), folders)

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.NAME_CONFLICT
    assert result.suggested_name == "Notes (copy)"
    assert store.save_count == 0


async def test_create_under_unknown_parent(ops):
    result = await ops.create_folder(CreateFolderRequest("X", "missing"), [])
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.NOT_FOUND


async def test_rename(ops, tree):
    result = await ops.rename_folder(RenameFolderRequest("C", "Renamed"), tree)

    assert isinstance(result, Success)
    assert result.data.name == "Renamed"
    assert result.data.parent_id == "B"
    assert result.data.modified_at > tree[2].modified_at


async def test_rename_unknown(ops, tree):
    result = await ops.rename_folder(RenameFolderRequest("missing", "X"), tree)
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.NOT_FOUND


async def test_rename_case_change_of_self_is_allowed(ops, tree):
    result = await ops.rename_folder(RenameFolderRequest("B", "b"), tree)
    assert isinstance(result, Success)


async def test_move_into_descendant_is_circular(ops, store, tree):
    result = await ops.move_folder(MoveFolderRequest("A", "C"), tree)

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.CIRCULAR_REFERENCE
    assert store.save_count == 0


async def test_move_to_root(ops, store, tree):
    result = await ops.move_folder(MoveFolderRequest("C", None), tree)

    assert isinstance(result, Success)
    assert result.data.parent_id is None
    assert {f.id: f.parent_id for f in store.folders}["C"] is None


async def test_delete_cascades(ops, store, tree):
    result = await ops.delete_folder("A", tree)

    assert isinstance(result, Success)
    assert result.data == {"A", "B", "C", "D"}
    assert [f.id for f in store.folders] == ["E"]


async def test_delete_unknown(ops, tree):
    result = await ops.delete_folder("missing", tree)
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.NOT_FOUND


async def test_replace_removes_same_named_subtree(ops, store, tree):
    folders = [*tree, make_folder("X", "b", "E")]

    result = await ops.replace_folder(ReplaceFolderRequest("X", "A"), folders)

    assert isinstance(result, Success)
    assert result.data.removed_ids == {"B", "C"}
    assert result.data.folder.parent_id == "A"
    assert sorted(f.id for f in store.folders) == ["A", "D", "E", "X"]


async def test_replace_never_removes_source_subtree(ops, store):
    # S lives inside Y; replacing S into P overwrites Y but S must survive.
    folders = [
        make_folder("P", "P"),
        make_folder("Y", "Y", "P"),
        make_folder("S", "Y", "Y"),
        make_folder("K", "K", "S"),
    ]

    result = await ops.replace_folder(ReplaceFolderRequest("S", "P"), folders)

    assert isinstance(result, Success)
    assert result.data.removed_ids == {"Y"}
    remaining = {f.id: f.parent_id for f in store.folders}
    assert remaining == {"P": None, "S": "P", "K": "S"}


async def test_replace_into_own_subtree_is_circular(ops, tree):
    result = await ops.replace_folder(ReplaceFolderRequest("A", "B"), tree)
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.CIRCULAR_REFERENCE


async def test_rename_and_move_validates_against_target(ops, tree):
    folders = [*tree, make_folder("X", "Shared", "E"), make_folder("Y", "Shared", "A")]

    clash = await ops.rename_and_move_folder(RenameAndMoveFolderRequest("X", "shared", "A"), folders)
    assert isinstance(clash, Failure)
    assert clash.kind is ErrorKind.NAME_CONFLICT

    result = await ops.rename_and_move_folder(
        RenameAndMoveFolderRequest("X", "Shared (copy)", "A"), folders
    )
    assert isinstance(result, Success)
    assert result.data.name == "Shared (copy)"
    assert result.data.parent_id == "A"


async def test_storage_error_propagates(tree):
    store = InMemoryFolderStore()
    store.fail_next_save()
    ops = FolderOperations(store)

    with pytest.raises(StorageError):
        await ops.create_folder(CreateFolderRequest("New"), tree)
    assert store.folders == []


async def test_unexpected_store_error_is_wrapped(tree):
    class BrokenStore(InMemoryFolderStore):
        async def save_folders(self, folders):
            raise OSError("disk full")

    ops = FolderOperations(BrokenStore())

    with pytest.raises(StorageError, match="disk full"):
        await ops.delete_folder("E", tree)
