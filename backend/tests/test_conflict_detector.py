"""Tests for folder conflict detection."""

from chaycards.domain.services.conflict_detector import (
    detect_circular_conflict,
    detect_move_conflict,
    detect_name_conflict,
    detect_replace_conflict,
    find_replace_targets,
    generate_unique_name,
    get_folders_to_delete,
)
from chaycards.domain.value_objects.folder_conflict import CircularConflict, NameConflict
from conftest import make_folder


def test_unique_name_prefers_plain_copy():
    siblings = [make_folder("1", "Report")]
    assert generate_unique_name("Report", siblings) == "Report (copy)"


def test_unique_name_counts_up_from_one():
    siblings = [make_folder("1", "Report"), make_folder("2", "Report (copy)")]
    assert generate_unique_name("Report", siblings) == "Report (copy 1)"

    siblings.append(make_folder("3", "Report (copy 1)"))
    assert generate_unique_name("Report", siblings) == "Report (copy 2)"


def test_unique_name_fills_gaps_and_ignores_case():
    siblings = [
        make_folder("1", "Report"),
        make_folder("2", "REPORT (COPY)"),
        make_folder("3", "report (copy 2)"),
    ]
    assert generate_unique_name("Report", siblings) == "Report (copy 1)"


def test_name_conflict_is_case_insensitive():
    folders = [make_folder("N", "Notes")]

    conflict = detect_name_conflict("notes", None, folders)

    assert isinstance(conflict, NameConflict)
    assert conflict.conflicting_id == "N"
    assert conflict.original_name == "notes"
    assert conflict.suggested_name == "Notes (copy)"
    assert conflict.message == 'A folder named "notes" already exists in this location'


def test_name_conflict_only_among_siblings(tree):
    assert detect_name_conflict("C", None, tree) is None
    assert detect_name_conflict("C", "B", tree) is not None


def test_name_conflict_excludes_self_on_rename(tree):
    assert detect_name_conflict("b", "A", tree, exclude_id="B") is None


def test_circular_into_self_and_descendant(tree):
    assert isinstance(detect_circular_conflict("A", "A", tree), CircularConflict)
    conflict = detect_circular_conflict("A", "C", tree)
    assert conflict is not None
    assert conflict.message == "Cannot move a folder into its own subfolder"


def test_circular_allows_root_and_unrelated_targets(tree):
    assert detect_circular_conflict("A", None, tree) is None
    assert detect_circular_conflict("B", "E", tree) is None
    assert detect_circular_conflict("C", "D", tree) is None


def test_circular_detects_corrupt_tree():
    folders = [make_folder("X", "X", "Y"), make_folder("Y", "Y", "X")]

    conflict = detect_circular_conflict("Z", "X", folders)

    assert conflict is not None
    assert conflict.message == "Circular reference detected in folder structure"


def test_move_conflict_reports_circular_before_name(tree):
    folders = [*tree, make_folder("A2", "A", "C")]
    conflict = detect_move_conflict("A", "C", folders)
    assert isinstance(conflict, CircularConflict)


def test_move_conflict_reports_name_clash(tree):
    folders = [*tree, make_folder("C2", "c", "E")]
    conflict = detect_move_conflict("C", "E", folders)
    assert isinstance(conflict, NameConflict)
    assert conflict.conflicting_id == "C2"


def test_move_conflict_unknown_source(tree):
    assert detect_move_conflict("missing", None, tree) is None


def test_folders_to_delete_cascades(tree):
    assert get_folders_to_delete(tree, "A") == {"A", "B", "C", "D"}
    assert get_folders_to_delete(tree, "C") == {"C"}


def test_replace_targets_match_name_under_target(tree):
    source = make_folder("X", "b")
    targets = find_replace_targets(source, "A", [*tree, source])
    assert [f.id for f in targets] == ["B"]


def test_replace_conflict_rejects_ancestor_of_source():
    folders = [
        make_folder("P", "P"),
        make_folder("Y", "Y", "P"),
        make_folder("S", "Y", "Y"),
    ]
    # Replacing into P would overwrite Y, which contains S itself.
    conflict = detect_replace_conflict("S", "P", folders)
    assert isinstance(conflict, CircularConflict)


def test_replace_conflict_allows_plain_replace(tree):
    folders = [*tree, make_folder("X", "D", "E")]
    assert detect_replace_conflict("X", "A", folders) is None
