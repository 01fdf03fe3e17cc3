"""Id-keyed views over a folder collection snapshot.

Tree walks never recurse over the raw list: they build an index by id and
a parent -> children multimap once, then traverse iteratively.
"""

from collections import defaultdict
from collections.abc import Iterable, Iterator

from chaycards.domain.entities.folder import Folder


def index_folders(folders: Iterable[Folder]) -> dict[str, Folder]:
    """Map folder id to folder."""
    return {folder.id: folder for folder in folders}


def children_by_parent(folders: Iterable[Folder]) -> dict[str | None, list[Folder]]:
    """Map parent id (None for roots) to its direct children."""
    children: dict[str | None, list[Folder]] = defaultdict(list)
    for folder in folders:
        children[folder.parent_id].append(folder)
    return children


def siblings_of(parent_id: str | None, folders: Iterable[Folder]) -> list[Folder]:
    """Folders whose parent is ``parent_id``."""
    return [folder for folder in folders if folder.parent_id == parent_id]


def iter_ancestor_ids(
    folder_id: str | None, by_id: dict[str, Folder]
) -> Iterator[str]:
    """Yield ``folder_id`` and then each ancestor id up to the root.

    Stops at an unknown id. Callers guard against cycles themselves since
    a corrupted tree could loop forever.
    """
    current = folder_id
    while current is not None:
        yield current
        folder = by_id.get(current)
        current = folder.parent_id if folder else None


def descendant_ids(folder_id: str, folders: Iterable[Folder]) -> frozenset[str]:
    """Return ``folder_id`` plus every transitive child id."""
    children = children_by_parent(folders)
    result: set[str] = set()
    stack = [folder_id]
    while stack:
        current = stack.pop()
        if current in result:
            continue
        result.add(current)
        stack.extend(child.id for child in children.get(current, ()))
    return frozenset(result)


def path_to(folder_id: str, folders: Iterable[Folder]) -> list[Folder]:
    """Breadcrumb from the root down to ``folder_id`` (empty if unknown)."""
    by_id = index_folders(folders)
    path: list[Folder] = []
    seen: set[str] = set()
    for current in iter_ancestor_ids(folder_id, by_id):
        if current in seen or current not in by_id:
            break
        seen.add(current)
        path.append(by_id[current])
    path.reverse()
    return path
