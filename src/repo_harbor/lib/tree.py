"""Working-copy tree materialization.

``build_tree`` walks a repository checkout and returns a rooted hierarchy of
``FileNode`` objects. Every file node carries an address of the form
``repositories/{id}/files/{relative_path}`` that clients present back to read
or overwrite the file. Version-control metadata is never part of the tree.

The tree is rebuilt from the filesystem on every call; nothing is cached.
"""

from __future__ import annotations

__all__ = [
    "METADATA_DIR",
    "FileNode",
    "PathKind",
    "build_tree",
    "classify_path",
    "file_address",
]

import enum
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from repo_harbor.lib.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

METADATA_DIR = ".git"


class PathKind(enum.Enum):
    """Classification of an entry met while walking a working copy."""

    SKIP = "skip"
    FILE = "file"
    DIRECTORY = "dir"


def classify_path(rel_path: str, *, is_dir: bool) -> PathKind:
    """Classify a repo-relative path for the tree walk.

    Any path with a ``.git`` segment is skipped, which drops the whole
    metadata subtree. Only whole segments match, so ``.github`` and
    ``.gitignore`` stay visible.
    """
    segments = rel_path.replace("\\", "/").split("/")
    if METADATA_DIR in segments:
        return PathKind.SKIP
    return PathKind.DIRECTORY if is_dir else PathKind.FILE


def file_address(repository_id: str, rel_path: str) -> str:
    """Return the external address of a file inside a repository."""
    return f"repositories/{repository_id}/files/{rel_path}"


@dataclass
class FileNode:
    """One file or directory in a repository working copy.

    ``address`` is set on file nodes only; ``children`` on directory nodes
    only, keyed by base name.
    """

    type: str
    name: str
    size: int
    address: str | None = None
    children: dict[str, FileNode] | None = None

    @property
    def is_dir(self) -> bool:
        return self.type == PathKind.DIRECTORY.value

    def to_dict(self) -> dict[str, Any]:
        """Render the node as its JSON shape."""
        data: dict[str, Any] = {
            "type": self.type,
            "name": self.name,
            "size": self.size,
        }
        if self.is_dir:
            children = self.children or {}
            data["children"] = {
                name: child.to_dict() for name, child in children.items()
            }
        else:
            data["url"] = self.address
        return data

    def iter_lines(self, depth: int = 0) -> Iterator[str]:
        """Yield an indented listing of the descendants, sorted by name."""
        for name in sorted(self.children or {}):
            child = (self.children or {})[name]
            suffix = "/" if child.is_dir else f" ({child.size} bytes)"
            yield f"{'  ' * depth}{name}{suffix}"
            if child.is_dir:
                yield from child.iter_lines(depth + 1)


def _directory_node(name: str, size: int) -> FileNode:
    return FileNode(
        type=PathKind.DIRECTORY.value,
        name=name,
        size=size,
        children={},
    )


def _scan(directory: Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as entries:
        return list(entries)


def build_tree(root_path: Path | str, repository_id: str) -> FileNode:
    """Walk *root_path* and return the root directory node of its tree.

    Directories are expanded parent-first. Each new directory node is
    registered in a relative-path index so its children are attached without
    descending from the root again.

    Raises:
        NotFoundError: If *root_path* is missing or not a directory.
        StorageError: If a directory in the working copy cannot be read.
    """
    root = Path(root_path)
    if not root.is_dir():
        raise NotFoundError(f"repository not found: {repository_id}")
    try:
        root_node = _directory_node(root.name, root.stat().st_size)
    except OSError as exc:
        raise StorageError(f"cannot read {root}: {exc.strerror}") from exc

    index: dict[str, FileNode] = {"": root_node}
    pending = [""]
    while pending:
        rel_dir = pending.pop()
        parent = index[rel_dir]
        try:
            entries = _scan(root / rel_dir if rel_dir else root)
        except FileNotFoundError:
            if not rel_dir:
                raise NotFoundError(
                    f"repository not found: {repository_id}"
                ) from None
            # Removed after its parent was listed.
            grandparent, _, name = rel_dir.rpartition("/")
            (index[grandparent].children or {}).pop(name, None)
            continue
        except OSError as exc:
            raise StorageError(
                f"cannot read {rel_dir or root}: {exc.strerror}"
            ) from exc

        assert parent.children is not None
        for entry in entries:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                kind = classify_path(rel_path, is_dir=is_dir)
                if kind is PathKind.SKIP:
                    continue
                size = entry.stat(follow_symlinks=False).st_size
            except FileNotFoundError:
                logger.debug("Entry vanished during walk: %s", rel_path)
                continue
            except OSError as exc:
                raise StorageError(
                    f"cannot stat {rel_path}: {exc.strerror}"
                ) from exc

            if kind is PathKind.DIRECTORY:
                node = _directory_node(entry.name, size)
                index[rel_path] = node
                pending.append(rel_path)
            else:
                node = FileNode(
                    type=PathKind.FILE.value,
                    name=entry.name,
                    size=size,
                    address=file_address(repository_id, rel_path),
                )
            parent.children[entry.name] = node

    return root_node
