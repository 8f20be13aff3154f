"""Path-confined file helpers for repository working copies.

These helpers provide a narrow interface for safe path handling and raw byte
I/O inside a repository root. The repository store uses them so file
addressing is centralized and cannot escape the checkout.
"""

from __future__ import annotations

__all__ = [
    "is_metadata_path",
    "normalize_relative_path",
    "overwrite_file_bytes",
    "resolve_repo_target",
]

import os
import stat
from pathlib import Path

from repo_harbor.lib.tree import PathKind, classify_path


def normalize_relative_path(rel_path: str) -> str:
    """Normalize a repo-relative path to a safe forward-slash form."""
    normalized = rel_path.strip().replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def resolve_repo_target(repo_root: Path, rel_path: str) -> Path:
    """Resolve a relative path inside ``repo_root`` or raise ``ValueError``."""
    root = repo_root.resolve()
    normalized = normalize_relative_path(rel_path)
    if not normalized or normalized.startswith("/"):
        raise ValueError("invalid path")

    target = (root / normalized).resolve()
    try:
        target.relative_to(root)
    except ValueError as exc:
        raise ValueError("invalid path") from exc
    if target == root:
        raise ValueError("invalid path")
    return target


def is_metadata_path(rel_path: str) -> bool:
    """Return whether *rel_path* points into version-control metadata."""
    normalized = normalize_relative_path(rel_path)
    return classify_path(normalized, is_dir=False) is PathKind.SKIP


def overwrite_file_bytes(target: Path, data: bytes) -> None:
    """Replace the contents of an existing file, keeping its permission bits.

    Raises ``FileNotFoundError`` if *target* does not exist and
    ``IsADirectoryError`` if it is a directory; the file is never created.
    """
    info = target.stat()
    if stat.S_ISDIR(info.st_mode):
        raise IsADirectoryError("path is a directory")
    mode = stat.S_IMODE(info.st_mode)
    # No O_CREAT: a file removed since the stat is not recreated.
    fd = os.open(target, os.O_WRONLY | os.O_TRUNC)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)
    os.chmod(target, mode)
