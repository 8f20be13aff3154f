"""Repository storage: clone, enumerate, and address local checkouts.

Repositories live directly under a storage root, each in a directory named
by its identifier (see ``repo_harbor.lib.identifier``). There is no index:
the set of repositories is whatever identifier-named directories exist on
disk, and every read rebuilds the file tree from the working copy.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from repo_harbor.lib.command import CommandResult
from repo_harbor.lib.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    StorageError,
)
from repo_harbor.lib.filesystem import (
    is_metadata_path,
    overwrite_file_bytes,
    resolve_repo_target,
)
from repo_harbor.lib.identifier import display_name, identifier_of, is_repository_id
from repo_harbor.lib.providers import (
    GIT_PROVIDER,
    BuildProvider,
    IOSSimLaunchProvider,
    LaunchProvider,
    SourceControlProvider,
    XcodeBuildProvider,
    find_app_name,
)
from repo_harbor.lib.tree import FileNode, build_tree

__all__ = ["Repository", "RepositoryStore"]

logger = logging.getLogger(__name__)


@dataclass
class Repository:
    """A locally cloned repository and, once built, its file tree."""

    id: str
    name: str
    url: str
    files: FileNode | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "name": self.name, "url": self.url}
        if self.files is not None:
            data["files"] = self.files.to_dict()
        return data


class RepositoryStore:
    """Operations on the repositories under one storage root.

    The store holds no per-repository state; every method takes the
    repository id and reads the filesystem afresh.
    """

    def __init__(
        self,
        storage_root: Path,
        *,
        source_control: SourceControlProvider = GIT_PROVIDER,
        builder: BuildProvider | None = None,
        launcher: LaunchProvider | None = None,
    ) -> None:
        self.storage_root = storage_root
        self.source_control = source_control
        self.builder = builder or XcodeBuildProvider()
        self.launcher = launcher or IOSSimLaunchProvider()

    def path_for(self, repository_id: str) -> Path:
        """Return the checkout directory of an existing repository."""
        if not is_repository_id(repository_id):
            raise NotFoundError(f"repository not found: {repository_id}")
        path = self.storage_root / repository_id
        if not path.is_dir():
            raise NotFoundError(f"repository not found: {repository_id}")
        return path

    def _load(self, repository_id: str, path: Path) -> Repository:
        url = self.source_control.query_remote_url(path).strip()
        return Repository(
            id=repository_id,
            name=display_name(url),
            url=url,
            files=build_tree(path, repository_id),
        )

    def load(self, repository_id: str) -> Repository:
        """Return the repository with a freshly built file tree."""
        return self._load(repository_id, self.path_for(repository_id))

    def list_local(self) -> list[Repository]:
        """Return every repository present under the storage root.

        Only directories named like an identifier are considered. A failure
        on any one of them fails the whole listing.
        """
        if not self.storage_root.is_dir():
            return []
        try:
            entries = sorted(self.storage_root.iterdir())
        except OSError as exc:
            raise StorageError(
                f"cannot list {self.storage_root}: {exc.strerror}"
            ) from exc

        repositories: list[Repository] = []
        for entry in entries:
            if entry.is_dir() and is_repository_id(entry.name):
                repositories.append(self._load(entry.name, entry))
        return repositories

    def create(self, url: str) -> Repository:
        """Clone *url* into the store and return it with its file tree.

        The identifier is computed from *url* exactly as given. If the
        clone succeeds but loading fails, the checkout is left in place.
        """
        if not url or not url.strip():
            raise InvalidRequestError("url is required")

        repository_id = identifier_of(url)
        dest = self.storage_root / repository_id
        if dest.exists():
            raise ConflictError("repo already exists")

        try:
            self.storage_root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"cannot create {self.storage_root}: {exc.strerror}"
            ) from exc
        self.source_control.clone(url, dest)
        return self.load(repository_id)

    def delete(self, repository_id: str) -> None:
        """Remove a repository's checkout from disk."""
        path = self.path_for(repository_id)
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise StorageError(f"cannot delete {repository_id}: {exc}") from exc
        logger.info("Deleted repository %s", repository_id)

    def open_file(self, repository_id: str, rel_path: str) -> Path:
        """Resolve an addressable file inside a repository.

        Raises:
            NotFoundError: Unknown repository, missing file, a directory, or
                a path inside version-control metadata.
            InvalidRequestError: A path that escapes the checkout.
        """
        root = self.path_for(repository_id)
        try:
            target = resolve_repo_target(root, rel_path)
        except ValueError as exc:
            raise InvalidRequestError(f"invalid path: {rel_path}") from exc
        if is_metadata_path(target.relative_to(root.resolve()).as_posix()):
            raise NotFoundError(f"file not found: {rel_path}")
        if not target.is_file():
            raise NotFoundError(f"file not found: {rel_path}")
        return target

    def write_file(self, repository_id: str, rel_path: str, data: bytes) -> None:
        """Overwrite an existing repository file, keeping its mode.

        Missing files are not created.
        """
        target = self.open_file(repository_id, rel_path)
        try:
            overwrite_file_bytes(target, data)
        except FileNotFoundError as exc:
            raise NotFoundError(f"file not found: {rel_path}") from exc
        except OSError as exc:
            raise StorageError(f"cannot write {rel_path}: {exc.strerror}") from exc
        logger.info("Wrote %d bytes to %s/%s", len(data), repository_id, rel_path)

    def build(self, repository_id: str) -> CommandResult:
        """Run the build provider in the repository checkout."""
        path = self.path_for(repository_id)
        return self.builder.build(path)

    def launch(self, repository_id: str) -> CommandResult:
        """Launch the repository's built application."""
        path = self.path_for(repository_id)
        return self.launcher.launch(path, find_app_name(path))
