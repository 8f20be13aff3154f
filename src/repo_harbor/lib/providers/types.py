"""Shared provider interfaces.

The repository store talks to external tooling only through these
interfaces. The concrete classes in ``repo_harbor.lib.providers`` shell out
to ``git``, ``xcodebuild`` and ``ios-sim``; tests substitute in-process fakes.
"""

from __future__ import annotations

import abc
from pathlib import Path

from repo_harbor.lib.command import CommandResult


class SourceControlProvider(abc.ABC):
    """Clones repositories and reports where a checkout came from."""

    name: str

    @abc.abstractmethod
    def clone(self, url: str, dest: Path) -> None:
        """Clone *url* into *dest*, raising ``ProviderError`` on failure."""

    @abc.abstractmethod
    def query_remote_url(self, path: Path) -> str:
        """Return the origin URL of the checkout at *path*.

        Raises ``ProviderError`` when the URL cannot be recovered.
        """


class BuildProvider(abc.ABC):
    """Builds the application project in a checkout."""

    name: str

    @abc.abstractmethod
    def build(self, path: Path) -> CommandResult:
        """Build the project at *path* and return the captured output."""


class LaunchProvider(abc.ABC):
    """Launches a built application."""

    name: str

    @abc.abstractmethod
    def launch(self, path: Path, app_name: str) -> CommandResult:
        """Launch *app_name* from the build products under *path*."""
