"""Xcode build and iOS simulator launch providers."""

from __future__ import annotations

__all__ = [
    "DEFAULT_APP_DIR",
    "DEFAULT_BUILD_COMMAND",
    "IOSSimLaunchProvider",
    "XcodeBuildProvider",
    "find_app_name",
]

import logging
from collections.abc import Sequence
from pathlib import Path

from repo_harbor.lib.command import CommandResult, run_command
from repo_harbor.lib.errors import ProviderError
from repo_harbor.lib.providers.types import BuildProvider, LaunchProvider

logger = logging.getLogger(__name__)

DEFAULT_BUILD_COMMAND: tuple[str, ...] = (
    "xcodebuild",
    "-arch",
    "i386",
    "-sdk",
    "iphonesimulator",
)
DEFAULT_APP_DIR = "build/Release-iphonesimulator"

_PROJECT_SUFFIX = ".xcodeproj"


def find_app_name(path: Path) -> str:
    """Return the project name of the first ``*.xcodeproj`` in *path*."""
    projects = sorted(
        entry.name for entry in path.iterdir() if entry.name.endswith(_PROJECT_SUFFIX)
    )
    if not projects:
        msg = f"no {_PROJECT_SUFFIX} project found in {path.name}"
        raise ProviderError(msg)
    return projects[0].removesuffix(_PROJECT_SUFFIX)


def _run(command: list[str], *, cwd: Path) -> CommandResult:
    try:
        return run_command(command, cwd=cwd, combine_output=True)
    except OSError as exc:
        msg = f"failed to run {command[0]}: {exc}"
        raise ProviderError(msg) from exc


class XcodeBuildProvider(BuildProvider):
    """Runs ``xcodebuild`` for the simulator SDK."""

    name = "xcodebuild"

    def __init__(self, command: Sequence[str] = DEFAULT_BUILD_COMMAND) -> None:
        if not command:
            raise ValueError("build command must be non-empty")
        self.command = tuple(command)

    def build(self, path: Path) -> CommandResult:
        """Build the project at *path*; output interleaves stdout and stderr."""
        result = _run(list(self.command), cwd=path)
        if not result.success:
            logger.warning(
                "Build failed in %s with exit code %d", path.name, result.exit_code
            )
        return result


class IOSSimLaunchProvider(LaunchProvider):
    """Launches a simulator build with ``ios-sim``."""

    name = "ios-sim"

    def __init__(
        self, *, app_dir: str = DEFAULT_APP_DIR, executable: str = "ios-sim"
    ) -> None:
        self.app_dir = app_dir.rstrip("/")
        self.executable = executable

    def launch(self, path: Path, app_name: str) -> CommandResult:
        """Launch ``<app_dir>/<app_name>.app`` from the checkout at *path*."""
        bundle = f"{self.app_dir}/{app_name}.app"
        result = _run([self.executable, "launch", bundle], cwd=path)
        logger.info("ios-sim launch %s exited %d", bundle, result.exit_code)
        if result.output:
            logger.debug("ios-sim output:\n%s", result.output)
        return result
