"""Shared fixtures and in-process provider fakes for repo_harbor tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from repo_harbor.lib.command import CommandResult
from repo_harbor.lib.errors import ProviderError
from repo_harbor.lib.identifier import identifier_of
from repo_harbor.lib.providers import (
    BuildProvider,
    LaunchProvider,
    SourceControlProvider,
)
from repo_harbor.lib.repo import RepositoryStore

DEFAULT_FILES: dict[str, bytes] = {
    "README.md": b"# demo\n",
    "App/main.swift": b"print(1)\n",
}


class FakeSourceControl(SourceControlProvider):
    """Creates checkouts on disk and remembers their origin URLs."""

    name = "fake"

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self.files = DEFAULT_FILES if files is None else files
        self.remotes: dict[str, str] = {}
        self.clone_calls: list[tuple[str, Path]] = []
        self.fail_clone = False
        self.record_remote = True

    def clone(self, url: str, dest: Path) -> None:
        self.clone_calls.append((url, dest))
        if self.fail_clone:
            raise ProviderError(f"failed to clone {url}: remote hung up")
        dest.mkdir()
        (dest / ".git").mkdir()
        (dest / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        for rel_path, data in self.files.items():
            target = dest / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        if self.record_remote:
            self.remotes[dest.name] = url

    def query_remote_url(self, path: Path) -> str:
        try:
            # Raw provider output carries a trailing newline.
            return self.remotes[path.name] + "\n"
        except KeyError:
            raise ProviderError(f"no origin remote configured for {path.name}")

    def seed(self, storage_root: Path, url: str) -> Path:
        """Create a checkout for *url* as if it had been cloned earlier."""
        storage_root.mkdir(parents=True, exist_ok=True)
        dest = storage_root / identifier_of(url)
        self.clone(url, dest)
        self.clone_calls.clear()
        return dest


class FakeBuilder(BuildProvider):
    name = "fake-build"

    def __init__(self, exit_code: int = 0, output: str = "BUILD SUCCEEDED\n") -> None:
        self.exit_code = exit_code
        self.output = output
        self.calls: list[Path] = []

    def build(self, path: Path) -> CommandResult:
        self.calls.append(path)
        return CommandResult(
            command=["xcodebuild"],
            cwd=str(path),
            exit_code=self.exit_code,
            stdout=self.output,
            stderr="",
        )


class FakeLauncher(LaunchProvider):
    name = "fake-launch"

    def __init__(self, exit_code: int = 0, output: str = "launched\n") -> None:
        self.exit_code = exit_code
        self.output = output
        self.calls: list[tuple[Path, str]] = []

    def launch(self, path: Path, app_name: str) -> CommandResult:
        self.calls.append((path, app_name))
        return CommandResult(
            command=["ios-sim", "launch", f"{app_name}.app"],
            cwd=str(path),
            exit_code=self.exit_code,
            stdout=self.output,
            stderr="",
        )


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def source_control() -> FakeSourceControl:
    return FakeSourceControl()


@pytest.fixture
def builder() -> FakeBuilder:
    return FakeBuilder()


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def store(
    storage_root: Path,
    source_control: FakeSourceControl,
    builder: FakeBuilder,
    launcher: FakeLauncher,
) -> RepositoryStore:
    return RepositoryStore(
        storage_root,
        source_control=source_control,
        builder=builder,
        launcher=launcher,
    )
