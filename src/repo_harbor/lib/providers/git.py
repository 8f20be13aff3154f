"""Git source-control provider."""

from __future__ import annotations

__all__ = ["GIT_PROVIDER", "GitProvider"]

import logging
from pathlib import Path

from repo_harbor.lib.command import run_command
from repo_harbor.lib.errors import ProviderError
from repo_harbor.lib.git_utils import git_noninteractive_env, redact_sensitive
from repo_harbor.lib.providers.types import SourceControlProvider

logger = logging.getLogger(__name__)


class GitProvider(SourceControlProvider):
    """Wrapper around the ``git`` executable."""

    name = "git"

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    def clone(self, url: str, dest: Path) -> None:
        """Run ``git clone --recursive`` into *dest*."""
        safe_url = redact_sensitive(url)
        try:
            result = run_command(
                [self.executable, "clone", "--recursive", url, str(dest)],
                cwd=dest.parent,
                env=git_noninteractive_env(),
            )
        except OSError as exc:
            msg = f"failed to run {self.executable}: {exc}"
            raise ProviderError(msg) from exc

        if not result.success:
            stderr = redact_sensitive(result.stderr.strip()) or "unknown git clone error"
            msg = f"failed to clone {safe_url}: {stderr}"
            logger.error(msg)
            raise ProviderError(msg, output=stderr)
        logger.info("Cloned %s → %s", safe_url, dest)

    def query_remote_url(self, path: Path) -> str:
        """Return ``remote.origin.url`` of the checkout at *path*, trimmed."""
        try:
            result = run_command(
                [self.executable, "config", "--get", "remote.origin.url"],
                cwd=path,
                env=git_noninteractive_env(),
            )
        except OSError as exc:
            msg = f"failed to run {self.executable}: {exc}"
            raise ProviderError(msg) from exc

        url = result.stdout.strip()
        if not result.success or not url:
            msg = f"no origin remote configured for {path.name}"
            raise ProviderError(msg, output=result.stderr)
        return url


GIT_PROVIDER = GitProvider()
