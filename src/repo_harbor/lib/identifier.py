"""Repository identifiers derived from source URLs.

An identifier is the MD5 hex digest of the clone URL exactly as submitted.
It names the repository's directory under the storage root and is the key
clients use to address the repository over HTTP.
"""

from __future__ import annotations

__all__ = ["display_name", "identifier_of", "is_repository_id"]

import hashlib
import re

_IDENTIFIER_PATTERN = re.compile(r"[0-9a-f]{32}")


def identifier_of(url: str) -> str:
    """Return the 32-character hex identifier for *url*."""
    return hashlib.md5(url.encode("utf-8"), usedforsecurity=False).hexdigest()


def is_repository_id(name: str) -> bool:
    """Return whether *name* has the shape of a repository identifier."""
    return _IDENTIFIER_PATTERN.fullmatch(name) is not None


def display_name(url: str) -> str:
    """Derive a display name from the last path segment of *url*.

    ``https://github.com/owner/app.git`` and ``git@host:owner/app`` both
    yield ``app``.
    """
    trimmed = url.strip().rstrip("/")
    last = re.split(r"[/:]", trimmed)[-1]
    return last.removesuffix(".git")
