"""Error taxonomy shared by the repository store, providers, and server.

Each error carries the HTTP status the server renders it with. Client errors
(4xx) are actionable by the caller and their message is returned verbatim;
server errors (5xx) are logged and rendered with a generic message.
"""

from __future__ import annotations

__all__ = [
    "ConflictError",
    "InvalidRequestError",
    "NotFoundError",
    "ProviderError",
    "RepoHarborError",
    "StorageError",
]


class RepoHarborError(Exception):
    """Base class for errors raised by repo_harbor operations."""

    status_code: int = 500

    @property
    def is_client_error(self) -> bool:
        """Return whether the caller can act on this error."""
        return self.status_code < 500


class InvalidRequestError(RepoHarborError):
    """Bad or missing input, such as an empty clone URL."""

    status_code = 400


class ConflictError(RepoHarborError):
    """The repository identifier is already present on disk."""

    status_code = 400


class NotFoundError(RepoHarborError):
    """Unknown repository id or file path."""

    status_code = 404

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class ProviderError(RepoHarborError):
    """A clone/build/launch process failed or could not be started."""

    status_code = 500

    def __init__(self, message: str, *, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class StorageError(RepoHarborError):
    """Filesystem read/write failure unrelated to existence."""

    status_code = 500
