"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class GitHubFsError(Exception):
    """Base exception for the entire library."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidLocatorError(GitHubFsError):
    """The supplied URI / URL does not identify a GitHub repository subtree."""


class InvalidArgumentError(GitHubFsError):
    """An argument is outside the accepted set (e.g. unknown attribute name)."""


# ── Registry errors ─────────────────────────────────────────────────────────


class AlreadyOpenError(GitHubFsError):
    """A filesystem is already open for this key."""


class HandleNotFoundError(GitHubFsError):
    """No open filesystem is registered for this key or URI."""


# ── Remote errors ───────────────────────────────────────────────────────────


class PathNotFoundError(GitHubFsError):
    """The remote responded 404 for the requested path."""


class NotADirectoryPathError(GitHubFsError):
    """A directory operation was attempted on a file."""


class TransportError(GitHubFsError):
    """Non-404 HTTP error or connectivity failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedRemoteResponseError(GitHubFsError):
    """The remote document does not match the listing / file schema."""


# ── Read-only contract ──────────────────────────────────────────────────────


class ReadOnlyViolationError(GitHubFsError):
    """A mutating operation was attempted on the read-only filesystem."""


class UnsupportedOperationError(GitHubFsError):
    """The operation has no meaning for a GitHub filesystem."""


class StreamConsumedError(GitHubFsError):
    """A directory stream was iterated more than once."""
