"""Filesystem registry — at most one live handle per opening key.

The registry is an ordinary object: the provider owns one, tests build their
own.  All mutation happens under a single lock so that ``open`` is an atomic
check-and-insert even when called from many threads.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from github_fs.domain.exceptions import AlreadyOpenError, HandleNotFoundError
from github_fs.domain.value_objects import RepoLocator

if TYPE_CHECKING:
    from github_fs.services.filesystem import GitHubFileSystem

logger = logging.getLogger(__name__)

HandleFactory = Callable[[str, RepoLocator], "GitHubFileSystem"]


class FilesystemRegistry:
    """Thread-safe mapping of opening key → :class:`GitHubFileSystem`."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # Insertion order doubles as opening order for locator matching.
        self._handles: dict[str, GitHubFileSystem] = {}

    def open(self, key: str, locator: RepoLocator, factory: HandleFactory) -> GitHubFileSystem:
        """Construct and register a handle for *key*, or fail if one is live."""
        with self._lock:
            if key in self._handles:
                raise AlreadyOpenError(f"FileSystem already exists for: {key}")
            handle = factory(key, locator)
            self._handles[key] = handle
        logger.info("Opened GitHub filesystem %s", key)
        return handle

    def lookup(self, key: str) -> GitHubFileSystem:
        with self._lock:
            handle = self._handles.get(key)
        if handle is None:
            raise HandleNotFoundError(f"GitHub filesystem not found for: {key}")
        return handle

    def lookup_by_locator_match(self, uri: str) -> GitHubFileSystem:
        """Most recently opened handle whose locator contains *uri*."""
        with self._lock:
            candidates = list(self._handles.values())
        for handle in reversed(candidates):
            if handle.locator.matches(uri):
                return handle
        raise HandleNotFoundError(f"No filesystem found for: {uri}")

    def close(self, handle: GitHubFileSystem) -> None:
        """Drop every key bound to *handle*; closing twice is a no-op."""
        with self._lock:
            keys = [key for key, value in self._handles.items() if value is handle]
            for key in keys:
                del self._handles[key]
        if keys:
            logger.info("Closed GitHub filesystem %s", ", ".join(keys))

    def close_all(self) -> list[GitHubFileSystem]:
        """Remove every handle and return them."""
        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()
        return handles

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._handles)

    def handles(self) -> list[GitHubFileSystem]:
        """Snapshot of the open handles, oldest first."""
        with self._lock:
            return list(self._handles.values())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)
