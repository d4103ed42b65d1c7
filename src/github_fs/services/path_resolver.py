"""Path resolver — answer existence, kind and listing queries for one path.

Every query issues exactly one fetch through the :class:`ContentFetcher`
port; nothing is cached between calls because ``ref`` may be a moving branch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import quote

from github_fs.domain.entities import AttributeRecord, EntryKind, ListingEntry
from github_fs.domain.exceptions import (
    InvalidArgumentError,
    NotADirectoryPathError,
    PathNotFoundError,
    ReadOnlyViolationError,
)
from github_fs.domain.ports.content_fetcher import ContentFetcher
from github_fs.domain.value_objects import RepoLocator
from github_fs.services.listing_decoder import decode_document, decode_entries, decode_item
from github_fs.services.path_translator import to_repo_path

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com/repos"
RAW_BASE = "https://raw.githubusercontent.com"

READ = "read"
WRITE = "write"
EXECUTE = "execute"


def listing_url(locator: RepoLocator, repo_path: str) -> str:
    """Contents-API URL for *repo_path* (which must start with ``/``).

    Path segments and the ref are percent-encoded, so names such as ``C#`` or
    ``a?b`` reach the API intact.
    """
    path = quote(repo_path, safe="/")
    ref = quote(locator.ref, safe="")
    return f"{API_BASE}/{locator.owner}/{locator.repo}/contents{path}?ref={ref}"


def raw_content_url(locator: RepoLocator, repo_path: str) -> str:
    """raw.githubusercontent.com URL for *repo_path*."""
    path = quote(repo_path, safe="/")
    # Slashes in a ref stay literal on the raw host.
    ref = quote(locator.ref, safe="/")
    return f"{RAW_BASE}/{locator.owner}/{locator.repo}/{ref}{path}"


def _absolute(fs_path: str) -> str:
    return fs_path if fs_path.startswith("/") else "/" + fs_path


class PathResolver:
    """Resolves filesystem-relative paths of one locator against the remote."""

    def __init__(self, fetcher: ContentFetcher) -> None:
        self._fetcher = fetcher

    # ── URLs ────────────────────────────────────────────────────────────

    def listing_url_for(self, locator: RepoLocator, fs_path: str) -> str:
        return listing_url(locator, to_repo_path(_absolute(fs_path), locator.base_path))

    def raw_url_for(self, locator: RepoLocator, fs_path: str) -> str:
        return raw_content_url(locator, to_repo_path(_absolute(fs_path), locator.base_path))

    def _fetch_listing(self, locator: RepoLocator, fs_path: str) -> list | dict:
        url = self.listing_url_for(locator, fs_path)
        logger.debug("Fetching listing %s", url)
        return decode_document(self._fetcher.fetch_text(url))

    # ── Queries ─────────────────────────────────────────────────────────

    def exists(self, locator: RepoLocator, fs_path: str) -> bool:
        """True unless the remote reports 404; other failures propagate."""
        try:
            self._fetcher.fetch_text(self.listing_url_for(locator, fs_path))
        except PathNotFoundError:
            return False
        return True

    def kind(self, locator: RepoLocator, fs_path: str) -> EntryKind:
        """Directory for an array response, else the record's ``type``."""
        document = self._fetch_listing(locator, fs_path)
        if isinstance(document, list):
            return EntryKind.DIRECTORY
        return decode_item(document).kind

    def attributes(self, locator: RepoLocator, fs_path: str) -> AttributeRecord:
        document = self._fetch_listing(locator, fs_path)
        if isinstance(document, list):
            return AttributeRecord(kind=EntryKind.DIRECTORY)
        item = decode_item(document)
        kind = item.kind
        return AttributeRecord(
            kind=kind,
            size=item.size if kind is EntryKind.FILE else None,
        )

    def list_directory(self, locator: RepoLocator, fs_path: str) -> list[ListingEntry]:
        """Children of *fs_path*, as filesystem-relative entries in remote order."""
        document = self._fetch_listing(locator, fs_path)
        if not isinstance(document, list):
            raise NotADirectoryPathError(f"Not a directory: {_absolute(fs_path)}")
        return decode_entries(document, locator.base_path)

    # ── Content ─────────────────────────────────────────────────────────

    def cached_file(self, locator: RepoLocator, fs_path: str) -> Path:
        """Local copy of the file's bytes (fetched once per URL by the fetcher)."""
        url = self.raw_url_for(locator, fs_path)
        logger.debug("Fetching content %s", url)
        return self._fetcher.fetch_and_cache_file(url)

    def read_bytes(self, locator: RepoLocator, fs_path: str) -> bytes:
        return self.cached_file(locator, fs_path).read_bytes()

    def check_access(
        self, locator: RepoLocator, fs_path: str, modes: Iterable[str] = ()
    ) -> None:
        """Raise unless *fs_path* exists and every mode is ``read``."""
        if not self.exists(locator, fs_path):
            raise PathNotFoundError(f"No such file: {_absolute(fs_path)}")
        for mode in modes:
            if mode in (WRITE, EXECUTE):
                raise ReadOnlyViolationError("GitHub filesystem is read-only")
            if mode != READ:
                raise InvalidArgumentError(f"Unknown access mode: {mode!r}")
