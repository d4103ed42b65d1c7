"""GitHub filesystem provider — the single entry point for host integrations.

The provider owns a :class:`FilesystemRegistry` and a :class:`PathResolver`
and exposes the small capability surface hosts adapt to their own path
abstraction: open a locator, list a directory, classify a path, read a file.
Every mutating operation fails immediately with
:class:`ReadOnlyViolationError`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, NoReturn

from github_fs.domain.entities import AttributeRecord, DirectoryEntry, EntryKind
from github_fs.domain.exceptions import (
    HandleNotFoundError,
    InvalidArgumentError,
    PathNotFoundError,
    ReadOnlyViolationError,
    UnsupportedOperationError,
)
from github_fs.domain.ports.content_fetcher import ContentFetcher
from github_fs.domain.value_objects import SCHEME, RepoLocator
from github_fs.services.filesystem import GitHubFileSystem, GitHubPath
from github_fs.services.listing_decoder import DirectoryStream
from github_fs.services.path_resolver import READ, PathResolver
from github_fs.services.path_translator import to_filesystem_path
from github_fs.services.registry import FilesystemRegistry

_READ_ONLY_MESSAGE = "GitHub filesystem is read-only"

BASIC_VIEW = "basic"
BASIC_ATTRIBUTES: tuple[str, ...] = (
    "size",
    "creation_time",
    "modification_time",
    "is_regular_file",
    "is_directory",
    "is_symbolic_link",
    "is_other",
)


def _parse_attribute_names(names: str) -> tuple[str, ...]:
    view, sep, rest = names.partition(":")
    if sep:
        if view != BASIC_VIEW:
            raise InvalidArgumentError(f"Unsupported attribute view: '{view}'")
        names = rest
    if names.strip() == "*":
        return BASIC_ATTRIBUTES

    requested = tuple(name.strip() for name in names.split(",") if name.strip())
    if not requested:
        raise InvalidArgumentError("No attribute names given.")
    unknown = [name for name in requested if name not in BASIC_ATTRIBUTES]
    if unknown:
        raise InvalidArgumentError(f"Unknown attribute(s): {', '.join(unknown)}")
    return requested


def _attribute_value(record: AttributeRecord, name: str) -> Any:
    if name == "is_regular_file":
        return record.is_regular_file
    if name == "is_directory":
        return record.is_directory
    if name in ("is_symbolic_link", "is_other"):
        return False
    return getattr(record, name)


class GitHubFileSystemProvider:
    """Opens, tracks and serves read-only GitHub filesystems.

    Parameters
    ----------
    fetcher:
        Adapter that retrieves listing documents and file bytes.
    registry:
        Registry of live handles.  A fresh one is created when omitted, so
        independent providers never share state.
    """

    scheme = SCHEME

    def __init__(
        self,
        fetcher: ContentFetcher,
        registry: FilesystemRegistry | None = None,
    ) -> None:
        self._resolver = PathResolver(fetcher)
        self._registry = registry if registry is not None else FilesystemRegistry()

    @property
    def registry(self) -> FilesystemRegistry:
        return self._registry

    # ── Filesystem lifecycle ────────────────────────────────────────────

    def new_filesystem(self, key: str | RepoLocator) -> GitHubFileSystem:
        """Open a filesystem for a ``github://`` URI, an https URL, or a locator."""
        if isinstance(key, RepoLocator):
            locator, key_str = key, key.to_uri()
        else:
            locator, key_str = RepoLocator.parse(key), key
        return self._registry.open(key_str, locator, self._create_handle)

    def _create_handle(self, key: str, locator: RepoLocator) -> GitHubFileSystem:
        return GitHubFileSystem(self, key, locator)

    def get_filesystem(self, key: str | RepoLocator) -> GitHubFileSystem:
        key_str = key.to_uri() if isinstance(key, RepoLocator) else key
        return self._registry.lookup(key_str)

    def get_path(self, uri: str) -> GitHubPath:
        """Resolve a content URI against the open filesystems."""
        handle = self._registry.lookup_by_locator_match(uri)
        target = RepoLocator.parse(uri)
        return handle.get_path(to_filesystem_path(target.base_path, handle.locator.base_path))

    def remove_filesystem(self, handle: GitHubFileSystem) -> None:
        handle.mark_closed()
        self._registry.close(handle)

    def close_all(self) -> None:
        for handle in self._registry.close_all():
            handle.mark_closed()

    def _locate(self, path: GitHubPath) -> tuple[RepoLocator, str]:
        handle = path.filesystem
        if handle.provider is not self:
            raise InvalidArgumentError(f"Path {path} belongs to a different provider")
        if not handle.is_open:
            raise HandleNotFoundError(f"GitHub filesystem is closed: {handle.key}")
        return handle.locator, path.absolute().path_string

    # ── Read operations ─────────────────────────────────────────────────

    def list_directory(self, directory: GitHubPath) -> list[DirectoryEntry]:
        locator, fs_path = self._locate(directory)
        handle = directory.filesystem
        return [
            DirectoryEntry(name=entry.name, path=handle.get_path(entry.path), kind=entry.kind)
            for entry in self._resolver.list_directory(locator, fs_path)
        ]

    def open_directory(
        self,
        directory: GitHubPath,
        accept: Callable[[GitHubPath], bool] | None = None,
    ) -> DirectoryStream[GitHubPath]:
        """Fetch the listing now and return a single-pass filtered stream over it."""
        children = [entry.path for entry in self.list_directory(directory)]
        return DirectoryStream(children, accept)

    def exists(self, path: GitHubPath) -> bool:
        return self._resolver.exists(*self._locate(path))

    def kind(self, path: GitHubPath) -> EntryKind:
        return self._resolver.kind(*self._locate(path))

    def is_directory(self, path: GitHubPath) -> bool:
        try:
            return self.kind(path) is EntryKind.DIRECTORY
        except PathNotFoundError:
            return False

    def is_regular_file(self, path: GitHubPath) -> bool:
        try:
            return self.kind(path) is EntryKind.FILE
        except PathNotFoundError:
            return False

    def attributes(self, path: GitHubPath) -> AttributeRecord:
        return self._resolver.attributes(*self._locate(path))

    def read_attributes(self, path: GitHubPath, names: str = "*") -> dict[str, Any]:
        """Selected basic attributes, keyed by name."""
        requested = _parse_attribute_names(names)
        record = self.attributes(path)
        return {name: _attribute_value(record, name) for name in requested}

    def cached_file(self, path: GitHubPath) -> Path:
        return self._resolver.cached_file(*self._locate(path))

    def read_bytes(self, path: GitHubPath) -> bytes:
        return self._resolver.read_bytes(*self._locate(path))

    def check_access(self, path: GitHubPath, modes: Iterable[str] = (READ,)) -> None:
        locator, fs_path = self._locate(path)
        self._resolver.check_access(locator, fs_path, modes)

    def is_same_file(self, path: GitHubPath, other: GitHubPath) -> bool:
        return path == other

    def is_hidden(self, path: GitHubPath) -> bool:
        return False

    def read_symbolic_link(self, link: GitHubPath) -> NoReturn:
        raise UnsupportedOperationError("Symbolic links not supported")

    # ── Mutators ────────────────────────────────────────────────────────

    def _read_only(self) -> NoReturn:
        raise ReadOnlyViolationError(_READ_ONLY_MESSAGE)

    def create_directory(self, directory: GitHubPath) -> NoReturn:
        self._read_only()

    def create_file(self, path: GitHubPath) -> NoReturn:
        self._read_only()

    def delete(self, path: GitHubPath) -> NoReturn:
        self._read_only()

    def copy(self, source: GitHubPath, target: GitHubPath) -> NoReturn:
        self._read_only()

    def move(self, source: GitHubPath, target: GitHubPath) -> NoReturn:
        self._read_only()

    def write_bytes(self, path: GitHubPath, data: bytes) -> NoReturn:
        self._read_only()

    def new_output_stream(self, path: GitHubPath) -> NoReturn:
        self._read_only()

    def create_symbolic_link(self, link: GitHubPath, target: GitHubPath) -> NoReturn:
        self._read_only()

    def create_link(self, link: GitHubPath, existing: GitHubPath) -> NoReturn:
        self._read_only()

    def set_attribute(self, path: GitHubPath, name: str, value: Any) -> NoReturn:
        self._read_only()
