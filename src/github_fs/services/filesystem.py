"""Filesystem and path handles.

A :class:`GitHubFileSystem` is a read-only session bound to one
:class:`RepoLocator`.  A :class:`GitHubPath` is a pure reference: a
normalized ``/``-separated string relative to the locator's base path plus
the filesystem it belongs to.  All remote work is delegated to the provider.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import IO, TYPE_CHECKING

from github_fs.domain.entities import AttributeRecord, DirectoryEntry, EntryKind
from github_fs.domain.exceptions import InvalidArgumentError
from github_fs.domain.value_objects import RepoLocator
from github_fs.services.listing_decoder import DirectoryStream
from github_fs.services.path_translator import to_repo_path

if TYPE_CHECKING:
    from github_fs.services.provider import GitHubFileSystemProvider

SEPARATOR = "/"


def normalize_path(path: str) -> str:
    """Collapse duplicate separators, ``.`` and ``..`` segments; drop trailing ``/``."""
    absolute = path.startswith(SEPARATOR)
    segments: list[str] = []
    for segment in path.split(SEPARATOR):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments and segments[-1] != "..":
                segments.pop()
            elif not absolute:
                segments.append(segment)
            continue
        segments.append(segment)
    joined = SEPARATOR.join(segments)
    return SEPARATOR + joined if absolute else joined


class GitHubFileSystem:
    """Read-only view of one repository subtree."""

    def __init__(
        self, provider: GitHubFileSystemProvider, key: str, locator: RepoLocator
    ) -> None:
        self._provider = provider
        self._key = key
        self._locator = locator
        self._open = True

    @property
    def provider(self) -> GitHubFileSystemProvider:
        return self._provider

    @property
    def key(self) -> str:
        return self._key

    @property
    def locator(self) -> RepoLocator:
        return self._locator

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def is_read_only(self) -> bool:
        return True

    @property
    def separator(self) -> str:
        return SEPARATOR

    @property
    def root_directories(self) -> list[GitHubPath]:
        return [self.get_path(SEPARATOR)]

    def get_path(self, first: str, *more: str) -> GitHubPath:
        """Join the given segments into a path of this filesystem."""
        parts = [first, *(segment for segment in more if segment)]
        return GitHubPath(self, SEPARATOR.join(parts))

    def close(self) -> None:
        """Unregister from the provider.  Safe to call more than once."""
        if not self._open:
            return
        self._open = False
        self._provider.remove_filesystem(self)

    def mark_closed(self) -> None:
        self._open = False

    def __enter__(self) -> GitHubFileSystem:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"<GitHubFileSystem {self._locator.to_uri()} ({state})>"


class GitHubPath:
    """A path inside a :class:`GitHubFileSystem`; holds no remote state."""

    __slots__ = ("_filesystem", "_path")

    def __init__(self, filesystem: GitHubFileSystem, path: str) -> None:
        self._filesystem = filesystem
        self._path = normalize_path(path)

    # ── Pure path algebra ───────────────────────────────────────────────

    @property
    def filesystem(self) -> GitHubFileSystem:
        return self._filesystem

    @property
    def path_string(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return self._path.rsplit(SEPARATOR, 1)[-1]

    @property
    def parts(self) -> tuple[str, ...]:
        segments = tuple(segment for segment in self._path.split(SEPARATOR) if segment)
        return (SEPARATOR, *segments) if self.is_absolute() else segments

    @property
    def parent(self) -> GitHubPath:
        if self._path in (SEPARATOR, ""):
            return self
        head, _, _ = self._path.rpartition(SEPARATOR)
        if not head:
            return GitHubPath(self._filesystem, SEPARATOR if self.is_absolute() else "")
        return GitHubPath(self._filesystem, head)

    def is_absolute(self) -> bool:
        return self._path.startswith(SEPARATOR)

    def is_root(self) -> bool:
        return self._path == SEPARATOR

    def joinpath(self, *others: str | GitHubPath) -> GitHubPath:
        path = self._path
        for other in others:
            other_str = other.path_string if isinstance(other, GitHubPath) else other
            if other_str.startswith(SEPARATOR):
                path = other_str
            elif path:
                path = f"{path}{SEPARATOR}{other_str}"
            else:
                path = other_str
        return GitHubPath(self._filesystem, path)

    def __truediv__(self, other: str | GitHubPath) -> GitHubPath:
        return self.joinpath(other)

    def relative_to(self, other: GitHubPath | str) -> GitHubPath:
        base = other.path_string if isinstance(other, GitHubPath) else normalize_path(other)
        if self._path == base:
            return GitHubPath(self._filesystem, "")
        prefix = base if base.endswith(SEPARATOR) else base + SEPARATOR
        if not self._path.startswith(prefix):
            raise InvalidArgumentError(f"{self._path!r} is not relative to {base!r}")
        return GitHubPath(self._filesystem, self._path[len(prefix):])

    def absolute(self) -> GitHubPath:
        return self if self.is_absolute() else GitHubPath(self._filesystem, SEPARATOR + self._path)

    def repo_path(self) -> str:
        """Repository-relative path this path maps to."""
        return to_repo_path(self.absolute().path_string, self._filesystem.locator.base_path)

    def as_uri(self) -> str:
        """``github://`` URI naming this path (resolvable via ``provider.get_path``)."""
        locator = self._filesystem.locator
        return RepoLocator(locator.owner, locator.repo, locator.ref, self.repo_path()).to_uri()

    # ── Remote queries (delegated) ──────────────────────────────────────

    def exists(self) -> bool:
        return self._filesystem.provider.exists(self)

    def is_dir(self) -> bool:
        return self._filesystem.provider.is_directory(self)

    def is_file(self) -> bool:
        return self._filesystem.provider.is_regular_file(self)

    def kind(self) -> EntryKind:
        return self._filesystem.provider.kind(self)

    def stat(self) -> AttributeRecord:
        return self._filesystem.provider.attributes(self)

    def entries(self) -> list[DirectoryEntry]:
        return self._filesystem.provider.list_directory(self)

    def iterdir(self) -> Iterator[GitHubPath]:
        return iter([entry.path for entry in self.entries()])

    def open_directory(
        self, accept: Callable[[GitHubPath], bool] | None = None
    ) -> DirectoryStream[GitHubPath]:
        return self._filesystem.provider.open_directory(self, accept)

    def read_bytes(self) -> bytes:
        return self._filesystem.provider.read_bytes(self)

    def read_text(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        return self.read_bytes().decode(encoding, errors)

    def open(self, mode: str = "r", encoding: str | None = None) -> IO:
        """Open for reading only; any writing mode is rejected."""
        if any(flag in mode for flag in "wax+"):
            self._filesystem.provider.new_output_stream(self)
        local = self._filesystem.provider.cached_file(self)
        if "b" in mode:
            return local.open("rb")
        return local.open("r", encoding=encoding or "utf-8")

    # ── Mutators (always rejected) ──────────────────────────────────────

    def write_bytes(self, data: bytes) -> int:
        return self._filesystem.provider.write_bytes(self, data)

    def write_text(self, data: str, encoding: str = "utf-8") -> int:
        return self._filesystem.provider.write_bytes(self, data.encode(encoding))

    def mkdir(self) -> None:
        self._filesystem.provider.create_directory(self)

    def unlink(self) -> None:
        self._filesystem.provider.delete(self)

    def rmdir(self) -> None:
        self._filesystem.provider.delete(self)

    def rename(self, target: GitHubPath) -> GitHubPath:
        self._filesystem.provider.move(self, target)
        return target

    def touch(self) -> None:
        self._filesystem.provider.create_file(self)

    def symlink_to(self, target: GitHubPath) -> None:
        self._filesystem.provider.create_symbolic_link(self, target)

    # ── Dunder ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"GitHubPath({self._path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GitHubPath):
            return NotImplemented
        return self._filesystem is other._filesystem and self._path == other._path

    def __hash__(self) -> int:
        return hash((id(self._filesystem), self._path))