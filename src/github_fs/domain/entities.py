"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from github_fs.services.filesystem import GitHubPath


class EntryKind(str, Enum):
    """Classification of a repository node."""

    FILE = "file"
    DIRECTORY = "dir"


@dataclass(frozen=True, slots=True)
class ListingEntry:
    """A decoded listing element, still in filesystem-relative form."""

    name: str
    path: str
    kind: EntryKind


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A child of a listed directory, bound to its owning filesystem."""

    name: str
    path: GitHubPath
    kind: EntryKind


@dataclass(frozen=True, slots=True)
class AttributeRecord:
    """Basic attributes of a path, derived per query and never cached."""

    kind: EntryKind
    size: int | None = None
    creation_time: datetime | None = None
    modification_time: datetime | None = None

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_regular_file(self) -> bool:
        return self.kind is EntryKind.FILE
