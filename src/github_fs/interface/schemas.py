"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from github_fs.domain.entities import AttributeRecord, DirectoryEntry, EntryKind
from github_fs.services.filesystem import GitHubFileSystem


class OpenFilesystemRequest(BaseModel):
    """Request body for ``POST /filesystems``."""

    locator: str

    @field_validator("locator")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "locator must not be empty."
            raise ValueError(msg)
        return v


class FilesystemResponse(BaseModel):
    """An open filesystem handle."""

    key: str
    uri: str
    owner: str
    repo: str
    ref: str
    base_path: str

    @classmethod
    def from_handle(cls, handle: GitHubFileSystem) -> FilesystemResponse:
        locator = handle.locator
        return cls(
            key=handle.key,
            uri=locator.to_uri(),
            owner=locator.owner,
            repo=locator.repo,
            ref=locator.ref,
            base_path=locator.base_path,
        )


class EntryResponse(BaseModel):
    """One child of a listed directory."""

    name: str
    path: str
    kind: EntryKind

    @classmethod
    def from_entry(cls, entry: DirectoryEntry) -> EntryResponse:
        return cls(name=entry.name, path=entry.path.path_string, kind=entry.kind)


class AttributesResponse(BaseModel):
    """Basic attributes of a path."""

    kind: EntryKind
    size: int | None = None
    creation_time: datetime | None = None
    modification_time: datetime | None = None

    @classmethod
    def from_record(cls, record: AttributeRecord) -> AttributesResponse:
        return cls(
            kind=record.kind,
            size=record.size,
            creation_time=record.creation_time,
            modification_time=record.modification_time,
        )


class ExistsResponse(BaseModel):
    exists: bool


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
