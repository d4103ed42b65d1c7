"""Listing decoder — turn a contents-API document into typed entries.

A directory is returned by the API as a JSON array, a file as a single
object.  Every array element must carry ``path`` and ``type``; a malformed
element aborts the whole listing rather than being skipped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from github_fs.domain.entities import EntryKind, ListingEntry
from github_fs.domain.exceptions import (
    MalformedRemoteResponseError,
    StreamConsumedError,
)
from github_fs.services.path_translator import to_filesystem_path

logger = logging.getLogger(__name__)

T = TypeVar("T")

_KIND_BY_TYPE: dict[str, EntryKind] = {
    "file": EntryKind.FILE,
    "symlink": EntryKind.FILE,
    "dir": EntryKind.DIRECTORY,
    # A submodule lists as a single object, never an array.
    "submodule": EntryKind.FILE,
}


class ContentItem(BaseModel):
    """One record of the GitHub contents API."""

    model_config = ConfigDict(extra="ignore")

    path: str
    type: str
    name: str | None = None
    size: int | None = None
    sha: str | None = None
    download_url: str | None = None

    @property
    def kind(self) -> EntryKind:
        return kind_of(self.type)


def kind_of(remote_type: str) -> EntryKind:
    """Classify a contents-API ``type`` value."""
    try:
        return _KIND_BY_TYPE[remote_type]
    except KeyError:
        raise MalformedRemoteResponseError(
            f"Unknown content type '{remote_type}' in remote response."
        ) from None


def decode_document(text: str) -> list[Any] | dict[str, Any]:
    """Parse the raw response body; only arrays and objects are accepted."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedRemoteResponseError(f"Response is not valid JSON: {exc}") from exc
    if not isinstance(document, (list, dict)):
        raise MalformedRemoteResponseError(
            f"Expected a JSON array or object, got {type(document).__name__}."
        )
    return document


def decode_item(element: Any) -> ContentItem:
    """Validate a single record, translating schema errors."""
    try:
        return ContentItem.model_validate(element)
    except ValidationError as exc:
        raise MalformedRemoteResponseError(f"Malformed listing entry: {exc}") from exc


def decode_entries(document: list[Any], base_path: str) -> list[ListingEntry]:
    """Decode a directory listing, preserving the remote ordering."""
    entries: list[ListingEntry] = []
    for element in document:
        item = decode_item(element)
        fs_path = to_filesystem_path(item.path, base_path)
        name = item.name or fs_path.rsplit("/", 1)[-1]
        entries.append(ListingEntry(name=name, path=fs_path, kind=item.kind))
    return entries


class DirectoryStream(Generic[T]):
    """Finite, single-pass view over a decoded listing.

    ``accept`` may reject entries; if it raises, that entry is excluded and
    iteration continues.  After :meth:`close` the stream yields nothing.
    """

    def __init__(
        self,
        entries: Iterable[T],
        accept: Callable[[T], bool] | None = None,
    ) -> None:
        self._entries = entries
        self._accept = accept
        self._consumed = False
        self._closed = False

    def __iter__(self) -> Iterator[T]:
        if self._consumed:
            raise StreamConsumedError("Directory stream can only be iterated once.")
        self._consumed = True
        return self._generate()

    def _generate(self) -> Iterator[T]:
        for entry in self._entries:
            if self._closed:
                return
            if self._accept is None:
                yield entry
                continue
            try:
                accepted = self._accept(entry)
            except Exception:
                logger.debug("Filter failed for %s, skipping entry", entry, exc_info=True)
                continue
            if accepted:
                yield entry

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> DirectoryStream[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
