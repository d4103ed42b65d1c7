"""API routes — thin read-only controllers over the filesystem provider.

Handlers are plain ``def`` functions: the provider blocks on network I/O, so
FastAPI runs them in its thread pool.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from github_fs.domain.exceptions import HandleNotFoundError, ReadOnlyViolationError
from github_fs.interface.dependencies import get_provider
from github_fs.interface.schemas import (
    AttributesResponse,
    EntryResponse,
    ErrorResponse,
    ExistsResponse,
    FilesystemResponse,
    OpenFilesystemRequest,
)
from github_fs.services.filesystem import GitHubPath
from github_fs.services.provider import GitHubFileSystemProvider

router = APIRouter()

_KEY = Query(..., description="Key the filesystem was opened with")
_PATH = Query("/", description="Filesystem-relative path")
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Unknown filesystem or path"}}
_READ_ONLY = {405: {"model": ErrorResponse, "description": "Filesystem is read-only"}}


def _resolve(provider: GitHubFileSystemProvider, key: str, path: str) -> GitHubPath:
    return provider.get_filesystem(key).get_path(path)


# ── Filesystem lifecycle ────────────────────────────────────────────────


@router.post(
    "/filesystems",
    response_model=FilesystemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "A filesystem is already open for this locator"},
        422: {"model": ErrorResponse, "description": "Invalid locator"},
    },
)
def open_filesystem(
    body: OpenFilesystemRequest,
    provider: GitHubFileSystemProvider = Depends(get_provider),
) -> FilesystemResponse:
    """Open a read-only filesystem for a GitHub URL or ``github://`` URI."""
    return FilesystemResponse.from_handle(provider.new_filesystem(body.locator))


@router.get("/filesystems", response_model=list[FilesystemResponse])
def list_filesystems(
    provider: GitHubFileSystemProvider = Depends(get_provider),
) -> list[FilesystemResponse]:
    return [FilesystemResponse.from_handle(handle) for handle in provider.registry.handles()]


@router.delete("/filesystems", status_code=status.HTTP_204_NO_CONTENT)
def close_filesystem(
    key: str = _KEY,
    provider: GitHubFileSystemProvider = Depends(get_provider),
) -> Response:
    """Close the filesystem opened with *key*; unknown keys are ignored."""
    try:
        provider.get_filesystem(key).close()
    except HandleNotFoundError:
        pass
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Read operations ─────────────────────────────────────────────────────


@router.get(
    "/entries",
    response_model=list[EntryResponse],
    responses={
        404: {"model": ErrorResponse, "description": "Unknown filesystem or path"},
        409: {"model": ErrorResponse, "description": "Path is not a directory"},
    },
)
def list_entries(
    key: str = _KEY,
    path: str = _PATH,
    provider: GitHubFileSystemProvider = Depends(get_provider),
) -> list[EntryResponse]:
    """List a directory, in the order GitHub returns it."""
    directory = _resolve(provider, key, path)
    return [EntryResponse.from_entry(entry) for entry in provider.list_directory(directory)]


@router.get("/stat", response_model=AttributesResponse, responses=_NOT_FOUND)
def stat(
    key: str = _KEY,
    path: str = _PATH,
    provider: GitHubFileSystemProvider = Depends(get_provider),
) -> AttributesResponse:
    return AttributesResponse.from_record(provider.attributes(_resolve(provider, key, path)))


@router.get("/exists", response_model=ExistsResponse, responses=_NOT_FOUND)
def exists(
    key: str = _KEY,
    path: str = _PATH,
    provider: GitHubFileSystemProvider = Depends(get_provider),
) -> ExistsResponse:
    return ExistsResponse(exists=provider.exists(_resolve(provider, key, path)))


@router.get("/content", response_class=Response, responses=_NOT_FOUND)
def read_content(
    key: str = _KEY,
    path: str = _PATH,
    provider: GitHubFileSystemProvider = Depends(get_provider),
) -> Response:
    """Raw file bytes."""
    data = provider.read_bytes(_resolve(provider, key, path))
    return Response(content=data, media_type="application/octet-stream")


# ── Mutations (always rejected) ─────────────────────────────────────────


@router.put("/content", responses=_READ_ONLY)
@router.post("/content", responses=_READ_ONLY)
@router.delete("/content", responses=_READ_ONLY)
def reject_mutation() -> Response:
    """Any write is refused before the filesystem or path is even looked up."""
    raise ReadOnlyViolationError("GitHub filesystem is read-only")
