"""Path translation — filesystem-relative ↔ repository-relative paths.

The filesystem root ``/`` is rebased onto the locator's ``base_path``.  Both
functions are pure; :func:`to_filesystem_path` inverts :func:`to_repo_path`
for every path reachable under the base path.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def _is_root(base_path: str) -> bool:
    return base_path in ("", "/")


def to_repo_path(fs_path: str, base_path: str) -> str:
    """Map a filesystem path onto the repository, under *base_path*."""
    if fs_path == "/":
        return "/" if _is_root(base_path) else base_path

    relative = fs_path[1:] if fs_path.startswith("/") else fs_path
    if _is_root(base_path):
        return "/" + relative

    base = base_path[:-1] if base_path.endswith("/") else base_path
    return f"{base}/{relative}"


def to_filesystem_path(repo_path: str, base_path: str) -> str:
    """Map a repository path (as returned by the contents API) back under ``/``.

    Paths outside *base_path* are returned unchanged (with a leading slash).
    """
    if _is_root(base_path):
        return repo_path if repo_path.startswith("/") else "/" + repo_path

    # The contents API reports paths without a leading slash.
    base = base_path.strip("/")
    path = repo_path.lstrip("/")

    if path == base or path.startswith(base + "/"):
        relative = path[len(base):].lstrip("/")
        return "/" + relative if relative else "/"

    logger.warning(
        "Repository path %r lies outside base path %r, returning it unchanged",
        repo_path,
        base_path,
    )
    return "/" + path
