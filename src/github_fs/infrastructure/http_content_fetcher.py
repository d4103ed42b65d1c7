"""httpx-backed content fetcher — implements the ContentFetcher port."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import httpx

from github_fs.domain.exceptions import PathNotFoundError, TransportError

logger = logging.getLogger(__name__)

_API_HOST = "api.github.com"


class HttpContentFetcher:
    """Concrete ContentFetcher over a shared synchronous ``httpx.Client``.

    Downloaded files are stored under *cache_dir*, one file per URL, and
    reused on later reads.  A URL at a moving ref such as ``main`` therefore
    keeps its first bytes for as long as the cache directory lives; the
    default directory is per process.
    """

    def __init__(
        self,
        client: httpx.Client,
        cache_dir: Path,
        token: str | None = None,
        user_agent: str = "github-fs/1.0",
    ) -> None:
        self._client = client
        self._cache_dir = cache_dir
        self._raw_headers: dict[str, str] = {"User-Agent": user_agent}
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": user_agent,
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    def _headers_for(self, url: str) -> dict[str, str]:
        if httpx.URL(url).host == _API_HOST:
            return self._api_headers
        return self._raw_headers

    def fetch_text(self, url: str) -> str:
        """GET *url* and return the decoded body."""
        try:
            resp = self._client.get(url, headers=self._headers_for(url))
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error fetching {url}: {exc}") from exc

        _raise_for_status(resp, url)
        return resp.text

    def fetch_and_cache_file(self, url: str) -> Path:
        """Return a local copy of *url*, downloading it on first use."""
        target = self.cache_path(url)
        if target.is_file():
            logger.debug("Cache hit for %s", url)
            return target

        self._cache_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._cache_dir, prefix=".download-")
        try:
            with os.fdopen(fd, "wb") as out:
                with self._client.stream("GET", url, headers=self._headers_for(url)) as resp:
                    _raise_for_status(resp, url)
                    for chunk in resp.iter_bytes():
                        out.write(chunk)
            # Concurrent readers see either no file or a complete one.
            os.replace(tmp_name, target)
        except httpx.HTTPError as exc:
            _discard(tmp_name)
            raise TransportError(f"Network error fetching {url}: {exc}") from exc
        except BaseException:
            _discard(tmp_name)
            raise

        logger.debug("Cached %s at %s", url, target)
        return target

    def cache_path(self, url: str) -> Path:
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
        suffix = Path(httpx.URL(url).path).suffix
        return self._cache_dir / f"{digest}{suffix}"


def _discard(name: str) -> None:
    try:
        os.unlink(name)
    except FileNotFoundError:
        pass


def _raise_for_status(resp: httpx.Response, url: str) -> None:
    """Translate non-2xx responses into domain errors."""
    if resp.is_success:
        return

    status = resp.status_code
    if status == 404:
        raise PathNotFoundError(f"Resource not found: {url}")

    if status == 403 and resp.headers.get("x-ratelimit-remaining", "") == "0":
        reset_raw = resp.headers.get("x-ratelimit-reset", "")
        try:
            reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                "%Y-%m-%d %H:%M:%S UTC"
            )
        except (ValueError, OSError):
            reset_str = reset_raw or "unknown"
        raise TransportError(
            f"GitHub API rate limit exceeded. Resets at {reset_str}. "
            "Set the GITHUB_TOKEN environment variable to increase the limit.",
            status_code=status,
        )

    raise TransportError(f"HTTP request failed with code {status} for URL: {url}", status_code=status)
