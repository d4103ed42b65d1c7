"""Port: content fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ContentFetcher(Protocol):
    """Abstract contract for fetching remote documents and file bytes.

    Implementations raise :class:`PathNotFoundError` when the remote responds
    404 and :class:`TransportError` for any other failure.
    """

    def fetch_text(self, url: str) -> str:
        """Return the body of *url* decoded as text."""
        ...

    def fetch_and_cache_file(self, url: str) -> Path:
        """Download *url* (or reuse a prior download) and return the local copy."""
        ...
