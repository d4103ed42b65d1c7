from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from github_fs.domain.exceptions import PathNotFoundError
from github_fs.services.provider import GitHubFileSystemProvider

API = "https://api.github.com/repos"
RAW = "https://raw.githubusercontent.com"


class FakeFetcher:
    """In-memory ContentFetcher: unknown URLs answer 404."""

    def __init__(self, cache_dir: Path) -> None:
        self.texts: dict[str, str] = {}
        self.files: dict[str, bytes] = {}
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []
        self._cache_dir = cache_dir

    def add_json(self, url: str, document: Any) -> None:
        self.texts[url] = json.dumps(document)

    def fetch_text(self, url: str) -> str:
        self.calls.append(url)
        if url in self.errors:
            raise self.errors[url]
        if url not in self.texts:
            raise PathNotFoundError(f"Resource not found: {url}")
        return self.texts[url]

    def fetch_and_cache_file(self, url: str) -> Path:
        self.calls.append(url)
        if url in self.errors:
            raise self.errors[url]
        if url not in self.files:
            raise PathNotFoundError(f"Resource not found: {url}")
        target = self._cache_dir / f"{len(self.calls)}.bin"
        target.write_bytes(self.files[url])
        return target


def dir_item(path: str) -> dict[str, Any]:
    return {"name": path.rsplit("/", 1)[-1], "path": path, "type": "dir", "size": 0}


def file_item(path: str, size: int = 10) -> dict[str, Any]:
    return {"name": path.rsplit("/", 1)[-1], "path": path, "type": "file", "size": size}


@pytest.fixture
def fetcher(tmp_path: Path) -> FakeFetcher:
    return FakeFetcher(tmp_path)


@pytest.fixture
def provider(fetcher: FakeFetcher) -> GitHubFileSystemProvider:
    return GitHubFileSystemProvider(fetcher)


@pytest.fixture
def jbang_src(fetcher: FakeFetcher) -> FakeFetcher:
    """jbangdev/jbang@main with a few entries under /src."""
    fetcher.add_json(
        f"{API}/jbangdev/jbang/contents/src?ref=main",
        [
            dir_item("src/it"),
            dir_item("src/jreleaser"),
            dir_item("src/main"),
            dir_item("src/native-image"),
            dir_item("src/test"),
        ],
    )
    fetcher.add_json(
        f"{API}/jbangdev/jbang/contents/src/main?ref=main",
        [dir_item("src/main/java"), file_item("src/main/App.java", 42)],
    )
    fetcher.add_json(
        f"{API}/jbangdev/jbang/contents/src/main/App.java?ref=main",
        file_item("src/main/App.java", 42),
    )
    fetcher.files[f"{RAW}/jbangdev/jbang/main/src/main/App.java"] = b"class App {}\n"
    return fetcher
