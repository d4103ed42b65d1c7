from __future__ import annotations

import pytest
from conftest import API, RAW, FakeFetcher, dir_item, file_item

from github_fs.domain.entities import EntryKind
from github_fs.domain.exceptions import (
    InvalidArgumentError,
    MalformedRemoteResponseError,
    NotADirectoryPathError,
    PathNotFoundError,
    ReadOnlyViolationError,
    TransportError,
)
from github_fs.domain.value_objects import RepoLocator
from github_fs.services.path_resolver import (
    PathResolver,
    listing_url,
    raw_content_url,
)

SRC = RepoLocator("jbangdev", "jbang", "main", "/src")
ROOT = RepoLocator("jbangdev", "jbang", "main", "/")


def test_listing_and_raw_urls():
    assert listing_url(SRC, "/src/main") == f"{API}/jbangdev/jbang/contents/src/main?ref=main"
    assert raw_content_url(ROOT, "/build.gradle") == f"{RAW}/jbangdev/jbang/main/build.gradle"


def test_urls_are_rebased_on_base_path():
    resolver = PathResolver(FakeFetcher(cache_dir=None))
    assert resolver.listing_url_for(SRC, "/") == f"{API}/jbangdev/jbang/contents/src?ref=main"
    assert resolver.listing_url_for(ROOT, "/") == f"{API}/jbangdev/jbang/contents/?ref=main"
    assert resolver.raw_url_for(SRC, "main/App.java") == f"{RAW}/jbangdev/jbang/main/src/main/App.java"


def test_exists_true_and_false(jbang_src):
    resolver = PathResolver(jbang_src)
    assert resolver.exists(SRC, "/main") is True
    assert resolver.exists(SRC, "/missing") is False


def test_exists_propagates_transport_failures(fetcher):
    url = f"{API}/jbangdev/jbang/contents/src/boom?ref=main"
    fetcher.errors[url] = TransportError("HTTP request failed with code 500", status_code=500)
    with pytest.raises(TransportError):
        PathResolver(fetcher).exists(SRC, "/boom")


def test_exists_refetches_every_call(jbang_src):
    resolver = PathResolver(jbang_src)
    resolver.exists(SRC, "/main")
    resolver.exists(SRC, "/main")
    assert len(jbang_src.calls) == 2


def test_kind_classification(jbang_src):
    resolver = PathResolver(jbang_src)
    assert resolver.kind(SRC, "/") is EntryKind.DIRECTORY
    assert resolver.kind(SRC, "/main/App.java") is EntryKind.FILE


def test_kind_from_single_dir_record(fetcher):
    fetcher.add_json(f"{API}/o/r/contents/vendor/lib?ref=main", dir_item("vendor/lib"))
    assert PathResolver(fetcher).kind(RepoLocator("o", "r"), "/vendor/lib") is EntryKind.DIRECTORY


def test_kind_missing_path_raises_not_found(fetcher):
    with pytest.raises(PathNotFoundError):
        PathResolver(fetcher).kind(SRC, "/nope")


def test_kind_record_without_type_is_malformed(fetcher):
    fetcher.add_json(f"{API}/o/r/contents/x?ref=main", {"path": "x"})
    with pytest.raises(MalformedRemoteResponseError):
        PathResolver(fetcher).kind(RepoLocator("o", "r"), "/x")


def test_attributes(jbang_src):
    resolver = PathResolver(jbang_src)
    file_attrs = resolver.attributes(SRC, "/main/App.java")
    assert file_attrs.kind is EntryKind.FILE
    assert file_attrs.size == 42
    assert file_attrs.creation_time is None
    dir_attrs = resolver.attributes(SRC, "/main")
    assert dir_attrs.is_directory
    assert dir_attrs.size is None


def test_list_directory(jbang_src):
    entries = PathResolver(jbang_src).list_directory(SRC, "/main")
    assert [(e.name, e.path, e.kind) for e in entries] == [
        ("java", "/main/java", EntryKind.DIRECTORY),
        ("App.java", "/main/App.java", EntryKind.FILE),
    ]


def test_list_directory_on_file_fails(jbang_src):
    with pytest.raises(NotADirectoryPathError):
        PathResolver(jbang_src).list_directory(SRC, "/main/App.java")


def test_read_bytes(jbang_src):
    assert PathResolver(jbang_src).read_bytes(SRC, "/main/App.java") == b"class App {}\n"


def test_check_access(jbang_src):
    resolver = PathResolver(jbang_src)
    resolver.check_access(SRC, "/main/App.java", ["read"])
    with pytest.raises(ReadOnlyViolationError):
        resolver.check_access(SRC, "/main/App.java", ["read", "write"])
    with pytest.raises(InvalidArgumentError):
        resolver.check_access(SRC, "/main/App.java", ["chmod"])
    with pytest.raises(PathNotFoundError):
        resolver.check_access(SRC, "/missing")


def test_malformed_listing_fails_whole_call(fetcher):
    fetcher.add_json(
        f"{API}/o/r/contents/?ref=main",
        [file_item("a.txt"), {"name": "b.txt", "type": "file"}],
    )
    with pytest.raises(MalformedRemoteResponseError):
        PathResolver(fetcher).list_directory(RepoLocator("o", "r"), "/")
