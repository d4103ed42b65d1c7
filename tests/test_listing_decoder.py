from __future__ import annotations

import pytest

from github_fs.domain.entities import EntryKind
from github_fs.domain.exceptions import MalformedRemoteResponseError, StreamConsumedError
from github_fs.services.listing_decoder import (
    DirectoryStream,
    decode_document,
    decode_entries,
    decode_item,
    kind_of,
)


def test_decode_entries_preserves_remote_order():
    document = [
        {"path": "src/zeta", "type": "dir"},
        {"path": "src/alpha.txt", "type": "file", "name": "alpha.txt", "size": 3},
        {"path": "src/mid", "type": "dir"},
    ]
    entries = decode_entries(document, "/src")
    assert [e.name for e in entries] == ["zeta", "alpha.txt", "mid"]
    assert [e.path for e in entries] == ["/zeta", "/alpha.txt", "/mid"]
    assert [e.kind for e in entries] == [EntryKind.DIRECTORY, EntryKind.FILE, EntryKind.DIRECTORY]


@pytest.mark.parametrize("missing", ["path", "type"])
def test_missing_field_aborts_whole_listing(missing):
    bad = {"path": "src/b", "type": "file"}
    del bad[missing]
    document = [{"path": "src/a", "type": "file"}, bad]
    with pytest.raises(MalformedRemoteResponseError):
        decode_entries(document, "/src")


def test_non_object_element_is_malformed():
    with pytest.raises(MalformedRemoteResponseError):
        decode_entries(["src/a"], "/src")


def test_unknown_type_is_malformed():
    with pytest.raises(MalformedRemoteResponseError):
        decode_entries([{"path": "x", "type": "weird"}], "/")


def test_submodule_and_symlink_kinds():
    assert kind_of("submodule") is EntryKind.FILE
    assert kind_of("symlink") is EntryKind.FILE


def test_decode_document_shapes():
    assert decode_document("[]") == []
    assert decode_document('{"path": "a", "type": "file"}') == {"path": "a", "type": "file"}
    with pytest.raises(MalformedRemoteResponseError):
        decode_document("not json")
    with pytest.raises(MalformedRemoteResponseError):
        decode_document('"just a string"')


def test_decode_item_ignores_extra_fields():
    item = decode_item({"path": "a.txt", "type": "file", "size": 7, "_links": {}})
    assert item.size == 7
    assert item.kind is EntryKind.FILE


def test_directory_stream_applies_filter():
    stream = DirectoryStream([1, 2, 3, 4], accept=lambda n: n % 2 == 0)
    assert list(stream) == [2, 4]


def test_directory_stream_skips_entries_whose_filter_raises():
    def accept(n: int) -> bool:
        if n == 2:
            raise OSError("cannot stat")
        return True

    assert list(DirectoryStream([1, 2, 3], accept=accept)) == [1, 3]


def test_directory_stream_is_single_pass():
    stream = DirectoryStream(["a", "b"])
    assert list(stream) == ["a", "b"]
    with pytest.raises(StreamConsumedError):
        iter(stream)


def test_closed_stream_yields_nothing():
    with DirectoryStream(["a", "b"]) as stream:
        pass
    assert list(stream) == []
