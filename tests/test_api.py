"""HTTP interface tests — the provider is swapped for one over the fake fetcher."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from github_fs.domain.exceptions import HandleNotFoundError
from github_fs.interface.app import create_app
from github_fs.interface.dependencies import get_provider

SRC_URL = "https://github.com/jbangdev/jbang/tree/main/src"


@pytest.fixture
def client(provider, jbang_src):
    app = create_app()
    app.dependency_overrides[get_provider] = lambda: provider
    with TestClient(app) as test_client:
        yield test_client


def _open(client: TestClient) -> str:
    resp = client.post("/filesystems", json={"locator": SRC_URL})
    assert resp.status_code == 201
    return resp.json()["key"]


def test_health_reports_open_filesystems(client):
    assert client.get("/health").json() == {"status": "ok", "open_filesystems": 0}
    _open(client)
    assert client.get("/health").json()["open_filesystems"] == 1


def test_open_and_list(client):
    resp = client.post("/filesystems", json={"locator": SRC_URL})
    assert resp.status_code == 201
    body = resp.json()
    assert body["key"] == SRC_URL
    assert body["uri"] == "github://github.com/jbangdev/jbang/tree/main/src"
    assert body["base_path"] == "/src"

    listed = client.get("/filesystems").json()
    assert [fs["key"] for fs in listed] == [SRC_URL]


def test_open_twice_conflicts(client):
    _open(client)
    resp = client.post("/filesystems", json={"locator": SRC_URL})
    assert resp.status_code == 409
    assert resp.json()["status"] == "error"


def test_invalid_locator(client):
    resp = client.post("/filesystems", json={"locator": "https://gitlab.com/a/b"})
    assert resp.status_code == 422


def test_entries_stat_exists_content(client):
    key = _open(client)

    entries = client.get("/entries", params={"key": key, "path": "/"}).json()
    assert [e["name"] for e in entries] == ["it", "jreleaser", "main", "native-image", "test"]
    assert all(e["kind"] == "dir" for e in entries)

    stat = client.get("/stat", params={"key": key, "path": "/main/App.java"}).json()
    assert stat["kind"] == "file"
    assert stat["size"] == 42

    assert client.get("/exists", params={"key": key, "path": "/main"}).json() == {"exists": True}
    assert client.get("/exists", params={"key": key, "path": "/nope"}).json() == {"exists": False}

    content = client.get("/content", params={"key": key, "path": "/main/App.java"})
    assert content.status_code == 200
    assert content.content == b"class App {}\n"


def test_listing_a_file_conflicts(client):
    key = _open(client)
    resp = client.get("/entries", params={"key": key, "path": "/main/App.java"})
    assert resp.status_code == 409


def test_unknown_filesystem_and_path(client):
    assert client.get("/entries", params={"key": "nope"}).status_code == 404
    key = _open(client)
    assert client.get("/stat", params={"key": key, "path": "/missing"}).status_code == 404


def test_mutations_are_rejected(client):
    key = _open(client)
    params = {"key": key, "path": "/main/App.java"}
    assert client.put("/content", params=params, content=b"x").status_code == 405
    assert client.post("/content", params=params, content=b"x").status_code == 405
    assert client.delete("/content", params=params).status_code == 405
    assert client.get("/content", params=params).content == b"class App {}\n"


def test_close_is_idempotent(client):
    key = _open(client)
    assert client.delete("/filesystems", params={"key": key}).status_code == 204
    assert client.delete("/filesystems", params={"key": key}).status_code == 204
    assert client.get("/filesystems").json() == []
    _open(client)


def test_missing_key_uses_error_envelope(client):
    resp = client.get("/entries")
    assert resp.status_code == 422
    assert resp.json() == {"status": "error", "message": "key: Field required"}


def test_blank_locator_rejected_with_field_name(client):
    resp = client.post("/filesystems", json={"locator": "  "})
    assert resp.status_code == 422
    assert resp.json()["message"].startswith("locator: ")


def test_error_statuses_document_the_envelope(client):
    paths = client.get("/openapi.json").json()["paths"]
    ref = "#/components/schemas/ErrorResponse"
    assert paths["/filesystems"]["post"]["responses"]["409"]["content"]["application/json"][
        "schema"
    ] == {"$ref": ref}
    assert paths["/entries"]["get"]["responses"]["404"]["content"]["application/json"][
        "schema"
    ] == {"$ref": ref}
    assert paths["/content"]["put"]["responses"]["405"]["content"]["application/json"][
        "schema"
    ] == {"$ref": ref}


def test_close_racing_another_close_still_succeeds(client, provider, monkeypatch):
    key = _open(client)
    provider.get_filesystem(key).close()

    def closed_meanwhile(requested):
        raise HandleNotFoundError(f"No open GitHub filesystem for key: {requested}")

    monkeypatch.setattr(provider, "get_filesystem", closed_meanwhile)
    assert client.delete("/filesystems", params={"key": key}).status_code == 204
