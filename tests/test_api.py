import pytest
from fastapi.testclient import TestClient

from ocean_notes.app import app
from ocean_notes.deps import get_store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_create_and_filter_by_tag(client, store):
    r = client.post("/api/notes", json={"title": "Groceries", "tags": ["personal"]})
    assert r.status_code == 201
    body = r.json()
    assert body["title"] == "Groceries"
    assert body["updatedAt"] >= body["createdAt"]
    nid = body["id"]
    assert store.active_note_id == nid

    personal = client.get("/api/notes", params={"tag": "personal"}).json()
    assert [n["id"] for n in personal] == [nid]
    assert client.get("/api/notes", params={"tag": "work"}).json() == []
    assert [n["id"] for n in client.get("/api/notes", params={"q": "grocer"}).json()] == [nid]


def test_create_without_body(client):
    r = client.post("/api/notes")
    assert r.status_code == 201
    assert r.json()["title"] == ""


def test_patch_and_validation(client):
    nid = client.post("/api/notes").json()["id"]
    r = client.patch(f"/api/notes/{nid}", json={"content": "hello", "color": "#000000"})
    assert r.status_code == 200
    assert r.json()["content"] == "hello"
    assert r.json()["color"] == "#000000"

    assert client.patch(f"/api/notes/{nid}", json={"id": "other"}).status_code == 422
    assert client.patch(f"/api/notes/{nid}", json={"title": None}).status_code == 422
    assert client.patch("/api/notes/missing", json={"title": "x"}).status_code == 404
    assert client.get("/api/notes/missing").status_code == 404


def test_lifecycle_endpoints(client, store):
    nid = client.post("/api/notes", json={"pinned": True}).json()["id"]

    r = client.post(f"/api/notes/{nid}/archive")
    assert r.json()["archived"] is True
    assert r.json()["pinned"] is False
    assert [n["id"] for n in client.get("/api/notes", params={"section": "archived"}).json()] == [nid]

    assert client.post(f"/api/notes/{nid}/unarchive").json()["archived"] is False

    r = client.delete(f"/api/notes/{nid}")
    assert r.json() == {"ok": True, "purged": False}
    assert [n["id"] for n in client.get("/api/notes", params={"section": "trash"}).json()] == [nid]

    assert client.post(f"/api/notes/{nid}/restore").json()["trashed"] is False

    client.delete(f"/api/notes/{nid}")
    r = client.delete(f"/api/notes/{nid}")
    assert r.json() == {"ok": True, "purged": True}
    assert store.get_note(nid) is None
    assert client.get("/api/active").json() == {"id": None, "note": None}


def test_bad_section_is_rejected(client):
    assert client.get("/api/notes", params={"section": "everything"}).status_code == 422


def test_active_and_tags(client):
    first = client.post("/api/notes").json()["id"]
    client.post("/api/notes")
    r = client.post(f"/api/notes/{first}/activate")
    assert r.status_code == 200
    assert r.json()["id"] == first
    assert client.get("/api/active").json()["note"]["id"] == first
    assert client.post("/api/notes/missing/activate").status_code == 404

    assert client.post("/api/tags", json={"name": " zeta "}).json() == ["ideas", "personal", "work", "zeta"]
    assert client.get("/api/tags").json() == ["ideas", "personal", "work", "zeta"]


def test_clear_active(client, store):
    nid = client.post("/api/notes").json()["id"]
    assert store.active_note_id == nid
    r = client.delete("/api/active")
    assert r.status_code == 200
    assert r.json() == {"id": None, "note": None}
    assert store.active_note_id is None
    assert store.get_note(nid) is not None
