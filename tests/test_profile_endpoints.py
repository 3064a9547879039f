from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from json_store import atomic_write_json, read_json

DEFAULT = {"name": "Anna Smith", "email": "anna.smith@example.com", "interests": "coding"}


def _without_internal_id(doc: dict) -> dict:
    return {k: v for k, v in doc.items() if k != "_id"}


def test_get_profile_on_empty_store_returns_default(client):
    r = client.get("/get-profile")
    assert r.status_code == 200
    assert r.json() == DEFAULT
    assert "userid" not in r.json()
    assert r.headers["x-profile-source"] == "default"


def test_update_forces_userid(client):
    r = client.post("/update-profile", json={"userid": 42, "name": "X"})
    assert r.status_code == 200
    assert r.json() == {"name": "X", "userid": 1}

    r = client.post("/update-profile", json={"name": "Y"})
    assert r.status_code == 200
    assert r.json()["userid"] == 1


def test_update_accepts_form_encoded_body(client):
    r = client.post("/update-profile", data={"name": "Form", "email": "f@example.com"})
    assert r.status_code == 200
    assert r.json() == {"name": "Form", "email": "f@example.com", "userid": 1}

    r = client.get("/get-profile")
    assert _without_internal_id(r.json()) == {"userid": 1, "name": "Form", "email": "f@example.com"}


def test_update_then_get_round_trip(client):
    payload = {"name": "X", "email": "Y", "interests": "Z"}
    r = client.post("/update-profile", json=payload)
    assert r.status_code == 200

    r = client.get("/get-profile")
    assert r.status_code == 200
    assert r.headers["x-profile-source"] == "stored"
    assert _without_internal_id(r.json()) == {"userid": 1, "name": "X", "email": "Y", "interests": "Z"}


def test_repeated_update_is_idempotent(client, sandbox_store):
    payload = {"name": "X", "email": "Y", "interests": "Z"}

    r1 = client.post("/update-profile", json=payload)
    after_first = read_json(sandbox_store / "users.json")
    r2 = client.post("/update-profile", json=payload)
    after_second = read_json(sandbox_store / "users.json")

    assert r1.status_code == 200
    assert r2.status_code == 200
    assert r1.json() == r2.json()
    assert after_first == after_second
    assert list(after_second.keys()) == ["1"]


def test_update_echoes_submitted_fields_not_stored_document(client):
    client.post("/update-profile", json={"name": "X", "email": "Y", "interests": "Z"})

    r = client.post("/update-profile", json={"interests": "chess"})
    assert r.json() == {"interests": "chess", "userid": 1}

    # Fields not sent keep their stored values.
    r = client.get("/get-profile")
    assert _without_internal_id(r.json()) == {"userid": 1, "name": "X", "email": "Y", "interests": "chess"}


def test_update_ignores_unknown_keys(client):
    r = client.post("/update-profile", json={"name": "X", "is_admin": True})
    assert r.status_code == 200
    assert r.json() == {"name": "X", "userid": 1}

    r = client.get("/get-profile")
    assert "is_admin" not in r.json()


def test_update_coerces_numbers_and_fails_on_structures(client, sandbox_store):
    r = client.post("/update-profile", json={"name": 123})
    assert r.status_code == 200
    assert r.json() == {"name": "123", "userid": 1}

    r = client.post("/update-profile", json={"name": {"first": "a"}})
    assert r.status_code == 500
    assert r.json() == {"error": "Database operation failed"}

    r = client.post("/update-profile", json={"name": ["a", "b"]})
    assert r.status_code == 500
    assert read_json(sandbox_store / "users.json")["1"]["name"] == "123"


def test_update_with_malformed_json_writes_nothing(client, sandbox_store):
    r = client.post(
        "/update-profile",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 400
    assert not (sandbox_store / "users.json").exists()

    r = client.get("/get-profile")
    assert r.headers["x-profile-source"] == "default"


def test_update_with_non_object_json_writes_key_only(client):
    r = client.post("/update-profile", json=["not", "a", "mapping"])
    assert r.status_code == 200
    assert r.json() == {"userid": 1}


def test_profile_survives_app_restart(sandbox_store):
    import app as app_module

    with TestClient(app_module.create_app()) as c:
        assert c.post("/update-profile", json={"name": "Persisted"}).status_code == 200

    with TestClient(app_module.create_app()) as c:
        r = c.get("/get-profile")
        assert r.json()["name"] == "Persisted"


def test_configured_profile_user_id(sandbox_store, monkeypatch):
    import app as app_module

    monkeypatch.setenv("PROFILE_USER_ID", "7")
    with TestClient(app_module.create_app()) as c:
        r = c.post("/update-profile", json={"userid": 1, "name": "Seven"})
        assert r.json() == {"name": "Seven", "userid": 7}
        assert c.get("/get-profile").json()["userid"] == 7

    assert list(read_json(sandbox_store / "users.json").keys()) == ["7"]


def test_unreachable_store_update_returns_500(broken_client):
    r = broken_client.post("/update-profile", json={"name": "X"})
    assert r.status_code == 500
    assert r.json() == {"error": "Database operation failed"}


def test_unreachable_store_get_returns_default(broken_client):
    r = broken_client.get("/get-profile")
    assert r.status_code == 200
    assert r.json() == DEFAULT
    assert r.headers["x-profile-source"] == "fallback"


def test_corrupt_store_masks_read_and_fails_write(client, sandbox_store):
    (sandbox_store / "users.json").write_text("{not json", encoding="utf-8")

    r = client.get("/get-profile")
    assert r.status_code == 200
    assert r.json() == DEFAULT
    assert r.headers["x-profile-source"] == "fallback"

    r = client.post("/update-profile", json={"name": "X"})
    assert r.status_code == 500
    assert r.json() == {"error": "Database operation failed"}


@pytest.mark.parametrize(
    "stored",
    [
        {"1": {"name": ["a"], "userid": 1}},
        {"1": {"name": "a"}},
    ],
)
def test_invalid_stored_document_masks_read(client, sandbox_store, stored):
    atomic_write_json(sandbox_store / "users.json", stored)

    r = client.get("/get-profile")
    assert r.status_code == 200
    assert r.json() == DEFAULT
    assert r.headers["x-profile-source"] == "fallback"
