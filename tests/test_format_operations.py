"""Tests for the format operation log actions."""
from datetime import datetime

import pytest

from app.jsonfmt import create_app
from app.jsonfmt.db import session_scope
from app.jsonfmt.models import Base, User
from app.jsonfmt.modules.format_operations.models import JsonFormatOperation


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.delenv("CSRF_ENABLED", raising=False)

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        s.add_all(
            [
                User(id="user-a", email="a@example.com", is_active=True),
                User(id="user-b", email="b@example.com", is_active=True),
            ]
        )

    return app.test_client()


def _login(client, user_id):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["csrf_token"] = "test-csrf"
    client.environ_base["HTTP_X_CSRF_TOKEN"] = "test-csrf"


def _snippet(client):
    r = client.post("/api/snippets", json={"rawJson": '{"z": 1, "a": 2}'})
    return r.json["data"]["snippet"]["id"]


def test_operation_actions_require_auth(client):
    r = client.post("/api/snippets/x/operations", json={"operationType": "minify"})
    assert r.status_code == 401
    assert r.json["error"]["code"] == "UNAUTHORIZED"
    r = client.get("/api/snippets/x/operations")
    assert r.status_code == 401


def test_create_and_list_operations(client):
    _login(client, "user-a")
    snippet_id = _snippet(client)

    r = client.post(
        f"/api/snippets/{snippet_id}/operations",
        json={"operationType": "sort-keys", "settingsJson": '{"indent": 2}', "resultJson": '{"a": 2, "z": 1}'},
    )
    assert r.status_code == 200
    op = r.json["data"]["operation"]
    assert op["snippetId"] == snippet_id
    assert op["userId"] == "user-a"
    assert op["operationType"] == "sort-keys"
    assert op["settingsJson"] == '{"indent": 2}'
    assert op["resultJson"] == '{"a": 2, "z": 1}'
    assert op["createdAt"]

    r = client.post(f"/api/snippets/{snippet_id}/operations", json={})
    assert r.status_code == 200
    bare = r.json["data"]["operation"]
    assert bare["operationType"] is None
    assert bare["id"] != op["id"]

    r = client.get(f"/api/snippets/{snippet_id}/operations")
    data = r.json["data"]
    assert data["total"] == len(data["items"]) == 2
    assert {item["id"] for item in data["items"]} == {op["id"], bare["id"]}


def test_list_operations_is_scoped_to_snippet(client):
    _login(client, "user-a")
    first = _snippet(client)
    second = _snippet(client)
    client.post(f"/api/snippets/{first}/operations", json={"operationType": "minify"})
    client.post(f"/api/snippets/{second}/operations", json={"operationType": "pretty-print"})

    r = client.get(f"/api/snippets/{second}/operations")
    items = r.json["data"]["items"]
    assert [item["operationType"] for item in items] == ["pretty-print"]
    assert r.json["data"]["total"] == 1


def test_operations_on_other_users_snippet_are_not_found(client):
    _login(client, "user-a")
    snippet_id = _snippet(client)
    client.post(f"/api/snippets/{snippet_id}/operations", json={"operationType": "minify"})

    _login(client, "user-b")
    r = client.post(f"/api/snippets/{snippet_id}/operations", json={"operationType": "transform"})
    assert r.status_code == 404
    assert r.json["error"]["code"] == "NOT_FOUND"
    r = client.get(f"/api/snippets/{snippet_id}/operations")
    assert r.status_code == 404

    with session_scope(client.application) as s:
        ops = s.query(JsonFormatOperation).filter(JsonFormatOperation.snippet_id == snippet_id).all()
        assert [o.operation_type for o in ops] == ["minify"]


def test_operation_on_missing_snippet_is_not_found(client):
    _login(client, "user-a")
    r = client.post("/api/snippets/nope/operations", json={"operationType": "minify"})
    assert r.status_code == 404


@pytest.mark.parametrize("body", [{"operationType": 1}, {"settingsJson": {"indent": 2}}, {"resultJson": False}])
def test_create_operation_rejects_non_string_fields(client, body):
    _login(client, "user-a")
    snippet_id = _snippet(client)
    r = client.post(f"/api/snippets/{snippet_id}/operations", json=body)
    assert r.status_code == 400
    assert r.json["error"]["code"] == "BAD_REQUEST"


def test_operations_have_no_update_route(client):
    _login(client, "user-a")
    snippet_id = _snippet(client)
    r = client.patch(f"/api/snippets/{snippet_id}/operations", json={"operationType": "minify"})
    assert r.status_code == 405
    assert r.json["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_list_operations_newest_first(client, monkeypatch):
    _login(client, "user-a")
    snippet_id = _snippet(client)
    stamps = iter([datetime(2024, 3, 1, 9), datetime(2024, 3, 1, 10), datetime(2024, 3, 1, 11)])
    monkeypatch.setattr("app.jsonfmt.modules.format_operations.service.utcnow", lambda: next(stamps))
    for op_type in ("pretty-print", "minify", "sort-keys"):
        r = client.post(f"/api/snippets/{snippet_id}/operations", json={"operationType": op_type})
        assert r.status_code == 200

    r = client.get(f"/api/snippets/{snippet_id}/operations")
    assert [item["operationType"] for item in r.json["data"]["items"]] == ["sort-keys", "minify", "pretty-print"]
