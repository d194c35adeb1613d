"""HTTP-level tests for the suggestion, vote and auth routes."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from voteboard.app import create_app
from voteboard.core.config import get_settings
from voteboard.repositories.json_storage import JSONStore
from voteboard.services.session_service import issue_session

JSON = {"Accept": "application/json"}


def _client(env, **environ) -> TestClient:
    for key, value in environ.items():
        env.setenv(key, value)
    get_settings.cache_clear()
    return TestClient(create_app())


@pytest.fixture()
def dev_client(env):
    with _client(env, DEV_MODE="true") as client:
        assert client.get("/auth/discord", headers=JSON).status_code == 200
        yield client


@pytest.fixture()
def prod_client(env):
    with _client(env, VOTER_ROLES="voter", ADMIN_ROLES="admin") as client:
        yield client


def _login_as(client: TestClient, discord_id: str, roles: list[str]) -> None:
    store: JSONStore = client.app.state.store
    store.create_user({"discordId": discord_id, "username": discord_id, "roles": roles})
    client.cookies.set("session", issue_session(discord_id))


def _create(client, title="Add dark mode", description="..."):
    return client.post("/api/suggestions", json={"title": title, "description": description})


def test_health(env):
    with _client(env) as client:
        resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "OK", "message": "Server is running"}
    assert resp.headers["x-content-type-options"] == "nosniff"


def test_dev_login_persists_user_and_reports_permissions(dev_client):
    resp = dev_client.get("/auth/user")
    assert resp.status_code == 200
    body = resp.json()
    assert body["discordId"] == "dev_user_123"
    assert body["canVote"] is True
    assert body["isAdmin"] is True
    assert dev_client.app.state.store.get_user("dev_user_123") is not None


def test_dev_login_redirects_browsers(env):
    with _client(env, DEV_MODE="true") as client:
        resp = client.get("/auth/discord", follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "http://localhost:5173"
    assert "session=" in resp.headers["set-cookie"]


def test_logout_drops_session(dev_client):
    assert dev_client.get("/auth/logout").json() == {"message": "Logged out successfully"}
    assert dev_client.get("/auth/user").status_code == 401


def test_production_auth_routes(prod_client):
    assert prod_client.get("/auth/discord").status_code == 404
    resp = prod_client.get("/auth/user")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authentication not implemented in production yet"}


def test_suggestion_lifecycle(dev_client):
    resp = _create(dev_client)
    assert resp.status_code == 201
    created = resp.json()
    assert created["status"] == "Open"
    assert created["votes"] == 0
    assert created["authorId"] == "dev_user_123"
    sid = created["id"]

    assert [s["id"] for s in dev_client.get("/api/suggestions").json()] == [sid]

    resp = dev_client.patch(f"/api/suggestions/{sid}", json={"status": "Planned", "id": "other"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "Planned"
    assert resp.json()["id"] == sid
    assert resp.json()["title"] == "Add dark mode"

    assert dev_client.delete(f"/api/suggestions/{sid}").status_code == 204
    resp = dev_client.get(f"/api/suggestions/{sid}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Suggestion not found"}


def test_create_requires_fields(dev_client):
    resp = _create(dev_client, title="")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Title and description are required"}


def test_patch_rejects_unknown_status(dev_client):
    sid = _create(dev_client).json()["id"]
    assert dev_client.patch(f"/api/suggestions/{sid}", json={"status": "Done"}).status_code == 422


def test_patch_ignores_explicit_nulls(dev_client):
    sid = _create(dev_client).json()["id"]
    resp = dev_client.patch(f"/api/suggestions/{sid}", json={"status": None, "title": None})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "Open"
    assert body["title"] == "Add dark mode"
    assert dev_client.get(f"/api/suggestions/{sid}").json()["status"] == "Open"


def test_patch_and_delete_missing(dev_client):
    assert dev_client.patch("/api/suggestions/nope", json={"status": "Rejected"}).status_code == 404
    assert dev_client.delete("/api/suggestions/nope").status_code == 404


def test_vote_toggle_over_http(dev_client):
    sid = _create(dev_client).json()["id"]
    url = f"/api/suggestions/{sid}/vote"

    assert dev_client.put(url, json={"userId": "u1", "voteValue": 1}).json() == {"message": "Vote added"}
    assert dev_client.put(url, json={"userId": "u2", "voteValue": -1}).json() == {"message": "Vote added"}
    assert dev_client.get(f"/api/suggestions/{sid}").json()["votes"] == 0

    assert dev_client.put(url, json={"userId": "u1", "voteValue": -1}).json() == {"message": "Vote removed"}
    suggestion = dev_client.get(f"/api/suggestions/{sid}").json()
    assert suggestion["votes"] == -1
    assert [v["userId"] for v in suggestion["voters"]] == ["u2"]


def test_vote_defaults_to_session_user(dev_client):
    sid = _create(dev_client).json()["id"]
    dev_client.put(f"/api/suggestions/{sid}/vote", json={})
    voters = dev_client.get(f"/api/suggestions/{sid}").json()["voters"]
    assert [(v["userId"], v["voteValue"]) for v in voters] == [("dev_user_123", 1)]


def test_orphaned_votes_stay_listed(dev_client):
    sid = _create(dev_client).json()["id"]
    dev_client.put(f"/api/suggestions/{sid}/vote", json={"userId": "u1"})
    dev_client.delete(f"/api/suggestions/{sid}")
    votes = dev_client.get(f"/api/suggestions/{sid}/votes").json()
    assert [v["userId"] for v in votes] == ["u1"]


def test_anonymous_requests_are_forbidden(prod_client):
    resp = _create(prod_client)
    assert resp.status_code == 403
    assert resp.json() == {"error": "Insufficient permissions to vote"}
    assert prod_client.put("/api/suggestions/x/vote", json={"userId": "u1"}).status_code == 403


def test_voter_cannot_administer(prod_client):
    _login_as(prod_client, "v1", ["voter"])
    sid = _create(prod_client).json()["id"]
    assert prod_client.put(f"/api/suggestions/{sid}/vote", json={}).json() == {"message": "Vote added"}

    resp = prod_client.patch(f"/api/suggestions/{sid}", json={"status": "Rejected"})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Admin permissions required"}
    assert prod_client.delete(f"/api/suggestions/{sid}").status_code == 403


def test_admin_role_grants_everything(prod_client):
    _login_as(prod_client, "a1", ["admin"])
    sid = _create(prod_client).json()["id"]
    resp = prod_client.patch(f"/api/suggestions/{sid}", json={"status": "In Progress"})
    assert resp.json()["status"] == "In Progress"


def test_storage_failure_returns_500(dev_client):
    store: JSONStore = dev_client.app.state.store
    store.path.write_text("{broken", encoding="utf-8")
    resp = dev_client.get("/api/suggestions")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Storage failure"}


def test_injected_open_store_outlives_the_app(env, data_file):
    store = JSONStore(data_file).open()
    with TestClient(create_app(store=store)) as client:
        assert client.get("/api/suggestions").json() == []
    assert store.is_open is True
    assert store.list_suggestions() == []
    store.close()


def test_app_closes_the_store_it_opened(env, data_file):
    store = JSONStore(data_file)
    with TestClient(create_app(store=store)):
        assert store.is_open is True
    assert store.is_open is False
