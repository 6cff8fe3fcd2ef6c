"""Mock SSO login, token handling and role checks on write endpoints."""

from collegecms.config import settings
from collegecms.main import app
from tests.conftest import auth_headers


def test_login_returns_token_and_user(client, seed_users):
    resp = client.post("/api/v1/admin/auth/login", json={"email": "editor@collegecms.local"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["access_token"]
    assert body["user"]["role"] == "editor"
    assert body["user"]["author_id"] == seed_users["editor"].author_id


def test_login_normalizes_email(client, seed_users):
    resp = client.post("/api/v1/admin/auth/login", json={"email": "  Admin@CollegeCMS.local "})
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "admin@collegecms.local"


def test_login_unknown_email_is_rejected(client, seed_users):
    resp = client.post("/api/v1/admin/auth/login", json={"email": "nobody@collegecms.local"})
    assert resp.status_code == 401
    body = resp.json()
    assert body["success"] is False
    assert "nobody@collegecms.local" in body["message"]


def test_login_inactive_user_is_rejected(client, seed_users):
    resp = client.post("/api/v1/admin/auth/login", json={"email": "gone@collegecms.local"})
    assert resp.status_code == 401


def test_me_returns_current_user(client, seed_users):
    headers = auth_headers(client, "viewer@collegecms.local")
    resp = client.get("/api/v1/admin/auth/me", headers=headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["email"] == "viewer@collegecms.local"
    assert data["author_id"] is None


def test_invalid_token_is_rejected(client, seed_users):
    resp = client.get("/api/v1/admin/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"


def test_missing_token_is_rejected(client, seed_users):
    resp = client.get("/api/v1/admin/auth/me")
    assert resp.status_code in (401, 403)


def test_viewer_cannot_save_content(client, seed_users, seed_catalog):
    headers = auth_headers(client, "viewer@collegecms.local")
    college_id = seed_catalog["colleges"]["iitb"].college_id
    resp = client.put(
        f"/api/v1/admin/colleges/{college_id}/content/overview",
        headers=headers,
        json={"title": "IIT Bombay Overview", "content": "<p>x</p>"},
    )
    assert resp.status_code == 403
    assert resp.json()["success"] is False


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/v1/admin/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_app_debug_follows_settings():
    assert app.debug is settings.DEBUG
