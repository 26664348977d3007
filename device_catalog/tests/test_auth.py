from __future__ import annotations

import logging

from fastapi.testclient import TestClient

from device_catalog.app import app
from device_catalog.auth import users
from device_catalog.auth.users import add_user, authenticate

client = TestClient(app)

add_user("viewer", "viewer123")


def _login_viewer(c):
    c.post("/auth/login", json={"username": "viewer", "password": "viewer123"})


def _login_admin(c):
    c.post("/auth/login", json={"username": "admin", "password": "admin123"})


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_admin():
    resp = client.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"] == {"username": "admin", "role": "admin"}


def test_login_wrong_password():
    resp = client.post("/auth/login", json={"username": "admin", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/auth/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_auth_me_when_logged_in():
    _login_admin(client)
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["username"] == "admin"


def test_auth_me_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/auth/me")
    assert resp.status_code == 401


def test_logout():
    _login_admin(client)
    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    resp = client.get("/auth/me")
    assert resp.status_code == 401


# ── Route protection ─────────────────────────────────────────────────────


def test_update_devices_requires_login():
    c = TestClient(app)
    resp = c.post("/update-devices")
    assert resp.status_code == 401


def test_update_devices_requires_admin():
    c = TestClient(app)
    _login_viewer(c)
    resp = c.post("/update-devices")
    assert resp.status_code == 403


def test_health_is_public():
    c = TestClient(app)
    assert c.get("/health").status_code == 200


# ── Operator seeding ─────────────────────────────────────────────────────


def test_default_operator_password_logs_warning(monkeypatch, caplog):
    monkeypatch.setattr(users, "_users", {})
    monkeypatch.setenv("DEVICE_ADMIN_USERNAME", "ops")
    monkeypatch.delenv("DEVICE_ADMIN_PASSWORD", raising=False)

    with caplog.at_level(logging.WARNING, logger="device_catalog.auth.users"):
        users._seed_users()

    assert "DEVICE_ADMIN_PASSWORD is not set" in caplog.text
    assert authenticate("ops", users.DEFAULT_ADMIN_PASSWORD) == {"username": "ops", "role": "admin"}


def test_configured_operator_password_is_quiet(monkeypatch, caplog):
    monkeypatch.setattr(users, "_users", {})
    monkeypatch.setenv("DEVICE_ADMIN_USERNAME", "ops")
    monkeypatch.setenv("DEVICE_ADMIN_PASSWORD", "s3cret-pass")

    with caplog.at_level(logging.WARNING, logger="device_catalog.auth.users"):
        users._seed_users()

    assert "DEVICE_ADMIN_PASSWORD" not in caplog.text
    assert authenticate("ops", "s3cret-pass") is not None
    assert authenticate("ops", users.DEFAULT_ADMIN_PASSWORD) is None
