# =============================================================================
# tests/test_auth.py - Authentication and Session Context Tests
# =============================================================================
# Tokens are signed locally with the HS256 test secret; the admin-role
# lookup and the Supabase auth client are patched.
# =============================================================================

import time
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import settings
from app.main import app
from lib.supabase_client import SupabaseClient, SupabaseClientError


def make_token(sub: str, email: str = "owner@shop.com", expires_in: int = 3600, secret: str | None = None) -> str:
    claims = {
        "sub": sub,
        "email": email,
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
        "iat": int(time.time()),
        "role": "authenticated",
    }
    return jwt.encode(claims, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def roles(monkeypatch):
    """Map of user id -> stored role, backing the admin-role lookup."""
    table: dict[str, str] = {}
    monkeypatch.setattr(SupabaseClient, "fetch_admin_role", lambda user_id: table.get(str(user_id)))
    return table


class TestSessionContext:
    """Tests for the /auth/me endpoint and the session dependency."""

    def test_admin_session(self, client, roles):
        user_id = str(uuid4())
        roles[user_id] = "admin"

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token(user_id)}"})

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == user_id
        assert body["role"] == "admin"
        assert body["can_manage_admins"] is False

    def test_superadmin_session(self, client, roles):
        user_id = str(uuid4())
        roles[user_id] = "superadmin"

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token(user_id)}"})

        assert response.json()["can_manage_admins"] is True

    def test_user_without_admin_row(self, client, roles):
        """Test that a valid token without an admin row gets 403."""
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token(str(uuid4()))}"})

        assert response.status_code == 403
        assert response.json()["code"] == "NOT_AN_ADMIN"

    def test_unknown_role_is_not_admin(self, client, roles):
        user_id = str(uuid4())
        roles[user_id] = "viewer"

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token(user_id)}"})

        assert response.status_code == 403

    def test_expired_token(self, client, roles):
        token = make_token(str(uuid4()), expires_in=-60)

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_wrong_signature(self, client, roles):
        token = make_token(str(uuid4()), secret="some-other-secret-entirely")

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_missing_token(self, client):
        response = client.get("/api/v1/products")

        assert response.status_code in (401, 403)


class TestLogin:
    """Tests for POST /auth/login."""

    def _auth_client(self, user_id: str):
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=SimpleNamespace(id=user_id, email="owner@shop.com"),
            session=SimpleNamespace(access_token="access", refresh_token="refresh", expires_in=3600),
        )
        return auth_client

    def test_admin_login(self, client, roles, monkeypatch):
        user_id = str(uuid4())
        roles[user_id] = "superadmin"
        monkeypatch.setattr(SupabaseClient, "create_auth_client", lambda: self._auth_client(user_id))

        response = client.post("/api/v1/auth/login", json={"email": "owner@shop.com", "password": "pw"})

        assert response.status_code == 200
        body = response.json()
        assert body["access_token"] == "access"
        assert body["role"] == "superadmin"

    def test_non_admin_is_signed_out(self, client, roles, monkeypatch):
        """Test that a customer account can't obtain a console session."""
        auth_client = self._auth_client(str(uuid4()))
        monkeypatch.setattr(SupabaseClient, "create_auth_client", lambda: auth_client)

        response = client.post("/api/v1/auth/login", json={"email": "shopper@mail.com", "password": "pw"})

        assert response.status_code == 403
        auth_client.auth.sign_out.assert_called_once()

    def test_roster_failure_signs_out(self, client, monkeypatch):
        """Test that an unreadable roster leaves no live session behind."""
        auth_client = self._auth_client(str(uuid4()))
        monkeypatch.setattr(SupabaseClient, "create_auth_client", lambda: auth_client)

        def fail(user_id):
            raise SupabaseClientError("connection reset", code="ROLE_LOOKUP_FAILED")

        monkeypatch.setattr(SupabaseClient, "fetch_admin_role", fail)

        response = client.post("/api/v1/auth/login", json={"email": "owner@shop.com", "password": "pw"})

        assert response.status_code == 502
        assert response.json()["code"] == "PERSIST_FAILED"
        auth_client.auth.sign_out.assert_called_once()

    def test_bad_credentials(self, client, monkeypatch):
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.side_effect = RuntimeError("Invalid login credentials")
        monkeypatch.setattr(SupabaseClient, "create_auth_client", lambda: auth_client)

        response = client.post("/api/v1/auth/login", json={"email": "owner@shop.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["code"] == "AUTHENTICATION_FAILED"
