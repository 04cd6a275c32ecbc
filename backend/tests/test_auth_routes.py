"""
HTTP-level tests for registration, login and the access guard.

The guard is exercised through real protected routes rather than called
directly, so a route that loses its dependency shows up here.
"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import auth_headers, register
from wall.api.dependencies import authenticate
from wall.core import messages
from wall.core.exceptions import UnauthorizedError
from wall.core.security import TokenService, token_service


class TestRegisterRoute:
    def test_register_returns_user_and_both_tokens(self, client):
        body = register(client)

        assert set(body) == {"user", "access_token", "refresh_token"}
        assert body["user"]["id"] == 1
        assert body["user"]["email"] == "alice@x.com"
        assert body["user"]["firstName"] == ""
        assert body["user"]["birthDate"] == "1900-01-01"
        assert "password" not in str(body["user"]).lower()

    def test_duplicate_register_is_409(self, client):
        register(client)

        resp = client.post("/api/auth/register", json={"email": "alice@x.com", "password": "x"})

        assert resp.status_code == 409
        assert resp.json()["detail"] == messages.EMAIL_TAKEN

    def test_non_string_email_is_rejected(self, client):
        resp = client.post("/api/auth/register", json={"email": {"a": 1}, "password": "pw"})

        assert resp.status_code == 422


class TestLoginRoute:
    def test_login_succeeds(self, client):
        register(client)

        resp = client.post("/api/auth/login", json={"email": "alice@x.com", "password": "pw123"})

        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == 1

    def test_unknown_email_and_wrong_password_look_the_same(self, client):
        register(client)

        wrong_password = client.post("/api/auth/login", json={"email": "alice@x.com", "password": "nope"})
        unknown_email = client.post("/api/auth/login", json={"email": "bob@x.com", "password": "pw123"})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"detail": messages.INVALID_CREDENTIALS}


class TestAccessGuard:
    def test_missing_header_is_401(self, client):
        resp = client.get("/api/posts")

        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_invalid_token_is_401(self, client):
        resp = client.get("/api/posts", headers=auth_headers("not.a.token"))

        assert resp.status_code == 401

    def test_header_without_token_part_is_401(self, client):
        resp = client.get("/api/posts", headers={"Authorization": "Bearer"})

        assert resp.status_code == 401

    def test_expired_token_is_401(self, client):
        register(client)
        stale = TokenService(
            secret_key=token_service.secret_key,
            clock=lambda: datetime.now(timezone.utc) - timedelta(days=30),
        ).issue({"id": 1, "sub": "1"}, timedelta(days=10))

        resp = client.get("/api/posts", headers=auth_headers(stale))

        assert resp.status_code == 401

    def test_scheme_word_is_not_checked(self, client):
        token = register(client)["access_token"]

        resp = client.get("/api/posts", headers={"Authorization": f"Token {token}"})

        assert resp.status_code == 200

    def test_valid_token_reaches_route(self, client):
        token = register(client)["access_token"]

        resp = client.get("/api/auth/me", headers=auth_headers(token))

        assert resp.status_code == 200
        assert resp.json()["email"] == "alice@x.com"

    def test_profile_routes_are_guarded(self, client):
        register(client)

        assert client.get("/api/profile/1").status_code == 401
        assert client.put("/api/profile/1", json={"about": "x"}).status_code == 401


class TestAuthenticate:
    class _StubAuth:
        def __init__(self, claims):
            self.claims = claims

        def validate_token(self, token):
            return self.claims if token == "good" else None

    def test_resolves_identity(self):
        identity = authenticate("Bearer good", self._StubAuth({"id": 7, "sub": "7"}))

        assert identity.user_id == 7
        assert identity.claims["sub"] == "7"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer bad", "good"])
    def test_rejects(self, header):
        with pytest.raises(UnauthorizedError):
            authenticate(header, self._StubAuth({"id": 7}))

    def test_rejects_claims_without_identity(self):
        with pytest.raises(UnauthorizedError):
            authenticate("Bearer good", self._StubAuth({"role": "x"}))
