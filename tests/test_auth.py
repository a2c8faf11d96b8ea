"""Auth tests — password login, token validation, admin gate, bootstrap
admin, and the admin user-management endpoints.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from quickclock.auth.security import decode_token, hash_password, verify_password
from quickclock.common.constants import UserRole
from quickclock.config import settings
from quickclock.users.service import UserService
from tests.conftest import TEST_PASSWORD, bearer, insert_user


def _token(**overrides) -> dict[str, str]:
    payload = {
        "sub": "00000000-0000-0000-0000-000000000000",
        "role": "employee",
        "type": "access",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    payload.update(overrides)
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


# ═════════════════════════════════════════════════════════════════════
# 1. Security helpers
# ═════════════════════════════════════════════════════════════════════


class TestSecurity:

    def test_password_hash_roundtrip(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong", hashed)

    def test_token_carries_subject_and_role(self, employee):
        headers = bearer(employee)
        payload = decode_token(headers["Authorization"].removeprefix("Bearer "))
        assert payload["sub"] == str(employee.id)
        assert payload["role"] == "employee"
        assert payload["type"] == "access"


# ═════════════════════════════════════════════════════════════════════
# 2. Login / me
# ═════════════════════════════════════════════════════════════════════


class TestLogin:

    async def test_login_success(self, client, employee):
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": "Test.User@QuickClock.io", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] == settings.JWT_EXPIRY_HOURS * 3600
        assert body["user"]["id"] == str(employee.id)

        resp = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {body['access_token']}"},
        )
        assert resp.status_code == 200
        assert resp.json()["email"] == employee.email

    async def test_wrong_password(self, client, employee):
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": employee.email, "password": "not-the-password"},
        )
        assert resp.status_code == 401

    async def test_unknown_email(self, client):
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@quickclock.io", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 401

    async def test_inactive_user_cannot_login(self, client, db):
        user = await insert_user(db, email="former@quickclock.io", is_active=False)
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": TEST_PASSWORD},
        )
        assert resp.status_code == 401

    async def test_login_is_rate_limited(self, client, employee):
        payload = {"email": employee.email, "password": "wrong-password"}
        statuses = [
            (await client.post("/api/v1/auth/login", json=payload)).status_code
            for _ in range(11)
        ]
        assert statuses[:10] == [401] * 10
        assert statuses[10] == 429


class TestTokenValidation:

    async def test_missing_header(self, client):
        resp = await client.get("/api/v1/auth/me")
        assert resp.status_code == 401

    async def test_expired_token(self, client, employee):
        headers = _token(
            sub=str(employee.id),
            exp=datetime.now(timezone.utc) - timedelta(minutes=1),
        )
        resp = await client.get("/api/v1/auth/me", headers=headers)
        assert resp.status_code == 401
        assert "expired" in resp.json()["detail"].lower()

    async def test_bad_signature(self, client, employee):
        token = jwt.encode(
            {"sub": str(employee.id), "type": "access"},
            "some-other-secret",
            algorithm=settings.JWT_ALGORITHM,
        )
        resp = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 401

    async def test_wrong_token_type(self, client, employee):
        resp = await client.get(
            "/api/v1/auth/me", headers=_token(sub=str(employee.id), type="refresh"),
        )
        assert resp.status_code == 401

    async def test_unknown_subject(self, client):
        resp = await client.get("/api/v1/auth/me", headers=_token())
        assert resp.status_code == 401

    async def test_admin_role_comes_from_stored_user(self, client, employee):
        headers = _token(sub=str(employee.id), role="admin")
        resp = await client.get("/api/v1/users", headers=headers)
        assert resp.status_code == 403


# ═════════════════════════════════════════════════════════════════════
# 3. Bootstrap admin
# ═════════════════════════════════════════════════════════════════════


class TestBootstrapAdmin:

    async def test_creates_admin_when_none_exists(self, db):
        admin = await UserService.ensure_bootstrap_admin(db, "Boss@QuickClock.io", "long-password")
        await db.commit()

        assert admin.role == UserRole.admin
        assert admin.email == "boss@quickclock.io"
        assert verify_password("long-password", admin.password_hash)

    async def test_noop_when_admin_exists(self, db, admin):
        assert await UserService.ensure_bootstrap_admin(db, "boss@quickclock.io", "long-password") is None

    async def test_noop_without_credentials(self, db):
        assert await UserService.ensure_bootstrap_admin(db, None, None) is None
        assert await UserService.list_admins(db) == []


# ═════════════════════════════════════════════════════════════════════
# 4. User management (admin)
# ═════════════════════════════════════════════════════════════════════


class TestUserManagementAPI:

    async def test_create_and_deactivate(self, client, admin_headers):
        resp = await client.post(
            "/api/v1/users",
            json={
                "full_name": "New Hire",
                "email": "new.hire@quickclock.io",
                "password": "welcome-aboard",
                "department": "Operations",
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201
        user_id = resp.json()["id"]
        assert resp.json()["role"] == "employee"
        assert "password_hash" not in resp.json()

        resp = await client.patch(
            f"/api/v1/users/{user_id}", json={"is_active": False}, headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["is_active"] is False

        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": "new.hire@quickclock.io", "password": "welcome-aboard"},
        )
        assert resp.status_code == 401

    async def test_duplicate_email(self, client, admin_headers, employee):
        resp = await client.post(
            "/api/v1/users",
            json={"full_name": "Dup", "email": employee.email, "password": "whatever-123"},
            headers=admin_headers,
        )
        assert resp.status_code == 409

    async def test_employee_cannot_list_users(self, client, auth_headers):
        resp = await client.get("/api/v1/users", headers=auth_headers)
        assert resp.status_code == 403
