"""Tests for authentication API endpoints."""

from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy import select

from moviematic.models import User, UserRole
from moviematic.utils.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)

REGISTRATION = {
    "email": "NewUser@Example.com",
    "password": "securepassword123",
    "first_name": "New",
    "last_name": "User",
}


class TestRegister:
    """Tests for user registration endpoint."""

    async def test_register_success(self, client: AsyncClient, session_factory) -> None:
        """Test successful registration returns the user and a token pair."""
        response = await client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "newuser@example.com"
        assert data["user"]["role"] == "user"
        assert data["user"]["is_active"] is True
        assert data["token_type"] == "bearer"
        assert decode_token(data["access_token"]) == data["user"]["id"]
        assert decode_token(data["refresh_token"], "refresh") == data["user"]["id"]
        # Password should NOT be in response
        assert "password" not in data["user"]
        assert "hashed_password" not in data["user"]

        async with session_factory() as session:
            result = await session.execute(select(User))
            stored = result.scalar_one()
        assert verify_password("securepassword123", stored.hashed_password)

    async def test_register_email_already_exists(self, client: AsyncClient, user: User) -> None:
        """Test registration with an existing email, ignoring case."""
        response = await client.post(
            "/api/auth/register", json={**REGISTRATION, "email": "USER@example.com"}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "EMAIL_TAKEN"
        assert "Email already registered" in response.json()["detail"]

    async def test_register_invalid_email(self, client: AsyncClient) -> None:
        """Test registration with invalid email format."""
        response = await client.post(
            "/api/auth/register", json={**REGISTRATION, "email": "not-an-email"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["errors"]

    async def test_register_password_too_short(self, client: AsyncClient) -> None:
        """Test registration with password that is too short."""
        response = await client.post("/api/auth/register", json={**REGISTRATION, "password": "short"})

        assert response.status_code == 400

    async def test_register_rejects_role_field(self, client: AsyncClient) -> None:
        """Test that clients cannot pick their own role."""
        response = await client.post("/api/auth/register", json={**REGISTRATION, "role": "admin"})

        assert response.status_code == 400


class TestLogin:
    """Tests for login endpoint."""

    async def test_login_success(self, client: AsyncClient, user: User) -> None:
        response = await client.post(
            "/api/auth/login",
            json={"email": "User@Example.com", "password": "securepassword123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == user.id
        assert decode_token(data["access_token"]) == user.id

    async def test_login_wrong_password(self, client: AsyncClient, user: User) -> None:
        response = await client.post(
            "/api/auth/login",
            json={"email": "user@example.com", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_login_unknown_email(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "securepassword123"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    async def test_login_deactivated_account(self, client: AsyncClient, create_user) -> None:
        await create_user(email="inactive@example.com", is_active=False)

        response = await client.post(
            "/api/auth/login",
            json={"email": "inactive@example.com", "password": "securepassword123"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "ACCOUNT_DEACTIVATED"


class TestRefresh:
    """Tests for token refresh endpoint."""

    async def test_refresh_issues_new_pair(self, client: AsyncClient, user: User) -> None:
        response = await client.post(
            "/api/auth/refresh", json={"refresh_token": create_refresh_token(user.id)}
        )

        assert response.status_code == 200
        data = response.json()
        assert decode_token(data["access_token"]) == user.id
        assert decode_token(data["refresh_token"], "refresh") == user.id

    async def test_refresh_rejects_access_token(self, client: AsyncClient, user: User) -> None:
        response = await client.post(
            "/api/auth/refresh", json={"refresh_token": create_access_token(user.id)}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"


class TestCurrentUser:
    """Tests for token-protected account endpoints."""

    async def test_me(self, client: AsyncClient, user: User, user_headers: dict) -> None:
        response = await client.get("/api/auth/me", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "user@example.com"

    async def test_me_without_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["code"] == "NO_TOKEN"

    async def test_me_with_garbage_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"

    async def test_me_with_expired_token(self, client: AsyncClient, user: User) -> None:
        token = create_access_token(user.id, expires_delta=timedelta(seconds=-10))

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_EXPIRED"

    async def test_me_with_refresh_token(self, client: AsyncClient, user: User) -> None:
        token = create_refresh_token(user.id)

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"

    async def test_me_for_deleted_user(self, client: AsyncClient) -> None:
        token = create_access_token(9999)

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["code"] == "USER_NOT_FOUND"

    async def test_me_for_deactivated_user(self, client: AsyncClient, create_user) -> None:
        inactive = await create_user(email="inactive@example.com", is_active=False)
        token = create_access_token(inactive.id)

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["code"] == "ACCOUNT_DEACTIVATED"

    async def test_update_profile(self, client: AsyncClient, user: User, user_headers: dict) -> None:
        response = await client.put(
            "/api/auth/profile", json={"first_name": "Renamed"}, headers=user_headers
        )

        assert response.status_code == 200
        assert response.json()["first_name"] == "Renamed"
        assert response.json()["last_name"] == "User"

    async def test_change_password(
        self, client: AsyncClient, user: User, user_headers: dict, session_factory
    ) -> None:
        response = await client.put(
            "/api/auth/change-password",
            json={"current_password": "securepassword123", "new_password": "evenmoresecure456"},
            headers=user_headers,
        )

        assert response.status_code == 200
        async with session_factory() as session:
            stored = await session.get(User, user.id)
        assert verify_password("evenmoresecure456", stored.hashed_password)

    async def test_change_password_wrong_current(
        self, client: AsyncClient, user: User, user_headers: dict
    ) -> None:
        response = await client.put(
            "/api/auth/change-password",
            json={"current_password": "not-my-password", "new_password": "evenmoresecure456"},
            headers=user_headers,
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"


class TestUserStatus:
    """Tests for the admin user status endpoint."""

    async def test_admin_deactivates_user(
        self, client: AsyncClient, user: User, admin_headers: dict
    ) -> None:
        response = await client.put(
            f"/api/auth/users/{user.id}/status", json={"is_active": False}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["is_active"] is False

        # The deactivated user's token stops working
        me = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {create_access_token(user.id)}"}
        )
        assert me.status_code == 401
        assert me.json()["code"] == "ACCOUNT_DEACTIVATED"

    async def test_admin_promotes_user(
        self, client: AsyncClient, user: User, admin_headers: dict
    ) -> None:
        response = await client.put(
            f"/api/auth/users/{user.id}/status", json={"role": "admin"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["role"] == UserRole.ADMIN

    async def test_admin_cannot_demote_self(
        self, client: AsyncClient, admin: User, admin_headers: dict
    ) -> None:
        response = await client.put(
            f"/api/auth/users/{admin.id}/status", json={"role": "user"}, headers=admin_headers
        )

        assert response.status_code == 400

    async def test_non_admin_is_forbidden(
        self, client: AsyncClient, user: User, user_headers: dict
    ) -> None:
        response = await client.put(
            f"/api/auth/users/{user.id}/status", json={"role": "admin"}, headers=user_headers
        )

        assert response.status_code == 403
        assert response.json()["code"] == "INSUFFICIENT_PRIVILEGES"
        assert "www-authenticate" not in response.headers

    async def test_unknown_user(self, client: AsyncClient, admin_headers: dict) -> None:
        response = await client.put(
            "/api/auth/users/9999/status", json={"is_active": True}, headers=admin_headers
        )

        assert response.status_code == 404
