"""
Authentication endpoint tests.

Tests for:
- Registration (and the /signup alias)
- Login
- Bearer token handling on protected routes
- Profile read/update and password change
- Localized messages
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from event_locator.core.security import create_access_token
from event_locator.models.user import User

TEST_PASSWORD = "secret1"  # password of the conftest users


# ================================
# Registration Endpoint Tests
# ================================

class TestRegistration:

    async def test_register_success(self, client: AsyncClient, sample_user_data: dict):
        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User registered successfully"
        assert data["token"]
        assert data["token_type"] == "bearer"

        user = data["user"]
        assert user["email"] == "new.user@example.com"
        assert user["first_name"] == "New"
        assert user["preferred_language"] == "en"
        assert user["default_radius"] == 10.0
        assert user["location"] is None
        assert user["preferred_categories"] == []
        assert "password" not in user
        assert "password_hash" not in user

    async def test_register_with_location(self, client: AsyncClient, sample_user_data: dict):
        sample_user_data.update(latitude=40.7, longitude=-73.9, preferred_language="fr")

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["location"] == {"type": "Point", "coordinates": [-73.9, 40.7]}
        assert user["preferred_language"] == "fr"

    async def test_signup_alias(self, client: AsyncClient, sample_user_data: dict):
        response = await client.post("/api/auth/signup", json=sample_user_data)
        assert response.status_code == 201

    async def test_token_from_registration_works(self, client: AsyncClient, sample_user_data: dict):
        token = (await client.post("/api/auth/register", json=sample_user_data)).json()["token"]

        response = await client.get(
            "/api/auth/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["email"] == "new.user@example.com"

    async def test_register_duplicate_email(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_user: User,
        sample_user_data: dict,
    ):
        # Case differs from the stored email
        sample_user_data["email"] = "OWNER@example.com"

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 400
        assert response.json() == {"message": "User with this email already exists"}
        assert await db_session.scalar(select(func.count()).select_from(User)) == 1

    async def test_register_invalid_email(self, client: AsyncClient, sample_user_data: dict):
        sample_user_data["email"] = "invalid-email"

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Validation failed"
        assert [error["field"] for error in data["errors"]] == ["email"]

    async def test_register_short_password(self, client: AsyncClient, sample_user_data: dict):
        sample_user_data["password"] = "12345"

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    async def test_register_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={"email": "a@example.com"})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"password", "first_name", "last_name"} <= fields

    async def test_register_half_location(self, client: AsyncClient, sample_user_data: dict):
        sample_user_data["latitude"] = 40.7

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 400

    async def test_register_long_password(self, client: AsyncClient, sample_user_data: dict):
        """Passwords past bcrypt's 72-byte limit still register and log in."""
        sample_user_data["password"] = "p" * 80

        response = await client.post("/api/auth/register", json=sample_user_data)
        assert response.status_code == 201, response.text

        login = await client.post(
            "/api/auth/login",
            json={"email": sample_user_data["email"], "password": "p" * 80},
        )
        assert login.status_code == 200
        assert login.json()["token"]


# ================================
# Login Endpoint Tests
# ================================

class TestLogin:

    async def test_login_success(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/auth/login",
            json={"email": "Owner@Example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["token"]
        assert data["user"]["id"] == test_user.id

    async def test_login_wrong_password(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/auth/login",
            json={"email": test_user.email, "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}

    async def test_login_user_not_found(self, client: AsyncClient):
        """Unknown email gets the same answer as a wrong password."""
        response = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}


# ================================
# Token Handling Tests
# ================================

class TestBearerToken:

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json() == {"message": "No authentication token, authorization denied"}

    async def test_malformed_token(self, client: AsyncClient):
        response = await client.get(
            "/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Token is not valid"}

    async def test_token_for_unknown_user(self, client: AsyncClient, test_user: User):
        token = create_access_token({"sub": str(test_user.id + 1000)})

        response = await client.get(
            "/api/auth/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    async def test_token_without_numeric_subject(self, client: AsyncClient):
        token = create_access_token({"sub": "owner@example.com"})

        response = await client.get(
            "/api/auth/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Token is not valid"}


# ================================
# Profile Tests
# ================================

class TestProfile:

    async def test_get_profile(self, client: AsyncClient, test_user: User, auth_headers: dict):
        response = await client.get("/api/auth/profile", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == test_user.id
        assert data["first_name"] == "Ada"
        assert data["last_name"] == "Lovelace"
        assert "password_hash" not in data

    async def test_update_profile(
        self,
        client: AsyncClient,
        test_user: User,
        auth_headers: dict,
        categories: dict,
    ):
        response = await client.put(
            "/api/auth/profile",
            headers=auth_headers,
            json={
                "latitude": 48.8566,
                "longitude": 2.3522,
                "default_radius": 25,
                "preferred_language": "fr",
                "preferred_category_ids": [categories["Music"].id, categories["Art"].id, 9999],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Profile updated successfully"

        user = data["user"]
        assert user["location"] == {"type": "Point", "coordinates": [2.3522, 48.8566]}
        assert user["default_radius"] == 25.0
        assert user["preferred_language"] == "fr"
        # Unknown id skipped, ordered by name
        assert [c["name"] for c in user["preferred_categories"]] == ["Art", "Music"]
        # Untouched fields keep their values
        assert user["first_name"] == "Ada"

    async def test_update_profile_half_location(self, client: AsyncClient, auth_headers: dict):
        response = await client.put(
            "/api/auth/profile", headers=auth_headers, json={"longitude": 2.35}
        )
        assert response.status_code == 400

    async def test_update_profile_requires_auth(self, client: AsyncClient):
        response = await client.put("/api/auth/profile", json={"first_name": "X"})
        assert response.status_code == 401


# ================================
# Password Change Tests
# ================================

class TestChangePassword:

    async def test_change_password(self, client: AsyncClient, test_user: User, auth_headers: dict):
        response = await client.put(
            "/api/auth/change-password",
            headers=auth_headers,
            json={"current_password": TEST_PASSWORD, "new_password": "brand-new-pass"},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Password changed successfully"}

        old_login = await client.post(
            "/api/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD}
        )
        new_login = await client.post(
            "/api/auth/login", json={"email": test_user.email, "password": "brand-new-pass"}
        )
        assert old_login.status_code == 401
        assert new_login.status_code == 200

    async def test_wrong_current_password(self, client: AsyncClient, auth_headers: dict):
        response = await client.put(
            "/api/auth/change-password",
            headers=auth_headers,
            json={"current_password": "not-it", "new_password": "brand-new-pass"},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Current password is incorrect"}

    async def test_change_to_long_password(
        self, client: AsyncClient, test_user: User, auth_headers: dict
    ):
        long_password = "é" * 50  # 100 bytes in UTF-8

        response = await client.put(
            "/api/auth/change-password",
            headers=auth_headers,
            json={"current_password": TEST_PASSWORD, "new_password": long_password},
        )
        assert response.status_code == 200

        login = await client.post(
            "/api/auth/login", json={"email": test_user.email, "password": long_password}
        )
        assert login.status_code == 200


# ================================
# Localization Tests
# ================================

class TestLocalizedMessages:

    async def test_query_parameter(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/auth/login?lng=es",
            json={"email": test_user.email, "password": TEST_PASSWORD},
        )
        assert response.json()["message"] == "Inicio de sesión correcto"

    async def test_accept_language_header(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
            headers={"Accept-Language": "fr-CA,fr;q=0.9,en;q=0.8"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "E-mail ou mot de passe invalide"

    @pytest.mark.parametrize("lng", ["de", "xx"])
    async def test_unsupported_language_falls_back(self, client: AsyncClient, lng: str):
        response = await client.get(f"/api/auth/profile?lng={lng}")
        assert response.json()["message"] == "No authentication token, authorization denied"
