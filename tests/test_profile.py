"""
Tests for profiles: username rules, lazy creation and profile endpoints.

Tests cover:
- Username validation and normalization
- Get-or-create with locale-based currency
- Username availability and conflicts
- Visibility and currency updates
- Authentication and error cases
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from nomnom.auth.dependencies import AuthenticatedUser, get_authenticated_user
from nomnom.main import app
from nomnom.services.profile_service import (
    UsernameTakenError,
    get_or_create_profile,
    is_username_available,
    normalize_username,
    update_currency,
    update_profile_visibility,
    update_username,
    validate_username,
)

client = TestClient(app)


async def mock_get_authenticated_user_dependency():
    """Mock dependency that returns test AuthenticatedUser."""
    return AuthenticatedUser(
        user_id="test-user-id",
        access_token="test-access-token"
    )


@pytest.fixture
def mock_auth():
    """Override get_authenticated_user dependency."""
    app.dependency_overrides[get_authenticated_user] = mock_get_authenticated_user_dependency
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db(fake_db):
    """Route the profile endpoints to the in-memory fake."""
    with patch("nomnom.routes.profile.get_supabase_client", return_value=fake_db):
        yield fake_db


class TestValidateUsername:
    """Tests for validate_username"""

    @pytest.mark.parametrize("username", ["abc", "abc123", "foodie_sam", "a_b_c", "a" * 20])
    def test_valid(self, username):
        assert validate_username(username) is None

    def test_too_short(self):
        assert validate_username("ab") == "Username must be at least 3 characters"

    def test_too_long(self):
        assert validate_username("a" * 21) == "Username must be 20 characters or less"

    def test_uppercase_rejected(self):
        assert "lowercase" in validate_username("Ab_cde")

    def test_must_start_with_letter(self):
        assert validate_username("1abc") is not None
        assert validate_username("_abc") is not None

    def test_consecutive_underscores(self):
        assert validate_username("a__b") == "Username cannot contain consecutive underscores"

    def test_empty(self):
        assert validate_username("") == "Username is required"
        assert validate_username(None) == "Username is required"

    def test_normalize(self):
        assert normalize_username("  Foodie_Sam ") == "foodie_sam"


class TestProfileService:
    """Tests for profile_service against the in-memory fake"""

    @pytest.mark.asyncio
    async def test_get_or_create_creates_once(self, fake_db):
        created = await get_or_create_profile(fake_db, "u1", locale="en-MY")
        again = await get_or_create_profile(fake_db, "u1", locale="en-GB")

        assert created["currency"] == "MYR"
        assert created["username"] is None
        assert created["profile_visibility"] == "public"
        assert again["id"] == created["id"]
        assert again["currency"] == "MYR"
        assert len(fake_db.tables["profiles"]) == 1

    @pytest.mark.asyncio
    async def test_get_or_create_defaults_to_usd(self, fake_db):
        profile = await get_or_create_profile(fake_db, "u1")

        assert profile["currency"] == "USD"

    @pytest.mark.asyncio
    async def test_update_username_normalizes(self, fake_db):
        fake_db.add_profile("u1")

        profile = await update_username(fake_db, "u1", "  Foodie_Sam ")

        assert profile["username"] == "foodie_sam"
        assert profile["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_update_username_invalid(self, fake_db):
        fake_db.add_profile("u1")

        with pytest.raises(ValueError, match="consecutive"):
            await update_username(fake_db, "u1", "a__b")

    @pytest.mark.asyncio
    async def test_update_username_taken(self, fake_db):
        fake_db.add_profile("u1")
        fake_db.add_profile("u2", username="taken_name")

        with pytest.raises(UsernameTakenError):
            await update_username(fake_db, "u1", "Taken_Name")

    @pytest.mark.asyncio
    async def test_own_username_is_available(self, fake_db):
        fake_db.add_profile("u1", username="mine")

        assert await is_username_available(fake_db, "mine", "u1") is True
        assert await is_username_available(fake_db, "mine", "u2") is False
        assert await is_username_available(fake_db, "free_name", "u2") is True

    @pytest.mark.asyncio
    async def test_visibility_update(self, fake_db):
        fake_db.add_profile("u1")

        profile = await update_profile_visibility(fake_db, "u1", "friends_only")

        assert profile["profile_visibility"] == "friends_only"

        with pytest.raises(ValueError):
            await update_profile_visibility(fake_db, "u1", "secret")

    @pytest.mark.asyncio
    async def test_currency_update(self, fake_db):
        fake_db.add_profile("u1")

        profile = await update_currency(fake_db, "u1", "myr")

        assert profile["currency"] == "MYR"

        with pytest.raises(ValueError, match="Unsupported"):
            await update_currency(fake_db, "u1", "ABC")

    @pytest.mark.asyncio
    async def test_update_missing_profile_returns_none(self, fake_db):
        assert await update_profile_visibility(fake_db, "ghost", "private") is None


class TestGetProfile:
    """Tests for GET /profile"""

    def test_get_profile_creates_with_detected_currency(self, mock_auth, db):
        response = client.get("/profile", headers={"Accept-Language": "en-MY,en;q=0.8"})

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "test-user-id"
        assert data["username"] is None
        assert data["currency"] == "MYR"
        assert data["profile_visibility"] == "public"

    def test_get_existing_profile(self, mock_auth, db):
        db.add_profile("test-user-id", username="sam", currency="EUR")

        response = client.get("/profile")

        assert response.status_code == 200
        assert response.json()["username"] == "sam"
        assert response.json()["currency"] == "EUR"

    def test_storage_failure(self, mock_auth, db):
        db.fail_on = "profiles"

        response = client.get("/profile")

        assert response.status_code == 500
        assert response.json()["error"] == "internal_error"

    def test_get_profile_unauthorized(self):
        response = client.get("/profile")

        assert response.status_code == 401


class TestUsernameEndpoints:
    """Tests for /profile/username and /profile/username-available"""

    def test_availability_free(self, mock_auth, db):
        response = client.get("/profile/username-available", params={"username": "New_Name"})

        assert response.status_code == 200
        assert response.json() == {"username": "new_name", "available": True, "error": None}

    def test_availability_taken(self, mock_auth, db):
        db.add_profile("other", username="taken")

        response = client.get("/profile/username-available", params={"username": "taken"})

        assert response.json()["available"] is False
        assert response.json()["error"] == "This username is already taken"

    def test_availability_invalid(self, mock_auth, db):
        response = client.get("/profile/username-available", params={"username": "ab"})

        data = response.json()
        assert data["available"] is False
        assert "at least 3" in data["error"]

    def test_set_username(self, mock_auth, db):
        db.add_profile("test-user-id")

        response = client.put("/profile/username", json={"username": "Foodie_Sam"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "UPDATED"
        assert data["profile"]["username"] == "foodie_sam"
        assert data["message"] == "Username updated successfully"

    def test_set_invalid_username(self, mock_auth, db):
        db.add_profile("test-user-id")

        response = client.put("/profile/username", json={"username": "a__b"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_username"

    def test_set_taken_username(self, mock_auth, db):
        db.add_profile("test-user-id")
        db.add_profile("other", username="taken")

        response = client.put("/profile/username", json={"username": "taken"})

        assert response.status_code == 409
        assert response.json()["error"] == "username_taken"

    def test_set_username_without_profile(self, mock_auth, db):
        response = client.put("/profile/username", json={"username": "valid_name"})

        assert response.status_code == 404


class TestPreferenceEndpoints:
    """Tests for PUT /profile/visibility and PUT /profile/currency"""

    def test_set_visibility(self, mock_auth, db):
        db.add_profile("test-user-id")

        response = client.put("/profile/visibility", json={"profile_visibility": "private"})

        assert response.status_code == 200
        assert response.json()["profile"]["profile_visibility"] == "private"

    def test_invalid_visibility_is_400(self, mock_auth, db):
        response = client.put("/profile/visibility", json={"profile_visibility": "everyone"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_set_currency(self, mock_auth, db):
        db.add_profile("test-user-id")

        response = client.put("/profile/currency", json={"currency": "jpy"})

        assert response.status_code == 200
        assert response.json()["profile"]["currency"] == "JPY"

    def test_unsupported_currency(self, mock_auth, db):
        db.add_profile("test-user-id")

        response = client.put("/profile/currency", json={"currency": "ABC"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_currency"
