"""
Tests for saved restaurants: filtering, persistence rules and endpoints.
"""

from typing import get_args

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from nomnom.auth.dependencies import AuthenticatedUser, get_authenticated_user
from nomnom.main import app
from nomnom.utils.constants import (
    CONTEXT_LABELS,
    CONTEXT_TAGS,
    DIETARY_LABELS,
    DIETARY_TAGS,
    ContextTag,
    DietaryTag,
)
from nomnom.services.restaurant_service import (
    delete_restaurant,
    filter_restaurants,
    get_restaurant_by_id,
    get_restaurants_by_user_id,
    get_saved_restaurants,
    save_restaurant,
    update_restaurant,
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
    with patch("nomnom.routes.restaurants.get_supabase_client", return_value=fake_db):
        yield fake_db


class TestFilterRestaurants:
    """Tests for filter_restaurants"""

    RESTAURANTS = [
        {"name": "A", "price_range": 1, "dietary_tags": ["halal", "vegetarian"], "context_tags": ["quick-lunch"]},
        {"name": "B", "price_range": 2, "dietary_tags": ["halal"], "context_tags": ["date-night"]},
        {"name": "C", "price_range": 3, "dietary_tags": [], "context_tags": ["date-night", "late-night"]},
        {"name": "D", "price_range": None, "dietary_tags": None, "context_tags": None},
    ]

    def _names(self, result):
        return [r["name"] for r in result]

    def test_no_filters_keeps_everything_in_order(self):
        assert self._names(filter_restaurants(self.RESTAURANTS)) == ["A", "B", "C", "D"]

    def test_price_matches_any_selected_tier(self):
        assert self._names(filter_restaurants(self.RESTAURANTS, price_levels=[1, 3])) == ["A", "C"]

    def test_dietary_requires_all_tags(self):
        result = filter_restaurants(self.RESTAURANTS, dietary_tags=["halal", "vegetarian"])

        assert self._names(result) == ["A"]

    def test_context_matches_any_tag(self):
        result = filter_restaurants(self.RESTAURANTS, context_tags=["quick-lunch", "late-night"])

        assert self._names(result) == ["A", "C"]

    def test_filters_combine(self):
        result = filter_restaurants(
            self.RESTAURANTS,
            price_levels=[1, 2],
            dietary_tags=["halal"],
            context_tags=["date-night"],
        )

        assert self._names(result) == ["B"]


class TestRestaurantService:
    """Tests for restaurant_service against the in-memory fake"""

    @pytest.mark.asyncio
    async def test_save_defaults(self, fake_db):
        saved = await save_restaurant(
            fake_db, "u1", name=" Nasi Kandar ", address="Penang ", place_id="pid-1",
            tags=["mamak", " mamak", ""], notes="   ",
        )

        assert saved["name"] == "Nasi Kandar"
        assert saved["currency"] == "USD"
        assert saved["is_public"] is True
        assert saved["tags"] == ["mamak"]
        assert saved["dietary_tags"] == []
        assert saved["notes"] is None

    @pytest.mark.asyncio
    async def test_list_newest_first_and_scoped(self, fake_db):
        fake_db.add_restaurant("u1", "Old")
        fake_db.add_restaurant("u2", "Other user")
        fake_db.add_restaurant("u1", "New")

        restaurants = await get_saved_restaurants(fake_db, "u1")

        assert [r["name"] for r in restaurants] == ["New", "Old"]

    @pytest.mark.asyncio
    async def test_public_only(self, fake_db):
        fake_db.add_restaurant("u1", "Shared")
        fake_db.add_restaurant("u1", "Hidden", is_public=False)

        public = await get_restaurants_by_user_id(fake_db, "u1", public_only=True)

        assert [r["name"] for r in public] == ["Shared"]

    @pytest.mark.asyncio
    async def test_get_by_id_is_scoped(self, fake_db):
        row = fake_db.add_restaurant("u1", "Place")

        assert (await get_restaurant_by_id(fake_db, "u1", row["id"]))["name"] == "Place"
        assert await get_restaurant_by_id(fake_db, "u2", row["id"]) is None

    @pytest.mark.asyncio
    async def test_update_rejects_fixed_fields(self, fake_db):
        row = fake_db.add_restaurant("u1", "Place")

        with pytest.raises(ValueError, match="name"):
            await update_restaurant(fake_db, "u1", row["id"], name="Renamed")

    @pytest.mark.asyncio
    async def test_cannot_touch_other_users_row(self, fake_db):
        row = fake_db.add_restaurant("owner", "Place")

        assert await update_restaurant(fake_db, "intruder", row["id"], rating=1) is None
        assert await delete_restaurant(fake_db, "intruder", row["id"]) is False
        assert len(fake_db.tables["restaurants"]) == 1
        assert fake_db.tables["restaurants"][0].get("rating") is None

    @pytest.mark.asyncio
    async def test_update_and_delete(self, fake_db):
        row = fake_db.add_restaurant("u1", "Place")

        updated = await update_restaurant(
            fake_db, "u1", row["id"], rating=5, currency="myr", notes=""
        )

        assert updated["rating"] == 5
        assert updated["currency"] == "MYR"
        assert updated["notes"] is None
        assert await delete_restaurant(fake_db, "u1", row["id"]) is True
        assert fake_db.tables["restaurants"] == []


class TestRestaurantEndpoints:
    """Tests for /restaurants"""

    def test_create_restaurant(self, mock_auth, db):
        response = client.post(
            "/restaurants",
            json={
                "name": "Sushi Zanmai",
                "address": "Pavilion KL",
                "place_id": "pid-sz",
                "tags": ["sushi"],
                "dietary_tags": ["halal"],
                "price_range": 2,
                "currency": "MYR",
            }
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == "test-user-id"
        assert data["price_label"] == "Moderate (RM15-40)"
        assert data["is_public"] is True

    def test_create_ignores_body_user_id(self, mock_auth, db):
        response = client.post(
            "/restaurants",
            json={"name": "X", "address": "Y", "place_id": "Z", "user_id": "someone-else"}
        )

        assert response.status_code == 201
        assert response.json()["user_id"] == "test-user-id"

    def test_create_invalid_dietary_tag(self, mock_auth, db):
        response = client.post(
            "/restaurants",
            json={"name": "X", "address": "Y", "place_id": "Z", "dietary_tags": ["keto"]}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_list_with_filters(self, mock_auth, db):
        db.add_restaurant("test-user-id", "Cheap Halal", price_range=1, dietary_tags=["halal"])
        db.add_restaurant("test-user-id", "Fancy", price_range=4, context_tags=["date-night"])
        db.add_restaurant("someone-else", "Not Mine", price_range=1, dietary_tags=["halal"])

        response = client.get("/restaurants", params=[("price", 1), ("price", 2), ("dietary", "halal")])

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["restaurants"][0]["name"] == "Cheap Halal"
        assert data["restaurants"][0]["price_label"] == "Budget (under $10)"

    def test_list_newest_first(self, mock_auth, db):
        db.add_restaurant("test-user-id", "First")
        db.add_restaurant("test-user-id", "Second")

        response = client.get("/restaurants")

        assert [r["name"] for r in response.json()["restaurants"]] == ["Second", "First"]

    def test_list_passes_through_unknown_stored_tags(self, mock_auth, db):
        db.add_restaurant(
            "test-user-id", "Legacy", dietary_tags=["pescatarian"], context_tags=["brunch"]
        )

        response = client.get("/restaurants")

        assert response.status_code == 200
        restaurant = response.json()["restaurants"][0]
        assert restaurant["dietary_tags"] == ["pescatarian"]
        assert restaurant["context_tags"] == ["brunch"]

    def test_patch_restaurant(self, mock_auth, db):
        row = db.add_restaurant("test-user-id", "Place", notes="old")

        response = client.patch(f"/restaurants/{row['id']}", json={"notes": "new", "is_public": False})

        assert response.status_code == 200
        assert response.json()["notes"] == "new"
        assert response.json()["is_public"] is False

    def test_patch_empty_body(self, mock_auth, db):
        row = db.add_restaurant("test-user-id", "Place")

        response = client.patch(f"/restaurants/{row['id']}", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_request"

    def test_patch_other_users_restaurant_is_404(self, mock_auth, db):
        row = db.add_restaurant("someone-else", "Place")

        response = client.patch(f"/restaurants/{row['id']}", json={"rating": 1})

        assert response.status_code == 404

    def test_delete_restaurant(self, mock_auth, db):
        row = db.add_restaurant("test-user-id", "Place")

        response = client.delete(f"/restaurants/{row['id']}")

        assert response.status_code == 200
        assert response.json()["status"] == "DELETED"
        assert client.delete(f"/restaurants/{row['id']}").status_code == 404

    def test_requires_auth(self, db):
        assert client.get("/restaurants").status_code == 401


class TestTagVocabulary:
    """The stored tag values, their Literal types and display labels agree"""

    def test_dietary(self):
        assert get_args(DietaryTag) == DIETARY_TAGS
        assert set(DIETARY_LABELS) == set(DIETARY_TAGS)

    def test_context(self):
        assert get_args(ContextTag) == CONTEXT_TAGS
        assert set(CONTEXT_LABELS) == set(CONTEXT_TAGS)
