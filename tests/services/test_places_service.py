"""
Tests for the places discovery client.

The provider is replaced with httpx.MockTransport, so no network is used.
"""

import httpx
import pytest

from nomnom.services.places_service import (
    PLACES_TEXT_SEARCH_URL,
    PlacesSearchError,
    discover,
    search_places,
)


def _place(index: int, open_now: bool, **extra):
    place = {
        "name": f"Place {index}",
        "formatted_address": f"{index} Food Street",
        "place_id": f"pid-{index}",
        "rating": 4.0 + index / 10,
        "price_level": 2,
        "opening_hours": {"open_now": open_now},
    }
    place.update(extra)
    return place


def _client_returning(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestSearchPlaces:
    """Tests for search_places"""

    @pytest.mark.asyncio
    async def test_returns_first_five_open_places(self):
        results = [_place(i, open_now=True) for i in range(8)]
        results.insert(1, _place(100, open_now=False))
        results.insert(4, _place(101, open_now=False))

        async with _client_returning({"status": "OK", "results": results}) as http_client:
            places = await search_places("ramen", 3.1, 101.6, http_client=http_client)

        assert [p["placeId"] for p in places] == ["pid-0", "pid-1", "pid-2", "pid-3", "pid-4"]

    @pytest.mark.asyncio
    async def test_places_without_open_now_are_dropped(self):
        results = [
            _place(1, open_now=True),
            {"name": "No hours", "place_id": "pid-x"},
            _place(2, open_now=False),
        ]

        async with _client_returning({"status": "OK", "results": results}) as http_client:
            places = await search_places("ramen", 3.1, 101.6, http_client=http_client)

        assert [p["name"] for p in places] == ["Place 1"]

    @pytest.mark.asyncio
    async def test_maps_wire_keys_and_keeps_absent_fields_absent(self):
        place = {
            "name": "Bare",
            "formatted_address": "1 Road",
            "place_id": "pid-bare",
            "opening_hours": {"open_now": True},
        }

        async with _client_returning({"status": "OK", "results": [place]}) as http_client:
            places = await search_places("noodles", 1.0, 2.0, http_client=http_client)

        assert places == [{"name": "Bare", "address": "1 Road", "placeId": "pid-bare"}]

    @pytest.mark.asyncio
    async def test_results_without_name_or_place_id_are_dropped(self):
        results = [
            {"formatted_address": "No name", "place_id": "pid-a", "opening_hours": {"open_now": True}},
            {"name": "No id", "opening_hours": {"open_now": True}},
            _place(3, open_now=True),
        ]

        async with _client_returning({"status": "OK", "results": results}) as http_client:
            places = await search_places("ramen", 3.1, 101.6, http_client=http_client)

        assert [p["placeId"] for p in places] == ["pid-3"]

    @pytest.mark.asyncio
    async def test_request_parameters(self):
        seen = []

        async with _client_returning({"status": "ZERO_RESULTS", "results": []}, seen=seen) as http_client:
            places = await search_places(
                "spicy ramen", 3.139, 101.6869, radius=2000, http_client=http_client
            )

        assert places == []
        request = seen[0]
        assert str(request.url).startswith(PLACES_TEXT_SEARCH_URL)
        assert request.url.params["query"] == "spicy ramen restaurant"
        assert request.url.params["location"] == "3.139,101.6869"
        assert request.url.params["radius"] == "2000"
        assert request.url.params["type"] == "restaurant"
        assert request.url.params["key"] == "test-places-api-key"

    @pytest.mark.asyncio
    async def test_default_radius(self):
        seen = []

        async with _client_returning({"status": "OK", "results": []}, seen=seen) as http_client:
            await search_places("tacos", 0.0, 0.0, http_client=http_client)

        assert seen[0].url.params["radius"] == "5000"

    @pytest.mark.asyncio
    async def test_provider_error_status_raises(self):
        payload = {"status": "REQUEST_DENIED", "error_message": "bad key"}

        async with _client_returning(payload) as http_client:
            with pytest.raises(PlacesSearchError, match="REQUEST_DENIED"):
                await search_places("ramen", 3.1, 101.6, http_client=http_client)

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        async with _client_returning({}, status_code=503) as http_client:
            with pytest.raises(PlacesSearchError):
                await search_places("ramen", 3.1, 101.6, http_client=http_client)

    @pytest.mark.asyncio
    async def test_missing_api_key_raises(self, monkeypatch):
        from nomnom.config import settings

        monkeypatch.setattr(settings, "GOOGLE_PLACES_API_KEY", "")

        with pytest.raises(PlacesSearchError, match="not configured"):
            await search_places("ramen", 3.1, 101.6)


class TestDiscover:
    """Tests for the soft-failing discover wrapper"""

    @pytest.mark.asyncio
    async def test_non_ok_status_returns_empty_list(self):
        async with _client_returning({"status": "OVER_QUERY_LIMIT"}) as http_client:
            places = await discover("ramen", 3.1, 101.6, http_client=http_client)

        assert places == []

    @pytest.mark.asyncio
    async def test_transport_failure_returns_empty_list(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            places = await discover("ramen", 3.1, 101.6, http_client=http_client)

        assert places == []

    @pytest.mark.asyncio
    async def test_passes_results_through(self):
        payload = {"status": "OK", "results": [_place(1, open_now=True)]}

        async with _client_returning(payload) as http_client:
            places = await discover("ramen", 3.1, 101.6, http_client=http_client)

        assert places[0]["name"] == "Place 1"
        assert places[0]["priceLevel"] == 2
