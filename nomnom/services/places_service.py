"""
Places discovery client.

Searches the Google Places Text Search API for restaurants near a point that
are open right now. Used by the picker chat when the model asks for new
places, and by the standalone discovery endpoint.

search_places() raises PlacesSearchError on any failure.
discover() is the soft variant used inside a chat turn: failures are logged
and reported as "no places", so discovery can never fail the chat reply.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from nomnom.config import settings

logger = logging.getLogger(__name__)

PLACES_TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
MAX_DISCOVERED_PLACES = 5
REQUEST_TIMEOUT_SECONDS = 15.0

# Provider field -> wire key. Missing provider fields stay missing.
_PLACE_FIELDS = (
    ("name", "name"),
    ("formatted_address", "address"),
    ("place_id", "placeId"),
    ("rating", "rating"),
    ("price_level", "priceLevel"),
)


class PlacesSearchError(Exception):
    """The places provider could not be queried or returned an error status."""


def _map_place(place: Dict[str, Any]) -> Dict[str, Any]:
    return {
        wire_key: place[provider_key]
        for provider_key, wire_key in _PLACE_FIELDS
        if place.get(provider_key) is not None
    }


def _is_open_now(place: Dict[str, Any]) -> bool:
    opening_hours = place.get("opening_hours") or {}
    return opening_hours.get("open_now") is True


def _is_listable(place: Dict[str, Any]) -> bool:
    # A place the client can show and save needs both a name and a place_id
    return bool(place.get("name")) and bool(place.get("place_id")) and _is_open_now(place)


async def search_places(
    query: str,
    latitude: float,
    longitude: float,
    radius: Optional[int] = None,
    api_key: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> List[Dict[str, Any]]:
    """
    Search restaurants matching `query` near a point, open now only.

    Args:
        query: Free-text food/place description (e.g. "spicy ramen")
        latitude, longitude: Search center
        radius: Search radius in meters (defaults to DISCOVERY_RADIUS_METERS)
        api_key: Overrides GOOGLE_PLACES_API_KEY
        http_client: Optional client to reuse (a new one is opened otherwise)

    Returns:
        At most 5 open places, in provider order

    Raises:
        PlacesSearchError: Missing API key, transport/HTTP error, or a
            provider status other than OK / ZERO_RESULTS
    """
    key = api_key or settings.GOOGLE_PLACES_API_KEY
    if not key:
        raise PlacesSearchError("GOOGLE_PLACES_API_KEY is not configured")

    params = {
        "query": f"{query} restaurant",
        "location": f"{latitude},{longitude}",
        "radius": str(radius or settings.DISCOVERY_RADIUS_METERS),
        "type": "restaurant",
        "key": key,
    }

    logger.info(f"Searching places: query='{query}' radius={params['radius']}")

    try:
        if http_client is not None:
            resp = await http_client.get(PLACES_TEXT_SEARCH_URL, params=params)
        else:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS) as client:
                resp = await client.get(PLACES_TEXT_SEARCH_URL, params=params)
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise PlacesSearchError(f"Places request failed: {e}") from e

    status = data.get("status")
    if status not in ("OK", "ZERO_RESULTS"):
        raise PlacesSearchError(
            f"Places API error: {status} - {data.get('error_message', '')}"
        )

    open_places = [place for place in data.get("results") or [] if _is_listable(place)]
    places = [_map_place(place) for place in open_places[:MAX_DISCOVERED_PLACES]]

    logger.info(f"Places search returned {len(places)} open places for '{query}'")
    return places


async def discover(
    query: str,
    latitude: float,
    longitude: float,
    radius: Optional[int] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> List[Dict[str, Any]]:
    """Like search_places(), but any failure yields an empty list."""
    try:
        return await search_places(
            query, latitude, longitude, radius=radius, http_client=http_client
        )
    except PlacesSearchError as e:
        logger.warning(f"Discovery failed for '{query}', returning no places: {e}")
        return []
