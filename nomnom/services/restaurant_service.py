"""
Saved restaurant persistence service.

RULES:
1. A restaurant belongs to exactly one profile (user_id)
2. Every mutating query is scoped with .eq("user_id", user_id) on top of RLS,
   so a user can never touch another user's row
3. name, address and place_id are fixed once saved; the edit form only
   changes notes, ratings, tags, price tier, currency and visibility
4. Price tier and currency are independent of tags and rating
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, cast

from supabase import Client

from nomnom.utils.constants import DEFAULT_CURRENCY
from nomnom.utils.currency import resolve_price_label

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "notes",
    "what_to_order",
    "rating",
    "price_range",
    "currency",
    "tags",
    "dietary_tags",
    "context_tags",
    "is_public",
)


def _clean_text(value: Optional[str]) -> Optional[str]:
    """Store blank notes as NULL so the picker prompt never shows empty lines."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop blanks and de-duplicate while keeping the user's order."""
    cleaned: List[str] = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def with_price_label(restaurant: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the row with a human-readable price_label added."""
    label = resolve_price_label(restaurant.get("price_range"), restaurant.get("currency"))
    return {**restaurant, "price_label": label or None}


async def save_restaurant(
    supabase_client: Client,
    user_id: str,
    name: str,
    address: str,
    place_id: str,
    tags: Optional[List[str]] = None,
    dietary_tags: Optional[List[str]] = None,
    context_tags: Optional[List[str]] = None,
    notes: Optional[str] = None,
    what_to_order: Optional[str] = None,
    rating: Optional[int] = None,
    price_range: Optional[int] = None,
    currency: Optional[str] = None,
    is_public: bool = True,
) -> Dict[str, Any]:
    """
    Save a restaurant to the user's list.

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The authenticated user's ID
        name, address, place_id: From the places search result
        currency: Currency of the restaurant's location (defaults to USD)

    Returns:
        The created restaurant record

    Security:
        - RLS enforces user_id = auth.uid()
    """
    restaurant_data = {
        "user_id": user_id,
        "name": name.strip(),
        "address": address.strip(),
        "place_id": place_id,
        "tags": _clean_tags(tags),
        "dietary_tags": _clean_tags(dietary_tags),
        "context_tags": _clean_tags(context_tags),
        "notes": _clean_text(notes),
        "what_to_order": _clean_text(what_to_order),
        "rating": rating,
        "price_range": price_range,
        "currency": (currency or DEFAULT_CURRENCY).upper(),
        "is_public": is_public,
    }

    logger.info(f"Saving restaurant for user {user_id} (place_id={place_id})")

    result = supabase_client.table("restaurants").insert(restaurant_data).execute()

    if not result.data:
        raise Exception("Failed to save restaurant: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def get_saved_restaurants(
    supabase_client: Client,
    user_id: str
) -> List[Dict[str, Any]]:
    """
    Fetch all saved restaurants of a user, newest first.

    Storage errors propagate to the caller.
    """
    logger.debug(f"Fetching saved restaurants for user {user_id}")

    result = (
        supabase_client.table("restaurants")
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .execute()
    )

    restaurants = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Fetched {len(restaurants)} restaurants for user {user_id}")

    return restaurants


async def get_restaurants_by_user_id(
    supabase_client: Client,
    user_id: str,
    public_only: bool = False
) -> List[Dict[str, Any]]:
    """
    Fetch another user's restaurants for a shared profile page, newest first.

    Args:
        public_only: Only return restaurants the owner marked is_public
    """
    query = (
        supabase_client.table("restaurants")
        .select("*")
        .eq("user_id", user_id)
    )
    if public_only:
        query = query.eq("is_public", True)

    result = query.order("created_at", desc=True).execute()

    return cast(List[Dict[str, Any]], result.data or [])


async def get_restaurant_by_id(
    supabase_client: Client,
    user_id: str,
    restaurant_id: str
) -> Optional[Dict[str, Any]]:
    """Fetch one of the caller's restaurants, or None."""
    result = (
        supabase_client.table("restaurants")
        .select("*")
        .eq("id", restaurant_id)
        .eq("user_id", user_id)
        .execute()
    )

    if not result.data:
        return None

    return cast(Dict[str, Any], result.data[0])


async def update_restaurant(
    supabase_client: Client,
    user_id: str,
    restaurant_id: str,
    **updates: Any
) -> Optional[Dict[str, Any]]:
    """
    Update editable fields of one of the caller's restaurants.

    Returns:
        The updated record, or None if the restaurant does not exist
        or belongs to someone else

    Raises:
        ValueError: If a non-editable field is passed
    """
    invalid = [key for key in updates if key not in EDITABLE_FIELDS]
    if invalid:
        raise ValueError(f"Fields cannot be edited: {', '.join(sorted(invalid))}")

    cleaned: Dict[str, Any] = dict(updates)
    for key in ("notes", "what_to_order"):
        if key in cleaned:
            cleaned[key] = _clean_text(cleaned[key])
    for key in ("tags", "dietary_tags", "context_tags"):
        if key in cleaned:
            cleaned[key] = _clean_tags(cleaned[key])
    if cleaned.get("currency"):
        cleaned["currency"] = cleaned["currency"].upper()

    logger.info(
        f"Updating restaurant {restaurant_id} for user {user_id}: {list(cleaned.keys())}"
    )

    result = (
        supabase_client.table("restaurants")
        .update(cleaned)
        .eq("id", restaurant_id)
        .eq("user_id", user_id)
        .execute()
    )

    if not result.data:
        return None

    return cast(Dict[str, Any], result.data[0])


async def delete_restaurant(
    supabase_client: Client,
    user_id: str,
    restaurant_id: str
) -> bool:
    """
    Delete one of the caller's restaurants.

    Returns:
        True if a row was deleted, False if nothing matched
    """
    logger.info(f"Deleting restaurant {restaurant_id} for user {user_id}")

    result = (
        supabase_client.table("restaurants")
        .delete()
        .eq("id", restaurant_id)
        .eq("user_id", user_id)
        .execute()
    )

    return bool(result.data)


def filter_restaurants(
    restaurants: List[Dict[str, Any]],
    price_levels: Optional[Iterable[int]] = None,
    dietary_tags: Optional[Iterable[str]] = None,
    context_tags: Optional[Iterable[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Filter a restaurant list the way the list view does.

    - price: restaurant tier is one of the selected tiers
    - dietary: restaurant has ALL selected dietary tags (AND)
    - context: restaurant has ANY selected context tag (OR)

    An empty filter matches everything. Order is preserved.
    """
    prices = set(price_levels or [])
    dietary = set(dietary_tags or [])
    context = set(context_tags or [])

    filtered = []
    for restaurant in restaurants:
        if prices and restaurant.get("price_range") not in prices:
            continue
        if dietary and not dietary.issubset(restaurant.get("dietary_tags") or []):
            continue
        if context and context.isdisjoint(restaurant.get("context_tags") or []):
            continue
        filtered.append(restaurant)

    return filtered
