"""
User profile service.

Handles fetching and updating profiles in Supabase.
Profiles are 1:1 with auth.users and are created lazily on first
authenticated access. They are never hard-deleted.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, cast

from postgrest.exceptions import APIError
from supabase import Client

from nomnom.utils.constants import (
    PROFILE_VISIBILITIES,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    USERNAME_PATTERN,
)
from nomnom.utils.currency import detect_currency, is_supported_currency

logger = logging.getLogger(__name__)

_USERNAME_RE = re.compile(USERNAME_PATTERN)


class UsernameTakenError(ValueError):
    """The requested username belongs to another profile."""


def normalize_username(username: str) -> str:
    """Trim and lowercase user input before validation or lookup."""
    return (username or "").strip().lower()


def validate_username(username: Optional[str]) -> Optional[str]:
    """
    Validate a username exactly as given.

    Rules: 3-20 chars, lowercase letters/numbers/underscores, starts with a
    letter, no consecutive underscores. Uppercase input is rejected here;
    API input goes through normalize_username() first.

    Returns:
        An error message, or None if the username is valid.
    """
    if not username:
        return "Username is required"

    if len(username) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters"

    if len(username) > USERNAME_MAX_LENGTH:
        return f"Username must be {USERNAME_MAX_LENGTH} characters or less"

    if not _USERNAME_RE.match(username):
        return (
            "Username can only contain lowercase letters, numbers, and underscores, "
            "and must start with a letter"
        )

    if "__" in username:
        return "Username cannot contain consecutive underscores"

    return None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def get_user_profile(
    supabase_client: Client,
    user_id: str
) -> Optional[Dict[str, Any]]:
    """
    Fetch a profile by user id.

    Returns:
        The profile dict, or None if not found
    """
    logger.debug(f"Fetching profile for user {user_id}")

    result = (
        supabase_client.table("profiles")
        .select("*")
        .eq("id", user_id)
        .execute()
    )

    if not result.data:
        return None

    return cast(Dict[str, Any], result.data[0])


async def get_or_create_profile(
    supabase_client: Client,
    user_id: str,
    locale: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Return the caller's profile, creating it on first access.

    A new profile gets no username, public visibility (DB default) and a
    currency guessed from the locale (e.g. the Accept-Language header).

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The authenticated user's ID
        locale: Optional locale string used to pick a default currency

    Security:
        - RLS enforces id = auth.uid()
    """
    profile = await get_user_profile(supabase_client, user_id)
    if profile:
        return profile

    currency = detect_currency(locale)
    logger.info(f"Creating profile for user {user_id}: currency={currency}")

    try:
        result = (
            supabase_client.table("profiles")
            .insert({"id": user_id, "currency": currency})
            .execute()
        )
    except APIError as e:
        # Another request created it first
        if e.code == "23505":
            logger.info(f"Profile for user {user_id} created concurrently, re-fetching")
            existing = await get_user_profile(supabase_client, user_id)
            if existing:
                return existing
        raise

    if not result.data:
        raise Exception("Failed to create profile: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def get_profile_by_username(
    supabase_client: Client,
    username: str
) -> Optional[Dict[str, Any]]:
    """
    Look up a profile by username (case-insensitive input).

    Works with an anonymous client for shared profile pages.
    """
    normalized = normalize_username(username)
    if not normalized:
        return None

    result = (
        supabase_client.table("profiles")
        .select("*")
        .eq("username", normalized)
        .limit(1)
        .execute()
    )

    if not result.data:
        return None

    return cast(Dict[str, Any], result.data[0])


async def is_username_available(
    supabase_client: Client,
    username: str,
    user_id: str
) -> bool:
    """
    Check whether a username is free.

    A username the caller already owns counts as available to them.
    """
    existing = await get_profile_by_username(supabase_client, username)
    if existing is None:
        return True
    return existing.get("id") == user_id


async def _update_profile(
    supabase_client: Client,
    user_id: str,
    updates: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    logger.info(f"Updating profile for user {user_id}: {list(updates.keys())}")

    result = (
        supabase_client.table("profiles")
        .update({**updates, "updated_at": _now_iso()})
        .eq("id", user_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Profile update matched no rows for user {user_id}")
        return None

    return cast(Dict[str, Any], result.data[0])


async def update_username(
    supabase_client: Client,
    user_id: str,
    username: str
) -> Optional[Dict[str, Any]]:
    """
    Set the caller's username after normalizing and validating it.

    Raises:
        ValueError: If the username is invalid
        UsernameTakenError: If another profile already uses it
    """
    normalized = normalize_username(username)

    error = validate_username(normalized)
    if error:
        raise ValueError(error)

    if not await is_username_available(supabase_client, normalized, user_id):
        raise UsernameTakenError("This username is already taken")

    return await _update_profile(supabase_client, user_id, {"username": normalized})


async def update_profile_visibility(
    supabase_client: Client,
    user_id: str,
    visibility: str
) -> Optional[Dict[str, Any]]:
    """
    Change who can see the caller's restaurant list.

    Raises:
        ValueError: If visibility is not public / friends_only / private
    """
    if visibility not in PROFILE_VISIBILITIES:
        raise ValueError(
            f"Invalid visibility '{visibility}'. "
            f"Expected one of: {', '.join(PROFILE_VISIBILITIES)}"
        )

    return await _update_profile(
        supabase_client, user_id, {"profile_visibility": visibility}
    )


async def update_currency(
    supabase_client: Client,
    user_id: str,
    currency: str
) -> Optional[Dict[str, Any]]:
    """
    Change the caller's display currency.

    Raises:
        ValueError: If the currency is not in the supported table
    """
    if not is_supported_currency(currency):
        raise ValueError(f"Unsupported currency '{currency}'")

    return await _update_profile(
        supabase_client, user_id, {"currency": currency.upper()}
    )
