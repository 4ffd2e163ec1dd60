"""
Friendship persistence service.

RULES:
1. A friendship is a directed request: requester_id -> addressee_id
2. At most one record per unordered pair, checked before insert
3. "Friends" means an accepted record exists in EITHER direction
4. Only the addressee can accept or reject; only the requester can cancel
5. Reject, cancel and unfriend delete the record (no retained "rejected" row)
6. RLS is enforced automatically via the authenticated Supabase client
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from nomnom.services.profile_service import get_profile_by_username

logger = logging.getLogger(__name__)

# Embed the counterpart profiles through the friendship foreign keys
REQUESTER_EMBED = "requester:profiles!friendships_requester_id_fkey(id, username)"
ADDRESSEE_EMBED = "addressee:profiles!friendships_addressee_id_fkey(id, username)"


class FriendshipExistsError(ValueError):
    """A friendship or pending request already exists for this pair."""


def _pair_filter(user_a: str, user_b: str) -> str:
    """PostgREST or-filter matching the pair in either direction."""
    return (
        f"and(requester_id.eq.{user_a},addressee_id.eq.{user_b}),"
        f"and(requester_id.eq.{user_b},addressee_id.eq.{user_a})"
    )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def get_friendship_between(
    supabase_client: Client,
    user_a: str,
    user_b: str
) -> Optional[Dict[str, Any]]:
    """Find the friendship record for a pair, whichever direction it has."""
    result = (
        supabase_client.table("friendships")
        .select("*")
        .or_(_pair_filter(user_a, user_b))
        .limit(1)
        .execute()
    )

    if not result.data:
        return None

    return cast(Dict[str, Any], result.data[0])


async def send_friend_request(
    supabase_client: Client,
    user_id: str,
    addressee_id: str
) -> Dict[str, Any]:
    """
    Send a friend request from the caller to another user.

    Raises:
        ValueError: If the caller targets themselves
        FriendshipExistsError: If already friends or a request is pending
    """
    if user_id == addressee_id:
        raise ValueError("Cannot send friend request to yourself")

    existing = await get_friendship_between(supabase_client, user_id, addressee_id)
    if existing:
        if existing.get("status") == "accepted":
            raise FriendshipExistsError("Already friends with this user")
        if existing.get("status") == "pending":
            raise FriendshipExistsError("Friend request already pending")

        # Stale rejected row from older data: clear it so the pair stays unique
        logger.info(f"Removing stale friendship {existing.get('id')} before new request")
        (
            supabase_client.table("friendships")
            .delete()
            .eq("id", existing["id"])
            .execute()
        )

    logger.info(f"User {user_id} sending friend request to {addressee_id}")

    result = (
        supabase_client.table("friendships")
        .insert({
            "requester_id": user_id,
            "addressee_id": addressee_id,
            "status": "pending",
        })
        .execute()
    )

    if not result.data:
        raise Exception("Failed to create friend request: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def accept_friend_request(
    supabase_client: Client,
    user_id: str,
    friendship_id: str
) -> Optional[Dict[str, Any]]:
    """
    Accept a pending request addressed to the caller.

    Returns:
        The accepted friendship, or None if no pending request addressed
        to the caller has this id
    """
    logger.info(f"User {user_id} accepting friend request {friendship_id}")

    result = (
        supabase_client.table("friendships")
        .update({"status": "accepted", "updated_at": _now_iso()})
        .eq("id", friendship_id)
        .eq("addressee_id", user_id)
        .eq("status", "pending")
        .execute()
    )

    if not result.data:
        return None

    return cast(Dict[str, Any], result.data[0])


async def reject_friend_request(
    supabase_client: Client,
    user_id: str,
    friendship_id: str
) -> bool:
    """Delete a pending request addressed to the caller. True if deleted."""
    logger.info(f"User {user_id} rejecting friend request {friendship_id}")

    result = (
        supabase_client.table("friendships")
        .delete()
        .eq("id", friendship_id)
        .eq("addressee_id", user_id)
        .eq("status", "pending")
        .execute()
    )

    return bool(result.data)


async def cancel_friend_request(
    supabase_client: Client,
    user_id: str,
    friendship_id: str
) -> bool:
    """Delete a pending request the caller sent. True if deleted."""
    logger.info(f"User {user_id} cancelling friend request {friendship_id}")

    result = (
        supabase_client.table("friendships")
        .delete()
        .eq("id", friendship_id)
        .eq("requester_id", user_id)
        .eq("status", "pending")
        .execute()
    )

    return bool(result.data)


async def unfriend(
    supabase_client: Client,
    user_id: str,
    friendship_id: str
) -> bool:
    """Delete a friendship the caller is part of (either side). True if deleted."""
    logger.info(f"User {user_id} removing friendship {friendship_id}")

    result = (
        supabase_client.table("friendships")
        .delete()
        .eq("id", friendship_id)
        .or_(f"requester_id.eq.{user_id},addressee_id.eq.{user_id}")
        .execute()
    )

    return bool(result.data)


async def get_friends(
    supabase_client: Client,
    user_id: str
) -> List[Dict[str, Any]]:
    """Accepted friendships of the caller, with both profiles embedded."""
    result = (
        supabase_client.table("friendships")
        .select(f"*, {REQUESTER_EMBED}, {ADDRESSEE_EMBED}")
        .eq("status", "accepted")
        .or_(f"requester_id.eq.{user_id},addressee_id.eq.{user_id}")
        .order("updated_at", desc=True)
        .execute()
    )

    friends = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Fetched {len(friends)} friends for user {user_id}")

    return friends


async def get_pending_requests(
    supabase_client: Client,
    user_id: str
) -> List[Dict[str, Any]]:
    """Pending requests received by the caller, newest first."""
    result = (
        supabase_client.table("friendships")
        .select(f"*, {REQUESTER_EMBED}")
        .eq("addressee_id", user_id)
        .eq("status", "pending")
        .order("created_at", desc=True)
        .execute()
    )

    return cast(List[Dict[str, Any]], result.data or [])


async def get_sent_requests(
    supabase_client: Client,
    user_id: str
) -> List[Dict[str, Any]]:
    """Pending requests sent by the caller, newest first."""
    result = (
        supabase_client.table("friendships")
        .select(f"*, {ADDRESSEE_EMBED}")
        .eq("requester_id", user_id)
        .eq("status", "pending")
        .order("created_at", desc=True)
        .execute()
    )

    return cast(List[Dict[str, Any]], result.data or [])


async def get_pending_requests_count(
    supabase_client: Client,
    user_id: str
) -> int:
    """Number of pending requests received by the caller."""
    result = (
        supabase_client.table("friendships")
        .select("id", count=cast(Any, "exact"))
        .eq("addressee_id", user_id)
        .eq("status", "pending")
        .execute()
    )

    return getattr(result, "count", 0) or 0


async def are_friends(
    supabase_client: Client,
    user_a: str,
    user_b: str
) -> bool:
    """Symmetric check: an accepted record exists in either direction."""
    if user_a == user_b:
        return False

    result = (
        supabase_client.table("friendships")
        .select("id")
        .eq("status", "accepted")
        .or_(_pair_filter(user_a, user_b))
        .limit(1)
        .execute()
    )

    return bool(result.data)


async def search_user_by_username(
    supabase_client: Client,
    user_id: str,
    username: str
) -> Optional[Dict[str, Any]]:
    """Find another user to befriend. Never returns the caller."""
    profile = await get_profile_by_username(supabase_client, username)

    if profile is None or profile.get("id") == user_id:
        return None

    return profile
