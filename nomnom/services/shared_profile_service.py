"""
Shared profile pages (/users/{username}).

Who sees a user's restaurant list:
- the owner always sees every restaurant
- public: anyone sees the restaurants marked is_public
- friends_only: accepted friends see the restaurants marked is_public
- private: nobody but the owner
"""

import logging
from typing import Any, Dict, Optional

from supabase import Client

from nomnom.services.friend_service import are_friends
from nomnom.services.profile_service import get_profile_by_username
from nomnom.services.restaurant_service import get_restaurants_by_user_id

logger = logging.getLogger(__name__)


def can_view_restaurants(visibility: Optional[str], is_owner: bool, is_friend: bool) -> bool:
    if is_owner:
        return True
    if visibility == "public":
        return True
    if visibility == "friends_only":
        return is_friend
    return False


async def get_shared_profile(
    supabase_client: Client,
    username: str,
    viewer_id: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Build the shared profile view of `username` for a viewer.

    Args:
        supabase_client: Authenticated client for signed-in viewers,
            anonymous client otherwise
        username: Username from the URL (case-insensitive)
        viewer_id: The signed-in viewer's user id, or None if anonymous

    Returns:
        A dict shaped like SharedProfileResponse, or None when no profile
        has this username
    """
    profile = await get_profile_by_username(supabase_client, username)
    if not profile or not profile.get("username"):
        return None

    owner_id = str(profile["id"])
    visibility = profile.get("profile_visibility") or "public"
    is_owner = viewer_id is not None and viewer_id == owner_id
    is_friend = (
        viewer_id is not None
        and not is_owner
        and await are_friends(supabase_client, viewer_id, owner_id)
    )

    shared: Dict[str, Any] = {
        "id": owner_id,
        "username": profile["username"],
        "profile_visibility": visibility,
        "is_owner": is_owner,
        "is_friend": is_friend,
        "restricted": False,
        "restaurants": [],
        "restaurant_count": 0,
    }

    if not can_view_restaurants(visibility, is_owner, is_friend):
        logger.info(f"Restaurant list of '{profile['username']}' hidden from viewer")
        shared["restricted"] = True
        return shared

    restaurants = await get_restaurants_by_user_id(
        supabase_client, owner_id, public_only=not is_owner
    )
    shared["restaurants"] = restaurants
    shared["restaurant_count"] = len(restaurants)

    return shared
