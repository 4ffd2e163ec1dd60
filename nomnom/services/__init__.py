"""
Service layer for the NomNomNow backend.

Contains the business logic that:
- Reads and writes profiles, restaurants and friendships (under RLS)
- Builds picker prompts and calls Gemini
- Queries the places provider for open-now discovery

Services act as the glue between routes (HTTP layer) and agents/database.
"""

from .friend_service import (
    FriendshipExistsError,
    accept_friend_request,
    are_friends,
    cancel_friend_request,
    get_friends,
    get_pending_requests,
    get_pending_requests_count,
    get_sent_requests,
    reject_friend_request,
    search_user_by_username,
    send_friend_request,
    unfriend,
)
from .picker_service import extract_discovery_query, handle_chat_request
from .places_service import PlacesSearchError, discover, search_places
from .profile_service import (
    UsernameTakenError,
    get_or_create_profile,
    get_profile_by_username,
    get_user_profile,
    is_username_available,
    update_currency,
    update_profile_visibility,
    update_username,
    validate_username,
)
from .restaurant_service import (
    delete_restaurant,
    filter_restaurants,
    get_restaurant_by_id,
    get_restaurants_by_user_id,
    get_saved_restaurants,
    save_restaurant,
    update_restaurant,
)
from .shared_profile_service import get_shared_profile

__all__ = [
    # Friends
    "FriendshipExistsError",
    "accept_friend_request",
    "are_friends",
    "cancel_friend_request",
    "get_friends",
    "get_pending_requests",
    "get_pending_requests_count",
    "get_sent_requests",
    "reject_friend_request",
    "search_user_by_username",
    "send_friend_request",
    "unfriend",
    # Picker
    "extract_discovery_query",
    "handle_chat_request",
    # Places
    "PlacesSearchError",
    "discover",
    "search_places",
    # Profile
    "UsernameTakenError",
    "get_or_create_profile",
    "get_profile_by_username",
    "get_user_profile",
    "is_username_available",
    "update_currency",
    "update_profile_visibility",
    "update_username",
    "validate_username",
    # Restaurants
    "delete_restaurant",
    "filter_restaurants",
    "get_restaurant_by_id",
    "get_restaurants_by_user_id",
    "get_saved_restaurants",
    "save_restaurant",
    "update_restaurant",
    # Shared profiles
    "get_shared_profile",
]
