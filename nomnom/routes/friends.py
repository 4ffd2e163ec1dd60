"""
Friendship API endpoints.

Requests are directed (requester -> addressee). Only the addressee can
accept or reject, only the requester can cancel, and either side can
unfriend. Rejected, cancelled and removed friendships are deleted.
"""

import logging
from typing import Annotated, Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from nomnom.auth.dependencies import AuthenticatedUser, get_authenticated_user
from nomnom.db.client import get_supabase_client
from nomnom.schemas.friends import (
    FriendRequestCreate,
    FriendshipDeleteResponse,
    FriendshipListResponse,
    FriendshipResponse,
    PendingCountResponse,
    UserSearchResponse,
)
from nomnom.schemas.profile import PublicProfile
from nomnom.services.friend_service import (
    FriendshipExistsError,
    accept_friend_request,
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

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/friends", tags=["friends"])


def _to_friendship(row: Dict[str, Any]) -> FriendshipResponse:
    def _profile(value: Any) -> PublicProfile | None:
        if not value:
            return None
        return PublicProfile(id=str(value["id"]), username=value.get("username"))

    return FriendshipResponse(
        id=str(row["id"]),
        requester_id=str(row["requester_id"]),
        addressee_id=str(row["addressee_id"]),
        status=row["status"],
        created_at=str(row["created_at"]) if row.get("created_at") is not None else None,
        updated_at=str(row["updated_at"]) if row.get("updated_at") is not None else None,
        requester=_profile(row.get("requester")),
        addressee=_profile(row.get("addressee")),
    )


def _to_list(rows: List[Dict[str, Any]]) -> FriendshipListResponse:
    return FriendshipListResponse(
        friendships=[_to_friendship(row) for row in rows],
        count=len(rows),
    )


def _server_error(action: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "internal_error", "details": f"Failed to {action}"}
    )


def _request_not_found(friendship_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": "not_found",
            "details": f"Friend request {friendship_id} not found"
        }
    )


@router.get("", response_model=FriendshipListResponse, summary="List friends")
async def list_friends(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> FriendshipListResponse:
    """Accepted friendships of the caller, in either direction."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        rows = await get_friends(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Failed to fetch friends: {e}", exc_info=True)
        raise _server_error("fetch friends")

    return _to_list(rows)


@router.get("/requests", response_model=FriendshipListResponse, summary="List received requests")
async def list_received_requests(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> FriendshipListResponse:
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        rows = await get_pending_requests(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Failed to fetch friend requests: {e}", exc_info=True)
        raise _server_error("fetch friend requests")

    return _to_list(rows)


@router.get(
    "/requests/count",
    response_model=PendingCountResponse,
    summary="Count received requests",
)
async def count_received_requests(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> PendingCountResponse:
    """Badge count for the friends tab."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        count = await get_pending_requests_count(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Failed to count friend requests: {e}", exc_info=True)
        raise _server_error("count friend requests")

    return PendingCountResponse(count=count)


@router.get("/requests/sent", response_model=FriendshipListResponse, summary="List sent requests")
async def list_sent_requests(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> FriendshipListResponse:
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        rows = await get_sent_requests(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Failed to fetch sent requests: {e}", exc_info=True)
        raise _server_error("fetch sent requests")

    return _to_list(rows)


@router.post(
    "/requests",
    response_model=FriendshipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a friend request",
    description="""
    Send a friend request to another user.

    Errors:
    - 400 when sending a request to yourself
    - 409 when already friends or a request between the two users is pending
    """
)
async def create_friend_request(
    request: FriendRequestCreate,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> FriendshipResponse:
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        row = await send_friend_request(
            supabase_client, auth_user.user_id, str(request.addressee_id)
        )
    except FriendshipExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "friendship_exists", "details": str(e)}
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to send friend request: {e}", exc_info=True)
        raise _server_error("send friend request")

    return _to_friendship(row)


@router.post(
    "/requests/{friendship_id}/accept",
    response_model=FriendshipResponse,
    summary="Accept a friend request",
)
async def accept_request(
    friendship_id: UUID,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> FriendshipResponse:
    """Only pending requests addressed to the caller can be accepted."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        row = await accept_friend_request(supabase_client, auth_user.user_id, str(friendship_id))
    except Exception as e:
        logger.error(f"Failed to accept friend request: {e}", exc_info=True)
        raise _server_error("accept friend request")

    if not row:
        raise _request_not_found(friendship_id)

    return _to_friendship(row)


@router.delete(
    "/requests/{friendship_id}",
    response_model=FriendshipDeleteResponse,
    summary="Reject a friend request",
)
async def reject_request(
    friendship_id: UUID,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> FriendshipDeleteResponse:
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        deleted = await reject_friend_request(supabase_client, auth_user.user_id, str(friendship_id))
    except Exception as e:
        logger.error(f"Failed to reject friend request: {e}", exc_info=True)
        raise _server_error("reject friend request")

    if not deleted:
        raise _request_not_found(friendship_id)

    return FriendshipDeleteResponse(status="DELETED", message="Friend request rejected")


@router.delete(
    "/requests/{friendship_id}/cancel",
    response_model=FriendshipDeleteResponse,
    summary="Cancel a sent friend request",
)
async def cancel_request(
    friendship_id: UUID,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> FriendshipDeleteResponse:
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        deleted = await cancel_friend_request(supabase_client, auth_user.user_id, str(friendship_id))
    except Exception as e:
        logger.error(f"Failed to cancel friend request: {e}", exc_info=True)
        raise _server_error("cancel friend request")

    if not deleted:
        raise _request_not_found(friendship_id)

    return FriendshipDeleteResponse(status="DELETED", message="Friend request cancelled")


@router.get("/search", response_model=UserSearchResponse, summary="Find a user by username")
async def search_user(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    username: Annotated[str, Query(min_length=1, max_length=64)],
) -> UserSearchResponse:
    """Exact (case-insensitive) username match. The caller is never returned."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        profile = await search_user_by_username(supabase_client, auth_user.user_id, username)
    except Exception as e:
        logger.error(f"User search failed: {e}", exc_info=True)
        raise _server_error("search users")

    if not profile:
        return UserSearchResponse(user=None)

    return UserSearchResponse(
        user=PublicProfile(id=str(profile["id"]), username=profile.get("username"))
    )


@router.delete(
    "/{friendship_id}",
    response_model=FriendshipDeleteResponse,
    summary="Remove a friend",
)
async def remove_friend(
    friendship_id: UUID,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> FriendshipDeleteResponse:
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        deleted = await unfriend(supabase_client, auth_user.user_id, str(friendship_id))
    except Exception as e:
        logger.error(f"Failed to remove friend: {e}", exc_info=True)
        raise _server_error("remove friend")

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": f"Friendship {friendship_id} not found"}
        )

    return FriendshipDeleteResponse(status="DELETED", message="Friend removed")
