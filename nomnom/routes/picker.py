"""
Restaurant picker API endpoints.

POST /picker/chat      - one chat turn over the caller's saved restaurants
POST /picker/discover  - search open-now places near a point

An unauthenticated call gets 401 whatever its body is (a malformed body is
only reported once the token checks out), and never reaches storage, Gemini
or the places provider.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from nomnom.auth.dependencies import AuthenticatedUser, get_authenticated_user
from nomnom.db.client import get_supabase_client
from nomnom.schemas.picker import (
    ChatRequest,
    ChatResponse,
    DiscoveredPlace,
    DiscoverRequest,
    DiscoverResponse,
)
from nomnom.services.picker_service import handle_chat_request
from nomnom.services.places_service import PlacesSearchError, search_places

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/picker", tags=["picker"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Chat with the restaurant picker",
    description="""
    Send the conversation so far and get the picker's reply.

    The reply only recommends from the caller's saved restaurants. When
    latitude and longitude are both sent, the picker may also search for
    open-now places nearby; those are returned in discoveredPlaces, which
    is omitted when no places were found.

    Errors:
    - 401 if the Bearer token is missing or invalid
    - 400 if messages is missing, empty or malformed (after a valid token)
    - 500 if restaurants could not be loaded or the model failed (not retried)
    """
)
async def chat(
    request: ChatRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> ChatResponse:
    """
    Run one picker turn.

    Auth
    - Handled by get_authenticated_user dependency

    Parse/Validate Request
    - ChatRequest validates roles, message count and coordinates

    Call Service
    - handle_chat_request() fetches restaurants, builds the prompt, calls
      Gemini and runs discovery when asked

    Map Output -> ResponseModel
    - discoveredPlaces is dropped from the body when absent
    """
    logger.info(
        f"Picker chat for user {auth_user.user_id} "
        f"({len(request.messages)} messages, mode={request.mode})"
    )

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        result = await handle_chat_request(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            messages=[m.model_dump() for m in request.messages],
            latitude=request.latitude,
            longitude=request.longitude,
            mode=request.mode,
        )
        places = result.get("discoveredPlaces")
        return ChatResponse(
            message=result["message"],
            discovered_places=[DiscoveredPlace(**p) for p in places] if places else None,
        )
    except Exception as e:
        logger.error(f"Picker chat failed for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "chat_failed",
                "details": "Failed to get response. Please try again."
            }
        )


@router.post(
    "/discover",
    response_model=DiscoverResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Discover open places nearby",
)
async def discover_places(
    request: DiscoverRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> DiscoverResponse:
    """
    Search up to 5 restaurants open right now near the given point.

    Unlike discovery inside a chat turn, provider failures are reported
    as 500 here.
    """
    logger.info(f"Discover for user {auth_user.user_id}: query='{request.query}'")

    try:
        places = await search_places(
            request.query,
            request.latitude,
            request.longitude,
            radius=request.radius,
        )
    except PlacesSearchError as e:
        logger.error(f"Discovery failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "discovery_failed",
                "details": "Failed to search restaurants"
            }
        )

    return DiscoverResponse(places=[DiscoveredPlace(**p) for p in places])
