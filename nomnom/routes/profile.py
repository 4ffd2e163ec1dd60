"""
Profile API endpoints.

Profiles are 1:1 with auth.users and are created on first access to
GET /profile. They hold the public username, who can see the user's
restaurant list, and the currency used for price labels.
"""

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from nomnom.auth.dependencies import AuthenticatedUser, get_authenticated_user
from nomnom.db.client import get_supabase_client
from nomnom.schemas.profile import (
    CurrencyUpdateRequest,
    ProfileResponse,
    ProfileUpdateResponse,
    UsernameAvailabilityResponse,
    UsernameUpdateRequest,
    VisibilityUpdateRequest,
)
from nomnom.services.profile_service import (
    UsernameTakenError,
    get_or_create_profile,
    is_username_available,
    normalize_username,
    update_currency,
    update_profile_visibility,
    update_username,
    validate_username,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


def _to_response(profile: Dict[str, Any]) -> ProfileResponse:
    def _as_str(val: Any) -> Optional[str]:
        return str(val) if val is not None else None

    return ProfileResponse(
        id=str(profile["id"]),
        username=profile.get("username"),
        profile_visibility=profile.get("profile_visibility") or "public",
        currency=profile.get("currency"),
        created_at=_as_str(profile.get("created_at")),
        updated_at=_as_str(profile.get("updated_at")),
    )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": "not_found",
            "details": "Profile not found for this user"
        }
    )


def _server_error(action: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "internal_error",
            "details": f"Failed to {action}"
        }
    )


@router.get(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get user profile",
    description="""
    Retrieve the authenticated user's profile, creating it on first access.

    A new profile starts without a username, with public visibility, and
    with a currency guessed from the Accept-Language header.

    Security:
    - Requires valid Authorization Bearer token
    - RLS ensures users only see their own profile
    """
)
async def get_profile(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    accept_language: Annotated[Optional[str], Header()] = None,
) -> ProfileResponse:
    """
    Get the authenticated user's profile.

    Auth
    - Handled by get_authenticated_user dependency

    Call Service
    - get_or_create_profile() creates the row lazily (RLS enforced)

    Map Output -> ResponseModel
    - Convert profile data to ProfileResponse
    """
    logger.info(f"Fetching profile for user {auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        profile = await get_or_create_profile(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            locale=accept_language,
        )
    except Exception as e:
        logger.error(f"Failed to load profile for user {auth_user.user_id}: {e}", exc_info=True)
        raise _server_error("load profile")

    return _to_response(profile)


@router.get(
    "/username-available",
    response_model=UsernameAvailabilityResponse,
    status_code=status.HTTP_200_OK,
    summary="Check username availability",
)
async def check_username_available(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    username: Annotated[str, Query(max_length=64)],
) -> UsernameAvailabilityResponse:
    """Validate a username and report whether it is free for the caller."""
    normalized = normalize_username(username)

    error = validate_username(normalized)
    if error:
        return UsernameAvailabilityResponse(username=normalized, available=False, error=error)

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        available = await is_username_available(
            supabase_client, normalized, auth_user.user_id
        )
    except Exception as e:
        logger.error(f"Username availability check failed: {e}", exc_info=True)
        raise _server_error("check username")

    return UsernameAvailabilityResponse(
        username=normalized,
        available=available,
        error=None if available else "This username is already taken",
    )


@router.put(
    "/username",
    response_model=ProfileUpdateResponse,
    status_code=status.HTTP_200_OK,
    summary="Set username",
    description="""
    Set or change the caller's public username.

    Input is trimmed and lowercased. Rules: 3-20 characters, starts with a
    letter, only letters, numbers and underscores, no consecutive underscores.

    Errors:
    - 400 if the username breaks a rule
    - 409 if another user already has it
    """
)
async def set_username(
    request: UsernameUpdateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> ProfileUpdateResponse:
    """Set the caller's username."""
    logger.info(f"Updating username for user {auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        profile = await update_username(
            supabase_client, auth_user.user_id, request.username
        )
    except UsernameTakenError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "username_taken", "details": str(e)}
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_username", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to update username: {e}", exc_info=True)
        raise _server_error("update username")

    if not profile:
        raise _not_found()

    return ProfileUpdateResponse(
        status="UPDATED",
        profile=_to_response(profile),
        message="Username updated successfully"
    )


@router.put(
    "/visibility",
    response_model=ProfileUpdateResponse,
    status_code=status.HTTP_200_OK,
    summary="Set profile visibility",
)
async def set_visibility(
    request: VisibilityUpdateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> ProfileUpdateResponse:
    """Change who can see the caller's restaurant list."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        profile = await update_profile_visibility(
            supabase_client, auth_user.user_id, request.profile_visibility
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to update visibility: {e}", exc_info=True)
        raise _server_error("update visibility")

    if not profile:
        raise _not_found()

    return ProfileUpdateResponse(
        status="UPDATED",
        profile=_to_response(profile),
        message="Profile visibility updated successfully"
    )


@router.put(
    "/currency",
    response_model=ProfileUpdateResponse,
    status_code=status.HTTP_200_OK,
    summary="Set display currency",
)
async def set_currency(
    request: CurrencyUpdateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> ProfileUpdateResponse:
    """Change the caller's preferred currency (must be in GET /currencies)."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        profile = await update_currency(
            supabase_client, auth_user.user_id, request.currency
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_currency", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to update currency: {e}", exc_info=True)
        raise _server_error("update currency")

    if not profile:
        raise _not_found()

    return ProfileUpdateResponse(
        status="UPDATED",
        profile=_to_response(profile),
        message="Currency updated successfully"
    )
