"""
Public-facing endpoints: shared profile pages and the currency catalogue.

Authentication is optional here. A valid Bearer token lets the owner and
their friends see more; an invalid token is still rejected with 401.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from nomnom.auth.dependencies import AuthenticatedUser, get_optional_user
from nomnom.db.client import get_anon_supabase_client, get_supabase_client
from nomnom.routes.restaurants import to_restaurant_response
from nomnom.schemas.users import (
    CurrencyListResponse,
    CurrencyResponse,
    SharedProfileResponse,
)
from nomnom.services.shared_profile_service import get_shared_profile
from nomnom.utils.constants import DEFAULT_CURRENCY
from nomnom.utils.currency import detect_currency, get_supported_currencies

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.get(
    "/users/{username}",
    response_model=SharedProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get a shared profile",
    description="""
    Shared profile page for a username.

    - public: anyone sees the restaurants marked public
    - friends_only: only accepted friends see them
    - private: only the owner

    When the list is hidden, restaurants is empty and restricted is true.
    Unknown usernames return 404.
    """
)
async def get_user_profile_page(
    username: str,
    viewer: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> SharedProfileResponse:
    if viewer is not None:
        supabase_client = get_supabase_client(viewer.access_token)
    else:
        supabase_client = get_anon_supabase_client()

    try:
        shared = await get_shared_profile(
            supabase_client,
            username,
            viewer_id=viewer.user_id if viewer else None,
        )
    except Exception as e:
        logger.error(f"Failed to load shared profile '{username}': {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "internal_error", "details": "Failed to load profile"}
        )

    if shared is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": f"User '{username}' not found"}
        )

    return SharedProfileResponse(
        **{
            **shared,
            "restaurants": [to_restaurant_response(r) for r in shared["restaurants"]],
        }
    )


@router.get(
    "/currencies",
    response_model=CurrencyListResponse,
    status_code=status.HTTP_200_OK,
    summary="List supported currencies",
)
async def list_currencies(
    accept_language: Annotated[Optional[str], Header()] = None,
) -> CurrencyListResponse:
    """Currency table for selectors, plus a guess from Accept-Language."""
    return CurrencyListResponse(
        currencies=[
            CurrencyResponse(
                code=c.code,
                symbol=c.symbol,
                name=c.name,
                thresholds=list(c.thresholds),
                labels=list(c.labels),
            )
            for c in get_supported_currencies()
        ],
        default=DEFAULT_CURRENCY,
        detected=detect_currency(accept_language) if accept_language else None,
    )
