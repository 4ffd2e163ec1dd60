"""
Saved restaurant API endpoints.

Every query is scoped to the authenticated caller, so a user can only list,
edit or delete their own restaurants.
"""

import logging
from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from nomnom.auth.dependencies import AuthenticatedUser, get_authenticated_user
from nomnom.db.client import get_supabase_client
from nomnom.schemas.restaurants import (
    RestaurantCreateRequest,
    RestaurantDeleteResponse,
    RestaurantListResponse,
    RestaurantResponse,
    RestaurantUpdateRequest,
)
from nomnom.services.restaurant_service import (
    delete_restaurant,
    filter_restaurants,
    get_saved_restaurants,
    save_restaurant,
    update_restaurant,
    with_price_label,
)
from nomnom.utils.constants import ContextTag, DietaryTag

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


def to_restaurant_response(restaurant: Dict[str, Any]) -> RestaurantResponse:
    """Map a restaurants row to the response model, with its price label."""
    row = with_price_label(restaurant)
    return RestaurantResponse(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        name=row["name"],
        address=row["address"],
        place_id=row.get("place_id"),
        tags=row.get("tags") or [],
        dietary_tags=row.get("dietary_tags") or [],
        context_tags=row.get("context_tags") or [],
        notes=row.get("notes"),
        what_to_order=row.get("what_to_order"),
        rating=row.get("rating"),
        price_range=row.get("price_range"),
        currency=row.get("currency"),
        price_label=row.get("price_label"),
        is_public=row.get("is_public", True),
        created_at=str(row["created_at"]) if row.get("created_at") is not None else None,
    )


def _not_found(restaurant_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": "not_found",
            "details": f"Restaurant {restaurant_id} not found"
        }
    )


@router.get(
    "",
    response_model=RestaurantListResponse,
    status_code=status.HTTP_200_OK,
    summary="List saved restaurants",
    description="""
    Return the caller's saved restaurants, newest first.

    Optional filters (repeat the parameter to select several values):
    - price: match any of the selected 1-4 tiers
    - dietary: restaurant must have ALL selected dietary tags
    - context: restaurant must have ANY selected context tag
    """
)
async def list_restaurants(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    price: Annotated[Optional[List[int]], Query()] = None,
    dietary: Annotated[Optional[List[DietaryTag]], Query()] = None,
    context: Annotated[Optional[List[ContextTag]], Query()] = None,
) -> RestaurantListResponse:
    """List and filter the caller's restaurants."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        restaurants = await get_saved_restaurants(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Failed to fetch restaurants: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "internal_error", "details": "Failed to fetch restaurants"}
        )

    filtered = filter_restaurants(
        restaurants,
        price_levels=price,
        dietary_tags=dietary,
        context_tags=context,
    )

    return RestaurantListResponse(
        restaurants=[to_restaurant_response(r) for r in filtered],
        count=len(filtered),
    )


@router.post(
    "",
    response_model=RestaurantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a restaurant",
)
async def create_restaurant(
    request: RestaurantCreateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> RestaurantResponse:
    """
    Save a restaurant to the caller's list.

    The owner is always the authenticated user; there is no user_id in
    the request body.
    """
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        restaurant = await save_restaurant(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            **request.model_dump(),
        )
    except Exception as e:
        logger.error(f"Failed to save restaurant: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "internal_error", "details": "Failed to save restaurant"}
        )

    return to_restaurant_response(restaurant)


@router.patch(
    "/{restaurant_id}",
    response_model=RestaurantResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit a saved restaurant",
)
async def edit_restaurant(
    restaurant_id: str,
    request: RestaurantUpdateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> RestaurantResponse:
    """Update only the fields present in the request body."""
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "invalid_request",
                "details": "At least one field must be provided for update"
            }
        )

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        restaurant = await update_restaurant(
            supabase_client, auth_user.user_id, restaurant_id, **updates
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to update restaurant {restaurant_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "internal_error", "details": "Failed to update restaurant"}
        )

    if not restaurant:
        raise _not_found(restaurant_id)

    return to_restaurant_response(restaurant)


@router.delete(
    "/{restaurant_id}",
    response_model=RestaurantDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a saved restaurant",
)
async def remove_restaurant(
    restaurant_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> RestaurantDeleteResponse:
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        deleted = await delete_restaurant(supabase_client, auth_user.user_id, restaurant_id)
    except Exception as e:
        logger.error(f"Failed to delete restaurant {restaurant_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "internal_error", "details": "Failed to delete restaurant"}
        )

    if not deleted:
        raise _not_found(restaurant_id)

    return RestaurantDeleteResponse(
        status="DELETED",
        message="Restaurant deleted successfully"
    )
