"""
Pydantic schemas for shared profile pages and the currency catalogue.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from nomnom.schemas.restaurants import RestaurantResponse
from nomnom.utils.constants import ProfileVisibility


class SharedProfileResponse(BaseModel):
    """
    Response for GET /users/{username}.

    restricted is True when the profile exists but the viewer may not see
    the list (private profile, or friends_only and not friends).
    """
    id: str
    username: str
    profile_visibility: ProfileVisibility
    is_owner: bool = Field(False, description="The viewer is this profile's owner")
    is_friend: bool = Field(False, description="The viewer is an accepted friend")
    restricted: bool = Field(False, description="Restaurant list hidden from this viewer")
    restaurants: List[RestaurantResponse] = Field(default_factory=list)
    restaurant_count: int = 0


class CurrencyResponse(BaseModel):
    """One entry of GET /currencies."""
    code: str
    symbol: str
    name: str
    thresholds: List[int] = Field(..., description="Upper bounds of tiers 1-3")
    labels: List[str] = Field(..., description="Labels for tiers 1-4")


class CurrencyListResponse(BaseModel):
    """Response for GET /currencies."""
    currencies: List[CurrencyResponse]
    default: str = Field("USD")
    detected: Optional[str] = Field(
        None,
        description="Best guess from the Accept-Language header"
    )
