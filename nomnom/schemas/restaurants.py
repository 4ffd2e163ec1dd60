"""
Pydantic schemas for saved restaurant endpoints.

A saved restaurant always belongs to exactly one profile. The place_id ties
it back to the places provider result it was saved from.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from nomnom.utils.constants import ContextTag, DietaryTag


class RestaurantResponse(BaseModel):
    """A saved restaurant as stored in the restaurants table."""
    id: str = Field(..., description="Restaurant UUID")
    user_id: str = Field(..., description="Owner's user UUID")
    name: str = Field(..., description="Restaurant name")
    address: str = Field(..., description="Formatted address")
    place_id: Optional[str] = Field(None, description="Places provider ID")
    tags: List[str] = Field(default_factory=list, description="Free-form tags (cuisine, vibe...)")
    dietary_tags: List[str] = Field(default_factory=list, description="Stored dietary tags, passed through as-is")
    context_tags: List[str] = Field(default_factory=list, description="Stored context tags, passed through as-is")
    notes: Optional[str] = None
    what_to_order: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5, description="User rating 1-5")
    price_range: Optional[int] = Field(None, ge=1, le=4, description="Budget tier 1-4")
    currency: Optional[str] = Field(None, description="Currency used to label price_range")
    price_label: Optional[str] = Field(
        None,
        description="Human-readable price tier, e.g. 'Moderate ($10-25)'"
    )
    is_public: bool = Field(True, description="Shown on the owner's shared profile")
    created_at: Optional[str] = Field(None, description="ISO-8601 creation timestamp")


class RestaurantCreateRequest(BaseModel):
    """
    Request to save a restaurant (usually picked from a places search result).
    """
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    place_id: str = Field(..., min_length=1, max_length=300)
    tags: List[str] = Field(default_factory=list, max_length=30)
    dietary_tags: List[DietaryTag] = Field(default_factory=list)
    context_tags: List[ContextTag] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=2000)
    what_to_order: Optional[str] = Field(None, max_length=1000)
    rating: Optional[int] = Field(None, ge=1, le=5)
    price_range: Optional[int] = Field(None, ge=1, le=4)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    is_public: bool = True


class RestaurantUpdateRequest(BaseModel):
    """
    Request to edit a saved restaurant.

    Only provided fields are updated. Send null for notes, what_to_order,
    rating or price_range to clear them.
    """
    notes: Optional[str] = Field(None, max_length=2000)
    what_to_order: Optional[str] = Field(None, max_length=1000)
    rating: Optional[int] = Field(None, ge=1, le=5)
    price_range: Optional[int] = Field(None, ge=1, le=4)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    tags: Optional[List[str]] = Field(None, max_length=30)
    dietary_tags: Optional[List[DietaryTag]] = None
    context_tags: Optional[List[ContextTag]] = None
    is_public: Optional[bool] = None


class RestaurantListResponse(BaseModel):
    """Response for GET /restaurants."""
    restaurants: List[RestaurantResponse] = Field(..., description="Newest first")
    count: int = Field(..., description="Number of restaurants after filtering")


class RestaurantDeleteResponse(BaseModel):
    """Response after deleting a restaurant."""
    status: str = Field("DELETED")
    message: str = Field(..., examples=["Restaurant deleted successfully"])
