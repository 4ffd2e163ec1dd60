"""
Pydantic schemas for profile endpoints.

Profiles are 1:1 with auth.users and are created automatically on first
authenticated access. They carry the public username, the privacy level of
the restaurant list, and the currency used for price labels.
"""

from typing import Optional
from pydantic import BaseModel, Field

from nomnom.utils.constants import ProfileVisibility


# --- Profile response models ---

class ProfileResponse(BaseModel):
    """
    Response for GET /profile - the caller's profile.
    """
    id: str = Field(..., description="User UUID (from auth.users)")
    username: Optional[str] = Field(
        None,
        description="Public username (lowercase). Null until the user picks one.",
        examples=["foodie_sam"]
    )
    profile_visibility: ProfileVisibility = Field(
        "public",
        description="Who can see the user's restaurant list"
    )
    currency: Optional[str] = Field(
        None,
        description="Preferred currency code for price display",
        examples=["USD", "MYR", "EUR"]
    )
    created_at: Optional[str] = Field(None, description="ISO-8601 creation timestamp")
    updated_at: Optional[str] = Field(None, description="ISO-8601 timestamp of last update")


class PublicProfile(BaseModel):
    """Condensed profile shown to other users (friend lists, search results)."""
    id: str = Field(..., description="User UUID")
    username: Optional[str] = Field(None, description="Public username")


# --- Profile update models ---

class UsernameUpdateRequest(BaseModel):
    """
    Request to set or change the username.

    Input is trimmed and lowercased before validation.
    """
    username: str = Field(
        ...,
        description="Desired username: 3-20 chars, starts with a letter, "
                    "letters/numbers/underscores, no consecutive underscores",
        max_length=64,
        examples=["foodie_sam"]
    )


class UsernameAvailabilityResponse(BaseModel):
    """Response for GET /profile/username-available."""
    username: str = Field(..., description="Normalized username that was checked")
    available: bool = Field(..., description="True if free or already owned by the caller")
    error: Optional[str] = Field(
        None,
        description="Validation error if the username is not acceptable"
    )


class VisibilityUpdateRequest(BaseModel):
    """Request to change who can see the restaurant list."""
    profile_visibility: ProfileVisibility = Field(
        ...,
        description="public: anyone; friends_only: accepted friends; private: only you"
    )


class CurrencyUpdateRequest(BaseModel):
    """Request to change the preferred display currency."""
    currency: str = Field(
        ...,
        description="Currency code from GET /currencies",
        min_length=3,
        max_length=3,
        examples=["USD", "MYR"]
    )


class ProfileUpdateResponse(BaseModel):
    """
    Response after successfully updating the profile.
    """
    status: str = Field("UPDATED", description="Indicates the profile was successfully updated")
    profile: ProfileResponse = Field(..., description="Complete updated profile")
    message: str = Field(
        ...,
        description="Success message",
        examples=["Username updated successfully"]
    )
