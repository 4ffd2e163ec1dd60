"""
Pydantic schemas for friendship endpoints.

A friendship is a directed request (requester -> addressee). "Friends" means
an accepted record exists in either direction. Rejecting, cancelling and
unfriending delete the record.
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from nomnom.schemas.profile import PublicProfile
from nomnom.utils.constants import FriendshipStatus


class FriendshipResponse(BaseModel):
    """A friendship record, with the counterpart profile(s) when embedded."""
    id: str = Field(..., description="Friendship UUID")
    requester_id: str
    addressee_id: str
    status: FriendshipStatus
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    requester: Optional[PublicProfile] = None
    addressee: Optional[PublicProfile] = None


class FriendRequestCreate(BaseModel):
    """Request body for POST /friends/requests."""
    addressee_id: UUID = Field(..., description="User UUID to befriend")


class FriendshipListResponse(BaseModel):
    """List of friendships (friends, received or sent requests)."""
    friendships: List[FriendshipResponse]
    count: int


class PendingCountResponse(BaseModel):
    """Number of pending requests received by the caller."""
    count: int = Field(..., ge=0)


class FriendshipDeleteResponse(BaseModel):
    """Response after a reject, cancel or unfriend."""
    status: str = Field("DELETED")
    message: str


class UserSearchResponse(BaseModel):
    """Result of a username search. user is null when nobody matches."""
    user: Optional[PublicProfile] = None
