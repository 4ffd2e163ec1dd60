"""
Pydantic schemas for the restaurant picker endpoints.

Wire keys follow the web client: discoveredPlaces, placeId, priceLevel.
Python attributes stay snake_case and are exposed through aliases.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# ============================================================================
# SHARED MODELS
# ============================================================================

class ChatMessage(BaseModel):
    """One turn of the picker conversation."""
    role: Literal["user", "assistant"] = Field(..., description="Who wrote the message")
    content: str = Field(..., description="Message text")


class DiscoveredPlace(BaseModel):
    """
    An open-now place found through the places provider.

    Transient: produced per request and never stored. Optional fields are
    omitted from the response when the provider did not return them.
    """
    name: str
    address: Optional[str] = None
    place_id: str = Field(..., alias="placeId")
    rating: Optional[float] = None
    price_level: Optional[int] = Field(None, alias="priceLevel")

    model_config = {"populate_by_name": True}


# ============================================================================
# CHAT
# ============================================================================

class ChatRequest(BaseModel):
    """
    Request body for POST /picker/chat.

    The client strips its UI-only greeting before sending the history.
    Location is used only when both latitude and longitude are present.
    """
    messages: List[ChatMessage] = Field(
        ...,
        description="Full conversation so far, oldest first",
        min_length=1
    )
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    mode: Literal["direct", "conversational"] = Field(
        "direct",
        description=(
            "direct: recommend immediately and allow open-now discovery; "
            "conversational: ask clarifying questions first"
        )
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "messages": [
                        {"role": "user", "content": "Tired, solo, something cheap and warm"}
                    ],
                    "latitude": 3.139,
                    "longitude": 101.6869
                }
            ]
        }
    }


class ChatResponse(BaseModel):
    """Response for POST /picker/chat."""
    message: str = Field(..., description="Picker reply, discovery directive removed")
    discovered_places: Optional[List[DiscoveredPlace]] = Field(
        None,
        alias="discoveredPlaces",
        description="Open-now places; omitted when discovery found nothing or did not run"
    )

    model_config = {"populate_by_name": True}


# ============================================================================
# DISCOVERY
# ============================================================================

class DiscoverRequest(BaseModel):
    """Request body for POST /picker/discover."""
    query: str = Field(..., min_length=1, max_length=200, examples=["spicy ramen"])
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    radius: Optional[int] = Field(
        None,
        gt=0,
        le=50000,
        description="Search radius in meters (defaults to DISCOVERY_RADIUS_METERS)"
    )


class DiscoverResponse(BaseModel):
    """Response for POST /picker/discover."""
    places: List[DiscoveredPlace]
