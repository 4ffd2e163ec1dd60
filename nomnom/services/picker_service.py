"""
Restaurant Picker Service - Gemini chat over the user's saved restaurants

Architecture:
- Pattern: single LLM call per turn, no tools, no agent loop
- Model: Gemini (PICKER_MODEL, default gemini-2.5-flash)
- API: Google Gen AI Python SDK (google-genai)
- Prompt: built fresh each turn from the caller's saved restaurants

Discovery:
When the client sent a location, the prompt allows the model to end its
reply with [DISCOVER: "terms"]. The directive is removed from the text and
a places search for open-now restaurants is run. The reply then gets one
sentence appended depending on whether places were found. A directive
without a location is stripped and ignored.

Failures fetching restaurants or calling Gemini propagate to the route,
which answers 500. Discovery failures never fail the turn.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from google import genai
from google.genai import types
from supabase import Client

from nomnom.agents.picker import build_system_prompt
from nomnom.config import settings
from nomnom.services.places_service import discover
from nomnom.services.restaurant_service import get_saved_restaurants

logger = logging.getLogger(__name__)

DISCOVER_PATTERN = re.compile(r'\[DISCOVER:\s*"([^"]+)"\]')

PLACES_FOUND_SUFFIX = "I also found some open spots nearby you might like!"
NO_PLACES_SUFFIX = (
    "I couldn't find any open places nearby for that right now. "
    "Want to try something else?"
)

# Initialize Gemini client (lazy initialization)
_gemini_client = None


class PickerUnavailableError(Exception):
    """The LLM client is not configured or returned no text."""


def _get_gemini_client():
    """
    Lazy initialization of Gemini client.
    Uses the Google Gen AI SDK.
    """
    global _gemini_client

    if _gemini_client is not None:
        return _gemini_client

    if not settings.GOOGLE_API_KEY:
        logger.warning(
            "GOOGLE_API_KEY not configured. Picker chat will not work. "
            "Please set GOOGLE_API_KEY in your .env file."
        )
        return None

    _gemini_client = genai.Client(api_key=settings.GOOGLE_API_KEY)
    logger.info("Gemini client initialized successfully for picker chat")
    return _gemini_client


def extract_discovery_query(text: str) -> Tuple[Optional[str], str]:
    """
    Pull the first [DISCOVER: "..."] directive out of a model reply.

    Returns:
        (query, text) where query is None when there is no directive.
        Only the first directive is removed; the text is whitespace-trimmed.
    """
    match = DISCOVER_PATTERN.search(text)
    if not match:
        return None, text.strip()

    query = match.group(1).strip()
    stripped = (text[:match.start()] + text[match.end():]).strip()
    return query or None, stripped


def _to_gemini_contents(messages: List[Dict[str, str]]) -> List[types.Content]:
    """Map chat history to Gemini contents (assistant -> model)."""
    contents = []
    for message in messages:
        role = "model" if message["role"] == "assistant" else "user"
        contents.append(
            types.Content(role=role, parts=[types.Part(text=message["content"])])
        )
    return contents


async def generate_reply(system_prompt: str, messages: List[Dict[str, str]]) -> str:
    """
    Run one Gemini completion for the conversation so far.

    Raises:
        PickerUnavailableError: Client not configured or empty response
        Exception: Any SDK/transport error, unchanged
    """
    client = _get_gemini_client()
    if client is None:
        raise PickerUnavailableError("Picker LLM is not configured")

    config = types.GenerateContentConfig(
        system_instruction=system_prompt,
        temperature=settings.PICKER_TEMPERATURE,
        max_output_tokens=settings.PICKER_MAX_OUTPUT_TOKENS,
    )

    response = client.models.generate_content(
        model=settings.PICKER_MODEL,
        contents=_to_gemini_contents(messages),
        config=config,
    )

    text = response.text
    if not text:
        raise PickerUnavailableError("Empty response from Gemini")

    return text


async def handle_chat_request(
    supabase_client: Client,
    user_id: str,
    messages: List[Dict[str, str]],
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    mode: str = "direct",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Answer one picker chat turn.

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The authenticated user's ID
        messages: Full history as [{"role": "user"|"assistant", "content": str}]
        latitude, longitude: Optional caller location; both are required
            for discovery
        mode: "direct" (default) or "conversational" prompt variant
        now: Clock override for the prompt's current time

    Returns:
        {"message": str} plus "discoveredPlaces" when discovery found places
    """
    has_location = latitude is not None and longitude is not None

    restaurants = await get_saved_restaurants(supabase_client, user_id)
    system_prompt = build_system_prompt(restaurants, has_location, now=now, mode=mode)

    logger.info(
        f"Picker turn for user {user_id}: {len(messages)} messages, "
        f"{len(restaurants)} restaurants, has_location={has_location}"
    )

    reply = await generate_reply(system_prompt, messages)
    query, text = extract_discovery_query(reply)

    response: Dict[str, Any] = {"message": text}

    if query is None:
        return response

    if not has_location:
        logger.info("Model asked for discovery without a location, ignoring")
        return response

    assert latitude is not None and longitude is not None
    places = await discover(query, latitude, longitude)

    suffix = PLACES_FOUND_SUFFIX if places else NO_PLACES_SUFFIX
    response["message"] = f"{text}\n\n{suffix}" if text else suffix
    if places:
        response["discoveredPlaces"] = places

    return response
