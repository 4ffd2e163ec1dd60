"""
Restaurant Picker Prompt Templates

Builds the system prompt for the picker chat from the user's saved
restaurants.

Two variants:
- conversational: asks what the user is in the mood for before recommending
- direct: recommends immediately from whatever the user said, no follow-up
  questions, no markdown, aware of the current time

The direct variant can ask the server to search for open-now places by
ending its reply with a discovery directive. Those instructions are a
separate block that is only appended when the client sent a location.

The builder is pure: same restaurants, clock and location flag give the
same prompt.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from nomnom.utils.constants import CONTEXT_LABELS, DIETARY_LABELS
from nomnom.utils.currency import resolve_price_label

PromptMode = Literal["direct", "conversational"]

NO_RESTAURANTS_TEXT = "No restaurants saved yet."


# =============================================================================
# TEMPLATES
# =============================================================================

CONVERSATIONAL_PROMPT_TEMPLATE = """You are a friendly, conversational food recommendation assistant for NomNomNow. Your goal is to help the user decide what to eat from their saved restaurants.

The user has saved these restaurants:

{restaurant_list}

Your approach:
1. Start by asking what they're in the mood for (cuisine type, flavors, comfort food vs adventurous, etc.)
2. Ask follow-up questions about practical constraints if relevant (budget, distance, time, dietary needs)
3. Once you have enough info, recommend 1-3 restaurants from their list with clear reasoning
4. Be concise, warm, and helpful - like a foodie friend

Important:
- Only recommend from the restaurants listed above
- If none of their saved restaurants match, say so honestly and suggest what type of place they might want to add
- Keep responses brief and conversational
- Use the "what to order" and "notes" info when making recommendations"""


DIRECT_PROMPT_TEMPLATE = """You are a decisive food recommendation assistant for NomNomNow. The user wants a pick right now from their saved restaurants.

The current time is {current_time}.

The user has saved these restaurants:

{restaurant_list}

How to respond:
1. Recommend 1-3 restaurants immediately, based on whatever the user has told you (mood, who is eating, budget, dietary needs)
2. Do NOT ask follow-up questions. If details are missing, make a sensible pick and briefly say why
3. Treat dietary needs as hard requirements: only recommend places tagged with every dietary need the user mentions
4. Use the price, rating, "good for", "what to order" and notes details in your reasoning
5. If the current time is before 8am or after 9pm, add a short "check hours" reminder for each pick, since it may be closed
6. Recommend only from the saved restaurants above. If none fit, say so honestly

Formatting:
- Plain text only. Do NOT use markdown: no asterisks, no bold, no headings, no bullet symbols
- Keep it short and warm, like a foodie friend texting back"""


DISCOVERY_INSTRUCTIONS = """

Finding new places:
The user has shared their location, so you can search for places near them that are open right now. Do this when none of the saved restaurants fit, or when the user asks for somewhere new.
To search, write your reply as usual and put this directive on its own line at the end:
[DISCOVER: "search terms"]
Example: [DISCOVER: "spicy ramen"]
Rules:
- Use 1-4 words describing the food or type of place
- Use at most one directive per reply
- Do not invent place names; the search results are shown to the user separately"""


# =============================================================================
# RENDERING
# =============================================================================

def format_current_time(now: datetime) -> str:
    """Format a wall-clock time as "h:MM AM/PM" (e.g. "9:05 PM")."""
    return now.strftime("%I:%M %p").lstrip("0")


def _labels(values: Optional[List[str]], labels: Dict[str, str]) -> List[str]:
    return [labels.get(value, value) for value in values or [] if value]


def format_restaurant(restaurant: Dict[str, Any]) -> str:
    """
    Render one saved restaurant as a prompt bullet.

    Only lines with content are included, e.g.:

        - Sushi Zanmai (Pavilion KL, Kuala Lumpur)
          Tags: sushi, japanese
          Price: Moderate (RM15-40)
          User rating: 4/5
    """
    name = restaurant.get("name") or "Unnamed restaurant"
    address = restaurant.get("address")
    lines = [f"- {name} ({address})" if address else f"- {name}"]

    tags = [tag for tag in restaurant.get("tags") or [] if tag]
    if tags:
        lines.append(f"  Tags: {', '.join(tags)}")

    price_label = resolve_price_label(
        restaurant.get("price_range"), restaurant.get("currency")
    )
    if price_label:
        lines.append(f"  Price: {price_label}")

    if restaurant.get("rating"):
        lines.append(f"  User rating: {restaurant['rating']}/5")

    dietary = _labels(restaurant.get("dietary_tags"), DIETARY_LABELS)
    if dietary:
        lines.append(f"  Dietary: {', '.join(dietary)}")

    context = _labels(restaurant.get("context_tags"), CONTEXT_LABELS)
    if context:
        lines.append(f"  Good for: {', '.join(context)}")

    what_to_order = (restaurant.get("what_to_order") or "").strip()
    if what_to_order:
        lines.append(f"  What to order: {what_to_order}")

    notes = (restaurant.get("notes") or "").strip()
    if notes:
        lines.append(f"  Notes: {notes}")

    return "\n".join(lines)


def format_restaurant_list(restaurants: List[Dict[str, Any]]) -> str:
    """Render all restaurants, separated by blank lines."""
    if not restaurants:
        return NO_RESTAURANTS_TEXT
    return "\n\n".join(format_restaurant(r) for r in restaurants)


def build_system_prompt(
    restaurants: List[Dict[str, Any]],
    has_location: bool,
    now: Optional[datetime] = None,
    mode: PromptMode = "direct",
) -> str:
    """
    Build the picker system prompt.

    Args:
        restaurants: Saved restaurant rows (newest first)
        has_location: True when the client sent both latitude and longitude
        now: Wall-clock time to show the model (defaults to server local time)
        mode: "direct" (default) or "conversational"

    Returns:
        str: System prompt ready to send to Gemini
    """
    restaurant_list = format_restaurant_list(restaurants)

    if mode == "conversational":
        return CONVERSATIONAL_PROMPT_TEMPLATE.format(restaurant_list=restaurant_list)

    current_time = format_current_time(now or datetime.now())
    prompt = DIRECT_PROMPT_TEMPLATE.format(
        current_time=current_time,
        restaurant_list=restaurant_list,
    )

    if has_location:
        prompt += DISCOVERY_INSTRUCTIONS

    return prompt
