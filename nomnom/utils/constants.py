"""
Fixed vocabularies for saved restaurants and profiles.

Tag values are what gets stored in restaurants.dietary_tags / context_tags.
Labels are what the picker prompt and the UI show.
"""

from typing import Dict, Literal, Tuple

DIETARY_TAGS: Tuple[str, ...] = (
    'halal',
    'vegetarian',
    'vegan',
    'gluten-free',
    'dairy-free',
    'nut-free',
)

# Context/occasion tags describe WHEN or HOW a restaurant is best used
CONTEXT_TAGS: Tuple[str, ...] = (
    'date-night',
    'solo-friendly',
    'group-friendly',
    'special-occasion',
    'quick-lunch',
    'late-night',
    'family-friendly',
    'work-meeting',
    'casual-hangout',
)

DietaryTag = Literal[
    'halal', 'vegetarian', 'vegan', 'gluten-free', 'dairy-free', 'nut-free'
]

ContextTag = Literal[
    'date-night', 'solo-friendly', 'group-friendly', 'special-occasion',
    'quick-lunch', 'late-night', 'family-friendly', 'work-meeting',
    'casual-hangout',
]

DIETARY_LABELS: Dict[str, str] = {
    'halal': 'Halal',
    'vegetarian': 'Vegetarian',
    'vegan': 'Vegan',
    'gluten-free': 'Gluten-Free',
    'dairy-free': 'Dairy-Free',
    'nut-free': 'Nut-Free',
}

CONTEXT_LABELS: Dict[str, str] = {
    'date-night': 'Date Night',
    'solo-friendly': 'Solo Friendly',
    'group-friendly': 'Group Friendly',
    'special-occasion': 'Special Occasion',
    'quick-lunch': 'Quick Lunch',
    'late-night': 'Late Night',
    'family-friendly': 'Family Friendly',
    'work-meeting': 'Work Meeting',
    'casual-hangout': 'Casual Hangout',
}

ProfileVisibility = Literal['public', 'friends_only', 'private']

PROFILE_VISIBILITIES: Tuple[str, ...] = ('public', 'friends_only', 'private')

FriendshipStatus = Literal['pending', 'accepted', 'rejected']

# Username: 3-20 chars, lowercase letters/numbers/underscores, starts with a letter
USERNAME_PATTERN = r'^[a-z][a-z0-9_]{2,19}$'
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20

DEFAULT_CURRENCY = 'USD'
