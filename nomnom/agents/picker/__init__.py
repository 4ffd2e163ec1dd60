"""
Restaurant Picker - prompt templates for the Gemini-backed picker chat.

The service layer is in:
- nomnom/services/picker_service.py

Prompt templates are in:
- nomnom/agents/picker/prompts.py
"""

from nomnom.agents.picker.prompts import (
    DISCOVERY_INSTRUCTIONS,
    build_system_prompt,
    format_restaurant,
)

__all__ = [
    "DISCOVERY_INSTRUCTIONS",
    "build_system_prompt",
    "format_restaurant",
]
