"""
AI components for the NomNomNow backend.

1. Restaurant Picker (single-call LLM chat)
   - Gemini via the Google Gen AI SDK, one generate_content call per turn
   - System prompt built from the user's saved restaurants
   - Optional open-now discovery through a [DISCOVER: "..."] directive
   - Located in: nomnom/services/picker_service.py

No agent framework is used; the picker is a plain prompt + completion.
"""

from nomnom.agents.picker import build_system_prompt

__all__ = [
    "build_system_prompt",
]
