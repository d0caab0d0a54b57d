"""
Hints - Text hints about the target country.

Hints come from an external language model at play time. They only ever
add text to the round; they never decide anything.
"""

from .prompts import HintPrompts, format_hint_prompt
from .generator import (
    HintGenerator, HintUnavailable, GeminiHintGenerator, CannedHintGenerator,
    MISSING_KEY_HINT, EMPTY_HINT, FALLBACK_HINT,
)

__all__ = [
    "HintPrompts",
    "format_hint_prompt",
    "HintGenerator",
    "HintUnavailable",
    "GeminiHintGenerator",
    "CannedHintGenerator",
    "MISSING_KEY_HINT",
    "EMPTY_HINT",
    "FALLBACK_HINT",
]
