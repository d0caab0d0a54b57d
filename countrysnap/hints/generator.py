"""
Hint Generator - One-sentence hints from a generative language service.

The generator:
1. Formats the hint prompt with the country and the hints so far
2. Calls the Gemini generateContent endpoint
3. Returns the reply text

Failures raise HintUnavailable; the game loop swaps in a canned hint so a
slow or broken service never blocks a round.
"""

from __future__ import annotations
import logging
from typing import Protocol

import requests

from .prompts import format_hint_prompt


logger = logging.getLogger(__name__)


GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

MISSING_KEY_HINT = "Hints are currently unavailable (Missing API Key). Focus on the shape!"
EMPTY_HINT = "Focus on the shape and location!"
FALLBACK_HINT = "I'm having trouble retrieving a hint right now. Focus on the shape!"


class HintUnavailable(Exception):
    """The hint service could not produce a hint."""


class HintGenerator(Protocol):
    def generate(self, country_name: str, prior_hints: list[str]) -> str:
        ...


class GeminiHintGenerator:
    """
    Hints from Google's Gemini REST API.

    Usage:
        generator = GeminiHintGenerator(api_key=Config.GEMINI_API_KEY)
        hint = generator.generate("France", [])
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gemini-2.5-flash",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, country_name: str, prior_hints: list[str]) -> str:
        if not self.api_key:
            logger.warning("No API key configured; returning canned hint")
            return MISSING_KEY_HINT

        prompt = format_hint_prompt(country_name, prior_hints)
        try:
            resp = self.session.post(
                GEMINI_URL.format(model=self.model),
                headers={"x-goog-api-key": self.api_key},
                json={"contents": [{"parts": [{"text": prompt}]}]},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise HintUnavailable(f"Error generating hint: {e}") from e

        text = self._extract_text(data)
        return text.strip() if text else ""

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Join the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)


class CannedHintGenerator:
    """Offline generator cycling through fixed hints."""

    def __init__(self, hints: list[str] | None = None):
        self.hints = hints or [EMPTY_HINT]

    def generate(self, country_name: str, prior_hints: list[str]) -> str:
        return self.hints[len(prior_hints) % len(self.hints)]
