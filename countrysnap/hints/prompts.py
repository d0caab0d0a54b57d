"""
Hint Prompts - Prompt text for the hint generator.

The prompt asks for one sentence that gets easier with each request and
never names the country. That last rule is a request to the model; the
engine does not check the reply.
"""

from dataclasses import dataclass
import json


@dataclass
class HintPrompts:
    """Prompts used to ask a language model for country hints."""

    @staticmethod
    def country_hint() -> str:
        """Prompt for the next hint about a country."""
        return """
You are a game host for a "Guess the Country" game.
The user is looking at an outline of the country: "{country_name}".

Provide a concise, single-sentence hint about this country.
The hint should be interesting but not immediately give it away if possible,
but get progressively easier if they ask more.

Previous hints given: {prior_hints}.

Rules:
1. DO NOT mention the name of the country inside the hint.
2. DO NOT mention the name of bordering countries explicitly if it makes it too obvious, unless it's a hard hint.
3. Make it distinct from previous hints.
4. If this is the first hint, focus on geography or general region.
5. If this is a later hint, focus on culture, landmarks, or specific facts.

Return ONLY the hint text.
"""


def format_hint_prompt(country_name: str, prior_hints: list[str] | tuple[str, ...]) -> str:
    """Fill the hint prompt for a country and the hints already shown."""
    return HintPrompts.country_hint().format(
        country_name=country_name,
        prior_hints=json.dumps(list(prior_hints)),
    )
