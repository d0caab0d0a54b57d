"""
Match Judge - Decides whether a typed guess names the target country.

A guess matches a name when, after trimming and case folding:
1. it equals the name, or
2. it is longer than 3 characters and is a substring of the name
   ("korea" inside "republic of korea"), or
3. its edit distance to the name is within a tolerance that grows with
   the length of the name.

Only the canonical shape name and the common name from the facts are ever
judged. Capitals and regions are not.
"""

from __future__ import annotations
from typing import Iterable

import Levenshtein


MIN_SUBSTRING_LENGTH = 4

# (max name length, allowed edits); longer names fall through to the last.
TOLERANCE_STEPS = ((3, 0), (7, 1), (12, 2))
MAX_TOLERANCE = 3


def normalize(text: str) -> str:
    return text.strip().casefold()


def tolerance_for(length: int) -> int:
    """Allowed edit distance for a name of the given length."""
    for max_length, allowed in TOLERANCE_STEPS:
        if length <= max_length:
            return allowed
    return MAX_TOLERANCE


def levenshtein_distance(name: str, guess: str) -> int:
    """Insertions, deletions and substitutions needed to turn guess into name."""
    return Levenshtein.distance(name, guess)


def matches_name(guess: str, name: str) -> bool:
    """Check a guess against a single acceptable name."""
    guess = normalize(guess)
    name = normalize(name)

    if not guess or not name:
        return False

    if name == guess:
        return True

    if len(guess) >= MIN_SUBSTRING_LENGTH and guess in name:
        return True

    return levenshtein_distance(name, guess) <= tolerance_for(len(name))


def judge(guess: str, acceptable_names: Iterable[str | None]) -> bool:
    """
    Return True if the guess matches any acceptable name.

    Missing or empty names (facts not resolved yet) are skipped.
    """
    return any(matches_name(guess, name) for name in acceptable_names if name)
