"""
Effects - Side-effect commands returned by the reducer.

The reducer never performs I/O or waits on timers. It describes the work
to be done and the game loop executes it, feeding results back as actions
tagged with the round token they were issued for.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import GeoShape


@dataclass(frozen=True)
class Effect:
    """Base class for effect commands."""


@dataclass(frozen=True)
class ResolveFacts(Effect):
    """Fetch country facts for the round's target."""
    round_token: int
    shape: GeoShape


@dataclass(frozen=True)
class RevealTarget(Effect):
    """After the zoom-out pause, move the round from loading to playing."""
    round_token: int


@dataclass(frozen=True)
class GenerateHint(Effect):
    """Ask the hint generator for one more sentence."""
    round_token: int
    country_name: str
    prior_hints: tuple[str, ...]


@dataclass(frozen=True)
class ClearMessage(Effect):
    """Clear the transient message after a delay, if it is still the same one."""
    round_token: int
    message_id: int


@dataclass(frozen=True)
class SaveLeaderboard(Effect):
    """
    Merge a finished session into the stored leaderboard. Best effort.

    Carries only this session's (name, score) results; the merge happens
    against whatever the store holds when the save runs.
    """
    results: tuple[tuple[str, int], ...]
    timestamp: str
