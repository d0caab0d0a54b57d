"""
Game State - The single explicit state object the engine operates on.

Design principles:
- Immutable-friendly: all mutations return new state
- One RoundState per round, replaced wholesale on round start
- Roster and turn pointer live beside the round, not inside it
- No I/O: collaborators feed results in through actions
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


MAX_LIVES = 3

PLAYER_COLORS = ("blue", "green", "purple", "pink", "yellow", "cyan")


class RoundStatus(Enum):
    """Lifecycle of a single round."""
    IDLE = "idle"  # Menu, no target
    LOADING = "loading"  # Target chosen, zooming out / facts in flight
    PLAYING = "playing"  # Accepting guesses
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def is_resolved(self) -> bool:
        return self in {RoundStatus.SUCCESS, RoundStatus.FAILURE}


@dataclass(frozen=True)
class GeoShape:
    """
    A country outline from the world catalog.

    geometry is a shapely Polygon or MultiPolygon in lon/lat degrees.
    """
    shape_id: str | None
    name: str
    geometry: Any = field(compare=False, repr=False)


@dataclass(frozen=True)
class CountryFacts:
    """Enrichment metadata for a shape, fetched separately from the geometry."""
    name: str
    capital: str | None = None
    region: str | None = None
    flag: str | None = None

    @classmethod
    def fallback(cls, shape: GeoShape) -> CountryFacts:
        """Minimal record used when the facts provider is unavailable."""
        return cls(name=shape.name)


@dataclass(frozen=True)
class Target:
    """The shape being guessed this round, plus facts once resolved."""
    shape: GeoShape
    facts: CountryFacts | None = None

    @property
    def acceptable_names(self) -> list[str]:
        """Canonical name first, then the common name when known."""
        names = [self.shape.name]
        if self.facts and self.facts.name:
            names.append(self.facts.name)
        return names

    def with_facts(self, facts: CountryFacts) -> Target:
        return replace(self, facts=facts)


@dataclass(frozen=True)
class Player:
    """A player on the shared device. Score may go negative."""
    player_id: str
    name: str
    score: int = 0
    color: str = PLAYER_COLORS[0]

    def with_score_delta(self, delta: int) -> Player:
        return replace(self, score=self.score + delta)


@dataclass(frozen=True)
class LeaderboardEntry:
    """A finished player's result. Never edited once written."""
    name: str
    score: int
    timestamp: str


@dataclass(frozen=True)
class RoundState:
    """
    State of one round.

    lives_remaining stays within 0..MAX_LIVES. message holds the transient
    "incorrect" notice; message_id lets a delayed clear target the exact
    message it was scheduled for.
    """
    status: RoundStatus = RoundStatus.IDLE
    target: Target | None = None
    lives_remaining: int = MAX_LIVES
    hints: tuple[str, ...] = ()
    message: str | None = None
    message_id: int = 0

    def _copy_with(self, **kwargs) -> RoundState:
        return replace(self, **kwargs)


@dataclass(frozen=True)
class GameState:
    """
    Complete engine state at a point in time.

    All state changes go through the reducer. round_token is bumped on every
    round start and on session end; background completions carry the token
    they were issued for and are discarded when it no longer matches.
    """
    # World catalog (read-only once loaded)
    catalog: tuple[GeoShape, ...] = ()
    catalog_loaded: bool = False
    catalog_error: str | None = None

    # Session / turns
    session_active: bool = False
    players: tuple[Player, ...] = ()
    current_player_idx: int = 0
    rounds_started: int = 0
    player_seq: int = 0  # Source of deterministic player ids

    # Current round
    round: RoundState = field(default_factory=RoundState)
    round_token: int = 0
    hint_in_flight: bool = False

    # Persisted ranking snapshot
    leaderboard: tuple[LeaderboardEntry, ...] = ()

    @property
    def current_player(self) -> Player | None:
        """Get the player whose turn it is."""
        if not self.players:
            return None
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def status(self) -> RoundStatus:
        return self.round.status

    @property
    def target(self) -> Target | None:
        return self.round.target

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def with_round(self, **kwargs) -> GameState:
        """Return new state with some round fields replaced."""
        return self._copy_with(round=self.round._copy_with(**kwargs))

    def with_current_player_score(self, delta: int) -> GameState:
        """Return new state with delta applied to the current player only."""
        if not self.players:
            return self
        new_players = tuple(
            p.with_score_delta(delta) if i == self.current_player_idx else p
            for i, p in enumerate(self.players)
        )
        return self._copy_with(players=new_players)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
