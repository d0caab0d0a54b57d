"""
Leaderboard Store - Persists the ledger between runs.

The store:
- Keeps one JSON file on local disk
- No database required
- Treats a missing or unreadable file as an empty leaderboard
- Never lets a failed save reach game state
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Protocol

from ..engine_core.state import LeaderboardEntry


logger = logging.getLogger(__name__)


class LeaderboardStore(Protocol):
    """Interface the game loop persists through."""

    def load(self) -> list[LeaderboardEntry]:
        ...

    def save(self, entries: list[LeaderboardEntry]) -> None:
        ...


class MemoryLeaderboardStore:
    """In-process store, used when no path is configured."""

    def __init__(self, entries: list[LeaderboardEntry] | None = None):
        self._entries = list(entries or [])

    def load(self) -> list[LeaderboardEntry]:
        return list(self._entries)

    def save(self, entries: list[LeaderboardEntry]) -> None:
        self._entries = list(entries)


class JsonLeaderboardStore:
    """
    File-based leaderboard.

    Usage:
        store = JsonLeaderboardStore("~/.countrysnap/leaderboard.json")
        entries = store.load()
        store.save(ledger.record(entries, results))
    """

    def __init__(self, path: str | Path | None = None):
        if path is None:
            path = Path.home() / ".countrysnap" / "leaderboard.json"
        self.path = Path(path).expanduser()

    def load(self) -> list[LeaderboardEntry]:
        """Load entries; anything unreadable loads as empty."""
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return [
                LeaderboardEntry(
                    name=str(item["name"]),
                    score=int(item["score"]),
                    timestamp=str(item.get("timestamp") or item.get("date") or ""),
                )
                for item in raw
            ]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable leaderboard at %s: %s", self.path, e)
            return []

    def save(self, entries: list[LeaderboardEntry]) -> None:
        """Write entries. Failures are logged, never raised."""
        data = [
            {"name": e.name, "score": e.score, "timestamp": e.timestamp}
            for e in entries
        ]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Could not save leaderboard to %s: %s", self.path, e)
