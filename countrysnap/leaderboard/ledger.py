"""
Leaderboard Ledger - Merges finished-session results into the ranked history.

Pure logic over snapshots: takes the current entries and a session's
results, returns the new entries. Durability belongs to the store.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Iterable

from ..engine_core.state import LeaderboardEntry


MAX_ENTRIES = 50


def utc_timestamp(epoch_seconds: float | None = None) -> str:
    """ISO-8601 timestamp for a new entry."""
    if epoch_seconds is None:
        moment = datetime.now(timezone.utc)
    else:
        moment = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return moment.isoformat()


def record(
    existing: Iterable[LeaderboardEntry],
    results: Iterable[tuple[str, int]],
    timestamp: str | None = None,
    limit: int = MAX_ENTRIES,
) -> list[LeaderboardEntry]:
    """
    Merge (name, score) results into the ledger.

    Only positive scores are admitted. Ties keep insertion order: older
    entries first, then new ones in roster order.
    """
    timestamp = timestamp or utc_timestamp()
    new_entries = [
        LeaderboardEntry(name=name, score=score, timestamp=timestamp)
        for name, score in results
        if score > 0
    ]
    merged = list(existing) + new_entries
    # sorted() is stable with reverse=True as well
    ranked = sorted(merged, key=lambda entry: entry.score, reverse=True)
    return ranked[:limit]
