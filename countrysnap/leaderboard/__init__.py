"""
Leaderboard - Ranked history of finished sessions.

The ledger is pure merge logic; the store is the only persistence
in the system.
"""

from .ledger import MAX_ENTRIES, record, utc_timestamp
from .store import LeaderboardStore, JsonLeaderboardStore, MemoryLeaderboardStore

__all__ = [
    "MAX_ENTRIES",
    "record",
    "utc_timestamp",
    "LeaderboardStore",
    "JsonLeaderboardStore",
    "MemoryLeaderboardStore",
]
