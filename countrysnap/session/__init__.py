"""
Session Module - Runs games on a shared device.

A hosted game wraps one game loop:
- Created when a device opens the game
- Holds the roster, the current round and the leaderboard snapshot
- Executes background work (facts, hints, timers, saves)
- Forgotten when closed

Sessions of play (start game to end game) happen inside a hosted game.
The only persistence is the leaderboard store.
"""

from .manager import GameManager, HostedGame
from .game_loop import GameLoop, BackgroundRunner, ThreadedRunner, NoFacts

__all__ = [
    "GameManager",
    "HostedGame",
    "GameLoop",
    "BackgroundRunner",
    "ThreadedRunner",
    "NoFacts",
]
