"""
Game Manager - Creates and tracks hosted games.

A hosted game is one shared device: a roster, a current round and a game
loop. Games are EPHEMERAL:
- In-memory only; a restart forgets games in progress
- Removed when the host closes them or they go stale
- The only thing that outlives a game is the leaderboard store

All games share the world catalog (loaded once) and the collaborators.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import logging
import random
import threading
import time
import uuid

from .game_loop import GameLoop, BackgroundRunner
from ..config import Config
from ..hints import HintGenerator, GeminiHintGenerator
from ..leaderboard import LeaderboardStore, JsonLeaderboardStore, MemoryLeaderboardStore
from ..world import (
    CachedCatalog, CountryFactsProvider, GeoJsonCatalog, RestCountriesFacts,
    WorldCatalogProvider,
)


logger = logging.getLogger(__name__)


@dataclass
class HostedGame:
    """A game registered with the manager."""
    game_id: str
    loop: GameLoop
    created_at: float
    last_active: float = 0.0

    def touch(self) -> None:
        self.last_active = time.time()


class GameManager:
    """
    Manages hosted games.

    Responsibilities:
    - Build a game loop per game with the shared collaborators
    - Track games by id
    - Shut down and forget games that are closed or stale
    """

    def __init__(
        self,
        catalog: WorldCatalogProvider,
        facts: CountryFactsProvider | None = None,
        hints: HintGenerator | None = None,
        store: LeaderboardStore | None = None,
        runner_factory: Callable[[], BackgroundRunner] | None = None,
        reveal_delay: float = Config.REVEAL_DELAY,
        message_delay: float = Config.MESSAGE_DELAY,
    ):
        self.catalog = CachedCatalog(catalog)
        self.facts = facts
        self.hints = hints
        self.store = store or MemoryLeaderboardStore()
        # Serialises leaderboard merges across all hosted games
        self.store_lock = threading.Lock()
        self.runner_factory = runner_factory
        self.reveal_delay = reveal_delay
        self.message_delay = message_delay
        self._games: dict[str, HostedGame] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: type[Config] = Config) -> GameManager:
        """Manager wired to the real services named in the configuration."""
        store = (
            JsonLeaderboardStore(config.LEADERBOARD_PATH)
            if config.LEADERBOARD_PATH else MemoryLeaderboardStore()
        )
        return cls(
            catalog=GeoJsonCatalog(config.WORLD_URL, timeout=config.HTTP_TIMEOUT),
            facts=RestCountriesFacts(config.FACTS_URL, timeout=config.HTTP_TIMEOUT),
            hints=GeminiHintGenerator(
                api_key=config.GEMINI_API_KEY,
                model=config.HINT_MODEL,
                timeout=config.HTTP_TIMEOUT,
            ),
            store=store,
            reveal_delay=config.REVEAL_DELAY,
            message_delay=config.MESSAGE_DELAY,
        )

    def create_game(self, seed: int | None = None) -> HostedGame:
        """
        Create a new hosted game and load its world data.

        Args:
            seed: Optional random seed for reproducible target draws

        Returns:
            HostedGame in the lobby, or with a catalog error in state
        """
        loop = GameLoop(
            catalog=self.catalog,
            facts=self.facts,
            hints=self.hints,
            store=self.store,
            runner=self.runner_factory() if self.runner_factory else None,
            rng=random.Random(seed),
            reveal_delay=self.reveal_delay,
            message_delay=self.message_delay,
            store_lock=self.store_lock,
        )
        loop.load()

        now = time.time()
        game = HostedGame(
            game_id=str(uuid.uuid4()),
            loop=loop,
            created_at=now,
            last_active=now,
        )
        with self._lock:
            self._games[game.game_id] = game

        logger.info("Created game %s", game.game_id)
        return game

    def get_game(self, game_id: str) -> HostedGame | None:
        """Get a game by ID."""
        with self._lock:
            game = self._games.get(game_id)
        if game:
            game.touch()
        return game

    def close_game(self, game_id: str) -> bool:
        """
        Close a game and release its background workers.

        A session still in progress is not recorded; ending the session
        first is what commits scores to the leaderboard.
        """
        with self._lock:
            game = self._games.pop(game_id, None)
        if not game:
            return False

        game.loop.shutdown()
        logger.info("Closed game %s", game_id)
        return True

    def list_games(self) -> list[str]:
        """List IDs of hosted games."""
        with self._lock:
            return list(self._games)

    def cleanup_stale_games(self, max_idle_seconds: int = 3600) -> list[str]:
        """
        Close games idle for longer than max_idle_seconds.

        Called periodically to free memory.
        """
        current_time = time.time()
        with self._lock:
            stale = [
                game_id for game_id, game in self._games.items()
                if current_time - game.last_active > max_idle_seconds
            ]

        for game_id in stale:
            self.close_game(game_id)
        return stale

    def shutdown(self) -> None:
        for game_id in self.list_games():
            self.close_game(game_id)
