"""
Game Loop - Runs the reducer and executes the effects it asks for.

The loop:
1. Receives an action (player input or a background completion)
2. Applies it through the reducer under a lock, to completion
3. Starts the effects the reducer returned: facts lookups, hint requests,
   delayed timers, leaderboard saves
4. Feeds each completion back as a new action tagged with its round token

Background work never changes state directly. A completion for a round
that has moved on is discarded by the reducer's token check.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Protocol
import logging
import random
import threading
import time

from ..engine_core.action import Action, ActionResult
from ..engine_core.effects import (
    Effect, ResolveFacts, RevealTarget, GenerateHint, ClearMessage, SaveLeaderboard,
)
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState, CountryFacts
from ..hints import HintGenerator, CannedHintGenerator, EMPTY_HINT, FALLBACK_HINT
from ..leaderboard import LeaderboardStore, MemoryLeaderboardStore, record
from ..viewport import CameraTransform, WorldProjection, camera_for
from ..world import CatalogUnavailable, CountryFactsProvider, FactsUnavailable, WorldCatalogProvider


logger = logging.getLogger(__name__)


class BackgroundRunner(Protocol):
    """Where the loop sends work that must not block a transition."""

    def submit(self, fn: Callable[[], None]) -> None:
        ...

    def call_later(self, delay: float, fn: Callable[[], None]) -> None:
        ...

    def shutdown(self) -> None:
        ...


class ThreadedRunner:
    """Thread pool for fetches, timers for delays."""

    def __init__(self, max_workers: int = 4):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="countrysnap"
        )
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    def submit(self, fn: Callable[[], None]) -> None:
        self._executor.submit(_logged(fn))

    def call_later(self, delay: float, fn: Callable[[], None]) -> None:
        timer: threading.Timer

        def fire():
            with self._lock:
                self._timers.discard(timer)
            _logged(fn)()

        timer = threading.Timer(delay, fire)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()

    def shutdown(self) -> None:
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        # Queued work (a final leaderboard save) still runs to completion
        self._executor.shutdown(wait=False)


def _logged(fn: Callable[[], None]) -> Callable[[], None]:
    """Wrap background work so an unexpected error is logged, not lost."""
    def run():
        try:
            fn()
        except Exception:
            logger.exception("Background task failed")
    return run


class NoFacts:
    """Facts provider for offline play: always falls back to the shape name."""

    def fetch(self, shape_id: str) -> CountryFacts:
        raise FactsUnavailable("Facts lookups disabled")


class GameLoop:
    """
    The main game driver for one shared device.

    Usage:
        loop = GameLoop(catalog=GeoJsonCatalog(url), facts=RestCountriesFacts())
        loop.load()

        loop.add_player("Ana")
        loop.start_session()
        loop.guess("france")
        ...
        loop.end_session()
    """

    def __init__(
        self,
        catalog: WorldCatalogProvider,
        facts: CountryFactsProvider | None = None,
        hints: HintGenerator | None = None,
        store: LeaderboardStore | None = None,
        runner: BackgroundRunner | None = None,
        rng: random.Random | None = None,
        reveal_delay: float = 1.5,
        message_delay: float = 1.5,
        store_lock: threading.Lock | None = None,
    ):
        self.catalog = catalog
        self.facts = facts or NoFacts()
        self.hints = hints or CannedHintGenerator()
        self.store = store or MemoryLeaderboardStore()
        self.runner = runner or ThreadedRunner()
        self.reducer = Reducer(rng=rng or random.Random())
        self.reveal_delay = reveal_delay
        self.message_delay = message_delay
        # Shared by every loop writing to the same store
        self.store_lock = store_lock or threading.Lock()

        self.state = GameState()
        self._lock = threading.RLock()

    # =========================================================================
    # Startup
    # =========================================================================

    def load(self) -> ActionResult:
        """
        Load the world catalog and the stored leaderboard.

        A catalog failure leaves the loop usable for roster editing only
        and records a persistent error in state.
        """
        with self.store_lock:
            entries = self.store.load()
        self.dispatch(Action.leaderboard_loaded(entries))

        try:
            shapes = self.catalog.load()
        except CatalogUnavailable as e:
            logger.error("World catalog unavailable: %s", e)
            return self.dispatch(Action.catalog_failed(str(e)))

        return self.dispatch(Action.catalog_loaded(shapes))

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, action: Action) -> ActionResult:
        """Apply one action to completion, then start its effects."""
        with self._lock:
            result = self.reducer.apply(self.state, action)
            if result.success and result.new_state is not None:
                self.state = result.new_state

        if result.success:
            for change in result.state_changes:
                logger.info(change)
        elif result.error_code == "STALE":
            logger.debug("Discarded %s: %s", action.action_type.value, result.error)
        else:
            logger.debug("Ignored %s: %s", action.action_type.value, result.error)

        for effect in result.effects:
            self._execute(effect)

        return result

    def snapshot(self) -> GameState:
        with self._lock:
            return self.state

    # =========================================================================
    # Player-facing operations
    # =========================================================================

    def add_player(self, name: str) -> ActionResult:
        return self.dispatch(Action.add_player(name))

    def remove_player(self, player_id: str) -> ActionResult:
        return self.dispatch(Action.remove_player(player_id))

    def start_session(self) -> ActionResult:
        return self.dispatch(Action.start_session())

    def end_session(self) -> ActionResult:
        return self.dispatch(Action.end_session(timestamp=time.time()))

    def start_round(self) -> ActionResult:
        return self.dispatch(Action.start_round())

    def guess(self, text: str) -> ActionResult:
        return self.dispatch(Action.guess(text))

    def skip(self) -> ActionResult:
        return self.dispatch(Action.skip())

    def request_hint(self) -> ActionResult:
        return self.dispatch(Action.request_hint())

    def camera(self, width: float, height: float) -> CameraTransform:
        """
        Target camera transform for a canvas of the given size.

        Raises ValueError for a canvas without area, framed or not.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas must have positive size, got {width}x{height}")
        projection = WorldProjection(width=width, height=height)
        return camera_for(self.snapshot(), width, height, projection)

    def shutdown(self) -> None:
        self.runner.shutdown()

    # =========================================================================
    # Effects
    # =========================================================================

    def _execute(self, effect: Effect) -> None:
        if isinstance(effect, ResolveFacts):
            self.runner.submit(lambda: self._resolve_facts(effect))
        elif isinstance(effect, RevealTarget):
            self.runner.call_later(
                self.reveal_delay,
                lambda: self.dispatch(Action.reveal_target(effect.round_token)),
            )
        elif isinstance(effect, GenerateHint):
            self.runner.submit(lambda: self._generate_hint(effect))
        elif isinstance(effect, ClearMessage):
            self.runner.call_later(
                self.message_delay,
                lambda: self.dispatch(
                    Action.clear_message(effect.round_token, effect.message_id)
                ),
            )
        elif isinstance(effect, SaveLeaderboard):
            self.runner.submit(lambda: self._save_results(effect))
        else:
            raise TypeError(f"Unknown effect: {effect!r}")

    def _save_results(self, effect: SaveLeaderboard) -> None:
        """Merge a session into the stored leaderboard, then show the result."""
        with self.store_lock:
            entries = record(self.store.load(), effect.results, timestamp=effect.timestamp)
            self.store.save(entries)

        self.dispatch(Action.leaderboard_loaded(entries))

    def _resolve_facts(self, effect: ResolveFacts) -> None:
        shape = effect.shape
        facts = CountryFacts.fallback(shape)
        if shape.shape_id:
            try:
                facts = self.facts.fetch(shape.shape_id)
            except Exception as e:
                # Enrichment only: the round goes on with the shape's own name
                logger.warning("Facts unavailable for %s: %s", shape.name, e)

        self.dispatch(Action.facts_resolved(effect.round_token, facts))

    def _generate_hint(self, effect: GenerateHint) -> None:
        try:
            text = self.hints.generate(effect.country_name, list(effect.prior_hints))
        except Exception as e:
            logger.warning("Hint generation failed: %s", e)
            text = FALLBACK_HINT

        if not text or not text.strip():
            text = EMPTY_HINT

        self.dispatch(Action.hint_resolved(effect.round_token, text))
