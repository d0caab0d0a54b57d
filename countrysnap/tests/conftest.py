"""
Pytest fixtures for CountrySnap tests.
"""

import pytest
from shapely.geometry import box, Point

from ..engine_core.state import GameState, GeoShape, CountryFacts, RoundStatus
from ..engine_core.action import Action
from ..engine_core.reducer import Reducer
from ..leaderboard import MemoryLeaderboardStore
from ..hints import CannedHintGenerator
from ..session import GameLoop
from ..world import FactsUnavailable, StaticCatalog


# =============================================================================
# Test doubles
# =============================================================================

class ManualRunner:
    """
    Background runner that queues work until the test runs it.

    Timers ignore their delay; they only run when flushed.
    """

    def __init__(self):
        self.tasks = []
        self.delays = []
        self.closed = False

    def submit(self, fn):
        self.tasks.append(fn)

    def call_later(self, delay, fn):
        self.delays.append(delay)
        self.tasks.append(fn)

    def run_next(self):
        self.tasks.pop(0)()

    def run_all(self):
        """Run queued work, including work queued while running."""
        while self.tasks:
            self.run_next()

    def drop_all(self):
        self.tasks.clear()

    def shutdown(self):
        self.closed = True
        self.tasks.clear()


class FakeFacts:
    """Facts keyed by shape id. Unknown ids are unavailable."""

    def __init__(self, facts=None):
        self.facts = dict(facts or {})
        self.calls = []

    def fetch(self, shape_id):
        self.calls.append(shape_id)
        if shape_id not in self.facts:
            raise FactsUnavailable(f"No facts for {shape_id}")
        return self.facts[shape_id]


class FailingHints:
    """Hint generator whose service is down."""

    def generate(self, country_name, prior_hints):
        raise RuntimeError("hint service down")


class FirstChoice:
    """Random source that always draws the first playable shape."""

    def choice(self, seq):
        return seq[0]


# =============================================================================
# Shapes
# =============================================================================

@pytest.fixture
def france() -> GeoShape:
    return GeoShape("FRA", "France", box(-5.0, 42.0, 8.0, 51.0))


@pytest.fixture
def italy() -> GeoShape:
    """A shape whose feature carried no id."""
    return GeoShape(None, "Italy", box(6.6, 36.6, 18.5, 47.1))


@pytest.fixture
def korea() -> GeoShape:
    return GeoShape("KOR", "Republic of Korea", box(126.1, 34.0, 129.6, 38.6))


@pytest.fixture
def antarctica() -> GeoShape:
    return GeoShape("ATA", "Antarctica", box(-180.0, -90.0, 180.0, -60.0))


@pytest.fixture
def speck() -> GeoShape:
    """A shape with no extent at all."""
    return GeoShape("VAT", "Vatican", Point(12.45, 41.9))


@pytest.fixture
def world(france, italy, korea, antarctica) -> list:
    return [france, italy, korea, antarctica]


@pytest.fixture
def facts() -> FakeFacts:
    return FakeFacts({
        "FRA": CountryFacts(name="France", capital="Paris", region="Europe", flag="fr.svg"),
        "KOR": CountryFacts(name="South Korea", capital="Seoul", region="Asia", flag="kr.svg"),
    })


# =============================================================================
# Engine states
# =============================================================================

def load_catalog(shapes) -> GameState:
    return Reducer().apply(GameState(), Action.catalog_loaded(shapes)).new_state


def apply_all(reducer: Reducer, state: GameState, *actions) -> GameState:
    """Apply actions in order, asserting each one is accepted."""
    for action in actions:
        result = reducer.apply(state, action)
        assert result.success, result.error
        state = result.new_state
    return state


@pytest.fixture
def reducer() -> Reducer:
    return Reducer(rng=FirstChoice())


@pytest.fixture
def lobby_state(france) -> GameState:
    """Catalog loaded with France only, no players yet."""
    return load_catalog([france])


@pytest.fixture
def playing_state(reducer, lobby_state) -> GameState:
    """Two players, first round revealed, France as the target."""
    state = apply_all(
        reducer,
        lobby_state,
        Action.add_player("Ana"),
        Action.add_player("Bo"),
        Action.start_session(),
    )
    state = apply_all(reducer, state, Action.reveal_target(state.round_token))
    assert state.status == RoundStatus.PLAYING
    return state


# =============================================================================
# Game loops
# =============================================================================

@pytest.fixture
def runner() -> ManualRunner:
    return ManualRunner()


@pytest.fixture
def store() -> MemoryLeaderboardStore:
    return MemoryLeaderboardStore()


@pytest.fixture
def make_loop(runner, store, facts):
    """Build a loaded game loop over the given shapes."""
    def _make(shapes, hints=None, rng=None, facts_provider=None):
        loop = GameLoop(
            catalog=StaticCatalog(shapes),
            facts=facts_provider or facts,
            hints=hints or CannedHintGenerator(["It is in Europe.", "It is shaped like a boot."]),
            store=store,
            runner=runner,
            rng=rng or FirstChoice(),
        )
        loop.load()
        return loop
    return _make
