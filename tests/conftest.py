"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add src (package) and the project root (scripts) to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(1, str(Path(__file__).parent.parent))

from minefield import (
    BoardConfig,
    EventSink,
    GameClock,
    GameEngine,
    GameEvent,
    InMemoryHighScoreStore,
)


# ============================================================================
# Test Doubles
# ============================================================================

class FakeTime:
    """Manually advanced time source for the game clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingEventSink(EventSink):
    """Sink that remembers every event it receives."""

    def __init__(self) -> None:
        self.events: List[Tuple[GameEvent, Optional[Tuple[int, int]]]] = []

    def notify(self, event, position=None) -> None:
        self.events.append((event, position))

    @property
    def names(self) -> List[GameEvent]:
        return [event for event, _ in self.events]


class FailingEventSink(EventSink):
    """Sink whose delivery always fails, like missing audio."""

    def notify(self, event, position=None) -> None:
        raise RuntimeError("audio device unavailable")


# ============================================================================
# Collaborator Fixtures
# ============================================================================

@pytest.fixture
def fake_time() -> FakeTime:
    """Create a controllable time source."""
    return FakeTime()


@pytest.fixture
def manual_clock(fake_time: FakeTime) -> GameClock:
    """Create an unthreaded clock driven by the fake time source."""
    return GameClock(time_func=fake_time, threaded=False)


@pytest.fixture
def recorder() -> RecordingEventSink:
    """Create an event sink that records notifications."""
    return RecordingEventSink()


@pytest.fixture
def failing_sink() -> FailingEventSink:
    """Create an event sink that always raises."""
    return FailingEventSink()


@pytest.fixture
def score_store() -> InMemoryHighScoreStore:
    """Create an empty in-memory high-score store."""
    return InMemoryHighScoreStore()


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def make_engine(manual_clock, recorder, score_store):
    """
    Build engines wired to the shared test collaborators.

    Pass ``layout`` to arrange mines at fixed positions; otherwise mines
    are placed by the seeded generator on the first move.
    """
    def _make(rows=5, columns=5, mines=1, layout=None, seed=7) -> GameEngine:
        engine = GameEngine(
            rows,
            columns,
            mines,
            events=recorder,
            high_scores=score_store,
            clock=manual_clock,
            seed=seed,
        )
        if layout is not None:
            engine.arrange_mines(layout)
        return engine

    return _make


@pytest.fixture
def easy_engine(make_engine) -> GameEngine:
    """Create an easy preset engine (8x8, 10 mines)."""
    return make_engine(8, 8, 10)


@pytest.fixture
def corner_mine_engine(make_engine) -> GameEngine:
    """Create a 5x5 engine with its single mine in the bottom-right corner."""
    return make_engine(5, 5, 1, layout=[(4, 4)])


@pytest.fixture
def walled_engine(make_engine) -> GameEngine:
    """
    Create a 5x5 engine with a wall of mines down column 2.

    Columns 0-1 and 3-4 are separate safe regions.
    """
    return make_engine(5, 5, 5, layout=[(row, 2) for row in range(5)])


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(8, 8, 10)


@pytest.fixture
def custom_config() -> BoardConfig:
    """Configuration that matches no preset."""
    return BoardConfig(10, 12, 20)
