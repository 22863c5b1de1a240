"""
Minefield game module.

Provides the game engine, board configuration, cell states and the
collaborators it talks to (clock, event sinks, high-score stores, preferences).
The Gymnasium wrapper lives in ``minefield.environment`` and needs the
``rl`` extra.
"""
from .cell import CellState, GameStatus, MINE
from .board import BoardConfig, Difficulty, EASY, MEDIUM, HARD, PRESETS, classify_difficulty
from .errors import InvalidConfiguration
from .settings import validate_settings
from .clock import GameClock
from .events import EventSink, GameEvent, LoggingEventSink, NullEventSink
from .scores import HighScoreEntry, HighScoreStore, InMemoryHighScoreStore, JsonHighScoreStore
from .engine import GameEngine, GameSnapshot
from .preferences import JsonPreferenceStore

__all__ = [
    "CellState",
    "GameStatus",
    "MINE",
    "BoardConfig",
    "Difficulty",
    "EASY",
    "MEDIUM",
    "HARD",
    "PRESETS",
    "classify_difficulty",
    "InvalidConfiguration",
    "validate_settings",
    "GameClock",
    "EventSink",
    "GameEvent",
    "LoggingEventSink",
    "NullEventSink",
    "HighScoreEntry",
    "HighScoreStore",
    "InMemoryHighScoreStore",
    "JsonHighScoreStore",
    "GameEngine",
    "GameSnapshot",
    "JsonPreferenceStore",
]
