"""
Game event notifications.

The engine reports what happened through an EventSink so that sound,
animation or analytics layers can react without the engine knowing them.
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class GameEvent(str, Enum):
    """Named triggers emitted by the engine."""

    CELL_REVEALED = "cellRevealed"
    FLAG_TOGGLED = "flagToggled"
    MINE_EXPLODED = "mineExploded"
    GAME_WON = "gameWon"
    HINT_GIVEN = "hintGiven"


# ============================================================================
# Event Sinks
# ============================================================================

class EventSink(ABC):
    """
    Abstract receiver of game events.

    Delivery is fire-and-forget: the engine logs and drops any exception a
    sink raises.
    """

    @abstractmethod
    def notify(
        self,
        event: GameEvent,
        position: Optional[Tuple[int, int]] = None,
    ) -> None:
        """
        Receive a game event.

        Args:
            event: What happened.
            position: (row, col) of the cell involved, if any.
        """
        pass


class NullEventSink(EventSink):
    """Sink that ignores every event."""

    def notify(
        self,
        event: GameEvent,
        position: Optional[Tuple[int, int]] = None,
    ) -> None:
        pass


class LoggingEventSink(EventSink):
    """Sink that writes every event to the log."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        self.level = level

    def notify(
        self,
        event: GameEvent,
        position: Optional[Tuple[int, int]] = None,
    ) -> None:
        if position is None:
            logger.log(self.level, "Event %s", event.value)
        else:
            logger.log(self.level, "Event %s at %s", event.value, position)
