"""
High-score storage.

Keeps the ten best (lowest) winning times per difficulty, either in memory
or in a JSON file on disk.
"""
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .board import Difficulty

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MAX_HIGH_SCORES = 10

DifficultyKey = Union[Difficulty, str]


def format_time(seconds: int) -> str:
    """Format a time in seconds as MM:SS."""
    minutes, remaining = divmod(int(seconds), 60)
    return f"{minutes:02d}:{remaining:02d}"


@dataclass
class HighScoreEntry:
    """
    A single recorded winning time.

    Attributes:
        time: Elapsed seconds of the winning game.
        date: ISO-8601 timestamp of when it was recorded.
        formatted: The time as MM:SS.
    """

    time: int
    date: str
    formatted: str

    @classmethod
    def create(cls, seconds: int, date: Optional[datetime] = None) -> "HighScoreEntry":
        """Build an entry stamped with ``date`` (default: now)."""
        date = date or datetime.now()
        return cls(time=int(seconds), date=date.isoformat(), formatted=format_time(seconds))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HighScoreEntry":
        """Rebuild an entry from its serialized form."""
        seconds = int(data["time"])
        return cls(
            time=seconds,
            date=str(data.get("date", "")),
            formatted=str(data.get("formatted", format_time(seconds))),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


# ============================================================================
# Store Interface
# ============================================================================

class HighScoreStore(ABC):
    """
    Abstract high-score table keyed by difficulty.

    Subclasses only provide loading and saving of one difficulty's list;
    qualification, ordering and capping live here.
    """

    @abstractmethod
    def _load(self, difficulty: Difficulty) -> List[HighScoreEntry]:
        """Return the stored entries for a difficulty."""
        pass

    @abstractmethod
    def _save(self, difficulty: Difficulty, entries: List[HighScoreEntry]) -> bool:
        """Persist the entries for a difficulty, returning success."""
        pass

    @staticmethod
    def _difficulty(key: DifficultyKey) -> Difficulty:
        try:
            return Difficulty(key)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {key!r}") from None

    def get_high_scores(self, difficulty: DifficultyKey) -> List[HighScoreEntry]:
        """
        Get the high scores for a difficulty, best first.

        Args:
            difficulty: One of easy, medium, hard or custom.

        Returns:
            Up to ten entries sorted by ascending time.
        """
        return list(self._load(self._difficulty(difficulty)))

    def is_high_score(self, difficulty: DifficultyKey, seconds: int) -> bool:
        """
        Check if a time would make the table.

        Args:
            difficulty: One of easy, medium, hard or custom.
            seconds: Elapsed seconds of a winning game.

        Returns:
            True if the table has room or the time beats its worst entry.
        """
        scores = self.get_high_scores(difficulty)
        if len(scores) < MAX_HIGH_SCORES:
            return True
        return seconds < scores[-1].time

    def record_high_score(
        self,
        difficulty: DifficultyKey,
        seconds: int,
        date: Optional[datetime] = None,
    ) -> bool:
        """
        Add a winning time to the table.

        Args:
            difficulty: One of easy, medium, hard or custom.
            seconds: Elapsed seconds of a winning game.
            date: When the game was won (default: now).

        Returns:
            True if the time is on the table after saving.
        """
        key = self._difficulty(difficulty)
        scores = self._load(key)
        scores.append(HighScoreEntry.create(seconds, date))
        scores.sort(key=lambda entry: entry.time)
        scores = scores[:MAX_HIGH_SCORES]

        if not self._save(key, scores):
            return False
        logger.info("Recorded %s high score %s", key.value, format_time(seconds))
        return any(entry.time == int(seconds) for entry in scores)

    def clear_high_scores(self) -> None:
        """Remove every recorded score."""
        for difficulty in Difficulty:
            self._save(difficulty, [])


# ============================================================================
# Implementations
# ============================================================================

class InMemoryHighScoreStore(HighScoreStore):
    """High-score table that lives only as long as the process."""

    def __init__(self) -> None:
        self._scores: Dict[Difficulty, List[HighScoreEntry]] = {
            difficulty: [] for difficulty in Difficulty
        }

    def _load(self, difficulty: Difficulty) -> List[HighScoreEntry]:
        return list(self._scores[difficulty])

    def _save(self, difficulty: Difficulty, entries: List[HighScoreEntry]) -> bool:
        self._scores[difficulty] = list(entries)
        return True


class JsonHighScoreStore(HighScoreStore):
    """
    High-score table stored as a JSON file.

    The file maps each difficulty name to a list of entries. A missing,
    unreadable or corrupt file reads as an empty table.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """
        Initialize the store.

        Args:
            path: Location of the JSON file. Parent directories are
                created on the first save.
        """
        self.path = Path(path)

    def _read_all(self) -> Dict[str, List[Dict[str, Any]]]:
        empty = {difficulty.value: [] for difficulty in Difficulty}
        if not self.path.exists():
            return empty
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.error("Could not read high scores from %s", self.path, exc_info=True)
            return empty
        if not isinstance(data, dict):
            logger.error("Ignoring malformed high scores file %s", self.path)
            return empty
        empty.update(data)
        return empty

    def _load(self, difficulty: Difficulty) -> List[HighScoreEntry]:
        raw = self._read_all().get(difficulty.value) or []
        try:
            return [HighScoreEntry.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError):
            logger.error("Ignoring malformed %s high scores", difficulty.value)
            return []

    def _save(self, difficulty: Difficulty, entries: List[HighScoreEntry]) -> bool:
        data = self._read_all()
        data[difficulty.value] = [entry.to_dict() for entry in entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError:
            logger.error("Could not write high scores to %s", self.path, exc_info=True)
            return False
        return True
