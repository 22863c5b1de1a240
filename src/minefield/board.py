"""
Board module for Minefield.

Holds the validated board configuration, the fixed difficulty presets used
for high-score bucketing and the grid geometry helpers shared by the engine.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

import numpy as np

from .errors import InvalidConfiguration


# ============================================================================
# Constants
# ============================================================================

MIN_DIMENSION = 5
MAX_DIMENSION = 40
MIN_MINES = 1

NEIGHBOR_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


def max_mines_for(rows: int, columns: int) -> int:
    """Largest mine count allowed on a board (a third of its cells)."""
    return (rows * columns) // 3


class Difficulty(str, Enum):
    """High-score categories."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    CUSTOM = "custom"


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minefield board.

    Attributes:
        rows: Number of rows.
        columns: Number of columns.
        mines: Total mines to place.
    """

    rows: int = 8
    columns: int = 8
    mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are within the playable bounds."""
        for name, value in (("rows", self.rows), ("columns", self.columns)):
            if not MIN_DIMENSION <= value <= MAX_DIMENSION:
                raise InvalidConfiguration(
                    f"Board {name} must be between {MIN_DIMENSION} and "
                    f"{MAX_DIMENSION}, got {value}"
                )
        if self.mines < MIN_MINES:
            raise InvalidConfiguration(
                f"Board needs at least {MIN_MINES} mine, got {self.mines}"
            )
        max_mines = max_mines_for(self.rows, self.columns)
        if self.mines > max_mines:
            raise InvalidConfiguration(
                f"Too many mines (max {max_mines}), got {self.mines}"
            )

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.rows * self.columns

    @property
    def safe_cells(self) -> int:
        """Number of cells without a mine."""
        return self.total_cells - self.mines

    @property
    def difficulty(self) -> Difficulty:
        """High-score category of this configuration."""
        return classify_difficulty(self)


# Preset difficulty levels
EASY = BoardConfig(8, 8, 10)
MEDIUM = BoardConfig(16, 16, 40)
HARD = BoardConfig(24, 24, 99)

PRESETS: Dict[Difficulty, BoardConfig] = {
    Difficulty.EASY: EASY,
    Difficulty.MEDIUM: MEDIUM,
    Difficulty.HARD: HARD,
}


def classify_difficulty(config: BoardConfig) -> Difficulty:
    """
    Match a configuration against the preset table.

    Args:
        config: Board configuration of the finished game.

    Returns:
        The preset whose rows, columns and mines all match, or CUSTOM.
    """
    for difficulty, preset in PRESETS.items():
        if preset == config:
            return difficulty
    return Difficulty.CUSTOM


# ============================================================================
# Neighbor Utilities
# ============================================================================

def is_valid_position(row: int, col: int, rows: int, columns: int) -> bool:
    """Check if position is within board bounds."""
    return 0 <= row < rows and 0 <= col < columns


def get_neighbors(
    row: int, col: int, rows: int, columns: int
) -> List[Tuple[int, int]]:
    """
    Get valid neighboring cell positions.

    Args:
        row: Row index of center cell.
        col: Column index of center cell.
        rows: Number of rows on the board.
        columns: Number of columns on the board.

    Returns:
        List of (row, col) tuples for valid neighbors.
    """
    neighbors = []
    for delta_row, delta_col in NEIGHBOR_OFFSETS:
        new_row = row + delta_row
        new_col = col + delta_col
        if is_valid_position(new_row, new_col, rows, columns):
            neighbors.append((new_row, new_col))
    return neighbors


def count_adjacent_mines(mine_mask: np.ndarray) -> np.ndarray:
    """
    Count mines around every cell of a board.

    Args:
        mine_mask: 2D boolean array, True where a mine sits.

    Returns:
        2D int8 array with the number of mines among each cell's
        neighbors (the cell itself is not counted).
    """
    rows, columns = mine_mask.shape
    padded = np.pad(mine_mask.astype(np.int8), 1)
    counts = np.zeros((rows, columns), dtype=np.int8)
    for delta_row, delta_col in NEIGHBOR_OFFSETS:
        counts += padded[
            1 + delta_row:1 + delta_row + rows,
            1 + delta_col:1 + delta_col + columns,
        ]
    return counts
