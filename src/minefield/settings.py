"""
Settings validation for custom games.

Clamps user-entered board settings into the playable range before a game
is created or reconfigured.
"""
from typing import Tuple

from .board import MAX_DIMENSION, MIN_DIMENSION, MIN_MINES, max_mines_for


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(low, value), high)


def validate_settings(width: int, height: int, mines: int) -> Tuple[int, int, int]:
    """
    Clamp custom game settings to reasonable bounds.

    Args:
        width: Requested number of columns.
        height: Requested number of rows.
        mines: Requested number of mines.

    Returns:
        Tuple of (width, height, mines) with width and height in [5, 40]
        and mines in [1, width * height // 3].
    """
    valid_width = _clamp(int(width), MIN_DIMENSION, MAX_DIMENSION)
    valid_height = _clamp(int(height), MIN_DIMENSION, MAX_DIMENSION)
    max_mines = max_mines_for(valid_height, valid_width)
    valid_mines = _clamp(int(mines), MIN_MINES, max_mines)
    return valid_width, valid_height, valid_mines
