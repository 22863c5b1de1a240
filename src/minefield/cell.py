"""
Cell module for Minefield.

Defines the per-cell visibility states, the overall game status and the
encoding used to hand the player's view of a cell to agents and renderers.
"""
from enum import Enum, auto


# ============================================================================
# Constants
# ============================================================================

MINE = -1


class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()
    QUESTIONED = auto()
    WRONG_FLAG = auto()


class GameStatus(Enum):
    """Possible states of the game."""

    NEW = auto()
    PLAYING = auto()
    WON = auto()
    LOST = auto()

    @property
    def is_active(self) -> bool:
        """Check if the game still accepts moves."""
        return self in (GameStatus.NEW, GameStatus.PLAYING)


# Right-click cycle: hidden -> flagged -> questioned -> hidden
FLAG_CYCLE = {
    CellState.HIDDEN: CellState.FLAGGED,
    CellState.FLAGGED: CellState.QUESTIONED,
    CellState.QUESTIONED: CellState.HIDDEN,
}

HIDDEN_OBSERVATION = -1
FLAGGED_OBSERVATION = -2
QUESTIONED_OBSERVATION = -3
WRONG_FLAG_OBSERVATION = -4
MINE_OBSERVATION = 9

_STATE_OBSERVATIONS = {
    CellState.HIDDEN: HIDDEN_OBSERVATION,
    CellState.FLAGGED: FLAGGED_OBSERVATION,
    CellState.QUESTIONED: QUESTIONED_OBSERVATION,
    CellState.WRONG_FLAG: WRONG_FLAG_OBSERVATION,
}


# ============================================================================
# Cell Helpers
# ============================================================================

def next_flag_state(state: CellState) -> CellState:
    """
    Get the state a cell moves to when its flag is toggled.

    Args:
        state: Current visual state of the cell.

    Returns:
        Next state in the flag cycle.

    Raises:
        ValueError: If the cell is revealed or wrongly flagged.
    """
    try:
        return FLAG_CYCLE[state]
    except KeyError:
        raise ValueError(f"Cannot toggle flag on a {state.name} cell") from None


def to_observation(value: int, state: CellState) -> int:
    """
    Convert a cell to its observation value.

    Args:
        value: Board value of the cell (-1 for a mine, else 0-8).
        state: Current visual state of the cell.

    Returns:
        -1: Hidden cell
        -2: Flagged cell
        -3: Questioned cell
        -4: Wrong flag (after a loss)
        0-8: Revealed cell with adjacent mine count
        9: Revealed mine (game over state)
    """
    if state != CellState.REVEALED:
        return _STATE_OBSERVATIONS[state]
    if value == MINE:
        return MINE_OBSERVATION
    return value
