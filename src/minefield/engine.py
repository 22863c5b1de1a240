"""
Game engine for Minefield.

Implements the board state machine: deferred mine placement, cascading
reveal, flag bookkeeping, hints and the win/lose transitions.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

import numpy as np

from .board import BoardConfig, Difficulty, count_adjacent_mines, get_neighbors, is_valid_position
from .cell import MINE, CellState, GameStatus, next_flag_state, to_observation
from .clock import GameClock
from .errors import InvalidConfiguration
from .events import EventSink, GameEvent, NullEventSink
from .scores import HighScoreStore, format_time
from .settings import validate_settings

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

NO_EXCLUSION = (-1, -1)

_RENDER_SYMBOLS = {
    CellState.HIDDEN: ".",
    CellState.FLAGGED: "F",
    CellState.QUESTIONED: "?",
    CellState.WRONG_FLAG: "X",
}


# ============================================================================
# State Snapshot
# ============================================================================

@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """
    Immutable copy of the engine state for presentation layers.

    Attributes:
        board: Read-only copy of the board values (-1 mine, 0-8 counts).
        visibility: Visual state of every cell, row by row.
        status: Current game status.
        mine_count: Mines on the board.
        flag_count: Flags currently placed.
        revealed_count: Safe cells revealed so far.
        elapsed_seconds: Whole seconds on the game clock.
        exploded_mine: Mine that ended a lost game, if any.
    """

    board: np.ndarray
    visibility: Tuple[Tuple[CellState, ...], ...]
    status: GameStatus
    mine_count: int
    flag_count: int
    revealed_count: int
    elapsed_seconds: int
    exploded_mine: Optional[Position] = None

    @property
    def rows(self) -> int:
        return len(self.visibility)

    @property
    def columns(self) -> int:
        return len(self.visibility[0]) if self.visibility else 0

    @property
    def mines_remaining(self) -> int:
        """Mine counter shown to the player (may go negative)."""
        return self.mine_count - self.flag_count

    def to_observation(self) -> np.ndarray:
        """
        Get the player's view of the board as a numpy array.

        Returns:
            2D int8 array; see ``cell.to_observation`` for the encoding.
        """
        obs = np.zeros((self.rows, self.columns), dtype=np.int8)
        for row, states in enumerate(self.visibility):
            for col, state in enumerate(states):
                obs[row, col] = to_observation(int(self.board[row, col]), state)
        return obs

    def render(self) -> str:
        """Render the player's view as text with row and column indices."""
        header = "   " + " ".join(str(col % 10) for col in range(self.columns))
        lines = [header]
        for row, states in enumerate(self.visibility):
            symbols = []
            for col, state in enumerate(states):
                if state != CellState.REVEALED:
                    symbols.append(_RENDER_SYMBOLS[state])
                elif (row, col) == self.exploded_mine:
                    symbols.append("#")
                elif self.board[row, col] == MINE:
                    symbols.append("*")
                elif self.board[row, col] == 0:
                    symbols.append(" ")
                else:
                    symbols.append(str(self.board[row, col]))
            lines.append(f"{row % 10:>2} " + " ".join(symbols))
        return "\n".join(lines)


# ============================================================================
# Game Engine
# ============================================================================

class GameEngine:
    """
    Minefield game state machine.

    Mines are placed on the first reveal, flag or hint so that the first
    clicked cell is never a mine. Collaborators (event sink, high-score
    store, clock) are injected; the engine knows nothing about rendering,
    storage formats or audio.
    """

    def __init__(
        self,
        rows: int = 8,
        columns: int = 8,
        mines: int = 10,
        *,
        events: Optional[EventSink] = None,
        high_scores: Optional[HighScoreStore] = None,
        clock: Optional[GameClock] = None,
        on_tick: Optional[Callable[[int], None]] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            rows: Number of rows (5-40).
            columns: Number of columns (5-40).
            mines: Number of mines (1 to a third of the cells).
            events: Receiver of game events.
            high_scores: Table consulted when a game is won.
            clock: Game clock; a threaded one-second clock by default.
            on_tick: Tick callback for the default clock.
            seed: Seed for mine placement and hint selection.

        Raises:
            InvalidConfiguration: If the settings are outside the bounds.
        """
        self.events = events or NullEventSink()
        self.high_scores = high_scores
        self.clock = clock or GameClock(on_tick=on_tick)
        self.rng = np.random.default_rng(seed)

        self._lock = threading.RLock()
        self.initialize(rows, columns, mines)

    # ========================================================================
    # Construction & Reset
    # ========================================================================

    def initialize(self, rows: int, columns: int, mines: int) -> None:
        """
        Start a fresh, unplaced board with the given settings.

        Raises:
            InvalidConfiguration: If the settings are outside the bounds.
        """
        config = BoardConfig(rows, columns, mines)
        with self._lock:
            self.clock.reset()
            self.config = config
            self._board = np.zeros((rows, columns), dtype=np.int8)
            self._visible = [
                [CellState.HIDDEN for _ in range(columns)]
                for _ in range(rows)
            ]
            self._mine_positions: FrozenSet[Position] = frozenset()
            self._mines_placed = False
            self._status = GameStatus.NEW
            self._flag_count = 0
            self._revealed_count = 0
            self._exploded_mine: Optional[Position] = None
        logger.debug("Initialized %dx%d board with %d mines", rows, columns, mines)

    def reset(self) -> None:
        """Start a new game with the current settings."""
        self.initialize(self.config.rows, self.config.columns, self.config.mines)

    def update_settings(self, rows: int, columns: int, mines: int) -> None:
        """
        Clamp new settings into range and start a new game with them.

        Args:
            rows: Requested number of rows.
            columns: Requested number of columns.
            mines: Requested number of mines.
        """
        width, height, valid_mines = validate_settings(columns, rows, mines)
        self.initialize(height, width, valid_mines)

    # ========================================================================
    # Mine Placement
    # ========================================================================

    def place_mines(self, exclude_row: int = -1, exclude_col: int = -1) -> None:
        """
        Place mines uniformly at random, keeping one cell mine-free.

        Args:
            exclude_row: Row of the cell to keep safe, or -1 for none.
            exclude_col: Column of the cell to keep safe, or -1 for none.

        Raises:
            RuntimeError: If mines have already been placed.
            InvalidConfiguration: If no free cell would remain.
        """
        with self._lock:
            if self._mines_placed:
                raise RuntimeError("Mines have already been placed")

            rows, columns = self.config.rows, self.config.columns
            excluded = is_valid_position(exclude_row, exclude_col, rows, columns)
            # One cell must stay safe whether or not it is pinned
            if self.config.mines > self.config.total_cells - 1:
                raise InvalidConfiguration(
                    f"{self.config.mines} mines leave no free cell on a "
                    f"{rows}x{columns} board"
                )

            mines = set()
            while len(mines) < self.config.mines:
                row = int(self.rng.integers(rows))
                col = int(self.rng.integers(columns))
                if excluded and (row, col) == (exclude_row, exclude_col):
                    continue
                mines.add((row, col))

            self._apply_layout(mines)
        logger.debug(
            "Placed %d mines excluding (%d, %d)",
            self.config.mines, exclude_row, exclude_col,
        )

    def arrange_mines(self, positions: Iterable[Position]) -> None:
        """
        Place mines at chosen positions before the game starts.

        Args:
            positions: Exactly ``mines`` distinct (row, col) coordinates.

        Raises:
            RuntimeError: If mines have already been placed.
            InvalidConfiguration: If the layout does not fit the board.
        """
        mines = {(int(row), int(col)) for row, col in positions}
        with self._lock:
            if self._mines_placed:
                raise RuntimeError("Mines have already been placed")
            if len(mines) != self.config.mines:
                raise InvalidConfiguration(
                    f"Layout has {len(mines)} mines, board needs {self.config.mines}"
                )
            for row, col in mines:
                if not self._is_valid_position(row, col):
                    raise InvalidConfiguration(f"Mine at ({row}, {col}) is off the board")
            self._apply_layout(mines)

    def _apply_layout(self, mines: Iterable[Position]) -> None:
        """Write a mine layout to the board and compute adjacent counts."""
        mine_mask = np.zeros((self.config.rows, self.config.columns), dtype=bool)
        for row, col in mines:
            mine_mask[row, col] = True
        self._board = np.where(mine_mask, MINE, count_adjacent_mines(mine_mask)).astype(np.int8)
        self._mine_positions = frozenset(mines)
        self._mines_placed = True

    # ========================================================================
    # Game Actions
    # ========================================================================

    def reveal(self, row: int, col: int) -> bool:
        """
        Reveal a cell.

        On the first action, places mines avoiding this cell. A cell with
        no adjacent mines reveals its neighbors. A mine loses the game.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            True if the board changed, False if the move was a no-op.
        """
        with self._lock:
            if not self._can_act(row, col):
                return False
            if self._visible[row][col] in (CellState.REVEALED, CellState.FLAGGED):
                return False

            if self._status == GameStatus.NEW:
                self._start_game(row, col)

            if self._board[row, col] == MINE:
                self._lose(row, col)
                return True

            self._visible[row][col] = CellState.REVEALED
            self._revealed_count += 1
            if self._board[row, col] == 0:
                self._flood_reveal(row, col)
            self._notify(GameEvent.CELL_REVEALED, (row, col))

            if self._revealed_count == self.config.safe_cells:
                self._win()
            return True

    def _flood_reveal(self, row: int, col: int) -> None:
        """Reveal the hidden region around an empty cell."""
        stack = [(row, col)]
        while stack:
            current_row, current_col = stack.pop()
            for neighbor_row, neighbor_col in self._neighbors(current_row, current_col):
                if self._visible[neighbor_row][neighbor_col] != CellState.HIDDEN:
                    continue
                self._visible[neighbor_row][neighbor_col] = CellState.REVEALED
                self._revealed_count += 1
                if self._board[neighbor_row, neighbor_col] == 0:
                    stack.append((neighbor_row, neighbor_col))

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Cycle a cell through flagged, questioned and hidden.

        Flagging counts as a first move: it places mines and starts the
        clock if the game has not begun.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if the cell changed, False if the move was a no-op.
        """
        with self._lock:
            if not self._can_act(row, col):
                return False
            state = self._visible[row][col]
            if state == CellState.REVEALED:
                return False

            if self._status == GameStatus.NEW:
                self._start_game(row, col)

            new_state = next_flag_state(state)
            if new_state == CellState.FLAGGED:
                self._flag_count += 1
            elif state == CellState.FLAGGED:
                self._flag_count -= 1
            self._visible[row][col] = new_state

            self._notify(GameEvent.FLAG_TOGGLED, (row, col))
            return True

    def provide_hint(self) -> Optional[Position]:
        """
        Pick a random hidden cell that is safe to reveal.

        Asking for a hint before any move starts the game with no cell
        excluded from mine placement. The hinted cell is not revealed.

        Returns:
            (row, col) of a safe hidden cell, or None if there is none or
            the game is over.
        """
        with self._lock:
            if not self._status.is_active:
                return None
            if self._status == GameStatus.NEW:
                self._start_game(*NO_EXCLUSION)

            candidates = [
                (row, col)
                for row in range(self.config.rows)
                for col in range(self.config.columns)
                if self._visible[row][col] == CellState.HIDDEN
                and self._board[row, col] != MINE
            ]
            if not candidates:
                return None

            hint = candidates[int(self.rng.integers(len(candidates)))]
            self._notify(GameEvent.HINT_GIVEN, hint)
            return hint

    # ========================================================================
    # Transitions
    # ========================================================================

    def _start_game(self, row: int, col: int) -> None:
        """Move from NEW to PLAYING: place mines and start the clock."""
        self._status = GameStatus.PLAYING
        if not self._mines_placed:
            self.place_mines(row, col)
        self.clock.start()
        logger.info(
            "Game started on %dx%d board with %d mines",
            self.config.rows, self.config.columns, self.config.mines,
        )

    def _lose(self, row: int, col: int) -> None:
        """Finish a lost game: show the mines and mark wrong flags."""
        self._status = GameStatus.LOST
        self.clock.stop()
        self._exploded_mine = (row, col)

        for mine_row, mine_col in self._mine_positions:
            if self._visible[mine_row][mine_col] != CellState.FLAGGED:
                self._visible[mine_row][mine_col] = CellState.REVEALED

        for check_row in range(self.config.rows):
            for check_col in range(self.config.columns):
                if (
                    self._visible[check_row][check_col] == CellState.FLAGGED
                    and self._board[check_row, check_col] != MINE
                ):
                    self._visible[check_row][check_col] = CellState.WRONG_FLAG

        logger.info("Game lost on mine at (%d, %d)", row, col)
        self._notify(GameEvent.MINE_EXPLODED, (row, col))

    def _win(self) -> None:
        """Finish a won game: flag every mine and record the time."""
        self._status = GameStatus.WON
        self.clock.stop()

        for mine_row, mine_col in self._mine_positions:
            if self._visible[mine_row][mine_col] != CellState.FLAGGED:
                self._visible[mine_row][mine_col] = CellState.FLAGGED
                self._flag_count += 1

        elapsed = self.clock.elapsed_seconds
        logger.info("Game won in %s", format_time(elapsed))
        self._notify(GameEvent.GAME_WON)
        self._record_high_score(elapsed)

    def _record_high_score(self, elapsed: int) -> None:
        if self.high_scores is None:
            return
        difficulty = self.difficulty
        if self.high_scores.is_high_score(difficulty, elapsed):
            self.high_scores.record_high_score(difficulty, elapsed)

    def _notify(self, event: GameEvent, position: Optional[Position] = None) -> None:
        """Deliver an event, never letting a sink failure reach the game."""
        try:
            self.events.notify(event, position)
        except Exception:
            logger.warning("Event sink failed on %s", event.value, exc_info=True)

    # ========================================================================
    # Helpers
    # ========================================================================

    def _is_valid_position(self, row: int, col: int) -> bool:
        return is_valid_position(row, col, self.config.rows, self.config.columns)

    def _can_act(self, row: int, col: int) -> bool:
        """Check if the game accepts a move on this cell."""
        return self._status.is_active and self._is_valid_position(row, col)

    def _neighbors(self, row: int, col: int) -> List[Position]:
        return get_neighbors(row, col, self.config.rows, self.config.columns)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def columns(self) -> int:
        return self.config.columns

    @property
    def mine_count(self) -> int:
        return self.config.mines

    @property
    def difficulty(self) -> Difficulty:
        """High-score category of the current settings."""
        return self.config.difficulty

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def flag_count(self) -> int:
        return self._flag_count

    @property
    def revealed_count(self) -> int:
        return self._revealed_count

    @property
    def exploded_mine(self) -> Optional[Position]:
        return self._exploded_mine

    @property
    def mine_positions(self) -> FrozenSet[Position]:
        """Mine coordinates; empty until mines are placed."""
        return self._mine_positions

    @property
    def mines_placed(self) -> bool:
        return self._mines_placed

    @property
    def elapsed_seconds(self) -> int:
        return self.clock.elapsed_seconds

    @property
    def is_over(self) -> bool:
        """Check if the game was won or lost."""
        return not self._status.is_active

    def cell_value(self, row: int, col: int) -> Optional[int]:
        """Board value at position, or None if invalid."""
        if not self._is_valid_position(row, col):
            return None
        return int(self._board[row, col])

    def cell_state(self, row: int, col: int) -> Optional[CellState]:
        """Visual state at position, or None if invalid."""
        if not self._is_valid_position(row, col):
            return None
        return self._visible[row][col]

    def get_valid_actions(self) -> List[Position]:
        """
        Get cells that can still be revealed.

        Returns:
            List of (row, col) positions that are hidden or questioned.
        """
        with self._lock:
            if not self._status.is_active:
                return []
            return [
                (row, col)
                for row in range(self.config.rows)
                for col in range(self.config.columns)
                if self._visible[row][col] in (CellState.HIDDEN, CellState.QUESTIONED)
            ]

    def get_state(self) -> GameSnapshot:
        """
        Take an immutable snapshot of the game.

        Returns:
            GameSnapshot with copies of the board and visibility grid.
        """
        with self._lock:
            board = self._board.copy()
            board.flags.writeable = False
            return GameSnapshot(
                board=board,
                visibility=tuple(tuple(states) for states in self._visible),
                status=self._status,
                mine_count=self.config.mines,
                flag_count=self._flag_count,
                revealed_count=self._revealed_count,
                elapsed_seconds=self.clock.elapsed_seconds,
                exploded_mine=self._exploded_mine,
            )
