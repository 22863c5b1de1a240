"""
Unit tests for board configuration and geometry.

Tests configuration validation, the preset table, difficulty matching and
neighbor counting.
"""
import pytest
import numpy as np
from minefield import (
    BoardConfig,
    Difficulty,
    EASY,
    HARD,
    InvalidConfiguration,
    MEDIUM,
    classify_difficulty,
)
from minefield.board import count_adjacent_mines, get_neighbors, max_mines_for


# ============================================================================
# Board Configuration Tests
# ============================================================================

class TestBoardConfig:
    """Test board configuration validation."""

    def test_valid_config_creation(self, valid_config: BoardConfig) -> None:
        """Valid configuration should be created successfully."""
        assert valid_config.rows == 8
        assert valid_config.columns == 8
        assert valid_config.mines == 10

    def test_derived_cell_counts(self, valid_config: BoardConfig) -> None:
        """Total and safe cell counts follow from the settings."""
        assert valid_config.total_cells == 64
        assert valid_config.safe_cells == 54

    @pytest.mark.parametrize("rows, columns", [(4, 8), (8, 4), (41, 8), (8, 41)])
    def test_dimensions_out_of_range_raise_error(
        self, rows: int, columns: int
    ) -> None:
        """Rows and columns outside 5-40 should be rejected."""
        with pytest.raises(InvalidConfiguration, match="must be between 5 and 40"):
            BoardConfig(rows, columns, 1)

    def test_zero_mines_raises_error(self) -> None:
        """A board needs at least one mine."""
        with pytest.raises(InvalidConfiguration, match="at least 1 mine"):
            BoardConfig(8, 8, 0)

    def test_too_many_mines_raises_error(self) -> None:
        """More than a third of the cells should be rejected."""
        with pytest.raises(InvalidConfiguration, match="Too many mines"):
            BoardConfig(5, 5, 24)  # Max is 8 (25 // 3)

    def test_max_mines_is_valid(self) -> None:
        """Maximum valid mines should be accepted."""
        config = BoardConfig(5, 5, 8)
        assert config.mines == 8

    def test_invalid_configuration_is_value_error(self) -> None:
        """Callers catching ValueError should see configuration errors."""
        with pytest.raises(ValueError):
            BoardConfig(3, 3, 1)

    def test_max_mines_for_is_a_third(self) -> None:
        """Mine limit is the cell count divided by three, rounded down."""
        assert max_mines_for(5, 5) == 8
        assert max_mines_for(40, 40) == 533


# ============================================================================
# Difficulty Preset Tests
# ============================================================================

class TestDifficulty:
    """Test the preset table and exact-match classification."""

    def test_preset_values(self) -> None:
        """Presets should match the published table."""
        assert (EASY.rows, EASY.columns, EASY.mines) == (8, 8, 10)
        assert (MEDIUM.rows, MEDIUM.columns, MEDIUM.mines) == (16, 16, 40)
        assert (HARD.rows, HARD.columns, HARD.mines) == (24, 24, 99)

    @pytest.mark.parametrize(
        "config, expected",
        [
            (BoardConfig(8, 8, 10), Difficulty.EASY),
            (BoardConfig(16, 16, 40), Difficulty.MEDIUM),
            (BoardConfig(24, 24, 99), Difficulty.HARD),
        ],
    )
    def test_presets_classify_by_name(
        self, config: BoardConfig, expected: Difficulty
    ) -> None:
        """Exact preset settings should map to their category."""
        assert classify_difficulty(config) == expected

    def test_unmatched_config_is_custom(self, custom_config: BoardConfig) -> None:
        """Anything off the table should fall back to custom."""
        assert classify_difficulty(custom_config) == Difficulty.CUSTOM

    def test_one_field_off_is_custom(self) -> None:
        """All three fields must match for a preset."""
        assert classify_difficulty(BoardConfig(8, 8, 11)) == Difficulty.CUSTOM
        assert classify_difficulty(BoardConfig(8, 9, 10)) == Difficulty.CUSTOM

    def test_difficulty_property(self, valid_config: BoardConfig) -> None:
        """Configuration exposes its own category."""
        assert valid_config.difficulty == Difficulty.EASY


# ============================================================================
# Neighbor Tests
# ============================================================================

class TestNeighbors:
    """Test neighbor enumeration at corners, edges and interior."""

    def test_corner_has_three_neighbors(self) -> None:
        """Corner cells touch three cells."""
        assert sorted(get_neighbors(0, 0, 5, 5)) == [(0, 1), (1, 0), (1, 1)]

    def test_edge_has_five_neighbors(self) -> None:
        """Edge cells touch five cells."""
        assert len(get_neighbors(0, 2, 5, 5)) == 5
        assert len(get_neighbors(2, 4, 5, 5)) == 5

    def test_interior_has_eight_neighbors(self) -> None:
        """Interior cells touch eight cells."""
        neighbors = get_neighbors(2, 2, 5, 5)
        assert len(neighbors) == 8
        assert (2, 2) not in neighbors


# ============================================================================
# Adjacent Count Tests
# ============================================================================

class TestAdjacentCounts:
    """Test adjacent mine counting."""

    def test_single_center_mine(self) -> None:
        """A lone mine adds one to each of its eight neighbors."""
        mask = np.zeros((5, 5), dtype=bool)
        mask[2, 2] = True
        counts = count_adjacent_mines(mask)

        assert counts[2, 2] == 0
        assert counts[1:4, 1:4].sum() == 8
        assert counts[0, 0] == 0

    def test_corner_edge_and_interior_counts(self) -> None:
        """Counts should match a brute-force neighbor scan everywhere."""
        mask = np.zeros((5, 6), dtype=bool)
        for row, col in [(0, 0), (0, 1), (1, 0), (4, 5), (2, 3), (3, 3)]:
            mask[row, col] = True
        counts = count_adjacent_mines(mask)

        for row in range(5):
            for col in range(6):
                expected = sum(
                    mask[r, c] for r, c in get_neighbors(row, col, 5, 6)
                )
                assert counts[row, col] == expected

        # Corner surrounded by mines on all three sides
        assert counts[0, 0] == 2
        # Edge cell next to the corner cluster
        assert counts[0, 2] == 1
        # Interior cell between the two middle mines
        assert counts[2, 2] == 2

    def test_counts_are_int8(self) -> None:
        """Counts should be stored compactly."""
        counts = count_adjacent_mines(np.zeros((5, 5), dtype=bool))
        assert counts.dtype == np.int8
