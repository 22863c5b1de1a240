"""
Unit tests for high-score storage.

Tests qualification, ordering, capping and the JSON file store.
"""
import json
from datetime import datetime

import pytest
from minefield import Difficulty, InMemoryHighScoreStore, JsonHighScoreStore
from minefield.scores import MAX_HIGH_SCORES, HighScoreEntry, format_time


# ============================================================================
# Formatting Tests
# ============================================================================

class TestFormatTime:
    """Test MM:SS formatting."""

    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "00:00"), (9, "00:09"), (65, "01:05"), (600, "10:00")],
    )
    def test_format_time(self, seconds: int, expected: str) -> None:
        """Times render as zero-padded minutes and seconds."""
        assert format_time(seconds) == expected

    def test_entry_carries_formatted_time_and_date(self) -> None:
        """Entries remember when and how fast."""
        entry = HighScoreEntry.create(75, datetime(2024, 1, 2, 3, 4, 5))
        assert entry.time == 75
        assert entry.formatted == "01:15"
        assert entry.date.startswith("2024-01-02")


# ============================================================================
# Store Behavior Tests
# ============================================================================

class TestHighScoreStore:
    """Test qualification and ordering on the in-memory store."""

    def test_empty_table_accepts_any_time(
        self, score_store: InMemoryHighScoreStore
    ) -> None:
        """Any time qualifies while the table has room."""
        assert score_store.is_high_score(Difficulty.EASY, 9999) is True

    def test_scores_sorted_ascending(self, score_store: InMemoryHighScoreStore) -> None:
        """Lowest time comes first."""
        for seconds in (30, 10, 20):
            score_store.record_high_score(Difficulty.MEDIUM, seconds)

        times = [entry.time for entry in score_store.get_high_scores(Difficulty.MEDIUM)]
        assert times == [10, 20, 30]

    def test_table_capped_at_ten(self, score_store: InMemoryHighScoreStore) -> None:
        """Only the ten best times are kept."""
        for seconds in range(15, 0, -1):
            score_store.record_high_score(Difficulty.HARD, seconds)

        times = [entry.time for entry in score_store.get_high_scores(Difficulty.HARD)]
        assert len(times) == MAX_HIGH_SCORES
        assert times == list(range(1, 11))

    def test_full_table_qualification(self, score_store: InMemoryHighScoreStore) -> None:
        """A full table only accepts times that beat its slowest entry."""
        for seconds in range(1, 11):
            score_store.record_high_score(Difficulty.EASY, seconds)

        assert score_store.is_high_score(Difficulty.EASY, 9) is True
        assert score_store.is_high_score(Difficulty.EASY, 10) is False
        assert score_store.is_high_score(Difficulty.EASY, 11) is False

    def test_record_reports_whether_time_made_table(
        self, score_store: InMemoryHighScoreStore
    ) -> None:
        """Recording a too-slow time returns False."""
        for seconds in range(1, 11):
            score_store.record_high_score(Difficulty.EASY, seconds)

        assert score_store.record_high_score(Difficulty.EASY, 50) is False
        assert score_store.record_high_score(Difficulty.EASY, 5) is True

    def test_categories_are_separate(self, score_store: InMemoryHighScoreStore) -> None:
        """Scores stay in their own difficulty."""
        score_store.record_high_score(Difficulty.CUSTOM, 12)
        assert score_store.get_high_scores(Difficulty.EASY) == []
        assert len(score_store.get_high_scores(Difficulty.CUSTOM)) == 1

    def test_string_keys_accepted(self, score_store: InMemoryHighScoreStore) -> None:
        """Plain difficulty names work as keys."""
        score_store.record_high_score("easy", 7)
        assert score_store.get_high_scores(Difficulty.EASY)[0].time == 7

    def test_unknown_difficulty_raises(
        self, score_store: InMemoryHighScoreStore
    ) -> None:
        """Keys outside the preset set are rejected."""
        with pytest.raises(ValueError, match="Unknown difficulty"):
            score_store.is_high_score("insane", 1)

    def test_clear_high_scores(self, score_store: InMemoryHighScoreStore) -> None:
        """Clearing empties every category."""
        score_store.record_high_score(Difficulty.EASY, 1)
        score_store.record_high_score(Difficulty.CUSTOM, 2)
        score_store.clear_high_scores()

        for difficulty in Difficulty:
            assert score_store.get_high_scores(difficulty) == []


# ============================================================================
# JSON Store Tests
# ============================================================================

class TestJsonHighScoreStore:
    """Test the file-backed store."""

    def test_scores_persist_across_instances(self, tmp_path) -> None:
        """A new store on the same file sees earlier scores."""
        path = tmp_path / "scores" / "high_scores.json"
        JsonHighScoreStore(path).record_high_score(Difficulty.EASY, 33)

        entries = JsonHighScoreStore(path).get_high_scores(Difficulty.EASY)
        assert [entry.time for entry in entries] == [33]
        assert entries[0].formatted == "00:33"

    def test_file_layout(self, tmp_path) -> None:
        """The file maps every difficulty name to a list."""
        path = tmp_path / "high_scores.json"
        JsonHighScoreStore(path).record_high_score(Difficulty.HARD, 120)

        data = json.loads(path.read_text())
        assert set(data) == {"easy", "medium", "hard", "custom"}
        assert data["hard"][0]["time"] == 120
        assert data["hard"][0]["formatted"] == "02:00"

    def test_missing_file_reads_empty(self, tmp_path) -> None:
        """No file means no scores."""
        store = JsonHighScoreStore(tmp_path / "absent.json")
        assert store.get_high_scores(Difficulty.EASY) == []
        assert store.is_high_score(Difficulty.EASY, 1) is True

    def test_corrupt_file_reads_empty(self, tmp_path, caplog) -> None:
        """Garbage on disk is logged and treated as an empty table."""
        path = tmp_path / "high_scores.json"
        path.write_text("{not json")

        assert JsonHighScoreStore(path).get_high_scores(Difficulty.EASY) == []
        assert "Could not read high scores" in caplog.text

    def test_write_failure_returns_false(self, tmp_path, caplog) -> None:
        """An unwritable location is logged, not raised."""
        store = JsonHighScoreStore(tmp_path)  # a directory, not a file
        assert store.record_high_score(Difficulty.EASY, 5) is False
        assert "Could not write high scores" in caplog.text
