"""Level table and level computation."""

import pytest

from sizemissions.missions.leveling import (
    LEVEL_THRESHOLDS,
    MAX_LEVEL,
    compute_level,
    level_for,
    progress_to_next_level,
)


class TestLevelFor:
    def test_zero_xp_is_level_1(self):
        assert level_for(0) == 1

    def test_negative_xp_is_level_1(self):
        assert level_for(-50) == 1

    @pytest.mark.parametrize(
        ("xp", "level"),
        [(149, 1), (150, 2), (399, 2), (400, 3), (800, 4), (1400, 5), (2200, 6), (3200, 7), (4400, 8), (5800, 9)],
    )
    def test_boundaries(self, xp, level):
        assert level_for(xp) == level

    def test_max_level_at_7400(self):
        assert level_for(7400) == 10
        assert level_for(1_000_000) == MAX_LEVEL == 10

    def test_monotonic(self):
        levels = [level_for(xp) for xp in range(0, 9000, 7)]
        assert levels == sorted(levels)

    def test_thresholds_strictly_increasing(self):
        floors = [t["xp"] for t in LEVEL_THRESHOLDS]
        assert floors == sorted(set(floors))
        assert floors[0] == 0


class TestProgressToNextLevel:
    def test_start_of_level(self):
        assert progress_to_next_level(0) == 0.0
        assert progress_to_next_level(150) == 0.0

    def test_midway(self):
        # Level 2 spans 150..400
        assert progress_to_next_level(275) == pytest.approx(0.5)

    def test_max_level_is_full(self):
        assert progress_to_next_level(7400) == 1.0
        assert progress_to_next_level(99_999) == 1.0

    def test_negative_xp_clamped(self):
        assert progress_to_next_level(-10) == 0.0


class TestComputeLevel:
    def test_level_1(self):
        info = compute_level(50)
        assert info["level"] == 1
        assert info["title"] == "Tape Rookie"
        assert info["current_floor"] == 0
        assert info["next_level_xp"] == 150
        assert info["xp_into_level"] == 50
        assert info["xp_for_level"] == 150

    def test_level_2_boundary(self):
        info = compute_level(150)
        assert info["level"] == 2
        assert info["xp_into_level"] == 0
        assert info["xp_for_level"] == 250

    def test_max_level_has_no_next(self):
        info = compute_level(8000)
        assert info["level"] == 10
        assert info["title"] == "Size Legend"
        assert info["next_level_xp"] is None
        assert info["progress_to_next"] == 1.0
