"""Unit tests for the level curve (nutrio/gamification/level_curve.py)"""
import pytest

from nutrio.exceptions import ValidationError
from nutrio.gamification.level_curve import (
    LEVEL_TITLES,
    MAX_DISPLAY_LEVEL,
    cumulative_xp_for,
    is_level_milestone,
    level_from_total_xp,
    level_info_for,
    tier_for_level,
    xp_required_for,
    xp_to_next_level,
)
from nutrio.models.progression import LevelTier


# ============================================================================
# Curve Tests
# ============================================================================

def test_xp_required_is_linear():
    """Leaving level N costs N * 100 XP"""
    assert xp_required_for(1) == 100
    assert xp_required_for(2) == 200
    assert xp_required_for(10) == 1000
    assert xp_required_for(150) == 15000


def test_xp_required_strictly_increasing():
    """Every level costs more than the one before"""
    for level in range(1, 200):
        assert xp_required_for(level + 1) > xp_required_for(level)


def test_cumulative_xp_matches_sum_of_requirements():
    """cumulative_xp_for(N) is the sum of the requirements below N"""
    running = 0
    for level in range(1, 120):
        assert cumulative_xp_for(level) == running
        running += xp_required_for(level)


def test_cumulative_xp_known_values():
    assert cumulative_xp_for(1) == 0
    assert cumulative_xp_for(2) == 100
    assert cumulative_xp_for(3) == 300
    assert cumulative_xp_for(10) == 4500


@pytest.mark.parametrize("bad_level", [0, -1, 1.5, True, "3"])
def test_invalid_level_rejected(bad_level):
    """Levels must be integers >= 1"""
    with pytest.raises(ValidationError):
        xp_required_for(bad_level)
    with pytest.raises(ValidationError):
        cumulative_xp_for(bad_level)


# ============================================================================
# Rehydration Tests
# ============================================================================

def test_level_from_total_xp_zero():
    assert level_from_total_xp(0) == (1, 0)


def test_level_from_total_xp_boundaries():
    """Exact thresholds land at the start of the new level"""
    assert level_from_total_xp(99) == (1, 99)
    assert level_from_total_xp(100) == (2, 0)
    assert level_from_total_xp(299) == (2, 199)
    assert level_from_total_xp(300) == (3, 0)


def test_level_from_total_xp_multi_level():
    """5000 XP is level 10 with 500 XP toward level 11"""
    assert level_from_total_xp(5000) == (10, 500)


def test_level_from_total_xp_consistent_with_cumulative():
    """Rehydration and the cumulative curve agree at every level start"""
    for level in range(1, 150):
        total = cumulative_xp_for(level)
        assert level_from_total_xp(total) == (level, 0)
        assert level_from_total_xp(total + xp_required_for(level) - 1) == (
            level, xp_required_for(level) - 1
        )


def test_level_from_total_xp_keeps_invariant():
    """current_xp is always below the requirement of the resolved level"""
    for total in range(0, 20000, 37):
        level, current = level_from_total_xp(total)
        assert 0 <= current < xp_required_for(level)
        assert cumulative_xp_for(level) + current == total


@pytest.mark.parametrize("bad_total", [-1, 10.0, None, False])
def test_level_from_total_xp_rejects_bad_totals(bad_total):
    with pytest.raises(ValidationError):
        level_from_total_xp(bad_total)


def test_xp_to_next_level():
    assert xp_to_next_level(1, 0) == 100
    assert xp_to_next_level(10, 500) == 500


# ============================================================================
# Title Table Tests
# ============================================================================

def test_title_table_has_100_entries():
    assert len(LEVEL_TITLES) == MAX_DISPLAY_LEVEL == 100
    assert sorted(LEVEL_TITLES) == list(range(1, 101))


def test_title_table_entries_complete():
    """Every entry has a title and emoji and knows its own level"""
    for level, info in LEVEL_TITLES.items():
        assert info.level == level
        assert info.title
        assert info.emoji


def test_first_and_last_titles():
    assert level_info_for(1).title == "Nutrition Newbie"
    assert level_info_for(1).emoji == "🌱"
    assert level_info_for(100).title == "NUTRIO GOD"


def test_display_saturates_above_100():
    """Levels past the table show the level-100 entry"""
    assert level_info_for(101) == level_info_for(100)
    assert level_info_for(500).title == "NUTRIO GOD"


@pytest.mark.parametrize("level,tier", [
    (1, LevelTier.BEGINNER),
    (10, LevelTier.BEGINNER),
    (11, LevelTier.INTERMEDIATE),
    (25, LevelTier.INTERMEDIATE),
    (26, LevelTier.ADVANCED),
    (40, LevelTier.ADVANCED),
    (41, LevelTier.ELITE),
    (50, LevelTier.ELITE),
    (51, LevelTier.COSMIC),
    (70, LevelTier.COSMIC),
    (71, LevelTier.GOD),
    (100, LevelTier.GOD),
    (250, LevelTier.GOD),
])
def test_tier_breakpoints(level, tier):
    assert tier_for_level(level) == tier
    assert level_info_for(level).tier == tier


def test_level_milestones():
    assert is_level_milestone(10)
    assert is_level_milestone(100)
    assert not is_level_milestone(1)
    assert not is_level_milestone(15)
