"""Unit tests for daily XP caps (nutrio/gamification/daily_caps.py)"""
import pytest
from datetime import date, timedelta

from nutrio.exceptions import InvalidAmountError, UnknownSourceError
from nutrio.gamification.daily_caps import (
    clamp_for_cap,
    daily_xp_summary,
    get_accrued_today,
    prune_daily_xp,
    record_daily_xp,
)
from nutrio.gamification.rewards import (
    DAILY_XP_CAPS,
    RewardCategory,
    RewardSource,
    get_category,
    get_daily_cap,
)


# ============================================================================
# Catalog Tests
# ============================================================================

def test_default_caps():
    assert DAILY_XP_CAPS[RewardCategory.MEAL_LOGGING] == 200
    assert DAILY_XP_CAPS[RewardCategory.WATER_LOGGING] == 100


def test_meal_logging_variants_share_one_bucket():
    for source in ("meal_log", "meal_log_with_photo", "meal_log_barcode", "add_notes"):
        assert get_category(source) == RewardCategory.MEAL_LOGGING
        assert get_daily_cap(source) == 200


def test_goal_sources_are_uncapped():
    assert get_daily_cap(RewardSource.HIT_ALL_MACROS) is None
    assert get_daily_cap(RewardSource.SEVEN_DAY_STREAK) is None


def test_unknown_source_has_no_cap_lookup():
    with pytest.raises(UnknownSourceError):
        get_daily_cap("not_a_source")


# ============================================================================
# Clamp Tests
# ============================================================================

def test_clamp_under_cap_passes_through(fresh_state, today):
    assert clamp_for_cap(RewardSource.MEAL_LOG, 10, fresh_state, today) == 10


def test_clamp_to_remaining_then_zero(fresh_state, today):
    """150 already granted + 100 proposed -> 50, and 0 after that"""
    state = record_daily_xp(fresh_state, RewardSource.MEAL_LOG, 150, today)

    granted = clamp_for_cap(RewardSource.MEAL_LOG, 100, state, today)
    assert granted == 50

    state = record_daily_xp(state, RewardSource.MEAL_LOG, granted, today)
    assert get_accrued_today(state, RewardSource.MEAL_LOG, today) == 200
    assert clamp_for_cap(RewardSource.MEAL_LOG, 100, state, today) == 0


def test_clamp_exactly_reaching_cap(fresh_state, today):
    state = record_daily_xp(fresh_state, RewardSource.LOG_WATER_GLASS, 95, today)
    assert clamp_for_cap(RewardSource.LOG_WATER_GLASS, 5, state, today) == 5
    assert clamp_for_cap(RewardSource.LOG_WATER_GLASS, 6, state, today) == 5


def test_buckets_are_independent(fresh_state, today):
    state = record_daily_xp(fresh_state, RewardSource.MEAL_LOG, 200, today)
    assert clamp_for_cap(RewardSource.LOG_WATER_GLASS, 5, state, today) == 5


def test_uncapped_source_ignores_accrual(fresh_state, today):
    """Goal rewards are never clamped, however much was earned"""
    state = record_daily_xp(fresh_state, RewardSource.HIT_ALL_MACROS, 10000, today)
    assert clamp_for_cap(RewardSource.HIT_ALL_MACROS, 100, state, today) == 100


def test_new_day_resets_cap(fresh_state, today):
    state = record_daily_xp(fresh_state, RewardSource.MEAL_LOG, 200, today)
    tomorrow = today + timedelta(days=1)

    assert clamp_for_cap(RewardSource.MEAL_LOG, 10, state, today) == 0
    assert clamp_for_cap(RewardSource.MEAL_LOG, 10, state, tomorrow) == 10


def test_custom_caps_override(fresh_state, today):
    caps = {RewardCategory.MEAL_LOGGING: 20}
    state = record_daily_xp(fresh_state, RewardSource.MEAL_LOG, 15, today)
    assert clamp_for_cap(RewardSource.MEAL_LOG, 10, state, today, caps) == 5
    # Water is uncapped under this override
    assert clamp_for_cap(RewardSource.LOG_WATER_GLASS, 500, state, today, caps) == 500


@pytest.mark.parametrize("amount", [-5, 1.5, True])
def test_clamp_rejects_bad_amount(fresh_state, today, amount):
    with pytest.raises(InvalidAmountError):
        clamp_for_cap(RewardSource.MEAL_LOG, amount, fresh_state, today)


# ============================================================================
# Accrual Bookkeeping Tests
# ============================================================================

def test_record_does_not_mutate_input(fresh_state, today):
    new_state = record_daily_xp(fresh_state, RewardSource.MEAL_LOG, 10, today)
    assert fresh_state.daily_xp == {}
    assert new_state.daily_xp == {today: {"meal_logging": 10}}


def test_prune_keeps_only_today(fresh_state, today):
    yesterday = today - timedelta(days=1)
    state = record_daily_xp(fresh_state, RewardSource.MEAL_LOG, 40, yesterday)
    state = record_daily_xp(state, RewardSource.MEAL_LOG, 10, today)
    state = record_daily_xp(state, RewardSource.LOG_WATER_GLASS, 5, date(2023, 12, 31))

    pruned = prune_daily_xp(state, today)

    assert list(pruned.daily_xp) == [today]
    assert daily_xp_summary(pruned, today) == {"meal_logging": 10}
    assert len(state.daily_xp) == 3


def test_summary_for_empty_day(fresh_state, today):
    assert daily_xp_summary(fresh_state, today) == {}
