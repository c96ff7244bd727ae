"""Unit tests for XP multipliers (nutrio/gamification/multipliers.py)"""
import pytest

from nutrio.exceptions import InvalidAmountError, ValidationError
from nutrio.gamification.multipliers import (
    apply_multiplier,
    available_multipliers,
    get_streak_multiplier,
    resolve_multiplier,
)
from nutrio.models.progression import MultiplierKind, RewardContext


# ============================================================================
# Streak Multiplier Tests
# ============================================================================

@pytest.mark.parametrize("streak_days,expected", [
    (0, 1.0),
    (6, 1.0),
    (7, 1.1),
    (13, 1.1),
    (21, 1.3),
    (63, 1.9),
    (70, 2.0),
    (365, 2.0),
])
def test_streak_multiplier(streak_days, expected):
    """+0.1 per completed week, capped at 2.0"""
    assert get_streak_multiplier(streak_days) == expected


def test_streak_multiplier_rejects_negative():
    with pytest.raises(ValidationError):
        get_streak_multiplier(-1)


# ============================================================================
# Resolution Tests
# ============================================================================

def test_no_multiplier_by_default():
    context = RewardContext(is_premium=True, is_weekend=True, is_first_action_today=True)
    assert resolve_multiplier(context) == 1.0


def test_requested_multiplier_applies_when_condition_holds():
    context = RewardContext(is_premium=True, is_weekend=True, is_first_action_today=True, streak_days=14)
    assert resolve_multiplier(context, MultiplierKind.PREMIUM) == 1.5
    assert resolve_multiplier(context, MultiplierKind.WEEKEND) == 2.0
    assert resolve_multiplier(context, MultiplierKind.FIRST_ACTION) == 2.0
    assert resolve_multiplier(context, MultiplierKind.STREAK) == 1.2


def test_requested_multiplier_without_condition_is_neutral():
    """Asking for premium as a free user grants nothing extra"""
    context = RewardContext()
    assert resolve_multiplier(context, MultiplierKind.PREMIUM) == 1.0
    assert resolve_multiplier(context, MultiplierKind.WEEKEND) == 1.0
    assert resolve_multiplier(context, "first_action") == 1.0


def test_multipliers_do_not_stack():
    """Every eligible condition at once still yields a single factor"""
    context = RewardContext(is_premium=True, is_weekend=True, is_first_action_today=True, streak_days=70)
    for kind in MultiplierKind:
        assert resolve_multiplier(context, kind) <= 2.0


def test_unknown_multiplier_kind():
    with pytest.raises(ValidationError) as exc_info:
        resolve_multiplier(RewardContext(), "mega")
    assert exc_info.value.field == "multiplier"


def test_available_multipliers():
    context = RewardContext(is_premium=True, streak_days=3)
    assert available_multipliers(context) == {MultiplierKind.PREMIUM: 1.5}


# ============================================================================
# Application Tests
# ============================================================================

def test_apply_multiplier_floors():
    """15 * 1.5 = 22.5 -> 22"""
    assert apply_multiplier(15, 1.5) == 22


def test_apply_multiplier_avoids_float_error():
    """100 * 1.15 is 115 even though the float product is 114.999..."""
    assert apply_multiplier(100, 1.15) == 115
    assert apply_multiplier(15, 1.2) == 18
    assert apply_multiplier(10, 1.1) == 11


def test_apply_multiplier_identity_and_zero():
    assert apply_multiplier(37, 1.0) == 37
    assert apply_multiplier(0, 2.0) == 0


@pytest.mark.parametrize("factor", [0.5, float("nan"), float("inf")])
def test_apply_multiplier_rejects_bad_factor(factor):
    with pytest.raises(ValidationError):
        apply_multiplier(10, factor)


@pytest.mark.parametrize("base", [-1, 2.5, True])
def test_apply_multiplier_rejects_bad_base(base):
    with pytest.raises(InvalidAmountError):
        apply_multiplier(base, 1.5)
