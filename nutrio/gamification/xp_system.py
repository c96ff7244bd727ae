"""
XP and Leveling System

Applies XP grants to a ProgressionState and resolves level-ups.

Rules:
- XP is added to both current_xp (progress in this level) and total_xp (lifetime)
- Level-ups are resolved in a loop, so one large grant can cross many levels
- Levels never go down
- The input state is never mutated; a new state is returned

XP Award Examples (see rewards.XP_REWARDS for the full table):
- Meal logging: 10 XP (capped at 200/day)
- Water glass: 5 XP (capped at 100/day)
- Hit all macros: 100 XP
- Streak milestones: 25-400 XP
- Achievement unlocks: 50-300 XP by difficulty
"""

from typing import Any, Optional, Tuple
from datetime import datetime
import logging
import math

from nutrio.exceptions import InvalidAmountError
from nutrio.gamification.level_curve import (
    level_from_total_xp,
    level_info_for,
    xp_required_for,
    xp_to_next_level,
)
from nutrio.models.progression import ProgressionSnapshot, ProgressionState
from nutrio.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)


def validate_xp_amount(amount: Any, field: str = "amount") -> int:
    """
    Return amount as an int, or raise InvalidAmountError

    Accepts non-negative ints and finite whole-number floats (15.0).
    Rejects negatives, NaN/inf, fractions, bools and non-numbers.
    """
    if isinstance(amount, bool):
        raise InvalidAmountError(amount, field=field)
    if isinstance(amount, int):
        if amount < 0:
            raise InvalidAmountError(amount, field=field)
        return amount
    if isinstance(amount, float):
        if not math.isfinite(amount) or amount < 0 or not amount.is_integer():
            raise InvalidAmountError(amount, field=field)
        return int(amount)
    raise InvalidAmountError(amount, field=field)


def _refresh_level_info(state: ProgressionState) -> None:
    info = level_info_for(state.level)
    state.level_title = info.title
    state.level_emoji = info.emoji
    state.level_tier = info.tier


def apply_xp(
    state: ProgressionState,
    amount: int,
    now: Optional[datetime] = None
) -> Tuple[ProgressionState, bool, int]:
    """
    Apply an XP grant and resolve level-ups

    Args:
        state: Current progression state (not modified)
        amount: XP to add (already multiplied and cap-clamped)
        now: Timestamp recorded as last_level_up_at (defaults to UTC now)

    Returns:
        (new_state, leveled_up, levels_gained)

    Example:
        Level 1 with 0 XP + 5000 XP -> level 10 with 500 XP, 9 levels gained
    """
    amount = validate_xp_amount(amount)

    new_state = state.model_copy(deep=True)
    old_level = new_state.level

    new_state.current_xp += amount
    new_state.total_xp += amount

    levels_gained = 0
    while new_state.current_xp >= xp_required_for(new_state.level):
        new_state.current_xp -= xp_required_for(new_state.level)
        new_state.level += 1
        levels_gained += 1

    leveled_up = levels_gained > 0
    if leveled_up:
        _refresh_level_info(new_state)
        new_state.last_level_up_at = now or now_utc()
        logger.info(
            f"User {state.user_id} leveled up from {old_level} to {new_state.level} "
            f"({new_state.level_emoji} {new_state.level_title})!"
        )

    if amount:
        logger.debug(
            f"Applied {amount} XP to user {state.user_id}. "
            f"Total: {new_state.total_xp} XP, Level: {new_state.level}, "
            f"Progress: {new_state.current_xp}/{xp_required_for(new_state.level)}"
        )

    return new_state, leveled_up, levels_gained


def rehydrate(total_xp: int, state: Optional[ProgressionState] = None) -> ProgressionState:
    """
    Rebuild level fields from a persisted lifetime total

    Everything else (achievements, daily accrual, version) is carried over
    from `state` when given. level and current_xp always come from the curve.
    """
    level, current_xp = level_from_total_xp(total_xp)

    base = state.model_copy(deep=True) if state is not None else ProgressionState()
    base.level = level
    base.current_xp = current_xp
    base.total_xp = total_xp
    _refresh_level_info(base)

    logger.debug(f"Rehydrated user {base.user_id}: {total_xp} XP -> level {level} (+{current_xp})")
    return base


def snapshot(state: ProgressionState) -> ProgressionSnapshot:
    """Display tuple for a state"""
    return ProgressionSnapshot(
        user_id=state.user_id,
        level=state.level,
        current_xp=state.current_xp,
        total_xp=state.total_xp,
        xp_to_next_level=xp_to_next_level(state.level, state.current_xp),
        level_title=state.level_title,
        level_emoji=state.level_emoji,
        level_tier=state.level_tier,
    )
