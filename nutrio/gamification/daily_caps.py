"""
Daily XP Caps

Per-day ceilings on low-effort repeatable reward buckets (meal logging,
water logging). "Today" is always passed in by the caller.

Accrual is tracked in ProgressionState.daily_xp as
{date: {bucket: xp_granted}}. Entries for any other date than today are
inert: they are never read for today's decision and can be pruned.
"""

from datetime import date
from typing import Dict, Optional, Union
import logging

from nutrio.exceptions import InvalidAmountError
from nutrio.gamification.rewards import RewardCategory, RewardSource, get_category, get_daily_cap
from nutrio.models.progression import ProgressionState

logger = logging.getLogger(__name__)


def get_accrued_today(
    state: ProgressionState,
    source: Union[RewardSource, str],
    today: date
) -> int:
    """XP already granted today in the source's bucket"""
    bucket = get_category(source).value
    return state.daily_xp.get(today, {}).get(bucket, 0)


def clamp_for_cap(
    source: Union[RewardSource, str],
    proposed_amount: int,
    state: ProgressionState,
    today: date,
    caps: Optional[Dict[RewardCategory, int]] = None
) -> int:
    """
    Clamp a proposed grant to what is left of today's cap

    Uncapped sources get the full proposed amount back.
    """
    if isinstance(proposed_amount, bool) or not isinstance(proposed_amount, int) or proposed_amount < 0:
        raise InvalidAmountError(proposed_amount, field="proposed_amount")

    cap = get_daily_cap(source, caps)
    if cap is None:
        return proposed_amount

    already = get_accrued_today(state, source, today)
    if already + proposed_amount > cap:
        actual = max(0, cap - already)
        logger.info(
            f"Daily cap reached for {get_category(source).value} "
            f"(user {state.user_id}): {already}/{cap} XP, "
            f"clamped {proposed_amount} -> {actual}"
        )
        return actual

    return proposed_amount


def record_daily_xp(
    state: ProgressionState,
    source: Union[RewardSource, str],
    amount: int,
    today: date
) -> ProgressionState:
    """
    Add an actually-granted (post-clamp) amount to today's bucket

    Returns a new state; the input is left untouched.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmountError(amount)

    new_state = state.model_copy(deep=True)
    bucket = get_category(source).value
    day = new_state.daily_xp.setdefault(today, {})
    day[bucket] = day.get(bucket, 0) + amount
    return new_state


def prune_daily_xp(state: ProgressionState, today: date) -> ProgressionState:
    """Drop every daily entry except today's"""
    new_state = state.model_copy(deep=True)
    stale = [day for day in new_state.daily_xp if day != today]
    for day in stale:
        del new_state.daily_xp[day]

    if stale:
        logger.debug(f"Pruned {len(stale)} stale daily XP entries for user {state.user_id}")

    return new_state


def daily_xp_summary(state: ProgressionState, today: date) -> Dict[str, int]:
    """Today's accrual per bucket"""
    return dict(state.daily_xp.get(today, {}))
