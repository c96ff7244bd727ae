"""
Progression Engine

The three entry points collaborators use:
- grant_reward: reward request (multiplier -> daily cap -> ledger)
- unlock: achievement unlock request (uniqueness -> ledger)
- rehydrate: rebuild a state from a persisted lifetime XP total

Everything here is synchronous and side-effect free: each call takes a
state snapshot and returns a new one plus an outcome. A call either
returns a fully applied state or raises before touching anything.
"""

from datetime import date, datetime
from typing import Dict, Optional, Tuple, Union
import logging

from nutrio.gamification.achievement_system import AchievementCatalog, unlock_achievement
from nutrio.gamification.daily_caps import clamp_for_cap, prune_daily_xp, record_daily_xp
from nutrio.gamification.multipliers import apply_multiplier, resolve_multiplier
from nutrio.gamification.rewards import RewardCategory, get_base_xp, to_reward_source
from nutrio.gamification.xp_system import apply_xp, rehydrate, snapshot, validate_xp_amount
from nutrio.models.progression import (
    MultiplierKind,
    ProgressionSnapshot,
    ProgressionState,
    RewardEvent,
    RewardOutcome,
    UnlockOutcome,
)
from nutrio.utils.datetime_helpers import now_utc, today_in_timezone

logger = logging.getLogger(__name__)


class ProgressionEngine:
    """
    Pure progression engine over explicit ProgressionState values

    Args:
        catalog: Achievement catalog used by unlock()
        caps: Optional per-bucket daily cap override (defaults to rewards.DAILY_XP_CAPS)
    """

    def __init__(
        self,
        catalog: Optional[AchievementCatalog] = None,
        caps: Optional[Dict[RewardCategory, int]] = None
    ):
        self.catalog = catalog if catalog is not None else AchievementCatalog()
        self.caps = caps

    def grant_reward(
        self,
        state: ProgressionState,
        event: RewardEvent,
        multiplier: Union[MultiplierKind, str] = MultiplierKind.NONE,
        today: Optional[date] = None,
        now: Optional[datetime] = None
    ) -> Tuple[ProgressionState, RewardOutcome]:
        """
        Apply one reward request

        Steps:
        1. Resolve base amount (event.base_amount or the catalog default)
        2. Apply the single caller-selected multiplier, floor-truncated
        3. Clamp against today's cap for the source's bucket
        4. Apply to the ledger and record today's accrual (post-clamp)
        5. Drop accrual recorded for any other day

        Raises:
            UnknownSourceError: source not in the reward catalog
            InvalidAmountError: negative / non-finite base amount
        """
        source = to_reward_source(event.source)
        if event.base_amount is None:
            base_amount = get_base_xp(source)
        else:
            base_amount = validate_xp_amount(event.base_amount, field="base_amount")

        now = now or now_utc()
        today = today or today_in_timezone(now=now)

        factor = resolve_multiplier(event.context, multiplier)
        multiplied = apply_multiplier(base_amount, factor)
        granted = clamp_for_cap(source, multiplied, state, today, self.caps)

        old_level = state.level
        new_state, leveled_up, levels_gained = apply_xp(state, granted, now=now)
        new_state = record_daily_xp(new_state, source, granted, today)
        if len(new_state.daily_xp) > 1:
            new_state = prune_daily_xp(new_state, today)

        logger.info(
            f"Granted {granted} XP to user {state.user_id} for {source.value} "
            f"(base {base_amount}, x{factor}, capped={granted < multiplied}). "
            f"Total: {new_state.total_xp} XP, Level: {new_state.level}"
        )

        return new_state, RewardOutcome(
            **snapshot(new_state).model_dump(),
            source=source.value,
            base_amount=base_amount,
            multiplier=factor,
            multiplied_amount=multiplied,
            granted_amount=granted,
            was_capped=granted < multiplied,
            old_level=old_level,
            leveled_up=leveled_up,
            levels_gained=levels_gained,
        )

    def unlock(
        self,
        state: ProgressionState,
        achievement_id: str,
        now: Optional[datetime] = None
    ) -> Tuple[ProgressionState, UnlockOutcome]:
        """
        Unlock an achievement (idempotent)

        Raises:
            UnknownAchievementError: id not in the catalog (and not already unlocked)
        """
        return unlock_achievement(state, achievement_id, self.catalog, now=now)

    def rehydrate(
        self,
        total_xp: int,
        state: Optional[ProgressionState] = None
    ) -> Tuple[ProgressionState, ProgressionSnapshot]:
        """Recompute (level, current_xp) from a persisted total"""
        new_state = rehydrate(total_xp, state)
        return new_state, snapshot(new_state)

    def start_new_day(self, state: ProgressionState, today: date) -> ProgressionState:
        """Drop previous days' cap accrual"""
        return prune_daily_xp(state, today)
