"""
ProgressionService - Per-User Serialized Progression Writes

Wraps the pure ProgressionEngine with the single-writer discipline:
- Every mutation for one user runs under that user's asyncio.Lock
- Each request is one transaction: load -> compute -> compare-and-swap save
- Nothing is saved if the computation raises
- A lost compare-and-swap re-runs the whole request against fresh state
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from typing import AsyncIterator, Dict, List, Optional, Union

from nutrio import config
from nutrio.gamification.achievement_system import (
    clear_recent_unlocks,
    get_achievement_progress,
    update_achievement_progress,
)
from nutrio.gamification.engine import ProgressionEngine
from nutrio.gamification.rewards import RewardSource
from nutrio.gamification.xp_system import snapshot
from nutrio.models.progression import (
    MultiplierKind,
    ProgressionSnapshot,
    ProgressionState,
    RewardContext,
    RewardEvent,
    RewardOutcome,
    UnlockOutcome,
    UnlockRecord,
)
from nutrio.monitoring.prometheus_metrics import track_reward, track_stale_conflict, track_unlock
from nutrio.resilience.retry import retry_with_backoff
from nutrio.services.state_store import ProgressionStore
from nutrio.utils.datetime_helpers import now_utc, today_in_timezone

logger = logging.getLogger(__name__)


@dataclass
class _Transaction:
    """Working copy of one user's state inside _transaction()"""
    loaded: ProgressionState
    state: ProgressionState


class ProgressionService:
    """
    Service for progression (XP, levels, achievements).

    Responsibilities:
    - Serializing writes per user
    - Loading and committing state through the store
    - Retrying lost compare-and-swaps from scratch
    - Recording metrics for committed changes
    """

    def __init__(
        self,
        store: ProgressionStore,
        engine: Optional[ProgressionEngine] = None,
        max_retries: Optional[int] = None,
        timezone: Optional[str] = None
    ):
        """
        Initialize ProgressionService.

        Args:
            store: Persistence boundary for progression documents
            engine: Pure engine (defaults to one with an empty achievement catalog)
            max_retries: Lost-CAS retries per request (defaults to STALE_STATE_MAX_RETRIES)
            timezone: Zone used to derive "today" (defaults to DEFAULT_TIMEZONE)
        """
        self.store = store
        self.engine = engine or ProgressionEngine()
        self.max_retries = config.STALE_STATE_MAX_RETRIES if max_retries is None else max_retries
        self.timezone = timezone
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        logger.debug("ProgressionService initialized")

    def _acquire_lock_ref(self, user_id: str) -> asyncio.Lock:
        if user_id not in self._locks:
            self._locks[user_id] = asyncio.Lock()
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        return self._locks[user_id]

    def _release_lock_ref(self, user_id: str) -> None:
        # Drop the lock once no request holds or waits on it
        self._lock_users[user_id] -= 1
        if not self._lock_users[user_id]:
            del self._lock_users[user_id]
            del self._locks[user_id]

    @asynccontextmanager
    async def _transaction(self, user_id: str) -> AsyncIterator[_Transaction]:
        """
        Exclusive, all-or-nothing access to one user's state

        The body replaces tx.state with the new state. On clean exit the new
        state is saved against the version that was loaded; if the body
        raises, nothing is written.
        """
        lock = self._acquire_lock_ref(user_id)
        try:
            async with lock:
                loaded = await self.store.load(user_id)
                if loaded is None:
                    loaded = ProgressionState(user_id=user_id)
                    logger.info(f"Created new progression state for user {user_id}")

                tx = _Transaction(loaded=loaded, state=loaded)
                yield tx

                if tx.state is not tx.loaded:
                    tx.state = await self.store.save(tx.state, expected_version=tx.loaded.version)
        finally:
            self._release_lock_ref(user_id)

    async def _run(self, func, *args):
        return await retry_with_backoff(
            func,
            *args,
            max_retries=self.max_retries,
            on_retry=track_stale_conflict,
        )

    def _today(self, today: Optional[date]) -> date:
        return today or today_in_timezone(self.timezone)

    # ------------------------------------------------------------------
    # Reward requests
    # ------------------------------------------------------------------

    async def grant_reward(
        self,
        user_id: str,
        source: Union[RewardSource, str],
        base_amount: Optional[int] = None,
        context: Optional[RewardContext] = None,
        multiplier: Union[MultiplierKind, str] = MultiplierKind.NONE,
        today: Optional[date] = None
    ) -> RewardOutcome:
        """
        Grant XP for a reward-worthy action.

        Args:
            user_id: User ID
            source: Reward source id
            base_amount: XP before multiplier (defaults to the catalog amount)
            context: Premium/streak/calendar context for the multiplier
            multiplier: The single multiplier kind to apply, if any
            today: Calendar date for daily caps (defaults to today in the service timezone)

        Returns:
            RewardOutcome with the new level fields and the granted amount
        """
        event = RewardEvent(
            source=source,
            base_amount=base_amount,
            context=context or RewardContext(),
        )
        outcome = await self._run(self._grant_once, user_id, event, multiplier, self._today(today))
        track_reward(outcome)
        return outcome

    async def _grant_once(
        self,
        user_id: str,
        event: RewardEvent,
        multiplier: Union[MultiplierKind, str],
        today: date
    ) -> RewardOutcome:
        async with self._transaction(user_id) as tx:
            tx.state, outcome = self.engine.grant_reward(
                tx.state, event, multiplier=multiplier, today=today, now=now_utc()
            )
        return outcome

    # ------------------------------------------------------------------
    # Achievement requests
    # ------------------------------------------------------------------

    async def unlock_achievement(self, user_id: str, achievement_id: str) -> UnlockOutcome:
        """
        Unlock an achievement (idempotent).

        Returns:
            UnlockOutcome; was_new_unlock is False on repeat calls
        """
        outcome = await self._run(self._unlock_once, user_id, achievement_id)
        track_unlock(outcome)
        return outcome

    async def _unlock_once(self, user_id: str, achievement_id: str) -> UnlockOutcome:
        async with self._transaction(user_id) as tx:
            tx.state, outcome = self.engine.unlock(tx.state, achievement_id, now=now_utc())
        return outcome

    async def update_achievement_progress(
        self,
        user_id: str,
        achievement_id: str,
        progress: int
    ) -> Dict[str, int]:
        """Record progress toward a locked achievement"""
        return await self._run(self._update_progress_once, user_id, achievement_id, progress)

    async def _update_progress_once(self, user_id: str, achievement_id: str, progress: int) -> Dict[str, int]:
        async with self._transaction(user_id) as tx:
            tx.state = update_achievement_progress(tx.state, achievement_id, progress, self.engine.catalog)
            result = get_achievement_progress(tx.state, achievement_id, self.engine.catalog)
        return result

    async def pop_recent_unlocks(self, user_id: str) -> List[UnlockRecord]:
        """Return and clear the pending unlock notifications"""
        return await self._run(self._pop_unlocks_once, user_id)

    async def _pop_unlocks_once(self, user_id: str) -> List[UnlockRecord]:
        async with self._transaction(user_id) as tx:
            pending = list(tx.state.recent_unlocks)
            if pending:
                tx.state = clear_recent_unlocks(tx.state)
        return pending

    # ------------------------------------------------------------------
    # Rehydration and reads
    # ------------------------------------------------------------------

    async def rehydrate(self, user_id: str, total_xp: int) -> ProgressionSnapshot:
        """
        Rebuild level fields from a lifetime XP total loaded elsewhere.

        Achievements and daily accrual already stored for the user are kept.
        """
        return await self._run(self._rehydrate_once, user_id, total_xp)

    async def _rehydrate_once(self, user_id: str, total_xp: int) -> ProgressionSnapshot:
        async with self._transaction(user_id) as tx:
            tx.state, result = self.engine.rehydrate(total_xp, tx.state)
        return result

    async def start_new_day(self, user_id: str, today: Optional[date] = None) -> ProgressionState:
        """Prune previous days' cap accrual"""
        return await self._run(self._start_new_day_once, user_id, self._today(today))

    async def _start_new_day_once(self, user_id: str, today: date) -> ProgressionState:
        async with self._transaction(user_id) as tx:
            if any(day != today for day in tx.state.daily_xp):
                tx.state = self.engine.start_new_day(tx.state, today)
        return tx.state

    async def get_state(self, user_id: str) -> ProgressionState:
        """Current stored state (a fresh level-1 state for unknown users)"""
        state = await self.store.load(user_id)
        return state if state is not None else ProgressionState(user_id=user_id)

    async def get_progress(self, user_id: str) -> ProgressionSnapshot:
        """Current display tuple"""
        return snapshot(await self.get_state(user_id))
