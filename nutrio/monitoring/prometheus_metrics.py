"""Prometheus metrics definitions and helpers"""
import logging

from prometheus_client import Counter

from nutrio.config import ENABLE_PROMETHEUS
from nutrio.gamification.rewards import get_category
from nutrio.models.progression import RewardOutcome, UnlockOutcome

logger = logging.getLogger(__name__)


class PrometheusMetrics:
    """Container for all progression Prometheus metrics"""

    def __init__(self):
        if not ENABLE_PROMETHEUS:
            logger.info("Prometheus metrics disabled")
            self._enabled = False
            return

        # XP Metrics
        self.xp_granted_total = Counter(
            'nutrio_xp_granted_total',
            'Total XP granted after multipliers and caps',
            ['source']
        )

        self.xp_clamped_total = Counter(
            'nutrio_xp_clamped_total',
            'XP withheld by daily caps',
            ['bucket']
        )

        # Level Metrics
        self.level_ups_total = Counter(
            'nutrio_level_ups_total',
            'Total levels gained across all users'
        )

        # Achievement Metrics
        self.achievements_unlocked_total = Counter(
            'nutrio_achievements_unlocked_total',
            'Total first-time achievement unlocks',
            ['achievement_id']
        )

        # Concurrency Metrics
        self.stale_state_conflicts_total = Counter(
            'nutrio_stale_state_conflicts_total',
            'Lost compare-and-swaps on progression state'
        )

        self._enabled = True
        logger.info("Prometheus metrics initialized")

    @property
    def enabled(self) -> bool:
        """Check if metrics are enabled"""
        return self._enabled


# Global metrics instance
metrics = PrometheusMetrics()


def track_reward(outcome: RewardOutcome) -> None:
    """Record a committed reward grant"""
    if not metrics.enabled:
        return

    metrics.xp_granted_total.labels(source=outcome.source).inc(outcome.granted_amount)
    if outcome.was_capped:
        metrics.xp_clamped_total.labels(bucket=get_category(outcome.source).value).inc(
            outcome.multiplied_amount - outcome.granted_amount
        )
    if outcome.levels_gained:
        metrics.level_ups_total.inc(outcome.levels_gained)


def track_unlock(outcome: UnlockOutcome) -> None:
    """Record a committed achievement unlock"""
    if not metrics.enabled or not outcome.was_new_unlock:
        return

    metrics.achievements_unlocked_total.labels(achievement_id=outcome.achievement_id).inc()
    if outcome.levels_gained:
        metrics.level_ups_total.inc(outcome.levels_gained)


def track_stale_conflict(error: Exception) -> None:
    """Record a lost compare-and-swap"""
    if not metrics.enabled:
        return

    metrics.stale_state_conflicts_total.inc()
