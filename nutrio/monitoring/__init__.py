"""Monitoring infrastructure for nutrio"""
from nutrio.monitoring.prometheus_metrics import (
    metrics,
    track_reward,
    track_unlock,
    track_stale_conflict,
)

__all__ = [
    "metrics",
    "track_reward",
    "track_unlock",
    "track_stale_conflict",
]
