"""
Progression engine for Nutrio

This package turns user actions into XP and levels:
- Level curve and the 100-level title table
- Reward catalog and daily caps (anti-farming)
- Caller-selected XP multipliers
- XP ledger with multi-level resolution
- One-time achievement unlocks
"""

from nutrio.gamification.level_curve import (
    xp_required_for,
    cumulative_xp_for,
    level_from_total_xp,
    level_info_for,
)
from nutrio.gamification.multipliers import resolve_multiplier, apply_multiplier
from nutrio.gamification.daily_caps import clamp_for_cap, record_daily_xp, prune_daily_xp
from nutrio.gamification.xp_system import apply_xp, rehydrate, snapshot
from nutrio.gamification.achievement_system import AchievementCatalog, unlock_achievement
from nutrio.gamification.rewards import RewardSource, RewardCategory
from nutrio.gamification.engine import ProgressionEngine

__all__ = [
    "xp_required_for",
    "cumulative_xp_for",
    "level_from_total_xp",
    "level_info_for",
    "resolve_multiplier",
    "apply_multiplier",
    "clamp_for_cap",
    "record_daily_xp",
    "prune_daily_xp",
    "apply_xp",
    "rehydrate",
    "snapshot",
    "AchievementCatalog",
    "unlock_achievement",
    "RewardSource",
    "RewardCategory",
    "ProgressionEngine",
]
