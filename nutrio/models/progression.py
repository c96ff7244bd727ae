"""Progression (XP, levels, rewards) Pydantic models"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LevelTier(str, Enum):
    """Display tiers of the 100-level title table"""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ELITE = "elite"
    COSMIC = "cosmic"
    GOD = "god"


class LevelInfo(BaseModel):
    """Static title/emoji/tier for one level"""
    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, le=100)
    title: str
    emoji: str
    tier: LevelTier


class MultiplierKind(str, Enum):
    """Which single multiplier a caller requests for a grant"""
    NONE = "none"
    PREMIUM = "premium"
    WEEKEND = "weekend"
    FIRST_ACTION = "first_action"
    STREAK = "streak"


class RewardContext(BaseModel):
    """Context the multiplier resolver reads"""
    is_premium: bool = False
    streak_days: int = Field(default=0, ge=0)
    is_weekend: bool = False
    is_first_action_today: bool = False


class RewardEvent(BaseModel):
    """A reward-worthy action reported by a collaborator (not persisted)"""
    source: str
    # Checked by the engine with validate_xp_amount, not coerced here
    base_amount: Optional[Any] = None  # None = catalog default for the source
    context: RewardContext = Field(default_factory=RewardContext)


class UnlockRecord(BaseModel):
    """An achievement unlock waiting to be shown to the user"""
    achievement_id: str
    name: Optional[str] = None
    bonus_xp: int = 0
    unlocked_at: datetime


class ProgressionState(BaseModel):
    """
    Per-user progression aggregate

    current_xp is XP toward the next level and is always below
    xp_required_for(level). level_title/level_emoji/level_tier are derived
    from level and refreshed on validation and on every level change.
    """
    user_id: Optional[str] = None
    level: int = Field(default=1, ge=1)
    current_xp: int = Field(default=0, ge=0)
    total_xp: int = Field(default=0, ge=0)
    level_title: str = "Nutrition Newbie"
    level_emoji: str = "🌱"
    level_tier: LevelTier = LevelTier.BEGINNER
    unlocked_achievement_ids: Set[str] = Field(default_factory=set)
    recent_unlocks: List[UnlockRecord] = Field(default_factory=list)
    achievement_progress: Dict[str, int] = Field(default_factory=dict)
    daily_xp: Dict[date, Dict[str, int]] = Field(default_factory=dict)
    last_level_up_at: Optional[datetime] = None
    version: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_level_fields(self) -> "ProgressionState":
        # Import here to avoid circular dependencies
        from nutrio.gamification.level_curve import level_info_for, xp_required_for

        required = xp_required_for(self.level)
        if self.current_xp >= required:
            raise ValueError(
                f"current_xp ({self.current_xp}) must be below the {required} XP "
                f"required to leave level {self.level}"
            )
        info = level_info_for(self.level)
        self.level_title = info.title
        self.level_emoji = info.emoji
        self.level_tier = info.tier
        return self


class ProgressionSnapshot(BaseModel):
    """Display tuple returned to collaborators"""
    user_id: Optional[str] = None
    level: int
    current_xp: int
    total_xp: int
    xp_to_next_level: int
    level_title: str
    level_emoji: str
    level_tier: LevelTier


class RewardOutcome(ProgressionSnapshot):
    """Result of a reward request"""
    source: str
    base_amount: int
    multiplier: float = 1.0
    multiplied_amount: int
    granted_amount: int
    was_capped: bool = False
    old_level: int
    leveled_up: bool = False
    levels_gained: int = 0


class UnlockOutcome(ProgressionSnapshot):
    """Result of an achievement unlock request"""
    achievement_id: str
    was_new_unlock: bool
    bonus_xp: int = 0
    old_level: int
    leveled_up: bool = False
    levels_gained: int = 0
