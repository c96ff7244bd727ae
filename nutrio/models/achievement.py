"""Achievement models for gamification"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional


class AchievementDifficulty(str, Enum):
    """Achievement difficulty levels"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Default bonus XP when a definition does not set one
DIFFICULTY_BONUS_XP = {
    AchievementDifficulty.EASY: 50,
    AchievementDifficulty.MEDIUM: 150,
    AchievementDifficulty.HARD: 300,
}


class AchievementDefinition(BaseModel):
    """Achievement definition (static catalog entry)"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    icon: str = "🏆"
    difficulty: AchievementDifficulty = AchievementDifficulty.EASY
    bonus_xp: Optional[int] = Field(default=None, ge=0)
    target: Optional[int] = Field(default=None, ge=1)  # progress needed, when tracked

    @model_validator(mode="before")
    @classmethod
    def _default_bonus_from_difficulty(cls, data):
        if isinstance(data, dict) and data.get("bonus_xp") is None:
            difficulty = AchievementDifficulty(data.get("difficulty", AchievementDifficulty.EASY))
            data = {**data, "bonus_xp": DIFFICULTY_BONUS_XP[difficulty]}
        return data
