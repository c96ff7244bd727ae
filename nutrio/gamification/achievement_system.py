"""
Achievement System

One-time achievement unlocks with bonus XP.

Features:
- Idempotent unlocks: unlocking an already-unlocked id is a no-op, so
  callers can re-check achievements freely (e.g. on every app open)
- Bonus XP goes straight to the XP ledger: never capped, never multiplied
- Progress tracking for locked achievements
- Recent-unlock queue for badge notifications
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union
from datetime import datetime
from pathlib import Path
import json
import logging

from pydantic import ValidationError as PydanticValidationError

from nutrio.exceptions import ConfigurationError, UnknownAchievementError, ValidationError
from nutrio.gamification.rewards import RewardSource
from nutrio.gamification.xp_system import apply_xp, snapshot
from nutrio.models.achievement import AchievementDefinition
from nutrio.models.progression import ProgressionState, UnlockOutcome, UnlockRecord
from nutrio.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)

# Unlock count -> milestone reward granted on reaching it
ACHIEVEMENT_COUNT_MILESTONES: Dict[int, RewardSource] = {
    1: RewardSource.FIRST_ACHIEVEMENT,
    10: RewardSource.TEN_ACHIEVEMENTS,
    25: RewardSource.TWENTY_FIVE_ACHIEVEMENTS,
    50: RewardSource.FIFTY_ACHIEVEMENTS,
}


class AchievementCatalog:
    """Read-only mapping of achievement id -> definition"""

    def __init__(self, definitions: Iterable[AchievementDefinition] = ()):
        self._definitions: Dict[str, AchievementDefinition] = {}
        for definition in definitions:
            if definition.id in self._definitions:
                raise ConfigurationError(
                    message=f"Duplicate achievement id in catalog: {definition.id}",
                    config_key="achievements",
                )
            self._definitions[definition.id] = definition

    @classmethod
    def from_dicts(cls, entries: Iterable[dict]) -> "AchievementCatalog":
        """Build from plain dicts (e.g. parsed JSON)"""
        try:
            return cls(AchievementDefinition.model_validate(entry) for entry in entries)
        except PydanticValidationError as e:
            raise ConfigurationError(
                message=f"Invalid achievement definition: {e}",
                config_key="achievements",
                cause=e,
            )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "AchievementCatalog":
        """Load a JSON list of achievement definitions"""
        path = Path(path)
        try:
            entries = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                message=f"Could not read achievement catalog {path}: {e}",
                config_key="ACHIEVEMENT_CATALOG_PATH",
                cause=e,
            )
        if not isinstance(entries, list):
            raise ConfigurationError(
                message=f"Achievement catalog {path} must contain a JSON list",
                config_key="ACHIEVEMENT_CATALOG_PATH",
            )

        catalog = cls.from_dicts(entries)
        logger.info(f"Loaded {len(catalog)} achievements from {path}")
        return catalog

    def lookup(self, achievement_id: str) -> AchievementDefinition:
        """Definition for an id, raising UnknownAchievementError on a miss"""
        try:
            return self._definitions[achievement_id]
        except KeyError:
            raise UnknownAchievementError(achievement_id)

    def __contains__(self, achievement_id: object) -> bool:
        return achievement_id in self._definitions

    def __iter__(self) -> Iterator[AchievementDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)


def unlock_achievement(
    state: ProgressionState,
    achievement_id: str,
    catalog: AchievementCatalog,
    now: Optional[datetime] = None
) -> Tuple[ProgressionState, UnlockOutcome]:
    """
    Unlock an achievement once and grant its bonus XP

    Args:
        state: Current progression state (not modified)
        achievement_id: Catalog id
        catalog: Achievement catalog to look the bonus up in
        now: Unlock / level-up timestamp (defaults to UTC now)

    Returns:
        (new_state, outcome). outcome.was_new_unlock is False when the id
        was already unlocked; the state is then returned unchanged.
    """
    old_level = state.level

    if achievement_id in state.unlocked_achievement_ids:
        logger.debug(f"Achievement {achievement_id} already unlocked for user {state.user_id}")
        return state, UnlockOutcome(
            **snapshot(state).model_dump(),
            achievement_id=achievement_id,
            was_new_unlock=False,
            old_level=old_level,
        )

    definition = catalog.lookup(achievement_id)
    now = now or now_utc()

    new_state, leveled_up, levels_gained = apply_xp(state, definition.bonus_xp, now=now)
    new_state.unlocked_achievement_ids.add(achievement_id)
    new_state.achievement_progress.pop(achievement_id, None)
    new_state.recent_unlocks.append(UnlockRecord(
        achievement_id=achievement_id,
        name=definition.name or None,
        bonus_xp=definition.bonus_xp,
        unlocked_at=now,
    ))

    logger.info(
        f"User {state.user_id} unlocked achievement: {achievement_id} "
        f"({definition.name}) +{definition.bonus_xp} XP"
    )

    return new_state, UnlockOutcome(
        **snapshot(new_state).model_dump(),
        achievement_id=achievement_id,
        was_new_unlock=True,
        bonus_xp=definition.bonus_xp,
        old_level=old_level,
        leveled_up=leveled_up,
        levels_gained=levels_gained,
    )


def update_achievement_progress(
    state: ProgressionState,
    achievement_id: str,
    progress: int,
    catalog: AchievementCatalog
) -> ProgressionState:
    """
    Record progress toward a locked achievement

    Unlocked achievements keep no progress; the state comes back unchanged.
    """
    catalog.lookup(achievement_id)
    if isinstance(progress, bool) or not isinstance(progress, int) or progress < 0:
        raise ValidationError(message="Progress must be an integer >= 0", field="progress", value=progress)

    if achievement_id in state.unlocked_achievement_ids:
        return state

    new_state = state.model_copy(deep=True)
    new_state.achievement_progress[achievement_id] = progress
    return new_state


def get_achievement_progress(
    state: ProgressionState,
    achievement_id: str,
    catalog: AchievementCatalog
) -> Dict[str, int]:
    """
    Progress toward an achievement

    Returns:
        {
            'current': int,
            'required': int,
            'percentage': int
        }
    """
    definition = catalog.lookup(achievement_id)
    required = definition.target or 1

    if achievement_id in state.unlocked_achievement_ids:
        current = required
    else:
        current = min(state.achievement_progress.get(achievement_id, 0), required)

    return {
        'current': current,
        'required': required,
        'percentage': int(current / required * 100),
    }


def get_unlocked_achievements(
    state: ProgressionState,
    catalog: AchievementCatalog
) -> List[AchievementDefinition]:
    """Definitions of the user's unlocked achievements that are still in the catalog"""
    return [definition for definition in catalog if definition.id in state.unlocked_achievement_ids]


def clear_recent_unlocks(state: ProgressionState) -> ProgressionState:
    """Empty the notification queue after the host has shown it"""
    new_state = state.model_copy(deep=True)
    new_state.recent_unlocks = []
    return new_state


def achievement_milestone_source(
    unlocked_count: int,
    catalog_size: Optional[int] = None
) -> Optional[RewardSource]:
    """
    Milestone reward earned by reaching `unlocked_count` unlocks, if any

    Unlocking the whole catalog beats the count milestones.
    """
    if catalog_size and unlocked_count == catalog_size:
        return RewardSource.ALL_ACHIEVEMENTS
    return ACHIEVEMENT_COUNT_MILESTONES.get(unlocked_count)
