"""
Level Curve

Pure functions mapping level <-> cumulative XP, plus the static
100-entry title table.

Leveling Curve:
- XP to leave level N: N * 100 (linear)
- Cumulative XP to reach level N: 100 + 200 + ... + (N-1) * 100

Display Tiers:
- Beginner (1-10), Intermediate (11-25), Advanced (26-40)
- Elite (41-50), Cosmic (51-70), God (71-100)

Levels above 100 keep accruing; their display saturates at level 100.
"""

from typing import Dict, Tuple
import logging

from nutrio.exceptions import ValidationError
from nutrio.models.progression import LevelInfo, LevelTier

logger = logging.getLogger(__name__)

XP_PER_LEVEL = 100
MAX_DISPLAY_LEVEL = 100
MILESTONE_INTERVAL = 10

# Highest level of each tier, in ascending order
TIER_BREAKPOINTS: Tuple[Tuple[int, LevelTier], ...] = (
    (10, LevelTier.BEGINNER),
    (25, LevelTier.INTERMEDIATE),
    (40, LevelTier.ADVANCED),
    (50, LevelTier.ELITE),
    (70, LevelTier.COSMIC),
    (100, LevelTier.GOD),
)

_TITLES: Tuple[Tuple[str, str], ...] = (
    # Beginner
    ("Nutrition Newbie", "🌱"),
    ("Calorie Cadet", "🎯"),
    ("Meal Apprentice", "🍽️"),
    ("Food Explorer", "🗺️"),
    ("Tracking Enthusiast", "📊"),
    ("Portion Prodigy", "⚖️"),
    ("Macro Novice", "🧮"),
    ("Health Seeker", "💚"),
    ("Balanced Beginner", "⚖️"),
    ("Wellness Warrior", "⚔️"),
    # Intermediate
    ("Nutrition Navigator", "🧭"),
    ("Calorie Commander", "👑"),
    ("Meal Maestro", "🎼"),
    ("Diet Disciple", "🙏"),
    ("Protein Paladin", "🛡️"),
    ("Macro Mechanic", "🔧"),
    ("Health Architect", "🏗️"),
    ("Balance Keeper", "⚖️"),
    ("Fitness Fanatic", "💪"),
    ("Wellness Wizard", "🧙"),
    ("Nutrition Knight", "⚔️"),
    ("Calorie Crusader", "🏰"),
    ("Macro Marshal", "🎖️"),
    ("Diet Defender", "🛡️"),
    ("Health Guardian", "👼"),
    # Advanced
    ("Nutrition Ninja", "🥷"),
    ("Calorie Champion", "🏆"),
    ("Macro Master", "🎓"),
    ("Wellness Sage", "🧘"),
    ("Health Luminary", "✨"),
    ("Diet Virtuoso", "🎻"),
    ("Protein Prodigy", "💪"),
    ("Balance Sage", "⚖️"),
    ("Nutrition Oracle", "🔮"),
    ("Macro Savant", "🧠"),
    ("Health Titan", "💎"),
    ("Wellness Overlord", "👑"),
    ("Calorie Conqueror", "⚔️"),
    ("Nutrition Sovereign", "👑"),
    ("Diet Deity", "⚡"),
    # Elite
    ("Legendary Tracker", "🌟"),
    ("Macro Immortal", "♾️"),
    ("Health Ascendant", "🚀"),
    ("Wellness Transcendent", "🌌"),
    ("Nutrition Demigod", "🔱"),
    ("Calorie Overlord", "👹"),
    ("Balance Paragon", "💫"),
    ("Protein Deity", "💪✨"),
    ("Macro Eternal", "♾️✨"),
    ("NUTRITION LEGEND", "🏆👑"),
    # Cosmic
    ("Cosmic Nutritionist", "🌌"),
    ("Stellar Tracker", "🌠"),
    ("Galactic Guru", "🌌"),
    ("Universal Master", "🌍"),
    ("Quantum Analyst", "⚛️"),
    ("Dimension Walker", "🌀"),
    ("Time Lord", "⏰"),
    ("Reality Shaper", "✨"),
    ("Cosmic Entity", "🌌"),
    ("Transcendent Being", "🌠"),
    ("Omniscient Oracle", "👁️"),
    ("Supreme Nutritionist", "👑"),
    ("Eternal Wisdom", "♾️"),
    ("Universal Guardian", "🛡️"),
    ("Celestial Master", "⭐"),
    ("Divine Tracker", "✨"),
    ("Infinite Being", "♾️"),
    ("Macro Omnipotent", "💫"),
    ("Nutrition Nirvana", "🕉️"),
    ("Health Enlightened", "☀️"),
    # God
    ("Immortal Legend", "♾️🏆"),
    ("Supreme Being", "👑✨"),
    ("Alpha Omega", "Ω"),
    ("Primordial Force", "💥"),
    ("Absolute Power", "⚡"),
    ("Omnipotent One", "🌟"),
    ("Creator Divine", "✨"),
    ("Ultimate Authority", "👑"),
    ("Eternal Sovereign", "♾️👑"),
    ("Mythic Deity", "⚡👑"),
    ("Legendary God", "🌟👑"),
    ("Apex Existence", "💎"),
    ("Omniversal Mind", "🧠✨"),
    ("Boundless Spirit", "🌌"),
    ("Infinite Wisdom", "♾️💡"),
    ("Perfect Balance", "⚖️✨"),
    ("Divine Harmony", "🕊️"),
    ("Sacred Perfection", "✨"),
    ("Celestial Emperor", "👑🌟"),
    ("Cosmic Overlord", "🌌👑"),
    ("Primeval God", "⚡👑"),
    ("Eternal Presence", "♾️"),
    ("Ultimate Reality", "🌟"),
    ("Infinite Creator", "✨♾️"),
    ("Supreme Architect", "🏗️👑"),
    ("Divine Absolute", "⚡✨"),
    ("Omnipotent Force", "💫👑"),
    ("Celestial Supreme", "🌠👑"),
    ("Nutrition Immortal", "♾️🏆"),
    ("NUTRIO GOD", "🌟👑⚡"),
)


def tier_for_level(level: int) -> LevelTier:
    """Display tier for a level (clamped to 1..100)"""
    clamped = max(1, min(MAX_DISPLAY_LEVEL, level))
    for upper, tier in TIER_BREAKPOINTS:
        if clamped <= upper:
            return tier
    return LevelTier.GOD


LEVEL_TITLES: Dict[int, LevelInfo] = {
    level: LevelInfo(level=level, title=title, emoji=emoji, tier=tier_for_level(level))
    for level, (title, emoji) in enumerate(_TITLES, start=1)
}


def _require_level(level: int) -> None:
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        raise ValidationError(message="Level must be an integer >= 1", field="level", value=level)


def xp_required_for(level: int) -> int:
    """XP needed to go from `level` to `level + 1`"""
    _require_level(level)
    return level * XP_PER_LEVEL


def cumulative_xp_for(level: int) -> int:
    """
    Total XP needed to reach `level` from level 1 with 0 XP

    Sum of xp_required_for(i) for i in [1, level); 0 for level 1.
    """
    _require_level(level)
    return XP_PER_LEVEL * (level - 1) * level // 2


def level_from_total_xp(total_xp: int) -> Tuple[int, int]:
    """
    Resolve lifetime XP into (level, current_xp)

    Walks the curve from level 1 exactly the way incremental accrual does,
    so a persisted total always rehydrates to the same pair.
    """
    if isinstance(total_xp, bool) or not isinstance(total_xp, int) or total_xp < 0:
        raise ValidationError(message="Total XP must be an integer >= 0", field="total_xp", value=total_xp)

    level = 1
    xp_remaining = total_xp
    while xp_remaining >= xp_required_for(level):
        xp_remaining -= xp_required_for(level)
        level += 1

    return level, xp_remaining


def xp_to_next_level(level: int, current_xp: int) -> int:
    """XP still missing before the next level-up"""
    return xp_required_for(level) - current_xp


def level_info_for(level: int) -> LevelInfo:
    """Static title/emoji/tier, clamped to the 1..100 display table"""
    clamped = max(1, min(MAX_DISPLAY_LEVEL, level))
    return LEVEL_TITLES[clamped]


def is_level_milestone(level: int) -> bool:
    """Every 10th level is a milestone (10, 20, 30, ...)"""
    return level > 0 and level % MILESTONE_INTERVAL == 0
