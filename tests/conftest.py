"""Global test fixtures and utilities for nutrio tests"""
import pytest
from datetime import date, datetime, timezone

from nutrio.gamification.achievement_system import AchievementCatalog
from nutrio.gamification.engine import ProgressionEngine
from nutrio.models.achievement import AchievementDefinition, AchievementDifficulty
from nutrio.models.progression import ProgressionState
from nutrio.services.progression_service import ProgressionService
from nutrio.services.state_store import InMemoryProgressionStore


# ============================================================================
# User & Clock Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "123456789"


@pytest.fixture
def today():
    """A Monday"""
    return date(2024, 3, 4)


@pytest.fixture
def fixed_now():
    """Timezone-aware timestamp on the `today` fixture's date"""
    return datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Progression Fixtures
# ============================================================================

@pytest.fixture
def fresh_state(test_user_id):
    """Level 1, 0 XP"""
    return ProgressionState(user_id=test_user_id)


@pytest.fixture
def achievement_catalog():
    """Small catalog covering every difficulty"""
    return AchievementCatalog([
        AchievementDefinition(
            id="first_meal",
            name="First Bite",
            description="Log your first meal",
            icon="🍽️",
            difficulty=AchievementDifficulty.EASY,
        ),
        AchievementDefinition(
            id="hydration_hero",
            name="Hydration Hero",
            description="Meet your water goal 7 days in a row",
            icon="💧",
            difficulty=AchievementDifficulty.MEDIUM,
            target=7,
        ),
        AchievementDefinition(
            id="macro_master",
            name="Macro Master",
            description="Hit all macros 30 times",
            icon="🎯",
            difficulty=AchievementDifficulty.HARD,
            target=30,
        ),
        AchievementDefinition(
            id="big_bonus",
            name="Big Bonus",
            description="Test achievement with a large explicit bonus",
            bonus_xp=5000,
        ),
    ])


@pytest.fixture
def engine(achievement_catalog):
    """Engine over the test catalog with default caps"""
    return ProgressionEngine(catalog=achievement_catalog)


@pytest.fixture
def progression_store():
    """Empty in-memory store"""
    return InMemoryProgressionStore()


@pytest.fixture
def progression_service(progression_store, engine):
    """Service over the in-memory store and test catalog"""
    return ProgressionService(progression_store, engine=engine, timezone="UTC")
