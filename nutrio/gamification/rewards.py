"""
Reward Catalog

Static configuration: which actions grant XP, how much by default, and
which category (cap bucket) each one is tracked under.

Only low-effort repeatable categories are capped per day:
- meal_logging: 200 XP/day
- water_logging: 100 XP/day
Goals, streaks, milestones and achievements are never capped.
"""

from enum import Enum
from typing import Dict, Optional, Union

from nutrio import config
from nutrio.exceptions import UnknownSourceError


class RewardSource(str, Enum):
    """Reward-source identifiers"""
    # Meal logging
    MEAL_LOG = "meal_log"
    MEAL_LOG_WITH_PHOTO = "meal_log_with_photo"
    MEAL_LOG_BARCODE = "meal_log_barcode"
    ALL_THREE_MEALS = "all_three_meals"
    FIVE_MEALS_DAY = "five_meals_day"

    # Accuracy & detail
    ADD_NOTES = "add_notes"
    LOG_PORTION_SIZE = "log_portion_size"
    COMPLETE_MACROS = "complete_macros"

    # Goals & targets
    HIT_CALORIE_GOAL = "hit_calorie_goal"
    HIT_PROTEIN_GOAL = "hit_protein_goal"
    HIT_CARBS_GOAL = "hit_carbs_goal"
    HIT_FAT_GOAL = "hit_fat_goal"
    HIT_ALL_MACROS = "hit_all_macros"
    WITHIN_50_CALORIES = "within_50_calories"

    # Hydration
    LOG_WATER_GLASS = "log_water_glass"
    MEET_WATER_GOAL = "meet_water_goal"
    EIGHT_GLASSES = "eight_glasses"

    # Streaks
    DAILY_LOGIN = "daily_login"
    THREE_DAY_STREAK = "three_day_streak"
    SEVEN_DAY_STREAK = "seven_day_streak"
    FOURTEEN_DAY_STREAK = "fourteen_day_streak"
    THIRTY_DAY_STREAK = "thirty_day_streak"

    # Consistency
    FIVE_DAYS_WEEK = "five_days_week"
    SEVEN_DAYS_WEEK = "seven_days_week"
    BREAKFAST_ON_TIME = "breakfast_on_time"
    LOG_WITHIN_30_MIN = "log_within_30_min"

    # Premium features
    VIEW_AI_MEAL = "view_ai_meal"
    ADD_TO_PLANNER = "add_to_planner"
    COMPLETE_MEAL_PLAN = "complete_meal_plan"
    GENERATE_GROCERY_LIST = "generate_grocery_list"
    MARK_ITEM_PURCHASED = "mark_item_purchased"
    COMPLETE_GROCERY_LIST = "complete_grocery_list"
    SCAN_FRIDGE = "scan_fridge"
    GET_MEAL_SUGGESTION = "get_meal_suggestion"
    SAVE_CUSTOM_RECIPE = "save_custom_recipe"
    TRY_AI_RECIPE = "try_ai_recipe"
    RATE_RECIPE = "rate_recipe"
    REVIEW_RECIPE = "review_recipe"
    VIEW_ANALYTICS = "view_analytics"
    EXPORT_DATA = "export_data"
    VIEW_MONTHLY_TRENDS = "view_monthly_trends"

    # Achievements (by difficulty)
    EASY_ACHIEVEMENT = "easy_achievement"
    MEDIUM_ACHIEVEMENT = "medium_achievement"
    HARD_ACHIEVEMENT = "hard_achievement"

    # Achievement-count milestones
    FIRST_ACHIEVEMENT = "first_achievement"
    TEN_ACHIEVEMENTS = "ten_achievements"
    TWENTY_FIVE_ACHIEVEMENTS = "twenty_five_achievements"
    FIFTY_ACHIEVEMENTS = "fifty_achievements"
    ALL_ACHIEVEMENTS = "all_achievements"

    # One-time bonuses
    COMPLETE_ONBOARDING = "complete_onboarding"
    SETUP_NOTIFICATIONS = "setup_notifications"
    UPLOAD_PROFILE_PHOTO = "upload_profile_photo"
    ENABLE_DARK_MODE = "enable_dark_mode"

    # Social
    ADD_FRIEND = "add_friend"
    SEND_ENCOURAGEMENT = "send_encouragement"
    COMPLETE_CHALLENGE = "complete_challenge"
    REFER_USER = "refer_user"


class RewardCategory(str, Enum):
    """Cap buckets"""
    MEAL_LOGGING = "meal_logging"
    WATER_LOGGING = "water_logging"
    MEAL_MILESTONES = "meal_milestones"
    GOALS = "goals"
    HYDRATION_GOALS = "hydration_goals"
    STREAKS = "streaks"
    CONSISTENCY = "consistency"
    PREMIUM_FEATURES = "premium_features"
    ACHIEVEMENTS = "achievements"
    MILESTONES = "milestones"
    ONE_TIME = "one_time"
    SOCIAL = "social"


XP_REWARDS: Dict[RewardSource, int] = {
    RewardSource.MEAL_LOG: 10,
    RewardSource.MEAL_LOG_WITH_PHOTO: 15,
    RewardSource.MEAL_LOG_BARCODE: 12,
    RewardSource.ALL_THREE_MEALS: 50,
    RewardSource.FIVE_MEALS_DAY: 30,

    RewardSource.ADD_NOTES: 5,
    RewardSource.LOG_PORTION_SIZE: 8,
    RewardSource.COMPLETE_MACROS: 10,

    RewardSource.HIT_CALORIE_GOAL: 30,
    RewardSource.HIT_PROTEIN_GOAL: 25,
    RewardSource.HIT_CARBS_GOAL: 20,
    RewardSource.HIT_FAT_GOAL: 20,
    RewardSource.HIT_ALL_MACROS: 100,
    RewardSource.WITHIN_50_CALORIES: 40,

    RewardSource.LOG_WATER_GLASS: 5,
    RewardSource.MEET_WATER_GOAL: 30,
    RewardSource.EIGHT_GLASSES: 50,

    RewardSource.DAILY_LOGIN: 5,
    RewardSource.THREE_DAY_STREAK: 25,
    RewardSource.SEVEN_DAY_STREAK: 75,
    RewardSource.FOURTEEN_DAY_STREAK: 150,
    RewardSource.THIRTY_DAY_STREAK: 400,

    RewardSource.FIVE_DAYS_WEEK: 100,
    RewardSource.SEVEN_DAYS_WEEK: 200,
    RewardSource.BREAKFAST_ON_TIME: 15,
    RewardSource.LOG_WITHIN_30_MIN: 10,

    RewardSource.VIEW_AI_MEAL: 5,
    RewardSource.ADD_TO_PLANNER: 15,
    RewardSource.COMPLETE_MEAL_PLAN: 150,
    RewardSource.GENERATE_GROCERY_LIST: 20,
    RewardSource.MARK_ITEM_PURCHASED: 2,
    RewardSource.COMPLETE_GROCERY_LIST: 75,
    RewardSource.SCAN_FRIDGE: 30,
    RewardSource.GET_MEAL_SUGGESTION: 25,
    RewardSource.SAVE_CUSTOM_RECIPE: 25,
    RewardSource.TRY_AI_RECIPE: 30,
    RewardSource.RATE_RECIPE: 5,
    RewardSource.REVIEW_RECIPE: 10,
    RewardSource.VIEW_ANALYTICS: 10,
    RewardSource.EXPORT_DATA: 15,
    RewardSource.VIEW_MONTHLY_TRENDS: 20,

    RewardSource.EASY_ACHIEVEMENT: 50,
    RewardSource.MEDIUM_ACHIEVEMENT: 150,
    RewardSource.HARD_ACHIEVEMENT: 300,

    RewardSource.FIRST_ACHIEVEMENT: 100,
    RewardSource.TEN_ACHIEVEMENTS: 200,
    RewardSource.TWENTY_FIVE_ACHIEVEMENTS: 500,
    RewardSource.FIFTY_ACHIEVEMENTS: 1000,
    RewardSource.ALL_ACHIEVEMENTS: 5000,

    RewardSource.COMPLETE_ONBOARDING: 100,
    RewardSource.SETUP_NOTIFICATIONS: 25,
    RewardSource.UPLOAD_PROFILE_PHOTO: 15,
    RewardSource.ENABLE_DARK_MODE: 5,

    RewardSource.ADD_FRIEND: 20,
    RewardSource.SEND_ENCOURAGEMENT: 5,
    RewardSource.COMPLETE_CHALLENGE: 100,
    RewardSource.REFER_USER: 500,
}

_CATEGORY_MEMBERS: Dict[RewardCategory, tuple] = {
    RewardCategory.MEAL_LOGGING: (
        RewardSource.MEAL_LOG,
        RewardSource.MEAL_LOG_WITH_PHOTO,
        RewardSource.MEAL_LOG_BARCODE,
        RewardSource.ADD_NOTES,
        RewardSource.LOG_PORTION_SIZE,
        RewardSource.COMPLETE_MACROS,
    ),
    RewardCategory.WATER_LOGGING: (RewardSource.LOG_WATER_GLASS,),
    RewardCategory.MEAL_MILESTONES: (RewardSource.ALL_THREE_MEALS, RewardSource.FIVE_MEALS_DAY),
    RewardCategory.GOALS: (
        RewardSource.HIT_CALORIE_GOAL,
        RewardSource.HIT_PROTEIN_GOAL,
        RewardSource.HIT_CARBS_GOAL,
        RewardSource.HIT_FAT_GOAL,
        RewardSource.HIT_ALL_MACROS,
        RewardSource.WITHIN_50_CALORIES,
    ),
    RewardCategory.HYDRATION_GOALS: (RewardSource.MEET_WATER_GOAL, RewardSource.EIGHT_GLASSES),
    RewardCategory.STREAKS: (
        RewardSource.DAILY_LOGIN,
        RewardSource.THREE_DAY_STREAK,
        RewardSource.SEVEN_DAY_STREAK,
        RewardSource.FOURTEEN_DAY_STREAK,
        RewardSource.THIRTY_DAY_STREAK,
    ),
    RewardCategory.CONSISTENCY: (
        RewardSource.FIVE_DAYS_WEEK,
        RewardSource.SEVEN_DAYS_WEEK,
        RewardSource.BREAKFAST_ON_TIME,
        RewardSource.LOG_WITHIN_30_MIN,
    ),
    RewardCategory.PREMIUM_FEATURES: (
        RewardSource.VIEW_AI_MEAL,
        RewardSource.ADD_TO_PLANNER,
        RewardSource.COMPLETE_MEAL_PLAN,
        RewardSource.GENERATE_GROCERY_LIST,
        RewardSource.MARK_ITEM_PURCHASED,
        RewardSource.COMPLETE_GROCERY_LIST,
        RewardSource.SCAN_FRIDGE,
        RewardSource.GET_MEAL_SUGGESTION,
        RewardSource.SAVE_CUSTOM_RECIPE,
        RewardSource.TRY_AI_RECIPE,
        RewardSource.RATE_RECIPE,
        RewardSource.REVIEW_RECIPE,
        RewardSource.VIEW_ANALYTICS,
        RewardSource.EXPORT_DATA,
        RewardSource.VIEW_MONTHLY_TRENDS,
    ),
    RewardCategory.ACHIEVEMENTS: (
        RewardSource.EASY_ACHIEVEMENT,
        RewardSource.MEDIUM_ACHIEVEMENT,
        RewardSource.HARD_ACHIEVEMENT,
    ),
    RewardCategory.MILESTONES: (
        RewardSource.FIRST_ACHIEVEMENT,
        RewardSource.TEN_ACHIEVEMENTS,
        RewardSource.TWENTY_FIVE_ACHIEVEMENTS,
        RewardSource.FIFTY_ACHIEVEMENTS,
        RewardSource.ALL_ACHIEVEMENTS,
    ),
    RewardCategory.ONE_TIME: (
        RewardSource.COMPLETE_ONBOARDING,
        RewardSource.SETUP_NOTIFICATIONS,
        RewardSource.UPLOAD_PROFILE_PHOTO,
        RewardSource.ENABLE_DARK_MODE,
    ),
    RewardCategory.SOCIAL: (
        RewardSource.ADD_FRIEND,
        RewardSource.SEND_ENCOURAGEMENT,
        RewardSource.COMPLETE_CHALLENGE,
        RewardSource.REFER_USER,
    ),
}

REWARD_CATEGORIES: Dict[RewardSource, RewardCategory] = {
    source: category
    for category, members in _CATEGORY_MEMBERS.items()
    for source in members
}

# Cap bucket -> max XP per calendar day; buckets not listed are uncapped
DAILY_XP_CAPS: Dict[RewardCategory, int] = {
    RewardCategory.MEAL_LOGGING: config.MEAL_LOGGING_DAILY_XP_CAP,
    RewardCategory.WATER_LOGGING: config.WATER_LOGGING_DAILY_XP_CAP,
}


def to_reward_source(source: Union[RewardSource, str]) -> RewardSource:
    """Normalize a source id, raising UnknownSourceError on a catalog miss"""
    if isinstance(source, RewardSource):
        return source
    try:
        return RewardSource(source)
    except ValueError:
        raise UnknownSourceError(source)


def get_base_xp(source: Union[RewardSource, str]) -> int:
    """Default XP for a reward source"""
    return XP_REWARDS[to_reward_source(source)]


def get_category(source: Union[RewardSource, str]) -> RewardCategory:
    """Cap bucket a reward source is tracked under"""
    return REWARD_CATEGORIES[to_reward_source(source)]


def get_daily_cap(
    source: Union[RewardSource, str],
    caps: Optional[Dict[RewardCategory, int]] = None
) -> Optional[int]:
    """Daily cap for a source's bucket, or None if uncapped"""
    caps = DAILY_XP_CAPS if caps is None else caps
    return caps.get(get_category(source))
