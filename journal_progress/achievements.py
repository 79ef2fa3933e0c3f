"""
Journal Progress Engine - Achievement Catalog
Declarative achievement definitions, evaluated in declaration order.
"""

from functools import lru_cache
from typing import List, Dict, Tuple

from .conditions import OPERATORS
from .exceptions import CatalogError, UnknownAchievementError
from .models import (
    AchievementCategory,
    AchievementCondition,
    AchievementDefinition,
    AchievementTier,
    EvaluationContext,
    MasteryProgress,
)
from .moods import Mood


CATALOG_VERSION = "2024.1"


# ============================================
# ACHIEVEMENT DEFINITIONS
# ============================================

# Declaration order is evaluation order, and the order new unlocks are shown in
ACHIEVEMENT_DEFINITIONS = {
    # Consistency
    "streak_3": {
        "name": "Consistency Is Key",
        "description": "Reach a 3-day streak",
        "icon": "fire",
        "category": "consistency",
        "tier": "bronze",
        "metric": "streak",
        "operator": "gte",
        "target": 3,
    },
    "streak_7": {
        "name": "Weekly Warrior",
        "description": "Reach a 7-day streak",
        "icon": "flame",
        "category": "consistency",
        "tier": "silver",
        "metric": "streak",
        "operator": "gte",
        "target": 7,
    },
    "weekly_rhythm": {
        "name": "Weekly Rhythm",
        "description": "Write on 7 days in a single month",
        "icon": "calendar",
        "category": "consistency",
        "tier": "silver",
        "metric": "entries_this_month",
        "operator": "gte",
        "target": 7,
    },
    "streak_14": {
        "name": "Momentum Master",
        "description": "Reach a 14-day streak",
        "icon": "rocket",
        "category": "consistency",
        "tier": "gold",
        "metric": "streak",
        "operator": "gte",
        "target": 14,
    },
    "streak_30": {
        "name": "Unstoppable",
        "description": "Reach a 30-day streak",
        "icon": "crown",
        "category": "consistency",
        "tier": "platinum",
        "metric": "streak",
        "operator": "gte",
        "target": 30,
    },

    # Patterns
    "entries_1": {
        "name": "First Step",
        "description": "Write your first entry",
        "icon": "pencil",
        "category": "patterns",
        "tier": "bronze",
        "metric": "total_entries",
        "operator": "gte",
        "target": 1,
    },
    "entries_10": {
        "name": "Journaling Habit",
        "description": "Write 10 entries",
        "icon": "notebook",
        "category": "patterns",
        "tier": "silver",
        "metric": "total_entries",
        "operator": "gte",
        "target": 10,
    },
    "morning_person": {
        "name": "Morning Person",
        "description": "Write 5 morning entries (5am-12pm)",
        "icon": "sunrise",
        "category": "patterns",
        "tier": "silver",
        "metric": "morning_entries",
        "operator": "gte",
        "target": 5,
    },
    "evening_reflector": {
        "name": "Evening Reflector",
        "description": "Write 5 evening entries (9pm-5am)",
        "icon": "moon",
        "category": "patterns",
        "tier": "silver",
        "metric": "evening_entries",
        "operator": "gte",
        "target": 5,
    },
    "weekend_writer": {
        "name": "Weekend Writer",
        "description": "Write on both a Saturday and a Sunday",
        "icon": "calendar-week",
        "category": "patterns",
        "tier": "bronze",
        "metric": "weekend_days",
        "operator": "contains_all",
        "target": (5, 6),
    },
    "entries_50": {
        "name": "Dedicated Writer",
        "description": "Write 50 entries",
        "icon": "books",
        "category": "patterns",
        "tier": "gold",
        "metric": "total_entries",
        "operator": "gte",
        "target": 50,
    },
    "entries_100": {
        "name": "Legacy Builder",
        "description": "Write 100 entries",
        "icon": "landmark",
        "category": "patterns",
        "tier": "platinum",
        "metric": "total_entries",
        "operator": "gte",
        "target": 100,
    },

    # Emotional range
    "range_3": {
        "name": "Emotional Explorer",
        "description": "Log 3 different moods",
        "icon": "masks",
        "category": "range",
        "tier": "bronze",
        "metric": "distinct_moods",
        "operator": "gte",
        "target": 3,
    },
    "balanced_perspective": {
        "name": "Balanced Perspective",
        "description": "Write in both pleasant and challenging moods",
        "icon": "scale",
        "category": "range",
        "tier": "bronze",
        "metric": "balanced_moods",
        "operator": "is_true",
    },
    "range_7": {
        "name": "Self-Aware",
        "description": "Log 7 different moods",
        "icon": "mirror",
        "category": "range",
        "tier": "silver",
        "metric": "distinct_moods",
        "operator": "gte",
        "target": 7,
    },
    "range_10": {
        "name": "Full Spectrum",
        "description": "Log all 10 base moods",
        "icon": "rainbow",
        "category": "range",
        "tier": "gold",
        "metric": "distinct_predefined_moods",
        "operator": "gte",
        "target": len(Mood),
    },

    # Depth
    "depth_1": {
        "name": "Thoughtful",
        "description": "Write an entry of 50+ words",
        "icon": "thought",
        "category": "depth",
        "tier": "bronze",
        "metric": "word_count",
        "operator": "gte",
        "target": 50,
    },
    "storyteller": {
        "name": "Storyteller",
        "description": "Write 500+ words in total",
        "icon": "book-open",
        "category": "depth",
        "tier": "silver",
        "metric": "total_words",
        "operator": "gte",
        "target": 500,
    },
    "depth_2": {
        "name": "Deep Diver",
        "description": "Write an entry of 150+ words",
        "icon": "diver",
        "category": "depth",
        "tier": "gold",
        "metric": "word_count",
        "operator": "gte",
        "target": 150,
    },
    "word_master": {
        "name": "Word Master",
        "description": "Write 1000+ words in total",
        "icon": "quill",
        "category": "depth",
        "tier": "gold",
        "metric": "total_words",
        "operator": "gte",
        "target": 1000,
    },

    # Mindfulness
    "mindful_starter": {
        "name": "Mindful Starter",
        "description": "Complete your first timed session",
        "icon": "stopwatch",
        "category": "mindfulness",
        "tier": "bronze",
        "metric": "timed_sessions",
        "operator": "gte",
        "target": 1,
    },
    "weekend_warrior": {
        "name": "Weekend Warrior",
        "description": "Journal on a Saturday or Sunday",
        "icon": "sun",
        "category": "mindfulness",
        "tier": "bronze",
        "metric": "is_weekend",
        "operator": "is_true",
    },
    "early_bird": {
        "name": "Early Bird",
        "description": "Write an entry before 8 AM",
        "icon": "bird",
        "category": "mindfulness",
        "tier": "silver",
        "metric": "entry_hour",
        "operator": "lte",
        "target": 7,
    },
    "night_owl": {
        "name": "Night Owl",
        "description": "Write an entry after 10 PM",
        "icon": "owl",
        "category": "mindfulness",
        "tier": "silver",
        "metric": "entry_hour",
        "operator": "gte",
        "target": 22,
    },
    "present_moment": {
        "name": "Present Moment",
        "description": "Use the timer 10 times",
        "icon": "lotus",
        "category": "mindfulness",
        "tier": "silver",
        "metric": "timed_sessions",
        "operator": "gte",
        "target": 10,
    },
    "meditation_master": {
        "name": "Meditation Master",
        "description": "Use the timer 25 times",
        "icon": "meditation",
        "category": "mindfulness",
        "tier": "gold",
        "metric": "timed_sessions",
        "operator": "gte",
        "target": 25,
    },

    # Gratitude
    "gratitude_1": {
        "name": "Grateful Heart",
        "description": "Log a gratitude entry",
        "icon": "heart",
        "category": "gratitude",
        "tier": "bronze",
        "metric": "gratitude_entries",
        "operator": "gte",
        "target": 1,
    },
    "gratitude_streak_3": {
        "name": "Gratitude Ritual",
        "description": "Log gratitude 3 days in a row",
        "icon": "sparkles",
        "category": "gratitude",
        "tier": "silver",
        "metric": "gratitude_streak",
        "operator": "gte",
        "target": 3,
    },
    "gratitude_10": {
        "name": "Attitude of Gratitude",
        "description": "Log 10 gratitude entries",
        "icon": "star",
        "category": "gratitude",
        "tier": "silver",
        "metric": "gratitude_entries",
        "operator": "gte",
        "target": 10,
    },
    "gratitude_streak_7": {
        "name": "Gratitude Master",
        "description": "Log gratitude 7 days in a row",
        "icon": "glow",
        "category": "gratitude",
        "tier": "gold",
        "metric": "gratitude_streak",
        "operator": "gte",
        "target": 7,
    },
    "gratitude_50": {
        "name": "Abundance Mindset",
        "description": "Log 50 gratitude entries",
        "icon": "gift",
        "category": "gratitude",
        "tier": "platinum",
        "metric": "gratitude_entries",
        "operator": "gte",
        "target": 50,
    },
}


# ============================================
# CATALOG CONSTRUCTION
# ============================================

def build_catalog(definitions: Dict[str, dict]) -> Tuple[AchievementDefinition, ...]:
    """
    Turn raw definition rows into validated achievement definitions.

    Raises:
        CatalogError: If a row names an unknown operator, metric,
            category or tier
    """
    metrics = set(EvaluationContext.model_fields)
    catalog = []

    for code, data in definitions.items():
        if data["operator"] not in OPERATORS:
            raise CatalogError(f"Unknown operator '{data['operator']}'", code)
        if data["metric"] not in metrics:
            raise CatalogError(f"Unknown metric '{data['metric']}'", code)

        try:
            catalog.append(AchievementDefinition(
                id=code,
                name=data["name"],
                description=data["description"],
                icon=data["icon"],
                category=AchievementCategory(data["category"]),
                tier=AchievementTier(data["tier"]),
                condition=AchievementCondition(
                    metric=data["metric"],
                    operator=data["operator"],
                    target=data.get("target"),
                ),
            ))
        except (KeyError, ValueError) as e:
            raise CatalogError(f"Malformed definition: {e}", code) from e

    return tuple(catalog)


@lru_cache()
def all_definitions() -> Tuple[AchievementDefinition, ...]:
    """The whole catalog, in evaluation order."""
    return build_catalog(ACHIEVEMENT_DEFINITIONS)


def definitions_by_id() -> Dict[str, AchievementDefinition]:
    return {a.id: a for a in all_definitions()}


def by_category(category: AchievementCategory) -> List[AchievementDefinition]:
    category = AchievementCategory(category)
    return [a for a in all_definitions() if a.category == category]


def get_definition(achievement_id: str) -> AchievementDefinition:
    for achievement in all_definitions():
        if achievement.id == achievement_id:
            return achievement
    raise UnknownAchievementError(achievement_id)


# ============================================
# MASTERY
# ============================================

def category_totals(
    catalog: Tuple[AchievementDefinition, ...]
) -> Dict[AchievementCategory, int]:
    """Number of achievements per category. Every category is present."""
    totals = {category: 0 for category in AchievementCategory}
    for achievement in catalog:
        totals[achievement.category] += 1
    return totals


def mastery_for(
    category: AchievementCategory,
    unlocked_ids: List[str],
    catalog: Tuple[AchievementDefinition, ...]
) -> MasteryProgress:
    in_category = [a.id for a in catalog if a.category == category]
    unlocked = set(unlocked_ids)
    progress = sum(1 for code in in_category if code in unlocked)
    total = len(in_category)
    return MasteryProgress(
        progress=progress,
        total=total,
        unlocked=total > 0 and progress == total,
    )


def build_mastery(
    unlocked_ids: List[str],
    catalog: Tuple[AchievementDefinition, ...]
) -> Dict[AchievementCategory, MasteryProgress]:
    return {
        category: mastery_for(category, unlocked_ids, catalog)
        for category in AchievementCategory
    }
