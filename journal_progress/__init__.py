"""
Journal Progress Engine
Streaks, XP, levels, achievements and cosmetic unlocks for daily journaling.
"""

from .logger import logger, setup_logger

from .models import (
    # Enums
    AchievementCategory,
    AchievementTier,
    LevelTier,
    # Achievement types
    AchievementCondition,
    AchievementDefinition,
    MasteryProgress,
    EvaluationContext,
    # Save types
    DailySaveInput,
    DailySaveResult,
    AchievementsView,
    ProgressLedger,
)

from .achievements import (
    CATALOG_VERSION,
    all_definitions,
    by_category,
    get_definition,
    definitions_by_id,
)

from .exceptions import (
    ProgressError,
    InvalidSaveError,
    UnknownAchievementError,
    CatalogError,
    LedgerStoreError,
)

from .engine import ProgressEngine
from .store import LedgerStore, JsonLedgerStore, create_store
from .presentation import AchievementQueue
from .customization import CosmeticKind, CosmeticReward, resolve_unlocks, unlock_requirement
from .moods import Mood, MoodKind, MoodTag, classify_mood

__version__ = "1.0.0"

__all__ = [
    "logger",
    "setup_logger",
    "AchievementCategory",
    "AchievementTier",
    "LevelTier",
    "AchievementCondition",
    "AchievementDefinition",
    "MasteryProgress",
    "EvaluationContext",
    "DailySaveInput",
    "DailySaveResult",
    "AchievementsView",
    "ProgressLedger",
    "CATALOG_VERSION",
    "all_definitions",
    "by_category",
    "get_definition",
    "definitions_by_id",
    "ProgressError",
    "InvalidSaveError",
    "UnknownAchievementError",
    "CatalogError",
    "LedgerStoreError",
    "ProgressEngine",
    "LedgerStore",
    "JsonLedgerStore",
    "create_store",
    "AchievementQueue",
    "CosmeticKind",
    "CosmeticReward",
    "resolve_unlocks",
    "unlock_requirement",
    "Mood",
    "MoodKind",
    "MoodTag",
    "classify_mood",
]
