"""
Journal Progress Engine - Pydantic Models (v2 syntax)
"""

import datetime as dt
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .clock import to_date, day_distance
from .conditions import OPERATORS
from .moods import MoodKind


# ============================================
# ENUMS
# ============================================

class AchievementCategory(str, Enum):
    CONSISTENCY = "consistency"
    DEPTH = "depth"
    RANGE = "range"
    MINDFULNESS = "mindfulness"
    PATTERNS = "patterns"
    GRATITUDE = "gratitude"


class AchievementTier(str, Enum):
    """Difficulty rank of an achievement. Used for display color only."""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"

    @property
    def rank(self) -> int:
        return list(AchievementTier).index(self)


class LevelTier(str, Enum):
    SEED = "seed"
    SPROUT = "sprout"
    BLOOM = "bloom"
    GROVE = "grove"
    AURORA = "aurora"


# ============================================
# ACHIEVEMENT MODELS
# ============================================

class AchievementCondition(BaseModel):
    """Declarative unlock rule: `operator(context.metric, target)`."""
    model_config = ConfigDict(frozen=True)

    metric: str
    operator: str = "gte"
    target: Any = None


class AchievementDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    category: AchievementCategory
    tier: AchievementTier
    condition: AchievementCondition

    def is_met(self, context: "EvaluationContext") -> bool:
        """Evaluate the unlock predicate. Pure and deterministic."""
        value = getattr(context, self.condition.metric)
        operator_fn = OPERATORS[self.condition.operator]
        return operator_fn(value, self.condition.target)


class MasteryProgress(BaseModel):
    progress: int = 0
    total: int = 0
    unlocked: bool = False


# ============================================
# DAILY SAVE MODELS
# ============================================

class DailySaveInput(BaseModel):
    """Entry metadata collected by the screen when an entry is saved."""
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    date: dt.date
    mood_tagged: bool
    word_count: int = Field(ge=0)
    mood: Optional[str] = None
    used_timer: bool
    entry_hour: int = Field(ge=0, le=23)
    is_gratitude: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        if isinstance(value, (str, dt.datetime)):
            return to_date(value)
        return value


class EvaluationContext(BaseModel):
    """Everything an achievement predicate may look at for one save."""
    model_config = ConfigDict(frozen=True)

    # Current save
    date: dt.date
    weekday: int
    is_weekend: bool
    mood_tagged: bool
    word_count: int
    mood: Optional[str] = None
    mood_kind: Optional[MoodKind] = None
    used_timer: bool
    entry_hour: int
    is_gratitude: bool

    # Ledger counters after crediting this save
    streak: int
    longest_streak: int
    total_entries: int
    total_words: int
    distinct_moods: int
    distinct_predefined_moods: int
    balanced_moods: bool
    timed_sessions: int
    morning_entries: int
    evening_entries: int
    weekend_days: Tuple[int, ...] = ()
    entries_this_month: int
    gratitude_entries: int
    gratitude_streak: int
    total_xp: int
    level: int


class DailySaveResult(BaseModel):
    xp_gained: int = 0
    streak_now: int = 0
    new_achievements: List[AchievementDefinition] = Field(default_factory=list)
    credited: bool = False
    level: int = 1
    level_up: bool = False
    tier_changed: Optional[Tuple[LevelTier, LevelTier]] = None

    @property
    def new_achievement_ids(self) -> List[str]:
        return [a.id for a in self.new_achievements]


class AchievementsView(BaseModel):
    unlocked: List[AchievementDefinition]
    all_achievements: Dict[str, AchievementDefinition]
    mastery: Dict[AchievementCategory, MasteryProgress]


# ============================================
# PROGRESS LEDGER
# ============================================

class ProgressLedger(BaseModel):
    """Persisted per-user progress. Written only through the engine."""

    streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_save_date: Optional[dt.date] = None
    total_entries: int = Field(default=0, ge=0)
    total_xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    tier: LevelTier = LevelTier.SEED

    unlocked_ids: List[str] = Field(default_factory=list)
    mastery: Dict[AchievementCategory, MasteryProgress] = Field(default_factory=dict)
    catalog_version: Optional[str] = None

    # One entry per date that already received streak, entry and XP credit
    credited_dates: List[dt.date] = Field(default_factory=list)

    total_words: int = 0
    moods_seen: List[str] = Field(default_factory=list)
    timed_sessions: int = 0
    morning_entries: int = 0
    evening_entries: int = 0
    weekend_days: List[int] = Field(default_factory=list)
    month_key: Optional[str] = None
    entries_this_month: int = 0
    gratitude_entries: int = 0
    gratitude_streak: int = 0
    last_gratitude_date: Optional[dt.date] = None

    def is_credited(self, day: dt.date) -> bool:
        return day == self.last_save_date or day in self.credited_dates

    def is_unlocked(self, achievement_id: str) -> bool:
        return achievement_id in self.unlocked_ids

    def current_streak(self, on: dt.date) -> int:
        """Streak as seen on `on`: zero once a full day has been missed."""
        if self.last_save_date is None:
            return 0
        if day_distance(self.last_save_date, on) > 1:
            return 0
        return self.streak
