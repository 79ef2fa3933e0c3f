"""
Journal Progress Engine - Mood Vocabulary
Predefined mood chips, custom moods and their emotional valence.
"""

from enum import Enum
from typing import Optional, Dict, List

from pydantic import BaseModel, ConfigDict


# ============================================
# ENUMS
# ============================================

class Mood(str, Enum):
    """The fixed mood chips offered when tagging an entry."""
    CALM = "Calm"
    GRATEFUL = "Grateful"
    ANXIOUS = "Anxious"
    FOCUSED = "Focused"
    HAPPY = "Happy"
    REFLECTIVE = "Reflective"
    TIRED = "Tired"
    ENERGETIC = "Energetic"
    OPTIMISTIC = "Optimistic"
    OVERWHELMED = "Overwhelmed"


class MoodKind(str, Enum):
    PREDEFINED = "predefined"
    CUSTOM = "custom"


class MoodValence(str, Enum):
    PLEASANT = "pleasant"
    CHALLENGING = "challenging"


# ============================================
# MOOD CATEGORIES
# ============================================

# Wider mood wheel, used to place custom moods on the pleasant/challenging axis
MOOD_CATEGORIES: Dict[str, List[str]] = {
    "High Energy Pleasant": [
        "Excited", "Happy", "Motivated", "Grateful", "Confident",
        "Energetic", "Optimistic", "Determined",
    ],
    "Low Energy Pleasant": [
        "Calm", "Relaxed", "Content", "Peaceful", "Thoughtful",
        "Balanced", "Focused", "Reflective", "Hopeful", "Nostalgic",
    ],
    "High Energy Unpleasant": [
        "Anxious", "Stressed", "Frustrated", "Angry", "Overwhelmed", "Restless",
    ],
    "Low Energy Unpleasant": [
        "Sad", "Tired", "Lonely", "Bored", "Disappointed", "Exhausted",
    ],
}

_VALENCE_BY_MOOD: Dict[str, MoodValence] = {
    mood.lower(): (
        MoodValence.PLEASANT if category.endswith(" Pleasant") else MoodValence.CHALLENGING
    )
    for category, moods in MOOD_CATEGORIES.items()
    for mood in moods
}

_PREDEFINED_BY_KEY: Dict[str, Mood] = {mood.value.lower(): mood for mood in Mood}


# ============================================
# MOOD TAG
# ============================================

class MoodTag(BaseModel):
    """A classified mood value attached to an entry."""
    model_config = ConfigDict(frozen=True)

    kind: MoodKind
    value: str
    valence: Optional[MoodValence] = None

    @property
    def is_custom(self) -> bool:
        return self.kind == MoodKind.CUSTOM

    @property
    def key(self) -> str:
        """Identity used for mood diversity counting."""
        if self.kind == MoodKind.PREDEFINED:
            return self.value
        return self.value.lower()


def classify_mood(raw: Optional[str]) -> Optional[MoodTag]:
    """
    Classify a free-form mood string.

    Matching against the predefined chips is case-insensitive. Anything
    else that is not blank is a custom mood.

    Returns:
        The mood tag, or None when no mood was given
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None

    predefined = _PREDEFINED_BY_KEY.get(text.lower())
    if predefined is not None:
        return MoodTag(
            kind=MoodKind.PREDEFINED,
            value=predefined.value,
            valence=_VALENCE_BY_MOOD[predefined.value.lower()],
        )
    return MoodTag(
        kind=MoodKind.CUSTOM,
        value=text,
        valence=_VALENCE_BY_MOOD.get(text.lower()),
    )


def is_predefined(raw: Optional[str]) -> bool:
    tag = classify_mood(raw)
    return tag is not None and not tag.is_custom
