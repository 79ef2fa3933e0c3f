"""
Journal Progress Engine - XP & Levels
XP award for a save, the level step table and level tiers.
"""

from typing import Optional, List, Tuple

from .models import LevelTier
from .moods import MoodTag


# Highest level (inclusive) that still belongs to each tier
LEVEL_TIERS: List[Tuple[int, LevelTier]] = [
    (3, LevelTier.SEED),
    (6, LevelTier.SPROUT),
    (9, LevelTier.BLOOM),
    (12, LevelTier.GROVE),
]


def xp_for_save(
    mood: Optional[MoodTag],
    base_xp: int = 10,
    predefined_mood_bonus: int = 2,
    custom_mood_bonus: int = 5
) -> int:
    """
    XP awarded for the first save of a date.

    Args:
        mood: Classified mood, or None when no mood was tagged
        base_xp: Award for any credited save
        predefined_mood_bonus: Bonus for picking one of the mood chips
        custom_mood_bonus: Bonus for writing a mood of one's own

    Returns:
        Total XP for the save
    """
    xp = base_xp
    if mood is not None:
        xp += custom_mood_bonus if mood.is_custom else predefined_mood_bonus
    return xp


def level_for_xp(total_xp: int, xp_per_level: int = 100) -> int:
    """Level reached at `total_xp`. Never decreases as XP grows."""
    if total_xp <= 0:
        return 1
    return total_xp // xp_per_level + 1


def xp_to_next_level(total_xp: int, xp_per_level: int = 100) -> int:
    next_threshold = level_for_xp(total_xp, xp_per_level) * xp_per_level
    return next_threshold - max(total_xp, 0)


def tier_for_level(level: int) -> LevelTier:
    for ceiling, tier in LEVEL_TIERS:
        if level <= ceiling:
            return tier
    return LevelTier.AURORA
