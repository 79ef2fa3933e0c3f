"""
Journal Progress Engine - Customization Unlock Resolver
Decides which cosmetic rewards (themes, fonts, gradients) a set of
achievements and a mastery snapshot make available. Never writes the ledger.
"""

from enum import Enum
from typing import Optional, Dict, Any, Iterable, Mapping, Tuple, FrozenSet

from pydantic import BaseModel, ConfigDict

from .achievements import definitions_by_id
from .models import AchievementCategory, MasteryProgress


# ============================================
# ENUMS
# ============================================

class UnlockType(str, Enum):
    DEFAULT = "default"
    ACHIEVEMENT = "achievement"
    MASTERY = "mastery"
    ANY_MASTERY = "any_mastery"


class CosmeticKind(str, Enum):
    THEME = "theme"
    FONT = "font"
    GRADIENT = "gradient"


# ============================================
# MODELS
# ============================================

class UnlockCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: UnlockType
    category: Optional[AchievementCategory] = None
    achievement_id: Optional[str] = None
    required: bool = True


class CosmeticDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CosmeticKind
    key: str
    name: str
    unlock_condition: UnlockCondition
    style: Tuple[Tuple[str, Any], ...] = ()


class CosmeticReward(BaseModel):
    """Identifier of one cosmetic the user may now select."""
    model_config = ConfigDict(frozen=True)

    kind: CosmeticKind
    key: str
    name: str


# ============================================
# COSMETIC DEFINITIONS
# ============================================

COSMETIC_DEFINITIONS = {
    CosmeticKind.THEME: {
        "default": {
            "name": "Default",
            "unlock": {"type": "default"},
            "style": {"primary": "#6366F1", "secondary": "#8B5CF6"},
        },
        "serene": {
            "name": "Serene",
            "unlock": {"type": "mastery", "category": "mindfulness"},
            "style": {"primary": "#10B981", "secondary": "#059669"},
        },
        "focused": {
            "name": "Focused",
            "unlock": {"type": "mastery", "category": "depth"},
            "style": {"primary": "#F59E0B", "secondary": "#D97706"},
        },
        "balanced": {
            "name": "Balanced",
            "unlock": {"type": "mastery", "category": "range"},
            "style": {"primary": "#8B5CF6", "secondary": "#7C3AED"},
        },
        "dedicated": {
            "name": "Dedicated",
            "unlock": {"type": "mastery", "category": "consistency"},
            "style": {"primary": "#EF4444", "secondary": "#DC2626"},
        },
        "grateful": {
            "name": "Grateful",
            "unlock": {"type": "mastery", "category": "gratitude"},
            "style": {"primary": "#EC4899", "secondary": "#DB2777"},
        },
    },
    CosmeticKind.FONT: {
        "default": {
            "name": "System Default",
            "unlock": {"type": "default"},
            "style": {"family": "System"},
        },
        "serene": {
            "name": "Serene Sans",
            "unlock": {"type": "achievement", "achievement_id": "mindful_starter"},
            "style": {"family": "System", "weight": "300"},
        },
        "focused": {
            "name": "Focused Mono",
            "unlock": {"type": "achievement", "achievement_id": "depth_1"},
            "style": {"family": "System", "weight": "600"},
        },
        "creative": {
            "name": "Creative Script",
            "unlock": {"type": "achievement", "achievement_id": "range_3"},
            "style": {"family": "System", "style": "italic"},
        },
    },
    CosmeticKind.GRADIENT: {
        "default": {
            "name": "Default Gradient",
            "unlock": {"type": "default"},
            "style": {"colors": ("#F8FAFC", "#F1F5F9", "#E2E8F0")},
        },
        "morning": {
            "name": "Morning Glow",
            "unlock": {"type": "achievement", "achievement_id": "early_bird"},
            "style": {"colors": ("#FFFBEB", "#FEF3C7", "#FDE68A")},
        },
        "evening": {
            "name": "Evening Calm",
            "unlock": {"type": "achievement", "achievement_id": "night_owl"},
            "style": {"colors": ("#F0F9FF", "#E0F2FE", "#BAE6FD")},
        },
        "mastery": {
            "name": "Mastery Glow",
            "unlock": {"type": "any_mastery"},
            "style": {"colors": ("#F0FDF4", "#DCFCE7", "#BBF7D0")},
        },
    },
}


def _build_cosmetics() -> Tuple[CosmeticDefinition, ...]:
    cosmetics = []
    for kind, items in COSMETIC_DEFINITIONS.items():
        for key, data in items.items():
            cosmetics.append(CosmeticDefinition(
                kind=kind,
                key=key,
                name=data["name"],
                unlock_condition=UnlockCondition(**data["unlock"]),
                style=tuple(data["style"].items()),
            ))
    return tuple(cosmetics)


COSMETICS: Tuple[CosmeticDefinition, ...] = _build_cosmetics()


# ============================================
# RESOLVER
# ============================================

def _is_mastered(entry: Any) -> bool:
    if isinstance(entry, MasteryProgress):
        return entry.unlocked
    if isinstance(entry, Mapping):
        return bool(entry.get("unlocked"))
    return False


def _normalize_mastery(mastery: Optional[Mapping[Any, Any]]) -> Dict[AchievementCategory, bool]:
    normalized = {}
    for category, entry in (mastery or {}).items():
        normalized[AchievementCategory(category)] = _is_mastered(entry)
    return normalized


def check_unlock_condition(
    condition: UnlockCondition,
    unlocked_ids: FrozenSet[str],
    mastered: Dict[AchievementCategory, bool]
) -> bool:
    if condition.type == UnlockType.DEFAULT:
        return True
    if condition.type == UnlockType.ACHIEVEMENT:
        return condition.achievement_id in unlocked_ids
    if condition.type == UnlockType.MASTERY:
        if condition.category is None:
            return False
        return mastered.get(condition.category, False) == condition.required
    if condition.type == UnlockType.ANY_MASTERY:
        return any(value == condition.required for value in mastered.values())
    return False


def resolve_unlocks(
    unlocked_ids: Iterable[str],
    mastery: Optional[Mapping[Any, Any]],
    already_unlocked: Iterable[CosmeticReward] = ()
) -> FrozenSet[CosmeticReward]:
    """
    Cosmetic rewards newly made available.

    Args:
        unlocked_ids: Achievement ids granted by one apply_daily_save call
        mastery: Mastery snapshot (MasteryProgress objects or plain dicts)
        already_unlocked: Rewards the user already owns; excluded from the result

    Returns:
        Rewards earned by the input that are not already owned. Default
        cosmetics are always owned and never reported.
    """
    ids = frozenset(unlocked_ids)
    mastered = _normalize_mastery(mastery)
    owned = {(reward.kind, reward.key) for reward in already_unlocked}

    return frozenset(
        CosmeticReward(kind=cosmetic.kind, key=cosmetic.key, name=cosmetic.name)
        for cosmetic in COSMETICS
        if cosmetic.unlock_condition.type != UnlockType.DEFAULT
        and (cosmetic.kind, cosmetic.key) not in owned
        and check_unlock_condition(cosmetic.unlock_condition, ids, mastered)
    )


def default_rewards() -> FrozenSet[CosmeticReward]:
    """Cosmetics every user owns from the start."""
    return frozenset(
        CosmeticReward(kind=cosmetic.kind, key=cosmetic.key, name=cosmetic.name)
        for cosmetic in COSMETICS
        if cosmetic.unlock_condition.type == UnlockType.DEFAULT
    )


def unlock_requirement(kind: CosmeticKind, key: str) -> str:
    """Human-readable requirement for a cosmetic, for locked items in the picker."""
    for cosmetic in COSMETICS:
        if cosmetic.kind != CosmeticKind(kind) or cosmetic.key != key:
            continue

        condition = cosmetic.unlock_condition
        if condition.type == UnlockType.DEFAULT:
            return "Available from the start"
        if condition.type == UnlockType.MASTERY and condition.category is not None:
            return f"Master {condition.category.value.capitalize()} category"
        if condition.type == UnlockType.ANY_MASTERY:
            return "Master any category"
        if condition.type == UnlockType.ACHIEVEMENT:
            achievement = definitions_by_id().get(condition.achievement_id)
            if achievement is not None:
                return f"Unlock {achievement.name} achievement"

    return "Complete achievements to unlock"
