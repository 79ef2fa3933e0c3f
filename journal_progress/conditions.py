"""
Journal Progress Engine - Condition Operators
Comparison functions that achievement rows refer to by name.
"""

from typing import Any, Callable, Dict, Iterable


def at_least(value: Any, target: Any) -> bool:
    return value is not None and value >= target


def at_most(value: Any, target: Any) -> bool:
    return value is not None and value <= target


def equals(value: Any, target: Any) -> bool:
    return value is not None and value == target


def truthy(value: Any, target: Any = None) -> bool:
    return bool(value)


def includes_all(value: Iterable, target: Iterable) -> bool:
    """True when every item of `target` appears in `value`."""
    if value is None:
        return False
    present = set(value)
    return all(item in present for item in target)


# Operator names used in ACHIEVEMENT_DEFINITIONS rows
OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "gte": at_least,
    "lte": at_most,
    "eq": equals,
    "is_true": truthy,
    "contains_all": includes_all,
}
