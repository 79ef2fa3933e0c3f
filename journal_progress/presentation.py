"""
Journal Progress Engine - Achievement Presentation Queue
Shows newly unlocked achievements one at a time, in catalog order.
"""

from typing import Optional, List, Iterator, Sequence

from .config import get_progress_config
from .models import AchievementDefinition


class AchievementQueue:
    """
    Ordered, one-at-a-time presentation of a save's new achievements.

    The screen shows `current` for `display_seconds`, then calls
    `advance()`. When `advance()` returns None the queue is done and
    normal navigation resumes. The queue never re-orders.
    """

    def __init__(
        self,
        achievements: Sequence[AchievementDefinition],
        display_seconds: Optional[float] = None
    ):
        self._items: List[AchievementDefinition] = list(achievements)
        self._index = 0
        if display_seconds is None:
            display_seconds = get_progress_config().popup_display_seconds
        self.display_seconds = display_seconds

    @property
    def current(self) -> Optional[AchievementDefinition]:
        if self._index < len(self._items):
            return self._items[self._index]
        return None

    @property
    def remaining(self) -> List[AchievementDefinition]:
        """Achievements still waiting behind the current one."""
        return self._items[self._index + 1:]

    @property
    def is_finished(self) -> bool:
        return self._index >= len(self._items)

    def advance(self) -> Optional[AchievementDefinition]:
        """Move to the next achievement; None means return to navigation."""
        if not self.is_finished:
            self._index += 1
        return self.current

    def total_duration(self) -> float:
        """Seconds until the whole queue has been shown."""
        return len(self._items) * self.display_seconds

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AchievementDefinition]:
        while not self.is_finished:
            achievement = self.current
            yield achievement
            self.advance()
