"""
Journal Progress Engine - Progress & Achievement Engine
Credits daily saves (streak, XP, level) and unlocks achievements.
"""

import datetime as dt
import logging
from typing import Optional, Dict, Any, Callable, Iterable, Mapping, Union

from pydantic import ValidationError

from .achievements import (
    CATALOG_VERSION,
    all_definitions,
    build_mastery,
    mastery_for,
)
from .clock import day_distance, is_weekend, month_key, today
from .config import ProgressConfig, get_progress_config
from .exceptions import CatalogError, InvalidSaveError
from .leveling import level_for_xp, tier_for_level, xp_for_save, xp_to_next_level
from .models import (
    AchievementDefinition,
    AchievementsView,
    AchievementTier,
    DailySaveInput,
    DailySaveResult,
    EvaluationContext,
    ProgressLedger,
)
from .moods import Mood, MoodTag, MoodValence, classify_mood
from .store import LedgerStore, create_store

logger = logging.getLogger(__name__)

_PREDEFINED_MOODS = {mood.value for mood in Mood}


class ProgressEngine:
    """
    Owner of the progress ledger.

    `apply_daily_save` is the only way the ledger changes; every other
    caller reads through `get_achievements` or the store's snapshots.
    """

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        catalog: Optional[Iterable[AchievementDefinition]] = None,
        config: Optional[ProgressConfig] = None,
        clock: Optional[Callable[[], dt.date]] = None,
        catalog_version: str = CATALOG_VERSION
    ):
        self.config = config or get_progress_config()
        self.store = store if store is not None else create_store()
        self.catalog = tuple(catalog) if catalog is not None else all_definitions()
        self.catalog_version = catalog_version
        self._clock = clock or (lambda: today(self.config.timezone))

        seen = set()
        for achievement in self.catalog:
            if achievement.id in seen:
                raise CatalogError("Duplicate achievement id", achievement.id)
            seen.add(achievement.id)

    # ============================================
    # MUTATION
    # ============================================

    def apply_daily_save(
        self,
        save: Union[DailySaveInput, Mapping[str, Any], None] = None,
        **fields: Any
    ) -> DailySaveResult:
        """
        Credit a completed journal entry and evaluate achievements.

        Accepts a DailySaveInput, a mapping with the same keys (snake_case
        or camelCase), keyword arguments, or a mix of these.

        Returns:
            DailySaveResult with the XP gained, the streak and the newly
            unlocked achievements in catalog order

        Raises:
            InvalidSaveError: If the input fails validation. Nothing is
                written in that case.
        """
        save_input = self._validate(save, fields)
        return self.store.apply(lambda ledger: self._apply(ledger, save_input))

    @staticmethod
    def _validate(
        save: Union[DailySaveInput, Mapping[str, Any], None],
        fields: Dict[str, Any]
    ) -> DailySaveInput:
        if isinstance(save, DailySaveInput) and not fields:
            return save

        if isinstance(save, DailySaveInput):
            data = save.model_dump()
        else:
            data = dict(save or {})
        data.update(fields)

        try:
            return DailySaveInput.model_validate(data)
        except ValidationError as e:
            raise InvalidSaveError(
                f"Invalid daily save input ({e.error_count()} error(s))",
                errors=e.errors(include_url=False, include_context=False),
            ) from e

    def _apply(self, ledger: ProgressLedger, save: DailySaveInput) -> DailySaveResult:
        self._sync_catalog(ledger)

        mood = classify_mood(save.mood) if save.mood_tagged else None
        previous_level = ledger.level
        previous_tier = ledger.tier

        xp_gained = 0
        credited = not ledger.is_credited(save.date)
        if credited:
            self._credit_streak(ledger, save.date)
            self._credit_counters(ledger, save)
            xp_gained = xp_for_save(
                mood,
                base_xp=self.config.base_xp,
                predefined_mood_bonus=self.config.predefined_mood_bonus,
                custom_mood_bonus=self.config.custom_mood_bonus,
            )
            ledger.total_xp += xp_gained
            ledger.level = max(ledger.level, level_for_xp(ledger.total_xp, self.config.xp_per_level))
            ledger.tier = tier_for_level(ledger.level)
            ledger.credited_dates.append(save.date)
            logger.info(
                f"Credited {save.date.isoformat()}: +{xp_gained} XP, "
                f"streak {ledger.streak}, entries {ledger.total_entries}"
            )
        else:
            logger.debug(f"Refinement of already credited {save.date.isoformat()}")

        if mood is not None and mood.key not in ledger.moods_seen:
            ledger.moods_seen.append(mood.key)

        context = self._build_context(ledger, save, mood)
        new_achievements = [
            achievement for achievement in self.catalog
            if not ledger.is_unlocked(achievement.id) and achievement.is_met(context)
        ]

        for achievement in new_achievements:
            ledger.unlocked_ids.append(achievement.id)
        for category in {a.category for a in new_achievements}:
            ledger.mastery[category] = mastery_for(category, ledger.unlocked_ids, self.catalog)

        if new_achievements:
            logger.info(f"Unlocked: {', '.join(a.id for a in new_achievements)}")

        return DailySaveResult(
            xp_gained=xp_gained,
            streak_now=ledger.streak,
            new_achievements=new_achievements,
            credited=credited,
            level=ledger.level,
            level_up=ledger.level > previous_level,
            tier_changed=(previous_tier, ledger.tier) if ledger.tier != previous_tier else None,
        )

    def _sync_catalog(self, ledger: ProgressLedger) -> None:
        """Rebuild mastery when the ledger was written against another catalog."""
        if ledger.catalog_version == self.catalog_version and ledger.mastery:
            return
        ledger.mastery = build_mastery(ledger.unlocked_ids, self.catalog)
        ledger.catalog_version = self.catalog_version

    @staticmethod
    def _credit_streak(ledger: ProgressLedger, day: dt.date) -> None:
        if ledger.last_save_date is None:
            ledger.streak = 1
            ledger.last_save_date = day
        else:
            distance = day_distance(ledger.last_save_date, day)
            if distance == 1:
                ledger.streak += 1
            elif distance > 1:
                ledger.streak = 1
            # distance < 0: back-dated, the run ending at last_save_date is unchanged
            ledger.last_save_date = max(ledger.last_save_date, day)

        ledger.total_entries += 1
        ledger.longest_streak = max(ledger.longest_streak, ledger.streak)

    @staticmethod
    def _credit_counters(ledger: ProgressLedger, save: DailySaveInput) -> None:
        ledger.total_words += save.word_count

        if save.used_timer:
            ledger.timed_sessions += 1

        if 5 <= save.entry_hour < 12:
            ledger.morning_entries += 1
        elif save.entry_hour >= 21 or save.entry_hour < 5:
            ledger.evening_entries += 1

        weekday = save.date.weekday()
        if is_weekend(save.date) and weekday not in ledger.weekend_days:
            ledger.weekend_days = sorted(ledger.weekend_days + [weekday])

        key = month_key(save.date)
        if ledger.month_key is None or key > ledger.month_key:
            ledger.month_key = key
            ledger.entries_this_month = 1
        elif key == ledger.month_key:
            ledger.entries_this_month += 1

        if save.is_gratitude:
            ledger.gratitude_entries += 1
            if ledger.last_gratitude_date is None:
                ledger.gratitude_streak = 1
                ledger.last_gratitude_date = save.date
            else:
                distance = day_distance(ledger.last_gratitude_date, save.date)
                if distance == 1:
                    ledger.gratitude_streak += 1
                elif distance > 1:
                    ledger.gratitude_streak = 1
                ledger.last_gratitude_date = max(ledger.last_gratitude_date, save.date)

    @staticmethod
    def _build_context(
        ledger: ProgressLedger,
        save: DailySaveInput,
        mood: Optional[MoodTag]
    ) -> EvaluationContext:
        valences = set()
        for key in ledger.moods_seen:
            tag = classify_mood(key)
            if tag is not None and tag.valence is not None:
                valences.add(tag.valence)

        return EvaluationContext(
            date=save.date,
            weekday=save.date.weekday(),
            is_weekend=is_weekend(save.date),
            mood_tagged=save.mood_tagged,
            word_count=save.word_count,
            mood=mood.value if mood else None,
            mood_kind=mood.kind if mood else None,
            used_timer=save.used_timer,
            entry_hour=save.entry_hour,
            is_gratitude=save.is_gratitude,
            streak=ledger.streak,
            longest_streak=ledger.longest_streak,
            total_entries=ledger.total_entries,
            total_words=ledger.total_words,
            distinct_moods=len(ledger.moods_seen),
            distinct_predefined_moods=sum(1 for key in ledger.moods_seen if key in _PREDEFINED_MOODS),
            balanced_moods={MoodValence.PLEASANT, MoodValence.CHALLENGING} <= valences,
            timed_sessions=ledger.timed_sessions,
            morning_entries=ledger.morning_entries,
            evening_entries=ledger.evening_entries,
            weekend_days=tuple(ledger.weekend_days),
            entries_this_month=ledger.entries_this_month,
            gratitude_entries=ledger.gratitude_entries,
            gratitude_streak=ledger.gratitude_streak,
            total_xp=ledger.total_xp,
            level=ledger.level,
        )

    # ============================================
    # READS
    # ============================================

    def get_achievements(self) -> AchievementsView:
        """Unlocked achievements, the full catalog and mastery. Read-only."""
        ledger = self.store.snapshot()
        by_id = {a.id: a for a in self.catalog}

        if ledger.catalog_version == self.catalog_version and ledger.mastery:
            mastery = ledger.mastery
        else:
            mastery = build_mastery(ledger.unlocked_ids, self.catalog)

        return AchievementsView(
            unlocked=[by_id[code] for code in ledger.unlocked_ids if code in by_id],
            all_achievements=by_id,
            mastery=mastery,
        )

    def current_streak(self) -> int:
        """Streak as of today; zero once a full day has been missed."""
        return self.store.snapshot().current_streak(self._clock())

    def get_progress_summary(self) -> Dict[str, Any]:
        """Summary statistics for the achievements and stats screens."""
        ledger = self.store.snapshot()
        view = self.get_achievements()

        total = len(self.catalog)
        earned = len(view.unlocked)
        unlocked = {a.id for a in view.unlocked}

        by_tier = {}
        for tier in AchievementTier:
            in_tier = [a for a in self.catalog if a.tier == tier]
            by_tier[tier.value] = {
                "total": len(in_tier),
                "earned": sum(1 for a in in_tier if a.id in unlocked),
            }

        return {
            "total_achievements": total,
            "earned_achievements": earned,
            "completion_percent": round(earned / total * 100, 1) if total > 0 else 0,
            "by_category": {
                category.value: progress.model_dump()
                for category, progress in view.mastery.items()
            },
            "by_tier": by_tier,
            "streak": ledger.current_streak(self._clock()),
            "longest_streak": ledger.longest_streak,
            "total_entries": ledger.total_entries,
            "total_xp": ledger.total_xp,
            "level": ledger.level,
            "tier": ledger.tier.value,
            "xp_to_next_level": xp_to_next_level(ledger.total_xp, self.config.xp_per_level),
        }
