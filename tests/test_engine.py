"""
Progress Engine Tests

Tests for apply_daily_save crediting, idempotency, streaks, XP, achievement
evaluation order, mastery and the read-only achievements view.
"""

from datetime import date, timedelta

import pytest

from journal_progress.achievements import all_definitions
from journal_progress.config import ProgressConfig
from journal_progress.engine import ProgressEngine
from journal_progress.exceptions import CatalogError, InvalidSaveError
from journal_progress.models import (
    AchievementCategory,
    DailySaveInput,
    LevelTier,
    ProgressLedger,
)
from journal_progress.store import LedgerStore


def _assert_mastery_consistent(engine):
    ledger = engine.store.snapshot()
    view = engine.get_achievements()
    for category in AchievementCategory:
        expected = sum(
            1 for code in ledger.unlocked_ids
            if code in view.all_achievements
            and view.all_achievements[code].category == category
        )
        assert view.mastery[category].progress == expected
        assert view.mastery[category].unlocked == (
            view.mastery[category].total > 0
            and expected == view.mastery[category].total
        )


# =============================================================================
# Reference Scenarios
# =============================================================================

class TestReferenceScenarios:
    """The worked examples for the first saves of an empty ledger."""

    def test_first_save(self, engine, save_data):
        result = engine.apply_daily_save(save_data)

        assert result.xp_gained == 12
        assert result.streak_now == 1
        assert result.credited is True
        assert engine.store.snapshot().total_entries == 1

    def test_next_day_extends_streak(self, engine, make_save):
        engine.apply_daily_save(make_save())
        result = engine.apply_daily_save(make_save(date="2024-01-02"))

        assert result.streak_now == 2

    def test_gap_resets_streak(self, engine, make_save):
        engine.apply_daily_save(make_save())
        engine.apply_daily_save(make_save(date="2024-01-02"))
        result = engine.apply_daily_save(make_save(date="2024-01-10"))

        assert result.streak_now == 1

    def test_resave_with_other_mood(self, engine, make_save):
        engine.apply_daily_save(make_save())
        before = engine.store.snapshot()

        result = engine.apply_daily_save(make_save(mood="Tired"))
        after = engine.store.snapshot()

        assert result.xp_gained == 0
        assert result.credited is False
        assert after.total_entries == before.total_entries
        assert after.total_xp == before.total_xp
        assert set(before.unlocked_ids) <= set(after.unlocked_ids)

    def test_first_save_unlocks_in_catalog_order(self, engine, save_data):
        result = engine.apply_daily_save(save_data)

        assert result.new_achievement_ids == ["entries_1", "depth_1", "mindful_starter"]


# =============================================================================
# Idempotency
# =============================================================================

class TestSameDayIdempotency:

    def test_last_save_date_alone_marks_day_credited(self, progress_config, clock, make_save):
        seeded = ProgressLedger(streak=1, last_save_date=date(2024, 1, 1),
                                total_entries=1, total_xp=12)
        engine = ProgressEngine(store=LedgerStore(seeded), config=progress_config, clock=clock)

        result = engine.apply_daily_save(make_save())
        ledger = engine.store.snapshot()

        assert result.xp_gained == 0
        assert result.credited is False
        assert ledger.total_entries == 1
        assert ledger.total_xp == 12
        assert ledger.streak == 1

    def test_repeated_saves_credit_once(self, engine, make_save):
        for words in (10, 300, 0, 75):
            engine.apply_daily_save(make_save(word_count=words, mood="Happy"))

        ledger = engine.store.snapshot()
        assert ledger.total_entries == 1
        assert ledger.total_xp == 12
        assert ledger.streak == 1
        assert ledger.credited_dates == [date(2024, 1, 1)]

    def test_refinement_reports_zero_delta(self, engine, make_save):
        engine.apply_daily_save(make_save())
        result = engine.apply_daily_save(make_save())

        assert result.xp_gained == 0
        assert result.streak_now == 1
        assert result.new_achievements == []

    def test_refinement_can_unlock_mood_achievements(self, engine, make_save):
        engine.apply_daily_save(make_save(mood="Calm"))

        second = engine.apply_daily_save(make_save(mood="Anxious"))
        third = engine.apply_daily_save(make_save(mood="Happy"))

        assert second.new_achievement_ids == ["balanced_perspective"]
        assert third.new_achievement_ids == ["range_3"]
        assert second.xp_gained == third.xp_gained == 0

    def test_refinement_uses_refined_word_count(self, engine, make_save):
        engine.apply_daily_save(make_save(word_count=20))
        result = engine.apply_daily_save(make_save(word_count=160))

        assert "depth_1" in result.new_achievement_ids
        assert "depth_2" in result.new_achievement_ids
        assert engine.store.snapshot().total_words == 20


# =============================================================================
# Streaks
# =============================================================================

class TestStreaks:

    def test_three_consecutive_days(self, engine, make_save):
        for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
            result = engine.apply_daily_save(make_save(date=day))

        assert result.streak_now == 3
        assert "streak_3" in result.new_achievement_ids

    def test_gap_of_one_day_resets(self, engine, make_save):
        for day in ("2024-01-01", "2024-01-02", "2024-01-04"):
            result = engine.apply_daily_save(make_save(date=day))

        assert result.streak_now == 1
        assert engine.store.snapshot().longest_streak == 2

    def test_backdated_save_leaves_streak_unchanged(self, engine, make_save):
        engine.apply_daily_save(make_save(date="2024-01-05"))
        engine.apply_daily_save(make_save(date="2024-01-06"))

        result = engine.apply_daily_save(make_save(date="2024-01-02"))
        ledger = engine.store.snapshot()

        assert result.streak_now == 2
        assert result.credited is True
        assert ledger.last_save_date == date(2024, 1, 6)
        assert ledger.total_entries == 3

    def test_backdated_save_is_credited_once(self, engine, make_save):
        engine.apply_daily_save(make_save(date="2024-01-05"))
        engine.apply_daily_save(make_save(date="2024-01-02"))
        engine.apply_daily_save(make_save(date="2024-01-02"))

        assert engine.store.snapshot().total_entries == 2

    def test_current_streak_follows_clock(self, engine, make_save, clock):
        assert engine.current_streak() == 0

        engine.apply_daily_save(make_save(date="2024-01-01"))
        engine.apply_daily_save(make_save(date="2024-01-02"))

        clock.current = date(2024, 1, 3)
        assert engine.current_streak() == 2

        clock.current = date(2024, 1, 4)
        assert engine.current_streak() == 0

    def test_month_of_daily_saves(self, engine, make_save):
        start = date(2024, 3, 1)
        for offset in range(30):
            result = engine.apply_daily_save(make_save(date=start + timedelta(days=offset)))

        assert result.streak_now == 30
        assert "streak_30" in result.new_achievement_ids


# =============================================================================
# XP & Levels
# =============================================================================

class TestExperience:

    def test_custom_mood_bonus(self, engine, make_save):
        result = engine.apply_daily_save(make_save(mood="Serene-ish"))
        assert result.xp_gained == 15

    def test_no_mood_tagged(self, engine, make_save):
        result = engine.apply_daily_save(make_save(mood_tagged=False, mood=None))
        assert result.xp_gained == 10

    def test_mood_ignored_when_not_tagged(self, engine, make_save):
        result = engine.apply_daily_save(make_save(mood_tagged=False, mood="Happy"))
        assert result.xp_gained == 10
        assert engine.store.snapshot().moods_seen == []

    def test_level_and_tier_progression(self, store, clock, make_save):
        config = ProgressConfig(_env_file=None, xp_per_level=10)
        engine = ProgressEngine(store=store, config=config, clock=clock)

        first = engine.apply_daily_save(make_save(date="2024-01-01"))
        second = engine.apply_daily_save(make_save(date="2024-01-02"))
        third = engine.apply_daily_save(make_save(date="2024-01-03"))

        assert (first.level, second.level, third.level) == (2, 3, 4)
        assert first.level_up and second.level_up and third.level_up
        assert first.tier_changed is None
        assert third.tier_changed == (LevelTier.SEED, LevelTier.SPROUT)

    def test_xp_never_decreases(self, engine, make_save):
        totals = []
        for day, mood in (("2024-01-01", "Calm"), ("2024-01-01", "x"),
                          ("2023-12-30", None), ("2024-01-04", "mine")):
            engine.apply_daily_save(make_save(date=day, mood=mood))
            totals.append(engine.store.snapshot().total_xp)

        assert totals == sorted(totals)
        assert totals[-1] == 12 + 10 + 15


# =============================================================================
# Achievement Evaluation
# =============================================================================

class TestAchievementEvaluation:

    def test_week_of_saves_unlocks_in_catalog_order(self, engine, make_save):
        # 2024-01-06 and 2024-01-07 are a Saturday and a Sunday
        results = {}
        for offset in range(7):
            day = date(2024, 1, 1) + timedelta(days=offset)
            results[day.day] = engine.apply_daily_save(make_save(
                date=day, word_count=10, used_timer=False, entry_hour=13,
            ))

        assert results[1].new_achievement_ids == ["entries_1"]
        assert results[3].new_achievement_ids == ["streak_3"]
        assert results[6].new_achievement_ids == ["weekend_warrior"]
        assert results[7].new_achievement_ids == ["streak_7", "weekly_rhythm", "weekend_writer"]

    def test_time_of_day_achievements(self, engine, make_save):
        early = engine.apply_daily_save(make_save(date="2024-01-01", entry_hour=6))
        late = engine.apply_daily_save(make_save(date="2024-01-02", entry_hour=23))

        assert "early_bird" in early.new_achievement_ids
        assert "night_owl" in late.new_achievement_ids

    def test_gratitude_streak(self, engine, make_save):
        for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
            result = engine.apply_daily_save(make_save(date=day, is_gratitude=True))

        ledger = engine.store.snapshot()
        assert ledger.gratitude_entries == 3
        assert ledger.gratitude_streak == 3
        assert "gratitude_streak_3" in result.new_achievement_ids

    def test_all_predefined_moods(self, engine, make_save):
        moods = ["Calm", "Grateful", "Anxious", "Focused", "Happy",
                 "Reflective", "Tired", "Energetic", "Optimistic", "Overwhelmed"]
        unlocked = []
        for mood in moods:
            unlocked += engine.apply_daily_save(make_save(mood=mood)).new_achievement_ids

        assert "range_7" in unlocked
        assert unlocked[-1] == "range_10"

    def test_unlocked_ids_only_grow(self, engine, make_save):
        previous = set()
        for day, hour, words in (("2024-01-01", 6, 10), ("2024-01-01", 23, 200),
                                 ("2024-01-02", 12, 0), ("2023-12-31", 22, 60)):
            engine.apply_daily_save(make_save(date=day, entry_hour=hour, word_count=words))
            current = set(engine.store.snapshot().unlocked_ids)
            assert previous <= current
            previous = current

    def test_mastery_stays_consistent(self, engine, make_save):
        start = date(2024, 1, 1)
        for offset in range(12):
            engine.apply_daily_save(make_save(
                date=start + timedelta(days=offset),
                entry_hour=(offset * 5) % 24,
                word_count=offset * 40,
                is_gratitude=offset % 2 == 0,
            ))
            _assert_mastery_consistent(engine)

    def test_category_mastery_unlocks(self, engine, make_save):
        start = date(2024, 1, 1)
        for offset in range(25):
            engine.apply_daily_save(make_save(
                date=start + timedelta(days=offset),
                entry_hour=6 if offset % 2 else 23,
            ))

        mastery = engine.get_achievements().mastery[AchievementCategory.MINDFULNESS]
        assert mastery.progress == mastery.total
        assert mastery.unlocked is True

    def test_identical_ledgers_give_identical_order(self, progress_config, clock, make_save):
        seed = ProgressLedger(streak=2, last_save_date=date(2023, 12, 31),
                              total_entries=9, credited_dates=[date(2023, 12, 31)],
                              unlocked_ids=["entries_1"])
        engines = [
            ProgressEngine(store=LedgerStore(seed.model_copy(deep=True)),
                           config=progress_config, clock=clock)
            for _ in range(2)
        ]

        results = [e.apply_daily_save(make_save(entry_hour=6)) for e in engines]

        assert results[0].new_achievement_ids == results[1].new_achievement_ids
        assert results[0].new_achievement_ids[:2] == ["streak_3", "entries_10"]


# =============================================================================
# Validation
# =============================================================================

class TestValidation:

    @pytest.mark.parametrize("overrides", [
        {"entry_hour": 24},
        {"entry_hour": -1},
        {"word_count": -5},
        {"date": "not-a-date"},
        {"unexpected": True},
    ])
    def test_invalid_input_rejected(self, engine, make_save, overrides):
        before = engine.store.snapshot()

        with pytest.raises(InvalidSaveError) as exc_info:
            engine.apply_daily_save(make_save(**overrides))

        assert exc_info.value.code == "INVALID_SAVE"
        assert engine.store.snapshot() == before

    def test_error_names_the_field(self, engine, make_save):
        with pytest.raises(InvalidSaveError) as exc_info:
            engine.apply_daily_save(make_save(entry_hour=30))

        assert set(exc_info.value.fields) & {"entry_hour", "entryHour"}

    def test_missing_required_field(self, engine):
        with pytest.raises(InvalidSaveError):
            engine.apply_daily_save(date="2024-01-01", word_count=5)

    def test_camel_case_payload(self, engine):
        result = engine.apply_daily_save({
            "date": "2024-01-01",
            "moodTagged": True,
            "wordCount": 120,
            "mood": "calm",
            "usedTimer": True,
            "entryHour": 21,
            "isGratitude": True,
        })

        assert result.xp_gained == 12
        assert engine.store.snapshot().gratitude_entries == 1

    def test_model_input_with_overrides(self, engine, save_data):
        save = DailySaveInput(**save_data)
        result = engine.apply_daily_save(save, date="2024-01-02")

        assert engine.store.snapshot().last_save_date == date(2024, 1, 2)
        assert result.streak_now == 1

    def test_datetime_string_date(self, engine, make_save):
        engine.apply_daily_save(make_save(date="2024-01-01T23:15:00"))
        assert engine.store.snapshot().last_save_date == date(2024, 1, 1)


# =============================================================================
# Reads
# =============================================================================

class TestGetAchievements:

    def test_empty_ledger(self, engine):
        view = engine.get_achievements()

        assert view.unlocked == []
        assert list(view.all_achievements) == [a.id for a in all_definitions()]
        assert set(view.mastery) == set(AchievementCategory)
        assert all(m.progress == 0 for m in view.mastery.values())

    def test_read_does_not_mutate(self, engine, save_data):
        engine.apply_daily_save(save_data)
        before = engine.store.snapshot()

        engine.get_achievements()
        engine.get_progress_summary()

        assert engine.store.snapshot() == before

    def test_unlocked_in_unlock_order(self, engine, save_data):
        engine.apply_daily_save(save_data)
        view = engine.get_achievements()

        assert [a.id for a in view.unlocked] == ["entries_1", "depth_1", "mindful_starter"]

    def test_summary(self, engine, save_data, clock):
        engine.apply_daily_save(save_data)
        summary = engine.get_progress_summary()

        assert summary["earned_achievements"] == 3
        assert summary["total_achievements"] == len(all_definitions())
        assert summary["streak"] == 1
        assert summary["total_xp"] == 12
        assert summary["xp_to_next_level"] == 88
        assert summary["by_tier"]["bronze"]["earned"] == 3


class TestCustomCatalog:

    def test_duplicate_ids_rejected(self, store, progress_config):
        first = all_definitions()[0]
        with pytest.raises(CatalogError):
            ProgressEngine(store=store, config=progress_config, catalog=[first, first])

    def test_catalog_change_rebuilds_mastery(self, store, progress_config, clock, save_data):
        ProgressEngine(store=store, config=progress_config, clock=clock).apply_daily_save(save_data)

        patterns_only = [a for a in all_definitions() if a.category == AchievementCategory.PATTERNS]
        engine = ProgressEngine(store=store, config=progress_config, clock=clock,
                                catalog=patterns_only, catalog_version="patterns-only")

        mastery = engine.get_achievements().mastery
        assert mastery[AchievementCategory.PATTERNS].progress == 1
        assert mastery[AchievementCategory.DEPTH].total == 0
