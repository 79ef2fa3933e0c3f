"""
Pytest Configuration and Fixtures

Shared fixtures for progress engine tests.
"""

from datetime import date

import pytest

from journal_progress.config import ProgressConfig, reload_config
from journal_progress.engine import ProgressEngine
from journal_progress.store import LedgerStore


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def progress_config():
    """Default XP rules, independent of the environment."""
    return ProgressConfig(
        _env_file=None,
        base_xp=10,
        predefined_mood_bonus=2,
        custom_mood_bonus=5,
        xp_per_level=100,
        popup_display_seconds=3.0,
    )


@pytest.fixture(autouse=True)
def fresh_config_cache():
    """Drop cached settings so env changes in one test do not leak."""
    reload_config()
    yield
    reload_config()


# =============================================================================
# Clock Fixtures
# =============================================================================

class FrozenClock:
    """Callable clock whose 'today' can be moved by tests."""

    def __init__(self, current: date):
        self.current = current

    def __call__(self) -> date:
        return self.current


@pytest.fixture
def clock():
    return FrozenClock(date(2024, 1, 1))


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def store():
    return LedgerStore()


@pytest.fixture
def engine(store, progress_config, clock):
    return ProgressEngine(store=store, config=progress_config, clock=clock)


@pytest.fixture
def save_data():
    """The reference save: 120 words, predefined mood, timer, 9pm."""
    return {
        "date": "2024-01-01",
        "mood_tagged": True,
        "word_count": 120,
        "mood": "calm",
        "used_timer": True,
        "entry_hour": 21,
    }


@pytest.fixture
def make_save(save_data):
    """Build save payloads that differ from the reference save."""
    def _make(**overrides):
        data = dict(save_data)
        data.update(overrides)
        return data
    return _make
