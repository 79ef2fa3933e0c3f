"""
Journal Progress Engine - Configuration Management
Supports .env files and runtime configuration for XP rules, presentation and storage.
"""

from typing import Dict, Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache


# ============================================
# PROGRESS CONFIGURATION
# ============================================

class ProgressConfig(BaseSettings):
    """XP award and level progression rules."""

    base_xp: int = Field(
        default=10,
        ge=0,
        description="XP awarded for the first save of a date"
    )
    predefined_mood_bonus: int = Field(
        default=2,
        ge=0,
        description="Bonus XP when one of the predefined mood chips is tagged"
    )
    custom_mood_bonus: int = Field(
        default=5,
        ge=0,
        description="Bonus XP when a custom mood is written"
    )
    xp_per_level: int = Field(
        default=100,
        ge=1,
        description="XP needed to advance one level"
    )
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone used to decide 'today' (system local time when unset)"
    )
    popup_display_seconds: float = Field(
        default=3.0,
        gt=0.0,
        le=30.0,
        description="How long each unlocked achievement is shown before advancing"
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value

    model_config = {
        "env_prefix": "PROGRESS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }


# ============================================
# STORAGE CONFIGURATION
# ============================================

class StorageConfig(BaseSettings):
    """Where the progress ledger is persisted."""

    ledger_path: Optional[str] = Field(
        default=None,
        description="JSON file holding the ledger (in-memory only when unset)"
    )

    model_config = {
        "env_prefix": "STORAGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }


# ============================================
# LOGGING CONFIGURATION
# ============================================

class LoggingConfig(BaseSettings):
    level: str = Field(
        default="INFO",
        description="Log level for the journal_progress logger"
    )
    log_dir: Optional[str] = Field(
        default=None,
        description="Directory for the rotating log file (console only when unset)"
    )

    model_config = {
        "env_prefix": "LOG_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }


# ============================================
# CACHED CONFIGURATION INSTANCES
# ============================================

@lru_cache()
def get_progress_config() -> ProgressConfig:
    """Get cached progress configuration instance."""
    return ProgressConfig()


@lru_cache()
def get_storage_config() -> StorageConfig:
    """Get cached storage configuration instance."""
    return StorageConfig()


@lru_cache()
def get_logging_config() -> LoggingConfig:
    """Get cached logging configuration instance."""
    return LoggingConfig()


def reload_config():
    """Clear configuration cache and reload from environment."""
    get_progress_config.cache_clear()
    get_storage_config.cache_clear()
    get_logging_config.cache_clear()


# ============================================
# CONFIGURATION SUMMARY
# ============================================

def get_config_summary() -> Dict[str, Any]:
    """
    Get a summary of all configuration values.
    Useful for debugging and settings display.
    """
    progress = get_progress_config()
    storage = get_storage_config()
    logging_config = get_logging_config()

    return {
        "progress": {
            "base_xp": progress.base_xp,
            "mood_bonus": {
                "predefined": progress.predefined_mood_bonus,
                "custom": progress.custom_mood_bonus,
            },
            "xp_per_level": progress.xp_per_level,
            "timezone": progress.timezone or "local",
            "popup_display_seconds": progress.popup_display_seconds,
        },
        "storage": {
            "ledger_path": storage.ledger_path,
            "persistent": bool(storage.ledger_path),
        },
        "logging": {
            "level": logging_config.level,
            "log_dir": logging_config.log_dir,
        },
    }
