"""
Centralized configuration module for application-wide settings.

All values come from environment variables (optionally loaded from a .env
file by the application factory) and are parsed once into immutable objects
so every component of the scheduling core sees the same working hours.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")


def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def _get_int(name: str, default: int, minimum: int, maximum: int) -> int:
    """Read an integer env var, falling back to the default when invalid."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid integer '{raw}' for {name}. Falling back to {default}.",
            extra={"context": {"setting": name, "value": raw}},
        )
        return default
    if value < minimum or value > maximum:
        logger.warning(
            f"{name}={value} outside [{minimum}, {maximum}]. Falling back to {default}.",
            extra={"context": {"setting": name, "value": value}},
        )
        return default
    return value


# ===========================
# Database Configuration
# ===========================


def get_database_url() -> str:
    """
    Get the database URL from environment variable.

    Environment Variables:
        DATABASE_URL: SQLAlchemy URL
            Default: 'sqlite:///./barbershop.db'
            Tests: 'sqlite:///:memory:'
    """
    return os.getenv("DATABASE_URL", "sqlite:///./barbershop.db")


# ===========================
# Scheduling Configuration
# ===========================


@dataclass(frozen=True)
class SchedulingConfig:
    """Working-day parameters shared by the conflict and availability logic."""

    workday_start_hour: int = 8
    workday_end_hour: int = 20
    slot_step_minutes: int = 15
    default_duration_minutes: int = 30
    clip_slots_at_closing: bool = False

    def __post_init__(self):
        if self.workday_end_hour <= self.workday_start_hour:
            raise ValueError("Workday must end after it starts")
        if self.slot_step_minutes <= 0:
            raise ValueError("Slot step must be positive")
        if self.default_duration_minutes <= 0:
            raise ValueError("Default duration must be positive")


def get_scheduling_config() -> SchedulingConfig:
    """
    Build the scheduling configuration from environment variables.

    Environment Variables:
        WORKDAY_START_HOUR: Opening hour (0-23). Default: 8
        WORKDAY_END_HOUR: Closing hour (1-24). Default: 20
        SLOT_STEP_MINUTES: Granularity of generated slots. Default: 15
        DEFAULT_DURATION_MINUTES: Duration used when none is given. Default: 30
        CLIP_SLOTS_AT_CLOSING: Drop slots that end after closing time.
            Default: 'false' (slots may run past closing)

    An inconsistent combination (end before start) falls back to the defaults.
    """
    try:
        return SchedulingConfig(
            workday_start_hour=_get_int("WORKDAY_START_HOUR", 8, 0, 23),
            workday_end_hour=_get_int("WORKDAY_END_HOUR", 20, 1, 24),
            slot_step_minutes=_get_int("SLOT_STEP_MINUTES", 15, 1, 240),
            default_duration_minutes=_get_int("DEFAULT_DURATION_MINUTES", 30, 1, 720),
            clip_slots_at_closing=_get_bool("CLIP_SLOTS_AT_CLOSING", "false"),
        )
    except ValueError as e:
        logger.warning(
            f"Inconsistent scheduling configuration: {e}. Using defaults.",
            extra={"context": {"component": "config"}},
        )
        return SchedulingConfig()


# ===========================
# Logging Configuration
# ===========================


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_to_file: bool = True
    use_json_format: bool = False
    enable_sql_echo: bool = False


def get_logging_config() -> LoggingConfig:
    """
    Environment Variables:
        LOG_LEVEL: Default 'INFO'
        LOG_TO_FILE: Default 'true'
        LOG_JSON: Default 'false'
        SQL_ECHO: Default 'false'
    """
    return LoggingConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_to_file=_get_bool("LOG_TO_FILE", "true"),
        use_json_format=_get_bool("LOG_JSON", "false"),
        enable_sql_echo=_get_bool("SQL_ECHO", "false"),
    )


def get_seed_sample_data() -> bool:
    """Whether the application factory seeds sample barbers and services."""
    return _get_bool("SEED_SAMPLE_DATA", "false")


def log_scheduling_config(config: SchedulingConfig) -> None:
    """
    Log the active scheduling configuration.

    Should be called during application startup to provide visibility
    into the working hours being used for slot generation.
    """
    logger.info(
        "Scheduling configuration initialized",
        extra={
            "context": {
                "workday_start_hour": config.workday_start_hour,
                "workday_end_hour": config.workday_end_hour,
                "slot_step_minutes": config.slot_step_minutes,
                "default_duration_minutes": config.default_duration_minutes,
                "clip_slots_at_closing": config.clip_slots_at_closing,
            }
        },
    )
