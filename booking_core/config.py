"""
Centralized configuration with environment variable overrides.

Admission thresholds, storage behaviour and logging are configurable
here. Stage logic reads these values instead of hardcoding them.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class AdmissionConfig:
    """Thresholds used by the admission stages."""

    pricing_tolerance: float = _safe_float("PRICING_TOLERANCE", "0.01")
    timezone: str = os.getenv("BOOKING_TIMEZONE", "Africa/Nairobi")
    max_rating_score: int = _safe_int("MAX_RATING_SCORE", "5")


@dataclass(frozen=True)
class StorageConfig:
    """Settings for the storage collaborator."""

    query_timeout_sec: float = _safe_float("QUERY_TIMEOUT_SEC", "20.0")
    booking_ref_prefix: str = os.getenv("BOOKING_REF_PREFIX", "BK")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    admission: AdmissionConfig = field(default_factory=AdmissionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "booking-admission")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not 0.0 <= config.admission.pricing_tolerance < 1.0:
        raise ValueError(
            "PRICING_TOLERANCE must be between 0.0 and 1.0, "
            f"got {config.admission.pricing_tolerance}"
        )
    if config.admission.max_rating_score < 1:
        raise ValueError(
            f"MAX_RATING_SCORE must be >= 1, got {config.admission.max_rating_score}"
        )
    try:
        ZoneInfo(config.admission.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"BOOKING_TIMEZONE is not a known timezone: {config.admission.timezone!r}"
        ) from None
    if config.storage.query_timeout_sec <= 0:
        raise ValueError(
            f"QUERY_TIMEOUT_SEC must be > 0, got {config.storage.query_timeout_sec}"
        )
    if not config.storage.booking_ref_prefix.strip():
        raise ValueError("BOOKING_REF_PREFIX must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.service_name)
    return config


# Singleton instance
settings = load_config()
