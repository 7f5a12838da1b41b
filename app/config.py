# -*- coding: utf-8 -*-


from pathlib import Path
from dataclasses import dataclass
import os

from dotenv import load_dotenv

# ============================================================================
# Load .env file for local environment configuration
# ============================================================================
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


# ============================================================================
# Read settings from environment variables (from .env or system)
# ============================================================================
# API Settings
_API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080/api")
_API_TIMEOUT = int(os.getenv("API_TIMEOUT", "30"))

# Onboarding Settings
_ONBOARDING_AUTO_SAVE = _env_bool("ONBOARDING_AUTO_SAVE", "true")
_ONBOARDING_AUTO_SAVE_INTERVAL_MS = int(os.getenv("ONBOARDING_AUTO_SAVE_INTERVAL_MS", "30000"))
_ONBOARDING_ALLOW_SKIP = _env_bool("ONBOARDING_ALLOW_SKIP", "false")
_ONBOARDING_STRICT_VALIDATION = _env_bool("ONBOARDING_STRICT_VALIDATION", "false")
_ONBOARDING_REAL_TIME_VALIDATION = _env_bool("ONBOARDING_REAL_TIME_VALIDATION", "true")
_ONBOARDING_RESTORE_ON_START = _env_bool("ONBOARDING_RESTORE_ON_START", "true")

# Logging
_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
_LOG_TO_FILE = _env_bool("LOG_TO_FILE", "true")

# Local settings storage (QSettings)
_SETTINGS_ORGANIZATION = os.getenv("SETTINGS_ORGANIZATION", "WanderCrew")
_SETTINGS_APPLICATION = os.getenv("SETTINGS_APPLICATION", "WanderCrew Desktop")


@dataclass
class Config:
    """Application configuration."""

    # Application Info
    APP_NAME: str = "WanderCrew"
    APP_TITLE: str = "WanderCrew - Travel Together"
    VERSION: str = "1.0.0"
    ORGANIZATION: str = _SETTINGS_ORGANIZATION

    # HTTP API Backend Settings
    # Reads from .env file (API_BASE_URL, API_TIMEOUT)
    API_BASE_URL: str = _API_BASE_URL
    API_VERSION: str = "v1"
    API_TIMEOUT: int = _API_TIMEOUT

    # Onboarding Wizard
    ONBOARDING_AUTO_SAVE: bool = _ONBOARDING_AUTO_SAVE
    ONBOARDING_AUTO_SAVE_INTERVAL_MS: int = _ONBOARDING_AUTO_SAVE_INTERVAL_MS
    ONBOARDING_ALLOW_SKIP: bool = _ONBOARDING_ALLOW_SKIP
    ONBOARDING_STRICT_VALIDATION: bool = _ONBOARDING_STRICT_VALIDATION
    ONBOARDING_REAL_TIME_VALIDATION: bool = _ONBOARDING_REAL_TIME_VALIDATION
    ONBOARDING_RESTORE_ON_START: bool = _ONBOARDING_RESTORE_ON_START

    # Progress persistence
    # Bump ONBOARDING_STORAGE_VERSION whenever the stored data layout changes;
    # snapshots written by another version are ignored on load.
    ONBOARDING_STORAGE_KEY: str = "wandercrew-onboarding-progress"
    ONBOARDING_STORAGE_VERSION: str = "1.0.0"
    SETTINGS_ORGANIZATION: str = _SETTINGS_ORGANIZATION
    SETTINGS_APPLICATION: str = _SETTINGS_APPLICATION

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # Logging
    LOG_LEVEL: str = _LOG_LEVEL
    LOG_TO_FILE: bool = _LOG_TO_FILE
    LOG_FILE: str = "app.log"
    LOG_PATH: Path = LOGS_DIR / LOG_FILE
    LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT: int = 3

    # Date/Time Formats
    DATE_FORMAT: str = "%Y-%m-%d"
    DATETIME_FORMAT: str = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class OnboardingConfig:
    """
    Runtime configuration of one onboarding flow.

    Mirrors the onboarding section of Config; tests and embedding pages
    build their own instance instead of touching the class-level defaults.
    """

    auto_save: bool = True
    auto_save_interval_ms: int = 30000
    allow_skip: bool = False
    real_time_validation: bool = True
    strict_validation: bool = False
    restore_on_start: bool = True
    storage_key: str = "wandercrew-onboarding-progress"
    storage_version: str = "1.0.0"

    @classmethod
    def from_config(cls) -> "OnboardingConfig":
        """Build the flow configuration from the application Config."""
        return cls(
            auto_save=Config.ONBOARDING_AUTO_SAVE,
            auto_save_interval_ms=Config.ONBOARDING_AUTO_SAVE_INTERVAL_MS,
            allow_skip=Config.ONBOARDING_ALLOW_SKIP,
            real_time_validation=Config.ONBOARDING_REAL_TIME_VALIDATION,
            strict_validation=Config.ONBOARDING_STRICT_VALIDATION,
            restore_on_start=Config.ONBOARDING_RESTORE_ON_START,
            storage_key=Config.ONBOARDING_STORAGE_KEY,
            storage_version=Config.ONBOARDING_STORAGE_VERSION,
        )
