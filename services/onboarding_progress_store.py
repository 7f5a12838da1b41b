# -*- coding: utf-8 -*-
"""
Onboarding progress persistence.

Stores a versioned snapshot of the onboarding wizard in a durable local
key-value store so an interrupted flow resumes after a restart:

    {"version": "1.0.0", "currentStep": 1, "data": {...}, "savedAt": "..."}

Loading never fails: a missing, stale (other version) or malformed entry is
reported as "no saved progress", never as an error.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from PyQt5.QtCore import QSettings

from app.config import Config, OnboardingConfig
from models.onboarding import OnboardingData, OnboardingState
from services.exceptions import StorageException
from utils.logger import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Minimal durable string key-value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        pass

    @abstractmethod
    def remove(self, key: str):
        pass


class MemoryKeyValueStore(KeyValueStore):
    """In-process store (tests, or sessions that should not survive a restart)."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str):
        self._items[key] = value

    def remove(self, key: str):
        self._items.pop(key, None)


class QSettingsKeyValueStore(KeyValueStore):
    """
    Store backed by QSettings (registry / plist / ini, depending on platform).

    Args:
        settings: Preconfigured QSettings; defaults to the application's
                  organization/application scope from Config.
    """

    def __init__(self, settings: Optional[QSettings] = None):
        self._settings = settings if settings is not None else QSettings(
            Config.SETTINGS_ORGANIZATION, Config.SETTINGS_APPLICATION
        )

    def get(self, key: str) -> Optional[str]:
        value = self._settings.value(key, None)
        if value is None:
            return None
        return str(value)

    def set(self, key: str, value: str):
        self._settings.setValue(key, value)
        self._sync(key)

    def remove(self, key: str):
        self._settings.remove(key)
        self._sync(key)

    def _sync(self, key: str):
        self._settings.sync()
        if self._settings.status() != QSettings.NoError:
            raise StorageException(
                f"Settings storage not writable (status={self._settings.status()})",
                key=key,
            )


@dataclass(frozen=True)
class SavedProgress:
    """A decoded progress snapshot."""

    current_step: int
    data: OnboardingData
    saved_at: Optional[datetime] = None


class OnboardingProgressStore:
    """
    Reads and writes the onboarding progress snapshot.

    Args:
        backend: Key-value storage
        key: Storage key of the snapshot
        version: Schema version written with, and required on, every snapshot
    """

    def __init__(self, backend: KeyValueStore,
                 key: str = Config.ONBOARDING_STORAGE_KEY,
                 version: str = Config.ONBOARDING_STORAGE_VERSION):
        self.backend = backend
        self.key = key
        self.version = version

    @classmethod
    def for_config(cls, config: OnboardingConfig,
                   backend: Optional[KeyValueStore] = None) -> "OnboardingProgressStore":
        """Store for a flow configuration; QSettings-backed unless told otherwise."""
        return cls(
            backend if backend is not None else QSettingsKeyValueStore(),
            key=config.storage_key,
            version=config.storage_version,
        )

    def save(self, state: OnboardingState):
        """
        Persist the state's data and current step.

        Raises:
            StorageException: the snapshot could not be serialized or written
        """
        record = {
            "version": self.version,
            "currentStep": state.current_step,
            "data": state.data.to_dict(),
            "savedAt": datetime.now().isoformat(),
        }
        try:
            payload = json.dumps(record, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageException(f"Could not serialize onboarding progress: {e}",
                                   key=self.key, original_error=e)
        try:
            self.backend.set(self.key, payload)
        except StorageException:
            raise
        except Exception as e:
            raise StorageException(f"Could not write onboarding progress: {e}",
                                   key=self.key, original_error=e)
        logger.debug(f"Saved onboarding progress (step={state.current_step}, {len(payload)} bytes)")

    def load(self) -> Optional[SavedProgress]:
        """Return the saved snapshot, or None if absent, stale or malformed."""
        try:
            payload = self.backend.get(self.key)
        except Exception as e:
            logger.warning(f"Could not read onboarding progress: {e}")
            return None
        if not payload:
            return None

        try:
            record = json.loads(payload)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable onboarding progress: {e}")
            return None

        if not isinstance(record, dict):
            logger.warning("Discarding onboarding progress: not an object")
            return None
        if record.get("version") != self.version:
            logger.info(
                f"Ignoring onboarding progress saved with version "
                f"{record.get('version')!r} (current {self.version!r})"
            )
            return None

        current_step = record.get("currentStep", 0)
        data = record.get("data")
        if isinstance(current_step, bool) or not isinstance(current_step, int) or current_step < 0:
            logger.warning(f"Discarding onboarding progress: bad currentStep {current_step!r}")
            return None
        if not isinstance(data, dict):
            logger.warning("Discarding onboarding progress: data is not an object")
            return None

        saved_at = None
        if isinstance(record.get("savedAt"), str):
            try:
                saved_at = datetime.fromisoformat(record["savedAt"])
            except ValueError:
                saved_at = None

        return SavedProgress(
            current_step=current_step,
            data=OnboardingData.from_dict(data),
            saved_at=saved_at,
        )

    def clear(self):
        """
        Delete the snapshot.

        Raises:
            StorageException: the entry could not be removed
        """
        try:
            self.backend.remove(self.key)
        except StorageException:
            raise
        except Exception as e:
            raise StorageException(f"Could not clear onboarding progress: {e}",
                                   key=self.key, original_error=e)
        logger.debug("Cleared onboarding progress")
