"""Load and save the learner settings document."""

from typing import Any

import structlog
from pydantic import ValidationError

from vocab_drill.exceptions import MalformedDocument, StorageUnavailable
from vocab_drill.models.settings import LearnerSettings
from vocab_drill.storage.document_store import DocumentStore

logger = structlog.get_logger()

SETTINGS_KEY = "settings"


class SettingsRepository:
    """Settings persistence with default-filling and graceful fallback."""

    def __init__(self, store: DocumentStore, key: str = SETTINGS_KEY):
        self.store = store
        self.key = key

    def load(self) -> LearnerSettings:
        try:
            raw = self.store.load(self.key)
        except (StorageUnavailable, MalformedDocument) as e:
            logger.warning("settings_load_failed", key=self.key, error=str(e))
            return LearnerSettings()
        if raw is None:
            return LearnerSettings()
        try:
            return LearnerSettings.model_validate(raw)
        except ValidationError as e:
            logger.warning("settings_document_invalid", key=self.key, error=str(e))
            return LearnerSettings()

    def save(self, settings: LearnerSettings) -> bool:
        try:
            self.store.save(self.key, settings.to_document())
        except StorageUnavailable as e:
            logger.warning("settings_save_dropped", key=self.key, error=e.reason)
            return False
        return True

    def update(self, **changes: Any) -> LearnerSettings:
        """Apply changes (snake_case or camelCase keys) and persist."""
        current = self.load().to_document()
        fields = LearnerSettings.model_fields
        for key, value in changes.items():
            if key in fields:
                key = fields[key].alias or key
            current[key] = value
        settings = LearnerSettings.model_validate(current)
        self.save(settings)
        return settings

    def reset(self) -> None:
        try:
            self.store.delete(self.key)
        except StorageUnavailable as e:
            logger.warning("settings_reset_failed", key=self.key, error=e.reason)
