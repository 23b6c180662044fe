"""Load and save the learner progress document."""

from collections.abc import Callable
from typing import TypeVar

import structlog

from vocab_drill.exceptions import MalformedDocument, StorageUnavailable
from vocab_drill.models.progress import LearnerProgress
from vocab_drill.storage.document_store import DocumentStore
from vocab_drill.storage.migration import migrate

logger = structlog.get_logger()

PROGRESS_KEY = "progress"

T = TypeVar("T")


class ProgressRepository:
    """Reads, migrates and writes the single progress document.

    Storage problems never propagate: unreadable or corrupt documents load
    as a fresh learner, and failed writes are logged and dropped.

    Args:
        store: Persistence transport.
        key: Document key inside the store.
    """

    def __init__(self, store: DocumentStore, key: str = PROGRESS_KEY):
        self.store = store
        self.key = key

    def load(self) -> LearnerProgress:
        try:
            raw = self.store.load(self.key)
        except StorageUnavailable as e:
            logger.warning("progress_load_unavailable", key=self.key, error=e.reason)
            return LearnerProgress()
        except MalformedDocument as e:
            logger.warning("progress_document_malformed", key=self.key, error=e.reason)
            return LearnerProgress()
        if raw is None:
            return LearnerProgress()
        try:
            return migrate(raw)
        except MalformedDocument as e:
            logger.warning("progress_document_invalid", key=self.key, error=e.reason)
            return LearnerProgress()

    def save(self, progress: LearnerProgress) -> bool:
        """Persist ``progress``. Returns False if the write was dropped."""
        progress.refresh_difficulty_histogram()
        try:
            self.store.save(self.key, progress.to_document())
        except StorageUnavailable as e:
            logger.warning("progress_save_dropped", key=self.key, error=e.reason)
            return False
        return True

    def update(self, mutate: Callable[[LearnerProgress], T]) -> T:
        """Run one read-modify-write cycle and return ``mutate``'s result."""
        progress = self.load()
        result = mutate(progress)
        self.save(progress)
        return result

    def reset(self) -> None:
        """Delete the stored document so the next load starts fresh."""
        try:
            self.store.delete(self.key)
        except StorageUnavailable as e:
            logger.warning("progress_reset_failed", key=self.key, error=e.reason)
            return
        logger.info("progress_reset", key=self.key)
