"""Engine facade used by game-mode front-ends."""

import json
import random
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

import structlog

from vocab_drill.config import Settings, get_settings
from vocab_drill.engine import aggregator, mastery, scheduler
from vocab_drill.engine.achievements import DEFAULT_ACHIEVEMENTS, Achievement, AchievementRegistry, evaluate
from vocab_drill.exceptions import InvalidImportBundle
from vocab_drill.logging_config import configure_logging
from vocab_drill.models.bundle import ExportBundle
from vocab_drill.models.progress import CategoryProgress, LearnerProgress
from vocab_drill.models.settings import DifficultyBand, LearnerSettings
from vocab_drill.models.vocabulary import Category, Word
from vocab_drill.storage.bundle import build_bundle, parse_bundle
from vocab_drill.storage.document_store import DocumentStore, JsonFileStore
from vocab_drill.storage.progress_repository import ProgressRepository
from vocab_drill.storage.settings_repository import SettingsRepository

logger = structlog.get_logger()


class DrillEngine:
    """Progress and mastery engine for one learner.

    Every mutating call is a single read-modify-write cycle against the
    progress repository. Calls must not overlap for the same learner.

    Args:
        progress_repo: Where the progress document lives.
        settings_repo: Where the learner settings live.
        achievements: Registry evaluated by :meth:`evaluate_achievements`.
        clock: Returns the current local time.
        rng: Random source for session shuffling.
        default_session_size: Session size used while the learner has not
            chosen a ``flashcardCount``.
    """

    def __init__(
        self,
        progress_repo: ProgressRepository,
        settings_repo: SettingsRepository,
        achievements: AchievementRegistry = DEFAULT_ACHIEVEMENTS,
        clock: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
        default_session_size: int = scheduler.DEFAULT_SESSION_SIZE,
    ):
        self.progress_repo = progress_repo
        self.settings_repo = settings_repo
        self.achievements = achievements
        self.clock = clock
        self.rng = rng or random.Random()
        self.default_session_size = default_session_size

    @classmethod
    def from_store(cls, store: DocumentStore, config: Settings | None = None, **kwargs: Any) -> "DrillEngine":
        """Build an engine whose documents share one store."""
        config = config or get_settings()
        kwargs.setdefault("default_session_size", config.default_session_size)
        return cls(
            ProgressRepository(store, key=config.progress_key),
            SettingsRepository(store, key=config.settings_key),
            **kwargs,
        )

    @classmethod
    def from_config(
        cls, config: Settings | None = None, *, setup_logging: bool = True, **kwargs: Any
    ) -> "DrillEngine":
        """Build an engine backed by JSON files in the configured data directory.

        Host applications call this once at startup; it also configures
        structlog from the same settings unless ``setup_logging`` is False.
        """
        config = config or get_settings()
        if setup_logging:
            configure_logging(json=config.log_json, level=config.log_level)
        logger.info("engine_configured", storage_dir=str(config.storage_dir))
        return cls.from_store(JsonFileStore(config.storage_dir), config, **kwargs)

    # Progress

    def get_progress(self) -> LearnerProgress:
        return self.progress_repo.load()

    def record_correct(self, word_id: str) -> None:
        now = self.clock()
        self.progress_repo.update(lambda p: mastery.record_correct(p, word_id, now))

    def record_incorrect(self, word_id: str) -> None:
        now = self.clock()
        self.progress_repo.update(lambda p: mastery.record_incorrect(p, word_id, now))

    def mark_learned(self, word_id: str) -> None:
        now = self.clock()
        self.progress_repo.update(lambda p: mastery.mark_learned(p, word_id, now))

    def record_session(
        self,
        category_id: str,
        score: int,
        *,
        correct: int | None = None,
        total: int | None = None,
        duration_seconds: float = 0.0,
        mode: str | None = None,
    ) -> CategoryProgress:
        """Record a finished session. See :func:`aggregator.record_session`."""
        now = self.clock()
        return self.progress_repo.update(
            lambda p: aggregator.record_session(
                p,
                category_id,
                score,
                now,
                correct=correct,
                total=total,
                duration_seconds=duration_seconds,
                mode=mode,
            )
        )

    def evaluate_achievements(self, categories: Sequence[Category]) -> list[Achievement]:
        """Unlock newly satisfied achievements; persists only if something unlocked."""
        progress = self.progress_repo.load()
        unlocked = evaluate(progress, categories, self.achievements, self.clock())
        if unlocked:
            self.progress_repo.save(progress)
        return unlocked

    def reset_progress(self) -> None:
        """Irreversibly clear all progress. Settings are kept."""
        self.progress_repo.reset()

    # Scheduling

    def get_words_for_review(self, words: Sequence[Word]) -> list[Word]:
        return scheduler.words_due_for_review(words, self.progress_repo.load(), self.clock())

    def select_session_words(
        self,
        words: Sequence[Word],
        *,
        weak_only: bool = False,
        band: DifficultyBand | None = None,
        session_size: int | None = None,
    ) -> list[Word]:
        """Pick a session's words.

        Band and size default to the learner settings; the size falls back to
        ``default_session_size`` while no ``flashcardCount`` is stored.
        """
        settings = self.settings_repo.load()
        if session_size is None:
            if "flashcard_count" in settings.model_fields_set:
                session_size = settings.flashcard_count
            else:
                session_size = self.default_session_size
        return scheduler.select_session_words(
            words,
            self.progress_repo.load(),
            band=band or settings.game_difficulty,
            weak_only=weak_only,
            session_size=session_size,
            now=self.clock(),
            rng=self.rng,
        )

    # Settings

    def get_settings(self) -> LearnerSettings:
        return self.settings_repo.load()

    def update_settings(self, **changes: Any) -> LearnerSettings:
        return self.settings_repo.update(**changes)

    # Export / import

    def export_bundle(self) -> ExportBundle:
        return build_bundle(self.progress_repo.load(), self.settings_repo.load(), self.clock())

    def export_json(self) -> str:
        return json.dumps(self.export_bundle().to_document(), indent=2, ensure_ascii=False)

    def import_bundle(self, data: str | bytes | dict[str, Any]) -> ExportBundle:
        """Replace progress and settings with the bundle's contents.

        Raises:
            InvalidImportBundle: The bundle is unusable; current state is untouched.
        """
        try:
            bundle = parse_bundle(data)
        except InvalidImportBundle as e:
            logger.warning("import_rejected", reason=str(e))
            raise
        self.progress_repo.save(bundle.progress)
        self.settings_repo.save(bundle.settings)
        logger.info(
            "import_completed",
            learned=len(bundle.progress.learned_words),
            export_date=bundle.export_date.isoformat(),
        )
        return bundle
