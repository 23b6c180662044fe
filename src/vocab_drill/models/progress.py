"""Learner progress aggregate root."""

from pydantic import Field, field_validator

from vocab_drill.models.base import DocumentModel, LocalDatetime
from vocab_drill.models.word_stat import WordStat

SCHEMA_VERSION = 2

DIFFICULTY_LEVELS = range(0, 6)


def _empty_histogram() -> dict[int, int]:
    return {level: 0 for level in DIFFICULTY_LEVELS}


class CategoryProgress(DocumentModel):
    """Accumulated session results for one category."""

    score: int = 0
    total_attempts: int = Field(default=0, ge=0)
    last_played: LocalDatetime | None = None


class ProgressStats(DocumentModel):
    """Session-level statistics."""

    total_sessions: int = Field(default=0, ge=0)
    total_practice_time: float = Field(default=0.0, ge=0)  # seconds
    accuracy_history: list[float] = Field(default_factory=list)  # percentages
    words_by_difficulty: dict[int, int] = Field(default_factory=_empty_histogram)
    last_session_date: LocalDatetime | None = None
    sessions_by_mode: dict[str, int] = Field(default_factory=dict)


class UnlockedAchievement(DocumentModel):
    """History entry written when an achievement unlocks."""

    id: str
    name: str
    description: str = ""
    icon: str = ""
    unlocked_at: LocalDatetime


class LearnerProgress(DocumentModel):
    """Everything the engine knows about one learner.

    ``learned_words`` and ``weak_words`` behave as insertion-ordered sets;
    use the helper methods rather than appending directly.
    """

    schema_version: int = SCHEMA_VERSION
    learned_words: list[str] = Field(default_factory=list)
    weak_words: list[str] = Field(default_factory=list)
    word_stats: dict[str, WordStat] = Field(default_factory=dict)
    category_progress: dict[str, CategoryProgress] = Field(default_factory=dict)
    total_score: int = 0
    streak: int = Field(default=0, ge=0)
    last_played: LocalDatetime | None = None
    achievements_unlocked: dict[str, LocalDatetime] = Field(default_factory=dict)
    achievements: list[UnlockedAchievement] = Field(default_factory=list)
    stats: ProgressStats = Field(default_factory=ProgressStats)

    @field_validator("learned_words", "weak_words")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    def is_learned(self, word_id: str) -> bool:
        return word_id in self.learned_words

    def is_weak(self, word_id: str) -> bool:
        return word_id in self.weak_words

    def add_learned(self, word_id: str) -> None:
        if word_id not in self.learned_words:
            self.learned_words.append(word_id)

    def discard_learned(self, word_id: str) -> None:
        if word_id in self.learned_words:
            self.learned_words.remove(word_id)

    def add_weak(self, word_id: str) -> None:
        if word_id not in self.weak_words:
            self.weak_words.append(word_id)

    def discard_weak(self, word_id: str) -> None:
        if word_id in self.weak_words:
            self.weak_words.remove(word_id)

    def refresh_difficulty_histogram(self) -> None:
        """Recount ``stats.words_by_difficulty`` from the word stats."""
        histogram = _empty_histogram()
        for stat in self.word_stats.values():
            histogram[stat.difficulty] += 1
        self.stats.words_by_difficulty = histogram
