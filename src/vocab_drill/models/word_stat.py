"""Per-word learning statistics."""

from datetime import datetime

from pydantic import Field

from vocab_drill.models.base import DocumentModel, LocalDatetime


class WordStat(DocumentModel):
    """Correctness history and review schedule for one word."""

    correct_count: int = Field(default=0, ge=0)
    incorrect_count: int = Field(default=0, ge=0)
    difficulty: int = Field(default=0, ge=0, le=5)  # 0 = new, 5 = mastered
    last_reviewed: LocalDatetime | None = None
    next_review: LocalDatetime | None = None
    times_reviewed: int = Field(default=0, ge=0)

    @property
    def total_attempts(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def accuracy(self) -> float:
        """Share of correct answers (0.0 when never answered)."""
        if self.total_attempts == 0:
            return 0.0
        return self.correct_count / self.total_attempts

    def is_due(self, now: datetime) -> bool:
        """True once the scheduled review time has passed."""
        return self.next_review is not None and self.next_review <= now
