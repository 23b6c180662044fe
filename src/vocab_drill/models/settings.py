"""Learner-facing preferences document."""

from enum import StrEnum
from typing import Any

from pydantic import ConfigDict, field_validator

from vocab_drill.models.base import DocumentModel

SESSION_SIZE_MIN = 5
SESSION_SIZE_MAX = 50
SPEED_MIN = 0.3
SPEED_MAX = 1.5


class DifficultyBand(StrEnum):
    """Which slice of a category a practice session draws from."""

    EASY = "easy"  # learned words only
    MEDIUM = "medium"  # everything, due words first
    HARD = "hard"  # unlearned or weak words


class LearnerSettings(DocumentModel):
    """Preferences stored next to the progress document.

    Keys this model does not know about are kept and written back untouched.
    """

    model_config = ConfigDict(extra="allow")

    pronunciation_speed: float = 0.8
    dark_mode: bool = False
    flashcard_count: int = 25
    game_difficulty: DifficultyBand = DifficultyBand.MEDIUM
    sound_effects: bool = True
    hints_enabled: bool = True
    keyboard_shortcuts: bool = True
    auto_pronounce: bool = True

    @field_validator("pronunciation_speed")
    @classmethod
    def _clamp_speed(cls, value: float) -> float:
        return min(SPEED_MAX, max(SPEED_MIN, value))

    @field_validator("flashcard_count")
    @classmethod
    def _clamp_count(cls, value: int) -> int:
        return min(SESSION_SIZE_MAX, max(SESSION_SIZE_MIN, value))

    @field_validator("game_difficulty", mode="before")
    @classmethod
    def _known_band(cls, value: Any) -> Any:
        if isinstance(value, str) and value in {band.value for band in DifficultyBand}:
            return value
        return DifficultyBand.MEDIUM
