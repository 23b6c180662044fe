"""Achievement rules and their evaluation."""

from collections.abc import Callable, Iterable, Iterator, Sequence
from datetime import datetime

import structlog
from pydantic import BaseModel, ConfigDict, Field

from vocab_drill.exceptions import ConditionEvaluationError
from vocab_drill.models.progress import LearnerProgress, UnlockedAchievement
from vocab_drill.models.vocabulary import Category

logger = structlog.get_logger()

Condition = Callable[[LearnerProgress, Sequence[Category]], bool]


class Achievement(BaseModel):
    """A named goal and the predicate that decides whether it is met."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    icon: str = ""
    condition: Condition = Field(exclude=True, repr=False)


class AchievementRegistry:
    """Immutable, ordered set of achievements keyed by ID."""

    def __init__(self, achievements: Iterable[Achievement]):
        items = tuple(achievements)
        ids = [a.id for a in items]
        duplicates = {i for i in ids if ids.count(i) > 1}
        if duplicates:
            raise ValueError(f"Duplicate achievement ids: {sorted(duplicates)}")
        self._items = items
        self._by_id = {a.id: a for a in items}

    def __iter__(self) -> Iterator[Achievement]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, achievement_id: str) -> Achievement | None:
        return self._by_id.get(achievement_id)


def _category_completed(progress: LearnerProgress, categories: Sequence[Category]) -> bool:
    learned = set(progress.learned_words)
    return any(c.words and c.word_ids <= learned for c in categories)


DEFAULT_ACHIEVEMENTS = AchievementRegistry([
    Achievement(
        id="first_steps",
        name="First Steps",
        description="Complete your first learning session",
        icon="👶",
        condition=lambda p, _: p.stats.total_sessions >= 1,
    ),
    Achievement(
        id="week_warrior",
        name="Week Warrior",
        description="Maintain a 7-day streak",
        icon="🔥",
        condition=lambda p, _: p.streak >= 7,
    ),
    Achievement(
        id="month_master",
        name="Month Master",
        description="Maintain a 30-day streak",
        icon="🏆",
        condition=lambda p, _: p.streak >= 30,
    ),
    Achievement(
        id="category_master",
        name="Category Master",
        description="Master 100% of words in any category",
        icon="⭐",
        condition=_category_completed,
    ),
    Achievement(
        id="word_collector",
        name="Word Collector",
        description="Learn 50 words",
        icon="📚",
        condition=lambda p, _: len(p.learned_words) >= 50,
    ),
    Achievement(
        id="word_master",
        name="Word Master",
        description="Learn 100 words",
        icon="👑",
        condition=lambda p, _: len(p.learned_words) >= 100,
    ),
    Achievement(
        id="perfect_score",
        name="Perfect Score",
        description="Score 100% in any quiz",
        icon="💯",
        condition=lambda p, _: any(acc >= 100 for acc in p.stats.accuracy_history),
    ),
    Achievement(
        id="speed_demon",
        name="Speed Demon",
        description="Complete a quiz in under 2 minutes",
        icon="⚡",
        # Per-session durations are not kept, only the running total
        condition=lambda p, _: False,
    ),
    Achievement(
        id="flashcard_fanatic",
        name="Flashcard Fanatic",
        description="Complete 50 flashcard sessions",
        icon="🃏",
        condition=lambda p, _: p.stats.sessions_by_mode.get("flashcard", 0) >= 50,
    ),
    Achievement(
        id="quiz_whiz",
        name="Quiz Whiz",
        description="Complete 50 quiz sessions",
        icon="❓",
        condition=lambda p, _: p.stats.sessions_by_mode.get("quiz", 0) >= 50,
    ),
])


def _check(achievement: Achievement, progress: LearnerProgress, categories: Sequence[Category]) -> bool:
    try:
        return bool(achievement.condition(progress, categories))
    except Exception as e:
        error = ConditionEvaluationError(achievement.id, e)
        logger.warning(
            "achievement_condition_failed",
            achievement_id=achievement.id,
            error=str(error),
        )
        return False


def evaluate(
    progress: LearnerProgress,
    categories: Sequence[Category],
    registry: AchievementRegistry,
    now: datetime,
) -> list[Achievement]:
    """Unlock every achievement whose condition now holds.

    Already-unlocked achievements are skipped, so calling this twice without
    changing ``progress`` returns an empty list the second time.

    Returns:
        Achievements unlocked by this call, in registry order.
    """
    unlocked = []
    for achievement in registry:
        if achievement.id in progress.achievements_unlocked:
            continue
        if not _check(achievement, progress, categories):
            continue
        progress.achievements_unlocked[achievement.id] = now
        progress.achievements.append(UnlockedAchievement(
            id=achievement.id,
            name=achievement.name,
            description=achievement.description,
            icon=achievement.icon,
            unlocked_at=now,
        ))
        unlocked.append(achievement)
        logger.info("achievement_unlocked", achievement_id=achievement.id)
    return unlocked
