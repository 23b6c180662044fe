"""Read-only progress summaries for statistics screens."""

from collections.abc import Sequence

from pydantic import BaseModel

from vocab_drill.engine.mastery import MAX_DIFFICULTY, MIN_DIFFICULTY, clamp_difficulty
from vocab_drill.models.progress import LearnerProgress
from vocab_drill.models.vocabulary import Category, Word
from vocab_drill.models.word_stat import WordStat


class CategorySummary(BaseModel):
    """Completion and accuracy for one category."""

    category_id: str
    name: str
    learned_count: int
    total_words: int
    completion: int  # percent, rounded
    accuracy: int  # percent, rounded
    total_correct: int
    total_incorrect: int


class WordSummary(BaseModel):
    """A word together with the category it belongs to and its stats."""

    word: Word
    category_name: str
    stat: WordStat


class OverallSummary(BaseModel):
    total_words: int
    learned: int
    completion: int
    weak: int
    streak: int
    total_score: int
    total_sessions: int


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round(part / whole * 100)


def summarize_categories(
    progress: LearnerProgress, categories: Sequence[Category]
) -> list[CategorySummary]:
    learned = set(progress.learned_words)
    summaries = []
    for category in categories:
        stats = [progress.word_stats.get(w.id) or WordStat() for w in category.words]
        correct = sum(s.correct_count for s in stats)
        incorrect = sum(s.incorrect_count for s in stats)
        learned_count = len(category.word_ids & learned)
        summaries.append(CategorySummary(
            category_id=category.id,
            name=category.name,
            learned_count=learned_count,
            total_words=len(category.words),
            completion=_percent(learned_count, len(category.words)),
            accuracy=_percent(correct, correct + incorrect),
            total_correct=correct,
            total_incorrect=incorrect,
        ))
    return summaries


def words_by_difficulty(
    progress: LearnerProgress, categories: Sequence[Category]
) -> dict[int, list[WordSummary]]:
    """Group every vocabulary word by its difficulty level (unseen words at 0)."""
    groups: dict[int, list[WordSummary]] = {
        level: [] for level in range(MIN_DIFFICULTY, MAX_DIFFICULTY + 1)
    }
    for category in categories:
        for word in category.words:
            stat = progress.word_stats.get(word.id) or WordStat()
            groups[clamp_difficulty(stat.difficulty)].append(
                WordSummary(word=word, category_name=category.name, stat=stat)
            )
    return groups


def weak_words(
    progress: LearnerProgress, categories: Sequence[Category]
) -> list[WordSummary]:
    result = []
    for category in categories:
        for word in category.words:
            if progress.is_weak(word.id):
                stat = progress.word_stats.get(word.id) or WordStat()
                result.append(WordSummary(word=word, category_name=category.name, stat=stat))
    return result


def summarize_overall(
    progress: LearnerProgress, categories: Sequence[Category]
) -> OverallSummary:
    total_words = sum(len(c.words) for c in categories)
    learned = len(progress.learned_words)
    return OverallSummary(
        total_words=total_words,
        learned=learned,
        completion=_percent(learned, total_words),
        weak=len(progress.weak_words),
        streak=progress.streak,
        total_score=progress.total_score,
        total_sessions=progress.stats.total_sessions,
    )
