"""Mastery policy: how one answer changes a word's record.

These functions are the only code that mutates word statistics and the
learned/weak word sets. They change ``progress`` in place and leave
persistence to the caller.
"""

from datetime import datetime, timedelta

import structlog

from vocab_drill.engine.word_stats import WordStatsStore
from vocab_drill.models.progress import LearnerProgress
from vocab_drill.models.word_stat import WordStat

logger = structlog.get_logger()

MIN_DIFFICULTY = 0
MAX_DIFFICULTY = 5

# A word leaves the weak set after this many cumulative correct answers
WEAK_CLEAR_CORRECT = 2
# ...and is learned after this many
LEARN_CORRECT = 3

# Promotion on learn
PROMOTE_ACCURACY = 0.8

# Demotion on a miss
DEMOTE_MIN_ATTEMPTS = 3
DEMOTE_ACCURACY = 0.5

MISS_REVIEW_DELAY = timedelta(hours=1)


def clamp_difficulty(value: int) -> int:
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, value))


def review_interval(difficulty: int) -> timedelta:
    """Spacing after a successful review: 1, 2, 4, 8, 16, 32 days."""
    return timedelta(days=2 ** clamp_difficulty(difficulty))


def record_correct(progress: LearnerProgress, word_id: str, now: datetime) -> WordStat:
    """Apply a correct answer.

    Weak-set removal is checked before the learn transition, so a word can
    sit in both sets only between its second and third correct answer.

    Returns:
        The updated word record.
    """
    stat = WordStatsStore(progress).ensure(word_id)
    stat.correct_count += 1

    if stat.correct_count >= WEAK_CLEAR_CORRECT and progress.is_weak(word_id):
        progress.discard_weak(word_id)
        logger.debug("weak_word_cleared", word_id=word_id, correct=stat.correct_count)

    if stat.correct_count >= LEARN_CORRECT and not progress.is_learned(word_id):
        return mark_learned(progress, word_id, now)
    return stat


def record_incorrect(progress: LearnerProgress, word_id: str, now: datetime) -> WordStat:
    """Apply an incorrect answer.

    The word drops one difficulty step, comes back in an hour, is flagged
    weak, and loses learned status once accuracy over at least three
    attempts falls below one half.

    Returns:
        The updated word record.
    """
    stat = WordStatsStore(progress).ensure(word_id)
    stat.incorrect_count += 1
    stat.difficulty = clamp_difficulty(stat.difficulty - 1)
    stat.last_reviewed = now
    stat.next_review = now + MISS_REVIEW_DELAY

    progress.add_weak(word_id)

    if (
        stat.total_attempts >= DEMOTE_MIN_ATTEMPTS
        and stat.accuracy < DEMOTE_ACCURACY
        and progress.is_learned(word_id)
    ):
        progress.discard_learned(word_id)
        logger.info(
            "word_demoted",
            word_id=word_id,
            accuracy=round(stat.accuracy, 2),
            attempts=stat.total_attempts,
        )
    return stat


def mark_learned(progress: LearnerProgress, word_id: str, now: datetime) -> WordStat:
    """Learn transition: add to the learned set and schedule the next review.

    Returns:
        The updated word record.
    """
    stat = WordStatsStore(progress).ensure(word_id)
    progress.add_learned(word_id)

    if (
        stat.total_attempts > 0
        and stat.accuracy >= PROMOTE_ACCURACY
        and stat.correct_count >= LEARN_CORRECT
    ):
        stat.difficulty = clamp_difficulty(stat.difficulty + 1)

    stat.last_reviewed = now
    stat.times_reviewed += 1
    stat.next_review = now + review_interval(stat.difficulty)

    logger.info(
        "word_learned",
        word_id=word_id,
        difficulty=stat.difficulty,
        next_review=stat.next_review.isoformat(),
    )
    return stat
