"""Review scheduler: picks the words for the next practice session."""

import random
from collections.abc import Iterable
from datetime import datetime

import structlog

from vocab_drill.models.progress import LearnerProgress
from vocab_drill.models.settings import DifficultyBand
from vocab_drill.models.vocabulary import Word

logger = structlog.get_logger()

DEFAULT_SESSION_SIZE = 25


def _unique(words: Iterable[Word]) -> list[Word]:
    """Drop repeated word IDs, keeping the first occurrence."""
    seen: set[str] = set()
    result = []
    for word in words:
        if word.id not in seen:
            seen.add(word.id)
            result.append(word)
    return result


def words_due_for_review(
    words: Iterable[Word], progress: LearnerProgress, now: datetime
) -> list[Word]:
    """Words whose review time has passed, plus every weak word.

    Input order is preserved.
    """
    due = []
    for word in _unique(words):
        stat = progress.word_stats.get(word.id)
        if (stat is not None and stat.is_due(now)) or progress.is_weak(word.id):
            due.append(word)
    return due


def filter_by_band(
    words: Iterable[Word], progress: LearnerProgress, band: DifficultyBand
) -> list[Word]:
    """Apply the easy/medium/hard filter."""
    if band == DifficultyBand.EASY:
        return [w for w in words if progress.is_learned(w.id)]
    if band == DifficultyBand.HARD:
        return [
            w for w in words
            if not progress.is_learned(w.id) or progress.is_weak(w.id)
        ]
    return list(words)


def select_session_words(
    words: Iterable[Word],
    progress: LearnerProgress,
    *,
    band: DifficultyBand = DifficultyBand.MEDIUM,
    weak_only: bool = False,
    session_size: int = DEFAULT_SESSION_SIZE,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[Word]:
    """Build the shuffled word list for one session.

    Due and weak words are taken before the rest of the pool, so they are
    never crowded out by the session size cap. The final order is a uniform
    shuffle of the selection.

    Args:
        words: Candidate words, usually one category.
        progress: Current learner progress.
        band: Difficulty band filter.
        weak_only: Practise weak words only (falls back to all words if none are weak).
        session_size: Maximum number of words returned; values below 1 count as 1.
        now: Reference time for due checks.
        rng: Random source, injectable for reproducible sessions.

    Returns:
        At most ``session_size`` distinct words.
    """
    now = now or datetime.now()
    rng = rng or random.Random()
    band = DifficultyBand(band)
    size = max(1, session_size)

    pool = _unique(words)

    if weak_only:
        weak = [w for w in pool if progress.is_weak(w.id)]
        if weak:
            pool = weak
        else:
            logger.info("weak_pool_empty_fallback", pool_size=len(pool))

    pool = filter_by_band(pool, progress, band)
    if not pool:
        logger.warning("session_pool_empty", band=band.value, weak_only=weak_only)
        return []

    prioritise_due = not (weak_only and band != DifficultyBand.MEDIUM)
    if prioritise_due:
        due = words_due_for_review(pool, progress, now)
        if due:
            due_ids = {w.id for w in due}
            rest = [w for w in pool if w.id not in due_ids]
            rng.shuffle(due)
            rng.shuffle(rest)
            selected = (due + rest)[:size]
            rng.shuffle(selected)
            logger.debug(
                "session_selected",
                due=len(due),
                pool_size=len(pool),
                selected=len(selected),
            )
            return selected

    selected = list(pool)
    rng.shuffle(selected)
    return selected[:size]
