"""Session and category progress aggregation, including the daily streak."""

from datetime import datetime, timedelta

import structlog

from vocab_drill.models.progress import CategoryProgress, LearnerProgress

logger = structlog.get_logger()


def compute_streak(previous: datetime | None, current: datetime, streak: int) -> int:
    """Next streak value given the previous and current session times.

    Days are compared on the learner's local calendar.
    """
    if previous is None:
        return 1
    today = current.date()
    last_day = previous.date()
    if last_day == today:
        return streak
    if last_day == today - timedelta(days=1):
        return streak + 1
    return 1


def record_session(
    progress: LearnerProgress,
    category_id: str,
    score: int,
    now: datetime,
    *,
    correct: int | None = None,
    total: int | None = None,
    duration_seconds: float = 0.0,
    mode: str | None = None,
) -> CategoryProgress:
    """Fold one finished session into the progress totals.

    Args:
        progress: Progress document, mutated in place.
        category_id: Category the session drew from.
        score: Points scored in the session.
        now: Session end time.
        correct: Correct answers in the session, for the accuracy history.
        total: Questions asked in the session.
        duration_seconds: Time spent practising.
        mode: Game mode name, e.g. ``"flashcard"`` or ``"quiz"``.

    Returns:
        The updated category entry.
    """
    category = progress.category_progress.setdefault(category_id, CategoryProgress())
    category.score += score
    category.total_attempts += 1
    category.last_played = now
    progress.total_score += score

    previous = progress.last_played
    progress.streak = compute_streak(previous, now, progress.streak)
    progress.last_played = now

    stats = progress.stats
    stats.total_sessions += 1
    stats.total_practice_time += max(0.0, duration_seconds)
    if total:
        stats.accuracy_history.append(round((correct or 0) / total * 100, 1))
    stats.last_session_date = now
    if mode:
        stats.sessions_by_mode[mode] = stats.sessions_by_mode.get(mode, 0) + 1

    logger.info(
        "session_recorded",
        category_id=category_id,
        score=score,
        streak=progress.streak,
        total_sessions=stats.total_sessions,
    )
    return category
