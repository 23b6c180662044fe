"""Lazy-initialising access to per-word statistics."""

from vocab_drill.models.progress import LearnerProgress
from vocab_drill.models.word_stat import WordStat


class WordStatsStore:
    """View over ``progress.word_stats``.

    Records are created on demand and never removed.

    Args:
        progress: Progress document whose word stats are accessed.
    """

    def __init__(self, progress: LearnerProgress):
        self._progress = progress

    def get(self, word_id: str) -> WordStat:
        """Return the stored record, or a fresh default that is not stored."""
        stat = self._progress.word_stats.get(word_id)
        if stat is None:
            return WordStat()
        return stat

    def ensure(self, word_id: str) -> WordStat:
        """Return the stored record, creating and storing a default if needed."""
        stat = self._progress.word_stats.get(word_id)
        if stat is None:
            stat = WordStat()
            self._progress.word_stats[word_id] = stat
        return stat

    def __contains__(self, word_id: object) -> bool:
        return word_id in self._progress.word_stats

    def __len__(self) -> int:
        return len(self._progress.word_stats)
