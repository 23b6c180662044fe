"""Smoke tests for Pydantic models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from vocab_drill.models.bundle import BUNDLE_VERSION, ExportBundle
from vocab_drill.models.progress import CategoryProgress, LearnerProgress, ProgressStats
from vocab_drill.models.settings import DifficultyBand, LearnerSettings
from vocab_drill.models.vocabulary import Category, Vocabulary, Word, load_vocabulary
from vocab_drill.models.word_stat import WordStat


class TestWordStat:
    def test_default_values(self):
        stat = WordStat()
        assert stat.correct_count == 0
        assert stat.incorrect_count == 0
        assert stat.difficulty == 0
        assert stat.last_reviewed is None
        assert stat.next_review is None
        assert stat.times_reviewed == 0

    def test_accuracy(self):
        assert WordStat().accuracy == 0.0
        assert WordStat(correct_count=3, incorrect_count=1).accuracy == pytest.approx(0.75)
        assert WordStat(correct_count=3, incorrect_count=1).total_attempts == 4

    def test_is_due(self):
        now = datetime(2026, 3, 1, 12, 0)
        assert not WordStat().is_due(now)
        assert WordStat(next_review=now).is_due(now)
        assert not WordStat(next_review=now + timedelta(seconds=1)).is_due(now)

    def test_difficulty_bounds(self):
        with pytest.raises(ValidationError):
            WordStat(difficulty=6)
        with pytest.raises(ValidationError):
            WordStat(correct_count=-1)

    def test_camel_case_document(self):
        doc = WordStat(correct_count=2).to_document()
        assert doc["correctCount"] == 2
        assert "nextReview" in doc

    def test_aware_timestamp_made_naive(self):
        stat = WordStat(next_review=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))
        assert stat.next_review.tzinfo is None


class TestLearnerProgress:
    def test_default_instantiation(self):
        progress = LearnerProgress()
        assert progress.schema_version == 2
        assert progress.learned_words == []
        assert progress.weak_words == []
        assert progress.streak == 0
        assert progress.last_played is None
        assert isinstance(progress.stats, ProgressStats)
        assert progress.stats.words_by_difficulty == {i: 0 for i in range(6)}

    def test_sets_deduplicated(self):
        progress = LearnerProgress.model_validate({"learnedWords": ["a", "b", "a"]})
        assert progress.learned_words == ["a", "b"]

    def test_set_helpers(self):
        progress = LearnerProgress()
        progress.add_weak("a")
        progress.add_weak("a")
        progress.add_learned("b")
        assert progress.weak_words == ["a"]
        progress.discard_weak("a")
        progress.discard_weak("missing")
        progress.discard_learned("b")
        assert progress.weak_words == []
        assert progress.learned_words == []

    def test_difficulty_histogram(self):
        progress = LearnerProgress()
        progress.word_stats["a"] = WordStat(difficulty=2)
        progress.word_stats["b"] = WordStat(difficulty=2)
        progress.word_stats["c"] = WordStat(difficulty=5)
        progress.refresh_difficulty_histogram()
        assert progress.stats.words_by_difficulty == {0: 0, 1: 0, 2: 2, 3: 0, 4: 0, 5: 1}

    def test_category_progress_defaults(self):
        category = CategoryProgress()
        assert category.score == 0
        assert category.total_attempts == 0
        assert category.last_played is None


class TestLearnerSettings:
    def test_enum_values(self):
        assert DifficultyBand.EASY == "easy"
        assert DifficultyBand.MEDIUM == "medium"
        assert DifficultyBand.HARD == "hard"

    def test_unknown_keys_preserved(self):
        settings = LearnerSettings.model_validate({"theme": "sepia"})
        assert settings.to_document()["theme"] == "sepia"

    def test_in_range_values_kept(self):
        settings = LearnerSettings(pronunciation_speed=1.2, flashcard_count=40, game_difficulty="hard")
        assert settings.pronunciation_speed == 1.2
        assert settings.flashcard_count == 40
        assert settings.game_difficulty == DifficultyBand.HARD


class TestVocabulary:
    def test_lookup(self):
        vocab = Vocabulary(categories=[
            Category(id="food", name="Food", words=[Word(id="f1", source="pain", target="bread")]),
        ])
        assert vocab.get_category("food").word_ids == {"f1"}
        assert vocab.get_category("nope") is None
        assert vocab.word_count == 1

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "vocabulary.json"
        path.write_text(
            '{"categories": [{"id": "c", "name": "C", "words": '
            '[{"id": "w", "source": "chat", "target": "cat"}]}]}',
            encoding="utf-8",
        )
        vocab = load_vocabulary(path)
        assert vocab.categories[0].words[0].target == "cat"


class TestExportBundle:
    def test_defaults(self):
        bundle = ExportBundle(progress=LearnerProgress(), settings=LearnerSettings())
        assert bundle.version == BUNDLE_VERSION
        assert isinstance(bundle.export_date, datetime)
        doc = bundle.to_document()
        assert set(doc) == {"progress", "settings", "exportDate", "version"}
