"""Smoke tests for document stores and repositories."""

import json
import os

import pytest

from vocab_drill.exceptions import MalformedDocument, StorageUnavailable
from vocab_drill.models.progress import LearnerProgress
from vocab_drill.models.settings import DifficultyBand, LearnerSettings
from vocab_drill.models.word_stat import WordStat
from vocab_drill.storage.document_store import JsonFileStore, MemoryStore
from vocab_drill.storage.progress_repository import ProgressRepository
from vocab_drill.storage.settings_repository import SettingsRepository


class BrokenStore(MemoryStore):
    """Store whose medium is unavailable."""

    def load(self, key):
        raise StorageUnavailable(key, "disabled")

    def save(self, key, document):
        raise StorageUnavailable(key, "quota exceeded")

    def delete(self, key):
        raise StorageUnavailable(key, "disabled")


class TestJsonFileStore:
    def test_returns_none_when_no_file(self, tmp_path):
        assert JsonFileStore(tmp_path).load("progress") is None

    def test_roundtrip(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested")
        store.save("progress", {"totalScore": 3, "learnedWords": ["é"]})
        assert store.load("progress") == {"totalScore": 3, "learnedWords": ["é"]}
        assert (tmp_path / "nested" / "progress.json").exists()

    def test_corrupt_file_raises_malformed(self, tmp_path):
        (tmp_path / "progress.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(MalformedDocument):
            JsonFileStore(tmp_path).load("progress")

    def test_non_object_raises_malformed(self, tmp_path):
        (tmp_path / "progress.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(MalformedDocument):
            JsonFileStore(tmp_path).load("progress")

    def test_invalid_utf8_raises_malformed(self, tmp_path):
        (tmp_path / "progress.json").write_bytes(b'{"streak": "\xff\xfe"}')
        with pytest.raises(MalformedDocument):
            JsonFileStore(tmp_path).load("progress")

    def test_failed_replace_removes_temp_file(self, tmp_path, monkeypatch):
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        with pytest.raises(StorageUnavailable):
            JsonFileStore(tmp_path).save("progress", {"totalScore": 1})
        assert list(tmp_path.glob("*.json")) == []

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.save("progress", {})
        store.delete("progress")
        store.delete("progress")
        assert store.load("progress") is None


class TestMemoryStore:
    def test_copies_on_save_and_load(self):
        store = MemoryStore()
        doc = {"learnedWords": ["a"]}
        store.save("k", doc)
        doc["learnedWords"].append("b")
        loaded = store.load("k")
        loaded["learnedWords"].append("c")
        assert store.load("k") == {"learnedWords": ["a"]}


class TestProgressRepository:
    def test_load_new_learner(self):
        assert ProgressRepository(MemoryStore()).load() == LearnerProgress()

    def test_save_and_load(self, tmp_path, now):
        repo = ProgressRepository(JsonFileStore(tmp_path))
        progress = LearnerProgress(learned_words=["w1"], streak=2, last_played=now)
        progress.word_stats["w1"] = WordStat(correct_count=3, difficulty=1, next_review=now)
        assert repo.save(progress) is True

        loaded = repo.load()
        assert loaded.learned_words == ["w1"]
        assert loaded.word_stats["w1"].next_review == now
        assert loaded.stats.words_by_difficulty[1] == 1

    def test_document_uses_camel_case(self, tmp_path):
        repo = ProgressRepository(JsonFileStore(tmp_path))
        repo.save(LearnerProgress())
        data = json.loads((tmp_path / "progress.json").read_text(encoding="utf-8"))
        assert "learnedWords" in data
        assert "achievementsUnlocked" in data
        assert data["schemaVersion"] == 2

    def test_corrupt_file_loads_defaults(self, tmp_path):
        (tmp_path / "progress.json").write_text("garbage", encoding="utf-8")
        assert ProgressRepository(JsonFileStore(tmp_path)).load() == LearnerProgress()

    def test_invalid_document_loads_defaults(self):
        store = MemoryStore({"progress": {"schemaVersion": 2, "streak": "many"}})
        assert ProgressRepository(store).load() == LearnerProgress()

    def test_invalid_utf8_loads_defaults(self, tmp_path):
        (tmp_path / "progress.json").write_bytes(b'{"streak": "\xff\xfe"}')
        assert ProgressRepository(JsonFileStore(tmp_path)).load() == LearnerProgress()

    @pytest.mark.parametrize("document", [
        {"schemaVersion": 2, "wordStats": ["a"]},
        {"wordStats": "oops"},
        {"achievements": 5},
        {"stats": {"sessionsByMode": 5}},
    ])
    def test_wrong_field_types_load_defaults(self, document):
        store = MemoryStore({"progress": document})
        assert ProgressRepository(store).load() == LearnerProgress()

    def test_unavailable_storage_absorbed(self):
        repo = ProgressRepository(BrokenStore())
        assert repo.load() == LearnerProgress()
        assert repo.save(LearnerProgress()) is False
        repo.reset()

    def test_update_is_read_modify_write(self):
        store = MemoryStore()
        repo = ProgressRepository(store)
        result = repo.update(lambda p: p.add_learned("w9") or "done")
        assert result == "done"
        assert store.documents["progress"]["learnedWords"] == ["w9"]

    def test_reset(self):
        store = MemoryStore()
        repo = ProgressRepository(store)
        repo.save(LearnerProgress(total_score=5))
        repo.reset()
        assert "progress" not in store.documents
        assert repo.load().total_score == 0


class TestSettingsRepository:
    def test_defaults(self):
        settings = SettingsRepository(MemoryStore()).load()
        assert settings.pronunciation_speed == 0.8
        assert settings.dark_mode is False
        assert settings.flashcard_count == 25
        assert settings.game_difficulty == DifficultyBand.MEDIUM
        assert settings.sound_effects is True
        assert settings.hints_enabled is True
        assert settings.keyboard_shortcuts is True
        assert settings.auto_pronounce is True

    def test_missing_keys_take_defaults_and_unknown_kept(self):
        store = MemoryStore({"settings": {"darkMode": True, "fontSize": "large"}})
        repo = SettingsRepository(store)
        settings = repo.load()
        assert settings.dark_mode is True
        assert settings.flashcard_count == 25
        repo.save(settings)
        assert store.documents["settings"]["fontSize"] == "large"
        assert store.documents["settings"]["darkMode"] is True

    def test_update_accepts_both_key_styles(self):
        store = MemoryStore()
        repo = SettingsRepository(store)
        repo.update(dark_mode=True)
        settings = repo.update(flashcardCount=10)
        assert settings.dark_mode is True
        assert settings.flashcard_count == 10
        assert store.documents["settings"]["flashcardCount"] == 10

    def test_values_clamped(self):
        settings = LearnerSettings.model_validate(
            {"pronunciationSpeed": 3.0, "flashcardCount": 1, "gameDifficulty": "extreme"}
        )
        assert settings.pronunciation_speed == 1.5
        assert settings.flashcard_count == 5
        assert settings.game_difficulty == DifficultyBand.MEDIUM

    def test_unavailable_storage_absorbed(self):
        repo = SettingsRepository(BrokenStore())
        assert repo.load() == LearnerSettings()
        assert repo.save(LearnerSettings()) is False

    def test_malformed_file_loads_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_text("{", encoding="utf-8")
        assert SettingsRepository(JsonFileStore(tmp_path)).load() == LearnerSettings()

    def test_invalid_utf8_loads_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_bytes(b'{"darkMode": "\xff\xfe"}')
        assert SettingsRepository(JsonFileStore(tmp_path)).load() == LearnerSettings()
