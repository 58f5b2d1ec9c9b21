"""
Tests for persistence.

Tests cover:
- The JSON file storage
- Repository defaults, migration and corrupt values
"""

import json

import config
from wordbook.models import QuizResult, UserProfile
from wordbook.storage import JsonFileStorage, StateRepository


class TestJsonFileStorage:
    """Test the file-backed key-value storage."""

    def test_missing_file_reads_none(self, tmp_path):
        assert JsonFileStorage(tmp_path / "store.json").get("k") is None

    def test_set_and_get(self, tmp_path):
        path = tmp_path / "data" / "store.json"
        storage = JsonFileStorage(path)
        storage.set("a", "1")
        storage.set_many({"b": "2", "c": "3"})

        assert JsonFileStorage(path).get("a") == "1"
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "2", "c": "3"}
        assert not path.with_suffix(".tmp").exists()


class TestStateRepository:
    """Test typed loading and saving."""

    def test_defaults_when_empty(self, repository):
        assert repository.load_words() == []
        assert repository.load_stats() == []
        assert repository.load_profile() == UserProfile(xp=0, level=1, unlocked_badges=[])
        assert repository.load_themes() == ["Chung"]

    def test_words_without_theme_are_migrated(self, storage, repository):
        storage.set(config.WORDS_KEY, json.dumps([
            {"id": "1", "word": "old", "added_at": "2024-05-01T10:00:00"},
            {"id": "2", "word": "older", "theme": "", "added_at": "2024-05-01T10:00:00"},
        ]))
        assert [w.theme for w in repository.load_words()] == ["Chung", "Chung"]

    def test_corrupt_value_falls_back_to_default(self, storage, repository):
        storage.set(config.PROFILE_KEY, "{not json")
        storage.set(config.STATS_KEY, "[{\"score\": -1}]")
        assert repository.load_profile() == UserProfile()
        assert repository.load_stats() == []

    def test_default_theme_always_loaded(self, storage, repository):
        storage.set(config.THEMES_KEY, json.dumps(["Food", "Food", "Work"]))
        assert repository.load_themes() == ["Chung", "Food", "Work"]

    def test_round_trip(self, repository, make_word):
        words = [make_word(), make_word(theme="Food")]
        stats = [QuizResult(score=1, total_questions=4)]
        profile = UserProfile(xp=150, level=2, unlocked_badges=["quiz_starter"])
        repository.save_all(profile, words, stats, ["Chung", "Food"])

        assert repository.load_words() == words
        assert repository.load_stats() == stats
        assert repository.load_profile() == profile
        assert repository.load_themes() == ["Chung", "Food"]
