"""
Tests for the vocabulary and theme store.

Tests cover:
- Adding words with theme auto-discovery
- Creating, renaming and deleting themes
- Persistence of every mutation
"""

import json

import pytest

import config
from wordbook.errors import ProtectedThemeError, ThemeExistsError, UnknownThemeError
from wordbook.storage import StateRepository
from wordbook.store import VocabularyStore, filter_by_themes, themes_in_use


@pytest.fixture
def store(repository):
    return VocabularyStore(repository)


class TestAddWord:
    """Test adding words."""

    def test_new_store_has_default_theme(self, store):
        assert store.themes == ["Chung"]
        assert store.words == []

    def test_words_are_prepended(self, store, make_word):
        first = store.add_word(make_word("apple"))
        second = store.add_word(make_word("banana"))
        assert [w.id for w in store.words] == [second.id, first.id]

    def test_unknown_theme_is_appended(self, store, make_word):
        store.add_word(make_word(theme="Travel"))
        store.add_word(make_word(theme="Travel"))
        assert store.themes == ["Chung", "Travel"]

    def test_add_persists_words_and_themes(self, store, storage, make_word):
        store.add_word(make_word("apple", theme="Food"))
        assert json.loads(storage.get(config.THEMES_KEY)) == ["Chung", "Food"]
        assert json.loads(storage.get(config.WORDS_KEY))[0]["word"] == "apple"


class TestAddTheme:
    """Test creating themes."""

    def test_add_appends(self, store):
        store.add_theme("IELTS")
        store.add_theme("Medical")
        assert store.themes == ["Chung", "IELTS", "Medical"]

    def test_duplicate_rejected_without_change(self, store, storage):
        store.add_theme("IELTS")
        before = storage.get(config.THEMES_KEY)
        with pytest.raises(ThemeExistsError):
            store.add_theme("IELTS")
        assert store.themes == ["Chung", "IELTS"]
        assert storage.get(config.THEMES_KEY) == before

    def test_names_are_case_sensitive(self, store):
        store.add_theme("ielts")
        store.add_theme("IELTS")
        assert store.themes == ["Chung", "ielts", "IELTS"]


class TestRenameTheme:
    """Test renaming themes."""

    def test_rename_keeps_position_and_moves_words(self, store, make_word):
        store.add_theme("Travel")
        store.add_theme("Work")
        for _ in range(3):
            store.add_word(make_word(theme="Travel"))
        store.add_word(make_word(theme="Work"))

        moved = store.rename_theme("Travel", "Trips")

        assert moved == 3
        assert store.themes == ["Chung", "Trips", "Work"]
        assert not any(w.theme == "Travel" for w in store.words)
        assert sum(1 for w in store.words if w.theme == "Trips") == 3

    def test_rename_to_existing_name_rejected(self, store, make_word):
        store.add_theme("Travel")
        store.add_word(make_word(theme="Travel"))
        with pytest.raises(ThemeExistsError):
            store.rename_theme("Travel", "Chung")
        assert store.themes == ["Chung", "Travel"]
        assert store.words[0].theme == "Travel"

    def test_rename_unknown_theme_rejected(self, store):
        with pytest.raises(UnknownThemeError):
            store.rename_theme("Nope", "Other")

    def test_rename_persists_both_sides(self, store, repository, make_word):
        store.add_word(make_word(theme="Travel"))
        store.rename_theme("Travel", "Trips")

        reloaded = VocabularyStore(StateRepository(repository.storage))
        assert reloaded.themes == ["Chung", "Trips"]
        assert reloaded.words[0].theme == "Trips"

    def test_default_theme_cannot_be_renamed(self, store, storage, make_word):
        store.add_word(make_word(theme="Chung"))
        words_before = storage.get(config.WORDS_KEY)
        themes_before = storage.get(config.THEMES_KEY)

        with pytest.raises(ProtectedThemeError):
            store.rename_theme("Chung", "General")

        assert store.themes == ["Chung"]
        assert store.words[0].theme == "Chung"
        assert storage.get(config.WORDS_KEY) == words_before
        assert storage.get(config.THEMES_KEY) == themes_before


class TestDeleteTheme:
    """Test cascade deletion."""

    def test_delete_removes_theme_and_its_words(self, store, make_word):
        keep = store.add_word(make_word(theme="Chung"))
        for _ in range(3):
            store.add_word(make_word(theme="X"))

        removed = store.delete_theme("X")

        assert removed == 3
        assert store.themes == ["Chung"]
        assert [w.id for w in store.words] == [keep.id]

    def test_default_theme_is_protected(self, store, storage, make_word):
        store.add_word(make_word(theme="Chung"))
        words_before = storage.get(config.WORDS_KEY)
        themes_before = store.themes

        with pytest.raises(ProtectedThemeError):
            store.delete_theme("Chung")

        assert store.themes == themes_before
        assert len(store.words) == 1
        assert storage.get(config.WORDS_KEY) == words_before


class TestDerivedViews:
    """Test per-theme counts and filtering."""

    def test_counts_follow_theme_order(self, store, make_word):
        store.add_theme("Empty")
        store.add_word(make_word(theme="Food"))
        store.add_word(make_word(theme="Food"))
        store.add_word(make_word(theme="Chung"))
        assert store.word_counts() == {"Chung": 1, "Empty": 0, "Food": 2}

    def test_themes_in_use_only_lists_used(self, store, make_word):
        store.add_theme("Empty")
        store.add_word(make_word(theme="Food"))
        store.add_word(make_word(theme="Chung"))
        assert themes_in_use(store.words) == ["Chung", "Food"]

    def test_blank_theme_counts_as_default(self, make_word):
        words = [make_word("a", theme="")]
        assert themes_in_use(words) == ["Chung"]
        assert [w.word for w in filter_by_themes(words, ["Chung"])] == ["a"]

    def test_filter_by_themes(self, store, make_word):
        store.add_word(make_word("a", theme="Food"))
        store.add_word(make_word("b", theme="Work"))
        assert [w.word for w in filter_by_themes(store.words, ["Food"])] == ["a"]

    def test_suggested_themes_merge_defaults_and_custom(self, store):
        store.add_theme("Kinh doanh")
        store.add_theme("Phim ảnh")

        suggested = store.suggested_themes()

        assert suggested[:len(config.DEFAULT_THEMES)] == config.DEFAULT_THEMES
        assert suggested[-1] == "Phim ảnh"
        assert len(suggested) == len(set(suggested))
