"""In-memory vocabulary and theme collections, persisted on every change."""

from typing import Iterable

import config
from wordbook.errors import (
    ProtectedThemeError,
    ThemeExistsError,
    UnknownThemeError,
    WordbookValidationError,
)
from wordbook.logger import get_logger
from wordbook.models import WordEntry
from wordbook.storage import StateRepository


class VocabularyStore:
    """Owns the word list and the ordered theme list.

    Words are kept newest first. Themes keep insertion order and always
    contain the default theme.
    """

    def __init__(self, repository: StateRepository):
        """
        Initialize the store from persisted state.

        Args:
            repository: Repository used to load and persist state
        """
        self.repository = repository
        self._words: list[WordEntry] = repository.load_words()
        self._themes: list[str] = repository.load_themes()

    @property
    def words(self) -> list[WordEntry]:
        return list(self._words)

    @property
    def themes(self) -> list[str]:
        return list(self._themes)

    def add_word(self, entry: WordEntry) -> WordEntry:
        """
        Add a word to the front of the list.

        An unknown theme is appended to the theme list. This is the only
        place a theme is created implicitly.

        Args:
            entry: The word to add

        Returns:
            The stored entry
        """
        words = [entry, *self._words]
        themes = list(self._themes)
        if entry.theme and entry.theme not in themes:
            themes.append(entry.theme)
            get_logger().info(f"Discovered new theme from word: {entry.theme}")

        self.repository.save_vocabulary(words, themes)
        self._words, self._themes = words, themes
        get_logger().info(f"Added word '{entry.word}' to theme '{entry.theme}'")
        return entry

    def add_theme(self, name: str) -> None:
        """Append a new, empty theme."""
        if not name:
            raise WordbookValidationError("Theme name cannot be empty")
        if name in self._themes:
            raise ThemeExistsError(f"Theme already exists: {name}")

        themes = [*self._themes, name]
        self.repository.save_themes(themes)
        self._themes = themes
        get_logger().info(f"Created theme: {name}")

    def rename_theme(self, old_name: str, new_name: str) -> int:
        """
        Rename a theme in place and move its words along.

        Args:
            old_name: Current theme name
            new_name: New theme name

        Returns:
            Number of words whose theme was updated
        """
        if old_name == config.DEFAULT_THEME:
            raise ProtectedThemeError(f"The default theme '{config.DEFAULT_THEME}' cannot be renamed")
        if not new_name:
            raise WordbookValidationError("Theme name cannot be empty")
        if new_name in self._themes:
            raise ThemeExistsError(f"Theme already exists: {new_name}")
        if old_name not in self._themes:
            raise UnknownThemeError(f"Theme not found: {old_name}")

        themes = [new_name if t == old_name else t for t in self._themes]
        moved = 0
        words = []
        for w in self._words:
            if w.theme == old_name:
                w = w.model_copy(update={"theme": new_name})
                moved += 1
            words.append(w)

        self.repository.save_vocabulary(words, themes)
        self._words, self._themes = words, themes
        get_logger().info(f"Renamed theme '{old_name}' -> '{new_name}' ({moved} words)")
        return moved

    def delete_theme(self, name: str) -> int:
        """
        Delete a theme together with every word in it.

        Args:
            name: Theme to delete

        Returns:
            Number of words removed
        """
        if name == config.DEFAULT_THEME:
            raise ProtectedThemeError(f"The default theme '{config.DEFAULT_THEME}' cannot be deleted")

        themes = [t for t in self._themes if t != name]
        words = [w for w in self._words if w.theme != name]
        removed = len(self._words) - len(words)

        self.repository.save_vocabulary(words, themes)
        self._words, self._themes = words, themes
        get_logger().info(f"Deleted theme '{name}' and {removed} words")
        return removed

    def replace_all(self, words: list[WordEntry], themes: list[str]) -> None:
        """Swap in already-persisted state (backup import)."""
        self._words = list(words)
        self._themes = list(themes)

    # ---- Derived views ----
    def word_count(self, theme: str) -> int:
        return sum(1 for w in self._words if (w.theme or config.DEFAULT_THEME) == theme)

    def word_counts(self) -> dict[str, int]:
        """Word count for every theme, in theme order."""
        return {t: self.word_count(t) for t in self._themes}

    def suggested_themes(self) -> list[str]:
        """Built-in dictionaries followed by the user's own, without duplicates."""
        return list(dict.fromkeys([*config.DEFAULT_THEMES, *self._themes]))


def themes_in_use(words: Iterable[WordEntry]) -> list[str]:
    """Themes used by at least one word, in first-seen order."""
    seen = []
    for w in words:
        theme = w.theme or config.DEFAULT_THEME
        if theme not in seen:
            seen.append(theme)
    return seen


def filter_by_themes(words: Iterable[WordEntry], themes: Iterable[str]) -> list[WordEntry]:
    selected = set(themes)
    return [w for w in words if (w.theme or config.DEFAULT_THEME) in selected]
