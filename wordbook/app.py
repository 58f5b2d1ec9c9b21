"""Application facade: one method per user action."""

import random
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import config
from wordbook.codec import decode_backup, encode_backup, read_backup_file, write_backup_file
from wordbook.flashcards import FlashcardDeck
from wordbook.logger import get_logger
from wordbook.lookup_client import LookupFailure, lookup_word
from wordbook.models import BackupData, GamificationUpdate, GeneratedWordData, QuizResult, WordEntry
from wordbook.notifications import Notifier
from wordbook.progression import apply_gamification, award_xp
from wordbook.quiz import QuizSession
from wordbook.stats import daily_average_scores, summarize
from wordbook.storage import StateRepository
from wordbook.store import VocabularyStore

LookupFn = Callable[[str, str], GeneratedWordData]


class WordbookApp:
    """Ties the store, quiz engine, progression and backup codec together.

    Every mutating call persists before it returns.
    """

    def __init__(
        self,
        repository: StateRepository,
        lookup: LookupFn = lookup_word,
        notifier: Optional[Notifier] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the app from persisted state.

        Args:
            repository: Persistence for words, stats, profile and themes
            lookup: Word lookup collaborator
            notifier: Where notifications go; console by default
            rng: Random source handed to quiz sessions
        """
        self.repository = repository
        self.lookup_fn = lookup
        self.notifier = notifier or Notifier()
        self.rng = rng or random.Random()

        self.store = VocabularyStore(repository)
        self.stats: list[QuizResult] = repository.load_stats()
        self.profile = repository.load_profile()

    @property
    def words(self) -> list[WordEntry]:
        return self.store.words

    @property
    def themes(self) -> list[str]:
        return self.store.themes

    # ---- Learning ----
    def lookup(self, word: str, theme: str = config.DEFAULT_THEME) -> GeneratedWordData:
        """
        Ask the lookup collaborator about a word.

        Raises:
            LookupFailure: On any collaborator error; nothing is saved
        """
        word = word.strip()
        if not word:
            raise LookupFailure("Enter a word to look up")
        try:
            data = self.lookup_fn(word, theme)
            if isinstance(data, dict):
                data = GeneratedWordData(**data)
        except LookupFailure:
            raise
        except Exception as e:
            get_logger().error(f"Lookup failed for '{word}': {e}")
            raise LookupFailure(f"Could not find information for '{word}'. Please try again.") from e
        return data

    def add_word(
        self,
        word: str,
        data: GeneratedWordData,
        theme: str = config.DEFAULT_THEME,
    ) -> tuple[WordEntry, GamificationUpdate]:
        """Save a looked-up word and award XP for it."""
        entry = WordEntry(
            word=word.strip(),
            pronunciation=data.pronunciation,
            meaning=data.meaning,
            explanation=data.explanation,
            example=data.example,
            theme=theme.strip() or config.DEFAULT_THEME,
            added_at=datetime.now(),
        )
        self.store.add_word(entry)
        update = self._reward(config.WORD_ADD_XP)
        return entry, update

    def learn_word(self, word: str, theme: str = config.DEFAULT_THEME) -> tuple[WordEntry, GamificationUpdate]:
        """Look up a word and save it in one go."""
        data = self.lookup(word, theme)
        return self.add_word(word, data, theme)

    # ---- Themes ----
    def add_theme(self, name: str) -> None:
        self.store.add_theme(name.strip())
        self.notifier.say(f"Created dictionary: {name.strip()}")

    def rename_theme(self, old_name: str, new_name: str) -> int:
        moved = self.store.rename_theme(old_name, new_name.strip())
        self.notifier.say("Renamed successfully!")
        return moved

    def delete_theme(self, name: str) -> int:
        """Delete a theme and its words, returning how many words went with it."""
        removed = self.store.delete_theme(name)
        self.notifier.say(f"Deleted dictionary '{name}' and {removed} related words.")
        return removed

    def theme_word_count(self, name: str) -> int:
        """Words that deleting `name` would remove, for confirmation prompts."""
        return self.store.word_count(name)

    # ---- Review ----
    def new_quiz(self) -> QuizSession:
        return QuizSession(self.store.words, rng=self.rng)

    def finish_quiz(self, result: QuizResult) -> GamificationUpdate:
        """Record a finished quiz and award its XP."""
        stats = [*self.stats, result]
        self.repository.save_stats(stats)
        self.stats = stats
        return self._reward(result.xp_earned)

    def flashcards(self) -> FlashcardDeck:
        return FlashcardDeck(self.store.words)

    # ---- Progress ----
    def _reward(self, xp: int) -> GamificationUpdate:
        profile = award_xp(self.profile, xp)
        update = apply_gamification(profile, self.store.words, self.stats)
        self.repository.save_profile(update.profile)
        self.profile = update.profile
        self.notifier.show(update.notifications)
        return update

    def summary(self) -> dict:
        data = summarize(self.store.words, self.stats, self.profile)
        data["daily_scores"] = [d.model_dump() for d in daily_average_scores(self.stats)]
        data["word_counts"] = self.store.word_counts()
        return data

    # ---- Backup ----
    def export_backup(self) -> str:
        content = encode_backup(self.profile, self.store.words, self.stats, self.store.themes)
        get_logger().info(f"Exported backup: {len(self.store.words)} words, {len(self.stats)} quiz results")
        return content

    def write_backup(self, path: Optional[Path] = None) -> Path:
        path = path or config.get_backup_path()
        return write_backup_file(self.export_backup(), path)

    def import_backup(self, content: str) -> BackupData:
        """
        Replace all state with a decoded backup.

        Nothing changes unless the whole backup decodes and persists.

        Raises:
            ImportFormatError: If the backup is empty or malformed
        """
        data = decode_backup(content)
        self.repository.save_all(data.profile, data.words, data.stats, data.themes)

        self.store.replace_all(data.words, data.themes)
        self.stats = list(data.stats)
        self.profile = data.profile
        self.notifier.say("📂 Data restored successfully!")
        return data

    def read_backup(self, path: Path) -> BackupData:
        return self.import_backup(read_backup_file(path))
