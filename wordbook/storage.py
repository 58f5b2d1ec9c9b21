"""Key-value persistence for words, quiz history, profile and themes."""

import fcntl
import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

import config
from wordbook.logger import get_logger
from wordbook.models import QuizResult, UserProfile, WordEntry


class KeyValueStorage(Protocol):
    """Synchronous, durable string storage."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def set_many(self, items: dict[str, str]) -> None: ...


class InMemoryStorage:
    """Dictionary-backed storage, used by tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def set_many(self, items: dict[str, str]) -> None:
        self.data.update(items)


class JsonFileStorage:
    """Stores every key in a single JSON object file."""

    def __init__(self, path: Path = config.STORAGE_FILE):
        """
        Initialize file storage.

        Args:
            path: Path to the JSON storage file
        """
        self.path = path
        self._lock_path = path.with_suffix(".lock")

    @contextmanager
    def _file_lock(self):
        """Context manager for file locking using fcntl."""
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._lock_path, "w") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        with self._file_lock():
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: dict[str, str]) -> None:
        """Write several keys in one file replacement."""
        with self._file_lock():
            data = self._read()
            data.update(items)
            self._write(data)


class StateRepository:
    """Typed access to the four storage keys."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def _load_json(self, key: str):
        raw = self.storage.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            get_logger().error(f"Failed to load '{key}' from storage: {e}")
            return None

    # ---- Words ----
    def load_words(self) -> list[WordEntry]:
        data = self._load_json(config.WORDS_KEY) or []
        try:
            # Older entries may predate themes
            return [
                WordEntry(**{**item, "theme": item.get("theme") or config.DEFAULT_THEME})
                for item in data
            ]
        except (ValidationError, TypeError) as e:
            get_logger().error(f"Failed to load words: {e}")
            return []

    # ---- Quiz history ----
    def load_stats(self) -> list[QuizResult]:
        data = self._load_json(config.STATS_KEY) or []
        try:
            return [QuizResult(**item) for item in data]
        except (ValidationError, TypeError) as e:
            get_logger().error(f"Failed to load stats: {e}")
            return []

    def save_stats(self, stats: list[QuizResult]) -> None:
        self.storage.set(config.STATS_KEY, _dump_list(stats))

    # ---- Profile ----
    def load_profile(self) -> UserProfile:
        data = self._load_json(config.PROFILE_KEY)
        if not data:
            return UserProfile()
        try:
            return UserProfile(**data)
        except (ValidationError, TypeError) as e:
            get_logger().error(f"Failed to load profile: {e}")
            return UserProfile()

    def save_profile(self, profile: UserProfile) -> None:
        self.storage.set(config.PROFILE_KEY, profile.model_dump_json())

    # ---- Themes ----
    def load_themes(self) -> list[str]:
        data = self._load_json(config.THEMES_KEY)
        if not isinstance(data, list):
            return [config.DEFAULT_THEME]
        themes = []
        for name in data:
            if isinstance(name, str) and name not in themes:
                themes.append(name)
        if config.DEFAULT_THEME not in themes:
            themes.insert(0, config.DEFAULT_THEME)
        return themes

    def save_themes(self, themes: list[str]) -> None:
        self.storage.set(config.THEMES_KEY, json.dumps(themes, ensure_ascii=False))

    # ---- Paired writes ----
    def save_vocabulary(self, words: list[WordEntry], themes: list[str]) -> None:
        """Persist words and themes together."""
        self.storage.set_many({
            config.WORDS_KEY: _dump_list(words),
            config.THEMES_KEY: json.dumps(themes, ensure_ascii=False),
        })

    def save_all(
        self,
        profile: UserProfile,
        words: list[WordEntry],
        stats: list[QuizResult],
        themes: list[str],
    ) -> None:
        """Replace all four keys at once (used by backup import)."""
        self.storage.set_many({
            config.PROFILE_KEY: profile.model_dump_json(),
            config.WORDS_KEY: _dump_list(words),
            config.STATS_KEY: _dump_list(stats),
            config.THEMES_KEY: json.dumps(themes, ensure_ascii=False),
        })


def _dump_list(items) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items], ensure_ascii=False)
