import random
from datetime import datetime

import pytest

from wordbook.app import WordbookApp
from wordbook.models import GeneratedWordData, WordEntry
from wordbook.notifications import Notifier
from wordbook.storage import InMemoryStorage, StateRepository


@pytest.fixture
def make_word():
    """Factory for word entries with predictable content."""
    counter = {"n": 0}

    def _make(word=None, theme="Chung", **overrides):
        counter["n"] += 1
        n = counter["n"]
        word = word or f"word{n}"
        fields = dict(
            id=f"id-{n}",
            word=word,
            pronunciation=f"/{word}/",
            meaning=f"meaning of {word}",
            explanation=f"explanation of {word}",
            example=f"This sentence uses {word} in context.",
            theme=theme,
            added_at=datetime(2025, 1, 1, 12, 0, n % 60),
        )
        fields.update(overrides)
        return WordEntry(**fields)

    return _make


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def repository(storage):
    return StateRepository(storage)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def notifier():
    """Notifier that records messages and delays instead of printing and sleeping."""
    sleeps = []
    messages = []
    n = Notifier(emit=messages.append, sleep=sleeps.append)
    n.sleeps = sleeps
    n.messages = messages
    return n


@pytest.fixture
def fake_lookup():
    def _lookup(word, theme):
        return GeneratedWordData(
            pronunciation=f"/{word}/",
            meaning=f"meaning of {word}",
            explanation=f"{word} explained for {theme}",
            example=f"I like the {word}.",
        )

    return _lookup


@pytest.fixture
def app(repository, fake_lookup, notifier, rng):
    return WordbookApp(repository, lookup=fake_lookup, notifier=notifier, rng=rng)
