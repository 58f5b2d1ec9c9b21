"""Flashcard review over the saved words."""

from wordbook.errors import WordbookValidationError
from wordbook.models import WordEntry


class FlashcardDeck:
    """Cycles through words one card at a time, front (word) or back (meaning)."""

    def __init__(self, words: list[WordEntry]):
        if not words:
            raise WordbookValidationError("The notebook is empty, add some words first")
        self.words = list(words)
        self.index = 0
        self.is_flipped = False

    def __len__(self) -> int:
        return len(self.words)

    @property
    def current(self) -> WordEntry:
        return self.words[self.index]

    def flip(self) -> bool:
        self.is_flipped = not self.is_flipped
        return self.is_flipped

    def next(self) -> WordEntry:
        self.is_flipped = False
        self.index = (self.index + 1) % len(self.words)
        return self.current

    def previous(self) -> WordEntry:
        self.is_flipped = False
        self.index = (self.index - 1) % len(self.words)
        return self.current
