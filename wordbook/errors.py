"""Exceptions shared by the vocabulary store and the quiz engine."""


class WordbookError(Exception):
    """Base class for every error raised by the notebook engine."""

    pass


class WordbookValidationError(WordbookError):
    """Raised when a user action is rejected before any state changes."""

    pass


class ThemeExistsError(WordbookValidationError):
    """Raised when a theme name is already taken."""

    pass


class ProtectedThemeError(WordbookValidationError):
    """Raised when trying to delete the default theme."""

    pass


class UnknownThemeError(WordbookValidationError):
    """Raised when a theme operation names a theme that does not exist."""

    pass


class InsufficientWordsError(WordbookValidationError):
    """Raised when a quiz is started with too few words in the pool."""

    pass


class QuizStateError(WordbookError):
    """Raised on an illegal quiz state transition."""

    pass
