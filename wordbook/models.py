"""Pydantic data models for the Wordbook vocabulary notebook."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

import config


def new_id() -> str:
    """Generate a unique identifier for words and quiz results."""
    return uuid.uuid4().hex


class GeneratedWordData(BaseModel):
    """Word details returned by the lookup collaborator."""

    pronunciation: str
    meaning: str
    explanation: str
    example: str


class WordEntry(BaseModel):
    """A vocabulary entry saved in one of the user's themes."""

    id: str = Field(default_factory=new_id)
    word: str
    pronunciation: str = ""
    meaning: str = ""
    explanation: str = ""
    example: str = ""
    theme: str = config.DEFAULT_THEME
    added_at: datetime = Field(default_factory=datetime.now)


class QuizResult(BaseModel):
    """Outcome of one finished quiz. Never modified once recorded."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    date: str = Field(default_factory=lambda: datetime.now().isoformat())
    score: int = Field(ge=0)
    total_questions: int = Field(ge=0)
    xp_earned: int = Field(default=0, ge=0)

    @property
    def is_perfect(self) -> bool:
        return self.total_questions > 0 and self.score == self.total_questions


class UserProfile(BaseModel):
    """XP, cached level and unlocked badges of the learner."""

    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    unlocked_badges: list[str] = Field(default_factory=list)


class ActivityStats(BaseModel):
    """Counters that badge conditions are evaluated against."""

    word_count: int = 0
    quiz_count: int = 0
    perfect_score_count: int = 0


class Badge(BaseModel):
    """Static achievement catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    condition: Callable[[ActivityStats], bool] = Field(exclude=True)


class Notification(BaseModel):
    """A user-facing message, shown after waiting `delay` seconds."""

    message: str
    delay: float = 0.0


class GamificationUpdate(BaseModel):
    """Result of recomputing level and badges after an XP-earning event."""

    profile: UserProfile
    previous_level: int
    leveled_up: bool = False
    new_badges: list[str] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)


class BackupData(BaseModel):
    """Full application state decoded from a CSV backup."""

    profile: UserProfile
    words: list[WordEntry] = Field(default_factory=list)
    stats: list[QuizResult] = Field(default_factory=list)
    themes: list[str] = Field(default_factory=list)


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    FILL_BLANK = "FILL_BLANK"
    TYPING = "TYPING"


class QuizStep(str, Enum):
    SETUP = "SETUP"
    PLAYING = "PLAYING"
    RESULT = "RESULT"


class OptionState(str, Enum):
    """Display state of a choice option once the question is answered."""

    NEUTRAL = "NEUTRAL"
    CORRECT = "CORRECT"
    WRONG_PICK = "WRONG_PICK"


class Question(BaseModel):
    """A single generated quiz question."""

    type: QuestionType
    word_entry: WordEntry
    question_text: str
    correct_answer: str  # meaning for multiple choice, the word otherwise
    options: Optional[list[str]] = None  # None for typing questions


class AnswerOutcome(BaseModel):
    """The frozen result of answering one question."""

    question_index: int
    answer: str
    is_correct: bool
    correct_answer: str


class DailyScore(BaseModel):
    """Average quiz score (out of 10) for one calendar day."""

    date: str
    avg_score: float
