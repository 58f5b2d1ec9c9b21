"""Quiz generation, answer checking and the quiz session state machine."""

import random
import re
from datetime import datetime
from typing import Optional

import config
from wordbook.errors import InsufficientWordsError, QuizStateError
from wordbook.logger import get_logger
from wordbook.models import (
    AnswerOutcome,
    OptionState,
    Question,
    QuestionType,
    QuizResult,
    QuizStep,
    WordEntry,
)
from wordbook.store import filter_by_themes, themes_in_use


def pick_question_type(r: float) -> QuestionType:
    """Map a uniform draw in [0, 1) to a question type."""
    if r > 0.66:
        return QuestionType.TYPING
    if r > 0.33:
        return QuestionType.FILL_BLANK
    return QuestionType.MULTIPLE_CHOICE


def mask_word(example: str, word: str) -> str:
    """Replace every case-insensitive occurrence of `word` with the blank."""
    if not word:
        return example
    return re.sub(re.escape(word), config.BLANK_PLACEHOLDER, example, flags=re.IGNORECASE)


def calculate_quiz_xp(score: int, total_questions: int) -> int:
    """10 XP per correct answer, plus a bonus for a perfect score."""
    bonus = config.PERFECT_SCORE_BONUS_XP if score == total_questions else 0
    return score * config.CORRECT_ANSWER_XP + bonus


def _sample_distractors(pool: list[WordEntry], target: WordEntry, rng: random.Random) -> list[WordEntry]:
    others = [w for w in pool if w.id != target.id]
    return rng.sample(others, config.QUIZ_DISTRACTORS)


def _build_question(word: WordEntry, pool: list[WordEntry], rng: random.Random) -> Question:
    question_type = pick_question_type(rng.random())

    if question_type == QuestionType.TYPING:
        return Question(
            type=question_type,
            word_entry=word,
            question_text=word.meaning,
            correct_answer=word.word,
        )

    distractors = _sample_distractors(pool, word, rng)
    if question_type == QuestionType.FILL_BLANK:
        options = [d.word for d in distractors] + [word.word]
        question_text = mask_word(word.example, word.word)
        correct_answer = word.word
    else:
        options = [d.meaning for d in distractors] + [word.meaning]
        question_text = word.word
        correct_answer = word.meaning

    rng.shuffle(options)
    return Question(
        type=question_type,
        word_entry=word,
        question_text=question_text,
        correct_answer=correct_answer,
        options=options,
    )


def generate_questions(pool: list[WordEntry], rng: Optional[random.Random] = None) -> list[Question]:
    """
    Build a randomized question set from a word pool.

    Args:
        pool: Words the quiz draws from (already filtered by theme)
        rng: Random source; a fresh unseeded one if None

    Returns:
        Up to QUIZ_LENGTH questions in shuffled order

    Raises:
        InsufficientWordsError: If the pool has fewer than MIN_QUIZ_WORDS words
    """
    if len(pool) < config.MIN_QUIZ_WORDS:
        raise InsufficientWordsError(
            f"At least {config.MIN_QUIZ_WORDS} words are needed for a quiz, got {len(pool)}"
        )
    rng = rng or random.Random()

    shuffled = list(pool)
    rng.shuffle(shuffled)
    selected = shuffled[:min(config.QUIZ_LENGTH, len(shuffled))]

    return [_build_question(word, pool, rng) for word in selected]


def check_answer(question: Question, answer: str) -> bool:
    """Typing answers are compared trimmed and case-insensitively, options exactly."""
    if question.type == QuestionType.TYPING:
        return answer.strip().lower() == question.correct_answer.strip().lower()
    return answer == question.correct_answer


class QuizSession:
    """One quiz, from theme selection to the final result.

    SETUP -> PLAYING -> RESULT, with RESULT -> PLAYING (replay) and
    PLAYING/RESULT -> SETUP (reconfigure).
    """

    def __init__(self, words: list[WordEntry], rng: Optional[random.Random] = None):
        """
        Initialize a session in SETUP.

        Args:
            words: All words available for quizzing
            rng: Random source for question generation
        """
        self.words = list(words)
        self.rng = rng or random.Random()
        self.step = QuizStep.SETUP
        self.available_themes = themes_in_use(self.words)
        self.selected_themes: list[str] = list(self.available_themes)

        self.questions: list[Question] = []
        self.current_index = 0
        self.score = 0
        self.outcomes: dict[int, AnswerOutcome] = {}
        self.result: Optional[QuizResult] = None

    # ---- Setup ----
    def _require(self, *steps: QuizStep) -> None:
        if self.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise QuizStateError(f"Quiz is in {self.step.value}, expected {allowed}")

    def toggle_theme(self, theme: str) -> None:
        self._require(QuizStep.SETUP)
        if theme in self.selected_themes:
            self.selected_themes.remove(theme)
        elif theme in self.available_themes:
            self.selected_themes.append(theme)

    def toggle_all_themes(self) -> None:
        """Select every theme, or clear the selection if all are selected."""
        self._require(QuizStep.SETUP)
        if len(self.selected_themes) == len(self.available_themes):
            self.selected_themes = []
        else:
            self.selected_themes = list(self.available_themes)

    def select_themes(self, themes: list[str]) -> None:
        self._require(QuizStep.SETUP)
        self.selected_themes = [t for t in self.available_themes if t in themes]

    @property
    def filtered_pool(self) -> list[WordEntry]:
        return filter_by_themes(self.words, self.selected_themes)

    @property
    def can_start(self) -> bool:
        return len(self.filtered_pool) >= config.MIN_QUIZ_WORDS

    def start(self) -> list[Question]:
        self._require(QuizStep.SETUP)
        self._begin()
        return self.questions

    def _begin(self) -> None:
        pool = self.filtered_pool
        self.questions = generate_questions(pool, self.rng)
        self.current_index = 0
        self.score = 0
        self.outcomes = {}
        self.result = None
        self.step = QuizStep.PLAYING
        get_logger().info(
            f"Quiz started: {len(self.questions)} questions from {len(pool)} words "
            f"({', '.join(self.selected_themes)})"
        )

    # ---- Playing ----
    @property
    def current_question(self) -> Question:
        self._require(QuizStep.PLAYING)
        return self.questions[self.current_index]

    @property
    def is_answered(self) -> bool:
        return self.current_index in self.outcomes

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.questions) - 1

    def submit_answer(self, answer: str) -> AnswerOutcome:
        """
        Answer the current question.

        Only the first answer counts. Later calls for the same question
        return the recorded outcome unchanged.
        """
        self._require(QuizStep.PLAYING)
        if self.is_answered:
            return self.outcomes[self.current_index]

        question = self.questions[self.current_index]
        is_correct = check_answer(question, answer)
        if is_correct:
            self.score += 1

        outcome = AnswerOutcome(
            question_index=self.current_index,
            answer=answer,
            is_correct=is_correct,
            correct_answer=question.correct_answer,
        )
        self.outcomes[self.current_index] = outcome
        return outcome

    def option_states(self) -> list[OptionState]:
        """Display state of each option of the current question."""
        question = self.current_question
        if not question.options:
            return []
        outcome = self.outcomes.get(self.current_index)
        if outcome is None:
            return [OptionState.NEUTRAL for _ in question.options]

        states = []
        for option in question.options:
            if option == question.correct_answer:
                states.append(OptionState.CORRECT)
            elif option == outcome.answer:
                states.append(OptionState.WRONG_PICK)
            else:
                states.append(OptionState.NEUTRAL)
        return states

    def advance(self) -> Optional[QuizResult]:
        """
        Move past an answered question.

        Returns:
            The QuizResult if that was the last question, else None
        """
        self._require(QuizStep.PLAYING)
        if not self.is_answered:
            raise QuizStateError("The current question has not been answered")

        if not self.is_last_question:
            self.current_index += 1
            return None
        return self._finalize()

    def _finalize(self) -> QuizResult:
        total = len(self.questions)
        self.result = QuizResult(
            date=datetime.now().isoformat(),
            score=self.score,
            total_questions=total,
            xp_earned=calculate_quiz_xp(self.score, total),
        )
        self.step = QuizStep.RESULT
        get_logger().info(f"Quiz finished: {self.score}/{total}, +{self.result.xp_earned} XP")
        return self.result

    # ---- Result ----
    def replay(self) -> list[Question]:
        """Start a fresh round with the same theme selection."""
        self._require(QuizStep.RESULT)
        self._begin()
        return self.questions

    def reconfigure(self) -> None:
        """Go back to theme selection."""
        self._require(QuizStep.PLAYING, QuizStep.RESULT)
        self.step = QuizStep.SETUP
        self.questions = []
        self.current_index = 0
        self.score = 0
        self.outcomes = {}
