#!/usr/bin/env python3
"""Wordbook - vocabulary notebook with quizzes, levels and badges."""

import argparse
import random
import sys
import time
from pathlib import Path

from tqdm import tqdm

import config
from wordbook.app import WordbookApp
from wordbook.errors import WordbookError
from wordbook.logger import setup_logger
from wordbook.lookup_client import LookupFailure
from wordbook.models import QuestionType
from wordbook.storage import JsonFileStorage, StateRepository


THEME_HELP = f"Dictionary to file words in (e.g. {', '.join(config.DEFAULT_THEMES)})"


def load_word_list(path: Path) -> list[str]:
    """Load words from a text file (one word per line)."""
    words = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            word = line.strip()
            if word and not word.startswith("#"):
                words.append(word)
    return words


def print_word(entry) -> None:
    print(f"{entry.word}  {entry.pronunciation}  [{entry.theme}]")
    print(f"  Meaning:     {entry.meaning}")
    print(f"  Explanation: {entry.explanation}")
    print(f"  Example:     {entry.example}")


def cmd_lookup(app: WordbookApp, args) -> None:
    data = app.lookup(args.word, args.theme)
    print(f"{args.word}  {data.pronunciation}")
    print(f"  Meaning:     {data.meaning}")
    print(f"  Explanation: {data.explanation}")
    print(f"  Example:     {data.example}")


def cmd_add(app: WordbookApp, args) -> None:
    entry, _ = app.learn_word(args.word, args.theme)
    print_word(entry)
    print(f"+{config.WORD_ADD_XP} XP")


def cmd_add_batch(app: WordbookApp, args, logger) -> None:
    words = load_word_list(args.file)
    logger.info(f"Loaded {len(words)} words from {args.file}")

    failed = []
    for word in tqdm(words, desc="  Adding"):
        try:
            app.learn_word(word, args.theme)
        except LookupFailure as e:
            failed.append(word)
            logger.warning(f"Skipped '{word}': {e}")

    print(f"Added {len(words) - len(failed)}/{len(words)} words to '{args.theme}'")
    if failed:
        print(f"Failed: {', '.join(failed)}")


def cmd_themes(app: WordbookApp, args) -> None:
    if args.action == "add":
        app.add_theme(args.name)
    elif args.action == "rename":
        app.rename_theme(args.name, args.new_name)
    elif args.action == "delete":
        count = app.theme_word_count(args.name)
        if not args.yes:
            answer = input(
                f"Delete dictionary '{args.name}'? This permanently removes {count} words. [y/N] "
            )
            if answer.strip().lower() != "y":
                print("Cancelled.")
                return
        app.delete_theme(args.name)

    for theme, count in app.store.word_counts().items():
        marker = " (default)" if theme == config.DEFAULT_THEME else ""
        print(f"  {theme}{marker}: {count} words")

    suggestions = [t for t in app.store.suggested_themes() if t not in app.themes]
    if suggestions:
        print(f"Suggested: {', '.join(suggestions)}")


def ask_question(session, number: int) -> None:
    question = session.current_question
    print()
    print(f"Question {number}/{len(session.questions)} ({question.type.value})")
    if question.type == QuestionType.FILL_BLANK:
        print(f"  Fill in the blank: {question.question_text}")
    elif question.type == QuestionType.TYPING:
        print(f"  Type the English word for: {question.question_text}")
    else:
        print(f"  What does '{question.question_text}' mean?")

    if question.options:
        for i, option in enumerate(question.options, start=1):
            print(f"    {i}. {option}")
        choice = input("  Your answer (number): ").strip()
        try:
            answer = question.options[int(choice) - 1]
        except (ValueError, IndexError):
            answer = choice
    else:
        answer = input("  Your answer: ")

    outcome = session.submit_answer(answer)
    if outcome.is_correct:
        print("  ✅ Correct!")
    else:
        print(f"  ❌ Wrong. Correct answer: {outcome.correct_answer}")


def cmd_quiz(app: WordbookApp, args) -> None:
    if args.seed is not None:
        app.rng = random.Random(args.seed)
    session = app.new_quiz()
    if args.themes:
        session.select_themes(args.themes)
    if not session.can_start:
        print(f"You need at least {config.MIN_QUIZ_WORDS} words in the selected themes to start a quiz.")
        return

    session.start()
    result = None
    number = 1
    while result is None:
        ask_question(session, number)
        if not session.is_last_question:
            time.sleep(config.ANSWER_FEEDBACK_DELAY)
        result = session.advance()
        number += 1

    print()
    print(f"Score: {result.score}/{result.total_questions}  +{result.xp_earned} XP")
    app.finish_quiz(result)


def cmd_flashcards(app: WordbookApp, args) -> None:
    deck = app.flashcards()
    print("Enter: flip   n: next   p: previous   q: quit")
    while True:
        card = deck.current
        if deck.is_flipped:
            print(f"[{deck.index + 1}/{len(deck)}] {card.meaning} - {card.example}")
        else:
            print(f"[{deck.index + 1}/{len(deck)}] {card.word}  {card.pronunciation}")
        command = input("> ").strip().lower()
        if command == "q":
            break
        if command == "n":
            deck.next()
        elif command == "p":
            deck.previous()
        else:
            deck.flip()


def cmd_stats(app: WordbookApp, args) -> None:
    summary = app.summary()
    print(f"Level {summary['level']}  {summary['xp']} / {summary['next_level_xp']} XP ({summary['xp_progress']}%)")
    print(f"Words: {summary['word_count']}  Quizzes: {summary['quiz_count']}  "
          f"Perfect: {summary['perfect_score_count']}  Accuracy: {summary['accuracy']}%")
    print(f"Badges: {', '.join(summary['badges']) or '-'}")
    for day in summary["daily_scores"]:
        print(f"  {day['date']}: {day['avg_score']}/10")


def cmd_export(app: WordbookApp, args) -> None:
    path = app.write_backup(args.output)
    print(f"Backup written to: {path}")


def cmd_import(app: WordbookApp, args) -> None:
    data = app.read_backup(args.file)
    print(f"Imported {len(data.words)} words, {len(data.stats)} quiz results, {len(data.themes)} themes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Wordbook - personal vocabulary notebook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Look up a word and save it to a dictionary
  python main.py add resilience --theme "Kinh doanh"

  # Add every word listed in a file
  python main.py add-batch words.txt --theme "Du lịch"

  # Take a quiz on two dictionaries
  python main.py quiz --themes Chung "Du lịch"

  # Back up and restore
  python main.py export
  python main.py import backups/wordbook_backup_2026-01-31.csv
        """,
    )
    parser.add_argument(
        "--storage",
        type=Path,
        default=config.STORAGE_FILE,
        help="Path to the storage file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("lookup", help="Look up a word without saving it")
    p.add_argument("word")
    p.add_argument("--theme", default=config.DEFAULT_THEME)

    p = subparsers.add_parser("add", help="Look up a word and save it")
    p.add_argument("word")
    p.add_argument("--theme", default=config.DEFAULT_THEME, help=THEME_HELP)

    p = subparsers.add_parser("add-batch", help="Look up and save words from a file")
    p.add_argument("file", type=Path)
    p.add_argument("--theme", default=config.DEFAULT_THEME, help=THEME_HELP)

    p = subparsers.add_parser("themes", help="List or manage dictionaries")
    p.add_argument("action", nargs="?", choices=["list", "add", "rename", "delete"], default="list")
    p.add_argument("name", nargs="?")
    p.add_argument("new_name", nargs="?")
    p.add_argument("-y", "--yes", action="store_true", help="Delete without confirmation")

    p = subparsers.add_parser("quiz", help="Take a quiz")
    p.add_argument("--themes", nargs="+", help="Dictionaries to draw words from (default: all)")
    p.add_argument("--seed", type=int, help="Random seed for reproducible quizzes")

    subparsers.add_parser("flashcards", help="Review words as flashcards")
    subparsers.add_parser("stats", help="Show level, badges and quiz history")

    p = subparsers.add_parser("export", help="Write a CSV backup")
    p.add_argument("--output", type=Path, help="Backup path (default: dated file in backups/)")

    p = subparsers.add_parser("import", help="Replace all data with a CSV backup")
    p.add_argument("file", type=Path)

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "themes" and args.action != "list" and not args.name:
        parser.error(f"themes {args.action} needs a dictionary name")
    if args.command == "themes" and args.action == "rename" and not args.new_name:
        parser.error("themes rename needs the old and the new name")

    logger = setup_logger()
    app = WordbookApp(StateRepository(JsonFileStorage(args.storage)))

    commands = {
        "lookup": lambda: cmd_lookup(app, args),
        "add": lambda: cmd_add(app, args),
        "add-batch": lambda: cmd_add_batch(app, args, logger),
        "themes": lambda: cmd_themes(app, args),
        "quiz": lambda: cmd_quiz(app, args),
        "flashcards": lambda: cmd_flashcards(app, args),
        "stats": lambda: cmd_stats(app, args),
        "export": lambda: cmd_export(app, args),
        "import": lambda: cmd_import(app, args),
    }

    try:
        commands[args.command]()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(1)
    except WordbookError as e:
        logger.error(f"{e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"File error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
