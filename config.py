"""Configuration settings for the Wordbook vocabulary notebook."""

from datetime import datetime
from pathlib import Path

APP_NAME = "wordbook"

# Base paths
PROJECT_ROOT = Path(__file__).parent
DATA_DIR = PROJECT_ROOT / "data"
BACKUPS_DIR = PROJECT_ROOT / "backups"
PROMPTS_DIR = PROJECT_ROOT / "prompts"
LOGS_DIR = PROJECT_ROOT / "logs"

# Key-value storage file (one JSON object holding every storage key)
STORAGE_FILE = DATA_DIR / "storage.json"


def get_backup_path(timestamp: datetime | None = None) -> Path:
    """Generate backup file path with date suffix.

    Args:
        timestamp: Datetime to use for suffix. If None, uses current time.

    Returns:
        Path like backups/wordbook_backup_2026-01-31.csv
    """
    if timestamp is None:
        timestamp = datetime.now()
    return BACKUPS_DIR / f"{APP_NAME}_backup_{timestamp.date().isoformat()}.csv"


# Storage keys
WORDS_KEY = "wordbook_words"
STATS_KEY = "wordbook_stats"
PROFILE_KEY = "wordbook_profile"
THEMES_KEY = "wordbook_themes"

# Prompt templates
LOOKUP_PROMPT = PROMPTS_DIR / "word_lookup.txt"

# Claude CLI settings
CLAUDE_MODEL = "claude-opus-4-5-20251101"
LOOKUP_TIMEOUT = 60  # seconds
LOOKUP_MAX_RETRIES = 3

# Themes ("Chung" is the protected default dictionary)
DEFAULT_THEME = "Chung"
DEFAULT_THEMES = [
    "Chung",
    "Giao tiếp",
    "Kinh doanh",
    "Du lịch",
    "Công nghệ",
    "Ẩm thực",
    "Y tế",
]

# XP rewards
WORD_ADD_XP = 10
CORRECT_ANSWER_XP = 10
PERFECT_SCORE_BONUS_XP = 50

# Quiz settings
QUIZ_LENGTH = 10
MIN_QUIZ_WORDS = 4
QUIZ_DISTRACTORS = 3
BLANK_PLACEHOLDER = "_______"

# Notification timing (seconds)
BADGE_NOTIFICATION_DELAY = 0.5  # shown after the level-up message
ANSWER_FEEDBACK_DELAY = 1.5
