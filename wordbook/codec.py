"""CSV backup format: four named sections holding the full application state.

Layout::

    SECTION:PROFILE
    xp,level,unlockedBadges
    <one row>

    SECTION:WORDS
    id,word,pronunciation,meaning,explanation,example,theme,addedAt
    <rows>

    SECTION:STATS
    id,date,score,totalQuestions,xpEarned
    <rows>

    SECTION:THEMES
    themes
    <one JSON array row>

Fields are quoted only when they contain a comma, a double quote or a line
break, with inner quotes doubled.
"""

import csv
import io
import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import config
from wordbook.errors import WordbookError
from wordbook.logger import get_logger
from wordbook.models import BackupData, QuizResult, UserProfile, WordEntry, new_id
from wordbook.progression import calculate_level

SECTION_PREFIX = "SECTION:"
BADGE_SEPARATOR = "|"

PROFILE_SECTION = "PROFILE"
WORDS_SECTION = "WORDS"
STATS_SECTION = "STATS"
THEMES_SECTION = "THEMES"

SECTION_HEADERS = {
    PROFILE_SECTION: ["xp", "level", "unlockedBadges"],
    WORDS_SECTION: ["id", "word", "pronunciation", "meaning", "explanation", "example", "theme", "addedAt"],
    STATS_SECTION: ["id", "date", "score", "totalQuestions", "xpEarned"],
    THEMES_SECTION: ["themes"],
}


class ImportFormatError(WordbookError):
    """Raised when a backup cannot be imported at all."""

    pass


class EmptyFileError(ImportFormatError):
    """Raised when the backup content is empty."""

    pass


class ThemesFormat(str, Enum):
    """Encoding found in a THEMES row."""

    JSON = "json"
    LEGACY = "legacy"  # pipe-joined names, read but never written


# ---- Encoding ----

def encode_backup(
    profile: UserProfile,
    words: list[WordEntry],
    stats: list[QuizResult],
    themes: list[str],
) -> str:
    """
    Serialize the full state into the sectioned CSV format.

    Args:
        profile: User profile
        words: Word list
        stats: Quiz history
        themes: Ordered theme list

    Returns:
        CSV document text
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    def write_section(name: str, rows: list[list[str]]) -> None:
        writer.writerow([f"{SECTION_PREFIX}{name}"])
        writer.writerow(SECTION_HEADERS[name])
        writer.writerows(rows)
        buffer.write("\n")

    write_section(PROFILE_SECTION, [[
        str(profile.xp),
        str(profile.level),
        BADGE_SEPARATOR.join(profile.unlocked_badges),
    ]])
    write_section(WORDS_SECTION, [
        [
            w.id,
            w.word,
            w.pronunciation,
            w.meaning,
            w.explanation,
            w.example,
            w.theme or config.DEFAULT_THEME,
            w.added_at.isoformat(),
        ]
        for w in words
    ])
    write_section(STATS_SECTION, [
        [s.id, s.date, str(s.score), str(s.total_questions), str(s.xp_earned)]
        for s in stats
    ])
    write_section(THEMES_SECTION, [[json.dumps(themes, ensure_ascii=False)]])

    return buffer.getvalue()


def backup_filename(timestamp: Optional[datetime] = None) -> str:
    return config.get_backup_path(timestamp).name


# ---- Row-level parsing ----

def _int_or(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except (ValueError, AttributeError):
        return default


def _field(row: list[str], index: int) -> str:
    return row[index] if index < len(row) else ""


def _parse_timestamp(value: str) -> datetime:
    value = value.strip()
    try:
        if value.isdigit():
            # Epoch milliseconds, as written by older exports
            return datetime.fromtimestamp(int(value) / 1000)
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        get_logger().warning(f"Unparseable addedAt '{value}', using current time")
        return datetime.now()


def parse_profile_row(row: list[str]) -> UserProfile:
    xp = max(_int_or(_field(row, 0), 0), 0)
    badges = [b for b in _field(row, 2).split(BADGE_SEPARATOR) if b.strip()]
    # The cached level is recomputed from xp rather than trusted
    return UserProfile(xp=xp, level=calculate_level(xp), unlocked_badges=list(dict.fromkeys(badges)))


def parse_word_row(row: list[str]) -> WordEntry:
    return WordEntry(
        id=_field(row, 0) or new_id(),
        word=_field(row, 1),
        pronunciation=_field(row, 2),
        meaning=_field(row, 3),
        explanation=_field(row, 4),
        example=_field(row, 5),
        theme=_field(row, 6).strip() or config.DEFAULT_THEME,
        added_at=_parse_timestamp(_field(row, 7)),
    )


def parse_stat_row(row: list[str]) -> QuizResult:
    return QuizResult(
        id=_field(row, 0) or new_id(),
        date=_field(row, 1) or datetime.now().isoformat(),
        score=max(_int_or(_field(row, 2), 0), 0),
        total_questions=max(_int_or(_field(row, 3), 0), 0),
        xp_earned=max(_int_or(_field(row, 4), 0), 0),
    )


def parse_themes_field(raw: str) -> tuple[ThemesFormat, list[str]]:
    """
    Read the THEMES column.

    A JSON array is the canonical form. Anything else is read as the
    legacy pipe-joined list.

    Returns:
        Tuple of (format detected, theme names)
    """
    text = raw.strip()
    if text.startswith("["):
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, list):
            return ThemesFormat.JSON, [str(t) for t in data if str(t).strip()]

    return ThemesFormat.LEGACY, [t for t in text.split(BADGE_SEPARATOR) if t.strip()]


def reconcile_themes(declared: list[str], words: list[WordEntry]) -> list[str]:
    """
    Build the theme list to persist after an import.

    Declared themes come first (deduplicated, in order), then any theme a
    word uses that was not declared, then the default theme is put in
    front if still missing.
    """
    themes: list[str] = []
    for name in declared:
        if name not in themes:
            themes.append(name)
    for w in words:
        if w.theme and w.theme not in themes:
            themes.append(w.theme)
    if config.DEFAULT_THEME not in themes:
        themes.insert(0, config.DEFAULT_THEME)
    return themes


# ---- Decoding ----

def _is_blank(row: list[str]) -> bool:
    return all(not field.strip() for field in row)


def _without_padding(row: list[str]) -> list[str]:
    """Drop the empty trailing cells spreadsheets add when re-saving."""
    while len(row) > 1 and not row[-1].strip():
        row = row[:-1]
    return row


def _section_name(row: list[str]) -> Optional[str]:
    if len(row) == 1 and row[0].strip().startswith(SECTION_PREFIX):
        return row[0].strip()[len(SECTION_PREFIX):].strip().upper()
    return None


def _split_sections(content: str) -> dict[str, list[list[str]]]:
    """Group data rows by section, dropping markers, headers and blank lines."""
    sections: dict[str, list[list[str]]] = {}
    current: Optional[str] = None
    expect_header = False

    for row in csv.reader(io.StringIO(content)):
        if _is_blank(row):
            continue
        row = _without_padding(row)
        name = _section_name(row)
        if name is not None:
            current = name
            sections.setdefault(current, [])
            expect_header = True
            continue
        if current is None:
            continue
        if expect_header:
            expect_header = False
            continue
        sections[current].append(row)

    return sections


def decode_backup(content: str) -> BackupData:
    """
    Parse a CSV backup into a BackupData.

    Decoding has no side effects; the caller decides whether to persist.

    Args:
        content: Backup file text

    Returns:
        BackupData with the reconciled theme list

    Raises:
        EmptyFileError: If the content is empty
        ImportFormatError: If the content is not a sectioned backup
    """
    if not content or not content.strip():
        raise EmptyFileError("The backup file is empty")

    logger = get_logger()
    try:
        sections = _split_sections(content.lstrip("\ufeff"))
        if not sections:
            raise ImportFormatError("No SECTION markers found in backup")

        profile_rows = sections.get(PROFILE_SECTION, [])
        profile = parse_profile_row(profile_rows[0]) if profile_rows else UserProfile()

        words = [parse_word_row(row) for row in sections.get(WORDS_SECTION, [])]
        stats = [parse_stat_row(row) for row in sections.get(STATS_SECTION, [])]

        declared: list[str] = []
        for row in sections.get(THEMES_SECTION, []):
            fmt, names = parse_themes_field(",".join(row))
            if fmt == ThemesFormat.LEGACY:
                logger.warning("THEMES section is not a JSON array, reading legacy pipe-joined list")
            declared.extend(names)
    except ImportFormatError:
        raise
    except Exception as e:
        raise ImportFormatError(f"Invalid backup format: {e}") from e

    themes = reconcile_themes(declared, words)
    logger.info(
        f"Decoded backup: {len(words)} words, {len(stats)} quiz results, "
        f"{len(themes)} themes, {profile.xp} XP"
    )
    return BackupData(profile=profile, words=words, stats=stats, themes=themes)


def read_backup_file(path: Path) -> str:
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def write_backup_file(content: str, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path
