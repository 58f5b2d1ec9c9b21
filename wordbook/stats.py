"""Quiz history statistics for the stats screen."""

import pandas as pd

from wordbook.models import DailyScore, QuizResult, UserProfile, WordEntry
from wordbook.progression import collect_activity_stats, get_next_level_xp, xp_progress


def daily_average_scores(stats: list[QuizResult], days: int = 7) -> list[DailyScore]:
    """
    Average quiz score per calendar day, on a 0-10 scale.

    Args:
        stats: Quiz history
        days: Number of most recent days to keep

    Returns:
        List of DailyScore, oldest first
    """
    rows = [
        {"date": s.date, "score": s.score * 10 / s.total_questions}
        for s in stats
        if s.total_questions > 0
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["date"] = pd.to_datetime(df["date"], errors="coerce", format="ISO8601", utc=True)
    df = df.dropna(subset=["date"])
    if df.empty:
        return []

    df["day"] = df["date"].dt.tz_convert(None).dt.normalize()
    daily = df.groupby("day")["score"].mean().round(1).sort_index().tail(days)

    return [
        DailyScore(date=day.strftime("%d/%m"), avg_score=float(score))
        for day, score in daily.items()
    ]


def summarize(words: list[WordEntry], stats: list[QuizResult], profile: UserProfile) -> dict:
    """Headline numbers for the stats screen."""
    activity = collect_activity_stats(words, stats)
    total_questions = sum(s.total_questions for s in stats)
    accuracy = sum(s.score for s in stats) / total_questions * 100 if total_questions else 0.0
    return {
        "word_count": activity.word_count,
        "quiz_count": activity.quiz_count,
        "perfect_score_count": activity.perfect_score_count,
        "accuracy": round(accuracy, 1),
        "xp": profile.xp,
        "level": profile.level,
        "next_level_xp": get_next_level_xp(profile.level),
        "xp_progress": round(xp_progress(profile), 1),
        "badges": list(profile.unlocked_badges),
    }
