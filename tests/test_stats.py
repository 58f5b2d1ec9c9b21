"""
Tests for quiz statistics and notifications.
"""

from wordbook.models import Notification, QuizResult, UserProfile
from wordbook.notifications import Notifier
from wordbook.stats import daily_average_scores, summarize


def result(date, score, total=10):
    return QuizResult(date=date, score=score, total_questions=total, xp_earned=score * 10)


class TestDailyAverageScores:
    """Test the per-day chart data."""

    def test_empty_history(self):
        assert daily_average_scores([]) == []

    def test_same_day_is_averaged(self):
        stats = [
            result("2025-03-01T08:00:00", 6),
            result("2025-03-01T20:00:00", 4, total=5),
            result("2025-03-02T08:00:00", 10),
        ]
        days = daily_average_scores(stats)
        assert [(d.date, d.avg_score) for d in days] == [("01/03", 7.0), ("02/03", 10.0)]

    def test_keeps_last_days_only(self):
        stats = [result(f"2025-03-{day:02d}T08:00:00", day % 10) for day in range(1, 11)]
        days = daily_average_scores(stats, days=7)
        assert len(days) == 7
        assert days[0].date == "04/03"
        assert days[-1].date == "10/03"

    def test_unparseable_dates_are_ignored(self):
        stats = [result("yesterday", 5), result("2025-03-01T08:00:00", 5)]
        assert [d.date for d in daily_average_scores(stats)] == ["01/03"]


class TestSummarize:
    """Test headline numbers."""

    def test_summary(self, make_word):
        words = [make_word() for _ in range(3)]
        stats = [result("2025-03-01T08:00:00", 10), result("2025-03-02T08:00:00", 5)]
        summary = summarize(words, stats, UserProfile(xp=150, level=2))

        assert summary["word_count"] == 3
        assert summary["perfect_score_count"] == 1
        assert summary["accuracy"] == 75.0
        assert summary["next_level_xp"] == 300
        assert summary["xp_progress"] == 50.0


class TestNotifier:
    """Test notification sequencing."""

    def test_delay_before_message(self):
        events = []
        notifier = Notifier(emit=lambda m: events.append(("show", m)), sleep=lambda s: events.append(("sleep", s)))
        notifier.show([
            Notification(message="level up"),
            Notification(message="badge", delay=0.5),
        ])
        assert events == [("show", "level up"), ("sleep", 0.5), ("show", "badge")]
        assert notifier.history == ["level up", "badge"]
