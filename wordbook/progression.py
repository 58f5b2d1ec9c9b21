"""Level, badge and XP bookkeeping.

Everything here is a pure function of the profile and the activity history:
callers pass in the current snapshot and persist whatever comes back.
"""

import config
from wordbook.models import (
    ActivityStats,
    Badge,
    GamificationUpdate,
    Notification,
    QuizResult,
    UserProfile,
    WordEntry,
)

# (level, xp threshold), ascending
LEVELS: list[tuple[int, int]] = [
    (1, 0),
    (2, 100),
    (3, 300),
    (4, 600),
    (5, 1000),
    (6, 1500),
    (7, 2200),
    (8, 3000),
    (9, 4000),
    (10, 5500),
]

BADGES: list[Badge] = [
    Badge(
        id="novice_scholar",
        name="Novice Scholar",
        description="Learn 5 new words",
        icon="🌱",
        condition=lambda s: s.word_count >= 5,
    ),
    Badge(
        id="vocabulary_collector",
        name="Vocabulary Collector",
        description="Learn 20 new words",
        icon="📚",
        condition=lambda s: s.word_count >= 20,
    ),
    Badge(
        id="quiz_starter",
        name="Quiz Starter",
        description="Finish 3 quizzes",
        icon="🎯",
        condition=lambda s: s.quiz_count >= 3,
    ),
    Badge(
        id="perfectionist",
        name="Perfectionist",
        description="Get a perfect score in a quiz",
        icon="⭐",
        condition=lambda s: s.perfect_score_count >= 1,
    ),
    Badge(
        id="word_master",
        name="Word Master",
        description="Learn 50 new words",
        icon="👑",
        condition=lambda s: s.word_count >= 50,
    ),
]

BADGES_BY_ID = {b.id: b for b in BADGES}


def calculate_level(xp: int) -> int:
    """Return the highest level whose threshold is <= xp."""
    level = 1
    for lvl, threshold in LEVELS:
        if xp >= threshold:
            level = lvl
        else:
            break
    return level


def get_next_level_xp(level: int) -> int:
    """
    XP needed to reach the level after `level`.

    Past the last tabled level this is 1.5x the top threshold.
    """
    for lvl, threshold in LEVELS:
        if lvl == level + 1:
            return threshold
    return int(LEVELS[-1][1] * 1.5)


def xp_progress(profile: UserProfile) -> float:
    """Percentage of the way to the next level threshold, capped at 100."""
    next_xp = get_next_level_xp(profile.level)
    return min(profile.xp / next_xp * 100, 100.0)


def collect_activity_stats(words: list[WordEntry], stats: list[QuizResult]) -> ActivityStats:
    return ActivityStats(
        word_count=len(words),
        quiz_count=len(stats),
        perfect_score_count=sum(1 for s in stats if s.is_perfect),
    )


def check_new_badges(
    profile: UserProfile,
    words: list[WordEntry],
    stats: list[QuizResult],
) -> list[str]:
    """
    Find badges whose condition is met but that are not unlocked yet.

    Args:
        profile: Current user profile
        words: Current word list
        stats: Current quiz history

    Returns:
        Newly qualified badge ids, in catalog order
    """
    activity = collect_activity_stats(words, stats)
    return [
        badge.id
        for badge in BADGES
        if badge.id not in profile.unlocked_badges and badge.condition(activity)
    ]


def badge_names(badge_ids: list[str]) -> list[str]:
    return [BADGES_BY_ID[b].name for b in badge_ids if b in BADGES_BY_ID]


def award_xp(profile: UserProfile, amount: int) -> UserProfile:
    """Return a copy of the profile with `amount` XP added."""
    if amount < 0:
        raise ValueError(f"XP award must be non-negative, got {amount}")
    return profile.model_copy(update={"xp": profile.xp + amount})


def apply_gamification(
    profile: UserProfile,
    words: list[WordEntry],
    stats: list[QuizResult],
) -> GamificationUpdate:
    """
    Recompute level and badges after an XP-earning event.

    Level and badges are both checked against the same snapshot of words
    and stats. The badge notification is delayed so it does not replace
    the level-up message.

    Args:
        profile: Profile with the new XP already added
        words: Word list after the event
        stats: Quiz history after the event

    Returns:
        GamificationUpdate with the profile to persist and the notifications to show
    """
    notifications = []
    new_level = calculate_level(profile.xp)
    leveled_up = new_level > profile.level
    if leveled_up:
        notifications.append(Notification(message=f"🎉 Congratulations! You reached level {new_level}!"))

    new_badges = check_new_badges(profile, words, stats)
    if new_badges:
        names = ", ".join(badge_names(new_badges))
        notifications.append(
            Notification(
                message=f"🏆 New badge: {names}",
                delay=config.BADGE_NOTIFICATION_DELAY,
            )
        )

    updated = profile.model_copy(update={
        "level": new_level,
        "unlocked_badges": [*profile.unlocked_badges, *new_badges],
    })

    return GamificationUpdate(
        profile=updated,
        previous_level=profile.level,
        leveled_up=leveled_up,
        new_badges=new_badges,
        notifications=notifications,
    )
