"""
Gamification bookkeeping: XP tiers, streaks and badges.

Functions here compute partial-field updates for a UserProfile; the profile
store applies them remotely.
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from neuronote.models.profile import UserProfile, Analytics, Badge
from neuronote.models.quiz import QuizResult

# (minimum score ratio, XP), highest threshold first
QUIZ_REWARD_TIERS: List[Tuple[float, int]] = [
    (1.0, 50),
    (0.8, 30),
    (0.5, 15),
    (0.0, 5),
]

DECK_COMPLETION_XP = 20


def quiz_reward(ratio: float) -> int:
    """
    XP for a quiz score ratio.

    Non-decreasing in ``ratio``. A score of zero earns nothing.
    """
    if ratio <= 0:
        return 0
    for threshold, xp in QUIZ_REWARD_TIERS:
        if ratio >= threshold:
            return xp
    return 0


def next_streak(streak: int, last_active: Optional[date], today: date) -> int:
    """Streak after activity on ``today``"""
    if last_active is None:
        return 1
    if last_active == today:
        return max(streak, 1)
    if last_active == today - timedelta(days=1):
        return streak + 1
    return 1


def earned_badges(xp: int, streak: int, analytics: Analytics, perfect_quiz: bool = False) -> List[str]:
    """Every badge the given state qualifies for"""
    badges = []
    if analytics.quiz_attempts >= 1:
        badges.append(Badge.FIRST_QUIZ.value)
    if perfect_quiz:
        badges.append(Badge.PERFECT_SCORE.value)
    if streak >= 3:
        badges.append(Badge.STREAK_3.value)
    if streak >= 7:
        badges.append(Badge.STREAK_7.value)
    if xp >= 500:
        badges.append(Badge.XP_500.value)
    if analytics.flashcards_learned >= 50:
        badges.append(Badge.FLASHCARDS_50.value)
    return badges


def _build_update(
    profile: UserProfile,
    xp_awarded: int,
    analytics: Analytics,
    today: date,
    perfect_quiz: bool = False
) -> Tuple[Dict[str, Any], List[str]]:
    streak = next_streak(profile.streak, profile.last_active_date, today)
    xp = profile.xp + xp_awarded

    new_badges = [
        b for b in earned_badges(xp, streak, analytics, perfect_quiz)
        if b not in profile.badges
    ]

    update: Dict[str, Any] = {
        "xp": xp,
        "streak": streak,
        "last_active_date": today.isoformat(),
        "analytics": analytics.model_dump(),
    }
    if new_badges:
        update["badges"] = list(profile.badges) + new_badges
    return update, new_badges


def quiz_update(profile: UserProfile, result: QuizResult, today: date) -> Tuple[Dict[str, Any], int, List[str]]:
    """
    Partial update for a submitted quiz.

    Returns:
        (fields to write, XP awarded, newly earned badges)
    """
    xp_awarded = quiz_reward(result.ratio)
    analytics = profile.analytics.model_copy(update={
        "quiz_attempts": profile.analytics.quiz_attempts + 1,
        "total_quiz_score": profile.analytics.total_quiz_score + result.correct,
    })
    update, new_badges = _build_update(profile, xp_awarded, analytics, today, result.is_perfect)
    return update, xp_awarded, new_badges


def deck_update(profile: UserProfile, deck_size: int, today: date) -> Tuple[Dict[str, Any], int, List[str]]:
    """
    Partial update for a completed flashcard deck.

    Returns:
        (fields to write, XP awarded, newly earned badges)
    """
    analytics = profile.analytics.model_copy(update={
        "flashcards_learned": profile.analytics.flashcards_learned + deck_size,
    })
    update, new_badges = _build_update(profile, DECK_COMPLETION_XP, analytics, today)
    return update, DECK_COMPLETION_XP, new_badges


def apply_update(profile: UserProfile, update: Dict[str, Any]) -> UserProfile:
    """Local copy of the profile with ``update`` applied"""
    data = profile.model_dump()
    data.update(update)
    return UserProfile.model_validate(data)
