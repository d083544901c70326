from datetime import date

import pytest

from neuronote.models.profile import UserProfile, Analytics, Badge
from neuronote.models.quiz import QuizResult
from neuronote.study.rewards import (
    quiz_reward, next_streak, quiz_update, deck_update, apply_update, DECK_COMPLETION_XP
)

TODAY = date(2026, 3, 10)


def test_reward_tiers():
    assert quiz_reward(0.0) == 0
    assert quiz_reward(0.2) == 5
    assert quiz_reward(0.5) == 15
    assert quiz_reward(0.8) == 30
    assert quiz_reward(1.0) == 50


def test_reward_is_monotonic():
    ratios = [i / 100 for i in range(101)]
    rewards = [quiz_reward(r) for r in ratios]
    assert rewards == sorted(rewards)


@pytest.mark.parametrize("last, streak, expected", [
    (None, 0, 1),
    (date(2026, 3, 10), 4, 4),
    (date(2026, 3, 9), 4, 5),
    (date(2026, 3, 7), 4, 1),
])
def test_next_streak(last, streak, expected):
    assert next_streak(streak, last, TODAY) == expected


def test_quiz_update_is_partial_and_awards_badges():
    profile = UserProfile(user_id="u1")
    update, xp, badges = quiz_update(profile, QuizResult(correct=4, total=4), TODAY)

    assert xp == 50
    assert update["xp"] == 50
    assert update["streak"] == 1
    assert update["last_active_date"] == "2026-03-10"
    assert update["analytics"] == {"flashcards_learned": 0, "quiz_attempts": 1, "total_quiz_score": 4}
    assert set(badges) == {Badge.FIRST_QUIZ.value, Badge.PERFECT_SCORE.value}
    assert "user_id" not in update


def test_badges_are_not_awarded_twice():
    profile = UserProfile(
        user_id="u1", xp=100, streak=2, last_active_date=date(2026, 3, 9),
        badges=[Badge.FIRST_QUIZ.value],
        analytics=Analytics(quiz_attempts=3, total_quiz_score=9),
    )
    update, _, badges = quiz_update(profile, QuizResult(correct=1, total=4), TODAY)
    assert badges == [Badge.STREAK_3.value]
    assert update["badges"] == [Badge.FIRST_QUIZ.value, Badge.STREAK_3.value]


def test_no_badges_key_when_nothing_new():
    profile = UserProfile(user_id="u1", badges=[Badge.FIRST_QUIZ.value], analytics=Analytics(quiz_attempts=1))
    update, _, badges = quiz_update(profile, QuizResult(correct=1, total=3), TODAY)
    assert badges == []
    assert "badges" not in update


def test_deck_update():
    profile = UserProfile(user_id="u1", xp=490, analytics=Analytics(flashcards_learned=45))
    update, xp, badges = deck_update(profile, 10, TODAY)
    assert xp == DECK_COMPLETION_XP
    assert update["xp"] == 510
    assert update["analytics"]["flashcards_learned"] == 55
    assert set(badges) == {Badge.XP_500.value, Badge.FLASHCARDS_50.value}


def test_apply_update_round_trips_into_profile():
    profile = UserProfile(user_id="u1")
    update, _, _ = deck_update(profile, 5, TODAY)
    updated = apply_update(profile, update)
    assert updated.xp == DECK_COMPLETION_XP
    assert updated.last_active_date == TODAY
    assert updated.analytics.flashcards_learned == 5
    assert profile.xp == 0
