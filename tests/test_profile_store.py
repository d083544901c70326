from datetime import date

import pytest

from neuronote.db import profile_store
from neuronote.models.quiz import QuizResult


@pytest.fixture
def db(fake_db):
    return fake_db


def rows(db):
    return db.tables.get(profile_store.TABLE, [])


def test_first_load_seeds_defaults(db):
    profile = profile_store.load_profile("u1")
    assert profile.xp == 0
    assert profile.streak == 0
    assert profile.badges == []
    assert len(rows(db)) == 1
    assert rows(db)[0]["analytics"] == {"flashcards_learned": 0, "quiz_attempts": 0, "total_quiz_score": 0}

    profile_store.load_profile("u1")
    assert len(rows(db)) == 1


def test_seed_failure_returns_defaults(db):
    db.fail_on.add("insert")
    profile = profile_store.load_profile("u1")
    assert profile.user_id == "u1"
    assert rows(db) == []


def test_record_quiz_persists_increment(db):
    profile, reward = profile_store.record_quiz("u1", QuizResult(correct=3, total=3), today=date(2026, 5, 1))
    assert reward.saved
    assert reward.xp_awarded == 50
    assert profile.xp == 50
    stored = rows(db)[0]
    assert stored["xp"] == 50
    assert stored["last_active_date"] == "2026-05-01"
    assert stored["analytics"]["quiz_attempts"] == 1
    assert "perfect_score" in stored["badges"]


def test_streak_builds_across_days(db):
    profile_store.record_deck_completed("u1", 5, today=date(2026, 5, 1))
    profile_store.record_deck_completed("u1", 5, today=date(2026, 5, 2))
    profile, reward = profile_store.record_deck_completed("u1", 5, today=date(2026, 5, 3))
    assert profile.streak == 3
    assert profile.analytics.flashcards_learned == 15
    assert "streak_3" in reward.new_badges
    assert rows(db)[0]["streak"] == 3


def test_write_failure_is_swallowed(db):
    profile_store.load_profile("u1")
    db.fail_on.add("update")
    profile, reward = profile_store.record_quiz("u1", QuizResult(correct=1, total=2))
    assert not reward.saved
    assert reward.xp_awarded == 15
    assert rows(db)[0]["xp"] == 0


def test_read_failure_skips_write(db):
    db.fail_on.add("select")
    profile, reward = profile_store.record_deck_completed("u1", 4)
    assert not reward.saved
    assert profile.analytics.flashcards_learned == 4
    assert rows(db) == []


def test_reset_profile(db):
    profile_store.record_quiz("u1", QuizResult(correct=2, total=2))
    assert profile_store.reset_profile("u1")
    profile = profile_store.load_profile("u1")
    assert profile.xp == 0
    assert profile.badges == []
    assert profile.last_active_date is None


def test_failed_seed_means_reward_not_saved(db):
    db.fail_on.add("insert")
    profile, reward = profile_store.record_quiz("u1", QuizResult(correct=2, total=2))
    assert not reward.saved
    assert profile.xp == 50
    assert rows(db) == []


def test_update_without_row_is_a_failed_write(db):
    assert not profile_store.update_profile("ghost", {"xp": 10})
    assert not profile_store.reset_profile("ghost")
    assert rows(db) == []


def test_later_update_overwrites_totals(db):
    profile_store.load_profile("u1")
    assert profile_store.update_profile("u1", {"xp": 30})
    assert profile_store.update_profile("u1", {"xp": 20})
    assert rows(db)[0]["xp"] == 20
