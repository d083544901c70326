"""Gamification profile store backed by Supabase.

One row per user in ``user_profiles``:

    user_id (pk), streak, last_active_date, xp, badges (jsonb),
    analytics (jsonb), updated_at

Rows are seeded with defaults on first read and mutated only through
partial-field updates. Write failures are logged and swallowed so a broken
store never blocks studying; unsaved increments are lost.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any

from neuronote.models.profile import UserProfile, RewardOutcome
from neuronote.models.quiz import QuizResult
from neuronote.study import rewards

logger = logging.getLogger(__name__)

TABLE = "user_profiles"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _supabase():
    """Return the shared Supabase client (lazy import to avoid circular deps)."""
    from neuronote.db.supabase_client import get_supabase_client
    return get_supabase_client()


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _row_to_profile(row: dict[str, Any]) -> UserProfile:
    return UserProfile.model_validate({
        "user_id": row["user_id"],
        "streak": row.get("streak") or 0,
        "last_active_date": row.get("last_active_date"),
        "xp": row.get("xp") or 0,
        "badges": row.get("badges") or [],
        "analytics": row.get("analytics") or {},
    })


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_profile(user_id: str) -> UserProfile:
    """Return the profile for *user_id*, seeding defaults on first use.

    Read errors propagate; a failed seed write is logged and the in-memory
    default is returned.
    """
    sb = _supabase()
    result = sb.table(TABLE).select("*").eq("user_id", user_id).execute()

    if result.data:
        return _row_to_profile(result.data[0])

    profile = UserProfile.default(user_id)
    try:
        sb.table(TABLE).insert(profile.to_row()).execute()
        logger.info("Seeded default profile for user %s", user_id)
    except Exception as exc:
        logger.error("Failed to seed profile for user %s: %s", user_id, exc)
    return profile


def update_profile(user_id: str, fields: dict[str, Any]) -> bool:
    """Apply a partial-field update. Returns False if the write failed.

    Fields carry absolute values computed from an earlier read, so of two
    overlapping updates for the same user the later one wins.
    """
    payload = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}
    try:
        result = _supabase().table(TABLE).update(payload).eq("user_id", user_id).execute()
    except Exception as exc:
        logger.error("Profile update failed for user %s (fields=%s): %s", user_id, sorted(fields), exc)
        return False
    if not result.data:
        # PostgREST reports an update that matched no row as success with no data
        logger.warning("Profile update for user %s matched no row", user_id)
        return False
    logger.info("Updated profile for user %s (fields=%s)", user_id, sorted(fields))
    return True


def _load_or_default(user_id: str) -> tuple[UserProfile, bool]:
    try:
        return load_profile(user_id), True
    except Exception as exc:
        logger.error("Profile read failed for user %s, using defaults: %s", user_id, exc)
        return UserProfile.default(user_id), False


def record_quiz(
    user_id: str,
    result: QuizResult,
    today: date | None = None,
) -> tuple[UserProfile, RewardOutcome]:
    """Award XP/badges for a graded quiz and persist the increment."""
    profile, readable = _load_or_default(user_id)
    update, xp, new_badges = rewards.quiz_update(profile, result, today or _today())

    saved = readable and update_profile(user_id, update)
    logger.info(
        "Quiz recorded for user %s: %d/%d, +%d XP, badges=%s",
        user_id, result.correct, result.total, xp, new_badges,
    )
    return rewards.apply_update(profile, update), RewardOutcome(
        xp_awarded=xp, new_badges=new_badges, saved=saved
    )


def record_deck_completed(
    user_id: str,
    deck_size: int,
    today: date | None = None,
) -> tuple[UserProfile, RewardOutcome]:
    """Award XP/badges for finishing a flashcard deck and persist the increment."""
    profile, readable = _load_or_default(user_id)
    update, xp, new_badges = rewards.deck_update(profile, deck_size, today or _today())

    saved = readable and update_profile(user_id, update)
    logger.info("Deck of %d cards completed by user %s, +%d XP", deck_size, user_id, xp)
    return rewards.apply_update(profile, update), RewardOutcome(
        xp_awarded=xp, new_badges=new_badges, saved=saved
    )


def reset_profile(user_id: str) -> bool:
    """Restore default values for *user_id*."""
    defaults = UserProfile.default(user_id).to_row()
    defaults.pop("user_id")
    ok = update_profile(user_id, defaults)
    if ok:
        logger.info("Reset profile for user %s", user_id)
    return ok
