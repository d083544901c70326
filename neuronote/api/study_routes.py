"""
API Routes for Study Features (Quiz grading, Flashcard decks, Profile)
"""
from fastapi import APIRouter, HTTPException, Request, Depends
from slowapi import Limiter
from slowapi.util import get_remote_address

from neuronote.models.profile import BADGE_LABELS, Badge
from neuronote.models.schemas import (
    GradeQuizRequest, GradeQuizResponse,
    CompleteDeckRequest, CompleteDeckResponse,
    ProfileResponse
)
from neuronote.study.grading import grade_quiz, result_message
from neuronote.db import profile_store
from neuronote.api.auth import get_current_user
from neuronote.utils.logger import get_logger

logger = get_logger(__name__)

# Create router
router = APIRouter(prefix="/api/v1/study", tags=["Study Features"])

# Rate limiter
limiter = Limiter(key_func=get_remote_address)


def _badge_labels(badges):
    labels = []
    for b in badges:
        try:
            labels.append(BADGE_LABELS[Badge(b)])
        except ValueError:
            labels.append(b)
    return labels


# =============================================================================
# QUIZ ENDPOINTS
# =============================================================================

@router.post("/quiz/grade", response_model=GradeQuizResponse)
@limiter.limit("60/minute")
async def grade_quiz_attempt(request: Request, body: GradeQuizRequest, user_id: str = Depends(get_current_user)):
    """Grade a quiz attempt and award XP"""
    if body.quiz.total_questions == 0:
        raise HTTPException(status_code=400, detail="Quiz has no questions")

    try:
        result = grade_quiz(body.quiz, body.answers)
        logger.info(f"Graded quiz '{body.topic or 'untitled'}' for {user_id}: {result.correct}/{result.total}")

        profile, reward = profile_store.record_quiz(user_id, result)
        if not reward.saved:
            logger.warning(f"Quiz reward for {user_id} was not saved")

        return GradeQuizResponse(
            success=True,
            correct=result.correct,
            total=result.total,
            percent=result.percent,
            message=result_message(result),
            result=result,
            reward=reward,
            profile=profile
        )

    except Exception as e:
        logger.error(f"Error grading quiz: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# FLASHCARD ENDPOINTS
# =============================================================================

@router.post("/flashcards/complete", response_model=CompleteDeckResponse)
@limiter.limit("60/minute")
async def complete_flashcard_deck(request: Request, body: CompleteDeckRequest, user_id: str = Depends(get_current_user)):
    """Record a finished flashcard deck"""
    try:
        profile, reward = profile_store.record_deck_completed(user_id, body.deck_size)

        return CompleteDeckResponse(
            success=True,
            reward=reward,
            profile=profile
        )

    except Exception as e:
        logger.error(f"Error completing deck: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# PROFILE ENDPOINTS
# =============================================================================

@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user_id: str = Depends(get_current_user)):
    """Get the learner's XP, streak, badges and analytics"""
    try:
        profile = profile_store.load_profile(user_id)

        return ProfileResponse(
            success=True,
            profile=profile,
            badge_labels=_badge_labels(profile.badges)
        )

    except Exception as e:
        logger.error(f"Error getting profile: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/profile")
async def reset_profile(user_id: str = Depends(get_current_user)):
    """Reset all gamification progress (use with caution!)"""
    try:
        success = profile_store.reset_profile(user_id)

        return {
            "success": success,
            "message": "Profile reset" if success else "Failed to reset"
        }

    except Exception as e:
        logger.error(f"Error resetting profile: {e}")
        raise HTTPException(status_code=500, detail=str(e))
