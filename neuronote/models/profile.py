"""
Gamification profile models for NeuroNote
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import date
from enum import Enum


class Badge(str, Enum):
    """Badges a learner can earn (never revoked)"""
    FIRST_QUIZ = "first_quiz"
    PERFECT_SCORE = "perfect_score"
    STREAK_3 = "streak_3"
    STREAK_7 = "streak_7"
    XP_500 = "xp_500"
    FLASHCARDS_50 = "flashcards_50"


BADGE_LABELS = {
    Badge.FIRST_QUIZ: "🎯 First Quiz",
    Badge.PERFECT_SCORE: "🧠 Perfect Recall",
    Badge.STREAK_3: "🔥 3-Day Streak",
    Badge.STREAK_7: "⚡ 7-Day Streak",
    Badge.XP_500: "🏆 500 XP",
    Badge.FLASHCARDS_50: "📚 50 Cards Learned",
}


class Analytics(BaseModel):
    """Cumulative study counters"""
    flashcards_learned: int = Field(default=0, ge=0)
    quiz_attempts: int = Field(default=0, ge=0)
    total_quiz_score: int = Field(default=0, ge=0, description="Sum of correct answers over all attempts")


class UserProfile(BaseModel):
    """Per-user gamification state stored remotely"""
    user_id: str
    streak: int = Field(default=0, ge=0)
    last_active_date: Optional[date] = None
    xp: int = Field(default=0, ge=0)
    badges: List[str] = Field(default_factory=list)
    analytics: Analytics = Field(default_factory=Analytics)

    @classmethod
    def default(cls, user_id: str) -> "UserProfile":
        """Fresh profile seeded on first use"""
        return cls(user_id=user_id)

    def to_row(self) -> Dict[str, Any]:
        """Serialise for the user_profiles table"""
        return {
            "user_id": self.user_id,
            "streak": self.streak,
            "last_active_date": self.last_active_date.isoformat() if self.last_active_date else None,
            "xp": self.xp,
            "badges": list(self.badges),
            "analytics": self.analytics.model_dump(),
        }


class RewardOutcome(BaseModel):
    """What a single action earned"""
    xp_awarded: int = 0
    new_badges: List[str] = Field(default_factory=list)
    saved: bool = Field(default=True, description="False when the remote write failed")
