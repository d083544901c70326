"""
Pydantic schemas for API requests and responses
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from neuronote.models.study_pack import Quiz
from neuronote.models.quiz import QuizAnswers, QuizResult
from neuronote.models.profile import UserProfile, RewardOutcome


class SpeechRequest(BaseModel):
    """Request model for text-to-speech"""
    text: str = Field(..., description="Text to read aloud")
    voice: Optional[str] = Field(None, description="Prebuilt voice name, defaults to GEMINI_TTS_VOICE")


class GradeQuizRequest(BaseModel):
    """Request model for grading a quiz attempt"""
    quiz: Quiz
    answers: QuizAnswers = Field(default_factory=QuizAnswers)
    topic: Optional[str] = Field(None, description="Study pack title, used for logging")


class GradeQuizResponse(BaseModel):
    """Response model for a graded attempt"""
    success: bool
    correct: int
    total: int
    percent: int
    message: str
    result: QuizResult
    reward: RewardOutcome
    profile: UserProfile


class CompleteDeckRequest(BaseModel):
    """Request model for a finished flashcard deck"""
    deck_size: int = Field(..., ge=1, le=500, description="Number of cards in the deck")
    topic: Optional[str] = Field(None)


class CompleteDeckResponse(BaseModel):
    """Response model for a finished flashcard deck"""
    success: bool
    reward: RewardOutcome
    profile: UserProfile


class ProfileResponse(BaseModel):
    """Response model for the current profile"""
    success: bool
    profile: UserProfile
    badge_labels: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Body returned for terminal generation errors"""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Response model for health check"""
    status: str
    timestamp: datetime
    version: str
    gemini_configured: bool
