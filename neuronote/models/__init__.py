"""Data models for NeuroNote"""

from neuronote.models.study_pack import (
    StudyPack, Summary, MindMapNode, Diagram, Flashcard, Mnemonic,
    Quiz, MultipleChoiceQuestion, TrueFalseQuestion, FillInBlankQuestion,
    UploadedFile, SpeechAudio
)

from neuronote.models.quiz import (
    QuestionType, QuizAnswers, QuestionResult, QuizResult
)

from neuronote.models.profile import (
    UserProfile, Analytics, Badge, BADGE_LABELS, RewardOutcome
)

from neuronote.models.schemas import (
    SpeechRequest, GradeQuizRequest, GradeQuizResponse,
    CompleteDeckRequest, CompleteDeckResponse,
    ProfileResponse, ErrorResponse, HealthResponse
)
