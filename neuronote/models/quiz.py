"""
Quiz attempt models for NeuroNote
"""
from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr
from typing import Optional, List, Dict, Any
from enum import Enum


class QuestionType(str, Enum):
    """Quiz sections"""
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    FILL_IN_BLANK = "fill_in_blank"


class QuizAnswers(BaseModel):
    """
    Answers for one attempt, keyed by question index within each section.

    Discarded on retake. A missing key or ``None`` means unanswered.
    """
    multiple_choice: Dict[int, Optional[StrictInt]] = Field(default_factory=dict)
    true_false: Dict[int, Optional[StrictBool]] = Field(default_factory=dict)
    fill_in_blank: Dict[int, Optional[StrictStr]] = Field(default_factory=dict)

    def get(self, question_type: QuestionType, index: int) -> Any:
        return getattr(self, question_type.value).get(index)


class QuestionResult(BaseModel):
    """Outcome for a single question"""
    question_type: QuestionType
    index: int
    answered: bool
    is_correct: bool
    user_answer: Any = None
    correct_answer: Any = None
    explanation: Optional[str] = None


class QuizResult(BaseModel):
    """Derived score for an attempt"""
    correct: int = 0
    total: int = 0
    per_question: List[QuestionResult] = Field(default_factory=list)

    @property
    def ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct / self.total

    @property
    def percent(self) -> int:
        return round(self.ratio * 100)

    @property
    def is_perfect(self) -> bool:
        return self.total > 0 and self.correct == self.total
