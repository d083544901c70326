"""
Study pack data models for NeuroNote

A StudyPack is built wholesale from one model reply. The model is asked
for snake_case keys but camelCase variants (``correctIndex``, ``keyPoints``)
are accepted as aliases.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class PackModel(BaseModel):
    """Base for every model-generated record"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # The model writes null for "nothing here"; such keys fall back to field defaults
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Summary(PackModel):
    """Feynman-style summary of the material"""
    core_concept: str = Field(..., description="One-sentence explanation of the topic")
    key_points: List[str] = Field(default_factory=list)
    short_notes: str = Field(default="", description="A few lines for quick revision")
    long_notes: str = Field(default="", description="Detailed notes")


class MindMapNode(PackModel):
    """Node of the topic hierarchy"""
    label: str
    children: List[MindMapNode] = Field(default_factory=list)

    def depth(self) -> int:
        """Number of levels below and including this node"""
        if not self.children:
            return 1
        return 1 + max(child.depth() for child in self.children)

    def count(self) -> int:
        """Total number of nodes in this subtree"""
        return 1 + sum(child.count() for child in self.children)


MindMapNode.model_rebuild()


class Diagram(PackModel):
    """Ordered process or flow extracted from the material"""
    type: str = Field(default="flow")
    steps: List[str] = Field(default_factory=list)


class Flashcard(PackModel):
    """Front/back recall card"""
    front: str
    back: str


class Mnemonic(PackModel):
    """Memory aid"""
    type: str = Field(..., description="Acronym, Analogy, Story, Rhyme ...")
    content: str
    explanation: str = Field(default="")
    emoji: Optional[str] = Field(default=None)


class MultipleChoiceQuestion(PackModel):
    """Question with one correct option"""
    question: str
    options: List[str] = Field(..., min_length=2)
    correct_index: int = Field(..., ge=0)
    explanation: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def _check_index(self) -> MultipleChoiceQuestion:
        if self.correct_index >= len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index} out of range for {len(self.options)} options"
            )
        return self


class TrueFalseQuestion(PackModel):
    """Statement to judge as true or false"""
    statement: str = Field(..., validation_alias=AliasChoices("statement", "question"))
    answer: bool
    explanation: Optional[str] = Field(default=None)


class FillInBlankQuestion(PackModel):
    """Sentence with a blank (``___``) and the expected word"""
    sentence: str = Field(..., validation_alias=AliasChoices("sentence", "question"))
    answer: str
    explanation: Optional[str] = Field(default=None)


class Quiz(PackModel):
    """Three separately-typed question collections"""
    multiple_choice: List[MultipleChoiceQuestion] = Field(default_factory=list)
    true_false: List[TrueFalseQuestion] = Field(default_factory=list)
    fill_in_blank: List[FillInBlankQuestion] = Field(default_factory=list)

    @property
    def total_questions(self) -> int:
        return len(self.multiple_choice) + len(self.true_false) + len(self.fill_in_blank)


class StudyPack(PackModel):
    """Everything generated from one request"""
    title: str
    summary: Summary
    mind_map: MindMapNode
    diagram: Diagram = Field(default_factory=Diagram)
    flashcards: List[Flashcard] = Field(default_factory=list)
    mnemonics: List[Mnemonic] = Field(default_factory=list)
    quiz: Quiz = Field(default_factory=Quiz)

    @model_validator(mode="before")
    @classmethod
    def _accept_flat_quiz(cls, data):
        # Older prompts returned the quiz as a flat list of multiple-choice questions
        if isinstance(data, dict):
            quiz = data.get("quiz")
            if isinstance(quiz, list):
                data = {**data, "quiz": {"multiple_choice": quiz}}
        return data


class UploadedFile(BaseModel):
    """File held in memory for a single generation request"""
    name: str
    mime_type: str
    data: str = Field(..., description="Base64 payload")


class SpeechAudio(BaseModel):
    """Inline audio returned by the speech endpoint"""
    mime_type: str
    data: str = Field(..., description="Base64 PCM payload")
