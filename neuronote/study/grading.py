"""
Quiz grading

Pure functions: the score is always derived from the quiz and the answer
map, never taken from user input.
"""
from typing import Any, Iterator, Tuple, Union

from neuronote.models.study_pack import (
    Quiz, MultipleChoiceQuestion, TrueFalseQuestion, FillInBlankQuestion
)
from neuronote.models.quiz import QuestionType, QuizAnswers, QuestionResult, QuizResult

Question = Union[MultipleChoiceQuestion, TrueFalseQuestion, FillInBlankQuestion]


def normalize_text(value: str) -> str:
    """Case-fold and trim for fill-in-the-blank comparison"""
    return value.strip().casefold()


def is_correct(question: Question, answer: Any) -> bool:
    """
    Check one answer against its question.

    Multiple choice compares option indices, true/false compares booleans,
    fill-in-the-blank compares trimmed text ignoring case. An unanswered
    question (None) is never correct.
    """
    if answer is None:
        return False
    if isinstance(question, MultipleChoiceQuestion):
        # bool is an int subclass; True must not match index 1
        return isinstance(answer, int) and not isinstance(answer, bool) and answer == question.correct_index
    if isinstance(question, TrueFalseQuestion):
        return isinstance(answer, bool) and answer is question.answer
    if isinstance(question, FillInBlankQuestion):
        return isinstance(answer, str) and normalize_text(answer) == normalize_text(question.answer)
    raise TypeError(f"Unsupported question type: {type(question).__name__}")


def iter_questions(quiz: Quiz) -> Iterator[Tuple[QuestionType, int, Question]]:
    """Yield (section, index, question) in display order"""
    for i, q in enumerate(quiz.multiple_choice):
        yield QuestionType.MULTIPLE_CHOICE, i, q
    for i, q in enumerate(quiz.true_false):
        yield QuestionType.TRUE_FALSE, i, q
    for i, q in enumerate(quiz.fill_in_blank):
        yield QuestionType.FILL_IN_BLANK, i, q


def _correct_answer(question: Question) -> Any:
    if isinstance(question, MultipleChoiceQuestion):
        return question.correct_index
    return question.answer


def grade_quiz(quiz: Quiz, answers: QuizAnswers) -> QuizResult:
    """
    Score an attempt.

    Every question in the quiz counts toward the total, answered or not.
    """
    per_question = []
    correct = 0
    for qtype, index, question in iter_questions(quiz):
        answer = answers.get(qtype, index)
        ok = is_correct(question, answer)
        if ok:
            correct += 1
        per_question.append(QuestionResult(
            question_type=qtype,
            index=index,
            answered=answer is not None,
            is_correct=ok,
            user_answer=answer,
            correct_answer=_correct_answer(question),
            explanation=question.explanation,
        ))
    return QuizResult(correct=correct, total=len(per_question), per_question=per_question)


def is_complete(quiz: Quiz, answers: QuizAnswers) -> bool:
    """True once every question has an answer"""
    for qtype, index, _ in iter_questions(quiz):
        answer = answers.get(qtype, index)
        if answer is None or (isinstance(answer, str) and not answer.strip()):
            return False
    return True


def result_message(result: QuizResult) -> str:
    """Line shown under the score"""
    if result.is_perfect:
        return "Perfect Recall! 🧠"
    if result.ratio >= 0.8:
        return "Almost there. Review the misses and try again!"
    return "Keep practicing to strengthen those neural paths!"
