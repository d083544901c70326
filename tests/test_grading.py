import pytest
from pydantic import ValidationError

from neuronote.models.study_pack import (
    Quiz, MultipleChoiceQuestion, TrueFalseQuestion, FillInBlankQuestion
)
from neuronote.models.quiz import QuizAnswers, QuestionType
from neuronote.study.grading import is_correct, grade_quiz, is_complete, result_message


MCQ = MultipleChoiceQuestion(question="Which?", options=["a", "b", "c", "d"], correct_index=2)
TF = TrueFalseQuestion(statement="Water is wet.", answer=True)
FIB = FillInBlankQuestion(sentence="Capital of France is ___.", answer="paris")


@pytest.fixture
def quiz():
    return Quiz(
        multiple_choice=[MCQ, MultipleChoiceQuestion(question="Other?", options=["x", "y"], correct_index=0)],
        true_false=[TF],
        fill_in_blank=[FIB],
    )


class TestIsCorrect:
    def test_multiple_choice_matching_index(self):
        assert is_correct(MCQ, 2)

    @pytest.mark.parametrize("answer", [0, 1, 3])
    def test_multiple_choice_other_index(self, answer):
        assert not is_correct(MCQ, answer)

    def test_unanswered_never_correct(self):
        assert not is_correct(MCQ, None)
        assert not is_correct(TF, None)
        assert not is_correct(FIB, None)

    def test_bool_is_not_an_option_index(self):
        q = MultipleChoiceQuestion(question="?", options=["a", "b"], correct_index=1)
        assert not is_correct(q, True)

    def test_true_false(self):
        assert is_correct(TF, True)
        assert not is_correct(TF, False)

    @pytest.mark.parametrize("answer", ["Paris ", "paris", "  PARIS", "PaRiS\n"])
    def test_fill_in_blank_ignores_case_and_whitespace(self, answer):
        assert is_correct(FIB, answer)

    def test_fill_in_blank_wrong_word(self):
        assert not is_correct(FIB, "Lyon")


def test_grade_counts_every_question(quiz):
    answers = QuizAnswers(
        multiple_choice={0: 2, 1: 1},
        true_false={0: True},
        fill_in_blank={0: "Paris "},
    )
    result = grade_quiz(quiz, answers)
    assert result.total == 4
    assert result.correct == 3
    assert result.percent == 75
    wrong = [r for r in result.per_question if not r.is_correct]
    assert len(wrong) == 1
    assert wrong[0].question_type == QuestionType.MULTIPLE_CHOICE
    assert wrong[0].index == 1
    assert wrong[0].correct_answer == 0


def test_grade_unanswered_counts_toward_total(quiz):
    result = grade_quiz(quiz, QuizAnswers(multiple_choice={0: 2}))
    assert result.correct == 1
    assert result.total == 4
    assert sum(1 for r in result.per_question if not r.answered) == 3


def test_grade_is_deterministic(quiz):
    answers = QuizAnswers(multiple_choice={0: 2, 1: 0}, true_false={0: False}, fill_in_blank={0: "x"})
    assert grade_quiz(quiz, answers) == grade_quiz(quiz, answers)


def test_empty_quiz():
    result = grade_quiz(Quiz(), QuizAnswers())
    assert result.total == 0
    assert result.ratio == 0.0
    assert not result.is_perfect


def test_answer_keys_from_json_are_coerced(quiz):
    answers = QuizAnswers.model_validate({
        "multiple_choice": {"0": 2, "1": 0},
        "true_false": {"0": True},
        "fill_in_blank": {"0": "PARIS"},
    })
    assert grade_quiz(quiz, answers).is_perfect


def test_is_complete(quiz):
    partial = QuizAnswers(multiple_choice={0: 2, 1: 0}, true_false={0: True}, fill_in_blank={0: "  "})
    assert not is_complete(quiz, partial)
    full = QuizAnswers(multiple_choice={0: 2, 1: 0}, true_false={0: False}, fill_in_blank={0: "lyon"})
    assert is_complete(quiz, full)


def test_result_message(quiz):
    perfect = grade_quiz(quiz, QuizAnswers(
        multiple_choice={0: 2, 1: 0}, true_false={0: True}, fill_in_blank={0: "paris"}
    ))
    assert result_message(perfect).startswith("Perfect Recall")
    poor = grade_quiz(quiz, QuizAnswers())
    assert "Keep practicing" in result_message(poor)


@pytest.mark.parametrize("raw", [
    '{"multiple_choice": {"0": true}}',
    '{"multiple_choice": {"0": "2"}}',
    '{"true_false": {"0": "yes"}}',
    '{"fill_in_blank": {"0": 7}}',
])
def test_answers_are_not_coerced(raw):
    with pytest.raises(ValidationError):
        QuizAnswers.model_validate_json(raw)


def test_answer_keys_from_json():
    answers = QuizAnswers.model_validate_json('{"multiple_choice": {"1": 0}, "true_false": {"0": false}}')
    assert answers.get(QuestionType.MULTIPLE_CHOICE, 1) == 0
    assert answers.get(QuestionType.TRUE_FALSE, 0) is False
