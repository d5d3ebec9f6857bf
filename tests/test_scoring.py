# ============================================================================
# Scoring Engine Tests
# ============================================================================
import pytest
from types import SimpleNamespace

from quizprep.services.practice.scoring import GradeResult, grade, contribution_delta

def make_question(correct_answer="B", marks=4, negative_marks=0.0):
    return SimpleNamespace(correct_answer=correct_answer, marks=marks, negative_marks=negative_marks)

class TestGrade:
    """Tests for single-answer grading"""

    @pytest.mark.parametrize("marks,negative_marks", [(1, 0), (4, 1), (2, 0.33)])
    def test_correct_answer_earns_marks(self, marks, negative_marks):
        question = make_question(marks=marks, negative_marks=negative_marks)
        result = grade(question, question.correct_answer)

        assert result.is_correct is True
        assert result.is_skipped is False
        assert result.marks_awarded == marks

    @pytest.mark.parametrize("answer", [None, ""])
    def test_skip_scores_zero_even_with_negative_marking(self, answer):
        result = grade(make_question(negative_marks=2), answer)

        assert result.is_skipped is True
        assert result.is_correct is None
        assert result.marks_awarded == 0

    def test_wrong_answer_loses_negative_marks(self):
        result = grade(make_question(negative_marks=2), "A")

        assert result.is_correct is False
        assert result.marks_awarded == -2

    def test_wrong_answer_without_negative_marking(self):
        for negative_marks in (0, None):
            result = grade(make_question(negative_marks=negative_marks), "A")
            assert result.is_correct is False
            assert result.marks_awarded == 0

    def test_comparison_is_exact(self):
        """No trimming or case folding"""
        question = make_question(correct_answer="Inertia")
        assert grade(question, "inertia").is_correct is False
        assert grade(question, "Inertia ").is_correct is False
        assert grade(question, " ").is_skipped is False

    def test_grading_is_deterministic(self):
        question = make_question(negative_marks=0.33)
        assert grade(question, "A") == grade(question, "A")


class TestContribution:
    """Tests for session counter contributions"""

    def test_first_answer_contribution(self):
        delta = contribution_delta(GradeResult(False, False, -0.33))
        assert delta == {
            "questions_attempted": 1,
            "correct_answers": 0,
            "wrong_answers": 1,
            "skipped_questions": 0,
            "marks_obtained": -0.33,
        }

    def test_replacing_wrong_with_correct(self):
        previous = GradeResult(False, False, -1.0)
        new = GradeResult(False, True, 4.0)
        delta = contribution_delta(new, previous)

        assert delta["questions_attempted"] == 0
        assert delta["correct_answers"] == 1
        assert delta["wrong_answers"] == -1
        assert delta["marks_obtained"] == 5.0

    def test_replacing_skip_with_answer(self):
        previous = GradeResult(True, None, 0.0)
        delta = contribution_delta(GradeResult(False, True, 1.0), previous)

        assert delta["questions_attempted"] == 1
        assert delta["skipped_questions"] == -1
        assert delta["correct_answers"] == 1
