# ============================================================================
# Scoring Engine
# ============================================================================
"""
Grades a single submitted answer against a question.

Grading is pure and never raises: an absent or empty answer is a skip,
anything else is compared with the canonical answer by exact string
equality. Correct answers earn the question's marks, wrong answers lose its
negative marks, skips score zero.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GradeResult:
    """Outcome of grading one answer"""
    is_skipped: bool
    is_correct: Optional[bool]  # None when skipped
    marks_awarded: float

    @property
    def is_wrong(self) -> bool:
        return not self.is_skipped and not self.is_correct

    def contribution(self) -> Dict[str, Any]:
        """Session counter contribution of this answer"""
        return {
            "questions_attempted": 0 if self.is_skipped else 1,
            "correct_answers": 1 if self.is_correct else 0,
            "wrong_answers": 1 if self.is_wrong else 0,
            "skipped_questions": 1 if self.is_skipped else 0,
            "marks_obtained": self.marks_awarded,
        }


def is_skip(submitted_answer: Optional[str]) -> bool:
    return submitted_answer is None or submitted_answer == ""


def grade(question: Any, submitted_answer: Optional[str]) -> GradeResult:
    """
    Grade ``submitted_answer`` for ``question``.

    ``question`` may be a catalog question or a session snapshot; only
    ``correct_answer``, ``marks`` and ``negative_marks`` are read.
    """
    if is_skip(submitted_answer):
        return GradeResult(is_skipped=True, is_correct=None, marks_awarded=0.0)

    is_correct = submitted_answer == question.correct_answer
    if is_correct:
        marks_awarded = float(question.marks or 0)
    elif question.negative_marks:
        marks_awarded = -float(question.negative_marks)
    else:
        marks_awarded = 0.0

    return GradeResult(is_skipped=False, is_correct=is_correct, marks_awarded=marks_awarded)


def contribution_delta(new: GradeResult, previous: Optional[GradeResult] = None) -> Dict[str, Any]:
    """Counter change needed to replace ``previous`` with ``new`` on a session"""
    delta = new.contribution()
    if previous is None:
        return delta
    return {key: value - previous.contribution()[key] for key, value in delta.items()}
