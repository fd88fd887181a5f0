"""
Grading Engine Module.

Deterministic auto-grading of exam submissions.
"""

from exam_grader.grading.checker import is_correct, matches_any_keyword
from exam_grader.grading.engine import (
    ExamNotFoundError,
    GradingEngine,
    GradingError,
    QuestionNotFoundError,
    grade,
)

__all__ = [
    "ExamNotFoundError",
    "GradingEngine",
    "GradingError",
    "QuestionNotFoundError",
    "grade",
    "is_correct",
    "matches_any_keyword",
]
