"""
Exam Management Module.

Loading, validation, storage and submission handling for exams.
"""

from exam_grader.exams.loader import (
    ExamLoadError,
    load_exam,
    load_submission,
    parse_exam,
    parse_submission,
)
from exam_grader.exams.repository import InMemoryRepository, Repository
from exam_grader.exams.service import ExamService
from exam_grader.exams.validator import ExamValidationError, ExamValidator

__all__ = [
    "ExamLoadError",
    "ExamService",
    "ExamValidationError",
    "ExamValidator",
    "InMemoryRepository",
    "Repository",
    "load_exam",
    "load_submission",
    "parse_exam",
    "parse_submission",
]
