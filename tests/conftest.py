"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Generator
from uuid import UUID

import pytest

from exam_grader.config import ReportFormat, Settings
from exam_grader.models import (
    Exam,
    ExamSubmission,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
    SubmittedAnswer,
    TrueFalseQuestion,
)

START_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ==============================================================================
# Sample Question Fixtures
# ==============================================================================


@pytest.fixture
def stack_question() -> MultipleChoiceQuestion:
    """Multiple-choice question worth 5 points."""
    return MultipleChoiceQuestion(
        id="q1",
        text="Which data structure operates on a LIFO principle?",
        options=("Queue", "Stack", "Linked List", "Tree"),
        correct_answer="Stack",
        points=5,
    )


@pytest.fixture
def html_question() -> TrueFalseQuestion:
    """True/false question worth 2 points."""
    return TrueFalseQuestion(
        id="q2",
        text="HTML is a programming language",
        correct_answer="false",
        points=2,
    )


@pytest.fixture
def algorithm_question() -> ShortAnswerQuestion:
    """Short-answer question worth 8 points."""
    return ShortAnswerQuestion(
        id="q3",
        text="Define what an algorithm is in your own words",
        keywords=("algorithm", "step by step", "procedure", "instructions"),
        points=8,
    )


# ==============================================================================
# Sample Exam Fixtures
# ==============================================================================


@pytest.fixture
def single_question_exam(stack_question: MultipleChoiceQuestion) -> Exam:
    """Exam with one multiple-choice question."""
    return Exam(
        id="exam-1",
        title="Data Structures Quiz",
        duration_minutes=30,
        passing_score=60,
        questions=(stack_question,),
    )


@pytest.fixture
def two_question_exam(
    stack_question: MultipleChoiceQuestion, html_question: TrueFalseQuestion
) -> Exam:
    """Exam with a 5-point multiple-choice and a 2-point true/false question."""
    return Exam(
        id="exam-2",
        title="Web Basics",
        duration_minutes=60,
        passing_score=70,
        questions=(stack_question, html_question),
    )


@pytest.fixture
def sample_exam(
    stack_question: MultipleChoiceQuestion,
    html_question: TrueFalseQuestion,
    algorithm_question: ShortAnswerQuestion,
) -> Exam:
    """Exam covering all three question kinds."""
    return Exam(
        id="1",
        title="Introduction to Computer Science",
        description="Basic concepts of computer science and programming",
        duration_minutes=60,
        passing_score=60,
        questions=(stack_question, html_question, algorithm_question),
        created_by="examiner-1",
        is_published=True,
    )


# ==============================================================================
# Sample Submission Fixtures
# ==============================================================================


def make_submission(
    exam_id: str,
    answers: dict[str, str],
    minutes: float | None = 25,
    user_id: str = "student-1",
) -> ExamSubmission:
    """Build a submission starting at START_TIME."""
    return ExamSubmission(
        id=UUID("12345678-1234-5678-1234-567812345678"),
        exam_id=exam_id,
        user_id=user_id,
        start_time=START_TIME,
        end_time=START_TIME + timedelta(minutes=minutes) if minutes is not None else None,
        answers=tuple(SubmittedAnswer(question_id=q, answer=a) for q, a in answers.items()),
    )


@pytest.fixture
def sample_submission(sample_exam: Exam) -> ExamSubmission:
    """Submission answering every question of the sample exam correctly."""
    return make_submission(
        sample_exam.id,
        {
            "q1": "Stack",
            "q2": "false",
            "q3": "It's a Procedure for solving a problem",
        },
    )


# ==============================================================================
# JSON Document Fixtures
# ==============================================================================


@pytest.fixture
def sample_exam_data() -> dict[str, Any]:
    """Sample exam as a JSON-compatible dict."""
    return {
        "id": "1",
        "title": "Introduction to Computer Science",
        "duration_minutes": 60,
        "passing_score": 60,
        "questions": [
            {
                "id": "q1",
                "kind": "multiple-choice",
                "text": "Which data structure operates on a LIFO principle?",
                "options": ["Queue", "Stack", "Linked List", "Tree"],
                "correct_answer": "Stack",
                "points": 5,
            },
            {
                "id": "q2",
                "kind": "true-false",
                "text": "HTML is a programming language",
                "correct_answer": "false",
                "points": 2,
            },
            {
                "id": "q3",
                "kind": "short-answer",
                "text": "Define what an algorithm is in your own words",
                "keywords": ["algorithm", "step by step", "procedure", "instructions"],
                "points": 8,
            },
        ],
    }


@pytest.fixture
def sample_submission_data() -> dict[str, Any]:
    """Sample submission as a JSON-compatible dict."""
    return {
        "exam_id": "1",
        "user_id": "student-1",
        "start_time": "2024-05-01T09:00:00Z",
        "end_time": "2024-05-01T09:25:00Z",
        "answers": [
            {"question_id": "q1", "answer": "Stack"},
            {"question_id": "q2", "answer": "true"},
        ],
    }


@pytest.fixture
def exam_file(temp_dir: Path, sample_exam_data: dict[str, Any]) -> Path:
    """Write the sample exam to a JSON file."""
    file_path = temp_dir / "exam.json"
    file_path.write_text(json.dumps(sample_exam_data), encoding="utf-8")
    return file_path


@pytest.fixture
def submission_file(temp_dir: Path, sample_submission_data: dict[str, Any]) -> Path:
    """Write the sample submission to a JSON file."""
    file_path = temp_dir / "submission.json"
    file_path.write_text(json.dumps(sample_submission_data), encoding="utf-8")
    return file_path


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Create test settings writing into the temporary directory."""
    return Settings(
        output_directory=temp_dir / "output",
        report_format=ReportFormat.JSON,
        validate_before_grading=True,
        log_level="DEBUG",
    )


@pytest.fixture
def submission_factory():
    """Factory building submissions that start at a fixed time."""
    return make_submission
