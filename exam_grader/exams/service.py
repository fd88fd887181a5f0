"""
Exam service - exam lifecycle and submission intake.

Looks exams up in its repositories, grades submissions with the engine
and records the results. Storage is injected so the service holds no
global state of its own.
"""

import logging
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from exam_grader.exams.repository import InMemoryRepository, Repository
from exam_grader.grading.engine import ExamNotFoundError, GradingEngine
from exam_grader.models import Exam, ExamResult, ExamSubmission

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _close_at(start_time: datetime, now: datetime) -> datetime:
    """
    End time for a submission closed at ``now``.

    Naive times are taken to be UTC. A clock reading behind the start time
    is clamped to the start time.
    """
    if start_time.tzinfo is None and now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    elif start_time.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if now < start_time:
        logger.warning(
            "Clock reads %s, before submission start %s; closing at start time",
            now.isoformat(),
            start_time.isoformat(),
        )
        return start_time
    return now


class ExamService:
    """
    Coordinates exams, submissions and results.

    Examiners create, amend, publish and delete exams; students submit
    attempts which are graded immediately.
    """

    def __init__(
        self,
        exams: Repository[Exam] | None = None,
        submissions: Repository[ExamSubmission] | None = None,
        results: Repository[ExamResult] | None = None,
        engine: GradingEngine | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the service.

        Args:
            exams: Exam storage, keyed by exam id.
            submissions: Submission storage, keyed by submission id.
            results: Result storage, keyed by submission id.
            engine: Grading engine. A new one is created if not provided.
            clock: Source of the current time for end and submission stamps.
        """
        self._exams = exams if exams is not None else InMemoryRepository(key=lambda e: e.id)
        self._submissions = (
            submissions if submissions is not None else InMemoryRepository(key=lambda s: s.id)
        )
        self._results = (
            results if results is not None else InMemoryRepository(key=lambda r: r.submission_id)
        )
        self._engine = engine or GradingEngine()
        self._clock = clock or _utcnow

    # ==========================================================================
    # Exam lifecycle
    # ==========================================================================

    def create_exam(self, exam: Exam) -> Exam:
        """Store a new exam, assigning an id when it has none."""
        if not exam.id:
            exam = exam.model_copy(update={"id": f"exam_{uuid4().hex}"})

        if not self._exams.save_if_absent(exam):
            raise ValueError(f"Exam '{exam.id}' already exists")
        logger.info("Created exam '%s' (%s)", exam.id, exam.title)
        return exam

    def update_exam(self, exam: Exam) -> Exam:
        """
        Replace an existing exam.

        Results already recorded keep the scores they were graded with.
        """
        self.get_exam(exam.id)
        self._exams.save(exam)
        logger.info("Updated exam '%s'", exam.id)
        return exam

    def delete_exam(self, exam_id: str) -> None:
        if not self._exams.delete(exam_id):
            raise ExamNotFoundError(exam_id)
        logger.info("Deleted exam '%s'", exam_id)

    def publish_exam(self, exam_id: str) -> Exam:
        """Make an exam visible to students."""
        exam = self.get_exam(exam_id).model_copy(update={"is_published": True})
        self._exams.save(exam)
        logger.info("Published exam '%s'", exam_id)
        return exam

    def get_exam(self, exam_id: str) -> Exam:
        """
        Look up an exam by id.

        Raises:
            ExamNotFoundError: If no exam has this id.
        """
        exam = self._exams.get(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        return exam

    def list_exams(self, published_only: bool = False) -> list[Exam]:
        exams = self._exams.list()
        if published_only:
            return [e for e in exams if e.is_published]
        return exams

    def exams_by_author(self, author_id: str) -> list[Exam]:
        return [e for e in self._exams.list() if e.created_by == author_id]

    # ==========================================================================
    # Submissions and results
    # ==========================================================================

    def submit(self, submission: ExamSubmission) -> ExamResult:
        """
        Record and grade a submission.

        A submission without an end time is closed at the current time.

        Args:
            submission: The student's attempt.

        Returns:
            The stored ExamResult, stamped with the submission time.

        Raises:
            ExamNotFoundError: If the submission's exam does not exist.
            QuestionNotFoundError: If an answer references an unknown question.
        """
        exam = self.get_exam(submission.exam_id)

        now = self._clock()
        if submission.end_time is None:
            submission = ExamSubmission.model_validate(
                {**submission.model_dump(), "end_time": _close_at(submission.start_time, now)}
            )

        result = self._engine.grade(exam, submission)
        result = result.model_copy(update={"submitted_at": now})

        self._submissions.save(submission)
        self._results.save(result)

        logger.info(
            "Recorded result for user '%s' on exam '%s': %.2f%% (%s)",
            result.user_id,
            result.exam_id,
            result.percentage_score,
            "passed" if result.is_passed else "failed",
        )
        return result

    def get_result(self, submission_id) -> ExamResult | None:
        return self._results.get(submission_id)

    def results_for_user(self, user_id: str) -> list[ExamResult]:
        return [r for r in self._results.list() if r.user_id == user_id]

    def results_for_exam(self, exam_id: str) -> list[ExamResult]:
        return [r for r in self._results.list() if r.exam_id == exam_id]

    def submissions_for_user(self, user_id: str) -> list[ExamSubmission]:
        return [s for s in self._submissions.list() if s.user_id == user_id]
