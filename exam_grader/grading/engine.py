"""
Grading engine - the core of the exam grader.

Turns an exam and a student's submission into a deterministic result:
per-question correctness, point totals, percentage and pass/fail.
The engine reads only its arguments and never touches the clock or storage.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from exam_grader.grading.checker import is_correct
from exam_grader.models import AnswerDetail, AuditRecord, Exam, ExamResult, ExamSubmission

logger = logging.getLogger(__name__)


class GradingError(Exception):
    """Base class for failures that prevent a submission from being graded."""


class ExamNotFoundError(GradingError):
    """Raised when a submission's exam id does not resolve to an exam."""

    def __init__(self, exam_id: str, message: str | None = None):
        self.exam_id = exam_id
        super().__init__(message or f"Exam not found: '{exam_id}'")


class QuestionNotFoundError(GradingError):
    """Raised when a submission answers questions that are not in the exam."""

    def __init__(self, exam_id: str, question_ids: list[str]):
        self.exam_id = exam_id
        self.question_ids = question_ids
        super().__init__(
            f"Question(s) {question_ids} not found in exam '{exam_id}'"
        )


class GradingEngine:
    """
    Stateless auto-grader.

    A single instance may be shared and called concurrently; each call
    works only on its own exam and submission.
    """

    def grade(self, exam: Exam, submission: ExamSubmission) -> ExamResult:
        """
        Grade a submission against an exam.

        Every question of the exam is scored, answered or not. Unanswered
        questions are incorrect and earn no points.

        Args:
            exam: The exam the submission was made for.
            submission: The student's answers and timestamps.

        Returns:
            The graded ExamResult (without a submitted_at stamp).

        Raises:
            ExamNotFoundError: If the submission is for a different exam.
            QuestionNotFoundError: If an answer references an unknown question.
        """
        self._check_references(exam, submission)

        details: list[AnswerDetail] = []
        score = 0
        total_points = 0

        for question in exam.questions:
            answer = submission.answer_for(question.id)
            correct = is_correct(question, answer)
            points_awarded = question.points if correct else 0

            total_points += question.points
            score += points_awarded

            logger.debug(
                "Question %s (%s): correct=%s points=%d/%d",
                question.id,
                question.kind,
                correct,
                points_awarded,
                question.points,
            )

            details.append(
                AnswerDetail(
                    question_id=question.id,
                    is_correct=correct,
                    points_awarded=points_awarded,
                    user_answer=answer,
                    correct_answer=question.correct_answer,
                )
            )

        result = ExamResult(
            submission_id=submission.id,
            exam_id=exam.id,
            exam_title=exam.title,
            user_id=submission.user_id,
            score=score,
            total_points=total_points,
            passing_score=float(exam.passing_score),
            time_taken_minutes=self._time_taken(exam, submission),
            answer_details=tuple(details),
        )

        logger.info(
            "Graded submission %s for exam '%s': %d/%d (%.2f%%) passed=%s",
            submission.id,
            exam.id,
            result.score,
            result.total_points,
            result.percentage_score,
            result.is_passed,
        )
        return result

    def grade_with_audit(
        self, exam: Exam, submission: ExamSubmission
    ) -> tuple[ExamResult, AuditRecord]:
        """Grade a submission and build the matching audit record."""
        result = self.grade(exam, submission)
        return result, self.audit(exam, submission, result)

    def audit(
        self, exam: Exam, submission: ExamSubmission, result: ExamResult
    ) -> AuditRecord:
        """
        Create an audit record for a grading operation.

        Args:
            exam: The exam used.
            submission: The graded submission.
            result: The grading result.

        Returns:
            Immutable AuditRecord.
        """
        return AuditRecord(
            submission_id=submission.id,
            exam_hash=AuditRecord.compute_hash(exam_content(exam)),
            submission_hash=AuditRecord.compute_hash(submission_content(submission)),
            result_hash=AuditRecord.compute_hash(result_content(result)),
        )

    def _check_references(self, exam: Exam, submission: ExamSubmission) -> None:
        if submission.exam_id != exam.id:
            raise ExamNotFoundError(
                submission.exam_id,
                f"Submission references exam '{submission.exam_id}', "
                f"but exam '{exam.id}' was supplied",
            )

        known = {q.id for q in exam.questions}
        unknown = [a.question_id for a in submission.answers if a.question_id not in known]
        if unknown:
            raise QuestionNotFoundError(exam.id, unknown)

    def _time_taken(self, exam: Exam, submission: ExamSubmission) -> int:
        """Elapsed whole minutes, or the full duration when no end time was recorded."""
        if submission.end_time is None:
            return exam.duration_minutes

        seconds = Decimal(str((submission.end_time - submission.start_time).total_seconds()))
        minutes = (seconds / 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return int(minutes)


def exam_content(exam: Exam) -> str:
    """Canonical serialization of an exam for hashing."""
    return exam.model_dump_json()


def submission_content(submission: ExamSubmission) -> str:
    """Canonical serialization of a submission for hashing."""
    return submission.model_dump_json()


def result_content(result: ExamResult) -> str:
    """Canonical serialization of a result for hashing, without the caller's stamp."""
    return result.model_dump_json(exclude={"submitted_at"})


_default_engine = GradingEngine()


def grade(exam: Exam, submission: ExamSubmission) -> ExamResult:
    """Grade a submission with the shared default engine."""
    return _default_engine.grade(exam, submission)
