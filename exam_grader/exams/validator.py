"""
Exam validation module.

Reports authoring problems with an exam. Errors make an exam impossible
to grade meaningfully; warnings point at exams that grade fine but are
probably not what the examiner meant.
"""

from typing import Sequence

from exam_grader.models import (
    AnyQuestion,
    Exam,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
)


class ExamValidationError(Exception):
    """Raised when exam validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "Exam validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(message)


class ExamValidator:
    """
    Validates exams for completeness and consistency.

    Errors:
    1. The exam has a title and at least one question

    Warnings:
    1. Every question has prompt text
    2. Multiple-choice questions offer distinct options
    3. Short-answer keywords are distinct
    4. The pass threshold is meaningful
    """

    # Fewer options than this makes a multiple-choice question trivial
    MIN_OPTIONS = 2

    def validate(self, exam: Exam) -> tuple[bool, list[str]]:
        """
        Validate an exam and return any errors found.

        Args:
            exam: The exam to validate.

        Returns:
            Tuple of (is_valid, list of errors).
        """
        errors = self._validate_structure(exam)
        return len(errors) == 0, errors

    def warnings(self, exam: Exam) -> list[str]:
        """
        Collect issues that do not prevent grading.

        Args:
            exam: The exam to check.

        Returns:
            List of warnings, empty when the exam looks as intended.
        """
        warnings: list[str] = []

        for i, question in enumerate(exam.questions, start=1):
            warnings.extend(self._check_question(question, i))

        warnings.extend(self._check_scoring(exam))

        return warnings

    def validate_or_raise(self, exam: Exam) -> None:
        """
        Validate an exam and raise if invalid.

        Warnings never raise.

        Raises:
            ExamValidationError: If validation fails.
        """
        is_valid, errors = self.validate(exam)
        if not is_valid:
            raise ExamValidationError(errors)

    def _validate_structure(self, exam: Exam) -> list[str]:
        errors: list[str] = []

        if not exam.title.strip():
            errors.append("Exam title is empty")

        if not exam.questions:
            errors.append("Exam has no questions")

        return errors

    def _check_question(self, question: AnyQuestion, index: int) -> list[str]:
        warnings: list[str] = []
        prefix = f"Question {index} ({question.id})"

        if not question.text.strip():
            warnings.append(f"{prefix}: Question text is empty")

        if isinstance(question, MultipleChoiceQuestion):
            if len(question.options) < self.MIN_OPTIONS:
                warnings.append(
                    f"{prefix}: Multiple-choice question needs at least "
                    f"{self.MIN_OPTIONS} options"
                )
            duplicates = self._duplicates(question.options)
            if duplicates:
                warnings.append(f"{prefix}: Duplicate options: {duplicates}")

        if isinstance(question, ShortAnswerQuestion):
            duplicates = self._duplicates([k.strip().lower() for k in question.keywords])
            if duplicates:
                warnings.append(f"{prefix}: Duplicate keywords (ignoring case): {duplicates}")

        return warnings

    def _check_scoring(self, exam: Exam) -> list[str]:
        warnings: list[str] = []

        if exam.passing_score == 0:
            warnings.append("Passing score is 0, so every submission passes")

        return warnings

    @staticmethod
    def _duplicates(values: Sequence[str]) -> list[str]:
        seen: set[str] = set()
        duplicates: list[str] = []
        for value in values:
            if value in seen and value not in duplicates:
                duplicates.append(value)
            seen.add(value)
        return duplicates
