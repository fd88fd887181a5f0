"""
Unit tests for the grading engine.

Tests the answer checker, per-question scoring, aggregates,
time-taken computation, error kinds and audit records.
"""

import pytest

from exam_grader.grading import (
    ExamNotFoundError,
    GradingEngine,
    GradingError,
    QuestionNotFoundError,
    grade,
    is_correct,
    matches_any_keyword,
)
from exam_grader.models import (
    Exam,
    ExamResult,
    ExamSubmission,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)


class TestAnswerChecker:
    """Tests for the per-kind correctness rules."""

    def test_multiple_choice_exact_match(self, stack_question: MultipleChoiceQuestion) -> None:
        """Test the correct option is accepted."""
        assert is_correct(stack_question, "Stack")

    def test_multiple_choice_is_case_sensitive(self, stack_question: MultipleChoiceQuestion) -> None:
        """Test options are compared byte-for-byte."""
        assert not is_correct(stack_question, "stack")
        assert not is_correct(stack_question, "Stack ")

    def test_multiple_choice_wrong_option(self, stack_question: MultipleChoiceQuestion) -> None:
        assert not is_correct(stack_question, "Queue")

    def test_true_false(self, html_question: TrueFalseQuestion) -> None:
        """Test true/false answers use exact matching."""
        assert is_correct(html_question, "false")
        assert not is_correct(html_question, "true")
        assert not is_correct(html_question, "False")

    def test_missing_answer_is_incorrect(
        self,
        stack_question: MultipleChoiceQuestion,
        html_question: TrueFalseQuestion,
        algorithm_question: ShortAnswerQuestion,
    ) -> None:
        """Test unanswered questions are never correct."""
        assert not is_correct(stack_question, None)
        assert not is_correct(html_question, None)
        assert not is_correct(algorithm_question, None)

    def test_short_answer_any_keyword_case_insensitive(self) -> None:
        """Test one keyword in any case is enough."""
        question = ShortAnswerQuestion(
            id="sa", text="What is an algorithm?", keywords=("algorithm", "procedure"), points=3
        )
        assert is_correct(question, "It's a Procedure for solving")

    def test_short_answer_keyword_case_in_definition(self) -> None:
        """Test keywords are lower-cased before matching."""
        assert matches_any_keyword(("HyperText",), "hypertext markup language")

    def test_short_answer_no_keyword(self, algorithm_question: ShortAnswerQuestion) -> None:
        assert not is_correct(algorithm_question, "I do not know")

    def test_short_answer_empty_answer(self, algorithm_question: ShortAnswerQuestion) -> None:
        """Test an empty answer never matches."""
        assert not is_correct(algorithm_question, "")

    def test_short_answer_substring_match(self, algorithm_question: ShortAnswerQuestion) -> None:
        """Test keywords match inside longer words and phrases."""
        assert is_correct(algorithm_question, "Algorithms are recipes")
        assert is_correct(algorithm_question, "you go STEP BY STEP")


class TestGradingScenarios:
    """End-to-end scoring scenarios for the engine."""

    def test_single_correct_answer(self, single_question_exam: Exam, submission_factory) -> None:
        """Test a correct answer earns full marks."""
        submission = submission_factory(single_question_exam.id, {"q1": "Stack"})

        result = grade(single_question_exam, submission)

        assert result.score == 5
        assert result.total_points == 5
        assert result.percentage_score == 100.0
        assert result.is_passed

    def test_single_wrong_answer(self, single_question_exam: Exam, submission_factory) -> None:
        """Test a wrong answer earns nothing and fails."""
        submission = submission_factory(single_question_exam.id, {"q1": "Queue"})

        result = grade(single_question_exam, submission)

        assert result.score == 0
        assert result.percentage_score == 0.0
        assert result.is_passed is False

    def test_unanswered_question_counts_towards_total(
        self, two_question_exam: Exam, submission_factory
    ) -> None:
        """Test omitted questions score zero but keep their weight."""
        submission = submission_factory(two_question_exam.id, {"q1": "Stack"})

        result = grade(two_question_exam, submission)

        assert result.score == 5
        assert result.total_points == 7
        assert result.percentage_score == pytest.approx(71.43, abs=0.01)
        assert result.is_passed is True

        unanswered = result.answer_details[1]
        assert unanswered.question_id == "q2"
        assert unanswered.is_correct is False
        assert unanswered.points_awarded == 0
        assert unanswered.user_answer is None
        assert unanswered.correct_answer == "false"

    def test_details_follow_exam_order(self, sample_exam: Exam, submission_factory) -> None:
        """Test details are listed in question order, not answer order."""
        submission = submission_factory(sample_exam.id, {"q3": "procedure", "q1": "Tree"})

        result = grade(sample_exam, submission)

        assert [d.question_id for d in result.answer_details] == ["q1", "q2", "q3"]
        assert result.score == 8
        assert result.answer_details[2].correct_answer == (
            "algorithm",
            "step by step",
            "procedure",
            "instructions",
        )

    def test_all_correct(self, sample_exam: Exam, sample_submission: ExamSubmission) -> None:
        result = grade(sample_exam, sample_submission)

        assert result.score == result.total_points == 15
        assert result.correct_count == 3
        assert result.exam_title == sample_exam.title
        assert result.user_id == "student-1"
        assert result.submission_id == sample_submission.id

    def test_pass_threshold_is_inclusive(self, submission_factory) -> None:
        """Test a percentage equal to the passing score passes."""
        exam = Exam(
            id="half",
            title="Half",
            duration_minutes=10,
            passing_score=50,
            questions=(
                TrueFalseQuestion(id="a", text="A", correct_answer="true", points=1),
                TrueFalseQuestion(id="b", text="B", correct_answer="true", points=1),
            ),
        )
        submission = submission_factory("half", {"a": "true", "b": "false"})

        result = grade(exam, submission)

        assert result.percentage_score == 50.0
        assert result.is_passed is True

    def test_zero_point_exam(self, submission_factory) -> None:
        """Test an exam without questions yields 0% instead of dividing by zero."""
        exam = Exam(id="empty", title="Empty", duration_minutes=5, passing_score=0)
        submission = submission_factory("empty", {})

        result = grade(exam, submission)

        assert result.total_points == 0
        assert result.percentage_score == 0.0
        assert result.is_passed is True
        assert result.answer_details == ()

    def test_grading_is_deterministic(
        self, sample_exam: Exam, sample_submission: ExamSubmission
    ) -> None:
        """Test grading the same inputs twice gives identical results."""
        engine = GradingEngine()

        first = engine.grade(sample_exam, sample_submission)
        second = engine.grade(sample_exam, sample_submission)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_inputs_are_not_modified(
        self, sample_exam: Exam, sample_submission: ExamSubmission
    ) -> None:
        exam_before = sample_exam.model_dump()
        submission_before = sample_submission.model_dump()

        grade(sample_exam, sample_submission)

        assert sample_exam.model_dump() == exam_before
        assert sample_submission.model_dump() == submission_before

    def test_result_has_no_submission_stamp(
        self, sample_exam: Exam, sample_submission: ExamSubmission
    ) -> None:
        """Test the engine leaves the wall-clock stamp to the caller."""
        assert grade(sample_exam, sample_submission).submitted_at is None


class TestTimeTaken:
    """Tests for the time-taken computation."""

    def test_elapsed_minutes(self, two_question_exam: Exam, submission_factory) -> None:
        submission = submission_factory(two_question_exam.id, {}, minutes=25)
        assert grade(two_question_exam, submission).time_taken_minutes == 25

    def test_missing_end_time_uses_duration(
        self, two_question_exam: Exam, submission_factory
    ) -> None:
        """Test a submission without end time is charged the full duration."""
        submission = submission_factory(two_question_exam.id, {}, minutes=None)
        assert grade(two_question_exam, submission).time_taken_minutes == 60

    def test_half_minute_rounds_up(self, two_question_exam: Exam, submission_factory) -> None:
        submission = submission_factory(two_question_exam.id, {}, minutes=24.5)
        assert grade(two_question_exam, submission).time_taken_minutes == 25

    def test_partial_minute_rounds_down(self, two_question_exam: Exam, submission_factory) -> None:
        submission = submission_factory(two_question_exam.id, {}, minutes=12.4)
        assert grade(two_question_exam, submission).time_taken_minutes == 12


class TestGradingErrors:
    """Tests for grading failures."""

    def test_exam_mismatch_raises(self, sample_exam: Exam, submission_factory) -> None:
        """Test a submission for another exam is rejected."""
        submission = submission_factory("other-exam", {"q1": "Stack"})

        with pytest.raises(ExamNotFoundError, match="other-exam") as exc_info:
            grade(sample_exam, submission)

        assert exc_info.value.exam_id == "other-exam"

    def test_unknown_question_raises(self, sample_exam: Exam, submission_factory) -> None:
        """Test answers to unknown questions are a hard failure."""
        submission = submission_factory(sample_exam.id, {"q1": "Stack", "q9": "anything"})

        with pytest.raises(QuestionNotFoundError, match="q9") as exc_info:
            grade(sample_exam, submission)

        assert exc_info.value.question_ids == ["q9"]

    def test_errors_share_base_class(self) -> None:
        assert issubclass(ExamNotFoundError, GradingError)
        assert issubclass(QuestionNotFoundError, GradingError)


class TestAudit:
    """Tests for audit record creation."""

    def test_grade_with_audit(self, sample_exam: Exam, sample_submission: ExamSubmission) -> None:
        engine = GradingEngine()

        result, audit = engine.grade_with_audit(sample_exam, sample_submission)

        assert isinstance(result, ExamResult)
        assert audit.submission_id == sample_submission.id
        assert len(audit.exam_hash) == 64
        assert len(audit.submission_hash) == 64
        assert len(audit.result_hash) == 64

    def test_result_hash_is_reproducible(
        self, sample_exam: Exam, sample_submission: ExamSubmission
    ) -> None:
        """Test regrading produces the same hashes."""
        engine = GradingEngine()

        _, first = engine.grade_with_audit(sample_exam, sample_submission)
        _, second = engine.grade_with_audit(sample_exam, sample_submission)

        assert first.audit_id != second.audit_id
        assert first.exam_hash == second.exam_hash
        assert first.submission_hash == second.submission_hash
        assert first.result_hash == second.result_hash

    def test_result_hash_ignores_submission_stamp(
        self, sample_exam: Exam, sample_submission: ExamSubmission
    ) -> None:
        engine = GradingEngine()
        result = engine.grade(sample_exam, sample_submission)
        stamped = result.model_copy(update={"submitted_at": sample_submission.start_time})

        assert (
            engine.audit(sample_exam, sample_submission, result).result_hash
            == engine.audit(sample_exam, sample_submission, stamped).result_hash
        )
