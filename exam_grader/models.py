"""
Pydantic models for the Exam Grader system.

These models define the strict schemas for:
- Questions (a closed union over multiple-choice, true/false, short-answer)
- Exams and student submissions
- Graded results with per-question details
- Audit records for reproducibility

Input models are frozen and validated at construction, so the grading
engine never has to re-check their invariants.
"""

from datetime import datetime, timezone
from hashlib import sha256
from typing import Annotated, Literal, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)


TRUE_FALSE_ANSWERS = ("true", "false")


# ==============================================================================
# Question Models
# ==============================================================================


class BaseQuestion(BaseModel):
    """Fields shared by every question kind."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Identifier of the question, unique within its exam",
    )

    text: str = Field(
        default="",
        description="Prompt shown to the student",
    )

    points: int = Field(
        ...,
        gt=0,
        description="Weight of the question",
    )


class MultipleChoiceQuestion(BaseQuestion):
    """
    A question answered by picking one of a fixed list of options.

    The correct answer must be one of the options, compared byte-for-byte.
    """

    kind: Literal["multiple-choice"] = "multiple-choice"

    options: tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Ordered answer options",
    )

    correct_answer: str = Field(
        ...,
        description="The option that is graded as correct",
    )

    @model_validator(mode="after")
    def validate_answer_in_options(self) -> "MultipleChoiceQuestion":
        """Ensure the correct answer is one of the options."""
        if self.correct_answer not in self.options:
            raise ValueError(
                f"Question '{self.id}': correct answer {self.correct_answer!r} "
                f"is not one of the options {list(self.options)}"
            )
        return self


class TrueFalseQuestion(BaseQuestion):
    """A question whose answer is the literal string "true" or "false"."""

    kind: Literal["true-false"] = "true-false"

    correct_answer: str = Field(
        ...,
        description="Either 'true' or 'false'",
    )

    @field_validator("correct_answer")
    @classmethod
    def validate_boolean_answer(cls, v: str) -> str:
        if v not in TRUE_FALSE_ANSWERS:
            raise ValueError(f"True/false answer must be 'true' or 'false', got {v!r}")
        return v


class ShortAnswerQuestion(BaseQuestion):
    """
    A free-text question graded by keyword matching.

    An answer is correct when it contains any one of the keywords,
    ignoring case.
    """

    kind: Literal["short-answer"] = "short-answer"

    keywords: tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Accepted keywords, any one of which marks the answer correct",
    )

    @field_validator("keywords")
    @classmethod
    def validate_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject blank keywords, which would match every answer."""
        if any(not keyword.strip() for keyword in v):
            raise ValueError("Short-answer keywords must not be blank")
        return v

    @property
    def correct_answer(self) -> tuple[str, ...]:
        return self.keywords


AnyQuestion = Union[MultipleChoiceQuestion, TrueFalseQuestion, ShortAnswerQuestion]

Question = Annotated[
    AnyQuestion,
    Field(discriminator="kind"),
]


# ==============================================================================
# Exam and Submission Models
# ==============================================================================


class Exam(BaseModel):
    """
    An assessment definition: weighted questions, a pass threshold and a duration.

    Question ids are validated to be unique so answers can be matched by id.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default="",
        description="Identifier of the exam (assigned by the service when blank)",
    )

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Title of the exam",
    )

    description: str = Field(
        default="",
        description="Optional description of the exam",
    )

    duration_minutes: int = Field(
        ...,
        gt=0,
        description="Time allotted to the exam in minutes",
    )

    passing_score: float = Field(
        ...,
        ge=0,
        le=100,
        description="Percentage required to pass",
    )

    questions: tuple[Question, ...] = Field(
        default=(),
        description="Ordered questions of the exam",
    )

    created_by: str | None = Field(
        default=None,
        description="Id of the examiner who authored the exam",
    )

    is_published: bool = Field(
        default=False,
        description="Whether students can see and take the exam",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_points(self) -> int:
        """Sum of the points of every question."""
        return sum(q.points for q in self.questions)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def question_count(self) -> int:
        return len(self.questions)

    @model_validator(mode="after")
    def validate_unique_question_ids(self) -> "Exam":
        """Ensure no duplicate question ids."""
        ids = [q.id for q in self.questions]
        if len(ids) != len(set(ids)):
            duplicates = {i for i in ids if ids.count(i) > 1}
            raise ValueError(f"Duplicate question ids found: {sorted(duplicates)}")
        return self

    def get_question(self, question_id: str) -> AnyQuestion | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class SubmittedAnswer(BaseModel):
    """A single answer given by the student."""

    model_config = ConfigDict(frozen=True)

    question_id: str = Field(..., min_length=1)
    answer: str


class ExamSubmission(BaseModel):
    """
    One student's attempt at an exam.

    `end_time` may be absent, in which case the attempt is treated as having
    used the full exam duration.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier for this submission",
    )

    exam_id: str = Field(..., min_length=1)

    user_id: str = Field(..., min_length=1)

    start_time: datetime

    end_time: datetime | None = None

    answers: tuple[SubmittedAnswer, ...] = Field(
        default=(),
        description="Answers keyed by question id",
    )

    @model_validator(mode="after")
    def validate_times(self) -> "ExamSubmission":
        if self.end_time is None:
            return self
        if (self.end_time.tzinfo is None) != (self.start_time.tzinfo is None):
            raise ValueError("Start and end times must both be timezone-aware or both naive")
        if self.end_time < self.start_time:
            raise ValueError(
                f"Submission end time ({self.end_time.isoformat()}) precedes "
                f"start time ({self.start_time.isoformat()})"
            )
        return self

    @model_validator(mode="after")
    def validate_unique_answers(self) -> "ExamSubmission":
        """Ensure each question is answered at most once."""
        ids = [a.question_id for a in self.answers]
        if len(ids) != len(set(ids)):
            duplicates = {i for i in ids if ids.count(i) > 1}
            raise ValueError(f"Multiple answers for questions: {sorted(duplicates)}")
        return self

    def answer_for(self, question_id: str) -> str | None:
        for submitted in self.answers:
            if submitted.question_id == question_id:
                return submitted.answer
        return None


# ==============================================================================
# Grading Result Models
# ==============================================================================


class AnswerDetail(BaseModel):
    """The grading outcome of a single question."""

    model_config = ConfigDict(frozen=True, strict=True)

    question_id: str

    is_correct: bool

    points_awarded: int = Field(..., ge=0)

    user_answer: str | None = Field(
        default=None,
        description="The submitted answer, or None when the question was left unanswered",
    )

    correct_answer: str | tuple[str, ...] = Field(
        ...,
        description="The expected option, or the accepted keywords for short answers",
    )


class ExamResult(BaseModel):
    """
    Complete grading result for a submission.

    Percentage and pass/fail are derived from the point totals, so they can
    never disagree with them.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    submission_id: UUID

    exam_id: str

    exam_title: str

    user_id: str

    score: int = Field(..., ge=0, description="Sum of earned points")

    total_points: int = Field(..., ge=0, description="Sum of all question points")

    passing_score: float = Field(..., ge=0, le=100)

    time_taken_minutes: int = Field(..., ge=0)

    answer_details: tuple[AnswerDetail, ...] = ()

    submitted_at: datetime | None = Field(
        default=None,
        description="Wall-clock stamp assigned by whoever records the result",
    )

    @model_validator(mode="after")
    def validate_score_range(self) -> "ExamResult":
        if self.score > self.total_points:
            raise ValueError(
                f"Score ({self.score}) cannot exceed total points ({self.total_points})"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percentage_score(self) -> float:
        """Calculate overall percentage score."""
        if self.total_points == 0:
            return 0.0
        return self.score / self.total_points * 100

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_passed(self) -> bool:
        return self.percentage_score >= self.passing_score

    @computed_field  # type: ignore[prop-decorator]
    @property
    def correct_count(self) -> int:
        return sum(1 for d in self.answer_details if d.is_correct)


# ==============================================================================
# Audit Models
# ==============================================================================


class AuditRecord(BaseModel):
    """
    Immutable audit record for reproducibility.

    Contains hashes of inputs and outputs to enable verification
    that the same inputs produce the same outputs.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    audit_id: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier for this audit record",
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp of the grading operation",
    )

    submission_id: UUID

    exam_hash: str = Field(
        ...,
        description="SHA-256 hash of the exam content",
    )

    submission_hash: str = Field(
        ...,
        description="SHA-256 hash of the submission content",
    )

    result_hash: str = Field(
        ...,
        description="SHA-256 hash of the grading result",
    )

    @staticmethod
    def compute_hash(content: str) -> str:
        """Compute SHA-256 hash of content."""
        return sha256(content.encode("utf-8")).hexdigest()
