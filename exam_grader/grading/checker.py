"""
Answer checker.

Decides whether a single submitted answer is correct for its question.
Each question kind has its own rule; `is_correct` is the only dispatch point.
"""

from exam_grader.models import (
    AnyQuestion,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)


def matches_exactly(expected: str, answer: str | None) -> bool:
    """Exact, case-sensitive comparison used for choice questions."""
    return answer is not None and answer == expected


def matches_any_keyword(keywords: tuple[str, ...], answer: str | None) -> bool:
    """
    Check whether the answer contains any of the keywords.

    Matching ignores case and accepts the keyword anywhere in the answer.
    An empty or missing answer never matches.

    Args:
        keywords: Accepted keywords.
        answer: The student's free-text answer.

    Returns:
        True if at least one keyword occurs in the answer.
    """
    if not answer:
        return False
    normalized = answer.lower()
    return any(keyword.lower() in normalized for keyword in keywords)


def is_correct(question: AnyQuestion, answer: str | None) -> bool:
    """
    Apply the correctness rule for the question's kind.

    Args:
        question: The question being graded.
        answer: The submitted answer, or None if unanswered.

    Returns:
        True if the answer earns the question's points.
    """
    if isinstance(question, ShortAnswerQuestion):
        return matches_any_keyword(question.keywords, answer)
    if isinstance(question, (MultipleChoiceQuestion, TrueFalseQuestion)):
        return matches_exactly(question.correct_answer, answer)
    raise TypeError(f"Unsupported question type: {type(question).__name__}")
