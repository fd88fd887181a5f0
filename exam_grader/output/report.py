"""
Report generation for exam results.

Renders an ExamResult (and optionally its audit record) as JSON,
Markdown, CSV or plain text.
"""

import csv
import io
import json
from pathlib import Path

from exam_grader.config import ReportFormat
from exam_grader.models import AnswerDetail, AuditRecord, ExamResult

_SUFFIX_FORMATS = {
    ".json": ReportFormat.JSON,
    ".md": ReportFormat.MARKDOWN,
    ".markdown": ReportFormat.MARKDOWN,
    ".csv": ReportFormat.CSV,
    ".txt": ReportFormat.TEXT,
}


def infer_format(path: Path) -> ReportFormat | None:
    """Guess the report format from a file suffix."""
    return _SUFFIX_FORMATS.get(path.suffix.lower())


def format_answer(value: str | tuple[str, ...] | None) -> str:
    """Render an answer or list of keywords for display."""
    if value is None:
        return "(no answer)"
    if isinstance(value, tuple):
        return ", ".join(value)
    return value


class ReportGenerator:
    """Builds human- and machine-readable reports of exam results."""

    def generate(
        self,
        result: ExamResult,
        audit: AuditRecord | None = None,
        format: ReportFormat = ReportFormat.JSON,
    ) -> str:
        """
        Render a report as a string.

        Args:
            result: The graded result.
            audit: Optional audit record to include.
            format: Output format.

        Returns:
            The rendered report.
        """
        if format == ReportFormat.JSON:
            return self._to_json(result, audit)
        if format == ReportFormat.MARKDOWN:
            return self._to_markdown(result, audit)
        if format == ReportFormat.CSV:
            return self._to_csv(result)
        return self._to_text(result, audit)

    def save(
        self,
        result: ExamResult,
        output_path: Path,
        audit: AuditRecord | None = None,
        format: ReportFormat | None = None,
    ) -> Path:
        """
        Write a report to disk.

        When no format is given it is inferred from the file suffix,
        falling back to JSON.

        Returns:
            The path the report was written to.
        """
        report_format = format or infer_format(output_path) or ReportFormat.JSON
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate(result, audit, report_format), encoding="utf-8")
        return output_path

    def _to_json(self, result: ExamResult, audit: AuditRecord | None) -> str:
        data: dict = {"exam_result": result.model_dump(mode="json")}
        if audit is not None:
            data["audit"] = audit.model_dump(mode="json")
        return json.dumps(data, indent=2, ensure_ascii=False)

    def _to_markdown(self, result: ExamResult, audit: AuditRecord | None) -> str:
        status = "PASSED" if result.is_passed else "FAILED"
        lines = [
            f"# Exam Report: {result.exam_title}",
            "",
            "## Summary",
            "",
            f"- **Student:** {result.user_id}",
            f"- **Score:** {result.score} / {result.total_points}",
            f"- **Percentage:** {result.percentage_score:.2f}%",
            f"- **Passing Score:** {result.passing_score:g}%",
            f"- **Status:** {status}",
            f"- **Time Taken:** {result.time_taken_minutes} minutes",
        ]
        if result.submitted_at is not None:
            lines.append(f"- **Submitted At:** {result.submitted_at.isoformat()}")

        lines.extend(
            [
                "",
                "## Question Breakdown",
                "",
                "| Question | Result | Points | Your Answer | Correct Answer |",
                "|----------|--------|--------|-------------|----------------|",
            ]
        )
        for detail in result.answer_details:
            lines.append(self._markdown_row(detail))

        if audit is not None:
            lines.extend(
                [
                    "",
                    "## Audit",
                    "",
                    f"- **Audit ID:** {audit.audit_id}",
                    f"- **Exam Hash:** `{audit.exam_hash}`",
                    f"- **Submission Hash:** `{audit.submission_hash}`",
                    f"- **Result Hash:** `{audit.result_hash}`",
                ]
            )

        return "\n".join(lines) + "\n"

    def _markdown_row(self, detail: AnswerDetail) -> str:
        mark = "✅" if detail.is_correct else "❌"
        user_answer = format_answer(detail.user_answer).replace("|", "\\|")
        correct_answer = format_answer(detail.correct_answer).replace("|", "\\|")
        return (
            f"| {detail.question_id} | {mark} | {detail.points_awarded} "
            f"| {user_answer} | {correct_answer} |"
        )

    def _to_csv(self, result: ExamResult) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(["Question", "Correct", "Points Awarded", "Your Answer", "Correct Answer"])
        for detail in result.answer_details:
            writer.writerow(
                [
                    detail.question_id,
                    "yes" if detail.is_correct else "no",
                    detail.points_awarded,
                    format_answer(detail.user_answer),
                    format_answer(detail.correct_answer),
                ]
            )
        writer.writerow(["TOTAL", "", result.score, "", f"{result.total_points} possible"])
        return buffer.getvalue()

    def _to_text(self, result: ExamResult, audit: AuditRecord | None) -> str:
        status = "PASSED" if result.is_passed else "FAILED"
        lines = [
            f"Exam: {result.exam_title} ({result.exam_id})",
            f"Student: {result.user_id}",
            f"Score: {result.score}/{result.total_points} ({result.percentage_score:.2f}%) - {status}",
            f"Time taken: {result.time_taken_minutes} minutes",
            "",
        ]
        for detail in result.answer_details:
            mark = "+" if detail.is_correct else "-"
            lines.append(
                f"[{mark}] {detail.question_id}: {detail.points_awarded} pts "
                f"(answer: {format_answer(detail.user_answer)})"
            )
        if audit is not None:
            lines.extend(["", f"Audit: {audit.audit_id} result={audit.result_hash}"])
        return "\n".join(lines) + "\n"
