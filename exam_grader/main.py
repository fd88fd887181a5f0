"""
Exam Grader CLI Application.

Provides a command-line interface for grading exam submissions
and checking exam definitions.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from exam_grader.config import ReportFormat, get_settings
from exam_grader.exams import (
    ExamLoadError,
    ExamValidationError,
    ExamValidator,
    load_exam,
    load_submission,
)
from exam_grader.grading import GradingEngine, GradingError
from exam_grader.logging_config import configure_logging
from exam_grader.models import Exam, ExamResult
from exam_grader.output import AuditTrail, ReportGenerator
from exam_grader.output.report import format_answer, infer_format

# Create Typer app
app = typer.Typer(
    name="exam-grader",
    help="Deterministic auto-grading for online exams",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Override the configured log level"),
    ] = None,
) -> None:
    """Configure logging before running a command."""
    configure_logging(log_level.upper() if log_level else get_settings().log_level)


@app.command()
def grade(
    exam_file: Annotated[Path, typer.Argument(help="Path to the exam JSON file")],
    submission_file: Annotated[Path, typer.Argument(help="Path to the submission JSON file")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file path for the report"),
    ] = None,
    format: Annotated[
        Optional[ReportFormat],
        typer.Option("--format", "-f", help="Output format"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show per-question results"),
    ] = False,
) -> None:
    """
    Grade a submission against an exam.

    Prints the score and, when --output is given, writes the report and
    an audit record.
    """
    try:
        settings = get_settings()

        exam = load_exam(exam_file)
        submission = load_submission(submission_file)

        if settings.validate_before_grading:
            validator = ExamValidator()
            validator.validate_or_raise(exam)
            for warning in validator.warnings(exam):
                console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")

        engine = GradingEngine()
        result, audit = engine.grade_with_audit(exam, submission)

        _display_results(result, verbose)

        generator = ReportGenerator()
        if output:
            report_format = format or infer_format(output) or settings.report_format
            saved_path = generator.save(result, output, audit, report_format)
            console.print(f"\n[green]Report saved to:[/green] {saved_path}")

            audit_trail = AuditTrail(settings.output_directory / "audits")
            audit_path = audit_trail.save(audit)
            if verbose:
                console.print(f"[dim]Audit saved to: {audit_path}[/dim]")
        elif format:
            console.print("\n" + generator.generate(result, audit, format), markup=False)

    except ExamLoadError as e:
        console.print(f"[red]Load Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except ExamValidationError as e:
        console.print(f"[red]Exam Validation Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except GradingError as e:
        console.print(f"[red]Grading Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def validate_exam(
    exam_file: Annotated[Path, typer.Argument(help="Path to the exam JSON file")],
) -> None:
    """
    Validate an exam file without grading anything.

    Checks that the exam is well-formed and fair to grade. Only errors
    cause a non-zero exit; warnings are printed.
    """
    try:
        exam = load_exam(exam_file)

        validator = ExamValidator()
        is_valid, errors = validator.validate(exam)
        warnings = validator.warnings(exam)

        _display_exam(exam)

        if warnings:
            console.print("\n[yellow]⚠ Warnings:[/yellow]")
            for warning in warnings:
                console.print(f"  • {escape(warning)}")

        if is_valid:
            console.print("\n[green]✓ Exam is valid[/green]")
        else:
            console.print("\n[red]✗ Validation errors found:[/red]")
            for error in errors:
                console.print(f"  • {escape(error)}")
            raise typer.Exit(1)

    except ExamLoadError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def info() -> None:
    """Show the active configuration."""
    settings = get_settings()
    console.print("[bold]Exam Grader Configuration[/bold]\n")
    console.print(f"  Output Directory: {settings.output_directory}")
    console.print(f"  Report Format: {settings.report_format.value}")
    console.print(f"  Validate Before Grading: {settings.validate_before_grading}")
    console.print(f"  Log Level: {settings.log_level}")


def _display_exam(exam: Exam) -> None:
    console.print(
        Panel(
            f"[bold]{exam.title}[/bold]\n"
            f"Duration: {exam.duration_minutes} minutes\n"
            f"Passing Score: {exam.passing_score:g}%",
            title="Exam",
        )
    )

    table = Table(title="Questions")
    table.add_column("ID", style="cyan")
    table.add_column("Kind")
    table.add_column("Points", justify="right")
    table.add_column("Text")

    for question in exam.questions:
        table.add_row(question.id, question.kind, str(question.points), question.text[:50])

    console.print(table)
    console.print(f"\n[bold]Total Points:[/bold] {exam.total_points}")


def _display_results(result: ExamResult, verbose: bool = False) -> None:
    """Display grading results in a formatted table."""

    score_color = "green" if result.is_passed else "red"
    status = "PASSED" if result.is_passed else "FAILED"
    console.print(
        Panel(
            f"[{score_color}][bold]{result.score} / {result.total_points}[/bold] "
            f"({result.percentage_score:.1f}%) {status}[/{score_color}]\n"
            f"Time taken: {result.time_taken_minutes} minutes",
            title=f"Final Score: {result.exam_title}",
        )
    )

    if verbose:
        table = Table(title="Question Breakdown")
        table.add_column("Question", style="cyan")
        table.add_column("Points", justify="right")
        table.add_column("Your Answer")
        table.add_column("Correct Answer")
        table.add_column("Status")

        for detail in result.answer_details:
            table.add_row(
                detail.question_id,
                str(detail.points_awarded),
                format_answer(detail.user_answer),
                format_answer(detail.correct_answer),
                "✅" if detail.is_correct else "❌",
            )

        console.print(table)


if __name__ == "__main__":
    app()
