"""
Exam and submission loading.

Reads JSON documents from disk and validates them into the exam models.
"""

from pathlib import Path
from typing import ClassVar, TypeVar

from pydantic import BaseModel, ValidationError

from exam_grader.models import Exam, ExamSubmission

ModelT = TypeVar("ModelT", bound=BaseModel)


class ExamLoadError(Exception):
    """
    Raised when an exam or submission document cannot be loaded.

    Contains detailed information about the failure cause.
    """

    def __init__(self, message: str, file_path: str | Path | None = None, cause: Exception | None = None):
        self.file_path = str(file_path) if file_path is not None else None
        self.cause = cause
        if file_path is not None:
            message = f"Failed to load '{file_path}': {message}"
        super().__init__(message)


class DocumentLoader:
    """Loads JSON documents into pydantic models."""

    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = (".json",)

    # Encodings to try in order of preference; utf-8-sig also reads plain UTF-8
    ENCODINGS: ClassVar[tuple[str, ...]] = ("utf-8-sig", "cp1252")

    def load(self, file_path: Path | str, model: type[ModelT]) -> ModelT:
        """
        Load and validate a document.

        Args:
            file_path: Path to the JSON document.
            model: The model class to validate into.

        Returns:
            The validated model instance.

        Raises:
            ExamLoadError: If the file is missing, unreadable or invalid.
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path
        self._validate_file(path)
        content = self._read_with_encoding_fallback(path)
        try:
            return self.parse(content, model)
        except ExamLoadError as e:
            raise ExamLoadError(str(e), path, cause=e.cause) from e

    def parse(self, content: str, model: type[ModelT]) -> ModelT:
        """Validate JSON text into the given model."""
        if not content.strip():
            raise ExamLoadError("Document is empty or contains only whitespace")
        try:
            return model.model_validate_json(content)
        except ValidationError as e:
            raise ExamLoadError(
                f"Invalid {model.__name__} document:\n{e}",
                cause=e,
            ) from e

    def _validate_file(self, file_path: Path) -> None:
        if not file_path.exists():
            raise ExamLoadError("File does not exist", file_path)

        if not file_path.is_file():
            raise ExamLoadError("Path is not a file", file_path)

        if file_path.suffix.lower() not in self.SUPPORTED_EXTENSIONS:
            raise ExamLoadError(
                f"Unsupported file format. Expected one of: {self.SUPPORTED_EXTENSIONS}",
                file_path,
            )

    def _read_with_encoding_fallback(self, file_path: Path) -> str:
        last_error: Exception | None = None

        for encoding in self.ENCODINGS:
            try:
                return file_path.read_text(encoding=encoding)
            except UnicodeDecodeError as e:
                last_error = e
                continue

        raise ExamLoadError(
            f"Could not decode file with any supported encoding: {self.ENCODINGS}",
            file_path,
            cause=last_error,
        )


_loader = DocumentLoader()


def load_exam(file_path: Path | str) -> Exam:
    """Load an exam definition from a JSON file."""
    return _loader.load(file_path, Exam)


def load_submission(file_path: Path | str) -> ExamSubmission:
    """Load a student submission from a JSON file."""
    return _loader.load(file_path, ExamSubmission)


def parse_exam(content: str) -> Exam:
    return _loader.parse(content, Exam)


def parse_submission(content: str) -> ExamSubmission:
    return _loader.parse(content, ExamSubmission)
