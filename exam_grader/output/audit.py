"""
Audit trail persistence.

Stores one JSON file per audit record and re-checks recorded hashes
against an exam, submission and result.
"""

from pathlib import Path
from uuid import UUID

from exam_grader.grading.engine import exam_content, result_content, submission_content
from exam_grader.models import AuditRecord, Exam, ExamResult, ExamSubmission


class AuditTrail:
    """Directory of audit records, one file per record."""

    def __init__(self, directory: Path):
        self._directory = directory
        self._directory.mkdir(parents=True, exist_ok=True)

    def save(self, audit: AuditRecord) -> Path:
        """Write an audit record and return its path."""
        path = self._path_for(audit.audit_id)
        path.write_text(audit.model_dump_json(indent=2), encoding="utf-8")
        return path

    def load(self, audit_id: UUID | str) -> AuditRecord | None:
        """Read an audit record, or None if it was never saved."""
        path = self._path_for(audit_id)
        if not path.exists():
            return None
        return AuditRecord.model_validate_json(path.read_text(encoding="utf-8"))

    def list(self) -> list[AuditRecord]:
        return [
            AuditRecord.model_validate_json(p.read_text(encoding="utf-8"))
            for p in sorted(self._directory.glob("audit_*.json"))
        ]

    def verify(
        self,
        audit: AuditRecord,
        exam: Exam,
        submission: ExamSubmission,
        result: ExamResult | None = None,
    ) -> bool:
        """
        Check that the audit's hashes match the given inputs.

        The result hash is only compared when a result is supplied.
        """
        if audit.exam_hash != AuditRecord.compute_hash(exam_content(exam)):
            return False
        if audit.submission_hash != AuditRecord.compute_hash(submission_content(submission)):
            return False
        if result is not None:
            return audit.result_hash == AuditRecord.compute_hash(result_content(result))
        return True

    def _path_for(self, audit_id: UUID | str) -> Path:
        return self._directory / f"audit_{audit_id}.json"
