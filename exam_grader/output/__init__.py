"""
Output Module.

Report generation and audit trail persistence for exam results.
"""

from exam_grader.config import ReportFormat
from exam_grader.output.audit import AuditTrail
from exam_grader.output.report import ReportGenerator

__all__ = [
    "AuditTrail",
    "ReportFormat",
    "ReportGenerator",
]
