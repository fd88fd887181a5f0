"""
Exam Grader - deterministic auto-grading for online exams.

This package grades student submissions for multiple-choice, true/false
and short-answer exams, producing auditable results with per-question
details, point totals, percentages and pass/fail outcomes.
"""

__version__ = "1.0.0"
__author__ = "Exam Grader Team"
