"""Reports package - grade reports and catalog views."""

from coursereg.reports.aggregator import STUDENT_NOT_FOUND, ReportAggregator
from coursereg.reports.models import GradeReport

__all__ = [
    "STUDENT_NOT_FOUND",
    "GradeReport",
    "ReportAggregator",
]
