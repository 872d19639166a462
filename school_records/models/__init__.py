"""Database models package."""

from school_records.models.assessment import DetailedFormativeAssessment, SbaRecord
from school_records.models.mark import Mark
from school_records.models.session import AcademicSession, StudentSessionInfo
from school_records.models.student import Student

__all__ = [
    # Student
    "Student",
    # Session
    "AcademicSession",
    "StudentSessionInfo",
    # Marks
    "Mark",
    # Assessments
    "SbaRecord",
    "DetailedFormativeAssessment",
]
