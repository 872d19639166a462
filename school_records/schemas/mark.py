"""Mark schemas."""

from decimal import Decimal

from pydantic import Field

from school_records.schemas.common import BaseSchema


# ==========================================
# Constants
# ==========================================

SUBJECTS = [
    "English",
    "Mathematics",
    "Science",
    "Social Science/EVS",
    "Urdu/Hindi",
    "Kashmiri",
]

FORMATIVE_FIELDS = ("fa1", "fa2", "fa3", "fa4", "fa5", "fa6")
MARK_FIELDS = FORMATIVE_FIELDS + ("co_curricular", "summative")

FORMATIVE_MAX_PER_SUBJECT = 30
SUBJECT_MAX_MARKS = 100

# Sentinel exam id for records folded across exams
CONSOLIDATED_EXAM_ID = 0


# ==========================================
# Mark Records
# ==========================================

class MarkRecord(BaseSchema):
    """One raw exam entry. Any subset of the numeric components may be set."""

    student_id: int
    exam_id: int
    subject: str = Field(..., min_length=1, max_length=100)
    fa1: Decimal | None = Field(None, ge=0)
    fa2: Decimal | None = Field(None, ge=0)
    fa3: Decimal | None = Field(None, ge=0)
    fa4: Decimal | None = Field(None, ge=0)
    fa5: Decimal | None = Field(None, ge=0)
    fa6: Decimal | None = Field(None, ge=0)
    co_curricular: Decimal | None = Field(None, ge=0)
    summative: Decimal | None = Field(None, ge=0)

    @property
    def fa_total(self) -> Decimal:
        """Sum of the formative components that are present."""
        return sum(
            (getattr(self, name) for name in FORMATIVE_FIELDS if getattr(self, name) is not None),
            Decimal("0"),
        )


class ConsolidatedMark(MarkRecord):
    """Cumulative per-subject record, not tied to a single exam."""

    exam_id: int = CONSOLIDATED_EXAM_ID


# ==========================================
# Result Tabulation
# ==========================================

class SubjectResult(BaseSchema):
    """One subject row of a student's result."""

    subject: str
    fa1: Decimal | None = None
    fa2: Decimal | None = None
    fa3: Decimal | None = None
    fa4: Decimal | None = None
    fa5: Decimal | None = None
    fa6: Decimal | None = None
    fa_total: Decimal
    co_curricular: Decimal | None = None
    summative: Decimal | None = None
    total: Decimal
    grade: str


class StudentResult(BaseSchema):
    """Subject-wise result with grand total and overall grade."""

    student_id: int
    student_name: str | None = None
    roll_no: str | None = None
    subjects: list[SubjectResult]
    grand_total: Decimal
    grand_max: int
    percentage: float
    grade: str
    result: str


class ResultSheet(BaseSchema):
    """Class-wide result register for one session."""

    session: str
    class_name: str
    subjects: list[str]
    students: list[StudentResult]
