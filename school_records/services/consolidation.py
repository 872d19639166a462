"""Consolidation of per-exam marks into cumulative per-subject records."""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from school_records.core.exceptions import ValidationError
from school_records.schemas.mark import (
    MARK_FIELDS,
    SUBJECT_MAX_MARKS,
    SUBJECTS,
    ConsolidatedMark,
    MarkRecord,
    StudentResult,
    SubjectResult,
)

logger = logging.getLogger(__name__)

PASS_PERCENTAGE = Decimal("33")

# Checked top-down; the D floor is the only inclusive boundary
GRADE_THRESHOLDS: list[tuple[Decimal, str]] = [
    (Decimal("85"), "A+"),
    (Decimal("70"), "A"),
    (Decimal("55"), "B"),
    (Decimal("40"), "C"),
]


def _as_mark(raw: MarkRecord | Mapping[str, Any] | Any) -> MarkRecord:
    if isinstance(raw, MarkRecord):
        return raw
    try:
        return MarkRecord.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid mark record",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        ) from e


def _fold(accumulator: ConsolidatedMark, mark: MarkRecord) -> None:
    for name in MARK_FIELDS:
        value = getattr(mark, name)
        if value is None:
            continue
        current = getattr(accumulator, name)
        setattr(accumulator, name, (current or Decimal("0")) + value)


def consolidate_marks(raw_marks: Iterable[MarkRecord | Mapping[str, Any]]) -> dict[str, ConsolidatedMark]:
    """Fold one student's exam entries into a single record per subject.

    Each numeric component is summed across entries. Components never
    present in any entry stay None so "no data" remains distinct from 0.
    """
    consolidated: dict[str, ConsolidatedMark] = {}
    student_id: int | None = None

    for raw in raw_marks:
        mark = _as_mark(raw)
        if student_id is None:
            student_id = mark.student_id
        elif mark.student_id != student_id:
            raise ValidationError(
                "Marks for more than one student cannot be consolidated together",
                details={"student_ids": sorted({student_id, mark.student_id})},
            )

        accumulator = consolidated.get(mark.subject)
        if accumulator is None:
            accumulator = ConsolidatedMark(student_id=mark.student_id, subject=mark.subject)
            consolidated[mark.subject] = accumulator
        _fold(accumulator, mark)

    return consolidated


def consolidate_class_marks(
    raw_marks: Iterable[MarkRecord | Mapping[str, Any]],
) -> dict[int, dict[str, ConsolidatedMark]]:
    """Consolidate marks for many students, keyed by student id."""
    by_student: dict[int, list[MarkRecord]] = {}
    for raw in raw_marks:
        mark = _as_mark(raw)
        by_student.setdefault(mark.student_id, []).append(mark)
    logger.debug(f"[CONSOLIDATION] Folding marks for {len(by_student)} students")
    return {student_id: consolidate_marks(marks) for student_id, marks in by_student.items()}


def grade_for_percentage(percentage: Decimal | float | int) -> str:
    """Letter grade: >85 A+, >70 A, >55 B, >40 C, >=33 D, else E."""
    if not isinstance(percentage, Decimal):
        percentage = Decimal(str(percentage))
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage > threshold:
            return grade
    if percentage >= PASS_PERCENTAGE:
        return "D"
    return "E"


def build_subject_result(subject: str, mark: ConsolidatedMark | None) -> SubjectResult:
    """FA total out of 30 and subject total out of 100 for one subject."""
    if mark is None:
        return SubjectResult(subject=subject, fa_total=Decimal("0"), total=Decimal("0"), grade=grade_for_percentage(0))

    fa_total = mark.fa_total
    total = fa_total + (mark.co_curricular or Decimal("0")) + (mark.summative or Decimal("0"))
    return SubjectResult(
        subject=subject,
        fa1=mark.fa1,
        fa2=mark.fa2,
        fa3=mark.fa3,
        fa4=mark.fa4,
        fa5=mark.fa5,
        fa6=mark.fa6,
        fa_total=fa_total,
        co_curricular=mark.co_curricular,
        summative=mark.summative,
        total=total,
        grade=grade_for_percentage(total * 100 / SUBJECT_MAX_MARKS),
    )


def build_student_result(
    student_id: int,
    consolidated: Mapping[str, ConsolidatedMark],
    subjects: list[str] | None = None,
    student_name: str | None = None,
    roll_no: str | None = None,
) -> StudentResult:
    """Tabulate a student's consolidated marks over a fixed subject set.

    The grand maximum is 100 per subject in the set, whether or not the
    student has marks for it.
    """
    subjects = subjects if subjects is not None else SUBJECTS
    rows = [build_subject_result(subject, consolidated.get(subject)) for subject in subjects]

    grand_total = sum((row.total for row in rows), Decimal("0"))
    grand_max = len(subjects) * SUBJECT_MAX_MARKS
    percentage = grand_total * 100 / grand_max if grand_max else Decimal("0")

    return StudentResult(
        student_id=student_id,
        student_name=student_name,
        roll_no=roll_no,
        subjects=rows,
        grand_total=grand_total,
        grand_max=grand_max,
        percentage=float(percentage),
        grade=grade_for_percentage(percentage),
        result="Passed" if percentage >= PASS_PERCENTAGE else "Failed",
    )
