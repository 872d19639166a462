"""
Tests for mark consolidation, grading and result tabulation.
Run: python -m pytest tests/test_consolidation.py -v
"""
from decimal import Decimal
from itertools import permutations

import pytest

from school_records.core.exceptions import ValidationError
from school_records.schemas.mark import CONSOLIDATED_EXAM_ID, SUBJECTS, ConsolidatedMark
from school_records.services.consolidation import (
    build_student_result,
    consolidate_class_marks,
    consolidate_marks,
    grade_for_percentage,
)

from factories import mark_dict


class TestConsolidateMarks:
    def test_components_summed_per_subject(self):
        result = consolidate_marks([
            mark_dict(exam_id=1, fa1=5),
            mark_dict(exam_id=2, fa1=3, fa2=4),
            mark_dict(exam_id=3, subject="Science", summative=40),
        ])
        english = result["English"]
        assert english.fa1 == Decimal("8")
        assert english.fa2 == Decimal("4")
        assert english.exam_id == CONSOLIDATED_EXAM_ID
        assert result["Science"].summative == Decimal("40")
        assert set(result) == {"English", "Science"}

    def test_absent_components_stay_none(self):
        result = consolidate_marks([mark_dict(fa1=5), mark_dict(exam_id=2, fa1=0)])
        english = result["English"]
        assert english.fa1 == Decimal("5")
        assert english.fa3 is None
        assert english.summative is None

    def test_recorded_zero_is_kept(self):
        english = consolidate_marks([mark_dict(co_curricular=0)])["English"]
        assert english.co_curricular == Decimal("0")

    def test_order_independent(self):
        marks = [
            mark_dict(exam_id=1, fa1="2.25", summative="30.5"),
            mark_dict(exam_id=2, fa1="1.1", fa2=3),
            mark_dict(exam_id=3, fa1="0.65", co_curricular="7.75"),
        ]
        expected = consolidate_marks(marks)["English"].model_dump()
        for ordering in permutations(marks):
            assert consolidate_marks(list(ordering))["English"].model_dump() == expected

    def test_empty_input(self):
        assert consolidate_marks([]) == {}

    def test_multiple_students_rejected(self):
        with pytest.raises(ValidationError):
            consolidate_marks([mark_dict(student_id=1, fa1=1), mark_dict(student_id=2, fa1=1)])

    def test_negative_component_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            consolidate_marks([mark_dict(fa1=-1)])
        assert "errors" in exc_info.value.details


class TestConsolidateClassMarks:
    def test_grouped_by_student(self):
        result = consolidate_class_marks([
            mark_dict(student_id=1, fa1=2),
            mark_dict(student_id=2, fa1=3),
            mark_dict(student_id=1, exam_id=2, fa1=4),
        ])
        assert result[1]["English"].fa1 == Decimal("6")
        assert result[2]["English"].fa1 == Decimal("3")


class TestGrades:
    @pytest.mark.parametrize(
        "percentage,grade",
        [
            (100, "A+"),
            (85.01, "A+"),
            (85, "A"),
            (70.5, "A"),
            (70, "B"),
            (55, "C"),
            (40.01, "C"),
            (40, "D"),
            (33, "D"),
            (32.99, "E"),
            (0, "E"),
        ],
    )
    def test_boundaries(self, percentage, grade):
        assert grade_for_percentage(percentage) == grade


def _consolidated(subject="English", **components):
    return ConsolidatedMark(
        student_id=1,
        subject=subject,
        **{name: Decimal(str(value)) for name, value in components.items()},
    )


class TestStudentResult:
    def test_eighty_five_percent_is_grade_a(self):
        consolidated = {"English": _consolidated(fa1=10, fa2=10, fa3=10, co_curricular=15, summative=40)}
        result = build_student_result(1, consolidated, subjects=["English"])
        assert result.grand_total == Decimal("85")
        assert result.percentage == pytest.approx(85.0)
        assert result.grade == "A"
        assert result.result == "Passed"
        assert result.subjects[0].fa_total == Decimal("30")
        assert result.subjects[0].grade == "A"

    def test_thirty_three_percent_passes_with_d(self):
        result = build_student_result(1, {"English": _consolidated(summative=33)}, subjects=["English"])
        assert result.grade == "D"
        assert result.result == "Passed"

    def test_below_pass_mark_fails(self):
        result = build_student_result(1, {"English": _consolidated(summative=32)}, subjects=["English"])
        assert result.grade == "E"
        assert result.result == "Failed"

    def test_default_subjects_and_missing_subjects(self):
        result = build_student_result(1, {"English": _consolidated(summative=60)}, student_name="Sana", roll_no="4")
        assert [row.subject for row in result.subjects] == SUBJECTS
        assert result.grand_max == 600
        assert result.grand_total == Decimal("60")
        assert result.percentage == pytest.approx(10.0)
        assert result.student_name == "Sana"
        assert result.roll_no == "4"

        science = next(row for row in result.subjects if row.subject == "Science")
        assert science.total == Decimal("0")
        assert science.grade == "E"
