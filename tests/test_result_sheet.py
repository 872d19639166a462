"""
Tests for class result sheets and their Excel export.
Run: python -m pytest tests/test_result_sheet.py -v
"""
from decimal import Decimal
from io import BytesIO

import pytest
from openpyxl import load_workbook

from school_records.core.exceptions import NotFoundError
from school_records.schemas.mark import SUBJECTS
from school_records.services.result_sheet import ResultSheetService

from factories import add_mark, add_placed_student, add_student

SESSION = "2024-25"


@pytest.fixture
def seeded_class(db_session):
    """Two students in 5th; one has marks across two exams, one has none."""
    sana = add_placed_student(db_session, "Sana", "5th", SESSION, roll_no="2")
    bilal = add_placed_student(db_session, "Bilal", "5th", SESSION, roll_no="10")
    add_placed_student(db_session, "Other", "6th", SESSION, roll_no="1")

    add_mark(db_session, sana, "English", exam_id=1, session=SESSION, fa1=5, fa2=5)
    add_mark(db_session, sana, "English", exam_id=2, session=SESSION, fa3=5, co_curricular=15, summative=50)
    add_mark(db_session, sana, "Mathematics", exam_id=2, session=SESSION, summative=45)
    # Last year's marks are not part of this sheet
    add_mark(db_session, sana, "Science", exam_id=9, session="2023-24", summative=70)
    db_session.commit()
    return {"sana": sana, "bilal": bilal}


class TestBuildResultSheet:
    def test_rows_in_roll_order(self, db_session, seeded_class):
        sheet = ResultSheetService(db_session).build_result_sheet(SESSION, "5th")
        assert sheet.subjects == SUBJECTS
        assert [s.student_name for s in sheet.students] == ["Sana", "Bilal"]

    def test_totals_from_consolidated_marks(self, db_session, seeded_class):
        sheet = ResultSheetService(db_session).build_result_sheet(SESSION, "5th")
        sana = sheet.students[0]
        english = next(row for row in sana.subjects if row.subject == "English")
        assert english.fa_total == Decimal("15")
        assert english.total == Decimal("80")
        assert english.grade == "A"

        science = next(row for row in sana.subjects if row.subject == "Science")
        assert science.total == Decimal("0")
        assert sana.grand_total == Decimal("125")
        assert sana.grand_max == 600

    def test_student_without_marks(self, db_session, seeded_class):
        sheet = ResultSheetService(db_session).build_result_sheet(SESSION, "5th")
        bilal = sheet.students[1]
        assert bilal.grand_total == Decimal("0")
        assert bilal.grade == "E"
        assert bilal.result == "Failed"

    def test_custom_subject_set(self, db_session, seeded_class):
        sheet = ResultSheetService(db_session).build_result_sheet(SESSION, "5th", subjects=["English"])
        sana = sheet.students[0]
        assert sana.grand_max == 100
        assert sana.percentage == pytest.approx(80.0)
        assert sana.result == "Passed"

    def test_empty_class(self, db_session):
        sheet = ResultSheetService(db_session).build_result_sheet(SESSION, "7th")
        assert sheet.students == []


class TestStudentResult:
    def test_single_student(self, db_session, seeded_class):
        result = ResultSheetService(db_session).get_student_result(seeded_class["sana"].id, SESSION)
        assert result.grand_total == Decimal("125")
        assert result.roll_no == "2"

    def test_unplaced_student(self, db_session):
        student = add_student(db_session)
        with pytest.raises(NotFoundError):
            ResultSheetService(db_session).get_student_result(student.id, SESSION)


class TestExport:
    def test_workbook_layout(self, db_session, seeded_class):
        content = ResultSheetService(db_session).export_result_sheet(SESSION, "5th")
        ws = load_workbook(BytesIO(content)).active

        assert ws.title == "Result Sheet"
        assert "5th" in ws.cell(row=1, column=1).value
        headers = [ws.cell(row=2, column=col).value for col in range(1, len(SUBJECTS) + 7)]
        assert headers == ["Roll No", "Student Name", *SUBJECTS, "Grand Total", "Percentage", "Grade", "Result"]

        assert ws.cell(row=4, column=1).value == "2"
        assert ws.cell(row=4, column=2).value == "Sana"
        assert ws.cell(row=4, column=3).value == 80
        assert ws.cell(row=5, column=2).value == "Bilal"
