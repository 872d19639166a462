"""Class result sheets built from consolidated marks."""

import logging
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from school_records.schemas.mark import SUBJECTS, ResultSheet, StudentResult
from school_records.services.consolidation import build_student_result, consolidate_class_marks
from school_records.services.records import RecordStore

logger = logging.getLogger(__name__)


class ResultSheetService:
    """Tabulates and exports the result register of a class."""

    def __init__(self, db: Session):
        self.db = db
        self.store = RecordStore(db)

    def build_result_sheet(
        self,
        session: str,
        class_name: str,
        subjects: list[str] | None = None,
    ) -> ResultSheet:
        """Result of every student placed in ``class_name`` for ``session``.

        Students appear in roll-number order; a student without marks still
        gets a row with zero totals.
        """
        subjects = subjects if subjects is not None else SUBJECTS
        placements = self.store.get_placements(session, class_name)
        marks = self.store.get_marks([p.student_id for p in placements], session)
        consolidated = consolidate_class_marks(marks)

        students = [
            build_student_result(
                placement.student_id,
                consolidated.get(placement.student_id, {}),
                subjects,
                student_name=placement.student.name if placement.student else None,
                roll_no=placement.roll_no,
            )
            for placement in placements
        ]
        logger.info(
            f"[RESULT SHEET] Built - session={session}, class={class_name}, students={len(students)}"
        )
        return ResultSheet(session=session, class_name=class_name, subjects=subjects, students=students)

    def get_student_result(self, student_id: int, session: str) -> StudentResult:
        placement = self.store.get_placement(student_id, session)
        marks = self.store.get_marks([student_id], session)
        consolidated = consolidate_class_marks(marks).get(student_id, {})
        return build_student_result(
            student_id,
            consolidated,
            student_name=placement.student.name if placement.student else None,
            roll_no=placement.roll_no,
        )

    # ==========================================
    # Excel Export
    # ==========================================

    def export_result_sheet(self, session: str, class_name: str) -> bytes:
        """Render the class result sheet as an ``.xlsx`` workbook."""
        sheet = self.build_result_sheet(session, class_name)

        wb = Workbook()
        ws = wb.active
        ws.title = "Result Sheet"

        # Styles
        title_font = Font(bold=True, size=14)
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        subheader_fill = PatternFill(start_color="8FAADC", end_color="8FAADC", fill_type="solid")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
        center_align = Alignment(horizontal='center', vertical='center')

        # Roll No, Name, one total per subject, then the summary columns
        headers = ["Roll No", "Student Name"] + sheet.subjects + [
            "Grand Total",
            "Percentage",
            "Grade",
            "Result",
        ]
        last_col = get_column_letter(len(headers))

        ws.merge_cells(f"A1:{last_col}1")
        title_cell = ws.cell(row=1, column=1, value=f"Result Sheet - Class {class_name} - Session {session}")
        title_cell.font = title_font
        title_cell.alignment = center_align
        title_cell.fill = PatternFill(start_color="B4C6E7", end_color="B4C6E7", fill_type="solid")

        for col_idx, header in enumerate(headers, start=1):
            cell = ws.cell(row=2, column=col_idx, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.border = thin_border
            cell.alignment = center_align

        # Max marks per column
        max_row = ["", "Max Marks"] + [100] * len(sheet.subjects) + [100 * len(sheet.subjects), 100, "", ""]
        for col_idx, value in enumerate(max_row, start=1):
            cell = ws.cell(row=3, column=col_idx, value=value)
            cell.fill = subheader_fill
            cell.border = thin_border
            cell.alignment = center_align

        for row_idx, student in enumerate(sheet.students, start=4):
            totals = {row.subject: float(row.total) for row in student.subjects}
            values = [student.roll_no or "", student.student_name or ""]
            values += [totals.get(subject, 0.0) for subject in sheet.subjects]
            values += [
                float(student.grand_total),
                round(student.percentage, 2),
                student.grade,
                student.result,
            ]
            for col_idx, value in enumerate(values, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = thin_border
                if col_idx > 2:
                    cell.alignment = center_align

        ws.column_dimensions['A'].width = 10
        ws.column_dimensions['B'].width = 25
        for col_idx in range(3, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = 14

        output = BytesIO()
        wb.save(output)
        output.seek(0)
        logger.info(f"[RESULT SHEET] Exported - session={session}, class={class_name}")
        return output.getvalue()
