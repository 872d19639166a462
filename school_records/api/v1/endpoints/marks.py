"""Mark consolidation and result sheet endpoints."""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from school_records.core.database import get_db
from school_records.schemas.mark import ConsolidatedMark, MarkRecord, ResultSheet, StudentResult
from school_records.services.consolidation import consolidate_marks
from school_records.services.records import RecordStore
from school_records.services.result_sheet import ResultSheetService

router = APIRouter()


@router.post("/consolidate", response_model=dict[str, ConsolidatedMark])
def consolidate(
    marks: list[MarkRecord],
):
    """
    Fold one student's exam entries into a record per subject.
    All entries must belong to the same student.
    """
    return consolidate_marks(marks)


@router.get("/students/{student_id}/consolidated", response_model=dict[str, ConsolidatedMark])
def get_consolidated_marks(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
    session: str | None = None,
):
    """Consolidated marks of a stored student, optionally limited to a session."""
    marks = RecordStore(db).get_marks([student_id], session)
    return consolidate_marks(marks)


@router.get("/students/{student_id}/result", response_model=StudentResult)
def get_student_result(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
    session: str = Query(...),
):
    """Subject-wise result of a student placed in ``session``."""
    return ResultSheetService(db).get_student_result(student_id, session)


@router.get("/result-sheet", response_model=ResultSheet)
def get_result_sheet(
    db: Annotated[Session, Depends(get_db)],
    session: str = Query(...),
    class_name: str = Query(...),
):
    """Result register of a class, in roll-number order."""
    return ResultSheetService(db).build_result_sheet(session, class_name)


@router.get("/result-sheet/export")
def export_result_sheet(
    db: Annotated[Session, Depends(get_db)],
    session: str = Query(...),
    class_name: str = Query(...),
):
    """Download the class result register as an Excel workbook."""
    content = ResultSheetService(db).export_result_sheet(session, class_name)
    filename = f"result_sheet_{class_name}_{session}.xlsx".replace(" ", "_").replace("/", "-")

    return StreamingResponse(
        BytesIO(content),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
