"""Academic session endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from school_records.core.database import get_db
from school_records.schemas.common import ErrorResponse
from school_records.schemas.session import ClassSummary, PromotionRequest, PromotionResult
from school_records.services.promotion import PromotionService
from school_records.services.records import RecordStore

router = APIRouter()


@router.get("", response_model=list[str])
def list_sessions(
    db: Annotated[Session, Depends(get_db)],
):
    """List every known session name."""
    return RecordStore(db).list_session_names()


@router.get("/{session}/classes", response_model=list[ClassSummary])
def list_session_classes(
    session: str,
    db: Annotated[Session, Depends(get_db)],
):
    """Classes of a session with head counts, lowest class first."""
    return RecordStore(db).list_class_summaries(session)


@router.post(
    "/promote",
    response_model=PromotionResult,
    status_code=201,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def promote_session(
    request: PromotionRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Create a new session by promoting every student of the source session.
    Students in the terminal class graduate and are not carried over.
    Fails without writing anything if the target session already exists.
    """
    service = PromotionService(db)
    return service.promote_session(request.source_session, request.target_session)
