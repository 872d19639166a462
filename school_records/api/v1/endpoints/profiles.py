"""Holistic profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from school_records.core.database import get_db
from school_records.schemas.common import ErrorResponse
from school_records.schemas.profile import HolisticProfile, RecordBundle
from school_records.services.aggregation import aggregate_profile
from school_records.services.profile import ProfileService

router = APIRouter()


@router.post("/aggregate", response_model=HolisticProfile)
def aggregate(
    bundle: RecordBundle,
):
    """Compute a profile from a submitted record bundle without storing anything."""
    return aggregate_profile(bundle)


@router.get(
    "/students/{student_id}",
    response_model=HolisticProfile,
    responses={404: {"model": ErrorResponse}},
)
def get_student_profile(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
    session: str = Query(...),
):
    """Profile of a student from the records stored for ``session``."""
    return ProfileService(db).get_student_profile(student_id, session)


@router.get("/classes", response_model=list[HolisticProfile])
def get_class_profiles(
    db: Annotated[Session, Depends(get_db)],
    session: str = Query(...),
    class_name: str = Query(...),
):
    """
    Profiles for every student of a class.
    Students with malformed records come back zeroed with degraded=true.
    """
    return ProfileService(db).get_class_profiles(session, class_name)
