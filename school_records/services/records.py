"""Record store over the SQLAlchemy session.

Collection-style reads and writes used by the engines, plus a single
transactional executor for multi-table writes.
"""

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from school_records.core.exceptions import NotFoundError, TransactionError
from school_records.models.assessment import DetailedFormativeAssessment, SbaRecord
from school_records.models.mark import Mark
from school_records.models.session import AcademicSession, StudentSessionInfo
from school_records.schemas.mark import MARK_FIELDS
from school_records.schemas.profile import SbaRatings
from school_records.schemas.session import CLASS_OPTIONS, ClassSummary, PlacementRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def natural_key(value: str | None) -> list:
    """Sort key that orders embedded numbers numerically ("2" before "10")."""
    parts = re.split(r"(\d+)", value or "")
    return [int(part) if part.isdigit() else part.lower() for part in parts]


def class_sort_key(class_name: str) -> tuple:
    """Canonical class order first, unknown labels after in natural order."""
    if class_name in CLASS_OPTIONS:
        return (0, CLASS_OPTIONS.index(class_name))
    return (1, natural_key(class_name))


class RecordStore:
    """Read/write access to sessions, placements and assessment records."""

    def __init__(self, db: Session):
        self.db = db

    # ==========================================
    # Sessions & Placements
    # ==========================================

    def list_session_names(self) -> list[str]:
        """Known session names, from session markers and placements alike."""
        declared = self.db.execute(select(AcademicSession.name)).scalars().all()
        placed = self.db.execute(select(StudentSessionInfo.session).distinct()).scalars().all()
        return sorted(set(declared) | set(placed))

    def get_placements(self, session: str, class_name: str | None = None) -> list[StudentSessionInfo]:
        """Placements of a session, ordered by class then roll number."""
        query = select(StudentSessionInfo).where(StudentSessionInfo.session == session)
        if class_name:
            query = query.where(StudentSessionInfo.class_name == class_name)
        placements = list(self.db.execute(query).scalars().all())
        placements.sort(key=lambda p: (class_sort_key(p.class_name), natural_key(p.roll_no), p.id))
        return placements

    def get_placement(self, student_id: int, session: str) -> StudentSessionInfo:
        result = self.db.execute(
            select(StudentSessionInfo).where(
                StudentSessionInfo.student_id == student_id,
                StudentSessionInfo.session == session,
            )
        )
        placement = result.scalar_one_or_none()
        if not placement:
            raise NotFoundError("Student placement", f"{student_id}@{session}")
        return placement

    def list_class_summaries(self, session: str) -> list[ClassSummary]:
        """Classes of a session with head counts, in canonical order."""
        result = self.db.execute(
            select(StudentSessionInfo.class_name, func.count())
            .where(StudentSessionInfo.session == session)
            .group_by(StudentSessionInfo.class_name)
        )
        rows = sorted(result.all(), key=lambda r: class_sort_key(r[0]))
        return [ClassSummary(class_name=r[0], student_count=r[1]) for r in rows]

    def add_session(self, name: str) -> AcademicSession:
        """Stage a session marker and return it with its id assigned."""
        academic_session = AcademicSession(name=name)
        self.db.add(academic_session)
        self.db.flush()
        return academic_session

    def bulk_add_placements(self, placements: Iterable[PlacementRecord]) -> int:
        rows = [StudentSessionInfo(**placement.model_dump()) for placement in placements]
        self.db.add_all(rows)
        self.db.flush()
        return len(rows)

    def run_in_transaction(self, fn: Callable[[], T]) -> T:
        """Run ``fn`` and commit its writes together, or roll all of them back."""
        try:
            result = fn()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[TRANSACTION] Rolled back: {str(e)}")
            raise TransactionError(
                f"Transaction failed and was rolled back: {str(e)}",
                details={"error_type": type(e).__name__},
            ) from e
        except Exception:
            self.db.rollback()
            raise
        return result

    # ==========================================
    # Marks & Assessments
    # ==========================================

    def get_marks(self, student_ids: Iterable[int], session: str | None = None) -> list[Mark]:
        """Raw exam entries for the given students.

        With a session, entries tagged for another session are excluded;
        untagged entries are always included.
        """
        ids = list(student_ids)
        if not ids:
            return []
        query = select(Mark).where(Mark.student_id.in_(ids))
        if session is not None:
            query = query.where((Mark.session == session) | (Mark.session.is_(None)))
        return list(self.db.execute(query.order_by(Mark.id)).scalars().all())

    def get_sba_record(self, student_id: int, session: str) -> SbaRecord | None:
        result = self.db.execute(
            select(SbaRecord).where(
                SbaRecord.student_id == student_id,
                SbaRecord.session == session,
            )
        )
        return result.scalar_one_or_none()

    def get_detailed_assessments(self, student_id: int, session: str) -> list[DetailedFormativeAssessment]:
        result = self.db.execute(
            select(DetailedFormativeAssessment)
            .where(
                DetailedFormativeAssessment.student_id == student_id,
                DetailedFormativeAssessment.session == session,
            )
            .order_by(DetailedFormativeAssessment.id)
        )
        return list(result.scalars().all())

    # ==========================================
    # Aggregation Bundles
    # ==========================================

    def build_bundle(self, placement: StudentSessionInfo) -> dict[str, Any]:
        """Raw record bundle for one placed student.

        Left unvalidated so that a malformed stored record surfaces in the
        aggregation engine rather than here.
        """
        student_id = placement.student_id
        session = placement.session
        sba = self.get_sba_record(student_id, session)

        return {
            "student_id": student_id,
            "session": session,
            "class_name": placement.class_name,
            "marks": [self._mark_to_dict(m) for m in self.get_marks([student_id], session)],
            "sba": self._sba_to_dict(sba) if sba else None,
            "assessments": [
                self._assessment_to_dict(a)
                for a in self.get_detailed_assessments(student_id, session)
            ],
        }

    def build_class_bundles(self, session: str, class_name: str) -> list[dict[str, Any]]:
        placements = self.get_placements(session, class_name)
        logger.info(
            f"[AGGREGATION] Building bundles - session={session}, class={class_name}, "
            f"students={len(placements)}"
        )
        return [self.build_bundle(p) for p in placements]

    def _mark_to_dict(self, mark: Mark) -> dict[str, Any]:
        data = {
            "student_id": mark.student_id,
            "exam_id": mark.exam_id,
            "subject": mark.subject,
        }
        for name in MARK_FIELDS:
            data[name] = getattr(mark, name)
        return data

    def _sba_to_dict(self, sba: SbaRecord) -> dict[str, Any]:
        return {name: getattr(sba, name) for name in SbaRatings.model_fields}

    def _assessment_to_dict(self, assessment: DetailedFormativeAssessment) -> dict[str, Any]:
        anecdotal = None
        if assessment.anecdotal_date or assessment.anecdotal_observation:
            anecdotal = {
                "date": assessment.anecdotal_date,
                "observation": assessment.anecdotal_observation,
            }
        return {
            "subject": assessment.subject,
            "assessment_name": assessment.assessment_name,
            "academic_proficiency": assessment.academic_proficiency,
            "cocurricular_ratings": assessment.cocurricular_ratings,
            "anecdotal_record": anecdotal,
        }
