"""Session promotion: advance a whole cohort into a new academic session."""

import logging
import re
from collections.abc import Iterable

from sqlalchemy.orm import Session

from school_records.core.config import settings
from school_records.core.exceptions import ValidationError
from school_records.models.session import StudentSessionInfo
from school_records.schemas.session import PlacementRecord, PromotionPlan, PromotionResult
from school_records.services.records import RecordStore

logger = logging.getLogger(__name__)

# Named pre-primary classes, each mapped to the class above it
PRE_PRIMARY_CHAIN = {
    "PP1": "PP2",
    "PP2": "Balvatika",
    "Balvatika": "1st",
}

GRADE_NUMBER = re.compile(r"\d+")


def ordinal(n: int) -> str:
    """English ordinal: 1st, 2nd, 3rd, 4th, 11th, 12th, 13th, 21st ..."""
    if n % 100 in (11, 12, 13):
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def promote_class(class_name: str, terminal_class: str | None = None) -> str | None:
    """Class a student moves up to, or None when the student graduates.

    Labels that are neither pre-primary nor carry a grade number are
    returned unchanged.
    """
    terminal_class = terminal_class if terminal_class is not None else settings.TERMINAL_CLASS
    if class_name == terminal_class:
        return None
    if class_name in PRE_PRIMARY_CHAIN:
        return PRE_PRIMARY_CHAIN[class_name]

    match = GRADE_NUMBER.search(class_name)
    if match:
        return ordinal(int(match.group()) + 1)
    return class_name


def plan_promotion(
    source_session: str,
    target_session: str,
    placements: Iterable[StudentSessionInfo | PlacementRecord],
    existing_sessions: Iterable[str],
    terminal_class: str | None = None,
) -> PromotionPlan:
    """Validate a promotion and compute every row it will write.

    Performs no I/O; the returned plan is handed to the transactional
    executor as a whole.
    """
    target = (target_session or "").strip()
    if not target:
        raise ValidationError("Please enter a name for the new session")
    if target in set(existing_sessions):
        raise ValidationError(
            f"Session '{target}' already exists",
            details={"target_session": target},
        )

    source_rows = list(placements)
    if not source_rows:
        raise ValidationError(
            f"No students found in the active session '{source_session}'",
            details={"source_session": source_session},
        )

    new_rows: list[PlacementRecord] = []
    graduated = 0
    for row in source_rows:
        new_class = promote_class(row.class_name, terminal_class)
        if new_class is None:
            graduated += 1
            continue
        new_rows.append(
            PlacementRecord(
                student_id=row.student_id,
                session=target,
                class_name=new_class,
                section=row.section,
                roll_no=row.roll_no,
            )
        )

    return PromotionPlan(
        source_session=source_session,
        target_session=target,
        placements=new_rows,
        promoted_count=len(new_rows),
        graduated_count=graduated,
    )


class PromotionService:
    """Creates new sessions by promoting the cohort of an existing one."""

    def __init__(self, db: Session):
        self.db = db
        self.store = RecordStore(db)

    def promote_session(self, source_session: str, target_session: str) -> PromotionResult:
        """Clone ``source_session`` placements into ``target_session``, promoted.

        The session marker and all placement rows are committed together.
        Source rows are only read.
        """
        logger.info(f"[PROMOTION] Starting - source={source_session}, target={target_session}")

        plan = plan_promotion(
            source_session,
            target_session,
            self.store.get_placements(source_session),
            self.store.list_session_names(),
        )
        self.execute_plan(plan)

        logger.info(
            f"[PROMOTION] Completed - target={plan.target_session}, "
            f"promoted={plan.promoted_count}, graduated={plan.graduated_count}"
        )
        return PromotionResult(
            source_session=plan.source_session,
            target_session=plan.target_session,
            promoted_count=plan.promoted_count,
            graduated_count=plan.graduated_count,
            message=(
                f"Promotion successful! {plan.promoted_count} students promoted, "
                f"{plan.graduated_count} graduated."
            ),
        )

    def execute_plan(self, plan: PromotionPlan) -> None:
        """Write the session marker and new placements in one transaction."""

        def write() -> None:
            self.store.add_session(plan.target_session)
            self.store.bulk_add_placements(plan.placements)

        self.store.run_in_transaction(write)
