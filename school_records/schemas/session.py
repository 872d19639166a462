"""Session and promotion schemas."""

from pydantic import Field

from school_records.schemas.common import BaseSchema


# ==========================================
# Constants
# ==========================================

# Canonical class order, lowest first
CLASS_OPTIONS = ["PP1", "PP2", "Balvatika", "1st", "2nd", "3rd", "4th", "5th", "6th", "7th", "8th"]


# ==========================================
# Placements & Promotion
# ==========================================

class PlacementRecord(BaseSchema):
    """A student's class placement in one session."""

    student_id: int
    session: str = Field(..., min_length=1, max_length=50)
    class_name: str = Field(..., min_length=1, max_length=50)
    section: str | None = Field(None, max_length=50)
    roll_no: str | None = Field(None, max_length=20)


class PromotionRequest(BaseSchema):
    """Promote the cohort of ``source_session`` into a new session."""

    source_session: str = Field(..., min_length=1, max_length=50)
    target_session: str = Field(..., max_length=50)


class PromotionPlan(BaseSchema):
    """Every write a promotion will perform, computed before any I/O."""

    source_session: str
    target_session: str
    placements: list[PlacementRecord]
    promoted_count: int
    graduated_count: int


class PromotionResult(BaseSchema):
    """Outcome of a committed promotion."""

    source_session: str
    target_session: str
    promoted_count: int
    graduated_count: int
    message: str


class ClassSummary(BaseSchema):
    """Class in a session with its head count."""

    class_name: str
    student_count: int
