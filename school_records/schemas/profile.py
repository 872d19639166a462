"""Holistic profile schemas."""

from pydantic import Field, field_validator

from school_records.schemas.common import BaseSchema
from school_records.schemas.mark import MarkRecord
from school_records.schemas.ratings import Proficiency, RatingLevel, parse_label


# ==========================================
# Input Bundle
# ==========================================

class SbaRatings(BaseSchema):
    """Behavioral ratings from the SBA sheet.

    Unrecognized labels are treated as unset so they score 0.
    """

    physical_wellbeing: RatingLevel | None = None
    mental_wellbeing: RatingLevel | None = None
    disease_found: str | None = None
    creativity: RatingLevel | None = None
    critical_thinking: RatingLevel | None = None
    communication_skill: RatingLevel | None = None
    problem_solving_ability: RatingLevel | None = None
    collaboration: RatingLevel | None = None
    students_talent: RatingLevel | None = None
    participation_in_activities: RatingLevel | None = None
    attitude_and_values: RatingLevel | None = None
    presentation_skill: RatingLevel | None = None
    writing_skill: RatingLevel | None = None
    comprehension_skill: RatingLevel | None = None

    @field_validator("*", mode="before")
    @classmethod
    def unknown_label_as_unset(cls, v, info):
        if info.field_name == "disease_found":
            return v
        return parse_label(RatingLevel, v)


class CoCurricularRatings(BaseSchema):
    """Co-curricular proficiency per category."""

    physical_activity: Proficiency | None = None
    participation_in_school_activities: Proficiency | None = None
    cultural_and_creative_activities: Proficiency | None = None
    health_and_hygiene: Proficiency | None = None
    environment_and_it_awareness: Proficiency | None = None
    discipline: Proficiency | None = None
    attendance: Proficiency | None = None

    @field_validator("*", mode="before")
    @classmethod
    def unknown_label_as_unset(cls, v):
        return parse_label(Proficiency, v)


class AnecdotalRecord(BaseSchema):
    """Dated teacher observation."""

    date: str | None = None
    observation: str | None = None


class DetailedAssessment(BaseSchema):
    """One formative assessment sheet (F1..F6) for a subject."""

    subject: str
    assessment_name: str = Field(..., min_length=1)
    academic_proficiency: Proficiency | None = None
    cocurricular_ratings: CoCurricularRatings | None = None
    anecdotal_record: AnecdotalRecord | None = None

    @field_validator("academic_proficiency", mode="before")
    @classmethod
    def unknown_proficiency_as_unset(cls, v):
        return parse_label(Proficiency, v)


class RecordBundle(BaseSchema):
    """Everything recorded for one student in one session."""

    student_id: int
    session: str | None = None
    class_name: str | None = None
    marks: list[MarkRecord] = []
    sba: SbaRatings | None = None
    assessments: list[DetailedAssessment] = []


# ==========================================
# Profile Output
# ==========================================

class ProfileDimension(BaseSchema):
    """One 0-100 performance dimension."""

    label: str
    value: float = Field(..., ge=0, le=100)


class HolisticProfile(BaseSchema):
    """Nine-dimension summary with impressions for one student."""

    student_id: int | None = None
    session: str | None = None
    class_name: str | None = None
    stage: str | None = None
    dimensions: list[ProfileDimension]
    impressions: list[str] = []
    co_curricular_scores: dict[str, int] = {}
    anecdotal_record: AnecdotalRecord | None = None
    proficiency_counts: dict[str, int] = {}
    degraded: bool = False
