"""Holistic profile aggregation.

Combines one student's SBA ratings, formative marks and detailed
formative assessments into nine 0-100 dimensions, in a fixed order, plus
the advisory impressions printed under the progress card meters.

Everything here is a pure function of the bundle passed in, so profiles
for a whole class can be computed independently per student.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from school_records.core.exceptions import DataIntegrityError
from school_records.schemas.profile import (
    DetailedAssessment,
    HolisticProfile,
    ProfileDimension,
    RecordBundle,
    SbaRatings,
)
from school_records.schemas.ratings import (
    SKILL_CATEGORIES,
    WELLBEING_CATEGORIES,
    Proficiency,
    RatingCategory,
    RatingLevel,
)
from school_records.services.normalizer import (
    academic_percentage,
    co_curricular_percentage,
    co_curricular_scores,
    rating_percent,
)

logger = logging.getLogger(__name__)

IMPRESSION_THRESHOLD = 50

HEALTH = "Student Health"
SKILLS = "21st Century Skills"
PARTICIPATION = "Participation"
ATTITUDE = "Attitude & Values"
PRESENTATION = "Presentation Skill"
WRITING = "Writing Skill"
COMPREHENSION = "Comprehension Skill"
ACADEMIC = "Academic Performance"
CO_CURRICULAR = "Co-Curricular Activity"

DIMENSION_LABELS = [
    HEALTH,
    SKILLS,
    PARTICIPATION,
    ATTITUDE,
    PRESENTATION,
    WRITING,
    COMPREHENSION,
    ACADEMIC,
    CO_CURRICULAR,
]

# Wording is shared with the printed progress card
IMPRESSIONS: dict[str, str] = {
    HEALTH: (
        "Your child has a health issue, please contact the School authorities "
        "for further assistance."
    ),
    SKILLS: (
        "Your child's 21st century skills are not satisfactory. "
        "We recommend focusing on its improvement."
    ),
    PARTICIPATION: (
        "Your child's participation in various activities has been a bit less, "
        "please contact school authorities for further improvement."
    ),
    ATTITUDE: (
        "Dear parent, there are concerns about your child's attitude and values. "
        "Let's discuss how we can address this together."
    ),
    PRESENTATION: (
        "Dear parent, your child's presentation skill needs improvement. "
        "Let's discuss how we can address this together."
    ),
    WRITING: (
        "Dear parent, your child's writing skill needs improvement. "
        "Let's discuss how we can address this together."
    ),
    COMPREHENSION: (
        "Dear parent, your child is facing challenges with comprehension skills. "
        "Let's explore ways to support their improvement."
    ),
    ACADEMIC: (
        "Dear parent, your child is facing challenges with academic performance. "
        "Let's explore ways to support its improvement."
    ),
    CO_CURRICULAR: (
        "Dear parent, your child is facing challenges with co-curricular activities. "
        "Let's explore ways to support its improvement."
    ),
}

TALENT_COMMENDATION = (
    "Your child has remarkable talent and has been rated Highly Talented. "
    "We encourage you to nurture it."
)

STAGE_CLASSES: dict[str, tuple[str, ...]] = {
    "Foundational": ("PP1", "PP2", "Balvatika", "1st", "2nd"),
    "Preparatory": ("3rd", "4th", "5th"),
    "Middle": ("6th", "7th", "8th"),
}

COUNTED_PROFICIENCIES = (Proficiency.SKY, Proficiency.MOUNTAIN, Proficiency.STREAM)


def stage_for_class(class_name: str | None) -> str | None:
    """NEP stage of a class, or None for classes outside the three stages."""
    for stage, classes in STAGE_CLASSES.items():
        if class_name in classes:
            return stage
    return None


def select_latest_assessment(records: Sequence[DetailedAssessment]) -> DetailedAssessment | None:
    """Pick the record whose assessment name sorts last.

    Names are compared as plain strings, so "F10" sorts before "F2".
    Reports printed so far rely on this ordering.
    """
    if not records:
        return None
    return sorted(records, key=lambda record: record.assessment_name)[-1]


def proficiency_counts(records: Iterable[DetailedAssessment]) -> dict[str, int]:
    """How many assessments were rated Sky, Mountain and Stream."""
    counts = {level.value: 0 for level in COUNTED_PROFICIENCIES}
    for record in records:
        if record.academic_proficiency in COUNTED_PROFICIENCIES:
            counts[record.academic_proficiency.value] += 1
    return counts


def _mean_percent(sba: SbaRatings, categories: Sequence[RatingCategory]) -> float:
    # Unset categories stay in the denominator
    total = sum(rating_percent(getattr(sba, category.value)) for category in categories)
    return total / len(categories)


def _validate_bundle(bundle: RecordBundle | Mapping[str, Any]) -> RecordBundle:
    if isinstance(bundle, RecordBundle):
        return bundle
    try:
        return RecordBundle.model_validate(bundle)
    except PydanticValidationError as e:
        raise DataIntegrityError(
            "Malformed record bundle",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        ) from e


def aggregate_profile(bundle: RecordBundle | Mapping[str, Any]) -> HolisticProfile:
    """Build the holistic profile for one student.

    Raises DataIntegrityError when the bundle is missing required keys or
    holds values of the wrong shape.
    """
    bundle = _validate_bundle(bundle)
    sba = bundle.sba or SbaRatings()
    latest = select_latest_assessment(bundle.assessments)
    ratings = latest.cocurricular_ratings if latest else None

    values = {
        HEALTH: _mean_percent(sba, WELLBEING_CATEGORIES),
        SKILLS: _mean_percent(sba, SKILL_CATEGORIES),
        PARTICIPATION: float(rating_percent(sba.participation_in_activities)),
        ATTITUDE: float(rating_percent(sba.attitude_and_values)),
        PRESENTATION: float(rating_percent(sba.presentation_skill)),
        WRITING: float(rating_percent(sba.writing_skill)),
        COMPREHENSION: float(rating_percent(sba.comprehension_skill)),
        ACADEMIC: academic_percentage(bundle.marks),
        CO_CURRICULAR: co_curricular_percentage(ratings),
    }

    impressions = [IMPRESSIONS[label] for label in DIMENSION_LABELS if values[label] < IMPRESSION_THRESHOLD]
    if sba.students_talent == RatingLevel.HIGHLY_TALENTED:
        impressions.append(TALENT_COMMENDATION)

    return HolisticProfile(
        student_id=bundle.student_id,
        session=bundle.session,
        class_name=bundle.class_name,
        stage=stage_for_class(bundle.class_name),
        dimensions=[ProfileDimension(label=label, value=values[label]) for label in DIMENSION_LABELS],
        impressions=impressions,
        co_curricular_scores=co_curricular_scores(ratings),
        anecdotal_record=latest.anecdotal_record if latest else None,
        proficiency_counts=proficiency_counts(bundle.assessments),
    )


def degraded_profile(bundle: Mapping[str, Any] | Any) -> HolisticProfile:
    """Zero-valued profile standing in for a malformed bundle."""
    student_id = None
    session = None
    class_name = None
    if isinstance(bundle, Mapping):
        raw_id = bundle.get("student_id")
        student_id = raw_id if isinstance(raw_id, int) else None
        session = bundle.get("session") if isinstance(bundle.get("session"), str) else None
        class_name = bundle.get("class_name") if isinstance(bundle.get("class_name"), str) else None
    return HolisticProfile(
        student_id=student_id,
        session=session,
        class_name=class_name,
        stage=stage_for_class(class_name),
        dimensions=[ProfileDimension(label=label, value=0.0) for label in DIMENSION_LABELS],
        degraded=True,
    )


def aggregate_profiles(bundles: Iterable[RecordBundle | Mapping[str, Any]]) -> list[HolisticProfile]:
    """Aggregate a batch; one malformed bundle never blocks the rest."""
    profiles = []
    for bundle in bundles:
        try:
            profiles.append(aggregate_profile(bundle))
        except DataIntegrityError as e:
            profile = degraded_profile(bundle)
            logger.warning(
                f"[AGGREGATION] Degraded profile for student {profile.student_id}: {e.message}",
                extra={"details": e.details},
            )
            profiles.append(profile)
    return profiles
