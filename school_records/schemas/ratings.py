"""Rating vocabularies and assessment categories."""

import enum


class RatingLevel(str, enum.Enum):
    """Labels used on the school-based assessment (SBA) sheet."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    # Wellbeing
    NORMAL_AND_HEALTHY = "Normal and Healthy"
    NEEDS_ATTENTION = "Needs Attention"

    # Talent
    HIGHLY_TALENTED = "Highly Talented"
    TALENTED = "Talented"
    NO_TALENT = "No talent"


class Proficiency(str, enum.Enum):
    """Proficiency levels, highest first."""

    SKY = "Sky"
    MOUNTAIN = "Mountain"
    STREAM = "Stream"
    NOT_SATISFIED = "Not-Satisfied"


class RatingCategory(str, enum.Enum):
    """SBA categories scored through the ordinal percent table.

    Values match the field names of ``SbaRatings``.
    """

    PHYSICAL_WELLBEING = "physical_wellbeing"
    MENTAL_WELLBEING = "mental_wellbeing"
    CREATIVITY = "creativity"
    CRITICAL_THINKING = "critical_thinking"
    COMMUNICATION_SKILL = "communication_skill"
    PROBLEM_SOLVING_ABILITY = "problem_solving_ability"
    COLLABORATION = "collaboration"
    STUDENTS_TALENT = "students_talent"
    PARTICIPATION_IN_ACTIVITIES = "participation_in_activities"
    ATTITUDE_AND_VALUES = "attitude_and_values"
    PRESENTATION_SKILL = "presentation_skill"
    WRITING_SKILL = "writing_skill"
    COMPREHENSION_SKILL = "comprehension_skill"


class CoCurricularCategory(str, enum.Enum):
    """Co-curricular categories, each scored against its own maximum."""

    PHYSICAL_ACTIVITY = "physical_activity"
    PARTICIPATION_IN_SCHOOL_ACTIVITIES = "participation_in_school_activities"
    CULTURAL_AND_CREATIVE_ACTIVITIES = "cultural_and_creative_activities"
    HEALTH_AND_HYGIENE = "health_and_hygiene"
    ENVIRONMENT_AND_IT_AWARENESS = "environment_and_it_awareness"
    DISCIPLINE = "discipline"
    ATTENDANCE = "attendance"

    @property
    def maximum(self) -> int:
        return CO_CURRICULAR_MAXIMA[self]


CO_CURRICULAR_MAXIMA: dict[CoCurricularCategory, int] = {
    CoCurricularCategory.PHYSICAL_ACTIVITY: 4,
    CoCurricularCategory.PARTICIPATION_IN_SCHOOL_ACTIVITIES: 4,
    CoCurricularCategory.CULTURAL_AND_CREATIVE_ACTIVITIES: 4,
    CoCurricularCategory.HEALTH_AND_HYGIENE: 2,
    CoCurricularCategory.ENVIRONMENT_AND_IT_AWARENESS: 2,
    CoCurricularCategory.DISCIPLINE: 2,
    CoCurricularCategory.ATTENDANCE: 2,
}

SKILL_CATEGORIES = (
    RatingCategory.CREATIVITY,
    RatingCategory.CRITICAL_THINKING,
    RatingCategory.COMMUNICATION_SKILL,
    RatingCategory.PROBLEM_SOLVING_ABILITY,
    RatingCategory.COLLABORATION,
)

WELLBEING_CATEGORIES = (
    RatingCategory.PHYSICAL_WELLBEING,
    RatingCategory.MENTAL_WELLBEING,
)


def parse_label(enum_cls: type[enum.Enum], value):
    """Return the enum member for ``value``, or None when unset or unrecognized."""
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip())
        except ValueError:
            return None
    return value
