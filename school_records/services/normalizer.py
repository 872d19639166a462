"""Score normalization onto a common 0-100 scale."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from school_records.core.exceptions import ValidationError
from school_records.schemas.mark import FORMATIVE_MAX_PER_SUBJECT, MarkRecord
from school_records.schemas.profile import CoCurricularRatings
from school_records.schemas.ratings import (
    CO_CURRICULAR_MAXIMA,
    CoCurricularCategory,
    Proficiency,
    RatingCategory,
    RatingLevel,
    parse_label,
)

# Four buckets; anything unset or outside the vocabulary scores 0
RATING_PERCENT: dict[RatingLevel, int] = {
    RatingLevel.HIGH: 90,
    RatingLevel.TALENTED: 90,
    RatingLevel.HIGHLY_TALENTED: 90,
    RatingLevel.NORMAL_AND_HEALTHY: 90,
    RatingLevel.MEDIUM: 60,
    RatingLevel.LOW: 30,
    RatingLevel.NO_TALENT: 30,
    RatingLevel.NEEDS_ATTENTION: 30,
}

PROFICIENCY_FACTOR: dict[Proficiency, Decimal] = {
    Proficiency.SKY: Decimal("1"),
    Proficiency.MOUNTAIN: Decimal("0.66"),
    Proficiency.STREAM: Decimal("0.33"),
    Proficiency.NOT_SATISFIED: Decimal("0"),
}

ALLOWED_MAXIMA = (2, 4)


def _clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, value))


def rating_percent(level: RatingLevel | str | None) -> int:
    """Map an SBA rating label to 90, 60, 30 or 0."""
    level = parse_label(RatingLevel, level)
    if not isinstance(level, RatingLevel):
        return 0
    return RATING_PERCENT[level]


def proficiency_score(level: Proficiency | str | None, maximum: int) -> int:
    """Score a proficiency label against a category maximum of 2 or 4.

    Sky scores the maximum, Mountain and Stream 66% and 33% of it rounded
    half up, Not-Satisfied and unset 0.
    """
    if maximum not in ALLOWED_MAXIMA:
        raise ValidationError(
            f"Co-curricular maximum must be one of {ALLOWED_MAXIMA}, got {maximum}"
        )
    level = parse_label(Proficiency, level)
    if not isinstance(level, Proficiency):
        return 0
    scaled = Decimal(maximum) * PROFICIENCY_FACTOR[level]
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize(category: RatingCategory | CoCurricularCategory | str, raw_value) -> float:
    """Convert one raw rating into a 0-100 percentage.

    ``category`` selects the table: SBA categories use the ordinal percent
    table, co-curricular categories score the proficiency against the
    category maximum.
    """
    category = _resolve_category(category)
    if isinstance(category, RatingCategory):
        return float(rating_percent(raw_value))

    maximum = category.maximum
    return proficiency_score(raw_value, maximum) / maximum * 100


def _resolve_category(category) -> RatingCategory | CoCurricularCategory:
    if isinstance(category, (RatingCategory, CoCurricularCategory)):
        return category
    for enum_cls in (RatingCategory, CoCurricularCategory):
        member = parse_label(enum_cls, category)
        if isinstance(member, enum_cls):
            return member
    raise ValidationError(
        f"Unknown assessment category '{category}'",
        details={"category": str(category)},
    )


def academic_percentage(marks: Iterable[MarkRecord]) -> float:
    """Formative marks as a percentage of 30 per subject.

    Entries are summed per subject and each subject total is capped at 30,
    so a subject entered twice cannot offset another. Every subject that
    has a mark record counts towards the denominator. Returns 0 when there
    are no marks at all.
    """
    per_subject: dict[str, Decimal] = {}
    for mark in marks:
        per_subject[mark.subject] = per_subject.get(mark.subject, Decimal("0")) + mark.fa_total

    if not per_subject:
        return 0.0
    cap = Decimal(FORMATIVE_MAX_PER_SUBJECT)
    obtained = sum((min(total, cap) for total in per_subject.values()), Decimal("0"))
    maximum = len(per_subject) * FORMATIVE_MAX_PER_SUBJECT
    return _clamp_percent(float(obtained / maximum * 100))


def co_curricular_scores(ratings: CoCurricularRatings | None) -> dict[str, int]:
    """Score every co-curricular category; empty when nothing was rated."""
    if ratings is None:
        return {}
    return {
        category.value: proficiency_score(getattr(ratings, category.value), category.maximum)
        for category in CoCurricularCategory
    }


def co_curricular_percentage(ratings: CoCurricularRatings | None) -> float:
    """Sum of category scores over the sum of all seven maxima."""
    scores = co_curricular_scores(ratings)
    if not scores:
        return 0.0
    total_max = sum(CO_CURRICULAR_MAXIMA.values())
    return _clamp_percent(sum(scores.values()) / total_max * 100)
