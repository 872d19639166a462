"""School-based assessment and detailed formative assessment models."""

from typing import Any

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from school_records.core.database import Base
from school_records.models.base import IDMixin, Identifier, TimestampMixin


class SbaRecord(Base, IDMixin, TimestampMixin):
    """Behavioral ratings for one student in one session.

    Columns hold labels from the rating vocabulary (``High``, ``Medium``,
    ``Normal and Healthy``, ``Highly Talented`` ...). Written by the data
    entry forms, read-only to the aggregation engine.
    """

    __tablename__ = "sba_records"

    student_id: Mapped[int] = mapped_column(
        Identifier,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    physical_wellbeing: Mapped[str | None] = mapped_column(String(50), nullable=True)
    mental_wellbeing: Mapped[str | None] = mapped_column(String(50), nullable=True)
    disease_found: Mapped[str | None] = mapped_column(String(255), nullable=True)
    creativity: Mapped[str | None] = mapped_column(String(50), nullable=True)
    critical_thinking: Mapped[str | None] = mapped_column(String(50), nullable=True)
    communication_skill: Mapped[str | None] = mapped_column(String(50), nullable=True)
    problem_solving_ability: Mapped[str | None] = mapped_column(String(50), nullable=True)
    collaboration: Mapped[str | None] = mapped_column(String(50), nullable=True)
    students_talent: Mapped[str | None] = mapped_column(String(50), nullable=True)
    participation_in_activities: Mapped[str | None] = mapped_column(String(50), nullable=True)
    attitude_and_values: Mapped[str | None] = mapped_column(String(50), nullable=True)
    presentation_skill: Mapped[str | None] = mapped_column(String(50), nullable=True)
    writing_skill: Mapped[str | None] = mapped_column(String(50), nullable=True)
    comprehension_skill: Mapped[str | None] = mapped_column(String(50), nullable=True)

    __table_args__ = (
        UniqueConstraint("student_id", "session", name="uq_sba_student_session"),
    )

    def __repr__(self) -> str:
        return f"<SbaRecord(student_id={self.student_id}, session={self.session})>"


class DetailedFormativeAssessment(Base, IDMixin, TimestampMixin):
    """Per-subject formative assessment sheet (F1..F6) with co-curricular ratings."""

    __tablename__ = "detailed_formative_assessments"

    student_id: Mapped[int] = mapped_column(
        Identifier,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    assessment_name: Mapped[str] = mapped_column(String(20), nullable=False)
    academic_proficiency: Mapped[str | None] = mapped_column(String(20), nullable=True)
    cocurricular_ratings: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    anecdotal_date: Mapped[str | None] = mapped_column(String(20), nullable=True)
    anecdotal_observation: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "student_id", "session", "subject", "assessment_name",
            name="uq_formative_student_assessment",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<DetailedFormativeAssessment(student_id={self.student_id}, "
            f"subject={self.subject}, assessment={self.assessment_name})>"
        )
