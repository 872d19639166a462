"""Formative, co-curricular and summative mark model."""

from decimal import Decimal

from sqlalchemy import DECIMAL, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_records.core.database import Base
from school_records.models.base import IDMixin, Identifier, TimestampMixin


class Mark(Base, IDMixin, TimestampMixin):
    """One exam entry for one subject.

    Every numeric component is nullable: an entry usually carries only the
    component that was graded in that exam, and NULL must stay distinct
    from a recorded zero.
    """

    __tablename__ = "marks"

    student_id: Mapped[int] = mapped_column(
        Identifier,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exam_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    session: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)

    fa1: Mapped[Decimal | None] = mapped_column(DECIMAL(6, 2), nullable=True)
    fa2: Mapped[Decimal | None] = mapped_column(DECIMAL(6, 2), nullable=True)
    fa3: Mapped[Decimal | None] = mapped_column(DECIMAL(6, 2), nullable=True)
    fa4: Mapped[Decimal | None] = mapped_column(DECIMAL(6, 2), nullable=True)
    fa5: Mapped[Decimal | None] = mapped_column(DECIMAL(6, 2), nullable=True)
    fa6: Mapped[Decimal | None] = mapped_column(DECIMAL(6, 2), nullable=True)
    co_curricular: Mapped[Decimal | None] = mapped_column(DECIMAL(6, 2), nullable=True)
    summative: Mapped[Decimal | None] = mapped_column(DECIMAL(6, 2), nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship(
        "Student",
        back_populates="marks",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Mark(student_id={self.student_id}, exam_id={self.exam_id}, subject={self.subject})>"
