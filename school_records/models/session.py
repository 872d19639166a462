"""Academic session and per-session class placement models."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_records.core.database import Base
from school_records.models.base import IDMixin, Identifier, TimestampMixin


class AcademicSession(Base, IDMixin, TimestampMixin):
    """A named academic year. Names are unique."""

    __tablename__ = "academic_sessions"

    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<AcademicSession(name={self.name})>"


class StudentSessionInfo(Base, IDMixin, TimestampMixin):
    """Placement of one student into a class for one session.

    Rows are created once per session and never updated by promotion;
    promotion appends rows for the target session instead.
    """

    __tablename__ = "student_session_info"

    student_id: Mapped[int] = mapped_column(
        Identifier,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    class_name: Mapped[str] = mapped_column(String(50), nullable=False)  # 'class' is reserved keyword
    section: Mapped[str | None] = mapped_column(String(50), nullable=True)
    roll_no: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship(
        "Student",
        back_populates="placements",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("student_id", "session", name="uq_student_session"),
    )

    def __repr__(self) -> str:
        return (
            f"<StudentSessionInfo(student_id={self.student_id}, "
            f"session={self.session}, class={self.class_name})>"
        )
