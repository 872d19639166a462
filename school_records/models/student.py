"""Student model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_records.core.database import Base
from school_records.models.base import IDMixin, TimestampMixin


class Student(Base, IDMixin, TimestampMixin):
    """Student identity and biographical record.

    Class placement lives in ``StudentSessionInfo`` so that a student keeps
    one identity across sessions.
    """

    __tablename__ = "students"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    admission_no: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    father_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mother_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    contact: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Relationships
    placements: Mapped[list["StudentSessionInfo"]] = relationship(
        "StudentSessionInfo",
        back_populates="student",
        lazy="selectin",
    )
    marks: Mapped[list["Mark"]] = relationship(
        "Mark",
        back_populates="student",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.name})>"
