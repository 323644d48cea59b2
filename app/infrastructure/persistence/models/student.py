"""Student and SemesterStudent ORM models."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class Student(SoftDeleteModel, Base):
    """Student profile of a user; carries no semester of its own."""

    __tablename__ = "student"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), unique=True, nullable=False
    )
    student_code: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    major_id: Mapped[str | None] = mapped_column(String, nullable=True)


class SemesterStudent(SoftDeleteModel, Base):
    """Enrollment of a student in a semester."""

    __tablename__ = "semester_student"

    student_id: Mapped[str] = mapped_column(
        String, ForeignKey("student.id"), nullable=False, index=True
    )
    semester_id: Mapped[str] = mapped_column(
        String, ForeignKey("semester.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String, nullable=False, default="qualified")

    __table_args__ = (
        UniqueConstraint(
            "student_id", "semester_id", name="uq_semester_student_student_semester"
        ),
    )
