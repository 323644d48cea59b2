"""Group, GroupMember and GroupMentor ORM models."""

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class Group(SoftDeleteModel, Base):
    """Student group. Table: student_group ("group" is reserved)."""

    __tablename__ = "student_group"

    semester_id: Mapped[str] = mapped_column(
        String, ForeignKey("semester.id"), nullable=False, index=True
    )
    group_code: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("semester_id", "group_code", name="uq_student_group_semester_code"),
    )


class GroupMember(SoftDeleteModel, Base):
    __tablename__ = "group_member"

    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("student_group.id"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    is_leader: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class GroupMentor(SoftDeleteModel, Base):
    __tablename__ = "group_mentor"

    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("student_group.id"), nullable=False, index=True
    )
    mentor_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    added_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=True
    )
