"""Council ORM models: review and defense councils, their members and schedules.

A council belongs to one semester. Review schedules and defense schedules
put a group in front of a council; defense member results record the
outcome for each student in the group.
"""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class Council(SoftDeleteModel, Base):
    __tablename__ = "council"

    semester_id: Mapped[str] = mapped_column(
        String, ForeignKey("semester.id"), nullable=False, index=True
    )
    submission_period_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("submission_period.id"), nullable=True
    )
    code: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False, default="review")
    round: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String, nullable=False, default="ACTIVE")


class CouncilMember(SoftDeleteModel, Base):
    __tablename__ = "council_member"

    council_id: Mapped[str] = mapped_column(
        String, ForeignKey("council.id"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    role_id: Mapped[str | None] = mapped_column(String, ForeignKey("role.id"), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="ACTIVE")


class ReviewSchedule(SoftDeleteModel, Base):
    """A group's topic review slot in front of a council."""

    __tablename__ = "review_schedule"

    council_id: Mapped[str] = mapped_column(
        String, ForeignKey("council.id"), nullable=False, index=True
    )
    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("student_group.id"), nullable=False, index=True
    )
    topic_id: Mapped[str] = mapped_column(
        String, ForeignKey("topic.id"), nullable=False, index=True
    )
    review_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    room: Mapped[str | None] = mapped_column(String, nullable=True)
    review_round: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")


class ReviewAssignment(SoftDeleteModel, Base):
    __tablename__ = "review_assignment"

    council_id: Mapped[str] = mapped_column(
        String, ForeignKey("council.id"), nullable=False, index=True
    )
    topic_id: Mapped[str] = mapped_column(
        String, ForeignKey("topic.id"), nullable=False, index=True
    )
    reviewer_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=True, index=True
    )
    review_schedule_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("review_schedule.id"), nullable=True, index=True
    )
    review_round: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")


class DefenseSchedule(SoftDeleteModel, Base):
    __tablename__ = "defense_schedule"

    council_id: Mapped[str] = mapped_column(
        String, ForeignKey("council.id"), nullable=False, index=True
    )
    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("student_group.id"), nullable=False, index=True
    )
    defense_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    room: Mapped[str | None] = mapped_column(String, nullable=True)
    defense_round: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")


class DefenseMemberResult(SoftDeleteModel, Base):
    """Defense outcome for one student of the scheduled group."""

    __tablename__ = "defense_member_result"

    defense_schedule_id: Mapped[str] = mapped_column(
        String, ForeignKey("defense_schedule.id"), nullable=False, index=True
    )
    student_id: Mapped[str] = mapped_column(
        String, ForeignKey("student.id"), nullable=False, index=True
    )
    result: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")
