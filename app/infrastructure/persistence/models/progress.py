"""Group mentoring ORM models: progress reports, mentor receipts, meetings, feedback."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class ProgressReport(SoftDeleteModel, Base):
    __tablename__ = "progress_report"

    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("student_group.id"), nullable=False, index=True
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")


class MeetingSchedule(SoftDeleteModel, Base):
    __tablename__ = "meeting_schedule"

    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("student_group.id"), nullable=False, index=True
    )
    meeting_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str | None] = mapped_column(String, nullable=True)


class Feedback(SoftDeleteModel, Base):
    """Mentor feedback on one meeting."""

    __tablename__ = "feedback"

    meeting_id: Mapped[str] = mapped_column(
        String, ForeignKey("meeting_schedule.id"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)


class ProgressReportMentor(SoftDeleteModel, Base):
    """Read receipt and feedback of one mentor on a progress report."""

    __tablename__ = "progress_report_mentor"

    report_id: Mapped[str] = mapped_column(
        String, ForeignKey("progress_report.id"), nullable=False, index=True
    )
    mentor_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
