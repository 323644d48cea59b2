"""SubmissionPeriod and Decision ORM models (semester administration)."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class SubmissionPeriod(SoftDeleteModel, Base):
    """Topic submission round inside a semester."""

    __tablename__ = "submission_period"

    semester_id: Mapped[str] = mapped_column(
        String, ForeignKey("semester.id"), nullable=False, index=True
    )
    created_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    round_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False, default="TOPIC")
    status: Mapped[str] = mapped_column(String, nullable=False, default="ACTIVE")


class Decision(SoftDeleteModel, Base):
    """Faculty decision document. semester_id may be NULL for general decisions."""

    __tablename__ = "decision"

    created_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    semester_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("semester.id"), nullable=True, index=True
    )
    decision_name: Mapped[str] = mapped_column(String, nullable=False)
    decision_title: Mapped[str | None] = mapped_column(String, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
