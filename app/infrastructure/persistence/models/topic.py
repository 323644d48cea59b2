"""Topic, TopicRegistration and TopicAssignment ORM models."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class Topic(SoftDeleteModel, Base):
    """Thesis topic proposed in a semester."""

    __tablename__ = "topic"

    semester_id: Mapped[str] = mapped_column(
        String, ForeignKey("semester.id"), nullable=False, index=True
    )
    created_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    main_supervisor: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=True, index=True
    )
    sub_supervisor: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=True
    )
    topic_code: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")


class TopicRegistration(SoftDeleteModel, Base):
    """A user's registration request for a topic."""

    __tablename__ = "topic_registration"

    topic_id: Mapped[str] = mapped_column(
        String, ForeignKey("topic.id"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")


class TopicAssignment(SoftDeleteModel, Base):
    """Topic assigned to a group (approved registration)."""

    __tablename__ = "topic_assignment"

    topic_id: Mapped[str] = mapped_column(
        String, ForeignKey("topic.id"), nullable=False, index=True
    )
    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("student_group.id"), nullable=False, index=True
    )
    assigned_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String, nullable=False, default="ASSIGNED")
