"""Role and UserRole ORM models. Role catalog plus semester-scoped assignments."""

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class Role(SoftDeleteModel, Base):
    """Role. Table: role. Unique name.

    is_system_wide is informational; the role registry is authoritative.
    """

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system_wide: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class UserRole(SoftDeleteModel, Base):
    """User-role assignment. semester_id is NULL for system-wide roles."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id"), nullable=False, index=True
    )
    semester_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("semester.id"), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "role_id", "semester_id", name="uq_user_role_user_role_semester"
        ),
    )
