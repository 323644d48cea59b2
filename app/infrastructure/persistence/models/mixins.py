"""Column mixins shared by every entity in the lifecycle catalog.

Each catalog entity is a SoftDeleteModel: a CUID2 primary key, server-side
timestamps, and the is_deleted flag the lifecycle engine flips. Rows are
never removed by the application.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, false
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.shared.utils.generators import generate_cuid


class CuidMixin:
    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class SoftDeleteMixin:
    """is_deleted plus the time it last became true (cleared on restore).

    Indexed: every cascade query filters on it.
    """

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(), index=True
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class SoftDeleteModel(CuidMixin, TimestampMixin, SoftDeleteMixin):
    """Base columns of a catalog entity."""
