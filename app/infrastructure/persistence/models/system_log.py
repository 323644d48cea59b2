"""SystemLog ORM model. Append-only record of privileged operations."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Connection, DateTime, String, Text, event, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from app.infrastructure.persistence.database import Base
from app.shared.enums import AuditSeverity
from app.shared.utils.generators import generate_cuid

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")


class SystemLog(Base):
    """Audit record. Who did what to which entity, and how it ended. No update/delete.

    Not a catalog entity: lifecycle operations never touch these rows.
    """

    __tablename__ = "system_log"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)
    # No FK: the actor may later be soft-deleted or be unknown (failed auth).
    user_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    action: Mapped[str] = mapped_column(String, nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String, nullable=True)
    severity: Mapped[str] = mapped_column(
        String, nullable=False, default=AuditSeverity.INFO.value
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )
    old_values: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String, nullable=True)
    request_id: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


@event.listens_for(SystemLog, "before_update")
def _prevent_system_log_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: SystemLog
) -> None:
    """System log entries are append-only; updates are forbidden."""
    raise ValueError("System log entries are immutable and cannot be updated.")


@event.listens_for(SystemLog, "before_delete")
def _prevent_system_log_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: SystemLog
) -> None:
    """System log entries cannot be deleted."""
    raise ValueError("System log entries cannot be deleted.")
