"""Document ORM model. Files uploaded by users, optionally attached to a topic."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class Document(SoftDeleteModel, Base):
    """Document. topic_id is NULL for documents not tied to a topic."""

    __tablename__ = "document"

    topic_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("topic.id"), nullable=True, index=True
    )
    uploaded_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    file_url: Mapped[str] = mapped_column(String, nullable=False)
    document_type: Mapped[str | None] = mapped_column(String, nullable=True)
