"""Semester ORM model. Academic term that scopes most of the data."""

from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import SemesterStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteModel


class Semester(SoftDeleteModel, Base):
    """Semester. Table: semester. Unique code."""

    __tablename__ = "semester"

    code: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=SemesterStatus.UPCOMING.value
    )
