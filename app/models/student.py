"""
Student model - one row per prospective student from the intake sheet.
"""
from datetime import datetime, UTC
from typing import Any

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.core.base import Base


class Student(Base):
    """Prospective student as recorded at first inquiry.

    The intake sheet marks each acquisition source and outreach method in its
    own column, so the raw cell values are kept as ``source_flags`` and
    ``method_flags`` (category -> cell value) next to the free-text labels.
    """
    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    source: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    method: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    source_flags: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    method_flags: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Kept as entered; the sheet mixes YYYY/M/D, YYYY-MM-DD and D/M/YYYY
    inquiry_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    consultant: Mapped[str] = mapped_column(String(128), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
