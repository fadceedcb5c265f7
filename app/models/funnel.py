"""
Funnel tracking model - one record per student.
"""
import enum
import re
from datetime import datetime, UTC

from sqlalchemy import String, Float, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.core.base import Base


class Stage(str, enum.Enum):
    """Funnel stages. The numeric prefix is the stage threshold."""
    FIRST_INQUIRY = "1. 首次洽詢"
    CONTACT_SUCCESS = "2.1 聯繫成功"
    CONTACT_FAILURE = "2.2 聯繫失敗"
    APPOINTMENT_SUCCESS = "3.1 邀約成功"
    APPOINTMENT_FAILURE = "3.2 邀約失敗"
    VISIT_SUCCESS = "4.1 到訪成功"
    NO_VISIT = "4.2 未到訪"
    CONVERTED = "5. 成交"


# Ordered sequence used for the stage breakdown
STAGE_ORDER = [
    Stage.FIRST_INQUIRY,
    Stage.CONTACT_SUCCESS,
    Stage.CONTACT_FAILURE,
    Stage.APPOINTMENT_SUCCESS,
    Stage.APPOINTMENT_FAILURE,
    Stage.VISIT_SUCCESS,
    Stage.NO_VISIT,
    Stage.CONVERTED,
]

# Threshold -> stage-detail group. Reaching a threshold sets the group's flag.
STAGE_GROUPS = [
    (2, "contact"),
    (3, "appointment"),
    (4, "visit"),
    (5, "conversion"),
]

_STAGE_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d*)?)")


def stage_threshold(label: str | None) -> float | None:
    """Parse the leading number of a stage label ("3.1 邀約成功" -> 3.1)."""
    if not label:
        return None
    match = _STAGE_NUMBER_RE.match(label)
    if match is None:
        return None
    return float(match.group(1))


class FunnelRecord(Base):
    """Current pipeline position and stage history of one student."""
    __tablename__ = "funnel_records"

    student_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    main_course: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    current_stage: Mapped[str] = mapped_column(
        String(64), nullable=False, default=Stage.FIRST_INQUIRY.value
    )
    consultant: Mapped[str] = mapped_column(String(128), nullable=False, default="", index=True)

    # Stage 2: contact
    contact_status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contact_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    contact_method: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    contact_notes: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    # Stage 3: appointment
    appointment_status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    appointment_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    appointment_notes: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    # Stage 4: visit
    visit_status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    visit_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    visit_notes: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    # Stage 5: conversion
    conversion_status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    conversion_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    conversion_course: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    conversion_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    conversion_notes: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
