"""
Pydantic schemas for funnel tracking and analytics.
"""
from typing import Optional

from pydantic import Field, field_validator

from app.models.funnel import Stage
from app.schemas.common import CamelModel


# ──────────────────────────────────────────────
# Funnel record
# ──────────────────────────────────────────────

class FunnelRecordData(CamelModel):
    """A student's position in the funnel plus per-stage details."""
    student_id: str
    name: str = ""
    main_course: str = ""
    current_stage: str = Stage.FIRST_INQUIRY.value
    consultant: str = ""

    contact_status: bool = False
    contact_date: str = ""
    contact_method: str = ""
    contact_notes: str = ""

    appointment_status: bool = False
    appointment_date: str = ""
    appointment_notes: str = ""

    visit_status: bool = False
    visit_date: str = ""
    visit_notes: str = ""

    conversion_status: bool = False
    conversion_date: str = ""
    conversion_course: str = ""
    conversion_amount: float = 0
    conversion_notes: str = ""


class StageDetails(CamelModel):
    """Optional inputs for a stage advance. ``None`` means "not supplied"."""
    name: Optional[str] = None
    main_course: Optional[str] = None
    consultant: Optional[str] = None

    contact_date: Optional[str] = None
    contact_method: Optional[str] = None
    contact_notes: Optional[str] = None

    appointment_date: Optional[str] = None
    appointment_notes: Optional[str] = None

    visit_date: Optional[str] = None
    visit_notes: Optional[str] = None

    conversion_date: Optional[str] = None
    conversion_course: Optional[str] = None
    conversion_amount: Optional[float] = None
    conversion_notes: Optional[str] = None


# ──────────────────────────────────────────────
# Request Schemas
# ──────────────────────────────────────────────

class StageUpdate(CamelModel):
    """Body of ``POST /students/{id}/stage``."""
    stage: str = Field(..., min_length=1, max_length=64)
    main_course: Optional[str] = Field(None, max_length=64)
    consultant: Optional[str] = Field(None, max_length=128)
    notes: Optional[str] = Field(None, max_length=1024)
    contact_method: Optional[str] = Field(None, max_length=64)
    conversion_course: Optional[str] = Field(None, max_length=64)
    conversion_amount: Optional[float] = Field(None, ge=0)

    contact_date: Optional[str] = Field(None, max_length=32)
    appointment_date: Optional[str] = Field(None, max_length=32)
    visit_date: Optional[str] = Field(None, max_length=32)
    conversion_date: Optional[str] = Field(None, max_length=32)

    record_sale: bool = False

    @field_validator("stage", mode="before")
    @classmethod
    def strip_stage(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    def to_details(self, name: str | None = None) -> StageDetails:
        """Expand the form into per-stage details; notes go to every stage."""
        return StageDetails(
            name=name,
            main_course=self.main_course,
            consultant=self.consultant,
            contact_date=self.contact_date,
            contact_method=self.contact_method,
            contact_notes=self.notes,
            appointment_date=self.appointment_date,
            appointment_notes=self.notes,
            visit_date=self.visit_date,
            visit_notes=self.notes,
            conversion_date=self.conversion_date,
            conversion_course=self.conversion_course,
            conversion_amount=self.conversion_amount,
            conversion_notes=self.notes,
        )


# ──────────────────────────────────────────────
# Analytics Response Schemas
# ──────────────────────────────────────────────

class StageStat(CamelModel):
    stage: str
    count: int
    percentage: int
    # Same value as percentage; kept because dashboards read both keys
    conversion_rate: int


class DimensionStat(CamelModel):
    """Inquiry vs. conversion counts for one source, method or course."""
    name: str
    inquiry_count: int
    conversion_count: int
    conversion_rate: int


class ConversionCourseStat(CamelModel):
    course: str
    count: int


class FunnelAnalytics(CamelModel):
    total_students: int = 0
    total_conversion_amount: float = 0
    stages: list[StageStat] = Field(default_factory=list)
    by_course: list[DimensionStat] = Field(default_factory=list)
    by_source: list[DimensionStat] = Field(default_factory=list)
    by_method: list[DimensionStat] = Field(default_factory=list)
    by_conversion_course: list[ConversionCourseStat] = Field(default_factory=list)


class ConsultantPerformance(CamelModel):
    """Stage-reach counts and step-to-step rates for one consultant."""
    name: str
    total: int
    stage2_count: int
    stage3_count: int
    stage4_count: int
    stage5_count: int
    contact_rate: int
    appointment_rate: int
    visit_rate: int
    conversion_rate: int
    overall_rate: int
