"""
Pydantic schemas for students.
"""
from typing import Any

from pydantic import Field

from app.schemas.common import CamelModel


class StudentRecord(CamelModel):
    """Student as seen by the funnel core."""
    student_id: str
    name: str = ""
    phone: str = ""
    source: str = ""
    method: str = ""
    inquiry_date: str = ""
    consultant: str = ""
    source_flags: dict[str, Any] = Field(default_factory=dict)
    method_flags: dict[str, Any] = Field(default_factory=dict)
