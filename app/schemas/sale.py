"""
Pydantic schemas for Sale API.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel
from app.schemas.product import ProductRecord


# ──────────────────────────────────────────────
# Request Schemas
# ──────────────────────────────────────────────

class SaleCreate(CamelModel):
    """Schema for appending a sale. Missing ids are rejected by the endpoint."""
    student_id: Optional[str] = Field(None, max_length=64)
    product_id: Optional[str] = Field(None, max_length=64)
    quantity: int = Field(default=1, ge=1)

    @field_validator("student_id", "product_id", mode="before")
    @classmethod
    def strip_ids(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, v):
        # The sales form posts "" or 0 when the quantity box is left alone
        if v in (None, "", 0, "0"):
            return 1
        return v


# ──────────────────────────────────────────────
# Response Schemas
# ──────────────────────────────────────────────

class SaleRecord(CamelModel):
    """Schema for sale response."""
    id: int
    student_id: str
    product_id: str
    quantity: int
    created_at: datetime


class SalesTableRow(CamelModel):
    """One dashboard row: a student and how many of each course they bought."""
    student_id: str
    name: str
    phone: str
    source: str
    is_converted: bool
    sales: dict[str, int]


class SalesDashboard(CamelModel):
    students: list[SalesTableRow]
    products: list[ProductRecord]
