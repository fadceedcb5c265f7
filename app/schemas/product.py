"""
Pydantic schemas for the course catalogue.
"""
from app.schemas.common import CamelModel


class ProductRecord(CamelModel):
    id: str
    name: str
    price: float = 0
