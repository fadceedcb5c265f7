"""
Declarative base shared by the student, product, sale and funnel models.

Models import Base from here (never from app.core.database) so that the
database module can import every model without a circular import.
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
