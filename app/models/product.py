"""
Product model - the static course catalogue.
"""
from sqlalchemy import String, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.core.base import Base


class Product(Base):
    """A sellable course. The id doubles as the display key."""
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


DEFAULT_PRODUCTS = [
    {"id": "美容丙級", "name": "美容丙級", "price": 0},
    {"id": "美容乙級", "name": "美容乙級", "price": 0},
    {"id": "紋繡全科", "name": "紋繡全科", "price": 0},
    {"id": "美甲全科", "name": "美甲全科", "price": 0},
    {"id": "美睫全科", "name": "美睫全科", "price": 0},
]

# Short course codes used on the progress form -> catalogue product id
COURSE_PRODUCTS = {
    "美丙": "美容丙級",
    "美乙": "美容乙級",
    "紋繡": "紋繡全科",
    "美甲": "美甲全科",
    "美睫": "美睫全科",
}
