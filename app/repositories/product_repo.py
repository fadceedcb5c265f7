"""
Product Repository - Data Access Layer for the course catalogue.
"""
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.product import Product


class ProductRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> list[Product]:
        result = await self.db.execute(select(Product).order_by(Product.sort_order.asc(), Product.id.asc()))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Product))
        return result.scalar() or 0

    async def add_all(self, products: list[Product]) -> None:
        self.db.add_all(products)
        await self.db.flush()
