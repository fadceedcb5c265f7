"""
Sale Repository - Data Access Layer for Sale model.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.sale import Sale


class SaleRepository:
    """Repository for the append-only sales ledger."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, sale: Sale) -> Sale:
        """Append a sale."""
        self.db.add(sale)
        await self.db.flush()
        await self.db.refresh(sale)
        return sale

    async def get_all(self) -> list[Sale]:
        """Sales in the order they were recorded."""
        result = await self.db.execute(select(Sale).order_by(Sale.id.asc()))
        return list(result.scalars().all())
