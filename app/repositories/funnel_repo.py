"""
Funnel Repository - Data Access Layer for FunnelRecord model.
"""
from typing import Any, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.funnel import FunnelRecord


class FunnelRepository:
    """Repository for per-student funnel records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_student_id(self, student_id: str) -> Optional[FunnelRecord]:
        result = await self.db.execute(
            select(FunnelRecord).where(FunnelRecord.student_id == student_id)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> list[FunnelRecord]:
        result = await self.db.execute(select(FunnelRecord).order_by(FunnelRecord.student_id.asc()))
        return list(result.scalars().all())

    async def upsert(self, student_id: str, values: dict[str, Any]) -> FunnelRecord:
        """Create the record or replace every column of the existing one."""
        record = await self.get_by_student_id(student_id)
        if record is None:
            record = FunnelRecord(student_id=student_id)
            self.db.add(record)

        for field, value in values.items():
            if field != "student_id":
                setattr(record, field, value)

        await self.db.flush()
        await self.db.refresh(record)
        return record
