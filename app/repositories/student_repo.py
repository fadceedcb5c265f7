"""
Student Repository - Data Access Layer for Student model.
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.student import Student


class StudentRepository:
    """Repository for Student reads."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_student_id(self, student_id: str) -> Optional[Student]:
        """Get student by business key (e.g. "S001")."""
        result = await self.db.execute(
            select(Student).where(Student.student_id == student_id)
        )
        return result.scalar_one_or_none()

    async def get_all(self, newest_first: bool = False) -> list[Student]:
        """All students, in intake order unless ``newest_first``."""
        if newest_first:
            order = (Student.created_at.desc(), Student.id.desc())
        else:
            order = (Student.created_at.asc(), Student.id.asc())
        result = await self.db.execute(select(Student).order_by(*order))
        return list(result.scalars().all())
