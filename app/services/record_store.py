"""
RecordStore - the storage boundary of the funnel core.

Everything the analytics and stage services need from persistence goes
through this class. It hands out plain pydantic records (never live ORM
objects) and turns any storage failure into ``StoreUnavailable`` so callers
can tell "no data" apart from "could not reach the store".
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.product import Product, DEFAULT_PRODUCTS
from app.models.sale import Sale
from app.repositories.funnel_repo import FunnelRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.sale_repo import SaleRepository
from app.repositories.student_repo import StudentRepository
from app.schemas.funnel import FunnelRecordData
from app.schemas.product import ProductRecord
from app.schemas.sale import SaleRecord
from app.schemas.student import StudentRecord

logger = get_logger(__name__)


class StoreUnavailable(Exception):
    """Raised when the record store fails; never returned as empty data."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Record store unavailable during {operation}: {reason}")


class RecordStore:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.students = StudentRepository(db)
        self.funnel = FunnelRepository(db)
        self.sales = SaleRepository(db)
        self.products = ProductRepository(db)

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except (SQLAlchemyError, OSError) as exc:
            logger.error("record_store_failed", operation=operation, error=str(exc))
            raise StoreUnavailable(operation, str(exc)) from exc

    # ──────────────────────────────────────────────
    # Students
    # ──────────────────────────────────────────────

    async def list_students(self, newest_first: bool = False) -> list[StudentRecord]:
        async with self._guard("list_students"):
            rows = await self.students.get_all(newest_first=newest_first)
        return [StudentRecord.model_validate(row) for row in rows]

    async def get_student(self, student_id: str) -> Optional[StudentRecord]:
        async with self._guard("get_student"):
            row = await self.students.get_by_student_id(student_id)
        return StudentRecord.model_validate(row) if row else None

    # ──────────────────────────────────────────────
    # Funnel records
    # ──────────────────────────────────────────────

    async def list_funnel_records(self) -> list[FunnelRecordData]:
        async with self._guard("list_funnel_records"):
            rows = await self.funnel.get_all()
        return [FunnelRecordData.model_validate(row) for row in rows]

    async def get_funnel_record(self, student_id: str) -> Optional[FunnelRecordData]:
        async with self._guard("get_funnel_record"):
            row = await self.funnel.get_by_student_id(student_id)
        return FunnelRecordData.model_validate(row) if row else None

    async def save_funnel_record(self, student_id: str, record: FunnelRecordData) -> None:
        """Create-or-replace; the stored row ends up equal to ``record``."""
        async with self._guard("save_funnel_record"):
            await self.funnel.upsert(student_id, record.model_dump(exclude={"student_id"}))

    # ──────────────────────────────────────────────
    # Sales & catalogue
    # ──────────────────────────────────────────────

    async def append_sale(self, student_id: str, course_id: str, quantity: int = 1) -> SaleRecord:
        async with self._guard("append_sale"):
            sale = await self.sales.create(
                Sale(student_id=student_id, product_id=course_id, quantity=quantity)
            )
        logger.info("sale_recorded", student_id=student_id, product_id=course_id, quantity=quantity)
        return SaleRecord.model_validate(sale)

    async def list_sales(self) -> list[SaleRecord]:
        async with self._guard("list_sales"):
            rows = await self.sales.get_all()
        return [SaleRecord.model_validate(row) for row in rows]

    async def list_products(self) -> list[ProductRecord]:
        async with self._guard("list_products"):
            rows = await self.products.get_all()
        return [ProductRecord.model_validate(row) for row in rows]

    async def ensure_products(self, defaults: list[dict] = DEFAULT_PRODUCTS) -> int:
        """Seed the catalogue when it is empty. Returns how many were added."""
        async with self._guard("ensure_products"):
            if await self.products.count() > 0:
                return 0
            await self.products.add_all(
                [Product(sort_order=index, **item) for index, item in enumerate(defaults)]
            )
        logger.info("products_seeded", count=len(defaults))
        return len(defaults)
