"""
Sales dashboard table: one row per student, one column per course.
"""
from typing import Sequence

from app.schemas.product import ProductRecord
from app.schemas.sale import SaleRecord, SalesDashboard, SalesTableRow
from app.schemas.student import StudentRecord
from app.services.record_store import RecordStore


def build_sales_table(
    students: Sequence[StudentRecord],
    products: Sequence[ProductRecord],
    sales: Sequence[SaleRecord],
) -> SalesDashboard:
    """Sum sale quantities per (student, product); unknown products are ignored."""
    by_student: dict[str, list[SaleRecord]] = {}
    for sale in sales:
        by_student.setdefault(sale.student_id, []).append(sale)

    rows = []
    for student in students:
        counts = {product.id: 0 for product in products}
        total_quantity = 0
        for sale in by_student.get(student.student_id, []):
            total_quantity += sale.quantity
            if sale.product_id in counts:
                counts[sale.product_id] += sale.quantity

        rows.append(SalesTableRow(
            student_id=student.student_id,
            name=student.name,
            phone=student.phone,
            source=student.source,
            is_converted=total_quantity > 0,
            sales=counts,
        ))

    return SalesDashboard(students=rows, products=list(products))


class DashboardService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def get_sales_table(self) -> SalesDashboard:
        students = await self.store.list_students()
        products = await self.store.list_products()
        sales = await self.store.list_sales()
        return build_sales_table(students, products, sales)
