"""
Sales API endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException

from app.core.deps import get_record_store
from app.schemas.sale import SaleCreate, SaleRecord
from app.services.record_store import RecordStore

router = APIRouter()


def _bad_request(msg: str):
    raise HTTPException(status_code=400, detail=msg)


@router.get("", response_model=list[SaleRecord])
async def list_sales(store: RecordStore = Depends(get_record_store)):
    """The sales ledger, oldest first."""
    return await store.list_sales()


@router.post("", response_model=SaleRecord, status_code=201)
async def create_sale(
    data: SaleCreate,
    store: RecordStore = Depends(get_record_store),
):
    """Append a course sale for a student."""
    if not data.student_id or not data.product_id:
        _bad_request("Missing required fields: studentId and productId")
    return await store.append_sale(data.student_id, data.product_id, data.quantity)
