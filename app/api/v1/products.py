"""
Course catalogue API.
"""
from fastapi import APIRouter, Depends

from app.core.deps import get_record_store
from app.schemas.product import ProductRecord
from app.services.record_store import RecordStore

router = APIRouter()


@router.get("", response_model=list[ProductRecord])
async def list_products(store: RecordStore = Depends(get_record_store)):
    return await store.list_products()
