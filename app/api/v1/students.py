"""
Students & funnel stage API endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException

from app.core.deps import get_funnel_service, get_record_store
from app.schemas.funnel import FunnelRecordData, StageUpdate
from app.schemas.student import StudentRecord
from app.services.funnel_service import FunnelService, StudentNotFoundError
from app.services.record_store import RecordStore

router = APIRouter()


@router.get("", response_model=list[StudentRecord])
async def list_students(store: RecordStore = Depends(get_record_store)):
    """List all students, newest first."""
    return await store.list_students(newest_first=True)


@router.get("/{student_id}/stage", response_model=FunnelRecordData)
async def get_student_stage(
    student_id: str,
    service: FunnelService = Depends(get_funnel_service),
):
    """Get the student's funnel record."""
    record = await service.get_record(student_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Funnel record for {student_id} not found")
    return record


@router.post("/{student_id}/stage", response_model=FunnelRecordData)
async def update_student_stage(
    student_id: str,
    data: StageUpdate,
    service: FunnelService = Depends(get_funnel_service),
):
    """
    Move the student to ``stage``.
    Every earlier stage is marked reached; there is no backward-move check.
    """
    try:
        return await service.update_stage(student_id, data)
    except StudentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
