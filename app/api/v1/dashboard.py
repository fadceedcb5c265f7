"""
Dashboard API - per-student course sales table.
"""
from fastapi import APIRouter, Depends

from app.core.deps import get_dashboard_service
from app.schemas.sale import SalesDashboard
from app.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=SalesDashboard)
async def get_dashboard(service: DashboardService = Depends(get_dashboard_service)):
    """Students with sales counts per course and a converted flag."""
    return await service.get_sales_table()
