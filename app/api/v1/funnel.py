"""
Funnel analytics API.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from app.core.deps import get_analytics_service, get_date_range
from app.schemas.common import DateRange
from app.schemas.funnel import ConsultantPerformance, FunnelAnalytics
from app.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/funnel", response_model=FunnelAnalytics)
async def get_funnel_analytics(
    date_range: Optional[DateRange] = Depends(get_date_range),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Stage breakdown and source / method / course conversion rates."""
    return await service.get_funnel_analytics(date_range)


@router.get("/analytics/consultant", response_model=list[ConsultantPerformance])
async def get_consultant_performance(
    date_range: Optional[DateRange] = Depends(get_date_range),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Per-consultant funnel, sorted by overall conversion rate."""
    return await service.get_consultant_performance(date_range)
