"""
FastAPI dependencies for dependency injection.
"""
from typing import Annotated, Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.common import DateRange
from app.services.analytics_service import AnalyticsService
from app.services.dashboard_service import DashboardService
from app.services.funnel_service import FunnelService
from app.services.record_store import RecordStore


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_record_store(db: DbSession) -> RecordStore:
    """Get RecordStore instance."""
    return RecordStore(db)


async def get_funnel_service(
    store: Annotated[RecordStore, Depends(get_record_store)]
) -> FunnelService:
    """Get FunnelService instance."""
    return FunnelService(store)


async def get_analytics_service(
    store: Annotated[RecordStore, Depends(get_record_store)]
) -> AnalyticsService:
    """Get AnalyticsService instance."""
    return AnalyticsService(store)


async def get_dashboard_service(
    store: Annotated[RecordStore, Depends(get_record_store)]
) -> DashboardService:
    """Get DashboardService instance."""
    return DashboardService(store)


async def get_date_range(
    date_from: Optional[str] = Query(default=None, alias="from", description="YYYY-MM-DD"),
    date_to: Optional[str] = Query(default=None, alias="to", description="YYYY-MM-DD"),
) -> Optional[DateRange]:
    """Optional ``?from=&to=`` window; ``None`` when neither is given."""
    if not date_from and not date_to:
        return None
    return DateRange(date_from=date_from or None, date_to=date_to or None)
