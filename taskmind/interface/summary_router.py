"""Daily summary endpoints."""

from fastapi import APIRouter, Depends

from taskmind.domain.summary import DailySummary
from taskmind.interface.dependencies import get_owner_id
from taskmind.services import summary_service


router = APIRouter(prefix="/api/daily-summary", tags=["daily-summary"])


@router.get("/{date}")
async def get_daily_summary(date: str, owner_id: str = Depends(get_owner_id)) -> DailySummary:
    """Fetch the owner's summary for a YYYY-MM-DD date."""
    return await summary_service.get_daily_summary(owner_id=owner_id, date=date)
