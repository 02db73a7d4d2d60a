"""
Dashboard endpoints.
Business statistics.
"""

import asyncio
from fastapi import APIRouter

from clientledger.api.deps import StoreDep
from clientledger.schemas.dashboard import DashboardResponse
from clientledger.services.dashboard import DashboardService


router = APIRouter()


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Dashboard",
    description="Counts, outstanding amount, overdue debts and recent activity",
)
async def get_dashboard(store: StoreDep) -> DashboardResponse:
    service = DashboardService(store)
    return await asyncio.to_thread(service.get_overview)
