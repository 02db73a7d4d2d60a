"""
Dashboard Service.
Provides business statistics from the application state.
"""

from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from clientledger.core.config import settings
from clientledger.schemas.dashboard import DashboardResponse
from clientledger.schemas.debt import DebtStatus
from clientledger.schemas.service import ServiceStatus
from clientledger.services.store import AppStore


CENTS = Decimal("0.01")


class DashboardService:
    """Service for dashboard statistics."""

    def __init__(
        self,
        store: AppStore,
        recent_limit: int = settings.RECENT_ITEMS_LIMIT,
        recent_days: int = settings.RECENT_SERVICES_DAYS,
    ):
        self.store = store
        self.recent_limit = recent_limit
        self.recent_days = recent_days

    def _last(self, items: list) -> list:
        return items[-self.recent_limit:] if self.recent_limit > 0 else []

    def get_overview(self) -> DashboardResponse:
        """
        Get business overview statistics.

        Overdue debts are reclassified first, so the figures and the stored
        statuses agree.

        Returns:
            Counts, outstanding amount and recent items
        """
        self.store.refresh_overdue()
        now = self.store.now()

        clients = self.store.clients
        services = self.store.services
        unpaid = [d for d in self.store.debts if d.status != DebtStatus.PAID]

        outstanding = sum((d.amount for d in unpaid), Decimal("0"))
        overdue_count = sum(1 for d in unpaid if d.due_date < now)

        since = now - timedelta(days=self.recent_days)
        completed = [
            s for s in services
            if s.status == ServiceStatus.COMPLETED and s.service_date >= since
        ]

        return DashboardResponse(
            total_clients=len(clients),
            total_services=len(services),
            outstanding_total=outstanding.quantize(CENTS, rounding=ROUND_HALF_UP),
            overdue_count=overdue_count,
            recent_clients=self._last(clients),
            open_debts=self._last(unpaid),
            recent_completed_services=self._last(completed),
        )
