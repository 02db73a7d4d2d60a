"""
Pydantic schemas for records, requests and responses.
"""

from clientledger.schemas.base import (
    BaseSchema,
    MessageResponse,
)
from clientledger.schemas.client import (
    Client,
    ClientCreate,
    ClientUpdate,
)
from clientledger.schemas.service import (
    Service,
    ServiceCreate,
    ServiceUpdate,
    ServiceStatus,
)
from clientledger.schemas.debt import (
    Debt,
    DebtCreate,
    DebtUpdate,
    DebtStatus,
)
from clientledger.schemas.backup import (
    Snapshot,
    StoreState,
    PersistedState,
    RestoreSummary,
)
from clientledger.schemas.dashboard import DashboardResponse

__all__ = [
    "BaseSchema",
    "MessageResponse",
    # Client
    "Client",
    "ClientCreate",
    "ClientUpdate",
    # Service
    "Service",
    "ServiceCreate",
    "ServiceUpdate",
    "ServiceStatus",
    # Debt
    "Debt",
    "DebtCreate",
    "DebtUpdate",
    "DebtStatus",
    # Backup
    "Snapshot",
    "StoreState",
    "PersistedState",
    "RestoreSummary",
    # Dashboard
    "DashboardResponse",
]
