"""
Snapshot schemas.
Shapes of the persisted application state and of backup files.
"""

from typing import Annotated, Optional
from pydantic import BeforeValidator, Field

from clientledger.schemas.base import BaseSchema, UtcDatetime
from clientledger.schemas.client import Client
from clientledger.schemas.debt import Debt
from clientledger.schemas.service import Service


# Older files may carry a numeric version
VersionTag = Annotated[
    Optional[str],
    BeforeValidator(lambda v: v if v is None or isinstance(v, str) else str(v)),
]


class StoreState(BaseSchema):
    """The three collections of the application state."""
    
    clients: list[Client]
    services: list[Service]
    debts: list[Debt]


class PersistedState(BaseSchema):
    """Envelope written to the storage slot."""
    
    state: StoreState
    version: int = 0


class Snapshot(StoreState):
    """
    Full export of the application state.
    
    The three collections are required and may not be null. ``version`` is
    carried along but not enforced on import.
    """
    
    export_date: UtcDatetime | None = None
    version: VersionTag = None


class RestoreSummary(BaseSchema):
    """Counts of the records loaded by a restore."""
    
    clients: int = Field(..., ge=0)
    services: int = Field(..., ge=0)
    debts: int = Field(..., ge=0)
    message: str = "Data restored successfully"
