"""
Debt schemas.
Debts are either generated from completed services or entered manually.
"""

from enum import Enum
from typing import Annotated, ClassVar, Optional
from pydantic import BeforeValidator, ConfigDict, Field

from clientledger.schemas.base import BaseSchema, Money, UpdateSchema, UtcDatetime


class DebtStatus(str, Enum):
    """Debt status enumeration."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


def _blank_to_none(value):
    # Manual debts may carry an empty service reference
    if isinstance(value, str) and not value.strip():
        return None
    return value


ServiceRef = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class DebtCreate(BaseSchema):
    """Schema for creating a standalone debt."""
    
    client_id: str = Field(..., min_length=1)
    service_id: ServiceRef = None
    amount: Money = Field(..., ge=0)
    due_date: UtcDatetime
    paid_date: UtcDatetime | None = None
    status: DebtStatus = DebtStatus.PENDING


class DebtUpdate(UpdateSchema):
    """Schema for updating a debt."""
    
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"service_id", "paid_date"})
    
    client_id: str | None = Field(None, min_length=1)
    service_id: ServiceRef = None
    amount: Money | None = Field(None, ge=0)
    due_date: UtcDatetime | None = None
    paid_date: UtcDatetime | None = None
    status: DebtStatus | None = None


class Debt(BaseSchema):
    """
    Stored debt record.
    
    Attributes:
        client_id: Client owing the amount
        service_id: Originating service, None for manual debts
        amount: Amount owed
        due_date: Payment due date
        paid_date: Payment time, set iff status is paid
        status: pending, paid or overdue
    """
    
    model_config = ConfigDict(frozen=True)
    
    id: str
    client_id: str
    service_id: ServiceRef = None
    amount: Money
    due_date: UtcDatetime
    paid_date: UtcDatetime | None = None
    status: DebtStatus = DebtStatus.PENDING
