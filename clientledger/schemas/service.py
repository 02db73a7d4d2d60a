"""
Service schemas.
A service is work done for a client; completing it bills the client.
"""

from decimal import Decimal
from enum import Enum
from pydantic import ConfigDict, Field

from clientledger.schemas.base import BaseSchema, Money, UpdateSchema, UtcDatetime


class ServiceStatus(str, Enum):
    """Service status enumeration."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ServiceCreate(BaseSchema):
    """
    Schema for creating a service.
    
    ``service_date`` defaults to the creation time when omitted.
    """
    
    client_id: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    amount: Money = Field(..., ge=0)
    service_date: UtcDatetime | None = None
    status: ServiceStatus = ServiceStatus.PENDING


class ServiceUpdate(UpdateSchema):
    """Schema for updating a service."""
    
    client_id: str | None = Field(None, min_length=1)
    description: str | None = Field(None, min_length=1)
    amount: Money | None = Field(None, ge=0)
    service_date: UtcDatetime | None = None
    status: ServiceStatus | None = None


class Service(BaseSchema):
    """Stored service record."""
    
    model_config = ConfigDict(frozen=True)
    
    id: str
    client_id: str
    description: str = ""
    amount: Money = Decimal("0")
    service_date: UtcDatetime
    status: ServiceStatus = ServiceStatus.PENDING
