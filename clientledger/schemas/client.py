"""
Client schemas.
"""

from pydantic import ConfigDict, Field

from clientledger.schemas.base import BaseSchema, UpdateSchema, UtcDatetime


class ClientBase(BaseSchema):
    """Base client schema with common fields."""
    
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


class ClientCreate(ClientBase):
    """Schema for creating a new client. Name and phone are required."""
    
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)


class ClientUpdate(UpdateSchema):
    """Schema for updating a client."""
    
    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = None
    phone: str | None = Field(None, min_length=1, max_length=50)
    address: str | None = None


class Client(ClientBase):
    """Stored client record."""
    
    model_config = ConfigDict(frozen=True)
    
    id: str
    registered_at: UtcDatetime
