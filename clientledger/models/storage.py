"""
Storage slot model.
A named text blob holding a serialized copy of the application state.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from clientledger.core.database import Base
from clientledger.models.base import TimestampMixin


class StorageSlot(Base, TimestampMixin):
    """
    Key-value storage slot.
    
    Attributes:
        key: Slot name (e.g. "app-storage")
        value: Serialized JSON payload
    """
    
    __tablename__ = "storage_slots"
    
    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )
    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<StorageSlot(key='{self.key}', size={len(self.value)})>"
