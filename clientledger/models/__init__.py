"""
Database models module.
All SQLAlchemy models are exported from here for easy imports.
"""

from clientledger.models.storage import StorageSlot


__all__ = [
    "StorageSlot",
]
