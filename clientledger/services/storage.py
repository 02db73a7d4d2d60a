"""
Key-value blob storage.
Persists the serialized application state under a named slot.
"""

import logging
from typing import Protocol
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from clientledger.models.storage import StorageSlot


logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when a storage slot cannot be read or written."""


class BlobStore(Protocol):
    """Opaque key-value store of text blobs."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryBlobStore:
    """Dict-backed blob store, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value


class SqlBlobStore:
    """Blob store backed by the ``storage_slots`` table."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> str | None:
        """
        Read a slot.

        Args:
            key: Slot name

        Returns:
            Stored text, or None if the slot was never written

        Raises:
            StorageError: If the database cannot be read
        """
        try:
            with self.session_factory() as session:
                result = session.execute(
                    select(StorageSlot.value).where(StorageSlot.key == key)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot read storage slot '{key}'") from e

    def set(self, key: str, value: str) -> None:
        """
        Create or overwrite a slot.

        Raises:
            StorageError: If the database cannot be written
        """
        try:
            with self.session_factory() as session:
                with session.begin():
                    slot = session.get(StorageSlot, key)
                    if slot is None:
                        session.add(StorageSlot(key=key, value=value))
                    else:
                        slot.value = value
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot write storage slot '{key}'") from e

        logger.debug(f"Storage slot '{key}' written ({len(value)} bytes)")
