"""
Backup service.
Exports the application state to a JSON snapshot and restores it.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any
from pydantic import ValidationError

from clientledger.core.config import settings
from clientledger.schemas.backup import RestoreSummary, Snapshot
from clientledger.services.store import AppStore


logger = logging.getLogger(__name__)


class InvalidBackupError(ValueError):
    """Raised when a backup file cannot be restored."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid backup file: {reason}")
        self.reason = reason


class BackupService:
    """Service for backup and restore operations."""

    def __init__(self, store: AppStore, version: str = settings.BACKUP_VERSION):
        self.store = store
        self.version = version

    def export_snapshot(self) -> Snapshot:
        """
        Capture the whole state.

        Returns:
            Snapshot stamped with the export time and format version
        """
        return Snapshot(
            clients=self.store.clients,
            services=self.store.services,
            debts=self.store.debts,
            export_date=self.store.now(),
            version=self.version,
        )

    def export_json(self) -> str:
        """Serialize a snapshot as indented JSON."""
        return self.export_snapshot().model_dump_json(by_alias=True, indent=2)

    @staticmethod
    def backup_filename(now: datetime) -> str:
        """File name offered for download, e.g. backup-clientledger-19-10-2026.json."""
        return f"backup-clientledger-{now.strftime('%d-%m-%Y')}.json"

    def parse_snapshot(self, raw: str | bytes | dict[str, Any]) -> Snapshot:
        """
        Validate a backup payload.

        Args:
            raw: JSON text or an already decoded object

        Returns:
            Parsed snapshot

        Raises:
            InvalidBackupError: If the payload is not a complete snapshot
        """
        if isinstance(raw, (str, bytes)):
            try:
                # Numbers are read as Decimal so amounts keep every digit
                raw = json.loads(raw, parse_float=Decimal)
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise InvalidBackupError("not valid JSON") from e
            except RecursionError as e:
                raise InvalidBackupError("JSON nested too deeply") from e

        if not isinstance(raw, dict):
            raise InvalidBackupError("expected a JSON object")

        missing = [key for key in ("clients", "services", "debts") if raw.get(key) is None]
        if missing:
            raise InvalidBackupError(f"missing {', '.join(missing)}")

        try:
            snapshot = Snapshot.model_validate(raw)
        except ValidationError as e:
            raise InvalidBackupError(f"{e.error_count()} invalid record field(s)") from e

        if snapshot.version != self.version:
            logger.warning(
                f"Backup version {snapshot.version!r} differs from {self.version!r}, "
                "importing anyway"
            )
        return snapshot

    def restore(self, raw: str | bytes | dict[str, Any]) -> RestoreSummary:
        """
        Replace the whole state with a backup.

        The payload is fully validated before the store is touched, so a
        rejected file leaves the current data unchanged.

        Raises:
            InvalidBackupError: If the payload is not a complete snapshot
        """
        try:
            snapshot = self.parse_snapshot(raw)
        except InvalidBackupError as e:
            logger.warning(f"Restore rejected: {e.reason}")
            raise

        self.store.replace_all(
            clients=snapshot.clients,
            services=snapshot.services,
            debts=snapshot.debts,
        )

        return RestoreSummary(
            clients=len(snapshot.clients),
            services=len(snapshot.services),
            debts=len(snapshot.debts),
        )
