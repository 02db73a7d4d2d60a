"""
Application state store.
Holds clients, services and debts in memory and keeps them consistent.
"""

import logging
import uuid
from datetime import datetime, timedelta
from threading import RLock
from typing import Callable, Iterable, TypeVar
from pydantic import ValidationError

from clientledger.core.config import settings
from clientledger.schemas.backup import PersistedState, StoreState
from clientledger.schemas.base import ensure_utc, utc_now
from clientledger.schemas.client import Client, ClientCreate, ClientUpdate
from clientledger.schemas.debt import Debt, DebtCreate, DebtStatus, DebtUpdate
from clientledger.schemas.service import Service, ServiceCreate, ServiceStatus, ServiceUpdate
from clientledger.services.storage import BlobStore, StorageError


logger = logging.getLogger(__name__)

Record = TypeVar("Record", Client, Service, Debt)


def new_id() -> str:
    """Generate a random record identifier."""
    return str(uuid.uuid4())


def _find(records: Iterable[Record], record_id: str) -> Record | None:
    return next((r for r in records if r.id == record_id), None)


def _replace(records: list[Record], updated: Record) -> list[Record]:
    return [updated if r.id == updated.id else r for r in records]


def _align_payment(debt: Debt, changed: set[str], now: datetime) -> Debt:
    """
    Keep ``status == paid`` equivalent to ``paid_date`` being set.

    An explicit status wins; otherwise a changed paid date decides the status.
    """
    if "status" in changed or "paid_date" not in changed:
        if debt.status == DebtStatus.PAID and debt.paid_date is None:
            return debt.model_copy(update={"paid_date": now})
        if debt.status != DebtStatus.PAID and debt.paid_date is not None:
            return debt.model_copy(update={"paid_date": None})
        return debt

    if debt.paid_date is not None and debt.status != DebtStatus.PAID:
        return debt.model_copy(update={"status": DebtStatus.PAID})
    if debt.paid_date is None and debt.status == DebtStatus.PAID:
        return debt.model_copy(update={"status": DebtStatus.PENDING})
    return debt


class AppStore:
    """
    In-memory store for clients, services and debts.

    Every mutation runs under the store lock, builds the new collections
    first and swaps them in with a single assignment, then writes the whole
    state to the blob store. Unknown ids are ignored: updates return None
    and deletes return False.

    Args:
        blob_store: Persistence transport, None for a purely in-memory store
        storage_key: Name of the slot holding the state
        clock: Returns the current time
        debt_due_days: Days until a generated debt falls due
    """

    def __init__(
        self,
        blob_store: BlobStore | None = None,
        storage_key: str = settings.STORAGE_KEY,
        clock: Callable[[], datetime] = utc_now,
        debt_due_days: int = settings.DEBT_DUE_DAYS,
    ):
        self.blob_store = blob_store
        self.storage_key = storage_key
        self.clock = clock
        self.debt_due_days = debt_due_days

        self._lock = RLock()
        self._clients: list[Client] = []
        self._services: list[Service] = []
        self._debts: list[Debt] = []

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def clients(self) -> list[Client]:
        return list(self._clients)

    @property
    def services(self) -> list[Service]:
        return list(self._services)

    @property
    def debts(self) -> list[Debt]:
        return list(self._debts)

    def now(self) -> datetime:
        return ensure_utc(self.clock())

    def state(self) -> StoreState:
        """Current collections as a single object."""
        with self._lock:
            return StoreState(
                clients=self.clients,
                services=self.services,
                debts=self.debts,
            )

    def load(self) -> None:
        """
        Load the persisted state, if any.

        A missing slot leaves the store empty. An unreadable or corrupt slot
        is logged and the store starts empty.
        """
        if self.blob_store is None:
            return

        try:
            raw = self.blob_store.get(self.storage_key)
        except StorageError:
            logger.exception("Could not read persisted state, starting empty")
            return

        if raw is None:
            logger.info(f"No persisted state under '{self.storage_key}'")
            return

        try:
            persisted = PersistedState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring corrupt persisted state: {e.error_count()} error(s)")
            return

        state = persisted.state
        with self._lock:
            self._clients, self._services, self._debts = (
                list(state.clients),
                list(state.services),
                list(state.debts),
            )
        logger.info(
            f"Loaded {len(state.clients)} clients, {len(state.services)} services "
            f"and {len(state.debts)} debts"
        )

    def _commit(
        self,
        clients: list[Client] | None = None,
        services: list[Service] | None = None,
        debts: list[Debt] | None = None,
    ) -> None:
        # Callers hold the lock
        self._clients, self._services, self._debts = (
            self._clients if clients is None else clients,
            self._services if services is None else services,
            self._debts if debts is None else debts,
        )
        self._save()

    def _save(self) -> None:
        # Persistence failures keep the in-memory state authoritative
        if self.blob_store is None:
            return

        payload = PersistedState(state=self.state()).model_dump_json(by_alias=True)
        try:
            self.blob_store.set(self.storage_key, payload)
        except StorageError:
            logger.exception("Could not persist state, keeping changes in memory only")

    # ------------------------------------------------------------------ #
    # Clients
    # ------------------------------------------------------------------ #

    def get_client(self, client_id: str) -> Client | None:
        return _find(self._clients, client_id)

    def add_client(self, fields: ClientCreate) -> Client:
        """Create a client registered now."""
        with self._lock:
            client = Client(
                id=new_id(),
                registered_at=self.now(),
                **fields.model_dump(),
            )
            self._commit(clients=[*self._clients, client])

        logger.debug(f"Client {client.id} added")
        return client

    def update_client(self, client_id: str, fields: ClientUpdate) -> Client | None:
        with self._lock:
            current = self.get_client(client_id)
            if current is None:
                return None

            updated = current.model_copy(update=fields.changes())
            self._commit(clients=_replace(self._clients, updated))
            return updated

    def delete_client(self, client_id: str) -> bool:
        """
        Delete a client with all of its services and debts.

        Returns:
            False if the client does not exist
        """
        with self._lock:
            if self.get_client(client_id) is None:
                return False

            services = [s for s in self._services if s.client_id != client_id]
            debts = [d for d in self._debts if d.client_id != client_id]
            removed_services = len(self._services) - len(services)
            removed_debts = len(self._debts) - len(debts)

            self._commit(
                clients=[c for c in self._clients if c.id != client_id],
                services=services,
                debts=debts,
            )

        logger.info(
            f"Client {client_id} deleted with {removed_services} services "
            f"and {removed_debts} debts"
        )
        return True

    # ------------------------------------------------------------------ #
    # Services
    # ------------------------------------------------------------------ #

    def get_service(self, service_id: str) -> Service | None:
        return _find(self._services, service_id)

    def list_services(
        self,
        client_id: str | None = None,
        status: ServiceStatus | None = None,
    ) -> list[Service]:
        return [
            s for s in self._services
            if (client_id is None or s.client_id == client_id)
            and (status is None or s.status == status)
        ]

    def _service_debt(self, service: Service, now: datetime) -> Debt:
        """Build the debt billing a completed service."""
        return Debt(
            id=new_id(),
            client_id=service.client_id,
            service_id=service.id,
            amount=service.amount,
            due_date=now + timedelta(days=self.debt_due_days),
            paid_date=None,
            status=DebtStatus.PENDING,
        )

    def add_service(self, fields: ServiceCreate) -> Service:
        """
        Create a service.

        A service created as completed bills the client right away: the debt
        is added in the same state transition as the service.
        """
        with self._lock:
            now = self.now()
            data = fields.model_dump()
            if data["service_date"] is None:
                data["service_date"] = now

            service = Service(id=new_id(), **data)
            debts = None
            if service.status == ServiceStatus.COMPLETED:
                debt = self._service_debt(service, now)
                debts = [*self._debts, debt]
                logger.info(f"Debt {debt.id} generated for completed service {service.id}")

            self._commit(services=[*self._services, service], debts=debts)
            return service

    def update_service(self, service_id: str, fields: ServiceUpdate) -> Service | None:
        """
        Update a service.

        Moving the status to completed generates a debt unless one already
        references the service. Leaving completed never removes that debt.
        Moving the service to another client moves its debts along.
        """
        with self._lock:
            current = self.get_service(service_id)
            if current is None:
                return None

            updated = current.model_copy(update=fields.changes())
            debts = self._debts
            if updated.client_id != current.client_id:
                debts = [
                    d.model_copy(update={"client_id": updated.client_id})
                    if d.service_id == service_id else d
                    for d in debts
                ]

            if (
                updated.status == ServiceStatus.COMPLETED
                and current.status != ServiceStatus.COMPLETED
                and not any(d.service_id == service_id for d in debts)
            ):
                debt = self._service_debt(updated, self.now())
                debts = [*debts, debt]
                logger.info(f"Debt {debt.id} generated for completed service {service_id}")

            self._commit(services=_replace(self._services, updated), debts=debts)
            return updated

    def delete_service(self, service_id: str) -> bool:
        """Delete a service and every debt referencing it, paid or not."""
        with self._lock:
            if self.get_service(service_id) is None:
                return False

            debts = [d for d in self._debts if d.service_id != service_id]
            removed_debts = len(self._debts) - len(debts)

            self._commit(
                services=[s for s in self._services if s.id != service_id],
                debts=debts,
            )

        logger.info(f"Service {service_id} deleted with {removed_debts} debts")
        return True

    # ------------------------------------------------------------------ #
    # Debts
    # ------------------------------------------------------------------ #

    def get_debt(self, debt_id: str) -> Debt | None:
        return _find(self._debts, debt_id)

    def list_debts(
        self,
        client_id: str | None = None,
        status: DebtStatus | None = None,
    ) -> list[Debt]:
        """List debts after reclassifying the overdue ones."""
        with self._lock:
            self.refresh_overdue()
            return [
                d for d in self._debts
                if (client_id is None or d.client_id == client_id)
                and (status is None or d.status == status)
            ]

    def add_debt(self, fields: DebtCreate) -> Debt:
        """Create a standalone debt."""
        with self._lock:
            debt = Debt(id=new_id(), **fields.model_dump())
            debt = _align_payment(debt, fields.model_fields_set, self.now())
            self._commit(debts=[*self._debts, debt])

        logger.debug(f"Debt {debt.id} added for client {debt.client_id}")
        return debt

    def update_debt(self, debt_id: str, fields: DebtUpdate) -> Debt | None:
        with self._lock:
            current = self.get_debt(debt_id)
            if current is None:
                return None

            changes = fields.changes()
            updated = _align_payment(
                current.model_copy(update=changes),
                set(changes),
                self.now(),
            )
            self._commit(debts=_replace(self._debts, updated))
            return updated

    def delete_debt(self, debt_id: str) -> bool:
        with self._lock:
            if self.get_debt(debt_id) is None:
                return False

            self._commit(debts=[d for d in self._debts if d.id != debt_id])
            return True

    def pay_debt(self, debt_id: str) -> Debt | None:
        """
        Mark a debt as paid now.

        Paying an already paid debt changes nothing and keeps the first
        payment date.
        """
        with self._lock:
            current = self.get_debt(debt_id)
            if current is None or current.status == DebtStatus.PAID:
                return current

            paid = current.model_copy(
                update={"paid_date": self.now(), "status": DebtStatus.PAID}
            )
            self._commit(debts=_replace(self._debts, paid))

        logger.info(f"Debt {debt_id} paid")
        return paid

    def refresh_overdue(self) -> int:
        """
        Reclassify unpaid pending debts whose due date has passed.

        Running it again is a no-op; paid and overdue debts are left alone.

        Returns:
            Number of debts moved to overdue
        """
        with self._lock:
            now = self.now()
            changed = 0
            debts = []
            for debt in self._debts:
                if (
                    debt.status == DebtStatus.PENDING
                    and debt.paid_date is None
                    and debt.due_date < now
                ):
                    debt = debt.model_copy(update={"status": DebtStatus.OVERDUE})
                    changed += 1
                debts.append(debt)

            if changed:
                self._commit(debts=debts)
                logger.info(f"{changed} debt(s) marked overdue")
            return changed

    # ------------------------------------------------------------------ #
    # Bulk
    # ------------------------------------------------------------------ #

    def replace_all(
        self,
        clients: list[Client],
        services: list[Service],
        debts: list[Debt],
    ) -> None:
        """
        Overwrite the whole state.

        Used by restore only. References between records are not checked.
        """
        with self._lock:
            self._commit(
                clients=list(clients),
                services=list(services),
                debts=list(debts),
            )
        logger.info(
            f"State replaced: {len(clients)} clients, {len(services)} services, "
            f"{len(debts)} debts"
        )
