"""
Application state store tests.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from decimal import Decimal

from clientledger.schemas.backup import PersistedState
from clientledger.schemas.client import ClientCreate, ClientUpdate
from clientledger.schemas.debt import DebtCreate, DebtStatus, DebtUpdate
from clientledger.schemas.service import ServiceCreate, ServiceStatus, ServiceUpdate
from tests.conftest import NOW


def make_service(store, client_id, status=ServiceStatus.PENDING, amount="80.00", description="Oil Change"):
    return store.add_service(
        ServiceCreate(
            client_id=client_id,
            description=description,
            amount=Decimal(amount),
            status=status,
        )
    )


def make_debt(store, client_id, service_id=None, due_in_days=10, amount="25.00"):
    return store.add_debt(
        DebtCreate(
            client_id=client_id,
            service_id=service_id,
            amount=Decimal(amount),
            due_date=NOW + timedelta(days=due_in_days),
        )
    )


# --------------------------------------------------------------------- #
# Clients
# --------------------------------------------------------------------- #

def test_add_client_sets_id_and_registration_time(store, acme):
    """Test client creation."""
    assert acme.id
    assert acme.registered_at == NOW
    assert acme.name == "Acme Garage"
    assert store.clients == [acme]


def test_client_ids_are_unique(store):
    first = store.add_client(ClientCreate(name="A", phone="1"))
    second = store.add_client(ClientCreate(name="B", phone="2"))
    assert first.id != second.id


def test_update_client_merges_given_fields(store, acme, clock):
    clock.advance(days=3)
    updated = store.update_client(acme.id, ClientUpdate(phone="555-0199"))

    assert updated.phone == "555-0199"
    assert updated.name == "Acme Garage"
    assert updated.registered_at == NOW
    assert store.get_client(acme.id) == updated


def test_update_unknown_client_is_a_noop(store, acme, blob_store):
    before = blob_store.slots["test-storage"]

    assert store.update_client("missing", ClientUpdate(name="Ghost")) is None
    assert store.clients == [acme]
    assert blob_store.slots["test-storage"] == before


def test_delete_client_cascades_to_its_services_and_debts(store, acme):
    """Test deleting a client removes its services and debts only."""
    other = store.add_client(ClientCreate(name="Other", phone="555-0200"))

    service = make_service(store, acme.id, status=ServiceStatus.COMPLETED)
    make_debt(store, acme.id)
    other_service = make_service(store, other.id, status=ServiceStatus.COMPLETED)
    other_debt = make_debt(store, other.id)

    assert store.delete_client(acme.id) is True

    assert store.clients == [other]
    assert store.get_service(service.id) is None
    assert store.services == [other_service]
    assert {d.client_id for d in store.debts} == {other.id}
    assert other_debt in store.debts
    assert len(store.debts) == 2


def test_delete_unknown_client_returns_false(store, acme):
    assert store.delete_client("missing") is False
    assert store.clients == [acme]


# --------------------------------------------------------------------- #
# Services and generated debts
# --------------------------------------------------------------------- #

def test_pending_service_generates_no_debt(store, acme):
    make_service(store, acme.id)
    assert store.debts == []


def test_service_date_defaults_to_now(store, acme):
    service = make_service(store, acme.id)
    assert service.service_date == NOW


def test_completed_service_generates_one_debt(store, acme):
    """Test a service created as completed bills the client."""
    service = make_service(store, acme.id, status=ServiceStatus.COMPLETED)

    assert len(store.debts) == 1
    debt = store.debts[0]
    assert debt.service_id == service.id
    assert debt.client_id == acme.id
    assert debt.amount == Decimal("80.00")
    assert debt.due_date == NOW + timedelta(days=30)
    assert debt.paid_date is None
    assert debt.status == DebtStatus.PENDING


def test_completing_a_service_generates_its_debt_once(store, acme, clock):
    """Oil change scenario: completing s1 bills c1, repeated edits do not."""
    service = make_service(store, acme.id)
    clock.advance(days=5)

    store.update_service(service.id, ServiceUpdate(status=ServiceStatus.COMPLETED))

    assert len(store.debts) == 1
    debt = store.debts[0]
    assert debt.service_id == service.id
    assert debt.client_id == acme.id
    assert debt.amount == Decimal("80.00")
    assert debt.due_date == NOW + timedelta(days=35)

    store.update_service(service.id, ServiceUpdate(status=ServiceStatus.COMPLETED))
    store.update_service(service.id, ServiceUpdate(status=ServiceStatus.PENDING))
    store.update_service(service.id, ServiceUpdate(status=ServiceStatus.COMPLETED))

    assert store.debts == [debt]

    store.delete_client(acme.id)
    assert store.services == []
    assert store.debts == []


def test_completing_cancelled_service_uses_merged_amount(store, acme):
    service = make_service(store, acme.id, status=ServiceStatus.CANCELLED)

    store.update_service(
        service.id,
        ServiceUpdate(status=ServiceStatus.COMPLETED, amount=Decimal("95.50")),
    )

    assert len(store.debts) == 1
    assert store.debts[0].amount == Decimal("95.50")


def test_leaving_completed_keeps_the_debt(store, acme):
    service = make_service(store, acme.id, status=ServiceStatus.COMPLETED)

    store.update_service(service.id, ServiceUpdate(status=ServiceStatus.CANCELLED))

    assert store.get_service(service.id).status == ServiceStatus.CANCELLED
    assert len(store.debts) == 1


def test_update_without_status_change_generates_nothing(store, acme):
    service = make_service(store, acme.id)
    updated = store.update_service(service.id, ServiceUpdate(description="Brake check"))

    assert updated.description == "Brake check"
    assert updated.status == ServiceStatus.PENDING
    assert store.debts == []


def test_update_unknown_service_is_a_noop(store, acme):
    assert store.update_service("missing", ServiceUpdate(status=ServiceStatus.COMPLETED)) is None
    assert store.debts == []


def test_delete_service_removes_its_debts_even_paid(store, acme):
    """Test deleting a service cascades to every debt referencing it."""
    service = make_service(store, acme.id, status=ServiceStatus.COMPLETED)
    generated = store.debts[0]
    store.pay_debt(generated.id)
    manual = make_debt(store, acme.id, service_id=service.id)
    unrelated = make_debt(store, acme.id)

    assert store.delete_service(service.id) is True

    assert store.services == []
    assert store.get_debt(generated.id) is None
    assert store.get_debt(manual.id) is None
    assert store.debts == [unrelated]


def test_moving_a_service_moves_its_debts(store, acme):
    """Debts follow their service to the new client, so its cascade reaches them."""
    bella = store.add_client(ClientCreate(name="Bella Salon", phone="555-0300"))
    service = make_service(store, acme.id, status=ServiceStatus.COMPLETED)
    manual = make_debt(store, acme.id, service_id=service.id)
    unrelated = make_debt(store, acme.id)

    store.update_service(service.id, ServiceUpdate(client_id=bella.id))

    assert store.get_service(service.id).client_id == bella.id
    assert store.get_debt(manual.id).client_id == bella.id
    assert [d.client_id for d in store.debts if d.service_id == service.id] == [bella.id, bella.id]
    assert store.get_debt(unrelated.id).client_id == acme.id

    store.delete_client(bella.id)

    assert store.services == []
    assert store.debts == [unrelated]
    assert all(d.service_id is None for d in store.debts)


def test_list_services_filters(store, acme):
    other = store.add_client(ClientCreate(name="Other", phone="2"))
    done = make_service(store, acme.id, status=ServiceStatus.COMPLETED)
    todo = make_service(store, acme.id)
    foreign = make_service(store, other.id)

    assert store.list_services() == [done, todo, foreign]
    assert store.list_services(client_id=acme.id) == [done, todo]
    assert store.list_services(status=ServiceStatus.PENDING) == [todo, foreign]


# --------------------------------------------------------------------- #
# Debts
# --------------------------------------------------------------------- #

def test_manual_debt_has_no_side_effects(store, acme):
    debt = make_debt(store, acme.id)

    assert debt.service_id is None
    assert debt.status == DebtStatus.PENDING
    assert store.debts == [debt]
    assert store.services == []


def test_blank_service_reference_means_manual_debt(store, acme):
    debt = store.add_debt(
        DebtCreate(
            client_id=acme.id,
            service_id="",
            amount=Decimal("10"),
            due_date=NOW,
        )
    )
    assert debt.service_id is None


def test_pay_debt(store, acme, clock):
    debt = make_debt(store, acme.id)
    clock.advance(hours=2)

    paid = store.pay_debt(debt.id)

    assert paid.status == DebtStatus.PAID
    assert paid.paid_date == NOW + timedelta(hours=2)
    assert store.get_debt(debt.id) == paid


def test_paying_twice_keeps_first_payment_date(store, acme, clock):
    debt = make_debt(store, acme.id)
    first = store.pay_debt(debt.id)
    clock.advance(days=1)

    second = store.pay_debt(debt.id)

    assert second.paid_date == first.paid_date
    assert second.status == DebtStatus.PAID


def test_pay_unknown_debt_is_a_noop(store):
    assert store.pay_debt("missing") is None


def test_add_paid_debt_gets_payment_date(store, acme):
    debt = store.add_debt(
        DebtCreate(
            client_id=acme.id,
            amount=Decimal("10"),
            due_date=NOW,
            status=DebtStatus.PAID,
        )
    )
    assert debt.paid_date == NOW


def test_add_debt_with_payment_date_is_paid(store, acme):
    debt = store.add_debt(
        DebtCreate(
            client_id=acme.id,
            amount=Decimal("10"),
            due_date=NOW,
            paid_date=NOW - timedelta(days=1),
        )
    )
    assert debt.status == DebtStatus.PAID
    assert debt.paid_date == NOW - timedelta(days=1)


def test_reopening_a_paid_debt_clears_payment_date(store, acme):
    debt = make_debt(store, acme.id)
    store.pay_debt(debt.id)

    reopened = store.update_debt(debt.id, DebtUpdate(status=DebtStatus.PENDING))

    assert reopened.status == DebtStatus.PENDING
    assert reopened.paid_date is None


def test_setting_payment_date_marks_debt_paid(store, acme):
    debt = make_debt(store, acme.id)

    updated = store.update_debt(debt.id, DebtUpdate(paid_date=NOW))
    assert updated.status == DebtStatus.PAID

    cleared = store.update_debt(debt.id, DebtUpdate(paid_date=None))
    assert cleared.status == DebtStatus.PENDING
    assert cleared.paid_date is None


def test_update_debt_ignores_null_for_required_fields(store, acme):
    debt = make_debt(store, acme.id)

    updated = store.update_debt(debt.id, DebtUpdate(amount=None, client_id=None))

    assert updated.amount == debt.amount
    assert updated.client_id == acme.id


def test_delete_debt(store, acme):
    debt = make_debt(store, acme.id)

    assert store.delete_debt(debt.id) is True
    assert store.debts == []
    assert store.delete_debt(debt.id) is False


# --------------------------------------------------------------------- #
# Overdue reclassification
# --------------------------------------------------------------------- #

def test_past_due_pending_debt_becomes_overdue(store, acme):
    debt = make_debt(store, acme.id, due_in_days=-1)
    assert store.get_debt(debt.id).status == DebtStatus.PENDING

    debts = store.list_debts()

    assert [d.status for d in debts] == [DebtStatus.OVERDUE]
    assert store.get_debt(debt.id).status == DebtStatus.OVERDUE


def test_debt_due_right_now_is_not_overdue(store, acme):
    make_debt(store, acme.id, due_in_days=0)
    assert store.refresh_overdue() == 0


def test_overdue_check_is_idempotent(store, acme, blob_store):
    make_debt(store, acme.id, due_in_days=-1)

    assert store.refresh_overdue() == 1
    persisted = blob_store.slots["test-storage"]
    assert store.refresh_overdue() == 0
    assert blob_store.slots["test-storage"] == persisted


def test_paid_debt_is_never_overdue(store, acme):
    debt = make_debt(store, acme.id, due_in_days=-10)
    store.pay_debt(debt.id)

    assert store.refresh_overdue() == 0
    assert store.get_debt(debt.id).status == DebtStatus.PAID


def test_debt_becomes_overdue_as_time_passes(store, acme, clock):
    service = make_service(store, acme.id, status=ServiceStatus.COMPLETED)
    assert store.list_debts(status=DebtStatus.OVERDUE) == []

    clock.advance(days=31)

    overdue = store.list_debts(status=DebtStatus.OVERDUE)
    assert [d.service_id for d in overdue] == [service.id]


def test_list_debts_filters_by_client(store, acme):
    other = store.add_client(ClientCreate(name="Other", phone="2"))
    mine = make_debt(store, acme.id)
    make_debt(store, other.id)

    assert store.list_debts(client_id=acme.id) == [mine]


# --------------------------------------------------------------------- #
# Bulk replace
# --------------------------------------------------------------------- #

def test_replace_all_overwrites_state(store, acme):
    make_service(store, acme.id, status=ServiceStatus.COMPLETED)

    store.replace_all(clients=[], services=[], debts=[])

    assert store.clients == []
    assert store.services == []
    assert store.debts == []


def test_replace_all_does_not_check_references(store, acme):
    service = make_service(store, acme.id, status=ServiceStatus.COMPLETED)
    debts = store.debts

    store.replace_all(clients=[], services=[service], debts=debts)

    assert store.clients == []
    assert store.services == [service]
    assert store.debts == debts


def test_returned_collections_are_copies(store, acme):
    clients = store.clients
    clients.clear()
    assert store.clients == [acme]


def test_concurrent_writes_are_all_kept(store, blob_store):
    """Writes from worker threads are serialized and none is lost."""
    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(
            pool.map(
                lambda i: store.add_client(ClientCreate(name=f"Client {i}", phone=str(i))),
                range(50),
            )
        )

    assert len(store.clients) == 50
    assert {c.id for c in store.clients} == {c.id for c in created}
    persisted = PersistedState.model_validate_json(blob_store.slots["test-storage"])
    assert len(persisted.state.clients) == 50
