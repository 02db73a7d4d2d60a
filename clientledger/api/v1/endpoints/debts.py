"""
Debt management endpoints.
Listing debts reclassifies the overdue ones.
"""

import asyncio
from fastapi import APIRouter, Query, status

from clientledger.api.deps import (
    StoreDep,
    check_debt_references,
    debt_or_404,
    not_found,
)
from clientledger.schemas.base import MessageResponse
from clientledger.schemas.debt import Debt, DebtCreate, DebtStatus, DebtUpdate


router = APIRouter()


@router.post(
    "",
    response_model=Debt,
    status_code=status.HTTP_201_CREATED,
    summary="Create a debt",
    description="Create a standalone debt; a linked service must belong to the same client",
)
async def create_debt(data: DebtCreate, store: StoreDep) -> Debt:
    """Create a standalone debt."""
    check_debt_references(store, data.client_id, data.service_id)
    return await asyncio.to_thread(store.add_debt, data)


@router.get(
    "",
    response_model=list[Debt],
    summary="List debts",
)
async def list_debts(
    store: StoreDep,
    client_id: str | None = Query(None, alias="clientId", description="Filter by client"),
    status_filter: DebtStatus | None = Query(None, alias="status", description="Filter by status"),
) -> list[Debt]:
    return await asyncio.to_thread(
        store.list_debts,
        client_id=client_id,
        status=status_filter,
    )


@router.get(
    "/{debt_id}",
    response_model=Debt,
    summary="Debt details",
)
async def get_debt(debt_id: str, store: StoreDep) -> Debt:
    await asyncio.to_thread(store.refresh_overdue)
    return debt_or_404(store, debt_id)


@router.patch(
    "/{debt_id}",
    response_model=Debt,
    summary="Update a debt",
)
async def update_debt(debt_id: str, data: DebtUpdate, store: StoreDep) -> Debt:
    """Update a debt."""
    current = debt_or_404(store, debt_id)
    changes = data.changes()
    if "client_id" in changes or "service_id" in changes:
        check_debt_references(
            store,
            changes.get("client_id", current.client_id),
            changes.get("service_id", current.service_id),
        )
    
    debt = await asyncio.to_thread(store.update_debt, debt_id, data)
    if debt is None:
        raise not_found("Debt not found")
    return debt


@router.post(
    "/{debt_id}/pay",
    response_model=Debt,
    summary="Pay a debt",
    description="Mark a debt as paid now; paying it again keeps the first payment date",
)
async def pay_debt(debt_id: str, store: StoreDep) -> Debt:
    debt = await asyncio.to_thread(store.pay_debt, debt_id)
    if debt is None:
        raise not_found("Debt not found")
    return debt


@router.delete(
    "/{debt_id}",
    response_model=MessageResponse,
    summary="Delete a debt",
)
async def delete_debt(debt_id: str, store: StoreDep) -> MessageResponse:
    if not await asyncio.to_thread(store.delete_debt, debt_id):
        raise not_found("Debt not found")
    return MessageResponse(message="Debt deleted")
