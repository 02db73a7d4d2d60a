"""
Client management endpoints.
CRUD operations for clients.
"""

import asyncio
from fastapi import APIRouter, status

from clientledger.api.deps import StoreDep, client_or_404, not_found
from clientledger.schemas.base import MessageResponse
from clientledger.schemas.client import Client, ClientCreate, ClientUpdate


router = APIRouter()


@router.post(
    "",
    response_model=Client,
    status_code=status.HTTP_201_CREATED,
    summary="Create a client",
)
async def create_client(data: ClientCreate, store: StoreDep) -> Client:
    """Create a new client."""
    return await asyncio.to_thread(store.add_client, data)


@router.get(
    "",
    response_model=list[Client],
    summary="List clients",
    description="All clients in registration order",
)
async def list_clients(store: StoreDep) -> list[Client]:
    return store.clients


@router.get(
    "/{client_id}",
    response_model=Client,
    summary="Client details",
)
async def get_client(client_id: str, store: StoreDep) -> Client:
    """Get client by ID."""
    return client_or_404(store, client_id)


@router.patch(
    "/{client_id}",
    response_model=Client,
    summary="Update a client",
)
async def update_client(client_id: str, data: ClientUpdate, store: StoreDep) -> Client:
    """Update a client."""
    client = await asyncio.to_thread(store.update_client, client_id, data)
    if client is None:
        raise not_found("Client not found")
    return client


@router.delete(
    "/{client_id}",
    response_model=MessageResponse,
    summary="Delete a client",
    description="Delete a client together with all of its services and debts",
)
async def delete_client(client_id: str, store: StoreDep) -> MessageResponse:
    """Delete a client."""
    if not await asyncio.to_thread(store.delete_client, client_id):
        raise not_found("Client not found")
    return MessageResponse(message="Client deleted")
