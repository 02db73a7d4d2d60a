"""
Service management endpoints.
Completing a service bills the client automatically.
"""

import asyncio
from fastapi import APIRouter, Query, status

from clientledger.api.deps import StoreDep, client_or_404, not_found, service_or_404
from clientledger.schemas.base import MessageResponse
from clientledger.schemas.service import (
    Service,
    ServiceCreate,
    ServiceStatus,
    ServiceUpdate,
)


router = APIRouter()


@router.post(
    "",
    response_model=Service,
    status_code=status.HTTP_201_CREATED,
    summary="Create a service",
    description="Create a service; a completed service generates a debt due in 30 days",
)
async def create_service(data: ServiceCreate, store: StoreDep) -> Service:
    """Create a new service for an existing client."""
    client_or_404(store, data.client_id)
    return await asyncio.to_thread(store.add_service, data)


@router.get(
    "",
    response_model=list[Service],
    summary="List services",
)
async def list_services(
    store: StoreDep,
    client_id: str | None = Query(None, alias="clientId", description="Filter by client"),
    status_filter: ServiceStatus | None = Query(None, alias="status", description="Filter by status"),
) -> list[Service]:
    return store.list_services(client_id=client_id, status=status_filter)


@router.get(
    "/{service_id}",
    response_model=Service,
    summary="Service details",
)
async def get_service(service_id: str, store: StoreDep) -> Service:
    return service_or_404(store, service_id)


@router.patch(
    "/{service_id}",
    response_model=Service,
    summary="Update a service",
    description=(
        "Marking a service completed generates its debt if it has none yet; "
        "moving it to another client moves its debts too"
    ),
)
async def update_service(service_id: str, data: ServiceUpdate, store: StoreDep) -> Service:
    """Update a service."""
    service_or_404(store, service_id)
    if data.client_id is not None:
        client_or_404(store, data.client_id)
    
    service = await asyncio.to_thread(store.update_service, service_id, data)
    if service is None:
        raise not_found("Service not found")
    return service


@router.delete(
    "/{service_id}",
    response_model=MessageResponse,
    summary="Delete a service",
    description="Delete a service and every debt attached to it, paid ones included",
)
async def delete_service(service_id: str, store: StoreDep) -> MessageResponse:
    """Delete a service."""
    if not await asyncio.to_thread(store.delete_service, service_id):
        raise not_found("Service not found")
    return MessageResponse(message="Service deleted")
