"""
API Dependencies.
Access to the application state store and lookups by id.
"""

import logging
from typing import Annotated
from fastapi import Depends, HTTPException, Request, status

from clientledger.schemas.client import Client
from clientledger.schemas.debt import Debt
from clientledger.schemas.service import Service
from clientledger.services.store import AppStore


# Logger
logger = logging.getLogger(__name__)


async def get_store(request: Request) -> AppStore:
    """
    Return the store created at application startup.
    
    Raises:
        HTTPException: If the store has not been initialized
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        logger.error("Application store not initialized")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Store not initialized",
        )
    return store


# Type alias for cleaner route signatures
StoreDep = Annotated[AppStore, Depends(get_store)]


def not_found(detail: str) -> HTTPException:
    """404 error for a missing record."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def client_or_404(store: AppStore, client_id: str) -> Client:
    """Get a client or raise 404."""
    client = store.get_client(client_id)
    if client is None:
        raise not_found("Client not found")
    return client


def service_or_404(store: AppStore, service_id: str) -> Service:
    """Get a service or raise 404."""
    service = store.get_service(service_id)
    if service is None:
        raise not_found("Service not found")
    return service


def debt_or_404(store: AppStore, debt_id: str) -> Debt:
    """Get a debt or raise 404."""
    debt = store.get_debt(debt_id)
    if debt is None:
        raise not_found("Debt not found")
    return debt


def check_debt_references(store: AppStore, client_id: str, service_id: str | None) -> None:
    """
    Check that a debt's client exists and that its service, if any,
    belongs to that client.
    
    Raises:
        HTTPException: 404 for a missing record, 400 for a foreign service
    """
    client_or_404(store, client_id)
    if service_id is None:
        return
    
    service = service_or_404(store, service_id)
    if service.client_id != client_id:
        logger.warning(f"Service {service_id} does not belong to client {client_id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Service belongs to another client",
        )
