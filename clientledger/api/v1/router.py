"""
API v1 router - aggregates all endpoint routers.
"""

from fastapi import APIRouter

from clientledger.api.v1.endpoints import (
    clients,
    services,
    debts,
    dashboard,
    backup,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    clients.router,
    prefix="/clients",
    tags=["Clients"],
)

api_router.include_router(
    services.router,
    prefix="/services",
    tags=["Services"],
)

api_router.include_router(
    debts.router,
    prefix="/debts",
    tags=["Debts"],
)

api_router.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["Dashboard"],
)

api_router.include_router(
    backup.router,
    prefix="/backup",
    tags=["Backup"],
)
