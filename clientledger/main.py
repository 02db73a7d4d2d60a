"""
ClientLedger API - Main Application Entry Point
Client, service and debt tracking for small businesses.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from clientledger.core.config import settings
from clientledger.core.database import SessionLocal, init_db, close_db
from clientledger.api.v1.router import api_router
from clientledger.services.backup import InvalidBackupError
from clientledger.services.storage import SqlBlobStore
from clientledger.services.store import AppStore


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Loads the persisted state on startup and releases the database on shutdown.
    """
    # Startup
    print(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f"📊 Environment: {settings.ENVIRONMENT}")

    init_db()
    store = AppStore(
        blob_store=SqlBlobStore(SessionLocal),
        storage_key=settings.STORAGE_KEY,
        debt_due_days=settings.DEBT_DUE_DAYS,
    )
    store.load()
    app.state.store = store
    print(f"✅ State loaded from slot '{settings.STORAGE_KEY}'")

    yield

    # Shutdown
    print("👋 Shutting down...")
    close_db()
    print("✅ Database connections closed")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
## ClientLedger API

Small business administration: clients, services rendered and the debts they generate.

* **Clients** - register and manage clients
* **Services** - completing a service bills the client automatically
* **Debts** - manual debts, payments and overdue tracking
* **Backup** - export and restore all data as JSON
    """,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with a per-field list."""
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "errors": errors,
        },
    )


@app.exception_handler(InvalidBackupError)
async def invalid_backup_handler(request: Request, exc: InvalidBackupError):
    """Report a rejected backup file; the stored data is unchanged."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Invalid backup file",
            "reason": exc.reason,
        },
    )


# Include API router
app.include_router(api_router, prefix="/api/v1")


# Health check endpoint
@app.get(
    "/health",
    tags=["Health"],
    summary="Server health check",
)
async def health_check():
    """Check if the API is running."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


# Root endpoint
@app.get(
    "/",
    tags=["Info"],
    summary="API information",
)
async def root():
    """Get API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Client, service and debt tracking for small businesses",
        "docs": "/docs" if settings.is_development else "Disabled in production",
        "health": "/health",
    }


# For running with uvicorn directly
if __name__ == "__main__":
    import os
    import uvicorn

    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "clientledger.main:app",
        host=settings.HOST,
        port=port,
        reload=settings.is_development,
    )
