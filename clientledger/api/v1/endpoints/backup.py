"""
Backup endpoints.
Export the whole state as a JSON file and restore it.
"""

import asyncio
from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import Response

from clientledger.api.deps import StoreDep
from clientledger.schemas.backup import RestoreSummary
from clientledger.services.backup import BackupService


router = APIRouter()


@router.get(
    "/export",
    summary="Export data",
    description="Download every client, service and debt as a JSON backup file",
)
async def export_backup(store: StoreDep) -> Response:
    service = BackupService(store)
    filename = service.backup_filename(store.now())
    
    return Response(
        content=await asyncio.to_thread(service.export_json),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/restore",
    response_model=RestoreSummary,
    summary="Restore data",
    description="Replace all data with the JSON backup sent as request body",
)
async def restore_backup(request: Request, store: StoreDep) -> RestoreSummary:
    # Raw body so that malformed JSON is reported as an invalid backup
    raw = await request.body()
    return await asyncio.to_thread(BackupService(store).restore, raw)


@router.post(
    "/restore/file",
    response_model=RestoreSummary,
    summary="Restore data from a file",
    description="Replace all data with an uploaded JSON backup file",
)
async def restore_backup_file(
    store: StoreDep,
    file: UploadFile = File(..., description="Backup file (.json)"),
) -> RestoreSummary:
    raw = await file.read()
    return await asyncio.to_thread(BackupService(store).restore, raw)
