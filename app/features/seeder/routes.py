"""FastAPI routes for seeder operations.

Provides REST endpoints for running the seeding pipeline and managing
snapshots from an operator dashboard. Errors are returned as RFC 7807
problem details carrying the run id when a run was active.
"""

import asyncio

from fastapi import APIRouter, Depends, Query, status

from app.core.logging import get_logger
from app.features.seeder import schemas, service
from app.shared.documents import DocumentStore, get_document_store

router = APIRouter(prefix="/seeder", tags=["seeder"])
logger = get_logger(__name__)


@router.get(
    "/status",
    response_model=schemas.SeederStatus,
    summary="Get store status",
    description="Returns document counts per collection and snapshot state.",
)
async def get_status(
    store: DocumentStore = Depends(get_document_store),
) -> schemas.SeederStatus:
    """Get current document counts and the newest snapshot."""
    return await service.get_status(store)


@router.get(
    "/profiles",
    response_model=list[schemas.ProfileInfo],
    summary="List environment profiles",
    description="Returns the development, test and production profiles with their target counts.",
)
async def list_profiles() -> list[schemas.ProfileInfo]:
    """List environment profiles and the steps each one runs."""
    return service.list_profiles()


@router.post(
    "/run",
    response_model=schemas.RunResult,
    status_code=status.HTTP_201_CREATED,
    summary="Run the seeding pipeline",
    description="Clear the store and seed it from a profile. Blocked in production unless allowed.",
)
async def run_seeder(
    params: schemas.RunParams,
    store: DocumentStore = Depends(get_document_store),
) -> schemas.RunResult:
    """Run the seeding pipeline.

    **Warning:** the first step deletes every document in the store. A
    snapshot is taken beforehand unless ``skip_backup`` is set or backups
    are disabled.

    Args:
        params: Profile, seed, module filter and per-run switches.

    Returns:
        RunResult with per-step counts.
    """
    return await service.run_seeder(store, params)


@router.get(
    "/backups",
    response_model=list[schemas.BackupInfo],
    summary="List snapshots",
    description="Returns snapshot metadata, newest first.",
)
async def list_backups(
    store: DocumentStore = Depends(get_document_store),
) -> list[schemas.BackupInfo]:
    return await asyncio.to_thread(service.list_backups, store)


@router.get(
    "/backups/stats",
    response_model=schemas.BackupStats,
    summary="Snapshot statistics",
)
async def get_backup_stats(
    store: DocumentStore = Depends(get_document_store),
) -> schemas.BackupStats:
    return await asyncio.to_thread(service.get_backup_stats, store)


@router.post(
    "/rollback",
    response_model=schemas.RollbackResult,
    summary="Restore a snapshot",
    description="Replace the store content with a snapshot, the newest one when no id is given.",
)
async def rollback(
    params: schemas.RollbackParams,
    store: DocumentStore = Depends(get_document_store),
) -> schemas.RollbackResult:
    """Restore a snapshot.

    Restores are best-effort: a failure part-way leaves the store partially
    restored and is reported as a RESTORE_ERROR problem.
    """
    return await service.rollback(store, params)


@router.delete(
    "/backups",
    response_model=schemas.CleanupResult,
    summary="Delete old snapshots",
    description="Delete snapshots older than max_age_days (SEEDER_BACKUP_MAX_AGE_DAYS by default).",
)
async def cleanup_backups(
    max_age_days: int | None = Query(default=None, ge=0, description="Age threshold in days"),
    store: DocumentStore = Depends(get_document_store),
) -> schemas.CleanupResult:
    result = await asyncio.to_thread(service.cleanup_backups, store, max_age_days)
    logger.info(
        "seeder.backups.cleaned",
        deleted=result.deleted,
        max_age_days=result.max_age_days,
    )
    return result
