"""Service layer for seeder operations."""

from __future__ import annotations

import io

from app.core.config import get_settings
from app.core.exceptions import SeederDisabledError
from app.core.logging import get_logger
from app.features.seeder import schemas
from app.shared.documents import DocumentStore, MemoryDocumentStore
from app.shared.seeder import BackupManager, DatabaseSeeder, EnvironmentProfile, SeederConfig, SeedOptions

logger = get_logger(__name__)

PROFILE_DESCRIPTIONS = {
    EnvironmentProfile.DEVELOPMENT: "Full local dataset with five fixed accounts and every entity kind",
    EnvironmentProfile.TEST: "Small deterministic dataset with an admin and a regular test account",
    EnvironmentProfile.PRODUCTION: "Seeds nothing; only the standalone template runner applies",
}


def ensure_seeding_allowed() -> None:
    """Block mutating operations in production unless explicitly allowed.

    Raises:
        SeederDisabledError: If APP_ENV is production and SEEDER_ALLOW_PRODUCTION is unset.
    """
    settings = get_settings()
    if settings.is_production and not settings.seeder_allow_production:
        logger.warning("seeder.blocked", reason="production_guard")
        raise SeederDisabledError()


def _seeder(store: DocumentStore, config: SeederConfig | None = None) -> DatabaseSeeder:
    settings = get_settings()
    # Summary and progress output stay off the server's stdout
    return DatabaseSeeder(
        store,
        config or SeederConfig.from_settings(settings),
        backup_manager=BackupManager(store, settings.seeder_backup_dir),
        stream=io.StringIO(),
    )


async def get_status(store: DocumentStore) -> schemas.SeederStatus:
    """Get current document counts and backup state.

    Args:
        store: Document store.

    Returns:
        SeederStatus with counts per collection.
    """
    logger.info("seeder.status.fetching")

    seeder = _seeder(store)
    counts = await seeder.get_seeding_stats()
    backups = seeder.list_backups()

    status = schemas.SeederStatus(
        database=store.name,
        profile=seeder.config.profile.value,
        collections=counts,
        total_documents=sum(counts.values()),
        backups=len(backups),
        latest_backup=backups[0]["id"] if backups else None,
    )

    logger.info(
        "seeder.status.fetched",
        collections=len(counts),
        total_documents=status.total_documents,
    )
    return status


def list_profiles() -> list[schemas.ProfileInfo]:
    """Describe every environment profile.

    Returns:
        ProfileInfo per profile, in declaration order.
    """
    profiles = []
    for profile in EnvironmentProfile:
        config = SeederConfig.from_profile(profile)
        steps = DatabaseSeeder(MemoryDocumentStore("profiles"), config, stream=io.StringIO()).get_steps()
        profiles.append(
            schemas.ProfileInfo(
                name=profile.value,
                description=PROFILE_DESCRIPTIONS[profile],
                counts=config.summary(),
                test_users=[user.email for user in config.users.test_users],
                steps=[stage.key for stage in steps],
            )
        )

    logger.info("seeder.profiles.listed", count=len(profiles))
    return profiles


async def run_seeder(store: DocumentStore, params: schemas.RunParams) -> schemas.RunResult:
    """Run the seeding pipeline.

    Args:
        store: Target document store.
        params: Profile, seed and per-run switches.

    Returns:
        RunResult with per-step counts.

    Raises:
        SeederDisabledError: If the production guard blocks the run.
        ConfigurationError: If the resolved configuration is invalid.
        PersistenceError: If a store write aborts the run.
        BackupError: If the pre-run snapshot fails.
    """
    ensure_seeding_allowed()

    config = SeederConfig.from_settings(get_settings(), profile=params.profile, seed=params.seed)
    logger.info(
        "seeder.api_run.started",
        profile=config.profile.value,
        seed=config.seed,
        modules=params.modules,
    )

    seeder = _seeder(store, config)
    result = await seeder.run(
        SeedOptions(
            skip_backup=params.skip_backup,
            skip_validation=params.skip_validation,
            skip_progress=True,
            modules=params.modules,
        )
    )

    if result.steps:
        message = f"Seeded {result.total:,} documents in {len(result.steps)} step(s) with seed {result.seed}"
    else:
        message = f"Nothing to seed for profile '{result.profile}'"

    logger.info(
        "seeder.api_run.completed",
        run_id=result.run_id,
        total=result.total,
        duration_seconds=round(result.duration, 2),
    )

    return schemas.RunResult(
        success=True,
        run_id=result.run_id,
        profile=result.profile,
        seed=result.seed,
        steps=[
            schemas.StepResult(
                key=stage.key,
                created=stage.counts,
                skipped=stage.skipped,
                warnings=list(stage.warnings),
            )
            for stage in result.results.values()
        ],
        records_created=result.counts,
        total_created=result.total,
        skipped=result.skipped,
        backup_id=result.backup_id,
        duration_seconds=round(result.duration, 2),
        message=message,
    )


def list_backups(store: DocumentStore) -> list[schemas.BackupInfo]:
    """List snapshots, newest first."""
    backups = [schemas.BackupInfo.model_validate(meta) for meta in _seeder(store).list_backups()]
    logger.info("seeder.backups.listed", count=len(backups))
    return backups


def get_backup_stats(store: DocumentStore) -> schemas.BackupStats:
    return schemas.BackupStats.model_validate(_seeder(store).get_backup_stats())


async def rollback(store: DocumentStore, params: schemas.RollbackParams) -> schemas.RollbackResult:
    """Restore a snapshot.

    Args:
        store: Document store to overwrite.
        params: Snapshot to restore (newest when omitted).

    Returns:
        RollbackResult with restored counts.

    Raises:
        SeederDisabledError: If the production guard blocks the rollback.
        BackupError: If no snapshot exists.
        NotFoundError: If the requested snapshot does not exist.
        RestoreError: If the restore fails part-way.
    """
    ensure_seeding_allowed()

    outcome = await _seeder(store).rollback(params.backup_id)
    total = sum(outcome["restored"].values())
    return schemas.RollbackResult(
        success=True,
        backup_id=outcome["backup_id"],
        restored=outcome["restored"],
        total_documents=total,
        message=f"Restored {total:,} documents from {outcome['backup_id']}",
    )


def cleanup_backups(store: DocumentStore, max_age_days: int | None = None) -> schemas.CleanupResult:
    """Delete snapshots older than ``max_age_days`` (SEEDER_BACKUP_MAX_AGE_DAYS by default).

    Raises:
        SeederDisabledError: If the production guard blocks the cleanup.
    """
    ensure_seeding_allowed()

    days = get_settings().seeder_backup_max_age_days if max_age_days is None else max_age_days
    seeder = _seeder(store)
    deleted = seeder.cleanup_backups(days)
    return schemas.CleanupResult(
        deleted=deleted,
        max_age_days=days,
        remaining=len(seeder.list_backups()),
    )
