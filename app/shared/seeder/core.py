"""Core seeder orchestration module."""

from __future__ import annotations

import sys
import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TextIO

from app.core.exceptions import BackupError, TaskHubError
from app.core.logging import get_logger, run_id_ctx
from app.shared.seeder.backup import BackupManager
from app.shared.seeder.fixtures import FixtureGenerator
from app.shared.seeder.progress import MultiStepProgressTracker, format_duration
from app.shared.seeder.stages import (
    Stage,
    StageContext,
    StageResult,
    assert_topological_order,
    build_stages,
)
from app.shared.seeder.validator import Validator

if TYPE_CHECKING:
    from app.shared.documents import DocumentStore
    from app.shared.seeder.config import SeederConfig

logger = get_logger(__name__)


@dataclass
class SeedOptions:
    """Per-run switches.

    Attributes:
        skip_backup: Do not snapshot the store before the first step.
        skip_validation: Persist candidates without rule checks.
        skip_progress: Render no progress bars.
        modules: Case-insensitive substrings selecting steps by name or key.
    """

    skip_backup: bool = False
    skip_validation: bool = False
    skip_progress: bool = False
    modules: list[str] | None = None


@dataclass
class SeederResult:
    """Result of a seeding run.

    Attributes:
        results: Stage results keyed by stage key, in execution order.
        counts: Documents created per entity kind.
        duration: Wall-clock seconds.
        seed: Random seed used.
        profile: Environment profile name.
        backup_id: Pre-run snapshot, if one was taken.
        run_id: Correlation id bound to every log event of the run.
    """

    results: dict[str, StageResult] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)
    duration: float = 0.0
    seed: int = 12345
    profile: str = "development"
    backup_id: str | None = None
    run_id: str | None = None

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def steps(self) -> list[str]:
        return list(self.results)

    @property
    def skipped(self) -> int:
        return sum(result.skipped for result in self.results.values())

    @property
    def warnings(self) -> list[str]:
        return [warning for result in self.results.values() for warning in result.warnings]

    def get(self, kind: str) -> list[dict[str, Any]]:
        """Every document of one kind created during the run."""
        return [doc for result in self.results.values() for doc in result.get(kind)]


class DatabaseSeeder:
    """Runs the seeding pipeline against a document store.

    Steps run strictly in the fixed master order. Each stage receives the
    results of the stages before it; the first exception fails its step and
    aborts the run.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: SeederConfig,
        backup_manager: BackupManager | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize the seeder.

        Args:
            store: Target document store.
            config: Seeder configuration.
            backup_manager: Snapshot manager (defaults to one on ``store``).
            stream: Output for progress and the final summary (defaults to stdout).

        Raises:
            ConfigurationError: If a stage reads a stage that runs after it.
        """
        self.store = store
        self.config = config
        self.backup_manager = backup_manager or BackupManager(store)
        self.stream = stream or sys.stdout
        self.stages = build_stages()
        assert_topological_order(self.stages)
        self.last_result: SeederResult | None = None

    def validate_configuration(self) -> None:
        """Raises ConfigurationError for invalid counts or ranges."""
        self.config.validate()

    def get_steps(self, modules: list[str] | None = None) -> list[Stage]:
        """Steps this configuration runs, in master order.

        Entity steps run when their count or range is non-zero. The clear and
        statistics bookends run only alongside at least one entity step. A
        ``modules`` filter then keeps the steps whose name or key contains
        one of the given substrings, bookends included.

        Args:
            modules: Optional case-insensitive substrings.

        Returns:
            Selected stages.
        """
        has_entities = any(not stage.bookend and stage.enabled(self.config) for stage in self.stages)
        steps = [
            stage
            for stage in self.stages
            if (stage.bookend and has_entities) or (not stage.bookend and stage.enabled(self.config))
        ]
        if modules:
            wanted = [module.strip().lower() for module in modules if module.strip()]
            steps = [
                stage
                for stage in steps
                if any(term in stage.name.lower() or term in stage.key.lower() for term in wanted)
            ]
        return steps

    async def run(self, options: SeedOptions | None = None) -> SeederResult:
        """Seed the store.

        Args:
            options: Per-run switches.

        Returns:
            SeederResult with every stage result and the created counts.

        Raises:
            ConfigurationError: If the configuration is invalid (before any step).
            BackupError: If the pre-run snapshot fails.
            PersistenceError: If a store write fails outside a catching stage.
        """
        options = options or SeedOptions()
        run_id = uuid.uuid4().hex[:12]
        token = run_id_ctx.set(run_id)
        started = time.monotonic()
        try:
            self.validate_configuration()
            steps = self.get_steps(options.modules)
            logger.info(
                "seeder.run.started",
                profile=self.config.profile.value,
                seed=self.config.seed,
                steps=[stage.key for stage in steps],
                skip_validation=options.skip_validation,
            )

            backup_id = None
            if steps and self.config.backup_before_seed and not options.skip_backup:
                backup_id = await self.backup_manager.create_backup(
                    f"Pre-seed backup ({self.config.profile.value})"
                )

            progress = MultiStepProgressTracker(
                [stage.name for stage in steps],
                stream=self.stream,
                enabled=self.config.enable_progress and not options.skip_progress,
            )
            fixtures = FixtureGenerator(self.config.seed, self.config.reference_time)
            ctx = StageContext(
                store=self.store,
                config=self.config,
                fixtures=fixtures,
                validator=Validator(),
                progress=progress,
                skip_validation=options.skip_validation,
            )

            for index, stage in enumerate(steps):
                progress.start_step(index)
                fixtures.reseed(stage.key)
                try:
                    result = await stage.seed(ctx)
                except Exception as e:
                    progress.fail_step(str(e))
                    logger.error(
                        "seeder.step.failed",
                        step=stage.key,
                        policy=stage.failure_policy.value,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    raise
                ctx.results[stage.key] = result
                progress.complete_step(f"{result.count} created")
            progress.complete("Seeding complete")

            counts: dict[str, int] = {}
            for result in ctx.results.values():
                for kind, count in result.counts.items():
                    counts[kind] = counts.get(kind, 0) + count

            seeded = SeederResult(
                results=dict(ctx.results),
                counts=counts,
                duration=time.monotonic() - started,
                seed=self.config.seed,
                profile=self.config.profile.value,
                backup_id=backup_id,
                run_id=run_id,
            )
            self.last_result = seeded
            logger.info(
                "seeder.run.completed",
                counts=counts,
                total=seeded.total,
                skipped=seeded.skipped,
                duration=round(seeded.duration, 3),
                backup_id=backup_id,
            )
            self.print_final_summary(seeded)
            return seeded
        except Exception as e:
            if isinstance(e, TaskHubError):
                e.details.setdefault("run_id", run_id)
            logger.error(
                "seeder.run.failed",
                error=str(e),
                error_type=type(e).__name__,
                duration=round(time.monotonic() - started, 3),
                exc_info=True,
            )
            raise
        finally:
            run_id_ctx.reset(token)

    async def seed(self, options: SeedOptions | None = None) -> SeederResult:
        """Alias of :meth:`run`."""
        return await self.run(options)

    # -------------------------------------------------------------------------
    # Backups
    # -------------------------------------------------------------------------

    async def rollback(self, backup_id: str | None = None) -> dict[str, Any]:
        """Restore a snapshot, the newest one when no id is given.

        Returns:
            ``{"backup_id": ..., "restored": {collection: count}}``.

        Raises:
            BackupError: If no snapshot exists.
            NotFoundError: If ``backup_id`` is unknown.
            RestoreError: If the restore fails part-way.
        """
        if backup_id is None:
            backups = self.backup_manager.list_backups()
            if not backups:
                raise BackupError("No backups available for rollback")
            backup_id = backups[0]["id"]
        logger.info("seeder.rollback.started", backup_id=backup_id)
        restored = await self.backup_manager.restore_backup(backup_id)
        logger.info("seeder.rollback.completed", backup_id=backup_id, documents=sum(restored.values()))
        return {"backup_id": backup_id, "restored": restored}

    def list_backups(self) -> list[dict[str, Any]]:
        return self.backup_manager.list_backups()

    def get_backup_stats(self) -> dict[str, Any]:
        return self.backup_manager.get_backup_stats()

    def cleanup_backups(self, max_age_days: int = 7) -> int:
        """Delete snapshots older than ``max_age_days`` and return how many."""
        return self.backup_manager.cleanup_old_backups(max_age_days)

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    async def get_seeding_stats(self) -> dict[str, int]:
        """Current document count per collection."""
        return await self.store.counts()

    def get_created_data(self) -> dict[str, StageResult]:
        """Stage results of the last completed run (empty before any run)."""
        return dict(self.last_result.results) if self.last_result else {}

    def print_final_summary(self, result: SeederResult) -> None:
        out = self.stream
        out.write("\n" + "=" * 60 + "\n")
        out.write("  Seeding Complete\n")
        out.write("=" * 60 + "\n")
        out.write(f"  Profile:  {result.profile}\n")
        out.write(f"  Seed:     {result.seed}\n")
        out.write(f"  Duration: {format_duration(result.duration)}\n")
        if result.backup_id:
            out.write(f"  Backup:   {result.backup_id}\n")
        out.write("-" * 60 + "\n")
        for kind, count in result.counts.items():
            out.write(f"  {kind:<30} {count:>8,}\n")
        out.write("-" * 60 + "\n")
        out.write(f"  {'Total':<30} {result.total:>8,}\n")
        if result.skipped:
            out.write(f"  {'Skipped':<30} {result.skipped:>8,}\n")

        created_emails = {user["email"] for user in result.get("users")}
        test_users = [user for user in self.config.users.test_users if user.email in created_emails]
        if test_users:
            out.write("\n  Test user credentials:\n")
            for user in test_users:
                out.write(f"    {user.system_role:<12} {user.email:<32} {user.password}\n")
        out.write("\n")
        out.flush()
