"""Stage contract shared by every step of the seeding pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from app.core.exceptions import (
    ConfigurationError,
    DependencyMissingError,
    PersistenceError,
    SeedValidationError,
)
from app.core.logging import get_logger
from app.shared.documents import matches

if TYPE_CHECKING:
    from app.shared.documents import DocumentStore
    from app.shared.seeder.config import SeederConfig
    from app.shared.seeder.fixtures import FixtureGenerator
    from app.shared.seeder.progress import MultiStepProgressTracker
    from app.shared.seeder.validator import Validator

logger = get_logger(__name__)

Doc = dict[str, Any]


class FailurePolicy(str, Enum):
    """How a stage reacts to a failing record.

    ABORT: any error fails the step and the run.
    SKIP_RECORD: invalid candidates are skipped; store errors abort.
    CATCH_AND_CONTINUE: invalid candidates and store errors are skipped.
    """

    ABORT = "abort"
    SKIP_RECORD = "skip-record"
    CATCH_AND_CONTINUE = "catch-and-continue"


@dataclass(frozen=True)
class StageResult:
    """Immutable outcome of one stage.

    Attributes:
        key: Stage key.
        created: Persisted documents per entity kind.
        skipped: Candidates dropped by validation or caught store errors.
        warnings: Human-readable warnings raised during the stage.
        summary: Stage-specific figures (statistics, integrity findings).
    """

    key: str
    created: Mapping[str, tuple[Doc, ...]] = field(default_factory=dict)
    skipped: int = 0
    warnings: tuple[str, ...] = ()
    summary: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "created",
            MappingProxyType({kind: tuple(docs) for kind, docs in self.created.items()}),
        )
        object.__setattr__(self, "warnings", tuple(self.warnings))
        object.__setattr__(self, "summary", MappingProxyType(dict(self.summary)))

    def get(self, kind: str) -> tuple[Doc, ...]:
        """Documents of one kind (empty when the stage created none)."""
        return self.created.get(kind, ())

    @property
    def count(self) -> int:
        return sum(len(docs) for docs in self.created.values())

    @property
    def counts(self) -> dict[str, int]:
        return {kind: len(docs) for kind, docs in self.created.items()}


class StageOutput:
    """Mutable accumulator a stage fills before freezing it into a result."""

    def __init__(self, key: str) -> None:
        self.key = key
        self.created: dict[str, list[Doc]] = {}
        self.skipped = 0
        self.warnings: list[str] = []

    def add(self, kind: str, document: Doc) -> None:
        self.created.setdefault(kind, []).append(document)

    def get(self, kind: str) -> list[Doc]:
        return self.created.get(kind, [])

    def skip(self, warning: str | None = None) -> None:
        self.skipped += 1
        if warning:
            self.warnings.append(warning)

    def freeze(self, summary: Mapping[str, Any] | None = None) -> StageResult:
        return StageResult(
            key=self.key,
            created=self.created,
            skipped=self.skipped,
            warnings=tuple(self.warnings),
            summary=summary or {},
        )


@dataclass
class StageContext:
    """Everything a stage needs for one run.

    Attributes:
        store: Backing document store.
        config: Run configuration.
        fixtures: The run's seeded fixture generator.
        validator: Record validator.
        progress: Multi-step progress tracker.
        skip_validation: Persist candidates without rule checks.
        results: Results of the stages that already ran, keyed by stage key.
        password_cache: bcrypt hash per distinct plain-text password.
    """

    store: DocumentStore
    config: SeederConfig
    fixtures: FixtureGenerator
    validator: Validator
    progress: MultiStepProgressTracker
    skip_validation: bool = False
    results: dict[str, StageResult] = field(default_factory=dict)
    password_cache: dict[str, str] = field(default_factory=dict)

    def result(self, key: str) -> StageResult | None:
        return self.results.get(key)

    async def resolve(
        self,
        stage_key: str,
        kind: str,
        collection: str | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> list[Doc]:
        """Upstream documents for a dependent stage.

        Prefers the upstream stage's result from this run; when that stage
        did not run, falls back to a bounded store query. ``query`` filters
        both sources.

        Args:
            stage_key: Key of the upstream stage.
            kind: Entity kind inside the upstream result.
            collection: Store collection to query (defaults to ``kind``).
            query: Optional filter for the fallback query.

        Returns:
            Upstream documents (possibly empty).
        """
        upstream = self.results.get(stage_key)
        if upstream is not None:
            return [doc for doc in upstream.get(kind) if matches(doc, query)]
        documents = await self.store.collection(collection or kind).find(
            query, limit=self.config.fallback_limit
        )
        logger.debug(
            "seeder.dependency.fallback",
            stage=stage_key,
            collection=collection or kind,
            count=len(documents),
        )
        return documents


class Stage(ABC):
    """One step of the seeding pipeline.

    Subclasses declare the stages they read from in ``reads``; the pipeline
    asserts that those stages come earlier in the order.
    """

    name: ClassVar[str]
    key: ClassVar[str]
    reads: ClassVar[tuple[str, ...]] = ()
    collections: ClassVar[tuple[str, ...]] = ()
    failure_policy: ClassVar[FailurePolicy] = FailurePolicy.SKIP_RECORD
    bookend: ClassVar[bool] = False

    def enabled(self, config: SeederConfig) -> bool:
        """Whether the configuration asks this stage to produce anything."""
        return True

    @abstractmethod
    async def seed(self, ctx: StageContext) -> StageResult:
        """Run the stage and return its frozen result."""

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def accept(self, ctx: StageContext, kind: str, candidate: Mapping[str, Any], out: StageOutput) -> bool:
        """Validate a candidate; log and count it as skipped when invalid."""
        if ctx.skip_validation:
            return True
        result = ctx.validator.validate(kind, candidate)
        for warning in result.warnings:
            logger.debug("seeder.record.warning", stage=self.key, entity=kind, warning=warning)
        if result.is_valid:
            return True

        error = SeedValidationError(kind, result.errors, result.warnings)
        logger.warning(
            "seeder.record.skipped",
            stage=self.key,
            entity=kind,
            errors=result.errors,
        )
        ctx.progress.warn(error.message)
        out.skip(error.message)
        return False

    async def persist(
        self,
        ctx: StageContext,
        collection: str,
        document: Doc,
        out: StageOutput,
        kind: str | None = None,
    ) -> bool:
        """Write one document and record it in ``out``.

        Store errors propagate unless the stage catches and continues.

        Returns:
            True when the document was stored.
        """
        try:
            await ctx.store.collection(collection).create(document)
        except PersistenceError as e:
            if self.failure_policy is not FailurePolicy.CATCH_AND_CONTINUE:
                raise
            logger.warning(
                "seeder.record.persist_failed",
                stage=self.key,
                collection=collection,
                error=e.message,
            )
            ctx.progress.error(f"Failed to create {collection} record: {e.message}")
            out.skip(e.message)
            return False
        out.add(kind or collection, document)
        return True

    async def store_all(
        self,
        ctx: StageContext,
        kind: str,
        collection: str,
        candidates: Sequence[Doc],
        out: StageOutput,
    ) -> None:
        """Validate and persist each candidate in order."""
        for candidate in candidates:
            if self.accept(ctx, kind, candidate, out):
                await self.persist(ctx, collection, candidate, out)

    def finish(
        self,
        ctx: StageContext,
        out: StageOutput,
        summary: Mapping[str, Any] | None = None,
    ) -> StageResult:
        """Freeze the output and log what the stage created."""
        result = out.freeze(summary)
        logger.info(
            f"seeder.{self.key}.created",
            counts=result.counts,
            skipped=result.skipped,
        )
        if result.skipped:
            ctx.progress.warn(f"{self.name}: skipped {result.skipped} record(s)")
        return result

    def missing(self, ctx: StageContext, dependency: str) -> StageResult:
        """Empty result for a stage whose required upstream is empty."""
        error = DependencyMissingError(self.name, dependency)
        logger.warning("seeder.stage.dependency_missing", stage=self.key, dependency=dependency)
        ctx.progress.warn(error.message)
        return StageResult(key=self.key, warnings=(error.message,))


def assert_topological_order(stages: Sequence[Stage]) -> None:
    """Check that every stage only reads stages placed before it.

    Raises:
        ConfigurationError: If a stage reads itself, a later stage or an
            unknown stage.
    """
    seen: set[str] = set()
    for stage in stages:
        unresolved = [key for key in stage.reads if key not in seen]
        if unresolved:
            raise ConfigurationError(
                f"Stage {stage.key!r} reads {unresolved} before they run",
                details={"stage": stage.key, "unresolved": unresolved},
            )
        seen.add(stage.key)
