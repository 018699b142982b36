"""Steps that open and close a seeding run."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from app.core.logging import get_logger
from app.shared.seeder.stages.base import FailurePolicy, Stage, StageResult

if TYPE_CHECKING:
    from app.shared.seeder.stages.base import StageContext

logger = get_logger(__name__)

# (stage key, kind, field, referenced collection)
REFERENCES: list[tuple[str, str, str, str]] = [
    ("workspaces", "workspaces", "owner", "users"),
    ("spaces", "spaces", "workspace", "workspaces"),
    ("spaces", "spaces", "owner", "users"),
    ("boards", "boards", "space", "spaces"),
    ("boards", "boards", "owner", "users"),
    ("boards", "columns", "board", "boards"),
    ("tasks", "tasks", "board", "boards"),
    ("tasks", "tasks", "column", "columns"),
    ("tasks", "tasks", "assignees", "users"),
    ("tasks", "tasks", "reporter", "users"),
    ("tasks", "tasks", "watchers", "users"),
    ("tasks", "tasks", "tags", "tags"),
    ("comments", "comments", "task", "tasks"),
    ("comments", "comments", "author", "users"),
    ("notifications", "notifications", "recipient", "users"),
    ("notifications", "notifications", "task", "tasks"),
    ("reminders", "reminders", "user", "users"),
    ("reminders", "reminders", "task", "tasks"),
    ("files", "files", "uploaded_by", "users"),
    ("files", "files", "task", "tasks"),
    ("invitations", "invitations", "invited_by", "users"),
    ("invitations", "invitations", "workspace", "workspaces"),
]


class ClearDatabaseStage(Stage):
    """Delete every document from every collection."""

    name = "Clear Database"
    key = "clear"
    bookend: ClassVar[bool] = True
    failure_policy = FailurePolicy.ABORT

    async def seed(self, ctx: StageContext) -> StageResult:
        removed = await ctx.store.clear_all()
        total = sum(removed.values())
        ctx.progress.set_step_total(max(len(removed), 1))
        ctx.progress.update_step(len(removed))
        logger.info("seeder.clear.completed", collections=len(removed), documents=total)
        return StageResult(key=self.key, summary={"removed": removed, "total_removed": total})


class UpdateStatisticsStage(Stage):
    """Read-only closing step: per-collection counts and dangling references.

    Only documents created during this run are checked; their references are
    resolved against the whole store, since subset runs point at documents
    seeded earlier.
    """

    name = "Update Statistics"
    key = "statistics"
    bookend: ClassVar[bool] = True
    failure_policy = FailurePolicy.ABORT

    async def seed(self, ctx: StageContext) -> StageResult:
        counts = await ctx.store.counts()
        checks = [ref for ref in REFERENCES if ref[0] in ctx.results]
        ctx.progress.set_step_total(len(checks) + 1)
        ctx.progress.update_step()

        known: dict[str, set[str]] = {}
        dangling: dict[str, int] = {}
        warnings: list[str] = []
        for stage_key, kind, field_name, target in checks:
            if target not in known:
                known[target] = {doc["_id"] for doc in await ctx.store.collection(target).find()}
            missing = 0
            for doc in ctx.results[stage_key].get(kind):
                missing += sum(1 for ref in _references(doc.get(field_name)) if ref not in known[target])
            if missing:
                label = f"{kind}.{field_name}"
                dangling[label] = missing
                warnings.append(f"{missing} {label} reference(s) point at missing {target}")
            ctx.progress.update_step()

        for warning in warnings:
            ctx.progress.warn(warning)
        logger.info(
            "seeder.statistics.completed",
            collections=len(counts),
            documents=sum(counts.values()),
            dangling_references=sum(dangling.values()),
        )
        return StageResult(
            key=self.key,
            warnings=tuple(warnings),
            summary={
                "counts": counts,
                "total_documents": sum(counts.values()),
                "dangling_references": dangling,
            },
        )


def _references(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return [value]
