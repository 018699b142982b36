"""Analytics derived from the run's workspaces, users and tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.shared.seeder.generators import AnalyticsGenerator
from app.shared.seeder.stages.base import Stage, StageOutput, StageResult

if TYPE_CHECKING:
    from app.shared.seeder.config import SeederConfig
    from app.shared.seeder.stages.base import StageContext


class AnalyticsStage(Stage):
    """One document per workspace, one per user and one system-wide."""

    name = "Create Analytics"
    key = "analytics"
    reads = ("users", "workspaces", "tasks")
    collections = ("analytics",)

    def enabled(self, config: SeederConfig) -> bool:
        return config.analytics.enabled

    async def seed(self, ctx: StageContext) -> StageResult:
        users = await ctx.resolve("users", "users")
        workspaces = await ctx.resolve("workspaces", "workspaces")
        if not users and not workspaces:
            return self.missing(ctx, "users or workspaces")

        out = StageOutput(self.key)
        tasks = await ctx.resolve("tasks", "tasks")
        generator = AnalyticsGenerator(ctx.fixtures)
        ctx.progress.set_step_total(len(workspaces) + len(users) + 1)

        for workspace in workspaces:
            await self.persist(ctx, "analytics", generator.for_workspace(workspace, tasks), out)
            ctx.progress.update_step(message=workspace["name"])
        for user in users:
            await self.persist(ctx, "analytics", generator.for_user(user, tasks), out)
            ctx.progress.update_step(message=user["email"])
        await self.persist(ctx, "analytics", generator.for_system(users, workspaces, tasks), out)
        ctx.progress.update_step(message="system")

        return self.finish(
            ctx,
            out,
            summary={"workspaces": len(workspaces), "users": len(users), "tasks": len(tasks)},
        )
