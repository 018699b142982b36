"""Per-user activity: notifications, reminders, files and invitations."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from app.shared.seeder.generators import (
    FileGenerator,
    InvitationGenerator,
    NotificationGenerator,
    ReminderGenerator,
)
from app.shared.seeder.generators.tasks import participants
from app.shared.seeder.stages.base import Stage, StageOutput, StageResult

if TYPE_CHECKING:
    from app.shared.seeder.config import SeederConfig
    from app.shared.seeder.stages.base import StageContext


def tasks_of(user: Mapping[str, Any], tasks: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Tasks the user is assigned to, reports or watches."""
    return [task for task in tasks if user["_id"] in participants(task)]


class NotificationStage(Stage):
    name = "Create Notifications"
    key = "notifications"
    reads = ("users", "tasks")
    collections = ("notifications",)

    def enabled(self, config: SeederConfig) -> bool:
        return config.notifications.per_user.enabled

    async def seed(self, ctx: StageContext) -> StageResult:
        users = await ctx.resolve("users", "users")
        if not users:
            return self.missing(ctx, "users")

        out = StageOutput(self.key)
        tasks = await ctx.resolve("tasks", "tasks")
        generator = NotificationGenerator(ctx.fixtures, ctx.config.notifications)
        ctx.progress.set_step_total(len(users))
        for user in users:
            candidates = generator.generate_for(user, tasks_of(user, tasks))
            await self.store_all(ctx, "notification", "notifications", candidates, out)
            ctx.progress.update_step(message=user["email"])
        return self.finish(ctx, out)


class ReminderStage(Stage):
    name = "Create Reminders"
    key = "reminders"
    reads = ("users", "tasks")
    collections = ("reminders",)

    def enabled(self, config: SeederConfig) -> bool:
        return config.reminders.per_user.enabled

    async def seed(self, ctx: StageContext) -> StageResult:
        users = await ctx.resolve("users", "users")
        if not users:
            return self.missing(ctx, "users")

        out = StageOutput(self.key)
        tasks = await ctx.resolve("tasks", "tasks")
        generator = ReminderGenerator(ctx.fixtures, ctx.config.reminders)
        ctx.progress.set_step_total(len(users))
        for user in users:
            candidates = generator.generate_for(user, tasks_of(user, tasks))
            await self.store_all(ctx, "reminder", "reminders", candidates, out)
            ctx.progress.update_step(message=user["email"])
        return self.finish(ctx, out)


class FileStage(Stage):
    name = "Create Files"
    key = "files"
    reads = ("users", "tasks")
    collections = ("files",)

    def enabled(self, config: SeederConfig) -> bool:
        return config.files.count > 0

    async def seed(self, ctx: StageContext) -> StageResult:
        users = await ctx.resolve("users", "users")
        if not users:
            return self.missing(ctx, "users")

        out = StageOutput(self.key)
        tasks = await ctx.resolve("tasks", "tasks")
        candidates = FileGenerator(ctx.fixtures, ctx.config.files).generate(users, tasks)
        ctx.progress.set_step_total(len(candidates))
        for candidate in candidates:
            await self.store_all(ctx, "file", "files", [candidate], out)
            ctx.progress.update_step(message=candidate["filename"])
        return self.finish(ctx, out)


class InvitationStage(Stage):
    """Invitations into each workspace or one of its spaces or boards."""

    name = "Create Invitations"
    key = "invitations"
    reads = ("users", "workspaces", "spaces", "boards")
    collections = ("invitations",)

    def enabled(self, config: SeederConfig) -> bool:
        return config.invitations.per_workspace.enabled

    async def seed(self, ctx: StageContext) -> StageResult:
        workspaces = await ctx.resolve("workspaces", "workspaces")
        if not workspaces:
            return self.missing(ctx, "workspaces")

        out = StageOutput(self.key)
        users = await ctx.resolve("users", "users")
        generator = InvitationGenerator(ctx.fixtures, ctx.config.invitations)
        ctx.progress.set_step_total(len(workspaces))
        for workspace in workspaces:
            query = {"workspace": workspace["_id"]}
            spaces = await ctx.resolve("spaces", "spaces", query=query)
            boards = await ctx.resolve("boards", "boards", query=query)
            candidates = generator.generate_for(workspace, users, spaces, boards)
            await self.store_all(ctx, "invitation", "invitations", candidates, out)
            ctx.progress.update_step(message=workspace["name"])
        return self.finish(ctx, out)
