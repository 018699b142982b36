"""Workspaces, spaces, boards, board templates and tags."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.shared.seeder.generators import (
    BoardGenerator,
    BoardTemplateGenerator,
    ColumnGenerator,
    SpaceGenerator,
    TagGenerator,
    WorkspaceGenerator,
)
from app.shared.seeder.stages.base import FailurePolicy, Stage, StageOutput, StageResult

if TYPE_CHECKING:
    from app.shared.seeder.config import SeederConfig
    from app.shared.seeder.stages.base import StageContext

PRIVILEGED_ROLES = ("super_admin", "admin")


async def find_privileged_user(ctx: StageContext) -> dict[str, Any] | None:
    """First super admin, else first admin, among this run's or stored users."""
    for role in PRIVILEGED_ROLES:
        users = await ctx.resolve("users", "users", query={"system_role": role})
        if users:
            return users[0]
    return None


class WorkspaceStage(Stage):
    name = "Create Workspaces"
    key = "workspaces"
    reads = ("users",)
    collections = ("workspaces",)

    def enabled(self, config: SeederConfig) -> bool:
        return config.workspaces.count > 0

    async def seed(self, ctx: StageContext) -> StageResult:
        users = await ctx.resolve("users", "users")
        if not users:
            return self.missing(ctx, "users")

        out = StageOutput(self.key)
        candidates = WorkspaceGenerator(ctx.fixtures, ctx.config.workspaces).generate(users)
        ctx.progress.set_step_total(len(candidates))
        for candidate in candidates:
            await self.store_all(ctx, "workspace", "workspaces", [candidate], out)
            ctx.progress.update_step(message=candidate["name"])
        return self.finish(ctx, out)


class SpaceStage(Stage):
    """Spaces of every workspace.

    A space that fails to persist is reported and skipped; the remaining
    spaces are still created.
    """

    name = "Create Spaces"
    key = "spaces"
    reads = ("workspaces",)
    collections = ("spaces",)
    failure_policy = FailurePolicy.CATCH_AND_CONTINUE

    def enabled(self, config: SeederConfig) -> bool:
        return config.spaces.per_workspace.enabled

    async def seed(self, ctx: StageContext) -> StageResult:
        workspaces = await ctx.resolve("workspaces", "workspaces")
        if not workspaces:
            return self.missing(ctx, "workspaces")

        out = StageOutput(self.key)
        generator = SpaceGenerator(ctx.fixtures, ctx.config.spaces)
        ctx.progress.set_step_total(len(workspaces))
        for workspace in workspaces:
            await self.store_all(ctx, "space", "spaces", generator.generate_for(workspace), out)
            ctx.progress.update_step(message=workspace["name"])
        return self.finish(ctx, out)


class BoardStage(Stage):
    """Boards of every space, each with its default columns."""

    name = "Create Boards"
    key = "boards"
    reads = ("spaces",)
    collections = ("boards", "columns")

    def enabled(self, config: SeederConfig) -> bool:
        return config.boards.per_space.enabled

    async def seed(self, ctx: StageContext) -> StageResult:
        spaces = await ctx.resolve("spaces", "spaces")
        if not spaces:
            return self.missing(ctx, "spaces")

        out = StageOutput(self.key)
        boards = BoardGenerator(ctx.fixtures, ctx.config.boards)
        columns = ColumnGenerator(ctx.fixtures, ctx.config.boards.column_layout)
        ctx.progress.set_step_total(len(spaces))
        for space in spaces:
            for board in boards.generate_for(space):
                if not self.accept(ctx, "board", board, out):
                    continue
                board_columns = columns.generate_for(board)
                await self.persist(ctx, "boards", board, out)
                for column in board_columns:
                    await self.persist(ctx, "columns", column, out)
            ctx.progress.update_step(message=space["name"])
        return self.finish(ctx, out)


class BoardTemplateStage(Stage):
    """Reusable board templates owned by a privileged user.

    Also runnable on its own (see :mod:`app.shared.seeder.templates`), in
    which case the owner is looked up in the store.
    """

    name = "Create Board Templates"
    key = "board_templates"
    reads = ("users",)
    collections = ("board_templates",)
    failure_policy = FailurePolicy.CATCH_AND_CONTINUE

    def enabled(self, config: SeederConfig) -> bool:
        return config.board_templates.count > 0

    async def seed(self, ctx: StageContext) -> StageResult:
        owner = await find_privileged_user(ctx)
        if owner is None:
            return self.missing(ctx, "super_admin or admin user")

        out = StageOutput(self.key)
        candidates = BoardTemplateGenerator(ctx.fixtures, ctx.config.board_templates).generate(owner["_id"])
        ctx.progress.set_step_total(len(candidates))
        for candidate in candidates:
            await self.store_all(ctx, "board_template", "board_templates", [candidate], out)
            ctx.progress.update_step(message=candidate["name"])
        return self.finish(ctx, out, summary={"created_by": owner["_id"]})


class TagStage(Stage):
    """Default global tags plus random tags scoped to existing entities."""

    name = "Create Tags"
    key = "tags"
    reads = ("users", "workspaces", "spaces", "boards")
    collections = ("tags",)

    def enabled(self, config: SeederConfig) -> bool:
        return config.tags.count > 0

    async def seed(self, ctx: StageContext) -> StageResult:
        users = await ctx.resolve("users", "users")
        if not users:
            return self.missing(ctx, "users")

        scopes = {
            "workspace": [doc["_id"] for doc in await ctx.resolve("workspaces", "workspaces")],
            "space": [doc["_id"] for doc in await ctx.resolve("spaces", "spaces")],
            "board": [doc["_id"] for doc in await ctx.resolve("boards", "boards")],
        }
        out = StageOutput(self.key)
        candidates = TagGenerator(ctx.fixtures, ctx.config.tags).generate(users, scopes)
        ctx.progress.set_step_total(len(candidates))
        for candidate in candidates:
            await self.store_all(ctx, "tag", "tags", [candidate], out)
            ctx.progress.update_step(message=candidate["name"])
        return self.finish(ctx, out)
