"""Tasks and their comments."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.core.logging import get_logger
from app.shared.seeder.generators import ColumnGenerator, CommentGenerator, TaskGenerator
from app.shared.seeder.stages.base import Stage, StageOutput, StageResult

if TYPE_CHECKING:
    from app.shared.seeder.config import SeederConfig
    from app.shared.seeder.stages.base import StageContext

logger = get_logger(__name__)


class TaskStage(Stage):
    """Tasks on every board, placed in the board's columns.

    A board without columns (seeded by an earlier run without them) gets the
    default layout first. Failing to create those columns aborts the run.
    """

    name = "Create Tasks"
    key = "tasks"
    reads = ("boards", "tags")
    collections = ("tasks", "columns")

    def enabled(self, config: SeederConfig) -> bool:
        return config.tasks.per_board.enabled

    async def seed(self, ctx: StageContext) -> StageResult:
        boards = await ctx.resolve("boards", "boards")
        if not boards:
            return self.missing(ctx, "boards")

        out = StageOutput(self.key)
        tag_ids = [tag["_id"] for tag in await ctx.resolve("tags", "tags")]
        generator = TaskGenerator(ctx.fixtures, ctx.config.tasks)
        ctx.progress.set_step_total(len(boards))
        for board in boards:
            columns = await ctx.resolve("boards", "columns", query={"board": board["_id"]})
            if not columns:
                columns = await self.create_columns(ctx, dict(board), out)
            await self.store_all(ctx, "task", "tasks", generator.generate_for(board, columns, tag_ids), out)
            ctx.progress.update_step(message=board["name"])
        return self.finish(ctx, out)

    async def create_columns(
        self,
        ctx: StageContext,
        board: dict[str, Any],
        out: StageOutput,
    ) -> list[dict[str, Any]]:
        """Create the default columns of a board and point the board at them.

        Raises:
            PersistenceError: If a column or the board update cannot be written.
        """
        columns = ColumnGenerator(ctx.fixtures, ctx.config.boards.column_layout).generate_for(board)
        for column in columns:
            await ctx.store.collection("columns").create(column)
            out.add("columns", column)
        await ctx.store.collection("boards").save(board)
        logger.info("seeder.tasks.columns_created", board=board["_id"], count=len(columns))
        return columns


class CommentStage(Stage):
    name = "Create Comments"
    key = "comments"
    reads = ("tasks",)
    collections = ("comments",)

    def enabled(self, config: SeederConfig) -> bool:
        return config.comments.per_task.enabled

    async def seed(self, ctx: StageContext) -> StageResult:
        tasks = await ctx.resolve("tasks", "tasks")
        if not tasks:
            return self.missing(ctx, "tasks")

        out = StageOutput(self.key)
        generator = CommentGenerator(ctx.fixtures, ctx.config.comments)
        ctx.progress.set_step_total(len(tasks))
        for task in tasks:
            await self.store_all(ctx, "comment", "comments", generator.generate_for(task), out)
            ctx.progress.update_step()
        return self.finish(ctx, out)
