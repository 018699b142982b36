"""Board and column generators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.shared.seeder.config import DEFAULT_COLUMNS
from app.shared.seeder.generators.workspaces import member_ids

if TYPE_CHECKING:
    from datetime import datetime

    from app.shared.seeder.config import BoardConfig
    from app.shared.seeder.fixtures import FixtureGenerator


BOARD_PREFIXES = ["Project", "Sprint", "Release", "Feature", "Bug Fix", "Design", "Planning", "Review"]
BOARD_SUFFIXES = ["Board", "Kanban", "Scrum", "Backlog", "Roadmap", "Tasks", "Workflow"]
BOARD_PERMISSIONS = ["view", "edit", "delete", "manage_columns", "manage_members"]
BOARD_VISIBILITY = ["private", "workspace", "public"]

BOARD_DESCRIPTIONS = [
    "Track and manage project tasks and milestones.",
    "Organize work items and track progress efficiently.",
    "Visualize workflow and project status.",
    "Collaborate on tasks and project deliverables.",
    "Manage sprint planning and execution.",
    "Track feature development and bug fixes.",
    "Coordinate team efforts and project timeline.",
    "Monitor project progress and team productivity.",
]


class BoardGenerator:
    """Generator for boards staffed from their space's members."""

    def __init__(self, fixtures: FixtureGenerator, config: BoardConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate_for(self, space: dict[str, Any]) -> list[dict[str, Any]]:
        """Generate the boards of one space.

        Args:
            space: Parent space.

        Returns:
            List of board dictionaries (empty when the space has no members).
        """
        candidates = member_ids(space)
        if not candidates:
            return []
        count = self.fixtures.count_between(self.config.per_space)
        return [self.build(space, candidates) for _ in range(count)]

    def build(self, space: dict[str, Any], candidates: list[str]) -> dict[str, Any]:
        fx = self.fixtures
        owner = fx.choice(candidates)
        others = fx.pick_many(
            candidates,
            self.config.members_per_board.min,
            self.config.members_per_board.max,
            exclude=[owner],
        )
        created_at, updated_at = fx.timestamps(90)

        members = [{"user": owner, "permissions": list(BOARD_PERMISSIONS), "added_at": created_at}]
        for user_id in others:
            members.append(
                {
                    "user": user_id,
                    "permissions": fx.pick_many(BOARD_PERMISSIONS, 1, 3),
                    "added_at": fx.datetime_between(created_at, fx.reference_time),
                }
            )

        return {
            "_id": fx.object_id(),
            "name": f"{fx.choice(BOARD_PREFIXES)} {fx.faker.catch_phrase()} {fx.choice(BOARD_SUFFIXES)}",
            "description": fx.choice(BOARD_DESCRIPTIONS),
            "space": space["_id"],
            "workspace": space["workspace"],
            "owner": owner,
            "members": members,
            "columns": [],
            "visibility": fx.choice(BOARD_VISIBILITY),
            "settings": {
                "allow_comments": fx.boolean(0.9),
                "allow_attachments": fx.boolean(0.8),
                "allow_time_tracking": fx.boolean(0.7),
                "default_task_priority": fx.choice(["low", "medium", "high", "critical"]),
                "auto_archive": fx.boolean(0.3),
                "archive_after_days": fx.integer(7, 90),
            },
            "archived": False,
            "created_at": created_at,
            "updated_at": updated_at,
        }


class ColumnGenerator:
    """Generator for the default column set of a board."""

    def __init__(self, fixtures: FixtureGenerator, layout: str = "kanban") -> None:
        self.fixtures = fixtures
        self.layout = layout

    def generate_for(self, board: dict[str, Any]) -> list[dict[str, Any]]:
        """Build the default columns of a board and record their ids on it.

        Args:
            board: Parent board (its ``columns`` list is replaced).

        Returns:
            Column dictionaries in display order.
        """
        fx = self.fixtures
        created_at: datetime | str = board.get("created_at") or fx.reference_time
        columns = [
            {
                "_id": fx.object_id(),
                "board": board["_id"],
                "name": name,
                "position": position,
                "color": color,
                "wip_limit": wip_limit,
                "created_at": created_at,
                "updated_at": created_at,
            }
            for position, (name, color, wip_limit) in enumerate(DEFAULT_COLUMNS[self.layout])
        ]
        board["columns"] = [column["_id"] for column in columns]
        return columns
