"""Task and comment generators."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from app.shared.seeder.config import COLUMN_STATUS
from app.shared.seeder.generators.workspaces import member_ids

if TYPE_CHECKING:
    from app.shared.seeder.config import CommentConfig, TaskConfig
    from app.shared.seeder.fixtures import FixtureGenerator


TASK_TITLES = [
    "Implement user authentication system",
    "Fix responsive design issues",
    "Add data validation to forms",
    "Optimize database queries",
    "Create API documentation",
    "Update user interface components",
    "Implement error handling",
    "Add unit tests for modules",
    "Refactor legacy code",
    "Design new dashboard layout",
    "Integrate third-party service",
    "Fix cross-browser compatibility",
    "Add search functionality",
    "Implement caching mechanism",
    "Create admin panel",
    "Add export functionality",
    "Fix performance issues",
    "Update dependencies",
    "Add notification system",
    "Implement file upload feature",
]

TASK_DESCRIPTIONS = [
    "This task involves implementing the required functionality with proper error handling and validation.",
    "Need to ensure the feature works across different browsers and devices.",
    "The implementation should follow the established coding standards.",
    "Include comprehensive testing to ensure reliability and performance.",
    "Consider user experience and accessibility requirements in the implementation.",
    "Document the changes and update relevant documentation.",
    "Coordinate with the design team to ensure visual consistency.",
    "Test thoroughly in different environments before deployment.",
]

TASK_PRIORITIES = ["low", "medium", "high", "critical"]
TASK_TYPES = ["task", "bug", "feature", "story", "epic"]
STORY_POINTS = [1, 2, 3, 5, 8, 13, 21]
TASK_LABELS = [
    "frontend", "backend", "bug", "feature", "urgent", "documentation",
    "testing", "design", "performance", "security", "accessibility",
]
CHECKLIST_ITEMS = [
    "Review requirements",
    "Create implementation plan",
    "Write unit tests",
    "Implement functionality",
    "Test locally",
    "Create pull request",
    "Address review comments",
    "Deploy to staging",
    "Perform integration testing",
    "Update documentation",
]

COMMENT_TEMPLATES = [
    "I've started working on this task. Will update progress soon.",
    "This looks good! I have a few suggestions for improvement.",
    "Can you clarify the requirements for this feature?",
    "I've completed the initial implementation. Ready for review.",
    "There are some technical challenges we need to address.",
    "Great work! This implementation meets all the requirements.",
    "I've identified a potential issue that needs attention.",
    "The code review is complete. Please address the feedback.",
    "This task is blocked due to dependencies. Need to resolve first.",
    "I've updated the documentation as requested.",
    "The testing is complete. All scenarios are covered.",
    "This feature is ready for deployment to staging.",
    "I've created a pull request for this implementation.",
    "I've fixed the bugs that were reported.",
]
COMMENT_TYPES = ["comment", "update", "question", "suggestion", "review"]
REACTIONS = ["👍", "👎", "❤️", "😄", "😮", "😢", "🎉", "🚀"]


def participants(task: Mapping[str, Any]) -> list[str]:
    """Distinct assignees, reporter and watchers of a task, in that order."""
    people: list[str] = []
    for user_id in [*(task.get("assignees") or []), task.get("reporter"), *(task.get("watchers") or [])]:
        if user_id and user_id not in people:
            people.append(user_id)
    return people


class TaskGenerator:
    """Generator for tasks placed on a board's columns."""

    def __init__(self, fixtures: FixtureGenerator, config: TaskConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate_for(
        self,
        board: Mapping[str, Any],
        columns: Sequence[Mapping[str, Any]],
        tag_ids: Sequence[str],
    ) -> list[dict[str, Any]]:
        """Generate the tasks of one board.

        Args:
            board: Parent board; its members supply assignees, reporter and watchers.
            columns: The board's columns (must not be empty).
            tag_ids: Tags available for attachment.

        Returns:
            List of task dictionaries (empty when the board has no members).
        """
        people = member_ids(board)
        if not people or not columns:
            return []
        count = self.fixtures.count_between(self.config.per_board)
        return [self.build(board, columns, tag_ids, people) for _ in range(count)]

    def build(
        self,
        board: Mapping[str, Any],
        columns: Sequence[Mapping[str, Any]],
        tag_ids: Sequence[str],
        people: list[str],
    ) -> dict[str, Any]:
        fx = self.fixtures
        assignees = fx.pick_many(
            people, self.config.assignees_per_task.min, self.config.assignees_per_task.max
        )
        reporter = fx.choice(people)
        watchers = fx.pick_many(
            people,
            self.config.watchers_per_task.min,
            self.config.watchers_per_task.max,
            exclude=[*assignees, reporter],
        )
        column = fx.choice(columns)
        status = COLUMN_STATUS.get(column["name"], "todo")
        created_at, updated_at = fx.timestamps(60)
        estimated_hours = fx.integer(1, 40)

        return {
            "_id": fx.object_id(),
            "title": fx.choice(TASK_TITLES),
            "description": fx.choice(TASK_DESCRIPTIONS),
            "board": board["_id"],
            "space": board.get("space"),
            "workspace": board.get("workspace"),
            "column": column["_id"],
            "status": status,
            "priority": fx.choice(TASK_PRIORITIES),
            "type": fx.choice(TASK_TYPES),
            "assignees": assignees,
            "reporter": reporter,
            "watchers": watchers,
            "tags": fx.pick_many(tag_ids, self.config.tags_per_task.min, self.config.tags_per_task.max),
            "story_points": fx.choice(STORY_POINTS),
            "estimated_hours": estimated_hours,
            "actual_hours": fx.integer(0, estimated_hours) if status != "todo" else 0,
            "due_date": fx.future_datetime(180) if fx.boolean(0.7) else None,
            "started_at": fx.datetime_between(created_at, updated_at) if status != "todo" else None,
            "completed_at": updated_at if status == "done" else None,
            "labels": fx.pick_many(TASK_LABELS, 0, 3),
            "checklist": self.checklist(),
            "settings": {
                "allow_comments": fx.boolean(0.9),
                "allow_attachments": fx.boolean(0.8),
                "allow_time_tracking": fx.boolean(0.7),
                "notify_on_changes": fx.boolean(0.8),
            },
            "created_at": created_at,
            "updated_at": updated_at,
        }

    def checklist(self) -> list[dict[str, Any]]:
        fx = self.fixtures
        if not fx.boolean(0.6):
            return []
        return [
            {"id": fx.token(16), "title": title, "completed": fx.boolean(0.3), "order": order}
            for order, title in enumerate(fx.pick_many(CHECKLIST_ITEMS, 3, 8))
        ]


class CommentGenerator:
    """Generator for comments authored by a task's participants."""

    def __init__(self, fixtures: FixtureGenerator, config: CommentConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate_for(self, task: Mapping[str, Any]) -> list[dict[str, Any]]:
        """Generate the comments of one task.

        Returns:
            List of comment dictionaries (empty when the task has no participants).
        """
        people = participants(task)
        if not people:
            return []
        count = self.fixtures.count_between(self.config.per_task)
        return [self.build(task, people) for _ in range(count)]

    def build(self, task: Mapping[str, Any], people: list[str]) -> dict[str, Any]:
        fx = self.fixtures
        created_at, updated_at = fx.timestamps(30)
        edited = fx.boolean(0.1)
        return {
            "_id": fx.object_id(),
            "task": task["_id"],
            "board": task.get("board"),
            "author": fx.choice(people),
            "content": fx.choice(COMMENT_TEMPLATES),
            "type": fx.choice(COMMENT_TYPES),
            "mentions": fx.pick_many(people, 1, 2) if fx.boolean(0.3) else [],
            "reactions": [
                {"emoji": emoji, "count": fx.integer(1, 5)} for emoji in fx.pick_many(REACTIONS, 1, 3)
            ]
            if fx.boolean(0.4)
            else [],
            "is_internal": fx.boolean(0.2),
            "is_resolved": fx.boolean(0.1),
            "is_pinned": fx.boolean(0.05),
            "edited": edited,
            "context": {"task_status": task.get("status"), "task_priority": task.get("priority")},
            "created_at": created_at,
            "updated_at": updated_at if edited else created_at,
        }
