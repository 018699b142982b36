"""Notification and reminder generators."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.shared.seeder.config import NotificationConfig, ReminderConfig
    from app.shared.seeder.fixtures import FixtureGenerator


# type -> (title, message, priority, category, source)
NOTIFICATION_TYPES: dict[str, tuple[str, str, str, str, str]] = {
    "task_assigned": ("New Task Assigned", "You have been assigned a new task: {task}", "medium", "task", "task"),
    "task_completed": ("Task Completed", 'Task "{task}" has been completed successfully.', "low", "task", "task"),
    "task_overdue": ("Task Overdue", 'Task "{task}" is overdue. Please update the status.', "high", "task", "task"),
    "comment_added": ("New Comment", 'A new comment was added to task "{task}".', "low", "communication", "comment"),
    "mention_received": (
        "You were mentioned",
        'You were mentioned in a comment on task "{task}".',
        "medium",
        "communication",
        "comment",
    ),
    "due_date_approaching": ("Due Date Approaching", 'Task "{task}" is due soon.', "medium", "reminder", "task"),
    "workspace_invitation": (
        "Workspace Invitation",
        "You have been invited to join a new workspace.",
        "low",
        "invitation",
        "workspace",
    ),
    "board_shared": ("Board Shared with You", "A board has been shared with you.", "low", "sharing", "board"),
    "file_uploaded": ("File Uploaded", "A new file has been uploaded to your workspace.", "low", "file", "file"),
    "reminder_set": ("Reminder Set", "A reminder has been set for you.", "low", "reminder", "reminder"),
    "achievement_unlocked": (
        "Achievement Unlocked",
        "Congratulations! You have unlocked a new achievement.",
        "low",
        "achievement",
        "achievement",
    ),
    "system_update": (
        "System Update",
        "A system update is available. Please review the changes.",
        "low",
        "system",
        "system",
    ),
    "security_alert": (
        "Security Alert",
        "Security alert: Please review your account settings.",
        "urgent",
        "security",
        "system",
    ),
    "backup_completed": (
        "Backup Completed",
        "Your data backup has been completed successfully.",
        "low",
        "system",
        "system",
    ),
    "integration_connected": (
        "Integration Connected",
        "A new integration has been connected to your workspace.",
        "low",
        "integration",
        "integration",
    ),
}

NOTIFICATION_ACTIONS: dict[str, list[tuple[str, str]]] = {
    "task_assigned": [("View Task", "view_task"), ("Mark as Read", "mark_read")],
    "task_completed": [("View Task", "view_task"), ("View Report", "view_report")],
    "task_overdue": [("Update Status", "update_status"), ("Request Extension", "request_extension")],
    "comment_added": [("View Comment", "view_comment"), ("Reply", "reply")],
    "mention_received": [("View Mention", "view_mention"), ("Reply", "reply")],
    "workspace_invitation": [("Accept", "accept_invitation"), ("Decline", "decline_invitation")],
}
DEFAULT_ACTIONS = [("View Details", "view_details"), ("Mark as Read", "mark_read")]

# Days until a notification expires
EXPIRY_DAYS = {"task_overdue": 10, "security_alert": 10, "due_date_approaching": 5, "task_assigned": 5}

# type -> (title, description, priority, category)
REMINDER_TYPES: dict[str, tuple[str, str, str, str]] = {
    "task_due": (
        "Task Due Soon",
        'Task "{task}" is due soon. Please review and update the status.',
        "high",
        "task",
    ),
    "meeting": (
        "Upcoming Meeting",
        "You have a meeting scheduled. Please prepare any necessary materials.",
        "medium",
        "meeting",
    ),
    "follow_up": ("Follow-up Required", "Follow up on previous communication or action items.", "medium", "communication"),
    "review": ("Review Needed", "Review pending items and provide feedback.", "medium", "review"),
    "deadline": (
        "Deadline Approaching",
        "Important deadline approaching. Please ensure all requirements are met.",
        "high",
        "deadline",
    ),
    "check_in": ("Check-in Reminder", "Time for a check-in on ongoing projects and tasks.", "low", "check_in"),
    "maintenance": ("Maintenance Due", "System maintenance is due. Please schedule accordingly.", "low", "maintenance"),
    "backup": ("Backup Reminder", "Data backup reminder. Ensure all important files are backed up.", "low", "system"),
    "update": ("Update Required", "Update required for system or process.", "low", "system"),
    "anniversary": ("Anniversary Reminder", "Anniversary reminder for important dates.", "low", "personal"),
    "birthday": ("Birthday Reminder", "Birthday reminder for team members.", "low", "personal"),
    "custom": ("Custom Reminder", "Custom reminder for important activities.", "medium", "custom"),
}
REMINDER_STATUSES = ["pending", "completed", "dismissed", "overdue"]
ADVANCE_NOTICE_MINUTES = [15, 30, 60, 120, 1440]


def _type_tags(kind: str) -> list[str]:
    tags = []
    if "task" in kind:
        tags.append("task-related")
    if "comment" in kind or "meeting" in kind:
        tags.append("communication")
    if "overdue" in kind or "approaching" in kind or "deadline" in kind:
        tags.append("urgent")
    if "security" in kind:
        tags.append("security")
    if "system" in kind:
        tags.append("system")
    return tags


class NotificationGenerator:
    """Generator for per-user notifications, optionally tied to a task."""

    def __init__(self, fixtures: FixtureGenerator, config: NotificationConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate_for(
        self,
        user: Mapping[str, Any],
        tasks: Sequence[Mapping[str, Any]],
    ) -> list[dict[str, Any]]:
        """Generate the notifications of one recipient.

        Args:
            user: Recipient.
            tasks: Tasks a notification may refer to (may be empty).

        Returns:
            List of notification dictionaries.
        """
        count = self.fixtures.count_between(self.config.per_user)
        return [self.build(user, tasks) for _ in range(count)]

    def build(self, user: Mapping[str, Any], tasks: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
        fx = self.fixtures
        kind = fx.choice(list(NOTIFICATION_TYPES))
        title, message, priority, category, source = NOTIFICATION_TYPES[kind]
        task = fx.choice(tasks) if tasks and source in ("task", "comment") else None
        created_at = fx.past_datetime(30)
        is_read = fx.boolean(0.3)
        actions = NOTIFICATION_ACTIONS.get(kind, DEFAULT_ACTIONS)

        return {
            "_id": fx.object_id(),
            "recipient": user["_id"],
            "type": kind,
            "title": title,
            "message": message.format(task=task["title"] if task else "Task"),
            "priority": priority,
            "category": category,
            "task": task["_id"] if task else None,
            "source": {
                "type": source,
                "id": task["_id"] if task else None,
                "name": task["title"] if task else None,
            },
            "actions": [{"label": label, "action": action} for label, action in actions],
            "is_read": is_read,
            "read_at": fx.datetime_between(created_at, fx.reference_time) if is_read else None,
            "is_archived": fx.boolean(0.1),
            "is_pinned": fx.boolean(0.05),
            "expires_at": fx.reference_time + timedelta(days=EXPIRY_DAYS.get(kind, 2)),
            "tags": _type_tags(kind),
            "delivery": {
                "email_sent": fx.boolean(0.7),
                "push_sent": fx.boolean(0.5),
                "in_app_shown": True,
            },
            "created_at": created_at,
            "updated_at": created_at,
        }


class ReminderGenerator:
    """Generator for per-user reminders scheduled after the reference time."""

    def __init__(self, fixtures: FixtureGenerator, config: ReminderConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate_for(
        self,
        user: Mapping[str, Any],
        tasks: Sequence[Mapping[str, Any]],
    ) -> list[dict[str, Any]]:
        count = self.fixtures.count_between(self.config.per_user)
        return [self.build(user, tasks) for _ in range(count)]

    def build(self, user: Mapping[str, Any], tasks: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
        fx = self.fixtures
        kind = fx.choice(list(REMINDER_TYPES))
        title, description, priority, category = REMINDER_TYPES[kind]
        task = fx.choice(tasks) if tasks and fx.boolean(0.6) else None
        scheduled_at = fx.reference_time + timedelta(
            days=fx.integer(1, 30), hours=fx.integer(8, 18), minutes=fx.integer(0, 59)
        )
        methods = ["in_app"]
        if fx.boolean(0.8):
            methods.insert(0, "email")
        if fx.boolean(0.6):
            methods.insert(-1, "push")
        is_recurring = fx.boolean(0.3)
        recurrence = None
        if is_recurring:
            recurrence = {"type": fx.choice(["daily", "weekly", "monthly", "yearly"]), "interval": 1}
            if recurrence["type"] == "weekly":
                recurrence["day_of_week"] = fx.integer(0, 6)
            elif recurrence["type"] == "monthly":
                recurrence["day_of_month"] = fx.integer(1, 28)
        created_at, updated_at = fx.timestamps(30)

        return {
            "_id": fx.object_id(),
            "user": user["_id"],
            "title": title,
            "description": description.format(task=task["title"] if task else "Important Task"),
            "type": kind,
            "priority": priority,
            "category": category,
            "scheduled_at": scheduled_at,
            "methods": methods,
            "is_recurring": is_recurring,
            "recurrence": recurrence,
            "status": fx.choice(REMINDER_STATUSES),
            "task": task["_id"] if task else None,
            "settings": {
                "advance_notice": fx.choice(ADVANCE_NOTICE_MINUTES),
                "snooze_enabled": fx.boolean(0.7),
                "max_snoozes": fx.integer(1, 5),
                "auto_complete": fx.boolean(0.2),
            },
            "tags": _type_tags(kind),
            "created_at": created_at,
            "updated_at": updated_at,
        }
