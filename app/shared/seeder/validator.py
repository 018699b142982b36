"""Rule checks for generated records.

Each ``validate_<entity>`` function is pure: it inspects one candidate
document and returns a :class:`ValidationResult`. Errors make the record
un-persistable; warnings are advisory only.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
MAX_FILE_SIZE = 100 * 1024 * 1024  # 100 MB

SYSTEM_ROLES = ("super_admin", "admin", "moderator", "user")
TASK_PRIORITIES = ("low", "medium", "high", "critical")
TASK_STATUSES = ("todo", "in_progress", "review", "done")
TAG_SCOPES = ("global", "workspace", "space", "board")
NOTIFICATION_PRIORITIES = ("low", "medium", "high", "urgent")
NOTIFICATION_TYPES = (
    "task_assigned",
    "task_updated",
    "task_completed",
    "task_overdue",
    "comment_added",
    "comment_mentioned",
    "mention_received",
    "deadline_approaching",
    "due_date_approaching",
    "space_update",
    "board_update",
    "board_shared",
    "workspace_invitation",
    "file_uploaded",
    "reminder_set",
    "achievement_unlocked",
    "system_update",
    "security_alert",
    "backup_completed",
    "integration_connected",
)
REMINDER_METHODS = ("email", "push", "in_app")
INVITATION_TYPES = ("workspace", "space", "board")
INVITATION_ROLES = ("viewer", "member", "contributor", "admin")
ADMIN_ROLES = ("super_admin", "admin", "moderator", "viewer")
TEMPLATE_TYPES = ("board", "task", "workflow")
INTEGRATION_CATEGORIES = ("communication", "storage", "development", "analytics", "marketing")
INTEGRATION_STATUSES = ("active", "inactive", "pending")
SYNC_STATUSES = ("success", "warning", "error")



@dataclass
class ValidationResult:
    """Outcome of validating one record.

    Attributes:
        errors: Rule violations that block persistence.
        warnings: Advisory findings.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _too_short(value: Any, minimum: int) -> bool:
    return not isinstance(value, str) or len(value) < minimum


def validate_user(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    email = data.get("email")
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        result.errors.append(f"Invalid email: {email}")

    name = data.get("name")
    if not isinstance(name, str) or not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        result.errors.append(f"Invalid name length: {name}")
    elif not NAME_PATTERN.match(name):
        result.warnings.append(f"Name contains special characters: {name}")

    password = data.get("password")
    if password is not None:
        if len(password) < PASSWORD_MIN_LENGTH:
            result.errors.append("Password too short")
        elif not PASSWORD_PATTERN.match(password):
            result.errors.append("Password must contain a letter, a digit and one of @$!%*?&")

    system_role = data.get("system_role")
    if system_role is not None and system_role not in SYSTEM_ROLES:
        result.errors.append(f"Invalid system role: {system_role}")
    return result


def validate_workspace(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("name"), 2):
        result.errors.append(f"Invalid workspace name: {data.get('name')}")
    if not data.get("owner"):
        result.errors.append("Workspace must have an owner")
    if "members" in data and not isinstance(data["members"], list):
        result.errors.append("Members must be a list")
    return result


def validate_space(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("name"), 2):
        result.errors.append(f"Invalid space name: {data.get('name')}")
    if not data.get("workspace"):
        result.errors.append("Space must belong to a workspace")
    if "members" in data and not isinstance(data["members"], list):
        result.errors.append("Members must be a list")
    return result


def validate_board(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("name"), 2):
        result.errors.append(f"Invalid board name: {data.get('name')}")
    if not data.get("space"):
        result.errors.append("Board must belong to a space")
    if not data.get("owner"):
        result.errors.append("Board must have an owner")
    for key in ("columns", "members"):
        if key in data and not isinstance(data[key], list):
            result.errors.append(f"{key.capitalize()} must be a list")
    return result


def validate_board_template(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("name"), 2):
        result.errors.append(f"Invalid template name: {data.get('name')}")
    lists = data.get("lists")
    if not isinstance(lists, list) or not lists:
        result.errors.append("Template must define at least one list")
    if not data.get("created_by"):
        result.warnings.append("Template has no creator")
    return result


def validate_tag(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("name"), 2):
        result.errors.append(f"Invalid tag name: {data.get('name')}")
    color = data.get("color")
    if not isinstance(color, str) or not HEX_COLOR_PATTERN.match(color):
        result.errors.append(f"Invalid color format: {color}")
    scope = data.get("scope")
    if scope is not None and scope not in TAG_SCOPES:
        result.errors.append(f"Invalid scope: {scope}")
    if scope not in (None, "global") and not data.get("scope_id"):
        result.warnings.append(f"Tag scoped to {scope} has no scope target")
    return result


def validate_task(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("title"), 3):
        result.errors.append(f"Invalid task title: {data.get('title')}")
    if not data.get("board"):
        result.errors.append("Task must belong to a board")
    if not data.get("assignees"):
        result.warnings.append("Task has no assignee")
    if not data.get("reporter"):
        result.warnings.append("Task has no reporter")
    priority = data.get("priority")
    if priority is not None and priority not in TASK_PRIORITIES:
        result.errors.append(f"Invalid priority: {priority}")
    status = data.get("status")
    if status is not None and status not in TASK_STATUSES:
        result.errors.append(f"Invalid status: {status}")
    return result


def validate_comment(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("content"), 1):
        result.errors.append("Comment must have content")
    if not data.get("task"):
        result.errors.append("Comment must belong to a task")
    if not data.get("author"):
        result.errors.append("Comment must have an author")
    return result


def validate_notification(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if not data.get("recipient"):
        result.errors.append("Notification must have a recipient")
    notification_type = data.get("type")
    if notification_type is not None and notification_type not in NOTIFICATION_TYPES:
        result.errors.append(f"Invalid notification type: {notification_type}")
    priority = data.get("priority")
    if priority is not None and priority not in NOTIFICATION_PRIORITIES:
        result.errors.append(f"Invalid priority: {priority}")
    return result


def validate_reminder(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("title"), 3):
        result.errors.append(f"Invalid reminder title: {data.get('title')}")
    if not isinstance(data.get("scheduled_at"), datetime):
        result.errors.append("Reminder must have a valid scheduled date")
    if not data.get("user"):
        result.errors.append("Reminder must have a user")
    methods = data.get("methods")
    if methods is not None:
        if not isinstance(methods, list):
            result.errors.append("Methods must be a list")
        else:
            result.errors.extend(
                f"Invalid method: {method}" for method in methods if method not in REMINDER_METHODS
            )
    return result


def validate_file(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("filename"), 1):
        result.errors.append(f"Invalid filename: {data.get('filename')}")
    if _too_short(data.get("mime_type"), 1):
        result.errors.append(f"Invalid mime type: {data.get('mime_type')}")
    size = data.get("size")
    if size is not None and (size <= 0 or size > MAX_FILE_SIZE):
        result.warnings.append(f"File size may be too large: {size} bytes")
    if not data.get("uploaded_by"):
        result.errors.append("File must have an uploader")
    return result


def validate_invitation(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    invitee = data.get("invitee") or {}
    email = invitee.get("email") if isinstance(invitee, Mapping) else None
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        result.errors.append(f"Invalid invitation email: {email}")
    invitation_type = data.get("type")
    if invitation_type is not None and invitation_type not in INVITATION_TYPES:
        result.errors.append(f"Invalid invitation type: {invitation_type}")
    role = data.get("role")
    if role is not None and role not in INVITATION_ROLES:
        result.errors.append(f"Invalid role: {role}")
    target = data.get("target_entity") or {}
    if not isinstance(target, Mapping) or not target.get("id"):
        result.errors.append("Invitation must have a target entity")
    return result


def validate_admin(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    email = data.get("email")
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        result.errors.append(f"Invalid email: {email}")
    if _too_short(data.get("user_name"), NAME_MIN_LENGTH):
        result.errors.append(f"Invalid user name: {data.get('user_name')}")
    role = data.get("role")
    if role not in ADMIN_ROLES:
        result.errors.append(f"Invalid admin role: {role}")
    permissions = data.get("permissions")
    if not isinstance(permissions, list):
        result.errors.append("Permissions must be a list")
    elif not permissions:
        result.warnings.append(f"Admin {email} has no permissions")
    return result


def validate_template(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("name"), 2):
        result.errors.append(f"Invalid template name: {data.get('name')}")
    template_type = data.get("type")
    if template_type not in TEMPLATE_TYPES:
        result.errors.append(f"Invalid template type: {template_type}")
    content = data.get("content")
    if not isinstance(content, Mapping) or not content:
        result.errors.append("Template content must be a non-empty mapping")
    if not data.get("created_by"):
        result.warnings.append("Template has no creator")
    return result


def validate_integration(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _too_short(data.get("name"), 2):
        result.errors.append(f"Invalid integration name: {data.get('name')}")
    category = data.get("category")
    if category not in INTEGRATION_CATEGORIES:
        result.errors.append(f"Invalid integration category: {category}")
    status = data.get("status")
    if status not in INTEGRATION_STATUSES:
        result.errors.append(f"Invalid integration status: {status}")
    sync_status = data.get("sync_status")
    if sync_status is not None and sync_status not in SYNC_STATUSES:
        result.errors.append(f"Invalid sync status: {sync_status}")
    if data.get("is_enabled") and status != "active":
        result.warnings.append(f"Integration {data.get('name')} is enabled but {status}")
    return result



VALIDATORS: dict[str, Callable[[Mapping[str, Any]], ValidationResult]] = {
    "user": validate_user,
    "workspace": validate_workspace,
    "space": validate_space,
    "board": validate_board,
    "board_template": validate_board_template,
    "tag": validate_tag,
    "task": validate_task,
    "comment": validate_comment,
    "notification": validate_notification,
    "reminder": validate_reminder,
    "file": validate_file,
    "invitation": validate_invitation,
    "admin": validate_admin,
    "template": validate_template,
    "integration": validate_integration,
}


class Validator:
    """Dispatches to the per-entity rules and keeps a log of findings.

    The log only feeds :meth:`get_summary`; the decision to persist a record
    is made from the returned :class:`ValidationResult` alone.
    """

    def __init__(self) -> None:
        self.validated = 0
        self.rejected = 0
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def validate(self, kind: str, data: Mapping[str, Any]) -> ValidationResult:
        """Validate one record.

        Args:
            kind: Entity kind (key of ``VALIDATORS``).
            data: Candidate document.

        Returns:
            The rule outcome for this record.

        Raises:
            KeyError: If no rules exist for ``kind``.
        """
        result = VALIDATORS[kind](data)
        self.validated += 1
        if result.errors:
            self.rejected += 1
        self.errors.extend(f"{kind}: {error}" for error in result.errors)
        self.warnings.extend(f"{kind}: {warning}" for warning in result.warnings)
        return result

    def get_summary(self) -> dict[str, Any]:
        return {
            "validated": self.validated,
            "rejected": self.rejected,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }

    def reset(self) -> None:
        self.validated = 0
        self.rejected = 0
        self.errors.clear()
        self.warnings.clear()
