"""Configuration dataclasses for the seeder module."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from app.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from app.core.config import Settings


class EnvironmentProfile(str, Enum):
    """Named seeding profiles selecting per-entity target counts."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"

    @classmethod
    def from_name(cls, name: str | EnvironmentProfile) -> EnvironmentProfile:
        """Resolve a profile from its name.

        Accepts ``testing`` as an alias of ``test`` (the application
        environment name).

        Raises:
            ConfigurationError: If the name matches no profile.
        """
        if isinstance(name, EnvironmentProfile):
            return name
        normalized = name.strip().lower()
        if normalized == "testing":
            normalized = "test"
        try:
            return cls(normalized)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown seeding profile: {name!r}",
                details={"profile": name, "available": [p.value for p in cls]},
            ) from e


@dataclass
class CountRange:
    """Inclusive ``[min, max]`` range for per-parent entity counts.

    Attributes:
        min: Lower bound.
        max: Upper bound. A range with ``max == 0`` disables the entity.
    """

    min: int = 0
    max: int = 0

    @property
    def enabled(self) -> bool:
        """Whether the range can produce any entity."""
        return self.max > 0

    def errors(self, label: str) -> list[str]:
        """Bound violations for this range, prefixed with ``label``."""
        if self.min < 0 or self.max < 0:
            return [f"{label}: bounds must not be negative ({self.min}..{self.max})"]
        if self.min > self.max:
            return [f"{label}: min {self.min} is greater than max {self.max}"]
        return []


@dataclass
class TestUserConfig:
    """A fixed, well-known account created before the random users.

    Attributes:
        name: Display name.
        email: Login email (exact, never randomised).
        password: Plain-text password printed in the final summary.
        system_role: One of super_admin, admin, moderator, user.
        email_verified: Verification flag.
    """

    __test__ = False

    name: str
    email: str
    password: str = "12345678A!"
    system_role: str = "user"
    email_verified: bool = True


@dataclass
class UserConfig:
    """User generation settings.

    Attributes:
        count: Total users including the fixed test users.
        test_users: Fixed accounts created first.
        default_password: Password shared by every random user.
    """

    count: int = 0
    test_users: list[TestUserConfig] = field(default_factory=list)
    default_password: str = "12345678A!"


@dataclass
class WorkspaceConfig:
    """Workspace generation settings.

    Attributes:
        count: Number of workspaces.
        members_per_workspace: Members added besides the owner.
    """

    count: int = 0
    members_per_workspace: CountRange = field(default_factory=CountRange)


@dataclass
class SpaceConfig:
    """Space generation settings.

    Attributes:
        per_workspace: Spaces created in each workspace.
        members_per_space: Workspace members added besides the space owner.
    """

    per_workspace: CountRange = field(default_factory=CountRange)
    members_per_space: CountRange = field(default_factory=lambda: CountRange(1, 5))


@dataclass
class BoardConfig:
    """Board generation settings.

    Attributes:
        per_space: Boards created in each space.
        members_per_board: Space members added besides the board owner.
        column_layout: Key of ``DEFAULT_COLUMNS`` used for new boards.
    """

    per_space: CountRange = field(default_factory=CountRange)
    members_per_board: CountRange = field(default_factory=lambda: CountRange(1, 5))
    column_layout: str = "kanban"


@dataclass
class BoardTemplateConfig:
    """Board template settings.

    Attributes:
        count: Templates to create. The built-in catalog is used first,
            random templates fill the remainder.
    """

    count: int = 0


@dataclass
class TagConfig:
    """Tag generation settings.

    Attributes:
        count: Total tags. The default global tags come first.
    """

    count: int = 0


@dataclass
class TaskConfig:
    """Task generation settings.

    Attributes:
        per_board: Tasks created on each board.
        assignees_per_task: Board members assigned to each task.
        watchers_per_task: Extra board members watching each task.
        tags_per_task: Tags attached to each task.
    """

    per_board: CountRange = field(default_factory=CountRange)
    assignees_per_task: CountRange = field(default_factory=lambda: CountRange(1, 2))
    watchers_per_task: CountRange = field(default_factory=lambda: CountRange(0, 3))
    tags_per_task: CountRange = field(default_factory=lambda: CountRange(0, 3))


@dataclass
class CommentConfig:
    """Comments created on each task."""

    per_task: CountRange = field(default_factory=CountRange)


@dataclass
class NotificationConfig:
    """Notifications created for each user."""

    per_user: CountRange = field(default_factory=CountRange)


@dataclass
class ReminderConfig:
    """Reminders created for each user."""

    per_user: CountRange = field(default_factory=CountRange)


@dataclass
class FileConfig:
    """Total number of file records."""

    count: int = 0


@dataclass
class InvitationConfig:
    """Invitations created for each workspace."""

    per_workspace: CountRange = field(default_factory=CountRange)


@dataclass
class AnalyticsConfig:
    """Whether workspace/user/system analytics are derived."""

    enabled: bool = False


# Column layouts for new boards: (name, color, wip_limit)
DEFAULT_COLUMNS: dict[str, list[tuple[str, str, int | None]]] = {
    "kanban": [
        ("To Do", "#6B7280", None),
        ("In Progress", "#3B82F6", 5),
        ("Review", "#F59E0B", 3),
        ("Done", "#10B981", None),
    ],
    "list": [
        ("Backlog", "#6B7280", None),
        ("In Progress", "#3B82F6", None),
        ("Completed", "#10B981", None),
    ],
    "calendar": [
        ("Upcoming", "#6B7280", None),
        ("This Week", "#3B82F6", None),
        ("Overdue", "#EF4444", None),
    ],
}

# Task status derived from the column a task is placed in
COLUMN_STATUS: dict[str, str] = {
    "To Do": "todo",
    "Backlog": "todo",
    "Upcoming": "todo",
    "In Progress": "in_progress",
    "This Week": "in_progress",
    "Review": "review",
    "Overdue": "review",
    "Done": "done",
    "Completed": "done",
}

# Global tags created ahead of the random ones: (name, color, category)
DEFAULT_GLOBAL_TAGS: list[tuple[str, str, str]] = [
    ("Important", "#EF4444", "priority"),
    ("Urgent", "#F59E0B", "priority"),
    ("Bug", "#DC2626", "type"),
    ("Feature", "#10B981", "type"),
    ("Enhancement", "#3B82F6", "type"),
    ("Documentation", "#6366F1", "type"),
]


def _default_reference_time() -> datetime:
    """Midnight UTC of the current day, so same-day runs stay reproducible."""
    now = datetime.now(UTC)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass
class SeederConfig:
    """Master configuration for a seeding run.

    Attributes:
        profile: Environment profile the counts came from.
        seed: Random seed for reproducibility.
        users: User generation configuration.
        workspaces: Workspace generation configuration.
        spaces: Space generation configuration.
        boards: Board generation configuration.
        board_templates: Board template configuration.
        tags: Tag generation configuration.
        tasks: Task generation configuration.
        comments: Comment generation configuration.
        notifications: Notification generation configuration.
        reminders: Reminder generation configuration.
        files: File generation configuration.
        invitations: Invitation generation configuration.
        analytics: Analytics derivation configuration.
        reference_time: Anchor for every generated timestamp.
        password_rounds: bcrypt cost factor.
        fallback_limit: Cap for store queries when an upstream stage did not run.
        backup_before_seed: Snapshot the store before clearing it.
        enable_progress: Whether to render progress bars.
    """

    profile: EnvironmentProfile = EnvironmentProfile.DEVELOPMENT
    seed: int = 12345
    users: UserConfig = field(default_factory=UserConfig)
    workspaces: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    spaces: SpaceConfig = field(default_factory=SpaceConfig)
    boards: BoardConfig = field(default_factory=BoardConfig)
    board_templates: BoardTemplateConfig = field(default_factory=BoardTemplateConfig)
    tags: TagConfig = field(default_factory=TagConfig)
    tasks: TaskConfig = field(default_factory=TaskConfig)
    comments: CommentConfig = field(default_factory=CommentConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    reminders: ReminderConfig = field(default_factory=ReminderConfig)
    files: FileConfig = field(default_factory=FileConfig)
    invitations: InvitationConfig = field(default_factory=InvitationConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    reference_time: datetime = field(default_factory=_default_reference_time)
    password_rounds: int = 10
    fallback_limit: int = 50
    backup_before_seed: bool = True
    enable_progress: bool = True

    @classmethod
    def from_profile(
        cls,
        profile: EnvironmentProfile | str,
        seed: int = 12345,
    ) -> SeederConfig:
        """Create configuration from a named environment profile.

        Args:
            profile: The profile (or its name) to use.
            seed: Random seed for reproducibility.

        Returns:
            SeederConfig with the profile's counts.

        Raises:
            ConfigurationError: If the profile name is unknown.
        """
        profile = EnvironmentProfile.from_name(profile)

        if profile == EnvironmentProfile.DEVELOPMENT:
            return cls(
                profile=profile,
                seed=seed,
                users=UserConfig(
                    count=20,
                    test_users=[
                        TestUserConfig(
                            "Super Admin User", "superadmin.test@gmail.com", system_role="super_admin"
                        ),
                        TestUserConfig("Admin User", "admin.test@gmail.com", system_role="admin"),
                        TestUserConfig("Regular User", "user.test@gmail.com", system_role="moderator"),
                        TestUserConfig("Manager User", "manager.test@gmail.com", system_role="moderator"),
                        TestUserConfig(
                            "Developer User", "developer.test@gmail.com", system_role="moderator"
                        ),
                    ],
                ),
                workspaces=WorkspaceConfig(count=5, members_per_workspace=CountRange(2, 8)),
                spaces=SpaceConfig(per_workspace=CountRange(2, 5)),
                boards=BoardConfig(per_space=CountRange(1, 4)),
                board_templates=BoardTemplateConfig(count=10),
                tags=TagConfig(count=20),
                tasks=TaskConfig(per_board=CountRange(5, 15)),
                comments=CommentConfig(per_task=CountRange(0, 8)),
                notifications=NotificationConfig(per_user=CountRange(5, 20)),
                reminders=ReminderConfig(per_user=CountRange(1, 5)),
                files=FileConfig(count=50),
                invitations=InvitationConfig(per_workspace=CountRange(1, 5)),
                analytics=AnalyticsConfig(enabled=True),
            )

        if profile == EnvironmentProfile.TEST:
            return cls(
                profile=profile,
                seed=seed,
                users=UserConfig(
                    count=10,
                    test_users=[
                        TestUserConfig("Test Admin", "admin@test.com", system_role="admin"),
                        TestUserConfig("Test User", "user@test.com", system_role="moderator"),
                    ],
                ),
                workspaces=WorkspaceConfig(count=2, members_per_workspace=CountRange(1, 3)),
                spaces=SpaceConfig(per_workspace=CountRange(1, 2)),
                boards=BoardConfig(per_space=CountRange(1, 2)),
                board_templates=BoardTemplateConfig(count=4),
                tags=TagConfig(count=10),
                tasks=TaskConfig(per_board=CountRange(3, 8)),
                comments=CommentConfig(per_task=CountRange(0, 3)),
                notifications=NotificationConfig(per_user=CountRange(2, 5)),
                reminders=ReminderConfig(per_user=CountRange(1, 3)),
                files=FileConfig(count=10),
                invitations=InvitationConfig(per_workspace=CountRange(1, 2)),
                analytics=AnalyticsConfig(enabled=True),
            )

        # Production seeds nothing
        return cls(profile=profile, seed=seed)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        profile: EnvironmentProfile | str | None = None,
        seed: int | None = None,
    ) -> SeederConfig:
        """Create configuration from application settings.

        Args:
            settings: Application settings (``SEEDER_*`` variables).
            profile: Override for the configured profile.
            seed: Override for ``settings.seeder_seed``.

        Returns:
            SeederConfig for the resolved profile with settings applied.
        """
        config = cls.from_profile(
            profile or settings.resolved_seeder_profile,
            seed=settings.seeder_seed if seed is None else seed,
        )
        config.password_rounds = settings.seeder_password_rounds
        config.fallback_limit = settings.seeder_fallback_limit
        config.backup_before_seed = settings.seeder_backup_before_seed
        config.enable_progress = settings.seeder_enable_progress
        return config

    def count_ranges(self) -> dict[str, CountRange]:
        """All per-parent ranges keyed by a readable label."""
        return {
            "workspaces.members_per_workspace": self.workspaces.members_per_workspace,
            "spaces.per_workspace": self.spaces.per_workspace,
            "spaces.members_per_space": self.spaces.members_per_space,
            "boards.per_space": self.boards.per_space,
            "boards.members_per_board": self.boards.members_per_board,
            "tasks.per_board": self.tasks.per_board,
            "tasks.assignees_per_task": self.tasks.assignees_per_task,
            "tasks.watchers_per_task": self.tasks.watchers_per_task,
            "tasks.tags_per_task": self.tasks.tags_per_task,
            "comments.per_task": self.comments.per_task,
            "notifications.per_user": self.notifications.per_user,
            "reminders.per_user": self.reminders.per_user,
            "invitations.per_workspace": self.invitations.per_workspace,
        }

    def validation_errors(self) -> list[str]:
        """Collect configuration problems without raising."""
        errors: list[str] = []
        for label, count in (
            ("users.count", self.users.count),
            ("workspaces.count", self.workspaces.count),
            ("board_templates.count", self.board_templates.count),
            ("tags.count", self.tags.count),
            ("files.count", self.files.count),
        ):
            if count < 0:
                errors.append(f"{label} must not be negative, got {count}")
        if self.users.count < len(self.users.test_users):
            errors.append(
                f"User count ({self.users.count}) cannot be less than "
                f"test users count ({len(self.users.test_users)})"
            )
        emails = [user.email.lower() for user in self.users.test_users]
        if len(emails) != len(set(emails)):
            errors.append("Test user emails must be unique")
        for label, count_range in self.count_ranges().items():
            errors.extend(count_range.errors(label))
        if self.boards.column_layout not in DEFAULT_COLUMNS:
            errors.append(f"Unknown column layout: {self.boards.column_layout}")
        if not 4 <= self.password_rounds <= 31:
            errors.append(f"password_rounds must be between 4 and 31, got {self.password_rounds}")
        if self.fallback_limit < 1:
            errors.append(f"fallback_limit must be positive, got {self.fallback_limit}")
        return errors

    def validate(self) -> None:
        """Check the configuration before any step runs.

        Raises:
            ConfigurationError: If any count or range is invalid.
        """
        errors = self.validation_errors()
        if errors:
            raise ConfigurationError(
                f"Invalid seeder configuration: {'; '.join(errors)}",
                details={"profile": self.profile.value, "errors": errors},
            )

    def summary(self) -> dict[str, Any]:
        """Compact view of the target counts for banners and logs."""
        return {
            "users": self.users.count,
            "test_users": len(self.users.test_users),
            "workspaces": self.workspaces.count,
            "spaces_per_workspace": _fmt(self.spaces.per_workspace),
            "boards_per_space": _fmt(self.boards.per_space),
            "board_templates": self.board_templates.count,
            "tags": self.tags.count,
            "tasks_per_board": _fmt(self.tasks.per_board),
            "comments_per_task": _fmt(self.comments.per_task),
            "notifications_per_user": _fmt(self.notifications.per_user),
            "reminders_per_user": _fmt(self.reminders.per_user),
            "files": self.files.count,
            "invitations_per_workspace": _fmt(self.invitations.per_workspace),
            "analytics": self.analytics.enabled,
        }


def _fmt(count_range: CountRange) -> str:
    return f"{count_range.min}-{count_range.max}"


# Sections of SeederConfig that accept nested overrides
OVERRIDE_SECTIONS = (
    "users",
    "workspaces",
    "spaces",
    "boards",
    "board_templates",
    "tags",
    "tasks",
    "comments",
    "notifications",
    "reminders",
    "files",
    "invitations",
    "analytics",
)
OVERRIDE_SCALARS = ("seed", "password_rounds", "fallback_limit", "backup_before_seed", "enable_progress")


def _count_range(value: Any, label: str) -> CountRange:
    if isinstance(value, CountRange):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return CountRange(value, value)
    if isinstance(value, Mapping):
        return CountRange(int(value.get("min", 0)), int(value.get("max", 0)))
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return CountRange(int(value[0]), int(value[1]))
    raise ConfigurationError(
        f"{label} must be an integer, [min, max] or {{min, max}}, got {value!r}",
        details={"option": label},
    )


def _override_section(section: Any, values: Any, label: str) -> Any:
    if not isinstance(values, Mapping):
        raise ConfigurationError(f"{label} overrides must be a mapping", details={"option": label})
    known = {f.name for f in fields(section)}
    changes: dict[str, Any] = {}
    for key, value in values.items():
        option = f"{label}.{key}"
        if key not in known:
            raise ConfigurationError(f"Unknown seeder option: {option}", details={"option": option})
        current = getattr(section, key)
        if isinstance(current, CountRange):
            changes[key] = _count_range(value, option)
        elif key == "test_users":
            try:
                changes[key] = [
                    user if isinstance(user, TestUserConfig) else TestUserConfig(**user) for user in value
                ]
            except TypeError as e:
                raise ConfigurationError(f"Invalid {option}: {e}", details={"option": option}) from e
        else:
            changes[key] = value
    return replace(section, **changes)


def apply_overrides(config: SeederConfig, overrides: Mapping[str, Any]) -> SeederConfig:
    """Return a copy of ``config`` with nested overrides applied.

    Ranges accept an integer (exact count), ``[min, max]`` or
    ``{"min": ..., "max": ...}``. Test users accept a list of mappings with
    ``TestUserConfig`` fields. The copy is not validated; call
    :meth:`SeederConfig.validate` afterwards.

    Args:
        config: Base configuration, typically from a profile.
        overrides: Parsed override document (for example from YAML).

    Returns:
        New SeederConfig.

    Raises:
        ConfigurationError: On unknown sections, options or malformed values.
    """
    unknown = sorted(set(overrides) - set(OVERRIDE_SECTIONS) - set(OVERRIDE_SCALARS) - {"reference_time"})
    if unknown:
        raise ConfigurationError(
            f"Unknown seeder options: {', '.join(unknown)}",
            details={"options": unknown},
        )

    updated = copy.deepcopy(config)
    for key in OVERRIDE_SCALARS:
        if key in overrides:
            setattr(updated, key, overrides[key])
    if "reference_time" in overrides:
        value = overrides["reference_time"]
        if not isinstance(value, datetime):
            try:
                value = datetime.fromisoformat(str(value))
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid reference_time: {value!r}",
                    details={"option": "reference_time"},
                ) from e
        updated.reference_time = value if value.tzinfo else value.replace(tzinfo=UTC)
    for name in OVERRIDE_SECTIONS:
        if name in overrides:
            setattr(updated, name, _override_section(getattr(updated, name), overrides[name], name))
    return updated
