"""Pipeline stages in their fixed execution order."""

from app.shared.seeder.stages.activity import (
    FileStage,
    InvitationStage,
    NotificationStage,
    ReminderStage,
)
from app.shared.seeder.stages.analytics import AnalyticsStage
from app.shared.seeder.stages.base import (
    FailurePolicy,
    Stage,
    StageContext,
    StageOutput,
    StageResult,
    assert_topological_order,
)
from app.shared.seeder.stages.bookends import ClearDatabaseStage, UpdateStatisticsStage
from app.shared.seeder.stages.identity import UserStage, hash_password
from app.shared.seeder.stages.organization import (
    BoardStage,
    BoardTemplateStage,
    SpaceStage,
    TagStage,
    WorkspaceStage,
    find_privileged_user,
)
from app.shared.seeder.stages.work import CommentStage, TaskStage


def build_stages() -> list[Stage]:
    """Fresh instances of every stage, in master order."""
    return [
        ClearDatabaseStage(),
        UserStage(),
        WorkspaceStage(),
        SpaceStage(),
        BoardStage(),
        BoardTemplateStage(),
        TagStage(),
        TaskStage(),
        CommentStage(),
        NotificationStage(),
        ReminderStage(),
        FileStage(),
        InvitationStage(),
        AnalyticsStage(),
        UpdateStatisticsStage(),
    ]


__all__ = [
    "AnalyticsStage",
    "BoardStage",
    "BoardTemplateStage",
    "ClearDatabaseStage",
    "CommentStage",
    "FailurePolicy",
    "FileStage",
    "InvitationStage",
    "NotificationStage",
    "ReminderStage",
    "SpaceStage",
    "Stage",
    "StageContext",
    "StageOutput",
    "StageResult",
    "TagStage",
    "TaskStage",
    "UpdateStatisticsStage",
    "UserStage",
    "WorkspaceStage",
    "assert_topological_order",
    "build_stages",
    "find_privileged_user",
    "hash_password",
]
