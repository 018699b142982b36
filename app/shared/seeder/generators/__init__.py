"""Entity generators for the seeding pipeline."""

from app.shared.seeder.generators.analytics import AnalyticsGenerator
from app.shared.seeder.generators.boards import BoardGenerator, ColumnGenerator
from app.shared.seeder.generators.files import FileGenerator
from app.shared.seeder.generators.integrations import IntegrationGenerator
from app.shared.seeder.generators.invitations import InvitationGenerator
from app.shared.seeder.generators.notifications import NotificationGenerator, ReminderGenerator
from app.shared.seeder.generators.tags import TagGenerator
from app.shared.seeder.generators.tasks import CommentGenerator, TaskGenerator
from app.shared.seeder.generators.templates import BoardTemplateGenerator, TemplateGenerator
from app.shared.seeder.generators.users import UserGenerator
from app.shared.seeder.generators.workspaces import SpaceGenerator, WorkspaceGenerator

__all__ = [
    "AnalyticsGenerator",
    "BoardGenerator",
    "BoardTemplateGenerator",
    "ColumnGenerator",
    "CommentGenerator",
    "FileGenerator",
    "IntegrationGenerator",
    "InvitationGenerator",
    "NotificationGenerator",
    "ReminderGenerator",
    "SpaceGenerator",
    "TagGenerator",
    "TaskGenerator",
    "TemplateGenerator",
    "UserGenerator",
    "WorkspaceGenerator",
]
