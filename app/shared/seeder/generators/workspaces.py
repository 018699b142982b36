"""Workspace and space generators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.shared.seeder.config import SpaceConfig, WorkspaceConfig
    from app.shared.seeder.fixtures import FixtureGenerator


WORKSPACE_PREFIXES = ["Team", "Project", "Company", "Studio", "Lab", "Hub", "Group", "Squad"]
WORKSPACE_SUFFIXES = ["Workspace", "Space", "Hub", "Lab", "Studio", "Team", "Group"]

WORKSPACE_DESCRIPTIONS = [
    "A collaborative workspace for team projects and task management.",
    "Central hub for project coordination and team communication.",
    "Workspace dedicated to product development and innovation.",
    "Team collaboration space for efficient project management.",
    "Creative workspace for design and development projects.",
    "Professional workspace for business operations and planning.",
    "Innovation lab for research and development initiatives.",
    "Collaborative environment for cross-functional teams.",
]

WORKSPACE_TAG_GROUPS = [
    ["development", "coding", "programming", "software"],
    ["design", "creative", "art", "graphics"],
    ["marketing", "advertising", "branding", "social"],
    ["business", "management", "strategy", "planning"],
    ["research", "analysis", "data", "insights"],
    ["collaboration", "teamwork", "communication", "coordination"],
]

LOGO_PHOTOS = [
    "1497366216548-37526070297c",
    "1507003211169-0a1dd7228f2d",
    "1516321318423-f06f85e504b3",
    "1522202176988-66273c2fd55f",
    "1552664730-d307ca884978",
    "1560472354-b33ff0c44a43",
]

SPACE_PREFIXES = ["Frontend", "Backend", "Design", "Marketing", "Sales", "Support", "QA", "DevOps"]
SPACE_SUFFIXES = ["Team", "Squad", "Project", "Sprint", "Milestone", "Phase", "Release"]
SPACE_TYPES = ["project", "department", "team", "sprint", "milestone"]
SPACE_COLORS = ["#3B82F6", "#EF4444", "#10B981", "#F59E0B", "#8B5CF6", "#EC4899"]

SPACE_DESCRIPTIONS = [
    "Dedicated space for team collaboration and project management.",
    "Focused area for specific project deliverables and milestones.",
    "Team workspace for coordinated development and planning.",
    "Project space for tracking progress and managing tasks.",
    "Sprint workspace for agile development and iteration planning.",
    "Department space for organizational alignment and coordination.",
]


def member_ids(parent: dict[str, Any]) -> list[str]:
    """User ids from a ``members`` list, in order."""
    return [member["user"] for member in parent.get("members") or []]


class WorkspaceGenerator:
    """Generator for workspaces with an owner-first member list."""

    def __init__(self, fixtures: FixtureGenerator, config: WorkspaceConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate(self, users: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Generate workspace candidates.

        Args:
            users: Users eligible as owners and members.

        Returns:
            List of workspace dictionaries.
        """
        return [self.build(users) for _ in range(self.config.count)]

    def build(self, users: list[dict[str, Any]]) -> dict[str, Any]:
        fx = self.fixtures
        owner = fx.choice(users)
        others = fx.pick_many(
            users,
            self.config.members_per_workspace.min,
            self.config.members_per_workspace.max,
            exclude=[owner["_id"]],
            key="_id",
        )
        created_at, updated_at = fx.timestamps(365)

        members = [
            {
                "user": owner["_id"],
                "role": "admin",
                "joined_at": created_at,
                "permissions": {
                    "can_create_spaces": True,
                    "can_manage_members": True,
                    "can_edit_settings": True,
                    "can_delete_workspace": True,
                },
            }
        ]
        for user in others:
            members.append(
                {
                    "user": user["_id"],
                    "role": fx.choice(["member", "admin"]),
                    "joined_at": fx.datetime_between(created_at, fx.reference_time),
                    "permissions": {
                        "can_create_spaces": fx.boolean(),
                        "can_manage_members": fx.boolean(0.2),
                        "can_edit_settings": fx.boolean(0.1),
                        "can_delete_workspace": False,
                    },
                }
            )

        tag_group = fx.choice(WORKSPACE_TAG_GROUPS)
        return {
            "_id": fx.object_id(),
            "name": f"{fx.choice(WORKSPACE_PREFIXES)} {fx.company()} {fx.choice(WORKSPACE_SUFFIXES)}",
            "description": fx.choice(WORKSPACE_DESCRIPTIONS),
            "owner": owner["_id"],
            "members": members,
            "settings": {
                "theme": fx.choice(["light", "dark", "auto"]),
                "language": fx.choice(["en", "es", "fr", "de", "ja"]),
                "timezone": fx.choice(["UTC", "America/New_York", "Europe/London", "Asia/Tokyo"]),
                "notifications": {"email": fx.boolean(), "push": fx.boolean(), "desktop": fx.boolean()},
                "privacy": {
                    "allow_invites": fx.boolean(),
                    "public_profile": fx.boolean(),
                    "show_activity": fx.boolean(),
                },
                "features": {
                    "analytics": fx.boolean(),
                    "integrations": fx.boolean(),
                    "advanced_permissions": fx.boolean(),
                },
            },
            "logo": f"https://images.unsplash.com/photo-{fx.choice(LOGO_PHOTOS)}?w=150&h=150&fit=crop",
            "is_public": fx.boolean(0.3),
            "tags": fx.pick_many(tag_group, 1, 3),
            "created_at": created_at,
            "updated_at": updated_at,
        }


class SpaceGenerator:
    """Generator for spaces staffed from their workspace's members."""

    def __init__(self, fixtures: FixtureGenerator, config: SpaceConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate_for(self, workspace: dict[str, Any]) -> list[dict[str, Any]]:
        """Generate the spaces of one workspace.

        Args:
            workspace: Parent workspace.

        Returns:
            List of space dictionaries (empty when the workspace has no members).
        """
        candidates = member_ids(workspace)
        if not candidates:
            return []
        count = self.fixtures.count_between(self.config.per_workspace)
        return [self.build(workspace, candidates) for _ in range(count)]

    def build(self, workspace: dict[str, Any], candidates: list[str]) -> dict[str, Any]:
        fx = self.fixtures
        owner = fx.choice(candidates)
        others = fx.pick_many(
            candidates,
            self.config.members_per_space.min,
            self.config.members_per_space.max,
            exclude=[owner],
        )
        created_at, updated_at = fx.timestamps(180)

        members = [
            {
                "user": owner,
                "role": "admin",
                "joined_at": created_at,
                "permissions": {
                    "can_view_boards": True,
                    "can_create_boards": True,
                    "can_edit_boards": True,
                    "can_delete_boards": True,
                    "can_create_tasks": True,
                    "can_edit_tasks": True,
                    "can_delete_tasks": True,
                    "can_manage_members": True,
                    "can_edit_settings": True,
                },
            }
        ]
        for user_id in others:
            members.append(
                {
                    "user": user_id,
                    "role": fx.choice(["viewer", "member", "admin"]),
                    "joined_at": fx.datetime_between(created_at, fx.reference_time),
                    "permissions": {
                        "can_view_boards": True,
                        "can_create_boards": fx.boolean(),
                        "can_edit_boards": fx.boolean(0.3),
                        "can_delete_boards": fx.boolean(0.1),
                        "can_create_tasks": fx.boolean(),
                        "can_edit_tasks": fx.boolean(),
                        "can_delete_tasks": fx.boolean(0.2),
                        "can_manage_members": fx.boolean(0.1),
                        "can_edit_settings": fx.boolean(0.1),
                    },
                }
            )

        return {
            "_id": fx.object_id(),
            "name": f"{fx.choice(SPACE_PREFIXES)} {fx.choice(SPACE_SUFFIXES)}",
            "description": fx.choice(SPACE_DESCRIPTIONS),
            "workspace": workspace["_id"],
            "owner": owner,
            "members": members,
            "type": fx.choice(SPACE_TYPES),
            "color": fx.choice(SPACE_COLORS),
            "is_archived": False,
            "settings": {
                "visibility": fx.choice(["public", "private", "team"]),
                "permissions": {
                    "can_edit": ["owner", "admin"],
                    "can_delete": ["owner"],
                    "can_invite": ["owner", "admin"],
                },
                "features": {
                    "comments": fx.boolean(),
                    "attachments": fx.boolean(),
                    "time_tracking": fx.boolean(),
                    "labels": fx.boolean(),
                },
            },
            "created_at": created_at,
            "updated_at": updated_at,
        }
