"""Invitation generator."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from app.shared.seeder.generators.workspaces import member_ids

if TYPE_CHECKING:
    from app.shared.seeder.config import InvitationConfig
    from app.shared.seeder.fixtures import FixtureGenerator


INVITATION_TYPES = ["workspace", "space", "board"]
INVITATION_STATUSES = ["pending", "accepted", "declined", "expired"]
INVITATION_ROLES = ["viewer", "member", "contributor", "admin"]

_PERMISSION_KEYS = (
    "can_view",
    "can_edit",
    "can_delete",
    "can_manage_members",
    "can_create_spaces",
    "can_create_boards",
    "can_invite_users",
    "can_manage_settings",
    "can_access_analytics",
    "can_export_data",
)

ROLE_PERMISSIONS: dict[str, dict[str, bool]] = {
    "admin": dict.fromkeys(_PERMISSION_KEYS, True),
    "member": {
        **dict.fromkeys(_PERMISSION_KEYS, False),
        "can_view": True,
        "can_edit": True,
        "can_create_spaces": True,
        "can_create_boards": True,
        "can_invite_users": True,
        "can_access_analytics": True,
    },
    "contributor": {
        **dict.fromkeys(_PERMISSION_KEYS, False),
        "can_view": True,
        "can_edit": True,
        "can_create_boards": True,
        "can_access_analytics": True,
        "can_export_data": True,
    },
    "viewer": {**dict.fromkeys(_PERMISSION_KEYS, False), "can_view": True},
}

INVITATION_MESSAGES: dict[str, list[str]] = {
    "workspace": [
        'You\'ve been invited to join the "{workspace}" workspace. We\'d love to have you collaborate with our team!',
        'Join us in the "{workspace}" workspace to start collaborating on exciting projects together.',
        'You\'re invited to be part of the "{workspace}" workspace.',
    ],
    "space": [
        'You\'ve been invited to join a space within the "{workspace}" workspace.',
        'Join our team in a collaborative space within "{workspace}".',
    ],
    "board": [
        'You\'ve been invited to collaborate on a board within the "{workspace}" workspace.',
        'Join our team on a project board within "{workspace}".',
    ],
}

INVITATION_SOURCES = {"workspace": "workspace_owner", "space": "space_admin", "board": "board_admin"}
CAMPAIGNS = ["organic", "referral", "marketing", "direct"]
UTM_SOURCES = ["email", "social", "search", "direct"]
UTM_MEDIUMS = ["email", "social", "cpc", "organic"]
UTM_CAMPAIGNS = ["workspace-invite", "team-collaboration", "project-management"]


class InvitationGenerator:
    """Generator for invitations into a workspace, one of its spaces or boards."""

    def __init__(self, fixtures: FixtureGenerator, config: InvitationConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate_for(
        self,
        workspace: Mapping[str, Any],
        users: Sequence[Mapping[str, Any]],
        spaces: Sequence[Mapping[str, Any]],
        boards: Sequence[Mapping[str, Any]],
    ) -> list[dict[str, Any]]:
        """Generate the invitations of one workspace.

        The inviter is a workspace member; the invitee is preferably a user
        outside the workspace, otherwise an external address. Space and board
        invitations fall back to the workspace when it has no such target.

        Args:
            workspace: Target workspace.
            users: All known users.
            spaces: Spaces of this workspace.
            boards: Boards of this workspace.

        Returns:
            List of invitation dictionaries.
        """
        inviters = member_ids(workspace) or [workspace["owner"]]
        count = self.fixtures.count_between(self.config.per_workspace)
        return [self.build(workspace, users, spaces, boards, inviters) for _ in range(count)]

    def build(
        self,
        workspace: Mapping[str, Any],
        users: Sequence[Mapping[str, Any]],
        spaces: Sequence[Mapping[str, Any]],
        boards: Sequence[Mapping[str, Any]],
        inviters: list[str],
    ) -> dict[str, Any]:
        fx = self.fixtures
        kind = fx.choice(INVITATION_TYPES)
        targets = {"space": spaces, "board": boards}.get(kind, [])
        if kind != "workspace" and not targets:
            kind = "workspace"
        target = fx.choice(targets) if kind != "workspace" else workspace

        inviter = fx.choice(inviters)
        outsiders = [user for user in users if user["_id"] not in inviters]
        if outsiders:
            user = fx.choice(outsiders)
            invitee = {"email": user["email"], "name": user.get("name"), "user": user["_id"]}
        else:
            name = fx.person_name()
            invitee = {"email": fx.email(name), "name": name, "user": None}

        role = fx.choice(INVITATION_ROLES)
        status = fx.choice(INVITATION_STATUSES)
        created_at, updated_at = fx.timestamps(30)
        expires_at = created_at + timedelta(days=fx.integer(7, 30))
        if status == "expired":
            expires_at = min(expires_at, fx.reference_time)

        return {
            "_id": fx.object_id(),
            "type": kind,
            "status": status,
            "invited_by": inviter,
            "invitee": invitee,
            "workspace": workspace["_id"],
            "target_entity": {"kind": kind, "id": target["_id"]},
            "role": role,
            "permissions": dict(ROLE_PERMISSIONS[role]),
            "message": fx.choice(INVITATION_MESSAGES[kind]).format(workspace=workspace.get("name", "")),
            "token": fx.token(32),
            "expires_at": expires_at,
            "accepted_at": updated_at if status == "accepted" else None,
            "declined_at": updated_at if status == "declined" else None,
            "metadata": {
                "source": INVITATION_SOURCES[kind],
                "campaign": fx.choice(CAMPAIGNS),
                "ip_address": fx.ip_address(),
                "utm_source": fx.choice(UTM_SOURCES),
                "utm_medium": fx.choice(UTM_MEDIUMS),
                "utm_campaign": fx.choice(UTM_CAMPAIGNS),
            },
            "settings": {
                "require_approval": fx.boolean(0.2),
                "send_reminders": fx.boolean(0.7),
                "reminder_frequency": fx.choice(["daily", "weekly", "monthly"]),
            },
            "notifications": {
                "email_sent": fx.boolean(0.9),
                "email_opened": fx.boolean(0.6),
                "push_sent": fx.boolean(0.4),
            },
            "created_at": created_at,
            "updated_at": updated_at,
        }
