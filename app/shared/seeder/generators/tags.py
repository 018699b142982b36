"""Tag generator."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from app.shared.seeder.config import DEFAULT_GLOBAL_TAGS

if TYPE_CHECKING:
    from app.shared.seeder.config import TagConfig
    from app.shared.seeder.fixtures import FixtureGenerator


TAG_CATEGORIES: dict[str, list[str]] = {
    "priority": ["High Priority", "Medium Priority", "Low Priority", "Urgent", "Critical", "Nice to Have"],
    "status": ["In Progress", "Completed", "On Hold", "Cancelled", "Pending Review", "Blocked"],
    "type": ["Bug", "Feature", "Enhancement", "Documentation", "Design", "Research", "Maintenance"],
    "department": ["Frontend", "Backend", "Design", "QA", "DevOps", "Marketing", "Sales", "Support"],
    "skill": ["JavaScript", "Python", "React", "Node.js", "UI/UX", "Testing", "Database"],
    "development": ["Full Stack", "Mobile", "API", "Infrastructure"],
    "quality": ["High Quality", "Needs Review", "Tested", "Performance", "Security"],
    "ui": ["UI Design", "UX Design", "Responsive", "Accessibility", "Mobile First", "Dark Mode"],
}

TAG_DESCRIPTIONS: dict[str, list[str]] = {
    "priority": [
        "High priority items that require immediate attention.",
        "Critical issues that block other work.",
    ],
    "status": [
        "Work items currently being worked on.",
        "Items temporarily paused or waiting for dependencies.",
    ],
    "type": [
        "Issues and problems that need to be fixed.",
        "New functionality and features to be added.",
        "Improvements to existing features.",
    ],
    "department": [
        "Frontend development and user interface work.",
        "Backend development and server-side logic.",
        "Quality assurance and testing.",
    ],
    "skill": [
        "Technical skills and knowledge areas.",
        "Expertise and specialization areas.",
    ],
    "development": [
        "Software development activities.",
        "Technical implementation work.",
    ],
    "quality": [
        "Quality standards and requirements.",
        "Testing and validation activities.",
    ],
    "ui": [
        "User interface design and development.",
        "UI/UX improvements and enhancements.",
    ],
}

TAG_COLORS: dict[str, list[str]] = {
    "priority": ["#EF4444", "#F59E0B", "#10B981", "#3B82F6", "#8B5CF6"],
    "status": ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#6B7280"],
    "type": ["#EF4444", "#10B981", "#3B82F6", "#8B5CF6", "#F59E0B"],
    "department": ["#3B82F6", "#10B981", "#EC4899", "#F59E0B", "#8B5CF6"],
    "skill": ["#8B5CF6", "#EC4899", "#3B82F6", "#10B981", "#F59E0B"],
    "development": ["#3B82F6", "#1D4ED8", "#2563EB", "#1E40AF", "#1E3A8A"],
    "quality": ["#10B981", "#059669", "#047857", "#065F46", "#064E3B"],
    "ui": ["#EC4899", "#DB2777", "#BE185D", "#9D174D", "#831843"],
}

TAG_SCOPES = ["global", "workspace", "space", "board"]
TAG_ICONS = ["bug", "star", "flag", "tag", "label", "bookmark", "pin", "check"]
TAG_GROUPS = ["Development", "Design", "Testing", "Documentation", "Management"]


class TagGenerator:
    """Generator for global and scoped tags."""

    def __init__(self, fixtures: FixtureGenerator, config: TagConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate(
        self,
        users: Sequence[Mapping[str, Any]],
        scopes: Mapping[str, Sequence[str]],
    ) -> list[dict[str, Any]]:
        """Generate tag candidates.

        The default global tags come first; random tags fill the remaining
        count. A random tag scoped to workspace, space or board receives a
        ``scope_id`` from ``scopes``; with no target of that kind it falls
        back to ``global``.

        Args:
            users: Users eligible as tag creators.
            scopes: Target identifiers keyed by scope name.

        Returns:
            List of tag dictionaries.
        """
        count = self.config.count
        tags = [
            self.build(users, name, color, category, "global", None)
            for name, color, category in DEFAULT_GLOBAL_TAGS[:count]
        ]
        for _ in range(count - len(tags)):
            tags.append(self.random_tag(users, scopes))
        return tags

    def random_tag(
        self,
        users: Sequence[Mapping[str, Any]],
        scopes: Mapping[str, Sequence[str]],
    ) -> dict[str, Any]:
        fx = self.fixtures
        category = fx.choice(list(TAG_CATEGORIES))
        name = fx.choice(TAG_CATEGORIES[category])
        scope = fx.choice(TAG_SCOPES)
        targets = scopes.get(scope) or []
        if scope != "global" and not targets:
            scope = "global"
        scope_id = fx.choice(targets) if scope != "global" else None
        return self.build(users, name, fx.choice(TAG_COLORS[category]), category, scope, scope_id)

    def build(
        self,
        users: Sequence[Mapping[str, Any]],
        name: str,
        color: str,
        category: str,
        scope: str,
        scope_id: str | None,
    ) -> dict[str, Any]:
        fx = self.fixtures
        created_at, updated_at = fx.timestamps(180)
        return {
            "_id": fx.object_id(),
            "name": name,
            "description": fx.choice(TAG_DESCRIPTIONS.get(category, TAG_DESCRIPTIONS["type"])),
            "color": color,
            "text_color": "#FFFFFF",
            "category": category,
            "scope": scope,
            "scope_id": scope_id,
            "created_by": fx.choice(users)["_id"],
            "icon": fx.choice(TAG_ICONS),
            "group": fx.choice(TAG_GROUPS),
            "settings": {
                "is_system_tag": fx.boolean(0.2),
                "auto_assign": {"enabled": fx.boolean(0.3), "rules": []},
                "notifications": {"on_assign": fx.boolean(0.4), "on_remove": fx.boolean(0.3)},
                "permissions": {
                    "can_use": fx.choice(["everyone", "members", "admins", "creator"]),
                    "can_edit": fx.choice(["creator", "admins", "everyone"]),
                    "can_delete": fx.choice(["creator", "admins"]),
                },
            },
            "stats": {"total_usage": 0, "task_usage": 0, "last_used": None},
            "is_active": True,
            "is_archived": False,
            "created_at": created_at,
            "updated_at": updated_at,
        }
