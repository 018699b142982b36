"""User and user companion document generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.shared.seeder.config import UserConfig
    from app.shared.seeder.fixtures import FixtureGenerator


THEME_MODES = ["light", "dark", "auto"]
SUGGESTION_FREQUENCIES = ["realtime", "daily", "weekly", "never"]
DASHBOARD_VIEWS = ["overview", "tasks", "calendar", "analytics"]

DEVICE_TYPES = ["web", "mobile", "desktop"]
OPERATING_SYSTEMS = ["Windows", "macOS", "Linux", "iOS", "Android"]
BROWSERS = ["Chrome", "Firefox", "Safari", "Edge"]

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:125.0) Gecko/20100101 Firefox/125.0",
]

LOCATIONS = [
    ("United States", "New York", "America/New_York"),
    ("United Kingdom", "London", "Europe/London"),
    ("Canada", "Toronto", "America/Toronto"),
    ("Germany", "Berlin", "Europe/Berlin"),
    ("France", "Paris", "Europe/Paris"),
    ("Australia", "Sydney", "Australia/Sydney"),
    ("Japan", "Tokyo", "Asia/Tokyo"),
    ("India", "Mumbai", "Asia/Kolkata"),
]


class UserGenerator:
    """Generator for users and their preferences, sessions and roles."""

    def __init__(self, fixtures: FixtureGenerator, config: UserConfig) -> None:
        """Initialize the user generator.

        Args:
            fixtures: Seeded fixture generator.
            config: User configuration.
        """
        self.fixtures = fixtures
        self.config = config

    def generate(self) -> list[dict[str, Any]]:
        """Generate user candidates: the fixed test users, then random ones.

        Candidates still carry a plain ``password``; the stage replaces it
        with ``password_hash`` before persisting.

        Returns:
            List of user dictionaries.
        """
        fx = self.fixtures
        taken = {test_user.email.lower() for test_user in self.config.test_users}
        users: list[dict[str, Any]] = []

        for test_user in self.config.test_users:
            users.append(
                self._user(
                    name=test_user.name,
                    email=test_user.email,
                    password=test_user.password,
                    system_role=test_user.system_role,
                    email_verified=test_user.email_verified,
                    is_test_user=True,
                )
            )

        for _ in range(max(0, self.config.count - len(self.config.test_users))):
            name = fx.person_name()
            users.append(
                self._user(
                    name=name,
                    email=fx.email(name, taken),
                    password=self.config.default_password,
                    system_role="user",
                    email_verified=fx.boolean(0.8),
                    is_test_user=False,
                )
            )

        return users

    def _user(
        self,
        name: str,
        email: str,
        password: str,
        system_role: str,
        email_verified: bool,
        is_test_user: bool,
    ) -> dict[str, Any]:
        fx = self.fixtures
        created_at, updated_at = fx.timestamps(365)
        return {
            "_id": fx.object_id(),
            "name": name,
            "email": email,
            "password": password,
            "system_role": system_role,
            "email_verified": email_verified,
            "is_active": True,
            "is_locked": False,
            "is_test_user": is_test_user,
            "avatar": None,
            "last_login": fx.past_datetime(7),
            "preferences": None,
            "sessions": None,
            "roles": None,
            "created_at": created_at,
            "updated_at": updated_at,
        }

    def companions(self, user: dict[str, Any]) -> dict[str, dict[str, Any]]:
        """Build the preferences, sessions and roles documents of a user.

        The user's ``preferences``/``sessions``/``roles`` fields are set to the
        companion identifiers.

        Args:
            user: User candidate (mutated in place).

        Returns:
            Mapping of collection name to companion document.
        """
        fx = self.fixtures
        country, city, timezone = fx.choice(LOCATIONS)

        preferences = {
            "_id": fx.object_id(),
            "user": user["_id"],
            "theme": {
                "mode": fx.choice(THEME_MODES),
                "primary_color": fx.color(),
                "sidebar_collapsed": fx.boolean(),
            },
            "notifications": {
                "email": {
                    "task_assigned": fx.boolean(),
                    "task_completed": fx.boolean(),
                    "task_overdue": True,
                    "comment_added": fx.boolean(),
                    "mention_received": True,
                    "space_updates": fx.boolean(),
                    "weekly_digest": fx.boolean(),
                },
                "push": {
                    "task_assigned": True,
                    "task_completed": fx.boolean(),
                    "task_overdue": True,
                    "comment_added": fx.boolean(),
                    "mention_received": True,
                    "space_updates": fx.boolean(),
                },
                "in_app": {
                    "task_assigned": True,
                    "task_completed": True,
                    "task_overdue": True,
                    "comment_added": True,
                    "mention_received": True,
                    "space_updates": True,
                },
            },
            "ai": {
                "enable_suggestions": fx.boolean(),
                "enable_risk_analysis": fx.boolean(),
                "enable_auto_description": fx.boolean(),
                "suggestion_frequency": fx.choice(SUGGESTION_FREQUENCIES),
            },
            "dashboard": {
                "default_view": fx.choice(DASHBOARD_VIEWS),
                "widgets": [
                    {"type": "tasks_overview", "position": 0, "settings": {"show_completed": fx.boolean()}},
                    {"type": "recent_activity", "position": 1, "settings": {"limit": fx.integer(5, 20)}},
                ],
            },
            "created_at": user["created_at"],
            "updated_at": user["updated_at"],
        }

        sessions = {
            "_id": fx.object_id(),
            "user": user["_id"],
            "sessions": [
                {
                    "session_id": fx.token(32),
                    "device_id": fx.token(16),
                    "device_info": {
                        "type": fx.choice(DEVICE_TYPES),
                        "os": fx.choice(OPERATING_SYSTEMS),
                        "browser": fx.choice(BROWSERS),
                        "version": f"{fx.integer(1, 9)}.{fx.integer(0, 9)}.{fx.integer(0, 9)}",
                        "user_agent": fx.choice(USER_AGENTS),
                    },
                    "ip_address": fx.ip_address(),
                    "location": {"country": country, "city": city, "timezone": timezone},
                    "is_active": True,
                    "login_at": fx.past_datetime(7),
                    "last_activity_at": fx.past_datetime(1),
                }
            ],
            "created_at": user["created_at"],
            "updated_at": user["updated_at"],
        }

        roles = {
            "_id": fx.object_id(),
            "user": user["_id"],
            "system_role": user["system_role"],
            "workspace_roles": [],
            "created_at": user["created_at"],
            "updated_at": user["updated_at"],
        }

        user["preferences"] = preferences["_id"]
        user["sessions"] = sessions["_id"]
        user["roles"] = roles["_id"]
        return {"user_preferences": preferences, "user_sessions": sessions, "user_roles": roles}
