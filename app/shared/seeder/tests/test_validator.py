"""Tests for generated-record validation rules."""

from datetime import UTC, datetime

import pytest

from app.shared.seeder.validator import (
    VALIDATORS,
    Validator,
    validate_admin,
    validate_board,
    validate_board_template,
    validate_comment,
    validate_file,
    validate_integration,
    validate_invitation,
    validate_notification,
    validate_reminder,
    validate_space,
    validate_tag,
    validate_task,
    validate_template,
    validate_user,
    validate_workspace,
)


class TestValidateUser:
    """Tests for user rules."""

    def test_valid_user(self):
        """Test a well-formed user passes."""
        result = validate_user(
            {"name": "Ada Lovelace", "email": "ada@example.com", "password": "12345678A!", "system_role": "admin"}
        )

        assert result.is_valid
        assert result.warnings == []

    @pytest.mark.parametrize("email", ["no-at-sign", "a@b", "a b@c.com", None])
    def test_invalid_email(self, email):
        """Test malformed emails are errors."""
        assert not validate_user({"name": "Ada", "email": email}).is_valid

    def test_name_with_punctuation_is_a_warning(self):
        """Test non-letter names only warn."""
        result = validate_user({"name": "Ada O'Brien", "email": "ada@example.com"})

        assert result.is_valid
        assert result.warnings

    def test_short_name_is_an_error(self):
        """Test one-character names are rejected."""
        assert not validate_user({"name": "A", "email": "a@example.com"}).is_valid

    @pytest.mark.parametrize("password", ["short1!", "abcdefgh", "abcdefg1", "12345678!"])
    def test_weak_passwords(self, password):
        """Test passwords need 8+ chars with a letter, digit and special."""
        assert not validate_user({"name": "Ada", "email": "a@example.com", "password": password}).is_valid

    def test_unknown_role(self):
        """Test system roles are restricted."""
        assert not validate_user({"name": "Ada", "email": "a@example.com", "system_role": "root"}).is_valid


class TestValidateOrganization:
    """Tests for workspace, space, board and template rules."""

    def test_workspace_requires_owner(self):
        """Test a workspace without owner is rejected."""
        assert not validate_workspace({"name": "Team Hub"}).is_valid
        assert validate_workspace({"name": "Team Hub", "owner": "u1", "members": []}).is_valid

    def test_workspace_members_must_be_list(self):
        """Test members must be a list."""
        assert not validate_workspace({"name": "Team Hub", "owner": "u1", "members": "u1"}).is_valid

    def test_space_requires_workspace(self):
        """Test a space must belong to a workspace."""
        assert not validate_space({"name": "QA Squad"}).is_valid
        assert validate_space({"name": "QA Squad", "workspace": "w1"}).is_valid

    def test_board_requires_space_and_owner(self):
        """Test board references are required."""
        assert not validate_board({"name": "Sprint Board", "owner": "u1"}).is_valid
        assert not validate_board({"name": "Sprint Board", "space": "s1"}).is_valid
        assert validate_board({"name": "Sprint Board", "space": "s1", "owner": "u1", "columns": []}).is_valid

    def test_board_template_needs_lists(self):
        """Test templates must define at least one list."""
        assert not validate_board_template({"name": "Kanban", "lists": []}).is_valid
        result = validate_board_template({"name": "Kanban", "lists": [{"title": "To Do"}]})
        assert result.is_valid
        assert result.warnings == ["Template has no creator"]


class TestValidateTag:
    """Tests for tag rules."""

    def test_valid_tag(self):
        """Test a well-formed tag passes."""
        assert validate_tag({"name": "Bug", "color": "#DC2626", "scope": "global"}).is_valid

    @pytest.mark.parametrize("color", ["not-a-color", "#FFF", "DC2626", "#GGGGGG", None])
    def test_invalid_colors(self, color):
        """Test colours must be #RRGGBB."""
        assert not validate_tag({"name": "Bug", "color": color}).is_valid

    def test_unknown_scope(self):
        """Test scope is restricted."""
        assert not validate_tag({"name": "Bug", "color": "#DC2626", "scope": "team"}).is_valid


class TestValidateWork:
    """Tests for task and comment rules."""

    def test_task_without_people_only_warns(self):
        """Test missing assignee and reporter are warnings."""
        result = validate_task({"title": "Fix login", "board": "b1"})

        assert result.is_valid
        assert len(result.warnings) == 2

    def test_task_status_and_priority(self):
        """Test status and priority are restricted."""
        assert not validate_task({"title": "Fix login", "board": "b1", "status": "blocked"}).is_valid
        assert not validate_task({"title": "Fix login", "board": "b1", "priority": "urgent"}).is_valid

    def test_comment_requires_fields(self):
        """Test comment content, task and author are required."""
        assert not validate_comment({"content": "", "task": "t1", "author": "u1"}).is_valid
        assert validate_comment({"content": "LGTM", "task": "t1", "author": "u1"}).is_valid


class TestValidateActivity:
    """Tests for notification, reminder, file and invitation rules."""

    def test_notification_priority(self):
        """Test notification priorities include urgent but not critical."""
        assert validate_notification({"recipient": "u1", "type": "task_assigned", "priority": "urgent"}).is_valid
        assert not validate_notification({"recipient": "u1", "priority": "critical"}).is_valid

    def test_reminder_needs_datetime(self):
        """Test scheduled_at must be a datetime."""
        base = {"title": "Stand-up", "user": "u1", "methods": ["email"]}

        assert not validate_reminder({**base, "scheduled_at": "tomorrow"}).is_valid
        assert validate_reminder({**base, "scheduled_at": datetime(2025, 1, 1, tzinfo=UTC)}).is_valid

    def test_reminder_methods(self):
        """Test unknown delivery methods are rejected."""
        result = validate_reminder(
            {"title": "Stand-up", "user": "u1", "scheduled_at": datetime.now(UTC), "methods": ["sms"]}
        )

        assert result.errors == ["Invalid method: sms"]

    def test_large_file_only_warns(self):
        """Test files above 100 MB are a warning."""
        result = validate_file(
            {"filename": "dump.zip", "mime_type": "application/zip", "size": 200 * 1024 * 1024, "uploaded_by": "u1"}
        )

        assert result.is_valid
        assert result.warnings

    def test_invitation_rules(self):
        """Test invitation email, role and target are checked."""
        valid = {
            "invitee": {"email": "new@example.com"},
            "type": "board",
            "role": "viewer",
            "target_entity": {"kind": "board", "id": "b1"},
        }

        assert validate_invitation(valid).is_valid
        assert not validate_invitation({**valid, "role": "owner"}).is_valid
        assert not validate_invitation({**valid, "target_entity": {"kind": "board"}}).is_valid
        assert not validate_invitation({**valid, "invitee": {"email": "nope"}}).is_valid


class TestValidateAdmin:
    """Tests for admin account rules."""

    def test_valid_admin(self):
        admin = {
            "user_name": "system_admin",
            "email": "admin@admin.com",
            "role": "super_admin",
            "permissions": [{"name": "audit_logs", "allowed": True}],
        }

        assert validate_admin(admin).is_valid
        assert not validate_admin({**admin, "role": "user"}).is_valid
        assert not validate_admin({**admin, "email": "admin"}).is_valid
        assert not validate_admin({**admin, "permissions": "all"}).is_valid

    def test_no_permissions_is_warning(self):
        """Test an admin without permissions is kept with a warning."""
        result = validate_admin(
            {"user_name": "viewer", "email": "v@x.com", "role": "viewer", "permissions": []}
        )

        assert result.is_valid
        assert result.warnings == ["Admin v@x.com has no permissions"]


class TestValidateTemplate:
    """Tests for general template rules."""

    def test_type_and_content(self):
        template = {"name": "Bug Fix Task", "type": "task", "content": {"stages": ["Fix"]}, "created_by": "a1"}

        assert validate_template(template).is_valid
        assert not validate_template({**template, "type": "ai-prompt"}).is_valid
        assert not validate_template({**template, "content": {}}).is_valid
        assert validate_template({**template, "created_by": None}).warnings == ["Template has no creator"]


class TestValidateIntegration:
    """Tests for integration rules."""

    def test_catalog_values(self):
        integration = {
            "name": "Slack",
            "category": "communication",
            "status": "active",
            "sync_status": "success",
            "is_enabled": True,
        }

        assert validate_integration(integration).is_valid
        assert not validate_integration({**integration, "category": "chat"}).is_valid
        assert not validate_integration({**integration, "sync_status": "stale"}).is_valid

    def test_enabled_but_inactive_is_warning(self):
        result = validate_integration(
            {"name": "Stripe", "category": "analytics", "status": "pending", "is_enabled": True}
        )

        assert result.is_valid
        assert result.warnings == ["Integration Stripe is enabled but pending"]



class TestValidator:
    """Tests for the dispatching Validator."""

    def test_covers_every_entity(self):
        """Test every validated entity kind is registered."""
        assert set(VALIDATORS) == {
            "user",
            "workspace",
            "space",
            "board",
            "board_template",
            "tag",
            "task",
            "comment",
            "notification",
            "reminder",
            "file",
            "invitation",
            "admin",
            "template",
            "integration",
        }

    def test_keeps_summary(self):
        """Test the validator counts and logs findings."""
        validator = Validator()
        validator.validate("tag", {"name": "Bug", "color": "not-a-color"})
        validator.validate("tag", {"name": "Bug", "color": "#DC2626"})

        summary = validator.get_summary()

        assert summary["validated"] == 2
        assert summary["rejected"] == 1
        assert summary["errors"] == ["tag: Invalid color format: not-a-color"]

    def test_reset(self):
        """Test reset clears counters and logs."""
        validator = Validator()
        validator.validate("comment", {})
        validator.reset()

        assert validator.get_summary() == {"validated": 0, "rejected": 0, "errors": [], "warnings": []}

    def test_unknown_kind(self):
        """Test unknown kinds raise KeyError."""
        with pytest.raises(KeyError):
            Validator().validate("column", {})
