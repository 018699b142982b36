"""Tests for the stage contract and individual stages."""

import dataclasses

import bcrypt
import pytest

from app.core.exceptions import ConfigurationError, PersistenceError
from app.shared.seeder.config import BoardTemplateConfig, SeederConfig
from app.shared.seeder.stages import (
    BoardTemplateStage,
    ClearDatabaseStage,
    FailurePolicy,
    Stage,
    StageOutput,
    StageResult,
    UpdateStatisticsStage,
    UserStage,
    WorkspaceStage,
    assert_topological_order,
    build_stages,
    hash_password,
)


class PlainStage(Stage):
    name = "Plain"
    key = "plain"

    async def seed(self, ctx):
        return StageResult(key=self.key)


class LenientStage(PlainStage):
    failure_policy = FailurePolicy.CATCH_AND_CONTINUE


class TestStageResult:
    """Tests for StageResult."""

    def test_is_immutable(self):
        """Test neither the result nor its documents lists can change."""
        result = StageOutput("users")
        result.add("users", {"_id": "u1"})
        frozen = result.freeze({"total": 1})

        with pytest.raises(dataclasses.FrozenInstanceError):
            frozen.skipped = 3
        with pytest.raises(TypeError):
            frozen.created["users"] = ()
        with pytest.raises(TypeError):
            frozen.summary["total"] = 2
        assert isinstance(frozen.get("users"), tuple)

    def test_counts(self):
        """Test per-kind and total counts."""
        out = StageOutput("boards")
        out.add("boards", {"_id": "b1"})
        out.add("columns", {"_id": "c1"})
        out.add("columns", {"_id": "c2"})
        out.skip("bad board")

        result = out.freeze()

        assert result.counts == {"boards": 1, "columns": 2}
        assert result.count == 3
        assert result.skipped == 1
        assert result.warnings == ("bad board",)
        assert result.get("tasks") == ()


class TestTopologicalOrder:
    """Tests for assert_topological_order."""

    def test_master_order_is_valid(self):
        """Test the built-in order reads only earlier stages."""
        stages = build_stages()

        assert_topological_order(stages)
        assert [stage.key for stage in stages] == [
            "clear",
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
            "statistics",
        ]

    def test_out_of_order_rejected(self):
        """Test a stage reading a later stage is a configuration error."""
        stages = build_stages()
        stages[1], stages[2] = stages[2], stages[1]

        with pytest.raises(ConfigurationError) as exc_info:
            assert_topological_order(stages)

        assert exc_info.value.details["stage"] == "workspaces"


class TestStageContext:
    """Tests for dependency resolution."""

    @pytest.mark.asyncio
    async def test_prefers_in_run_results(self, store, scenario_config, make_context):
        """Test in-run results are used and filtered by the query."""
        ctx = make_context(scenario_config)
        await store.collection("users").create({"_id": "stored", "system_role": "admin"})
        ctx.results["users"] = StageResult(
            key="users",
            created={"users": [{"_id": "a", "system_role": "admin"}, {"_id": "b", "system_role": "user"}]},
        )

        users = await ctx.resolve("users", "users", query={"system_role": "admin"})

        assert [user["_id"] for user in users] == ["a"]

    @pytest.mark.asyncio
    async def test_falls_back_to_bounded_store_query(self, store, scenario_config, make_context):
        """Test the store fallback honours the fallback limit."""
        scenario_config.fallback_limit = 2
        ctx = make_context(scenario_config)
        await store.collection("users").insert_many({"_id": f"u{i}"} for i in range(5))

        users = await ctx.resolve("users", "users")

        assert [user["_id"] for user in users] == ["u0", "u1"]

    @pytest.mark.asyncio
    async def test_fallback_uses_named_collection(self, store, scenario_config, make_context):
        """Test a kind stored under another stage reads its own collection."""
        ctx = make_context(scenario_config)
        await store.collection("columns").create({"_id": "c1", "board": "b1"})
        await store.collection("columns").create({"_id": "c2", "board": "b2"})

        columns = await ctx.resolve("boards", "columns", query={"board": "b2"})

        assert [column["_id"] for column in columns] == ["c2"]


class TestFailurePolicies:
    """Tests for record-level failure handling."""

    @pytest.mark.asyncio
    async def test_store_errors_propagate_by_default(self, store, scenario_config, make_context):
        """Test a duplicate id aborts a skip-record stage."""
        ctx = make_context(scenario_config)
        await store.collection("things").create({"_id": "dup"})

        with pytest.raises(PersistenceError):
            await PlainStage().persist(ctx, "things", {"_id": "dup"}, StageOutput("plain"))

    @pytest.mark.asyncio
    async def test_catch_and_continue_skips(self, store, scenario_config, make_context):
        """Test a catch-and-continue stage records the failure and moves on."""
        ctx = make_context(scenario_config)
        await store.collection("things").create({"_id": "dup"})
        out = StageOutput("plain")

        stored = await LenientStage().persist(ctx, "things", {"_id": "dup"}, out)
        await LenientStage().persist(ctx, "things", {"_id": "fresh"}, out)

        assert stored is False
        assert out.skipped == 1
        assert [doc["_id"] for doc in out.get("things")] == ["fresh"]

    @pytest.mark.asyncio
    async def test_invalid_candidate_is_skipped(self, store, scenario_config, make_context):
        """Test validation failures are skipped, not persisted."""
        ctx = make_context(scenario_config)
        out = StageOutput("plain")

        await PlainStage().store_all(ctx, "tag", "tags", [{"_id": "t1", "name": "Bug", "color": "red"}], out)

        assert out.skipped == 1
        assert "Invalid color format: red" in out.warnings[0]
        assert await store.collection("tags").count_documents() == 0

    @pytest.mark.asyncio
    async def test_skip_validation_persists_anyway(self, store, scenario_config, make_context):
        """Test skip_validation bypasses the rules."""
        ctx = make_context(scenario_config, skip_validation=True)
        out = StageOutput("plain")

        await PlainStage().store_all(ctx, "tag", "tags", [{"_id": "t1", "name": "Bug", "color": "red"}], out)

        assert out.skipped == 0
        assert await store.collection("tags").count_documents() == 1


class TestMissingDependencies:
    """Tests for stages whose upstream is empty."""

    @pytest.mark.asyncio
    async def test_workspaces_without_users(self, scenario_config, make_context):
        """Test an empty upstream yields an empty result with a warning."""
        result = await WorkspaceStage().seed(make_context(scenario_config))

        assert result.count == 0
        assert result.warnings == ("No users available for Create Workspaces",)

    @pytest.mark.asyncio
    async def test_templates_without_privileged_user(self, store, make_context):
        """Test templates need a super admin or admin owner."""
        await store.collection("users").create({"_id": "u1", "system_role": "user"})
        config = SeederConfig(board_templates=BoardTemplateConfig(count=2))

        result = await BoardTemplateStage().seed(make_context(config))

        assert result.count == 0
        assert "super_admin or admin user" in result.warnings[0]

    @pytest.mark.asyncio
    async def test_templates_prefer_super_admin(self, store, make_context):
        """Test a stored super admin owns the templates over an admin."""
        await store.collection("users").create({"_id": "admin", "system_role": "admin"})
        await store.collection("users").create({"_id": "root", "system_role": "super_admin"})
        config = SeederConfig(board_templates=BoardTemplateConfig(count=2))

        result = await BoardTemplateStage().seed(make_context(config))

        assert result.summary["created_by"] == "root"
        assert result.counts == {"board_templates": 2}


class TestUserStage:
    """Tests for UserStage."""

    @pytest.mark.asyncio
    async def test_hashes_passwords_and_writes_companions(self, store, scenario_config, make_context):
        """Test stored users carry a bcrypt hash and companion ids."""
        result = await UserStage().seed(make_context(scenario_config))

        users = await store.collection("users").find()
        assert len(users) == 5
        assert result.counts == {"users": 5, "user_preferences": 5, "user_sessions": 5, "user_roles": 5}
        for user in users:
            assert "password" not in user
            assert bcrypt.checkpw(b"12345678A!", user["password_hash"].encode("utf-8"))
            preferences = await store.collection("user_preferences").find_one({"_id": user["preferences"]})
            assert preferences["user"] == user["_id"]

    def test_hash_cache_reuses_hash(self):
        """Test the same password is hashed once per cache."""
        cache: dict[str, str] = {}

        first = hash_password("12345678A!", 4, cache)
        second = hash_password("12345678A!", 4, cache)

        assert first == second
        assert list(cache) == ["12345678A!"]


class TestBookends:
    """Tests for the clear and statistics steps."""

    @pytest.mark.asyncio
    async def test_clear_reports_removed(self, store, scenario_config, make_context):
        """Test clearing reports documents removed per collection."""
        await store.collection("users").insert_many([{"_id": "u1"}, {"_id": "u2"}])
        await store.collection("tasks").create({"_id": "t1"})

        result = await ClearDatabaseStage().seed(make_context(scenario_config))

        assert result.summary["removed"] == {"tasks": 1, "users": 2}
        assert result.summary["total_removed"] == 3
        assert await store.list_collections() == []

    @pytest.mark.asyncio
    async def test_statistics_report_dangling_references(self, store, scenario_config, make_context):
        """Test references to missing documents are counted."""
        ctx = make_context(scenario_config)
        workspace = {"_id": "w1", "owner": "ghost"}
        await store.collection("workspaces").create(workspace)
        ctx.results["workspaces"] = StageResult(key="workspaces", created={"workspaces": [workspace]})

        result = await UpdateStatisticsStage().seed(ctx)

        assert result.summary["counts"] == {"workspaces": 1}
        assert result.summary["total_documents"] == 1
        assert result.summary["dangling_references"] == {"workspaces.owner": 1}
        assert result.warnings == ("1 workspaces.owner reference(s) point at missing users",)
