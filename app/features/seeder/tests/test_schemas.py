"""Unit tests for seeder schemas."""

import pytest
from pydantic import ValidationError

from app.features.seeder import schemas


class TestRunParams:
    """Tests for RunParams schema."""

    def test_default_values(self):
        """Test defaults defer to settings."""
        params = schemas.RunParams()

        assert params.profile is None
        assert params.seed is None
        assert params.modules is None
        assert params.skip_backup is False
        assert params.skip_validation is False

    def test_custom_values(self):
        params = schemas.RunParams(profile="test", seed=7, modules=["users", "tags"], skip_backup=True)

        assert params.profile == "test"
        assert params.seed == 7
        assert params.modules == ["users", "tags"]
        assert params.skip_backup is True

    def test_negative_seed_rejected(self):
        with pytest.raises(ValidationError):
            schemas.RunParams(seed=-1)

    def test_unknown_profile_rejected(self):
        """Test only the three profile names are accepted."""
        with pytest.raises(ValidationError):
            schemas.RunParams(profile="staging")


class TestBackupInfo:
    """Tests for BackupInfo schema."""

    def test_from_metadata(self):
        """Test snapshot metadata validates as-is."""
        info = schemas.BackupInfo.model_validate(
            {
                "id": "backup-2025-06-01T00-00-00+00-00",
                "timestamp": "2025-06-01T00:00:00+00:00",
                "description": "Pre-seed backup (test)",
                "collections": ["users"],
                "counts": {"users": 3},
                "total_documents": 3,
                "database": "taskhub",
                "version": "1.0",
            }
        )

        assert info.counts == {"users": 3}
        assert info.version == "1.0"

    def test_minimal_metadata(self):
        """Test missing optional fields fall back to empty values."""
        info = schemas.BackupInfo(id="b1", timestamp="2025-06-01T00:00:00+00:00")

        assert info.collections == []
        assert info.total_documents == 0
        assert info.database is None


class TestResults:
    """Tests for result schemas."""

    def test_run_result_serialization(self):
        result = schemas.RunResult(
            success=True,
            run_id="abc123",
            profile="test",
            seed=42,
            steps=[schemas.StepResult(key="users", created={"users": 2}, skipped=0)],
            records_created={"users": 2},
            total_created=2,
            skipped=0,
            duration_seconds=0.5,
            message="done",
        )

        data = result.model_dump()
        assert data["steps"][0]["warnings"] == []
        assert data["backup_id"] is None

    def test_cleanup_result(self):
        result = schemas.CleanupResult(deleted=2, max_age_days=7, remaining=1)

        assert result.model_dump() == {"deleted": 2, "max_age_days": 7, "remaining": 1}
