"""Pydantic schemas for the seeder feature."""

from typing import Any, Literal

from pydantic import BaseModel, Field

ProfileName = Literal["development", "test", "production"]


class SeederStatus(BaseModel):
    """Current document store state."""

    database: str = Field(description="Logical store name")
    profile: str = Field(description="Profile a run would use by default")
    collections: dict[str, int] = Field(description="Document count per non-empty collection")
    total_documents: int = Field(description="Documents across all collections")
    backups: int = Field(description="Number of readable snapshots")
    latest_backup: str | None = Field(
        default=None,
        description="Id of the newest snapshot",
    )


class ProfileInfo(BaseModel):
    """Target counts of one environment profile."""

    name: ProfileName = Field(description="Profile name")
    description: str = Field(description="Human-readable description")
    counts: dict[str, Any] = Field(description="Per-entity counts and ranges")
    test_users: list[str] = Field(description="Emails of the fixed test accounts")
    steps: list[str] = Field(description="Steps a run with this profile executes")


class RunParams(BaseModel):
    """Parameters for a seeding run."""

    profile: ProfileName | None = Field(
        default=None,
        description="Environment profile; defaults to the configured one",
    )
    seed: int | None = Field(
        default=None,
        ge=0,
        description="Random seed; defaults to SEEDER_SEED",
    )
    modules: list[str] | None = Field(
        default=None,
        description="Substrings selecting steps by name or key",
    )
    skip_backup: bool = Field(
        default=False,
        description="Do not snapshot the store before the first step",
    )
    skip_validation: bool = Field(
        default=False,
        description="Persist generated records without rule checks",
    )


class StepResult(BaseModel):
    """Outcome of one pipeline step."""

    key: str = Field(description="Step key")
    created: dict[str, int] = Field(description="Documents created per kind")
    skipped: int = Field(description="Candidates dropped")
    warnings: list[str] = Field(default_factory=list, description="Step warnings")


class RunResult(BaseModel):
    """Result of a seeding run."""

    success: bool = Field(description="Whether the run completed")
    run_id: str | None = Field(default=None, description="Log correlation id of the run")
    profile: str = Field(description="Profile used")
    seed: int = Field(description="Random seed used")
    steps: list[StepResult] = Field(description="Per-step outcomes in execution order")
    records_created: dict[str, int] = Field(description="Documents created per kind")
    total_created: int = Field(description="Documents created in total")
    skipped: int = Field(description="Candidates dropped across all steps")
    backup_id: str | None = Field(default=None, description="Pre-run snapshot, if taken")
    duration_seconds: float = Field(description="Time taken in seconds")
    message: str = Field(description="Human-readable result message")


class BackupInfo(BaseModel):
    """Metadata of one snapshot."""

    id: str = Field(description="Snapshot id")
    timestamp: str = Field(description="ISO-8601 creation time")
    description: str = Field(default="", description="Why the snapshot was taken")
    collections: list[str] = Field(default_factory=list, description="Collections captured")
    counts: dict[str, int] = Field(default_factory=dict, description="Documents per collection")
    total_documents: int = Field(default=0, description="Documents captured")
    database: str | None = Field(default=None, description="Store the snapshot was taken from")
    version: str | None = Field(default=None, description="Snapshot format version")


class BackupStats(BaseModel):
    """Aggregate figures over all snapshots."""

    total_backups: int
    total_documents: int
    oldest: str | None = None
    newest: str | None = None
    average_documents: float


class RollbackParams(BaseModel):
    """Parameters for a rollback."""

    backup_id: str | None = Field(
        default=None,
        description="Snapshot to restore; the newest one when omitted",
    )


class RollbackResult(BaseModel):
    """Result of a rollback."""

    success: bool = Field(description="Whether the restore completed")
    backup_id: str = Field(description="Snapshot restored")
    restored: dict[str, int] = Field(description="Documents restored per collection")
    total_documents: int = Field(description="Documents restored in total")
    message: str = Field(description="Human-readable result message")


class CleanupResult(BaseModel):
    """Result of pruning old snapshots."""

    deleted: int = Field(description="Snapshots removed")
    max_age_days: int = Field(description="Age threshold applied")
    remaining: int = Field(description="Snapshots left")
