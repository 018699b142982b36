#!/usr/bin/env python
"""TaskHub database seeder CLI.

Seed the document store from an environment profile, inspect it, manage the
snapshots taken around destructive runs, and maintain the admin console
accounts and integrations.

Usage:
    # Seed with the profile derived from APP_ENV
    uv run python scripts/seed_database.py --seed --confirm

    # Seed the test profile with a fixed seed, users and workspaces only
    uv run python scripts/seed_database.py --seed --profile test --seed-value 42 --modules users,workspaces --confirm

    # Preview a run against an in-memory store
    uv run python scripts/seed_database.py --seed --dry-run

    # Show counts / list snapshots / restore the newest snapshot
    uv run python scripts/seed_database.py --status
    uv run python scripts/seed_database.py --list-backups
    uv run python scripts/seed_database.py --rollback --confirm

    # Admin console accounts and integrations
    uv run python scripts/seed_database.py --admins --confirm
    uv run python scripts/seed_database.py --integrations --confirm
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml

from app.core.config import Settings, get_settings
from app.core.exceptions import ConfigurationError, TaskHubError
from app.core.logging import configure_logging, get_logger
from app.shared.documents import DocumentStore, MemoryDocumentStore, open_document_store
from app.shared.seeder import (
    AdminSeeder,
    BackupManager,
    DatabaseSeeder,
    IntegrationSeeder,
    SeederConfig,
    SeedOptions,
)
from app.shared.seeder.config import EnvironmentProfile, apply_overrides

logger = get_logger(__name__)

LATEST_BACKUP = "latest"


def load_overrides(path: Path) -> dict[str, Any]:
    """Load seeder overrides from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed mapping (empty for an empty file).

    Raises:
        ConfigurationError: If the file is missing, unparsable or not a mapping.
    """
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")
    return data


def build_config(args: argparse.Namespace, settings: Settings) -> SeederConfig:
    """Resolve the run configuration.

    Precedence: command-line flags, then the YAML file, then ``SEEDER_*``
    settings, then the profile defaults.
    """
    overrides = load_overrides(args.config) if args.config else {}
    file_profile = overrides.pop("profile", None)
    file_seed = overrides.pop("seed", None)
    profile = args.profile or file_profile
    seed = args.seed_value if args.seed_value is not None else file_seed

    config = SeederConfig.from_settings(settings, profile=profile, seed=seed)
    config = apply_overrides(config, overrides)
    if args.no_progress:
        config.enable_progress = False
    return config


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="TaskHub Database Seeder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Development dataset
  seed_database.py --seed --profile development --confirm

  # Only tags and tasks, no snapshot
  seed_database.py --seed --modules tags,tasks --skip-backup --confirm

  # Counts from a YAML file
  seed_database.py --seed --config seed.yaml --confirm

  # Restore a specific snapshot
  seed_database.py --rollback backup-2025-06-01T00-00-00-000000+00-00 --confirm

  # Delete snapshots older than 14 days
  seed_database.py --cleanup-backups 14

  # Admin console accounts and integrations
  seed_database.py --admins --confirm
  seed_database.py --integration-stats
        """,
    )

    # Operation modes (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument(
        "--seed",
        action="store_true",
        help="Clear the store and run the seeding pipeline",
    )
    mode_group.add_argument(
        "--status",
        action="store_true",
        help="Show current document counts",
    )
    mode_group.add_argument(
        "--list-backups",
        action="store_true",
        help="List snapshots, newest first",
    )
    mode_group.add_argument(
        "--backup",
        action="store_true",
        help="Take a manual snapshot",
    )
    mode_group.add_argument(
        "--rollback",
        nargs="?",
        const=LATEST_BACKUP,
        metavar="BACKUP_ID",
        help="Restore a snapshot (the newest one when no id is given)",
    )
    mode_group.add_argument(
        "--cleanup-backups",
        type=int,
        metavar="DAYS",
        help="Delete snapshots older than DAYS",
    )
    mode_group.add_argument(
        "--backup-stats",
        action="store_true",
        help="Show snapshot statistics",
    )
    mode_group.add_argument(
        "--admins",
        action="store_true",
        help="Create the main and default admin console accounts",
    )
    mode_group.add_argument(
        "--admin-stats",
        action="store_true",
        help="Show admin console account counts",
    )
    mode_group.add_argument(
        "--reset-admins",
        action="store_true",
        help="Delete every admin console account",
    )
    mode_group.add_argument(
        "--integrations",
        action="store_true",
        help="Replace integrations with the built-in catalog",
    )
    mode_group.add_argument(
        "--integration-stats",
        action="store_true",
        help="Show integration counts",
    )
    mode_group.add_argument(
        "--clear-integrations",
        action="store_true",
        help="Delete every integration",
    )

    # Run options
    parser.add_argument(
        "--profile",
        choices=[profile.value for profile in EnvironmentProfile],
        help="Environment profile (default: SEEDER_PROFILE or derived from APP_ENV)",
    )
    parser.add_argument(
        "--seed-value",
        type=int,
        help="Random seed for reproducibility (default: SEEDER_SEED)",
    )
    parser.add_argument(
        "--modules",
        help="Comma-separated step names or keys to run (e.g. users,tasks)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Load count overrides from a YAML file",
    )
    parser.add_argument(
        "--skip-backup",
        action="store_true",
        help="Do not snapshot the store before seeding",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Persist generated records without rule checks",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars",
    )
    parser.add_argument(
        "--description",
        default="Manual backup",
        help="Label for --backup (default: Manual backup)",
    )

    # Safety options
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Confirm destructive operations",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run against an in-memory store; the database is not touched",
    )

    # Other options
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable detailed logging",
    )

    return parser


def print_banner() -> None:
    """Print the seeder banner."""
    print()
    print("=" * 60)
    print("  TaskHub - Database Seeder")
    print("=" * 60)
    print()


def print_counts(counts: dict[str, int], title: str = "Current Document Counts") -> None:
    """Print collection counts in a formatted way."""
    print(f"\n{title}:")
    print("-" * 40)
    if not counts:
        print("  (empty)")
    for collection, count in counts.items():
        print(f"  {collection:<30} {count:>8,}")
    print("-" * 40)
    print(f"  {'Total':<30} {sum(counts.values()):>8,}")
    print()


def production_blocked(settings: Settings) -> bool:
    """Print an error and return True when the production guard applies."""
    if settings.is_production and not settings.seeder_allow_production:
        print("ERROR: Cannot run seeder in production environment.")
        print("Set SEEDER_ALLOW_PRODUCTION=true to override (not recommended).")
        return True
    return False


def confirmation_missing(args: argparse.Namespace, settings: Settings, action: str) -> bool:
    """Print an error and return True when --confirm is required but absent."""
    if settings.seeder_require_confirm and not args.confirm and not args.dry_run:
        print(f"ERROR: --confirm flag required for {action}.")
        print("Use --dry-run to preview or --confirm to proceed.")
        return True
    return False


@asynccontextmanager
async def document_store(dry_run: bool) -> AsyncIterator[DocumentStore]:
    """Yield the configured store, or an empty in-memory one for dry runs."""
    if dry_run:
        yield MemoryDocumentStore("dry-run")
        return
    async with open_document_store() as store:
        yield store


async def run_seed(args: argparse.Namespace, seeder: DatabaseSeeder) -> int:
    """Run the seeding pipeline."""
    settings = get_settings()

    if production_blocked(settings):
        return 1
    if confirmation_missing(args, settings, "seeding (the store is cleared first)"):
        return 1

    config = seeder.config
    modules = [module for module in (args.modules or "").split(",") if module.strip()] or None
    steps = seeder.get_steps(modules)

    if args.dry_run:
        print("DRY RUN - seeding an in-memory store, the database is not touched")
        print()

    print("Configuration:")
    print(f"  Profile: {config.profile.value}")
    print(f"  Seed: {config.seed}")
    for key, value in config.summary().items():
        print(f"  {key}: {value}")
    print(f"  Steps: {', '.join(stage.key for stage in steps) or '(none)'}")
    print()

    if not steps:
        print(f"Nothing to seed for profile '{config.profile.value}'.")
        return 0

    await seeder.run(
        SeedOptions(
            skip_backup=args.skip_backup or args.dry_run,
            skip_validation=args.skip_validation,
            skip_progress=args.no_progress,
            modules=modules,
        )
    )
    return 0


async def run_status(seeder: DatabaseSeeder) -> int:
    """Show current document counts."""
    print(f"Database: {seeder.store.name}")
    print_counts(await seeder.get_seeding_stats())
    return 0


async def run_backup(args: argparse.Namespace, seeder: DatabaseSeeder) -> int:
    """Take a manual snapshot."""
    backup_id = await seeder.backup_manager.create_backup(args.description)
    info = seeder.backup_manager.get_backup_info(backup_id)
    print(f"Backup created: {backup_id}")
    print(f"  Documents: {info['total_documents']:,}")
    print(f"  Size:      {info['size_bytes']:,} bytes")
    print()
    return 0


async def run_rollback(args: argparse.Namespace, seeder: DatabaseSeeder) -> int:
    """Restore a snapshot."""
    settings = get_settings()

    if production_blocked(settings):
        return 1
    if confirmation_missing(args, settings, "rollback (the store is replaced)"):
        return 1

    backup_id = None if args.rollback == LATEST_BACKUP else args.rollback
    outcome = await seeder.rollback(backup_id)
    print(f"Restored backup: {outcome['backup_id']}")
    print_counts(outcome["restored"], title="Restored Documents")
    return 0


def run_cleanup(args: argparse.Namespace, seeder: DatabaseSeeder) -> int:
    """Delete old snapshots."""
    if args.cleanup_backups < 0:
        print("ERROR: --cleanup-backups requires a non-negative number of days.")
        return 1
    deleted = seeder.cleanup_backups(args.cleanup_backups)
    print(f"Deleted {deleted} backup(s) older than {args.cleanup_backups} day(s).")
    print()
    return 0


def run_backup_stats(seeder: DatabaseSeeder) -> int:
    """Show snapshot statistics."""
    stats = seeder.get_backup_stats()
    print("Backup Statistics:")
    print("-" * 40)
    print(f"  Backups:            {stats['total_backups']:>8,}")
    print(f"  Documents:          {stats['total_documents']:>8,}")
    print(f"  Average documents:  {stats['average_documents']:>8}")
    print(f"  Oldest:             {stats['oldest'] or '-'}")
    print(f"  Newest:             {stats['newest'] or '-'}")
    print()
    return 0


async def run_admins(args: argparse.Namespace, seeder: DatabaseSeeder) -> int:
    """Create the admin console accounts."""
    settings = get_settings()

    if production_blocked(settings):
        return 1
    if confirmation_missing(args, settings, "creating admin accounts"):
        return 1

    result = await AdminSeeder(seeder.store, seeder.config).seed()
    print(f"Admins created: {len(result.created)}")
    for admin in result.created:
        print(f"  {admin['role']:<12} {admin['email']}")
    for email in result.existing:
        print(f"  (exists)     {email}")
    print()
    return 0


async def run_admin_stats(seeder: DatabaseSeeder) -> int:
    """Show admin console account counts."""
    stats = await AdminSeeder(seeder.store, seeder.config).get_stats()
    print_counts(
        {key: value for key, value in stats.items() if key not in ("total", "active")},
        title=f"Admin Accounts ({stats['active']} active)",
    )
    return 0


async def run_reset_admins(args: argparse.Namespace, seeder: DatabaseSeeder) -> int:
    """Delete every admin console account."""
    settings = get_settings()

    if production_blocked(settings):
        return 1
    if confirmation_missing(args, settings, "resetting admin accounts"):
        return 1

    removed = await AdminSeeder(seeder.store, seeder.config).reset()
    print(f"Deleted {removed} admin account(s).")
    print()
    return 0


async def run_integrations(args: argparse.Namespace, seeder: DatabaseSeeder) -> int:
    """Replace integrations with the built-in catalog."""
    settings = get_settings()

    if production_blocked(settings):
        return 1
    if confirmation_missing(args, settings, "seeding integrations (existing ones are deleted)"):
        return 1

    integrations = await IntegrationSeeder(seeder.store, seeder.config).seed(
        skip_validation=args.skip_validation
    )
    print(f"Integrations created: {len(integrations)}")
    for integration in integrations:
        print(f"  {integration['name']:<20} {integration['category']:<15} {integration['status']}")
    print()
    return 0


async def run_integration_stats(seeder: DatabaseSeeder) -> int:
    """Show integration counts."""
    stats = await IntegrationSeeder(seeder.store, seeder.config).get_stats()
    print_counts(
        stats["by_category"],
        title=f"Integrations ({stats['active']} active, {stats['enabled']} enabled)",
    )
    return 0


async def run_clear_integrations(args: argparse.Namespace, seeder: DatabaseSeeder) -> int:
    """Delete every integration."""
    settings = get_settings()

    if production_blocked(settings):
        return 1
    if confirmation_missing(args, settings, "clearing integrations"):
        return 1

    removed = await IntegrationSeeder(seeder.store, seeder.config).clear()
    print(f"Deleted {removed} integration(s).")
    print()
    return 0



async def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else None)
    settings = get_settings()

    print_banner()

    try:
        config = build_config(args, settings)
        async with document_store(args.dry_run) as store:
            seeder = DatabaseSeeder(store, config, backup_manager=BackupManager(store, settings.seeder_backup_dir))

            if args.seed:
                return await run_seed(args, seeder)
            elif args.status:
                return await run_status(seeder)
            elif args.list_backups:
                seeder.backup_manager.print_backup_summary()
                return 0
            elif args.backup:
                return await run_backup(args, seeder)
            elif args.rollback is not None:
                return await run_rollback(args, seeder)
            elif args.cleanup_backups is not None:
                return run_cleanup(args, seeder)
            elif args.backup_stats:
                return run_backup_stats(seeder)
            elif args.admins:
                return await run_admins(args, seeder)
            elif args.admin_stats:
                return await run_admin_stats(seeder)
            elif args.reset_admins:
                return await run_reset_admins(args, seeder)
            elif args.integrations:
                return await run_integrations(args, seeder)
            elif args.integration_stats:
                return await run_integration_stats(seeder)
            elif args.clear_integrations:
                return await run_clear_integrations(args, seeder)
            else:
                parser.print_help()
                return 1
    except TaskHubError as e:
        logger.error("seeder.cli.failed", error=e.message, error_code=e.code)
        print(f"ERROR: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
