#!/usr/bin/env python
"""Standalone template seeder.

Creates the built-in board template catalog (or the profile's template count)
in an already-seeded store, then rewrites the general template catalog. Board
templates belong to the first super admin, else admin; a default super admin
is created when the store has neither. General templates belong to the first
admin console account, created when there is none.

Usage:
    uv run python scripts/seed_board_templates.py --confirm
    uv run python scripts/seed_board_templates.py --profile development --seed-value 42 --confirm
    uv run python scripts/seed_board_templates.py --board-only --confirm
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from app.core.config import get_settings
from app.core.exceptions import TaskHubError
from app.core.logging import configure_logging, get_logger
from app.shared.documents import open_document_store
from app.shared.seeder import SeederConfig, seed_board_templates
from app.shared.seeder.admins import MAIN_ADMIN
from app.shared.seeder.config import EnvironmentProfile
from app.shared.seeder.templates import DEFAULT_SUPER_ADMIN

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(description="TaskHub Template Seeder")
    parser.add_argument(
        "--profile",
        choices=[profile.value for profile in EnvironmentProfile],
        help="Profile giving the template count (production seeds the whole catalog)",
    )
    parser.add_argument(
        "--seed-value",
        type=int,
        help="Random seed for reproducibility (default: SEEDER_SEED)",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Persist templates without rule checks",
    )
    parser.add_argument(
        "--board-only",
        action="store_true",
        help="Seed board templates only, leaving the general templates untouched",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars",
    )
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Confirm writing to the database",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable detailed logging",
    )
    return parser


async def main() -> int:
    """Main entry point."""
    args = create_parser().parse_args()

    configure_logging("DEBUG" if args.verbose else None)
    settings = get_settings()

    print()
    print("=" * 60)
    print("  TaskHub - Template Seeder")
    print("=" * 60)
    print()

    if settings.seeder_require_confirm and not args.confirm:
        print("ERROR: --confirm flag required to write templates.")
        return 1

    try:
        config = SeederConfig.from_settings(settings, profile=args.profile, seed=args.seed_value)
        if args.no_progress:
            config.enable_progress = False

        async with open_document_store() as store:
            result = await seed_board_templates(
                store,
                config,
                skip_validation=args.skip_validation,
                include_general=not args.board_only,
            )
    except TaskHubError as e:
        logger.error("seeder.templates.cli_failed", error=e.message, error_code=e.code)
        print(f"ERROR: {e.message}")
        return 1

    print("\nTemplates Complete!")
    print("-" * 40)
    print(f"  Board templates:    {result.templates.count:>8,}")
    print(f"  Skipped:            {result.templates.skipped:>8,}")
    print(f"  Owner:              {result.owner_id}")
    if not args.board_only:
        print(f"  General templates:  {len(result.general):>8,}")
        print(f"  Skipped:            {result.general_skipped:>8,}")
        print(f"  Admin:              {result.admin_id}")
    if result.created_owner:
        print()
        print("  Default super admin created:")
        print(f"    {DEFAULT_SUPER_ADMIN.email}  {DEFAULT_SUPER_ADMIN.password}")
    if result.created_admin:
        print()
        print("  Main admin console account created:")
        print(f"    {MAIN_ADMIN.email}  {MAIN_ADMIN.password}")
    print("-" * 40)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
