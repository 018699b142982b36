"""Standalone template seeding.

Runs the board template stage on its own against an already-seeded store.
Board templates belong to the first super admin (else admin) user found in
the store; when there is none, a default super admin account is created
first. The general template catalog (project, task, AI prompt and branding
templates) is then rewritten, owned by the first admin console account, or
by the main admin account created for the purpose.
"""

from __future__ import annotations

import sys
import uuid
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, TextIO

from app.core.logging import get_logger, run_id_ctx
from app.shared.seeder.admins import ADMINS_COLLECTION, AdminSeeder
from app.shared.seeder.config import BoardTemplateConfig, TestUserConfig, UserConfig
from app.shared.seeder.fixtures import FixtureGenerator
from app.shared.seeder.generators import TemplateGenerator
from app.shared.seeder.generators.templates import CATALOG
from app.shared.seeder.progress import MultiStepProgressTracker
from app.shared.seeder.stages import (
    BoardTemplateStage,
    StageContext,
    StageResult,
    UserStage,
    find_privileged_user,
)
from app.shared.seeder.validator import Validator

if TYPE_CHECKING:
    from app.shared.documents import DocumentStore
    from app.shared.seeder.config import SeederConfig

logger = get_logger(__name__)

TEMPLATES_COLLECTION = "templates"
GENERAL_STEP = "Create Templates"

DEFAULT_SUPER_ADMIN = TestUserConfig(
    name="Super Admin User",
    email="superadmin.test@gmail.com",
    system_role="super_admin",
)


@dataclass
class TemplateSeedResult:
    """Outcome of a standalone template run.

    Attributes:
        templates: The board template stage result.
        owner_id: Id of the user owning the board templates.
        created_owner: Whether the default super admin had to be created.
        general: General template documents written by this run.
        general_skipped: General templates dropped by validation.
        admin_id: Id of the admin account owning the general templates.
        created_admin: Whether the main admin account had to be created.
    """

    templates: StageResult
    owner_id: str | None
    created_owner: bool = False
    general: list[dict[str, Any]] = field(default_factory=list)
    general_skipped: int = 0
    admin_id: str | None = None
    created_admin: bool = False


async def seed_general_templates(
    ctx: StageContext,
    result: TemplateSeedResult,
) -> None:
    """Replace the general template catalog and record it in ``result``."""
    store = ctx.store
    admin = await store.collection(ADMINS_COLLECTION).find_one()
    if admin is None:
        logger.warning("seeder.templates.creating_main_admin")
        admin = await AdminSeeder(store, ctx.config).create_main_admin()
        result.created_admin = True
    result.admin_id = admin["_id"]

    ctx.fixtures.reseed(TEMPLATES_COLLECTION)
    candidates = TemplateGenerator(ctx.fixtures).generate(admin["_id"])
    ctx.progress.set_step_total(len(candidates))

    removed = await store.collection(TEMPLATES_COLLECTION).delete_many({})
    logger.info("seeder.templates.general_cleared", removed=removed)

    for candidate in candidates:
        if not ctx.skip_validation:
            validation = ctx.validator.validate("template", candidate)
            if not validation.is_valid:
                logger.warning("seeder.record.skipped", entity="template", errors=validation.errors)
                result.general_skipped += 1
                ctx.progress.update_step()
                continue
        result.general.append(await store.collection(TEMPLATES_COLLECTION).create(candidate))
        ctx.progress.update_step()


async def seed_board_templates(
    store: DocumentStore,
    config: SeederConfig,
    stream: TextIO | None = None,
    skip_validation: bool = False,
    include_general: bool = True,
) -> TemplateSeedResult:
    """Seed templates without running the rest of the pipeline.

    A configuration with no board template count (the production profile)
    seeds the whole built-in board catalog.

    Args:
        store: Target document store.
        config: Seeder configuration.
        stream: Progress output (defaults to stdout).
        skip_validation: Persist templates without rule checks.
        include_general: Also rewrite the general template catalog.

    Returns:
        TemplateSeedResult describing what was created.

    Raises:
        PersistenceError: If an owner account or a general template cannot
            be written.
    """
    if config.board_templates.count <= 0:
        config = replace(config, board_templates=BoardTemplateConfig(count=len(CATALOG)))

    token = run_id_ctx.set(uuid.uuid4().hex[:12])
    try:
        stage = BoardTemplateStage()
        fixtures = FixtureGenerator(config.seed, config.reference_time)
        steps = [stage.name, GENERAL_STEP] if include_general else [stage.name]
        progress = MultiStepProgressTracker(
            steps,
            stream=stream or sys.stdout,
            enabled=config.enable_progress,
        )
        ctx = StageContext(
            store=store,
            config=config,
            fixtures=fixtures,
            validator=Validator(),
            progress=progress,
            skip_validation=skip_validation,
        )

        logger.info("seeder.templates.started", count=config.board_templates.count, general=include_general)
        owner = await find_privileged_user(ctx)
        created_owner = owner is None
        if owner is None:
            logger.info("seeder.templates.creating_default_admin", email=DEFAULT_SUPER_ADMIN.email)
            ctx.config = replace(
                config,
                users=UserConfig(count=1, test_users=[DEFAULT_SUPER_ADMIN]),
            )
            fixtures.reseed("default_super_admin")
            ctx.results[UserStage.key] = await UserStage().seed(ctx)
            ctx.config = config
            owner = await find_privileged_user(ctx)

        progress.start_step(0)
        fixtures.reseed(stage.key)
        board_templates = await stage.seed(ctx)
        progress.complete_step(f"{board_templates.count} created")

        result = TemplateSeedResult(
            templates=board_templates,
            owner_id=owner["_id"] if owner else None,
            created_owner=created_owner,
        )
        if include_general:
            progress.start_step(1)
            await seed_general_templates(ctx, result)
            progress.complete_step(f"{len(result.general)} created")
        progress.complete()

        logger.info(
            "seeder.templates.completed",
            created=board_templates.count,
            skipped=board_templates.skipped,
            general=len(result.general),
            owner_created=created_owner,
            admin_created=result.created_admin,
        )
        return result
    finally:
        run_id_ctx.reset(token)
