"""Custom exceptions and FastAPI exception handlers.

Application errors map to RFC 7807 Problem Details responses. The seeder
taxonomy lives here as well so that CLI, API and library callers share one
hierarchy:

- ``ConfigurationError``: invalid profile or options, raised before any step runs.
- ``SeedValidationError``: one candidate record failed rule checks (soft).
- ``DependencyMissingError``: a required upstream collection is empty (soft).
- ``PersistenceError``: a write to the document store failed (hard).
- ``BackupError`` / ``RestoreError``: snapshot or restore I/O failed (hard).
- ``SeederDisabledError``: seeding attempted in production without opt-in.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.core.logging import get_logger, run_id_ctx

logger = get_logger(__name__)

ERROR_TYPE_BASE = "/errors"


# =============================================================================
# Exception Classes
# =============================================================================


class TaskHubError(Exception):
    """Base exception for TaskHub application errors.

    All application-specific exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application error.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            status_code: HTTP status code.
            details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    @property
    def title(self) -> str:
        """RFC 7807 title - short summary of problem type."""
        return self.code.replace("_", " ").title()

    @property
    def type_uri(self) -> str:
        """RFC 7807 type URI derived from the error code."""
        return f"{ERROR_TYPE_BASE}/{self.code.lower().replace('_', '-')}"


class NotFoundError(TaskHubError):
    """Resource not found error (unknown backup id, missing privileged user)."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="NOT_FOUND", status_code=404, details=details)


class ValidationError(TaskHubError):
    """Input validation error."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(message=message, code=code, status_code=422, details=details)


class DatabaseError(TaskHubError):
    """Database operation error."""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: dict[str, Any] | None = None,
        code: str = "DATABASE_ERROR",
    ) -> None:
        super().__init__(message=message, code=code, status_code=500, details=details)


class SeederError(TaskHubError):
    """Base class for seeding pipeline failures."""

    def __init__(
        self,
        message: str,
        code: str = "SEEDER_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, status_code=status_code, details=details)


class ConfigurationError(SeederError):
    """Missing or invalid environment profile or seeding options."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=400, details=details)


class SeederDisabledError(SeederError):
    """Seeding attempted in production without SEEDER_ALLOW_PRODUCTION."""

    def __init__(
        self,
        message: str = "Seeder operations are not allowed in production environment. "
        "Set SEEDER_ALLOW_PRODUCTION=true to enable (not recommended).",
    ) -> None:
        super().__init__(message, code="SEEDER_DISABLED", status_code=403)


class SeedValidationError(ValidationError):
    """A single generated record failed validation.

    Soft failure: stages log it and skip the record.
    """

    def __init__(
        self,
        entity: str,
        errors: list[str],
        warnings: list[str] | None = None,
    ) -> None:
        super().__init__(
            message=f"Invalid {entity}: {'; '.join(errors)}",
            details={"entity": entity, "errors": errors, "warnings": warnings or []},
            code="SEED_VALIDATION_ERROR",
        )
        self.entity = entity
        self.errors = errors


class DependencyMissingError(SeederError):
    """A stage's required upstream collection is empty.

    Soft failure: stages log it and return an empty result.
    """

    def __init__(self, stage: str, dependency: str) -> None:
        super().__init__(
            f"No {dependency} available for {stage}",
            code="DEPENDENCY_MISSING",
            status_code=409,
            details={"stage": stage, "dependency": dependency},
        )
        self.stage = stage
        self.dependency = dependency


class PersistenceError(DatabaseError):
    """A write to the document store failed. Aborts the run."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, details=details, code="PERSISTENCE_ERROR")


class BackupError(SeederError):
    """Snapshot creation, listing or deletion failed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: str = "BACKUP_ERROR",
    ) -> None:
        super().__init__(message, code=code, status_code=500, details=details)


class RestoreError(BackupError):
    """Restoring a snapshot failed part-way. No partial undo is attempted."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details, code="RESTORE_ERROR")


# =============================================================================
# Problem Details (RFC 7807)
# =============================================================================


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details body."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(default="about:blank", description="URI identifying the problem type.")
    title: str = Field(..., description="Short summary of the problem type.")
    status: int = Field(..., ge=400, le=599, description="HTTP status code.")
    detail: str | None = Field(None, description="Explanation of this occurrence.")
    code: str | None = Field(None, description="Machine-readable error code.")
    errors: list[dict[str, Any]] | None = Field(None, description="Field-level errors.")
    run_id: str | None = Field(None, description="Seeding run correlation ID.")


class ProblemDetailResponse(JSONResponse):
    """JSON response with RFC 7807 content type."""

    media_type = "application/problem+json"


def problem_response(
    status: int,
    title: str,
    detail: str | None = None,
    error_code: str = "INTERNAL_ERROR",
    errors: list[dict[str, Any]] | None = None,
    run_id: str | None = None,
) -> ProblemDetailResponse:
    """Create a ProblemDetailResponse with proper content type.

    Args:
        status: HTTP status code.
        title: Short problem summary.
        detail: Detailed explanation (optional).
        error_code: Internal error code used for the type URI.
        errors: Field-level validation errors (optional).
        run_id: Seeding run the error belongs to (defaults to the active one).

    Returns:
        JSONResponse with problem+json content type.
    """
    problem = ProblemDetail(
        type=f"{ERROR_TYPE_BASE}/{error_code.lower().replace('_', '-')}",
        title=title,
        status=status,
        detail=detail,
        code=error_code,
        errors=errors,
        run_id=run_id or run_id_ctx.get(),
    )
    return ProblemDetailResponse(
        status_code=status,
        content=problem.model_dump(exclude_none=True),
    )


# =============================================================================
# Exception Handlers
# =============================================================================


async def taskhub_exception_handler(
    _request: Request,
    exc: TaskHubError,
) -> ProblemDetailResponse:
    """Handle TaskHubError exceptions with RFC 7807 Problem Details.

    Args:
        _request: FastAPI request object.
        exc: The raised exception.

    Returns:
        RFC 7807 Problem Detail response.
    """
    logger.error(
        "app.error_handled",
        error=exc.message,
        error_type=type(exc).__name__,
        error_code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )

    return problem_response(
        status=exc.status_code,
        title=exc.title,
        detail=exc.message,
        error_code=exc.code,
        run_id=exc.details.get("run_id"),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> ProblemDetailResponse:
    """Handle request validation errors with field-level details.

    Args:
        request: FastAPI request object.
        exc: Pydantic validation error.

    Returns:
        RFC 7807 Problem Detail response with field-level errors.
    """
    field_errors: list[dict[str, Any]] = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field_errors.append(
            {
                "field": ".".join(str(part) for part in loc if part != "body"),
                "message": str(error.get("msg", "Validation failed")),
                "type": str(error.get("type", "unknown")),
            }
        )

    logger.warning(
        "app.validation_error",
        error_count=len(field_errors),
        path=str(request.url.path),
    )

    return problem_response(
        status=422,
        title="Validation Error",
        detail=f"Request validation failed with {len(field_errors)} error(s).",
        error_code="VALIDATION_ERROR",
        errors=field_errors,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> ProblemDetailResponse:
    """Handle unexpected exceptions.

    Args:
        request: FastAPI request object.
        exc: The raised exception.

    Returns:
        RFC 7807 Problem Detail response.
    """
    logger.error(
        "app.unhandled_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=str(request.url.path),
        exc_info=True,
    )

    return problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred.",
        error_code="INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(TaskHubError, taskhub_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
