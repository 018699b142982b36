"""Tests for logging configuration."""

from app.core.logging import add_run_id, configure_logging, get_logger, run_id_ctx


def test_get_logger_returns_bound_logger():
    """get_logger should return a structlog logger."""
    configure_logging()
    logger = get_logger("test")

    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "error")


def test_run_id_context_variable():
    """run_id_ctx should store and retrieve values."""
    assert run_id_ctx.get() is None

    token = run_id_ctx.set("run-123")
    assert run_id_ctx.get() == "run-123"

    run_id_ctx.reset(token)
    assert run_id_ctx.get() is None


def test_add_run_id_only_inside_a_run():
    """The processor tags events with the active run id."""
    assert add_run_id(None, "info", {"event": "x"}) == {"event": "x"}

    token = run_id_ctx.set("run-123")
    try:
        assert add_run_id(None, "info", {"event": "x"}) == {"event": "x", "run_id": "run-123"}
    finally:
        run_id_ctx.reset(token)


def test_configure_logging_with_level_override():
    """configure_logging should accept an explicit level."""
    configure_logging("debug")
    get_logger("test").debug("test.debug_event")
