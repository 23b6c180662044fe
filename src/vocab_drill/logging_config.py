"""structlog configuration for host applications."""

import logging

import structlog


def configure_logging(json: bool = False, level: str | int = logging.INFO) -> None:
    """Configure structlog.

    Args:
        json: Render JSON lines for machine parsing instead of the console format.
        level: Minimum level, as a name (``"DEBUG"``) or a ``logging`` constant.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if json:
        # Production: JSON format for machine parsing
        renderer = structlog.processors.JSONRenderer()
    else:
        # Development: console format for human readability
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
