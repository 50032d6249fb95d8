"""structlog setup shared by the CLI and embedding applications."""

import logging
import sys

import structlog


def configure_logging(use_json: bool = False, level: str = "INFO") -> None:
    """Configure structlog output.

    Args:
        use_json: JSON lines when True (CI, log shipping), colored console otherwise.
        level: minimum level name, e.g. "DEBUG" or "INFO".
    """
    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        context_class=dict,
        # stderr is looked up per call so redirected streams are honored
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
