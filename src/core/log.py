"""Structlog configuration and logger setup.

Usage:
    from core.log import configure_logging, get_logger

    configure_logging(settings)          # once, at CLI startup
    logger = get_logger(__name__)
    logger.info("entity_migrated", entity_id="abc")
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.stdlib import BoundLogger

from core.config import AppSettings


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def configure_logging(
    settings: AppSettings | None = None,
    *,
    log_level: str | None = None,
    json_output: bool | None = None,
) -> None:
    """Configure structlog + stdlib logging.

    Console rendering in development, JSON lines when `log_json` is set.
    Output is suppressed while running under pytest.
    """

    if _is_test_environment():
        logging.root.setLevel(logging.CRITICAL + 1)
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", level=logging.CRITICAL + 1, force=True)
        return

    settings = settings or AppSettings()
    level_name = (log_level or settings.log_level).upper()
    as_json = settings.log_json if json_output is None else json_output

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if as_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so `--json` stats on stdout stay machine readable.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )


def get_logger(name: str | None = None) -> BoundLogger:
    return structlog.stdlib.get_logger(name)
