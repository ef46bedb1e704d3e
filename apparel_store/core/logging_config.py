# apparel_store/core/logging_config.py
import logging
import sys

import structlog

from apparel_store.core.settings import settings


def setup_logging(level: str = None, json_logs: bool = None) -> None:
    """
    Configure structlog on top of stdlib logging.
    JSON to stdout by default; set LOG_JSON=false for a readable console.
    """
    level = (level or settings.LOG_LEVEL).upper()
    json_logs = settings.LOG_JSON if json_logs is None else json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Shared logger, import this everywhere
logger = structlog.get_logger("apparel_store")
