"""Structured logging for the kinship graph.

Library modules only call ``get_logger``. Nothing is configured on import;
applications and the bundled scripts call ``configure_logging`` once at
start-up. Until then structlog's defaults apply.
"""
import logging
from typing import Literal, Optional

import structlog

from kinship.config import settings

LogFormat = Literal["keyvalue", "json"]


def configure_logging(level: Optional[str] = None, fmt: Optional[LogFormat] = None) -> None:
    """Route structlog events through stdlib logging under the ``kinship`` logger."""
    level = level or settings.logging.level
    fmt = fmt or settings.logging.format

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.processors.KeyValueRenderer(key_order=["event", "logger"])

    kinship_logger = logging.getLogger("kinship")
    kinship_logger.setLevel(getattr(logging, level))
    if not kinship_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        kinship_logger.addHandler(handler)
        kinship_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "kinship"):
    return structlog.get_logger(name)
