import logging
import os
import sys
from typing import Optional

import structlog

LOG_LEVEL_ENV = "MDTOGGLE_LOG_LEVEL"


def configure_logging(level: Optional[str] = None, json_output: bool = False, default: str = "WARNING") -> int:
    """
    Routes stdlib logging and structlog to stderr.
    stdout is reserved for command output (CLI) or JSON-RPC frames (MCP server).

    Args:
        level: Level name. Falls back to $MDTOGGLE_LOG_LEVEL, then `default`.
        json_output: Render JSON lines instead of the human-readable console format.

    Returns:
        The numeric level in effect.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or default).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    logging.basicConfig(stream=sys.stderr, level=numeric_level, force=True)

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
    return numeric_level
