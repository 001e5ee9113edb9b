"""
Logging configuration.

stdout belongs to the MCP stdio transport, so log records go to stderr.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> int:
    """Configure root logging and return the numeric level that was applied"""
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    # urllib3 logs every connection at DEBUG; keep it quieter than our own logs
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.INFO))
    return numeric_level
