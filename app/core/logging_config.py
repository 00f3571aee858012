"""Root logger setup shared by the API and the CLI scripts."""

import logging
import sys
import time

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Timestamps are rendered in UTC, hence the literal Z.
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"


def build_formatter() -> logging.Formatter:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    formatter.converter = time.gmtime
    return formatter


def setup_logging(level: str | int = logging.INFO) -> None:
    """Send records at level and above to stderr with UTC timestamps."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter())
    logging.basicConfig(level=level, handlers=[handler])
