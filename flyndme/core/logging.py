"""
Logging setup shared by the API process
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send all records to stdout so they end up in container logs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # urllib3 logs each connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
