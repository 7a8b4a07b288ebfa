"""Logging setup for host applications."""

import logging
import sys
from typing import TextIO

from rank_store.config import get_log_level

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Install a stderr handler on the root logger.

    Level defaults to RANK_LOG_LEVEL. Safe to call more than once; later calls
    replace the handler.
    """
    logging.basicConfig(
        level=getattr(logging, (level or get_log_level()).upper()),
        format=LOG_FORMAT,
        stream=stream or sys.stderr,
        force=True,
    )
