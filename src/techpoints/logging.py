"""Process-wide logger.

Import ``logger`` from here instead of configuring handlers per module.
"""
from __future__ import annotations

import logging
import sys
import uuid

from techpoints.config import settings

_SESSION_ID = uuid.uuid4().hex[:8]


def get_session_id() -> str:
    """Short id shared by every log record emitted by this process."""
    return _SESSION_ID


class _SessionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _SESSION_ID
        return True


def _build_logger() -> logging.Logger:
    log = logging.getLogger("techpoints")
    if log.handlers:
        return log
    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(_SessionFilter())
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s [%(session_id)s] %(name)s: %(message)s",
    ))
    log.addHandler(handler)
    log.setLevel(settings.LOG_LEVEL.upper())
    log.propagate = False
    return log


logger = _build_logger()
