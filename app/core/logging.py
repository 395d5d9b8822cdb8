from __future__ import annotations

import logging
import sys
from typing import TextIO

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(stream: TextIO | None = None) -> None:
    settings = get_settings()
    level = settings.log_level.upper()
    # No-op when a host (uvicorn, pytest) already installed root handlers.
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=stream or sys.stdout)
    logging.getLogger().setLevel(level)
