"""
Logging setup.

Imported once by the application entry point to configure the root logger.
Modules log through ``logging.getLogger(__name__)``.
"""

import logging
import sys

from waitstop.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())

    # httpx logs every request at INFO, which duplicates our provider logs
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging()
