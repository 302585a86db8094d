from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
PACKAGE_LOGGER_NAME = "widget_export"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Route logs to stderr; ``level`` applies to this package, libraries stay at WARNING."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level.upper())
    return package_logger
