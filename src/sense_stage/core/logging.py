"""Process-wide logging setup."""

from __future__ import annotations

import logging

from sense_stage.core.settings import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app_settings: Settings) -> None:
    """Configure the root logger from settings.

    SQL echo is left to SQLAlchemy's ``echo`` flag so ``SQL_DEBUG`` does not
    double-log statements.
    """
    level = logging.DEBUG if app_settings.debug else app_settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("sense_stage").setLevel(level)
