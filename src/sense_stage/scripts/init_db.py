"""Create every table directly from the ORM metadata.

Useful for local SQLite databases; deployed databases are managed with
Alembic (see ``migrate.py``).
"""
from __future__ import annotations

import argparse
import logging

from sense_stage.core.logging import configure_logging
from sense_stage.core.settings import settings
from sense_stage.db.session import create_tables, drop_tables

logger = logging.getLogger(__name__)


def init_db(reset: bool = False) -> None:
    """Create all tables, dropping existing ones first when ``reset`` is set."""
    if reset:
        drop_tables()
        logger.info("Dropped all tables")
    create_tables()
    logger.info("Database initialized at %s", settings.effective_database_url)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the Sense database tables")
    parser.add_argument("--reset", action="store_true", help="Drop all tables first.")
    args = parser.parse_args()
    configure_logging(settings)
    init_db(reset=args.reset)


if __name__ == "__main__":
    main()
