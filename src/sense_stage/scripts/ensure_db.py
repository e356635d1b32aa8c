"""Create the configured PostgreSQL database if it does not exist yet.

SQLite URLs need no preparation and are skipped.
"""
from __future__ import annotations

import argparse
import logging
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql

from sense_stage.core.logging import configure_logging
from sense_stage.core.settings import settings

logger = logging.getLogger(__name__)


def to_psycopg_url(url: str) -> str:
    """Strip the SQLAlchemy driver suffix (``postgresql+psycopg``) from ``url``."""
    url = (url or "").strip().strip("'\"")
    if not url:
        raise ValueError("DATABASE_URL is empty")
    parts = urlsplit(url)
    scheme = parts.scheme.split("+", 1)[0]
    if scheme != "postgresql":
        raise ValueError(f"Not a PostgreSQL URL: {url!r}")
    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


def maintenance_url(url: str) -> tuple[str, str]:
    """Return ``(url of the postgres maintenance db, target database name)``."""
    parts = urlsplit(url)
    target = parts.path.lstrip("/") or "postgres"
    admin = urlunsplit((parts.scheme, parts.netloc, "/postgres", parts.query, parts.fragment))
    return admin, target


def ensure_database(url: str) -> bool:
    """Create the database named in ``url``; return True when it was created."""
    admin_url, target = maintenance_url(url)
    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target,))
        if cur.fetchone() is not None:
            logger.info("Database %s already exists", target)
            return False
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target)))
    logger.info("Created database %s", target)
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Ensure the configured database exists")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to the effective settings URL)",
    )
    args = parser.parse_args()
    configure_logging(settings)

    raw_url = args.url or settings.effective_database_url
    if raw_url.startswith("sqlite"):
        logger.info("SQLite database needs no preparation")
        return
    try:
        ensure_database(to_psycopg_url(raw_url))
    except (ValueError, psycopg.Error) as exc:
        logger.error("Could not ensure database: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
