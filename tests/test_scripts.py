# mypy: ignore-errors
# tests/test_scripts.py
"""Tests for the database preparation scripts."""

import pytest
from sqlalchemy import create_engine, inspect

from sense_stage.scripts import ensure_db, init_db, migrate


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgresql+psycopg://u:p@db:5432/sense", "postgresql://u:p@db:5432/sense"),
        ("'postgresql://u@localhost/sense'", "postgresql://u@localhost/sense"),
    ],
)
def test_to_psycopg_url(raw, expected):
    """Driver suffixes and stray quotes are removed."""
    assert ensure_db.to_psycopg_url(raw) == expected


@pytest.mark.parametrize("raw", ["", "mysql://u@h/db"])
def test_to_psycopg_url_rejects_other_urls(raw):
    with pytest.raises(ValueError):
        ensure_db.to_psycopg_url(raw)


def test_maintenance_url_points_at_postgres_db():
    admin, target = ensure_db.maintenance_url("postgresql://u:p@db:5432/sense")
    assert admin == "postgresql://u:p@db:5432/postgres"
    assert target == "sense"


def test_init_db_reset_drops_before_creating(monkeypatch):
    calls = []
    monkeypatch.setattr(init_db, "drop_tables", lambda: calls.append("drop"))
    monkeypatch.setattr(init_db, "create_tables", lambda: calls.append("create"))

    init_db.init_db(reset=True)
    init_db.init_db()

    assert calls == ["drop", "create", "create"]


def test_migrations_create_schema(tmp_path, monkeypatch):
    """``alembic upgrade head`` builds every table the models declare."""
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("ALEMBIC_URL", url)

    migrate.run_upgrade_head()

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {
        "users",
        "publications",
        "publication_media",
        "media_assets",
        "comments",
        "publication_likes",
        "comment_likes",
        "saved_items",
        "user_follows",
        "alembic_version",
    } <= tables
