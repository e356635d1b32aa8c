# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-sense")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sense_stage.core.security import create_access_token
from sense_stage.core.settings import Settings, settings
from sense_stage.db.session import Base, enable_sqlite_foreign_keys
from sense_stage.db.session import get_db as app_get_session
from sense_stage.db.time import utcnow
from sense_stage.main import app as fastapi_app
from sense_stage.models import MediaAsset, Publication, PublicationType, User, Visibility

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Services commit, so each test cleans up the rows it left behind.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide the Settings instance the application runs with."""
    return settings


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with unique usernames."""
    numbers = count(1)

    def _make_user(username: str | None = None, **fields: Any) -> User:
        user = User(username=username or f"user{next(numbers)}", **fields)
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user (the author in most scenarios)."""
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second persisted user."""
    return make_user("bob")


@pytest.fixture()
def third_user(make_user: Callable[..., User]) -> User:
    """Create and return a third persisted user."""
    return make_user("carol")


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a helper building bearer headers for any user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture()
def auth_token(test_user: User, auth_headers: Callable[[User], dict[str, str]]) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(
    other_user: User, auth_headers: Callable[[User], dict[str, str]]
) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def make_publication(db_session: Session) -> Callable[..., Publication]:
    """Return a factory persisting publications.

    Each call gets a publication date one minute later than the previous one
    unless ``publication_date`` is given, so feed order is predictable.
    """
    base = utcnow() - timedelta(days=1)
    minutes = count(1)

    def _make_publication(
        author: User,
        *,
        visibility: Visibility = Visibility.PUBLIC,
        type: PublicationType = PublicationType.POST,
        title: str | None = None,
        content: str = "Test publication content",
        **fields: Any,
    ) -> Publication:
        fields.setdefault("publication_date", base + timedelta(minutes=next(minutes)))
        publication = Publication(
            author_id=author.id,
            visibility=visibility,
            type=type,
            title=title,
            content=content,
            **fields,
        )
        db_session.add(publication)
        db_session.commit()
        return publication

    return _make_publication


@pytest.fixture()
def test_publication(
    make_publication: Callable[..., Publication], test_user: User
) -> Publication:
    """Create a baseline public publication authored by the primary test user."""
    return make_publication(test_user, title="Hello", content="First publication")


@pytest.fixture()
def make_media(db_session: Session) -> Callable[..., MediaAsset]:
    """Return a factory persisting small media assets."""

    def _make_media(
        owner: User, *, mime: str = "image/png", data: bytes = b"\x89PNG"
    ) -> MediaAsset:
        asset = MediaAsset(owner_id=owner.id, mime=mime, data=data, filename="pic.png")
        db_session.add(asset)
        db_session.commit()
        return asset

    return _make_media
