# mypy: ignore-errors
# tests/services/test_counters.py
"""Tests for relationship rows and their denormalized counters."""

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from sense_stage.core.errors import NotFoundError, ValidationError
from sense_stage.models import Publication, PublicationLike, SavedItem, Visibility
from sense_stage.services import counters as counters_module
from sense_stage.services.comment_service import CommentService
from sense_stage.services.counters import CounterService


def _likes(db_session, publication_id):
    return db_session.execute(
        select(func.count()).select_from(PublicationLike).where(
            PublicationLike.publication_id == publication_id
        )
    ).scalar_one()


def test_toggle_like_alternates_and_tracks_counter(
    db_session, test_publication, other_user
) -> None:
    counters = CounterService(db_session)

    assert counters.toggle_publication_like(other_user.id, test_publication.id) is True
    assert db_session.get(Publication, test_publication.id).likes_count == 1
    assert counters.toggle_publication_like(other_user.id, test_publication.id) is False
    assert db_session.get(Publication, test_publication.id).likes_count == 0
    assert counters.toggle_publication_like(other_user.id, test_publication.id) is True
    assert db_session.get(Publication, test_publication.id).likes_count == 1
    assert _likes(db_session, test_publication.id) == 1


def test_like_counter_matches_rows_for_many_users(
    db_session, make_user, test_publication
) -> None:
    counters = CounterService(db_session)
    users = [make_user() for _ in range(4)]
    for user in users:
        counters.toggle_publication_like(user.id, test_publication.id)
    counters.toggle_publication_like(users[0].id, test_publication.id)

    publication = db_session.get(Publication, test_publication.id)
    assert publication.likes_count == _likes(db_session, test_publication.id) == 3


def test_decrement_never_goes_negative(db_session, test_publication, other_user) -> None:
    counters = CounterService(db_session)
    counters.toggle_publication_like(other_user.id, test_publication.id)
    # Simulate drift: counter already at zero while a like row exists.
    db_session.get(Publication, test_publication.id).likes_count = 0
    db_session.commit()

    assert counters.toggle_publication_like(other_user.id, test_publication.id) is False
    assert db_session.get(Publication, test_publication.id).likes_count == 0


def test_like_on_missing_publication_is_not_found(db_session, other_user) -> None:
    with pytest.raises(NotFoundError):
        CounterService(db_session).toggle_publication_like(other_user.id, "missing")


def test_like_on_invisible_publication_is_not_found(
    db_session, make_publication, test_user, other_user
) -> None:
    private = make_publication(test_user, visibility=Visibility.PRIVATE)

    with pytest.raises(NotFoundError):
        CounterService(db_session).toggle_publication_like(other_user.id, private.id)
    assert _likes(db_session, private.id) == 0
    assert db_session.get(Publication, private.id).likes_count == 0


def test_save_twice_keeps_one_row_and_overwrites_note(
    db_session, test_publication, other_user
) -> None:
    counters = CounterService(db_session)

    assert counters.save(other_user.id, test_publication.id, "first") is True
    assert counters.save(other_user.id, test_publication.id, "second") is False

    rows = db_session.execute(select(SavedItem)).scalars().all()
    assert len(rows) == 1
    assert rows[0].note == "second"
    assert db_session.get(Publication, test_publication.id).saved_count == 1


def test_unsave_when_not_saved_is_noop(
    db_session, test_publication, other_user, third_user
) -> None:
    counters = CounterService(db_session)
    counters.save(third_user.id, test_publication.id, None)

    assert counters.unsave(other_user.id, test_publication.id) is False

    assert db_session.get(Publication, test_publication.id).saved_count == 1
    saved = db_session.execute(select(SavedItem.user_id)).scalars().all()
    assert saved == [third_user.id]


def test_unsave_removes_row_and_decrements(db_session, test_publication, other_user) -> None:
    counters = CounterService(db_session)
    counters.save(other_user.id, test_publication.id, None)

    assert counters.unsave(other_user.id, test_publication.id) is True
    assert db_session.get(Publication, test_publication.id).saved_count == 0


def test_follow_self_is_rejected(db_session, test_user) -> None:
    with pytest.raises(ValidationError):
        CounterService(db_session).follow(test_user.id, test_user.id)


def test_follow_self_is_rejected_for_unknown_user(db_session) -> None:
    with pytest.raises(ValidationError):
        CounterService(db_session).follow("ghost", "ghost")


def test_follow_is_idempotent_and_moves_both_counters(db_session, test_user, other_user) -> None:
    counters = CounterService(db_session)

    assert counters.follow(test_user.id, other_user.id) is True
    assert counters.follow(test_user.id, other_user.id) is False

    db_session.refresh(test_user)
    db_session.refresh(other_user)
    assert other_user.followers_count == 1
    assert test_user.following_count == 1


def test_follow_unknown_user_is_not_found(db_session, test_user) -> None:
    with pytest.raises(NotFoundError):
        CounterService(db_session).follow(test_user.id, "missing")


def test_unfollow_without_edge_is_noop(db_session, test_user, other_user) -> None:
    counters = CounterService(db_session)
    assert counters.unfollow(test_user.id, other_user.id) is False

    counters.follow(test_user.id, other_user.id)
    assert counters.unfollow(test_user.id, other_user.id) is True
    db_session.refresh(other_user)
    assert other_user.followers_count == 0


def test_failed_like_leaves_no_row_and_no_count(
    db_session, test_publication, other_user, monkeypatch
) -> None:
    """An error after the like row is flushed rolls back the row and the counter."""

    def _failing_increment(*args, **kwargs):
        raise SQLAlchemyError("counter update failed")

    monkeypatch.setattr(counters_module, "_increment", _failing_increment)

    with pytest.raises(SQLAlchemyError):
        CounterService(db_session).toggle_publication_like(other_user.id, test_publication.id)

    db_session.expire_all()
    assert _likes(db_session, test_publication.id) == 0
    assert db_session.get(Publication, test_publication.id).likes_count == 0


def test_likes_from_separate_sessions_both_count(
    engine, db_session, test_publication, other_user, third_user
) -> None:
    """Two users toggling through their own sessions each add one like."""
    other_session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        first = CounterService(db_session).toggle_publication_like(
            other_user.id, test_publication.id
        )
        second = CounterService(other_session).toggle_publication_like(
            third_user.id, test_publication.id
        )
    finally:
        other_session.close()

    assert first is True
    assert second is True
    db_session.expire_all()
    assert db_session.get(Publication, test_publication.id).likes_count == 2
    assert _likes(db_session, test_publication.id) == 2


def test_remove_comment_locks_publication_before_counting_replies(
    engine, db_session, test_publication, test_user, other_user
) -> None:
    """The publication row lock is taken before the reply count is read."""
    service = CommentService(db_session)
    root = service.create_comment(test_publication.id, test_user.id, "root").comment
    service.reply_to_comment(root.id, other_user.id, "reply")

    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(" ".join(statement.split()))

    event.listen(engine, "before_cursor_execute", _record)
    try:
        removed = CounterService(db_session).remove_comment(root)
    finally:
        event.remove(engine, "before_cursor_execute", _record)

    lock = next(
        i for i, sql in enumerate(statements)
        if sql.startswith("SELECT publications.id FROM publications")
    )
    count = next(
        i for i, sql in enumerate(statements) if "count(" in sql and "FROM comments" in sql
    )
    assert lock < count
    assert removed == 2
    db_session.expire_all()
    assert db_session.get(Publication, test_publication.id).comments_count == 0
