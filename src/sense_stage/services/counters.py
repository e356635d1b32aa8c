"""Relationship rows and their denormalized counters.

Each operation here inserts or deletes one relationship row (like, save,
comment, follow) and adjusts the matching counter in the same transaction.
Counters move with ``SET n = n + 1`` / ``SET n = n - 1`` statements evaluated
by the database, never read-modify-write in Python, and a decrement is guarded
by ``n > 0`` so drift can never push a counter negative.

Toggles lock the target row with ``SELECT ... FOR UPDATE`` before the
existence check. On PostgreSQL this serializes concurrent toggles on the same
target; SQLite ignores the hint and serializes writers on its own.
"""
from __future__ import annotations

import logging

from sqlalchemy import Update, case, delete, func, select, update
from sqlalchemy.orm import Session

from sense_stage.core.errors import NotFoundError, ValidationError
from sense_stage.db.session import atomic
from sense_stage.models import (
    Comment,
    CommentLike,
    Publication,
    PublicationLike,
    SavedItem,
    User,
    UserFollow,
)
from sense_stage.services.visibility import is_visible_to

logger = logging.getLogger(__name__)

_SYNC = {"synchronize_session": "fetch"}


def _increment(model: type, row_id: str, column: str, by: int = 1) -> Update:
    target = getattr(model, column)
    return (
        update(model)
        .where(model.id == row_id)
        .values({column: target + by})
        .execution_options(**_SYNC)
    )


def _decrement(model: type, row_id: str, column: str, by: int = 1) -> Update:
    target = getattr(model, column)
    return (
        update(model)
        .where(model.id == row_id, target > 0)
        .values({column: case((target >= by, target - by), else_=0)})
        .execution_options(**_SYNC)
    )


class CounterService:
    """Mutations that keep relationship rows and counters in step."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _lock_publication_row(self, publication_id: str) -> None:
        self.session.execute(
            select(Publication.id).where(Publication.id == publication_id).with_for_update()
        )

    def _lock_visible_publication(self, publication_id: str, user_id: str) -> Publication:
        publication = self.session.execute(
            select(Publication).where(Publication.id == publication_id).with_for_update()
        ).scalar_one_or_none()
        if publication is None or not is_visible_to(
            publication.visibility, publication.author_id, user_id
        ):
            raise NotFoundError("Publication not found")
        return publication

    # -- publication likes -------------------------------------------------

    def toggle_publication_like(self, user_id: str, publication_id: str) -> bool:
        """Flip ``user_id``'s like on a publication.

        Returns:
            True when the publication is liked after the call.

        Raises:
            NotFoundError: If the publication does not exist or is not visible
                to ``user_id``.
        """
        with atomic(self.session):
            self._lock_visible_publication(publication_id, user_id)
            existing = self.session.execute(
                select(PublicationLike).where(
                    PublicationLike.user_id == user_id,
                    PublicationLike.publication_id == publication_id,
                )
            ).scalar_one_or_none()

            if existing is not None:
                self.session.delete(existing)
                self.session.flush()
                self.session.execute(_decrement(Publication, publication_id, "likes_count"))
                liked = False
            else:
                self.session.add(PublicationLike(user_id=user_id, publication_id=publication_id))
                self.session.flush()
                self.session.execute(_increment(Publication, publication_id, "likes_count"))
                liked = True

        logger.debug("Publication %s like by %s -> %s", publication_id, user_id, liked)
        return liked

    # -- comment likes -----------------------------------------------------

    def toggle_comment_like(self, user_id: str, comment_id: str) -> bool:
        """Flip ``user_id``'s like on a comment; returns the new state."""
        with atomic(self.session):
            comment = self.session.execute(
                select(Comment).where(Comment.id == comment_id).with_for_update()
            ).scalar_one_or_none()
            if comment is None:
                raise NotFoundError("Comment not found")
            publication = self.session.get(Publication, comment.publication_id)
            if publication is None or not is_visible_to(
                publication.visibility, publication.author_id, user_id
            ):
                raise NotFoundError("Comment not found")

            existing = self.session.execute(
                select(CommentLike).where(
                    CommentLike.user_id == user_id,
                    CommentLike.comment_id == comment_id,
                )
            ).scalar_one_or_none()
            if existing is not None:
                self.session.delete(existing)
                self.session.flush()
                self.session.execute(_decrement(Comment, comment_id, "likes_count"))
                liked = False
            else:
                self.session.add(CommentLike(user_id=user_id, comment_id=comment_id))
                self.session.flush()
                self.session.execute(_increment(Comment, comment_id, "likes_count"))
                liked = True
        return liked

    # -- saved items -------------------------------------------------------

    def save(self, user_id: str, publication_id: str, note: str | None) -> bool:
        """Save a publication for ``user_id``, or overwrite the note if already saved.

        Returns:
            True when a new saved row was created, False when only the note changed.
        """
        with atomic(self.session):
            self._lock_visible_publication(publication_id, user_id)
            existing = self.session.execute(
                select(SavedItem).where(
                    SavedItem.user_id == user_id,
                    SavedItem.publication_id == publication_id,
                )
            ).scalar_one_or_none()
            if existing is not None:
                existing.note = note
                created = False
            else:
                self.session.add(
                    SavedItem(user_id=user_id, publication_id=publication_id, note=note)
                )
                self.session.flush()
                self.session.execute(_increment(Publication, publication_id, "saved_count"))
                created = True
        return created

    def unsave(self, user_id: str, publication_id: str) -> bool:
        """Remove a saved row; unsaving something never saved is a no-op."""
        with atomic(self.session):
            result = self.session.execute(
                delete(SavedItem).where(
                    SavedItem.user_id == user_id,
                    SavedItem.publication_id == publication_id,
                )
            )
            removed = bool(result.rowcount)
            if removed:
                self.session.execute(_decrement(Publication, publication_id, "saved_count"))
        return removed

    # -- comments ----------------------------------------------------------

    def add_comment(self, comment: Comment) -> Comment:
        """Insert ``comment`` and bump its publication's comment counter.

        The caller has already checked that the publication is visible to the
        comment's author.
        """
        with atomic(self.session):
            self._lock_publication_row(comment.publication_id)
            self.session.add(comment)
            self.session.flush()
            self.session.execute(
                _increment(Publication, comment.publication_id, "comments_count")
            )
        return comment

    def remove_comment(self, comment: Comment) -> int:
        """Delete ``comment`` with its replies and return how many rows went.

        The publication row is locked before replies are counted, matching
        ``add_comment``, so the decrement covers every reply.
        """
        with atomic(self.session):
            publication_id = comment.publication_id
            self._lock_publication_row(publication_id)
            replies = self.session.execute(
                select(func.count()).select_from(Comment).where(Comment.parent_id == comment.id)
            ).scalar_one()
            removed = 1 + int(replies)
            self.session.delete(comment)
            self.session.flush()
            self.session.execute(
                _decrement(Publication, publication_id, "comments_count", by=removed)
            )
        return removed

    # -- follows -----------------------------------------------------------

    def follow(self, follower_id: str, following_id: str) -> bool:
        """Create a follow edge; following twice is a no-op.

        Raises:
            ValidationError: If a user tries to follow themselves.
            NotFoundError: If the target user does not exist.
        """
        if follower_id == following_id:
            raise ValidationError("Cannot follow yourself")

        with atomic(self.session):
            target = self.session.execute(
                select(User.id).where(User.id == following_id).with_for_update()
            ).first()
            if target is None:
                raise NotFoundError("User not found")
            existing = self.session.execute(
                select(UserFollow.follower_id).where(
                    UserFollow.follower_id == follower_id,
                    UserFollow.following_id == following_id,
                )
            ).first()
            if existing is not None:
                created = False
            else:
                self.session.add(UserFollow(follower_id=follower_id, following_id=following_id))
                self.session.flush()
                self.session.execute(_increment(User, following_id, "followers_count"))
                self.session.execute(_increment(User, follower_id, "following_count"))
                created = True
        return created

    def unfollow(self, follower_id: str, following_id: str) -> bool:
        """Remove a follow edge; returns False when there was none."""
        with atomic(self.session):
            result = self.session.execute(
                delete(UserFollow).where(
                    UserFollow.follower_id == follower_id,
                    UserFollow.following_id == following_id,
                )
            )
            removed = bool(result.rowcount)
            if removed:
                self.session.execute(_decrement(User, following_id, "followers_count"))
                self.session.execute(_decrement(User, follower_id, "following_count"))
        return removed
