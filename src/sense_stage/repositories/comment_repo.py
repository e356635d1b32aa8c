"""Data access helpers for working with comments."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from sense_stage.models import Comment, CommentLike

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, comment_id: str) -> Comment | None:
        """Return a comment by identifier."""
        return self.session.execute(
            select(Comment).where(Comment.id == comment_id)
        ).scalar_one_or_none()

    def list_for_publication(
        self, publication_id: str, limit: int, offset: int
    ) -> tuple[list[Comment], int]:
        """Return comments on a publication, oldest first, with the total count."""
        total = self.session.execute(
            select(func.count())
            .select_from(Comment)
            .where(Comment.publication_id == publication_id)
        ).scalar_one()
        result = self.session.execute(
            select(Comment)
            .where(Comment.publication_id == publication_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars()), int(total)

    def liked_ids(self, comment_ids: list[str], user_id: str) -> set[str]:
        """Return the subset of ``comment_ids`` liked by ``user_id``."""
        if not comment_ids:
            return set()
        result = self.session.execute(
            select(CommentLike.comment_id).where(
                CommentLike.user_id == user_id,
                CommentLike.comment_id.in_(comment_ids),
            )
        )
        return set(result.scalars())
