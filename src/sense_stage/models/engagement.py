"""Relationship rows backing likes and saved items.

Existence of a row is the state: there is no "unliked" flag. Composite
primary keys prevent duplicate rows for the same user and target.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sense_stage.db.session import Base
from sense_stage.db.time import utcnow


class PublicationLike(Base):
    """A user's like on a publication."""

    __tablename__ = "publication_likes"
    __table_args__ = (Index("ix_publication_likes_publication", "publication_id"),)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    publication_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("publications.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class CommentLike(Base):
    """A user's like on a comment."""

    __tablename__ = "comment_likes"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    comment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class SavedItem(Base):
    """A publication bookmarked by a user, with an optional note."""

    __tablename__ = "saved_items"
    __table_args__ = (Index("ix_saved_items_user_added", "user_id", "added_at"),)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    publication_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("publications.id", ondelete="CASCADE"),
        primary_key=True,
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
