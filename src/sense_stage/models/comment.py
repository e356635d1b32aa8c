"""SQLAlchemy model for publication comments."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sense_stage.db.session import Base
from sense_stage.db.time import utcnow


class Comment(Base):
    """Comment on a publication.

    Replies point at a top-level comment through ``parent_id``; reply trees are
    kept one level deep by the comment service.
    """

    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_comments_likes_nonneg"),
        Index("ix_comments_publication_created", "publication_id", "created_at"),
        Index("ix_comments_parent", "parent_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    publication_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("publications.id", ondelete="CASCADE"),
        nullable=False,
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
