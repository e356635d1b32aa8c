"""SQLAlchemy model for directed follow edges."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from sense_stage.db.session import Base
from sense_stage.db.time import utcnow


class UserFollow(Base):
    """``follower_id`` follows ``following_id``; the reverse edge is independent."""

    __tablename__ = "user_follows"
    __table_args__ = (
        CheckConstraint("follower_id <> following_id", name="ck_user_follows_not_self"),
        Index("ix_user_follows_following", "following_id"),
    )

    follower_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    following_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
