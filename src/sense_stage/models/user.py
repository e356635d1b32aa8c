"""SQLAlchemy model for user accounts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sense_stage.db.session import Base
from sense_stage.db.time import utcnow


class User(Base):
    """Account that authors publications and follows other accounts.

    Credentials live with the identity service; this table only holds what the
    engagement engine needs to resolve authors and follow targets.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("followers_count >= 0", name="ck_users_followers_nonneg"),
        CheckConstraint("following_count >= 0", name="ck_users_following_nonneg"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Maintained by the follow/unfollow paths in the same transaction as the edge row.
    followers_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    following_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
