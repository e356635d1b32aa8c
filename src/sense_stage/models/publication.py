"""SQLAlchemy models for publications and their media attachments."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from sense_stage.db.session import Base
from sense_stage.db.time import utcnow


class PublicationType(str, enum.Enum):
    """Kind of publication."""

    QUOTE = "quote"
    POST = "post"
    ARTICLE = "article"


class Visibility(str, enum.Enum):
    """Access tier gating feed, search and timeline inclusion."""

    PUBLIC = "public"
    COMMUNITY = "community"
    PRIVATE = "private"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Publication(Base):
    """Primary content entity produced by users.

    ``likes_count``, ``comments_count`` and ``saved_count`` are denormalized:
    every path that inserts or deletes a like, comment or saved row adjusts
    them in the same transaction.
    """

    __tablename__ = "publications"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_publications_likes_nonneg"),
        CheckConstraint("comments_count >= 0", name="ck_publications_comments_nonneg"),
        CheckConstraint("saved_count >= 0", name="ck_publications_saved_nonneg"),
        Index("ix_publications_date", "publication_date"),
        Index("ix_publications_author_date", "author_id", "publication_date"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[PublicationType] = mapped_column(
        Enum(
            PublicationType,
            name="publication_type",
            native_enum=False,
            values_callable=_enum_values,
        ),
        nullable=False,
    )
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str | None] = mapped_column(String(200), nullable=True)
    publication_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    visibility: Mapped[Visibility] = mapped_column(
        Enum(
            Visibility,
            name="visibility_type",
            native_enum=False,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=Visibility.PUBLIC,
    )

    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    saved_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class PublicationMedia(Base):
    """Ordered attachment of a media asset to a publication."""

    __tablename__ = "publication_media"

    publication_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("publications.id", ondelete="CASCADE"),
        primary_key=True,
    )
    media_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("media_assets.id", ondelete="CASCADE"),
        primary_key=True,
    )
    ord: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
