"""Data access helpers for uploaded media assets."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from sense_stage.models import MediaAsset

__all__ = ["MediaRepository"]


class MediaRepository:
    """Thin wrapper around database access for media assets."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, media_id: str) -> MediaAsset | None:
        """Return a media asset by identifier."""
        return self.session.execute(
            select(MediaAsset).where(MediaAsset.id == media_id)
        ).scalar_one_or_none()

    def is_owned_by(self, media_id: str, user_id: str) -> bool:
        """Return True when the asset exists and belongs to ``user_id``."""
        stmt = select(MediaAsset.id).where(
            MediaAsset.id == media_id,
            MediaAsset.owner_id == user_id,
        )
        return self.session.execute(stmt).first() is not None

    def add(self, asset: MediaAsset) -> MediaAsset:
        """Stage a new media asset."""
        self.session.add(asset)
        self.session.flush()
        return asset

    def delete(self, asset: MediaAsset) -> None:
        """Delete a media asset; publication links cascade in the database."""
        self.session.delete(asset)
        self.session.flush()
