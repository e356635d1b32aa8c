"""Use cases for uploaded media assets.

Media are stored as opaque bytes with the metadata the client supplies;
nothing here decodes, resizes or inspects the content.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from sense_stage.core.errors import NotFoundError, NotOwnerError, ValidationError
from sense_stage.core.settings import settings
from sense_stage.db.session import atomic
from sense_stage.models import MediaAsset
from sense_stage.repositories import MediaRepository
from sense_stage.schemas.media import MediaUpload

logger = logging.getLogger(__name__)


class MediaService:
    """Upload, fetch and delete media owned by users."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.media = MediaRepository(session)

    def upload_media(self, owner_id: str, payload: MediaUpload) -> MediaAsset:
        """Store an uploaded asset for ``owner_id``.

        Raises:
            ValidationError: If the decoded content is empty or exceeds
                ``MEDIA_MAX_BYTES``.
        """
        data = payload.raw_bytes()
        if not data:
            raise ValidationError("Media content must not be empty")
        if len(data) > settings.media_max_bytes:
            raise ValidationError(f"Media exceeds {settings.media_max_bytes} bytes")

        with atomic(self.session):
            asset = self.media.add(
                MediaAsset(
                    owner_id=owner_id,
                    filename=payload.filename,
                    mime=payload.mime,
                    width=payload.width,
                    height=payload.height,
                    data=data,
                )
            )
        logger.info("Media %s uploaded by %s (%d bytes)", asset.id, owner_id, len(data))
        return asset

    def get_media(self, media_id: str) -> MediaAsset:
        """Return a media asset or raise ``NotFoundError``."""
        asset = self.media.get_by_id(media_id)
        if asset is None:
            raise NotFoundError("Media not found")
        return asset

    def delete_media(self, media_id: str, caller_id: str) -> None:
        """Delete an asset owned by ``caller_id``; it is detached from publications."""
        asset = self.get_media(media_id)
        if asset.owner_id != caller_id:
            raise NotOwnerError("Only the owner can delete this media")
        with atomic(self.session):
            self.media.delete(asset)
        logger.info("Media %s deleted by %s", media_id, caller_id)
