# src/sense_stage/api/v1/endpoints/media.py
"""Media endpoints for the Sense API."""

from fastapi import APIRouter, Response, status

from sense_stage.schemas.media import MediaResponse, MediaUpload
from sense_stage.services.media_service import MediaService

from ..dependencies import CurrentUserIdDep, SessionDep

router = APIRouter(prefix="/media", tags=["media"])


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
def upload_media(payload: MediaUpload, db: SessionDep, user_id: CurrentUserIdDep) -> MediaResponse:
    """Store a media file for later attachment to publications."""
    asset = MediaService(db).upload_media(user_id, payload)
    return MediaResponse.model_validate(asset)


@router.get("/{media_id}", response_model=MediaResponse)
def get_media(media_id: str, db: SessionDep) -> MediaResponse:
    """Return metadata of a media asset."""
    return MediaResponse.model_validate(MediaService(db).get_media(media_id))


@router.get("/{media_id}/file")
def get_media_file(media_id: str, db: SessionDep) -> Response:
    """Return the raw bytes of a media asset with its stored MIME type."""
    asset = MediaService(db).get_media(media_id)
    return Response(content=asset.data, media_type=asset.mime)


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_media(media_id: str, db: SessionDep, user_id: CurrentUserIdDep) -> Response:
    """Delete a media asset owned by the caller."""
    MediaService(db).delete_media(media_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
