# mypy: ignore-errors
# tests/services/test_media_service.py
"""Tests for media upload and ownership."""

import base64

import pytest

from sense_stage.core.errors import NotFoundError, NotOwnerError, ValidationError
from sense_stage.core.settings import settings
from sense_stage.schemas.media import MediaUpload
from sense_stage.services.media_service import MediaService


def _upload(data: bytes) -> MediaUpload:
    return MediaUpload(
        filename="a.png",
        mime="image/png",
        width=2,
        height=2,
        data=base64.b64encode(data).decode(),
    )


def test_upload_stores_decoded_bytes(db_session, test_user) -> None:
    service = MediaService(db_session)
    asset = service.upload_media(test_user.id, _upload(b"\x89PNGdata"))

    stored = service.get_media(asset.id)
    assert stored.data == b"\x89PNGdata"
    assert stored.owner_id == test_user.id
    assert stored.mime == "image/png"


def test_upload_over_limit_is_rejected(db_session, test_user, monkeypatch) -> None:
    monkeypatch.setattr(settings, "media_max_bytes", 4)
    with pytest.raises(ValidationError):
        MediaService(db_session).upload_media(test_user.id, _upload(b"12345"))


def test_get_missing_media_is_not_found(db_session) -> None:
    with pytest.raises(NotFoundError):
        MediaService(db_session).get_media("missing")


def test_delete_media_owner_only(db_session, test_user, other_user, make_media) -> None:
    asset = make_media(test_user)
    service = MediaService(db_session)

    with pytest.raises(NotOwnerError):
        service.delete_media(asset.id, other_user.id)

    service.delete_media(asset.id, test_user.id)
    with pytest.raises(NotFoundError):
        service.get_media(asset.id)
