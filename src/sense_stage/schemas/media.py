"""Media-related Pydantic schemas."""
from __future__ import annotations

import base64
import binascii
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MediaUpload(BaseModel):
    """Upload body; ``data`` is the file content encoded as standard base64."""

    filename: str | None = Field(None, max_length=255)
    mime: str = Field(..., min_length=1, max_length=100)
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)
    data: str = Field(..., min_length=1)

    @field_validator("data")
    @classmethod
    def _check_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as err:
            raise ValueError("data must be valid base64") from err
        return value

    def raw_bytes(self) -> bytes:
        """Return the decoded file content."""
        return base64.b64decode(self.data)


class MediaResponse(BaseModel):
    """Media metadata; the binary content is never echoed back."""

    id: str
    owner_id: str
    filename: str | None
    mime: str
    width: int | None
    height: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
