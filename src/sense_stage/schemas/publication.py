"""Publication-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sense_stage.models.publication import PublicationType, Visibility


class PublicationCreate(BaseModel):
    """Schema for creating a new publication."""

    type: PublicationType = PublicationType.POST
    title: str | None = Field(None, max_length=500)
    content: str | None = Field(None, min_length=1)
    source: str | None = Field(None, max_length=200)
    visibility: Visibility = Visibility.PUBLIC
    media_ids: list[str] = Field(default_factory=list, description="Owned media in display order")

    @model_validator(mode="after")
    def _require_body(self) -> PublicationCreate:
        if not self.title and not self.content:
            raise ValueError("A publication needs a title or content")
        return self


class PublicationUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied.

    Omitting ``media_ids`` keeps the current attachments, while an empty list
    removes them.
    """

    type: PublicationType | None = None
    title: str | None = Field(None, max_length=500)
    content: str | None = Field(None, min_length=1)
    source: str | None = Field(None, max_length=200)
    visibility: Visibility | None = None
    media_ids: list[str] | None = None


class PublicationResponse(BaseModel):
    """Publication as returned to a specific viewer."""

    id: str
    author_id: str
    type: PublicationType
    title: str | None
    content: str | None
    source: str | None
    publication_date: datetime
    visibility: Visibility
    likes_count: int
    comments_count: int
    saved_count: int
    is_liked: bool = False
    is_saved: bool = False
    media_ids: list[str] | None = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_view(cls, view: Any) -> PublicationResponse:
        """Build a response from a repository ``PublicationView``."""
        response = cls.model_validate(view.publication)
        return response.model_copy(
            update={
                "is_liked": view.is_liked,
                "is_saved": view.is_saved,
                "media_ids": view.media_ids,
            }
        )


class SavedPublicationResponse(PublicationResponse):
    """Entry of the saved list, carrying the saver's note and timestamp."""

    saved_note: str | None = None
    saved_at: datetime | None = None

    @classmethod
    def from_view(cls, view: Any) -> SavedPublicationResponse:
        response = super().from_view(view)
        return response.model_copy(
            update={"saved_note": view.saved_note, "saved_at": view.saved_at}
        )


class SaveRequest(BaseModel):
    """Optional note stored alongside a saved publication."""

    note: str | None = Field(None, max_length=2000)


class LikeToggleResponse(BaseModel):
    """Result of toggling a like."""

    liked: bool
    likes_count: int


class SaveResponse(BaseModel):
    """Result of saving or unsaving a publication."""

    saved: bool
