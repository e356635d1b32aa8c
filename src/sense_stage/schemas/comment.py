"""Comment-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for creating a comment or reply."""

    text: str = Field(..., min_length=1, max_length=5000)


class CommentUpdate(BaseModel):
    """Schema for editing a comment's text."""

    text: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    """Comment as returned by the API."""

    id: str
    publication_id: str
    parent_id: str | None
    author_id: str
    text: str
    created_at: datetime
    likes_count: int
    is_liked: bool = False

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_view(cls, view: Any) -> CommentResponse:
        """Build a response from a ``CommentView``."""
        return cls.model_validate(view.comment).model_copy(update={"is_liked": view.is_liked})
