"""User profile Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """Minimal user info used in lists such as a publication's likers."""

    id: str
    username: str
    icon_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(UserSummary):
    """Public profile of a user."""

    description: str | None = None
    registered_at: datetime
    followers_count: int
    following_count: int
    is_following: bool = False


class UserStatsResponse(BaseModel):
    """Aggregate profile numbers."""

    publications: int
    followers: int
    following: int
    likes_received: int
    comments_received: int
    saved: int

    model_config = ConfigDict(from_attributes=True)


class FollowResponse(BaseModel):
    """Follow state after a follow or unfollow call."""

    following: bool
    followers_count: int


class ProfileUpdate(BaseModel):
    """Editable profile fields; omitted fields are left unchanged."""

    description: str | None = Field(None, max_length=500)
    icon_url: str | None = Field(None, max_length=2048)
