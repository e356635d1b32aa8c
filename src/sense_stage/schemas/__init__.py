"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse, CommentUpdate
from .common import ErrorResponse, Page
from .media import MediaResponse, MediaUpload
from .publication import (
    LikeToggleResponse,
    PublicationCreate,
    PublicationResponse,
    PublicationUpdate,
    SavedPublicationResponse,
    SaveRequest,
    SaveResponse,
)
from .user import (
    FollowResponse,
    ProfileResponse,
    ProfileUpdate,
    UserStatsResponse,
    UserSummary,
)

__all__ = [
    "CommentCreate", "CommentResponse", "CommentUpdate",
    "ErrorResponse", "Page",
    "MediaResponse", "MediaUpload",
    "LikeToggleResponse", "PublicationCreate", "PublicationResponse",
    "PublicationUpdate", "SavedPublicationResponse", "SaveRequest", "SaveResponse",
    "FollowResponse", "ProfileResponse", "ProfileUpdate", "UserStatsResponse", "UserSummary",
]
