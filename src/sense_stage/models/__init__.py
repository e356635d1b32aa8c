"""SQLAlchemy models for the Sense application."""

from .comment import Comment
from .engagement import CommentLike, PublicationLike, SavedItem
from .follow import UserFollow
from .media import MediaAsset
from .publication import Publication, PublicationMedia, PublicationType, Visibility
from .user import User

__all__ = [
    "Comment", "CommentLike",
    "MediaAsset",
    "Publication", "PublicationLike", "PublicationMedia", "PublicationType",
    "SavedItem",
    "User", "UserFollow",
    "Visibility",
]
