"""Repositories wrapping database access for the service layer."""

from .comment_repo import CommentRepository
from .media_repo import MediaRepository
from .publication_repo import PublicationRepository, PublicationView
from .user_repo import UserRepository, UserStats

__all__ = [
    "CommentRepository",
    "MediaRepository",
    "PublicationRepository",
    "PublicationView",
    "UserRepository",
    "UserStats",
]
