"""Data access helpers for user profiles and their aggregate stats."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from sense_stage.models import Publication, SavedItem, User, UserFollow
from sense_stage.repositories.publication_repo import escape_like

__all__ = ["UserRepository", "UserStats"]


@dataclass(frozen=True)
class UserStats:
    """Aggregate numbers shown on a profile."""

    publications: int
    followers: int
    following: int
    likes_received: int
    comments_received: int
    saved: int


class UserRepository:
    """Thin wrapper around database access for users."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, user_id: str) -> User | None:
        """Return a user by identifier."""
        return self.session.execute(select(User).where(User.id == user_id)).scalar_one_or_none()

    def exists(self, user_id: str) -> bool:
        """Return True when a user with ``user_id`` exists."""
        return self.session.execute(select(User.id).where(User.id == user_id)).first() is not None

    def is_following(self, follower_id: str, following_id: str) -> bool:
        """Return True when ``follower_id`` follows ``following_id``."""
        stmt = select(UserFollow.follower_id).where(
            UserFollow.follower_id == follower_id,
            UserFollow.following_id == following_id,
        )
        return self.session.execute(stmt).first() is not None

    def search(self, query: str, limit: int, offset: int) -> tuple[list[User], int]:
        """Users whose username or description contains ``query``, by username."""
        pattern = f"%{escape_like(query)}%"
        condition = or_(
            User.username.ilike(pattern, escape="\\"),
            User.description.ilike(pattern, escape="\\"),
        )
        total = self.session.execute(
            select(func.count()).select_from(User).where(condition)
        ).scalar_one()
        if total == 0:
            return [], 0
        users = self.session.execute(
            select(User)
            .where(condition)
            .order_by(User.username, User.id)
            .limit(limit)
            .offset(offset)
        ).scalars()
        return list(users), int(total)

    def stats(self, user: User) -> UserStats:
        """Compute profile stats for ``user``.

        Follower numbers come from the denormalized counters on the user row;
        the rest are summed over the user's publications, so ``saved`` counts
        saves the user's publications received, not saves the user made.
        """
        publications, likes, comments = self.session.execute(
            select(
                func.count(Publication.id),
                func.coalesce(func.sum(Publication.likes_count), 0),
                func.coalesce(func.sum(Publication.comments_count), 0),
            ).where(Publication.author_id == user.id)
        ).one()
        saved = self.session.execute(
            select(func.count())
            .select_from(SavedItem)
            .join(Publication, Publication.id == SavedItem.publication_id)
            .where(Publication.author_id == user.id)
        ).scalar_one()
        return UserStats(
            publications=int(publications),
            followers=user.followers_count,
            following=user.following_count,
            likes_received=int(likes),
            comments_received=int(comments),
            saved=int(saved),
        )

