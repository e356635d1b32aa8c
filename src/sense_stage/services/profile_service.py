"""Use cases for user profiles and the follow graph."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from sense_stage.core.errors import NotFoundError
from sense_stage.db.session import atomic
from sense_stage.models import User
from sense_stage.repositories import UserRepository, UserStats
from sense_stage.schemas.user import ProfileUpdate
from sense_stage.services.counters import CounterService

logger = logging.getLogger(__name__)


class ProfileService:
    """Profiles, aggregate stats and follow/unfollow."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.counters = CounterService(session)

    def get_profile(self, user_id: str) -> User:
        """Return a user or raise ``NotFoundError``."""
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: str, payload: ProfileUpdate) -> User:
        """Apply the supplied description and icon changes to ``user_id``."""
        user = self.get_profile(user_id)
        with atomic(self.session):
            for field, value in payload.model_dump(exclude_unset=True).items():
                setattr(user, field, value)
        return user

    def get_stats(self, user_id: str) -> UserStats:
        """Return aggregate numbers for a user's profile."""
        return self.users.stats(self.get_profile(user_id))

    def is_following(self, follower_id: str | None, following_id: str) -> bool:
        """Return True when ``follower_id`` follows ``following_id``."""
        if not follower_id:
            return False
        return self.users.is_following(follower_id, following_id)

    def follow(self, follower_id: str, following_id: str) -> User:
        """Follow a user and return the followed user with fresh counters."""
        if self.counters.follow(follower_id, following_id):
            logger.info("User %s followed %s", follower_id, following_id)
        return self.get_profile(following_id)

    def unfollow(self, follower_id: str, following_id: str) -> User:
        """Unfollow a user and return the target with fresh counters.

        Raises:
            NotFoundError: If the target user does not exist.
        """
        target = self.get_profile(following_id)
        if self.counters.unfollow(follower_id, following_id):
            logger.info("User %s unfollowed %s", follower_id, following_id)
        return target
