"""Use cases returning paginated publication and user lists."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from sense_stage.core.errors import NotFoundError, ValidationError
from sense_stage.models import User
from sense_stage.repositories import PublicationRepository, PublicationView, UserRepository
from sense_stage.services.pagination import PageResult, clamp_page
from sense_stage.services.visibility import FilterContext

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 200


def _clean_query(query: str | None) -> str:
    query = (query or "").strip()
    if not query:
        raise ValidationError("Search query must not be empty")
    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(f"Search query exceeds {MAX_QUERY_LENGTH} characters")
    return query


class FeedService:
    """Feed, author timeline, saved list, publication and user search."""

    def __init__(self, session: Session) -> None:
        self.publications = PublicationRepository(session)
        self.users = UserRepository(session)

    def get_feed(
        self,
        viewer_id: str | None,
        filters: FilterContext | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageResult[PublicationView]:
        """Return the global feed as seen by ``viewer_id``."""
        limit, offset = clamp_page(limit, offset)
        items, total = self.publications.feed(viewer_id, filters, limit, offset)
        return PageResult(items=items, total=total, limit=limit, offset=offset)

    def get_author_timeline(
        self,
        author_id: str,
        viewer_id: str | None,
        filters: FilterContext | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageResult[PublicationView]:
        """Return one author's publications as seen by ``viewer_id``.

        Raises:
            NotFoundError: If the author does not exist.
        """
        if not self.users.exists(author_id):
            raise NotFoundError("User not found")
        limit, offset = clamp_page(limit, offset)
        items, total = self.publications.author_timeline(
            author_id, viewer_id, filters, limit, offset
        )
        return PageResult(items=items, total=total, limit=limit, offset=offset)

    def get_saved(
        self,
        user_id: str,
        filters: FilterContext | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageResult[PublicationView]:
        """Return ``user_id``'s saved publications, newest save first."""
        limit, offset = clamp_page(limit, offset)
        items, total = self.publications.saved(user_id, filters, limit, offset)
        return PageResult(items=items, total=total, limit=limit, offset=offset)

    def search(
        self,
        query: str,
        viewer_id: str | None,
        filters: FilterContext | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageResult[PublicationView]:
        """Search titles and contents under the viewer's access clause.

        Raises:
            ValidationError: If the query is blank or too long.
        """
        query = _clean_query(query)
        limit, offset = clamp_page(limit, offset)
        items, total = self.publications.search(query, viewer_id, filters, limit, offset)
        logger.debug("Search %r for %s matched %d", query, viewer_id, total)
        return PageResult(items=items, total=total, limit=limit, offset=offset)

    def search_users(
        self, query: str, limit: int | None = None, offset: int | None = None
    ) -> PageResult[User]:
        """Search usernames and profile descriptions, ordered by username.

        Raises:
            ValidationError: If the query is blank or too long.
        """
        query = _clean_query(query)
        limit, offset = clamp_page(limit, offset)
        users, total = self.users.search(query, limit, offset)
        logger.debug("User search %r matched %d", query, total)
        return PageResult(items=users, total=total, limit=limit, offset=offset)
