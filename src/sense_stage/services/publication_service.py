"""Use cases for creating, reading and mutating publications."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sense_stage.core.errors import (
    MediaNotOwnedError,
    NotAuthorError,
    NotFoundError,
    ValidationError,
)
from sense_stage.db.session import atomic
from sense_stage.models import Publication, User
from sense_stage.repositories import MediaRepository, PublicationRepository, PublicationView
from sense_stage.schemas.publication import PublicationCreate, PublicationUpdate
from sense_stage.services.counters import CounterService
from sense_stage.services.pagination import PageResult, clamp_page

logger = logging.getLogger(__name__)

# Columns that may not be cleared by an explicit null in a partial update.
_REQUIRED_FIELDS = frozenset({"type", "visibility"})


class PublicationService:
    """Authorization and orchestration around a single publication."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.publications = PublicationRepository(session)
        self.media = MediaRepository(session)
        self.counters = CounterService(session)

    def _check_media(self, media_ids: list[str], owner_id: str) -> None:
        """Reject duplicates and any media id the owner does not hold.

        Raises:
            ValidationError: If the same media id appears twice.
            MediaNotOwnedError: For the first id that is missing or foreign.
        """
        if len(set(media_ids)) != len(media_ids):
            raise ValidationError("Duplicate media id in publication")
        for media_id in media_ids:
            if not self.media.is_owned_by(media_id, owner_id):
                raise MediaNotOwnedError(media_id)

    def _get_visible_or_404(self, publication_id: str, viewer_id: str | None) -> Publication:
        publication = self.publications.get_visible(publication_id, viewer_id)
        if publication is None:
            raise NotFoundError("Publication not found")
        return publication

    def create_publication(self, author_id: str, payload: PublicationCreate) -> PublicationView:
        """Create a publication authored by ``author_id``.

        Args:
            author_id: Identifier of the authenticated author.
            payload: Validated request body.

        Returns:
            The new publication with zeroed counters and its media ids.

        Raises:
            MediaNotOwnedError: If any referenced media is not owned by the author.
        """
        self._check_media(payload.media_ids, author_id)
        with atomic(self.session):
            publication = self.publications.create(
                Publication(
                    author_id=author_id,
                    type=payload.type,
                    title=payload.title,
                    content=payload.content,
                    source=payload.source,
                    visibility=payload.visibility,
                ),
                payload.media_ids,
            )
        logger.info("Publication %s created by %s", publication.id, author_id)
        return PublicationView(publication=publication, media_ids=list(payload.media_ids))

    def get_publication(self, publication_id: str, viewer_id: str | None) -> PublicationView:
        """Return a publication under the access clause for ``viewer_id``.

        Like/save status is resolved after the main fetch. If that lookup
        fails the publication is still returned with both flags False.
        """
        publication = self._get_visible_or_404(publication_id, viewer_id)
        view = PublicationView(
            publication=publication,
            media_ids=self.publications.media_ids(publication.id),
        )
        if viewer_id:
            try:
                view.is_liked = self.publications.is_liked(publication.id, viewer_id)
                view.is_saved = self.publications.is_saved(publication.id, viewer_id)
            except SQLAlchemyError:
                logger.warning(
                    "Could not resolve like/save state of %s for %s",
                    publication_id,
                    viewer_id,
                    exc_info=True,
                )
                self.session.rollback()
                view.is_liked = view.is_saved = False
        return view

    def update_publication(
        self, publication_id: str, caller_id: str, payload: PublicationUpdate
    ) -> PublicationView:
        """Apply the fields present in ``payload`` to a publication.

        Raises:
            NotFoundError: If the publication is missing or invisible to the caller.
            NotAuthorError: If the caller is not the author.
            MediaNotOwnedError: If supplied media ids are not owned by the caller.
            ValidationError: If the update would leave neither a title nor content.
        """
        publication = self._get_visible_or_404(publication_id, caller_id)
        if publication.author_id != caller_id:
            raise NotAuthorError("Only the author can edit this publication")

        changes = payload.model_dump(exclude_unset=True)
        media_ids = changes.pop("media_ids", None)
        if media_ids is not None:
            self._check_media(media_ids, caller_id)
        title = changes.get("title", publication.title)
        content = changes.get("content", publication.content)
        if not (title or content):
            raise ValidationError("A publication needs a title or content")

        with atomic(self.session):
            for field, value in changes.items():
                if value is None and field in _REQUIRED_FIELDS:
                    continue
                setattr(publication, field, value)
            if media_ids is not None:
                self.publications.replace_media(publication.id, media_ids)

        logger.info("Publication %s updated by %s", publication_id, caller_id)
        return self.get_publication(publication_id, caller_id)

    def delete_publication(self, publication_id: str, caller_id: str) -> None:
        """Delete a publication authored by ``caller_id``."""
        publication = self._get_visible_or_404(publication_id, caller_id)
        if publication.author_id != caller_id:
            raise NotAuthorError("Only the author can delete this publication")
        with atomic(self.session):
            self.publications.delete(publication)
        logger.info("Publication %s deleted by %s", publication_id, caller_id)

    def toggle_like(self, publication_id: str, user_id: str) -> tuple[bool, int]:
        """Toggle ``user_id``'s like and return ``(liked, likes_count)``."""
        liked = self.counters.toggle_publication_like(user_id, publication_id)
        count = self.publications.likes_count(publication_id)
        logger.info(
            "User %s %s publication %s", user_id, "liked" if liked else "unliked", publication_id
        )
        return liked, count

    def save(self, publication_id: str, user_id: str, note: str | None = None) -> None:
        """Save a publication for ``user_id``; saving again replaces the note."""
        created = self.counters.save(user_id, publication_id, note)
        if created:
            logger.info("User %s saved publication %s", user_id, publication_id)

    def unsave(self, publication_id: str, user_id: str) -> None:
        """Remove a publication from ``user_id``'s saved list if present."""
        if self.counters.unsave(user_id, publication_id):
            logger.info("User %s unsaved publication %s", user_id, publication_id)

    def liked_users(
        self,
        publication_id: str,
        viewer_id: str | None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageResult[User]:
        """Return users who liked a publication the viewer can see."""
        self._get_visible_or_404(publication_id, viewer_id)
        limit, offset = clamp_page(limit, offset)
        users, total = self.publications.liked_users(publication_id, limit, offset)
        return PageResult(items=users, total=total, limit=limit, offset=offset)
