"""Use cases for comments and replies."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from sense_stage.core.errors import NotAuthorError, NotFoundError, ValidationError
from sense_stage.db.session import atomic
from sense_stage.models import Comment
from sense_stage.repositories import CommentRepository, PublicationRepository
from sense_stage.services.counters import CounterService
from sense_stage.services.pagination import PageResult, clamp_page

logger = logging.getLogger(__name__)


@dataclass
class CommentView:
    """A comment plus whether the viewer has liked it."""

    comment: Comment
    is_liked: bool = False


def _clean_text(text: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Comment text must not be empty")
    return cleaned


class CommentService:
    """Comment creation, replies, edits, deletion and likes.

    Comments inherit the visibility of their publication: a viewer who cannot
    see the publication cannot see, create or like its comments.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.comments = CommentRepository(session)
        self.publications = PublicationRepository(session)
        self.counters = CounterService(session)

    def _get_visible_comment(self, comment_id: str, viewer_id: str | None) -> Comment:
        comment = self.comments.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        if self.publications.get_visible(comment.publication_id, viewer_id) is None:
            raise NotFoundError("Comment not found")
        return comment

    def list_comments(
        self,
        publication_id: str,
        viewer_id: str | None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageResult[CommentView]:
        """Return a publication's comments, oldest first."""
        if self.publications.get_visible(publication_id, viewer_id) is None:
            raise NotFoundError("Publication not found")
        limit, offset = clamp_page(limit, offset)
        comments, total = self.comments.list_for_publication(publication_id, limit, offset)
        liked: set[str] = set()
        if viewer_id:
            liked = self.comments.liked_ids([c.id for c in comments], viewer_id)
        items = [CommentView(comment=c, is_liked=c.id in liked) for c in comments]
        return PageResult(items=items, total=total, limit=limit, offset=offset)

    def get_comment(self, comment_id: str, viewer_id: str | None) -> CommentView:
        """Return one comment if its publication is visible to ``viewer_id``."""
        comment = self._get_visible_comment(comment_id, viewer_id)
        is_liked = False
        if viewer_id:
            is_liked = comment.id in self.comments.liked_ids([comment.id], viewer_id)
        return CommentView(comment=comment, is_liked=is_liked)

    def create_comment(self, publication_id: str, author_id: str, text: str) -> CommentView:
        """Add a top-level comment to a publication.

        Raises:
            ValidationError: If the text is blank.
            NotFoundError: If the publication is missing or invisible to the author.
        """
        text = _clean_text(text)
        if self.publications.get_visible(publication_id, author_id) is None:
            raise NotFoundError("Publication not found")
        comment = self.counters.add_comment(
            Comment(publication_id=publication_id, author_id=author_id, text=text)
        )
        logger.info("Comment %s added to %s by %s", comment.id, publication_id, author_id)
        return CommentView(comment=comment)

    def reply_to_comment(self, comment_id: str, author_id: str, text: str) -> CommentView:
        """Reply to a comment.

        Nesting is one level deep: a reply to a reply is attached to the
        top-level comment of that thread.
        """
        text = _clean_text(text)
        parent = self._get_visible_comment(comment_id, author_id)
        root_id = parent.parent_id or parent.id
        comment = self.counters.add_comment(
            Comment(
                publication_id=parent.publication_id,
                parent_id=root_id,
                author_id=author_id,
                text=text,
            )
        )
        logger.info("Reply %s added under %s by %s", comment.id, root_id, author_id)
        return CommentView(comment=comment)

    def update_comment(self, comment_id: str, caller_id: str, text: str) -> CommentView:
        """Replace the text of a comment written by ``caller_id``."""
        text = _clean_text(text)
        comment = self._get_visible_comment(comment_id, caller_id)
        if comment.author_id != caller_id:
            raise NotAuthorError("Only the author can edit this comment")
        with atomic(self.session):
            comment.text = text
        return self.get_comment(comment_id, caller_id)

    def delete_comment(self, comment_id: str, caller_id: str) -> None:
        """Delete a comment written by ``caller_id`` together with its replies."""
        comment = self._get_visible_comment(comment_id, caller_id)
        if comment.author_id != caller_id:
            raise NotAuthorError("Only the author can delete this comment")
        removed = self.counters.remove_comment(comment)
        logger.info("Comment %s deleted by %s (%d rows)", comment_id, caller_id, removed)

    def toggle_like(self, comment_id: str, user_id: str) -> tuple[bool, int]:
        """Toggle ``user_id``'s like on a comment and return ``(liked, likes_count)``."""
        liked = self.counters.toggle_comment_like(user_id, comment_id)
        comment = self.comments.get_by_id(comment_id)
        return liked, comment.likes_count if comment is not None else 0
