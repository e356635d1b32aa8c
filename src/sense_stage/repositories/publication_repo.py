"""Query composition for publications.

Every list shape (feed, author timeline, saved list, search) is a predicate
set from :mod:`sense_stage.services.visibility` run through ``_paginate``,
which issues a ``COUNT(*)`` and a page ``SELECT`` over the same WHERE clause.
The two statements are not wrapped in one transaction: a write landing
between them can make ``total`` disagree with the page by that row.

Limits and offsets arrive already clamped by the service layer.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import (
    ColumnElement,
    Select,
    and_,
    delete,
    false,
    func,
    or_,
    select,
)
from sqlalchemy.orm import Session, aliased

from sense_stage.models import (
    Publication,
    PublicationLike,
    PublicationMedia,
    SavedItem,
    User,
    Visibility,
)
from sense_stage.services import visibility as vis

__all__ = ["PublicationRepository", "PublicationView"]


@dataclass
class PublicationView:
    """A publication plus the viewer-specific state attached to it."""

    publication: Publication
    is_liked: bool = False
    is_saved: bool = False
    saved_note: str | None = None
    saved_at: datetime | None = None
    media_ids: list[str] | None = None


_COLUMNS = {
    vis.VISIBILITY: Publication.visibility,
    vis.TYPE: Publication.type,
    vis.AUTHOR: Publication.author_id,
    vis.PUBLICATION_DATE: Publication.publication_date,
    vis.PUBLICATION_ID: Publication.id,
    vis.SAVED_BY: SavedItem.user_id,
}


def escape_like(value: str) -> str:
    """Escape ``LIKE`` wildcards so ``value`` matches literally with ``escape="\\"``."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_condition(clause: vis.Clause) -> ColumnElement[bool]:
    """Translate one clause into a SQLAlchemy boolean expression."""
    if clause.op == vis.VISIBLE_TO:
        return or_(
            Publication.visibility == Visibility.PUBLIC,
            Publication.visibility == Visibility.COMMUNITY,
            Publication.author_id == clause.value,
        )
    if clause.op == vis.CONTAINS:
        pattern = f"%{escape_like(clause.value)}%"
        return or_(
            Publication.title.ilike(pattern, escape="\\"),
            Publication.content.ilike(pattern, escape="\\"),
        )

    column = _COLUMNS[clause.field]
    if clause.op == vis.EQ:
        return column == clause.value
    if clause.op == vis.GE:
        return column >= clause.value
    if clause.op == vis.LE:
        return column <= clause.value
    raise ValueError(f"Unsupported clause operator: {clause.op}")


class PublicationRepository:
    """Data access for publications and the queries composed over them."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    # -- single rows -------------------------------------------------------

    def get_by_id(self, publication_id: str) -> Publication | None:
        """Return a publication by identifier, ignoring visibility."""
        return self.session.execute(
            select(Publication).where(Publication.id == publication_id)
        ).scalar_one_or_none()

    def get_visible(self, publication_id: str, viewer_id: str | None) -> Publication | None:
        """Return a publication only if ``viewer_id`` may see it."""
        predicates = vis.build_predicates(viewer_id, pinned=[vis.id_clause(publication_id)])
        stmt = select(Publication).where(*(_to_condition(c) for c in predicates))
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, publication: Publication, media_ids: list[str]) -> Publication:
        """Stage a new publication and its ordered media links."""
        self.session.add(publication)
        self.session.flush()
        self._link_media(publication.id, media_ids)
        return publication

    def replace_media(self, publication_id: str, media_ids: list[str]) -> None:
        """Swap the media attached to a publication for ``media_ids``."""
        self.session.execute(
            delete(PublicationMedia).where(PublicationMedia.publication_id == publication_id)
        )
        self._link_media(publication_id, media_ids)

    def _link_media(self, publication_id: str, media_ids: list[str]) -> None:
        for position, media_id in enumerate(media_ids):
            self.session.add(
                PublicationMedia(publication_id=publication_id, media_id=media_id, ord=position)
            )
        self.session.flush()

    def media_ids(self, publication_id: str) -> list[str]:
        """Return media ids attached to a publication in display order."""
        result = self.session.execute(
            select(PublicationMedia.media_id)
            .where(PublicationMedia.publication_id == publication_id)
            .order_by(PublicationMedia.ord)
        )
        return list(result.scalars())

    def _media_for(self, publication_ids: list[str]) -> dict[str, list[str]]:
        """Media ids for a whole page in one query, keyed by publication."""
        grouped: dict[str, list[str]] = {}
        if not publication_ids:
            return grouped
        rows = self.session.execute(
            select(PublicationMedia.publication_id, PublicationMedia.media_id)
            .where(PublicationMedia.publication_id.in_(publication_ids))
            .order_by(PublicationMedia.publication_id, PublicationMedia.ord)
        )
        for publication_id, media_id in rows:
            grouped.setdefault(publication_id, []).append(media_id)
        return grouped

    def delete(self, publication: Publication) -> None:
        """Delete a publication; relationship rows go with it via ON DELETE CASCADE."""
        self.session.delete(publication)
        self.session.flush()

    # -- per-viewer state --------------------------------------------------

    def is_liked(self, publication_id: str, user_id: str) -> bool:
        """Return True when ``user_id`` has liked the publication."""
        stmt = select(PublicationLike.user_id).where(
            PublicationLike.publication_id == publication_id,
            PublicationLike.user_id == user_id,
        )
        return self.session.execute(stmt).first() is not None

    def is_saved(self, publication_id: str, user_id: str) -> bool:
        """Return True when ``user_id`` has saved the publication."""
        stmt = select(SavedItem.user_id).where(
            SavedItem.publication_id == publication_id,
            SavedItem.user_id == user_id,
        )
        return self.session.execute(stmt).first() is not None

    def likes_count(self, publication_id: str) -> int:
        """Return the committed like counter for a publication."""
        count = self.session.execute(
            select(Publication.likes_count).where(Publication.id == publication_id)
        ).scalar_one_or_none()
        return int(count or 0)

    def liked_users(
        self, publication_id: str, limit: int, offset: int
    ) -> tuple[list[User], int]:
        """Return users who liked a publication, most recent first."""
        total = self.session.execute(
            select(func.count())
            .select_from(PublicationLike)
            .where(PublicationLike.publication_id == publication_id)
        ).scalar_one()
        stmt = (
            select(User)
            .join(PublicationLike, PublicationLike.user_id == User.id)
            .where(PublicationLike.publication_id == publication_id)
            .order_by(PublicationLike.created_at.desc(), User.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.execute(stmt).scalars()), int(total)

    # -- list shapes -------------------------------------------------------

    def feed(
        self,
        viewer_id: str | None,
        filters: vis.FilterContext | None,
        limit: int,
        offset: int,
    ) -> tuple[list[PublicationView], int]:
        """Global reverse-chronological feed as seen by ``viewer_id``."""
        predicates = vis.build_predicates(viewer_id, filters)
        return self._paginate(predicates, viewer_id=viewer_id, limit=limit, offset=offset)

    def author_timeline(
        self,
        author_id: str,
        viewer_id: str | None,
        filters: vis.FilterContext | None,
        limit: int,
        offset: int,
    ) -> tuple[list[PublicationView], int]:
        """One author's publications as seen by ``viewer_id``."""
        predicates = vis.build_predicates(
            viewer_id, filters, pinned=[vis.author_clause(author_id)]
        )
        return self._paginate(predicates, viewer_id=viewer_id, limit=limit, offset=offset)

    def saved(
        self,
        user_id: str,
        filters: vis.FilterContext | None,
        limit: int,
        offset: int,
    ) -> tuple[list[PublicationView], int]:
        """Publications saved by ``user_id``, most recently saved first.

        The access clause still applies, so a saved publication whose author
        later made it private drops out of the list.
        """
        predicates = vis.build_predicates(
            user_id, filters, pinned=[vis.saved_by_clause(user_id)]
        )
        return self._paginate(
            predicates,
            viewer_id=user_id,
            limit=limit,
            offset=offset,
            join_saved=True,
        )

    def search(
        self,
        query: str,
        viewer_id: str | None,
        filters: vis.FilterContext | None,
        limit: int,
        offset: int,
    ) -> tuple[list[PublicationView], int]:
        """Substring search over title and content as seen by ``viewer_id``."""
        predicates = vis.build_predicates(
            viewer_id, filters, pinned=[vis.search_clause(query)]
        )
        return self._paginate(predicates, viewer_id=viewer_id, limit=limit, offset=offset)

    def _paginate(
        self,
        predicates: vis.PredicateSet,
        *,
        viewer_id: str | None,
        limit: int,
        offset: int,
        join_saved: bool = False,
    ) -> tuple[list[PublicationView], int]:
        conditions = [_to_condition(clause) for clause in predicates]

        count_stmt = select(func.count()).select_from(Publication)
        if join_saved:
            count_stmt = count_stmt.join(SavedItem, SavedItem.publication_id == Publication.id)
        total = int(self.session.execute(count_stmt.where(*conditions)).scalar_one())
        if total == 0:
            return [], 0

        page_stmt = self._page_statement(viewer_id, join_saved).where(*conditions)
        if join_saved:
            page_stmt = page_stmt.order_by(
                SavedItem.added_at.desc(), SavedItem.publication_id.desc()
            )
        else:
            page_stmt = page_stmt.order_by(
                Publication.publication_date.desc(), Publication.id.desc()
            )
        rows = self.session.execute(page_stmt.limit(limit).offset(offset)).all()

        media = self._media_for([row[0].id for row in rows])
        views = []
        for row in rows:
            view = PublicationView(
                publication=row[0],
                is_liked=bool(row.is_liked),
                is_saved=bool(row.is_saved),
                media_ids=media.get(row[0].id, []),
            )
            if join_saved:
                view.saved_note = row.note
                view.saved_at = row.added_at
            views.append(view)
        return views, total

    @staticmethod
    def _page_statement(viewer_id: str | None, join_saved: bool) -> Select:
        """Build the page SELECT with per-viewer like/save flags.

        The status joins match on (publication, viewer), both primary keys, so
        each publication row gets at most one partner and row counts are not
        multiplied.
        """
        if viewer_id:
            liked = aliased(PublicationLike)
            saved_by_viewer = aliased(SavedItem)
            stmt = (
                select(
                    Publication,
                    liked.user_id.is_not(None).label("is_liked"),
                    saved_by_viewer.user_id.is_not(None).label("is_saved"),
                )
                .select_from(Publication)
                .outerjoin(
                    liked,
                    and_(liked.publication_id == Publication.id, liked.user_id == viewer_id),
                )
                .outerjoin(
                    saved_by_viewer,
                    and_(
                        saved_by_viewer.publication_id == Publication.id,
                        saved_by_viewer.user_id == viewer_id,
                    ),
                )
            )
        else:
            stmt = select(
                Publication,
                false().label("is_liked"),
                false().label("is_saved"),
            ).select_from(Publication)

        if join_saved:
            stmt = stmt.join(SavedItem, SavedItem.publication_id == Publication.id).add_columns(
                SavedItem.note, SavedItem.added_at
            )
        return stmt
