# src/sense_stage/api/v1/endpoints/search.py
"""Search endpoints for the Sense API."""

from typing import Annotated

from fastapi import APIRouter, Query

from sense_stage.schemas.common import Page
from sense_stage.schemas.publication import PublicationResponse
from sense_stage.schemas.user import UserSummary
from sense_stage.services.feed_service import FeedService

from ..dependencies import FiltersDep, LimitQuery, OffsetQuery, SessionDep, ViewerIdDep

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/publications", response_model=Page[PublicationResponse])
def search_publications(
    q: Annotated[str, Query(description="Text matched against title and content")],
    db: SessionDep,
    viewer_id: ViewerIdDep,
    filters: FiltersDep,
    limit: LimitQuery = None,
    offset: OffsetQuery = None,
) -> Page[PublicationResponse]:
    """Case-insensitive substring search over publications the caller may see."""
    page = FeedService(db).search(q, viewer_id, filters, limit, offset)
    return Page[PublicationResponse](
        items=[PublicationResponse.from_view(view) for view in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/users", response_model=Page[UserSummary])
def search_users(
    q: Annotated[str, Query(description="Text matched against username and description")],
    db: SessionDep,
    limit: LimitQuery = None,
    offset: OffsetQuery = None,
) -> Page[UserSummary]:
    """Case-insensitive substring search over users, ordered by username."""
    page = FeedService(db).search_users(q, limit, offset)
    return Page[UserSummary](
        items=[UserSummary.model_validate(user) for user in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )
