# src/sense_stage/api/v1/endpoints/publications.py
"""Publication endpoints for the Sense API."""

from fastapi import APIRouter, Response, status

from sense_stage.schemas.comment import CommentCreate, CommentResponse
from sense_stage.schemas.common import Page
from sense_stage.schemas.publication import (
    LikeToggleResponse,
    PublicationCreate,
    PublicationResponse,
    PublicationUpdate,
    SaveRequest,
    SaveResponse,
)
from sense_stage.schemas.user import UserSummary
from sense_stage.services.comment_service import CommentService
from sense_stage.services.publication_service import PublicationService

from ..dependencies import (
    CurrentUserIdDep,
    LimitQuery,
    OffsetQuery,
    SessionDep,
    ViewerIdDep,
)

router = APIRouter(prefix="/publications", tags=["publications"])


@router.post("", response_model=PublicationResponse, status_code=status.HTTP_201_CREATED)
def create_publication(
    payload: PublicationCreate,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> PublicationResponse:
    """Create a publication owned by the authenticated user.

    Args:
        payload: Publication fields and the ids of media to attach.
        db: Database session
        user_id: Authenticated author

    Returns:
        The created publication

    Raises:
        MediaNotOwnedError: If a media id is missing or belongs to someone else.
    """
    view = PublicationService(db).create_publication(user_id, payload)
    return PublicationResponse.from_view(view)


@router.get("/{publication_id}", response_model=PublicationResponse)
def get_publication(
    publication_id: str,
    db: SessionDep,
    viewer_id: ViewerIdDep,
) -> PublicationResponse:
    """Get a publication visible to the caller, with like/save state."""
    view = PublicationService(db).get_publication(publication_id, viewer_id)
    return PublicationResponse.from_view(view)


@router.put("/{publication_id}", response_model=PublicationResponse)
def update_publication(
    publication_id: str,
    payload: PublicationUpdate,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> PublicationResponse:
    """Partially update a publication; only fields in the body are changed."""
    view = PublicationService(db).update_publication(publication_id, user_id, payload)
    return PublicationResponse.from_view(view)


@router.delete("/{publication_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_publication(
    publication_id: str,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> Response:
    """Delete a publication authored by the caller."""
    PublicationService(db).delete_publication(publication_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{publication_id}/like", response_model=LikeToggleResponse)
def toggle_like(
    publication_id: str,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> LikeToggleResponse:
    """Like the publication, or remove the like if it is already there."""
    liked, count = PublicationService(db).toggle_like(publication_id, user_id)
    return LikeToggleResponse(liked=liked, likes_count=count)


@router.get("/{publication_id}/likes", response_model=Page[UserSummary])
def list_likes(
    publication_id: str,
    db: SessionDep,
    viewer_id: ViewerIdDep,
    limit: LimitQuery = None,
    offset: OffsetQuery = None,
) -> Page[UserSummary]:
    """List users who liked the publication, most recent first."""
    page = PublicationService(db).liked_users(publication_id, viewer_id, limit, offset)
    return Page[UserSummary](
        items=[UserSummary.model_validate(user) for user in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.post("/{publication_id}/save", response_model=SaveResponse)
def save_publication(
    publication_id: str,
    db: SessionDep,
    user_id: CurrentUserIdDep,
    payload: SaveRequest | None = None,
) -> SaveResponse:
    """Add the publication to the caller's saved list, optionally with a note."""
    note = payload.note if payload is not None else None
    PublicationService(db).save(publication_id, user_id, note)
    return SaveResponse(saved=True)


@router.delete("/{publication_id}/save", response_model=SaveResponse)
def unsave_publication(
    publication_id: str,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> SaveResponse:
    """Remove the publication from the caller's saved list."""
    PublicationService(db).unsave(publication_id, user_id)
    return SaveResponse(saved=False)


@router.get("/{publication_id}/comments", response_model=Page[CommentResponse])
def list_comments(
    publication_id: str,
    db: SessionDep,
    viewer_id: ViewerIdDep,
    limit: LimitQuery = None,
    offset: OffsetQuery = None,
) -> Page[CommentResponse]:
    """List comments on a publication, oldest first."""
    page = CommentService(db).list_comments(publication_id, viewer_id, limit, offset)
    return Page[CommentResponse](
        items=[CommentResponse.from_view(view) for view in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.post(
    "/{publication_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    publication_id: str,
    payload: CommentCreate,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> CommentResponse:
    """Add a top-level comment to a publication."""
    view = CommentService(db).create_comment(publication_id, user_id, payload.text)
    return CommentResponse.from_view(view)
