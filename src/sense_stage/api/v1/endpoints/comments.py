# src/sense_stage/api/v1/endpoints/comments.py
"""Comment endpoints for the Sense API."""

from fastapi import APIRouter, Response, status

from sense_stage.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from sense_stage.schemas.publication import LikeToggleResponse
from sense_stage.services.comment_service import CommentService

from ..dependencies import CurrentUserIdDep, SessionDep, ViewerIdDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/{comment_id}", response_model=CommentResponse)
def get_comment(comment_id: str, db: SessionDep, viewer_id: ViewerIdDep) -> CommentResponse:
    """Get a single comment."""
    return CommentResponse.from_view(CommentService(db).get_comment(comment_id, viewer_id))


@router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(
    comment_id: str,
    payload: CommentUpdate,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> CommentResponse:
    """Edit the text of the caller's comment."""
    view = CommentService(db).update_comment(comment_id, user_id, payload.text)
    return CommentResponse.from_view(view)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: str, db: SessionDep, user_id: CurrentUserIdDep) -> Response:
    """Delete the caller's comment and any replies under it."""
    CommentService(db).delete_comment(comment_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{comment_id}/reply",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def reply_to_comment(
    comment_id: str,
    payload: CommentCreate,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> CommentResponse:
    """Reply to a comment in the same thread."""
    view = CommentService(db).reply_to_comment(comment_id, user_id, payload.text)
    return CommentResponse.from_view(view)


@router.post("/{comment_id}/like", response_model=LikeToggleResponse)
def toggle_comment_like(
    comment_id: str,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> LikeToggleResponse:
    """Like the comment, or remove the like if it is already there."""
    liked, count = CommentService(db).toggle_like(comment_id, user_id)
    return LikeToggleResponse(liked=liked, likes_count=count)
