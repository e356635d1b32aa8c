"""Shared FastAPI dependencies for version 1 endpoints."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sense_stage.core.security import InvalidTokenError, decode_access_token
from sense_stage.db.session import get_db
from sense_stage.repositories import UserRepository
from sense_stage.services.visibility import FilterContext, parse_filters

bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_db)]


def _resolve_user_id(token: str, db: Session) -> str:
    try:
        user_id = decode_access_token(token)
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err

    if not UserRepository(db).exists(user_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> str:
    """Return the id of the authenticated caller.

    Raises:
        HTTPException: If the bearer token is missing, invalid, or names an
            unknown user.
    """
    return _resolve_user_id(credentials.credentials, db)


def get_viewer_id(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)
    ],
    db: SessionDep,
) -> str | None:
    """Return the caller's id, or ``None`` for anonymous requests.

    A token that is present but invalid is rejected rather than downgraded
    to anonymous access.
    """
    if credentials is None:
        return None
    return _resolve_user_id(credentials.credentials, db)


def get_filters(
    publication_type: Annotated[str | None, Query(alias="type")] = None,
    visibility: Annotated[str | None, Query()] = None,
    author_id: Annotated[str | None, Query()] = None,
    date_from: Annotated[str | None, Query(description="RFC 3339 lower bound")] = None,
    date_to: Annotated[str | None, Query(description="RFC 3339 upper bound")] = None,
) -> FilterContext:
    """Parse feed filters from the query string; unusable values are ignored."""
    return parse_filters(
        type=publication_type,
        visibility=visibility,
        author_id=author_id,
        date_from=date_from,
        date_to=date_to,
    )


CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]
ViewerIdDep = Annotated[str | None, Depends(get_viewer_id)]
FiltersDep = Annotated[FilterContext, Depends(get_filters)]
LimitQuery = Annotated[int | None, Query(description="Page size, clamped to the server maximum")]
OffsetQuery = Annotated[int | None, Query(description="Rows to skip")]
