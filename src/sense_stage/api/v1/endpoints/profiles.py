# src/sense_stage/api/v1/endpoints/profiles.py
"""Profile and follow endpoints for the Sense API."""

from fastapi import APIRouter

from sense_stage.models import User
from sense_stage.schemas.user import (
    FollowResponse,
    ProfileResponse,
    ProfileUpdate,
    UserStatsResponse,
)
from sense_stage.services.profile_service import ProfileService

from ..dependencies import CurrentUserIdDep, SessionDep, ViewerIdDep

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _profile(user: User, is_following: bool = False) -> ProfileResponse:
    return ProfileResponse.model_validate(user).model_copy(update={"is_following": is_following})


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(db: SessionDep, user_id: CurrentUserIdDep) -> ProfileResponse:
    """Return the caller's own profile."""
    return _profile(ProfileService(db).get_profile(user_id))


@router.put("/me", response_model=ProfileResponse)
def update_my_profile(
    payload: ProfileUpdate,
    db: SessionDep,
    user_id: CurrentUserIdDep,
) -> ProfileResponse:
    """Update the caller's description or icon."""
    return _profile(ProfileService(db).update_profile(user_id, payload))


@router.get("/{user_id}", response_model=ProfileResponse)
def get_profile(user_id: str, db: SessionDep, viewer_id: ViewerIdDep) -> ProfileResponse:
    """Return a user's public profile."""
    service = ProfileService(db)
    user = service.get_profile(user_id)
    return _profile(user, service.is_following(viewer_id, user_id))


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
def get_stats(user_id: str, db: SessionDep) -> UserStatsResponse:
    """Return aggregate numbers for a user's profile."""
    return UserStatsResponse.model_validate(ProfileService(db).get_stats(user_id))


@router.post("/{user_id}/follow", response_model=FollowResponse)
def follow(user_id: str, db: SessionDep, follower_id: CurrentUserIdDep) -> FollowResponse:
    """Follow a user. Following someone already followed changes nothing."""
    target = ProfileService(db).follow(follower_id, user_id)
    return FollowResponse(following=True, followers_count=target.followers_count)


@router.delete("/{user_id}/follow", response_model=FollowResponse)
def unfollow(user_id: str, db: SessionDep, follower_id: CurrentUserIdDep) -> FollowResponse:
    """Stop following a user."""
    target = ProfileService(db).unfollow(follower_id, user_id)
    return FollowResponse(following=False, followers_count=target.followers_count)
