# mypy: ignore-errors
# tests/v1/test_profiles.py
"""Tests for profile and follow endpoints."""

from fastapi import status


def test_get_my_profile(client, auth_token, test_user) -> None:
    """Test reading the caller's own profile."""
    response = client.get("/api/v1/profiles/me", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == test_user.id
    assert data["username"] == "alice"
    assert data["followers_count"] == 0


def test_update_my_profile(client, auth_token) -> None:
    """Test updating description and icon."""
    response = client.put(
        "/api/v1/profiles/me",
        json={"description": "Writer", "icon_url": "https://example.org/a.png"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["description"] == "Writer"

    again = client.put("/api/v1/profiles/me", json={"description": "Poet"}, headers=auth_token)
    assert again.json()["icon_url"] == "https://example.org/a.png"


def test_get_unknown_profile(client) -> None:
    """Test reading a profile that does not exist."""
    response = client.get("/api/v1/profiles/missing")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_follow_and_unfollow(client, auth_token, test_user, other_user) -> None:
    """Following is idempotent and reflected on the target profile."""
    url = f"/api/v1/profiles/{other_user.id}/follow"

    first = client.post(url, headers=auth_token)
    assert first.status_code == status.HTTP_200_OK
    assert first.json() == {"following": True, "followers_count": 1}
    assert client.post(url, headers=auth_token).json() == {"following": True, "followers_count": 1}

    profile = client.get(f"/api/v1/profiles/{other_user.id}", headers=auth_token)
    assert profile.json()["is_following"] is True
    anonymous = client.get(f"/api/v1/profiles/{other_user.id}")
    assert anonymous.json()["is_following"] is False

    me = client.get("/api/v1/profiles/me", headers=auth_token)
    assert me.json()["following_count"] == 1

    assert client.delete(url, headers=auth_token).json() == {
        "following": False,
        "followers_count": 0,
    }
    assert client.delete(url, headers=auth_token).json()["followers_count"] == 0


def test_follow_self(client, auth_token, test_user) -> None:
    """Test that a user cannot follow themselves."""
    response = client.post(f"/api/v1/profiles/{test_user.id}/follow", headers=auth_token)
    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_follow_unknown_user(client, auth_token) -> None:
    """Test following a user that does not exist."""
    response = client.post("/api/v1/profiles/missing/follow", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_profile_stats(client, auth_token, other_auth_token, test_publication, test_user) -> None:
    """Test aggregate stats after some engagement."""
    client.post(f"/api/v1/publications/{test_publication.id}/like", headers=other_auth_token)
    client.post(
        f"/api/v1/publications/{test_publication.id}/comments",
        json={"text": "nice"},
        headers=other_auth_token,
    )
    client.post(f"/api/v1/profiles/{test_user.id}/follow", headers=other_auth_token)

    response = client.get(f"/api/v1/profiles/{test_user.id}/stats")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "publications": 1,
        "followers": 1,
        "following": 0,
        "likes_received": 1,
        "comments_received": 1,
        "saved": 0,
    }
