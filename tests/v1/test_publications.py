# mypy: ignore-errors
# tests/v1/test_publications.py
"""Tests for publication endpoints."""

from fastapi import status

from sense_stage.models import Visibility


def test_create_publication(client, auth_token, test_user, make_media) -> None:
    """Test creating a publication with attached media."""
    asset = make_media(test_user)
    response = client.post(
        "/api/v1/publications",
        json={
            "type": "article",
            "title": "Hello",
            "content": "World",
            "visibility": "community",
            "media_ids": [asset.id],
        },
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["author_id"] == test_user.id
    assert data["type"] == "article"
    assert data["visibility"] == "community"
    assert data["likes_count"] == 0
    assert data["comments_count"] == 0
    assert data["saved_count"] == 0
    assert data["media_ids"] == [asset.id]


def test_create_publication_requires_auth(client) -> None:
    """Test creating a publication without a token."""
    response = client.post("/api/v1/publications", json={"content": "anon"})
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_create_publication_without_body_text(client, auth_token) -> None:
    """A publication needs a title or content."""
    response = client.post("/api/v1/publications", json={"type": "post"}, headers=auth_token)
    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_create_publication_with_foreign_media(
    client, auth_token, other_user, make_media
) -> None:
    """Test attaching media owned by another user."""
    foreign = make_media(other_user)
    response = client.post(
        "/api/v1/publications",
        json={"content": "mine?", "media_ids": [foreign.id]},
        headers=auth_token,
    )
    assert response.status_code == 422
    assert response.json()["error_code"] == "MEDIA_NOT_OWNED"


def test_get_publication_anonymous(client, test_publication) -> None:
    """Test reading a public publication without a token."""
    response = client.get(f"/api/v1/publications/{test_publication.id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == test_publication.id
    assert data["is_liked"] is False
    assert data["is_saved"] is False


def test_get_private_publication_of_other_user(
    client, other_auth_token, make_publication, test_user
) -> None:
    """Private publications are indistinguishable from missing ones."""
    private = make_publication(test_user, visibility=Visibility.PRIVATE)
    response = client.get(f"/api/v1/publications/{private.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error_code"] == "NOT_FOUND"


def test_get_publication_with_invalid_token(client, test_publication) -> None:
    """A bad token is rejected even on endpoints that allow anonymous access."""
    response = client.get(
        f"/api/v1/publications/{test_publication.id}",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error_code"] == "UNAUTHORIZED"


def test_update_publication_partial(client, auth_token, test_publication) -> None:
    """Test that only fields present in the body change."""
    response = client.put(
        f"/api/v1/publications/{test_publication.id}",
        json={"title": "Renamed"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["title"] == "Renamed"
    assert data["content"] == "First publication"


def test_update_publication_clearing_body(client, auth_token, test_publication) -> None:
    """Test that an update may not null both title and content."""
    response = client.put(
        f"/api/v1/publications/{test_publication.id}",
        json={"title": None, "content": None},
        headers=auth_token,
    )
    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"

    stored = client.get(f"/api/v1/publications/{test_publication.id}", headers=auth_token)
    assert stored.json()["content"] == "First publication"


def test_update_publication_not_author(client, other_auth_token, test_publication) -> None:
    """Test editing someone else's publication."""
    response = client.put(
        f"/api/v1/publications/{test_publication.id}",
        json={"title": "Mine now"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error_code"] == "NOT_AUTHOR"


def test_delete_publication(client, auth_token, other_auth_token, test_publication) -> None:
    """Test deleting a publication."""
    forbidden = client.delete(
        f"/api/v1/publications/{test_publication.id}", headers=other_auth_token
    )
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/publications/{test_publication.id}", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    missing = client.get(f"/api/v1/publications/{test_publication.id}")
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_toggle_like(client, other_auth_token, test_publication) -> None:
    """Liking twice removes the like."""
    url = f"/api/v1/publications/{test_publication.id}/like"

    first = client.post(url, headers=other_auth_token)
    assert first.status_code == status.HTTP_200_OK
    assert first.json() == {"liked": True, "likes_count": 1}

    second = client.post(url, headers=other_auth_token)
    assert second.json() == {"liked": False, "likes_count": 0}

    third = client.post(url, headers=other_auth_token)
    assert third.json() == {"liked": True, "likes_count": 1}

    detail = client.get(f"/api/v1/publications/{test_publication.id}", headers=other_auth_token)
    assert detail.json()["is_liked"] is True
    assert detail.json()["likes_count"] == 1


def test_like_nonexistent_publication(client, auth_token) -> None:
    """Test liking a publication that does not exist."""
    response = client.post("/api/v1/publications/missing/like", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_likes(client, auth_token, other_auth_token, test_publication, other_user) -> None:
    """Test listing users who liked a publication."""
    client.post(f"/api/v1/publications/{test_publication.id}/like", headers=other_auth_token)

    response = client.get(f"/api/v1/publications/{test_publication.id}/likes")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == other_user.id
    assert data["items"][0]["username"] == "bob"


def test_save_and_unsave(client, other_auth_token, test_publication) -> None:
    """Saving is idempotent and unsaving twice is harmless."""
    url = f"/api/v1/publications/{test_publication.id}/save"

    assert client.post(url, json={"note": "read"}, headers=other_auth_token).json() == {
        "saved": True
    }
    assert client.post(url, headers=other_auth_token).json() == {"saved": True}

    detail = client.get(f"/api/v1/publications/{test_publication.id}", headers=other_auth_token)
    assert detail.json()["is_saved"] is True
    assert detail.json()["saved_count"] == 1

    assert client.delete(url, headers=other_auth_token).json() == {"saved": False}
    assert client.delete(url, headers=other_auth_token).json() == {"saved": False}

    detail = client.get(f"/api/v1/publications/{test_publication.id}", headers=other_auth_token)
    assert detail.json()["saved_count"] == 0


def test_comments_on_publication(client, auth_token, other_auth_token, test_publication) -> None:
    """Test creating and listing comments on a publication."""
    url = f"/api/v1/publications/{test_publication.id}/comments"
    created = client.post(url, json={"text": "first!"}, headers=other_auth_token)
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["parent_id"] is None

    listing = client.get(url, headers=auth_token)
    assert listing.status_code == status.HTTP_200_OK
    assert listing.json()["total"] == 1
    assert listing.json()["items"][0]["text"] == "first!"

    detail = client.get(f"/api/v1/publications/{test_publication.id}")
    assert detail.json()["comments_count"] == 1


def test_empty_comment_rejected(client, auth_token, test_publication) -> None:
    """Test posting an empty comment."""
    response = client.post(
        f"/api/v1/publications/{test_publication.id}/comments",
        json={"text": ""},
        headers=auth_token,
    )
    assert response.status_code == 422
