# mypy: ignore-errors
# tests/v1/test_threads.py
"""Tests for thread endpoints."""

from fastapi import status

from plikeme.models import Reply, Thread


def test_create_thread_with_links(client, community, plain_community, auth_token, test_user) -> None:
    response = client.post(
        "/api/v1/threads/",
        json={
            "title": "  Insulin pump questions ",
            "content": "Which pump do you use?",
            "community_ids": [plain_community.id, plain_community.id],
            "community_links": [
                {"id": community.id, "stage": "Stable", "type": "Type 1"},
                {"id": community.id, "stage": "Stable", "type": "Type 1"},
            ],
        },
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["title"] == "Insulin pump questions"
    assert data["user_id"] == test_user.id
    assert data["community_ids"] == [plain_community.id, community.id]
    assert [c["display_path"] for c in data["communities"]] == [
        "Asthma",
        "Diabetes > Stable · Type 1",
    ]


def test_create_thread_requires_title(client, auth_token) -> None:
    response = client.post(
        "/api/v1/threads/",
        json={"title": "   ", "content": "text"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Title is required"


def test_create_thread_rejects_long_title(client, auth_token, test_settings) -> None:
    response = client.post(
        "/api/v1/threads/",
        json={"title": "x" * (test_settings.thread_title_max + 1), "content": "text"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_thread_requires_auth(client) -> None:
    response = client.post("/api/v1/threads/", json={"title": "t", "content": "c"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_my_threads(client, thread, auth_token, other_auth_token) -> None:
    mine = client.get("/api/v1/threads/", headers=auth_token)
    assert mine.status_code == status.HTTP_200_OK
    assert [t["id"] for t in mine.json()] == [thread.id]

    theirs = client.get("/api/v1/threads/", headers=other_auth_token)
    assert theirs.json() == []


def test_list_user_threads(client, thread, test_user, other_auth_token) -> None:
    response = client.get(f"/api/v1/threads/user/{test_user.username}", headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["user"] == {"id": test_user.id, "username": test_user.username}
    assert data["threads"][0]["author"] == test_user.username


def test_list_user_threads_unknown(client, other_auth_token) -> None:
    response = client.get("/api/v1/threads/user/ghost", headers=other_auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_get_own_thread_only(client, thread, auth_token, other_auth_token) -> None:
    assert client.get(f"/api/v1/threads/{thread.id}", headers=auth_token).status_code == 200
    response = client.get(f"/api/v1/threads/{thread.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_public_thread_includes_author_and_reply_count(
    client, db_session, thread, test_user, other_user
) -> None:
    db_session.add(Reply(thread_id=thread.id, user_id=other_user.id, content="hi"))
    db_session.flush()

    response = client.get(f"/api/v1/threads/{thread.id}/public")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["author"] == test_user.username
    assert data["reply_count"] == 1
    assert data["communities"][0]["name"] == "Diabetes"


def test_public_thread_missing(client) -> None:
    assert client.get("/api/v1/threads/4242/public").status_code == status.HTTP_404_NOT_FOUND


def test_update_replaces_links(client, thread, plain_community, auth_token) -> None:
    response = client.put(
        f"/api/v1/threads/{thread.id}",
        json={
            "title": "Updated",
            "content": "New body",
            "community_links": [{"id": plain_community.id}],
        },
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["title"] == "Updated"
    assert data["community_ids"] == [plain_community.id]


def test_update_by_other_user_is_not_found(client, thread, other_auth_token) -> None:
    response = client.put(
        f"/api/v1/threads/{thread.id}",
        json={"title": "Hijack", "content": "nope"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Thread not found or not owned by you"


def test_delete_thread_removes_replies(client, db_session, thread, other_user, auth_token) -> None:
    db_session.add(Reply(thread_id=thread.id, user_id=other_user.id, content="bye"))
    db_session.flush()

    response = client.delete(f"/api/v1/threads/{thread.id}", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert db_session.query(Thread).filter(Thread.id == thread.id).first() is None
    assert db_session.query(Reply).filter(Reply.thread_id == thread.id).count() == 0


def test_delete_thread_of_someone_else(client, thread, other_auth_token) -> None:
    response = client.delete(f"/api/v1/threads/{thread.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
