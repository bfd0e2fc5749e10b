# mypy: ignore-errors
# tests/v1/test_replies.py
"""Tests for reply endpoints and reply cards."""

import datetime

import pytest
from fastapi import status

from plikeme.models import Reply, Thread
from tests.conftest import make_user


def _reply(db, thread, user, content, parent=None, minutes=0):
    reply = Reply(
        thread_id=thread.id,
        user_id=user.id,
        parent_reply_id=parent.id if parent is not None else None,
        content=content,
        created_at=datetime.datetime(2024, 2, 1, 8, minutes, tzinfo=datetime.timezone.utc),
    )
    db.add(reply)
    db.flush()
    return reply


@pytest.fixture()
def conversation(db_session, thread, test_user, other_user):
    carol = make_user(db_session, "carol")
    top = _reply(db_session, thread, other_user, "welcome", minutes=0)
    answer = _reply(db_session, thread, test_user, "thanks", parent=top, minutes=20)
    follow_up = _reply(db_session, thread, carol, "me too", parent=answer, minutes=10)
    second = _reply(db_session, thread, carol, "another card", minutes=30)
    return top, answer, follow_up, second


def test_list_replies_builds_cards(client, thread, conversation) -> None:
    top, answer, follow_up, second = conversation

    response = client.get(f"/api/v1/threads/{thread.id}/replies")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()

    assert data["count"] == 4
    assert [r["id"] for r in data["replies"]] == [top.id, follow_up.id, answer.id, second.id]

    cards = data["cards"]
    assert [c["top_reply"]["id"] for c in cards] == [top.id, second.id]
    assert [r["id"] for r in cards[0]["stacked_replies"]] == [follow_up.id, answer.id]
    assert cards[1]["stacked_replies"] == []


def test_stacked_replies_mention_direct_parent(client, thread, conversation) -> None:
    response = client.get(f"/api/v1/threads/{thread.id}/replies")
    stacked = response.json()["cards"][0]["stacked_replies"]

    mentions = {r["content"]: r["mention"] for r in stacked}
    assert mentions == {"thanks": "bob", "me too": "alice"}
    assert response.json()["cards"][0]["top_reply"]["mention"] is None


def test_viewer_flags(client, thread, conversation, auth_token) -> None:
    data = client.get(f"/api/v1/threads/{thread.id}/replies", headers=auth_token).json()
    by_content = {r["content"]: r for r in data["replies"]}

    assert by_content["thanks"]["is_owner"] is True
    assert by_content["thanks"]["is_thread_author"] is True
    assert by_content["welcome"]["is_owner"] is False
    assert by_content["welcome"]["author"] == "bob"


def test_orphaned_reply_becomes_its_own_card(client, thread, conversation, auth_token) -> None:
    _, answer, follow_up, _ = conversation

    response = client.delete(
        f"/api/v1/threads/{thread.id}/replies/{answer.id}", headers=auth_token
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT

    data = client.get(f"/api/v1/threads/{thread.id}/replies").json()
    tops = [c["top_reply"]["id"] for c in data["cards"]]
    assert follow_up.id in tops
    orphan = next(c for c in data["cards"] if c["top_reply"]["id"] == follow_up.id)
    assert orphan["stacked_replies"] == []
    assert orphan["top_reply"]["parent_reply_id"] == answer.id


def test_replies_of_missing_thread(client) -> None:
    response = client.get("/api/v1/threads/9999/replies")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_top_level_reply(client, thread, auth_token, test_user) -> None:
    response = client.post(
        f"/api/v1/threads/{thread.id}/replies",
        json={"content": "  first!  "},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["content"] == "first!"
    assert data["author"] == test_user.username
    assert data["parent_reply_id"] is None
    assert data["mention"] is None
    assert data["is_owner"] is True


def test_create_nested_reply_mentions_parent(
    client, db_session, thread, other_user, auth_token
) -> None:
    parent = _reply(db_session, thread, other_user, "question?")

    response = client.post(
        f"/api/v1/threads/{thread.id}/replies",
        json={"content": "answer", "parent_reply_id": parent.id},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["parent_reply_id"] == parent.id
    assert response.json()["mention"] == other_user.username


def test_parent_from_another_thread_is_rejected(
    client, db_session, thread, test_user, auth_token
) -> None:
    elsewhere = Thread(user_id=test_user.id, title="other", content="other")
    db_session.add(elsewhere)
    db_session.flush()
    foreign = _reply(db_session, elsewhere, test_user, "not here")

    response = client.post(
        f"/api/v1/threads/{thread.id}/replies",
        json={"content": "answer", "parent_reply_id": foreign.id},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Parent reply not found in this thread"


def test_blank_reply_is_rejected(client, thread, auth_token) -> None:
    response = client.post(
        f"/api/v1/threads/{thread.id}/replies",
        json={"content": "   "},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Reply content is required"


def test_reply_requires_auth(client, thread) -> None:
    response = client.post(f"/api/v1/threads/{thread.id}/replies", json={"content": "hi"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_only_author_can_delete(client, thread, conversation, other_auth_token) -> None:
    _, answer, _, _ = conversation

    response = client.delete(
        f"/api/v1/threads/{thread.id}/replies/{answer.id}", headers=other_auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_delete_unknown_reply(client, thread, auth_token) -> None:
    response = client.delete(f"/api/v1/threads/{thread.id}/replies/777", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
