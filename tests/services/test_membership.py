# mypy: ignore-errors
# tests/services/test_membership.py
"""Tests for joining and leaving community levels."""

import pytest

from plikeme.models import SubCommunityMember, UserCommunity
from plikeme.services.membership import (
    SubCommunityRef,
    display_path,
    get_sub_community_counts,
    is_member,
    join_community,
    leave_community,
    membership_level,
    user_sub_communities,
)


def _rows(db, user, community):
    return {
        (row.stage, row.type)
        for row in db.query(UserCommunity).filter(
            UserCommunity.user_id == user.id,
            UserCommunity.community_id == community.id,
        )
    }


def _counts(db, community):
    return {
        (row.stage, row.type): row.member_count
        for row in db.query(SubCommunityMember).filter(
            SubCommunityMember.community_id == community.id
        )
    }


@pytest.mark.parametrize(
    ("stage", "type_", "level"),
    [(None, None, 1), ("", "  ", 1), ("Stable", None, 2), (None, "Type 1", 2), ("Stable", "Type 1", 3)],
)
def test_membership_level(stage, type_, level) -> None:
    assert membership_level(stage, type_) == level


def test_display_path() -> None:
    assert display_path("Diabetes") == "Diabetes"
    assert display_path("Diabetes", "Stable") == "Diabetes > Stable"
    assert display_path("Diabetes", None, "Type 2") == "Diabetes > Type 2"
    assert display_path("Diabetes", "Stable", "Type 2") == "Diabetes > Stable · Type 2"


def test_join_level_one_counts_once(db_session, test_user, community) -> None:
    assert join_community(db_session, test_user.id, community) is True
    assert join_community(db_session, test_user.id, community) is False

    assert community.member_count == 1
    assert _rows(db_session, test_user, community) == {("", "")}
    assert is_member(db_session, test_user.id, community.id)


def test_join_level_two_also_joins_level_one(db_session, test_user, community) -> None:
    assert join_community(db_session, test_user.id, community, "Stable") is True

    assert _rows(db_session, test_user, community) == {("", ""), ("Stable", "")}
    assert community.member_count == 1
    assert _counts(db_session, community) == {("Stable", ""): 1}


def test_join_level_three_joins_every_parent(db_session, test_user, community) -> None:
    assert join_community(db_session, test_user.id, community, "Stable", "Type 2") is True

    assert _rows(db_session, test_user, community) == {
        ("", ""),
        ("Stable", ""),
        ("", "Type 2"),
        ("Stable", "Type 2"),
    }
    assert community.member_count == 1
    assert _counts(db_session, community) == {
        ("Stable", ""): 1,
        ("", "Type 2"): 1,
        ("Stable", "Type 2"): 1,
    }


def test_rejoin_does_not_double_count(db_session, test_user, other_user, community) -> None:
    join_community(db_session, test_user.id, community, "Stable")
    join_community(db_session, test_user.id, community, "Stable", "Type 2")
    join_community(db_session, other_user.id, community, "Stable", "Type 2")

    assert community.member_count == 2
    assert _counts(db_session, community) == {
        ("Stable", ""): 2,
        ("", "Type 2"): 2,
        ("Stable", "Type 2"): 2,
    }


def test_leave_sub_community_keeps_parents(db_session, test_user, community) -> None:
    join_community(db_session, test_user.id, community, "Stable", "Type 2")

    assert leave_community(db_session, test_user.id, community, "Stable", "Type 2") is True
    assert leave_community(db_session, test_user.id, community, "Stable", "Type 2") is False

    assert ("Stable", "Type 2") not in _rows(db_session, test_user, community)
    assert is_member(db_session, test_user.id, community.id)
    assert _counts(db_session, community)[("Stable", "Type 2")] == 0


def test_leave_level_one_removes_everything(db_session, test_user, community) -> None:
    join_community(db_session, test_user.id, community, "Stable", "Type 2")

    assert leave_community(db_session, test_user.id, community) is True

    assert _rows(db_session, test_user, community) == set()
    assert community.member_count == 0
    assert set(_counts(db_session, community).values()) == {0}


def test_leave_without_membership(db_session, test_user, community) -> None:
    assert leave_community(db_session, test_user.id, community) is False
    assert community.member_count == 0


def test_user_sub_communities_and_counts(db_session, test_user, community) -> None:
    join_community(db_session, test_user.id, community, None, "Type 1")

    assert user_sub_communities(db_session, test_user.id, community.id) == [
        SubCommunityRef(stage=None, type="Type 1")
    ]
    assert get_sub_community_counts(db_session, community.id) == [
        {"stage": None, "type": "Type 1", "member_count": 1}
    ]
