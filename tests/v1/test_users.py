# mypy: ignore-errors
# tests/v1/test_users.py
"""Tests for profile, membership and user search endpoints."""

import json

import pytest
from fastapi import status

from plikeme.models import UserDiseaseTag, UserHospital
from plikeme.services.membership import join_community
from tests.conftest import make_user


def _usernames(response) -> set[str]:
    return {u["username"] for u in response.json()["users"]}


@pytest.fixture()
def population(db_session, community, plain_community):
    """Four users spread over communities and profile attributes."""
    erin = make_user(db_session, "erin", gender="F", age=34, location_living="Chengdu")
    frank = make_user(db_session, "frank", gender="M", age=58, location_from="Chengdu")
    gina = make_user(db_session, "gina", gender="F", age=71, location_living="Shanghai")
    hank = make_user(db_session, "hank", gender="M", age=25)

    join_community(db_session, erin.id, community, "Stable", "Type 2")
    join_community(db_session, frank.id, community, "Newly diagnosed")
    join_community(db_session, gina.id, plain_community)
    erin.disease_tags.append(UserDiseaseTag(tag="Type 2 diabetes"))
    frank.hospitals.append(UserHospital(hospital="West China Hospital"))
    db_session.flush()
    return erin, frank, gina, hank


def test_update_profile(client, auth_token, test_user) -> None:
    response = client.put(
        "/api/v1/users/me/profile",
        json={
            "gender": " F ",
            "age": 42,
            "profession": "",
            "location_living": "Beijing",
            "family_size": 3,
            "disease_tags": ["Asthma", " asthma ", "Asthma", ""],
            "hospitals": ["Peking Union"],
        },
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["gender"] == "F"
    assert data["age"] == 42
    assert data["profession"] is None
    assert data["disease_tags"] == ["Asthma", "asthma"]
    assert data["hospitals"] == ["Peking Union"]

    again = client.put(
        "/api/v1/users/me/profile",
        json={"disease_tags": ["Gout"]},
        headers=auth_token,
    )
    assert again.json()["disease_tags"] == ["Gout"]
    assert again.json()["hospitals"] == []
    assert again.json()["age"] is None


@pytest.mark.parametrize("age", [-1, 151])
def test_update_profile_rejects_bad_age(client, auth_token, age) -> None:
    response = client.put("/api/v1/users/me/profile", json={"age": age}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Age must be between 0 and 150"


def test_update_profile_rejects_long_field(client, auth_token, test_settings) -> None:
    response = client.put(
        "/api/v1/users/me/profile",
        json={"education": "x" * (test_settings.profile_field_max + 1)},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_tag_length_is_checked_before_escaping(client, auth_token, test_settings) -> None:
    tag = "A&B" + "x" * (test_settings.disease_tag_max - 3)
    response = client.put(
        "/api/v1/users/me/profile",
        json={"disease_tags": [tag]},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["disease_tags"] == [tag.replace("&", "&amp;")]


def test_public_profile_lists_communities(client, db_session, test_user, community) -> None:
    join_community(db_session, test_user.id, community, "Stable")
    db_session.flush()

    response = client.get(f"/api/v1/users/{test_user.username}/profile")
    assert response.status_code == status.HTTP_200_OK
    paths = [c["display_path"] for c in response.json()["communities"]]
    assert paths == ["Diabetes", "Diabetes > Stable"]


def test_public_profile_unknown_user(client) -> None:
    response = client.get("/api/v1/users/ghost/profile")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "User not found"


def test_my_communities_variants(client, db_session, test_user, community, auth_token) -> None:
    join_community(db_session, test_user.id, community, "Stable")
    db_session.flush()

    ids = client.get("/api/v1/users/me/communities", headers=auth_token).json()
    assert ids == {"community_ids": [community.id]}

    details = client.get(
        "/api/v1/users/me/communities", params={"details": "true"}, headers=auth_token
    ).json()
    assert [c["name"] for c in details["communities"]] == ["Diabetes"]


def test_search_without_filters_is_empty(client, population) -> None:
    response = client.get("/api/v1/users/search")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"users": [], "total": 0}


def test_exclude_user_alone_is_not_a_filter(client, population) -> None:
    response = client.get("/api/v1/users/search", params={"exclude_user": "erin"})
    assert response.json()["total"] == 0


def test_search_by_community_levels_is_or(client, population, community, plain_community) -> None:
    filters = [
        {"id": community.id, "stage": "Stable", "type": "Type 2"},
        {"id": plain_community.id},
    ]
    response = client.get("/api/v1/users/search", params={"community_filters": json.dumps(filters)})
    assert response.status_code == status.HTTP_200_OK
    assert _usernames(response) == {"erin", "gina"}
    assert response.json()["total"] == 2


def test_search_level_one_includes_sub_members(client, population, community) -> None:
    filters = json.dumps([{"id": community.id}])
    response = client.get("/api/v1/users/search", params={"community_filters": filters})
    assert _usernames(response) == {"erin", "frank"}


def test_search_stage_only(client, population, community) -> None:
    filters = json.dumps([{"id": community.id, "stage": "Newly diagnosed"}])
    response = client.get("/api/v1/users/search", params={"community_filters": filters})
    assert _usernames(response) == {"frank"}


def test_search_legacy_community_ids(client, population, community, plain_community) -> None:
    response = client.get(
        "/api/v1/users/search",
        params={"communities": f"{community.id},{plain_community.id}"},
    )
    assert _usernames(response) == {"erin", "frank", "gina"}


def test_malformed_filters_are_ignored(client, population, caplog) -> None:
    with caplog.at_level("WARNING"):
        response = client.get(
            "/api/v1/users/search",
            params={"community_filters": "{oops", "gender": "M"},
        )
    assert response.status_code == status.HTTP_200_OK
    assert _usernames(response) == {"frank", "hank"}
    assert "malformed community_filters" in caplog.text


def test_search_filters_are_and(client, population, community) -> None:
    filters = json.dumps([{"id": community.id}])
    response = client.get(
        "/api/v1/users/search",
        params={"community_filters": filters, "gender": "F"},
    )
    assert _usernames(response) == {"erin"}


def test_search_by_age_range(client, population) -> None:
    response = client.get("/api/v1/users/search", params={"age_min": 30, "age_max": 60})
    assert _usernames(response) == {"erin", "frank"}


def test_search_location_matches_origin_or_residence(client, population) -> None:
    response = client.get("/api/v1/users/search", params={"location": "Chengdu"})
    assert _usernames(response) == {"erin", "frank"}


def test_search_tags_and_hospitals(client, population) -> None:
    tagged = client.get("/api/v1/users/search", params={"disease_tag": "Type 2"})
    assert _usernames(tagged) == {"erin"}
    assert tagged.json()["users"][0]["disease_tags"] == ["Type 2 diabetes"]

    treated = client.get("/api/v1/users/search", params={"hospital": "West China"})
    assert _usernames(treated) == {"frank"}
    assert treated.json()["users"][0]["communities"][0]["name"] == "Diabetes"


def test_search_excludes_caller_and_pages(client, population) -> None:
    response = client.get(
        "/api/v1/users/search",
        params={"location": "Chengdu", "exclude_user": "erin"},
    )
    assert _usernames(response) == {"frank"}

    page = client.get("/api/v1/users/search", params={"age_min": 0, "limit": 2})
    assert page.json()["total"] == 4
    assert len(page.json()["users"]) == 2


def test_non_text_filter_levels_are_ignored(client, population, community, caplog) -> None:
    filters = json.dumps([{"id": community.id, "stage": 2}])
    with caplog.at_level("WARNING"):
        response = client.get("/api/v1/users/search", params={"community_filters": filters})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"users": [], "total": 0}
    assert "non-text stage/type" in caplog.text

    mixed = json.dumps(
        [{"id": community.id, "type": ["Type 2"]}, {"id": community.id, "stage": "Stable"}]
    )
    response = client.get("/api/v1/users/search", params={"community_filters": mixed})
    assert _usernames(response) == {"erin"}
