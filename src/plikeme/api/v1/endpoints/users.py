# src/plikeme/api/v1/endpoints/users.py
"""User profile, membership and search endpoints for the P-LikeMe API."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from plikeme.core.settings import settings
from plikeme.models import Community, User, UserCommunity, UserDiseaseTag, UserHospital
from plikeme.models.user import PROFILE_TEXT_FIELDS
from plikeme.schemas.community import CommunityMembershipStatus, CommunityResponse
from plikeme.schemas.user import (
    ProfileFields,
    ProfileResponse,
    ProfileUpdateRequest,
    UserSearchResponse,
    UserSearchResult,
)
from plikeme.services.community_filters import CommunitySelection
from plikeme.services.membership import is_member, user_sub_communities
from plikeme.services.thread_links import community_paths
from plikeme.services.user_search import UserSearchCriteria, search_users
from plikeme.utils.sanitize import sanitize_list

from ..dependencies import CurrentUserDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _clean_tags(values: list[str], label: str, max_count: int, max_length: int) -> list[str]:
    """Trim, drop blanks and duplicates, enforce limits, then HTML-escape.

    Limits apply to the text as typed, not to its escaped form.
    """
    cleaned = list(dict.fromkeys(value.strip() for value in values if value and value.strip()))
    if len(cleaned) > max_count:
        raise _bad_request(f"At most {max_count} {label} are allowed")
    for value in cleaned:
        if len(value) > max_length:
            raise _bad_request(f"Each of the {label} must be at most {max_length} characters")
    return sanitize_list(cleaned)


def _profile_payload(db: Session, user: User) -> dict[str, Any]:
    fields = ProfileFields.model_validate(user).model_dump()
    return {
        **fields,
        "id": user.id,
        "username": user.username,
        "created_at": user.created_at,
        "is_guru": user.is_guru,
        "disease_tags": user.disease_tag_names,
        "hospitals": user.hospital_names,
        "communities": community_paths(db, user.memberships),
    }


def _communities_by_user(db: Session, user_ids: list[int]) -> dict[int, list[dict[str, Any]]]:
    """Return ``{user_id: [{"id", "name"}]}`` with one entry per community joined."""
    if not user_ids:
        return {}
    rows = db.execute(
        select(UserCommunity.user_id, Community.id, Community.name)
        .join(Community, Community.id == UserCommunity.community_id)
        .where(UserCommunity.user_id.in_(user_ids))
        .order_by(UserCommunity.id)
    ).all()
    grouped: dict[int, dict[int, dict[str, Any]]] = {}
    for user_id, community_id, name in rows:
        grouped.setdefault(user_id, {}).setdefault(community_id, {"id": community_id, "name": name})
    return {user_id: list(items.values()) for user_id, items in grouped.items()}


@router.get("/me/communities")
async def my_communities(
    current_user: CurrentUserDep,
    db: SessionDep,
    details: bool = False,
    community_id: int | None = None,
) -> dict[str, Any]:
    """Describe the caller's community memberships.

    Returns ``community_ids`` by default, full ``communities`` with
    ``details=true``, or the membership status inside one community when
    ``community_id`` is given.
    """
    if community_id is not None:
        membership = CommunityMembershipStatus(
            community_id=community_id,
            is_level_i_member=is_member(db, current_user.id, community_id),
            sub_communities=[
                {"stage": ref.stage, "type": ref.type}
                for ref in user_sub_communities(db, current_user.id, community_id)
            ],
        )
        return membership.model_dump()

    ids = list(
        dict.fromkeys(
            db.execute(
                select(UserCommunity.community_id)
                .where(UserCommunity.user_id == current_user.id)
                .order_by(UserCommunity.id)
            ).scalars()
        )
    )
    if not details:
        return {"community_ids": ids}

    communities = db.query(Community).filter(Community.id.in_(ids)).order_by(Community.id).all()
    return {
        "communities": [
            CommunityResponse.model_validate(c).model_dump() for c in communities
        ]
    }


@router.put("/me/profile", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Replace the caller's profile, disease tags and hospitals.

    Raises:
        HTTPException: 400 for an out-of-range age or oversized values.
    """
    if payload.age is not None and not 0 <= payload.age <= 150:
        raise _bad_request("Age must be between 0 and 150")
    if payload.family_size is not None and payload.family_size < 0:
        raise _bad_request("Family size cannot be negative")

    for name in PROFILE_TEXT_FIELDS:
        value = getattr(payload, name)
        value = value.strip() if value else None
        if value and len(value) > settings.profile_field_max:
            raise _bad_request(
                f"{name} must be at most {settings.profile_field_max} characters"
            )
        setattr(current_user, name, value or None)
    current_user.age = payload.age
    current_user.family_size = payload.family_size

    tags = _clean_tags(
        payload.disease_tags, "disease tags", settings.max_disease_tags, settings.disease_tag_max
    )
    hospitals = _clean_tags(
        payload.hospitals, "hospitals", settings.max_hospitals, settings.hospital_name_max
    )
    current_user.disease_tags.clear()
    current_user.hospitals.clear()
    db.flush()
    current_user.disease_tags.extend(UserDiseaseTag(tag=tag) for tag in tags)
    current_user.hospitals.extend(UserHospital(hospital=name) for name in hospitals)

    db.commit()
    db.refresh(current_user)
    return _profile_payload(db, current_user)


@router.get("/search", response_model=UserSearchResponse)
async def search(
    db: SessionDep,
    community_filters: str | None = Query(
        None, description='JSON list of {"id", "stage", "type"} community filters'
    ),
    communities: str | None = Query(None, description="Comma separated community ids"),
    disease_tag: str | None = None,
    hospital: str | None = None,
    location: str | None = None,
    location_district: str | None = None,
    location_street: str | None = None,
    gender: str | None = None,
    hukou: str | None = None,
    education: str | None = None,
    income_individual: str | None = None,
    income_family: str | None = None,
    consumption_level: str | None = None,
    housing_status: str | None = None,
    economic_dependency: str | None = None,
    age_min: int | None = Query(None, ge=0),
    age_max: int | None = Query(None, ge=0),
    exclude_user: str | None = None,
    limit: int = Query(settings.user_search_page_size, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> dict[str, Any]:
    """Search users by community membership and profile attributes.

    Community filters are OR-ed; every other filter must also match. A
    request without filters returns no users.
    """
    selection = CommunitySelection()
    if community_filters:
        try:
            selection = CommunitySelection.from_json(community_filters)
        except ValueError:
            logger.warning("ignoring malformed community_filters: %r", community_filters)
    elif communities:
        selection = CommunitySelection.from_id_list(communities)

    criteria = UserSearchCriteria(
        communities=selection,
        disease_tag=disease_tag,
        hospital=hospital,
        location=location,
        location_district=location_district,
        location_street=location_street,
        gender=gender,
        hukou=hukou,
        education=education,
        income_individual=income_individual,
        income_family=income_family,
        consumption_level=consumption_level,
        housing_status=housing_status,
        economic_dependency=economic_dependency,
        age_min=age_min,
        age_max=age_max,
        exclude_user=exclude_user,
        limit=limit,
        offset=offset,
    )
    users, total = search_users(db, criteria)
    communities_by_user = _communities_by_user(db, [user.id for user in users])

    results = [
        UserSearchResult(
            **ProfileFields.model_validate(user).model_dump(),
            id=user.id,
            username=user.username,
            created_at=user.created_at,
            disease_tags=user.disease_tag_names,
            hospitals=user.hospital_names,
            communities=communities_by_user.get(user.id, []),
        )
        for user in users
    ]
    return {"users": results, "total": total}


@router.get("/{username}/profile", response_model=ProfileResponse)
async def get_profile(username: str, db: SessionDep) -> dict[str, Any]:
    """Get a user's public profile."""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return _profile_payload(db, user)
