# src/plikeme/services/user_search.py
"""Find users who share conditions, places or circumstances."""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import ColumnElement, and_, or_, select
from sqlalchemy.orm import Session, selectinload

from plikeme.models import User, UserCommunity, UserDiseaseTag, UserHospital

from .community_filters import CommunityFilter, CommunitySelection

__all__ = ["EXACT_MATCH_FIELDS", "UserSearchCriteria", "search_users"]

# Profile columns matched by equality.
EXACT_MATCH_FIELDS = (
    "gender",
    "hukou",
    "education",
    "income_individual",
    "income_family",
    "consumption_level",
    "housing_status",
    "economic_dependency",
)


@dataclass
class UserSearchCriteria:
    """Filters accepted by :func:`search_users`.

    Community filters are OR-ed together; every other filter narrows the
    result further. ``exclude_user`` is not a filter on its own.
    """

    communities: CommunitySelection = field(default_factory=CommunitySelection)
    disease_tag: str | None = None
    hospital: str | None = None
    location: str | None = None
    location_district: str | None = None
    location_street: str | None = None
    gender: str | None = None
    hukou: str | None = None
    education: str | None = None
    income_individual: str | None = None
    income_family: str | None = None
    consumption_level: str | None = None
    housing_status: str | None = None
    economic_dependency: str | None = None
    age_min: int | None = None
    age_max: int | None = None
    exclude_user: str | None = None
    limit: int = 50
    offset: int = 0


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _community_condition(item: CommunityFilter) -> ColumnElement[bool]:
    condition = UserCommunity.community_id == item.community_id
    if item.stage and item.type:
        return and_(condition, UserCommunity.stage == item.stage, UserCommunity.type == item.type)
    if item.stage:
        return and_(condition, UserCommunity.stage == item.stage)
    if item.type:
        return and_(condition, UserCommunity.type == item.type)
    return condition


def search_users(db: Session, criteria: UserSearchCriteria) -> tuple[list[User], int]:
    """Run a user search.

    Args:
        db: Database session.
        criteria: Filters and paging.

    Returns:
        ``(users, total)`` where ``users`` is the requested page, newest
        accounts first, and ``total`` counts every match. A search without
        any effective filter returns ``([], 0)``.
    """
    conditions: list[ColumnElement[bool]] = []

    if criteria.communities:
        member_ids = select(UserCommunity.user_id).where(
            or_(*(_community_condition(item) for item in criteria.communities))
        )
        conditions.append(User.id.in_(member_ids))

    disease_tag = _text(criteria.disease_tag)
    if disease_tag:
        tagged = select(UserDiseaseTag.user_id).where(UserDiseaseTag.tag.contains(disease_tag))
        conditions.append(User.id.in_(tagged))

    hospital = _text(criteria.hospital)
    if hospital:
        treated = select(UserHospital.user_id).where(UserHospital.hospital.contains(hospital))
        conditions.append(User.id.in_(treated))

    for name in EXACT_MATCH_FIELDS:
        value = _text(getattr(criteria, name))
        if value:
            conditions.append(getattr(User, name) == value)

    if criteria.age_min is not None:
        conditions.append(User.age >= criteria.age_min)
    if criteria.age_max is not None:
        conditions.append(User.age <= criteria.age_max)

    location = _text(criteria.location)
    if location:
        conditions.append(
            or_(User.location_from.contains(location), User.location_living.contains(location))
        )
    district = _text(criteria.location_district)
    if district:
        conditions.append(User.location_living_district.contains(district))
    street = _text(criteria.location_street)
    if street:
        conditions.append(User.location_living_street.contains(street))

    if not conditions:
        return [], 0

    exclude = _text(criteria.exclude_user)
    if exclude:
        conditions.append(User.username != exclude)

    query = db.query(User).filter(*conditions)
    total = query.count()
    users = (
        query.options(selectinload(User.disease_tags), selectinload(User.hospitals))
        .order_by(User.created_at.desc(), User.id.desc())
        .offset(max(criteria.offset, 0))
        .limit(max(criteria.limit, 0))
        .all()
    )
    return users, total
