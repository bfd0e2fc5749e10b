# src/plikeme/services/membership.py
"""Community membership across the three community levels.

Level I is the community itself (no stage, no type). Level II narrows it by
either stage or type, Level III by both. Joining a level also joins the
levels above it; leaving Level I leaves everything below it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.orm import Session

from plikeme.models import Community, SubCommunityMember, UserCommunity

logger = logging.getLogger(__name__)

__all__ = [
    "SubCommunityRef",
    "display_path",
    "get_sub_community_counts",
    "is_member",
    "join_community",
    "leave_community",
    "membership_level",
    "normalize_axis",
    "user_sub_communities",
]


def normalize_axis(value: str | None) -> str:
    """Normalise a stage/type value to its storage form ('' for unset)."""
    if value is None:
        return ""
    return value.strip()


def membership_level(stage: str | None, type_: str | None) -> int:
    """Return 1, 2 or 3 for the community level a stage/type pair addresses."""
    stage, type_ = normalize_axis(stage), normalize_axis(type_)
    if stage and type_:
        return 3
    if stage or type_:
        return 2
    return 1


def display_path(name: str, stage: str | None = None, type_: str | None = None) -> str:
    """Return a human readable path such as ``name > stage · type``."""
    parts = [part for part in (normalize_axis(stage), normalize_axis(type_)) if part]
    if not parts:
        return name
    return f"{name} > {' · '.join(parts)}"


@dataclass(frozen=True)
class SubCommunityRef:
    """A stage/type pair with unset axes reported as None."""

    stage: str | None
    type: str | None

    @classmethod
    def from_storage(cls, stage: str, type_: str) -> SubCommunityRef:
        return cls(stage=stage or None, type=type_ or None)


def _membership(
    db: Session, user_id: int, community_id: int, stage: str, type_: str
) -> UserCommunity | None:
    return (
        db.query(UserCommunity)
        .filter(
            UserCommunity.user_id == user_id,
            UserCommunity.community_id == community_id,
            UserCommunity.stage == stage,
            UserCommunity.type == type_,
        )
        .first()
    )


def _insert_membership(
    db: Session, user_id: int, community_id: int, stage: str, type_: str
) -> bool:
    """Insert a membership row unless it exists. Returns True when inserted."""
    if _membership(db, user_id, community_id, stage, type_) is not None:
        return False
    db.add(UserCommunity(user_id=user_id, community_id=community_id, stage=stage, type=type_))
    db.flush()
    return True


def _bump_sub_count(db: Session, community_id: int, stage: str, type_: str, delta: int) -> None:
    row = (
        db.query(SubCommunityMember)
        .filter(
            SubCommunityMember.community_id == community_id,
            SubCommunityMember.stage == stage,
            SubCommunityMember.type == type_,
        )
        .first()
    )
    if row is None:
        if delta <= 0:
            return
        row = SubCommunityMember(
            community_id=community_id, stage=stage, type=type_, member_count=0
        )
        db.add(row)
    row.member_count = max(0, row.member_count + delta)
    db.flush()


def join_community(
    db: Session,
    user_id: int,
    community: Community,
    stage: str | None = None,
    type_: str | None = None,
) -> bool:
    """Join a community level, auto-joining the levels above it.

    Args:
        db: Database session; the caller commits.
        user_id: Joining user.
        community: Target community.
        stage: Optional stage axis.
        type_: Optional type axis.

    Returns:
        True when the requested membership row was newly created, False when
        the user already held it.
    """
    stage, type_ = normalize_axis(stage), normalize_axis(type_)
    level = membership_level(stage, type_)

    joined_level_one = _insert_membership(db, user_id, community.id, "", "")
    if joined_level_one:
        community.member_count = (community.member_count or 0) + 1
        logger.debug("user %s joined community %s", user_id, community.id)

    if level == 1:
        return joined_level_one

    if level == 3:
        for parent_stage, parent_type in ((stage, ""), ("", type_)):
            if _insert_membership(db, user_id, community.id, parent_stage, parent_type):
                _bump_sub_count(db, community.id, parent_stage, parent_type, 1)

    joined = _insert_membership(db, user_id, community.id, stage, type_)
    if joined:
        _bump_sub_count(db, community.id, stage, type_, 1)
        logger.debug(
            "user %s joined %s",
            user_id,
            display_path(community.name, stage, type_),
        )
    return joined


def leave_community(
    db: Session,
    user_id: int,
    community: Community,
    stage: str | None = None,
    type_: str | None = None,
) -> bool:
    """Leave a community level.

    Leaving Level I removes every membership the user holds in the community.
    Leaving a sub-community removes only that row. Returns True when at least
    one row was removed.
    """
    stage, type_ = normalize_axis(stage), normalize_axis(type_)

    if membership_level(stage, type_) > 1:
        row = _membership(db, user_id, community.id, stage, type_)
        if row is None:
            return False
        db.delete(row)
        _bump_sub_count(db, community.id, stage, type_, -1)
        db.flush()
        logger.debug(
            "user %s left %s",
            user_id,
            display_path(community.name, stage, type_),
        )
        return True

    rows = (
        db.query(UserCommunity)
        .filter(
            UserCommunity.user_id == user_id,
            UserCommunity.community_id == community.id,
        )
        .all()
    )
    if not rows:
        return False
    for row in rows:
        if row.stage or row.type:
            _bump_sub_count(db, community.id, row.stage, row.type, -1)
        else:
            community.member_count = max(0, (community.member_count or 0) - 1)
        db.delete(row)
    db.flush()
    logger.debug("user %s left community %s", user_id, community.id)
    return True


def is_member(
    db: Session,
    user_id: int,
    community_id: int,
    stage: str | None = None,
    type_: str | None = None,
) -> bool:
    """Return True when the user holds exactly this membership row."""
    row = _membership(db, user_id, community_id, normalize_axis(stage), normalize_axis(type_))
    return row is not None


def user_sub_communities(db: Session, user_id: int, community_id: int) -> list[SubCommunityRef]:
    """Return the Level II and Level III memberships a user holds in a community."""
    rows = (
        db.query(UserCommunity)
        .filter(
            UserCommunity.user_id == user_id,
            UserCommunity.community_id == community_id,
            or_(UserCommunity.stage != "", UserCommunity.type != ""),
        )
        .order_by(UserCommunity.id)
        .all()
    )
    return [SubCommunityRef.from_storage(row.stage, row.type) for row in rows]


def get_sub_community_counts(db: Session, community_id: int) -> list[dict[str, object]]:
    """Return member counters for every tracked sub-community of a community."""
    rows = (
        db.query(SubCommunityMember)
        .filter(SubCommunityMember.community_id == community_id)
        .order_by(SubCommunityMember.id)
        .all()
    )
    return [
        {
            "stage": row.stage or None,
            "type": row.type or None,
            "member_count": row.member_count,
        }
        for row in rows
    ]
