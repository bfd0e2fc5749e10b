# src/plikeme/api/v1/endpoints/communities.py
"""Community-related endpoints for the P-LikeMe API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from plikeme.core.settings import settings
from plikeme.models import Community, Thread
from plikeme.schemas.community import (
    CommunityDetailResponse,
    CommunityLevel,
    CommunityResponse,
    JoinResponse,
    LeaveResponse,
)
from plikeme.schemas.thread import CommunityThreadsResponse
from plikeme.services.membership import (
    get_sub_community_counts,
    join_community,
    leave_community,
    normalize_axis,
)
from plikeme.services.thread_links import thread_ids_for_level, thread_payloads

from ..dependencies import CurrentUserDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/communities", tags=["communities"])


def _get_community_or_404(db: Session, community_id: int) -> Community:
    community = db.query(Community).filter(Community.id == community_id).first()
    if not community:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found"
        )
    return community


def _dimension_hint(community: Community, term: str) -> str | None:
    """Return stage/type values containing ``term`` (case-insensitive), comma joined."""
    matched = [
        value
        for axis in ("stage", "type")
        for value in community.dimension_values(axis)
        if term in value.lower()
    ]
    return ", ".join(matched) if matched else None


@router.get("/", response_model=list[CommunityResponse])
async def list_communities(
    db: SessionDep,
    q: str | None = Query(None, description="Search term"),
) -> list[CommunityResponse]:
    """List all communities, or search them.

    A search matches name, description and keywords, most popular first.
    Communities whose sub-community values contain the term carry a
    ``sub_community_hint``; those matching only that way are appended.
    """
    term = (q or "").strip()
    if not term:
        communities = db.query(Community).order_by(Community.id).all()
        return [CommunityResponse.model_validate(c) for c in communities]

    pattern = f"%{term}%"
    matches = (
        db.query(Community)
        .filter(
            or_(
                Community.name.like(pattern),
                Community.description.like(pattern),
                Community.keywords.like(pattern),
            )
        )
        .order_by(Community.member_count.desc(), Community.id)
        .all()
    )

    lowered = term.lower()
    results: list[CommunityResponse] = []
    for community in matches:
        item = CommunityResponse.model_validate(community)
        item.sub_community_hint = _dimension_hint(community, lowered)
        results.append(item)

    matched_ids = {community.id for community in matches}
    for community in db.query(Community).order_by(Community.id).all():
        if community.id in matched_ids:
            continue
        hint = _dimension_hint(community, lowered)
        if hint:
            item = CommunityResponse.model_validate(community)
            item.sub_community_hint = hint
            results.append(item)
    return results


@router.get("/{community_id}", response_model=CommunityDetailResponse)
async def get_community(
    community_id: int,
    db: SessionDep,
    stage: str | None = None,
    type: str | None = None,
) -> CommunityDetailResponse:
    """Get a community with its sub-community member counts."""
    community = _get_community_or_404(db, community_id)
    base = CommunityResponse.model_validate(community).model_dump()
    return CommunityDetailResponse(
        **base,
        sub_community_members=get_sub_community_counts(db, community.id),
        current_stage=normalize_axis(stage) or None,
        current_type=normalize_axis(type) or None,
    )


@router.get("/{community_id}/threads", response_model=CommunityThreadsResponse)
async def list_community_threads(
    community_id: int,
    db: SessionDep,
    limit: int = Query(settings.community_threads_page_size, ge=1, le=100),
    offset: int = Query(0, ge=0),
    stage: str | None = None,
    type: str | None = None,
) -> dict[str, object]:
    """List threads visible at a community level, newest first."""
    _get_community_or_404(db, community_id)

    visible_ids = thread_ids_for_level(community_id, stage, type)
    total = db.execute(
        select(func.count()).select_from(visible_ids.subquery())
    ).scalar() or 0

    threads = (
        db.query(Thread)
        .filter(Thread.id.in_(visible_ids))
        .order_by(Thread.created_at.desc(), Thread.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return {
        "threads": thread_payloads(db, threads, with_author=True),
        "count": len(threads),
        "total": total,
        "has_more": offset + len(threads) < total,
    }


@router.post("/{community_id}/join", response_model=JoinResponse)
async def join(
    community_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    level: CommunityLevel | None = None,
) -> JoinResponse:
    """Join a community, or one of its sub-communities.

    Joining any level also joins Level I; joining Level III also joins the
    two Level II sub-communities it belongs to.
    """
    community = _get_community_or_404(db, community_id)
    stage = normalize_axis(level.stage if level else None)
    type_ = normalize_axis(level.type if level else None)

    joined = join_community(db, current_user.id, community, stage, type_)
    db.commit()
    return JoinResponse(
        joined=joined,
        community_id=community.id,
        stage=stage or None,
        type=type_ or None,
    )


@router.delete("/{community_id}/leave", response_model=LeaveResponse)
async def leave(
    community_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    stage: str | None = None,
    type: str | None = None,
) -> LeaveResponse:
    """Leave a community level. Leaving Level I leaves every sub-community too."""
    community = _get_community_or_404(db, community_id)
    left = leave_community(db, current_user.id, community, stage, type)
    db.commit()
    return LeaveResponse(
        left=left,
        community_id=community.id,
        stage=normalize_axis(stage) or None,
        type=normalize_axis(type) or None,
    )
