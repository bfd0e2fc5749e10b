# src/plikeme/schemas/community.py
"""Community-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommunityResponse(BaseModel):
    """Schema for community information returned by the API."""

    id: int
    name: str
    description: str
    keywords: str
    member_count: int
    dimensions: dict[str, Any] | None = None
    created_at: datetime | None = None
    sub_community_hint: str | None = Field(
        None,
        description="Stage/type values matching the search query, comma separated",
    )

    model_config = ConfigDict(from_attributes=True)


class SubCommunityCount(BaseModel):
    """Member counter of a Level II or Level III sub-community."""

    stage: str | None
    type: str | None
    member_count: int


class CommunityDetailResponse(CommunityResponse):
    """Community with its sub-community counters and the requested level."""

    sub_community_members: list[SubCommunityCount] = Field(default_factory=list)
    current_stage: str | None = None
    current_type: str | None = None


class CommunityLevel(BaseModel):
    """Optional stage/type pair addressing a community level."""

    stage: str | None = None
    type: str | None = None


class JoinResponse(BaseModel):
    """Outcome of a join request."""

    joined: bool
    community_id: int
    stage: str | None = None
    type: str | None = None


class LeaveResponse(BaseModel):
    """Outcome of a leave request."""

    left: bool
    community_id: int
    stage: str | None = None
    type: str | None = None


class CommunityPath(BaseModel):
    """A community level together with its display path."""

    id: int
    name: str
    stage: str | None = None
    type: str | None = None
    display_path: str


class SubCommunityMembership(BaseModel):
    stage: str | None
    type: str | None


class CommunityMembershipStatus(BaseModel):
    """The caller's memberships inside one community."""

    community_id: int
    is_level_i_member: bool
    sub_communities: list[SubCommunityMembership] = Field(default_factory=list)
