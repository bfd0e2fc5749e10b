# src/plikeme/schemas/thread.py
"""Thread-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .community import CommunityPath


class CommunityLinkIn(BaseModel):
    """Link a thread to a community at Level I, II or III."""

    id: int = Field(..., description="Community ID")
    stage: str | None = None
    type: str | None = None


class ThreadCreate(BaseModel):
    """Schema for creating or replacing a thread."""

    title: str = Field(..., description="Thread title")
    content: str = Field(..., description="Thread body")
    community_ids: list[int] = Field(
        default_factory=list,
        description="Communities to link at Level I",
    )
    community_links: list[CommunityLinkIn] = Field(
        default_factory=list,
        description="Community links with optional stage/type",
    )


class ThreadUpdate(ThreadCreate):
    """Schema for updating a thread; links are replaced wholesale."""


class ThreadResponse(BaseModel):
    """Schema for thread information returned by the API."""

    id: int
    user_id: int
    title: str
    content: str
    created_at: datetime
    community_ids: list[int] = Field(default_factory=list)
    communities: list[CommunityPath] = Field(default_factory=list)
    author: str | None = None
    reply_count: int | None = None

    model_config = ConfigDict(from_attributes=True)


class CommunityThreadsResponse(BaseModel):
    """One page of a community's threads."""

    threads: list[ThreadResponse]
    count: int
    total: int
    has_more: bool


class ThreadOwner(BaseModel):
    id: int
    username: str


class UserThreadsResponse(BaseModel):
    """Another user's threads."""

    user: ThreadOwner
    threads: list[ThreadResponse]
