# src/plikeme/schemas/reply.py
"""Reply-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReplyCreate(BaseModel):
    """Schema for creating a reply."""

    content: str = Field(..., description="Reply body")
    parent_reply_id: int | None = Field(None, description="Reply being answered, if any")


class ReplyResponse(BaseModel):
    """A reply as rendered to a viewer."""

    id: int
    thread_id: int
    user_id: int
    parent_reply_id: int | None
    content: str
    created_at: datetime
    author: str
    is_owner: bool = False
    is_thread_author: bool = False
    mention: str | None = Field(None, description="Author of the direct parent reply")

    model_config = ConfigDict(from_attributes=True)


class ReplyCard(BaseModel):
    """A top-level reply with its flattened descendants."""

    top_reply: ReplyResponse
    stacked_replies: list[ReplyResponse]


class ReplyListResponse(BaseModel):
    """All replies of a thread, flat and grouped into cards."""

    replies: list[ReplyResponse]
    cards: list[ReplyCard]
    count: int
