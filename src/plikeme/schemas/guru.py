# src/plikeme/schemas/guru.py
"""Guru Q&A Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from .community import CommunityPath
from .thread import ThreadResponse


class DiseaseHistoryItem(BaseModel):
    disease: str


class GuruSummary(BaseModel):
    """A guru as listed on the guru board."""

    id: int
    username: str
    created_at: datetime
    guru_intro: str | None = None
    disease_history: list[DiseaseHistoryItem] = Field(default_factory=list)


class GuruDetail(GuruSummary):
    """A guru with memberships and shared threads."""

    communities: list[CommunityPath] = Field(default_factory=list)
    threads: list[ThreadResponse] = Field(default_factory=list)


class GuruIntroUpdate(BaseModel):
    intro: str | None = None


class QuestionCreate(BaseModel):
    """Schema for asking a guru a question."""

    title: str
    content: str


class QuestionCreated(BaseModel):
    id: int


class QuestionResponse(BaseModel):
    """A question on a guru's board."""

    id: int
    guru_user_id: int
    asker_user_id: int
    asker_username: str
    title: str
    content: str
    created_at: datetime
    reply_count: int = 0


class GuruReplyCreate(BaseModel):
    """Schema for replying under a guru question."""

    content: str
    parent_reply_id: int | None = None


class GuruReplyCreated(BaseModel):
    id: int


class GuruReplyResponse(BaseModel):
    """A reply under a guru question."""

    id: int
    question_id: int
    user_id: int
    username: str
    parent_reply_id: int | None
    content: str
    created_at: datetime
    mention: str | None = None


class GuruReplyCard(BaseModel):
    top_reply: GuruReplyResponse
    stacked_replies: list[GuruReplyResponse]


class QuestionDetail(QuestionResponse):
    """A question with its replies, flat and grouped into cards."""

    guru_username: str
    replies: list[GuruReplyResponse] = Field(default_factory=list)
    cards: list[GuruReplyCard] = Field(default_factory=list)
