"""Models for the public guru Q&A board."""

from __future__ import annotations

import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from plikeme.db.session import Base
from plikeme.db.time import utcnow


class GuruQuestion(Base):
    """A question asked publicly to a guru."""

    __tablename__ = "guru_question"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    guru_user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    asker_user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class GuruQuestionReply(Base):
    """A reply under a guru question; same parent semantics as thread replies."""

    __tablename__ = "guru_question_reply"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    parent_reply_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
