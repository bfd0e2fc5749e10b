"""SQLAlchemy model for thread replies."""

from __future__ import annotations

import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from plikeme.db.session import Base
from plikeme.db.time import utcnow


class Reply(Base):
    """A comment on a thread, optionally answering another reply.

    Top-level replies have ``parent_reply_id = NULL`` and start a card; nested
    replies point at their immediate parent. The parent column carries no
    foreign key: deleting a reply leaves its children pointing at a missing id.
    """

    __tablename__ = "reply"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    thread_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    parent_reply_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
