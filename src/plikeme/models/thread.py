"""SQLAlchemy models for threads and their community links."""

from __future__ import annotations

import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from plikeme.db.session import Base
from plikeme.db.time import utcnow


class Thread(Base):
    """A top-level post shared by a user."""

    __tablename__ = "thread"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    community_links: Mapped[list[ThreadCommunity]] = relationship(
        "ThreadCommunity",
        cascade="all, delete-orphan",
        order_by="ThreadCommunity.id",
    )

    @property
    def community_ids(self) -> list[int]:
        """Return linked community ids in link order, without duplicates."""
        seen: dict[int, None] = {}
        for link in self.community_links:
            seen.setdefault(link.community_id, None)
        return list(seen)


class ThreadCommunity(Base):
    """Link between a thread and a community level (I, II or III)."""

    __tablename__ = "thread_community"
    __table_args__ = (
        UniqueConstraint("thread_id", "community_id", "stage", "type", name="uq_thread_community"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    thread_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("thread.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    community_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    stage: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(Text, nullable=False, default="")
