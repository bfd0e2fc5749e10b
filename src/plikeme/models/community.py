"""SQLAlchemy models for communities and their sub-community counters."""

from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from plikeme.db.session import Base
from plikeme.db.time import utcnow


class Community(Base):
    """A condition-centred support community.

    `dimensions` optionally describes the sub-community axes, e.g.
    ``{"stage": {"label": "Stage", "values": ["0", "I"]}, "type": {...}}``.
    """

    __tablename__ = "community"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Space separated search keywords.
    keywords: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Level I member count.
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dimensions: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def dimension_values(self, axis: str) -> list[str]:
        """Return the declared values for a dimension axis ("stage" or "type")."""
        if not self.dimensions:
            return []
        axis_info = self.dimensions.get(axis) or {}
        return list(axis_info.get("values") or [])


class SubCommunityMember(Base):
    """Member counter for one Level II / Level III sub-community."""

    __tablename__ = "sub_community_member"
    __table_args__ = (
        UniqueConstraint("community_id", "stage", "type", name="uq_sub_community"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    # Empty string means "not set" for both axes.
    stage: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(Text, nullable=False, default="")
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
