"""SQLAlchemy models for user accounts, profiles and memberships."""

from __future__ import annotations

import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from plikeme.db.session import Base
from plikeme.db.time import utcnow

# Free-text profile columns that may be edited by the owner and used as search filters.
PROFILE_TEXT_FIELDS = (
    "gender",
    "profession",
    "marriage_status",
    "location_from",
    "location_living",
    "location_living_district",
    "location_living_street",
    "income_individual",
    "income_family",
    "hukou",
    "education",
    "consumption_level",
    "housing_status",
    "economic_dependency",
)


class User(Base):
    """Registered account with an optional self-described profile."""

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    # Featured users who accept public questions.
    is_guru: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    guru_intro: Mapped[str | None] = mapped_column(Text, nullable=True)

    gender: Mapped[str | None] = mapped_column(Text, nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    profession: Mapped[str | None] = mapped_column(Text, nullable=True)
    marriage_status: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_from: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_living: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_living_district: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_living_street: Mapped[str | None] = mapped_column(Text, nullable=True)
    income_individual: Mapped[str | None] = mapped_column(Text, nullable=True)
    income_family: Mapped[str | None] = mapped_column(Text, nullable=True)
    family_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hukou: Mapped[str | None] = mapped_column(Text, nullable=True)
    education: Mapped[str | None] = mapped_column(Text, nullable=True)
    consumption_level: Mapped[str | None] = mapped_column(Text, nullable=True)
    housing_status: Mapped[str | None] = mapped_column(Text, nullable=True)
    economic_dependency: Mapped[str | None] = mapped_column(Text, nullable=True)

    disease_tags: Mapped[list[UserDiseaseTag]] = relationship(
        "UserDiseaseTag",
        cascade="all, delete-orphan",
        order_by="UserDiseaseTag.id",
    )
    hospitals: Mapped[list[UserHospital]] = relationship(
        "UserHospital",
        cascade="all, delete-orphan",
        order_by="UserHospital.id",
    )
    memberships: Mapped[list[UserCommunity]] = relationship(
        "UserCommunity",
        cascade="all, delete-orphan",
        order_by="UserCommunity.id",
    )

    @property
    def disease_tag_names(self) -> list[str]:
        """Return the user's disease tags as plain strings."""
        return [row.tag for row in self.disease_tags]

    @property
    def hospital_names(self) -> list[str]:
        """Return the user's hospitals as plain strings."""
        return [row.hospital for row in self.hospitals]


class UserCommunity(Base):
    """Membership of a user in a community or one of its sub-communities.

    Level I rows have ``stage == type == ""``; Level II rows set exactly one
    axis; Level III rows set both.
    """

    __tablename__ = "user_community"
    __table_args__ = (
        UniqueConstraint("user_id", "community_id", "stage", "type", name="uq_user_community"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    community_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    stage: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(Text, nullable=False, default="")
    joined_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class UserDiseaseTag(Base):
    """A condition the user cares about."""

    __tablename__ = "user_disease_tag"
    __table_args__ = (UniqueConstraint("user_id", "tag", name="uq_user_disease_tag"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag: Mapped[str] = mapped_column(Text, nullable=False)


class UserHospital(Base):
    """A hospital the user has been treated at."""

    __tablename__ = "user_hospital"
    __table_args__ = (UniqueConstraint("user_id", "hospital", name="uq_user_hospital"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    hospital: Mapped[str] = mapped_column(Text, nullable=False)
