# src/plikeme/schemas/user.py
"""Profile and user search Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .community import CommunityPath


class ProfileFields(BaseModel):
    """Self-described profile attributes."""

    gender: str | None = None
    age: int | None = None
    profession: str | None = None
    marriage_status: str | None = None
    location_from: str | None = None
    location_living: str | None = None
    location_living_district: str | None = None
    location_living_street: str | None = None
    income_individual: str | None = None
    income_family: str | None = None
    family_size: int | None = None
    hukou: str | None = None
    education: str | None = None
    consumption_level: str | None = None
    housing_status: str | None = None
    economic_dependency: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateRequest(ProfileFields):
    """Schema for replacing the caller's profile."""

    disease_tags: list[str] = Field(default_factory=list)
    hospitals: list[str] = Field(default_factory=list)


class ProfileResponse(ProfileFields):
    """Public profile of a user."""

    id: int
    username: str
    created_at: datetime
    is_guru: bool = False
    disease_tags: list[str] = Field(default_factory=list)
    hospitals: list[str] = Field(default_factory=list)
    communities: list[CommunityPath] = Field(default_factory=list)


class CommunityName(BaseModel):
    id: int
    name: str


class UserSearchResult(ProfileFields):
    """A user matching a search, with tags and communities."""

    id: int
    username: str
    created_at: datetime
    disease_tags: list[str] = Field(default_factory=list)
    hospitals: list[str] = Field(default_factory=list)
    communities: list[CommunityName] = Field(default_factory=list)


class UserSearchResponse(BaseModel):
    users: list[UserSearchResult]
    total: int
