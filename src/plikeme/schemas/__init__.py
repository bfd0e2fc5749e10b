"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import AuthResponse, LoginRequest, SignupRequest, UserPublic
from .community import CommunityDetailResponse, CommunityPath, CommunityResponse
from .guru import GuruDetail, GuruSummary, QuestionDetail, QuestionResponse
from .reply import ReplyCard, ReplyCreate, ReplyListResponse, ReplyResponse
from .thread import ThreadCreate, ThreadResponse, ThreadUpdate
from .user import ProfileResponse, ProfileUpdateRequest, UserSearchResponse

__all__ = [
    "AuthResponse", "LoginRequest", "SignupRequest", "UserPublic",
    "CommunityDetailResponse", "CommunityPath", "CommunityResponse",
    "GuruDetail", "GuruSummary", "QuestionDetail", "QuestionResponse",
    "ReplyCard", "ReplyCreate", "ReplyListResponse", "ReplyResponse",
    "ThreadCreate", "ThreadResponse", "ThreadUpdate",
    "ProfileResponse", "ProfileUpdateRequest", "UserSearchResponse",
]
