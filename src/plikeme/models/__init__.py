# src/plikeme/models/__init__.py
"""SQLAlchemy models for the P-LikeMe application."""

from .community import Community, SubCommunityMember
from .guru import GuruQuestion, GuruQuestionReply
from .reply import Reply
from .thread import Thread, ThreadCommunity
from .user import User, UserCommunity, UserDiseaseTag, UserHospital

__all__ = [
    "Community", "SubCommunityMember",
    "GuruQuestion", "GuruQuestionReply",
    "Reply",
    "Thread", "ThreadCommunity",
    "User", "UserCommunity", "UserDiseaseTag", "UserHospital",
]
