# src/plikeme/services/__init__.py
"""Business logic services for the P-LikeMe application."""

from .community_filters import CommunityFilter, CommunitySelection
from .membership import display_path, join_community, leave_community
from .reply_tree import Card, build_cards, mention_for
from .user_search import UserSearchCriteria, search_users

__all__ = [
    "Card",
    "build_cards",
    "mention_for",
    "CommunityFilter",
    "CommunitySelection",
    "display_path",
    "join_community",
    "leave_community",
    "UserSearchCriteria",
    "search_users",
]
