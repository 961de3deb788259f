# flagdesk/models/__init__.py
"""
Models package for the flagdesk application.

Models are organized by domain:
- Base model classes and mixins
- Users and their flag statistics
- Forum content (categories, topics, posts)
- Flags (post actions)
- Reviewables, their scores and history
- Notifications
"""

from .base import AppendOnlyModel, BaseModel, TimeStampedModel
from .choices import (
    Decision,
    Disposition,
    HiddenReason,
    NotificationType,
    PostActionType,
    ReviewableHistoryType,
    ReviewableStatus,
    SilenceReason,
    TopicArchetype,
)
from .content import Category, ModeratableContent, Post, Topic, TopicAllowedUser
from .notification import Notification
from .post_action import PostAction
from .reviewable import Reviewable, ReviewableHistory, ReviewableScore
from .user import Role, TrustLevel, User, UserManager, UserStat

__all__ = [
    "AppendOnlyModel",
    # Base models
    "BaseModel",
    # Content
    "Category",
    # Choices/Enums
    "Decision",
    "Disposition",
    "HiddenReason",
    "ModeratableContent",
    "Notification",
    "NotificationType",
    "Post",
    # Flags
    "PostAction",
    "PostActionType",
    # Reviewables
    "Reviewable",
    "ReviewableHistory",
    "ReviewableHistoryType",
    "ReviewableScore",
    "ReviewableStatus",
    # Users
    "Role",
    "SilenceReason",
    "TimeStampedModel",
    "Topic",
    "TopicAllowedUser",
    "TopicArchetype",
    "TrustLevel",
    "User",
    "UserManager",
    "UserStat",
]
