# flagdesk/models/choices.py
"""
Enums behind the moderation choice fields, plus the Decision and
Disposition values the admin flags API accepts.
"""

from collections.abc import Sequence as SequenceType
from enum import Enum


class ReviewableStatus(str, Enum):
    """Lifecycle states of a reviewable."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    IGNORED = "ignored"

    @classmethod
    def choices(cls) -> SequenceType[tuple[str, str]]:
        return [(item.value, item.name.title()) for item in cls]

    @classmethod
    def values(cls) -> SequenceType[str]:
        return [item.value for item in cls]

    @classmethod
    def resolved_statuses(cls) -> list[str]:
        """Statuses a reviewable can never leave."""
        return [cls.APPROVED.value, cls.REJECTED.value, cls.IGNORED.value]


class ReviewableHistoryType(str, Enum):
    """Kinds of entries in a reviewable's audit trail."""

    CREATED = "created"
    TRANSITIONED = "transitioned"

    @classmethod
    def choices(cls) -> SequenceType[tuple[str, str]]:
        return [(item.value, item.name.title()) for item in cls]

    @classmethod
    def values(cls) -> SequenceType[str]:
        return [item.value for item in cls]


class PostActionType(str, Enum):
    """Flag types a user can raise against a post."""

    SPAM = "spam"
    INAPPROPRIATE = "inappropriate"
    OFF_TOPIC = "off_topic"
    NOTIFY_MODERATORS = "notify_moderators"

    @classmethod
    def choices(cls) -> SequenceType[tuple[str, str]]:
        return [(item.value, item.name.replace("_", " ").title()) for item in cls]

    @classmethod
    def values(cls) -> SequenceType[str]:
        return [item.value for item in cls]

    @property
    def counter_field(self) -> str:
        """Name of the Post column counting flags of this type."""
        return f"{self.value}_count"


class Decision(str, Enum):
    """Moderator decisions on a reviewable."""

    AGREE = "agree"
    DISAGREE = "disagree"
    DEFER = "defer"

    @classmethod
    def values(cls) -> SequenceType[str]:
        return [item.value for item in cls]

    @property
    def target_status(self) -> ReviewableStatus:
        return {
            Decision.AGREE: ReviewableStatus.APPROVED,
            Decision.DISAGREE: ReviewableStatus.REJECTED,
            Decision.DEFER: ReviewableStatus.IGNORED,
        }[self]


class Disposition(str, Enum):
    """What happens to the post when a flag is agreed with."""

    KEEP = "keep"
    DELETE = "delete"

    @classmethod
    def values(cls) -> SequenceType[str]:
        return [item.value for item in cls]


class TopicArchetype(str, Enum):
    """Kinds of topics."""

    REGULAR = "regular"
    PRIVATE_MESSAGE = "private_message"

    @classmethod
    def choices(cls) -> SequenceType[tuple[str, str]]:
        return [(item.value, item.name.replace("_", " ").title()) for item in cls]


class NotificationType(str, Enum):
    """Types of in-app notifications."""

    MODERATION = "Moderation"
    SYSTEM = "System"

    @classmethod
    def choices(cls) -> SequenceType[tuple[str, str]]:
        return [(item.value, item.name) for item in cls]

    @classmethod
    def values(cls) -> SequenceType[str]:
        return [item.value for item in cls]


class SilenceReason:
    """Reasons recorded on User.silence_reason."""

    AUTO_SILENCE_SPAM = "auto_silence_spam"
    MANUAL = "manual"


class HiddenReason:
    """Reasons recorded on Post.hidden_reason."""

    FLAG_THRESHOLD_REACHED = "flag_threshold_reached"
    NEW_USER_SPAM_THRESHOLD_REACHED = "new_user_spam_threshold_reached"
