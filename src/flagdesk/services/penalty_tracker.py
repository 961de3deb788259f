# flagdesk/services/penalty_tracker.py
"""
Per-user flag statistics and spam silencing.
"""

from collections.abc import Iterable
from datetime import timedelta

from django.conf import settings
from django.db.models import F, Sum
from django.utils import timezone

from flagdesk.models import (
    PostActionType,
    ReviewableScore,
    ReviewableStatus,
    SilenceReason,
    TrustLevel,
    User,
    UserStat,
)
from flagdeskutils.log_helpers import log_moderation_event
from flagdeskutils.logging import get_logger

logger = get_logger(__name__)


class PenaltyTracker:
    """
    Service that keeps UserStat counters and decides auto-silencing.

    A new user (trust level 0) is silenced once enough distinct users
    have flagged their posts as spam and the flags' combined score
    reaches the configured threshold. Disagreed or deferred flags stop
    counting, so the silence can be lifted again.
    """

    COUNTED_STATUSES = (ReviewableStatus.PENDING.value, ReviewableStatus.APPROVED.value)

    def __init__(self):
        self.spam_score_threshold = float(
            getattr(settings, "SPAM_SCORE_TO_SILENCE_NEW_USER", 3.0)
        )
        self.num_users_threshold = int(
            getattr(settings, "NUM_USERS_TO_SILENCE_NEW_USER", 3)
        )
        self.silence_days = int(getattr(settings, "AUTO_SILENCE_DAYS", 365))

    # Flag statistics

    def record_agreed(self, users: Iterable[User]) -> None:
        self._increment(users, "flags_agreed")

    def record_disagreed(self, users: Iterable[User]) -> None:
        self._increment(users, "flags_disagreed")

    def record_ignored(self, users: Iterable[User]) -> None:
        self._increment(users, "flags_ignored")

    def _increment(self, users: Iterable[User], field: str) -> None:
        # One increment per distinct flagger, however many flags they raised.
        seen = set()
        for user in users:
            if user.pk in seen:
                continue
            seen.add(user.pk)
            UserStat.objects.get_or_create(user=user)
            UserStat.objects.filter(user=user).update(**{field: F(field) + 1})

    # Spam scoring

    def _spam_scores(self, user: User):
        return ReviewableScore.objects.filter(
            reviewable__target_created_by=user,
            post_action_type=PostActionType.SPAM.value,
            status__in=self.COUNTED_STATUSES,
        )

    def spam_score(self, user: User) -> float:
        total = self._spam_scores(user).aggregate(total=Sum("score"))["total"]
        return float(total or 0.0)

    def distinct_spam_flaggers(self, user: User) -> int:
        return self._spam_scores(user).values("user_id").distinct().count()

    def should_auto_silence(self, user: User) -> bool:
        if user.trust_level != TrustLevel.NEW_USER:
            return False
        return (
            self.spam_score(user) >= self.spam_score_threshold
            and self.distinct_spam_flaggers(user) >= self.num_users_threshold
        )

    # Silencing

    def silence(self, user: User, reason: str = SilenceReason.MANUAL) -> User:
        user.silenced_till = timezone.now() + timedelta(days=self.silence_days)
        user.silence_reason = reason
        user.save(update_fields=["silenced_till", "silence_reason", "updated_at"])
        log_moderation_event(
            "user_silenced",
            user_id=user.user_id,
            reason=reason,
            silenced_till=user.silenced_till.isoformat(),
        )
        return user

    def unsilence(self, user: User) -> User:
        user.silenced_till = None
        user.silence_reason = None
        user.save(update_fields=["silenced_till", "silence_reason", "updated_at"])
        log_moderation_event("user_unsilenced", user_id=user.user_id)
        return user

    def auto_silence_if_needed(self, user: User) -> bool:
        """Silence the user for spam if the thresholds are met. Returns True if silenced."""
        if user.is_silenced or not self.should_auto_silence(user):
            return False
        self.silence(user, SilenceReason.AUTO_SILENCE_SPAM)
        logger.warning(
            "user_auto_silenced",
            user_id=user.user_id,
            spam_score=self.spam_score(user),
        )
        return True

    def lift_auto_silence(self, user: User) -> bool:
        """
        Unsilence a user the spam rule silenced, once the rule no longer holds.

        Manual silences are left alone. Returns True if the user was unsilenced.
        """
        if not user.is_silenced:
            return False
        if user.silence_reason != SilenceReason.AUTO_SILENCE_SPAM:
            return False
        if self.should_auto_silence(user):
            return False
        self.unsilence(user)
        return True
