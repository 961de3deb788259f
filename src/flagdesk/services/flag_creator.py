# flagdesk/services/flag_creator.py
"""
Raising flags against posts.

A flag becomes a PostAction, is scored onto the post's pending
Reviewable (opening one if needed), and may hide the post or silence
its author.
"""

from dataclasses import dataclass, field

from django.conf import settings
from django.db import transaction

from flagdesk.i18n import t
from flagdesk.models import (
    HiddenReason,
    Post,
    PostAction,
    PostActionType,
    Reviewable,
    ReviewableHistoryType,
    User,
)
from flagdeskutils.log_helpers import log_moderation_event

from .content_actuator import ContentActuator
from .penalty_tracker import PenaltyTracker


@dataclass
class FlagResult:
    """
    Outcome of FlagCreator.perform().

    Attributes:
        success: Whether the flag was recorded
        errors: Localized messages explaining a refusal
        post_action: The new PostAction on success
        reviewable: The Reviewable the flag was scored onto
    """

    success: bool
    errors: list[str] = field(default_factory=list)
    post_action: PostAction | None = None
    reviewable: Reviewable | None = None


class FlagCreator:
    """
    Record one user's flag on a post.

    Usage:
        result = FlagCreator(user, post, PostActionType.SPAM, message="bad").perform()
        if result.success:
            result.reviewable
    """

    def __init__(
        self,
        user: User,
        post: Post,
        flag_type: PostActionType | str,
        message: str = "",
        actuator: ContentActuator | None = None,
        penalties: PenaltyTracker | None = None,
    ):
        self.user = user
        self.post = post
        self.flag_type = PostActionType(flag_type)
        self.message = message or ""
        self.actuator = actuator or ContentActuator()
        self.penalties = penalties or PenaltyTracker()
        self.score_to_hide_post = float(getattr(settings, "SCORE_TO_HIDE_POST", 8.0))
        self.staff_bonus = float(getattr(settings, "STAFF_FLAG_SCORE_BONUS", 5.0))

    @classmethod
    def spam(cls, user: User, post: Post, message: str = "") -> FlagResult:
        return cls(user, post, PostActionType.SPAM, message=message).perform()

    def validate(self) -> list[str]:
        errors = []
        if self.post.author_id == self.user.pk:
            errors.append(t("flags.errors.cannot_flag_own_post"))
        if self.post.deleted_at is not None:
            errors.append(t("flags.errors.post_deleted"))
        already_flagged = (
            PostAction.objects.open()
            .filter(
                post=self.post,
                user=self.user,
                post_action_type=self.flag_type.value,
            )
            .exists()
        )
        if already_flagged:
            errors.append(t("flags.errors.already_flagged"))
        return errors

    def score(self) -> float:
        score = 1.0 + self.user.trust_level
        if self.user.is_moderation_staff:
            score += self.staff_bonus
        return score

    def perform(self) -> FlagResult:
        errors = self.validate()
        if errors:
            return FlagResult(success=False, errors=errors)

        with transaction.atomic():
            post_action = PostAction.objects.create(
                post=self.post,
                user=self.user,
                post_action_type=self.flag_type.value,
                message=self.message,
                created_by=self.user.pk,
            )
            self.actuator.increment_flag_count(self.post, self.flag_type.counter_field)

            reviewable = self._find_or_create_reviewable()
            reviewable.add_score(post_action, self.score())

            if reviewable.score >= self.score_to_hide_post:
                self.actuator.hide(self.post, reason=HiddenReason.FLAG_THRESHOLD_REACHED)

            if self.flag_type == PostActionType.SPAM:
                author = self.post.author
                if self.penalties.auto_silence_if_needed(author):
                    self.actuator.hide(self.post, reason=HiddenReason.NEW_USER_SPAM_THRESHOLD_REACHED)

        log_moderation_event(
            "flag_created",
            reviewable_id=reviewable.reviewable_id,
            post_id=self.post.post_id,
            actor_id=self.user.pk,
            status=reviewable.status,
            flag_type=self.flag_type.value,
            score=reviewable.score,
        )
        return FlagResult(success=True, post_action=post_action, reviewable=reviewable)

    def _find_or_create_reviewable(self) -> Reviewable:
        reviewable = (
            Reviewable.objects.select_for_update()
            .pending()
            .for_post(self.post)
            .first()
        )
        if reviewable is not None:
            return reviewable

        reviewable = Reviewable.objects.create(
            target_post=self.post,
            target_created_by=self.post.author,
            topic=self.post.topic,
            category=self.post.topic.category,
            created_by=self.user,
        )
        reviewable.log_history(ReviewableHistoryType.CREATED, self.user)
        return reviewable
