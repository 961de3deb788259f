# flagdesk/services/moderation_engine.py
"""
Moderator decisions on flagged posts.

Usage:
    engine = ModerationEngine()
    engine.agree(post, moderator, action_on_post="delete")
    engine.disagree(post, moderator)
    engine.defer(post, moderator)
"""

from django.db import transaction

from flagdesk.exceptions import (
    AlreadyHandledError,
    InvalidDecisionError,
    InvalidDispositionError,
    ProtectedContentError,
    ReviewableNotFoundError,
)
from flagdesk.i18n import t
from flagdesk.models import (
    Decision,
    Disposition,
    Post,
    PostAction,
    Reviewable,
    ReviewableStatus,
    User,
)
from flagdesk.tasks.tasks import notify_content_owner_task, send_disposition_message_task
from flagdeskutils.log_helpers import LogContext, log_moderation_event

from .content_actuator import ContentActuator
from .penalty_tracker import PenaltyTracker


class ModerationEngine:
    """
    Apply agree, disagree and defer decisions to reviewables.

    A reviewable is resolved once. The row is locked while the decision
    is applied and the status write itself is a compare-and-set on the
    reviewable's version, so the loser of a race gets AlreadyHandledError.
    """

    STAMP_FIELDS = {
        Decision.AGREE: "agreed",
        Decision.DISAGREE: "disagreed",
        Decision.DEFER: "deferred",
    }

    def __init__(
        self,
        actuator: ContentActuator | None = None,
        penalties: PenaltyTracker | None = None,
    ):
        self.actuator = actuator or ContentActuator()
        self.penalties = penalties or PenaltyTracker()

    @staticmethod
    def parse_decision(value) -> Decision:
        try:
            return Decision(value)
        except ValueError:
            raise InvalidDecisionError(
                t("flags.errors.invalid_decision", choices=", ".join(Decision.values()))
            ) from None

    @staticmethod
    def parse_disposition(value) -> Disposition:
        if value in (None, ""):
            return Disposition.KEEP
        try:
            return Disposition(value)
        except ValueError:
            raise InvalidDispositionError(
                t(
                    "flags.errors.invalid_action_on_post",
                    choices=", ".join(Disposition.values()),
                )
            ) from None

    def resolve(
        self,
        reviewable_id: int,
        decision: Decision | str,
        actor: User,
        disposition: Disposition | str = Disposition.KEEP,
    ) -> Reviewable:
        """
        Resolve a pending reviewable.

        Args:
            reviewable_id: Reviewable to resolve
            decision: agree, disagree or defer
            actor: Moderator making the decision
            disposition: keep or delete; only used when agreeing

        Returns:
            The resolved Reviewable

        Raises:
            ReviewableNotFoundError: no such reviewable
            AlreadyHandledError: the reviewable is no longer pending
            ProtectedContentError: agree + delete on a category definition post
            InvalidDecisionError: unknown decision
            InvalidDispositionError: unknown disposition
        """
        decision = self.parse_decision(decision)
        disposition = self.parse_disposition(disposition)
        deleting = decision == Decision.AGREE and disposition == Disposition.DELETE

        with LogContext(reviewable_id=reviewable_id, decision=decision.value):
            with transaction.atomic():
                reviewable = self._lock(reviewable_id)
                post = reviewable.target_post

                if not reviewable.is_pending:
                    raise AlreadyHandledError()
                if deleting and self.actuator.is_protected(post):
                    raise ProtectedContentError()

                flaggers = self._pending_flaggers(reviewable)
                post_actions = list(PostAction.objects.open().filter(post=post))

                reviewable.transition_to(decision.target_status, actor)
                for post_action in post_actions:
                    post_action.stamp(self.STAMP_FIELDS[decision], actor)

                if decision == Decision.AGREE:
                    self.penalties.record_agreed(flaggers)
                    if deleting:
                        self.actuator.delete(post, actor)
                elif decision == Decision.DISAGREE:
                    self.penalties.record_disagreed(flaggers)
                    self.actuator.unhide(post)
                    self.actuator.reset_flag_counts(post)
                    self.penalties.lift_auto_silence(post.author)
                else:
                    self.penalties.record_ignored(flaggers)

            log_moderation_event(
                f"flag_{decision.target_status.value}",
                reviewable_id=reviewable.reviewable_id,
                post_id=post.post_id,
                actor_id=actor.pk,
                status=reviewable.status,
                disposition=disposition.value if decision == Decision.AGREE else None,
                flagger_count=len(flaggers),
            )

        self._send_dispositions(flaggers, decision, deleting)
        if deleting:
            notify_content_owner_task.delay(post.post_id)
        return reviewable

    # Post-based entry points used by the admin API

    def agree(self, post: Post | int, actor: User, action_on_post=Disposition.KEEP) -> Reviewable:
        disposition = self.parse_disposition(action_on_post)
        reviewable = self.reviewable_for(post)
        return self.resolve(reviewable.pk, Decision.AGREE, actor, disposition)

    def disagree(self, post: Post | int, actor: User) -> Reviewable:
        reviewable = self.reviewable_for(post)
        return self.resolve(reviewable.pk, Decision.DISAGREE, actor)

    def defer(self, post: Post | int, actor: User) -> Reviewable:
        reviewable = self.reviewable_for(post)
        return self.resolve(reviewable.pk, Decision.DEFER, actor)

    @staticmethod
    def reviewable_for(post: Post | int) -> Reviewable:
        """The post's pending reviewable, else its most recent one."""
        post_id = post.pk if isinstance(post, Post) else post
        reviewables = Reviewable.objects.filter(target_post_id=post_id).order_by(
            "-created_at", "-reviewable_id"
        )
        reviewable = reviewables.pending().first() or reviewables.first()
        if reviewable is None:
            raise ReviewableNotFoundError()
        return reviewable

    # Internals

    @staticmethod
    def _lock(reviewable_id: int) -> Reviewable:
        try:
            return (
                Reviewable.objects.select_for_update()
                .select_related("target_post__topic", "target_post__author")
                .get(pk=reviewable_id)
            )
        except Reviewable.DoesNotExist:
            raise ReviewableNotFoundError() from None

    @staticmethod
    def _pending_flaggers(reviewable: Reviewable) -> list[User]:
        scores = reviewable.scores.filter(
            status=ReviewableStatus.PENDING.value
        ).select_related("user")
        flaggers = {}
        for score in scores:
            flaggers.setdefault(score.user_id, score.user)
        return list(flaggers.values())

    @staticmethod
    def _send_dispositions(flaggers: list[User], decision: Decision, deleted: bool) -> None:
        if decision == Decision.AGREE:
            message_key = (
                "flags_dispositions.agreed_and_deleted"
                if deleted
                else "flags_dispositions.agreed"
            )
        elif decision == Decision.DISAGREE:
            message_key = "flags_dispositions.disagreed"
        else:
            message_key = "flags_dispositions.ignored"

        for flagger in flaggers:
            send_disposition_message_task.delay(flagger.user_id, message_key)
