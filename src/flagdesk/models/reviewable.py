# flagdesk/models/reviewable.py
"""
Reviewable models: the moderation queue and its audit trail.

Provides:
- Reviewable: A flagged post awaiting (or past) moderator judgment
- ReviewableScore: One flag's contribution to a reviewable's score
- ReviewableHistory: Append-only record of every status transition
"""

from django.db import models
from django.db.models import F, Sum
from django.utils import timezone

from flagdesk.exceptions import AlreadyHandledError, ImmutableRecordError

from .base import AppendOnlyModel, TimeStampedModel
from .choices import PostActionType, ReviewableHistoryType, ReviewableStatus


class ReviewableQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=ReviewableStatus.PENDING.value)

    def resolved(self):
        return self.filter(status__in=ReviewableStatus.resolved_statuses())

    def for_post(self, post):
        return self.filter(target_post=post)


class Reviewable(TimeStampedModel):
    """
    A flagged post in the moderation queue.

    A reviewable leaves the pending state exactly once. The transition
    is a compare-and-set on (status, version), so a concurrent second
    resolution updates zero rows and is reported as already handled.
    """

    reviewable_id = models.AutoField(
        db_column="ReviewableID",
        primary_key=True,
        help_text="Reviewable primary key",
    )
    target_post = models.ForeignKey(
        "Post",
        models.PROTECT,
        db_column="TargetPostID",
        related_name="reviewables",
        help_text="Post under review",
    )
    target_created_by = models.ForeignKey(
        "User",
        models.SET_NULL,
        db_column="TargetCreatedByID",
        blank=True,
        null=True,
        related_name="reviewables_against",
        help_text="Author of the post under review",
    )
    topic = models.ForeignKey(
        "Topic",
        models.SET_NULL,
        db_column="TopicID",
        blank=True,
        null=True,
        related_name="reviewables",
    )
    category = models.ForeignKey(
        "Category",
        models.SET_NULL,
        db_column="CategoryID",
        blank=True,
        null=True,
        related_name="reviewables",
    )
    created_by = models.ForeignKey(
        "User",
        models.SET_NULL,
        db_column="CreatedByID",
        blank=True,
        null=True,
        related_name="reviewables_created",
        help_text="User whose flag opened this reviewable",
    )
    status = models.CharField(
        db_column="Status",
        max_length=20,
        choices=ReviewableStatus.choices(),
        default=ReviewableStatus.PENDING.value,
        help_text="Current moderation status",
    )
    score = models.FloatField(
        db_column="Score",
        default=0.0,
        help_text="Sum of pending flag scores",
    )
    version = models.PositiveIntegerField(
        db_column="Version",
        default=0,
        help_text="Incremented on every status change",
    )

    objects = ReviewableQuerySet.as_manager()

    class Meta:
        managed = True
        db_table = "Reviewables"
        verbose_name = "Reviewable"
        verbose_name_plural = "Reviewables"
        indexes = [
            models.Index(fields=["status", "created_at"], name="reviewables_status_idx"),
            models.Index(fields=["target_post", "status"], name="reviewables_post_status_idx"),
        ]
        ordering = ["-score", "-created_at"]
        app_label = "flagdesk"

    def __str__(self):
        return f"Reviewable #{self.reviewable_id} for Post #{self.target_post_id} ({self.status})"

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(
            f"Reviewable #{self.pk} is part of the audit trail and cannot be deleted"
        )

    @property
    def is_pending(self) -> bool:
        return self.status == ReviewableStatus.PENDING.value

    def log_history(self, history_type: ReviewableHistoryType, actor):
        return ReviewableHistory.objects.create(
            reviewable=self,
            reviewable_history_type=history_type.value,
            status=self.status,
            created_by=actor,
        )

    def add_score(self, post_action, score: float):
        """Attach a flag's score and refresh the cached total."""
        reviewable_score = ReviewableScore.objects.create(
            reviewable=self,
            user=post_action.user,
            post_action=post_action,
            post_action_type=post_action.post_action_type,
            score=score,
        )
        self.recalculate_score()
        return reviewable_score

    def recalculate_score(self) -> float:
        total = self.scores.filter(
            status=ReviewableStatus.PENDING.value
        ).aggregate(total=Sum("score"))["total"]
        self.score = total or 0.0
        self.save(update_fields=["score", "updated_at"])
        return self.score

    def transition_to(self, status: ReviewableStatus, actor):
        """
        Move a pending reviewable to a resolved status.

        Raises AlreadyHandledError if the row is no longer pending at
        the version this instance was loaded with.
        """
        now = timezone.now()
        updated = Reviewable.objects.filter(
            pk=self.pk,
            version=self.version,
            status=ReviewableStatus.PENDING.value,
        ).update(status=status.value, version=F("version") + 1, updated_at=now)
        if updated == 0:
            raise AlreadyHandledError()

        self.status = status.value
        self.version += 1
        self.updated_at = now

        self.scores.filter(status=ReviewableStatus.PENDING.value).update(
            status=status.value, reviewed_by=actor, reviewed_at=now
        )
        self.log_history(ReviewableHistoryType.TRANSITIONED, actor)
        return self


class ReviewableScore(TimeStampedModel):
    """A single flag's weight on a reviewable."""

    reviewable_score_id = models.AutoField(
        db_column="ReviewableScoreID",
        primary_key=True,
    )
    reviewable = models.ForeignKey(
        Reviewable,
        models.CASCADE,
        db_column="ReviewableID",
        related_name="scores",
    )
    user = models.ForeignKey(
        "User",
        models.CASCADE,
        db_column="UserID",
        related_name="reviewable_scores",
        help_text="Flagger",
    )
    post_action = models.ForeignKey(
        "PostAction",
        models.SET_NULL,
        db_column="PostActionID",
        blank=True,
        null=True,
        related_name="reviewable_scores",
    )
    post_action_type = models.CharField(
        db_column="PostActionType",
        max_length=20,
        choices=PostActionType.choices(),
    )
    score = models.FloatField(db_column="Score", default=0.0)
    status = models.CharField(
        db_column="Status",
        max_length=20,
        choices=ReviewableStatus.choices(),
        default=ReviewableStatus.PENDING.value,
    )
    reviewed_by = models.ForeignKey(
        "User",
        models.SET_NULL,
        db_column="ReviewedByID",
        blank=True,
        null=True,
        related_name="+",
    )
    reviewed_at = models.DateTimeField(db_column="ReviewedAt", blank=True, null=True)

    class Meta:
        managed = True
        db_table = "ReviewableScores"
        verbose_name = "Reviewable Score"
        verbose_name_plural = "Reviewable Scores"
        indexes = [
            models.Index(fields=["reviewable", "status"], name="revscores_reviewable_idx"),
            models.Index(fields=["post_action_type", "status"], name="revscores_type_status_idx"),
        ]
        app_label = "flagdesk"

    def __str__(self):
        return f"{self.post_action_type} +{self.score} on Reviewable #{self.reviewable_id}"


class ReviewableHistory(AppendOnlyModel):
    """One entry in a reviewable's audit trail. Never updated or removed."""

    reviewable_history_id = models.AutoField(
        db_column="ReviewableHistoryID",
        primary_key=True,
    )
    reviewable = models.ForeignKey(
        Reviewable,
        models.PROTECT,
        db_column="ReviewableID",
        related_name="reviewable_histories",
    )
    reviewable_history_type = models.CharField(
        db_column="ReviewableHistoryType",
        max_length=20,
        choices=ReviewableHistoryType.choices(),
    )
    status = models.CharField(
        db_column="Status",
        max_length=20,
        choices=ReviewableStatus.choices(),
        help_text="Reviewable status after this entry",
    )
    created_by = models.ForeignKey(
        "User",
        models.PROTECT,
        db_column="CreatedByID",
        related_name="reviewable_histories",
        help_text="User responsible for the entry",
    )
    created_at = models.DateTimeField(db_column="CreatedAt", auto_now_add=True)

    class Meta:
        managed = True
        db_table = "ReviewableHistories"
        verbose_name = "Reviewable History"
        verbose_name_plural = "Reviewable Histories"
        ordering = ["created_at", "reviewable_history_id"]
        app_label = "flagdesk"

    def __str__(self):
        return (
            f"{self.reviewable_history_type} -> {self.status} "
            f"on Reviewable #{self.reviewable_id}"
        )
