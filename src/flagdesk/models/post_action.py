# flagdesk/models/post_action.py
"""
Flag records.

Provides:
- PostAction: A single user's flag on a post, with its resolution stamps
"""

from django.db import models
from django.utils import timezone

from .base import BaseModel
from .choices import PostActionType


class PostActionQuerySet(models.QuerySet):
    def open(self):
        """Flags no moderator has resolved yet."""
        return self.filter(
            agreed_at__isnull=True,
            disagreed_at__isnull=True,
            deferred_at__isnull=True,
        )


class PostAction(BaseModel):
    """
    A flag raised by a user against a post.

    Exactly one of agreed_at, disagreed_at or deferred_at is set once a
    moderator resolves the flag.
    """

    post_action_id = models.AutoField(
        db_column="PostActionID",
        primary_key=True,
        help_text="Flag primary key",
    )
    post = models.ForeignKey(
        "Post",
        models.CASCADE,
        db_column="PostID",
        related_name="post_actions",
        help_text="Flagged post",
    )
    user = models.ForeignKey(
        "User",
        models.CASCADE,
        db_column="UserID",
        related_name="post_actions",
        help_text="User who raised the flag",
    )
    post_action_type = models.CharField(
        db_column="PostActionType",
        max_length=20,
        choices=PostActionType.choices(),
        help_text="Kind of flag",
    )
    message = models.TextField(
        db_column="Message",
        blank=True,
        default="",
        help_text="Optional note from the flagger",
    )
    agreed_at = models.DateTimeField(db_column="AgreedAt", blank=True, null=True)
    agreed_by = models.ForeignKey(
        "User",
        models.SET_NULL,
        db_column="AgreedByID",
        blank=True,
        null=True,
        related_name="+",
    )
    disagreed_at = models.DateTimeField(db_column="DisagreedAt", blank=True, null=True)
    disagreed_by = models.ForeignKey(
        "User",
        models.SET_NULL,
        db_column="DisagreedByID",
        blank=True,
        null=True,
        related_name="+",
    )
    deferred_at = models.DateTimeField(db_column="DeferredAt", blank=True, null=True)
    deferred_by = models.ForeignKey(
        "User",
        models.SET_NULL,
        db_column="DeferredByID",
        blank=True,
        null=True,
        related_name="+",
    )

    objects = PostActionQuerySet.as_manager()

    class Meta:
        managed = True
        db_table = "PostActions"
        verbose_name = "Post Action"
        verbose_name_plural = "Post Actions"
        indexes = [
            models.Index(fields=["post", "post_action_type"], name="postactions_post_type_idx"),
            models.Index(fields=["user", "post_action_type"], name="postactions_user_type_idx"),
        ]
        ordering = ["created_at"]
        app_label = "flagdesk"

    def __str__(self):
        return f"{self.post_action_type} on Post #{self.post_id} by User #{self.user_id}"

    @property
    def action_type(self) -> PostActionType:
        return PostActionType(self.post_action_type)

    @property
    def is_open(self) -> bool:
        return not (self.agreed_at or self.disagreed_at or self.deferred_at)

    def stamp(self, field: str, actor) -> None:
        """Record a resolution: field is one of 'agreed', 'disagreed', 'deferred'."""
        setattr(self, f"{field}_at", timezone.now())
        setattr(self, f"{field}_by", actor)
        self.updated_by = actor.pk
        self.save(update_fields=[f"{field}_at", f"{field}_by", "updated_by", "updated_at"])
