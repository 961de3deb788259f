# flagdesk/models/content.py
"""
Forum content models that flags can target.

Provides:
- ModeratableContent: Abstract base for content that can be hidden or deleted
- Category: A grouping of topics, described by its definition topic
- Topic: A thread of posts, or a private conversation
- TopicAllowedUser: Membership of a private conversation
- Post: A single message within a topic
"""

from django.db import models
from django.utils import timezone

from .base import BaseModel
from .choices import TopicArchetype


class ModeratableContent(BaseModel):
    """
    Abstract base model for content that moderators can act on.

    Hidden content stays in place but is not shown to the public.
    Deleted content is soft-deleted through deleted_at and can be
    recovered.
    """

    hidden = models.BooleanField(
        db_column="Hidden",
        default=False,
        help_text="Whether the content is hidden pending review",
    )
    hidden_at = models.DateTimeField(
        db_column="HiddenAt",
        blank=True,
        null=True,
        help_text="When the content was hidden",
    )
    hidden_reason = models.CharField(
        db_column="HiddenReason",
        max_length=40,
        blank=True,
        null=True,
        help_text="Why the content was hidden",
    )
    deleted_at = models.DateTimeField(
        db_column="DeletedAt",
        blank=True,
        null=True,
        help_text="When the content was deleted",
    )
    deleted_by = models.ForeignKey(
        "User",
        models.SET_NULL,
        db_column="DeletedByID",
        blank=True,
        null=True,
        related_name="+",
        help_text="User who deleted the content",
    )

    class Meta:
        abstract = True

    def hide(self, reason: str = ""):
        self.hidden = True
        self.hidden_at = timezone.now()
        self.hidden_reason = reason or None
        self.save(update_fields=["hidden", "hidden_at", "hidden_reason", "updated_at"])

    def unhide(self):
        self.hidden = False
        self.hidden_at = None
        self.hidden_reason = None
        self.save(update_fields=["hidden", "hidden_at", "hidden_reason", "updated_at"])

    def trash(self, actor=None):
        """Soft-delete the content."""
        self.deleted_at = timezone.now()
        self.deleted_by = actor
        self.is_deleted = 1
        self.save(update_fields=["deleted_at", "deleted_by", "is_deleted", "updated_at"])

    def recover(self):
        self.deleted_at = None
        self.deleted_by = None
        self.is_deleted = 0
        self.save(update_fields=["deleted_at", "deleted_by", "is_deleted", "updated_at"])


class Category(BaseModel):
    """
    A category of topics.

    The definition topic describes the category itself; its first post
    may never be removed through flag moderation.
    """

    category_id = models.AutoField(
        db_column="CategoryID",
        primary_key=True,
        help_text="Category primary key",
    )
    name = models.CharField(
        db_column="Name",
        max_length=50,
        help_text="Category name",
    )
    slug = models.SlugField(
        db_column="Slug",
        max_length=50,
        unique=True,
        help_text="URL slug",
    )
    topic = models.ForeignKey(
        "Topic",
        models.SET_NULL,
        db_column="TopicID",
        blank=True,
        null=True,
        related_name="defined_categories",
        help_text="Topic describing this category",
    )

    class Meta:
        managed = True
        db_table = "Categories"
        verbose_name = "Category"
        verbose_name_plural = "Categories"
        ordering = ["name"]
        app_label = "flagdesk"

    def __str__(self):
        return self.name


class Topic(ModeratableContent):
    """
    A topic: either a public thread or a private conversation.
    """

    topic_id = models.AutoField(
        db_column="TopicID",
        primary_key=True,
        help_text="Topic primary key",
    )
    title = models.CharField(
        db_column="Title",
        max_length=255,
        help_text="Topic title",
    )
    category = models.ForeignKey(
        Category,
        models.SET_NULL,
        db_column="CategoryID",
        blank=True,
        null=True,
        related_name="topics",
        help_text="Category the topic belongs to",
    )
    author = models.ForeignKey(
        "User",
        models.CASCADE,
        db_column="AuthorID",
        related_name="topics",
        help_text="User who started the topic",
    )
    archetype = models.CharField(
        db_column="Archetype",
        max_length=20,
        choices=TopicArchetype.choices(),
        default=TopicArchetype.REGULAR.value,
        help_text="Regular topic or private message",
    )
    subtype = models.CharField(
        db_column="Subtype",
        max_length=40,
        blank=True,
        null=True,
        help_text="Private message subtype (e.g. moderator_warning)",
    )
    visible = models.BooleanField(
        db_column="Visible",
        default=True,
        help_text="Whether the topic is listed",
    )
    allowed_users = models.ManyToManyField(
        "User",
        through="TopicAllowedUser",
        related_name="private_topics",
    )

    class Meta:
        managed = True
        db_table = "Topics"
        verbose_name = "Topic"
        verbose_name_plural = "Topics"
        indexes = [
            models.Index(fields=["archetype", "created_at"], name="topics_archetype_idx"),
        ]
        ordering = ["-created_at"]
        app_label = "flagdesk"

    def __str__(self):
        return f"Topic #{self.topic_id}: {self.title[:50]}"

    @property
    def is_private_message(self) -> bool:
        return self.archetype == TopicArchetype.PRIVATE_MESSAGE.value


class TopicAllowedUser(models.Model):
    """A user allowed to read a private conversation."""

    topic = models.ForeignKey(
        Topic,
        models.CASCADE,
        db_column="TopicID",
        related_name="topic_allowed_users",
    )
    user = models.ForeignKey(
        "User",
        models.CASCADE,
        db_column="UserID",
        related_name="topic_allowed_users",
    )

    class Meta:
        managed = True
        db_table = "TopicAllowedUsers"
        constraints = [
            models.UniqueConstraint(
                fields=["topic", "user"], name="unique_topic_allowed_user"
            ),
        ]
        app_label = "flagdesk"

    def __str__(self):
        return f"Topic #{self.topic_id} <- User #{self.user_id}"


class Post(ModeratableContent):
    """
    A post within a topic.

    Keeps one counter per flag type so listings can show flag totals
    without aggregating post actions.
    """

    post_id = models.AutoField(
        db_column="PostID",
        primary_key=True,
        help_text="Post primary key",
    )
    topic = models.ForeignKey(
        Topic,
        models.CASCADE,
        db_column="TopicID",
        related_name="posts",
        help_text="Topic this post belongs to",
    )
    author = models.ForeignKey(
        "User",
        models.CASCADE,
        db_column="AuthorID",
        related_name="posts",
        help_text="User who wrote the post",
    )
    post_number = models.PositiveIntegerField(
        db_column="PostNumber",
        default=1,
        help_text="Position of the post within its topic (1 = first post)",
    )
    raw = models.TextField(
        db_column="Raw",
        help_text="Post body",
    )
    spam_count = models.PositiveIntegerField(db_column="SpamCount", default=0)
    inappropriate_count = models.PositiveIntegerField(
        db_column="InappropriateCount", default=0
    )
    off_topic_count = models.PositiveIntegerField(db_column="OffTopicCount", default=0)
    notify_moderators_count = models.PositiveIntegerField(
        db_column="NotifyModeratorsCount", default=0
    )

    FLAG_COUNT_FIELDS = (
        "spam_count",
        "inappropriate_count",
        "off_topic_count",
        "notify_moderators_count",
    )

    class Meta:
        managed = True
        db_table = "Posts"
        verbose_name = "Post"
        verbose_name_plural = "Posts"
        indexes = [
            models.Index(fields=["topic", "post_number"], name="posts_topic_number_idx"),
            models.Index(fields=["author", "created_at"], name="posts_author_created_idx"),
        ]
        ordering = ["topic_id", "post_number"]
        app_label = "flagdesk"

    def __str__(self):
        return f"Post #{self.post_id} ({self.topic_id}/{self.post_number})"

    @property
    def is_first_post(self) -> bool:
        return self.post_number == 1
