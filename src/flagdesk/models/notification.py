# flagdesk/models/notification.py
"""In-app notices, such as telling an author their post was removed."""

from django.core.exceptions import ValidationError
from django.db import models

from .base import BaseModel
from .choices import NotificationType


class Notification(BaseModel):
    """
    A notice on the recipient's bell. When the full text lives in a
    private message, topic points at that conversation.
    """

    notification_id = models.AutoField(
        db_column="NotificationID",
        primary_key=True,
        help_text="Notification primary key",
    )
    user = models.ForeignKey(
        "User",
        models.CASCADE,
        db_column="UserID",
        related_name="notifications",
        help_text="Recipient",
    )
    title = models.TextField(
        db_column="Title",
        help_text="One-line headline",
    )
    message = models.TextField(
        db_column="Message",
        help_text="Body text",
    )
    type = models.CharField(
        db_column="Type",
        max_length=10,
        choices=NotificationType.choices(),
        default=NotificationType.SYSTEM.value,
        help_text="Kind of notice",
    )
    topic = models.ForeignKey(
        "Topic",
        models.SET_NULL,
        db_column="TopicID",
        blank=True,
        null=True,
        related_name="+",
        help_text="Conversation holding the full message, if any",
    )
    is_read = models.IntegerField(
        db_column="IsRead",
        default=0,
        help_text="1 once the recipient has opened it",
    )

    class Meta:
        managed = True
        db_table = "Notifications"
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        indexes = [
            models.Index(fields=["user", "is_read", "created_at"], name="notifications_user_read_idx"),
            models.Index(fields=["type", "created_at"], name="notifications_type_idx"),
        ]
        ordering = ["-created_at"]
        app_label = "flagdesk"

    def __str__(self):
        return f"{self.type}: {self.title}"

    def clean(self):
        if self.type and self.type not in NotificationType.values():
            raise ValidationError({"type": "Unknown notification type."})

    def mark_as_read(self):
        self.is_read = 1
        self.save(update_fields=["is_read"])
