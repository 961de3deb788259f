# flagdesk/services/system_messenger.py
"""
Private messages from the system account.

Messages are rendered in the recipient's language, never in the
language of whoever triggered them.
"""

from django.conf import settings
from django.db import transaction
from django.utils import translation

from flagdesk.i18n import t
from flagdesk.models import (
    Notification,
    NotificationType,
    Post,
    Topic,
    TopicAllowedUser,
    TopicArchetype,
    User,
)
from flagdeskutils.logging import get_logger

logger = get_logger(__name__)


class SystemMessenger:
    """
    Service that delivers localized private messages.

    Each message is a new private_message topic owned by the system
    user, readable by the system user and the recipient.
    """

    def __init__(self):
        self.allow_user_locale = getattr(settings, "ALLOW_USER_LOCALE", False)
        self.default_language = getattr(settings, "LANGUAGE_CODE", "en")

    def language_for(self, user: User) -> str:
        if self.allow_user_locale and user.preferred_language:
            return user.preferred_language
        return self.default_language

    @transaction.atomic
    def send_private_message(
        self,
        recipient: User,
        message_key: str,
        title_key: str = "system_messages.flags_disposition_title",
        subtype: str = "system_message",
        **params,
    ) -> Post:
        """
        Create a private conversation holding one translated message.

        Args:
            recipient: User receiving the message
            message_key: Key into flagdesk.i18n.MESSAGES for the body
            title_key: Key for the conversation title
            subtype: Topic subtype recorded on the conversation
            **params: Interpolation values for the body

        Returns:
            The message Post
        """
        sender = User.objects.system_user()
        language = self.language_for(recipient)

        with translation.override(language):
            title = t(title_key)
            body = t(message_key, **params)

        topic = Topic.objects.create(
            title=title,
            author=sender,
            archetype=TopicArchetype.PRIVATE_MESSAGE.value,
            subtype=subtype,
            created_by=sender.user_id,
        )
        allowed = {sender.pk: sender, recipient.pk: recipient}
        TopicAllowedUser.objects.bulk_create(
            [TopicAllowedUser(topic=topic, user=user) for user in allowed.values()]
        )
        post = Post.objects.create(
            topic=topic,
            author=sender,
            post_number=1,
            raw=body,
            created_by=sender.user_id,
        )

        logger.info(
            "system_message_sent",
            recipient_id=recipient.user_id,
            message_key=message_key,
            language=language,
            topic_id=topic.topic_id,
        )
        return post

    def notify(self, recipient: User, post: Post) -> Notification:
        """Add an in-app notification pointing at a delivered message."""
        return Notification.objects.create(
            user=recipient,
            title=post.topic.title,
            message=post.raw,
            type=NotificationType.MODERATION.value,
            topic=post.topic,
            created_by=post.author_id,
        )
