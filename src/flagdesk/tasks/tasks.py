from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from flagdeskutils.log_helpers import log_task
from flagdeskutils.logging import CeleryLogger


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_disposition_message_task(self, user_id: int, message_key: str):
    """
    Tell a flagger how their flag was resolved.

    Args:
        user_id: Flagger's user ID
        message_key: One of the flags_dispositions.* message keys
    """
    logger = CeleryLogger.get_logger(__name__)
    try:
        from flagdesk.models import User
        from flagdesk.services.system_messenger import SystemMessenger

        user = User.objects.get(user_id=user_id)
        post = SystemMessenger().send_private_message(user, message_key)
        logger.info(
            "disposition_message_sent",
            user_id=user_id,
            message_key=message_key,
            topic_id=post.topic_id,
        )
        return {"topic_id": post.topic_id}
    except Exception as exc:
        log_task("send_disposition_message_task", status="retry", error=exc, user_id=user_id)
        raise self.retry(exc=exc) from exc


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_content_owner_task(self, post_id: int):
    """
    Tell a post's author that moderators removed it.

    Sends a private message and adds an in-app notification.
    """
    logger = CeleryLogger.get_logger(__name__)
    try:
        from flagdesk.models import Post
        from flagdesk.services.system_messenger import SystemMessenger

        post = Post.objects.select_related("author", "topic").get(post_id=post_id)
        messenger = SystemMessenger()
        message = messenger.send_private_message(
            post.author,
            "flags_dispositions.post_deleted_owner",
            title_key="system_messages.post_deleted_title",
            topic_title=post.topic.title,
        )
        messenger.notify(post.author, message)
        logger.info(
            "content_owner_notified",
            post_id=post_id,
            user_id=post.author_id,
            topic_id=message.topic_id,
        )
        return {"topic_id": message.topic_id}
    except Exception as exc:
        log_task("notify_content_owner_task", status="retry", error=exc, post_id=post_id)
        raise self.retry(exc=exc) from exc


@shared_task
def unsilence_expired_users_task():
    """
    Periodic task to clear silences that have run out.
    """
    from flagdesk.models import User

    now = timezone.now()
    cleared = User.objects.filter(silenced_till__isnull=False, silenced_till__lte=now).update(
        silenced_till=None, silence_reason=None, updated_at=now
    )

    log_task("unsilence_expired_users_task", status="success", result=cleared)
    return {"unsilenced": cleared}


@shared_task
def auto_defer_stale_flags_task(days: int | None = None):
    """
    Periodic task to defer reviewables nobody has handled in time.

    Args:
        days: Age in days after which a pending reviewable is deferred
              (default: AUTO_DEFER_FLAGS_DAYS)
    """
    from flagdesk.exceptions import AlreadyHandledError
    from flagdesk.models import Decision, Reviewable, User
    from flagdesk.services.moderation_engine import ModerationEngine

    logger = CeleryLogger.get_logger(__name__)
    days = days or getattr(settings, "AUTO_DEFER_FLAGS_DAYS", 30)
    cutoff = timezone.now() - timedelta(days=days)

    stale_ids = list(
        Reviewable.objects.pending()
        .filter(created_at__lt=cutoff)
        .values_list("reviewable_id", flat=True)
    )
    system_user = User.objects.system_user()
    engine = ModerationEngine()

    deferred = 0
    for reviewable_id in stale_ids:
        try:
            engine.resolve(reviewable_id, Decision.DEFER, system_user)
            deferred += 1
        except AlreadyHandledError:
            logger.info("stale_flag_already_handled", reviewable_id=reviewable_id)

    log_task("auto_defer_stale_flags_task", status="success", result=deferred, days=days)
    return {"deferred": deferred}
