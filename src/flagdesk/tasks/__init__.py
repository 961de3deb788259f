from .tasks import (
    auto_defer_stale_flags_task,
    notify_content_owner_task,
    send_disposition_message_task,
    unsilence_expired_users_task,
)

__all__ = [
    "auto_defer_stale_flags_task",
    "notify_content_owner_task",
    "send_disposition_message_task",
    "unsilence_expired_users_task",
]
