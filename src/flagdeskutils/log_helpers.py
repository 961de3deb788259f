# flagdeskutils/log_helpers.py
"""
Shorthands for the entries flagdesk logs most: API requests, moderation
events, task outcomes and unexpected exceptions.
"""

from typing import Any

from django.http import HttpRequest, HttpResponse
from structlog.contextvars import bind_contextvars, unbind_contextvars

from .logging import get_logger

logger = get_logger(__name__)


def get_client_ip(request: HttpRequest) -> str:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")


def log_api_request(
    request: HttpRequest,
    response: HttpResponse | None = None,
    duration: float | None = None,
    **extra: Any,
) -> None:
    """One line per request; warning for 4xx, error for 5xx."""
    status_code = getattr(response, "status_code", None)
    if status_code is None or status_code < 400:
        level = "info"
    else:
        level = "error" if status_code >= 500 else "warning"

    getattr(logger, level)(
        "api_request",
        method=request.method,
        path=request.path,
        ip=get_client_ip(request),
        status=status_code,
        duration_ms=round(duration * 1000, 1) if duration is not None else None,
        **extra,
    )


def log_moderation_event(
    event_type: str,
    reviewable_id: int | None = None,
    post_id: int | None = None,
    actor_id: int | None = None,
    status: str | None = None,
    **extra: Any,
) -> None:
    """
    Record a moderation fact: a flag raised or resolved, a user silenced,
    a post hidden. Keys left as None are omitted.

        log_moderation_event(
            "flag_approved", reviewable_id=12, post_id=40, actor_id=1,
            status="approved", disposition="delete",
        )
    """
    fields = dict(
        reviewable_id=reviewable_id,
        post_id=post_id,
        actor_id=actor_id,
        status=status,
        **extra,
    )
    logger.info(
        event_type,
        moderation_event=event_type,
        **{key: value for key, value in fields.items() if value is not None},
    )


class LogContext:
    """Bind keys to every entry logged inside the block."""

    def __init__(self, **context: Any):
        self.context = context

    def __enter__(self):
        bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        unbind_contextvars(*self.context)


def log_exception(
    exception: Exception,
    context: dict[str, Any] | None = None,
    logger_name: str | None = None,
) -> None:
    get_logger(logger_name or __name__).error(
        "unhandled_exception",
        exception_type=type(exception).__name__,
        exception_message=str(exception),
        exc_info=exception,
        **(context or {}),
    )


def log_task(
    task_name: str,
    status: str,
    result: Any = None,
    error: Exception | None = None,
    **extra: Any,
) -> None:
    """status is one of started, success, retry, failure."""
    fields: dict[str, Any] = {"task_name": task_name, "task_status": status, **extra}
    if result is not None:
        fields["task_result"] = str(result)[:500]
    if error is not None:
        fields["exception_type"] = type(error).__name__
        fields["exception_message"] = str(error)

    level = "error" if status == "failure" else "warning" if status == "retry" else "info"
    getattr(logger, level)("celery_task", **fields)
