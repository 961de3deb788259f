# flagdesk/exceptions.py
"""
Moderation errors and the REST framework exception handler.

Services raise these; the handler turns any API error into the
``{"errors": [...]}`` body the admin client expects.
"""

from rest_framework import status
from rest_framework.exceptions import APIException

from flagdeskutils.log_helpers import log_exception
from flagdeskutils.logging import get_logger

from .i18n import lazy

logger = get_logger(__name__)


class ImmutableRecordError(Exception):
    """Raised when code tries to change or remove an audit record."""


class ModerationError(APIException):
    """Base class for errors raised while resolving flags."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "moderation_error"


class AlreadyHandledError(ModerationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = lazy("flags.errors.already_handled")
    default_code = "already_handled"


class ProtectedContentError(ModerationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = lazy("flags.errors.protected_content")
    default_code = "protected_content"


class ReviewableNotFoundError(ModerationError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = lazy("flags.errors.not_found")
    default_code = "not_found"


class InvalidDispositionError(ModerationError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "invalid_action_on_post"


class InvalidDecisionError(ModerationError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "invalid_decision"


def _flatten(data) -> list[str]:
    if isinstance(data, dict):
        messages = []
        for key, value in data.items():
            for message in _flatten(value):
                messages.append(message if key in ("detail", "non_field_errors") else f"{key}: {message}")
        return messages
    if isinstance(data, (list, tuple)):
        return [message for item in data for message in _flatten(item)]
    return [str(data)]


def flags_exception_handler(exc, context):
    """
    Wrap DRF's default handler and normalise the body to {"errors": [...]}.

    Exceptions DRF does not handle (response is None) are logged and
    re-raised by the framework, ending up as a 500.
    """
    # rest_framework.views resolves DEFAULT_AUTHENTICATION_CLASSES on import,
    # which needs flagdesk.models; models import this module for their errors.
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        log_exception(
            exc,
            context={"view": view.__class__.__name__ if view else None},
            logger_name=__name__,
        )
        return None

    if isinstance(exc, ModerationError):
        view = context.get("view")
        logger.warning(
            "moderation_error",
            error_code=exc.default_code,
            status_code=response.status_code,
            view=view.__class__.__name__ if view else None,
            path=getattr(context.get("request"), "path", None),
        )

    response.data = {"errors": _flatten(response.data)}
    return response
