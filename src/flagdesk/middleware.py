# middleware.py
"""
Request middleware: bearer-token users are attached before DRF runs so the
access log and language selection below can see them.
"""

import time
from typing import Any

from django.conf import settings
from django.http import HttpRequest
from django.utils import translation
from rest_framework.exceptions import AuthenticationFailed

from flagdesk.authentication import CustomJWTAuthentication
from flagdeskutils.log_helpers import log_api_request
from flagdeskutils.logging import get_logger

logger = get_logger(__name__)


class JWTAuthenticationMiddleware:
    """Invalid tokens are ignored here; DRF rejects them with a 401."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> Any:
        try:
            result = CustomJWTAuthentication().authenticate(request)
        except AuthenticationFailed as exc:
            logger.debug("bearer_token_rejected", reason=str(exc))
            result = None

        if result is not None:
            request.user = result[0]

        return self.get_response(request)


class RequestLoggingMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> Any:
        started = time.monotonic()
        response = self.get_response(request)

        user = getattr(request, "user", None)
        log_api_request(
            request,
            response,
            duration=time.monotonic() - started,
            user_id=getattr(user, "user_id", None),
        )
        return response


class LanguageMiddleware:
    """
    Language order: the user's preferred_language (only with
    ALLOW_USER_LOCALE), then Accept-Language, then LANGUAGE_CODE.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        supported = [code for code, _ in settings.LANGUAGES]
        language = None

        if getattr(settings, "ALLOW_USER_LOCALE", False):
            user = getattr(request, "user", None)
            if user is not None and user.is_authenticated:
                user_lang = getattr(user, "preferred_language", None)
                if user_lang in supported:
                    language = user_lang

        if language is None:
            accept_lang = request.META.get("HTTP_ACCEPT_LANGUAGE", "")
            if accept_lang:
                primary = accept_lang.split(",")[0].split(";")[0].strip()
                lang_code = primary.split("-")[0].lower()
                if lang_code in supported:
                    language = lang_code

        language = language or settings.LANGUAGE_CODE
        translation.activate(language)
        request.LANGUAGE_CODE = language

        response = self.get_response(request)

        translation.deactivate()
        return response
