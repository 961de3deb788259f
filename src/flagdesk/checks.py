# flagdesk/checks.py
"""System checks for deployment and moderation settings."""

from django.conf import settings
from django.core.checks import Error, Warning


def check_settings(app_configs=None, **kwargs):
    errors = []

    if getattr(settings, "ENVIRONMENT", "") == "production" and settings.DEBUG:
        errors.append(
            Warning(
                "DEBUG is enabled in production.",
                hint="Set DEBUG=False in production.",
                obj="settings",
                id="flagdesk.W001",
            )
        )

    if settings.NUM_USERS_TO_SILENCE_NEW_USER < 1:
        errors.append(
            Error(
                "NUM_USERS_TO_SILENCE_NEW_USER must be at least 1.",
                obj="settings",
                id="flagdesk.E001",
            )
        )

    if settings.SPAM_SCORE_TO_SILENCE_NEW_USER <= 0:
        errors.append(
            Error(
                "SPAM_SCORE_TO_SILENCE_NEW_USER must be positive.",
                obj="settings",
                id="flagdesk.E002",
            )
        )

    if settings.LANGUAGE_CODE not in dict(settings.LANGUAGES):
        errors.append(
            Warning(
                f"LANGUAGE_CODE {settings.LANGUAGE_CODE!r} is not listed in LANGUAGES.",
                hint="System messages fall back to untranslated English.",
                obj="settings",
                id="flagdesk.W002",
            )
        )

    return errors
