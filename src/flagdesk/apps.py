# flagdesk/apps.py
"""
Django app configuration for flagdesk.

Configures structured logging and registers system checks on startup.
"""

from django.apps import AppConfig


class FlagdeskConfig(AppConfig):
    """Configuration for the flagdesk Django application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "flagdesk"
    verbose_name = "Flag Moderation"

    def ready(self) -> None:
        self._configure_structured_logging()
        self._register_checks()

    def _configure_structured_logging(self) -> None:
        from django.conf import settings

        from flagdeskutils.logging import configure_logging

        if getattr(settings, "USE_STRUCTURED_LOGGING", True):
            configure_logging(log_to_file=getattr(settings, "LOG_TO_FILE", True))

    def _register_checks(self) -> None:
        from django.core import checks

        from .checks import check_settings

        checks.register(check_settings, checks.Tags.compatibility)
