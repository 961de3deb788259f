"""
Basic smoke tests for flagdesk.
"""

import os
import subprocess
import sys
from io import StringIO
from pathlib import Path

import pytest


@pytest.mark.unit
class TestDjangoConfiguration:
    """Test that Django is configured correctly."""

    def test_test_settings_loaded(self):
        from django.conf import settings

        assert settings.ENVIRONMENT == "test"
        assert settings.CELERY_TASK_ALWAYS_EAGER is True

    def test_installed_apps(self):
        from django.conf import settings

        for app in ["django.contrib.auth", "rest_framework", "drf_yasg", "flagdesk.apps.FlagdeskConfig"]:
            assert app in settings.INSTALLED_APPS

    def test_custom_user_model(self):
        from django.contrib.auth import get_user_model

        from flagdesk.models import User

        assert get_user_model() is User

    def test_exception_handler(self):
        from django.conf import settings

        assert settings.REST_FRAMEWORK["EXCEPTION_HANDLER"] == (
            "flagdesk.exceptions.flags_exception_handler"
        )

    def test_system_checks_pass(self):
        from flagdesk.checks import check_settings

        assert check_settings() == []

    def test_manage_check_boots_in_fresh_interpreter(self):
        # Import order only matters on a cold start; this process has
        # every module loaded already.
        src_dir = Path(__file__).resolve().parent.parent
        env = {**os.environ, "DJANGO_ENV": "test"}

        result = subprocess.run(
            [sys.executable, "manage.py", "check"],
            cwd=src_dir,
            env=env,
            capture_output=True,
            text=True,
            timeout=120,
        )

        assert result.returncode == 0, result.stderr

    def test_migrations_match_models(self, settings):
        from django.core.management import call_command

        # --nomigrations swaps MIGRATION_MODULES for the test run
        settings.MIGRATION_MODULES = {}
        out = StringIO()

        call_command("makemigrations", "flagdesk", "--check", "--dry-run", stdout=out)

        assert "No changes detected" in out.getvalue()

    def test_system_checks_flag_bad_thresholds(self, settings):
        from flagdesk.checks import check_settings

        settings.NUM_USERS_TO_SILENCE_NEW_USER = 0

        assert [e.id for e in check_settings()] == ["flagdesk.E001"]


@pytest.mark.unit
class TestTranslations:
    def test_every_key_translates(self):
        from flagdesk.i18n import MESSAGES, t

        for key in MESSAGES:
            assert t(key, choices="a, b", topic_title="x")

    def test_errors_are_flattened(self):
        from flagdesk.exceptions import _flatten

        assert _flatten({"detail": "nope"}) == ["nope"]
        assert _flatten({"action_on_post": ["bad"]}) == ["action_on_post: bad"]
        assert _flatten(["a", "b"]) == ["a", "b"]
