# settings/base.py
"""
Settings shared by every environment. development.py, production.py and
test.py import everything from here and override what differs.
"""

import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from .components import _get_env_bool, _get_env_float, _get_env_int

load_dotenv()

# src/; manage.py lives here
BASE_DIR = Path(__file__).resolve().parent.parent.parent

DJANGO_ENV = os.environ.get("DJANGO_ENV", "development").lower()
IS_PRODUCTION = DJANGO_ENV in ("production", "prod")
IS_TEST = DJANGO_ENV in ("test", "testing")
IS_DEVELOPMENT = not (IS_PRODUCTION or IS_TEST)


def _validate_required_settings():
    """Raise ImproperlyConfigured naming every missing production variable."""
    from django.core.exceptions import ImproperlyConfigured

    missing = [
        var
        for var in ("SECRET_KEY", "DB_NAME", "DB_USER", "DB_PASSWORD", "DB_HOST")
        if not os.environ.get(var)
    ]
    if os.environ.get("SECRET_KEY") == "change-me":
        missing.append("SECRET_KEY")

    if missing:
        raise ImproperlyConfigured(
            f"Missing required environment variables: {', '.join(sorted(set(missing)))}"
        )


# =============================================================================
# CORE
# =============================================================================

SECRET_KEY = os.environ.get("SECRET_KEY", "flagdesk-insecure-development-key")
DEBUG = False
ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
AUTH_USER_MODEL = "flagdesk.User"

# /admin/flags.json and /admin/flags are both valid; no slash redirects.
APPEND_SLASH = False

ROOT_URLCONF = "configuration.urls"
WSGI_APPLICATION = "configuration.wsgi.application"
ASGI_APPLICATION = "configuration.asgi.application"

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # third party
    "rest_framework",
    "corsheaders",
    "django_celery_results",
    "django_celery_beat",
    "django_extensions",
    "drf_yasg",
    # local
    "flagdesk.apps.FlagdeskConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Bearer-token users are attached before the language is picked
    "flagdesk.middleware.JWTAuthenticationMiddleware",
    "flagdesk.middleware.RequestLoggingMiddleware",
    "flagdesk.middleware.LanguageMiddleware",
]

USE_STRUCTLOG_MIDDLEWARE = _get_env_bool("USE_STRUCTLOG_MIDDLEWARE", True)
if USE_STRUCTLOG_MIDDLEWARE:
    MIDDLEWARE.insert(0, "flagdeskutils.logging.StructlogMiddleware")

# The Django admin is the only template consumer
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": f"django.contrib.auth.password_validation.{name}"}
    for name in (
        "UserAttributeSimilarityValidator",
        "MinimumLengthValidator",
        "CommonPasswordValidator",
        "NumericPasswordValidator",
    )
]


# =============================================================================
# I18N
# =============================================================================

# System messages are rendered in LANGUAGE_CODE unless ALLOW_USER_LOCALE is on
LANGUAGE_CODE = "en"
LANGUAGES = [
    ("en", "English"),
    ("es", "Spanish"),
    ("ja", "Japanese"),
]
LOCALE_PATHS = [BASE_DIR / "flagdesk" / "locale"]
USE_I18N = True

TIME_ZONE = "UTC"
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# flagdeskutils.logging.configure_logging() runs from FlagdeskConfig.ready()
# and replaces Django's dictConfig step.
USE_STRUCTURED_LOGGING = _get_env_bool("USE_STRUCTURED_LOGGING", True)
LOG_TO_FILE = _get_env_bool("LOG_TO_FILE", True)
LOGGING_CONFIG = None


# =============================================================================
# API
# =============================================================================

REST_FRAMEWORK = {
    # JWT first: its WWW-Authenticate header turns anonymous requests into 401s
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "flagdesk.authentication.CustomJWTAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.IsAuthenticated"],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
        "rest_framework.renderers.BrowsableAPIRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
        "rest_framework.parsers.MultiPartParser",
    ],
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {"anon": "100/day", "user": "5000/day"},
    "EXCEPTION_HANDLER": "flagdesk.exceptions.flags_exception_handler",
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=2),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=7),
    "AUTH_HEADER_TYPES": ("Bearer",),
    "USER_ID_FIELD": "user_id",
    "USER_ID_CLAIM": "user_id",
}

SWAGGER_SETTINGS = {
    "SECURITY_DEFINITIONS": {
        "Bearer": {"type": "apiKey", "name": "Authorization", "in": "header"},
    },
    "USE_SESSION_AUTH": False,
    "OPERATIONS_SORTER": "alpha",
}

CORS_ALLOW_CREDENTIALS = True


# =============================================================================
# CELERY
# =============================================================================

CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = "django-db"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = TIME_ZONE

# Disposition messages are small; anything slower than this is stuck
CELERY_TASK_TIME_LIMIT = _get_env_int("CELERY_TASK_TIME_LIMIT", 300)
CELERY_TASK_SOFT_TIME_LIMIT = _get_env_int("CELERY_TASK_SOFT_TIME_LIMIT", 240)
CELERY_WORKER_PREFETCH_MULTIPLIER = 1
CELERY_BEAT_SCHEDULER = "django_celery_beat.schedulers:DatabaseScheduler"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "flagdesk",
    }
}

SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"


# =============================================================================
# FLAG MODERATION
# =============================================================================

# Auto-silence a new user once their spam flags reach this combined score...
SPAM_SCORE_TO_SILENCE_NEW_USER = _get_env_float("SPAM_SCORE_TO_SILENCE_NEW_USER", 3.0)
# ...from at least this many distinct flaggers
NUM_USERS_TO_SILENCE_NEW_USER = _get_env_int("NUM_USERS_TO_SILENCE_NEW_USER", 3)
# Hide a post once its pending reviewable reaches this score
SCORE_TO_HIDE_POST = _get_env_float("SCORE_TO_HIDE_POST", 8.0)
# Added to the score of flags raised by staff
STAFF_FLAG_SCORE_BONUS = _get_env_float("STAFF_FLAG_SCORE_BONUS", 5.0)
# Render system messages in the recipient's preferred_language
ALLOW_USER_LOCALE = _get_env_bool("ALLOW_USER_LOCALE", False)
AUTO_SILENCE_DAYS = _get_env_int("AUTO_SILENCE_DAYS", 365)
AUTO_DEFER_FLAGS_DAYS = _get_env_int("AUTO_DEFER_FLAGS_DAYS", 30)
FLAGS_INDEX_LIMIT = _get_env_int("FLAGS_INDEX_LIMIT", 50)
SYSTEM_USER_EMAIL = os.environ.get("SYSTEM_USER_EMAIL", "system@flagdesk.local")
