# settings/components.py
"""
Setting groups shared by the environment modules.

Each get_* function reads the environment and returns either a value or a
dict of UPPERCASE settings that the caller copies into its namespace:

    from .components import get_database_settings
    DATABASES = get_database_settings()
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent


def _get_env_bool(key: str, default: bool = False) -> bool:
    return os.environ.get(key, str(default)).lower() in ("true", "1", "yes", "on")


def _get_env_int(key: str, default: int = 0) -> int:
    try:
        return int(os.environ.get(key, default))
    except (ValueError, TypeError):
        return default


def _get_env_float(key: str, default: float = 0.0) -> float:
    try:
        return float(os.environ.get(key, default))
    except (ValueError, TypeError):
        return default


def _get_env_list(key: str, default: list | None = None) -> list:
    """Comma-separated environment variable as a list."""
    items = [item.strip() for item in os.environ.get(key, "").split(",")]
    return [item for item in items if item] or list(default or [])


# =============================================================================
# DATABASE
# =============================================================================


def get_database_settings() -> dict:
    """
    SQLite when USE_SQLITE is set, PostgreSQL otherwise.

    Environment variables:
        USE_SQLITE, DB_NAME, DB_USER, DB_PASSWORD, DB_HOST, DB_PORT_NUMBER,
        DB_SSLMODE, DB_CONN_MAX_AGE, DOCKER_ENV
    """
    if _get_env_bool("USE_SQLITE"):
        return {
            "default": {
                "ENGINE": "django.db.backends.sqlite3",
                "NAME": BASE_DIR / "flagdesk.sqlite3",
                "ATOMIC_REQUESTS": True,
            }
        }

    default_host = "db" if _get_env_bool("DOCKER_ENV") else "localhost"
    return {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("DB_NAME", "flagdesk"),
            "USER": os.environ.get("DB_USER", "flagdesk"),
            "PASSWORD": os.environ.get("DB_PASSWORD", ""),
            "HOST": os.environ.get("DB_HOST", default_host),
            "PORT": _get_env_int("DB_PORT_NUMBER", 5432),
            # Moderation decisions lock reviewable rows for the request
            "ATOMIC_REQUESTS": True,
            "CONN_MAX_AGE": _get_env_int("DB_CONN_MAX_AGE", 60),
            "CONN_HEALTH_CHECKS": True,
            "OPTIONS": {
                "connect_timeout": 10,
                "sslmode": os.environ.get("DB_SSLMODE", "prefer"),
            },
        }
    }


# =============================================================================
# REDIS / CACHE
# =============================================================================


def get_redis_url() -> str:
    """
    Environment variables:
        REDIS_URL, or REDIS_HOST / REDIS_PORT_NUMBER / REDIS_PASSWORD / REDIS_DB
    """
    if os.environ.get("REDIS_URL"):
        return os.environ["REDIS_URL"]

    host = os.environ.get(
        "REDIS_HOST", "redis" if _get_env_bool("DOCKER_ENV") else "localhost"
    )
    port = _get_env_int("REDIS_PORT_NUMBER", 6379)
    db = _get_env_int("REDIS_DB", 0)
    password = os.environ.get("REDIS_PASSWORD", "")
    auth = f":{password}@" if password else ""
    return f"redis://{auth}{host}:{port}/{db}"


def get_cache_settings(redis_url: str) -> dict:
    """
    django-redis cache. It also holds the refresh-token blacklist, whose
    entries carry their own timeout.
    """
    return {
        "default": {
            "BACKEND": "django_redis.cache.RedisCache",
            "LOCATION": redis_url,
            "TIMEOUT": _get_env_int("CACHE_DEFAULT_TIMEOUT", 300),
            "KEY_PREFIX": "flagdesk",
            "OPTIONS": {
                "CLIENT_CLASS": "django_redis.client.DefaultClient",
                "SOCKET_CONNECT_TIMEOUT": 5,
                "SOCKET_TIMEOUT": 5,
                "CONNECTION_POOL_KWARGS": {"max_connections": 50},
            },
        },
    }


# =============================================================================
# CELERY
# =============================================================================


def get_celery_settings() -> dict:
    """
    Broker on Redis, results in the Django database (django-celery-results),
    periodic moderation chores through django-celery-beat. Serialization
    and time limits are in base.py.

    Environment variables:
        CELERY_BROKER_URL (default: the Redis URL), CELERY_WORKER_CONCURRENCY
    """
    from celery.schedules import crontab

    return {
        "CELERY_BROKER_URL": os.environ.get("CELERY_BROKER_URL", get_redis_url()),
        "CELERY_RESULT_BACKEND": "django-db",
        "CELERY_CACHE_BACKEND": "django-cache",
        "CELERY_RESULT_EXTENDED": True,
        "CELERY_TASK_IGNORE_RESULT": True,
        "CELERY_WORKER_CONCURRENCY": _get_env_int("CELERY_WORKER_CONCURRENCY", 4),
        "CELERY_BEAT_SCHEDULE": {
            "unsilence-expired-users": {
                "task": "flagdesk.tasks.tasks.unsilence_expired_users_task",
                "schedule": crontab(minute=0),
            },
            "auto-defer-stale-flags": {
                "task": "flagdesk.tasks.tasks.auto_defer_stale_flags_task",
                "schedule": crontab(minute=30, hour=3),
            },
        },
    }


# =============================================================================
# CORS
# =============================================================================

LOCAL_ADMIN_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def get_cors_settings(debug: bool = False) -> dict:
    """
    Origins of the moderation client allowed to call the admin API.

    Environment variables:
        CORS_ALLOWED_ORIGINS: comma-separated origins (required in production)
        CORS_ALLOW_ALL_ORIGINS
    """
    origins = _get_env_list(
        "CORS_ALLOWED_ORIGINS", LOCAL_ADMIN_ORIGINS if debug else []
    )
    return {
        "CORS_ALLOW_ALL_ORIGINS": _get_env_bool("CORS_ALLOW_ALL_ORIGINS", debug),
        "CORS_ALLOWED_ORIGINS": origins,
        "CORS_ALLOW_CREDENTIALS": True,
        "CORS_ALLOW_METHODS": ["GET", "OPTIONS", "POST"],
        "CORS_ALLOW_HEADERS": [
            "accept",
            "accept-language",
            "authorization",
            "content-type",
            "x-csrftoken",
            "x-request-id",
        ],
        # Lets the admin client match its calls to server log entries
        "CORS_EXPOSE_HEADERS": ["X-Request-ID"],
        "CSRF_TRUSTED_ORIGINS": origins,
    }


# =============================================================================
# SECURITY
# =============================================================================


def get_security_settings(debug: bool = False) -> dict:
    secure = not debug
    return {
        "SECURE_SSL_REDIRECT": _get_env_bool("SECURE_SSL_REDIRECT", secure),
        "SECURE_PROXY_SSL_HEADER": ("HTTP_X_FORWARDED_PROTO", "https") if secure else None,
        "SECURE_HSTS_SECONDS": 31536000 if secure else 0,
        "SECURE_HSTS_INCLUDE_SUBDOMAINS": secure,
        "SECURE_HSTS_PRELOAD": secure,
        "SECURE_CONTENT_TYPE_NOSNIFF": True,
        "SECURE_REFERRER_POLICY": "same-origin",
        "SESSION_COOKIE_SECURE": secure,
        "CSRF_COOKIE_SECURE": secure,
        "X_FRAME_OPTIONS": "DENY" if secure else "SAMEORIGIN",
    }


def get_allowed_hosts(debug: bool = False) -> list:
    """ALLOWED_HOSTS from the environment; anything goes in debug."""
    return _get_env_list(
        "ALLOWED_HOSTS", ["*"] if debug else ["localhost", "127.0.0.1"]
    )
