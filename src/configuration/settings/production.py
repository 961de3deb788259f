# settings/production.py
"""
Production: PostgreSQL, Redis cache and broker, Sentry, HTTPS only.

Required environment: SECRET_KEY, DB_NAME, DB_USER, DB_PASSWORD, DB_HOST.
Set ALLOWED_HOSTS and CORS_ALLOWED_ORIGINS for the moderation client.
"""

from .base import *
from .base import _validate_required_settings
from .components import (
    _get_env_float,
    get_allowed_hosts,
    get_cache_settings,
    get_celery_settings,
    get_cors_settings,
    get_database_settings,
    get_redis_url,
    get_security_settings,
)

ENVIRONMENT = "production"
DEBUG = False

_validate_required_settings()

DATABASES = get_database_settings()
CACHES = get_cache_settings(get_redis_url())

for _group in (
    get_celery_settings(),
    get_cors_settings(debug=False),
    get_security_settings(debug=False),
):
    locals().update(_group)

ALLOWED_HOSTS = get_allowed_hosts(debug=False)

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING").upper()

if os.environ.get("SENTRY_DSN"):
    import sentry_sdk
    from sentry_sdk.integrations.celery import CeleryIntegration
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=os.environ["SENTRY_DSN"],
        integrations=[DjangoIntegration(), CeleryIntegration()],
        traces_sample_rate=_get_env_float("SENTRY_TRACES_SAMPLE_RATE", 0.1),
        send_default_pii=False,
        environment=ENVIRONMENT,
    )
