# settings/development.py
"""
Local development: SQLite, tasks run inline, browsable API.

Set USE_SQLITE=false to use PostgreSQL, USE_REDIS_CACHE=true to use Redis,
and CELERY_BROKER_URL to run tasks on a real worker.
"""

from .base import *
from .components import (
    _get_env_bool,
    get_allowed_hosts,
    get_cache_settings,
    get_celery_settings,
    get_cors_settings,
    get_database_settings,
    get_redis_url,
    get_security_settings,
)

ENVIRONMENT = "development"
DEBUG = True

os.environ.setdefault("USE_SQLITE", "true")
DATABASES = get_database_settings()

if _get_env_bool("USE_REDIS_CACHE", False):
    CACHES = get_cache_settings(get_redis_url())

for _group in (
    get_celery_settings(),
    get_cors_settings(debug=True),
    get_security_settings(debug=True),
):
    locals().update(_group)

CELERY_TASK_ALWAYS_EAGER = not os.environ.get("CELERY_BROKER_URL")

ALLOWED_HOSTS = get_allowed_hosts(debug=True)
INTERNAL_IPS = ["127.0.0.1"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {"anon": "10000/day", "user": "100000/day"},
}
