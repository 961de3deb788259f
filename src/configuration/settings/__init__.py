# settings/__init__.py
"""
Picks the settings module from DJANGO_ENV.

    development, dev, local (default)  -> development.py
    production, prod                   -> production.py
    test, testing                      -> test.py
"""

import os
import sys

ENVIRONMENT_MAP = {
    "production": "production",
    "prod": "production",
    "test": "test",
    "testing": "test",
    "development": "development",
    "dev": "development",
    "local": "development",
}

CURRENT_ENVIRONMENT = ENVIRONMENT_MAP.get(
    os.environ.get("DJANGO_ENV", "development").lower(), "development"
)

# The autoreloader child sets RUN_MAIN; announce once
if not os.environ.get("RUN_MAIN"):
    print(f"[flagdesk] {CURRENT_ENVIRONMENT} settings", file=sys.stderr)

if CURRENT_ENVIRONMENT == "production":
    from .production import *  # noqa: F403
elif CURRENT_ENVIRONMENT == "test":
    from .test import *  # noqa: F403
else:
    from .development import *  # noqa: F403
