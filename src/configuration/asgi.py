"""
ASGI config for flagdesk.

It exposes the ASGI callable as a module-level variable named ``application``.

Environment Selection:
    Set the DJANGO_ENV environment variable to select the appropriate settings:
    - DJANGO_ENV=development (default) - for local development
    - DJANGO_ENV=production - for production deployments
    - DJANGO_ENV=test - for running tests
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "configuration.settings")

application = get_asgi_application()
