"""
WSGI config for flagdesk.

It exposes the WSGI callable as a module-level variable named ``application``.

Environment Selection:
    Set the DJANGO_ENV environment variable to select the appropriate settings:
    - DJANGO_ENV=development (default) - for local development
    - DJANGO_ENV=production - for production deployments
    - DJANGO_ENV=test - for running tests
"""

import os

from django.core.wsgi import get_wsgi_application

# In production, set DJANGO_ENV=production in your web server config
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "configuration.settings")

application = get_wsgi_application()
