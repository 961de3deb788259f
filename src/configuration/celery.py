import os

from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "configuration.settings")

app = Celery("flagdesk")

# Beat schedule, task routes and broker come from the CELERY_* settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up flagdesk.tasks
app.autodiscover_tasks()
