"""
Celery application for the storefront API.

DJANGO_SETTINGS_MODULE is set before the app is instantiated so Celery reads
the Django settings (``CELERY_`` prefix).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.base")

app = Celery("storefront")

# Reads Django settings prefixed with CELERY_
app.config_from_object("django.conf:settings", namespace="CELERY")

# Finds tasks.py in every installed app
app.autodiscover_tasks()
