"""
Celery configuration for tourism_cms.

The content-generation worker runs as:
    celery -A tourism_cms worker -Q content-generation -c 1
"""
import os
from celery import Celery

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'tourism_cms.settings')

app = Celery('tourism_cms')

# Load configuration from Django settings with CELERY namespace
app.config_from_object('django.conf:settings', namespace='CELERY')

# Picks up content/tasks.py
app.autodiscover_tasks()
