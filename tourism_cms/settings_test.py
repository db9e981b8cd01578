"""
Test settings.

SQLite, local-memory cache and eager Celery so the suite runs without
Postgres, Redis or a broker.
"""

from .settings import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'tourism-cms-tests',
    }
}

SITE_CACHE_ENABLED = True
CONTENT_QUEUE_ENABLED = False

CELERY_BROKER_URL = 'memory://'
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

GEMINI_API_KEY = 'test-api-key'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

# Let pytest's caplog see application loggers.
for _logger in ('ai', 'content'):
    LOGGING['loggers'][_logger]['propagate'] = True
