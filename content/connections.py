"""
Process-wide connections for content generation: the job queue and the site cache.

Both are built once in ``ContentConfig.ready()`` from settings and handed to
callers through ``get_connections()``. When the broker or the cache is not
configured a null implementation is selected instead, so every operation
degrades to ``None``/``False`` rather than raising.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from django.apps import apps
from django.conf import settings
from django.core.cache import caches
from django.db import IntegrityError
from django_celery_results.models import TaskResult
from kombu.exceptions import OperationalError
from redis.exceptions import RedisError

from sites.cache import NullSiteCache, SiteCache

logger = logging.getLogger(__name__)

QUEUED = 'queued'
ACTIVE = 'active'
COMPLETED = 'completed'
FAILED = 'failed'

CELERY_STATES = {
    'PENDING': QUEUED,
    'RECEIVED': QUEUED,
    'RETRY': QUEUED,
    'STARTED': ACTIVE,
    'PROGRESS': ACTIVE,
    'SUCCESS': COMPLETED,
    'FAILURE': FAILED,
    'REVOKED': FAILED,
}

ENQUEUE_RETRY_POLICY = {
    'max_retries': 2,
    'interval_start': 0,
    'interval_step': 0.5,
    'interval_max': 1,
}


@dataclass
class JobStatus:
    job_id: str
    status: str
    progress: int = 0
    result: Optional[Any] = None
    error: Optional[str] = None

    def as_dict(self):
        return {
            'job_id': self.job_id,
            'status': self.status,
            'progress': self.progress,
            'result': self.result,
            'error': self.error,
        }


class NullJobQueue:
    """Job queue used when no broker is configured."""

    enabled = False

    def enqueue(self, job) -> Optional[str]:
        logger.warning(f"Job queue unavailable, dropping job for site {job.site_id}")
        return None

    def get_status(self, job_id) -> Optional[JobStatus]:
        return None


class CeleryJobQueue:
    """Submits generation jobs to the ``content-generation`` Celery queue."""

    enabled = True

    def __init__(self, task=None):
        self._task = task

    @property
    def task(self):
        if self._task is None:
            from .tasks import generate_content
            self._task = generate_content
        return self._task

    def enqueue(self, job) -> Optional[str]:
        try:
            result = self.task.apply_async(
                kwargs=job.as_payload(),
                retry=True,
                retry_policy=ENQUEUE_RETRY_POLICY,
            )
        except (OperationalError, RedisError) as e:
            logger.error(f"Failed to enqueue content job for site {job.site_id}: {e}")
            return None
        logger.info(f"Enqueued content job {result.id} for site {job.site_id}")
        self.record_pending(result.id)
        return result.id

    def record_pending(self, job_id):
        """
        Store a PENDING result row for a freshly queued job.

        Celery reports PENDING for any id it has never seen, so this row is
        what tells a queued job apart from an unknown one.
        """
        try:
            TaskResult.objects.get_or_create(
                task_id=job_id,
                defaults={'status': 'PENDING', 'task_name': self.task.name},
            )
        except IntegrityError:
            # The worker stored a state first.
            logger.debug(f"Result row for content job {job_id} already exists")

    def is_known(self, job_id) -> bool:
        return TaskResult.objects.filter(task_id=job_id).exists()

    def get_status(self, job_id) -> Optional[JobStatus]:
        result = self.task.AsyncResult(str(job_id))
        try:
            state = result.state
            info = result.info
        except (OperationalError, RedisError) as e:
            logger.error(f"Failed to read status of content job {job_id}: {e}")
            return None

        if state == 'PENDING' and not self.is_known(str(job_id)):
            return None

        status = CELERY_STATES.get(state, QUEUED)
        job = JobStatus(job_id=str(job_id), status=status)
        if status == ACTIVE and isinstance(info, dict):
            job.progress = int(info.get('progress', 0))
        elif status == COMPLETED:
            job.progress = 100
            job.result = info
        elif status == FAILED:
            job.error = str(info) if info else 'Content generation failed'
        return job


@dataclass
class ConnectionProvider:
    queue: Any = field(default_factory=NullJobQueue)
    cache: Any = field(default_factory=NullSiteCache)

    @classmethod
    def from_settings(cls):
        if getattr(settings, 'CONTENT_QUEUE_ENABLED', False):
            queue = CeleryJobQueue()
        else:
            logger.info("CELERY_BROKER_URL not set, content jobs will not be queued")
            queue = NullJobQueue()

        if getattr(settings, 'SITE_CACHE_ENABLED', False):
            cache = SiteCache(caches['default'], ttl=settings.SITE_CACHE_TTL)
        else:
            cache = NullSiteCache()
        return cls(queue=queue, cache=cache)


def get_connections() -> ConnectionProvider:
    config = apps.get_app_config('content')
    if config.connections is None:
        config.connections = ConnectionProvider.from_settings()
    return config.connections
