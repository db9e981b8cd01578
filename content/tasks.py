"""
Celery task for the content-generation queue.
"""
import logging

from celery import shared_task

from .jobs import GenerationJob, build_runner

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name='content.generate_content',
    autoretry_for=(Exception,),
    max_retries=2,  # 3 attempts in total
    retry_backoff=2,
    retry_backoff_max=600,
    retry_jitter=False,
)
def generate_content(self, site_id, page_id=None, section_id=None, language=None, regenerate=False):
    """
    Generate section content for a site, page or single section.

    Returns the job outcome: ``sections_generated``, ``sections_skipped``,
    ``contents_saved`` and per-language ``failures``.
    """
    job = GenerationJob.from_payload({
        'site_id': site_id,
        'page_id': page_id,
        'section_id': section_id,
        'language': language,
        'regenerate': regenerate,
    })
    logger.info(f"[Attempt {self.request.retries + 1}] Processing content job {self.request.id}: {job.as_payload()}")

    def report(percent):
        if self.request.id and not self.request.is_eager:
            self.update_state(state='PROGRESS', meta={'progress': percent})

    outcome = build_runner(progress=report).run(job)
    return outcome.as_dict()
