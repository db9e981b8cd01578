"""
Management command to (re)generate section content for a site.
Usage: python manage.py generate_site_content <site_id> [--page ID] [--section ID]
       [--language CODE] [--regenerate] [--sync]
"""
import json

from django.core.management.base import BaseCommand, CommandError

from content.connections import get_connections
from content.jobs import GenerationJob, GenerationJobError, build_runner


class Command(BaseCommand):
    help = 'Queue (or run inline with --sync) a content generation job for a site'

    def add_arguments(self, parser):
        parser.add_argument('site_id', type=int)
        parser.add_argument('--page', type=int, dest='page_id')
        parser.add_argument('--section', type=int, dest='section_id')
        parser.add_argument('--language')
        parser.add_argument('--regenerate', action='store_true')
        parser.add_argument('--sync', action='store_true', help='Run in this process instead of queueing')

    def handle(self, *args, **options):
        job = GenerationJob(
            site_id=options['site_id'],
            page_id=options.get('page_id'),
            section_id=options.get('section_id'),
            language=options.get('language'),
            regenerate=options['regenerate'],
        )

        if options['sync']:
            def progress(percent):
                self.stdout.write(f'Progress: {percent}%')

            try:
                outcome = build_runner(progress=progress).run(job)
            except GenerationJobError as e:
                raise CommandError(str(e))

            self.stdout.write(json.dumps(outcome.as_dict(), indent=2))
            if outcome.failures:
                self.stdout.write(self.style.WARNING(f'{len(outcome.failures)} language(s) failed.'))
            else:
                self.stdout.write(self.style.SUCCESS('Content generation completed.'))
            return

        job_id = get_connections().queue.enqueue(job)
        if job_id is None:
            raise CommandError('Content generation failed: job queue unavailable')
        self.stdout.write(self.style.SUCCESS(f'Queued content job {job_id}'))
