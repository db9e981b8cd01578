"""
Tests for content app - generation jobs, SectionContent upserts, job API.
"""
import json
import threading
from io import StringIO
from types import SimpleNamespace

import pytest
from django.apps import apps
from django.contrib.auth import get_user_model
from django.core.cache import caches
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import IntegrityError, transaction
from django_celery_results.models import TaskResult
from kombu.exceptions import OperationalError
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from tenacity import wait_none

from ai.models import Template
from ai.providers import GeminiContentGenerator
from ai.schema_converter import schema_converter
from ai.section_generator import SectionContentGenerator
from ai.validators import ContentValidator
from content.connections import (
    CeleryJobQueue,
    ConnectionProvider,
    JobStatus,
    NullJobQueue,
)
from content.jobs import ContentGenerationRunner, GenerationJob, GenerationJobError
from content.models import Section, SectionContent
from sites.cache import CacheKeys, NullSiteCache, SiteCache
from sites.models import Page, Site


HERO_SCHEMA = {
    'type': 'object',
    'required': ['headline', 'subheadline', 'ctaText'],
    'properties': {
        'headline': {'type': 'string'},
        'subheadline': {'type': 'string'},
        'ctaText': {'type': 'string'},
    },
}

HERO_COPY = {
    'en': {'headline': 'Discover Rome', 'subheadline': 'The Eternal City awaits', 'ctaText': 'Explore'},
    'es': {'headline': 'Descubre Roma', 'subheadline': 'La Ciudad Eterna te espera', 'ctaText': 'Explorar'},
}


class FakeModels:
    """``genai.Client().models`` replacement answering with ``reply(language)``."""

    def __init__(self, reply):
        self.reply = reply
        self.calls = []
        self._lock = threading.Lock()

    def generate_content(self, model, contents, config):
        prompt = contents[0]['parts'][0]['text']
        language = 'es' if 'Spanish language' in prompt else 'en'
        with self._lock:
            self.calls.append(language)
        data = self.reply(language)
        if isinstance(data, Exception):
            raise data
        return SimpleNamespace(text=json.dumps(data), usage_metadata=None)


@pytest.fixture(autouse=True)
def clear_caches():
    schema_converter.clear()
    caches['default'].clear()
    yield
    schema_converter.clear()
    caches['default'].clear()


@pytest.fixture
def user_model():
    return get_user_model()


@pytest.fixture
def create_user(user_model):
    def _create_user(email="operator@example.com", password="testpass123"):
        return user_model.objects.create_user(email=email, username=email, password=password)
    return _create_user


@pytest.fixture
def hero_template():
    return Template.objects.create(
        name='hero',
        component_name='HeroBanner',
        schema=HERO_SCHEMA,
        system_prompt='You write tourism hero banners.',
        user_prompt_template='Write a hero banner for {locationContext}.',
    )


@pytest.fixture
def site(create_user):
    return Site.objects.create(
        user=create_user(),
        name='Rome Tourism',
        subdomain='rome',
        type='CITY',
        languages=['en', 'es'],
        features={'locationContext': 'Rome, Italy'},
    )


@pytest.fixture
def home_page(site):
    return Page.objects.create(site=site, type='HOME', slug='home', title='Home', order=0)


@pytest.fixture
def hero_section(home_page, hero_template):
    return Section.objects.create(page=home_page, template=hero_template, order=0)


@pytest.fixture
def fake_models():
    return FakeModels(lambda language: HERO_COPY[language])


@pytest.fixture
def make_runner(fake_models):
    def _make_runner(models=None, cache=None, progress=None):
        generator = GeminiContentGenerator(
            api_key='test-api-key',
            max_retries=1,
            client=SimpleNamespace(models=models or fake_models),
            wait=wait_none(),
        )
        return ContentGenerationRunner(
            section_generator=SectionContentGenerator(generator),
            validator=ContentValidator(),
            cache=cache,
            progress=progress,
        )
    return _make_runner


@pytest.mark.django_db
class TestGenerationRunner:

    def test_full_site_generates_every_language_and_publishes(self, site, hero_section, make_runner, fake_models):
        outcome = make_runner().run(GenerationJob(site_id=site.pk))

        contents = {c.language: c for c in SectionContent.objects.filter(section=hero_section)}
        assert set(contents) == {'en', 'es'}
        assert all(c.version == 1 for c in contents.values())
        assert all(c.generated_by == 'gemini' for c in contents.values())
        assert contents['es'].data == {**HERO_COPY['es'], 'ctaLink': '#explore', 'overlayOpacity': 0.4}

        site.refresh_from_db()
        assert site.status == 'PUBLISHED'
        assert outcome.as_dict() == {
            'sections_generated': 1,
            'sections_skipped': 0,
            'contents_saved': 2,
            'failures': [],
        }
        assert sorted(fake_models.calls) == ['en', 'es']

    def test_rerun_without_regenerate_skips(self, site, hero_section, make_runner, fake_models):
        runner = make_runner()
        runner.run(GenerationJob(site_id=site.pk))
        outcome = runner.run(GenerationJob(site_id=site.pk))

        assert SectionContent.objects.filter(section=hero_section).count() == 2
        assert set(SectionContent.objects.values_list('version', flat=True)) == {1}
        assert len(fake_models.calls) == 2
        assert outcome.sections_skipped == 1
        assert outcome.sections_generated == 1

    def test_regenerate_bumps_version(self, site, hero_section, make_runner):
        make_runner().run(GenerationJob(site_id=site.pk))

        new_copy = {'headline': 'Rome Reimagined', 'subheadline': 'Again', 'ctaText': 'Go'}
        models = FakeModels(lambda language: new_copy)
        make_runner(models=models).run(GenerationJob(site_id=site.pk, regenerate=True))

        assert SectionContent.objects.filter(section=hero_section).count() == 2
        for content in SectionContent.objects.filter(section=hero_section):
            assert content.version == 2
            assert content.data['headline'] == 'Rome Reimagined'
        assert len(models.calls) == 2

    def test_missing_language_is_generated(self, site, hero_section, make_runner, fake_models):
        SectionContent.objects.upsert(hero_section, 'en', HERO_COPY['en'], generated_by='manual')

        make_runner().run(GenerationJob(site_id=site.pk))

        assert sorted(fake_models.calls) == ['en', 'es']
        en = SectionContent.objects.get(section=hero_section, language='en')
        assert en.version == 2
        assert en.generated_by == 'gemini'

    def test_partial_language_failure(self, site, hero_section, make_runner):
        models = FakeModels(lambda language: {'headline': 'Solo'} if language == 'es' else HERO_COPY['en'])
        outcome = make_runner(models=models).run(GenerationJob(site_id=site.pk))

        assert list(SectionContent.objects.values_list('language', flat=True)) == ['en']
        assert outcome.sections_generated == 1
        assert [(f.section_id, f.language) for f in outcome.failures] == [(hero_section.pk, 'es')]
        assert 'Schema validation failed' in outcome.failures[0].error
        site.refresh_from_db()
        assert site.status == 'PUBLISHED'

    def test_rule_violation_is_not_persisted(self, site, hero_section, make_runner):
        long_cta = {**HERO_COPY['en'], 'ctaText': 'Click here to start exploring'}
        models = FakeModels(lambda language: long_cta if language == 'en' else HERO_COPY['es'])
        outcome = make_runner(models=models).run(GenerationJob(site_id=site.pk))

        assert list(SectionContent.objects.values_list('language', flat=True)) == ['es']
        assert 'CTA_TOO_LONG' in outcome.failures[0].error

    def test_sanitized_content_is_stored(self, site, hero_section, make_runner):
        html = {**HERO_COPY['en'], 'headline': '<h1>Discover   Rome</h1>'}
        models = FakeModels(lambda language: html)
        make_runner(models=models).run(GenerationJob(site_id=site.pk, language='en'))

        assert SectionContent.objects.get(section=hero_section).data['headline'] == 'Discover Rome'

    def test_language_scoped_job(self, site, hero_section, make_runner, fake_models):
        make_runner().run(GenerationJob(site_id=site.pk, language='es'))

        assert list(SectionContent.objects.values_list('language', flat=True)) == ['es']
        assert fake_models.calls == ['es']

    def test_section_scoped_job_does_not_publish(self, site, home_page, hero_section, hero_template, make_runner):
        other = Section.objects.create(page=home_page, template=hero_template, order=1)
        make_runner().run(GenerationJob(site_id=site.pk, section_id=other.pk, regenerate=True))

        assert set(SectionContent.objects.values_list('section_id', flat=True)) == {other.pk}
        site.refresh_from_db()
        assert site.status == 'DRAFT'

    def test_page_scoped_job(self, site, hero_section, hero_template, make_runner):
        about = Page.objects.create(site=site, type='GUIDE', slug='about', order=1)
        about_section = Section.objects.create(page=about, template=hero_template, order=0)

        outcome = make_runner().run(GenerationJob(site_id=site.pk, page_id=about.pk))

        assert set(SectionContent.objects.values_list('section_id', flat=True)) == {about_section.pk}
        assert outcome.sections_generated == 1
        site.refresh_from_db()
        assert site.status == 'DRAFT'

    def test_sections_processed_in_page_then_section_order(self, site, home_page, hero_template, make_runner):
        guide = Page.objects.create(site=site, type='GUIDE', slug='guide', order=1)
        late = Section.objects.create(page=home_page, template=hero_template, order=5)
        guide_first = Section.objects.create(page=guide, template=hero_template, order=0)
        early = Section.objects.create(page=home_page, template=hero_template, order=1)

        runner = make_runner()
        sections = runner.resolve_sections(site, GenerationJob(site_id=site.pk))

        assert [s.pk for s in sections] == [early.pk, late.pk, guide_first.pk]

    def test_progress_reported_per_section(self, site, home_page, hero_section, hero_template, make_runner):
        Section.objects.create(page=home_page, template=hero_template, order=1)
        reported = []
        make_runner(progress=reported.append).run(GenerationJob(site_id=site.pk))

        assert reported == [50, 100]

    def test_site_without_sections(self, site, make_runner):
        reported = []
        outcome = make_runner(progress=reported.append).run(GenerationJob(site_id=site.pk))

        assert outcome.sections_generated == 0
        assert reported == [100]
        site.refresh_from_db()
        assert site.status == 'PUBLISHED'

    def test_unknown_site(self, make_runner):
        with pytest.raises(GenerationJobError, match='Site 999 not found'):
            make_runner().run(GenerationJob(site_id=999))

    def test_section_from_another_site(self, site, hero_section, hero_template, create_user, make_runner):
        other_site = Site.objects.create(user=create_user('other@example.com'), name='Paris', subdomain='paris')
        with pytest.raises(GenerationJobError):
            make_runner().run(GenerationJob(site_id=other_site.pk, section_id=hero_section.pk))

    def test_page_from_another_site(self, home_page, create_user, make_runner):
        other_site = Site.objects.create(user=create_user('other@example.com'), name='Paris', subdomain='paris')
        with pytest.raises(GenerationJobError):
            make_runner().run(GenerationJob(site_id=other_site.pk, page_id=home_page.pk))

    def test_inactive_template_fails_the_job(self, site, hero_section, hero_template, make_runner):
        hero_template.is_active = False
        hero_template.save()

        with pytest.raises(GenerationJobError, match='Inactive template'):
            make_runner().run(GenerationJob(site_id=site.pk))
        assert not SectionContent.objects.exists()

    def test_saved_content_invalidates_cache(self, site, hero_section, make_runner):
        cache = SiteCache(caches['default'], ttl=60)
        key = CacheKeys.section_content(hero_section.pk, 'en')
        cache.set(key, {'stale': True})

        make_runner(cache=cache).run(GenerationJob(site_id=site.pk, section_id=hero_section.pk))

        assert cache.get(key) is None


@pytest.mark.django_db
class TestSectionContentUpsert:

    def test_create_then_update(self, hero_section):
        content, created = SectionContent.objects.upsert(
            hero_section, 'en', {'headline': 'v1'}, generated_by='gemini', image_urls=['https://img/1.jpg'],
        )
        assert created
        assert content.version == 1

        content, created = SectionContent.objects.upsert(hero_section, 'en', {'headline': 'v2'}, generated_by='gemini')
        assert not created
        assert content.version == 2
        assert content.data == {'headline': 'v2'}
        assert content.image_urls == ['https://img/1.jpg']
        assert SectionContent.objects.count() == 1

    def test_one_row_per_section_and_language(self, hero_section):
        SectionContent.objects.create(section=hero_section, language='en', data={})
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                SectionContent.objects.create(section=hero_section, language='en', data={})


@pytest.mark.django_db
class TestGenerateContentTask:

    def test_returns_outcome(self, monkeypatch, site, hero_section, make_runner):
        from content import tasks

        monkeypatch.setattr(tasks, 'build_runner', lambda progress=None: make_runner(progress=progress))
        result = tasks.generate_content(site_id=site.pk)

        assert result['sections_generated'] == 1
        assert result['contents_saved'] == 2
        assert result['failures'] == []

    def test_blank_language_means_every_site_language(self, monkeypatch, site, hero_section, make_runner,
                                                      fake_models):
        from content import tasks

        monkeypatch.setattr(tasks, 'build_runner', lambda progress=None: make_runner(progress=progress))
        result = tasks.generate_content(site_id=site.pk, language='', regenerate=1)

        assert result['contents_saved'] == 2
        assert sorted(fake_models.calls) == ['en', 'es']

    def test_job_payload_round_trip(self):
        payload = GenerationJob(site_id=3, page_id=8, language='fr').as_payload()
        assert payload == {'site_id': 3, 'page_id': 8, 'language': 'fr', 'regenerate': False}
        assert GenerationJob.from_payload(payload) == GenerationJob(site_id=3, page_id=8, language='fr')

    def test_resolution_error_propagates(self, monkeypatch, make_runner):
        from content import tasks

        monkeypatch.setattr(tasks, 'build_runner', lambda progress=None: make_runner(progress=progress))
        with pytest.raises(GenerationJobError):
            tasks.generate_content(site_id=12345)

    def test_task_routing(self, settings):
        assert settings.CELERY_TASK_ROUTES['content.generate_content'] == {'queue': 'content-generation'}


class RecordingQueue:
    enabled = True

    def __init__(self, statuses=None):
        self.jobs = []
        self.statuses = statuses or {}

    def enqueue(self, job):
        self.jobs.append(job)
        return f'job-{len(self.jobs)}'

    def get_status(self, job_id):
        return self.statuses.get(job_id)


class FakeTask:
    """Stands in for the ``generate_content`` task object."""

    name = 'content.generate_content'

    def __init__(self, states=None, error=None):
        self.sent = []
        self.states = states or {}
        self.error = error

    def apply_async(self, kwargs, **options):
        if self.error is not None:
            raise self.error
        self.sent.append(kwargs)
        return SimpleNamespace(id=f'task-{len(self.sent)}')

    def AsyncResult(self, job_id):
        state, info = self.states.get(job_id, ('PENDING', None))
        return SimpleNamespace(state=state, info=info)


@pytest.mark.django_db
class TestConnections:

    def test_null_queue(self):
        queue = NullJobQueue()
        assert queue.enqueue(GenerationJob(site_id=1)) is None
        assert queue.get_status('anything') is None

    def test_enqueue_sends_payload(self):
        task = FakeTask()
        job_id = CeleryJobQueue(task=task).enqueue(GenerationJob(site_id=4, section_id=9, regenerate=True))

        assert job_id == 'task-1'
        assert task.sent == [{'site_id': 4, 'section_id': 9, 'regenerate': True}]
        assert TaskResult.objects.get(task_id='task-1').status == 'PENDING'

    def test_enqueue_keeps_state_stored_by_worker(self):
        TaskResult.objects.create(task_id='task-1', status='STARTED')
        CeleryJobQueue(task=FakeTask()).enqueue(GenerationJob(site_id=4))

        assert TaskResult.objects.get(task_id='task-1').status == 'STARTED'

    def test_enqueue_degrades_when_broker_is_down(self):
        task = FakeTask(error=OperationalError('Error 111 connecting to localhost:6379. Connection refused.'))

        assert CeleryJobQueue(task=task).enqueue(GenerationJob(site_id=4)) is None
        assert not TaskResult.objects.exists()

    def test_queued_job_status(self):
        queue = CeleryJobQueue(task=FakeTask())
        job_id = queue.enqueue(GenerationJob(site_id=4))

        assert queue.get_status(job_id) == JobStatus(job_id, 'queued')

    def test_unknown_job_id(self):
        assert CeleryJobQueue(task=FakeTask()).get_status('not-a-real-job') is None

    @pytest.mark.parametrize('state, info, expected', [
        ('RETRY', None, JobStatus('j', 'queued')),
        ('STARTED', {}, JobStatus('j', 'active', progress=0)),
        ('PROGRESS', {'progress': 40}, JobStatus('j', 'active', progress=40)),
        ('SUCCESS', {'sections_generated': 2}, JobStatus('j', 'completed', progress=100,
                                                         result={'sections_generated': 2})),
        ('FAILURE', GenerationJobError('Site 9 not found'), JobStatus('j', 'failed', error='Site 9 not found')),
    ])
    def test_status_mapping(self, state, info, expected):
        task = FakeTask(states={'j': (state, info)})
        assert CeleryJobQueue(task=task).get_status('j') == expected

    def test_provider_from_settings(self, settings):
        settings.CONTENT_QUEUE_ENABLED = False
        settings.SITE_CACHE_ENABLED = True
        provider = ConnectionProvider.from_settings()

        assert isinstance(provider.queue, NullJobQueue)
        assert isinstance(provider.cache, SiteCache)

        settings.CONTENT_QUEUE_ENABLED = True
        settings.SITE_CACHE_ENABLED = False
        provider = ConnectionProvider.from_settings()

        assert isinstance(provider.queue, CeleryJobQueue)
        assert isinstance(provider.cache, NullSiteCache)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, site):
    refresh = RefreshToken.for_user(site.user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, site.user


@pytest.fixture
def queue(monkeypatch):
    queue = RecordingQueue()
    monkeypatch.setattr(apps.get_app_config('content'), 'connections',
                        ConnectionProvider(queue=queue, cache=NullSiteCache()))
    return queue


@pytest.mark.django_db
class TestContentJobAPI:

    def test_generate_site_content(self, authenticated_client, site, queue):
        client, user = authenticated_client
        response = client.post(f'/api/v1/sites/{site.pk}/generate-content/', {}, format='json')

        assert response.status_code == 202
        assert response.data == {'job_id': 'job-1', 'status': 'queued'}
        assert queue.jobs[0].as_payload() == {'site_id': site.pk, 'regenerate': False}

    def test_generate_site_content_with_options(self, authenticated_client, site, queue):
        client, user = authenticated_client
        response = client.post(
            f'/api/v1/sites/{site.pk}/generate-content/',
            {'language': 'es', 'regenerate': True},
            format='json',
        )

        assert response.status_code == 202
        assert queue.jobs[0].as_payload() == {'site_id': site.pk, 'language': 'es', 'regenerate': True}

    def test_invalid_body(self, authenticated_client, site, queue):
        client, user = authenticated_client
        response = client.post(f'/api/v1/sites/{site.pk}/generate-content/', {'regenerate': 'maybe'}, format='json')

        assert response.status_code == 400
        assert 'error' in response.data
        assert queue.jobs == []

    def test_foreign_site_is_not_found(self, authenticated_client, create_user, queue):
        client, user = authenticated_client
        other = Site.objects.create(user=create_user('other@example.com'), name='Paris', subdomain='paris')

        response = client.post(f'/api/v1/sites/{other.pk}/generate-content/', {}, format='json')

        assert response.status_code == 404
        assert queue.jobs == []

    def test_queue_unavailable(self, authenticated_client, site, monkeypatch):
        client, user = authenticated_client
        monkeypatch.setattr(apps.get_app_config('content'), 'connections', ConnectionProvider())

        response = client.post(f'/api/v1/sites/{site.pk}/generate-content/', {}, format='json')

        assert response.status_code == 503
        assert response.data == {'error': 'Content generation failed'}

    def test_generate_page_content(self, authenticated_client, site, home_page, queue):
        client, user = authenticated_client
        response = client.post(f'/api/v1/pages/{home_page.pk}/generate-content/', {}, format='json')

        assert response.status_code == 202
        assert queue.jobs[0].as_payload() == {'site_id': site.pk, 'page_id': home_page.pk, 'regenerate': False}

    def test_regenerate_section(self, authenticated_client, site, hero_section, queue):
        client, user = authenticated_client
        response = client.post(f'/api/v1/sections/{hero_section.pk}/regenerate/', {'language': 'fr'}, format='json')

        assert response.status_code == 202
        assert queue.jobs[0].as_payload() == {
            'site_id': site.pk, 'section_id': hero_section.pk, 'language': 'fr', 'regenerate': True,
        }

    def test_job_status(self, authenticated_client, queue):
        client, user = authenticated_client
        queue.statuses['job-7'] = JobStatus('job-7', 'active', progress=50)

        response = client.get('/api/v1/content-jobs/job-7/')

        assert response.status_code == 200
        assert response.data == {
            'job_id': 'job-7', 'status': 'active', 'progress': 50, 'result': None, 'error': None,
        }

    def test_unknown_job(self, authenticated_client, queue):
        client, user = authenticated_client
        response = client.get('/api/v1/content-jobs/nope/')
        assert response.status_code == 404

    def test_requires_authentication(self, api_client, site, queue):
        response = api_client.post(f'/api/v1/sites/{site.pk}/generate-content/', {}, format='json')
        assert response.status_code == 401


@pytest.mark.django_db
class TestGenerateSiteContentCommand:

    def test_sync_run(self, monkeypatch, site, hero_section, make_runner):
        from content.management.commands import generate_site_content

        monkeypatch.setattr(generate_site_content, 'build_runner',
                            lambda progress=None: make_runner(progress=progress))
        out = StringIO()
        call_command('generate_site_content', str(site.pk), '--sync', stdout=out)

        assert '"contents_saved": 2' in out.getvalue()
        assert 'Progress: 100%' in out.getvalue()
        assert SectionContent.objects.count() == 2

    def test_sync_run_unknown_site(self, monkeypatch, make_runner):
        from content.management.commands import generate_site_content

        monkeypatch.setattr(generate_site_content, 'build_runner',
                            lambda progress=None: make_runner(progress=progress))
        with pytest.raises(CommandError, match='not found'):
            call_command('generate_site_content', '999', '--sync')

    def test_enqueue(self, site, queue):
        out = StringIO()
        call_command('generate_site_content', str(site.pk), '--section', '3', '--regenerate', stdout=out)

        assert 'Queued content job job-1' in out.getvalue()
        assert queue.jobs[0].as_payload() == {'site_id': site.pk, 'section_id': 3, 'regenerate': True}

    def test_enqueue_without_broker(self, site, monkeypatch):
        monkeypatch.setattr(apps.get_app_config('content'), 'connections', ConnectionProvider())
        with pytest.raises(CommandError, match='queue unavailable'):
            call_command('generate_site_content', str(site.pk))
