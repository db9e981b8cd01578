"""
Tests for sites app - public read path and site cache.
"""
import pytest
from django.apps import apps
from django.contrib.auth import get_user_model
from django.core.cache import caches
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from ai.models import Template
from content.connections import ConnectionProvider
from content.models import Section, SectionContent
from sites.cache import CacheKeys, NullSiteCache, SiteCache
from sites.models import Page, Site


@pytest.fixture(autouse=True)
def clear_cache():
    caches['default'].clear()
    yield
    caches['default'].clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_model():
    return get_user_model()


@pytest.fixture
def create_user(user_model):
    def _create_user(email="test@example.com", password="testpass123"):
        return user_model.objects.create_user(
            email=email,
            username=email,
            password=password
        )
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, user


@pytest.fixture
def create_site(create_user):
    def _create_site(user=None, name="Lisbon", subdomain="lisbon", status='PUBLISHED', languages=None):
        if user is None:
            user = create_user()
        return Site.objects.create(
            user=user,
            name=name,
            subdomain=subdomain,
            status=status,
            languages=['en', 'pt'] if languages is None else languages,
        )
    return _create_site


@pytest.fixture
def template():
    return Template.objects.create(
        name='hero',
        component_name='HeroBanner',
        schema={'type': 'object', 'properties': {'headline': {'type': 'string'}}},
        system_prompt='You write hero banners.',
        user_prompt_template='Hero for {siteName}.',
    )


@pytest.fixture
def site_cache(monkeypatch):
    cache = SiteCache(caches['default'], ttl=60)
    monkeypatch.setattr(apps.get_app_config('content'), 'connections',
                        ConnectionProvider(cache=cache))
    return cache


@pytest.fixture
def published_page(create_site, template):
    site = create_site()
    page = Page.objects.create(site=site, type='HOME', slug='home', title='Home')
    first = Section.objects.create(page=page, template=template, order=0)
    second = Section.objects.create(page=page, template=template, order=1)
    SectionContent.objects.create(section=first, language='en', data={'headline': 'Welcome'})
    SectionContent.objects.create(section=first, language='pt', data={'headline': 'Bem-vindo'})
    SectionContent.objects.create(section=second, language='en', data={'headline': 'Tram 28'})
    return site, page, first, second


@pytest.mark.django_db
class TestSiteModel:

    def test_location_context_defaults_to_name(self, create_site):
        site = create_site()
        assert site.location_context == 'Lisbon'

        site.features = {'locationContext': 'Lisbon, Portugal'}
        assert site.location_context == 'Lisbon, Portugal'

    def test_get_languages(self, create_site):
        lisbon = create_site()
        assert lisbon.get_languages() == ['en', 'pt']
        site = create_site(user=lisbon.user, subdomain='porto', languages=[])
        assert site.get_languages() == ['en']

    def test_mark_published(self, create_site):
        site = create_site(status='DRAFT')
        site.mark_published()
        site.refresh_from_db()
        assert site.status == 'PUBLISHED'


@pytest.mark.django_db
class TestPublicPage:

    def test_page_content_in_requested_language(self, api_client, published_page, site_cache):
        site, page, first, second = published_page
        response = api_client.get('/api/v1/public/sites/lisbon/pages/home/?language=pt')

        assert response.status_code == 200
        assert response.data['site']['subdomain'] == 'lisbon'
        sections = response.data['page']['sections']
        assert [s['section_id'] for s in sections] == [first.pk, second.pk]
        assert sections[0]['data'] == {'headline': 'Bem-vindo'}
        assert sections[0]['language'] == 'pt'
        # No Portuguese copy yet; served in the default language.
        assert sections[1]['data'] == {'headline': 'Tram 28'}
        assert sections[1]['language'] == 'en'

    def test_defaults_to_site_language(self, api_client, published_page, site_cache):
        response = api_client.get('/api/v1/public/sites/lisbon/pages/home/')

        assert response.status_code == 200
        assert response.data['page']['language'] == 'en'
        assert response.data['page']['sections'][0]['data'] == {'headline': 'Welcome'}

    def test_second_read_is_served_from_cache(self, api_client, published_page, site_cache,
                                              django_assert_num_queries):
        site, page, first, second = published_page
        api_client.get('/api/v1/public/sites/lisbon/pages/home/')

        assert site_cache.get(CacheKeys.page_content(page.pk, 'en')) is not None
        assert site_cache.get(CacheKeys.site_by_subdomain('lisbon'))['id'] == site.pk

        # Only the page guard touches the database.
        with django_assert_num_queries(1):
            response = api_client.get('/api/v1/public/sites/lisbon/pages/home/')
        assert response.status_code == 200

    def test_unlisted_language_served_in_default_language(self, api_client, published_page, site_cache):
        site, page, first, second = published_page
        response = api_client.get('/api/v1/public/sites/lisbon/pages/home/?language=fr')

        assert response.status_code == 200
        assert response.data['page']['language'] == 'en'
        assert response.data['page']['sections'][0]['data'] == {'headline': 'Welcome'}
        assert site_cache.get(CacheKeys.page_content(page.pk, 'fr')) is None
        assert site_cache.get(CacheKeys.section_content(first.pk, 'fr')) is None

    def test_unlisted_language_sees_regenerated_content(self, api_client, published_page, site_cache):
        site, page, first, second = published_page
        api_client.get('/api/v1/public/sites/lisbon/pages/home/?language=fr')

        SectionContent.objects.upsert(first, 'en', {'headline': 'Regenerated'}, generated_by='gemini')
        site_cache.invalidate_section(first)

        response = api_client.get('/api/v1/public/sites/lisbon/pages/home/?language=fr')
        assert response.data['page']['sections'][0]['data'] == {'headline': 'Regenerated'}

    def test_unpublished_site_is_not_found(self, api_client, create_site, site_cache):
        create_site(status='DRAFT')
        response = api_client.get('/api/v1/public/sites/lisbon/pages/home/')
        assert response.status_code == 404

    def test_unknown_page(self, api_client, published_page, site_cache):
        response = api_client.get('/api/v1/public/sites/lisbon/pages/nightlife/')
        assert response.status_code == 404
        assert response.data == {'error': 'Page not found'}

    def test_works_without_cache(self, api_client, published_page, monkeypatch):
        monkeypatch.setattr(apps.get_app_config('content'), 'connections', ConnectionProvider())
        response = api_client.get('/api/v1/public/sites/lisbon/pages/home/?language=pt')

        assert response.status_code == 200
        assert len(response.data['page']['sections']) == 2


@pytest.mark.django_db
class TestCacheInvalidation:

    def test_invalidate_section(self, authenticated_client, create_site, template, site_cache):
        client, user = authenticated_client
        site = create_site(user=user)
        page = Page.objects.create(site=site, slug='home')
        section = Section.objects.create(page=page, template=template)
        for language in ('en', 'pt'):
            site_cache.set(CacheKeys.section_content(section.pk, language), {'stale': True})
            site_cache.set(CacheKeys.page_content(page.pk, language), {'stale': True})

        response = client.post('/api/v1/cache/invalidate/', {'type': 'section', 'id': section.pk}, format='json')

        assert response.status_code == 200
        assert response.data == {'type': 'section', 'id': section.pk, 'invalidated': True}
        for language in ('en', 'pt'):
            assert site_cache.get(CacheKeys.section_content(section.pk, language)) is None
            assert site_cache.get(CacheKeys.page_content(page.pk, language)) is None

    def test_invalidate_site(self, authenticated_client, create_site, template, site_cache):
        client, user = authenticated_client
        site = create_site(user=user)
        page = Page.objects.create(site=site, slug='home')
        keys = [
            CacheKeys.site_by_subdomain('lisbon'),
            CacheKeys.site_pages(site.pk),
            CacheKeys.page_content(page.pk, 'pt'),
        ]
        for key in keys:
            site_cache.set(key, {'stale': True})

        response = client.post('/api/v1/cache/invalidate/', {'type': 'site', 'id': site.pk}, format='json')

        assert response.status_code == 200
        assert all(site_cache.get(key) is None for key in keys)

    def test_invalidate_page(self, authenticated_client, create_site, site_cache):
        client, user = authenticated_client
        site = create_site(user=user)
        page = Page.objects.create(site=site, slug='home')
        site_cache.set(CacheKeys.site_pages(site.pk), [{'id': page.pk}])

        response = client.post('/api/v1/cache/invalidate/', {'type': 'page', 'id': page.pk}, format='json')

        assert response.status_code == 200
        assert site_cache.get(CacheKeys.site_pages(site.pk)) is None

    def test_foreign_site(self, authenticated_client, create_site, create_user, site_cache):
        client, user = authenticated_client
        other = create_site(user=create_user('other@example.com'))

        response = client.post('/api/v1/cache/invalidate/', {'type': 'site', 'id': other.pk}, format='json')
        assert response.status_code == 404

    def test_invalid_type(self, authenticated_client, site_cache):
        client, user = authenticated_client
        response = client.post('/api/v1/cache/invalidate/', {'type': 'user', 'id': 1}, format='json')
        assert response.status_code == 400

    def test_requires_authentication(self, api_client):
        response = api_client.post('/api/v1/cache/invalidate/', {'type': 'site', 'id': 1}, format='json')
        assert response.status_code == 401


class BrokenBackend:
    def get(self, key):
        raise ConnectionError('Connection refused')

    def set(self, key, value, timeout=None):
        raise ConnectionError('Connection refused')

    def delete_many(self, keys):
        raise ConnectionError('Connection refused')


class TestSiteCache:

    def test_unreachable_backend_degrades(self):
        cache = SiteCache(BrokenBackend())

        assert cache.get('site:1:pages') is None
        assert cache.set('site:1:pages', []) is False
        assert cache.delete_many(['site:1:pages']) is False

    def test_read_through_falls_back_to_loader(self):
        cache = SiteCache(BrokenBackend())
        assert cache._read_through('page:1:content:en', lambda: {'sections': []}) == {'sections': []}

    def test_read_through_stores_loaded_value(self):
        cache = SiteCache(caches['default'], ttl=60)
        calls = []

        def load():
            calls.append(1)
            return {'sections': []}

        cache._read_through('page:2:content:en', load)
        cache._read_through('page:2:content:en', load)
        assert len(calls) == 1

    def test_null_cache(self):
        cache = NullSiteCache()
        assert not cache.enabled
        assert cache.get('anything') is None
        assert cache.set('anything', 1) is False
        assert cache.delete_many(['anything']) is False

    def test_key_formats(self):
        assert CacheKeys.site_by_subdomain('rome') == 'site:subdomain:rome'
        assert CacheKeys.site_pages(3) == 'site:3:pages'
        assert CacheKeys.page_content(4, 'es') == 'page:4:content:es'
        assert CacheKeys.section_content(5, 'fr') == 'section:5:content:fr'
