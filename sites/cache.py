"""
Read-through cache for the public site read path.

Keys:
  site:subdomain:{subdomain}      serialized site, looked up by subdomain
  site:{id}:pages                 page summaries of a site
  page:{id}:content:{language}    every section of a page in one language
  section:{id}:content:{language} one section in one language

The database stays the source of truth; invalidation deletes keys by explicit
enumeration (no pattern scans). Every cache error is logged and swallowed so
an unreachable Redis only costs a database round trip.
"""
import logging

logger = logging.getLogger(__name__)


class CacheKeys:

    @staticmethod
    def site_by_subdomain(subdomain):
        return f"site:subdomain:{subdomain}"

    @staticmethod
    def site_pages(site_id):
        return f"site:{site_id}:pages"

    @staticmethod
    def page_content(page_id, language):
        return f"page:{page_id}:content:{language}"

    @staticmethod
    def section_content(section_id, language):
        return f"section:{section_id}:content:{language}"


def _languages(site):
    languages = list(site.get_languages())
    if site.default_language not in languages:
        languages.append(site.default_language)
    return languages


class BaseSiteCache:
    """Read-through lookups shared by the real and the null cache."""

    def get(self, key):
        raise NotImplementedError

    def set(self, key, value):
        raise NotImplementedError

    def delete_many(self, keys):
        raise NotImplementedError

    def _read_through(self, key, loader):
        value = self.get(key)
        if value is not None:
            return value
        value = loader()
        if value is not None:
            self.set(key, value)
        return value

    # -- reads ---------------------------------------------------------------

    def get_site_by_subdomain(self, subdomain):
        """Published site payload for ``subdomain``, or None."""
        from .models import Site
        from .serializers import PublicSiteSerializer

        def load():
            site = Site.objects.filter(subdomain=subdomain, status='PUBLISHED').first()
            return PublicSiteSerializer(site).data if site else None

        return self._read_through(CacheKeys.site_by_subdomain(subdomain), load)

    def get_site_pages(self, site_id):
        from .models import Page
        from .serializers import PageSummarySerializer

        def load():
            pages = Page.objects.filter(site_id=site_id)
            return PageSummarySerializer(pages, many=True).data

        return self._read_through(CacheKeys.site_pages(site_id), load)

    def get_section_content(self, section, language, fallback_language=None):
        """Section content in ``language``, falling back to ``fallback_language``."""
        from content.serializers import SectionContentSerializer

        def load():
            contents = {c.language: c for c in section.contents.all()}
            content = contents.get(language)
            if content is None and fallback_language:
                content = contents.get(fallback_language)
            return SectionContentSerializer(content).data if content else None

        return self._read_through(CacheKeys.section_content(section.pk, language), load)

    def get_page_content(self, page, language):
        """
        Every section of ``page`` with content, in display order.

        Sections with no content in ``language`` use the site's default
        language; sections with neither are left out.
        """
        from content.models import Section

        site = page.site

        def load():
            sections = (
                Section.objects.filter(page=page)
                .select_related('template')
                .prefetch_related('contents')
            )
            rendered = []
            for section in sections:
                content = self.get_section_content(section, language, site.default_language)
                if content is not None:
                    rendered.append(content)
            return {
                'page_id': page.pk,
                'slug': page.slug,
                'title': page.title,
                'type': page.type,
                'language': language,
                'sections': rendered,
            }

        return self._read_through(CacheKeys.page_content(page.pk, language), load)

    # -- invalidation --------------------------------------------------------

    def invalidate_section(self, section):
        site = section.page.site
        keys = []
        for language in _languages(site):
            keys.append(CacheKeys.section_content(section.pk, language))
            keys.append(CacheKeys.page_content(section.page_id, language))
        return self.delete_many(keys)

    def invalidate_page(self, page):
        site = page.site
        keys = [CacheKeys.site_pages(site.pk)]
        section_ids = list(page.sections.values_list('id', flat=True))
        for language in _languages(site):
            keys.append(CacheKeys.page_content(page.pk, language))
            keys.extend(CacheKeys.section_content(section_id, language) for section_id in section_ids)
        return self.delete_many(keys)

    def invalidate_site(self, site):
        from content.models import Section

        keys = [
            CacheKeys.site_by_subdomain(site.subdomain),
            CacheKeys.site_pages(site.pk),
        ]
        page_ids = list(site.pages.values_list('id', flat=True))
        section_ids = list(Section.objects.filter(page__site=site).values_list('id', flat=True))
        for language in _languages(site):
            keys.extend(CacheKeys.page_content(page_id, language) for page_id in page_ids)
            keys.extend(CacheKeys.section_content(section_id, language) for section_id in section_ids)
        return self.delete_many(keys)


class SiteCache(BaseSiteCache):
    enabled = True

    def __init__(self, backend, ttl=3600):
        self.backend = backend
        self.ttl = ttl

    def get(self, key):
        try:
            return self.backend.get(key)
        except Exception as e:
            logger.warning(f"Cache get failed for {key}: {e}")
            return None

    def set(self, key, value):
        try:
            self.backend.set(key, value, timeout=self.ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache set failed for {key}: {e}")
            return False

    def delete_many(self, keys):
        if not keys:
            return True
        try:
            self.backend.delete_many(keys)
            return True
        except Exception as e:
            logger.warning(f"Cache invalidation failed for {len(keys)} keys: {e}")
            return False


class NullSiteCache(BaseSiteCache):
    """Cache used when Redis is not configured; every read goes to the database."""

    enabled = False

    def get(self, key):
        return None

    def set(self, key, value):
        return False

    def delete_many(self, keys):
        return False
