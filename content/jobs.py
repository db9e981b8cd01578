"""
Generation job execution.

A job names a site and optionally narrows it to one page or one section and
one language. ``ContentGenerationRunner`` resolves the job to a list of
sections, generates the missing (or, with ``regenerate``, all) languages for
each one, validates the output and upserts SectionContent rows.

Only resolution problems are fatal. A language that fails to generate or
validate is recorded on the outcome and the run moves on.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from django.conf import settings

from ai.providers import GENERATED_BY, GeminiContentGenerator
from ai.section_generator import SectionContentGenerator, SectionGenerationRequest
from ai.validators import ContentValidator
from sites.models import Site
from .models import Section, SectionContent

logger = logging.getLogger(__name__)


class GenerationJobError(Exception):
    """The job's site, page or section could not be resolved."""


@dataclass
class GenerationJob:
    site_id: int
    page_id: Optional[int] = None
    section_id: Optional[int] = None
    language: Optional[str] = None
    regenerate: bool = False

    @classmethod
    def from_payload(cls, payload: dict):
        return cls(
            site_id=payload['site_id'],
            page_id=payload.get('page_id'),
            section_id=payload.get('section_id'),
            language=payload.get('language') or None,
            regenerate=bool(payload.get('regenerate', False)),
        )

    def as_payload(self) -> dict:
        payload = {'site_id': self.site_id, 'regenerate': self.regenerate}
        for key in ('page_id', 'section_id', 'language'):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload

    @property
    def is_full_site(self) -> bool:
        return self.page_id is None and self.section_id is None


@dataclass
class GenerationFailure:
    section_id: int
    language: str
    error: str

    def as_dict(self):
        return {'section_id': self.section_id, 'language': self.language, 'error': self.error}


@dataclass
class GenerationOutcome:
    # Processed sections, skipped ones included.
    sections_generated: int = 0
    sections_skipped: int = 0
    contents_saved: int = 0
    failures: List[GenerationFailure] = field(default_factory=list)

    def as_dict(self):
        return {
            'sections_generated': self.sections_generated,
            'sections_skipped': self.sections_skipped,
            'contents_saved': self.contents_saved,
            'failures': [f.as_dict() for f in self.failures],
        }


def _unique(languages):
    seen = []
    for language in languages:
        if language and language not in seen:
            seen.append(language)
    return seen


class ContentGenerationRunner:

    def __init__(self, section_generator: SectionContentGenerator,
                 validator: ContentValidator = None, cache=None,
                 progress: Callable[[int], None] = None):
        self.section_generator = section_generator
        self.validator = validator or ContentValidator()
        self.cache = cache
        self.progress = progress

    # -- resolution ----------------------------------------------------------

    def load_site(self, job: GenerationJob) -> Site:
        try:
            return Site.objects.get(pk=job.site_id)
        except Site.DoesNotExist:
            raise GenerationJobError(f"Site {job.site_id} not found")

    def resolve_sections(self, site: Site, job: GenerationJob) -> List[Section]:
        sections = Section.objects.filter(page__site=site).select_related('template', 'page', 'page__site')

        if job.section_id is not None:
            section = sections.filter(pk=job.section_id).first()
            if section is None:
                raise GenerationJobError(f"Section {job.section_id} not found on site {site.pk}")
            resolved = [section]
        elif job.page_id is not None:
            if not site.pages.filter(pk=job.page_id).exists():
                raise GenerationJobError(f"Page {job.page_id} not found on site {site.pk}")
            resolved = list(sections.filter(page_id=job.page_id).order_by('order', 'id'))
        else:
            resolved = list(sections.order_by('page__order', 'page__created_at', 'page_id', 'order', 'id'))

        inactive = [s for s in resolved if not s.template.is_active]
        if inactive:
            names = ', '.join(sorted({s.template.name for s in inactive}))
            raise GenerationJobError(f"Inactive template(s) bound to sections in scope: {names}")
        return resolved

    def resolve_languages(self, site: Site, job: GenerationJob) -> List[str]:
        return _unique([job.language] if job.language else site.get_languages())

    def build_context(self, site: Site) -> dict:
        return {
            'siteName': site.name,
            'siteType': site.type.lower(),
            'locationContext': site.location_context,
        }

    # -- execution -----------------------------------------------------------

    def should_skip(self, section: Section, languages: List[str], regenerate: bool) -> bool:
        """Skip when not regenerating and every language in scope already has content."""
        if regenerate:
            return False
        existing = set(
            SectionContent.objects.filter(section=section, language__in=languages)
            .values_list('language', flat=True)
        )
        return len(existing) >= len(set(languages))

    def run(self, job: GenerationJob) -> GenerationOutcome:
        site = self.load_site(job)
        sections = self.resolve_sections(site, job)
        languages = self.resolve_languages(site, job)
        context = self.build_context(site)
        outcome = GenerationOutcome()

        logger.info(
            f"Generating content for site {site.pk}: {len(sections)} section(s), "
            f"languages {languages}, regenerate={job.regenerate}"
        )

        total = len(sections)
        for index, section in enumerate(sections, start=1):
            if self.should_skip(section, languages, job.regenerate):
                logger.info(f"Content already exists for section {section.pk}, skipping")
                outcome.sections_skipped += 1
            else:
                self.process_section(section, {**context, 'language': languages[0]}, languages, outcome)
            outcome.sections_generated += 1
            self.report_progress(int(index / total * 100))

        if total == 0:
            self.report_progress(100)

        if job.is_full_site:
            site.mark_published()
            if self.cache is not None:
                self.cache.invalidate_site(site)

        logger.info(
            f"Finished content job for site {site.pk}: {outcome.sections_generated} processed, "
            f"{outcome.contents_saved} saved, {len(outcome.failures)} failed"
        )
        return outcome

    def process_section(self, section: Section, context: dict, languages: List[str],
                        outcome: GenerationOutcome):
        result = self.section_generator.generate_section_content(
            SectionGenerationRequest(
                section=section,
                template=section.template,
                context=context,
                languages=languages,
            )
        )

        saved = False
        for item in result.contents:
            generated = item.content
            if not (generated.success and generated.data):
                self.record_failure(outcome, section, item.language, generated.error or 'No content generated')
                continue

            validation = self.validator.validate_content(generated.data, section.template)
            for warning in validation.warnings:
                logger.info(f"Section {section.pk} [{item.language}] {warning.code} at {warning.path}")
            if not validation.is_valid:
                self.record_failure(outcome, section, item.language, validation.error_summary())
                continue

            data = validation.sanitized_content if validation.sanitized_content is not None else generated.data
            SectionContent.objects.upsert(
                section=section,
                language=item.language,
                data=data,
                generated_by=GENERATED_BY,
                generated_at=generated.generated_at,
            )
            outcome.contents_saved += 1
            saved = True

        if saved and self.cache is not None:
            self.cache.invalidate_section(section)

    def record_failure(self, outcome, section, language, error):
        logger.error(f"Content generation failed for section {section.pk} [{language}]: {error}")
        outcome.failures.append(GenerationFailure(section_id=section.pk, language=language, error=error))

    def report_progress(self, percent: int):
        if self.progress is not None:
            self.progress(percent)


def build_runner(progress=None, connections=None) -> ContentGenerationRunner:
    from .connections import get_connections

    connections = connections or get_connections()
    generator = GeminiContentGenerator.from_settings()
    return ContentGenerationRunner(
        section_generator=SectionContentGenerator(generator, concurrency=settings.GENERATION_CONCURRENCY),
        validator=ContentValidator(),
        cache=connections.cache,
        progress=progress,
    )
