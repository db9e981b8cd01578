"""
Per-section, per-language generation on top of GeminiContentGenerator.

Nothing here touches the database; callers persist the results.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from .providers import DEFAULT_CONCURRENCY, GeminiContentGenerator, GeneratedContent
from .validators import template_family

logger = logging.getLogger(__name__)

DEFAULT_ICON = 'map-pin'
MARKER_ICONS = {
    'attraction': 'landmark',
    'restaurant': 'utensils',
    'hotel': 'bed',
    'shopping': 'shopping-bag',
    'transport': 'train',
    'park': 'trees',
    'museum': 'building-2',
    'beach': 'umbrella-beach',
    'nightlife': 'music',
}


@dataclass
class SectionGenerationRequest:
    section: Any
    template: Any
    context: Dict[str, Any]
    languages: List[str]


@dataclass
class LanguageContent:
    language: str
    content: GeneratedContent


@dataclass
class SectionGenerationResult:
    section_id: Any
    contents: List[LanguageContent] = field(default_factory=list)

    @property
    def succeeded(self):
        return [c for c in self.contents if c.content.success and c.content.data]

    @property
    def failed(self):
        return [c for c in self.contents if not (c.content.success and c.content.data)]


# -- post-processing ----------------------------------------------------------

PostProcessor = Callable[[dict, dict], dict]
_post_processors: Dict[str, PostProcessor] = {}


def post_processor(family: str):
    def register(fn):
        _post_processors[family] = fn
        return fn
    return register


def default_icon(category) -> str:
    if not isinstance(category, str):
        return DEFAULT_ICON
    return MARKER_ICONS.get(category.lower(), DEFAULT_ICON)


@post_processor('hero')
def post_process_hero(data, context):
    if not data.get('ctaLink') and context.get('siteType'):
        data['ctaLink'] = '#explore'
    if data.get('overlayOpacity') is None:
        data['overlayOpacity'] = 0.4
    return data


@post_processor('attractions')
def post_process_attractions(data, context):
    attractions = data.get('attractions')
    if isinstance(attractions, list):
        data['attractions'] = [
            {
                **item,
                'id': item.get('id') or f'attraction-{index}',
                'rating': 4.5 if item.get('rating') is None else item['rating'],
                'price': item.get('price') or '$',
                'duration': item.get('duration') or '2-3 hours',
            } if isinstance(item, dict) else item
            for index, item in enumerate(attractions, start=1)
        ]
    return data


@post_processor('gallery')
def post_process_gallery(data, context):
    images = data.get('images')
    if isinstance(images, list):
        site_name = context.get('siteName', '')
        data['images'] = [
            {
                **image,
                'id': image.get('id') or f'image-{index}',
                'alt': image.get('alt') or f'{site_name} gallery image {index}'.strip(),
            } if isinstance(image, dict) else image
            for index, image in enumerate(images, start=1)
        ]
    return data


@post_processor('map')
def post_process_map(data, context):
    if not data.get('zoom'):
        data['zoom'] = 13
    markers = data.get('markers')
    if isinstance(markers, list):
        data['markers'] = [
            {
                **marker,
                'id': marker.get('id') or f'marker-{index}',
                'icon': marker.get('icon') or default_icon(marker.get('category')),
            } if isinstance(marker, dict) else marker
            for index, marker in enumerate(markers, start=1)
        ]
    return data


def post_process(template, data, context):
    """Merge template defaults under ``data`` and apply the family post-processor."""
    if not isinstance(data, dict):
        return data
    data = {**(template.default_data or {}), **data}
    processor = _post_processors.get(template_family(template))
    if processor:
        data = processor(data, context)
    return data


class SectionContentGenerator:
    def __init__(self, generator: GeminiContentGenerator, concurrency: int = DEFAULT_CONCURRENCY):
        self.generator = generator
        self.concurrency = max(1, concurrency)

    def _language_context(self, request: SectionGenerationRequest, language: str) -> dict:
        return {
            **request.context,
            'language': language,
            'sectionOrder': request.section.order,
            'sectionId': request.section.pk,
        }

    def _generate_language(self, request: SectionGenerationRequest, language: str) -> LanguageContent:
        context = self._language_context(request, language)
        content = self.generator.generate_content(request.template, context)
        if content.success and content.data:
            content.data = post_process(request.template, content.data, context)
        else:
            logger.warning(
                f"Section {request.section.pk} ({request.template.name}) failed for {language}: {content.error}"
            )
        return LanguageContent(language=language, content=content)

    def generate_section_content(self, request: SectionGenerationRequest) -> SectionGenerationResult:
        """Generate every requested language; ``contents`` follows ``request.languages`` order."""
        languages = list(request.languages)
        result = SectionGenerationResult(section_id=request.section.pk)
        if not languages:
            return result

        workers = min(self.concurrency, len(languages))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            result.contents = list(executor.map(lambda lang: self._generate_language(request, lang), languages))
        return result

    def generate_multiple_sections(self, requests, concurrency: int = DEFAULT_CONCURRENCY):
        requests = list(requests)
        if not requests:
            return []
        with ThreadPoolExecutor(max_workers=max(1, min(concurrency, len(requests)))) as executor:
            return list(executor.map(self.generate_section_content, requests))
