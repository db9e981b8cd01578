"""
Tests for ai app - schema conversion, prompts, Gemini generation, validation.
"""
import json
import threading
from types import SimpleNamespace

import pytest
from tenacity import wait_none

from ai.models import Template
from ai.prompt_builder import build_prompt, enhance_image_prompt, get_language_name
from ai.providers import (
    ContentGenerationError,
    GeminiContentGenerator,
    GeneratedContent,
    parse_json_response,
)
from ai.schema_converter import SchemaValidator, schema_converter
from ai.section_generator import (
    SectionContentGenerator,
    SectionGenerationRequest,
    default_icon,
    post_process,
)
from ai.validators import ContentValidator, sanitize_text, template_family


HERO_SCHEMA = {
    'type': 'object',
    'required': ['headline', 'subheadline', 'ctaText'],
    'properties': {
        'headline': {'type': 'string'},
        'subheadline': {'type': 'string'},
        'ctaText': {'type': 'string'},
        'ctaLink': {'type': 'string'},
        'overlayOpacity': {'type': 'number', 'minimum': 0, 'maximum': 1},
    },
}

HERO_DATA = {
    'headline': 'Discover Rome',
    'subheadline': 'The Eternal City awaits',
    'ctaText': 'Explore',
}

LISTING_SCHEMA = {
    'type': 'object',
    'required': ['headline', 'ctaText'],
    'properties': {
        'headline': {'type': 'string', 'minLength': 3, 'maxLength': 60},
        'ctaText': {'type': 'string'},
        'rating': {'type': 'number', 'minimum': 0, 'maximum': 5},
        'count': {'type': 'integer'},
        'featured': {'type': 'boolean'},
        'kind': {'type': 'string', 'enum': ['city', 'beach']},
        'code': {'type': 'string', 'pattern': '^[A-Z]{3}$'},
        'tags': {'type': 'array', 'items': {'type': 'string'}, 'minItems': 1, 'maxItems': 3},
        'location': {
            'type': 'object',
            'required': ['lat'],
            'properties': {'lat': {'type': 'number'}},
        },
    },
}

LISTING_DATA = {
    'headline': 'Rome',
    'ctaText': 'Go',
    'rating': 4.5,
    'count': 3,
    'featured': True,
    'kind': 'city',
    'code': 'ROM',
    'tags': ['history'],
    'location': {'lat': 41.9},
}


class FakeResponse:
    def __init__(self, text, usage=None):
        self.text = text
        self.usage_metadata = usage


class FakeModels:
    """Stands in for ``genai.Client().models``; replies come from ``responder``."""

    def __init__(self, responder):
        self.responder = responder
        self.calls = []
        self._lock = threading.Lock()

    def generate_content(self, **kwargs):
        with self._lock:
            self.calls.append(kwargs)
            attempt = len(self.calls)
        reply = self.responder(attempt, kwargs)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, FakeResponse):
            return reply
        return FakeResponse(json.dumps(reply))


def fake_client(responder):
    return SimpleNamespace(models=FakeModels(responder))


def prompt_text(call):
    return call['contents'][0]['parts'][0]['text']


@pytest.fixture(autouse=True)
def clear_schema_cache():
    schema_converter.clear()
    yield
    schema_converter.clear()


@pytest.fixture
def hero_template():
    return Template(
        name='hero',
        component_name='HeroBanner',
        schema=HERO_SCHEMA,
        system_prompt='You write tourism hero banners.',
        user_prompt_template='Write a hero banner for {locationContext}.',
    )


@pytest.fixture
def make_generator():
    def _make_generator(responder, max_retries=3):
        return GeminiContentGenerator(
            api_key='test-api-key',
            max_retries=max_retries,
            client=fake_client(responder),
            wait=wait_none(),
        )
    return _make_generator


class TestSchemaConverter:

    def test_valid_data_passes(self):
        result = SchemaValidator(LISTING_SCHEMA).validate(LISTING_DATA)
        assert result.success
        assert result.data == LISTING_DATA
        assert result.errors == []

    def test_schema_is_kept_verbatim(self):
        validator = SchemaValidator(LISTING_SCHEMA)
        assert validator.schema is LISTING_SCHEMA

    @pytest.mark.parametrize('overrides, path, code', [
        ({'headline': 5}, 'headline', 'string_type'),
        ({'headline': 'ab'}, 'headline', 'string_too_short'),
        ({'headline': 'x' * 61}, 'headline', 'string_too_long'),
        ({'rating': 7}, 'rating', 'less_than_equal'),
        ({'rating': -1}, 'rating', 'greater_than_equal'),
        ({'rating': True}, 'rating', 'number_type'),
        ({'rating': '4'}, 'rating', 'number_type'),
        ({'count': 2.5}, 'count', 'integer_type'),
        ({'featured': 'yes'}, 'featured', 'bool_type'),
        ({'kind': 'mountain'}, 'kind', 'literal_error'),
        ({'code': 'rome'}, 'code', 'string_pattern_mismatch'),
        ({'tags': []}, 'tags', 'too_short'),
        ({'tags': ['a', 'b', 'c', 'd']}, 'tags', 'too_long'),
        ({'tags': ['a', 1]}, 'tags.1', 'string_type'),
        ({'location': {}}, 'location.lat', 'missing'),
    ])
    def test_single_violation_reports_field_path(self, overrides, path, code):
        result = SchemaValidator(LISTING_SCHEMA).validate({**LISTING_DATA, **overrides})
        assert not result.success
        assert result.data is None
        assert [(e.path, e.code) for e in result.errors] == [(path, code)]

    def test_missing_required_field(self):
        data = dict(LISTING_DATA)
        del data['ctaText']
        result = SchemaValidator(LISTING_SCHEMA).validate(data)
        assert not result.success
        assert result.errors[0].path == 'ctaText'
        assert result.errors[0].code == 'missing'
        assert 'ctaText' in result.error_summary()

    def test_optional_fields_may_be_omitted(self):
        result = SchemaValidator(LISTING_SCHEMA).validate({'headline': 'Rome', 'ctaText': 'Go'})
        assert result.success
        assert result.data == {'headline': 'Rome', 'ctaText': 'Go'}

    def test_unknown_keys_are_dropped(self):
        result = SchemaValidator(LISTING_SCHEMA).validate({'headline': 'Rome', 'ctaText': 'Go', 'junk': 1})
        assert result.success
        assert 'junk' not in result.data

    def test_keys_colliding_with_model_attributes(self):
        schema = {
            'type': 'object',
            'required': ['schema', 'model_config'],
            'properties': {'schema': {'type': 'string'}, 'model_config': {'type': 'string'}},
        }
        result = SchemaValidator(schema).validate({'schema': 'a', 'model_config': 'b'})
        assert result.success
        assert result.data == {'schema': 'a', 'model_config': 'b'}

    def test_missing_or_unknown_type_accepts_anything(self):
        schema = {
            'type': 'object',
            'properties': {
                'meta': {'description': 'free-form'},
                'extra': {'type': 'mystery'},
                'items': {'type': 'array'},
            },
        }
        validator = SchemaValidator(schema)
        assert validator.is_permissive
        assert validator.permissive_paths == ['meta', 'extra', 'items[]']

        result = validator.validate({'meta': {'a': 1}, 'extra': [1, 'x'], 'items': [1, {'b': 2}]})
        assert result.success

    def test_empty_schema_accepts_anything(self):
        validator = SchemaValidator({})
        assert validator.permissive_paths == ['$']
        assert validator.validate([1, 2, 3]).success
        assert validator.validate('text').success

    def test_object_without_properties_requires_object(self):
        validator = SchemaValidator({'type': 'object'})
        assert validator.validate({'anything': [1]}).success
        assert not validator.validate([1]).success

    def test_invalid_pattern_is_ignored(self):
        validator = SchemaValidator({'type': 'string', 'pattern': '(['})
        assert validator.validate('anything').success

    def test_permissive_nodes_logged_at_debug(self, caplog):
        caplog.set_level('DEBUG', logger='ai.schema_converter')
        SchemaValidator({'type': 'object', 'properties': {'blob': {}}})
        assert any('blob' in record.getMessage() for record in caplog.records)

    @pytest.mark.django_db
    def test_validator_is_memoized_per_template_revision(self):
        template = Template.objects.create(
            name='hero', component_name='HeroBanner', schema=HERO_SCHEMA,
            user_prompt_template='Hero for {locationContext}',
        )
        first = schema_converter.for_template(template)
        assert schema_converter.for_template(template) is first

        template.schema = {'type': 'object'}
        template.save()
        assert schema_converter.for_template(template) is not first


class TestPromptBuilder:

    def test_substitutes_placeholders(self):
        prompt = build_prompt(
            'Generate for {siteName} in {locationContext}',
            {'siteName': 'Rome', 'locationContext': 'Italy'},
        )
        assert prompt == 'Generate for Rome in Italy'

    def test_absent_key_left_literal(self):
        prompt = build_prompt('Visit {siteName} during {season}', {'siteName': 'Rome'})
        assert prompt == 'Visit Rome during {season}'

    def test_repeated_placeholder(self):
        assert build_prompt('{a} and {a}', {'a': 'x'}) == 'x and x'

    def test_substituted_values_are_not_expanded_again(self):
        prompt = build_prompt('{a} {b}', {'a': '{b}', 'b': 'two'})
        assert prompt == '{b} two'

    def test_non_string_values(self):
        prompt = build_prompt('{count} {meta}', {'count': 3, 'meta': {'city': 'Kraków'}})
        assert prompt == '3 {"city": "Kraków"}'

    def test_english_adds_nothing(self):
        assert build_prompt('Hello', {'language': 'en'}) == 'Hello'

    def test_other_language_appends_instruction(self):
        prompt = build_prompt('Hello', {'language': 'es'})
        assert prompt == 'Hello\n\nIMPORTANT: Generate all content in Spanish language.'

    def test_unmapped_language_uses_code(self):
        prompt = build_prompt('Hello', {'language': 'xx'})
        assert prompt.endswith('Generate all content in xx language.')
        assert get_language_name('xx') == 'xx'

    def test_additional_prompt_appended_last(self):
        prompt = build_prompt('Hello', {'language': 'fr', 'additionalPrompt': 'Keep it short.'})
        assert prompt.endswith('French language.\n\nAdditional instructions: Keep it short.')

    def test_enhance_image_prompt(self):
        assert enhance_image_prompt('Colosseum at dusk', 'watercolor') == 'Colosseum at dusk, watercolor'
        assert enhance_image_prompt('Colosseum').startswith('Colosseum, photorealistic')


class TestGeminiContentGenerator:

    def test_success(self, hero_template, make_generator):
        generator = make_generator(lambda attempt, call: HERO_DATA)
        result = generator.generate_content(hero_template, {'locationContext': 'Rome'})

        assert result.success
        assert result.data == HERO_DATA
        assert result.error is None
        assert result.model == 'gemini-2.5-pro'
        assert result.usage is None
        assert 'usage' not in result.as_dict()

    def test_request_carries_schema_and_instructions(self, hero_template, make_generator):
        generator = make_generator(lambda attempt, call: HERO_DATA)
        generator.generate_content(hero_template, {'locationContext': 'Rome', 'language': 'de'})

        call = generator.client.models.calls[0]
        assert call['model'] == 'gemini-2.5-pro'
        assert call['config']['response_schema'] is HERO_SCHEMA
        assert call['config']['response_mime_type'] == 'application/json'
        assert call['config']['temperature'] == 0.7
        assert call['config']['system_instruction'] == 'You write tourism hero banners.'
        assert prompt_text(call).startswith('Write a hero banner for Rome.')
        assert 'German language' in prompt_text(call)

    def test_usage_reported(self, hero_template, make_generator):
        usage = SimpleNamespace(prompt_token_count=10, candidates_token_count=20, total_token_count=30)
        generator = make_generator(lambda attempt, call: FakeResponse(json.dumps(HERO_DATA), usage))
        result = generator.generate_content(hero_template, {})

        assert result.as_dict()['usage'] == {'promptTokens': 10, 'completionTokens': 20, 'totalTokens': 30}

    def test_recovers_after_two_failures(self, hero_template, make_generator):
        def responder(attempt, call):
            if attempt <= 2:
                return ConnectionError('connection reset')
            return HERO_DATA

        generator = make_generator(responder, max_retries=3)
        result = generator.generate_content(hero_template, {})

        assert result.success
        assert len(generator.client.models.calls) == 3

    def test_exhausted_retries_return_failure(self, hero_template, make_generator):
        generator = make_generator(lambda attempt, call: TimeoutError('deadline exceeded'), max_retries=3)
        result = generator.generate_content(hero_template, {})

        assert result.success is False
        assert result.data is None
        assert 'deadline exceeded' in result.error
        assert len(generator.client.models.calls) == 4

    def test_failed_attempts_logged(self, hero_template, make_generator, caplog):
        generator = make_generator(lambda attempt, call: TimeoutError('slow'), max_retries=1)
        generator.generate_content(hero_template, {})

        messages = [r.getMessage() for r in caplog.records if r.name == 'ai.providers']
        assert any('Attempt 1 failed' in m for m in messages)

    def test_schema_mismatch_counts_as_failed_attempt(self, hero_template, make_generator):
        def responder(attempt, call):
            if attempt == 1:
                return {'headline': 'Missing the rest'}
            return HERO_DATA

        generator = make_generator(responder)
        result = generator.generate_content(hero_template, {})

        assert result.success
        assert len(generator.client.models.calls) == 2

    def test_schema_mismatch_every_time(self, hero_template, make_generator):
        generator = make_generator(lambda attempt, call: {'headline': 'Only'}, max_retries=1)
        result = generator.generate_content(hero_template, {})

        assert not result.success
        assert 'Schema validation failed' in result.error

    def test_json_embedded_in_prose(self, hero_template, make_generator):
        text = f"Sure! Here is the content:\n{json.dumps(HERO_DATA)}\nEnjoy."
        generator = make_generator(lambda attempt, call: FakeResponse(text))
        result = generator.generate_content(hero_template, {})

        assert result.success
        assert result.data == HERO_DATA

    def test_empty_text_is_a_failure(self, hero_template, make_generator):
        generator = make_generator(lambda attempt, call: FakeResponse(''), max_retries=0)
        result = generator.generate_content(hero_template, {})

        assert not result.success
        assert 'No response text' in result.error

    def test_missing_api_key_fails_without_retrying(self, hero_template):
        waits = []

        def record_wait(retry_state):
            waits.append(retry_state.attempt_number)
            return 0

        generator = GeminiContentGenerator(api_key='', max_retries=3, wait=record_wait)
        result = generator.generate_content(hero_template, {})

        assert not result.success
        assert result.data is None
        assert 'GEMINI_API_KEY' in result.error
        assert waits == []

    def test_parse_json_response_gives_up_on_garbage(self):
        with pytest.raises(ContentGenerationError):
            parse_json_response('no json here {oops')

    def test_batch_preserves_input_order(self, hero_template, make_generator):
        def responder(attempt, call):
            city = prompt_text(call).split('for ')[1].rstrip('.')
            return {**HERO_DATA, 'headline': city}

        generator = make_generator(responder)
        cities = ['Rome', 'Paris', 'Lisbon', 'Vienna', 'Prague']
        results = generator.generate_batch(
            [(hero_template, {'locationContext': city}) for city in cities],
            concurrency=3,
        )

        assert [r.data['headline'] for r in results] == cities

    def test_from_settings(self, settings):
        settings.GEMINI_MODEL = 'gemini-2.5-flash'
        settings.GEMINI_MAX_RETRIES = 5
        generator = GeminiContentGenerator.from_settings()

        assert generator.api_key == 'test-api-key'
        assert generator.model == 'gemini-2.5-flash'
        assert generator.max_retries == 5


class TestContentValidator:

    @pytest.fixture
    def validator(self):
        return ContentValidator()

    def make_template(self, name, schema=None, component_name='Section'):
        return Template(name=name, component_name=component_name, schema=schema or {'type': 'object'})

    def test_valid_hero_is_sanitized(self, validator):
        template = self.make_template('hero', HERO_SCHEMA)
        content = {**HERO_DATA, 'headline': '<b>Discover</b>   Rome\n'}
        result = validator.validate_content(content, template)

        assert result.is_valid
        assert result.sanitized_content['headline'] == 'Discover Rome'
        assert content['headline'] == '<b>Discover</b>   Rome\n'

    def test_long_headline_is_a_warning(self, validator):
        template = self.make_template('hero', HERO_SCHEMA)
        result = validator.validate_content(
            {**HERO_DATA, 'headline': 'h' * 61, 'subheadline': 's' * 151}, template
        )

        assert result.is_valid
        assert [w.code for w in result.warnings] == ['HEADLINE_TOO_LONG', 'SUBHEADLINE_TOO_LONG']

    def test_long_cta_is_an_error(self, validator):
        template = self.make_template('hero-banner', HERO_SCHEMA)
        result = validator.validate_content({**HERO_DATA, 'ctaText': 'c' * 21}, template)

        assert not result.is_valid
        assert result.errors[0].code == 'CTA_TOO_LONG'
        assert result.errors[0].path == 'ctaText'

    def test_schema_errors(self, validator):
        template = self.make_template('hero', HERO_SCHEMA)
        result = validator.validate_content({'headline': 'Only'}, template)

        assert not result.is_valid
        assert result.sanitized_content is None
        assert {e.code for e in result.errors} == {'SCHEMA_VALIDATION_ERROR'}
        assert {e.path for e in result.errors} == {'subheadline', 'ctaText'}

    def test_attractions_rules(self, validator):
        template = self.make_template('top-sights', component_name='AttractionsGrid')
        content = {'attractions': [
            {'name': 'Colosseum', 'rating': 6, 'price': '$$'},
            {'name': 'Forum', 'rating': 4, 'price': 'cheap'},
            {'name': 'Pantheon', 'rating': 0, 'price': 'Free'},
        ]}
        result = validator.validate_content(content, template)

        assert not result.is_valid
        assert [(e.path, e.code) for e in result.errors] == [('attractions[0].rating', 'INVALID_RATING')]
        assert [(w.path, w.code) for w in result.warnings] == [('attractions[1].price', 'INVALID_PRICE_FORMAT')]

    def test_attractions_sanitized(self, validator):
        template = self.make_template('attractions-grid')
        content = {'attractions': [{'name': '<i>Colosseum</i>', 'description': 'Big  <br/> arena'}]}
        result = validator.validate_content(content, template)

        assert result.sanitized_content['attractions'][0] == {'name': 'Colosseum', 'description': 'Big arena'}

    def test_map_coordinates(self, validator):
        template = self.make_template('map-interactive')
        content = {
            'center': {'lat': 95, 'lng': 12.5},
            'markers': [{'lat': 41.9, 'lng': 200}, {'lat': -91, 'lng': 0}],
        }
        result = validator.validate_content(content, template)

        assert [(e.path, e.code) for e in result.errors] == [
            ('center.lat', 'INVALID_LATITUDE'),
            ('markers[0].lng', 'INVALID_MARKER_LNG'),
            ('markers[1].lat', 'INVALID_MARKER_LAT'),
        ]

    def test_weather_rules(self, validator):
        template = self.make_template('weather-widget')
        monthly = [{'month': str(i), 'highTemp': 20, 'lowTemp': 10} for i in range(11)]
        monthly[0] = {'month': '0', 'highTemp': 5, 'lowTemp': 10}
        monthly[1] = {'month': '1', 'highTemp': 65, 'lowTemp': 30}
        result = validator.validate_content({'climateData': {'monthly': monthly}}, template)

        assert [e.code for e in result.errors] == ['INVALID_MONTH_COUNT', 'INVALID_TEMP_RANGE']
        assert [(w.path, w.code) for w in result.warnings] == [('climateData.monthly[1]', 'EXTREME_TEMPERATURE')]

    def test_templates_without_family_only_get_schema_check(self, validator):
        template = self.make_template('faq', component_name='FAQAccordion')
        result = validator.validate_content({'ctaText': 'c' * 40}, template)

        assert template_family(template) is None
        assert result.is_valid

    def test_sanitize_text(self):
        assert sanitize_text('  <p>Hello <strong>world</strong></p>\n\n') == 'Hello world'
        assert sanitize_text(None) is None


class FakeGenerator:
    """Records contexts; per-language replies come from ``reply``."""

    def __init__(self, reply):
        self.reply = reply
        self.contexts = []

    def generate_content(self, template, context):
        self.contexts.append(context)
        return self.reply(context)


def ok(data):
    return GeneratedContent(success=True, data=data, model='gemini-2.5-pro')


def failed(error):
    return GeneratedContent(success=False, data=None, model='gemini-2.5-pro', error=error)


class TestSectionContentGenerator:

    @pytest.fixture
    def section(self):
        return SimpleNamespace(pk=7, order=2)

    def test_languages_in_input_order(self, hero_template, section):
        generator = FakeGenerator(lambda ctx: ok({**HERO_DATA, 'headline': ctx['language']}))
        result = SectionContentGenerator(generator).generate_section_content(SectionGenerationRequest(
            section=section,
            template=hero_template,
            context={'siteName': 'Rome', 'siteType': 'city', 'language': 'en'},
            languages=['en', 'es', 'fr', 'de'],
        ))

        assert result.section_id == 7
        assert [c.language for c in result.contents] == ['en', 'es', 'fr', 'de']
        assert [c.content.data['headline'] for c in result.contents] == ['en', 'es', 'fr', 'de']
        context = next(c for c in generator.contexts if c['language'] == 'es')
        assert context['sectionOrder'] == 2
        assert context['sectionId'] == 7
        assert context['siteName'] == 'Rome'

    def test_failed_language_is_kept_separate(self, hero_template, section):
        generator = FakeGenerator(
            lambda ctx: failed('quota exceeded') if ctx['language'] == 'es' else ok(dict(HERO_DATA))
        )
        result = SectionContentGenerator(generator).generate_section_content(SectionGenerationRequest(
            section=section, template=hero_template, context={'siteType': 'city'}, languages=['en', 'es'],
        ))

        assert [c.language for c in result.succeeded] == ['en']
        assert [c.language for c in result.failed] == ['es']
        assert result.failed[0].content.data is None

    def test_hero_post_processing(self, hero_template, section):
        generator = FakeGenerator(lambda ctx: ok(dict(HERO_DATA)))
        result = SectionContentGenerator(generator).generate_section_content(SectionGenerationRequest(
            section=section, template=hero_template, context={'siteType': 'city'}, languages=['en'],
        ))

        data = result.contents[0].content.data
        assert data['ctaLink'] == '#explore'
        assert data['overlayOpacity'] == 0.4

    def test_generate_multiple_sections(self, hero_template):
        generator = FakeGenerator(lambda ctx: ok(dict(HERO_DATA)))
        requests = [
            SectionGenerationRequest(
                section=SimpleNamespace(pk=pk, order=pk), template=hero_template, context={}, languages=['en'],
            )
            for pk in (3, 1, 2)
        ]
        results = SectionContentGenerator(generator).generate_multiple_sections(requests, concurrency=2)

        assert [r.section_id for r in results] == [3, 1, 2]


class TestPostProcessing:

    def test_template_defaults_merge_under_data(self):
        template = Template(name='cta', component_name='CTASection', default_data={
            'primaryButtonLink': '/contact', 'headline': 'default',
        })
        data = post_process(template, {'headline': 'Book now'}, {})
        assert data == {'primaryButtonLink': '/contact', 'headline': 'Book now'}

    def test_attractions_defaults(self):
        template = Template(name='attractions-grid', component_name='AttractionsGrid')
        data = post_process(template, {'attractions': [
            {'name': 'Colosseum'},
            {'name': 'Forum', 'id': 'forum', 'rating': 0, 'price': 'free', 'duration': '1 hour'},
        ]}, {})

        assert data['attractions'][0] == {
            'name': 'Colosseum', 'id': 'attraction-1', 'rating': 4.5, 'price': '$', 'duration': '2-3 hours',
        }
        assert data['attractions'][1] == {
            'name': 'Forum', 'id': 'forum', 'rating': 0, 'price': 'free', 'duration': '1 hour',
        }

    def test_gallery_defaults(self):
        template = Template(name='gallery', component_name='PhotoGallery')
        data = post_process(template, {'images': [{'caption': 'Trevi'}]}, {'siteName': 'Rome'})
        assert data['images'][0] == {'caption': 'Trevi', 'id': 'image-1', 'alt': 'Rome gallery image 1'}

    def test_map_defaults(self):
        template = Template(name='map-interactive', component_name='InteractiveMap')
        data = post_process(template, {'markers': [
            {'name': 'Da Enzo', 'category': 'Restaurant'},
            {'name': 'Somewhere', 'category': 'volcano'},
            {'name': 'Hotel Artemide', 'category': 'hotel', 'icon': 'star'},
        ]}, {})

        assert data['zoom'] == 13
        assert [(m['id'], m['icon']) for m in data['markers']] == [
            ('marker-1', 'utensils'), ('marker-2', 'map-pin'), ('marker-3', 'star'),
        ]

    def test_default_icon(self):
        assert default_icon('museum') == 'building-2'
        assert default_icon(None) == 'map-pin'


@pytest.mark.django_db
class TestSeedTemplates:

    def test_seeds_builtin_templates(self):
        from django.core.management import call_command

        call_command('seed_templates')
        call_command('seed_templates')

        names = set(Template.objects.values_list('name', flat=True))
        assert names == {
            'hero', 'attractions-grid', 'features', 'testimonials', 'cta', 'map-interactive', 'weather-widget',
            'overview', 'gallery', 'info', 'highlights',
            'attraction-hero', 'quick-info-bar', 'product-cards', 'tabbed-info',
            'reviews-carousel', 'faq-accordion', 'final-cta',
        }

    def test_attraction_templates_keep_their_own_shape(self):
        from django.core.management import call_command

        call_command('seed_templates')
        attraction_hero = Template.objects.get(name='attraction-hero')
        assert template_family(attraction_hero) is None
        data = post_process(attraction_hero, {'mainHeadline': 'Skip the line'}, {'siteType': 'attraction'})
        assert data == {**attraction_hero.default_data, 'mainHeadline': 'Skip the line'}
        assert 'ctaLink' not in data
        assert 'overlayOpacity' not in data

    def test_seeded_gallery_gets_image_defaults(self):
        from django.core.management import call_command

        call_command('seed_templates')
        gallery = Template.objects.get(name='gallery')
        assert template_family(gallery) == 'gallery'
        data = post_process(gallery, {'images': [{'caption': 'Tram 28'}]}, {'siteName': 'Lisbon'})
        assert data['images'][0]['id'] == 'image-1'
        assert data['images'][0]['alt'] == 'Lisbon gallery image 1'

    def test_seeded_schemas_are_fully_typed(self):
        from django.core.management import call_command

        call_command('seed_templates')
        for template in Template.objects.all():
            assert not schema_converter.for_template(template).is_permissive, template.name
