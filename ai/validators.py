"""
Content validation: schema check, template-family rules and sanitization.

Family rules live in a registry keyed by family name. A template resolves to
a family through its ``name`` first, then its kebab-cased ``component_name``,
then its ``category``; templates with no family only get the schema check.
"""
import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from bs4 import BeautifulSoup

from .schema_converter import schema_converter

logger = logging.getLogger(__name__)

HEADLINE_MAX = 60
SUBHEADLINE_MAX = 150
CTA_MAX = 20
MONTHS_PER_YEAR = 12
EXTREME_TEMPERATURE = 60

PRICE_PATTERN = re.compile(r'^(free|\$+)$', re.IGNORECASE)

FAMILY_ALIASES = {
    'hero': 'hero',
    'hero-banner': 'hero',
    'attractions-grid': 'attractions',
    'attraction-grid': 'attractions',
    'map': 'map',
    'map-interactive': 'map',
    'weather': 'weather',
    'weather-widget': 'weather',
    'gallery': 'gallery',
    'gallery-masonry': 'gallery',
}


@dataclass
class ValidationIssue:
    path: str
    message: str
    code: str

    def as_dict(self):
        return {'path': self.path, 'message': self.message, 'code': self.code}


@dataclass
class ContentValidationResult:
    is_valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    sanitized_content: Optional[Any] = None

    def error_summary(self) -> str:
        return '; '.join(f"{e.path or '$'}: {e.message} ({e.code})" for e in self.errors)


def _kebab(value: str) -> str:
    value = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', '-', value or '')
    return value.replace('_', '-').replace(' ', '-').lower()


def template_family(template) -> Optional[str]:
    for candidate in (template.name, _kebab(template.component_name), _kebab(template.category)):
        if candidate and candidate.lower() in FAMILY_ALIASES:
            return FAMILY_ALIASES[candidate.lower()]
    return None


RuleFn = Callable[[Any, List[ValidationIssue], List[ValidationIssue]], None]
SanitizerFn = Callable[[Any], Any]

_rules: Dict[str, RuleFn] = {}
_sanitizers: Dict[str, SanitizerFn] = {}


def rule(family: str):
    def register(fn):
        _rules[family] = fn
        return fn
    return register


def sanitizer(family: str):
    def register(fn):
        _sanitizers[family] = fn
        return fn
    return register


def sanitize_text(text):
    """Strip HTML tags and collapse whitespace; non-strings pass through."""
    if not isinstance(text, str):
        return text
    stripped = BeautifulSoup(text, 'html.parser').get_text()
    return re.sub(r'\s+', ' ', stripped).strip()


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _in_range(value, bound) -> bool:
    return _is_number(value) and -bound <= value <= bound


# -- family rules -------------------------------------------------------------

@rule('hero')
def validate_hero(content, errors, warnings):
    headline = content.get('headline')
    if isinstance(headline, str) and len(headline) > HEADLINE_MAX:
        warnings.append(ValidationIssue(
            'headline', f'Headline is longer than recommended {HEADLINE_MAX} characters', 'HEADLINE_TOO_LONG'))

    subheadline = content.get('subheadline')
    if isinstance(subheadline, str) and len(subheadline) > SUBHEADLINE_MAX:
        warnings.append(ValidationIssue(
            'subheadline', f'Subheadline is longer than recommended {SUBHEADLINE_MAX} characters',
            'SUBHEADLINE_TOO_LONG'))

    cta = content.get('ctaText')
    if isinstance(cta, str) and len(cta) > CTA_MAX:
        errors.append(ValidationIssue('ctaText', f'CTA text must be {CTA_MAX} characters or less', 'CTA_TOO_LONG'))


@rule('attractions')
def validate_attractions(content, errors, warnings):
    attractions = content.get('attractions')
    if not isinstance(attractions, list):
        return

    for index, attraction in enumerate(attractions):
        if not isinstance(attraction, dict):
            continue
        rating = attraction.get('rating')
        if rating is not None and (not _is_number(rating) or rating < 0 or rating > 5):
            errors.append(ValidationIssue(
                f'attractions[{index}].rating', 'Rating must be between 0 and 5', 'INVALID_RATING'))

        price = attraction.get('price')
        if price and not (isinstance(price, str) and PRICE_PATTERN.match(price)):
            warnings.append(ValidationIssue(
                f'attractions[{index}].price',
                'Price should be "free" or use $ symbols (e.g., "$", "$$", "$$$")',
                'INVALID_PRICE_FORMAT'))


@rule('map')
def validate_map(content, errors, warnings):
    center = content.get('center')
    if isinstance(center, dict):
        if not _in_range(center.get('lat'), 90):
            errors.append(ValidationIssue(
                'center.lat', 'Invalid latitude. Must be between -90 and 90', 'INVALID_LATITUDE'))
        if not _in_range(center.get('lng'), 180):
            errors.append(ValidationIssue(
                'center.lng', 'Invalid longitude. Must be between -180 and 180', 'INVALID_LONGITUDE'))

    markers = content.get('markers')
    if isinstance(markers, list):
        for index, marker in enumerate(markers):
            marker = marker if isinstance(marker, dict) else {}
            if not _in_range(marker.get('lat'), 90):
                errors.append(ValidationIssue(f'markers[{index}].lat', 'Invalid latitude', 'INVALID_MARKER_LAT'))
            if not _in_range(marker.get('lng'), 180):
                errors.append(ValidationIssue(f'markers[{index}].lng', 'Invalid longitude', 'INVALID_MARKER_LNG'))


@rule('weather')
def validate_weather(content, errors, warnings):
    climate = content.get('climateData')
    monthly = climate.get('monthly') if isinstance(climate, dict) else None
    if not isinstance(monthly, list):
        return

    if len(monthly) != MONTHS_PER_YEAR:
        errors.append(ValidationIssue(
            'climateData.monthly', f'Must have exactly {MONTHS_PER_YEAR} months of data', 'INVALID_MONTH_COUNT'))

    for index, month in enumerate(monthly):
        if not isinstance(month, dict):
            continue
        high, low = month.get('highTemp'), month.get('lowTemp')
        path = f'climateData.monthly[{index}]'
        if _is_number(high) and _is_number(low) and high < low:
            errors.append(ValidationIssue(
                path, 'High temperature must be greater than low temperature', 'INVALID_TEMP_RANGE'))
        if (_is_number(high) and high > EXTREME_TEMPERATURE) or (_is_number(low) and low < -EXTREME_TEMPERATURE):
            warnings.append(ValidationIssue(path, 'Temperature values seem extreme', 'EXTREME_TEMPERATURE'))


# -- sanitizers ---------------------------------------------------------------

@sanitizer('hero')
def sanitize_hero(content):
    for key in ('headline', 'subheadline'):
        if content.get(key):
            content[key] = sanitize_text(content[key])
    return content


@sanitizer('attractions')
def sanitize_attractions(content):
    attractions = content.get('attractions')
    if isinstance(attractions, list):
        for attraction in attractions:
            if not isinstance(attraction, dict):
                continue
            for key in ('name', 'description'):
                if key in attraction:
                    attraction[key] = sanitize_text(attraction[key])
    return content


class ContentValidator:
    """Validates generated content for a template."""

    def __init__(self, converter=None):
        self.converter = converter or schema_converter

    def validate_content(self, content, template) -> ContentValidationResult:
        errors: List[ValidationIssue] = []
        warnings: List[ValidationIssue] = []

        try:
            structural = self.converter.for_template(template).validate(content)
            for err in structural.errors:
                errors.append(ValidationIssue(err.path, err.message, 'SCHEMA_VALIDATION_ERROR'))

            family = template_family(template)
            if family in _rules and isinstance(content, dict):
                _rules[family](content, errors, warnings)

            sanitized = None
            if structural.success:
                sanitized = copy.deepcopy(content)
                if family in _sanitizers and isinstance(sanitized, dict):
                    sanitized = _sanitizers[family](sanitized)

            return ContentValidationResult(
                is_valid=not errors,
                errors=errors,
                warnings=warnings,
                sanitized_content=sanitized,
            )
        except Exception as e:
            logger.exception(f"Validation crashed for template {template.name}")
            errors.append(ValidationIssue('', str(e) or 'Unknown validation error', 'VALIDATION_ERROR'))
            return ContentValidationResult(is_valid=False, errors=errors, warnings=warnings)
