"""
Prompt assembly for template-driven generation.
"""
import json
import re

BASE_LANGUAGE = 'en'

LANGUAGE_NAMES = {
    'en': 'English',
    'es': 'Spanish',
    'fr': 'French',
    'de': 'German',
    'it': 'Italian',
    'pt': 'Portuguese',
    'ru': 'Russian',
    'ja': 'Japanese',
    'zh': 'Chinese',
    'ar': 'Arabic',
    'hi': 'Hindi',
    'ko': 'Korean',
    'nl': 'Dutch',
    'pl': 'Polish',
    'tr': 'Turkish',
    'sv': 'Swedish',
    'da': 'Danish',
    'no': 'Norwegian',
    'fi': 'Finnish',
}

DEFAULT_IMAGE_STYLE = (
    'photorealistic, professional photography, high quality, detailed, sharp focus, vibrant colors'
)

_PLACEHOLDER = re.compile(r'\{([^{}]+)\}')


def get_language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code)


def _stringify(value) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def build_prompt(template: str, context: dict) -> str:
    """
    Fill ``{key}`` placeholders from ``context`` and append language and
    extra instructions.

    Unknown placeholders are left as literal text. Substitution is a single
    pass, so a value that itself contains ``{key}`` is not expanded again.
    """
    context = context or {}

    def replace(match):
        key = match.group(1)
        if key not in context:
            return match.group(0)
        return _stringify(context[key])

    prompt = _PLACEHOLDER.sub(replace, template or '')

    language = context.get('language')
    if language and language != BASE_LANGUAGE:
        prompt += f"\n\nIMPORTANT: Generate all content in {get_language_name(language)} language."

    additional = context.get('additionalPrompt')
    if additional:
        prompt += f"\n\nAdditional instructions: {additional}"

    return prompt


def enhance_image_prompt(base_prompt: str, style: str = None) -> str:
    return f"{base_prompt}, {style or DEFAULT_IMAGE_STYLE}"
