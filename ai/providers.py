"""
AI provider integration: Gemini structured-output generation.

``GeminiContentGenerator.generate_content`` never raises. Every failure mode
(network, timeout, empty text, unparseable JSON, schema mismatch) is an
attempt failure inside the retry loop, and exhausting the retries yields a
``GeneratedContent`` with ``success=False``.
"""
import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from django.conf import settings
from tenacity import Retrying, stop_after_attempt, wait_exponential

from .prompt_builder import build_prompt
from .schema_converter import schema_converter

logger = logging.getLogger(__name__)

GENERATED_BY = 'gemini'
DEFAULT_MODEL = 'gemini-2.5-pro'
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_CONCURRENCY = 3
MAX_BACKOFF = 30  # seconds
NO_PROVIDER = "No AI provider configured. Set GEMINI_API_KEY."

_JSON_OBJECT = re.compile(r'\{[\s\S]*\}')


class ContentGenerationError(Exception):
    """A single generation attempt failed; retried by the caller."""


@dataclass
class TokenUsage:
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    def as_dict(self):
        return {
            'promptTokens': self.prompt_tokens,
            'completionTokens': self.completion_tokens,
            'totalTokens': self.total_tokens,
        }


@dataclass
class GeneratedContent:
    success: bool
    data: Optional[Any]
    model: str
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[str] = None
    usage: Optional[TokenUsage] = None

    def as_dict(self):
        payload = {
            'success': self.success,
            'data': self.data,
            'generatedAt': self.generated_at.isoformat(),
            'model': self.model,
        }
        if self.error is not None:
            payload['error'] = self.error
        if self.usage is not None:
            payload['usage'] = self.usage.as_dict()
        return payload


def _now():
    return datetime.now(timezone.utc)


def parse_json_response(text: str):
    """Parse model text as JSON, falling back to the outermost ``{...}`` span."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        match = _JSON_OBJECT.search(text)
        if match:
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                pass
        raise ContentGenerationError(f"Failed to parse response: {exc}") from exc


def _extract_usage(response) -> Optional[TokenUsage]:
    metadata = getattr(response, 'usage_metadata', None)
    if metadata is None:
        return None
    return TokenUsage(
        prompt_tokens=getattr(metadata, 'prompt_token_count', None) or 0,
        completion_tokens=getattr(metadata, 'candidates_token_count', None) or 0,
        total_tokens=getattr(metadata, 'total_token_count', None) or 0,
    )


class GeminiContentGenerator:
    """
    Fills a template's schema with model output.

    ``client`` is anything exposing ``models.generate_content`` the way
    ``google.genai.Client`` does; it is built lazily from ``api_key`` when not
    given. ``wait`` overrides the tenacity backoff strategy.
    """

    def __init__(self, api_key: str = None, model: str = DEFAULT_MODEL,
                 temperature: float = DEFAULT_TEMPERATURE,
                 max_retries: int = DEFAULT_MAX_RETRIES,
                 timeout: int = DEFAULT_TIMEOUT,
                 client=None, wait=None):
        self.api_key = api_key
        self.model = model or DEFAULT_MODEL
        self.temperature = DEFAULT_TEMPERATURE if temperature is None else temperature
        self.max_retries = DEFAULT_MAX_RETRIES if max_retries is None else max_retries
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._client = client
        self._wait = wait or wait_exponential(multiplier=1, min=1, max=MAX_BACKOFF)

    @classmethod
    def from_settings(cls, **overrides):
        options = {
            'api_key': settings.GEMINI_API_KEY,
            'model': settings.GEMINI_MODEL,
            'temperature': settings.GEMINI_TEMPERATURE,
            'max_retries': settings.GEMINI_MAX_RETRIES,
            'timeout': settings.GEMINI_TIMEOUT,
        }
        options.update(overrides)
        return cls(**options)

    @property
    def client(self):
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def _build_client(self):
        if not self.api_key:
            raise ContentGenerationError(NO_PROVIDER)
        from google import genai
        from google.genai import types
        return genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
        )

    def generate_content(self, template, context: dict) -> GeneratedContent:
        """Generate data for one template/context pair, retrying failed attempts."""
        if self._client is None and not self.api_key:
            # Retrying cannot fix a missing key.
            logger.error(f"Generation for template {template.name} skipped: {NO_PROVIDER}")
            return self._failure(NO_PROVIDER)

        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self._wait,
            before_sleep=self._log_failed_attempt,
            reraise=True,
        )
        try:
            return retrying(self._generate, template, context)
        except Exception as e:
            logger.error(f"Generation for template {template.name} failed after retries: {e}")
            return self._failure(str(e) or e.__class__.__name__)

    def _failure(self, error: str) -> GeneratedContent:
        return GeneratedContent(
            success=False,
            data=None,
            error=error,
            model=self.model,
            generated_at=_now(),
        )

    def _log_failed_attempt(self, retry_state):
        exc = retry_state.outcome.exception()
        logger.warning(f"Attempt {retry_state.attempt_number} failed: {exc}. Retrying...")

    def _generate(self, template, context: dict) -> GeneratedContent:
        user_prompt = build_prompt(template.user_prompt_template, context)

        config = {
            'temperature': self.temperature,
            'response_mime_type': 'application/json',
        }
        if template.schema:
            config['response_schema'] = template.schema
        if template.system_prompt:
            config['system_instruction'] = template.system_prompt

        response = self.client.models.generate_content(
            model=self.model,
            contents=[{'role': 'user', 'parts': [{'text': user_prompt}]}],
            config=config,
        )

        text = getattr(response, 'text', None) or ''
        if not text.strip():
            raise ContentGenerationError("No response text received from Gemini")

        data = parse_json_response(text)

        if template.schema:
            validation = schema_converter.for_template(template).validate(data)
            if not validation.success:
                raise ContentGenerationError(f"Schema validation failed: {validation.error_summary()}")
            data = validation.data

        return GeneratedContent(
            success=True,
            data=data,
            model=self.model,
            generated_at=_now(),
            usage=_extract_usage(response),
        )

    def generate_batch(self, items, concurrency: int = DEFAULT_CONCURRENCY):
        """
        Run ``(template, context)`` pairs through a bounded pool.

        Results come back in input order.
        """
        items = list(items)
        if not items:
            return []
        with ThreadPoolExecutor(max_workers=max(1, min(concurrency, len(items)))) as executor:
            return list(executor.map(lambda pair: self.generate_content(*pair), items))
