"""
Template schema -> runtime validator.

A template's ``schema`` is a JSON-Schema-shaped dict. It is handed to the
model unchanged as the structured output contract, and converted here into a
pydantic type that checks what the model sent back.

Supported nodes:
  string   enum, minLength, maxLength, pattern
  number   minimum, maximum (integer additionally rejects fractions)
  boolean
  array    items, minItems, maxItems
  object   properties, required (no properties -> any JSON object)

A node with a missing or unknown ``type`` accepts any value. Templates with
loosely specified nested objects rely on this, so it is kept, but every such
path is logged at DEBUG and listed on ``SchemaValidator.permissive_paths``.
"""
import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import (
    AfterValidator,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    create_model,
)
from pydantic_core import PydanticCustomError

logger = logging.getLogger(__name__)

ROOT_PATH = '$'


@dataclass
class SchemaError:
    path: str
    message: str
    code: str

    def as_dict(self):
        return {'path': self.path, 'message': self.message, 'code': self.code}


@dataclass
class SchemaValidationResult:
    success: bool
    data: Any = None
    errors: List[SchemaError] = field(default_factory=list)

    def error_summary(self) -> str:
        return '; '.join(
            f"{e.path or ROOT_PATH}: {e.message}" for e in self.errors
        )


def _number_validator(kind: str, minimum, maximum):
    def check(value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PydanticCustomError(f'{kind}_type', 'Input should be a valid {kind}', {'kind': kind})
        if kind == 'integer' and isinstance(value, float) and not value.is_integer():
            raise PydanticCustomError('integer_type', 'Input should be a valid integer', {})
        if minimum is not None and value < minimum:
            raise PydanticCustomError(
                'greater_than_equal', 'Input should be greater than or equal to {ge}', {'ge': minimum}
            )
        if maximum is not None and value > maximum:
            raise PydanticCustomError(
                'less_than_equal', 'Input should be less than or equal to {le}', {'le': maximum}
            )
        return value
    return check


def _pattern_validator(pattern: str, compiled):
    def check(value):
        if not compiled.search(value):
            raise PydanticCustomError(
                'string_pattern_mismatch', "String should match pattern '{pattern}'", {'pattern': pattern}
            )
        return value
    return check


def _model_name(path: str) -> str:
    cleaned = re.sub(r'[^0-9a-zA-Z_]+', '_', path).strip('_')
    return f"Schema_{cleaned or 'root'}"


class SchemaValidator:
    """
    Runtime checker for one template schema.

    Build once per template and reuse; conversion walks the whole schema and
    creates pydantic models, validation is cheap.
    """

    def __init__(self, schema: Optional[dict]):
        self.schema = schema
        self.permissive_paths: List[str] = []
        self._adapter = TypeAdapter(self._convert(schema, ''))

    @property
    def is_permissive(self) -> bool:
        return bool(self.permissive_paths)

    def validate(self, data) -> SchemaValidationResult:
        try:
            value = self._adapter.validate_python(data)
        except ValidationError as exc:
            errors = [
                SchemaError(
                    path='.'.join(str(part) for part in err['loc']),
                    message=err['msg'],
                    code=err['type'],
                )
                for err in exc.errors()
            ]
            return SchemaValidationResult(success=False, errors=errors)
        cleaned = self._adapter.dump_python(value, by_alias=True, exclude_unset=True, mode='json')
        return SchemaValidationResult(success=True, data=cleaned)

    # -- conversion --------------------------------------------------------

    def _permissive(self, path: str, reason: str):
        self.permissive_paths.append(path or ROOT_PATH)
        logger.debug(f"Schema node at {path or ROOT_PATH} accepts any value ({reason})")
        return Any

    def _convert(self, schema, path: str):
        if not isinstance(schema, dict) or not schema:
            return self._permissive(path, 'empty schema')

        kind = schema.get('type')
        if kind == 'string':
            return self._convert_string(schema, path)
        if kind in ('number', 'integer'):
            return Annotated[
                Any, AfterValidator(_number_validator(kind, schema.get('minimum'), schema.get('maximum')))
            ]
        if kind == 'boolean':
            return StrictBool
        if kind == 'array':
            return self._convert_array(schema, path)
        if kind == 'object':
            return self._convert_object(schema, path)
        return self._permissive(path, f"type {kind!r}" if kind else 'no type')

    def _convert_string(self, schema, path):
        enum = schema.get('enum')
        if enum:
            return Literal[tuple(enum)]

        annotation = StrictStr
        min_length, max_length = schema.get('minLength'), schema.get('maxLength')
        if min_length is not None or max_length is not None:
            annotation = Annotated[annotation, StringConstraints(min_length=min_length, max_length=max_length)]

        pattern = schema.get('pattern')
        if pattern:
            try:
                compiled = re.compile(pattern)
            except re.error as exc:
                logger.warning(f"Ignoring invalid pattern {pattern!r} at {path or ROOT_PATH}: {exc}")
            else:
                annotation = Annotated[annotation, AfterValidator(_pattern_validator(pattern, compiled))]
        return annotation

    def _convert_array(self, schema, path):
        item_type = self._convert(schema.get('items') or {}, f"{path}[]")
        constraints = {}
        if schema.get('minItems') is not None:
            constraints['min_length'] = schema['minItems']
        if schema.get('maxItems') is not None:
            constraints['max_length'] = schema['maxItems']
        if constraints:
            return Annotated[List[item_type], Field(**constraints)]
        return List[item_type]

    def _convert_object(self, schema, path):
        properties = schema.get('properties')
        if not isinstance(properties, dict) or not properties:
            return Dict[str, Any]

        required = set(schema.get('required') or [])
        fields = {}
        # Property names become aliases so keys like "schema" or "model_id" can't clash with BaseModel.
        for index, (key, prop_schema) in enumerate(properties.items()):
            child_path = f"{path}.{key}" if path else key
            annotation = self._convert(prop_schema, child_path)
            if key in required:
                fields[f"field_{index}"] = (annotation, Field(..., alias=key))
            else:
                fields[f"field_{index}"] = (annotation, Field(default=None, alias=key))

        return create_model(
            _model_name(path),
            __config__=ConfigDict(extra='ignore'),
            **fields,
        )


def json_schema_to_validator(schema: Optional[dict]) -> SchemaValidator:
    return SchemaValidator(schema)


class SchemaConverter:
    """
    Memoizes validators per template.

    Keyed on (template id, updated_at) so an edited template is converted
    again, while every language and site sharing a template reuses one
    validator.
    """

    def __init__(self):
        self._cache: Dict[Any, SchemaValidator] = {}
        self._lock = threading.Lock()

    def for_template(self, template) -> SchemaValidator:
        if template.pk is None:
            # Unsaved templates have no stable identity.
            return json_schema_to_validator(template.schema)

        key = (template.pk, template.updated_at)
        with self._lock:
            validator = self._cache.get(key)
        if validator is None:
            validator = json_schema_to_validator(template.schema)
            if validator.is_permissive:
                logger.debug(
                    f"Template {template.name} has permissive schema nodes: {', '.join(validator.permissive_paths)}"
                )
            with self._lock:
                self._cache[key] = validator
        return validator

    def clear(self):
        with self._lock:
            self._cache.clear()


schema_converter = SchemaConverter()
