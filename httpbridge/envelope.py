"""
Envelope parsing: body text -> JSON object, `code` coercion and decoding of
the extracted data into the caller's target type.
"""
import json
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import PydanticSchemaGenerationError, TypeAdapter


class EnvelopeError(ValueError):
    """The body or one of its fields does not have the expected shape."""


def parse_envelope(text: str) -> Dict[str, Any]:
    try:
        envelope = json.loads(text)
    except json.JSONDecodeError as e:
        raise EnvelopeError(f"Body is not JSON: {e}") from e
    if not isinstance(envelope, dict):
        raise EnvelopeError(f"Envelope root is {type(envelope).__name__}, expected an object")
    return envelope


def read_code(envelope: Dict[str, Any], field: str = "code") -> Optional[str]:
    """Return ``envelope[field]`` as a string, None when absent or null."""
    value = envelope.get(field)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise EnvelopeError(f"Field '{field}' is {type(value).__name__}, expected a primitive")


def without_code(envelope: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the envelope minus its ``code`` member."""
    return {key: value for key, value in envelope.items() if key != "code"}


@lru_cache(maxsize=256)
def _adapter(target_type) -> TypeAdapter:
    return TypeAdapter(target_type)


def _adapter_for(target_type) -> TypeAdapter:
    try:
        hash(target_type)
    except TypeError:
        # unhashable type expressions skip the cache
        return TypeAdapter(target_type)
    return _adapter(target_type)


def decode_data(element: Any, target_type) -> Any:
    """Validate an extracted JSON element into ``target_type``.

    None stays None. Raises ``pydantic.ValidationError`` on shape mismatch
    and ``EnvelopeError`` when pydantic cannot build a schema for the type.
    """
    if element is None:
        return None
    try:
        adapter = _adapter_for(target_type)
    except PydanticSchemaGenerationError as e:
        raise EnvelopeError(f"Cannot decode into {target_type!r}: {e}") from e
    return adapter.validate_python(element)
