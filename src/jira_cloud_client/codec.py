"""
JSON codec used by the API client.

Serializes request payloads to JSON text and maps response bodies onto
caller-supplied types using pydantic.
"""
import logging
from functools import lru_cache
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CodecError(Exception):
    """Base exception for all codec errors."""
    pass


class JsonSerializationError(CodecError):
    """Raised when a value cannot be turned into JSON."""
    pass


class JsonParseError(CodecError):
    """Raised when bytes are not valid JSON."""
    pass


class JsonMappingError(CodecError):
    """Raised when valid JSON cannot be mapped onto the target type."""
    pass


def _summarize(error: ValidationError) -> str:
    """Collapse a ValidationError into one line."""
    parts = []
    for err in error.errors():
        loc = '.'.join(str(part) for part in err.get('loc', ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err['msg'])
    return '; '.join(parts)


@lru_cache(maxsize=128)
def _adapter_for(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


class JsonCodec:
    """Pydantic-backed JSON codec.

    Pydantic models are written with their field aliases, so models declaring
    camelCase aliases produce the wire names the Jira APIs expect.
    """

    def __init__(self, by_alias: bool = True, exclude_none: bool = True):
        self.by_alias = by_alias
        self.exclude_none = exclude_none

    def serialize(self, value: Any) -> str:
        """Serialize a value to a JSON string.

        Args:
            value: Pydantic model, dataclass, mapping, sequence or primitive

        Returns:
            JSON text

        Raises:
            JsonSerializationError: If the value (or something inside it) is not serializable
        """
        try:
            return to_json(
                value,
                by_alias=self.by_alias,
                exclude_none=self.exclude_none,
            ).decode('utf-8')
        except (PydanticSerializationError, ValueError, TypeError, RecursionError) as e:
            raise JsonSerializationError(str(e)) from e

    def deserialize(self, data: bytes, target_type: Type[T]) -> T:
        """Parse JSON bytes into an instance of ``target_type``.

        Args:
            data: Raw JSON document
            target_type: Any type pydantic can validate (models, dataclasses, dict, list[...], ...)

        Returns:
            Validated instance of target_type

        Raises:
            JsonParseError: If data is not well-formed JSON
            JsonMappingError: If the JSON does not fit target_type
        """
        try:
            adapter = _adapter_for(target_type)
        except TypeError:
            # Unhashable type descriptors (e.g. Annotated with unhashable metadata)
            adapter = TypeAdapter(target_type)

        try:
            return adapter.validate_json(data)
        except ValidationError as e:
            if any(err.get('type') == 'json_invalid' for err in e.errors()):
                raise JsonParseError(_summarize(e)) from e
            raise JsonMappingError(_summarize(e)) from e
