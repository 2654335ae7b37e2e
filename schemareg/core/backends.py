"""
Serializer backends keyed by schema type.

A backend turns registry schema text into a parsed handle and uses that
handle to encode values into payload bytes and back. The core never looks
at which backend it is talking to; supporting a new schema type means one
``SchemaType`` member plus one backend registered here.
"""

from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol

import fastavro
from fastavro.schema import SchemaParseException, UnknownType
from jsonschema import exceptions as jsonschema_exceptions
from jsonschema.validators import Draft7Validator, validator_for

from schemareg.errors import (
    InvalidSchemaDefinition,
    SerializationError,
    UnsupportedSchemaType,
)
from schemareg.models.schema import SchemaType

logger = logging.getLogger(__name__)


class SerializerBackend(Protocol):
    def parse(self, schema_text: str) -> Any: ...

    def encode(self, handle: Any, value: Any) -> bytes: ...

    def decode(self, handle: Any, data: bytes) -> Any: ...


@dataclass(frozen=True)
class ParsedSchema:
    """
    A schema ready to encode and decode: the parsed handle bound to its backend.

    This is what the schema cache stores per registry id.
    """

    type: SchemaType
    handle: Any
    backend: SerializerBackend

    def encode(self, value: Any) -> bytes:
        return self.backend.encode(self.handle, value)

    def decode(self, data: bytes) -> Any:
        return self.backend.decode(self.handle, data)


class AvroBackend:
    """Avro binary encoding through fastavro's schemaless reader/writer."""

    def parse(self, schema_text: str) -> Any:
        try:
            return fastavro.parse_schema(json.loads(schema_text))
        except (ValueError, TypeError, KeyError, SchemaParseException, UnknownType) as exc:
            raise InvalidSchemaDefinition(f"Invalid Avro schema: {exc}") from exc

    def encode(self, handle: Any, value: Any) -> bytes:
        buf = io.BytesIO()
        try:
            fastavro.schemaless_writer(buf, handle, value)
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            raise SerializationError(f"Value does not match Avro schema: {exc}") from exc
        return buf.getvalue()

    def decode(self, handle: Any, data: bytes) -> Any:
        try:
            return fastavro.schemaless_reader(io.BytesIO(data), handle)
        except (EOFError, ValueError, TypeError, IndexError, UnicodeDecodeError) as exc:
            raise SerializationError(f"Payload is not valid Avro for schema: {exc}") from exc


class JsonBackend:
    """
    JSON payloads validated against a JSON Schema.

    The draft is taken from ``$schema`` when present, Draft 7 otherwise.
    Values are validated on both encode and decode.
    """

    def parse(self, schema_text: str) -> Any:
        try:
            schema = json.loads(schema_text)
            validator_cls = validator_for(schema, default=Draft7Validator)
            validator_cls.check_schema(schema)
        except (ValueError, TypeError, AttributeError, jsonschema_exceptions.SchemaError) as exc:
            raise InvalidSchemaDefinition(f"Invalid JSON schema: {exc}") from exc
        return validator_cls(schema)

    def encode(self, handle: Any, value: Any) -> bytes:
        self._validate(handle, value)
        try:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Value is not JSON serializable: {exc}") from exc

    def decode(self, handle: Any, data: bytes) -> Any:
        try:
            value = json.loads(bytes(data).decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise SerializationError(f"Payload is not valid JSON: {exc}") from exc
        self._validate(handle, value)
        return value

    @staticmethod
    def _validate(handle: Any, value: Any) -> None:
        try:
            handle.validate(value)
        except jsonschema_exceptions.ValidationError as exc:
            raise SerializationError(f"Value does not match JSON schema: {exc.message}") from exc


class SerializerBackends:
    """Mapping of ``SchemaType`` to the backend that handles it."""

    def __init__(self, backends: Optional[Mapping[SchemaType, SerializerBackend]] = None) -> None:
        self._backends: Dict[SchemaType, SerializerBackend] = dict(backends or {})

    @classmethod
    def default(cls) -> "SerializerBackends":
        """Avro and JSON; Protobuf must be registered by the caller."""
        return cls({SchemaType.AVRO: AvroBackend(), SchemaType.JSON: JsonBackend()})

    def register(self, schema_type: SchemaType, backend: SerializerBackend) -> None:
        self._backends[SchemaType(schema_type)] = backend
        logger.debug(
            "Serializer backend registered",
            extra={"schema_type": SchemaType(schema_type).value, "backend": type(backend).__name__},
        )

    def get(self, schema_type: SchemaType) -> SerializerBackend:
        try:
            return self._backends[SchemaType(schema_type)]
        except (KeyError, ValueError) as exc:
            raise UnsupportedSchemaType(schema_type) from exc

    def parse(self, schema_type: SchemaType, schema_text: str) -> ParsedSchema:
        backend = self.get(schema_type)
        return ParsedSchema(
            type=SchemaType(schema_type),
            handle=backend.parse(schema_text),
            backend=backend,
        )

    def __contains__(self, schema_type: object) -> bool:
        return schema_type in self._backends
