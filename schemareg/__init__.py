"""
schemareg: asyncio client for a Confluent-compatible Schema Registry.

This package contains:
- the SchemaRegistry façade (register / encode / decode / lookups)
- the Confluent wire format codec and per-instance schema cache
- serializer backends per schema type
- shared config and observability utilities
"""

from schemareg.core.backends import ParsedSchema, SerializerBackend, SerializerBackends
from schemareg.core.registry import SchemaRegistry
from schemareg.core.wire import frame, unframe
from schemareg.errors import (
    CompatibilityMismatch,
    InvalidRegistryId,
    InvalidSchemaDefinition,
    MagicByteMismatch,
    SchemaNotFound,
    SchemaNotFoundForSubject,
    SchemaRegistryClientError,
    SerializationError,
    SubjectNotFound,
    TransportFailure,
    TruncatedMessage,
    UnsupportedSchemaType,
)
from schemareg.infra.registry_client import RegistryClient
from schemareg.models.schema import (
    Compatibility,
    RegisterOptions,
    RegistrationResult,
    Schema,
    SchemaType,
    Subject,
)

__all__ = [
    "SchemaRegistry",
    "RegistryClient",
    "SerializerBackend",
    "SerializerBackends",
    "ParsedSchema",
    "frame",
    "unframe",
    "Schema",
    "SchemaType",
    "Subject",
    "Compatibility",
    "RegisterOptions",
    "RegistrationResult",
    "SchemaRegistryClientError",
    "InvalidRegistryId",
    "MagicByteMismatch",
    "TruncatedMessage",
    "SubjectNotFound",
    "SchemaNotFoundForSubject",
    "SchemaNotFound",
    "CompatibilityMismatch",
    "InvalidSchemaDefinition",
    "UnsupportedSchemaType",
    "SerializationError",
    "TransportFailure",
]
