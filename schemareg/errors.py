"""
Error taxonomy for schemareg.

Every failure surfaced to callers derives from ``SchemaRegistryClientError``.
Nothing in the package recovers from these locally; they are raised with the
underlying cause chained.
"""

from __future__ import annotations

from typing import Any, Optional


class SchemaRegistryClientError(Exception):
    """Base class for all schemareg errors."""


class InvalidRegistryId(SchemaRegistryClientError):
    """``encode`` was called without a usable registry id."""

    def __init__(self, registry_id: Any) -> None:
        self.registry_id = registry_id
        super().__init__(f"Invalid registryId: {registry_id}")


class MagicByteMismatch(SchemaRegistryClientError):
    """The leading byte of a framed message is not the expected magic byte."""

    def __init__(self, observed: int, expected: int) -> None:
        self.observed = observed
        self.expected = expected
        super().__init__(
            f"Message encoded with magic byte 0x{observed:02x}, expected 0x{expected:02x}"
        )


class TruncatedMessage(SchemaRegistryClientError):
    """A framed message is shorter than the 5-byte header."""

    def __init__(self, length: int, required: int) -> None:
        self.length = length
        self.required = required
        super().__init__(
            f"Message of {length} bytes is shorter than the {required}-byte header"
        )


class SubjectNotFound(SchemaRegistryClientError):
    def __init__(self, subject: str, client_id: str) -> None:
        self.subject = subject
        super().__init__(f"{client_id} - Subject '{subject}' not found.")


class SchemaNotFoundForSubject(SchemaRegistryClientError):
    def __init__(self, subject: str, client_id: str) -> None:
        self.subject = subject
        super().__init__(f"{client_id} - Schema not found")


class SchemaNotFound(SchemaRegistryClientError):
    def __init__(self, registry_id: int, client_id: str) -> None:
        self.registry_id = registry_id
        super().__init__(f"{client_id} - Schema {registry_id} not found")


class CompatibilityMismatch(SchemaRegistryClientError):
    """The subject is configured with a different compatibility level than requested."""

    def __init__(self, requested: str, configured: str) -> None:
        self.requested = requested
        self.configured = configured
        super().__init__(
            f"Compatibility does not match the configuration ({requested} != {configured})"
        )


class InvalidSchemaDefinition(SchemaRegistryClientError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class UnsupportedSchemaType(SchemaRegistryClientError):
    """No serializer backend is registered for the schema type."""

    def __init__(self, schema_type: Any) -> None:
        self.schema_type = schema_type
        super().__init__(f"No serializer backend registered for schema type {schema_type}")


class SerializationError(SchemaRegistryClientError):
    """A value could not be encoded with, or decoded by, its schema."""


class TransportFailure(SchemaRegistryClientError):
    """
    Network or remote-service failure reported by the transport.

    The collaborator's status, error code and message are kept verbatim.
    """

    def __init__(
        self,
        message: str,
        http_status_code: Optional[int] = None,
        error_code: Optional[int] = None,
    ) -> None:
        self.http_status_code = http_status_code
        self.error_code = error_code
        super().__init__(message)
