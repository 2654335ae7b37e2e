"""
Typed call surface over the remote Schema Registry.

``RegistryClient`` speaks in schemareg's own types and error taxonomy.
Confluent ``SchemaRegistryError`` codes from the transport are translated
here and nowhere else; anything it does not recognise surfaces as
``TransportFailure`` with the original status, code and message intact.
"""

from __future__ import annotations

import logging
from typing import NoReturn, Optional, Tuple

from confluent_kafka.schema_registry import Schema as ConfluentSchema
from confluent_kafka.schema_registry import SchemaRegistryError

from schemareg.errors import (
    InvalidSchemaDefinition,
    SchemaNotFound,
    SchemaNotFoundForSubject,
    SubjectNotFound,
    TransportFailure,
)
from schemareg.infra.transport import RegistryTransport
from schemareg.models.schema import Compatibility, LatestVersion, Schema, SchemaType
from schemareg.observability.tracing import get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer("schemareg.registry_client")

DEFAULT_CLIENT_ID: str = "Confluent_Schema_Registry"

# Confluent Schema Registry error codes.
SUBJECT_NOT_FOUND = 40401
VERSION_NOT_FOUND = 40402
SCHEMA_NOT_FOUND = 40403
SUBJECT_COMPATIBILITY_NOT_CONFIGURED = 40408
INVALID_SCHEMA = 42201

INVALID_SCHEMA_MESSAGE = "Either the input schema or one its references is invalid"


def to_confluent_schema(schema: Schema) -> ConfluentSchema:
    return ConfluentSchema(schema.schema_string, schema.type.value)


def from_confluent_schema(schema: ConfluentSchema) -> Schema:
    return Schema(
        type=SchemaType(schema.schema_type or SchemaType.AVRO.value),
        schema_string=schema.schema_str,
    )


class RegistryClient:
    """
    Typed wrapper over a ``RegistryTransport``.

    Error messages are prefixed with ``client_id`` so a process talking to
    several registries can tell them apart.
    """

    def __init__(self, transport: RegistryTransport, client_id: str = DEFAULT_CLIENT_ID) -> None:
        self._transport = transport
        self._client_id = client_id

    @property
    def client_id(self) -> str:
        return self._client_id

    def _transport_failure(self, operation: str, exc: SchemaRegistryError) -> NoReturn:
        logger.error(
            "Schema Registry returned an unexpected error",
            extra={
                "operation": operation,
                "http_status_code": exc.http_status_code,
                "error_code": exc.error_code,
                "error": exc.error_message,
            },
        )
        raise TransportFailure(
            f"{self._client_id} - {exc.error_message}",
            http_status_code=exc.http_status_code,
            error_code=exc.error_code,
        ) from exc

    async def register_schema(self, schema: Schema, subject: str) -> int:
        """
        Register ``schema`` under ``subject`` and return its registry id.

        Raises:
            InvalidSchemaDefinition: if the registry rejects the schema text.
        """
        with tracer.start_as_current_span("schema_registry.register") as span:
            span.set_attribute("schema_registry.subject", subject)
            span.set_attribute("schema_registry.schema_type", schema.type.value)
            try:
                registry_id = await self._transport.register_schema(
                    subject, to_confluent_schema(schema)
                )
            except SchemaRegistryError as exc:
                if exc.error_code == INVALID_SCHEMA or exc.http_status_code == 422:
                    logger.warning(
                        "Schema rejected by registry",
                        extra={"subject": subject, "error": exc.error_message},
                    )
                    raise InvalidSchemaDefinition(
                        f"{self._client_id} - {INVALID_SCHEMA_MESSAGE}"
                    ) from exc
                self._transport_failure("register_schema", exc)
            span.set_attribute("schema_registry.id", registry_id)

        logger.info(
            "Schema registered",
            extra={"subject": subject, "registry_id": registry_id},
        )
        return registry_id

    async def fetch_schema_by_id(self, registry_id: int) -> Tuple[SchemaType, str]:
        """
        Fetch the schema type and text registered under ``registry_id``.

        Raises:
            SchemaNotFound: if the id is unknown to the registry.
        """
        with tracer.start_as_current_span("schema_registry.fetch_schema") as span:
            span.set_attribute("schema_registry.id", registry_id)
            try:
                found = await self._transport.get_schema(registry_id)
            except SchemaRegistryError as exc:
                if exc.error_code == SCHEMA_NOT_FOUND or exc.http_status_code == 404:
                    raise SchemaNotFound(registry_id, self._client_id) from exc
                self._transport_failure("get_schema", exc)

        schema = from_confluent_schema(found)
        logger.debug(
            "Schema fetched",
            extra={"registry_id": registry_id, "schema_type": schema.type.value},
        )
        return schema.type, schema.schema_string

    async def fetch_latest_version(self, subject: str) -> LatestVersion:
        """
        Fetch the latest version registered under ``subject``.

        Raises:
            SubjectNotFound: if the subject has no versions.
        """
        with tracer.start_as_current_span("schema_registry.latest_version") as span:
            span.set_attribute("schema_registry.subject", subject)
            try:
                registered = await self._transport.get_latest_version(subject)
            except SchemaRegistryError as exc:
                if exc.error_code in (SUBJECT_NOT_FOUND, VERSION_NOT_FOUND):
                    raise SubjectNotFound(subject, self._client_id) from exc
                self._transport_failure("get_latest_version", exc)

        return LatestVersion(
            id=registered.schema_id,
            version=registered.version,
            schema=from_confluent_schema(registered.schema),
        )

    async def get_compatibility(self, subject: str) -> Optional[Compatibility]:
        """Return the subject-level compatibility, or None when it is not configured."""
        with tracer.start_as_current_span("schema_registry.get_compatibility") as span:
            span.set_attribute("schema_registry.subject", subject)
            try:
                level = await self._transport.get_compatibility(subject)
            except SchemaRegistryError as exc:
                if exc.error_code in (SUBJECT_NOT_FOUND, SUBJECT_COMPATIBILITY_NOT_CONFIGURED):
                    return None
                self._transport_failure("get_compatibility", exc)

        return Compatibility(level.upper()) if level else None

    async def set_compatibility(self, subject: str, level: Compatibility) -> None:
        with tracer.start_as_current_span("schema_registry.set_compatibility") as span:
            span.set_attribute("schema_registry.subject", subject)
            span.set_attribute("schema_registry.compatibility", level.value)
            try:
                await self._transport.set_compatibility(subject, level.value)
            except SchemaRegistryError as exc:
                self._transport_failure("set_compatibility", exc)

        logger.info(
            "Subject compatibility configured",
            extra={"subject": subject, "compatibility": level.value},
        )

    async def find_registration_by_content(self, subject: str, schema: Schema) -> int:
        """
        Find the id under which exactly this schema content is registered for ``subject``.

        Raises:
            SubjectNotFound: if the subject does not exist.
            SchemaNotFoundForSubject: if no version of the subject matches the content.
        """
        with tracer.start_as_current_span("schema_registry.lookup") as span:
            span.set_attribute("schema_registry.subject", subject)
            try:
                registered = await self._transport.lookup_schema(
                    subject, to_confluent_schema(schema)
                )
            except SchemaRegistryError as exc:
                if exc.error_code == SUBJECT_NOT_FOUND:
                    raise SubjectNotFound(subject, self._client_id) from exc
                if exc.error_code == SCHEMA_NOT_FOUND:
                    raise SchemaNotFoundForSubject(subject, self._client_id) from exc
                self._transport_failure("lookup_schema", exc)

        return registered.schema_id

    async def close(self) -> None:
        await self._transport.close()
