"""
SchemaRegistry façade.

Producers register schemas and encode values into the Confluent wire
format; consumers decode framed messages without knowing in advance which
schema wrote them. The façade owns its ``SchemaCache``; nothing is shared
between instances.

Subject compatibility follows a one-way lifecycle: the first ``register``
on a subject without a configured level sets it (to the requested level or
``BACKWARD``), and every later ``register`` must ask for that same level.
A mismatch fails before anything is written to the registry.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from schemareg.core.backends import ParsedSchema, SerializerBackends
from schemareg.core.cache import SchemaCache
from schemareg.core.wire import check_registry_id, frame, unframe
from schemareg.errors import CompatibilityMismatch, InvalidSchemaDefinition
from schemareg.infra.registry_client import RegistryClient
from schemareg.models.schema import (
    DEFAULT_COMPATIBILITY,
    Compatibility,
    RegisterOptions,
    RegistrationResult,
    Schema,
    Subject,
)

logger = logging.getLogger(__name__)


def _subject_name(subject: Union[Subject, str]) -> str:
    return subject.name if isinstance(subject, Subject) else Subject(name=subject).name


class SchemaRegistry:
    """
    Register, encode and decode against a remote Schema Registry.

    Args:
        client: Typed registry client.
        backends: Serializer backends per schema type; Avro and JSON by default.
        default_compatibility: Level applied when ``register`` is not given one.
    """

    def __init__(
        self,
        client: RegistryClient,
        backends: Optional[SerializerBackends] = None,
        default_compatibility: Compatibility = DEFAULT_COMPATIBILITY,
    ) -> None:
        self.api = client
        self.backends = backends if backends is not None else SerializerBackends.default()
        self.default_compatibility = Compatibility(default_compatibility)
        self.cache = SchemaCache(self.backends, client.fetch_schema_by_id)

    async def register(
        self,
        schema: Schema,
        subject: Union[Subject, str],
        options: Optional[RegisterOptions] = None,
    ) -> RegistrationResult:
        """
        Register ``schema`` under ``subject`` after negotiating compatibility.

        Raises:
            CompatibilityMismatch: if the subject is configured with another level.
            InvalidSchemaDefinition: if the registry rejects the schema.
        """
        name = _subject_name(subject)
        requested = (
            options.compatibility
            if options is not None and options.compatibility is not None
            else self.default_compatibility
        )

        configured = await self.api.get_compatibility(name)
        if configured is None:
            await self.api.set_compatibility(name, requested)
        elif configured != requested:
            logger.warning(
                "Subject compatibility mismatch",
                extra={
                    "subject": name,
                    "requested": requested.value,
                    "configured": configured.value,
                },
            )
            raise CompatibilityMismatch(requested=requested.value, configured=configured.value)

        registry_id = await self.api.register_schema(schema, name)
        self.cache.set_registry_id(name, schema, registry_id)

        # The registry already holds the schema; a local parse failure only
        # defers the error to encode/decode through resolve().
        if schema.type in self.backends:
            try:
                self.cache.set_schema(registry_id, schema.type, schema.schema_string)
            except InvalidSchemaDefinition as exc:
                logger.warning(
                    "Registered schema rejected by local backend",
                    extra={"subject": name, "registry_id": registry_id, "error": str(exc)},
                )

        return RegistrationResult(id=registry_id)

    async def get_schema(self, registry_id: int) -> ParsedSchema:
        """Parsed schema for ``registry_id``, fetched from the registry on a miss."""
        return await self.cache.resolve(registry_id)

    async def encode(self, registry_id: Optional[int], value: Any) -> bytes:
        """
        Encode ``value`` with the schema registered as ``registry_id`` and frame it.

        Raises:
            InvalidRegistryId: if ``registry_id`` is missing or not an unsigned
                32-bit integer; checked before any I/O.
        """
        check_registry_id(registry_id)

        schema = await self.cache.resolve(registry_id)
        return frame(registry_id, schema.encode(value))

    async def decode(self, buffer: bytes) -> Any:
        """
        Decode a framed message using the schema named in its header.

        Raises:
            MagicByteMismatch: if the message does not start with the magic byte.
        """
        registry_id, payload = unframe(buffer)
        schema = await self.cache.resolve(registry_id)
        return schema.decode(payload)

    async def get_registry_id_by_schema(self, subject_name: str, schema: Schema) -> int:
        """
        Registry id of ``schema`` under ``subject_name``.

        Raises:
            SubjectNotFound: if the subject does not exist.
            SchemaNotFoundForSubject: if the exact content is not registered under it.
        """
        registry_id = self.cache.get_registry_id(subject_name, schema)
        if registry_id is not None:
            return registry_id

        registry_id = await self.api.find_registration_by_content(subject_name, schema)
        self.cache.set_registry_id(subject_name, schema, registry_id)
        return registry_id

    async def get_latest_schema_id(self, subject_name: str) -> int:
        latest = await self.api.fetch_latest_version(subject_name)
        return latest.id

    async def close(self) -> None:
        self.cache.clear()
        await self.api.close()

    async def __aenter__(self) -> "SchemaRegistry":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
