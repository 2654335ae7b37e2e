"""
Transport to the remote Schema Registry.

``RegistryTransport`` is the call boundary the client depends on. Its
methods mirror ``confluent_kafka.schema_registry.SchemaRegistryClient`` and
report HTTP-level errors as ``SchemaRegistryError`` so the registry client can
map Confluent error codes in one place.

``ConfluentTransport`` is the production implementation. The Confluent
client is blocking, so every call runs in a worker thread via
``asyncio.to_thread`` and the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Protocol, TypeVar

import httpx
from confluent_kafka.schema_registry import (
    RegisteredSchema,
    Schema as ConfluentSchema,
    SchemaRegistryClient,
)

from schemareg.errors import TransportFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RegistryTransport(Protocol):
    async def register_schema(self, subject_name: str, schema: ConfluentSchema) -> int: ...

    async def get_schema(self, schema_id: int) -> ConfluentSchema: ...

    async def get_latest_version(self, subject_name: str) -> RegisteredSchema: ...

    async def get_compatibility(self, subject_name: str) -> str: ...

    async def set_compatibility(self, subject_name: str, level: str) -> str: ...

    async def lookup_schema(self, subject_name: str, schema: ConfluentSchema) -> RegisteredSchema: ...

    async def close(self) -> None: ...


class ConfluentTransport:
    """
    Async adapter over the blocking Confluent ``SchemaRegistryClient``.

    Retries and timeouts are the Confluent client's concern and are set
    through its configuration dict.
    """

    def __init__(
        self,
        conf: Optional[Dict[str, Any]] = None,
        client: Optional[SchemaRegistryClient] = None,
    ) -> None:
        """
        Args:
            conf: Confluent client configuration (``url``, ``basic.auth.user.info``, ...).
            client: Pre-built client; takes precedence over ``conf``.
        """
        if client is None and conf is None:
            raise ValueError("Either conf or client must be provided")
        self._client = client if client is not None else SchemaRegistryClient(conf)

    async def _call(self, operation: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except httpx.HTTPError as exc:
            logger.error(
                "Schema Registry request failed",
                extra={"operation": operation, "error": str(exc)},
            )
            raise TransportFailure(str(exc) or type(exc).__name__) from exc

    async def register_schema(self, subject_name: str, schema: ConfluentSchema) -> int:
        return await self._call("register_schema", self._client.register_schema, subject_name, schema)

    async def get_schema(self, schema_id: int) -> ConfluentSchema:
        return await self._call("get_schema", self._client.get_schema, schema_id)

    async def get_latest_version(self, subject_name: str) -> RegisteredSchema:
        return await self._call("get_latest_version", self._client.get_latest_version, subject_name)

    async def get_compatibility(self, subject_name: str) -> str:
        return await self._call("get_compatibility", self._client.get_compatibility, subject_name)

    async def set_compatibility(self, subject_name: str, level: str) -> str:
        return await self._call("set_compatibility", self._client.set_compatibility, subject_name, level)

    async def lookup_schema(self, subject_name: str, schema: ConfluentSchema) -> RegisteredSchema:
        return await self._call("lookup_schema", self._client.lookup_schema, subject_name, schema)

    async def close(self) -> None:
        await asyncio.to_thread(self._client.__exit__)
