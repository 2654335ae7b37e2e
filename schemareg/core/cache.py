"""
In-memory schema cache with coalesced fetch-on-miss.

The cache maps registry ids to parsed schemas and ``(subject, schema text)``
pairs to registry ids. It is unbounded and never evicts: a registry id's
content is immutable, so an entry stays valid for the life of the client.
Only ``clear()`` drops entries, and it drops all of them.

Concurrent ``resolve`` calls for the same missing id share one
``asyncio.Task``. The task populates the cache before it settles, and its
pending-table entry is removed by a done-callback, so a caller arriving in
between awaits the settled task instead of starting a second fetch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Tuple

from schemareg.core.backends import ParsedSchema, SerializerBackends
from schemareg.models.schema import Schema, SchemaType
from schemareg.observability.instrumentation import get_cache_instruments

logger = logging.getLogger(__name__)

SchemaFetcher = Callable[[int], Awaitable[Tuple[SchemaType, str]]]


class SchemaCache:
    """
    Schema cache owned by a single ``SchemaRegistry`` instance.

    Args:
        backends: Parses fetched schema text into ``ParsedSchema`` values.
        fetch: Async ``id -> (schema type, schema text)`` lookup, normally
            ``RegistryClient.fetch_schema_by_id``.
    """

    def __init__(self, backends: SerializerBackends, fetch: SchemaFetcher) -> None:
        self._backends = backends
        self._fetch = fetch
        self._schemas: Dict[int, ParsedSchema] = {}
        self._pending: Dict[int, "asyncio.Task[ParsedSchema]"] = {}
        self._ids_by_subject: Dict[Tuple[str, SchemaType, str], int] = {}
        self._hits, self._misses, self._fetches = get_cache_instruments()

    def get_schema(self, registry_id: int) -> Optional[ParsedSchema]:
        return self._schemas.get(registry_id)

    def set_schema(self, registry_id: int, schema_type: SchemaType, schema_text: str) -> ParsedSchema:
        """Parse ``schema_text`` and store it under ``registry_id``, replacing any entry."""
        parsed = self._backends.parse(schema_type, schema_text)
        self._schemas[registry_id] = parsed
        return parsed

    async def resolve(self, registry_id: int) -> ParsedSchema:
        """
        Return the parsed schema for ``registry_id``, fetching it on a miss.

        At most one fetch per missing id is in flight at a time; every caller
        waiting on it receives the same schema or the same exception.
        """
        cached = self._schemas.get(registry_id)
        if cached is not None:
            self._hits.add(1)
            return cached

        self._misses.add(1)
        task = self._pending.get(registry_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(registry_id))
            self._pending[registry_id] = task
            task.add_done_callback(
                lambda done, rid=registry_id: self._forget_pending(rid, done)
            )
        # Shielded so one cancelled waiter does not cancel the shared fetch.
        return await asyncio.shield(task)

    async def _fetch_and_store(self, registry_id: int) -> ParsedSchema:
        self._fetches.add(1)
        logger.debug("Fetching schema from registry", extra={"registry_id": registry_id})
        schema_type, schema_text = await self._fetch(registry_id)
        return self.set_schema(registry_id, schema_type, schema_text)

    def _forget_pending(self, registry_id: int, task: "asyncio.Task[ParsedSchema]") -> None:
        if self._pending.get(registry_id) is task:
            del self._pending[registry_id]
        if not task.cancelled() and task.exception() is not None:
            logger.warning(
                "Schema fetch failed",
                extra={"registry_id": registry_id, "error": str(task.exception())},
            )

    def get_registry_id(self, subject: str, schema: Schema) -> Optional[int]:
        return self._ids_by_subject.get((subject, schema.type, schema.schema_string))

    def set_registry_id(self, subject: str, schema: Schema, registry_id: int) -> None:
        self._ids_by_subject[(subject, schema.type, schema.schema_string)] = registry_id

    def clear(self) -> None:
        """
        Drop every cached schema, subject index entry and pending fetch record.

        Fetches already in flight still complete and may repopulate the cache.
        """
        self._schemas.clear()
        self._ids_by_subject.clear()
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._schemas)
