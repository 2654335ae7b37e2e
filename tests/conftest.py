"""
Shared fixtures: an in-memory stand-in for the remote Schema Registry.

``FakeRegistryTransport`` implements the ``RegistryTransport`` surface and
raises ``SchemaRegistryError`` with the same status/error codes a Confluent
registry returns, so the registry client's error mapping is exercised for
real. Call counts let tests assert how many outbound requests were issued.
"""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pytest
from confluent_kafka.schema_registry import Schema as ConfluentSchema
from confluent_kafka.schema_registry import SchemaRegistryError

from schemareg.core.registry import SchemaRegistry
from schemareg.infra.registry_client import RegistryClient
from schemareg.models.schema import Schema, SchemaType

PERSON_AVSC = {
    "type": "record",
    "name": "Person",
    "namespace": "com.org.domain.fixtures",
    "fields": [{"type": "string", "name": "full_name"}],
}


@dataclass
class FakeRegistered:
    schema_id: int
    schema: ConfluentSchema
    subject: str
    version: int


class FakeRegistryTransport:
    """In-memory registry emulating Confluent REST semantics."""

    def __init__(self) -> None:
        self.calls: Counter = Counter()
        self.closed = False
        self._next_id = 1
        self._ids: Dict[Tuple[str, str], int] = {}
        self._schemas: Dict[int, Tuple[str, str]] = {}
        self._versions: Dict[str, List[int]] = {}
        self._config: Dict[str, str] = {}

    @staticmethod
    def _validate(schema: ConfluentSchema) -> None:
        if schema.schema_type in (SchemaType.AVRO.value, SchemaType.JSON.value):
            try:
                json.loads(schema.schema_str)
            except ValueError as exc:
                raise SchemaRegistryError(
                    422, 42201, "Either the input schema or one its references is invalid"
                ) from exc

    async def register_schema(self, subject_name: str, schema: ConfluentSchema) -> int:
        self.calls["register_schema"] += 1
        self._validate(schema)
        key = (schema.schema_type, schema.schema_str)
        registry_id = self._ids.get(key)
        if registry_id is None:
            registry_id = self._next_id
            self._next_id += 1
            self._ids[key] = registry_id
            self._schemas[registry_id] = key
        versions = self._versions.setdefault(subject_name, [])
        if registry_id not in versions:
            versions.append(registry_id)
        return registry_id

    async def get_schema(self, schema_id: int) -> ConfluentSchema:
        self.calls["get_schema"] += 1
        if schema_id not in self._schemas:
            raise SchemaRegistryError(404, 40403, "Schema not found")
        schema_type, schema_str = self._schemas[schema_id]
        return ConfluentSchema(schema_str=schema_str, schema_type=schema_type)

    async def get_latest_version(self, subject_name: str) -> FakeRegistered:
        self.calls["get_latest_version"] += 1
        versions = self._versions.get(subject_name)
        if not versions:
            raise SchemaRegistryError(404, 40401, f"Subject '{subject_name}' not found.")
        registry_id = versions[-1]
        schema_type, schema_str = self._schemas[registry_id]
        return FakeRegistered(
            schema_id=registry_id,
            schema=ConfluentSchema(schema_str=schema_str, schema_type=schema_type),
            subject=subject_name,
            version=len(versions),
        )

    async def get_compatibility(self, subject_name: str) -> str:
        self.calls["get_compatibility"] += 1
        if subject_name not in self._config:
            raise SchemaRegistryError(
                404,
                40408,
                f"Subject '{subject_name}' does not have subject-level compatibility configured",
            )
        return self._config[subject_name]

    async def set_compatibility(self, subject_name: str, level: str) -> str:
        self.calls["set_compatibility"] += 1
        self._config[subject_name] = level.upper()
        return level.upper()

    async def lookup_schema(self, subject_name: str, schema: ConfluentSchema) -> FakeRegistered:
        self.calls["lookup_schema"] += 1
        versions = self._versions.get(subject_name)
        if not versions:
            raise SchemaRegistryError(404, 40401, f"Subject '{subject_name}' not found.")
        registry_id = self._ids.get((schema.schema_type, schema.schema_str))
        if registry_id is None or registry_id not in versions:
            raise SchemaRegistryError(404, 40403, "Schema not found")
        return FakeRegistered(
            schema_id=registry_id,
            schema=schema,
            subject=subject_name,
            version=versions.index(registry_id) + 1,
        )

    async def close(self) -> None:
        self.closed = True

    def compatibility_of(self, subject_name: str) -> Optional[str]:
        """Out-of-band view of a subject's config, like ``GET /config/{subject}``."""
        return self._config.get(subject_name)

    def update_compatibility(self, subject_name: str, level: str) -> None:
        """Out-of-band config change that bypasses the client under test."""
        self._config[subject_name] = level


@pytest.fixture
def transport() -> FakeRegistryTransport:
    return FakeRegistryTransport()


@pytest.fixture
def registry_client(transport: FakeRegistryTransport) -> RegistryClient:
    return RegistryClient(transport)


@pytest.fixture
def schema_registry(registry_client: RegistryClient) -> SchemaRegistry:
    return SchemaRegistry(registry_client)


@pytest.fixture
def person_schema() -> Schema:
    return Schema(type=SchemaType.AVRO, schema_string=json.dumps(PERSON_AVSC))
