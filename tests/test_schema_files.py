"""Tests for registering schema files from a directory."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from confluent_kafka.schema_registry import SchemaRegistryError

from schemareg.core.registry import SchemaRegistry
from schemareg.errors import TransportFailure
from schemareg.infra.registry_client import RegistryClient
from schemareg.infra.schema_files import (
    discover_subjects,
    register_schemas,
    schema_type_for,
)
from schemareg.models.schema import SchemaType

from .conftest import PERSON_AVSC, FakeRegistryTransport

pytestmark = pytest.mark.unit


@pytest.fixture
def schema_dir(tmp_path: Path) -> Path:
    (tmp_path / "RetailEvent.avsc").write_text(json.dumps(PERSON_AVSC), encoding="utf-8")
    (tmp_path / "Order.json").write_text('{"type": "object"}', encoding="utf-8")
    (tmp_path / "Broken.avsc").write_text('{"type": "record",}', encoding="utf-8")
    (tmp_path / "README.md").write_text("not a schema", encoding="utf-8")
    return tmp_path


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("a.avsc", SchemaType.AVRO),
        ("a.JSON", SchemaType.JSON),
        ("a.proto", SchemaType.PROTOBUF),
    ],
)
def test_schema_type_for(filename: str, expected: SchemaType) -> None:
    assert schema_type_for(filename) is expected


def test_schema_type_for_unknown_extension() -> None:
    with pytest.raises(ValueError):
        schema_type_for("a.txt")


def test_discover_subjects_uses_topic_name_strategy(schema_dir: Path) -> None:
    assert discover_subjects(str(schema_dir)) == {
        "Broken-value": "Broken.avsc",
        "Order-value": "Order.json",
        "RetailEvent-value": "RetailEvent.avsc",
    }


@pytest.mark.asyncio
async def test_registers_valid_files_and_skips_failures(
    schema_registry: SchemaRegistry, schema_dir: Path
) -> None:
    subjects = {
        "raw-events-value": "RetailEvent.avsc",
        "orders-value": "Order.json",
        "broken-value": "Broken.avsc",
        "missing-value": "Missing.avsc",
    }

    registered = await register_schemas(schema_registry, str(schema_dir), subjects)

    assert set(registered) == {"raw-events-value", "orders-value"}
    assert await schema_registry.get_latest_schema_id("raw-events-value") == registered["raw-events-value"]


@pytest.mark.asyncio
async def test_registers_proto_file_without_local_backend(
    schema_registry: SchemaRegistry, transport: FakeRegistryTransport, tmp_path: Path
) -> None:
    (tmp_path / "Ping.proto").write_text(
        'syntax = "proto3"; message Ping { string id = 1; }', encoding="utf-8"
    )

    registered = await register_schemas(schema_registry, str(tmp_path), {"ping-value": "Ping.proto"})

    assert set(registered) == {"ping-value"}
    assert transport.calls["register_schema"] == 1


@pytest.mark.asyncio
async def test_repeat_registration_is_idempotent(
    schema_registry: SchemaRegistry, schema_dir: Path
) -> None:
    subjects = {"raw-events-value": "RetailEvent.avsc"}

    first = await register_schemas(schema_registry, str(schema_dir), subjects)
    second = await register_schemas(schema_registry, str(schema_dir), subjects)

    assert first == second


@pytest.mark.asyncio
async def test_transport_failure_aborts(schema_dir: Path) -> None:
    transport = FakeRegistryTransport()
    transport.get_compatibility = AsyncMock(  # type: ignore[method-assign]
        side_effect=SchemaRegistryError(503, 50301, "Service unavailable")
    )
    registry = SchemaRegistry(RegistryClient(transport))

    with pytest.raises(TransportFailure):
        await register_schemas(registry, str(schema_dir), {"raw-events-value": "RetailEvent.avsc"})
