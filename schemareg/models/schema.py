"""
Schema registry data model.

These are the typed values passed across the façade: the schema kinds and
compatibility levels understood by the registry, the schema and subject
identities, and the results returned from registration and lookups.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import ClassVar, Dict, Optional

from pydantic import BaseModel, Field


class SchemaType(str, Enum):
    AVRO = "AVRO"
    JSON = "JSON"
    PROTOBUF = "PROTOBUF"


class Compatibility(str, Enum):
    BACKWARD = "BACKWARD"
    BACKWARD_TRANSITIVE = "BACKWARD_TRANSITIVE"
    FORWARD = "FORWARD"
    FORWARD_TRANSITIVE = "FORWARD_TRANSITIVE"
    FULL = "FULL"
    FULL_TRANSITIVE = "FULL_TRANSITIVE"
    NONE = "NONE"


DEFAULT_COMPATIBILITY: Compatibility = Compatibility.BACKWARD


class Schema(BaseModel):
    """
    A schema definition of a given type, identified by its exact text.

    Two schemas are the same registry content only if both the type and
    the text match byte for byte.
    """

    type: SchemaType = SchemaType.AVRO
    schema_string: str

    model_config: ClassVar[Dict[str, object]] = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "type": "AVRO",
                "schema_string": '{"type":"record","name":"Person","namespace":"com.org.domain","fields":[{"type":"string","name":"full_name"}]}',
            }
        },
    }


class Subject(BaseModel):
    """Logical name under which schema versions are registered."""

    name: str = Field(min_length=1)

    model_config: ClassVar[Dict[str, object]] = {"frozen": True}

    @classmethod
    def for_avro(cls, schema: Schema) -> "Subject":
        """
        Derive ``<namespace>.<name>`` from an Avro record definition.

        Raises:
            ValueError: if the schema is not Avro or has no record name.
        """
        if schema.type is not SchemaType.AVRO:
            raise ValueError(f"Cannot derive a subject from a {schema.type.value} schema")
        definition = json.loads(schema.schema_string)
        name = definition.get("name") if isinstance(definition, dict) else None
        if not name:
            raise ValueError("Avro schema has no record name")
        namespace = definition.get("namespace")
        return cls(name=f"{namespace}.{name}" if namespace and "." not in name else name)


class RegistrationResult(BaseModel):
    id: int = Field(ge=0)

    model_config: ClassVar[Dict[str, object]] = {"frozen": True}


class LatestVersion(BaseModel):
    """Latest registered version of a subject."""

    id: int = Field(ge=0)
    version: int = Field(ge=1)
    schema_: Schema = Field(alias="schema")

    model_config: ClassVar[Dict[str, object]] = {"frozen": True, "populate_by_name": True}


class RegisterOptions(BaseModel):
    compatibility: Optional[Compatibility] = None

    model_config: ClassVar[Dict[str, object]] = {"frozen": True}
