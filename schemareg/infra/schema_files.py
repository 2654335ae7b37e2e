"""
Registration of schema files kept on disk.

Each subject maps to a file in a schema directory; the file extension picks
the schema type. Failures specific to one subject (a missing file, a
rejected schema, a compatibility mismatch) are logged and skipped so the
remaining subjects still register. Transport failures abort the run.
"""

import logging
import os
from typing import Dict, Mapping

from schemareg.core.registry import SchemaRegistry
from schemareg.errors import SchemaRegistryClientError, TransportFailure
from schemareg.models.schema import Schema, SchemaType

logger = logging.getLogger(__name__)

EXTENSION_TO_TYPE: Mapping[str, SchemaType] = {
    ".avsc": SchemaType.AVRO,
    ".json": SchemaType.JSON,
    ".proto": SchemaType.PROTOBUF,
}


def schema_type_for(filename: str) -> SchemaType:
    """
    Infer the schema type from a file name.

    Raises:
        ValueError: for an unknown extension.
    """
    ext = os.path.splitext(filename)[1].lower()
    try:
        return EXTENSION_TO_TYPE[ext]
    except KeyError as exc:
        raise ValueError(f"Unknown schema file extension: {filename}") from exc


def discover_subjects(schema_dir: str) -> Dict[str, str]:
    """
    Build a subject → file mapping from the files in ``schema_dir``.

    Uses the Confluent TopicNameStrategy convention: ``events.avsc`` is
    registered as ``events-value``.
    """
    subjects: Dict[str, str] = {}
    for filename in sorted(os.listdir(schema_dir)):
        stem, ext = os.path.splitext(filename)
        if ext.lower() in EXTENSION_TO_TYPE:
            subjects[f"{stem}-value"] = filename
    return subjects


async def register_schemas(
    registry: SchemaRegistry,
    schema_dir: str,
    subject_to_file: Mapping[str, str],
) -> Dict[str, int]:
    """
    Register schema files under their subjects.

    Args:
        registry: Façade used for registration.
        schema_dir: Directory holding the schema files.
        subject_to_file: Mapping of subject names to file names in ``schema_dir``.

    Returns:
        Registry id per successfully registered subject.

    Raises:
        TransportFailure: if the registry cannot be reached.
    """
    registered: Dict[str, int] = {}

    for subject, filename in subject_to_file.items():
        path = os.path.join(schema_dir, filename)

        try:
            schema_type = schema_type_for(filename)
            with open(path, encoding="utf-8") as f:
                schema_str = f.read()
        except FileNotFoundError:
            logger.error(
                "Schema file missing; cannot register subject.",
                extra={"subject": subject, "file": filename},
            )
            continue
        except (OSError, ValueError) as exc:
            logger.error(
                "Unable to read schema file.",
                extra={"subject": subject, "file": filename, "error": str(exc)},
            )
            continue

        try:
            result = await registry.register(
                Schema(type=schema_type, schema_string=schema_str), subject
            )
        except TransportFailure:
            raise
        except SchemaRegistryClientError as exc:
            logger.warning(
                "Schema registration failed.",
                extra={"subject": subject, "error": str(exc)},
            )
            continue

        registered[subject] = result.id
        logger.info(
            "Schema registered successfully.",
            extra={"subject": subject, "registry_id": result.id},
        )

    logger.info(
        "Schema registration completed.",
        extra={"registered": len(registered), "requested": len(subject_to_file)},
    )
    return registered
