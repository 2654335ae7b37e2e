"""
Bootstrap wiring for a settings-driven SchemaRegistry.

Responsible for:
- Reading SchemaRegistrySettings
- Constructing the Confluent transport, registry client and façade
"""

from typing import Final, Optional

from schemareg.config import SchemaRegistrySettings, get_schema_registry_settings
from schemareg.core.backends import SerializerBackends
from schemareg.core.registry import SchemaRegistry
from schemareg.infra.registry_client import RegistryClient
from schemareg.infra.transport import ConfluentTransport


def build_schema_registry(
    settings: Optional[SchemaRegistrySettings] = None,
    backends: Optional[SerializerBackends] = None,
) -> SchemaRegistry:
    """
    Build a fully wired SchemaRegistry instance.

    Args:
        settings: Explicit settings; the cached environment settings otherwise.
        backends: Serializer backends; Avro and JSON when omitted.

    Returns:
        SchemaRegistry: Ready-to-use façade with its own empty cache.
    """
    cfg: Final[SchemaRegistrySettings] = settings or get_schema_registry_settings()

    client = RegistryClient(
        ConfluentTransport(conf=cfg.to_client_conf()),
        client_id=cfg.client_id,
    )
    return SchemaRegistry(
        client,
        backends=backends,
        default_compatibility=cfg.default_compatibility,
    )
