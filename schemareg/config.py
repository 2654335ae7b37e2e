"""
Configuration for schemareg.

Settings are read from the environment (and an optional ``.env`` at the
project root) using namespaced keys:

    SCHEMA_REGISTRY__URL=http://schema-registry:8081
    SCHEMA_REGISTRY__CLIENT_ID=Confluent_Schema_Registry
    SCHEMA_REGISTRY__BASIC_AUTH_USER_INFO=user:password
    SCHEMA_REGISTRY__TIMEOUT_SEC=10
    SCHEMA_REGISTRY__DEFAULT_COMPATIBILITY=BACKWARD
    SCHEMA_REGISTRY__SCHEMA_DIR=/app/infra/schemas

    SERVICE__LOG_LEVEL=INFO
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from schemareg.infra.registry_client import DEFAULT_CLIENT_ID
from schemareg.models.schema import DEFAULT_COMPATIBILITY, Compatibility

PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
DEFAULT_ENV_PATH: Path = PROJECT_ROOT / ".env"


class SchemaRegistrySettings(BaseSettings):
    """
    Schema Registry connection and client behaviour.

    Values come from environment variables prefixed with `SCHEMA_REGISTRY__`.
    """

    url: str = Field(
        default="http://schema-registry:8081",
        description="Schema Registry base URL; comma-separate several for failover.",
    )
    client_id: str = Field(
        default=DEFAULT_CLIENT_ID,
        min_length=1,
        description="Prefix used in error messages raised by the registry client.",
    )
    basic_auth_user_info: Optional[str] = Field(
        default=None,
        description="`user:password` for HTTP basic auth.",
    )
    timeout_sec: float = Field(default=10.0, gt=0.0)
    default_compatibility: Compatibility = Field(default=DEFAULT_COMPATIBILITY)
    schema_dir: str = Field(
        default="/app/infra/schemas",
        description="Directory containing schema files registered by the entrypoint.",
    )

    model_config = SettingsConfigDict(
        env_prefix="SCHEMA_REGISTRY__",
        case_sensitive=False,
        extra="ignore",
    )

    def to_client_conf(self) -> Dict[str, Any]:
        """Render the configuration dict accepted by the Confluent client."""
        conf: Dict[str, Any] = {"url": self.url, "timeout": self.timeout_sec}
        if self.basic_auth_user_info:
            conf["basic.auth.credentials.source"] = "USER_INFO"
            conf["basic.auth.user.info"] = self.basic_auth_user_info
        return conf


class ServiceSettings(BaseSettings):
    """Process-level settings for the entrypoint."""

    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="SERVICE__",
        case_sensitive=False,
        extra="ignore",
    )


def _env_file() -> Optional[str]:
    return str(DEFAULT_ENV_PATH) if DEFAULT_ENV_PATH.exists() else None


@lru_cache()
def get_schema_registry_settings() -> SchemaRegistrySettings:
    """
    Cached accessor for SchemaRegistrySettings.

    Raises:
        RuntimeError: if the environment holds invalid values.
    """
    try:
        return SchemaRegistrySettings(_env_file=_env_file())
    except ValidationError as exc:
        raise RuntimeError("Invalid Schema Registry configuration values.") from exc


@lru_cache()
def get_service_settings() -> ServiceSettings:
    try:
        return ServiceSettings(_env_file=_env_file())
    except ValidationError as exc:
        raise RuntimeError("Invalid service configuration values.") from exc
