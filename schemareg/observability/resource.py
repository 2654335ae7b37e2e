"""
OpenTelemetry resource describing the process that embeds the client.
"""

import os
from typing import Dict

from opentelemetry.sdk.resources import Resource
from opentelemetry.semconv.attributes.service_attributes import SERVICE_NAME

SERVICE_NAME_VALUE: str = os.getenv("OTEL_SERVICE_NAME", "schemareg")
RESOURCE_ATTRIBUTES: str = os.getenv(
    "OTEL_RESOURCE_ATTRIBUTES",
    "deployment.environment=local",
)


def parse_resource_attributes(raw: str) -> Dict[str, str]:
    """Split ``k1=v1,k2=v2`` into a dict, dropping malformed entries."""
    return {
        kv.split("=", 1)[0].strip(): kv.split("=", 1)[1].strip()
        for kv in raw.split(",")
        if "=" in kv
    }


def build_resource() -> Resource:
    return Resource.create(
        {SERVICE_NAME: SERVICE_NAME_VALUE, **parse_resource_attributes(RESOURCE_ATTRIBUTES)}
    )
