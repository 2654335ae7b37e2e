"""
Entrypoint that registers every schema file in the configured directory.
"""

import asyncio
import logging
import sys

from schemareg.config import get_schema_registry_settings, get_service_settings
from schemareg.core.bootstrap import build_schema_registry
from schemareg.errors import TransportFailure
from schemareg.infra.schema_files import discover_subjects, register_schemas
from schemareg.observability.instrumentation import init_observability

logger = logging.getLogger(__name__)


async def run() -> int:
    cfg = get_schema_registry_settings()
    subjects = discover_subjects(cfg.schema_dir)

    async with build_schema_registry(cfg) as registry:
        try:
            registered = await register_schemas(registry, cfg.schema_dir, subjects)
        except TransportFailure:
            logger.exception("Schema Registry unreachable", extra={"url": cfg.url})
            return 1

    return 0 if len(registered) == len(subjects) else 2


def main() -> None:
    """
    Initializes observability, then registers the schema directory.

    Exit code 0 when every file registered, 2 when some were skipped,
    1 when the registry could not be reached.
    """
    level_name = get_service_settings().log_level.upper()
    init_observability(level=getattr(logging, level_name, logging.INFO))

    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
