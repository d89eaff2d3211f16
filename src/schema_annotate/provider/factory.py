"""Pick the metadata provider for an engine's dialect."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from schema_annotate.provider.base import SchemaProvider
from schema_annotate.provider.postgres import PostgresSchemaProvider

PROVIDERS: tuple[type[SchemaProvider], ...] = (PostgresSchemaProvider,)


def provider_for(engine: Engine) -> SchemaProvider:
    """Return the most capable provider for ``engine``.

    Falls back to the inspector-based baseline for dialects without a
    dedicated provider.
    """
    for provider_cls in PROVIDERS:
        if provider_cls.dialect == engine.dialect.name:
            return provider_cls(engine)
    return SchemaProvider(engine)
