"""Metadata providers — read a table's schema from the database."""

from schema_annotate.provider.models import (
    CheckConstraintDescriptor,
    ColumnDescriptor,
    ForeignKeyDescriptor,
    IndexDescriptor,
    ReferencingForeignKeyDescriptor,
    TableIdentifier,
    TableSchema,
    TriggerDescriptor,
)
from schema_annotate.provider.base import SchemaProvider
from schema_annotate.provider.postgres import PostgresSchemaProvider
from schema_annotate.provider.factory import provider_for

__all__ = [
    "CheckConstraintDescriptor",
    "ColumnDescriptor",
    "ForeignKeyDescriptor",
    "IndexDescriptor",
    "ReferencingForeignKeyDescriptor",
    "TableIdentifier",
    "TableSchema",
    "TriggerDescriptor",
    "SchemaProvider",
    "PostgresSchemaProvider",
    "provider_for",
]
