"""Snapshot types describing a table's schema.

Every descriptor is a frozen dataclass built fresh for each render; nothing
here talks to the database.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TableIdentifier:
    name: str
    schema: str | None = None

    @classmethod
    def parse(cls, value: str) -> TableIdentifier:
        """Parse ``"schema.table"`` or ``"table"``."""
        value = value.strip()
        if not value:
            raise ValueError("Table identifier must not be empty")
        schema, sep, name = value.rpartition(".")
        if sep and schema and name:
            return cls(name=name, schema=schema)
        return cls(name=value)

    def __str__(self) -> str:
        if self.schema:
            return f"{self.schema}.{self.name}"
        return self.name


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    type: str
    primary_key: bool = False
    auto_increment: bool = False
    not_null: bool = False
    default: str | None = None
    # "ALWAYS" or "BY DEFAULT" for identity columns
    identity: str | None = None


@dataclass(frozen=True)
class IndexDescriptor:
    name: str
    columns: tuple[str, ...] = ()
    unique: bool = False
    primary: bool = False
    # Trailing clause of the backend's own index definition, if it has one
    definition: str | None = None


@dataclass(frozen=True)
class ForeignKeyDescriptor:
    name: str | None
    columns: tuple[str, ...]
    referenced_table: str
    referenced_columns: tuple[str, ...] = ()
    definition: str | None = None


@dataclass(frozen=True)
class ReferencingForeignKeyDescriptor:
    """A foreign key on another table that points at this one."""

    name: str
    table: str
    definition: str


@dataclass(frozen=True)
class CheckConstraintDescriptor:
    name: str
    condition: str


@dataclass(frozen=True)
class TriggerDescriptor:
    name: str
    definition: str
    enabled: bool = True
    internal: bool = False


@dataclass
class TableSchema:
    """Everything a provider collected for one table, in display order."""

    table: TableIdentifier
    literal: str
    columns: list[ColumnDescriptor]
    primary_key: list[str] = field(default_factory=list)
    indexes: list[IndexDescriptor] = field(default_factory=list)
    foreign_keys: list[ForeignKeyDescriptor] = field(default_factory=list)
    check_constraints: list[CheckConstraintDescriptor] = field(default_factory=list)
    references: list[ReferencingForeignKeyDescriptor] = field(default_factory=list)
    triggers: list[TriggerDescriptor] = field(default_factory=list)
    column_comments: dict[str, str] = field(default_factory=dict)
    extended: bool = False
    supports_identity: bool = False

    @property
    def composite_primary_key(self) -> bool:
        return len(self.primary_key) > 1
