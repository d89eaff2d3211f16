"""Baseline metadata provider built on the SQLAlchemy inspector.

Works for any dialect SQLAlchemy can reflect. Collects columns, the
primary key, indexes and foreign keys; the richer catalog sections are
left empty.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import CompileError, SQLAlchemyError

from schema_annotate.comment.options import RenderOptions
from schema_annotate.errors import ProviderError
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

logger = logging.getLogger(__name__)


class SchemaProvider:
    """Collects a table's schema from a SQLAlchemy engine.

    Subclasses set ``dialect`` to the ``engine.dialect.name`` they serve and
    override the collection methods they can answer more precisely.
    """

    dialect: str | None = None
    extended = False

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def table_literal(self, table: TableIdentifier) -> str:
        """Unquoted form of the table name used on the ``# Table:`` line."""
        return str(table)

    def collect(
        self,
        table: TableIdentifier | str,
        options: RenderOptions | None = None,
    ) -> TableSchema:
        """Read the schema of ``table``.

        Sections switched off in ``options`` are not queried at all.

        Raises:
            ProviderError: If any metadata query fails.
        """
        if isinstance(table, str):
            table = TableIdentifier.parse(table)
        opts = options or RenderOptions()

        try:
            with self.engine.connect() as conn:
                schema = TableSchema(
                    table=table,
                    literal=self.table_literal(table),
                    columns=[],
                    extended=self.extended,
                )
                self._collect(conn, table, opts, schema)
        except SQLAlchemyError as exc:
            raise ProviderError(table, exc) from exc

        logger.debug(
            "Collected %d columns, %d indexes, %d foreign keys for %s",
            len(schema.columns), len(schema.indexes), len(schema.foreign_keys), table,
        )
        return schema

    def _collect(
        self,
        conn: Connection,
        table: TableIdentifier,
        opts: RenderOptions,
        schema: TableSchema,
    ) -> None:
        schema.primary_key = self.primary_key(conn, table)
        schema.columns = self.columns(conn, table, schema.primary_key)
        schema.column_comments = self.column_comments(conn, table)
        if opts.indexes:
            schema.indexes = self.indexes(conn, table)
        if opts.foreign_keys:
            schema.foreign_keys = self.foreign_keys(conn, table)

    # -- baseline sections ---------------------------------------------

    def primary_key(self, conn: Connection, table: TableIdentifier) -> list[str]:
        pk = sa_inspect(conn).get_pk_constraint(table.name, schema=table.schema)
        return list(pk.get("constrained_columns") or [])

    def columns(
        self,
        conn: Connection,
        table: TableIdentifier,
        primary_key: list[str],
    ) -> list[ColumnDescriptor]:
        """Columns in the table's natural order."""
        rows = sa_inspect(conn).get_columns(table.name, schema=table.schema)
        found = []
        for col in rows:
            type_name = _type_name(col["type"], conn)
            found.append(ColumnDescriptor(
                name=col["name"],
                type=type_name,
                primary_key=col["name"] in primary_key,
                auto_increment=_auto_increment(col, type_name, primary_key, conn),
                not_null=not col.get("nullable", True),
                default=_default_text(col.get("default")),
            ))
        return found

    def indexes(self, conn: Connection, table: TableIdentifier) -> list[IndexDescriptor]:
        """Primary key indexes first, then unique, then the rest; by name."""
        found = []
        for idx in sa_inspect(conn).get_indexes(table.name, schema=table.schema):
            names = idx.get("column_names") or []
            expressions = idx.get("expressions") or []
            columns = tuple(
                col if col is not None else (expressions[i] if i < len(expressions) else "?")
                for i, col in enumerate(names)
            )
            found.append(IndexDescriptor(
                name=idx["name"] or "",
                columns=columns,
                unique=bool(idx.get("unique")),
            ))
        return sorted(found, key=lambda i: (not i.primary, not i.unique, i.name))

    def foreign_keys(
        self,
        conn: Connection,
        table: TableIdentifier,
    ) -> list[ForeignKeyDescriptor]:
        found = []
        for fk in sa_inspect(conn).get_foreign_keys(table.name, schema=table.schema):
            referenced = fk["referred_table"]
            if fk.get("referred_schema"):
                referenced = f"{fk['referred_schema']}.{referenced}"
            found.append(ForeignKeyDescriptor(
                name=fk.get("name"),
                columns=tuple(fk.get("constrained_columns") or ()),
                referenced_table=referenced,
                referenced_columns=tuple(fk.get("referred_columns") or ()),
            ))
        return sorted(found, key=_foreign_key_sort_key)

    # -- extended sections (empty unless a subclass supports them) -----

    def column_comments(self, conn: Connection, table: TableIdentifier) -> dict[str, str]:
        return {}

    def check_constraints(
        self,
        conn: Connection,
        table: TableIdentifier,
    ) -> list[CheckConstraintDescriptor]:
        return []

    def references(
        self,
        conn: Connection,
        table: TableIdentifier,
    ) -> list[ReferencingForeignKeyDescriptor]:
        return []

    def triggers(self, conn: Connection, table: TableIdentifier) -> list[TriggerDescriptor]:
        return []


def _type_name(coltype: Any, conn: Connection) -> str:
    try:
        return coltype.compile(dialect=conn.dialect)
    except CompileError:
        # NullType and friends have no DDL form
        return type(coltype).__name__.upper()


def _default_text(default: Any) -> str | None:
    if default is None:
        return None
    return str(default)


def _foreign_key_sort_key(fk: ForeignKeyDescriptor) -> tuple[str, tuple[str, ...], str]:
    # Unnamed constraints (SQLite) sort by their columns instead
    return (fk.name or "", fk.columns, fk.referenced_table)


def _auto_increment(
    col: dict[str, Any],
    type_name: str,
    primary_key: list[str],
    conn: Connection,
) -> bool:
    if col.get("autoincrement") is True:
        return True
    # SQLite never reports it; a lone INTEGER primary key is the rowid alias
    return (
        conn.dialect.name == "sqlite"
        and primary_key == [col["name"]]
        and type_name.upper() == "INTEGER"
    )
