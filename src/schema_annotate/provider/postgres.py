"""PostgreSQL metadata provider.

Reads ``pg_catalog`` directly. The queries follow the ones psql issues for
``\\d <table>`` so the rendered definitions match what psql shows.
Besides the baseline sections this adds check constraints, foreign keys
in other tables referencing this one, triggers and column comments.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection

from schema_annotate.comment.options import RenderOptions
from schema_annotate.provider.base import SchemaProvider
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

# Identity columns arrived in PostgreSQL 10
IDENTITY_MIN_VERSION = (10,)

OID_SQL = "SELECT CAST(:relation AS pg_catalog.regclass)::oid AS oid"

COLUMNS_SQL = """
SELECT a.attname AS name,
  pg_catalog.format_type(a.atttypid, a.atttypmod) AS db_type,
  a.attnotnull AS not_null,
  pg_catalog.pg_get_expr(d.adbin, d.adrelid) AS default_expr,
  {identity} AS identity
FROM pg_catalog.pg_attribute a
  LEFT JOIN pg_catalog.pg_attrdef d ON (a.attrelid = d.adrelid AND a.attnum = d.adnum)
WHERE a.attrelid = :oid AND a.attnum > 0 AND NOT a.attisdropped
ORDER BY a.attnum
"""

PRIMARY_KEY_SQL = """
SELECT a.attname AS name
FROM pg_catalog.pg_index i
  JOIN pg_catalog.pg_attribute a ON (a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey))
WHERE i.indrelid = :oid AND i.indisprimary
ORDER BY pg_catalog.array_position(i.indkey::int2[], a.attnum)
"""

COLUMN_COMMENTS_SQL = """
SELECT a.attname AS name, pg_catalog.col_description(a.attrelid, a.attnum) AS comment
FROM pg_catalog.pg_attribute a
WHERE a.attrelid = :oid AND a.attnum > 0 AND NOT a.attisdropped
  AND pg_catalog.col_description(a.attrelid, a.attnum) IS NOT NULL
ORDER BY a.attnum
"""

INDEXES_SQL = """
SELECT c2.relname, i.indisprimary, i.indisunique,
  pg_catalog.pg_get_indexdef(i.indexrelid, 0, true) AS indexdef,
  ARRAY(
    SELECT pg_catalog.pg_get_indexdef(i.indexrelid, k + 1, true)
    FROM pg_catalog.generate_subscripts(i.indkey, 1) AS k
    ORDER BY k
  ) AS columns
FROM pg_catalog.pg_class c, pg_catalog.pg_class c2, pg_catalog.pg_index i
  LEFT JOIN pg_catalog.pg_constraint con
    ON (conrelid = i.indrelid AND conindid = i.indexrelid AND contype IN ('p','u','x'))
WHERE c.oid = :oid AND c.oid = i.indrelid AND i.indexrelid = c2.oid AND indisvalid
ORDER BY i.indisprimary DESC, i.indisunique DESC, c2.relname
"""

CHECK_CONSTRAINTS_SQL = """
SELECT r.conname, pg_catalog.pg_get_constraintdef(r.oid, true) AS condef
FROM pg_catalog.pg_constraint r
WHERE r.conrelid = :oid AND r.contype = 'c'
ORDER BY 1
"""

FOREIGN_KEYS_SQL = """
SELECT r.conname,
  pg_catalog.pg_get_constraintdef(r.oid, true) AS condef,
  r.confrelid::pg_catalog.regclass::text AS referenced_table,
  ARRAY(
    SELECT a.attname
    FROM pg_catalog.unnest(r.conkey) WITH ORDINALITY AS k(attnum, n)
      JOIN pg_catalog.pg_attribute a ON (a.attrelid = r.conrelid AND a.attnum = k.attnum)
    ORDER BY k.n
  ) AS columns,
  ARRAY(
    SELECT a.attname
    FROM pg_catalog.unnest(r.confkey) WITH ORDINALITY AS k(attnum, n)
      JOIN pg_catalog.pg_attribute a ON (a.attrelid = r.confrelid AND a.attnum = k.attnum)
    ORDER BY k.n
  ) AS referenced_columns
FROM pg_catalog.pg_constraint r
WHERE r.conrelid = :oid AND r.contype = 'f'
ORDER BY 1
"""

REFERENCES_SQL = """
SELECT c.conname, c.conrelid::pg_catalog.regclass::text AS referencing_table,
  pg_catalog.pg_get_constraintdef(c.oid, true) AS condef
FROM pg_catalog.pg_constraint c
WHERE c.confrelid = :oid AND c.contype = 'f'
ORDER BY 2, 1
"""

TRIGGERS_SQL = """
SELECT t.tgname, pg_catalog.pg_get_triggerdef(t.oid, true) AS triggerdef,
  t.tgenabled, t.tgisinternal
FROM pg_catalog.pg_trigger t
WHERE t.tgrelid = :oid AND (NOT t.tgisinternal OR (t.tgisinternal AND t.tgenabled = 'D'))
ORDER BY 1
"""

_USING = re.compile(r"USING (.+)\Z", re.DOTALL)
_CHECK = re.compile(r"CHECK (.+)\Z", re.DOTALL)
_FOREIGN_KEY = re.compile(r"FOREIGN KEY (.+)\Z", re.DOTALL)
_TRIGGER_TIMING = re.compile(r"((?:BEFORE|AFTER|INSTEAD OF) .+)\Z", re.DOTALL)

_IDENTITY_KINDS = {"a": "ALWAYS", "d": "BY DEFAULT"}


class PostgresSchemaProvider(SchemaProvider):
    """Catalog-backed provider for PostgreSQL."""

    dialect = "postgresql"
    extended = True

    def _collect(
        self,
        conn: Connection,
        table: TableIdentifier,
        opts: RenderOptions,
        schema: TableSchema,
    ) -> None:
        oid = self.relation_oid(conn, table)
        schema.supports_identity = self._supports_identity(conn)

        schema.primary_key = self.primary_key(conn, oid)
        schema.columns = self.columns(conn, oid, schema.primary_key)
        schema.column_comments = self.column_comments(conn, oid)
        if opts.indexes:
            schema.indexes = self.indexes(conn, oid)
        if opts.constraints:
            schema.check_constraints = self.check_constraints(conn, oid)
        if opts.foreign_keys:
            schema.foreign_keys = self.foreign_keys(conn, oid)
        if opts.references:
            schema.references = self.references(conn, oid)
        if opts.triggers:
            schema.triggers = self.triggers(conn, oid)

    def relation_oid(self, conn: Connection, table: TableIdentifier) -> int:
        preparer = conn.dialect.identifier_preparer
        parts = [table.schema, table.name] if table.schema else [table.name]
        relation = ".".join(preparer.quote(part) for part in parts)
        rows = self._fetch(conn, OID_SQL, relation=relation)
        return rows[0]["oid"]

    def _supports_identity(self, conn: Connection) -> bool:
        version = conn.dialect.server_version_info
        return bool(version) and tuple(version) >= IDENTITY_MIN_VERSION

    def primary_key(self, conn: Connection, oid: int) -> list[str]:
        return [row["name"] for row in self._fetch(conn, PRIMARY_KEY_SQL, oid=oid)]

    def columns(
        self,
        conn: Connection,
        oid: int,
        primary_key: list[str],
    ) -> list[ColumnDescriptor]:
        identity = "a.attidentity" if self._supports_identity(conn) else "''"
        rows = self._fetch(conn, COLUMNS_SQL.format(identity=identity), oid=oid)
        columns = []
        for row in rows:
            default = row["default_expr"]
            identity_kind = _IDENTITY_KINDS.get(row["identity"] or "")
            columns.append(ColumnDescriptor(
                name=row["name"],
                type=row["db_type"],
                primary_key=row["name"] in primary_key,
                auto_increment=bool(identity_kind)
                or bool(default and default.startswith("nextval(")),
                not_null=bool(row["not_null"]),
                default=default,
                identity=identity_kind,
            ))
        return columns

    def column_comments(self, conn: Connection, oid: int) -> dict[str, str]:
        return {
            row["name"]: row["comment"]
            for row in self._fetch(conn, COLUMN_COMMENTS_SQL, oid=oid)
            if row["comment"]
        }

    def indexes(self, conn: Connection, oid: int) -> list[IndexDescriptor]:
        return [
            IndexDescriptor(
                name=row["relname"],
                columns=tuple(row["columns"] or ()),
                unique=bool(row["indisunique"]),
                primary=bool(row["indisprimary"]),
                definition=_trailing(_USING, row["indexdef"]),
            )
            for row in self._fetch(conn, INDEXES_SQL, oid=oid)
        ]

    def check_constraints(self, conn: Connection, oid: int) -> list[CheckConstraintDescriptor]:
        return [
            CheckConstraintDescriptor(
                name=row["conname"],
                condition=_trailing(_CHECK, row["condef"]),
            )
            for row in self._fetch(conn, CHECK_CONSTRAINTS_SQL, oid=oid)
        ]

    def foreign_keys(self, conn: Connection, oid: int) -> list[ForeignKeyDescriptor]:
        return [
            ForeignKeyDescriptor(
                name=row["conname"],
                columns=tuple(row["columns"] or ()),
                referenced_table=row["referenced_table"],
                referenced_columns=tuple(row["referenced_columns"] or ()),
                definition=_trailing(_FOREIGN_KEY, row["condef"]),
            )
            for row in self._fetch(conn, FOREIGN_KEYS_SQL, oid=oid)
        ]

    def references(self, conn: Connection, oid: int) -> list[ReferencingForeignKeyDescriptor]:
        return [
            ReferencingForeignKeyDescriptor(
                name=row["conname"],
                table=row["referencing_table"],
                definition=_trailing(_FOREIGN_KEY, row["condef"]),
            )
            for row in self._fetch(conn, REFERENCES_SQL, oid=oid)
        ]

    def triggers(self, conn: Connection, oid: int) -> list[TriggerDescriptor]:
        return [
            TriggerDescriptor(
                name=row["tgname"],
                definition=_trailing(_TRIGGER_TIMING, row["triggerdef"]),
                enabled=row["tgenabled"] != "D",
                internal=bool(row["tgisinternal"]),
            )
            for row in self._fetch(conn, TRIGGERS_SQL, oid=oid)
        ]

    def _fetch(self, conn: Connection, sql: str, **params: Any) -> list[Any]:
        logger.debug("Catalog query with %s", params)
        return list(conn.execute(text(sql), params).mappings().all())


def _trailing(pattern: re.Pattern[str], definition: str) -> str:
    """The clause of a catalog definition after its leading keyword."""
    match = pattern.search(definition)
    return match.group(1) if match else definition
