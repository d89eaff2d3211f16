"""Schema comment renderer.

Turns a collected ``TableSchema`` into the comment block that gets
spliced into model files. Rendering is pure: the only I/O happens in
``render_table_comment`` when it asks the provider for the schema.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from schema_annotate.comment import TABLE_MARKER
from schema_annotate.comment.align import align
from schema_annotate.comment.options import RenderOptions
from schema_annotate.provider.models import ColumnDescriptor, TableIdentifier, TableSchema

if TYPE_CHECKING:
    from schema_annotate.provider.base import SchemaProvider


def render_table_comment(
    provider: SchemaProvider,
    table: TableIdentifier | str,
    options: RenderOptions | None = None,
) -> str:
    """Collect ``table`` through ``provider`` and render its comment block."""
    opts = options or RenderOptions()
    return render_schema(provider.collect(table, opts), opts)


def render_schema(schema: TableSchema, options: RenderOptions | None = None) -> str:
    """Render a collected schema as a newline-joined comment block."""
    opts = options or RenderOptions()
    output = [f"{TABLE_MARKER}{schema.literal}"]

    if schema.composite_primary_key:
        output.append(f"# Primary Key: ({', '.join(schema.primary_key)})")
    output.append("# Columns:")
    output.extend(align(_column_rows(schema)))

    if opts.indexes and schema.indexes:
        output.append("# Indexes:")
        output.extend(align([[idx.name, _index_spec(idx, schema)] for idx in schema.indexes]))

    if schema.extended and opts.constraints and schema.check_constraints:
        output.append("# Check constraints:")
        output.extend(align([[c.name, c.condition] for c in schema.check_constraints]))

    if opts.foreign_keys and schema.foreign_keys:
        output.append("# Foreign key constraints:")
        if schema.extended:
            rows = [[fk.name or "", fk.definition or _foreign_key_spec(fk)] for fk in schema.foreign_keys]
        else:
            rows = [[_foreign_key_spec(fk)] for fk in schema.foreign_keys]
        output.extend(align(rows))

    if schema.extended and opts.references and schema.references:
        output.append("# Referenced By:")
        output.extend(align([[r.table, r.name, r.definition] for r in schema.references]))

    if schema.extended and opts.triggers and schema.triggers:
        output.append("# Triggers:")
        output.extend(align([[t.name, t.definition] for t in schema.triggers]))

    if opts.border:
        border = "# " + "-" * (max(len(line) for line in output) - 2)
        output.insert(1, border)
        output.append(border)

    return "\n".join(output)


def _column_rows(schema: TableSchema) -> list[list[str]]:
    rows = []
    for col in schema.columns:
        row = [col.name, col.type, column_flags(col, schema)]
        if schema.column_comments:
            row.append(schema.column_comments.get(col.name, ""))
        rows.append(row)
    return rows


def column_flags(col: ColumnDescriptor, schema: TableSchema) -> str:
    """Flag text for a column: key, nullability, default, identity."""
    flags = ""
    if col.primary_key and not schema.composite_primary_key:
        flags += "PRIMARY KEY "
        if col.auto_increment and not schema.extended:
            flags += "AUTOINCREMENT "
    if col.not_null and not col.primary_key:
        flags += "NOT NULL "
    if col.default:
        flags += f"DEFAULT {col.default}"
    elif (
        schema.extended
        and schema.supports_identity
        and col.auto_increment
        and col.identity
    ):
        flags += f"GENERATED {col.identity} AS IDENTITY"
    return flags


def _index_spec(idx, schema: TableSchema) -> str:
    if idx.primary:
        prefix = "PRIMARY KEY "
    elif idx.unique:
        prefix = "UNIQUE "
    else:
        prefix = ""
    if schema.extended and idx.definition is not None:
        return prefix + idx.definition
    return f"{prefix}({', '.join(idx.columns)})"


def _foreign_key_spec(fk) -> str:
    spec = f"({', '.join(fk.columns)}) REFERENCES {fk.referenced_table}"
    if fk.referenced_columns:
        spec += f"({', '.join(fk.referenced_columns)})"
    return spec
