"""Write schema comments into model files.

The sync process:
1. Map each file to the table its model declares (or an explicit mapping)
2. Render the table's comment block through the engine's provider
3. Splice the block into the file, replacing a previous block at the edge
4. Write the file only when its content actually changed

Files are handled independently; one failing file is recorded and the
rest are still processed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy.engine import Engine

from schema_annotate.comment.options import APPEND, RenderOptions
from schema_annotate.comment.renderer import render_table_comment
from schema_annotate.discover import find_table
from schema_annotate.errors import AnnotateError
from schema_annotate.provider.factory import provider_for
from schema_annotate.provider.models import TableIdentifier
from schema_annotate.splice.text import has_changed, splice

logger = logging.getLogger(__name__)


def annotate_file(
    path: Path | str,
    block: str,
    position: str = APPEND,
    dry_run: bool = False,
) -> bool:
    """Splice ``block`` into the file at ``path``.

    Returns:
        True if the content changed (and, unless ``dry_run``, was written).

    Raises:
        OSError: If the file cannot be read or written.
    """
    file_path = Path(path)
    original = file_path.read_text()
    updated = splice(original, block, position)

    if not has_changed(original, updated):
        logger.debug("Schema comment in %s is up to date", file_path)
        return False

    if not dry_run:
        file_path.write_text(updated + "\n")
        logger.info("Wrote schema comment to %s", file_path)
    return True


def annotate_all(
    paths: list[Path | str],
    engine: Engine,
    options: RenderOptions | None = None,
    tables: dict[str, str] | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Annotate every file in ``paths`` with its table's schema comment.

    Args:
        paths: Model source files.
        engine: Engine for the database holding the tables.
        options: Render options, including the insertion position.
        tables: Explicit file path → table identifier mapping; takes
            precedence over ``__tablename__`` discovery.
        dry_run: Report what would change without writing.

    Returns:
        Dict with ``updated``, ``unchanged``, ``skipped`` and ``errors``
        lists plus the ``dry_run`` flag.
    """
    opts = options or RenderOptions()
    provider = provider_for(engine)
    explicit = {str(Path(k).resolve()): v for k, v in (tables or {}).items()}

    updated = []
    unchanged = []
    skipped = []
    errors = []

    for path in paths:
        file_path = Path(path)
        table: TableIdentifier | None = None
        try:
            key = str(file_path.resolve())
            if key in explicit:
                table = TableIdentifier.parse(explicit[key])
            else:
                table = find_table(file_path.read_text())
            if table is None:
                logger.debug("No model table declared in %s", file_path)
                skipped.append(str(file_path))
                continue

            block = render_table_comment(provider, table, opts)
            if annotate_file(file_path, block, opts.position, dry_run):
                updated.append(str(file_path))
            else:
                unchanged.append(str(file_path))
        except (AnnotateError, OSError, ValueError) as e:
            logger.warning("Could not annotate %s: %s", file_path, e)
            errors.append({
                "path": str(file_path),
                "table": str(table) if table else None,
                "error": str(e),
            })

    return {
        "updated": updated,
        "unchanged": unchanged,
        "skipped": skipped,
        "errors": errors,
        "dry_run": dry_run,
    }
