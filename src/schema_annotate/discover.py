"""Find model files and the tables they map to."""

from __future__ import annotations

import glob
import re
from pathlib import Path

from schema_annotate.provider.models import TableIdentifier

_TABLENAME = re.compile(r"""^\s*__tablename__\s*=\s*["']([^"']+)["']""", re.MULTILINE)
_TABLE_SCHEMA = re.compile(r"""["']schema["']\s*:\s*["']([^"']+)["']""")
_TABLE_ARGS = re.compile(r"^\s*__table_args__\s*=", re.MULTILINE)
_CLASS = re.compile(r"^class\s+\w+", re.MULTILINE)


def find_table(source: str) -> TableIdentifier | None:
    """Return the table declared by the first model class in ``source``.

    Recognises SQLAlchemy declarative models:

        class Album(Base):
            __tablename__ = "albums"
            __table_args__ = {"schema": "music"}

    Returns None when the source declares no ``__tablename__``.
    """
    match = _TABLENAME.search(source)
    if not match:
        return None

    # Limit the schema lookup to the class body holding the match
    body_start = 0
    for cls in _CLASS.finditer(source, 0, match.start()):
        body_start = cls.start()
    next_cls = _CLASS.search(source, match.end())
    body = source[body_start:next_cls.start() if next_cls else len(source)]

    schema = None
    args = _TABLE_ARGS.search(body)
    if args:
        schema_match = _TABLE_SCHEMA.search(body, args.end())
        if schema_match:
            schema = schema_match.group(1)
    return TableIdentifier(name=match.group(1), schema=schema)


def expand_paths(patterns: list[str], base: Path | str | None = None) -> list[Path]:
    """Expand glob patterns (and plain paths) into a sorted list of files."""
    root = Path(base) if base else Path.cwd()
    found: set[Path] = set()
    for pattern in patterns:
        full = pattern if Path(pattern).is_absolute() else str(root / pattern)
        for match in glob.glob(full, recursive=True):
            path = Path(match)
            if path.is_file():
                found.add(path)
    return sorted(found)
