"""Column alignment for comment rows."""

from __future__ import annotations

from collections.abc import Sequence

from schema_annotate.errors import ContractError

ROW_PREFIX = "#  "
CELL_SEPARATOR = "  | "
# Continuation lines of a multi-line cell hang under the comment marker
CONTINUATION = "\n#    "


def align(rows: Sequence[Sequence[str]]) -> list[str]:
    """Render rows of cells as aligned, commented lines.

    Each column is padded to the widest cell in that column across
    ``rows``; trailing whitespace is trimmed from every line.

        >>> align([["abcdef", "1"], ["g", "123456"]])
        ['#  abcdef  | 1', '#  g       | 123456']

    Raises:
        ContractError: If the rows do not all have the same number of cells.
    """
    if not rows:
        return []

    width = len(rows[0])
    for row in rows:
        if len(row) != width:
            raise ContractError(
                f"Cannot align rows of different lengths: expected {width} cells, "
                f"got {len(row)} in {list(row)!r}"
            )

    lengths = [max(len(row[i]) for row in rows) for i in range(width)]

    lines = []
    for row in rows:
        cells = [
            cell.ljust(length).replace("\n", CONTINUATION)
            for cell, length in zip(row, lengths)
        ]
        lines.append(f"{ROW_PREFIX}{CELL_SEPARATOR.join(cells)}".rstrip())
    return lines
