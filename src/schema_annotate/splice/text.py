"""Pure text splicing of a comment block into file content.

The previous block is only recognised when it touches the edge of the
file (the start for prepend, the end for append) with nothing but ``#``
lines between its ``# Table:`` line and that edge. A block buried in the
middle of a file is never searched for; a fresh block is added next to it.

Trailing whitespace is dropped from the content before scanning, so blank
lines at the very end of a file never break adjacency. A blank line
*between* the old block and the end of the file does.
"""

from __future__ import annotations

from schema_annotate.comment import COMMENT_PREFIX, TABLE_MARKER
from schema_annotate.comment.options import APPEND, PREPEND, POSITIONS


def splice(content: str, block: str, position: str = APPEND) -> str:
    """Return ``content`` with ``block`` inserted, replacing an old block.

    The result never ends with a newline; callers add one on write.
    """
    if position == PREPEND:
        return prepend_block(content, block)
    if position == APPEND:
        return append_block(content, block)
    raise ValueError(f"Unknown position: {position}. Valid: {', '.join(POSITIONS)}")


def prepend_block(content: str, block: str) -> str:
    lines = content.rstrip().split("\n")
    end = leading_block_end(lines)
    rest = "\n".join(lines[end:]).lstrip("\n")
    if not rest.strip():
        return block
    return f"{block}\n\n{rest}"


def append_block(content: str, block: str) -> str:
    lines = content.rstrip().split("\n")
    start = trailing_block_start(lines)
    if start is not None:
        lines = lines[:start]
    kept = "\n".join(lines).rstrip("\n")
    if not kept.strip():
        return block
    return f"{kept}\n\n{block}"


def leading_block_end(lines: list[str]) -> int:
    """Index just past a block at the start of ``lines`` (0 if none)."""
    if not lines or not lines[0].startswith(TABLE_MARKER):
        return 0
    end = 1
    while end < len(lines) and lines[end].startswith(COMMENT_PREFIX):
        end += 1
    return end


def trailing_block_start(lines: list[str]) -> int | None:
    """Index of the ``# Table:`` line opening a block at the end of ``lines``.

    Walks backward from the last line. Only the last ``# Table:`` line is
    considered; if any non-comment line sits between it and the end there
    is no trailing block.
    """
    for index in range(len(lines) - 1, -1, -1):
        line = lines[index]
        if line.startswith(TABLE_MARKER):
            return index
        if not line.startswith(COMMENT_PREFIX):
            return None
    return None


def has_changed(original: str, updated: str) -> bool:
    """Compare content ignoring trailing whitespace."""
    return original.rstrip() != updated.rstrip()
