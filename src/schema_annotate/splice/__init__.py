"""File splicing — insert or replace schema comment blocks in files."""

from schema_annotate.splice.text import splice, prepend_block, append_block, has_changed
from schema_annotate.splice.sync import annotate_file, annotate_all

__all__ = [
    "splice",
    "prepend_block",
    "append_block",
    "has_changed",
    "annotate_file",
    "annotate_all",
]
