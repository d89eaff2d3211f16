"""Schema comment rendering.

A rendered block is a run of ``#`` comment lines that always opens with
the table identity line:

    # Table: <table>

Sections follow in a fixed order (primary key, columns, indexes, check
constraints, foreign keys, referencing tables, triggers); a section with
no rows is left out entirely.
"""

# Marker constants shared by the renderer and the file splicer
COMMENT_PREFIX = "#"
TABLE_MARKER = "# Table: "
