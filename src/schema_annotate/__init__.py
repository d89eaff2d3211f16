"""Schema comment annotation for model source files.

Inspects the database table behind a model, renders a comment block
describing it, and splices that block into the model's source file:

    # Table: albums
    # Columns:
    #  id        | integer | PRIMARY KEY
    #  artist_id | integer | NOT NULL
    # Foreign key constraints:
    #  (artist_id) REFERENCES artists(id)

Re-running against an unchanged schema leaves the file untouched.
"""

__version__ = "0.1.0"
