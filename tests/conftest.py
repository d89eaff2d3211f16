"""Shared test fixtures for schema-annotate."""

from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

FIXTURES = Path(__file__).parent / "fixtures"

MUSIC_DDL = [
    "CREATE TABLE artists (id INTEGER PRIMARY KEY, name VARCHAR(255) NOT NULL)",
    "CREATE UNIQUE INDEX artists_name_idx ON artists (name)",
    "CREATE TABLE albums ("
    " id INTEGER PRIMARY KEY,"
    " artist_id INTEGER NOT NULL REFERENCES artists(id),"
    " title VARCHAR(255) NOT NULL,"
    " rating INTEGER DEFAULT 0)",
    "CREATE INDEX albums_title_idx ON albums (title)",
    "CREATE TABLE tracks ("
    " album_id INTEGER NOT NULL REFERENCES albums(id),"
    " position INTEGER NOT NULL,"
    " name TEXT,"
    " PRIMARY KEY (album_id, position))",
    "CREATE TABLE playlist_entries ("
    " id INTEGER PRIMARY KEY,"
    " playlist TEXT NOT NULL,"
    " album_id INTEGER,"
    " track_album_id INTEGER,"
    " track_position INTEGER,"
    " added_at TEXT,"
    " CONSTRAINT playlist_entries_track_fk FOREIGN KEY (track_album_id, track_position)"
    " REFERENCES tracks (album_id, position),"
    " CONSTRAINT playlist_entries_album_fk FOREIGN KEY (album_id) REFERENCES albums (id))",
    "CREATE INDEX playlist_entries_added_idx ON playlist_entries (added_at)",
    "CREATE UNIQUE INDEX playlist_entries_slot_key"
    " ON playlist_entries (playlist, track_album_id, track_position)",
    "CREATE INDEX playlist_entries_album_idx ON playlist_entries (album_id)",
    "CREATE UNIQUE INDEX playlist_entries_order_key ON playlist_entries (playlist, added_at)",
]


@pytest.fixture
def music_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'music.db'}")
    with engine.begin() as conn:
        for statement in MUSIC_DDL:
            conn.execute(text(statement))
    yield engine
    engine.dispose()


@pytest.fixture
def model_dir(tmp_path):
    """Copy the model fixtures into a scratch directory."""
    target = tmp_path / "models"
    target.mkdir()
    for source in (FIXTURES / "models").iterdir():
        if not source.is_file():
            continue
        (target / source.name).write_text(source.read_text())
    return target
