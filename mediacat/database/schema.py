"""Database schema definition."""

import sqlite3

SCHEMA_SQL = """
-- Registered volumes
CREATE TABLE IF NOT EXISTS volumes (
    id INTEGER PRIMARY KEY,
    path TEXT NOT NULL,
    validator TEXT,
    main INTEGER NOT NULL DEFAULT 1,
    updated_at_unix REAL NOT NULL,
    updated_at INTEGER NOT NULL,
    UNIQUE(path)
);

-- Directory tree, root directories have no parent
CREATE TABLE IF NOT EXISTS directories (
    id INTEGER PRIMARY KEY,
    volume_id INTEGER NOT NULL REFERENCES volumes(id) ON DELETE CASCADE,
    parent_id INTEGER REFERENCES directories(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    entity_id TEXT,
    UNIQUE(volume_id, parent_id, name)
);

-- File inventory
CREATE TABLE IF NOT EXISTS files (
    id INTEGER PRIMARY KEY,
    volume_id INTEGER NOT NULL REFERENCES volumes(id) ON DELETE CASCADE,
    directory_id INTEGER NOT NULL REFERENCES directories(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    size INTEGER NOT NULL,
    last_modified_unix REAL,
    last_modified INTEGER,
    file_type TEXT,
    state INTEGER NOT NULL DEFAULT 0,
    hash_value TEXT,
    hash_created_unix REAL,
    hash_created INTEGER,
    entity_id TEXT,
    UNIQUE(directory_id, name)
);

CREATE INDEX IF NOT EXISTS idx_directories_volume ON directories(volume_id);
CREATE INDEX IF NOT EXISTS idx_directories_parent ON directories(parent_id);
CREATE INDEX IF NOT EXISTS idx_files_volume ON files(volume_id);
CREATE INDEX IF NOT EXISTS idx_files_directory ON files(directory_id);
CREATE INDEX IF NOT EXISTS idx_files_hash ON files(hash_value) WHERE hash_value IS NOT NULL;
"""


def create_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA_SQL)
    conn.commit()
