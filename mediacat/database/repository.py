"""Loading and storing volume trees in the catalog database."""

import logging
import sqlite3
import time
from collections.abc import Iterable
from dataclasses import dataclass

from mediacat.database.connection import Database
from mediacat.tree import Directory, File, FileState, Volume

logger = logging.getLogger(__name__)


@dataclass
class VolumeSummary:
    """Per-volume counts for status reports."""

    path: str
    validator: str | None
    main: bool
    updated_at: int
    directories: int
    files: int
    total_bytes: int
    hashed_files: int
    missing_files: int


class CatalogRepository:
    """Reads and writes complete volume trees."""

    def __init__(self, db: Database):
        self.db = db

    def load_all(self) -> list[Volume]:
        rows = self.db.conn.execute("SELECT id, path, validator, main FROM volumes ORDER BY path").fetchall()
        volumes = [self._load_volume(row) for row in rows]
        logger.info("Loaded %d volumes from catalog", len(volumes))
        return volumes

    def _load_volume(self, row: sqlite3.Row) -> Volume:
        volume = Volume(path=row["path"], validator=row["validator"], main=bool(row["main"]))

        directories: dict[int, Directory] = {}
        dir_rows = self.db.conn.execute(
            "SELECT id, parent_id, name, entity_id FROM directories WHERE volume_id = ? ORDER BY id",
            (row["id"],),
        ).fetchall()
        for dir_row in dir_rows:
            directory = Directory(name=dir_row["name"], entity_id=dir_row["entity_id"])
            directories[dir_row["id"]] = directory
            if dir_row["parent_id"] is None:
                volume.root = directory
            else:
                directories[dir_row["parent_id"]].add_directory(directory)

        file_rows = self.db.conn.execute(
            """
            SELECT directory_id, name, size, last_modified_unix, file_type, state,
                   hash_value, hash_created_unix, entity_id
            FROM files WHERE volume_id = ?
            """,
            (row["id"],),
        ).fetchall()
        for file_row in file_rows:
            directories[file_row["directory_id"]].add_file(
                File(
                    name=file_row["name"],
                    size=file_row["size"],
                    last_modified=file_row["last_modified_unix"],
                    file_type=file_row["file_type"],
                    state=FileState(file_row["state"]),
                    hash_value=file_row["hash_value"],
                    hash_created=file_row["hash_created_unix"],
                    entity_id=file_row["entity_id"],
                )
            )

        if volume.root is None:
            volume.root = Directory()
        return volume

    def save_all(self, volumes: Iterable[Volume]) -> None:
        """Store volumes, replacing the stored tree of every volume with the same path."""
        now = time.time()
        saved = 0
        with self.db.transaction() as conn:
            for volume in volumes:
                volume_id = self._upsert_volume(conn, volume, now)
                conn.execute("DELETE FROM directories WHERE volume_id = ?", (volume_id,))
                if volume.root is not None:
                    self._insert_directory(conn, volume_id, None, volume.root)
                saved += 1
        logger.info("Saved %d volumes to catalog", saved)

    def _upsert_volume(self, conn: sqlite3.Connection, volume: Volume, now: float) -> int:
        conn.execute(
            """
            INSERT INTO volumes (path, validator, main, updated_at_unix, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(path) DO UPDATE SET
                validator = excluded.validator,
                main = excluded.main,
                updated_at_unix = excluded.updated_at_unix,
                updated_at = excluded.updated_at
            """,
            (volume.path, volume.validator, int(volume.main), now, int(now)),
        )
        row = conn.execute("SELECT id FROM volumes WHERE path = ?", (volume.path,)).fetchone()
        return row["id"]

    def _insert_directory(
        self,
        conn: sqlite3.Connection,
        volume_id: int,
        parent_id: int | None,
        directory: Directory,
    ) -> None:
        cursor = conn.execute(
            "INSERT INTO directories (volume_id, parent_id, name, entity_id) VALUES (?, ?, ?, ?)",
            (volume_id, parent_id, directory.name, directory.entity_id),
        )
        directory_id = cursor.lastrowid

        rows = [
            (
                volume_id,
                directory_id,
                f.name,
                f.size,
                f.last_modified,
                _as_int(f.last_modified),
                f.file_type,
                f.state.value,
                f.hash_value,
                f.hash_created,
                _as_int(f.hash_created),
                f.entity_id,
            )
            for f in directory.files
        ]
        conn.executemany(
            """
            INSERT INTO files (
                volume_id, directory_id, name, size,
                last_modified_unix, last_modified,
                file_type, state, hash_value,
                hash_created_unix, hash_created, entity_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            rows,
        )

        for sub in directory.subdirectories:
            self._insert_directory(conn, volume_id, directory_id, sub)

    def delete_volume(self, path: str) -> bool:
        """Forget a volume and its tree. Returns False if it was not cataloged."""
        with self.db.transaction() as conn:
            cursor = conn.execute("DELETE FROM volumes WHERE path = ?", (path,))
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Removed volume %s from catalog", path)
        return deleted

    def summarize(self) -> list[VolumeSummary]:
        rows = self.db.conn.execute(
            """
            SELECT v.path, v.validator, v.main, v.updated_at,
                   (SELECT COUNT(*) FROM directories d WHERE d.volume_id = v.id) AS directories,
                   COUNT(f.id) AS files,
                   COALESCE(SUM(f.size), 0) AS total_bytes,
                   COUNT(f.hash_value) AS hashed_files,
                   COALESCE(SUM(f.state = ?), 0) AS missing_files
            FROM volumes v
            LEFT JOIN files f ON f.volume_id = v.id
            GROUP BY v.id
            ORDER BY v.path
            """,
            (FileState.MISSING.value,),
        ).fetchall()
        return [
            VolumeSummary(
                path=row["path"],
                validator=row["validator"],
                main=bool(row["main"]),
                updated_at=row["updated_at"],
                directories=row["directories"],
                files=row["files"],
                total_bytes=row["total_bytes"],
                hashed_files=row["hashed_files"],
                missing_files=row["missing_files"],
            )
            for row in rows
        ]


def _as_int(value: float | None) -> int | None:
    return int(value) if value is not None else None
