"""Tests for database module."""

# pylint: disable=redefined-outer-name

from pathlib import Path

import pytest

from mediacat.database import CatalogRepository, Database
from mediacat.tree import Directory, File, FileState, Volume


@pytest.fixture
def db(tmp_path: Path) -> Database:
    database = Database(tmp_path / "catalog.db")
    database.connect()
    yield database
    database.close()


@pytest.fixture
def repository(db: Database) -> CatalogRepository:
    return CatalogRepository(db)


def make_volume(path: str = "/media/movies") -> Volume:
    root = Directory()
    year = root.add_directory(Directory(name="1979", entity_id=None))
    year.add_file(
        File(
            name="Alien.1979.mkv",
            size=1000,
            last_modified=1700000000.5,
            file_type="video/x-matroska",
            state=FileState.IDENTICAL,
            hash_value="abc123",
            hash_created=1700000100.25,
            entity_id="Q103569",
        )
    )
    year.add_file(File(name="Alien.1979.mkv.vsmeta", size=10, last_modified=1700000000.0, state=FileState.NEW))
    root.add_file(File(name="gone.txt", size=5, state=FileState.MISSING))
    return Volume(path=path, root=root, validator="movie", main=True)


class TestDatabase:
    """Tests for Database class."""

    def test_creates_database_file(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        with Database(db_path):
            assert db_path.exists()

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        with Database(db_path):
            assert db_path.exists()

    def test_in_memory_database(self) -> None:
        with Database(":memory:") as db:
            assert db.conn.execute("SELECT COUNT(*) FROM volumes").fetchone()[0] == 0

    def test_schema_creates_tables(self, tmp_path: Path):
        with Database(tmp_path / "test.db") as db:
            tables = db.conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
            table_names = {row["name"] for row in tables}

            assert {"volumes", "directories", "files"} <= table_names

    def test_foreign_keys_enabled(self, tmp_path: Path):
        with Database(tmp_path / "test.db") as db:
            result = db.conn.execute("PRAGMA foreign_keys").fetchone()
            assert result[0] == 1

    def test_transaction_rolls_back_on_error(self, db: Database):
        with pytest.raises(RuntimeError):
            with db.transaction() as conn:
                conn.execute(
                    "INSERT INTO volumes (path, main, updated_at_unix, updated_at) VALUES (?, 1, 0, 0)",
                    ("/tmp/x",),
                )
                raise RuntimeError("boom")

        assert db.conn.execute("SELECT COUNT(*) FROM volumes").fetchone()[0] == 0


class TestCatalogRepository:
    """Tests for CatalogRepository."""

    def test_empty_catalog(self, repository: CatalogRepository):
        assert repository.load_all() == []
        assert repository.summarize() == []

    def test_round_trip(self, repository: CatalogRepository):
        repository.save_all([make_volume()])

        [volume] = repository.load_all()

        assert volume.path == "/media/movies"
        assert volume.validator == "movie"
        assert volume.main is True
        assert volume.root.file_names == {"gone.txt"}
        year = volume.root.get_directory("1979")
        movie = year.get_file("Alien.1979.mkv")
        assert movie.size == 1000
        assert movie.last_modified == 1700000000.5
        assert movie.file_type == "video/x-matroska"
        assert movie.state is FileState.IDENTICAL
        assert movie.hash_value == "abc123"
        assert movie.hash_created == 1700000100.25
        assert movie.entity_id == "Q103569"
        assert movie.parent is year
        assert volume.root.get_file("gone.txt").state is FileState.MISSING
        assert volume.root.get_file("gone.txt").last_modified is None

    def test_directory_entity_id_persisted(self, repository: CatalogRepository):
        volume = make_volume()
        volume.root.get_directory("1979").entity_id = "?"
        repository.save_all([volume])

        [loaded] = repository.load_all()

        assert loaded.root.get_directory("1979").entity_id == "?"

    def test_save_replaces_existing_tree(self, repository: CatalogRepository, db: Database):
        repository.save_all([make_volume()])

        replacement = Volume(path="/media/movies", root=Directory(), validator=None, main=False)
        replacement.root.add_file(File(name="only.mkv", size=1))
        repository.save_all([replacement])

        [volume] = repository.load_all()
        assert volume.validator is None
        assert volume.main is False
        assert volume.root.file_names == {"only.mkv"}
        assert volume.root.directory_names == set()
        assert db.conn.execute("SELECT COUNT(*) FROM volumes").fetchone()[0] == 1
        assert db.conn.execute("SELECT COUNT(*) FROM files").fetchone()[0] == 1

    def test_saving_twice_is_idempotent(self, repository: CatalogRepository, db: Database):
        repository.save_all([make_volume()])
        first = db.conn.execute("SELECT COUNT(*) FROM files").fetchone()[0]
        repository.save_all(repository.load_all())
        assert db.conn.execute("SELECT COUNT(*) FROM files").fetchone()[0] == first

    def test_volumes_loaded_in_path_order(self, repository: CatalogRepository):
        repository.save_all([make_volume("/b"), make_volume("/a")])
        assert [v.path for v in repository.load_all()] == ["/a", "/b"]

    def test_delete_volume(self, repository: CatalogRepository, db: Database):
        repository.save_all([make_volume("/a"), make_volume("/b")])

        assert repository.delete_volume("/a") is True
        assert repository.delete_volume("/a") is False

        assert [v.path for v in repository.load_all()] == ["/b"]
        remaining = db.conn.execute("SELECT COUNT(DISTINCT volume_id) FROM files").fetchone()[0]
        assert remaining == 1

    def test_summarize(self, repository: CatalogRepository):
        repository.save_all([make_volume()])

        [summary] = repository.summarize()

        assert summary.path == "/media/movies"
        assert summary.validator == "movie"
        assert summary.directories == 2
        assert summary.files == 3
        assert summary.total_bytes == 1015
        assert summary.hashed_files == 1
        assert summary.missing_files == 1
        assert summary.updated_at > 0

    def test_volume_without_files(self, repository: CatalogRepository):
        repository.save_all([Volume(path="/empty", root=Directory())])

        [summary] = repository.summarize()
        [volume] = repository.load_all()

        assert summary.files == 0
        assert summary.total_bytes == 0
        assert summary.missing_files == 0
        assert volume.root is not None
        assert list(volume.iter_files()) == []
