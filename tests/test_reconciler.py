"""Tests for reconciler module."""

from mediacat.reconciler import count_states, merge_directory, merge_file, merge_volume, merge_volumes
from mediacat.tree import Directory, File, FileState, Volume


def make_file(name: str = "a.mkv", size: int = 100, mtime: float = 1000.0, **kwargs) -> File:
    return File(name=name, size=size, last_modified=mtime, **kwargs)


def make_tree(files: dict[str, File]) -> Directory:
    """Build a tree from relative paths, e.g. {"1999/a.mkv": File(...)}."""
    root = Directory()
    for path, file in files.items():
        directory = root
        *dirs, name = path.split("/")
        for part in dirs:
            directory = directory.find_or_create_directory(part)
        file.name = name
        directory.add_file(file)
    return root


class TestMergeFile:
    """Tests for merge_file function."""

    def test_both_absent(self):
        assert merge_file(None, None) is None

    def test_scanned_only_is_new_and_returned_verbatim(self):
        scanned = make_file()
        result = merge_file(scanned, None)
        assert result is scanned
        assert result.state is FileState.NEW

    def test_loaded_only_is_missing_and_returned_verbatim(self):
        loaded = make_file(hash_value="abc")
        result = merge_file(None, loaded)
        assert result is loaded
        assert result.state is FileState.MISSING
        assert result.hash_value == "abc"

    def test_same_size_and_mtime_is_identical(self):
        result = merge_file(make_file(), make_file())
        assert result.state is FileState.IDENTICAL

    def test_different_size_is_modified(self):
        result = merge_file(make_file(size=101), make_file(size=100))
        assert result.state is FileState.MODIFIED

    def test_different_mtime_is_modified(self):
        result = merge_file(make_file(mtime=2000.0), make_file(mtime=1000.0))
        assert result.state is FileState.MODIFIED

    def test_merged_file_is_new_object(self):
        scanned = make_file()
        loaded = make_file()
        result = merge_file(scanned, loaded)
        assert result is not scanned
        assert result is not loaded

    def test_takes_disk_facts_from_scanned_and_history_from_loaded(self):
        scanned = make_file(size=200, mtime=3000.0)
        loaded = make_file(
            size=100,
            mtime=1000.0,
            file_type="video/x-matroska",
            hash_value="abc",
            hash_created=500.0,
            entity_id="Q83495",
        )
        result = merge_file(scanned, loaded)
        assert result.size == 200
        assert result.last_modified == 3000.0
        assert result.file_type == "video/x-matroska"
        assert result.hash_value == "abc"
        assert result.hash_created == 500.0
        assert result.entity_id == "Q83495"


class TestMergeDirectory:
    """Tests for merge_directory function."""

    def test_both_absent(self):
        assert merge_directory(None, None) is None

    def test_one_sided_returns_input(self):
        scanned = make_tree({"x/a.mkv": make_file()})
        assert merge_directory(scanned, None) is scanned
        assert all(f.state is FileState.NEW for f in scanned.iter_files())

        loaded = make_tree({"x/a.mkv": make_file()})
        assert merge_directory(None, loaded) is loaded
        assert all(f.state is FileState.MISSING for f in loaded.iter_files())

    def test_union_of_children(self):
        scanned = make_tree({"1999/a.mkv": make_file(), "2000/new.mkv": make_file()})
        loaded = make_tree({"1999/a.mkv": make_file(), "1998/old.mkv": make_file()})

        merged = merge_directory(scanned, loaded)

        assert merged.directory_names == {"1998", "1999", "2000"}
        assert merged.get_directory("1999").get_file("a.mkv").state is FileState.IDENTICAL
        assert merged.get_directory("2000").get_file("new.mkv").state is FileState.NEW
        assert merged.get_directory("1998").get_file("old.mkv").state is FileState.MISSING

    def test_merged_tree_has_consistent_parents(self):
        scanned = make_tree({"1999/a.mkv": make_file(), "b.mkv": make_file()})
        loaded = make_tree({"1999/a.mkv": make_file(), "1999/c.mkv": make_file()})

        merged = merge_directory(scanned, loaded)

        for directory in merged.iter_directories():
            for file in directory.files:
                assert file.parent is directory
            for sub in directory.subdirectories:
                assert sub.parent is directory

    def test_carries_loaded_entity_id(self):
        scanned = make_tree({"2008/Show/1/e.mkv": make_file()})
        loaded = make_tree({"2008/Show/1/e.mkv": make_file()})
        loaded.get_directory("2008").get_directory("Show").entity_id = "Q1079"

        merged = merge_directory(scanned, loaded)

        assert merged.get_directory("2008").get_directory("Show").entity_id == "Q1079"


class TestMergeVolumes:
    """Tests for merge_volume and merge_volumes."""

    def test_merge_volume_keeps_scanned_settings(self):
        scanned = Volume(path="/m", root=make_tree({"a": make_file()}), validator="movie", main=False)
        loaded = Volume(path="/m", root=make_tree({"a": make_file()}), validator=None)
        merged = merge_volume(scanned, loaded)
        assert merged.validator == "movie"
        assert merged.main is False
        assert merged.root.get_file("a").state is FileState.IDENTICAL

    def test_loaded_only_volume_survives_unchanged(self):
        file = make_file(state=FileState.IDENTICAL)
        loaded = Volume(path="/offline", root=make_tree({"a": file}))

        result = merge_volumes([], [loaded])

        assert result == [loaded]
        assert file.state is FileState.IDENTICAL

    def test_scanned_only_volume_is_new(self):
        scanned = Volume(path="/new", root=make_tree({"a": make_file()}))
        result = merge_volumes([scanned], [])
        assert result == [scanned]
        assert scanned.root.get_file("a").state is FileState.NEW

    def test_result_sorted_by_path(self):
        volumes = merge_volumes(
            [Volume(path="/b", root=Directory()), Volume(path="/c", root=Directory())],
            [Volume(path="/a", root=Directory()), Volume(path="/b", root=Directory())],
        )
        assert [v.path for v in volumes] == ["/a", "/b", "/c"]


class TestCountStates:
    """Tests for count_states function."""

    def test_counts_per_state(self):
        scanned = Volume(path="/m", root=make_tree({"a": make_file(), "b": make_file(size=1)}))
        loaded = Volume(path="/m", root=make_tree({"a": make_file(), "c": make_file()}))
        counts = count_states(merge_volumes([scanned], [loaded]))
        assert counts[FileState.IDENTICAL] == 1
        assert counts[FileState.NEW] == 1
        assert counts[FileState.MISSING] == 1
        assert counts[FileState.MODIFIED] == 0
