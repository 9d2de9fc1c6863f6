"""Tests for the staged-folder ZIP archiver."""

import os
import zipfile

import pytest

from ptbundler.archive.zipper import archive_directory
from tests.conftest import PLUGIN_FILES, PLUGIN_NAME, write_tree


def _contents(zip_path) -> dict[str, bytes]:
    with zipfile.ZipFile(zip_path) as z:
        return {name: z.read(name) for name in z.namelist()}


class TestArchiveDirectory:
    def test_folder_includes_itself(self, plugin_dir, tmp_path):
        out = tmp_path / "out.zip"
        archive_directory(plugin_dir, out)

        with zipfile.ZipFile(out) as z:
            names = z.namelist()
        assert names[0] == f"{PLUGIN_NAME}/"
        assert all(n.startswith(f"{PLUGIN_NAME}/") for n in names)

    def test_explicit_directory_entries(self, plugin_dir, tmp_path):
        out = tmp_path / "out.zip"
        archive_directory(plugin_dir, out)

        with zipfile.ZipFile(out) as z:
            names = set(z.namelist())
        assert f"{PLUGIN_NAME}/src/" in names
        assert f"{PLUGIN_NAME}/src/child/grandchild/" in names

    def test_empty_directory_preserved(self, tmp_path):
        root = tmp_path / "pkg"
        (root / "empty").mkdir(parents=True)
        out = tmp_path / "out.zip"
        archive_directory(root, out)

        with zipfile.ZipFile(out) as z:
            assert z.namelist() == ["pkg/", "pkg/empty/"]

    def test_round_trip_reproduces_tree(self, plugin_dir, tmp_path):
        out = tmp_path / "out.zip"
        archive_directory(plugin_dir, out)

        extract_dir = tmp_path / "extracted"
        with zipfile.ZipFile(out) as z:
            z.extractall(extract_dir)

        assert [p.name for p in extract_dir.iterdir()] == [PLUGIN_NAME]
        for relative, content in PLUGIN_FILES.items():
            extracted = extract_dir / PLUGIN_NAME / relative
            assert extracted.read_bytes() == content.encode("utf-8")

    def test_entries_sorted_within_directories(self, tmp_path):
        root = write_tree(tmp_path / "pkg", {"b.txt": "b", "a/c.txt": "c", "a/a.txt": "a"})
        out = tmp_path / "out.zip"
        archive_directory(root, out)

        with zipfile.ZipFile(out) as z:
            assert z.namelist() == ["pkg/", "pkg/a/", "pkg/a/a.txt", "pkg/a/c.txt", "pkg/b.txt"]

    def test_relative_source_path(self, tmp_path, monkeypatch):
        write_tree(tmp_path / "pkg", {"f.txt": "x"})
        monkeypatch.chdir(tmp_path)
        archive_directory("./pkg", "out.zip")

        assert _contents(tmp_path / "out.zip") == {"pkg/": b"", "pkg/f.txt": b"x"}

    def test_trailing_slash_on_source(self, tmp_path):
        write_tree(tmp_path / "pkg", {"f.txt": "x"})
        out = tmp_path / "out.zip"
        archive_directory(f"{tmp_path}/pkg/", out)

        assert set(_contents(out)) == {"pkg/", "pkg/f.txt"}

    def test_files_are_deflated(self, plugin_dir, tmp_path):
        out = tmp_path / "out.zip"
        archive_directory(plugin_dir, out)

        with zipfile.ZipFile(out) as z:
            info = z.getinfo(f"{PLUGIN_NAME}/readme.txt")
        assert info.compress_type == zipfile.ZIP_DEFLATED

    def test_two_archives_of_same_tree_identical(self, plugin_dir, tmp_path):
        first, second = tmp_path / "a.zip", tmp_path / "b.zip"
        archive_directory(plugin_dir, first)
        archive_directory(plugin_dir, second)

        assert first.read_bytes() == second.read_bytes()

    def test_overwrites_existing_destination(self, tmp_path):
        write_tree(tmp_path / "pkg", {"f.txt": "x"})
        out = tmp_path / "out.zip"
        out.write_bytes(b"stale")
        archive_directory(tmp_path / "pkg", out)

        assert set(_contents(out)) == {"pkg/", "pkg/f.txt"}

    def test_pre_1980_mtime_clamped(self, tmp_path):
        root = write_tree(tmp_path / "pkg", {"f.txt": "x"})
        os.utime(root / "f.txt", (0, 0))
        os.utime(root, (0, 0))
        out = tmp_path / "out.zip"
        archive_directory(root, out)

        with zipfile.ZipFile(out) as z:
            assert z.getinfo("pkg/f.txt").date_time == (1980, 1, 1, 0, 0, 0)
            assert z.read("pkg/f.txt") == b"x"


class TestArchiveErrors:
    def test_missing_source_raises(self, tmp_path):
        with pytest.raises(OSError):
            archive_directory(tmp_path / "missing", tmp_path / "out.zip")

    def test_unwritable_destination_raises(self, plugin_dir, tmp_path):
        with pytest.raises(OSError):
            archive_directory(plugin_dir, tmp_path / "no-such-dir" / "out.zip")
