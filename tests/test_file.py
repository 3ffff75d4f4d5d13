"""Tests for the VirtualFile handle and its content cache."""

from __future__ import annotations

import os

from writeguard.file import ContentState, VirtualFile


class TestPaths:
    def test_relative_path_resolved_against_cwd(self, tmp_path):
        f = VirtualFile("a/b.txt", cwd=tmp_path)
        assert f.path == (tmp_path / "a" / "b.txt").resolve()
        assert f.relative == os.path.join("a", "b.txt")

    def test_path_history_pushes_changes(self, tmp_path):
        f = VirtualFile(tmp_path / "one.txt")
        f.path = tmp_path / "one.txt"
        assert len(f.history) == 1
        f.path = tmp_path / "two.txt"
        assert len(f.history) == 2
        assert f.path.name == "two.txt"

    def test_name_parts(self, tmp_path):
        f = VirtualFile(tmp_path / "pkg" / "module.py")
        assert f.basename == "module.py"
        assert f.stem == "module"
        assert f.extname == ".py"
        assert f.dirname == (tmp_path / "pkg").resolve()

    def test_base_changes_relative(self, tmp_path):
        f = VirtualFile(tmp_path / "src" / "x.txt", cwd=tmp_path, base="src")
        assert f.relative == "x.txt"


class TestContents:
    def test_string_contents_encoded(self, tmp_path):
        f = VirtualFile(tmp_path / "a.txt", "héllo")
        assert f.contents == "héllo".encode("utf-8")
        assert f.state is ContentState.LOADED
        assert f.is_buffer()
        assert not f.is_null()

    def test_ensure_contents_reads_once(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("first")
        f = VirtualFile(path)
        assert f.state is ContentState.UNLOADED
        assert f.ensure_contents() == b"first"

        path.write_text("second")
        assert f.ensure_contents() == b"first"
        assert f.state is ContentState.LOADED

    def test_ensure_contents_missing(self, tmp_path):
        f = VirtualFile(tmp_path / "nope.txt")
        assert f.ensure_contents() is None
        assert f.state is ContentState.MISSING
        assert f.is_null()

    def test_supplied_contents_win_over_disk(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("on disk")
        f = VirtualFile(path, "in memory")
        assert f.ensure_contents() == b"in memory"

    def test_read_chunk_does_not_fill_cache(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"0123456789")
        f = VirtualFile(path)
        assert f.read_chunk(4) == b"0123"
        assert f.state is ContentState.UNLOADED
        assert f.contents is None

    def test_read_chunk_missing(self, tmp_path):
        assert VirtualFile(tmp_path / "nope").read_chunk(10) is None

    def test_size_from_stat_without_reading(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"12345")
        f = VirtualFile(path)
        assert f.size == 5
        assert f.state is ContentState.UNLOADED


class TestFilesystem:
    def test_stat_cached(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("x")
        f = VirtualFile(path)
        assert f.stat is f.stat

    def test_stat_none_when_missing(self, tmp_path):
        f = VirtualFile(tmp_path / "nope.txt")
        assert f.stat is None
        assert not f.exists()

    def test_directory(self, tmp_path):
        (tmp_path / "sub").mkdir()
        f = VirtualFile(tmp_path / "sub")
        assert f.is_directory()
        assert f.ensure_contents() is None

    def test_file_with_contents_is_not_directory(self, tmp_path):
        (tmp_path / "sub").mkdir()
        f = VirtualFile(tmp_path / "sub", "x")
        assert not f.is_directory()

    def test_repr(self, tmp_path):
        f = VirtualFile("a.txt", "abc", cwd=tmp_path)
        assert repr(f) == '<VirtualFile "a.txt" <3 bytes>>'
