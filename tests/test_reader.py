"""Tests for maintlog/reader.py"""

import os
import time
from datetime import datetime

import pytest

from maintlog.reader import detect_encoding, list_log_files, read_lines


def _write(path, text, encoding="utf-8"):
    with open(path, "w", encoding=encoding, newline="") as f:
        f.write(text)


class TestListLogFiles:
    def test_filters_by_log_type_and_sorts(self, tmp_path):
        for name in (
            "IndexOptimize_b.txt",
            "IndexOptimize_a.txt",
            "DatabaseBackup_a.txt",
            "IndexOptimize_c.log",
        ):
            _write(tmp_path / name, "x\n")

        result = list_log_files(str(tmp_path))
        assert [os.path.basename(p) for p in result] == [
            "IndexOptimize_a.txt", "IndexOptimize_b.txt",
        ]

    def test_other_log_type(self, tmp_path):
        _write(tmp_path / "DatabaseBackup_a.txt", "x\n")
        _write(tmp_path / "IndexOptimize_a.txt", "x\n")
        result = list_log_files(str(tmp_path), log_type="DatabaseBackup")
        assert [os.path.basename(p) for p in result] == ["DatabaseBackup_a.txt"]

    def test_skips_directories(self, tmp_path):
        (tmp_path / "IndexOptimize_dir.txt").mkdir()
        assert list_log_files(str(tmp_path)) == []

    def test_since_filters_old_files(self, tmp_path):
        old = tmp_path / "IndexOptimize_old.txt"
        new = tmp_path / "IndexOptimize_new.txt"
        _write(old, "x\n")
        _write(new, "x\n")
        two_days_ago = time.time() - 2 * 86400
        os.utime(old, (two_days_ago, two_days_ago))

        since = datetime.fromtimestamp(time.time() - 86400)
        result = list_log_files(str(tmp_path), since=since)
        assert result == [str(new)]

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list_log_files(str(tmp_path / "nope"))

    def test_empty_directory(self, tmp_path):
        assert list_log_files(str(tmp_path)) == []


class TestReadLines:
    def test_strips_terminators(self, tmp_path):
        path = tmp_path / "IndexOptimize_a.txt"
        _write(path, "one\r\ntwo\nthree")
        assert list(read_lines(str(path))) == ["one", "two", "three"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "IndexOptimize_a.txt"
        _write(path, "")
        assert list(read_lines(str(path))) == []

    def test_utf16_with_bom(self, tmp_path):
        path = tmp_path / "IndexOptimize_a.txt"
        _write(path, "Database: [Übersicht]\r\nStatus: ONLINE\r\n", encoding="utf-16")
        assert detect_encoding(str(path)) == "utf-16"
        assert list(read_lines(str(path))) == ["Database: [Übersicht]", "Status: ONLINE"]

    def test_utf8_bom_removed(self, tmp_path):
        path = tmp_path / "IndexOptimize_a.txt"
        _write(path, "Database: [db]\n", encoding="utf-8-sig")
        assert list(read_lines(str(path))) == ["Database: [db]"]

    def test_invalid_bytes_replaced(self, tmp_path):
        path = tmp_path / "IndexOptimize_a.txt"
        path.write_bytes(b"Outcome: Succeeded\n\xff\xfe\xfa garbage\n")
        lines = list(read_lines(str(path)))
        assert lines[0] == "Outcome: Succeeded"
        assert len(lines) == 2

    def test_closing_generator_releases_file(self, tmp_path):
        path = tmp_path / "IndexOptimize_a.txt"
        _write(path, "a\nb\nc\n")
        gen = read_lines(str(path))
        assert next(gen) == "a"
        gen.close()
        with pytest.raises(StopIteration):
            next(gen)
