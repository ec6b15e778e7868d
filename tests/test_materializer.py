"""Tests for writing entries to disk."""

from __future__ import annotations

import io
import os
import stat
from pathlib import Path

import pytest

from dnuz.errors import InvalidArchive, MaterializeFailed
from dnuz.materializer import materialize
from dnuz.models.archive import ArchiveEntry


def _file_entry(name: bytes, data: bytes, mode: int = 0o644) -> ArchiveEntry:
    return ArchiveEntry(
        raw_name=name,
        non_utf8=True,
        is_dir=False,
        mode=mode,
        size=len(data),
        opener=lambda: io.BytesIO(data),
    )


def _dir_entry(name: bytes) -> ArchiveEntry:
    return ArchiveEntry(raw_name=name, non_utf8=True, is_dir=True, mode=0o755)


class TestMaterialize:
    """Tests for directory and file creation."""

    def test_creates_directory(self, temp_dir: Path) -> None:
        target = temp_dir / "a" / "b"

        result = materialize(_dir_entry(b"a/b/"), str(target))

        assert target.is_dir()
        assert result.is_dir is True
        assert result.path == str(target)

    def test_existing_directory_is_fine(self, temp_dir: Path) -> None:
        materialize(_dir_entry(b"a/"), str(temp_dir / "a"))
        materialize(_dir_entry(b"a/"), str(temp_dir / "a"))

        assert (temp_dir / "a").is_dir()

    def test_writes_file_and_parents(self, temp_dir: Path) -> None:
        target = temp_dir / "x" / "y" / "z.txt"

        result = materialize(_file_entry(b"x/y/z.txt", b"content"), str(target))

        assert target.read_bytes() == b"content"
        assert result.is_dir is False
        assert result.size == 7

    def test_truncates_existing_file(self, temp_dir: Path) -> None:
        target = temp_dir / "f.txt"
        target.write_bytes(b"much longer previous content")

        materialize(_file_entry(b"f.txt", b"new"), str(target))

        assert target.read_bytes() == b"new"

    def test_new_file_gets_entry_mode(self, temp_dir: Path) -> None:
        target = temp_dir / "run.sh"
        old_umask = os.umask(0)
        try:
            materialize(_file_entry(b"run.sh", b"#!/bin/sh\n", mode=0o750), str(target))
        finally:
            os.umask(old_umask)

        assert stat.S_IMODE(target.stat().st_mode) == 0o750

    def test_unwritable_location_fails(self, temp_dir: Path) -> None:
        blocker = temp_dir / "blocker"
        blocker.write_bytes(b"a file, not a directory")

        with pytest.raises(MaterializeFailed) as exc_info:
            materialize(_file_entry(b"blocker/f.txt", b"x"), str(blocker / "f.txt"))

        assert exc_info.value.path == str(blocker)

    def test_directory_over_file_fails(self, temp_dir: Path) -> None:
        blocker = temp_dir / "taken"
        blocker.write_bytes(b"x")

        with pytest.raises(MaterializeFailed):
            materialize(_dir_entry(b"taken/"), str(blocker))

    def test_file_over_directory_fails(self, temp_dir: Path) -> None:
        (temp_dir / "dir").mkdir()

        with pytest.raises(MaterializeFailed):
            materialize(_file_entry(b"dir", b"x"), str(temp_dir / "dir"))

    def test_entry_stream_closed(self, temp_dir: Path) -> None:
        stream = io.BytesIO(b"data")
        entry = ArchiveEntry(
            raw_name=b"f", non_utf8=False, is_dir=False, mode=0o644, opener=lambda: stream
        )

        materialize(entry, str(temp_dir / "f"))

        assert stream.closed

    def test_unreadable_entry_keeps_existing_file(self, temp_dir: Path) -> None:
        target = temp_dir / "f.txt"
        target.write_bytes(b"precious")

        def opener():
            raise InvalidArchive("Cannot open entry 'f.txt'")

        entry = ArchiveEntry(
            raw_name=b"f.txt", non_utf8=False, is_dir=False, mode=0o644, opener=opener
        )

        with pytest.raises(InvalidArchive):
            materialize(entry, str(target))

        assert target.read_bytes() == b"precious"
