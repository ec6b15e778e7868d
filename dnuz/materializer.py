"""Writes archive entries to the filesystem."""

from __future__ import annotations

import os
import shutil

from dnuz.errors import MaterializeFailed
from dnuz.models.archive import ArchiveEntry, ExtractedEntry

# Directory mode before umask
DIR_MODE = 0o777

COPY_BUFFER_SIZE = 64 * 1024


def make_dirs(path: str) -> None:
    try:
        os.makedirs(path, mode=DIR_MODE, exist_ok=True)
    except OSError as e:
        raise MaterializeFailed(path, e.strerror or str(e)) from e


def write_file(entry: ArchiveEntry, path: str) -> int:
    """Copy an entry's content into a new or truncated file at ``path``.

    The file is created with the entry's mode, and only once the entry
    stream has opened, so an unreadable entry leaves an existing file
    untouched. Both handles are closed before returning.
    """
    parent = os.path.dirname(path)
    if parent:
        make_dirs(parent)

    with entry.open() as src:
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, entry.mode)
            with os.fdopen(fd, "wb") as dst:
                shutil.copyfileobj(src, dst, COPY_BUFFER_SIZE)
                written = dst.tell()
        except OSError as e:
            raise MaterializeFailed(path, e.strerror or str(e)) from e
    return written


def materialize(entry: ArchiveEntry, path: str) -> ExtractedEntry:
    """Create the directory or file described by ``entry`` at ``path``."""
    if entry.is_dir:
        make_dirs(path)
        return ExtractedEntry(path=path, is_dir=True)

    size = write_file(entry, path)
    return ExtractedEntry(path=path, is_dir=False, size=size)
