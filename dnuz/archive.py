"""ZIP central directory reader over an in-memory buffer."""

from __future__ import annotations

import io
import stat
import zipfile
import zlib
from typing import IO, Iterator

from dnuz.errors import InvalidArchive
from dnuz.models.archive import ArchiveEntry

# General purpose flag bit 11: name and comment are UTF-8
UTF8_FLAG = 0x800

# ZipInfo.create_system values whose external attributes hold a Unix mode
UNIX_SYSTEM = 3
MACOSX_SYSTEM = 19
UNIX_MODE_SYSTEMS = (UNIX_SYSTEM, MACOSX_SYSTEM)

MSDOS_READONLY = 0x01

# zipfile decodes names without the UTF-8 flag as cp437, which maps
# every byte value, so encoding back recovers the stored bytes
_LEGACY_NAME_CODEC = "cp437"

_READ_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError)

# zipfile raises NotImplementedError for unknown compression methods,
# RuntimeError for encrypted entries and ValueError once closed
_OPEN_ERRORS = _READ_ERRORS + (NotImplementedError, RuntimeError, ValueError)


def entry_mode(info: zipfile.ZipInfo) -> int:
    """Permission bits recorded for an entry.

    Unix and macOS hosts store the mode in the high word of the external attributes.
    Archives from MS-DOS/Windows hosts only carry a read-only attribute.
    """
    unix_mode = info.external_attr >> 16
    if info.create_system in UNIX_MODE_SYSTEMS and unix_mode:
        return stat.S_IMODE(unix_mode)
    if info.external_attr & MSDOS_READONLY:
        return 0o444
    return 0o666


def raw_entry_name(info: zipfile.ZipInfo) -> bytes:
    """The entry name as stored in the central directory."""
    if info.flag_bits & UTF8_FLAG:
        return info.orig_filename.encode("utf-8")
    return info.orig_filename.encode(_LEGACY_NAME_CODEC)


class _CheckedStream(io.RawIOBase):
    """Entry stream that reports decompression failures as InvalidArchive."""

    def __init__(self, name: str, stream: IO[bytes]) -> None:
        self._name = name
        self._stream = stream

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        try:
            return self._stream.read(size)
        except _READ_ERRORS as e:
            raise InvalidArchive(f"Corrupt entry {self._name!r}: {e}") from e

    def readinto(self, buffer) -> int:
        data = self.read(len(buffer))
        buffer[: len(data)] = data
        return len(data)

    def close(self) -> None:
        if not self.closed:
            self._stream.close()
        super().close()


def open_archive(data: bytes) -> zipfile.ZipFile:
    """Parse the central directory of an in-memory archive."""
    try:
        return zipfile.ZipFile(io.BytesIO(data), "r")
    except (zipfile.BadZipFile, zipfile.LargeZipFile, UnicodeDecodeError, ValueError, EOFError) as e:
        raise InvalidArchive(f"Not a valid ZIP archive ({len(data)} bytes): {e}") from e


def iter_entries(zf: zipfile.ZipFile) -> Iterator[ArchiveEntry]:
    """Yield the entries of an open archive in stored order."""
    for info in zf.infolist():
        is_dir = info.is_dir() or (
            info.create_system in UNIX_MODE_SYSTEMS and stat.S_ISDIR(info.external_attr >> 16)
        )

        def opener(info: zipfile.ZipInfo = info) -> IO[bytes]:
            try:
                stream = zf.open(info)
            except _OPEN_ERRORS as e:
                raise InvalidArchive(f"Cannot open entry {info.filename!r}: {e}") from e
            return _CheckedStream(info.filename, stream)

        yield ArchiveEntry(
            raw_name=raw_entry_name(info),
            non_utf8=not info.flag_bits & UTF8_FLAG,
            is_dir=is_dir,
            mode=entry_mode(info),
            size=info.file_size,
            opener=None if is_dir else opener,
        )


def read_archive(data: bytes) -> Iterator[ArchiveEntry]:
    """Open ``data`` as a ZIP archive and yield its entries lazily.

    The central directory is parsed before this returns, so a malformed
    buffer raises InvalidArchive up front rather than midway through
    iteration. The archive stays open for as long as its entries are
    referenced; it only wraps an in-memory buffer.
    """
    return iter_entries(open_archive(data))
