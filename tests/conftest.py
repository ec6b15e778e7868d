"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import stat
import struct
import tempfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generator

import pytest

UTF8_FLAG = 0x800
ENCRYPTED_FLAG = 0x1


@dataclass
class ZipMember:
    """A member for hand-built archives; ``name`` is stored byte for byte."""

    name: bytes
    data: bytes = b""
    utf8: bool = False
    mode: int = 0o644
    is_dir: bool = False
    method: int = 0
    encrypted: bool = False
    create_system: int = 3


def build_zip(members: list[ZipMember]) -> bytes:
    """Build a ZIP archive from raw members.

    zipfile always encodes non-ASCII names as UTF-8 and sets the UTF-8
    flag, so legacy-encoded names need a hand-written archive. Content is
    always stored uncompressed; ``method`` only sets the recorded method.
    """
    local_parts: list[bytes] = []
    central_parts: list[bytes] = []
    offset = 0

    for member in members:
        flags = UTF8_FLAG if member.utf8 else 0
        if member.encrypted:
            flags |= ENCRYPTED_FLAG
        crc = zlib.crc32(member.data) & 0xFFFFFFFF
        size = len(member.data)
        # 1980-01-01
        dos_date = 33

        local = struct.pack(
            "<IHHHHHIIIHH",
            0x04034B50, 20, flags, member.method, 0, dos_date, crc, size, size,
            len(member.name), 0,
        ) + member.name + member.data

        if member.is_dir:
            external = ((stat.S_IFDIR | member.mode) << 16) | 0x10
        else:
            external = (stat.S_IFREG | member.mode) << 16

        central = struct.pack(
            "<IHHHHHHIIIHHHHHII",
            0x02014B50, (member.create_system << 8) | 20, 20, flags, member.method, 0, dos_date,
            crc, size, size, len(member.name), 0, 0, 0, 0, external, offset,
        ) + member.name

        local_parts.append(local)
        central_parts.append(central)
        offset += len(local)

    central_dir = b"".join(central_parts)
    end = struct.pack(
        "<IHHHHIIH",
        0x06054B50, 0, 0, len(members), len(members), len(central_dir), offset, 0,
    )
    return b"".join(local_parts) + central_dir + end


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def workdir(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside a temporary directory.

    Output paths are lower-cased as a whole, so tests extract to a relative
    root instead of a temporary path that may contain upper-case letters.
    """
    monkeypatch.chdir(temp_dir)
    return temp_dir


@pytest.fixture
def zip_builder() -> Callable[[list[ZipMember]], bytes]:
    return build_zip


@pytest.fixture
def cyrillic_zip() -> bytes:
    """Archive with a Windows-1251 directory and file, no UTF-8 flag."""
    return build_zip([
        ZipMember(name="ПАПКА/".encode("cp1251"), is_dir=True, mode=0o755),
        ZipMember(name="ПАПКА/Отчёт.TXT".encode("cp1251"), data=b"report body"),
        ZipMember(name=b"readme.txt", data=b"hello"),
    ])
