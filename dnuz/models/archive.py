"""Archive entry and extraction result records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Callable


@dataclass(frozen=True)
class ArchiveEntry:
    """One file or directory record from a ZIP central directory."""

    raw_name: bytes
    non_utf8: bool
    is_dir: bool
    mode: int
    size: int = 0
    opener: Callable[[], IO[bytes]] | None = field(default=None, repr=False, compare=False)

    def open(self) -> IO[bytes]:
        """Open the decompressed content stream."""
        if self.is_dir or self.opener is None:
            raise ValueError(f"Entry {self.raw_name!r} has no content")
        return self.opener()


@dataclass
class ExtractedEntry:
    """A directory or file written to disk."""

    path: str
    is_dir: bool
    size: int = 0


@dataclass
class ExtractionReport:
    """Outcome of a complete run."""

    downloaded_bytes: int = 0
    entries: list[ExtractedEntry] = field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]

    @property
    def file_count(self) -> int:
        return sum(1 for entry in self.entries if not entry.is_dir)

    @property
    def bytes_written(self) -> int:
        return sum(entry.size for entry in self.entries)
