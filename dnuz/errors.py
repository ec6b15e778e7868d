"""Exception hierarchy for the download-and-extract pipeline.

Every stage of the pipeline raises a subclass of :class:`DnuzError`. None of
them are recovered locally: the first failure aborts the run and the CLI
reports it.
"""

from __future__ import annotations

__all__ = [
    "DnuzError",
    "ConfigurationError",
    "UnsupportedEncoding",
    "FetchFailed",
    "InvalidArchive",
    "EncodingTransformFailed",
    "MaterializeFailed",
]


class DnuzError(RuntimeError):
    """Base exception for all pipeline failures."""


class ConfigurationError(DnuzError):
    """Raised when configuration inputs are missing or invalid."""


class UnsupportedEncoding(ConfigurationError):
    """Raised when an encoding selector names an unknown code page."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Unsupported encoding name "{name}"')
        self.name = name


class FetchFailed(DnuzError):
    """Raised when the archive cannot be downloaded."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"Failed to fetch {url}: {message}")
        self.url = url


class InvalidArchive(DnuzError):
    """Raised when the payload is not a readable ZIP archive."""


class EncodingTransformFailed(DnuzError):
    """Raised when an entry name cannot be decoded or re-encoded."""

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class MaterializeFailed(DnuzError):
    """Raised when a directory or file cannot be written."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Cannot write {path}: {message}")
        self.path = path
