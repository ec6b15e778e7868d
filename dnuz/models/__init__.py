"""Data models for dnuz."""

from dnuz.models.archive import ArchiveEntry, ExtractedEntry, ExtractionReport
from dnuz.models.config import PipelineConfig

__all__ = [
    # Archive records
    "ArchiveEntry",
    "ExtractedEntry",
    "ExtractionReport",
    # Configuration
    "PipelineConfig",
]
