"""dnuz - Download ZIP archives and repair legacy-encoded file names."""

from dnuz.errors import (
    ConfigurationError,
    DnuzError,
    EncodingTransformFailed,
    FetchFailed,
    InvalidArchive,
    MaterializeFailed,
    UnsupportedEncoding,
)
from dnuz.models import ExtractionReport, PipelineConfig
from dnuz.pipeline import extract_archive, run_pipeline

__version__ = "0.1.0"
__all__ = [
    "PipelineConfig",
    "ExtractionReport",
    "run_pipeline",
    "extract_archive",
    "DnuzError",
    "ConfigurationError",
    "UnsupportedEncoding",
    "FetchFailed",
    "InvalidArchive",
    "EncodingTransformFailed",
    "MaterializeFailed",
]
