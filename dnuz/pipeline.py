"""Download, extract and rename pipeline."""

from __future__ import annotations

import logging
from typing import Callable

import httpx

from dnuz.archive import read_archive
from dnuz.encodings import Transform
from dnuz.errors import ConfigurationError
from dnuz.fetcher import fetch
from dnuz.materializer import materialize
from dnuz.models.archive import ExtractedEntry, ExtractionReport
from dnuz.models.config import PipelineConfig
from dnuz.resolver import resolve_path

logger = logging.getLogger(__name__)


def extract_archive(
    data: bytes,
    out_root: str,
    decoder: Transform,
    encoder: Transform,
    on_entry: Callable[[ExtractedEntry], None] | None = None,
) -> list[ExtractedEntry]:
    """Extract every entry of an in-memory archive below ``out_root``.

    Entries are handled one at a time in stored order. The first failure
    propagates; entries already written stay on disk.
    """
    extracted: list[ExtractedEntry] = []

    for entry in read_archive(data):
        path = resolve_path(entry.raw_name, entry.non_utf8, out_root, decoder, encoder)
        logger.debug(f"{entry.raw_name!r} -> {path!r}")

        result = materialize(entry, path)
        extracted.append(result)
        if on_entry is not None:
            on_entry(result)

    logger.info(f"Extracted {len(extracted)} entries to {out_root or '.'}")
    return extracted


def run_pipeline(
    config: PipelineConfig,
    *,
    client: httpx.Client | None = None,
    on_entry: Callable[[ExtractedEntry], None] | None = None,
) -> ExtractionReport:
    """Fetch the configured archive and extract it.

    Configuration is validated before any network or filesystem access.
    """
    url = config.require_url()
    decoder, encoder = config.transforms()

    data = fetch(url, client=client, timeout=config.timeout)
    report = ExtractionReport(downloaded_bytes=len(data))
    report.entries = extract_archive(data, config.out_path, decoder, encoder, on_entry)
    return report


def run_local(
    archive_path: str,
    config: PipelineConfig,
    on_entry: Callable[[ExtractedEntry], None] | None = None,
) -> ExtractionReport:
    """Extract a ZIP file from disk with the same name handling."""
    decoder, encoder = config.transforms()
    try:
        with open(archive_path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ConfigurationError(f"Cannot read archive {archive_path}: {e.strerror or e}") from e

    report = ExtractionReport(downloaded_bytes=len(data))
    report.entries = extract_archive(data, config.out_path, decoder, encoder, on_entry)
    return report
