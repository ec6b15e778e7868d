"""Output path resolution for archive entry names."""

from __future__ import annotations

import os

from dnuz.encodings import IDENTITY, Transform
from dnuz.errors import EncodingTransformFailed, InvalidArchive


def display_name(raw_name: bytes) -> str:
    """Best-effort printable form of a raw entry name for messages."""
    return raw_name.decode("utf-8", errors="backslashreplace")


def decode_name(raw_name: bytes, non_utf8: bool, decoder: Transform = IDENTITY) -> str:
    """Turn a stored entry name into text.

    Only names the archive marks as non-UTF-8 go through the decoder.
    Without one the stored bytes are kept unchanged in the filesystem
    name, which can look garbled when the archive used another code page.
    """
    if not non_utf8:
        return raw_name.decode("utf-8")
    if decoder.is_identity:
        return os.fsdecode(raw_name)
    return decoder.transform(raw_name, final=True)


def join_output(out_root: str, name: str) -> str:
    """Join an entry name below the output root, normalized.

    Raises InvalidArchive when the name climbs out of the root.
    """
    relative = os.path.normpath(name.lstrip("/") or os.curdir)
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        raise InvalidArchive(f"Entry {name!r} points outside the output directory")
    return os.path.normpath(os.path.join(out_root, relative))


def resolve_path(
    raw_name: bytes,
    non_utf8: bool,
    out_root: str,
    decoder: Transform = IDENTITY,
    encoder: Transform = IDENTITY,
) -> str:
    """Compute the filesystem path an entry is extracted to.

    The whole joined path, root included, is lower-cased before it is
    re-encoded into the output encoding.
    """
    try:
        name = decode_name(raw_name, non_utf8, decoder)
    except (EncodingTransformFailed, UnicodeDecodeError) as e:
        raise EncodingTransformFailed(
            f"Cannot decode name of entry {display_name(raw_name)!r}: {e}",
            name=display_name(raw_name),
        ) from e

    path = join_output(out_root, name).lower()

    if encoder.is_identity:
        return path
    try:
        return os.fsdecode(encoder.transform(path, final=True))
    except EncodingTransformFailed as e:
        raise EncodingTransformFailed(
            f"Cannot encode path of entry {name!r}: {e}", name=name
        ) from e
