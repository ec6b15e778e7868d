"""Legacy code page selection and name transforms."""

from __future__ import annotations

import codecs
from enum import Enum

from dnuz.errors import EncodingTransformFailed, UnsupportedEncoding


class LegacyEncoding(str, Enum):
    """Supported legacy code pages, valued by their Python codec name."""
    CP866 = "cp866"
    WINDOWS_1251 = "cp1251"


# Selector names accepted on the command line and in config files
_SELECTORS: dict[str, LegacyEncoding] = {
    "866": LegacyEncoding.CP866,
    "cp866": LegacyEncoding.CP866,
    "1251": LegacyEncoding.WINDOWS_1251,
    "windows-1251": LegacyEncoding.WINDOWS_1251,
}


def supported_names() -> dict[str, LegacyEncoding]:
    """Return the accepted selector names and the code page each maps to."""
    return dict(_SELECTORS)


def resolve_encoding(name: str) -> LegacyEncoding | None:
    """Look up an encoding selector.

    Matching is case-insensitive. An empty name means "no transform" and
    returns None; any other unknown name raises UnsupportedEncoding.
    """
    if not name:
        return None
    try:
        return _SELECTORS[name.lower()]
    except KeyError:
        raise UnsupportedEncoding(name) from None


class Transform:
    """A name transform; the base class is the identity."""

    is_identity = True

    def transform(self, data, final: bool = True):
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


IDENTITY = Transform()


class DecodeTransform(Transform):
    """Decodes legacy bytes into text.

    Backed by an incremental decoder, so with ``final=False`` an
    incomplete trailing sequence stays buffered until the next call.
    Bytes the code page leaves undefined become U+FFFD.
    """

    is_identity = False

    def __init__(self, encoding: LegacyEncoding) -> None:
        self.encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding.value)(errors="replace")

    def transform(self, data: bytes, final: bool = True) -> str:
        try:
            return self._decoder.decode(data, final)
        except UnicodeDecodeError as e:
            self._decoder.reset()
            raise EncodingTransformFailed(
                f"Cannot decode {data!r} as {self.encoding.value}: {e.reason}"
            ) from e

    def __repr__(self) -> str:
        return f"DecodeTransform({self.encoding.value})"


class EncodeTransform(Transform):
    """Encodes text into the target code page."""

    is_identity = False

    def __init__(self, encoding: LegacyEncoding) -> None:
        self.encoding = encoding
        self._encoder = codecs.getincrementalencoder(encoding.value)(errors="strict")

    def transform(self, data: str, final: bool = True) -> bytes:
        try:
            return self._encoder.encode(data, final)
        except UnicodeEncodeError as e:
            self._encoder.reset()
            raise EncodingTransformFailed(
                f"Cannot encode {data!r} as {self.encoding.value}: {e.reason}"
            ) from e

    def __repr__(self) -> str:
        return f"EncodeTransform({self.encoding.value})"


def get_decoder(name: str) -> Transform:
    encoding = resolve_encoding(name)
    if encoding is None:
        return IDENTITY
    return DecodeTransform(encoding)


def get_encoder(name: str) -> Transform:
    encoding = resolve_encoding(name)
    if encoding is None:
        return IDENTITY
    return EncodeTransform(encoding)
