"""
Wire encoding of scheme parameters.

Layout (19 bytes):

    offset  size  field
    0       8     slope, IEEE-754 binary64, little-endian
    8       8     delta, IEEE-754 binary64, little-endian
    16      1     wdf normalization tag
    17      1     idf normalization tag
    18      1     wt normalization tag

Doubles are written bit-for-bit, so a decoded scheme scores identically to the
one that was encoded.
"""

from __future__ import annotations

import struct

from ranking_tfidf.config import SchemeConfig
from ranking_tfidf.errors import InvalidConfigurationError, SerializationError
from ranking_tfidf.normalization import IdfNorm, WdfNorm, WtNorm

_DOUBLE = struct.Struct("<d")


def encode_double(value: float) -> bytes:
    return _DOUBLE.pack(value)


class _Reader:
    """Sequential reader over a serialized byte string."""

    def __init__(self, data: bytes):
        self.data = memoryview(bytes(data))
        self.pos = 0

    def double(self) -> float:
        end = self.pos + _DOUBLE.size
        if end > len(self.data):
            raise SerializationError("Bad encoded double: insufficient data")
        (value,) = _DOUBLE.unpack_from(self.data, self.pos)
        self.pos = end
        return value

    def tag(self, enum_type):
        if self.pos >= len(self.data):
            raise SerializationError(f"Missing {enum_type.__name__} tag")
        raw = self.data[self.pos]
        self.pos += 1
        try:
            return enum_type(raw)
        except ValueError:
            raise SerializationError(f"Unknown {enum_type.__name__} tag {raw}") from None

    def finish(self) -> None:
        if self.pos != len(self.data):
            raise SerializationError(
                f"Extra data after scheme parameters: {len(self.data) - self.pos} bytes"
            )


def encode_config(config: SchemeConfig) -> bytes:
    """Serialize a scheme configuration."""
    return b"".join(
        [
            encode_double(config.slope),
            encode_double(config.delta),
            bytes([config.wdf_norm, config.idf_norm, config.wt_norm]),
        ]
    )


def decode_config(data: bytes) -> SchemeConfig:
    """
    Decode the output of :func:`encode_config`.

    Raises:
        SerializationError: If the data is truncated, has trailing bytes,
            carries an unknown tag or decodes to invalid parameters.
    """
    reader = _Reader(data)
    slope = reader.double()
    delta = reader.double()
    wdf_norm = reader.tag(WdfNorm)
    idf_norm = reader.tag(IdfNorm)
    wt_norm = reader.tag(WtNorm)
    reader.finish()
    try:
        return SchemeConfig(wdf_norm, idf_norm, wt_norm, slope, delta)
    except InvalidConfigurationError as exc:
        raise SerializationError(f"Invalid scheme parameters: {exc}") from exc


__all__ = ["encode_double", "encode_config", "decode_config"]
