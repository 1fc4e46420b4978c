"""Minimal gzip framing around raw deflate data."""

from __future__ import annotations

import zlib

from xbtkit.stream import read_int_le, write_int_le

_HEADER = bytes([0x1F, 0x8B, zlib.DEFLATED, 0, 0, 0, 0, 0, 0, 3])
_HEADER_SIZE = 10
_TRAILER_SIZE = 8


def gzip(data) -> bytes:
    """Compress ``data`` into a gzip member with a fixed header."""
    data = bytes(data)
    deflater = zlib.compressobj(
        zlib.Z_DEFAULT_COMPRESSION,
        zlib.DEFLATED,
        -zlib.MAX_WBITS,
        9,
        zlib.Z_DEFAULT_STRATEGY,
    )
    body = deflater.compress(data) + deflater.flush(zlib.Z_FINISH)
    return _HEADER + body + write_int_le(4, zlib.crc32(data)) + write_int_le(4, len(data))


def gunzip(data) -> bytes:
    """Decompress a gzip member with a plain 10-byte header."""
    data = bytes(data)
    if len(data) < _HEADER_SIZE + _TRAILER_SIZE:
        raise ValueError("gzip data too short")
    size = read_int_le(4, data[-4:])
    inflater = zlib.decompressobj(-zlib.MAX_WBITS)
    try:
        out = inflater.decompress(data[_HEADER_SIZE:-_TRAILER_SIZE], size + 1)
    except zlib.error as exc:
        raise ValueError(f"corrupt gzip data: {exc}") from exc
    if not inflater.eof or len(out) != size:
        raise ValueError("gzip data does not match its recorded size")
    return out