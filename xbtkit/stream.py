"""Fixed-width integer encoding, value parsing and length-prefixed byte streams."""

from __future__ import annotations

import re
import struct
from pathlib import Path
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8", "surrogateescape")
    return bytes(data)


def _mask(size: int, value: int) -> int:
    return value & ((1 << (8 * size)) - 1)


def _signed(value: int, size: int) -> int:
    """Interpret a wide value the way a 64-bit signed accumulator would."""
    if size < 8:
        return value
    value &= (1 << 64) - 1
    return value - (1 << 64) if value >= 1 << 63 else value


def read_int(size: int, data: BytesLike) -> int:
    """Read a big-endian integer of ``size`` bytes; 0 if ``data`` is too short."""
    data = _as_bytes(data)
    if len(data) < size:
        return 0
    return _signed(int.from_bytes(data[:size], "big"), size)


def write_int(size: int, value: int) -> bytes:
    """Encode the low ``size`` bytes of ``value`` big-endian."""
    return _mask(size, value).to_bytes(size, "big")


def read_int_le(size: int, data: BytesLike) -> int:
    """Read a little-endian integer of ``size`` bytes."""
    data = _as_bytes(data)
    if len(data) < size:
        raise ValueError(f"need {size} bytes, got {len(data)}")
    return _signed(int.from_bytes(data[:size], "little"), size)


def write_int_le(size: int, value: int) -> bytes:
    """Encode the low ``size`` bytes of ``value`` little-endian."""
    return _mask(size, value).to_bytes(size, "little")


def read_float(data: BytesLike) -> float:
    """Read a 4-byte IEEE single-precision float."""
    try:
        return struct.unpack_from("<f", _as_bytes(data))[0]
    except struct.error as exc:
        raise ValueError("need 4 bytes for a float") from exc


def write_float(value: float) -> bytes:
    """Encode ``value`` as a 4-byte IEEE single-precision float."""
    return struct.pack("<f", value)


def to_int(text) -> int:
    """Parse an optionally negative decimal integer; anything malformed gives 0."""
    if isinstance(text, (bytes, bytearray, memoryview)):
        text = bytes(text).decode("latin-1")
    if not text:
        return 0
    digits = text[1:] if text.startswith("-") else text
    if not all("0" <= c <= "9" for c in digits):
        return 0
    if not digits:
        return 0
    value = int(digits)
    return -value if text.startswith("-") else value


def to_float(text) -> float:
    """Parse a float strictly; empty or malformed input gives 0.0."""
    if isinstance(text, (bytes, bytearray, memoryview)):
        text = bytes(text).decode("latin-1")
    if not text or not _FLOAT_RE.fullmatch(text):
        return 0.0
    return float(text)


def read_until(text, sep):
    """Split ``text`` at the first ``sep``: return (head, rest after the separator)."""
    index = text.find(sep)
    if index < 0:
        return text, text[:0]
    return text[:index], text[index + len(sep):]


def file_get(path) -> bytes:
    """Return the whole contents of the file at ``path``."""
    return Path(path).read_bytes()


def file_put(path, data) -> None:
    """Replace the file at ``path`` with ``data``."""
    Path(path).write_bytes(_as_bytes(data))


class StreamReader:
    """Sequential reader over a byte buffer with big-endian integers."""

    def __init__(self, data: BytesLike):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read(self, size: int) -> bytes:
        if size < 0 or size > self.remaining:
            raise EOFError(f"cannot read {size} bytes, {self.remaining} left")
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def read_int(self, size: int) -> int:
        return read_int(size, self.read(size))

    def read_data(self) -> bytes:
        return self.read(self.read_int(4))

    def read_string(self) -> str:
        return self.read_data().decode("utf-8", "surrogateescape")


class StreamWriter:
    """Growing byte buffer with big-endian integers and length-prefixed blobs."""

    def __init__(self):
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def write(self, data) -> None:
        self._buffer += _as_bytes(data)

    def write_int(self, size: int, value: int) -> None:
        self._buffer += write_int(size, value)

    def write_data(self, data) -> None:
        data = _as_bytes(data)
        self.write_int(4, len(data))
        self._buffer += data

    def getvalue(self) -> bytes:
        return bytes(self._buffer)