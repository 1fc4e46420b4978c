"""Bencoding: decoding to and encoding from plain Python values.

Decoded values are ``int``, ``bytes``, ``list`` and ``dict`` with ``bytes`` keys
kept in sorted order. Encoding also accepts ``str`` (as UTF-8) for strings and
dictionary keys, and always writes dictionary entries sorted by key bytes.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple, Union

BValue = Union[int, bytes, List[Any], Dict[bytes, Any]]

_LEADING_DIGITS = re.compile(rb"\d*")
_LEADING_INT = re.compile(rb"[ \t\n\v\f\r]*([+-]?\d*)")


class BencodeError(ValueError):
    """Raised when data is not a well-formed bencoded value."""


def _atoi(data: bytes, pos: int, pattern: "re.Pattern[bytes]") -> int:
    match = pattern.match(data, pos)
    text = match.group(match.lastindex or 0)
    if text in (b"", b"+", b"-"):
        return 0
    return int(text)


def _decode(data: bytes, pos: int) -> Tuple[BValue, int]:
    if pos >= len(data):
        raise BencodeError("unexpected end of data")
    tag = data[pos]
    pos += 1
    if 0x30 <= tag <= 0x39:
        colon = data.find(b":", pos)
        if colon < 0:
            raise BencodeError("string length without ':'")
        length = _atoi(data, pos - 1, _LEADING_DIGITS)
        start = colon + 1
        end = start + length
        if end > len(data):
            raise BencodeError("string runs past end of data")
        return data[start:end], end
    if tag == ord("i"):
        end = data.find(b"e", pos)
        if end < 0:
            raise BencodeError("unterminated integer")
        return _atoi(data, pos, _LEADING_INT), end + 1
    if tag == ord("l"):
        items: List[BValue] = []
        while pos < len(data) and data[pos] != ord("e"):
            item, pos = _decode(data, pos)
            items.append(item)
        if pos >= len(data):
            raise BencodeError("unterminated list")
        return items, pos + 1
    if tag == ord("d"):
        entries: Dict[bytes, BValue] = {}
        while pos < len(data) and data[pos] != ord("e"):
            key, pos = _decode(data, pos)
            if not isinstance(key, bytes):
                raise BencodeError("dictionary key is not a string")
            entries[key], pos = _decode(data, pos)
        if pos >= len(data):
            raise BencodeError("unterminated dictionary")
        return dict(sorted(entries.items())), pos + 1
    raise BencodeError(f"unknown type byte {tag:#04x} at offset {pos - 1}")


def decode(data) -> BValue:
    """Decode the first bencoded value in ``data``; anything after it is ignored."""
    if isinstance(data, str):
        data = data.encode("utf-8", "surrogateescape")
    value, _ = _decode(bytes(data), 0)
    return value


def _key_bytes(key) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    raise TypeError(f"dictionary key must be str or bytes, not {type(key).__name__}")


def _encode(value, out: List[bytes]) -> None:
    if isinstance(value, int):
        out.append(b"i%de" % value)
    elif isinstance(value, str):
        raw = value.encode("utf-8")
        out.append(b"%d:" % len(raw))
        out.append(raw)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        out.append(b"%d:" % len(raw))
        out.append(raw)
    elif isinstance(value, (list, tuple)):
        out.append(b"l")
        for item in value:
            _encode(item, out)
        out.append(b"e")
    elif isinstance(value, dict):
        out.append(b"d")
        for key, item in sorted((_key_bytes(k), v) for k, v in value.items()):
            out.append(b"%d:" % len(key))
            out.append(key)
            _encode(item, out)
        out.append(b"e")
    else:
        raise TypeError(f"cannot bencode {type(value).__name__}")


def encode(value) -> bytes:
    """Encode ``value`` as bencoded bytes."""
    out: List[bytes] = []
    _encode(value, out)
    return b"".join(out)


def encoded_size(value) -> int:
    """Return the number of bytes :func:`encode` produces for ``value``."""
    if isinstance(value, int):
        return len(str(value)) + 2
    if isinstance(value, str):
        size = len(value.encode("utf-8"))
        return len(str(size)) + size + 1
    if isinstance(value, (bytes, bytearray, memoryview)):
        size = len(bytes(value))
        return len(str(size)) + size + 1
    if isinstance(value, (list, tuple)):
        return 2 + sum(encoded_size(item) for item in value)
    if isinstance(value, dict):
        total = 2
        for key, item in value.items():
            raw = _key_bytes(key)
            total += len(str(len(raw))) + len(raw) + 1 + encoded_size(item)
        return total
    raise TypeError(f"cannot bencode {type(value).__name__}")