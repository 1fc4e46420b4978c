"""Keyed binary container files: trees of numbered keys holding typed values.

A file starts with a little-endian header (magic ``XIF\\x1a``, a version and
sizes) followed by the key tree, either stored plainly or zlib-compressed.
"""

from __future__ import annotations

import zlib
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Tuple

from xbtkit.stream import read_float, read_int_le, write_float, write_int_le

FILE_ID = 0x1A464958
FILE_VERSION_OLD = 0
FILE_VERSION_NEW = 1
FILE_VERSION_FAST = 2
_VERSIONS = (FILE_VERSION_OLD, FILE_VERSION_NEW, FILE_VERSION_FAST)
_OLD_HEADER_SIZE = 12
_FAST_HEADER_SIZE = 20


class XifError(ValueError):
    """Raised for malformed container data or values of the wrong shape."""


class ValueType(IntEnum):
    BIN32 = 0
    BINARY = 1
    INT32 = 2
    STRING = 3
    EXTERNAL_BINARY = 4
    FLOAT = 5
    UNKNOWN = 6


_INTERNAL = frozenset({ValueType.BIN32, ValueType.INT32, ValueType.FLOAT})


def _signed32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def _int32(value: int) -> bytes:
    return write_int_le(4, value)


def _guess_type(payload: bytes) -> ValueType:
    if not payload:
        return ValueType.BINARY
    if payload[-1] == 0 and all(c == 9 or c >= 0x20 for c in payload[:-1]):
        return ValueType.STRING
    if len(payload) == 4:
        return ValueType.INT32
    return ValueType.BINARY


class _Cursor:
    """Bounds-checked reader over a byte buffer with little-endian integers."""

    def __init__(self, data: bytes, pos: int = 0):
        self.data = data
        self.pos = pos

    @property
    def at_end(self) -> bool:
        return self.pos == len(self.data)

    def read(self, size: int) -> bytes:
        if size < 0 or self.pos + size > len(self.data):
            raise XifError("truncated container data")
        chunk = self.data[self.pos:self.pos + size]
        self.pos += size
        return chunk

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_int(self) -> int:
        return _signed32(read_int_le(4, self.read(4)))

    def read_count(self) -> int:
        count = self.read_int()
        if count < 0:
            raise XifError(f"negative count {count}")
        return count


def _header_int(data: bytes, offset: int) -> int:
    return _signed32(read_int_le(4, data[offset:offset + 4]))


def _inflate(blob: bytes, size: int) -> bytes:
    inflater = zlib.decompressobj()
    try:
        out = inflater.decompress(blob, size + 1)
    except zlib.error as exc:
        raise XifError(f"corrupt compressed data: {exc}") from exc
    if not inflater.eof or len(out) != size:
        raise XifError("compressed data does not match its recorded size")
    return out


class XifValue:
    """A typed value: a 32-bit integer or float, a string or a binary blob."""

    def __init__(self, kind=ValueType.UNKNOWN, value=None):
        kind = ValueType(kind)
        if kind in (ValueType.BIN32, ValueType.INT32):
            payload = _int32(int(value or 0))
        elif kind == ValueType.FLOAT:
            payload = write_float(float(value or 0.0))
        elif kind == ValueType.STRING:
            text = value or ""
            raw = text.encode("utf-8", "surrogateescape") if isinstance(text, str) else bytes(text)
            payload = raw + b"\0"
        else:
            payload = b"" if value is None else bytes(value)
            if kind == ValueType.UNKNOWN and payload:
                kind = _guess_type(payload)
        self._type = kind
        self._payload = payload

    @classmethod
    def _raw(cls, kind: ValueType, payload: bytes) -> "XifValue":
        value = cls()
        value._type = kind
        value._payload = payload
        return value

    def __eq__(self, other) -> bool:
        if not isinstance(other, XifValue):
            return NotImplemented
        return self._type == other._type and self._payload == other._payload

    def __repr__(self) -> str:
        return f"XifValue({self.get_type().name}, {self._payload!r})"

    def get_type(self) -> ValueType:
        """The stored type, or one guessed from the data when none was stored."""
        if self._type != ValueType.UNKNOWN:
            return self._type
        return _guess_type(self._payload)

    @property
    def idata(self) -> bool:
        """Whether the value is held inline as four bytes."""
        return self.get_type() in _INTERNAL

    def get_size(self) -> int:
        return len(self._payload)

    def get_data(self) -> bytes:
        return self._payload

    def _four_bytes(self, default, what: str):
        if not self._payload:
            if default is None:
                raise XifError(f"empty value has no {what}")
            return None
        if len(self._payload) != 4:
            raise XifError(f"{what} needs 4 bytes, value has {len(self._payload)}")
        return self._payload

    def get_int(self, default=None) -> int:
        """The value as a signed 32-bit integer; ``default`` if the value is empty."""
        raw = self._four_bytes(default, "integer")
        return default if raw is None else _signed32(read_int_le(4, raw))

    def get_float(self, default=None) -> float:
        """The value as a 32-bit float; ``default`` if the value is empty."""
        raw = self._four_bytes(default, "float")
        return default if raw is None else read_float(raw)

    def get_string(self, default=None) -> str:
        """The text up to the first NUL; ``default`` if the value is empty."""
        if not self._payload:
            if default is None:
                raise XifError("empty value has no string")
            return default
        return self._payload.split(b"\0", 1)[0].decode("utf-8", "surrogateescape")

    def _save(self, out: List[bytes]) -> None:
        out.append(bytes([int(self._type)]))
        if self._type in _INTERNAL:
            out.append(self._payload)
        else:
            out.append(_int32(len(self._payload)))
            out.append(self._payload)

    @classmethod
    def _load_new(cls, cursor: _Cursor) -> "XifValue":
        code = cursor.read_byte()
        try:
            kind = ValueType(code)
        except ValueError as exc:
            raise XifError(f"unknown value type {code}") from exc
        if kind in _INTERNAL:
            return cls._raw(kind, cursor.read(4))
        if kind == ValueType.EXTERNAL_BINARY:
            return cls._raw(kind, bytes(cursor.read_count()))
        return cls._raw(kind, cursor.read(cursor.read_count()))

    @classmethod
    def _load_old(cls, cursor: _Cursor) -> "XifValue":
        payload = cursor.read(cursor.read_count())
        return cls._raw(_guess_type(payload), payload)


class XifKey:
    """A node holding numbered sub-keys and numbered values."""

    def __init__(self):
        self.keys: Dict[int, XifKey] = {}
        self.values: Dict[int, XifValue] = {}

    def __eq__(self, other) -> bool:
        if not isinstance(other, XifKey):
            return NotImplemented
        return self.keys == other.keys and self.values == other.values

    def __repr__(self) -> str:
        return f"XifKey(keys={self.keys!r}, values={self.values!r})"

    def set_key(self, id: int) -> "XifKey":
        """Put a fresh empty key at ``id`` and return it."""
        key = XifKey()
        self.keys[id] = key
        return key

    def open_key_write(self, id: Optional[int] = None) -> "XifKey":
        """Put a fresh key at ``id``, or after the highest id when none is given."""
        if id is None:
            id = max(self.keys) + 1 if self.keys else 0
        return self.set_key(id)

    def set_value_bin(self, id: int, value: int) -> None:
        self.values[id] = XifValue(ValueType.BIN32, value)

    def set_value_int(self, id: int, value: int) -> None:
        self.values[id] = XifValue(ValueType.INT32, value)

    def set_value_float(self, id: int, value: float) -> None:
        self.values[id] = XifValue(ValueType.FLOAT, value)

    def set_value_string(self, id: int, value: str) -> None:
        self.values[id] = XifValue(ValueType.STRING, value)

    def set_value_binary(self, id: int, value) -> None:
        self.values[id] = XifValue(ValueType.BINARY, bytes(value))

    def set_value_int64(self, id: int, value: int) -> None:
        self.set_value_binary(id, write_int_le(8, value))

    def get_key(self, id: int) -> "XifKey":
        """The key at ``id``, or an empty key when there is none."""
        return self.keys.get(id) or XifKey()

    def get_value(self, id: int) -> XifValue:
        """The value at ``id``, or an empty value when there is none."""
        return self.values.get(id) or XifValue()

    def get_value_int(self, id: int, default=None) -> int:
        return self.get_value(id).get_int(default)

    def get_value_float(self, id: int, default=None) -> float:
        return self.get_value(id).get_float(default)

    def get_value_string(self, id: int, default=None) -> str:
        return self.get_value(id).get_string(default)

    def get_value_int64(self, id: int) -> int:
        data = self.get_value(id).get_data()
        if len(data) < 8:
            raise XifError(f"value {id} does not hold a 64-bit integer")
        return read_int_le(8, data)

    def exists_key(self, id: int) -> bool:
        return id in self.keys

    def exists_value(self, id: int) -> bool:
        return id in self.values

    def delete_key(self, id: int) -> None:
        self.keys.pop(id, None)

    def delete_value(self, id: int) -> None:
        self.values.pop(id, None)

    def clear(self) -> None:
        self.keys.clear()
        self.values.clear()

    def _save(self, out: List[bytes]) -> None:
        out.append(_int32(len(self.keys)))
        previous = 0
        for id in sorted(self.keys):
            out.append(_int32(id - previous))
            previous = id
            self.keys[id]._save(out)
        out.append(_int32(len(self.values)))
        previous = 0
        for id in sorted(self.values):
            out.append(_int32(id - previous))
            previous = id
            self.values[id]._save(out)

    def _load_new(self, cursor: _Cursor) -> None:
        id = 0
        for _ in range(cursor.read_count()):
            id += cursor.read_int()
            self.open_key_write(id)._load_new(cursor)
        id = 0
        for _ in range(cursor.read_count()):
            id += cursor.read_int()
            self.values[id] = XifValue._load_new(cursor)

    def _load_old(self, cursor: _Cursor) -> None:
        for _ in range(cursor.read_count()):
            self.set_key(cursor.read_int())._load_old(cursor)
        for _ in range(cursor.read_count()):
            id = cursor.read_int()
            self.values[id] = XifValue._load_old(cursor)

    @staticmethod
    def _finish(cursor: _Cursor) -> None:
        if not cursor.at_end:
            raise XifError("unexpected data after the key tree")

    @classmethod
    def load_key(cls, data) -> "XifKey":
        """Read a container in any of the three file versions."""
        data = bytes(data)
        if len(data) < _OLD_HEADER_SIZE:
            raise XifError("data too short for a container header")
        if read_int_le(4, data[0:4]) != FILE_ID:
            raise XifError("not a container file")
        version = _header_int(data, 4)
        if version not in _VERSIONS:
            raise XifError(f"unsupported container version {version}")
        key = cls()
        if version == FILE_VERSION_OLD:
            cursor = _Cursor(data, _OLD_HEADER_SIZE - 4)
            key._load_old(cursor)
            cls._finish(cursor)
            return key
        if version == FILE_VERSION_FAST and len(data) < _FAST_HEADER_SIZE:
            raise XifError("data too short for a container header")
        size = _header_int(data, 8)
        if size < 0:
            raise XifError("negative uncompressed size")
        if size:
            if version == FILE_VERSION_NEW:
                blob = data[_OLD_HEADER_SIZE:]
            else:
                compressed = _header_int(data, 12)
                if compressed < 0 or _FAST_HEADER_SIZE + compressed != len(data):
                    raise XifError("compressed size does not match the data")
                blob = data[_FAST_HEADER_SIZE:]
            cursor = _Cursor(_inflate(blob, size))
        else:
            start = _FAST_HEADER_SIZE if version == FILE_VERSION_FAST else _OLD_HEADER_SIZE
            cursor = _Cursor(data, start)
        key._load_new(cursor)
        cls._finish(cursor)
        return key

    def vdata(self) -> bytes:
        """Serialise in the compressed (fast) file version."""
        out: List[bytes] = []
        self._save(out)
        body = b"".join(out)
        compressed = zlib.compress(body)
        header = b"".join(
            _int32(v) for v in (FILE_ID, FILE_VERSION_FAST, len(body), len(compressed), 0)
        )
        return header + compressed


class XifKeyReader:
    """Read-only key tree that keeps entries in file order."""

    def __init__(
        self,
        keys: Iterable[Tuple[int, "XifKeyReader"]] = (),
        values: Iterable[Tuple[int, XifValue]] = (),
    ):
        self.keys: List[Tuple[int, XifKeyReader]] = list(keys)
        self.values: List[Tuple[int, XifValue]] = list(values)

    @classmethod
    def from_bytes(cls, data) -> "XifKeyReader":
        """Read a container in the fast file version."""
        data = bytes(data)
        if (
            len(data) < _FAST_HEADER_SIZE + 8
            or read_int_le(4, data[0:4]) != FILE_ID
            or _header_int(data, 4) != FILE_VERSION_FAST
        ):
            raise XifError("not a container in the fast version")
        size = _header_int(data, 8)
        if size < 0:
            raise XifError("negative uncompressed size")
        if size:
            compressed = _header_int(data, 12)
            if compressed < 0:
                raise XifError("negative compressed size")
            blob = data[_FAST_HEADER_SIZE:_FAST_HEADER_SIZE + compressed]
            cursor = _Cursor(_inflate(blob, size))
        else:
            cursor = _Cursor(data, _FAST_HEADER_SIZE)
        return cls._load(cursor)

    @classmethod
    def _load(cls, cursor: _Cursor) -> "XifKeyReader":
        keys = []
        id = 0
        for _ in range(cursor.read_count()):
            id += cursor.read_int()
            keys.append((id, cls._load(cursor)))
        values = []
        id = 0
        for _ in range(cursor.read_count()):
            id += cursor.read_int()
            values.append((id, XifValue._load_new(cursor)))
        return cls(keys, values)

    def find_key(self, id: int) -> Optional["XifKeyReader"]:
        return next((key for key_id, key in self.keys if key_id == id), None)

    def find_value(self, id: int) -> Optional[XifValue]:
        return next((value for value_id, value in self.values if value_id == id), None)

    def has_key(self, id: int) -> bool:
        return self.find_key(id) is not None

    def has_value(self, id: int) -> bool:
        return self.find_value(id) is not None

    def get_key(self, id: int) -> "XifKeyReader":
        key = self.find_key(id)
        if key is None:
            raise KeyError(id)
        return key

    def get_value(self, id: int) -> XifValue:
        value = self.find_value(id)
        return XifValue() if value is None else value

    def get_value_int(self, id: int, default=None) -> int:
        return self.get_value(id).get_int(default)

    def get_value_float(self, id: int, default=None) -> float:
        return self.get_value(id).get_float(default)

    def get_value_string(self, id: int, default=None) -> str:
        return self.get_value(id).get_string(default)