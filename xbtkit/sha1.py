"""SHA-1 message digest (FIPS 180-1) computed incrementally."""

from __future__ import annotations

import struct

DIGEST_SIZE = 20
_BLOCK_SIZE = 64
_MASK = 0xFFFFFFFF
_INITIAL = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)
_MAX_BITS = 1 << 64


class Sha1StateError(RuntimeError):
    """Raised when data is added after the digest has been taken."""


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (32 - bits))) & _MASK


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8", "surrogateescape")
    return bytes(data)


class Sha1:
    """Incremental SHA-1; once :meth:`digest` is called no more data may be added."""

    def __init__(self, data=b""):
        self._hash = list(_INITIAL)
        self._buffer = bytearray()
        self._length = 0
        self._digest = None
        self.update(data)

    def update(self, data) -> None:
        data = _as_bytes(data)
        if not data:
            return
        if self._digest is not None:
            raise Sha1StateError("cannot add data after the digest was computed")
        if (self._length + len(data)) * 8 >= _MAX_BITS:
            raise ValueError("message too long for SHA-1")
        self._length += len(data)
        self._buffer += data
        whole = len(self._buffer) - len(self._buffer) % _BLOCK_SIZE
        for start in range(0, whole, _BLOCK_SIZE):
            self._process(self._buffer[start:start + _BLOCK_SIZE])
        del self._buffer[:whole]

    def _process(self, block: bytes) -> None:
        w = list(struct.unpack(">16I", block))
        for t in range(16, 80):
            w.append(_rotl(w[t - 3] ^ w[t - 8] ^ w[t - 14] ^ w[t - 16], 1))
        a, b, c, d, e = self._hash
        for t, word in enumerate(w):
            if t < 20:
                f, k = (b & c) | (~b & d), 0x5A827999
            elif t < 40:
                f, k = b ^ c ^ d, 0x6ED9EBA1
            elif t < 60:
                f, k = (b & c) | (b & d) | (c & d), 0x8F1BBCDC
            else:
                f, k = b ^ c ^ d, 0xCA62C1D6
            temp = (_rotl(a, 5) + (f & _MASK) + e + word + k) & _MASK
            a, b, c, d, e = temp, a, _rotl(b, 30), c, d
        self._hash = [(x + y) & _MASK for x, y in zip(self._hash, (a, b, c, d, e))]

    def digest(self) -> bytes:
        """Return the 20-byte digest, finishing the computation on first use."""
        if self._digest is None:
            tail = bytes(self._buffer) + b"\x80"
            tail += b"\x00" * ((56 - len(tail)) % _BLOCK_SIZE)
            tail += struct.pack(">Q", self._length * 8)
            for start in range(0, len(tail), _BLOCK_SIZE):
                self._process(tail[start:start + _BLOCK_SIZE])
            self._buffer.clear()
            self._length = 0
            self._digest = struct.pack(">5I", *self._hash)
        return self._digest

    def hexdigest(self) -> str:
        return self.digest().hex()


def sha1(data) -> bytes:
    """Return the SHA-1 digest of ``data``."""
    return Sha1(data).digest()