"""Assorted string, number and peer-id helpers used around a BitTorrent tracker."""

from __future__ import annotations

import ipaddress
import os
import random
import re
import sys
import time
from itertools import groupby
from typing import Callable, Optional

try:
    import syslog as _syslog
except ImportError:
    _syslog = None

_ALNUM = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
_SUFFIXES = ("", " k", " m", " g", " t", " p", " e", " z", " y")
_URI_SAFE = frozenset(b"-,.@_")
_JS_ESCAPED = frozenset("\"'\\")
_LEADING_ALNUM = re.compile(rb"[A-Za-z0-9]*")
_SINGLE_LETTER_CLIENTS = {
    ord("A"): "ABC ",
    ord("M"): "Mainline ",
    ord("S"): "Shadow ",
    ord("T"): "BitTornado ",
}
_DASH_CLIENTS = {
    b"AZ": "Azureus ",
    b"BC": "BitComet ",
    b"UT": "uTorrent ",
    b"TS": "TorrentStorm ",
}


def _as_bytes(value) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8", "surrogateescape")
    return bytes(value)


def _nibble(c: int) -> int:
    if 0x30 <= c <= 0x39:
        return c - 0x30
    if 0x41 <= c <= 0x46:
        return c - 0x41 + 10
    if 0x61 <= c <= 0x66:
        return c - 0x61 + 10
    return -1


def _hex_byte(high: int, low: int) -> int:
    return ((_nibble(high) << 4) | _nibble(low)) & 0xFF


def _is_ascii_alnum(c: int) -> bool:
    return 0x30 <= c <= 0x39 or 0x41 <= c <= 0x5A or 0x61 <= c <= 0x7A


def escape_string(value) -> str:
    """Show printable ASCII as is and everything else as escapes."""
    parts = []
    for c in _as_bytes(value):
        if 0x21 <= c <= 0x7E:
            parts.append(chr(c))
        elif c == 0:
            parts.append("\\0")
        else:
            parts.append("\\x" + hex_encode_int(2, c))
    return "".join(parts)


def generate_random_string(length: int) -> str:
    """Return ``length`` random alphanumeric characters."""
    return "".join(random.choice(_ALNUM) for _ in range(max(length, 0)))


def get_env(name: str) -> str:
    """Return an environment variable, or an empty string when unset."""
    return os.environ.get(name, "")


def hex_decode(text) -> bytes:
    """Decode pairs of hex digits; a trailing odd digit is ignored."""
    data = _as_bytes(text)
    return bytes(_hex_byte(h, l) for h, l in zip(data[0::2], data[1::2]))


def hex_encode(data) -> str:
    """Encode bytes as lower-case hex."""
    return _as_bytes(data).hex()


def hex_encode_int(width: int, value: int) -> str:
    """Return the low ``width`` hex digits of ``value``."""
    if width <= 0:
        return ""
    return format(value & ((1 << (4 * width)) - 1), f"0{width}x")


def js_encode(text: str) -> str:
    """Backslash-escape quotes and backslashes for a script string literal."""
    return "".join("\\" + c if c in _JS_ESCAPED else c for c in text)


def uri_decode(text) -> bytes:
    """Decode a form-encoded string; a truncated escape yields empty bytes."""
    data = _as_bytes(text)
    out = bytearray()
    i = 0
    while i < len(data):
        c = data[i]
        if c == 0x25:  # '%'
            if i + 2 >= len(data):
                return b""
            out.append(_hex_byte(data[i + 1], data[i + 2]))
            i += 3
            continue
        out.append(0x20 if c == 0x2B else c)
        i += 1
    return bytes(out)


def uri_encode(text) -> str:
    """Form-encode a string or bytes."""
    parts = []
    for c in _as_bytes(text):
        if _is_ascii_alnum(c) or c in _URI_SAFE:
            parts.append(chr(c))
        elif c == 0x20:
            parts.append("+")
        else:
            parts.append("%" + hex_encode_int(2, c))
    return "".join(parts)


def is_private_ipa(address) -> bool:
    """Tell whether an IPv4 address (text or host-order integer) is private or loopback."""
    a = int(ipaddress.IPv4Address(address))
    return (
        a & 0xFF000000 == 0x0A000000
        or a & 0xFF000000 == 0x7F000000
        or a & 0xFFF00000 == 0xAC100000
        or a & 0xFFFF0000 == 0xC0A80000
    )


def _scaled(
    value: int,
    postfix: Optional[str],
    divide: Callable[[int], int],
    fraction: Callable[[int], int],
) -> str:
    sign = ""
    if value < 0:
        value = -value
        sign = "-"
    level = 0
    while value > 999999:
        value = divide(value)
        level += 1
    if value > 999:
        level += 1
        b = fraction(value)
        value = divide(value)
        text = str(value)
        if value < 10 and b % 10:
            text += f".{b:02d}"
        elif value < 100 and b > 9:
            text += f".{b // 10}"
    else:
        text = str(value)
    text = sign + text + _SUFFIXES[level]
    if postfix:
        text += ("" if level else " ") + postfix
    return text


def b2a(value: int, postfix: Optional[str] = None) -> str:
    """Format a byte count with binary (1024) multiples."""
    return _scaled(value, postfix, lambda v: v >> 10, lambda v: (v & 0x3FF) * 100 >> 10)


def n2a(value: int, postfix: Optional[str] = None) -> str:
    """Format a count with decimal (1000) multiples."""
    return _scaled(value, postfix, lambda v: v // 1000, lambda v: v % 1000 // 10)


def _client(name: str, peer_id: bytes, start: int) -> str:
    version = _LEADING_ALNUM.match(peer_id, start).group()
    return name + version.decode("ascii")


def peer_id2a(peer_id) -> str:
    """Name the client that produced a 20-byte peer id."""
    v = peer_id.encode("latin-1") if isinstance(peer_id, str) else bytes(peer_id)
    if len(v) != 20:
        return ""
    if v[7] == ord("-"):
        first = v[0]
        if first == ord("-"):
            name = _DASH_CLIENTS.get(v[1:3])
            if name:
                return _client(name, v, 3)
        elif first in _SINGLE_LETTER_CLIENTS:
            return _client(_SINGLE_LETTER_CLIENTS[first], v, 1)
        elif first == ord("X") and v[1:3] == b"BT":
            fake = not all(_is_ascii_alnum(c) for c in v[8:])
            return _client("XBT Client ", v, 3) + (" (fake)" if fake else "")
    if v[:3] == b"-G3":
        return "G3"
    if v[:3] == b"S\x05\x07" and v[3] < 10:
        return f"Shadow 57{v[3]}"
    if v[:4] == b"exbc" and v[4] < 10 and v[5] < 100:
        return f"BitComet {v[4]}.{v[5] // 10}{v[5] % 10}"
    return "Unknown"


def duration2a(seconds: float) -> str:
    """Describe a duration in the largest unit it exceeds."""
    for limit, unit in (
        (31557600, "years"),
        (2629800, "months"),
        (604800, "weeks"),
        (86400, "days"),
        (3600, "hours"),
        (60, "minutes"),
    ):
        if seconds > limit:
            return f"{seconds / limit:.1f} {unit}"
    return f"{seconds:.1f} seconds"


def time2a(timestamp: float) -> str:
    """Format a Unix time as local ``YYYY-MM-DD HH:MM:SS``; empty if out of range."""
    try:
        date = time.localtime(timestamp)
    except (OverflowError, OSError, ValueError):
        return ""
    return time.strftime("%Y-%m-%d %H:%M:%S", date)


def merkle_tree_size(count: int) -> int:
    """Number of nodes in a merkle tree over ``count`` leaves."""
    total = 0
    while count > 1:
        total += count
        count = (count + 1) >> 1
    if count == 1:
        total += 1
    return total


def backward_slashes(path: str) -> str:
    return path.replace("/", "\\")


def forward_slashes(path: str) -> str:
    return path.replace("\\", "/")


def native_slashes(path: str) -> str:
    """Use the separator of the running platform."""
    return backward_slashes(path) if os.sep == "\\" else forward_slashes(path)


def hms2i(h: int, m: int, s: int) -> int:
    return 60 * (h + 60 * m) + s


def xbt_version2a(version: int) -> str:
    """Format a three-digit version number such as 123 as ``1.2.3``."""
    return f"{version // 100}.{version // 10 % 10}.{version % 10}"


def mk_sname(name: str) -> str:
    """Reduce a name to a simplified form for look-alike comparisons."""
    name = name.replace("-", "").replace("@", "")
    name = name.translate(str.maketrans("0134l", "oieai"))
    return "".join(char for char, _ in groupby(name))


def xbt_syslog(message: str) -> None:
    """Send an error message to the system log, or to stderr where there is none."""
    if _syslog is None:
        print(message, file=sys.stderr)
    else:
        _syslog.syslog(_syslog.LOG_ERR, message)