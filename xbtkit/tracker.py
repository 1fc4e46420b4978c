"""Tracker announce URLs and per-tracker login accounts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional

from xbtkit.stream import StreamReader, StreamWriter

_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


class Protocol(IntEnum):
    HTTP = 0
    UDP = 1
    UNKNOWN = 2


_SCHEMES = (
    ("http://", Protocol.HTTP, 80),
    ("udp://", Protocol.UDP, 2710),
)


@dataclass
class TrackerUrl:
    """A parsed tracker URL: protocol, host, port and path."""

    protocol: Protocol = Protocol.UNKNOWN
    host: str = ""
    port: int = 0
    path: str = ""

    @classmethod
    def parse(cls, url: str) -> "TrackerUrl":
        """Split an ``http://`` or ``udp://`` URL; other schemes give an unknown URL."""
        lowered = url.lower()
        for prefix, protocol, port in _SCHEMES:
            if lowered.startswith(prefix):
                break
        else:
            return cls()
        start = len(prefix)
        match = re.compile(r"[/:]").search(url, start)
        path = ""
        if match is None:
            host = url[start:]
        else:
            sep = match.start()
            host = url[start:sep]
            if url[sep] == "/":
                path = url[sep:]
            else:
                slash = url.find("/", sep + 1)
                if slash < 0:
                    port = _atoi(url[sep + 1:])
                else:
                    port = _atoi(url[sep + 1:slash])
                    path = url[slash:]
        return cls(protocol, host, port, path)

    def valid(self) -> bool:
        if self.protocol == Protocol.HTTP:
            if not self.path.startswith("/"):
                return False
        elif self.protocol != Protocol.UDP:
            return False
        return bool(self.host) and 0 <= self.port < 0x10000


@dataclass
class TrackerAccount:
    """Credentials to use for one tracker."""

    tracker: str
    user: str
    password: str

    def dump(self) -> bytes:
        writer = StreamWriter()
        writer.write_data(self.tracker)
        writer.write_data(self.user)
        writer.write_data(self.password)
        return writer.getvalue()


class TrackerAccounts(list):
    """A list of tracker accounts with a compact binary form."""

    def __init__(self, accounts: Iterable[TrackerAccount] = ()):
        super().__init__(accounts)

    def dump(self) -> bytes:
        writer = StreamWriter()
        writer.write_int(4, len(self))
        for account in self:
            writer.write(account.dump())
        return writer.getvalue()

    def find(self, tracker: str) -> Optional[TrackerAccount]:
        """Return the first account for ``tracker``, or None."""
        return next((a for a in self if a.tracker == tracker), None)

    @classmethod
    def load(cls, data) -> "TrackerAccounts":
        """Read accounts written by :meth:`dump`; data under 4 bytes gives none."""
        data = bytes(data)
        if len(data) < 4:
            return cls()
        reader = StreamReader(data)
        try:
            count = reader.read_int(4)
            return cls(
                TrackerAccount(reader.read_string(), reader.read_string(), reader.read_string())
                for _ in range(count)
            )
        except EOFError as exc:
            raise ValueError("truncated tracker account data") from exc