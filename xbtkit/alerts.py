"""Timestamped alert messages kept in a bounded history."""

from __future__ import annotations

import time as _time
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Deque, Iterator

from xbtkit.stream import StreamWriter


class AlertLevel(IntEnum):
    """Severity of an alert, most severe first."""

    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERROR = 3
    WARN = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


def _now() -> int:
    return int(_time.time())


@dataclass
class Alert:
    """A message with a level, an optional source and the time it was raised."""

    level: AlertLevel
    message: str
    source: str = ""
    time: int = field(default_factory=_now)

    @property
    def dump_size(self) -> int:
        """Number of bytes :meth:`dump` produces."""
        return len(self.message.encode("utf-8", "surrogateescape")) + len(
            self.source.encode("utf-8", "surrogateescape")
        ) + 16

    def dump(self) -> bytes:
        """Serialise as time, level, message and source, big-endian and length-prefixed."""
        writer = StreamWriter()
        writer.write_int(4, self.time)
        writer.write_int(4, int(self.level))
        writer.write_data(self.message)
        writer.write_data(self.source)
        return writer.getvalue()


class Alerts:
    """History of alerts that keeps only the most recent ones."""

    MAX_SIZE = 250

    def __init__(self):
        self._items: Deque[Alert] = deque(maxlen=self.MAX_SIZE)

    def append(self, alert: Alert) -> None:
        self._items.append(alert)

    def __iter__(self) -> Iterator[Alert]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)