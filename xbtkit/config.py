"""Typed ``name = value`` settings with defaults."""

from __future__ import annotations

import re
from typing import IO, Iterable, Mapping, Union

_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _kind(value):
    if isinstance(value, bool):
        return bool
    if isinstance(value, int):
        return int
    if isinstance(value, str):
        return str
    return None


class ConfigBase:
    """Settings of bool, int and str type, each with a default value."""

    def __init__(self, attributes: Mapping[str, Union[bool, int, str]]):
        self._defaults = dict(attributes)
        for name, default in self._defaults.items():
            if _kind(default) is None:
                raise TypeError(f"setting {name!r} must be bool, int or str")
        self._values = dict(self._defaults)

    def __getitem__(self, name: str):
        return self._values[name]

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def _is(self, name: str, kind) -> bool:
        return name in self._defaults and _kind(self._defaults[name]) is kind

    def set(self, name: str, value) -> None:
        """Set a setting; text is converted to int and int to bool as needed."""
        if isinstance(value, str):
            if self._is(name, str):
                self._values[name] = value
                return
            value = _atoi(value)
        if _kind(value) is int:
            if self._is(name, int):
                self._values[name] = value
                return
            value = bool(value)
        if _kind(value) is bool and self._is(name, bool):
            self._values[name] = value
            return
        raise KeyError(f"no setting {name!r} of a matching type")

    def load(self, lines: Union[str, Iterable[str]]) -> None:
        """Apply ``name = value`` lines; other lines and unknown names are ignored."""
        if isinstance(lines, str):
            lines = lines.splitlines()
        for line in lines:
            name, sep, value = line.partition("=")
            if not sep:
                continue
            try:
                self.set(name.strip(), value.strip())
            except KeyError:
                pass

    def load_file(self, path) -> None:
        with open(path, encoding="utf-8") as stream:
            self.load(stream)

    def save(self, stream: IO[str]) -> None:
        """Write every setting; those at their default are commented out."""
        for kind in (bool, int, str):
            for name in sorted(n for n in self._defaults if self._is(n, kind)):
                value = self._values[name]
                prefix = "# " if value == self._defaults[name] else ""
                text = str(int(value)) if kind is bool else str(value)
                stream.write(f"{prefix}{name} = {text}\n")