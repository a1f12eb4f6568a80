"""A numerically sorted set of the user's comic bookmarks."""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Iterator
from typing import TextIO

from comicsticks.log import get_logger

_log = get_logger("bookmarks")

_NUMBER = re.compile(r"[+-]?[0-9]+")

Observer = Callable[[str], None]


def _parse_line(line: str) -> int:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    if not _NUMBER.fullmatch(line):
        raise ValueError(f"invalid bookmark {line!r}")
    return int(line)


class BookmarkList:
    """The user's bookmarked comic numbers, iterated in ascending order."""

    def __init__(self) -> None:
        self._numbers: set[int] = set()
        self._observer_lock = threading.Lock()
        self._observer_counter = 0
        self._observers: dict[int, Observer] = {}

    def add(self, n: int) -> None:
        self._numbers.add(n)
        self._notify_observers(f"added bookmark {n}")

    def remove(self, n: int) -> None:
        self._numbers.discard(n)
        self._notify_observers(f"removed bookmark {n}")

    def __contains__(self, n: object) -> bool:
        return n in self._numbers

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._numbers))

    def __len__(self) -> int:
        return len(self._numbers)

    def is_empty(self) -> bool:
        return not self._numbers

    def read(self, stream: TextIO) -> None:
        """Add the newline separated comic numbers read from ``stream``."""
        for line in stream:
            self.add(_parse_line(line))

    def read_file(self, filename: str | bytes | "os.PathLike[str]") -> None:
        with open(filename, encoding="utf-8") as stream:
            self.read(stream)

    def write(self, stream: TextIO) -> None:
        """Write the bookmarks to ``stream``, one number per line."""
        for n in self:
            stream.write(f"{n}\n")

    def write_file(self, filename: str | bytes | "os.PathLike[str]") -> None:
        with open(filename, "w", encoding="utf-8") as stream:
            self.write(stream)

    def add_observer(self, observer: Observer) -> int:
        """Call ``observer`` with a message on every change; return its id."""
        with self._observer_lock:
            observer_id = self._observer_counter
            self._observer_counter += 1
            self._observers[observer_id] = observer
        return observer_id

    def remove_observer(self, observer_id: int) -> None:
        """Stop notifying the observer; raises KeyError for an unknown id."""
        with self._observer_lock:
            del self._observers[observer_id]

    def _notify_observers(self, message: str) -> None:
        with self._observer_lock:
            observers = list(self._observers.items())
        for observer_id, observer in observers:
            _log.debug("notifying observer #%s: %s", observer_id, message)
            observer(message)


import os  # noqa: E402  (used only in annotations above)