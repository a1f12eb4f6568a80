"""Stored user state: application settings and window state."""

from __future__ import annotations

import io
import json
import math
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from comicsticks import paths
from comicsticks.comic import Comic
from comicsticks.errors import CacheError
from comicsticks.log import get_logger

_log = get_logger("state")

IMAGE_SCALE_MIN = 0.25
IMAGE_SCALE_MAX = 5.0

WINDOW_STATE_FILE = "state"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON value {name}")


def _read_json(stream: Any) -> tuple[Any, int]:
    data = stream.read()
    if isinstance(data, (bytes, bytearray)):
        count = len(data)
        text = bytes(data).decode("utf-8")
    else:
        count = len(data.encode("utf-8"))
        text = data
    text = text.lstrip(" \t\r\n")
    if not text:
        raise ValueError("unexpected end of JSON input")
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    value, _ = decoder.raw_decode(text)
    return value, count


def _assign(target: Any, obj: Any, spec: tuple[tuple[str, str, type], ...]) -> None:
    if obj is None:
        return
    if not isinstance(obj, dict):
        raise ValueError(f"cannot decode {type(obj).__name__} into {type(target).__name__}")
    by_name = {key.lower(): (attr, kind) for key, attr, kind in spec}
    for key, value in obj.items():
        entry = by_name.get(key.lower())
        if entry is None or value is None:
            continue
        attr, kind = entry
        if kind is bool:
            if not isinstance(value, bool):
                raise ValueError(f"cannot decode {value!r} into bool field {key}")
        elif kind is int:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"cannot decode {value!r} into int field {key}")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"cannot decode {value!r} into float field {key}")
        else:
            value = float(value)
        setattr(target, attr, value)


def _format_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"unsupported float value {value}")
    magnitude = abs(value)
    if magnitude == 0 or 1e-6 <= magnitude < 1e21:
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    mantissa, exponent = repr(value).split("e")
    sign = exponent[0] if exponent[0] in "+-" else "+"
    digits = exponent.lstrip("+-").lstrip("0") or "0"
    return f"{mantissa}e{sign}{digits}"


def _encode(target: Any, spec: tuple[tuple[str, str, type], ...]) -> str:
    parts = []
    for key, attr, kind in spec:
        value = getattr(target, attr)
        if kind is bool:
            encoded = "true" if value else "false"
        elif kind is int:
            encoded = str(int(value))
        else:
            encoded = _format_float(float(value))
        parts.append(f"{json.dumps(key)}:{encoded}")
    return "{" + ",".join(parts) + "}\n"


def _write_text(stream: Any, text: str) -> int:
    data = text.encode("utf-8")
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        stream.write(data)
    else:
        stream.write(text)
    return len(data)


_APP_FIELDS: tuple[tuple[str, str, type], ...] = (("DarkMode", "dark_mode", bool),)


@dataclass
class AppSettings:
    """The application's settings."""

    dark_mode: bool = False

    def _load_defaults(self) -> None:
        self.dark_mode = False

    def read_from(self, stream: Any) -> int:
        """Load JSON settings from ``stream``; return the bytes read.

        On malformed input the defaults are loaded and ValueError is raised.
        """
        try:
            obj, count = _read_json(stream)
            _assign(self, obj, _APP_FIELDS)
        except ValueError:
            self._load_defaults()
            raise
        return count

    def read_file(self, filename: str | os.PathLike[str]) -> None:
        try:
            stream = open(filename, "rb")
        except OSError:
            self._load_defaults()
            raise
        with stream:
            self.read_from(stream)

    def write_to(self, stream: Any) -> int:
        """Write the settings to ``stream`` as JSON; return the bytes written."""
        return _write_text(stream, _encode(self, _APP_FIELDS))

    def write_file(self, filename: str | os.PathLike[str]) -> None:
        with open(filename, "wb") as stream:
            self.write_to(stream)


_WINDOW_FIELDS: tuple[tuple[str, str, type], ...] = (
    ("ComicNumber", "comic_number", int),
    ("Maximized", "maximized", bool),
    ("Height", "height", int),
    ("Width", "width", int),
    ("PositionX", "position_x", int),
    ("PositionY", "position_y", int),
    ("ImageScale", "image_scale", float),
    ("PropertiesVisible", "properties_visible", bool),
    ("PropertiesHeight", "properties_height", int),
    ("PropertiesWidth", "properties_width", int),
    ("PropertiesPositionX", "properties_position_x", int),
    ("PropertiesPositionY", "properties_position_y", int),
)


@runtime_checkable
class StateHaver(Protocol):
    """A window whose geometry can be stored."""

    def is_visible(self) -> bool: ...

    def is_maximized(self) -> bool: ...

    def get_size(self) -> tuple[int, int]:
        """Return (width, height)."""
        ...

    def get_position(self) -> tuple[int, int]:
        """Return (x, y)."""
        ...


def _window_state_path() -> str:
    return os.path.join(paths.cache_dir(), WINDOW_STATE_FILE)


def _check_for_misplaced_window_state(correct: str) -> None:
    misplaced = os.path.join(paths.Builder().cache_dir(), WINDOW_STATE_FILE)
    if misplaced == correct:
        return
    try:
        os.stat(misplaced)
    except FileNotFoundError:
        return
    except OSError:
        pass
    _log.warning(
        "WARNING: Potentially misplaced window state file %r. Should be %r.", misplaced, correct
    )


@dataclass
class WindowState:
    """The state of a comic window, stored so it can be restored later.

    ``newest_comic`` supplies the comic shown by default; ``path`` overrides
    the file used by ``load_state`` and ``save_state``.
    """

    comic_number: int = 0
    maximized: bool = False
    height: int = 0
    width: int = 0
    position_x: int = 0
    position_y: int = 0
    image_scale: float = 0.0
    properties_visible: bool = False
    properties_height: int = 0
    properties_width: int = 0
    properties_position_x: int = 0
    properties_position_y: int = 0
    newest_comic: Callable[[], Comic] | None = field(default=None, repr=False, compare=False)
    path: str | None = field(default=None, repr=False, compare=False)

    def _default_comic_number(self) -> int:
        if self.newest_comic is None:
            return 1
        try:
            return self.newest_comic().num
        except CacheError as exc:
            return exc.comic.num if exc.comic is not None else 1

    def _load_defaults(self) -> None:
        self.comic_number = self._default_comic_number()
        self.maximized = False
        self.height = 500
        self.width = 700
        self.position_x = 0
        self.position_y = 0
        self.image_scale = 1.0
        self.properties_visible = False
        self.properties_height = 350
        self.properties_width = 300
        self.properties_position_x = 0
        self.properties_position_y = 0

    def has_position(self) -> bool:
        return self.position_x != 0 and self.position_y != 0

    def has_properties_position(self) -> bool:
        return self.properties_position_x != 0 and self.properties_position_y != 0

    def read_from(self, stream: Any) -> int:
        """Load JSON state from ``stream``; return the bytes read.

        On malformed input the defaults are loaded and ValueError is raised.
        An image scale out of range is reset to 1 either way.
        """
        error: ValueError | None = None
        count = 0
        try:
            obj, count = _read_json(stream)
            _assign(self, obj, _WINDOW_FIELDS)
        except ValueError as exc:
            self._load_defaults()
            error = exc
        if not IMAGE_SCALE_MIN <= self.image_scale <= IMAGE_SCALE_MAX:
            self.image_scale = 1.0
        if error is not None:
            raise error
        return count

    def read_file(self, filename: str | os.PathLike[str]) -> None:
        """Load state from a file, falling back to the defaults."""
        try:
            stream = open(filename, "rb")
        except OSError:
            self._load_defaults()
            return
        with stream:
            try:
                self.read_from(stream)
            except ValueError as exc:
                _log.debug("error reading window state: %s", exc)

    def write_to(self, stream: Any) -> int:
        """Write the state to ``stream`` as JSON; return the bytes written."""
        return _write_text(stream, _encode(self, _WINDOW_FIELDS))

    def write_file(self, filename: str | os.PathLike[str]) -> None:
        with open(filename, "wb") as stream:
            self.write_to(stream)

    def _state_path(self) -> str:
        return self.path if self.path is not None else _window_state_path()

    def load_state(self) -> None:
        """Restore the state saved by the last window."""
        path = self._state_path()
        _check_for_misplaced_window_state(path)
        self.read_file(path)

    def save_state(self, window: StateHaver, dialog: StateHaver | None) -> None:
        """Record the geometry of ``window`` and ``dialog`` and write it to disk."""
        self.maximized = window.is_maximized()
        self.width, self.height = window.get_size()
        self.position_x, self.position_y = window.get_position()

        self.properties_visible = dialog is not None and dialog.is_visible()
        if self.properties_visible:
            self.properties_width, self.properties_height = dialog.get_size()
            self.properties_position_x, self.properties_position_y = dialog.get_position()

        try:
            self.write_file(self._state_path())
        except (OSError, ValueError) as exc:
            _log.error("error saving window state: %s", exc)