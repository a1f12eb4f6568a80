"""Pure helpers behind the comic view: zoom, image inversion and labels."""

from __future__ import annotations

import re
from datetime import date

from comicsticks.state import IMAGE_SCALE_MAX, IMAGE_SCALE_MIN

ZOOM_INCREMENT = 0.25

_INVERT = bytes(range(255, -1, -1))
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_DATE = re.compile(r"([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})")


def safe_scale(scale: float) -> float:
    """Clamp ``scale`` to the supported zoom range."""
    if scale < IMAGE_SCALE_MIN:
        return IMAGE_SCALE_MIN
    if scale > IMAGE_SCALE_MAX:
        return IMAGE_SCALE_MAX
    return scale


def zoom_in(scale: float) -> float:
    """The scale one zoom step larger than ``scale``."""
    return safe_scale(scale + ZOOM_INCREMENT)


def zoom_out(scale: float) -> float:
    """The scale one zoom step smaller than ``scale``."""
    return safe_scale(scale - ZOOM_INCREMENT)


def scaled_size(width: int, height: int, scale: float) -> tuple[int, int]:
    """The size of an image of ``width`` by ``height`` drawn at ``scale``."""
    return int(width * scale), int(height * scale)


def invert_pixels(
    pixels: bytes | bytearray, width: int, height: int, rowstride: int, n_channels: int
) -> bytearray:
    """Return a copy of RGB(A) pixel data with the colour channels inverted.

    The alpha channel and any row padding are left as they are.
    """
    out = bytearray(pixels)
    if width <= 0 or height <= 0:
        return out
    if n_channels not in (3, 4):
        raise ValueError("unsupported number of channels")
    if len(out) < (height - 1) * rowstride + (width - 1) * n_channels + 3:
        raise ValueError("pixel buffer too small")
    span = width * n_channels
    for start in range(0, height * rowstride, rowstride):
        row = out[start : start + span]
        for channel in range(3):
            row[channel::n_channels] = row[channel::n_channels].translate(_INVERT)
        out[start : start + span] = row
    return out


def format_date(year: str, month: str, day: str) -> str:
    """Format a comic date like ``Jan  2, 2006``; ``""`` if it is invalid."""
    match = _DATE.fullmatch("-".join([year, month, day]))
    if match is None:
        return ""
    try:
        when = date(*(int(part) for part in match.groups()))
    except ValueError:
        return ""
    return f"{_MONTHS[when.month - 1]} {when.day:>2}, {when.year:04d}"


def zoom_label(scale: float) -> str:
    """The percentage shown for a zoom ``scale``."""
    return f"{scale * 100:.0f}%"