"""Comic metadata and its retrieval from the comic server."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import asdict, dataclass

API_BASE = "https://xkcd.com"
TIMEOUT_SECONDS = 30

_TEXT_FIELDS = (
    "title",
    "safe_title",
    "img",
    "alt",
    "year",
    "month",
    "day",
    "news",
    "link",
    "transcript",
)


class ComicNotFoundError(LookupError):
    """The requested comic does not exist on the server."""

    comic = None

    def __init__(self, message: str = "comic not found") -> None:
        super().__init__(message)


@dataclass
class Comic:
    """Metadata of one comic, as published by the comic server."""

    num: int = 0
    title: str = ""
    safe_title: str = ""
    img: str = ""
    alt: str = ""
    year: str = ""
    month: str = ""
    day: str = ""
    news: str = ""
    link: str = ""
    transcript: str = ""

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> Comic:
        """Parse comic metadata; raises ValueError if it is malformed."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        obj = json.loads(data)
        if not isinstance(obj, dict):
            raise ValueError("comic metadata must be a JSON object")
        num = obj.get("num", 0)
        if num is None:
            num = 0
        if isinstance(num, bool) or not isinstance(num, int):
            raise ValueError(f"comic number must be an integer, got {num!r}")
        values = {}
        for name in _TEXT_FIELDS:
            value = obj.get(name)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValueError(f"comic field {name!r} must be a string, got {value!r}")
            values[name] = value
        return cls(num=num, **values)

    def to_json(self) -> str:
        """Serialize the metadata as compact JSON."""
        return json.dumps(asdict(self), ensure_ascii=False, separators=(",", ":"))


def _fetch(url: str) -> Comic:
    try:
        with urllib.request.urlopen(url, timeout=TIMEOUT_SECONDS) as response:
            body = response.read()
    except urllib.error.HTTPError as exc:
        if exc.code == 404:
            raise ComicNotFoundError() from exc
        raise
    return Comic.from_json(body)


def fetch_comic(n: int) -> Comic:
    """Download the metadata of comic ``n``."""
    return _fetch(f"{API_BASE}/{n}/info.0.json")


def fetch_current_comic() -> Comic:
    """Download the metadata of the newest comic."""
    return _fetch(f"{API_BASE}/info.0.json")