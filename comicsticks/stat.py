"""Cache statistics and the views that display them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Stat:
    """How many of the comics up to the newest one are cached."""

    latest_comic_number: int = 0
    cached_count: int = 0

    def complete(self) -> bool:
        """Whether the cache is full."""
        return self.latest_comic_number == self.cached_count

    def fraction(self) -> float:
        """The fullness of the cache; raises ZeroDivisionError with no comics."""
        if self.latest_comic_number == 0:
            raise ZeroDivisionError("division by zero")
        return self.cached_count / self.latest_comic_number

    def __str__(self) -> str:
        return f"{self.cached_count} / {self.latest_comic_number}"


@runtime_checkable
class ViewRefresher(Protocol):
    """A view of cache statistics that can be refreshed."""

    def refresh_metadata(self) -> None:
        """Query the metadata statistic, then show it."""

    def refresh_metadata_with(self, stat: Stat) -> None:
        """Show the given metadata statistic."""

    def refresh_images(self) -> None:
        """Query the image statistic, then show it."""

    def refresh_images_with(self, stat: Stat) -> None:
        """Show the given image statistic."""


@dataclass
class NullRefresher:
    """A view that displays nothing and only counts the refreshes it drops."""

    ignored: int = 0

    def refresh_metadata(self) -> None:
        """Drop a metadata refresh."""
        self.ignored += 1

    def refresh_metadata_with(self, stat: Stat) -> None:
        """Drop a metadata refresh with the given statistic."""
        self.ignored += 1

    def refresh_images(self) -> None:
        """Drop an image refresh."""
        self.ignored += 1

    def refresh_images_with(self, stat: Stat) -> None:
        """Drop an image refresh with the given statistic."""
        self.ignored += 1