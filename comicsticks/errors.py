"""Errors raised by the comic cache."""

from __future__ import annotations


class CacheError(Exception):
    """Base class of comic cache errors.

    Lookups that fail still have a placeholder comic to show; it is stored
    in the ``comic`` attribute of the raised error.
    """

    default_message = "comic cache error"
    comic = None

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class CacheMissError(CacheError):
    """The value looked for is not in the cache."""

    default_message = "cache miss"


class LocalFailureError(CacheError):
    """The local cache could not be accessed."""

    default_message = "error accessing local xkcd cache"


class OfflineError(CacheError):
    """The comic server could not be reached, or network use is disabled."""

    default_message = "error accessing xkcd server"


class NoComicsFoundError(CacheError):
    """No comics are available at all."""

    default_message = "no comics found"