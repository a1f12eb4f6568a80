"""Where the application finds and stores its files."""

from __future__ import annotations

import os
from dataclasses import dataclass

from comicsticks.log import get_logger

_log = get_logger("paths")

DEFAULT_DIR_MODE = 0o755


def _xdg_home(variable: str, *default_parts: str) -> str:
    value = os.environ.get(variable, "")
    if value and os.path.isabs(value):
        return value
    return os.path.join(os.path.expanduser("~"), *default_parts)


def _cache_home() -> str:
    return _xdg_home("XDG_CACHE_HOME", ".cache")


def _config_home() -> str:
    return _xdg_home("XDG_CONFIG_HOME", ".config")


def _data_home() -> str:
    return _xdg_home("XDG_DATA_HOME", ".local", "share")


def _data_dirs() -> list[str]:
    value = os.environ.get("XDG_DATA_DIRS", "")
    dirs = [d for d in value.split(os.pathsep) if d and os.path.isabs(d)]
    return dirs or ["/usr/local/share", "/usr/share"]


def _may_exist(path: str) -> bool:
    """True unless ``path`` is known not to exist."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


@dataclass(frozen=True)
class Builder:
    """Computes the paths where the application keeps the files it creates."""

    app_id: str = ""

    def _under(self, base: str) -> str:
        return os.path.join(base, self.app_id) if self.app_id else base

    def cache_dir(self) -> str:
        return self._under(_cache_home())

    def ensure_cache_dir(self) -> None:
        path = self.cache_dir()
        _log.debug("Ensuring cache directory %r exists", path)
        os.makedirs(path, DEFAULT_DIR_MODE, exist_ok=True)

    def config_dir(self) -> str:
        return self._under(_config_home())

    def ensure_config_dir(self) -> None:
        path = self.config_dir()
        _log.debug("Ensuring configuration directory %r exists", path)
        os.makedirs(path, DEFAULT_DIR_MODE, exist_ok=True)

    def data_dir(self) -> str:
        return self._under(_data_home())

    def ensure_data_dir(self) -> None:
        path = self.data_dir()
        _log.debug("Ensuring data directory %r exists", path)
        os.makedirs(path, DEFAULT_DIR_MODE, exist_ok=True)

    def locale_dir(self) -> str:
        """The first existing system locale directory, or ``"."``."""
        for directory in _data_dirs():
            path = os.path.join(directory, "locale")
            try:
                os.stat(path)
            except OSError:
                continue
            return path
        return "."

    def bookmarks(self) -> str:
        return os.path.join(self.data_dir(), "bookmarks")

    def settings(self) -> str:
        return os.path.join(self.config_dir(), "settings")

    def search_index(self) -> str:
        return os.path.join(self.cache_dir(), "search")


_builder = Builder()


def init(app_id: str) -> None:
    """Set the application id used by the module-level functions."""
    global _builder
    _builder = Builder(app_id)


def cache_dir() -> str:
    return _builder.cache_dir()


def ensure_cache_dir() -> None:
    _builder.ensure_cache_dir()


def config_dir() -> str:
    return _builder.config_dir()


def ensure_config_dir() -> None:
    _builder.ensure_config_dir()


def data_dir() -> str:
    return _builder.data_dir()


def ensure_data_dir() -> None:
    _builder.ensure_data_dir()


def locale_dir() -> str:
    return _builder.locale_dir()


def bookmarks() -> str:
    return _builder.bookmarks()


def settings() -> str:
    return _builder.settings()


def search_index() -> str:
    return _builder.search_index()


def check_for_misplaced_bookmarks() -> list[str]:
    """Warn about stray bookmark files; return the paths warned about."""
    candidates = [
        Builder().bookmarks(),
        os.path.join(Builder().config_dir(), "bookmarks"),
        os.path.join(config_dir(), "bookmarks"),
    ]
    found = [p for p in candidates if _may_exist(p)]
    for path in found:
        _log.warning(
            "WARNING: Potentially misplaced bookmarks file %r. Should be %r.",
            path,
            bookmarks(),
        )
    return found


def check_for_misplaced_search_index() -> list[str]:
    """Warn about a stray search index; return the paths warned about."""
    misplaced = Builder().search_index()
    if not _may_exist(misplaced):
        return []
    _log.warning(
        "WARNING: Potentially misplaced search index %r. Should be %r.",
        misplaced,
        search_index(),
    )
    return [misplaced]


def check_for_misplaced_settings() -> list[str]:
    """Warn about a stray settings file; return the paths warned about."""
    misplaced = Builder().settings()
    if not _may_exist(misplaced):
        return []
    _log.warning(
        "WARNING: Potentially misplaced settings file %r. Should be %r.",
        misplaced,
        settings(),
    )
    return [misplaced]