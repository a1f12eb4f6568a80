"""Local cache of comic metadata and images in front of the comic server."""

from __future__ import annotations

import os
import re
import sqlite3
import threading
import time
import urllib.request
from collections.abc import Callable
from datetime import timedelta

from comicsticks import comic as _comic_api
from comicsticks import paths
from comicsticks.comic import Comic, ComicNotFoundError
from comicsticks.errors import LocalFailureError, NoComicsFoundError, OfflineError
from comicsticks.log import get_logger
from comicsticks.stat import NullRefresher, Stat, ViewRefresher

_log = get_logger("cache")

# Increment whenever a release breaks compatibility with the previous cache.
CACHE_VERSION = 2

METADATA_TABLE = "comic_metadata"
IMAGE_TABLE = "comic_image"

CACHE_VERSION_FILE = "cache_version"
DATABASE_FILE = "comics"
IMAGE_DIR = "comic_image"

CACHE_DATABASE_ERROR = "Error reading local comic database"
COMIC_NOT_FOUND = "Comic not found"
COULD_NOT_DOWNLOAD_COMIC = "Couldn't get comic"
NO_COMICS_FOUND = "Connect to the internet to download some comics!"

STAT_FRESHNESS = timedelta(minutes=1)

_IMAGE_FILE_NAME = re.compile(r"[0-9][0-9]*")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_MAX_VARINT_LEN = 10

RefresherGetter = Callable[[], "ViewRefresher | None"]


def int_to_bytes(i: int) -> bytes:
    """Encode a 64-bit signed integer as a zig-zag varint."""
    if not _INT64_MIN <= i <= _INT64_MAX:
        raise OverflowError(f"{i} does not fit in 64 bits")
    ux = i << 1 if i >= 0 else ((~i) << 1) | 1
    out = bytearray()
    while ux >= 0x80:
        out.append((ux & 0x7F) | 0x80)
        ux >>= 7
    out.append(ux)
    return bytes(out)


def bytes_to_int(data: bytes) -> int:
    """Decode a zig-zag varint; raises ValueError if it is malformed."""
    ux = 0
    shift = 0
    for count, byte in enumerate(data, 1):
        if count > _MAX_VARINT_LEN or (count == _MAX_VARINT_LEN and byte > 1):
            raise ValueError("varint overflows a 64-bit integer")
        ux |= (byte & 0x7F) << shift
        if byte < 0x80:
            if count != len(data):
                raise ValueError("trailing bytes after varint")
            return ~(ux >> 1) if ux & 1 else ux >> 1
        shift += 7
    raise ValueError("truncated varint")


def _attach(error: BaseException, placeholder: Comic) -> BaseException:
    error.comic = placeholder
    return error


def _view(getter: RefresherGetter | None) -> ViewRefresher:
    view = getter() if getter is not None else None
    return view if view is not None else NullRefresher()


def _fetch_image(url: str) -> bytes:
    with urllib.request.urlopen(url, timeout=_comic_api.TIMEOUT_SECONDS) as response:
        return response.read()


def _seconds(threshold: timedelta | float) -> float:
    if isinstance(threshold, timedelta):
        return threshold.total_seconds()
    return float(threshold)


class ComicCache:
    """Comic metadata stored in SQLite and comic images stored as files.

    Failed lookups raise an error whose ``comic`` attribute holds a
    placeholder comic that can be shown instead.
    """

    def __init__(
        self,
        cache_dir: str | os.PathLike[str] | None = None,
        *,
        index: Callable[[Comic], object] | None = None,
        offline: bool = False,
        fetch_comic: Callable[[int], Comic] = _comic_api.fetch_comic,
        fetch_current_comic: Callable[[], Comic] = _comic_api.fetch_current_comic,
        fetch_image: Callable[[str], bytes] = _fetch_image,
    ) -> None:
        if cache_dir is None:
            paths.ensure_cache_dir()
            self.cache_dir = paths.cache_dir()
        else:
            self.cache_dir = os.fspath(cache_dir)
            os.makedirs(self.cache_dir, paths.DEFAULT_DIR_MODE, exist_ok=True)

        self._index = index
        self._offline = offline
        self._fetch_comic = fetch_comic
        self._fetch_current_comic = fetch_current_comic
        self._fetch_image = fetch_image

        self._version_path = os.path.join(self.cache_dir, CACHE_VERSION_FILE)
        self._db_path = os.path.join(self.cache_dir, DATABASE_FILE)
        self.image_dir = os.path.join(self.cache_dir, IMAGE_DIR)

        self._check_for_misplaced_cache_files()

        if self._existing_cache_version() != CACHE_VERSION:
            _log.debug("incompatible cache database found, backing up and rebuilding")
            try:
                os.replace(self._db_path, self._db_path + ".bak")
            except OSError:
                pass

        _log.debug("Opening cache database %r", self._db_path)
        self._db_lock = threading.Lock()
        self._db = sqlite3.connect(self._db_path, check_same_thread=False)
        with self._db:
            for table in (METADATA_TABLE, IMAGE_TABLE):
                self._db.execute(
                    f"CREATE TABLE IF NOT EXISTS {table} "
                    "(key BLOB PRIMARY KEY, value BLOB NOT NULL)"
                )

        os.makedirs(self.image_dir, 0o755, exist_ok=True)

        self._newest_lock = threading.Lock()
        self._newest: Comic | None = None
        self._newest_updated_at: float | None = None

    def __enter__(self) -> ComicCache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the database and record the cache version on disk."""
        self._db.close()
        with open(self._version_path, "w", encoding="utf-8") as stream:
            stream.write(f"{CACHE_VERSION}\n")

    def comic_info(self, n: int) -> Comic:
        """Return comic ``n`` from the cache, downloading it on a miss."""
        # The server always answers 404 for comic 404.
        if n == 404:
            raise _attach(
                ComicNotFoundError(),
                Comic(num=n, title=COMIC_NOT_FOUND, safe_title=COMIC_NOT_FOUND),
            )

        try:
            data = self._get_metadata(n)
        except LocalFailureError as exc:
            _log.error("error trying to access metadata cache")
            raise _attach(exc, Comic(num=n, safe_title=CACHE_DATABASE_ERROR))

        if data is not None:
            try:
                return Comic.from_json(data)
            except ValueError as exc:
                _log.error("error parsing comic metadata from cache: %s", exc)
                raise _attach(exc, Comic(num=n, safe_title=CACHE_DATABASE_ERROR))

        try:
            return self._download_comic_info(n)
        except ComicNotFoundError as exc:
            raise _attach(exc, Comic(num=n, safe_title=COMIC_NOT_FOUND))
        except Exception as exc:
            raise _attach(exc, Comic(num=n, safe_title=COULD_NOT_DOWNLOAD_COMIC))

    def check_for_newest_comic_info(self, freshness_threshold: timedelta | float) -> Comic:
        """Return the newest comic, asking the server if the cached one is stale.

        ``freshness_threshold`` is a timedelta or a number of seconds.
        """
        with self._newest_lock:
            updated_at = self._newest_updated_at
        if updated_at is not None and time.monotonic() - updated_at < _seconds(
            freshness_threshold
        ):
            return self.newest_comic_info_from_cache()

        with self._newest_lock:
            self._newest_updated_at = time.monotonic()

        try:
            return self._newest_comic_info_from_internet()
        except Exception as exc:
            _log.debug("falling back to cached newest comic: %s", exc)
            return self.newest_comic_info_from_cache()

    def newest_comic_info_from_cache(self) -> Comic:
        """Return the newest comic known locally, without using the network."""
        with self._newest_lock:
            newest = self._newest
        if newest is not None:
            return newest

        newest = Comic()
        try:
            for value in self._all_metadata():
                comic = Comic.from_json(value)
                if comic.num > newest.num:
                    newest = comic
        except (LocalFailureError, ValueError) as exc:
            _log.error("error reading comic from cache: %s", exc)

        if newest.num <= 0:
            raise _attach(NoComicsFoundError(), Comic(num=1, safe_title=NO_COMICS_FOUND))

        self._set_newest(newest)
        return newest

    def download_all_comic_metadata(self, refresher: RefresherGetter | None) -> None:
        """Fill the metadata cache from the server.

        ``refresher`` returns the view to update after each comic, or None.
        """
        try:
            newest = self._newest_comic_info_from_internet()
        except Exception as exc:
            _log.error("%s", exc)
            return
        for i in range(1, newest.num + 1):
            try:
                self.comic_info(i)
            except Exception as exc:
                _log.debug("could not cache comic %d: %s", i, exc)
            _view(refresher).refresh_metadata_with(
                Stat(latest_comic_number=newest.num, cached_count=i)
            )

    def download_comic_image(self, n: int, refresher: RefresherGetter | None) -> None:
        """Store the image of comic ``n`` at ``comic_image_path(n)``."""
        if self._offline:
            raise OfflineError()
        try:
            _log.debug("download_comic_image(%d) start", n)
            comic = self.comic_info(n)
            data = self._fetch_image(comic.img)
            with open(self.comic_image_path(n), "wb") as stream:
                stream.write(data)
        finally:
            view = refresher() if refresher is not None else None
            if view is not None:
                threading.Thread(target=view.refresh_images, daemon=True).start()

    def download_all_comic_images(self, refresher: RefresherGetter | None) -> None:
        """Store every missing comic image, updating the view after each."""
        try:
            newest = self.newest_comic_info_from_cache()
        except NoComicsFoundError as exc:
            _log.error("%s", exc)
            return
        for i in range(1, newest.num + 1):
            try:
                os.stat(self.comic_image_path(i))
            except FileNotFoundError:
                try:
                    self.download_comic_image(i, None)
                except Exception as exc:
                    _log.debug("could not download image of comic %d: %s", i, exc)
            except OSError:
                pass
            _view(refresher).refresh_images_with(
                Stat(latest_comic_number=newest.num, cached_count=i)
            )

    def comic_image_path(self, n: int) -> str:
        """Where the image of comic ``n`` is, or would be, stored."""
        return os.path.join(self.image_dir, str(n))

    def stat_metadata(self) -> Stat:
        """How much of the metadata cache is filled."""
        latest = self.check_for_newest_comic_info(STAT_FRESHNESS)
        return Stat(latest_comic_number=latest.num, cached_count=self._count_cached_metadata())

    def stat_images(self) -> Stat:
        """How much of the image cache is filled."""
        latest = self.check_for_newest_comic_info(STAT_FRESHNESS)
        return Stat(latest_comic_number=latest.num, cached_count=self._count_cached_images())

    def _check_for_misplaced_cache_files(self) -> None:
        stray_dir = paths.Builder().cache_dir()
        misplaced = {
            os.path.join(stray_dir, CACHE_VERSION_FILE): self._version_path,
            os.path.join(stray_dir, DATABASE_FILE): self._db_path,
            os.path.join(stray_dir, IMAGE_DIR): self.image_dir,
        }
        for stray, correct in misplaced.items():
            if stray == correct:
                continue
            try:
                os.stat(stray)
            except FileNotFoundError:
                continue
            except OSError:
                pass
            _log.warning(
                "WARNING: Potentially misplaced cache file %r. Should be %r.", stray, correct
            )

    def _existing_cache_version(self) -> int:
        try:
            with open(self._version_path, encoding="utf-8") as stream:
                return int(stream.read().strip())
        except (OSError, ValueError):
            return 0

    def _set_newest(self, comic: Comic) -> None:
        with self._newest_lock:
            self._newest = comic
            self._newest_updated_at = time.monotonic()
        _log.debug("newest cached comic set to %d", comic.num)

    def _get_metadata(self, n: int) -> bytes | None:
        try:
            with self._db_lock:
                row = self._db.execute(
                    f"SELECT value FROM {METADATA_TABLE} WHERE key = ?", (int_to_bytes(n),)
                ).fetchone()
        except sqlite3.Error as exc:
            raise LocalFailureError() from exc
        return None if row is None else row[0]

    def _all_metadata(self) -> list[bytes]:
        try:
            with self._db_lock:
                rows = self._db.execute(
                    f"SELECT value FROM {METADATA_TABLE} ORDER BY key"
                ).fetchall()
        except sqlite3.Error as exc:
            raise LocalFailureError() from exc
        return [row[0] for row in rows]

    def _put_comic_info(self, comic: Comic) -> None:
        value = (comic.to_json() + "\n").encode("utf-8")
        try:
            with self._db_lock, self._db:
                self._db.execute(
                    f"INSERT OR REPLACE INTO {METADATA_TABLE} (key, value) VALUES (?, ?)",
                    (int_to_bytes(comic.num), value),
                )
        except sqlite3.Error as exc:
            raise LocalFailureError() from exc
        if self._index is not None:
            self._index(comic)

    def _newest_comic_info_from_internet(self) -> Comic:
        if self._offline:
            raise OfflineError()
        try:
            comic = self._fetch_current_comic()
        except Exception as exc:
            raise OfflineError() from exc
        self._set_newest(comic)
        self._put_comic_info(comic)
        return comic

    def _download_comic_info(self, n: int) -> Comic:
        if self._offline:
            raise OfflineError()
        _log.debug("download_comic_info(%d)", n)
        comic = self._fetch_comic(n)
        self._put_comic_info(comic)
        return comic

    def _count_cached_metadata(self) -> int:
        try:
            with self._db_lock:
                (rows,) = self._db.execute(f"SELECT COUNT(*) FROM {METADATA_TABLE}").fetchone()
        except sqlite3.Error as exc:
            raise LocalFailureError() from exc
        # Comic 404 is an error page that is always ready to display.
        return rows + 1

    def _count_cached_images(self) -> int:
        with os.scandir(self.image_dir) as entries:
            images = sum(
                1
                for entry in entries
                if not entry.is_dir() and _IMAGE_FILE_NAME.fullmatch(entry.name)
            )
        # Comic 404 is an error page rather than an image.
        return images + 1