# comicsticks

The non-graphical core of a desktop viewer for xkcd comics. It keeps a
local cache of comic metadata and images, a sorted list of the user's
bookmarks, a small full-text search index over comic metadata, the saved
application and window state, and the rules that adapt the interface to
the current GTK theme.

No third-party libraries are needed; everything runs on the standard
library, Python 3.10 or later.

## What is in the package

| Module | Purpose |
| --- | --- |
| `comicsticks.log` | Logging setup. `init(debug)` attaches a stderr handler to the package logger and shows debug messages only when `debug` is true; `get_logger(name)` returns the package logger or a child of it; `debug_enabled()` reports the current setting. |
| `comicsticks.paths` | Where the application stores its cache, configuration and data, following the XDG base directory variables. Call `init(app_id)` once, then use `cache_dir()`, `config_dir()`, `data_dir()`, `locale_dir()`, `bookmarks()`, `settings()` and `search_index()`, or the same methods on a `Builder`. The `ensure_*_dir()` functions create the directories, and the `check_for_misplaced_*()` functions log a warning for, and return, stray files found outside the application's own directories. |
| `comicsticks.bookmarks` | `BookmarkList`: a set of bookmarked comic numbers, iterated in ascending order, that reads and writes a newline separated file and calls every observer added with `add_observer` on each change. |
| `comicsticks.style` | Padding and style-class constants, and theme checks such as `is_large_toolbar_theme`, `is_symbolic_icon_theme`, `is_linked_nav_buttons_theme` and `is_compact_menu_theme`, each of which can be forced by a `ThemeOverrides`. |
| `comicsticks.comic` | `Comic` metadata with `from_json` / `to_json`, and `fetch_comic(n)` / `fetch_current_comic()` for the xkcd JSON API. A 404 answer raises `ComicNotFoundError`. |
| `comicsticks.errors` | `CacheError` and its subclasses `CacheMissError`, `LocalFailureError`, `OfflineError` and `NoComicsFoundError`. |
| `comicsticks.stat` | `Stat`, a cache fullness figure with `complete()`, `fraction()` and a `"cached / latest"` string form, and the `ViewRefresher` protocol with `NullRefresher`, which only counts the refreshes it drops. |
| `comicsticks.cache` | `ComicCache`: comic metadata in an SQLite database and comic images as files, with cache versioning, the newest-comic lookup, bulk downloads and the `stat_metadata()` / `stat_images()` figures. Also `int_to_bytes` / `bytes_to_int`, the zig-zag varint encoding of database keys. |
| `comicsticks.search` | `SearchIndex`: a directory-backed index of comics. `search(query)` accepts words, `"quoted phrases"`, `field:term`, and `+`/`-` prefixes, adds matches within one edit of the whole query, and returns a `SearchResult` with the total and at most 100 `SearchHit`s. |
| `comicsticks.state` | `AppSettings` (dark mode) and `WindowState` (current comic, geometry, zoom, properties dialog), stored as JSON. `WindowState.save_state` takes two `StateHaver` windows. |
| `comicsticks.display` | Pure helpers for the comic view: zoom limits and steps, scaled image sizes, dark-mode pixel inversion, date and zoom label formatting. |

## Examples

Bookmarks are kept sorted no matter in which order they were added:

```python
import io
from comicsticks.bookmarks import BookmarkList

marks = BookmarkList()
for n in (54, 2, 1):
    marks.add(n)

out = io.StringIO()
marks.write(out)
print(out.getvalue())   # "1\n2\n54\n"
```

Zoom is always held between 25% and 500%:

```python
from comicsticks.display import safe_scale, zoom_in, zoom_label

safe_scale(10)          # 5.0
zoom_label(1.5)         # "150%"
zoom_in(1.0)            # 1.25
```

Theme rules decide how the header bar looks:

```python
from comicsticks.style import is_large_toolbar_theme

is_large_toolbar_theme("elementary")   # True
```

Paths depend on the application id given to `init`:

```python
from comicsticks import paths

paths.init("com.example.comicsticks")
paths.bookmarks()       # <XDG data home>/com.example.comicsticks/bookmarks
```

Comics are cached locally and indexed as they arrive:

```python
from comicsticks.cache import ComicCache
from comicsticks.search import SearchIndex

with SearchIndex("/tmp/comics/search") as index, \
        ComicCache("/tmp/comics", index=index.index) as cache:
    comic = cache.comic_info(1)
    result = index.search(comic.title)
```

## Errors and offline use

`ComicCache` answers from its local database whenever it can. A failed
lookup raises an error whose `comic` attribute holds a placeholder comic
that can be shown instead (for example "Comic not found" for comic 404).
A cache created with `offline=True` never uses the network: lookups that
need it raise `OfflineError`. `check_for_newest_comic_info` falls back to
the newest comic already cached when the server cannot be reached, and
`newest_comic_info_from_cache` raises `NoComicsFoundError` when nothing is
cached at all.

## What the package does not do

There is no graphical interface and no command to run: the windows,
menus and dialogs of a comic viewer are not part of this package, and
neither is opening links in a web browser. The package provides the data,
storage and decision logic such an interface is built on.