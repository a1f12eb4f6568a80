"""Comic cache, bookmarks, search index, saved state and theme rules for an xkcd viewer."""

__version__ = "0.1.0"