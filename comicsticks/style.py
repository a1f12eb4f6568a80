"""Styling constants and theme-dependent styling decisions."""

from __future__ import annotations

import re
from dataclasses import dataclass

PADDING_COMIC_LIST_BUTTON = 8
PADDING_POPOVER = 10
PADDING_POPOVER_COMPACT = 8
PADDING_AUXILIARY_WINDOW = 12
PADDING_UNLINKED_BUTTON_BOX = 4

CLASS_COMIC_CONTAINER = "comic-container"
CLASS_LINKED = "linked"
CLASS_NO_MIN_WIDTH = "no-min-width"
CLASS_SLIM_BUTTON = "slim-button"
CLASS_FIX_HIDDEN_COMIC_TITLE = "fix-hidden-comic-title"
CLASS_FIX_JARRING_HEADERBAR_BUTTONS = "fix-jarring-headerbar-buttons"

_ELEMENTARY = [r"elementary(-x)?", r"io\.elementary\.stylesheet.*"]

_LARGE_TOOLBAR_THEMES = re.compile("|".join([*_ELEMENTARY, "win32"]))
_NON_SYMBOLIC_ICON_THEMES = re.compile("|".join(_ELEMENTARY))
_UNLINKED_NAV_BUTTONS_THEMES = re.compile("|".join(_ELEMENTARY))
_COMPACT_MENU_THEMES = re.compile("|".join(["CrosAdapta", *_ELEMENTARY]))
_FIX_HIDDEN_COMIC_TITLE_THEMES = re.compile("CrosAdapta")
_FIX_JARRING_HEADERBAR_BUTTONS_THEMES = re.compile("CrosAdapta")


@dataclass(frozen=True)
class ThemeOverrides:
    """User choices that force a styling decision regardless of the theme."""

    large_toolbar_icons: bool = False
    non_symbolic_icons: bool = False
    unlinked_nav_buttons: bool = False
    compact_menu: bool = False
    fix_hidden_comic_title: bool = False
    fix_jarring_headerbar_buttons: bool = False


_NO_OVERRIDES = ThemeOverrides()


def is_large_toolbar_theme(theme: str, overrides: ThemeOverrides | None = None) -> bool:
    """Whether large toolbar buttons should be used with ``theme``."""
    overrides = overrides or _NO_OVERRIDES
    return overrides.large_toolbar_icons or bool(_LARGE_TOOLBAR_THEMES.search(theme))


def is_symbolic_icon_theme(
    theme: str, dark_mode: bool, overrides: ThemeOverrides | None = None
) -> bool:
    """Whether symbolic icons should be used with ``theme``."""
    overrides = overrides or _NO_OVERRIDES
    return not overrides.non_symbolic_icons and (
        dark_mode or not _NON_SYMBOLIC_ICON_THEMES.search(theme)
    )


def is_linked_nav_buttons_theme(
    theme: str, overrides: ThemeOverrides | None = None
) -> bool:
    """Whether the navigation buttons should be visually linked."""
    overrides = overrides or _NO_OVERRIDES
    return not overrides.unlinked_nav_buttons and not _UNLINKED_NAV_BUTTONS_THEMES.search(
        theme
    )


def is_compact_menu_theme(theme: str, overrides: ThemeOverrides | None = None) -> bool:
    """Whether popover menus should use reduced side margins."""
    overrides = overrides or _NO_OVERRIDES
    return overrides.compact_menu or bool(_COMPACT_MENU_THEMES.search(theme))


def is_fix_hidden_comic_title_theme(
    theme: str, overrides: ThemeOverrides | None = None
) -> bool:
    """Whether to apply the fix for hard to see header bar titles."""
    overrides = overrides or _NO_OVERRIDES
    return overrides.fix_hidden_comic_title or bool(
        _FIX_HIDDEN_COMIC_TITLE_THEMES.search(theme)
    )


def is_fix_jarring_headerbar_buttons_theme(
    theme: str, overrides: ThemeOverrides | None = None
) -> bool:
    """Whether to apply the fix for header bar buttons that clash with it."""
    overrides = overrides or _NO_OVERRIDES
    return overrides.fix_jarring_headerbar_buttons or bool(
        _FIX_JARRING_HEADERBAR_BUTTONS_THEMES.search(theme)
    )