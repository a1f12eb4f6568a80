import pytest

from comicsticks import style
from comicsticks.style import ThemeOverrides


@pytest.mark.parametrize(
    "theme, expected",
    [
        ("elementary", True),
        ("elementary-x", True),
        ("io.elementary.stylesheet.blueberry", True),
        ("win32", True),
        ("Adwaita", False),
        ("CrosAdapta", False),
    ],
)
def test_large_toolbar_theme(theme, expected):
    assert style.is_large_toolbar_theme(theme) is expected


def test_large_toolbar_forced():
    overrides = ThemeOverrides(large_toolbar_icons=True)
    assert style.is_large_toolbar_theme("Adwaita", overrides) is True


def test_theme_match_is_unanchored():
    assert style.is_large_toolbar_theme("my-elementary-variant") is True


def test_symbolic_icons():
    assert style.is_symbolic_icon_theme("Adwaita", False) is True
    assert style.is_symbolic_icon_theme("elementary", False) is False
    assert style.is_symbolic_icon_theme("elementary", True) is True


def test_symbolic_icons_forced_off():
    overrides = ThemeOverrides(non_symbolic_icons=True)
    assert style.is_symbolic_icon_theme("Adwaita", True, overrides) is False


def test_linked_nav_buttons():
    assert style.is_linked_nav_buttons_theme("Adwaita") is True
    assert style.is_linked_nav_buttons_theme("elementary") is False
    assert style.is_linked_nav_buttons_theme("win32") is True


def test_linked_nav_buttons_forced_off():
    overrides = ThemeOverrides(unlinked_nav_buttons=True)
    assert style.is_linked_nav_buttons_theme("Adwaita", overrides) is False


def test_compact_menu():
    assert style.is_compact_menu_theme("CrosAdapta") is True
    assert style.is_compact_menu_theme("elementary") is True
    assert style.is_compact_menu_theme("Adwaita") is False
    assert style.is_compact_menu_theme("Adwaita", ThemeOverrides(compact_menu=True)) is True


def test_fix_hidden_comic_title():
    assert style.is_fix_hidden_comic_title_theme("CrosAdapta") is True
    assert style.is_fix_hidden_comic_title_theme("elementary") is False
    overrides = ThemeOverrides(fix_hidden_comic_title=True)
    assert style.is_fix_hidden_comic_title_theme("Adwaita", overrides) is True


def test_fix_jarring_headerbar_buttons():
    assert style.is_fix_jarring_headerbar_buttons_theme("CrosAdapta") is True
    assert style.is_fix_jarring_headerbar_buttons_theme("Adwaita") is False
    overrides = ThemeOverrides(fix_jarring_headerbar_buttons=True)
    assert style.is_fix_jarring_headerbar_buttons_theme("Adwaita", overrides) is True


def test_empty_theme_uses_defaults():
    assert style.is_large_toolbar_theme("") is False
    assert style.is_symbolic_icon_theme("", False) is True
    assert style.is_linked_nav_buttons_theme("") is True