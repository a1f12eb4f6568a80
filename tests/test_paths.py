import logging
import os

import pytest

from comicsticks import paths
from comicsticks.paths import Builder

TEST_APP_ID = "com.example.test"


@pytest.fixture
def xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_DATA_DIRS", str(tmp_path / "share"))
    paths.init(TEST_APP_ID)
    return tmp_path


def test_cache_dir():
    directory = Builder(TEST_APP_ID).cache_dir()
    assert os.path.isabs(directory)
    assert directory.endswith(TEST_APP_ID)


def test_config_dir():
    directory = Builder(TEST_APP_ID).config_dir()
    assert os.path.isabs(directory)
    assert directory.endswith(TEST_APP_ID)


def test_data_dir():
    directory = Builder(TEST_APP_ID).data_dir()
    assert os.path.isabs(directory)
    assert directory.endswith(TEST_APP_ID)


def test_locale_dir(xdg):
    assert Builder(TEST_APP_ID).locale_dir() == "."


def test_bookmarks():
    path = Builder(TEST_APP_ID).bookmarks()
    assert os.path.isabs(path)
    assert TEST_APP_ID in path


def test_settings():
    path = Builder(TEST_APP_ID).settings()
    assert os.path.isabs(path)
    assert TEST_APP_ID in path


def test_package_level_paths(xdg):
    paths.init(TEST_APP_ID)
    assert paths.cache_dir() == str(xdg / "cache" / TEST_APP_ID)
    assert paths.config_dir() == str(xdg / "config" / TEST_APP_ID)
    assert paths.data_dir() == str(xdg / "data" / TEST_APP_ID)
    assert paths.locale_dir() == "."


def test_paths_follow_xdg_environment(xdg):
    builder = Builder(TEST_APP_ID)
    assert builder.cache_dir() == str(xdg / "cache" / TEST_APP_ID)
    assert builder.config_dir() == str(xdg / "config" / TEST_APP_ID)
    assert builder.data_dir() == str(xdg / "data" / TEST_APP_ID)
    assert builder.search_index() == str(xdg / "cache" / TEST_APP_ID / "search")
    assert builder.bookmarks() == str(xdg / "data" / TEST_APP_ID / "bookmarks")
    assert builder.settings() == str(xdg / "config" / TEST_APP_ID / "settings")


def test_empty_app_id_uses_base_directories(xdg):
    assert Builder().cache_dir() == str(xdg / "cache")
    assert Builder().bookmarks() == str(xdg / "data" / "bookmarks")


def test_relative_xdg_value_is_ignored(monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", "relative/cache")
    directory = Builder(TEST_APP_ID).cache_dir()
    assert os.path.isabs(directory)
    assert "relative" not in directory


def test_locale_dir_found_in_data_dirs(xdg):
    locale = xdg / "share" / "locale"
    locale.mkdir(parents=True)
    assert Builder(TEST_APP_ID).locale_dir() == str(locale)


def test_locale_dir_falls_back_to_current_directory(xdg):
    assert Builder(TEST_APP_ID).locale_dir() == "."


def test_ensure_dirs_create_directories(xdg):
    paths.ensure_cache_dir()
    paths.ensure_config_dir()
    paths.ensure_data_dir()
    assert sorted(os.listdir(xdg / "cache")) == [TEST_APP_ID]
    assert sorted(os.listdir(xdg / "config")) == [TEST_APP_ID]
    assert sorted(os.listdir(xdg / "data")) == [TEST_APP_ID]
    # Calling again when the directories exist must not fail.
    paths.ensure_cache_dir()
    assert sorted(os.listdir(xdg / "cache")) == [TEST_APP_ID]
    assert paths.cache_dir() == str(xdg / "cache" / TEST_APP_ID)


def test_no_misplaced_files(xdg):
    assert paths.check_for_misplaced_bookmarks() == []
    assert paths.check_for_misplaced_settings() == []
    assert paths.check_for_misplaced_search_index() == []


def test_misplaced_bookmarks_detected(xdg, caplog):
    stray = Builder().bookmarks()
    os.makedirs(os.path.dirname(stray), exist_ok=True)
    open(stray, "w").close()
    with caplog.at_level(logging.WARNING):
        found = paths.check_for_misplaced_bookmarks()
    assert found == [stray]
    assert paths.bookmarks() in caplog.text


def test_misplaced_bookmarks_in_config_dir_detected(xdg):
    stray = os.path.join(paths.config_dir(), "bookmarks")
    os.makedirs(paths.config_dir(), exist_ok=True)
    open(stray, "w").close()
    assert paths.check_for_misplaced_bookmarks() == [stray]


def test_misplaced_settings_detected(xdg):
    stray = Builder().settings()
    os.makedirs(os.path.dirname(stray), exist_ok=True)
    open(stray, "w").close()
    assert paths.check_for_misplaced_settings() == [stray]


def test_misplaced_search_index_detected(xdg):
    stray = Builder().search_index()
    os.makedirs(stray)
    assert paths.check_for_misplaced_search_index() == [stray]