import io
import json
import urllib.error
from unittest.mock import patch

import pytest

from comicsticks.comic import Comic, ComicNotFoundError, fetch_comic, fetch_current_comic

SAMPLE = {
    "num": 614,
    "title": "Woodpecker",
    "safe_title": "Woodpecker",
    "img": "http://localhost/woodpecker.png",
    "alt": "If you don't have an extension cord",
    "year": "2009",
    "month": "7",
    "day": "24",
    "news": "",
    "link": "",
    "transcript": "",
}


def test_from_json_reads_fields():
    comic = Comic.from_json(json.dumps(SAMPLE))
    assert comic.num == SAMPLE["num"]
    assert comic.safe_title == SAMPLE["safe_title"]
    assert comic.year == SAMPLE["year"]
    assert comic.alt == SAMPLE["alt"]


def test_from_json_accepts_bytes():
    comic = Comic.from_json(json.dumps(SAMPLE).encode())
    assert comic.title == SAMPLE["title"]


def test_round_trip():
    comic = Comic(num=7, title="A", safe_title="A", img="http://localhost/a.png", alt="x")
    assert Comic.from_json(comic.to_json()) == comic


def test_missing_fields_default_to_empty():
    comic = Comic.from_json('{"num": 3}')
    assert comic == Comic(num=3)


def test_null_fields_become_empty():
    comic = Comic.from_json('{"num": 3, "link": null}')
    assert comic.link == ""


@pytest.mark.parametrize(
    "data",
    ["bad format", "[1, 2]", '{"num": "one"}', '{"num": 1, "title": 5}', '{"num": true}'],
)
def test_malformed_json_raises(data):
    with pytest.raises(ValueError):
        Comic.from_json(data)


def test_fetch_comic_parses_response():
    body = json.dumps(SAMPLE).encode()
    with patch("urllib.request.urlopen", return_value=io.BytesIO(body)) as urlopen:
        comic = fetch_comic(614)
    assert comic.num == 614
    assert urlopen.call_args[0][0].endswith("/614/info.0.json")


def test_fetch_current_comic_uses_current_endpoint():
    body = json.dumps(SAMPLE).encode()
    with patch("urllib.request.urlopen", return_value=io.BytesIO(body)) as urlopen:
        comic = fetch_current_comic()
    assert comic.title == "Woodpecker"
    assert urlopen.call_args[0][0].endswith("/info.0.json")
    assert "/614/" not in urlopen.call_args[0][0]


def test_fetch_comic_not_found():
    error = urllib.error.HTTPError("http://localhost/", 404, "Not Found", {}, None)
    with patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(ComicNotFoundError):
            fetch_comic(100000)


def test_fetch_comic_other_http_error_propagates():
    error = urllib.error.HTTPError("http://localhost/", 500, "Server Error", {}, None)
    with patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(urllib.error.HTTPError) as info:
            fetch_comic(1)
    assert info.value.code == 500