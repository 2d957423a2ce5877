"""Tests for entry_url."""
from unittest.mock import patch

from nesbridge.utils import entry_url


def test_entry_url_names_rom():
    assert entry_url("127.0.0.1", 8080, "mario.nes") == "http://127.0.0.1:8080/index.html?rom=mario.nes"


def test_entry_url_quotes_rom():
    url = entry_url("127.0.0.1", 8080, "Super Mario (W).nes")

    assert url == "http://127.0.0.1:8080/index.html?rom=Super%20Mario%20%28W%29.nes"


def test_entry_url_cache_bust():
    with patch("nesbridge.utils.time.time", return_value=1700000000.5):
        url = entry_url("127.0.0.1", 8080, "mario.nes", cache_bust=True)

    assert url == "http://127.0.0.1:8080/index.html?rom=mario.nes&t=1700000000500"
