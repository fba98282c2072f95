"""Tests for the snapshot fetch and raw cache."""

import json

import pytest
import requests

from erdex.errors import DexDecodeError, DexFetchError
from erdex.fetch import (
    RAW_GAME_DATA_PATH,
    DexConfig,
    dex_config,
    fetch_game_data,
    load_config,
    load_game_data,
)


class TestConfig:
    def test_defaults(self):
        config = dex_config({})
        assert config.learnset_gen_prefix == "7"
        assert config.fetch_timeout_seconds == 30.0
        assert config.accumulate_learnset_codes is False

    def test_values(self):
        config = dex_config(
            {"dex_data_url": "https://x.test/d.json", "learnset_gen_prefix": 8, "ttl_days": "2"}
        )
        assert config.dex_data_url == "https://x.test/d.json"
        assert config.learnset_gen_prefix == "8"
        assert config.ttl_days == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuntimeError, match="Missing or invalid config"):
            load_config(str(tmp_path / "nope.json"))


class TestFetchGameData:
    def test_timeout_passed(self, fake_get, make_response, payload):
        calls = fake_get(make_response(payload, headers={"ETag": "abc"}))
        etag, status, data = fetch_game_data("https://x.test/d.json", 12.5)
        assert calls == [("https://x.test/d.json", {"timeout": 12.5})]
        assert etag == "abc"
        assert status == 200
        assert data["typeT"][0] == "Normal"

    def test_timeout_is_fetch_error(self, fake_get):
        fake_get(requests.exceptions.Timeout("read timed out"))
        with pytest.raises(DexFetchError, match="x.test"):
            fetch_game_data("https://x.test/d.json", 1)

    def test_http_error_is_fetch_error(self, fake_get, make_response):
        fake_get(make_response({}, status_code=503))
        with pytest.raises(DexFetchError):
            fetch_game_data("https://x.test/d.json", 1)

    def test_bad_body_is_decode_error(self, fake_get, make_response):
        fake_get(make_response(None, body_error=ValueError("Expecting value")))
        with pytest.raises(DexDecodeError):
            fetch_game_data("https://x.test/d.json", 1)

    def test_error_types_are_distinct(self):
        assert not issubclass(DexFetchError, DexDecodeError)
        assert not issubclass(DexDecodeError, DexFetchError)


class TestLoadGameData:
    def test_fetch_writes_cache(self, workdir, fake_get, make_response, payload):
        fake_get(make_response(payload))
        config = DexConfig(dex_data_url="https://x.test/d.json")
        game_data = load_game_data(config)

        assert len(game_data.moves) == 5
        cached = json.loads((workdir / RAW_GAME_DATA_PATH).read_text(encoding="utf-8"))
        assert cached["_meta"]["url"] == "https://x.test/d.json"
        assert cached["data"]["typeT"] == payload["typeT"]

    def test_invalid_payload_not_cached(self, workdir, fake_get, make_response):
        fake_get(make_response({"moves": []}))
        with pytest.raises(DexDecodeError):
            load_game_data(DexConfig())
        assert not (workdir / RAW_GAME_DATA_PATH).exists()

    def test_stale_cache_refetched(self, workdir, fake_get, make_response, payload):
        calls = fake_get(make_response(payload))
        load_game_data(DexConfig())
        load_game_data(DexConfig(ttl_days=-1))
        assert len(calls) == 2

    def test_force_refresh_from_config(self, workdir, fake_get, make_response, payload):
        calls = fake_get(make_response(payload))
        load_game_data(DexConfig())
        load_game_data(DexConfig(force_refresh=True))
        assert len(calls) == 2
