"""Shared fixtures: a small compact snapshot shaped like the upstream dex export."""

import copy
import json

import pytest
import requests

from erdex.gamedata import parse_game_data

SNAPSHOT = {
    "typeT": ["Normal", "Fire", "Water", "Electric", "Grass"],
    "splitT": ["PHYSICAL", "SPECIAL", "STATUS", "WEIRD"],
    "targetT": [
        "SELECTED",
        "BOTH",
        "USER",
        "RANDOM",
        "FOES_AND_ALLY",
        "DEPENDS",
        "ALL_BATTLERS",
        "OPPONENTS_FIELD",
        "ALLY",
        "NOWHERE",
    ],
    "flagsT": [
        "Makes Contact",
        "Protect Affected",
        "High Crit",
        "Always_crit",
        "Sheer Force Boost",
        "Two Strikes",
        "Reckless Boost",
        "Stat Stages Ignored",
        "Target Ability Ignored",
        "Protection Move",
        "Kings Rock Affected",
        "Striker Boost",
        "Field Based",
    ],
    "eggT": ["EGG_GROUP_MONSTER", "EGG_GROUP_WATER_1", "EGG_GROUP_FIELD"],
    "abilities": [
        {"name": "Overgrow", "desc": "Ups Grass moves in a pinch."},
        {"name": "Chlorophyll", "desc": "Raises Speed in sunshine."},
        {"name": "Blaze", "desc": "Ups Fire moves in a pinch."},
        {"name": "Solar Power", "desc": "Boosts Sp. Atk in sunshine."},
        {"name": "Torrent", "desc": "Ups Water moves in a pinch."},
    ],
    "moves": [
        {"id": 1, "NAME": "MOVE_TACKLE", "name": "Tackle", "pwr": 40, "acc": 100,
         "pp": 35, "prio": 0, "split": 0, "types": [0], "target": 0, "flags": [0, 1]},
        {"id": 2, "NAME": "MOVE_THUNDERBOLT", "name": "Thunderbolt", "pwr": 90, "acc": 100,
         "pp": 15, "prio": 0, "split": 1, "types": [3], "target": 0, "flags": [1, 4]},
        {"id": 3, "NAME": "MOVE_SOLAR_BEAM", "name": "Solar Beam", "pwr": 120, "acc": 100,
         "pp": 10, "prio": 0, "split": 1, "types": [4, 1], "target": 0, "flags": [1]},
        {"id": 4, "NAME": "MOVE_PROTECT", "name": "Protect", "pwr": 0, "acc": 0,
         "pp": 10, "prio": 4, "split": 2, "types": [0], "target": 2, "flags": [9]},
        {"id": 5, "NAME": "MOVE_DOUBLE_KICK", "name": "Double Kick", "pwr": 30, "acc": 100,
         "pp": 30, "prio": 0, "split": 0, "types": [0], "target": 0, "flags": [0, 1, 5, 11]},
    ],
    "species": [
        {
            "id": 1,
            "name": "Bulbasaur",
            "stats": {
                "base": [45, 49, 49, 65, 65, 45],
                "types": [4],
                "abis": [0, 1],
                "inns": [3],
                "eggG": [0, 2],
            },
            "levelUpMoves": [{"id": 1, "lv": 1}, {"id": 3, "lv": 16}],
            "eggMoves": [5],
            "TMHMMoves": [2, 3],
            "tutor": [4],
        },
        {
            "id": 122,
            "name": "Mr. Mime",
            "stats": {
                "base": [40, 45, 65, 100, 120, 90],
                "types": [0, 2],
                "abis": [0, 1, 2, 4],
                "inns": [1, 2, 3],
                "eggG": [1],
            },
            "levelUpMoves": [{"id": 4, "lv": 1}],
            "eggMoves": [],
            "TMHMMoves": [],
            "tutor": [],
        },
    ],
}


@pytest.fixture
def payload():
    return copy.deepcopy(SNAPSHOT)


@pytest.fixture
def game_data(payload):
    return parse_game_data(payload)


class FakeResponse:
    def __init__(self, payload, status_code=200, headers=None, body_error=None):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self._body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._body_error is not None:
            raise self._body_error
        return self._payload


@pytest.fixture
def fake_get(monkeypatch):
    """Replace ``requests.get`` in the fetch module; returns the recorded calls."""
    calls = []

    def install(response):
        def _get(url, **kwargs):
            calls.append((url, kwargs))
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr("erdex.fetch.requests.get", _get)
        return calls

    return install


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run in a temp directory holding a config file."""
    monkeypatch.chdir(tmp_path)
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(
        json.dumps(
            {
                "dex_data_url": "https://example.test/gameData.json",
                "learnset_gen_prefix": "7",
                "fetch_timeout_seconds": 5,
                "ttl_days": 7,
                "pipeline_version": "test",
            }
        ),
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def make_response():
    return FakeResponse
