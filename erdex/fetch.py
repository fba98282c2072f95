"""Fetch and cache layer for the compact game data snapshot.

Downloads the condensed dex export once, with an explicit timeout, and keeps
a TTL-aware copy under ``data/raw`` so repeated transforms do not hit the
network.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import requests

from .cache.io import atomic_write_json, file_is_stale, read_json, wrap_raw
from .errors import DexDecodeError, DexFetchError
from .gamedata import CompactGameData, parse_game_data

RAW_DIR = "data/raw"
RAW_GAME_DATA_PATH = f"{RAW_DIR}/gamedata.json"

DEFAULT_DEX_DATA_URL = (
    "https://forwardfeed.github.io/ER-nextdex/static/js/data/gameDataVBeta2.1.json"
)
DEFAULT_GEN_PREFIX = "7"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class DexConfig:
    dex_data_url: str = DEFAULT_DEX_DATA_URL
    learnset_gen_prefix: str = DEFAULT_GEN_PREFIX
    fetch_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    ttl_days: int = 7
    force_refresh: bool = False
    accumulate_learnset_codes: bool = False
    pipeline_version: str = ""


def load_config(config_path: str) -> Dict[str, Any]:
    """Load JSON configuration from ``config_path``.

    Raises ``RuntimeError`` if the file is missing or invalid.
    """
    data = read_json(config_path)
    if not data:
        raise RuntimeError(f"Missing or invalid config: {config_path}")
    return data


def dex_config(cfg: Dict[str, Any]) -> DexConfig:
    """Resolve a loaded config mapping into a ``DexConfig``."""
    return DexConfig(
        dex_data_url=str(cfg.get("dex_data_url", DEFAULT_DEX_DATA_URL)),
        learnset_gen_prefix=str(cfg.get("learnset_gen_prefix", DEFAULT_GEN_PREFIX)),
        fetch_timeout_seconds=float(cfg.get("fetch_timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        ttl_days=int(cfg.get("ttl_days", 7)),
        force_refresh=bool(cfg.get("force_refresh", False)),
        accumulate_learnset_codes=bool(cfg.get("accumulate_learnset_codes", False)),
        pipeline_version=str(cfg.get("pipeline_version", "")),
    )


def fetch_game_data(url: str, timeout: float) -> Tuple[Optional[str], int, Any]:
    """Fetch the snapshot JSON returning ``(etag, status, payload)``.

    Network errors, timeouts and HTTP error statuses raise ``DexFetchError``;
    a body that is not JSON raises ``DexDecodeError``. No retries.
    """
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.RequestException as exc:
        raise DexFetchError(f"Failed to fetch game data from {url}: {exc}") from exc

    try:
        payload = resp.json()
    except ValueError as exc:
        raise DexDecodeError(f"Game data at {url} is not valid JSON: {exc}") from exc
    return resp.headers.get("ETag"), resp.status_code, payload


def load_game_data(config: DexConfig, force: bool = False) -> CompactGameData:
    """Return the snapshot, from the raw cache when fresh, else from the network."""
    need_fetch = force or config.force_refresh or file_is_stale(
        RAW_GAME_DATA_PATH, config.ttl_days
    )
    if not need_fetch:
        cached = read_json(RAW_GAME_DATA_PATH) or {}
        print(f"fetch: using cached snapshot {RAW_GAME_DATA_PATH}")
        return parse_game_data(cached.get("data"))

    etag, status, payload = fetch_game_data(config.dex_data_url, config.fetch_timeout_seconds)
    # Decode before caching so a broken payload never replaces a good cache.
    game_data = parse_game_data(payload)
    atomic_write_json(RAW_GAME_DATA_PATH, wrap_raw(config.dex_data_url, payload, etag, status))
    print(
        f"fetch: fetched {config.dex_data_url} "
        f"moves={len(game_data.moves)} species={len(game_data.species)}"
    )
    return game_data


def run_fetch(force: bool, config_path: str) -> int:
    """Refresh the raw snapshot cache."""
    config = dex_config(load_config(config_path))
    load_game_data(config, force=force)
    return 0
