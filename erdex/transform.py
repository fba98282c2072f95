"""Transform layer for the dex transcoding pipeline.

Runs the full transcode over one snapshot:
- every raw move first (the learnsets need the finished move lookup)
- then every species, with its learnset
- writes ``moves.json``, ``learnsets.json``, ``pokedex.json`` and ``meta.json``

The run is all-or-nothing: any ``TranscodeError`` aborts before anything is
written.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from .cache.io import atomic_write_json, ensure_dir
from .fetch import DexConfig, dex_config, load_config, load_game_data
from .gamedata import CompactGameData
from .naming import move_id, species_id
from .transform_learnset import build_learnset
from .transform_moves import build_move
from .transform_species import build_species

DERIVED_DIR = "data/derived"


def build_move_table(
    game_data: CompactGameData,
) -> Tuple[Dict[str, Dict[str, Any]], Dict[Any, str]]:
    """Transcode all moves.

    Returns ``(moves, move_lookup)`` where ``move_lookup`` maps raw move ids
    to canonical move ids.
    """
    moves: Dict[str, Dict[str, Any]] = {}
    move_lookup: Dict[Any, str] = {}
    for raw_move in game_data.moves:
        record = build_move(raw_move=raw_move, game_data=game_data)
        canonical = move_id(raw_move["NAME"])
        moves[canonical] = record
        move_lookup[raw_move.get("id")] = canonical
    return moves, move_lookup


def build_dex_tables(
    game_data: CompactGameData,
    *,
    gen_prefix: str,
    accumulate: bool = False,
) -> Dict[str, Dict[str, Any]]:
    """Build the ``moves``, ``learnsets`` and ``pokedex`` tables."""
    moves, move_lookup = build_move_table(game_data)

    learnsets: Dict[str, Dict[str, Any]] = {}
    pokedex: Dict[str, Dict[str, Any]] = {}
    for raw_species in game_data.species:
        record = build_species(raw_species=raw_species, game_data=game_data)
        learnset = build_learnset(
            raw_species=raw_species,
            move_lookup=move_lookup,
            gen_prefix=gen_prefix,
            accumulate=accumulate,
        )
        key = species_id(record["name"])
        pokedex[key] = record
        learnsets[key] = {"learnset": learnset}

    return {"moves": moves, "learnsets": learnsets, "pokedex": pokedex}


def write_dex_tables(tables: Dict[str, Dict[str, Any]], config: DexConfig) -> None:
    ensure_dir(DERIVED_DIR)
    for name in ("moves", "learnsets", "pokedex"):
        atomic_write_json(os.path.join(DERIVED_DIR, f"{name}.json"), tables[name], sort_keys=True)

    meta = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "pipeline_version": config.pipeline_version,
        "learnset_gen_prefix": config.learnset_gen_prefix,
        "accumulate_learnset_codes": config.accumulate_learnset_codes,
        "source": config.dex_data_url,
    }
    atomic_write_json(os.path.join(DERIVED_DIR, "meta.json"), meta)


def run_transform(config_path: str = "config/config.json", force: bool = False) -> int:
    """Fetch (or reuse) the snapshot, transcode it and write the derived tables."""
    config = dex_config(load_config(config_path))
    game_data = load_game_data(config, force=force)

    tables = build_dex_tables(
        game_data,
        gen_prefix=config.learnset_gen_prefix,
        accumulate=config.accumulate_learnset_codes,
    )
    write_dex_tables(tables, config)

    print(
        "transform: "
        f"moves={len(tables['moves'])} "
        f"learnsets={len(tables['learnsets'])} "
        f"pokedex={len(tables['pokedex'])}"
    )
    return 0
