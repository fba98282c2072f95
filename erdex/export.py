"""Export layer for the dex transcoding pipeline.

Writes ``data/export/dexdata.xlsx`` from the derived tables for review.

Rules:
- Reads derived JSON only; no transcoding happens here
- Fails fast when a derived file is missing
"""

from __future__ import annotations

import os
from typing import Any, Dict, List

from openpyxl import Workbook

from .cache.io import ensure_dir, read_json
from .transform import DERIVED_DIR
from .transform_species import ABILITY_SLOTS, INNATE_SLOTS, STAT_KEYS

EXPORT_DIR = "data/export"
EXPORT_PATH = os.path.join(EXPORT_DIR, "dexdata.xlsx")

MOVE_FLAG_KEYS = (
    "contact",
    "protect",
    "mirror",
    "punch",
    "slicing",
    "snatch",
    "dance",
    "field",
    "reflectable",
    "kick",
    "bite",
    "sound",
    "pulse",
    "bullet",
    "weather",
    "powder",
    "bone",
    "defrost",
    "bypasssub",
)


def _read_derived(path: str) -> Dict[str, Any]:
    data = read_json(path)
    if data is None:
        raise RuntimeError(f"Missing or invalid derived file: {path}")
    return data


def _write_row(ws: Any, values: List[Any]) -> None:
    ws.append(values)


def _join(values: Any) -> str:
    if not isinstance(values, list):
        return ""
    return ",".join(str(v) for v in values)


def _write_moves(wb: Workbook, moves: Dict[str, Any]) -> None:
    ws = wb.create_sheet("Moves")
    _write_row(
        ws,
        [
            "MOVE_ID",
            "NUM",
            "NAME",
            "TYPE",
            "CATEGORY",
            "POWER",
            "ACCURACY",
            "PP",
            "PRIORITY",
            "TARGET",
            "BREAKS_PROTECT",
            "CRIT_RATIO",
            "MULTIHIT",
            "RECOIL",
            "VOLATILE_STATUS",
            "FLAGS",
        ],
    )
    for key in sorted(moves):
        rec = moves[key]
        flags = rec.get("flags") or {}
        _write_row(
            ws,
            [
                key,
                rec.get("num"),
                rec.get("name"),
                rec.get("type"),
                rec.get("category"),
                rec.get("basePower"),
                rec.get("accuracy"),
                rec.get("pp"),
                rec.get("priority"),
                rec.get("target"),
                bool(rec.get("breaksProtect")),
                rec.get("critRatio"),
                rec.get("multihit"),
                _join(rec.get("recoil")) or None,
                rec.get("volatileStatus"),
                ",".join(k for k in MOVE_FLAG_KEYS if flags.get(k)),
            ],
        )


def _write_species(wb: Workbook, pokedex: Dict[str, Any]) -> None:
    ws = wb.create_sheet("Species")
    slots = ABILITY_SLOTS + INNATE_SLOTS
    headers = ["SPECIES_ID", "NUM", "NAME", "TYPES"]
    headers.extend(k.upper() for k in STAT_KEYS)
    headers.extend(f"ABILITY_{slot}" for slot in slots)
    headers.append("EGG_GROUPS")
    _write_row(ws, headers)

    for key in sorted(pokedex):
        rec = pokedex[key]
        stats = rec.get("baseStats") or {}
        abilities = rec.get("abilities") or {}
        row: List[Any] = [key, rec.get("num"), rec.get("name"), _join(rec.get("types"))]
        row.extend(stats.get(k) for k in STAT_KEYS)
        row.extend(abilities.get(slot) for slot in slots)
        row.append(_join(rec.get("eggGroups")))
        _write_row(ws, row)


def _write_learnsets(wb: Workbook, learnsets: Dict[str, Any]) -> None:
    ws = wb.create_sheet("Learnsets")
    _write_row(ws, ["SPECIES_ID", "MOVE_ID", "CODES"])
    for species_key in sorted(learnsets):
        learnset = (learnsets[species_key] or {}).get("learnset") or {}
        for move_key in sorted(learnset):
            _write_row(ws, [species_key, move_key, _join(learnset[move_key])])


def run_export(config_path: str = "config/config.json") -> int:
    """Export the derived tables to a workbook with Moves/Species/Learnsets/Meta sheets."""
    moves = _read_derived(os.path.join(DERIVED_DIR, "moves.json"))
    learnsets = _read_derived(os.path.join(DERIVED_DIR, "learnsets.json"))
    pokedex = _read_derived(os.path.join(DERIVED_DIR, "pokedex.json"))
    meta_doc = _read_derived(os.path.join(DERIVED_DIR, "meta.json"))

    ensure_dir(EXPORT_DIR)

    wb = Workbook()
    # Remove default sheet so we control sheet order.
    default_ws = wb.active
    if default_ws is not None:
        wb.remove(default_ws)

    _write_moves(wb, moves)
    _write_species(wb, pokedex)
    _write_learnsets(wb, learnsets)

    ws_meta = wb.create_sheet("Meta")
    _write_row(ws_meta, ["KEY", "VALUE"])
    for key in (
        "generated_at",
        "source",
        "pipeline_version",
        "learnset_gen_prefix",
        "accumulate_learnset_codes",
    ):
        _write_row(ws_meta, [key, meta_doc.get(key)])

    wb.save(EXPORT_PATH)
    print(f"export: wrote {EXPORT_PATH}")
    return 0
