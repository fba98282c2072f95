"""Compact game data snapshot.

Wraps the decoded upstream payload in one immutable value that is passed to
every transcoding call. The payload is the condensed dex export: raw move and
species records plus small index -> label tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from .errors import DexDecodeError, TranscodeError


@dataclass(frozen=True)
class CompactGameData:
    moves: Tuple[Dict[str, Any], ...]
    species: Tuple[Dict[str, Any], ...]
    types: Tuple[str, ...]
    splits: Tuple[str, ...]
    targets: Tuple[str, ...]
    flags: Tuple[str, ...]
    egg_groups: Tuple[str, ...]
    abilities: Tuple[str, ...]


# payload key -> CompactGameData field
_LABEL_TABLES = (
    ("typeT", "types"),
    ("splitT", "splits"),
    ("targetT", "targets"),
    ("flagsT", "flags"),
    ("eggT", "egg_groups"),
)


def _records(payload: Dict[str, Any], key: str) -> Tuple[Dict[str, Any], ...]:
    value = payload.get(key)
    if not isinstance(value, list):
        raise DexDecodeError(f"Game data is missing the '{key}' list")
    records: List[Dict[str, Any]] = []
    for index, rec in enumerate(value):
        if not isinstance(rec, dict):
            raise DexDecodeError(f"Game data '{key}[{index}]' is not an object")
        records.append(rec)
    return tuple(records)


def _labels(payload: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = payload.get(key)
    if not isinstance(value, list):
        raise DexDecodeError(f"Game data is missing the '{key}' table")
    return tuple(str(label) for label in value)


def _ability_names(payload: Dict[str, Any]) -> Tuple[str, ...]:
    # Upstream ships ability objects ({"name", "desc"}); plain strings are accepted too.
    value = payload.get("abilities")
    if not isinstance(value, list):
        raise DexDecodeError("Game data is missing the 'abilities' table")
    names: List[str] = []
    for index, entry in enumerate(value):
        if isinstance(entry, dict):
            name = entry.get("name")
        else:
            name = entry
        if not isinstance(name, str):
            raise DexDecodeError(f"Game data 'abilities[{index}]' has no name")
        names.append(name)
    return tuple(names)


def parse_game_data(payload: Any) -> CompactGameData:
    """Decode a raw snapshot payload into ``CompactGameData``.

    Raises ``DexDecodeError`` when a required list or table is missing.
    """
    if not isinstance(payload, dict):
        raise DexDecodeError("Game data payload is not a JSON object")

    tables = {field: _labels(payload, key) for key, field in _LABEL_TABLES}
    return CompactGameData(
        moves=_records(payload, "moves"),
        species=_records(payload, "species"),
        abilities=_ability_names(payload),
        **tables,
    )


def lookup_label(table: Sequence[str], index: Any, table_name: str, owner: str) -> str:
    """Resolve ``index`` in a label table or fail naming ``owner``."""
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(table):
        raise TranscodeError(
            f"FATAL: {owner} references {table_name} index {index!r} "
            f"outside the table (size {len(table)})"
        )
    return table[index]
