"""Species transforms.

Converts one raw compact species into a pokedex record: types, ability slots,
base stats and egg groups. Weight is not present upstream and is emitted as 0.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .errors import TranscodeError
from .gamedata import CompactGameData, lookup_label
from .naming import ability_id, egg_group_id

STAT_KEYS = ("hp", "atk", "def", "spa", "spd", "spe")
ABILITY_SLOTS = ("0", "1", "H", "S")
INNATE_SLOTS = ("I1", "I2", "I3")


def _species_label(raw_species: Dict[str, Any]) -> str:
    return f"species {raw_species.get('name')!r} (id {raw_species.get('id')!r})"


def _stats_block(raw_species: Dict[str, Any]) -> Dict[str, Any]:
    stats = raw_species.get("stats")
    if not isinstance(stats, dict):
        raise TranscodeError(f"FATAL: {_species_label(raw_species)} has no stats block")
    return stats


def _index_list(raw_species: Dict[str, Any], key: str, max_len: int = 0) -> List[Any]:
    value = _stats_block(raw_species).get(key) or []
    if not isinstance(value, list):
        raise TranscodeError(
            f"FATAL: {_species_label(raw_species)} has a malformed '{key}' list"
        )
    if max_len and len(value) > max_len:
        raise TranscodeError(
            f"FATAL: {_species_label(raw_species)} lists {len(value)} '{key}' "
            f"entries (at most {max_len} allowed)"
        )
    return value


def species_types(raw_species: Dict[str, Any], game_data: CompactGameData) -> List[str]:
    owner = _species_label(raw_species)
    return [
        lookup_label(game_data.types, index, "type", owner)
        for index in _index_list(raw_species, "types")
    ]


def _fill_slots(
    slots: Dict[str, str],
    names: Sequence[str],
    indices: Sequence[Any],
    game_data: CompactGameData,
    owner: str,
) -> None:
    for slot, index in zip(names, indices):
        slots[slot] = ability_id(lookup_label(game_data.abilities, index, "ability", owner))


def species_abilities(
    raw_species: Dict[str, Any], game_data: CompactGameData
) -> Dict[str, str]:
    """Map general abilities to 0/1/H/S and innates to I1/I2/I3.

    Slots without an index are omitted.
    """
    owner = _species_label(raw_species)
    slots: Dict[str, str] = {}
    _fill_slots(
        slots,
        ABILITY_SLOTS,
        _index_list(raw_species, "abis", len(ABILITY_SLOTS)),
        game_data,
        owner,
    )
    _fill_slots(
        slots,
        INNATE_SLOTS,
        _index_list(raw_species, "inns", len(INNATE_SLOTS)),
        game_data,
        owner,
    )
    return slots


def species_base_stats(raw_species: Dict[str, Any]) -> Dict[str, int]:
    base = _stats_block(raw_species).get("base")
    if not isinstance(base, list) or len(base) != len(STAT_KEYS):
        count = len(base) if isinstance(base, list) else 0
        raise TranscodeError(
            f"FATAL: {_species_label(raw_species)} has {count} base stats "
            f"(expected {len(STAT_KEYS)})"
        )
    return dict(zip(STAT_KEYS, base))


def species_egg_groups(
    raw_species: Dict[str, Any], game_data: CompactGameData
) -> List[str]:
    owner = _species_label(raw_species)
    return [
        egg_group_id(lookup_label(game_data.egg_groups, index, "egg group", owner))
        for index in _index_list(raw_species, "eggG")
    ]


def build_species(
    *, raw_species: Dict[str, Any], game_data: CompactGameData
) -> Dict[str, Any]:
    """Build one pokedex record from a raw compact species."""
    name = raw_species.get("name")
    if not isinstance(name, str) or not name:
        raise TranscodeError(f"FATAL: {_species_label(raw_species)} has no name")

    return {
        "num": raw_species.get("id"),
        "name": name,
        "types": species_types(raw_species, game_data),
        "baseStats": species_base_stats(raw_species),
        "abilities": species_abilities(raw_species, game_data),
        "eggGroups": species_egg_groups(raw_species, game_data),
        "weightkg": 0,
    }
