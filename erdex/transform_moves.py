"""Move transforms.

Converts one raw compact move into the battle engine's move record. Split and
target labels are closed vocabularies; an unknown label aborts the run.
Flag descriptors are decoded through ``FLAG_RULES``; unknown descriptors are
ignored.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, FrozenSet, NamedTuple, Tuple

from .errors import TranscodeError
from .gamedata import CompactGameData, lookup_label
from .naming import move_id

CATEGORY_BY_SPLIT: Dict[str, str] = {
    "PHYSICAL": "Physical",
    "SPECIAL": "Special",
    "STATUS": "Status",
}

TARGET_BY_LABEL: Dict[str, str] = {
    "SELECTED": "any",
    "BOTH": "allAdjacentFoes",
    "USER": "self",
    "RANDOM": "randomNormal",
    "FOES_AND_ALLY": "allAdjacent",
    # DEPENDS covers moves whose target is chosen by their own effect.
    "DEPENDS": "scripted",
    "ALL_BATTLERS": "all",
    "OPPONENTS_FIELD": "foeSide",
    "ALLY": "adjacentAlly",
}


class FlagRule(NamedTuple):
    """One descriptor -> field mapping.

    ``scope`` is ``"flags"`` for the nested flags object or ``"move"`` for a
    top-level move field. ``value`` receives the canonical move id. An
    ``inverted`` rule fires when the descriptor is absent.
    """

    descriptor: str
    scope: str
    field: str
    value: Callable[[str], Any]
    inverted: bool = False


def _flag(_move_id: str) -> int:
    return 1


FLAG_RULES: Tuple[FlagRule, ...] = (
    FlagRule("makes contact", "flags", "contact", _flag),
    # Engine reads breaksProtect off the move, so presence leaves protect unset.
    FlagRule("protect affected", "flags", "protect", _flag, inverted=True),
    FlagRule("high crit", "move", "critRatio", lambda _id: 2),
    FlagRule("always_crit", "move", "willCrit", lambda _id: True),
    FlagRule("sheer force boost", "move", "secondary", lambda _id: {}),
    FlagRule("two strikes", "move", "multihit", lambda _id: 2),
    FlagRule("reckless boost", "move", "recoil", lambda _id: [1, 3]),
    FlagRule("stat stages ignored", "move", "ignoreDefensive", lambda _id: True),
    FlagRule("target ability ignored", "move", "ignoreAbility", lambda _id: True),
    FlagRule("protection move", "move", "volatileStatus", lambda mid: mid),
    FlagRule("mirror move affected", "flags", "mirror", _flag),
    FlagRule("iron fist boost", "flags", "punch", _flag),
    FlagRule("keen edge boost", "flags", "slicing", _flag),
    FlagRule("snatch affected", "flags", "snatch", _flag),
    FlagRule("dance", "flags", "dance", _flag),
    FlagRule("field based", "flags", "field", _flag),
    FlagRule("magic coat affected", "flags", "reflectable", _flag),
    FlagRule("striker boost", "flags", "kick", _flag),
    FlagRule("strong jaw boost", "flags", "bite", _flag),
    FlagRule("sound", "flags", "sound", _flag),
    FlagRule("mega launcher boost", "flags", "pulse", _flag),
    FlagRule("ballistic", "flags", "bullet", _flag),
    FlagRule("weather based", "flags", "weather", _flag),
    FlagRule("powder", "flags", "powder", _flag),
    FlagRule("bone based", "flags", "bone", _flag),
    FlagRule("thaw user", "flags", "defrost", _flag),
    FlagRule("hits through substitute", "flags", "bypasssub", _flag),
)


def _move_label(raw_move: Dict[str, Any]) -> str:
    name = raw_move.get("name") or raw_move.get("NAME")
    return f"move {name!r} (id {raw_move.get('id')!r})"


def move_category(raw_move: Dict[str, Any], game_data: CompactGameData) -> str:
    owner = _move_label(raw_move)
    split = lookup_label(game_data.splits, raw_move.get("split"), "split", owner)
    category = CATEGORY_BY_SPLIT.get(split)
    if category is None:
        raise TranscodeError(f"FATAL: Unrecognized move split value {split!r} for {owner}")
    return category


def move_type(raw_move: Dict[str, Any], game_data: CompactGameData) -> str:
    """Resolve the move type.

    Only the first type index is used; the engine has no multi-typed moves.
    """
    owner = _move_label(raw_move)
    types = raw_move.get("types")
    if not isinstance(types, list) or not types:
        raise TranscodeError(f"FATAL: {owner} has no type indices")
    return lookup_label(game_data.types, types[0], "type", owner)


def move_target(raw_move: Dict[str, Any], game_data: CompactGameData) -> str:
    owner = _move_label(raw_move)
    target = lookup_label(game_data.targets, raw_move.get("target"), "target", owner)
    resolved = TARGET_BY_LABEL.get(target)
    if resolved is None:
        raise TranscodeError(f"FATAL: Cannot parse dex target flag from {target!r} for {owner}")
    return resolved


def move_descriptors(raw_move: Dict[str, Any], game_data: CompactGameData) -> FrozenSet[str]:
    """Resolve every flag index into a lowercased descriptor."""
    owner = _move_label(raw_move)
    flags = raw_move.get("flags") or []
    if not isinstance(flags, list):
        raise TranscodeError(f"FATAL: {owner} has a malformed flag list")
    return frozenset(
        lookup_label(game_data.flags, index, "flag", owner).lower() for index in flags
    )


def decode_flags(
    descriptors: FrozenSet[str], canonical_id: str
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Apply ``FLAG_RULES`` to a descriptor set.

    Returns ``(flags, fields)``: the nested flags object and the top-level
    move fields.
    """
    flags: Dict[str, Any] = {}
    fields: Dict[str, Any] = {}
    for rule in FLAG_RULES:
        present = rule.descriptor in descriptors
        if present == rule.inverted:
            continue
        target = flags if rule.scope == "flags" else fields
        target[rule.field] = rule.value(canonical_id)
    return flags, fields


def build_move(*, raw_move: Dict[str, Any], game_data: CompactGameData) -> Dict[str, Any]:
    """Build one move record from a raw compact move.

    Raises ``TranscodeError`` naming the move on any unresolvable field.
    """
    internal_name = raw_move.get("NAME")
    if not isinstance(internal_name, str) or not internal_name:
        raise TranscodeError(f"FATAL: {_move_label(raw_move)} has no internal NAME")

    canonical_id = move_id(internal_name)
    flags, fields = decode_flags(move_descriptors(raw_move, game_data), canonical_id)

    record: Dict[str, Any] = {
        "num": raw_move.get("id"),
        "name": raw_move.get("name"),
        "basePower": raw_move.get("pwr"),
        "accuracy": raw_move.get("acc"),
        "pp": raw_move.get("pp"),
        "category": move_category(raw_move, game_data),
        "type": move_type(raw_move, game_data),
        "priority": raw_move.get("prio"),
        "target": move_target(raw_move, game_data),
        "flags": flags,
        "breaksProtect": "protect" not in flags,
    }
    record.update(fields)
    return record
