"""Learnset transforms.

Builds a species learnset (canonical move id -> learnset codes) from the four
acquisition lists of a raw compact species.

Code format: ``<gen prefix><method letter><level>``, e.g. ``7L16``. Only
level-up codes carry a level.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

from .errors import TranscodeError

# M = TM/HM, T = tutor, L = level-up, E = egg, D = Dream World,
# S = event, V = Virtual Console transfer, C = not a real source.
METHOD_LETTERS: Dict[str, str] = {
    "level-up": "L",
    "tm/hm": "M",
    "tutor": "T",
    "egg": "E",
    "dream-world": "D",
    "event": "S",
    "not-real": "C",
    "virtual-console": "V",
}


class Acquisition(NamedTuple):
    method: str
    raw_move_id: Any
    level: Optional[int] = None


def learnset_code(method: str, level: Optional[int], gen_prefix: str) -> str:
    """Format one learnset code."""
    letter = METHOD_LETTERS.get(method)
    if letter is None:
        raise TranscodeError(f"FATAL: Unknown acquisition method {method!r}")
    suffix = str(level) if level is not None else ""
    return f"{gen_prefix}{letter}{suffix}"


def _id_list(raw_species: Dict[str, Any], key: str) -> List[Any]:
    value = raw_species.get(key) or []
    if not isinstance(value, list):
        raise TranscodeError(
            f"FATAL: species {raw_species.get('name')!r} (id {raw_species.get('id')!r}) "
            f"has a malformed '{key}' list"
        )
    return value


def iter_acquisitions(raw_species: Dict[str, Any]) -> Iterable[Acquisition]:
    """Yield acquisitions in order: level-up, egg, tm/hm, tutor."""
    for entry in _id_list(raw_species, "levelUpMoves"):
        if isinstance(entry, dict):
            yield Acquisition("level-up", entry.get("id"), entry.get("lv"))
        else:
            yield Acquisition("level-up", None)
    for raw_id in _id_list(raw_species, "eggMoves"):
        yield Acquisition("egg", raw_id)
    for raw_id in _id_list(raw_species, "TMHMMoves"):
        yield Acquisition("tm/hm", raw_id)
    for raw_id in _id_list(raw_species, "tutor"):
        yield Acquisition("tutor", raw_id)


def build_learnset(
    *,
    raw_species: Dict[str, Any],
    move_lookup: Mapping[Any, str],
    gen_prefix: str,
    accumulate: bool = False,
) -> Dict[str, List[str]]:
    """Build the learnset map for one species.

    ``move_lookup`` maps raw move ids to canonical move ids and must already
    hold every move. When a move is reachable by several methods the last
    code wins, unless ``accumulate`` is set, in which case every distinct
    code is kept in first-seen order.
    """
    learnset: Dict[str, List[str]] = {}
    for acq in iter_acquisitions(raw_species):
        canonical = move_lookup.get(acq.raw_move_id)
        if canonical is None:
            raise TranscodeError(
                f"FATAL: Failed to find dex move referenced by id {acq.raw_move_id!r} "
                f"in species {raw_species.get('name')!r} (id {raw_species.get('id')!r})"
            )
        level = acq.level if acq.method == "level-up" else None
        code = learnset_code(acq.method, level, gen_prefix)

        if not accumulate:
            learnset[canonical] = [code]
            continue
        codes = learnset.setdefault(canonical, [])
        if code not in codes:
            codes.append(code)
    return learnset
