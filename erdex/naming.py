"""Naming helpers.

Centralizes the canonical ids used as join keys across the move, learnset
and pokedex tables.
"""

from __future__ import annotations

import re

_MOVE_PREFIX = "MOVE_"
_EGG_GROUP_PREFIX = "EGG_GROUP_"
_NON_ID_RE = re.compile(r"[^a-z0-9]+")


def move_id(internal_name: str) -> str:
    """Convert an internal move constant to its canonical id.

    Rules:
    - Strip a leading ``MOVE_`` (any case)
    - Lowercase
    - Remove every underscore separator

    ``MOVE_SOLAR_BEAM`` -> ``solarbeam``
    """
    name = internal_name
    if name.upper().startswith(_MOVE_PREFIX):
        name = name[len(_MOVE_PREFIX):]
    return name.lower().replace("_", "")


def ability_id(display_name: str) -> str:
    """Lowercase an ability display name."""
    return display_name.lower()


def egg_group_id(label: str) -> str:
    """Convert an ``EGG_GROUP_*`` constant to a display egg group.

    ``EGG_GROUP_MONSTER`` -> ``Monster``
    """
    name = label
    if name.startswith(_EGG_GROUP_PREFIX):
        name = name[len(_EGG_GROUP_PREFIX):]
    name = name.lower()
    return name[:1].upper() + name[1:]


def species_id(display_name: str) -> str:
    """Lowercase a species name and drop everything but ``a-z0-9``."""
    return _NON_ID_RE.sub("", display_name.lower())
