from __future__ import annotations

from functools import lru_cache

from .graph import RequirementGraph, build_graph
from .logic_items import ITEM_NODES, TREASURE_ATOMS
from .logic_kill import KILL_NODES

# "start" is the trick atom that every run holds from the beginning
START_ATOMS: frozenset[str] = frozenset({"start"})

INVENTORY_ATOMS: frozenset[str] = TREASURE_ATOMS | START_ATOMS

LOGIC_TABLES = [ITEM_NODES, KILL_NODES]


@lru_cache(maxsize=None)
def get_logic_graph() -> RequirementGraph:
    return build_graph(*LOGIC_TABLES, known_atoms=INVENTORY_ATOMS, strict=True)
